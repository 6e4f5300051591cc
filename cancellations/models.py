from django.db import models
from customers.models import Customer

from cancellations.utils import days_on_platform, normalize_reason

SAVE_DETAIL_FIELDS = ("saved_by", "save_reason", "save_notes")


class Cancellation(models.Model):
    customer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name="cancellations")
    cancellation_date = models.DateField(db_index=True)
    primary_reason = models.CharField(max_length=255, db_index=True)
    secondary_notes = models.TextField(null=True, blank=True)

    usage_downloads = models.IntegerField(default=0)
    usage_posts = models.IntegerField(default=0)
    usage_logins = models.IntegerField(default=0)
    usage_minutes = models.IntegerField(default=0)

    # derived on save from the customer's subscription start
    days_on_platform = models.IntegerField(null=True, blank=True, editable=False)

    closer_name = models.CharField(max_length=100, null=True, blank=True)
    saved_flag = models.BooleanField(default=False)
    saved_by = models.CharField(max_length=100, null=True, blank=True)
    save_reason = models.CharField(max_length=255, null=True, blank=True)
    save_notes = models.TextField(null=True, blank=True)

    ticket_url = models.URLField(max_length=500, null=True, blank=True)
    churn_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    saved_revenue = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    agent_plan = models.CharField(max_length=100, null=True, blank=True)
    funds_disputed = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-cancellation_date", "-id"]

    def save(self, *args, **kwargs):
        self.primary_reason = normalize_reason(self.primary_reason)
        self.days_on_platform = days_on_platform(
            self.customer.subscription_start_date, self.cancellation_date
        )
        if not self.saved_flag:
            for field in SAVE_DETAIL_FIELDS:
                setattr(self, field, None)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.customer_id} - {self.primary_reason} @ {self.cancellation_date}"
