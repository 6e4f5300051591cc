from django.db import models


class Customer(models.Model):
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    segment = models.CharField(max_length=100, null=True, blank=True)
    agent_type = models.CharField(max_length=100, null=True, blank=True)
    subscription_start_date = models.DateField(null=True, blank=True)
    source_campaign = models.CharField(max_length=255, null=True, blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} <{self.email}>"
