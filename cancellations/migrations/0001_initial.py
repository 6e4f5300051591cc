import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Cancellation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("cancellation_date", models.DateField(db_index=True)),
                ("primary_reason", models.CharField(db_index=True, max_length=255)),
                ("secondary_notes", models.TextField(blank=True, null=True)),
                ("usage_downloads", models.IntegerField(default=0)),
                ("usage_posts", models.IntegerField(default=0)),
                ("usage_logins", models.IntegerField(default=0)),
                ("usage_minutes", models.IntegerField(default=0)),
                ("days_on_platform", models.IntegerField(blank=True, editable=False, null=True)),
                ("closer_name", models.CharField(blank=True, max_length=100, null=True)),
                ("saved_flag", models.BooleanField(default=False)),
                ("saved_by", models.CharField(blank=True, max_length=100, null=True)),
                ("save_reason", models.CharField(blank=True, max_length=255, null=True)),
                ("save_notes", models.TextField(blank=True, null=True)),
                ("ticket_url", models.URLField(blank=True, max_length=500, null=True)),
                ("churn_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("saved_revenue", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("agent_plan", models.CharField(blank=True, max_length=100, null=True)),
                ("funds_disputed", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cancellations",
                        to="customers.customer",
                    ),
                ),
            ],
            options={
                "ordering": ["-cancellation_date", "-id"],
            },
        ),
    ]
