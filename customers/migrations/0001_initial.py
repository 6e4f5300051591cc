from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("segment", models.CharField(blank=True, max_length=100, null=True)),
                ("agent_type", models.CharField(blank=True, max_length=100, null=True)),
                ("subscription_start_date", models.DateField(blank=True, null=True)),
                ("source_campaign", models.CharField(blank=True, max_length=255, null=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
    ]
