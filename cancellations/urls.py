from django.urls import path
from . import api, views

urlpatterns = [
    path("health/", api.health, name="health"),

    # Intake + record access
    path("cancellations/", api.cancellation_list, name="cancellation_list"),
    path("cancellations/<int:cancellation_id>/", api.cancellation_detail, name="cancellation_detail"),

    # Aggregates (JSON)
    path("stats/overview/", api.stats_overview, name="stats_overview"),
    path("stats/reasons/", api.stats_reasons, name="stats_reasons"),
    path("stats/closers/", api.stats_closers, name="stats_closers"),
    path("stats/campaigns/", api.stats_campaigns, name="stats_campaigns"),
    path("stats/saved-cases/", api.stats_saved_cases, name="stats_saved_cases"),
    path("stats/monthly-churn/", api.stats_monthly_churn, name="stats_monthly_churn"),
    path("metadata/options/", api.metadata_options, name="metadata_options"),

    # Exports
    path("exports/cancellations.csv", views.export_cancellations, name="export_cancellations"),
    path("exports/saved-cases.csv", views.export_saved_cases, name="export_saved_cases"),
    path("exports/monthly-report.pdf", views.export_monthly_report, name="export_monthly_report"),
]
