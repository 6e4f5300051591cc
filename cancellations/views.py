import logging

from django.db import DatabaseError
from django.http import HttpResponse, JsonResponse

from cancellations.aggregation import build_summary
from cancellations.api import filtered_cancellations
from cancellations.filters import InvalidFilter
from cancellations.insights import generate_insights
from cancellations.reporting import build_monthly_report, cancellations_csv, saved_cases_csv
from cancellations.utils import cancellation_to_dict

# --- Logging setup ---
logger = logging.getLogger(__name__)

EXPORT_PREFIX = "churn"


def _attachment(content, content_type, filename):
    response = HttpResponse(content, content_type=content_type)
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response


def _export_rows(request, saved_only=False):
    queryset = filtered_cancellations(request.GET)
    if saved_only:
        queryset = queryset.filter(saved_flag=True)
    return [cancellation_to_dict(row) for row in queryset.order_by("-cancellation_date", "-id")]


def export_cancellations(request):
    """All cancellation records as CSV (204 when there is nothing to export)."""
    try:
        rows = _export_rows(request)
    except InvalidFilter as e:
        return JsonResponse({"error": str(e)}, status=400)
    except DatabaseError:
        logger.exception("Failed to load cancellations for export")
        return JsonResponse({"error": "Failed to build export."}, status=500)

    if not rows:
        return HttpResponse(status=204)

    logger.info(f"Exporting {len(rows)} cancellations to CSV")
    return _attachment(cancellations_csv(rows), "text/csv", f"{EXPORT_PREFIX}-cancellations.csv")


def export_saved_cases(request):
    """Saved cancellations only, as CSV."""
    try:
        rows = _export_rows(request, saved_only=True)
    except InvalidFilter as e:
        return JsonResponse({"error": str(e)}, status=400)
    except DatabaseError:
        logger.exception("Failed to load cancellations for export")
        return JsonResponse({"error": "Failed to build export."}, status=500)

    if not rows:
        return HttpResponse(status=204)

    logger.info(f"Exporting {len(rows)} saved cases to CSV")
    return _attachment(saved_cases_csv(rows), "text/csv", f"{EXPORT_PREFIX}-saved-cases.csv")


def export_monthly_report(request):
    """PDF combining KPIs, reason breakdown, closer performance and insights."""
    try:
        summary = build_summary(filtered_cancellations(request.GET))
    except InvalidFilter as e:
        return JsonResponse({"error": str(e)}, status=400)
    except DatabaseError:
        logger.exception("Failed to load cancellations for export")
        return JsonResponse({"error": "Failed to build export."}, status=500)

    pdf = build_monthly_report(summary, generate_insights(summary))
    return _attachment(pdf, "application/pdf", f"{EXPORT_PREFIX}-monthly-report.pdf")
