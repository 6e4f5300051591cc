# cancellations/api.py
import functools
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from cancellations.aggregation import build_summary, monthly_churn, reason_breakdown
from cancellations.config import AGENT_TYPES, CLOSER_ROSTER, PLANS, REASON_PRESETS
from cancellations.filters import InvalidFilter, filter_cancellations
from cancellations.insights import generate_insights
from cancellations.models import Cancellation
from cancellations.serializers import CancellationIntakeSerializer, CancellationPatchSerializer
from cancellations.utils import cancellation_to_dict
from customers.models import Customer

logger = logging.getLogger(__name__)

REQUIRED_INTAKE_FIELDS = ("customer_id", "cancellation_date", "primary_reason")


def filtered_cancellations(params):
    queryset = Cancellation.objects.select_related("customer")
    return filter_cancellations(queryset, params)


def handles_query_errors(view):
    """Map InvalidFilter to a 400 and datastore failures on reads to a 500."""
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except InvalidFilter as e:
            logger.warning(f"Rejected filter parameters: {e}")
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            logger.exception(f"Query failed in {view.__name__}")
            return Response(
                {"error": "Failed to load churn data."},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
    return wrapper


def _validation_error(message, errors=None):
    body = {"error": message}
    if errors:
        body["details"] = errors
    return Response(body, status=status.HTTP_400_BAD_REQUEST)


@api_view(["GET"])
def health(request):
    return Response({"status": "ok"})


@api_view(["GET", "POST"])
@handles_query_errors
def cancellation_list(request):
    if request.method == "POST":
        return _create_cancellation(request)

    rows = filtered_cancellations(request.query_params).order_by("-cancellation_date", "-id")
    return Response([cancellation_to_dict(row) for row in rows])


def _create_cancellation(request):
    data = request.data
    missing = [name for name in REQUIRED_INTAKE_FIELDS if data.get(name) in (None, "")]
    if missing or not str(data.get("primary_reason")).strip():
        logger.warning(f"Intake rejected, missing fields: {missing or ['primary_reason']}")
        return _validation_error("customer_id, cancellation_date, and primary_reason are required.")

    serializer = CancellationIntakeSerializer(data=data)
    if not serializer.is_valid():
        logger.warning(f"Intake rejected: {serializer.errors}")
        return _validation_error("Invalid cancellation payload.", serializer.errors)

    fields = dict(serializer.validated_data)
    customer = Customer.objects.filter(id=fields.pop("customer_id")).first()
    if customer is None:
        return Response({"error": "Customer not found."}, status=status.HTTP_404_NOT_FOUND)

    try:
        cancellation = Cancellation.objects.create(customer=customer, **fields)
    except DatabaseError:
        logger.exception("Failed to create cancellation")
        return Response(
            {"error": "Failed to create cancellation record."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(
        f"Cancellation #{cancellation.id} captured for customer {customer.id} "
        f"({cancellation.primary_reason}, saved={cancellation.saved_flag})"
    )
    created = Cancellation.objects.select_related("customer").get(pk=cancellation.pk)
    return Response(cancellation_to_dict(created), status=status.HTTP_201_CREATED)


@api_view(["GET", "PATCH"])
def cancellation_detail(request, cancellation_id):
    cancellation = Cancellation.objects.select_related("customer").filter(pk=cancellation_id).first()
    if cancellation is None:
        return Response({"error": "Cancellation not found"}, status=status.HTTP_404_NOT_FOUND)

    if request.method == "GET":
        return Response(cancellation_to_dict(cancellation))

    serializer = CancellationPatchSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        logger.warning(f"Update of cancellation #{cancellation_id} rejected: {serializer.errors}")
        return _validation_error("Invalid cancellation update.", serializer.errors)
    if not serializer.validated_data:
        return _validation_error("No editable fields supplied.")

    for name, value in serializer.validated_data.items():
        setattr(cancellation, name, value)

    try:
        cancellation.save()
    except DatabaseError:
        logger.exception(f"Failed to update cancellation #{cancellation_id}")
        return Response(
            {"error": "Failed to update cancellation record."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(f"Cancellation #{cancellation_id} updated: {sorted(serializer.validated_data)}")
    updated = Cancellation.objects.select_related("customer").get(pk=cancellation_id)
    return Response(cancellation_to_dict(updated))


@api_view(["GET"])
@handles_query_errors
def stats_overview(request):
    summary = build_summary(filtered_cancellations(request.query_params))
    return Response({
        "totals": summary.totals_dict(),
        "insights": generate_insights(summary),
    })


@api_view(["GET"])
@handles_query_errors
def stats_reasons(request):
    return Response(reason_breakdown(filtered_cancellations(request.query_params)))


@api_view(["GET"])
@handles_query_errors
def stats_closers(request):
    summary = build_summary(filtered_cancellations(request.query_params))
    return Response([closer.to_dict() for closer in summary.closers])


@api_view(["GET"])
@handles_query_errors
def stats_campaigns(request):
    summary = build_summary(filtered_cancellations(request.query_params))
    return Response([campaign.to_dict() for campaign in summary.campaigns])


@api_view(["GET"])
@handles_query_errors
def stats_saved_cases(request):
    rows = filtered_cancellations(request.query_params).filter(saved_flag=True).order_by("-cancellation_date", "-id")
    return Response([cancellation_to_dict(row) for row in rows])


@api_view(["GET"])
@handles_query_errors
def stats_monthly_churn(request):
    return Response(monthly_churn(filtered_cancellations(request.query_params)))


def _distinct(queryset, field):
    values = queryset.exclude(**{f"{field}__isnull": True}).exclude(**{field: ""})
    return list(values.order_by(field).values_list(field, flat=True).distinct())


@api_view(["GET"])
def metadata_options(request):
    observed_agent_types = _distinct(Customer.objects.all(), "agent_type")
    return Response({
        "closers": list(CLOSER_ROSTER),
        "segments": _distinct(Customer.objects.all(), "segment"),
        "reasons": _distinct(Cancellation.objects.all(), "primary_reason"),
        "reasonPresets": list(REASON_PRESETS),
        "campaigns": _distinct(Customer.objects.all(), "source_campaign"),
        "agentTypes": list(AGENT_TYPES) + [t for t in observed_agent_types if t not in AGENT_TYPES],
        "plans": list(PLANS),
    })
