from django.db.models import Q

from cancellations.utils import normalize_reason, to_date


class InvalidFilter(ValueError):
    """Raised when a filter parameter cannot be interpreted."""


def _date_param(params, name):
    raw = params.get(name)
    if not raw:
        return None
    value = to_date(raw)
    if value is None:
        raise InvalidFilter(f"{name} must be a valid YYYY-MM-DD date, got {raw!r}.")
    return value


def filter_cancellations(queryset, params):
    """Narrow a cancellation queryset by dashboard query parameters.

    Supported keys: startDate, endDate (inclusive), closer, segment, reason
    (normalized before matching), saved ("true"/"false") and query, a
    case-insensitive search over customer name/email, reason and closer.
    """
    start = _date_param(params, "startDate")
    end = _date_param(params, "endDate")

    if start:
        queryset = queryset.filter(cancellation_date__gte=start)
    if end:
        queryset = queryset.filter(cancellation_date__lte=end)

    if params.get("closer"):
        queryset = queryset.filter(closer_name=params["closer"])

    if params.get("segment"):
        queryset = queryset.filter(customer__segment=params["segment"])

    if params.get("reason"):
        queryset = queryset.filter(primary_reason=normalize_reason(params["reason"]))

    saved = (params.get("saved") or "").lower()
    if saved == "true":
        queryset = queryset.filter(saved_flag=True)
    elif saved == "false":
        queryset = queryset.filter(saved_flag=False)

    term = (params.get("query") or "").strip()
    if term:
        queryset = queryset.filter(
            Q(customer__name__icontains=term)
            | Q(customer__email__icontains=term)
            | Q(primary_reason__icontains=term)
            | Q(closer_name__icontains=term)
        )

    return queryset
