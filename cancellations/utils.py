from datetime import date, datetime

from django.utils.dateparse import parse_date, parse_datetime

from cancellations.config import FALLBACK_REASON, REASON_ALIASES


def normalize_reason(raw_reason=None):
    """Map free-text reason input to its canonical label.

    Known aliases resolve case-insensitively; anything else keeps its trimmed
    original spelling, and empty input falls back to "Other".
    """
    cleaned = str(raw_reason or "").strip()
    if not cleaned:
        return FALLBACK_REASON
    return REASON_ALIASES.get(cleaned.lower(), cleaned)


def to_date(value):
    """Coerce a date, datetime or ISO string to a date (None when invalid)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        parsed = parse_date(text)
        if parsed is None:
            # full ISO timestamps are accepted, trailing junk is not
            moment = parse_datetime(text)
            parsed = moment.date() if moment else None
    except ValueError:
        # well formed but impossible, e.g. 2025-02-30
        return None
    return parsed


def days_on_platform(subscription_start, cancellation_date):
    start = to_date(subscription_start)
    end = to_date(cancellation_date)
    if start is None or end is None:
        return None
    return max((end - start).days, 0)


def _iso(value):
    return value.isoformat() if value is not None else None


def _money(value):
    return float(value) if value is not None else None


def cancellation_to_dict(cancellation):
    """Flatten a cancellation and its customer into one JSON-ready row."""
    customer = cancellation.customer
    return {
        "id": cancellation.id,
        "customer_id": customer.id,
        "customer_name": customer.name,
        "email": customer.email,
        "segment": customer.segment,
        "agent_type": customer.agent_type,
        "subscription_start_date": _iso(customer.subscription_start_date),
        "source_campaign": customer.source_campaign,
        "cancellation_date": _iso(to_date(cancellation.cancellation_date)),
        "primary_reason": cancellation.primary_reason,
        "secondary_notes": cancellation.secondary_notes,
        "usage_downloads": cancellation.usage_downloads,
        "usage_posts": cancellation.usage_posts,
        "usage_logins": cancellation.usage_logins,
        "usage_minutes": cancellation.usage_minutes,
        "days_on_platform": cancellation.days_on_platform,
        "closer_name": cancellation.closer_name,
        "saved_flag": bool(cancellation.saved_flag),
        "saved_by": cancellation.saved_by,
        "save_reason": cancellation.save_reason,
        "save_notes": cancellation.save_notes,
        "ticket_url": cancellation.ticket_url,
        "churn_amount": _money(cancellation.churn_amount),
        "agent_plan": cancellation.agent_plan,
        "saved_revenue": _money(cancellation.saved_revenue),
        "funds_disputed": bool(cancellation.funds_disputed),
    }


def format_percent(value):
    return f"{value * 100:.1f}%"
