"""Static domain data shared by intake, aggregation and the metadata endpoint.

Everything here is immutable and loaded once at import time.
"""

from types import MappingProxyType

CLOSER_ROSTER = (
    "Ava Liang",
    "Diego Morales",
    "Priya Shah",
    "Marcus Lee",
    "Hannah Cho",
    "Noah Patel",
)

FALLBACK_REASON = "Other"
CONTENT_NOT_RELEVANT = "Content not relevant"

# Keys are lowercase; lookups go through normalize_reason().
REASON_ALIASES = MappingProxyType({
    "content": CONTENT_NOT_RELEVANT,
    "content not relevant": CONTENT_NOT_RELEVANT,
    "content irrelevant": CONTENT_NOT_RELEVANT,
    "not enough content": CONTENT_NOT_RELEVANT,
    "not getting results": "Not getting results",
    "no results": "Not getting results",
    "lead quality": "Lead quality concerns",
    "too expensive": "Pricing objection",
    "price": "Pricing objection",
    "price too high": "Pricing objection",
    "no time": "No time to focus",
    "too busy": "No time to focus",
    "switched platforms": "Switched to competitor",
    "competitor": "Switched to competitor",
    "other": FALLBACK_REASON,
})

REASON_PRESETS = (
    CONTENT_NOT_RELEVANT,
    "Not getting results",
    "Pricing objection",
    "Lead quality concerns",
    "No time to focus",
    "Switched to competitor",
)

AGENT_TYPES = (
    "Realtor",
    "Mortgage Broker",
    "Insurance Advisor",
    "Financial Advisor",
)

PLANS = (
    "Basic Monthly",
    "Basic Yearly",
    "Premium Monthly",
    "Premium 6 Month",
    "Premium Yearly",
    "Platinum 6 Month",
    "Platinum Yearly",
    "Diamond 6 Month",
    "Diamond Yearly",
)

UNKNOWN_LABEL = "Unknown"

TOP_REASONS_LIMIT = 3
EARLY_CHURN_DAYS = 7
