"""Rule-based churn insights.

generate_insights() turns a ChurnSummary into a list of plain-English
observations. Rules run in a fixed order and each one either adds its
message(s) or stays silent:

1. No cancellations at all: a single "no data" message, nothing else.
2. Top reason share: content-strategy message when the leader is
   "Content not relevant" above 25%, otherwise a generic driver message
   above 20%.
3. Early churn (tenure <= 7 days) above 40% of all cancellations.
4. One coaching message per closer more than 15 points under the mean save
   rate of closers who took at least one call.
5. The campaign with the highest churn rate, if above 20%.
6. Overall save rate under 20%.
7. A "balanced" message when none of the above fired.
"""

import logging

from cancellations.aggregation import rank_reasons
from cancellations.config import CONTENT_NOT_RELEVANT
from cancellations.utils import format_percent

logger = logging.getLogger(__name__)

CONTENT_SHARE_THRESHOLD = 0.25
DRIVER_SHARE_THRESHOLD = 0.2
EARLY_CHURN_THRESHOLD = 0.4
COACHING_GAP = 0.15
CAMPAIGN_CHURN_THRESHOLD = 0.2
LOW_SAVE_RATE_THRESHOLD = 0.2

NO_DATA_MESSAGE = "No churn data yet. Keep capturing cancellation calls to unlock insights."
BALANCED_MESSAGE = "Churn mix looks balanced. Continue monitoring weekly to catch new trends early."


def _reason_insight(summary):
    ranked = rank_reasons(summary.reason_counts)
    if not ranked:
        return None
    top_reason, count = ranked[0]
    share = count / summary.total
    if top_reason == CONTENT_NOT_RELEVANT and share > CONTENT_SHARE_THRESHOLD:
        return (
            f'Content strategy misalignment: {format_percent(share)} of churn cites "{CONTENT_NOT_RELEVANT}". '
            "Partner with marketing to refresh content packs for that segment."
        )
    if share > DRIVER_SHARE_THRESHOLD:
        return (
            f'Primary churn driver: {format_percent(share)} of lost accounts cite "{top_reason}". '
            "Prioritize fixes and enablement materials around this reason."
        )
    return None


def _early_churn_insight(summary):
    rate = summary.early_churn_rate
    if rate > EARLY_CHURN_THRESHOLD:
        return (
            f"Onboarding gap: {format_percent(rate)} of churn happens within the first week. "
            "Tighten welcome journeys, customer success touchpoints, and in-app walkthroughs."
        )
    return None


def team_save_rate(closers):
    """Mean save rate over closers with at least one call (0 when none did)."""
    active = [closer for closer in closers if closer.total > 0]
    if not active:
        return 0.0
    return sum(closer.save_rate for closer in active) / len(active)


def _coaching_insights(summary):
    average = team_save_rate(summary.closers)
    messages = []
    for closer in summary.closers:
        if closer.total > 0 and closer.save_rate + COACHING_GAP < average:
            messages.append(
                f"Closer coaching: {closer.name} is saving {format_percent(closer.save_rate)} of calls "
                f"vs the team average {format_percent(average)}. Schedule a shadow + refresher."
            )
    return messages


def _campaign_insight(summary):
    candidates = [campaign for campaign in summary.campaigns if campaign.churn_rate > 0]
    if not candidates:
        return None
    # max() keeps the first campaign on ties
    highest = max(candidates, key=lambda campaign: campaign.churn_rate)
    if highest.churn_rate > CAMPAIGN_CHURN_THRESHOLD:
        return (
            f"Campaign quality check: {highest.campaign} is driving {format_percent(highest.churn_rate)} "
            "churn of its cohort. Review targeting, messaging, and follow-up journeys."
        )
    return None


def _save_rate_insight(summary):
    if summary.save_rate < LOW_SAVE_RATE_THRESHOLD:
        return (
            f"Retention program opportunity: overall save rate is {format_percent(summary.save_rate)}. "
            "Consider refreshed offers or enablement assets."
        )
    return None


def generate_insights(summary):
    if not summary.total:
        return [NO_DATA_MESSAGE]

    insights = []
    for message in (_reason_insight(summary), _early_churn_insight(summary)):
        if message:
            insights.append(message)
    insights.extend(_coaching_insights(summary))
    for message in (_campaign_insight(summary), _save_rate_insight(summary)):
        if message:
            insights.append(message)

    if not insights:
        insights.append(BALANCED_MESSAGE)

    logger.debug(f"Generated {len(insights)} insights for {summary.total} cancellations")
    return insights
