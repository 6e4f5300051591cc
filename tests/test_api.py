from datetime import date

import pytest
from django.db import DatabaseError

from cancellations.config import AGENT_TYPES, CLOSER_ROSTER, PLANS
from cancellations.insights import NO_DATA_MESSAGE
from cancellations.models import Cancellation
from customers.models import Customer

pytestmark = pytest.mark.django_db


def intake_payload(customer, **overrides):
    payload = {
        "customer_id": customer.id,
        "cancellation_date": "2025-01-05",
        "primary_reason": "PRICE",
        "secondary_notes": "Budget cuts",
        "usage_downloads": 3,
        "usage_posts": 1,
        "usage_logins": 9,
        "usage_minutes": 120,
        "closer_name": "Ava Liang",
        "saved_flag": False,
        "churn_amount": "199.00",
        "agent_plan": "Premium Monthly",
    }
    payload.update(overrides)
    return payload


def test_health(api_client):
    response = api_client.get("/api/health/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# --- customers ---

def test_create_and_list_customers(api_client):
    created = api_client.post(
        "/api/customers/",
        {"name": "  Zoe Park ", "email": "Zoe@Example.com", "segment": "Solo Agent",
         "subscription_start_date": "2024-12-01", "source_campaign": "Referral Program"},
        format="json",
    )
    api_client.post("/api/customers/", {"name": "Adam Fox", "email": "adam@example.com"}, format="json")

    assert created.status_code == 201
    body = created.json()
    assert body["name"] == "Zoe Park"
    assert body["email"] == "zoe@example.com"
    assert body["subscription_start_date"] == "2024-12-01"

    listing = api_client.get("/api/customers/").json()
    assert [c["name"] for c in listing] == ["Adam Fox", "Zoe Park"]


def test_duplicate_customer_email_is_rejected(api_client, make_customer):
    make_customer(email="taken@example.com")

    response = api_client.post("/api/customers/", {"name": "Copy", "email": "taken@example.com"}, format="json")

    assert response.status_code == 400
    assert "email" in response.json()["details"]


def test_duplicate_email_differing_only_in_case_is_rejected(api_client, make_customer):
    make_customer(email="taken@example.com")

    response = api_client.post("/api/customers/", {"name": "Copy", "email": "Taken@Example.com"}, format="json")

    assert response.status_code == 400
    assert "email" in response.json()["details"]
    assert Customer.objects.filter(email__iexact="taken@example.com").count() == 1


def test_customer_requires_name_and_email(api_client):
    response = api_client.post("/api/customers/", {"name": ""}, format="json")
    assert response.status_code == 400
    assert response.json()["error"]


# --- intake ---

@pytest.mark.parametrize("missing", ["customer_id", "cancellation_date", "primary_reason"])
def test_intake_requires_core_fields(api_client, make_customer, missing):
    payload = intake_payload(make_customer())
    del payload[missing]

    response = api_client.post("/api/cancellations/", payload, format="json")

    assert response.status_code == 400
    assert "required" in response.json()["error"]
    assert Cancellation.objects.count() == 0


def test_intake_rejects_blank_reason(api_client, make_customer):
    payload = intake_payload(make_customer(), primary_reason="   ")
    response = api_client.post("/api/cancellations/", payload, format="json")
    assert response.status_code == 400


def test_intake_rejects_unknown_customer(api_client, make_customer):
    payload = intake_payload(make_customer())
    payload["customer_id"] = 9999

    response = api_client.post("/api/cancellations/", payload, format="json")

    assert response.status_code == 404
    assert response.json() == {"error": "Customer not found."}


def test_intake_rejects_malformed_values(api_client, make_customer):
    payload = intake_payload(make_customer(), cancellation_date="05/01/2025", usage_logins=-1)

    response = api_client.post("/api/cancellations/", payload, format="json")

    assert response.status_code == 400
    details = response.json()["details"]
    assert "cancellation_date" in details
    assert "usage_logins" in details


def test_intake_round_trip_keeps_canonical_reason_and_tenure(api_client, make_customer):
    customer = make_customer(subscription_start_date=date(2024, 12, 31))

    created = api_client.post("/api/cancellations/", intake_payload(customer), format="json")

    assert created.status_code == 201
    record = created.json()
    assert record["primary_reason"] == "Pricing objection"
    assert record["days_on_platform"] == 5
    assert record["customer_name"] == customer.name
    assert record["churn_amount"] == 199.0

    fetched = api_client.get(f"/api/cancellations/{record['id']}/").json()
    assert fetched["primary_reason"] == record["primary_reason"]
    assert fetched["days_on_platform"] == record["days_on_platform"]
    assert fetched == record


def test_intake_without_subscription_start_has_no_tenure(api_client, make_customer):
    customer = make_customer(subscription_start_date=None)
    record = api_client.post("/api/cancellations/", intake_payload(customer), format="json").json()
    assert record["days_on_platform"] is None


def test_save_details_dropped_when_not_saved(api_client, make_customer):
    payload = intake_payload(
        make_customer(), saved_flag=False, saved_by="Ava Liang", save_reason="Discount", save_notes="n/a"
    )

    record = api_client.post("/api/cancellations/", payload, format="json").json()

    assert record["saved_flag"] is False
    assert record["saved_by"] is None
    assert record["save_reason"] is None
    assert record["save_notes"] is None


def test_save_details_kept_when_saved(api_client, make_customer):
    payload = intake_payload(
        make_customer(), saved_flag=True, saved_by="Priya Shah", save_reason="Extended onboarding",
        saved_revenue="89.50",
    )

    record = api_client.post("/api/cancellations/", payload, format="json").json()

    assert record["saved_flag"] is True
    assert record["saved_by"] == "Priya Shah"
    assert record["save_reason"] == "Extended onboarding"
    assert record["saved_revenue"] == 89.5


def test_get_missing_cancellation(api_client):
    assert api_client.get("/api/cancellations/404/").status_code == 404


# --- updates ---

def test_patch_toggles_saved_and_disputed(api_client, make_cancellation):
    cancellation = make_cancellation()

    response = api_client.patch(
        f"/api/cancellations/{cancellation.id}/",
        {"saved_flag": True, "saved_by": "Hannah Cho", "funds_disputed": True},
        format="json",
    )

    assert response.status_code == 200
    body = response.json()
    assert body["saved_flag"] is True
    assert body["saved_by"] == "Hannah Cho"
    assert body["funds_disputed"] is True
    # untouched fields survive a partial patch
    assert body["primary_reason"] == "Pricing objection"
    assert body["usage_downloads"] == 0


def test_patch_unsaving_clears_save_details(api_client, make_cancellation):
    cancellation = make_cancellation(saved_flag=True, saved_by="Ava Liang", save_notes="Offered discount")

    body = api_client.patch(
        f"/api/cancellations/{cancellation.id}/", {"saved_flag": False}, format="json"
    ).json()

    assert body["saved_flag"] is False
    assert body["saved_by"] is None
    assert body["save_notes"] is None


def test_patch_recomputes_tenure_and_normalizes_reason(api_client, make_customer, make_cancellation):
    cancellation = make_cancellation(make_customer(subscription_start_date=date(2025, 1, 1)))

    body = api_client.patch(
        f"/api/cancellations/{cancellation.id}/",
        {"cancellation_date": "2025-01-04", "primary_reason": "too busy"},
        format="json",
    ).json()

    assert body["days_on_platform"] == 3
    assert body["primary_reason"] == "No time to focus"


def test_patch_rejects_empty_or_invalid_updates(api_client, make_cancellation):
    cancellation = make_cancellation()
    url = f"/api/cancellations/{cancellation.id}/"

    assert api_client.patch(url, {}, format="json").status_code == 400
    assert api_client.patch(url, {"usage_posts": "many"}, format="json").status_code == 400
    assert api_client.patch(url, {"primary_reason": ""}, format="json").status_code == 400


def test_patch_missing_cancellation(api_client):
    response = api_client.patch("/api/cancellations/404/", {"funds_disputed": True}, format="json")
    assert response.status_code == 404


# --- listing and filters ---

@pytest.fixture
def filter_book(make_customer, make_cancellation):
    lena = make_customer(name="Lena Hu", email="lena@example.com", segment="Luxury Realtor")
    omar = make_customer(name="Omar Diaz", email="omar@example.com", segment="Team Lead")
    make_cancellation(lena, cancellation_date=date(2025, 1, 10), primary_reason="content",
                      closer_name="Ava Liang", saved_flag=True, saved_by="Ava Liang")
    make_cancellation(omar, cancellation_date=date(2025, 2, 10), primary_reason="price",
                      closer_name="Marcus Lee")
    make_cancellation(omar, cancellation_date=date(2025, 3, 10), primary_reason="competitor",
                      closer_name="Marcus Lee")


def _reasons(response):
    return [row["primary_reason"] for row in response.json()]


def test_list_is_newest_first(api_client, filter_book):
    response = api_client.get("/api/cancellations/")
    assert _reasons(response) == ["Switched to competitor", "Pricing objection", "Content not relevant"]


@pytest.mark.parametrize(
    "params, expected",
    [
        ({"saved": "true"}, ["Content not relevant"]),
        ({"saved": "false"}, ["Switched to competitor", "Pricing objection"]),
        ({"saved": "all"}, ["Switched to competitor", "Pricing objection", "Content not relevant"]),
        ({"reason": "PRICE"}, ["Pricing objection"]),
        ({"closer": "Ava Liang"}, ["Content not relevant"]),
        ({"segment": "Team Lead"}, ["Switched to competitor", "Pricing objection"]),
        ({"startDate": "2025-02-10", "endDate": "2025-02-10"}, ["Pricing objection"]),
        ({"query": "LENA"}, ["Content not relevant"]),
        ({"query": "omar@"}, ["Switched to competitor", "Pricing objection"]),
        ({"query": "marcus"}, ["Switched to competitor", "Pricing objection"]),
        ({"query": "competitor"}, ["Switched to competitor"]),
    ],
)
def test_list_filters(api_client, filter_book, params, expected):
    assert _reasons(api_client.get("/api/cancellations/", params)) == expected


def test_invalid_filter_date_is_a_client_error(api_client, filter_book):
    response = api_client.get("/api/cancellations/", {"startDate": "yesterday"})
    assert response.status_code == 400
    assert "startDate" in response.json()["error"]

    assert api_client.get("/api/stats/overview/", {"endDate": "2025-13-01"}).status_code == 400


def test_filter_date_with_trailing_text_is_a_client_error(api_client, filter_book):
    response = api_client.get("/api/cancellations/", {"startDate": "2025-01-01garbage"})
    assert response.status_code == 400


def test_stats_read_failure_is_a_server_error(api_client, monkeypatch):
    def broken(queryset):
        raise DatabaseError("disk I/O error")

    monkeypatch.setattr("cancellations.api.build_summary", broken)

    response = api_client.get("/api/stats/overview/")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to load churn data."}


# --- stats ---

def test_overview_without_data(api_client):
    body = api_client.get("/api/stats/overview/").json()

    assert body["totals"]["totalCancellations"] == 0
    assert body["totals"]["saveRate"] == 0
    assert body["insights"] == [NO_DATA_MESSAGE]


def test_overview_with_data(api_client, filter_book):
    body = api_client.get("/api/stats/overview/").json()

    totals = body["totals"]
    assert totals["totalCancellations"] == 3
    assert totals["totalSaved"] == 1
    assert totals["saveRate"] == pytest.approx(1 / 3)
    assert len(totals["topReasons"]) == 3
    assert body["insights"]
    assert NO_DATA_MESSAGE not in body["insights"]


def test_overview_honours_filters(api_client, filter_book):
    totals = api_client.get("/api/stats/overview/", {"closer": "Marcus Lee"}).json()["totals"]
    assert totals["totalCancellations"] == 2
    assert totals["totalSaved"] == 0


def test_closer_stats_endpoint(api_client, filter_book):
    closers = api_client.get("/api/stats/closers/").json()

    assert [c["name"] for c in closers] == list(CLOSER_ROSTER)
    marcus = next(c for c in closers if c["name"] == "Marcus Lee")
    assert marcus == {"name": "Marcus Lee", "saves": 0, "cancellations": 2, "total": 2, "saveRate": 0.0}


def test_campaign_stats_endpoint(api_client, filter_book):
    campaigns = api_client.get("/api/stats/campaigns/").json()
    assert campaigns == [
        {"campaign": "Paid Ads - Meta", "customers": 2, "cancellations": 3, "churnRate": 1.5},
    ]


def test_reasons_endpoint(api_client, filter_book):
    body = api_client.get("/api/stats/reasons/").json()
    assert {"label": "Pricing objection", "value": 1} in body["overall"]
    assert set(body["bySegment"]) == {"Luxury Realtor", "Team Lead"}


def test_saved_cases_endpoint(api_client, filter_book):
    rows = api_client.get("/api/stats/saved-cases/").json()
    assert [row["customer_name"] for row in rows] == ["Lena Hu"]


def test_monthly_churn_endpoint(api_client, filter_book):
    assert api_client.get("/api/stats/monthly-churn/").json() == [
        {"month": "2025-01", "value": 1},
        {"month": "2025-02", "value": 1},
        {"month": "2025-03", "value": 1},
    ]


def test_metadata_options(api_client, filter_book):
    Customer.objects.create(name="Mia", email="mia@example.com", agent_type="Property Manager")

    body = api_client.get("/api/metadata/options/").json()

    assert body["closers"] == list(CLOSER_ROSTER)
    assert body["segments"] == ["Luxury Realtor", "Team Lead"]
    assert body["reasons"] == ["Content not relevant", "Pricing objection", "Switched to competitor"]
    assert body["campaigns"] == ["Paid Ads - Meta"]
    assert body["agentTypes"] == list(AGENT_TYPES) + ["Property Manager"]
    assert body["plans"] == list(PLANS)
