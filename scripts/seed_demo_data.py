# scripts/seed_demo_data.py
"""
Populate the database with demo customers and cancellation calls.

Customers that already exist (by email) are left alone, so the script can be
re-run safely. Set SEED_CANCELLATIONS to control how many random calls are
generated on top of the fixed demo cases.
"""
import os
import random
import sys
from datetime import date, timedelta
from pathlib import Path

import django

# --- Set up Django environment ---
BASE_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_DIR))
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "churn_tracker.settings")
django.setup()

from cancellations.config import AGENT_TYPES, CLOSER_ROSTER, PLANS, REASON_PRESETS
from cancellations.models import Cancellation
from customers.models import Customer

DEMO_CUSTOMERS = [
    ("Lena Hu", "lena.hu@example.com", "Luxury Realtor", "2024-10-15", "YouTube Masterclass"),
    ("Carlos Mendes", "carlos.mendes@example.com", "First-time Realtor", "2024-11-20", "Paid Ads - Meta"),
    ("Jasmine Ogun", "jasmine.ogun@example.com", "Team Lead", "2024-09-05", "Referral Program"),
    ("Noah Park", "noah.park@example.com", "Commercial Realtor", "2024-08-18", "Events - Inman"),
    ("Sara Bell", "sara.bell@example.com", "Solo Agent", "2024-12-01", "Blog CTA"),
]

DEMO_CASES = [
    (0, "2025-01-03", "Content not relevant", "Needs more luxury listings", "Ava Liang", None),
    (1, "2025-01-12", "no results", "No leads from ads after 3 weeks", "Diego Morales",
     ("Priya Shah", "Extended onboarding", "Scheduled weekly accountability check-in")),
    (2, "2025-02-02", "price too high", "Considering a cheaper design tool", "Marcus Lee", None),
    (3, "2025-02-10", "competitor", "Broker mandated new platform", "Hannah Cho", None),
    (4, "2025-02-18", "content", "Wants hyper-local scripts", "Noah Patel",
     ("Noah Patel", "Customized content pack", "Provided starter kit")),
]


def seed_customers():
    customers = []
    for name, email, segment, start, campaign in DEMO_CUSTOMERS:
        customer, created = Customer.objects.get_or_create(
            email=email,
            defaults={
                "name": name,
                "segment": segment,
                "agent_type": AGENT_TYPES[0],
                "subscription_start_date": date.fromisoformat(start),
                "source_campaign": campaign,
            },
        )
        if created:
            print(f"🆕 Created customer {email}")
        customers.append(customer)
    return customers


def seed_cancellations(customers, extra, rng):
    if Cancellation.objects.exists():
        print("✅ Cancellations already present, skipping")
        return 0

    for index, cancelled_on, reason, notes, closer, save in DEMO_CASES:
        saved_by, save_reason, save_notes = save or (None, None, None)
        Cancellation.objects.create(
            customer=customers[index],
            cancellation_date=date.fromisoformat(cancelled_on),
            primary_reason=reason,
            secondary_notes=notes,
            closer_name=closer,
            saved_flag=save is not None,
            saved_by=saved_by,
            save_reason=save_reason,
            save_notes=save_notes,
            agent_plan=PLANS[index % len(PLANS)],
        )

    for _ in range(extra):
        customer = rng.choice(customers)
        start = customer.subscription_start_date or date(2024, 1, 1)
        saved = rng.random() < 0.3
        closer = rng.choice(CLOSER_ROSTER)
        Cancellation.objects.create(
            customer=customer,
            cancellation_date=start + timedelta(days=rng.randint(0, 240)),
            primary_reason=rng.choice(REASON_PRESETS),
            usage_downloads=rng.randint(0, 10),
            usage_posts=rng.randint(0, 6),
            usage_logins=rng.randint(0, 20),
            usage_minutes=rng.randint(0, 300),
            closer_name=closer,
            saved_flag=saved,
            saved_by=closer if saved else None,
            save_reason="Discount offer" if saved else None,
            churn_amount=round(rng.uniform(29, 499), 2),
            saved_revenue=round(rng.uniform(29, 499), 2) if saved else None,
            agent_plan=rng.choice(PLANS),
        )

    return len(DEMO_CASES) + extra


if __name__ == "__main__":
    rng = random.Random(int(os.getenv("SEED_RANDOM", "42")))
    customers = seed_customers()
    created = seed_cancellations(customers, int(os.getenv("SEED_CANCELLATIONS", "40")), rng)
    print(f"✅ Demo data ready ({created} cancellations created)")
