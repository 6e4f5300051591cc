#!/usr/bin/env python3
"""
Create the Django admin account used to browse customers and cancellations.

Credentials come from CHURN_ADMIN_USERNAME / CHURN_ADMIN_EMAIL /
CHURN_ADMIN_PASSWORD. Nothing happens when a superuser already exists.
"""

import os
import sys
from pathlib import Path

import django

BASE_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BASE_DIR))
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "churn_tracker.settings")
django.setup()

from django.contrib.auth import get_user_model
from django.db import DatabaseError


def ensure_admin():
    User = get_user_model()
    if User.objects.filter(is_superuser=True).exists():
        print("✅ Admin account already exists")
        return True

    username = os.getenv("CHURN_ADMIN_USERNAME", "admin")
    email = os.getenv("CHURN_ADMIN_EMAIL", "admin@example.com")
    password = os.getenv("CHURN_ADMIN_PASSWORD")
    if not password:
        print("❌ CHURN_ADMIN_PASSWORD is not set; refusing to create an admin with a default password")
        return False

    try:
        User.objects.create_superuser(username=username, email=email, password=password)
    except DatabaseError as e:
        print(f"❌ Failed to create admin account: {e}")
        print("   Did you run `python manage.py migrate` first?")
        return False

    print(f"✅ Admin account '{username}' created")
    return True


if __name__ == "__main__":
    sys.exit(0 if ensure_admin() else 1)
