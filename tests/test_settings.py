import importlib

import churn_tracker.settings


def test_debug_is_off_unless_requested(monkeypatch):
    monkeypatch.delenv("DJANGO_DEBUG", raising=False)
    assert importlib.reload(churn_tracker.settings).DEBUG is False

    monkeypatch.setenv("DJANGO_DEBUG", "true")
    assert importlib.reload(churn_tracker.settings).DEBUG is True

    monkeypatch.delenv("DJANGO_DEBUG")
    importlib.reload(churn_tracker.settings)
