"""Shared fixtures for finpath-core tests."""

from datetime import datetime, timezone

import pytest

from finpath_core.models import Profile
from finpath_core.normalizer import normalize_profile


@pytest.fixture
def s1_raw() -> dict:
    """Moderate 32-year-old saving for retirement, as a browser form sends it."""
    return {
        "age": 32,
        "income": 85000,
        "riskTolerance": "Moderate",
        "investmentGoal": "Retirement",
        "timeHorizon": "30 years",
        "currentSavings": 45000,
        "monthlyExpenses": 4200,
        "hasEmergencyFund": False,
        "has401k": True,
        "employerMatch": 0.05,
    }


@pytest.fixture
def s1_profile(s1_raw: dict) -> Profile:
    return normalize_profile(s1_raw)


@pytest.fixture
def make_profile(s1_raw: dict):
    """Build a Profile from the S1 defaults with selected fields replaced."""

    def _make(**overrides) -> Profile:
        return normalize_profile({**s1_raw, **overrides})

    return _make


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def demo_accounts() -> list[dict]:
    return [
        {"type": "checking", "balance": 1250.75, "name": "Primary Checking"},
        {"type": "savings", "balance": 8420.50, "name": "Savings Account"},
        {"type": "credit", "balance": -1249.75, "name": "Freedom Unlimited"},
    ]
