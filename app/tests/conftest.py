import os

# settings are loaded at import time; seed the required credentials first
os.environ.setdefault("ASGUARD_API_KEY", "test-api-key")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")

import pytest

from app.config import RiskPolicy
from app.models import TransactionRecord
from app.services.advisory import AdvisoryOpinion, AdvisoryTransportError


class FakeAdvisor:
    """Returns a canned opinion (or raises a canned error) and records calls."""

    def __init__(self, opinion=None, error=None):
        self.opinion = opinion
        self.error = error
        self.calls = []

    def consult(self, tx, baseline_score):
        self.calls.append((tx, baseline_score))
        if self.error is not None:
            raise self.error
        return self.opinion


def opinion(action, reasoning="Pattern looks consistent with account history.",
            probability=0.2, confidence=0.9):
    return AdvisoryOpinion(
        fraud_probability=probability,
        recommended_action=action,
        reasoning=reasoning,
        confidence=confidence,
    )


def make_tx(**overrides):
    data = dict(
        user_id="u-1",
        transaction_id="tx-1",
        amount=1_000.0,
        currency="NGN",
        ip_address="102.89.1.10",
        device_id="dev-abc",
        location="Lagos",
    )
    data.update(overrides)
    return TransactionRecord(**data)


@pytest.fixture
def policy():
    return RiskPolicy()


@pytest.fixture
def failing_advisor():
    return FakeAdvisor(error=AdvisoryTransportError("connection refused"))
