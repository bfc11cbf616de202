# tests/test_rules.py
import pytest

from app.models import RiskLevel
from app.rules.ruleset import amount_risk, risk_level_for, score_transaction
from conftest import make_tx


def test_clean_home_transaction_scores_zero(policy):
    score, reasons = score_transaction(make_tx(), policy)
    assert score == 0
    assert reasons == []


@pytest.mark.parametrize("amount,risk", [
    (0, 0.0),
    (50_000, 0.0),
    (50_000.01, 0.3),
    (100_000, 0.3),
    (100_001, 0.6),
    (500_000, 0.6),
    (500_001, 1.0),
    (10_000_000, 1.0),
])
def test_amount_tiers(amount, risk):
    assert amount_risk(amount)[0] == risk


def test_amount_risk_is_monotonic():
    amounts = [0, 25_000, 50_000, 75_000, 100_000, 250_000, 500_000, 750_000]
    risks = [amount_risk(a)[0] for a in amounts]
    assert risks == sorted(risks)


def test_amount_matches_single_tier(policy):
    score, reasons = score_transaction(make_tx(amount=600_000), policy)
    assert score == 35
    assert reasons == ["Very high transaction amount (over 500,000)"]


def test_foreign_currency_with_high_amount_scores_41(policy):
    score, reasons = score_transaction(make_tx(amount=250_000, currency="USD"), policy)
    assert score == 41
    assert reasons == ["High transaction amount (over 100,000)", "Foreign currency (USD)"]
    assert risk_level_for(score, policy) is RiskLevel.MEDIUM


def test_missing_fields_alone_cross_medium(policy):
    tx = make_tx(amount=0, ip_address="", device_id="", location="")
    score, reasons = score_transaction(tx, policy)
    assert score == 45
    assert reasons == ["Missing device ID", "Missing IP address", "Missing location"]
    assert risk_level_for(score, policy) is RiskLevel.MEDIUM


def test_everything_risky_scores_100(policy):
    tx = make_tx(amount=900_000, currency="GBP", ip_address="", device_id="", location="")
    score, reasons = score_transaction(tx, policy)
    assert score == 100
    assert reasons[0].startswith("Very high transaction amount")
    assert reasons[1:] == ["Foreign currency (GBP)", "Missing device ID",
                           "Missing IP address", "Missing location"]


def test_score_is_truncated_not_rounded(policy):
    # 0.3 * 0.35 = 10.5 points -> 10
    score, _ = score_transaction(make_tx(amount=60_000), policy)
    assert score == 10


@pytest.mark.parametrize("score,level", [
    (0, RiskLevel.LOW),
    (39, RiskLevel.LOW),
    (40, RiskLevel.MEDIUM),
    (69, RiskLevel.MEDIUM),
    (70, RiskLevel.HIGH),
    (100, RiskLevel.HIGH),
])
def test_level_thresholds(policy, score, level):
    assert risk_level_for(score, policy) is level


def test_scoring_is_deterministic(policy):
    tx = make_tx(amount=120_000, currency="EUR", location="")
    assert score_transaction(tx, policy) == score_transaction(tx, policy)
