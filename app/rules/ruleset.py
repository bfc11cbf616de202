# app/rules/ruleset.py
import math
from typing import List, Tuple

from app.config import RiskPolicy
from app.models import RiskLevel, TransactionRecord

# (threshold, risk, reason), checked highest first; amount must be strictly greater
AMOUNT_TIERS: Tuple[Tuple[float, float, str], ...] = (
    (500_000, 1.0, "Very high transaction amount (over 500,000)"),
    (100_000, 0.6, "High transaction amount (over 100,000)"),
    (50_000, 0.3, "Elevated transaction amount (over 50,000)"),
)


def amount_risk(amount: float) -> Tuple[float, str | None]:
    for threshold, risk, why in AMOUNT_TIERS:
        if amount > threshold:
            return risk, why
    return 0.0, None


def currency_risk(currency: str, home_currency: str) -> Tuple[float, str | None]:
    if currency != home_currency:
        return 1.0, f"Foreign currency ({currency})"
    return 0.0, None


def missing_field_risk(value: str, label: str) -> Tuple[float, str | None]:
    if TransactionRecord.is_absent(value):
        return 1.0, f"Missing {label}"
    return 0.0, None


def score_transaction(tx: TransactionRecord, policy: RiskPolicy) -> Tuple[int, List[str]]:
    """Return (rule score 0..100, reasons) for a transaction. Pure, no I/O."""
    w = policy.weights
    rules = (
        (amount_risk(tx.amount), w.amount),
        (currency_risk(tx.currency, policy.home_currency), w.currency),
        (missing_field_risk(tx.device_id, "device ID"), w.device),
        (missing_field_risk(tx.ip_address, "IP address"), w.ip),
        (missing_field_risk(tx.location, "location"), w.location),
    )

    total = 0.0
    reasons: List[str] = []
    for (risk, why), weight in rules:
        if risk > 0:
            total += risk * weight
            reasons.append(why)

    # truncate, after dropping float noise (0.15 * 3 * 100 == 44.999...)
    score = math.floor(round(total * 100, 6))
    return max(0, min(100, score)), reasons


def risk_level_for(score: int, policy: RiskPolicy) -> RiskLevel:
    if score >= policy.high_threshold:
        return RiskLevel.HIGH
    if score >= policy.medium_threshold:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
