from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


# ----------------------------
# Risk levels (ordered)
# ----------------------------
class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]

    def raised_to(self, floor: "RiskLevel") -> "RiskLevel":
        """Return whichever of self/floor is higher. Never lowers."""
        return floor if floor.rank > self.rank else self


_LEVEL_RANK = {RiskLevel.LOW: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


class RecommendedAction(str, Enum):
    APPROVE = "APPROVE"
    REVIEW = "REVIEW"
    BLOCK = "BLOCK"


# ----------------------------
# Transaction input
# ----------------------------
@dataclass(frozen=True)
class TransactionRecord:
    """
    One transaction as handed to the engine.

    Optional string fields (ip_address, device_id, location, sim_id, timestamp)
    use the empty string to mean "absent". No other sentinel is recognised;
    use `is_absent` instead of testing for "" in each rule.
    """
    user_id: str
    transaction_id: str
    amount: float
    currency: str
    ip_address: str = ""
    device_id: str = ""
    location: str = ""
    sim_id: str = ""
    timestamp: str = ""

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("amount must be non-negative")

    @staticmethod
    def is_absent(value: str) -> bool:
        return value == ""


# ----------------------------
# Engine output
# ----------------------------
@dataclass(frozen=True)
class RiskVerdict:
    score: int
    level: RiskLevel
    reasons: Tuple[str, ...] = field(default_factory=tuple)
    advisory_triggered: bool = False
    # populated only when the advisory was consulted and answered
    advisory_confidence: float = 0.0
    advisory_fraud_probability: float = 0.0
    advisory_action: str = ""
    advisory_summary: str = ""
