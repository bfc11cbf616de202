# scoring.py
from __future__ import annotations

from typing import List

from app.config import RiskPolicy
from app.models import RecommendedAction, RiskLevel, RiskVerdict, TransactionRecord
from app.rules.ruleset import risk_level_for, score_transaction
from app.services.advisory import Advisor, AdvisoryError, AdvisoryOpinion
from app.utils.logging import logger

ADVISORY_UNAVAILABLE_REASON = "AI advisory unavailable; escalated to HIGH as a precaution"

# level floor each advisory action imposes; APPROVE imposes none
ACTION_FLOOR = {
    RecommendedAction.BLOCK: RiskLevel.HIGH,
    RecommendedAction.REVIEW: RiskLevel.MEDIUM,
    RecommendedAction.APPROVE: RiskLevel.LOW,
}


def advisory_reason(opinion: AdvisoryOpinion) -> str:
    action = opinion.recommended_action
    if action is RecommendedAction.APPROVE:
        return f"AI advisory recommends APPROVE (rule level kept): {opinion.reasoning}"
    return f"AI advisory recommends {action.value}: {opinion.reasoning}"


class RiskEngine:
    """
    Rule score first, then an optional advisory second opinion.

    The rule level is the floor: an advisory answer can only raise it, and any
    advisory failure forces HIGH.
    """

    def __init__(self, policy: RiskPolicy, advisor: Advisor):
        self.policy = policy
        self.advisor = advisor

    def should_consult(self, score: int) -> bool:
        return score >= self.policy.advisory_threshold

    def evaluate(self, tx: TransactionRecord) -> RiskVerdict:
        score, reasons = score_transaction(tx, self.policy)
        level = risk_level_for(score, self.policy)
        logger.info("Tx %s rule score %s (%s)", tx.transaction_id, score, level.value)

        if not self.should_consult(score):
            return RiskVerdict(score=score, level=level, reasons=tuple(reasons))

        try:
            opinion = self.advisor.consult(tx, score)
        except AdvisoryError as e:
            logger.warning("Advisory failed for tx %s, failing safe to HIGH: %s", tx.transaction_id, e)
            return RiskVerdict(
                score=score,
                level=RiskLevel.HIGH,
                reasons=tuple(reasons + [ADVISORY_UNAVAILABLE_REASON]),
                advisory_triggered=True,
            )

        return self._merge(tx, score, level, reasons, opinion)

    def _merge(
        self,
        tx: TransactionRecord,
        score: int,
        level: RiskLevel,
        reasons: List[str],
        opinion: AdvisoryOpinion,
    ) -> RiskVerdict:
        final = level.raised_to(ACTION_FLOOR[opinion.recommended_action])
        if final is not level:
            logger.info("Tx %s escalated %s -> %s by advisory %s",
                        tx.transaction_id, level.value, final.value, opinion.recommended_action.value)
        return RiskVerdict(
            score=score,
            level=final,
            reasons=tuple(reasons + [advisory_reason(opinion)]),
            advisory_triggered=True,
            advisory_confidence=opinion.confidence,
            advisory_fraud_probability=opinion.fraud_probability,
            advisory_action=opinion.recommended_action.value,
            advisory_summary=opinion.reasoning,
        )
