from pydantic import BaseModel, Field, field_validator
from typing import List

from .models import RiskVerdict, TransactionRecord


class TransactionRequest(BaseModel):
    user_id: str = Field(min_length=1)
    transaction_id: str = Field(min_length=1)
    amount: float = Field(ge=0)
    currency: str = Field(min_length=1)
    # keys are required but may be empty: "" means unknown
    ip_address: str
    device_id: str
    location: str = ""
    sim_id: str = ""
    timestamp: str = ""

    @field_validator("currency")
    @classmethod
    def _normalize_currency(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("currency must not be blank")
        return v

    def to_record(self) -> TransactionRecord:
        return TransactionRecord(
            user_id=self.user_id,
            transaction_id=self.transaction_id,
            amount=self.amount,
            currency=self.currency,
            ip_address=self.ip_address,
            device_id=self.device_id,
            location=self.location,
            sim_id=self.sim_id,
            timestamp=self.timestamp,
        )


class AnalyzeResponse(BaseModel):
    transaction_id: str
    risk_score: int
    risk_level: str
    reasons: List[str]
    ai_triggered: bool
    ai_confidence: float
    ai_fraud_probability: float
    ai_recommended_action: str
    ai_summary: str
    message: str = "Transaction received successfully"

    @classmethod
    def from_verdict(cls, transaction_id: str, v: RiskVerdict) -> "AnalyzeResponse":
        return cls(
            transaction_id=transaction_id,
            risk_score=v.score,
            risk_level=v.level.value,
            reasons=list(v.reasons),
            ai_triggered=v.advisory_triggered,
            ai_confidence=v.advisory_confidence,
            ai_fraud_probability=v.advisory_fraud_probability,
            ai_recommended_action=v.advisory_action,
            ai_summary=v.advisory_summary,
        )
