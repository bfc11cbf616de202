# app/services/advisory.py
from __future__ import annotations

import re
from typing import Any, Dict, List, Protocol

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.config import Settings
from app.models import RecommendedAction, TransactionRecord
from app.utils.logging import logger


# -----------------------------
# Errors
# -----------------------------
class AdvisoryError(Exception):
    """The advisory opinion could not be obtained or trusted."""


class AdvisoryTransportError(AdvisoryError):
    pass


class AdvisoryTimeoutError(AdvisoryError):
    pass


class AdvisorySchemaError(AdvisoryError):
    pass


# -----------------------------
# Contract
# -----------------------------
class AdvisoryOpinion(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    fraud_probability: float = Field(ge=0.0, le=1.0, strict=True)
    recommended_action: RecommendedAction
    reasoning: str = Field(strict=True)
    confidence: float = Field(ge=0.0, le=1.0, strict=True)


class Advisor(Protocol):
    def consult(self, tx: TransactionRecord, baseline_score: int) -> AdvisoryOpinion:
        ...


# -----------------------------
# Prompt
# -----------------------------
SYSTEM_PROMPT = """You are a financial fraud detection AI for a Nigerian fintech platform.
Your job is to assess whether a transaction is fraudulent based on the data provided.
You MUST respond with ONLY a valid JSON object, no markdown, no explanation outside the JSON.
The JSON must follow this exact schema:
{
  "fraud_probability": <float between 0.0 and 1.0>,
  "recommended_action": <"APPROVE" | "REVIEW" | "BLOCK">,
  "reasoning": <one concise sentence explaining your decision>,
  "confidence": <float between 0.0 and 1.0>
}"""

USER_PROMPT = """Assess this transaction for fraud risk:

Transaction ID : {transaction_id}
Amount         : {amount:.2f} {currency}
Location       : {location}
Device ID      : {device_id}
IP Address     : {ip_address}
Baseline Score : {baseline_score}/100 (rule-based engine score, higher = riskier)

Respond with JSON only."""


def build_messages(tx: TransactionRecord, baseline_score: int) -> List[Dict[str, str]]:
    """Fixed role/schema instruction first, then the per-transaction data."""
    user = USER_PROMPT.format(
        transaction_id=tx.transaction_id,
        amount=tx.amount,
        currency=tx.currency,
        location=tx.location,
        device_id=tx.device_id,
        ip_address=tx.ip_address,
        baseline_score=baseline_score,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]


_OPEN_FENCE = re.compile(r"^```[\w+.-]*")


def strip_code_fences(text: str) -> str:
    s = text.strip()
    # opening fence plus any language tag (json, JSON, javascript, json5...)
    s = _OPEN_FENCE.sub("", s, count=1)
    if s.endswith("```"):
        s = s[:-len("```")]
    return s.strip()


def parse_opinion(content: str) -> AdvisoryOpinion:
    raw = strip_code_fences(content or "")
    if not raw:
        raise AdvisorySchemaError("advisory returned empty content")
    try:
        return AdvisoryOpinion.model_validate_json(raw)
    except ValidationError as e:
        raise AdvisorySchemaError(f"advisory returned invalid opinion ({raw[:200]!r}): {e}") from e


def _extract_content(data: Any) -> str:
    if not isinstance(data, dict):
        raise AdvisorySchemaError("advisory response is not a JSON object")
    err = data.get("error")
    if err:
        msg = err.get("message") if isinstance(err, dict) else err
        raise AdvisoryTransportError(f"advisory API error: {msg}")
    choices = data.get("choices") or []
    if not choices:
        raise AdvisorySchemaError("advisory returned no choices")
    try:
        content = choices[0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise AdvisorySchemaError("advisory choice has no message content") from e
    if not isinstance(content, str) or not content.strip():
        raise AdvisorySchemaError("advisory returned empty content")
    return content


# -----------------------------
# Groq client
# -----------------------------
class GroqAdvisoryClient:
    """Chat-completions client; one POST per consultation, no retries."""

    temperature = 0.1
    max_tokens = 256

    def __init__(self, api_key: str, url: str, model: str, timeout: float):
        self._api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout

    @classmethod
    def from_settings(cls, s: Settings) -> "GroqAdvisoryClient":
        return cls(
            api_key=s.GROQ_API_KEY.get_secret_value(),
            url=s.GROQ_URL,
            model=s.GROQ_MODEL,
            timeout=s.ADVISORY_TIMEOUT_SECONDS,
        )

    def build_payload(self, tx: TransactionRecord, baseline_score: int) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": build_messages(tx, baseline_score),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def consult(self, tx: TransactionRecord, baseline_score: int) -> AdvisoryOpinion:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        try:
            r = requests.post(
                self.url,
                headers=headers,
                json=self.build_payload(tx, baseline_score),
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise AdvisoryTimeoutError(f"advisory timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise AdvisoryTransportError(f"advisory request failed: {e}") from e

        try:
            data = r.json()
        except ValueError:
            data = None

        if not 200 <= r.status_code < 300:
            detail = (r.text or "")[:500]
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                detail = data["error"].get("message") or detail
            raise AdvisoryTransportError(f"advisory HTTP {r.status_code}: {detail}")
        if data is None:
            raise AdvisorySchemaError(f"advisory response is not JSON: {(r.text or '')[:200]!r}")

        opinion = parse_opinion(_extract_content(data))
        logger.info(
            "Advisory for tx %s: action=%s probability=%.2f confidence=%.2f",
            tx.transaction_id, opinion.recommended_action.value,
            opinion.fraud_probability, opinion.confidence,
        )
        return opinion
