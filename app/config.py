from __future__ import annotations

import math
from dataclasses import dataclass

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class RuleWeights:
    """Per-rule weights; they must add up to 1.0 so the score reads as a percentage."""
    amount: float = 0.35
    currency: float = 0.20
    device: float = 0.15
    ip: float = 0.15
    location: float = 0.15

    def __post_init__(self):
        for name, w in self.as_dict().items():
            if not 0.0 <= w <= 1.0:
                raise ValueError(f"weight {name}={w} is outside [0, 1]")
        total = self.total()
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"rule weights must sum to 1.0, got {total}")

    def as_dict(self) -> dict[str, float]:
        return {
            "amount": self.amount,
            "currency": self.currency,
            "device": self.device,
            "ip": self.ip,
            "location": self.location,
        }

    def total(self) -> float:
        return sum(self.as_dict().values())


@dataclass(frozen=True)
class RiskPolicy:
    home_currency: str = "NGN"
    weights: RuleWeights = RuleWeights()
    medium_threshold: int = 40
    high_threshold: int = 70
    advisory_threshold: int = 40


class Settings(BaseSettings):
    ASGUARD_API_KEY: SecretStr
    GROQ_API_KEY: SecretStr

    GROQ_URL: str = "https://api.groq.com/openai/v1/chat/completions"
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    ADVISORY_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    HOME_CURRENCY: str = "NGN"
    WEIGHT_AMOUNT: float = 0.35
    WEIGHT_CURRENCY: float = 0.20
    WEIGHT_DEVICE: float = 0.15
    WEIGHT_IP: float = 0.15
    WEIGHT_LOCATION: float = 0.15

    MEDIUM_THRESHOLD: int = Field(default=40, ge=0, le=100)
    HIGH_THRESHOLD: int = Field(default=70, ge=0, le=100)
    ADVISORY_THRESHOLD: int = Field(default=40, ge=0, le=100)

    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    ENV: str = "dev"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("ASGUARD_API_KEY", "GROQ_API_KEY")
    @classmethod
    def _not_blank(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("credential must not be empty")
        return v

    @field_validator("HOME_CURRENCY")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def _check_policy(self):
        if self.MEDIUM_THRESHOLD >= self.HIGH_THRESHOLD:
            raise ValueError("MEDIUM_THRESHOLD must be below HIGH_THRESHOLD")
        # raises if the weights don't add up
        self.rule_weights()
        return self

    def rule_weights(self) -> RuleWeights:
        return RuleWeights(
            amount=self.WEIGHT_AMOUNT,
            currency=self.WEIGHT_CURRENCY,
            device=self.WEIGHT_DEVICE,
            ip=self.WEIGHT_IP,
            location=self.WEIGHT_LOCATION,
        )

    def risk_policy(self) -> RiskPolicy:
        return RiskPolicy(
            home_currency=self.HOME_CURRENCY,
            weights=self.rule_weights(),
            medium_threshold=self.MEDIUM_THRESHOLD,
            high_threshold=self.HIGH_THRESHOLD,
            advisory_threshold=self.ADVISORY_THRESHOLD,
        )


settings = Settings()
