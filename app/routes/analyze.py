from functools import lru_cache

from fastapi import APIRouter, Depends

from ..auth.auth import require_api_key
from ..config import settings
from ..schemas import AnalyzeResponse, TransactionRequest
from ..services.advisory import GroqAdvisoryClient
from ..services.scoring import RiskEngine


router = APIRouter(tags=["analyze"], dependencies=[Depends(require_api_key)])


@lru_cache(maxsize=1)
def get_engine() -> RiskEngine:
    return RiskEngine(settings.risk_policy(), GroqAdvisoryClient.from_settings(settings))


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(payload: TransactionRequest, engine: RiskEngine = Depends(get_engine)):
    verdict = engine.evaluate(payload.to_record())
    return AnalyzeResponse.from_verdict(payload.transaction_id, verdict)


@router.get("/secure-test")
def secure_test():
    return {"message": "API key valid"}
