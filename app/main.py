from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .auth.auth import Unauthorised, unauthorised_handler
from .config import settings
from .routes.analyze import router as analyze_router
from .utils.logging import logger

app = FastAPI(
    title="Asguard Risk Engine",
    description="Transaction risk scoring with AI escalation",
    version="0.1.0",
    docs_url="/docs",          # Swagger UI
    redoc_url="/redoc",        # ReDoc
    openapi_url="/openapi.json",
)

app.include_router(analyze_router)
app.add_exception_handler(Unauthorised, unauthorised_handler)


@app.exception_handler(RequestValidationError)
async def invalid_payload(request: Request, exc: RequestValidationError):
    logger.info("Invalid payload on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "invalid request payload"})


@app.get("/health")
def health():
    return {"status": "asguard health running"}


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting asguard on port %s (env=%s)", settings.PORT, settings.ENV)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
