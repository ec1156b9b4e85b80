from fastapi import Depends, FastAPI, Request
from contextlib import asynccontextmanager
from loguru import logger
import uuid
from app.core.config import settings
from app.core.exceptions import AppException, app_exception_handler
from app.core.logging import setup_logging
from app.api.endpoints import router as api_router
from app.api.dependencies import get_http_client, get_rate_limiter
from app.models.api import HealthResponse
from app.services.rate_limiter import RateLimiter, utc_now

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
    logger.info("🚀 Application startup")
    if not settings.summary_api_keys:
        logger.warning(
            f"No API keys configured for {settings.SUMMARY_LLM_PROVIDER.value}; "
            "summarization requests will fail until keys are set"
        )
    yield
    if get_http_client.cache_info().currsize:
        await get_http_client().aclose()
    logger.info("🛑 Application shutdown")

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
app.add_exception_handler(AppException, app_exception_handler)

@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = str(uuid.uuid4())
    with logger.contextualize(request_id=request_id):
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

app.include_router(api_router, prefix="/api/v1")

@app.get("/health", response_model=HealthResponse)
async def health_check(rate_limiter: RateLimiter = Depends(get_rate_limiter)):
    return HealthResponse(
        status="ok",
        project=settings.PROJECT_NAME,
        timestamp=utc_now(),
        rate_limiting=rate_limiter.snapshot(),
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
