"""
Main FastAPI application bootstrap.
Configures logging and middleware and includes routers.
"""
import logging

from fastapi import FastAPI

from cfn_cost.core.config import config
from cfn_cost.api.estimates import router as estimates_router
from cfn_cost.middleware.request_size_limiter import RequestSizeLimiterMiddleware
from cfn_cost.pricing.assumptions import ASSUMPTIONS_VERSION


logger = logging.getLogger(__name__)

# Validate configuration on startup
try:
    config.validate()
except ValueError as error:
    raise RuntimeError(f"Configuration error: {error}") from error

logging.basicConfig(level=config.LOG_LEVEL)
logger.info(
    "Pricing with default region=%s, usage assumptions version=%s",
    config.DEFAULT_REGION,
    ASSUMPTIONS_VERSION,
)


app = FastAPI(
    title="CloudFormation Cost Estimation",
    description="Monthly cost estimates and cost diffs for CloudFormation and CDK stacks",
)

app.add_middleware(RequestSizeLimiterMiddleware)

app.include_router(estimates_router)


@app.get("/health")
async def health() -> dict:
    """Liveness probe."""
    return {"status": "ok"}
