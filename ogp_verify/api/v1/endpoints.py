# ogp_verify/api/v1/endpoints.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from ogp_verify.services.ogp import OGPService
from ogp_verify.services.rate_limiter import RateLimiter
from ogp_verify.core.errors import OGPFetchError
from ogp_verify.core.models import VerificationRequest, VerificationResponse
from ogp_verify.core.config import config

logger = logging.getLogger(__name__)

router = APIRouter(prefix=config.API_PREFIX, tags=["v1"])

ogp_service = OGPService()
rate_limiter = RateLimiter()


def client_key(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(request: Request) -> None:
    if not rate_limiter.allow(client_key(request)):
        raise HTTPException(status_code=429, detail="Rate limit exceeded")


@router.post(
    "/ogp/verify",
    response_model=VerificationResponse,
    dependencies=[Depends(enforce_rate_limit)],
)
async def verify_ogp(request: VerificationRequest) -> VerificationResponse:
    """
    Fetch the page at the given URL and report on its OGP metadata:
    raw tags, validation verdict and Twitter/Facebook/Discord previews.
    """
    url = request.url.strip()
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")

    logger.info(f"Received OGP verification request for URL: {url}")

    try:
        return await ogp_service.verify(url)
    except OGPFetchError as e:
        logger.error(f"OGP verification failed: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail=f"Error fetching OGP data: {str(e)}"
        )
