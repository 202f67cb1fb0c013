"""URL shortening API routes.

This module contains all endpoints for short URL operations:
- Create short URL (POST /shorturls)
- Get short URL statistics (GET /shorturls/{shortcode})
- Redirect to original URL (GET /{shortcode})
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from ...core.config import settings
from ...core.exceptions import EmptyURLError, ExpiredError, NotFoundError
from ...core.registry import Registry, get_registry
from ...models.url import ShortURLCreate, ErrorResponse
from ...schemas.url import ShortURLCreateResponse, ShortURLStatsResponse
from ...utils.shortener import create_short_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["URLs"])


@router.post(
    "/shorturls",
    response_model=ShortURLCreateResponse,
    status_code=201,
    responses={
        201: {"description": "Short URL created successfully"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        503: {"model": ErrorResponse, "description": "No free short code"},
    },
    summary="Create a short URL",
    description="Create a new short URL from a long URL. Optionally specify a custom code and validity.",
)
def create_short_url_endpoint(
    url_data: ShortURLCreate,
    registry: Registry = Depends(get_registry),
) -> ShortURLCreateResponse:
    """Create a short URL from a long URL.

    Args:
        url_data: URL creation data.
        registry: Registry instance.

    Returns:
        Short link and its expiry.
    """
    if not url_data.url:
        raise EmptyURLError("URL is required")

    logger.debug(f"Processing URL: {url_data.url}")
    short_code, expires_at = registry.create(
        url_data.url,
        validity_minutes=url_data.validity,
        custom_code=url_data.shortcode,
    )

    short_link = create_short_url(settings.base_url, short_code)
    return ShortURLCreateResponse(short_link=short_link, expiry=expires_at)


@router.get(
    "/shorturls/{short_code}",
    response_model=ShortURLStatsResponse,
    responses={
        200: {"description": "Short URL statistics retrieved"},
        404: {"model": ErrorResponse, "description": "Short URL not found"},
    },
    summary="Get short URL statistics",
    description="Get click count, timestamps and click history of a short URL.",
)
def get_stats(
    short_code: str,
    registry: Registry = Depends(get_registry),
) -> ShortURLStatsResponse:
    """Get short URL statistics.

    Args:
        short_code: The short URL code.
        registry: Registry instance.

    Returns:
        Statistics snapshot.
    """
    stats = registry.stats(short_code)
    logger.info(f"Stats retrieved for {short_code}: {stats.total_clicks} clicks")
    return ShortURLStatsResponse(
        total_clicks=stats.total_clicks,
        created_at=stats.created_at,
        expires_at=stats.expires_at,
        clicks=stats.clicks,
    )


@router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=301,
    responses={
        301: {"description": "Redirect to original URL"},
        404: {"model": ErrorResponse, "description": "Short URL not found or expired"},
    },
    summary="Redirect to original URL",
    description="Redirect to the original URL associated with the short code.",
)
def redirect_to_url(
    short_code: str,
    request: Request,
    registry: Registry = Depends(get_registry),
) -> RedirectResponse:
    """Redirect to the original URL and record the click.

    Args:
        short_code: The short URL code.
        request: FastAPI request object.
        registry: Registry instance.

    Returns:
        Redirect response to original URL.
    """
    try:
        original_url = registry.resolve(short_code)
    except (NotFoundError, ExpiredError) as e:
        logger.warning(f"Redirect failed for {short_code}: {e}")
        raise NotFoundError("Short URL not found or expired") from e

    source = request.headers.get("referer") or "direct"
    try:
        registry.record_click(short_code, source=source, location="unknown")
    except NotFoundError as e:
        logger.warning(f"Failed to record click for {short_code}: {e}")

    logger.info(f"Redirecting {short_code} -> {original_url}")
    return RedirectResponse(url=original_url, status_code=301)
