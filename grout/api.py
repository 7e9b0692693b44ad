"""FastAPI application and route handlers."""

import re
import sys
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Header, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .config import DEFAULT_AVATAR_NAME, Settings, settings
from .content import ContentRepository
from .exceptions import GroutError, RateLimitExceeded
from .middleware import add_request_id, enforce_rate_limit
from .models import AvatarParams, ImageResult, PlaceholderParams
from .ratelimit import create_rate_limiter
from .render import FontSet, Renderer
from .service import ImageService, parse_flag, split_format
from .storage import create_cache
from .types import HealthStatus, ServiceInfo

VERSION = "1.0.0"
CACHE_CONTROL = "public, max-age=31536000, immutable"
METRIC_PATTERN = re.compile(r"^([0-9]+)x([0-9]+)$")


def configure_logging(config: Settings | None = None) -> None:
    """Configure logging - should be called at startup, not import time."""
    config = config or settings
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=config.log_level,
        serialize=False,
    )
    if config.log_file:
        logger.add(
            config.log_file,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            level=config.log_level,
        )


def build_service(config: Settings) -> ImageService:
    """Wire fonts, renderer, cache and content into an ImageService."""
    fonts = FontSet.load(config.font_regular_path, config.font_bold_path)
    renderer = Renderer(
        fonts,
        min_font_size=config.min_font_size,
        max_font_size=config.max_font_size,
        min_chars_per_line=config.min_chars_per_line,
    )
    content = ContentRepository.from_files(config.quotes_file, config.jokes_file)
    return ImageService(
        renderer=renderer,
        cache=create_cache(config.cache_size),
        content=content,
        min_width_for_quote=config.min_width_for_quote,
    )


def image_response(result: ImageResult) -> Response:
    """Turn an ImageResult into an HTTP response with caching headers."""
    headers = {"ETag": result.etag, "Cache-Control": CACHE_CONTROL}
    if result.not_modified:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)
    headers["X-Cache"] = result.cache_status
    return Response(content=result.body, media_type=result.media_type, headers=headers)


async def grout_exception_handler(request: Request, exc: GroutError) -> JSONResponse:
    """Handle domain-specific errors."""
    logger.debug(f"Returning 500 for {exc.__class__.__name__}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Failed to generate image", "type": exc.__class__.__name__},
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Reject a client that ran out of tokens."""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"detail": "Rate limit exceeded. Please try again later."},
    )


def get_image_service(request: Request) -> ImageService:
    """Get the image service built by the lifespan."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise RuntimeError("Service not initialized")
    return service


ServiceDep = Annotated[ImageService, Depends(get_image_service)]
RateLimited = [Depends(enforce_rate_limit)]


def avatar_options(
    size: str | None = None,
    background: str | None = None,
    bg: str | None = None,
    color: str | None = None,
    rounded: str | None = None,
    bold: str | None = None,
) -> dict[str, Any]:
    """Query parameters shared by both avatar routes."""
    return {
        "size": size,
        "background": background or bg,
        "color": color,
        "rounded": rounded == "true",
        "bold": bold == "true",
    }


def placeholder_options(
    text: str | None = None,
    quote: str | None = None,
    joke: str | None = None,
    category: str = "",
    background: str | None = None,
    bg: str | None = None,
    color: str | None = None,
) -> dict[str, Any]:
    """Query parameters shared by both placeholder routes."""
    return {
        "text": text,
        "quote": parse_flag(quote),
        "joke": parse_flag(joke),
        "category": category,
        "background": background or bg,
        "color": color,
    }


AvatarOptions = Annotated[dict[str, Any], Depends(avatar_options)]
PlaceholderOptions = Annotated[dict[str, Any], Depends(placeholder_options)]
IfNoneMatch = Annotated[str | None, Header()]


def avatar_endpoint(
    service: ServiceDep,
    options: AvatarOptions,
    name: str | None = None,
    if_none_match: IfNoneMatch = None,
) -> Response:
    """Render an avatar for ``?name=``."""
    params = AvatarParams(name=name or DEFAULT_AVATAR_NAME, **options)
    return image_response(service.avatar(params, if_none_match))


def named_avatar_endpoint(
    name: str,
    service: ServiceDep,
    options: AvatarOptions,
    if_none_match: IfNoneMatch = None,
) -> Response:
    """Render an avatar for the name in the path; an extension picks the format."""
    fmt, name = split_format(name)
    params = AvatarParams(name=name or DEFAULT_AVATAR_NAME, format=fmt, **options)
    return image_response(service.avatar(params, if_none_match))


def placeholder_endpoint(
    service: ServiceDep,
    options: PlaceholderOptions,
    w: str | None = None,
    h: str | None = None,
    if_none_match: IfNoneMatch = None,
) -> Response:
    """Render a placeholder sized by ``?w=`` and ``?h=``."""
    params = PlaceholderParams(width=w, height=h, **options)
    return image_response(service.placeholder(params, if_none_match))


def sized_placeholder_endpoint(
    metric: str,
    service: ServiceDep,
    options: PlaceholderOptions,
    w: str | None = None,
    h: str | None = None,
    if_none_match: IfNoneMatch = None,
) -> Response:
    """Render a placeholder sized by a ``WxH`` path, falling back to the query."""
    fmt, metric = split_format(metric)
    match = METRIC_PATTERN.match(metric)
    width, height = match.groups() if match else (w, h)
    params = PlaceholderParams(width=width, height=height, format=fmt, **options)
    return image_response(service.placeholder(params, if_none_match))


def create_app(config: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Every call returns an independent app with its own cache, limiter and
    content, built when the lifespan starts.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle."""
        configure_logging(config)

        app.state.service = build_service(config)
        app.state.limiter = create_rate_limiter(
            config.rate_limit_enabled,
            config.rate_limit_rpm,
            config.rate_limit_burst,
            config.rate_limit_cleanup_interval,
            config.rate_limit_idle_timeout,
        )
        await app.state.limiter.startup()
        logger.info("Application started successfully")

        yield

        await app.state.limiter.shutdown()
        app.state.service = None
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Grout",
        version=VERSION,
        description="Avatar and placeholder image service",
        lifespan=lifespan,
    )

    app.middleware("http")(add_request_id)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GroutError, grout_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)  # type: ignore[arg-type]

    routes = [
        ("/avatar/", avatar_endpoint),
        ("/avatar/{name}", named_avatar_endpoint),
        ("/placeholder/", placeholder_endpoint),
        ("/placeholder/{metric}", sized_placeholder_endpoint),
    ]
    for path, endpoint in routes:
        app.add_api_route(
            path,
            endpoint,
            methods=["GET"],
            tags=["images"],
            dependencies=RateLimited,
            response_class=Response,
        )

    @app.get("/health", tags=["health"])
    async def health_endpoint(request: Request) -> dict[str, Any]:
        """Check health status of all components."""
        service = getattr(request.app.state, "service", None)
        services: HealthStatus = {
            "cache": service is not None,
            "limiter": getattr(request.app.state, "limiter", None) is not None,
            "content": service is not None and service.content is not None,
            "fonts": service is not None and service.renderer.fonts.regular is not None,
        }
        return {
            "status": "healthy",
            "version": VERSION,
            "timestamp": datetime.now(UTC).isoformat(),
            "services": services,
        }

    @app.get("/", tags=["health"])
    async def root_endpoint() -> ServiceInfo:
        """API information endpoint."""
        return {
            "name": "Grout",
            "version": VERSION,
            "status": "running",
            "docs": "/docs",
        }

    app.openapi_tags = [
        {"name": "images", "description": "Avatar and placeholder images"},
        {"name": "health", "description": "Health checks"},
    ]
    return app


app = create_app()
