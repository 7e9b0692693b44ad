"""Shared test fixtures."""

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

# Set test environment
os.environ["GROUT_LOG_LEVEL"] = "ERROR"  # Reduce log noise

from grout.api import create_app  # noqa: E402
from grout.config import Settings  # noqa: E402
from grout.content import ContentRepository  # noqa: E402
from grout.render import FontSet, Renderer  # noqa: E402
from grout.service import ImageService  # noqa: E402
from grout.storage import ImageCache  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def fonts() -> FontSet:
    """Fonts are read once per session."""
    return FontSet.load()


@pytest.fixture
def renderer(fonts: FontSet) -> Renderer:
    return Renderer(fonts)


@pytest.fixture
def content() -> ContentRepository:
    """Small, predictable content collections."""
    return ContentRepository(
        quotes={"wisdom": ["Know thyself."], "empty": []},
        jokes={"programming": ["It works on my machine."]},
    )


@pytest.fixture
def cache() -> ImageCache:
    return ImageCache(max_size=16)


@pytest.fixture
def service(renderer: Renderer, cache: ImageCache, content: ContentRepository) -> ImageService:
    return ImageService(renderer=renderer, cache=cache, content=content)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with rate limiting off so tests never trip the limiter."""
    return Settings(log_level="ERROR", rate_limit_enabled=False, cache_size=64)


@pytest.fixture
def client(test_settings: Settings) -> Iterator[TestClient]:
    """Test client running the full lifespan of a fresh app."""
    with TestClient(create_app(test_settings)) as test_client:
        yield test_client
