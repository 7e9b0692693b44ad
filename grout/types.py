"""Type definitions for Grout."""

from typing_extensions import TypedDict


class HealthStatus(TypedDict):
    """Health status of system components."""

    cache: bool
    limiter: bool
    content: bool
    fonts: bool


class ServiceInfo(TypedDict):
    """Body of the root endpoint."""

    name: str
    version: str
    status: str
    docs: str
