"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
cookie names and common response definitions for API routes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all endpoints."""

    HOME = RouteConfig(prefix="", tag="home")
    AUTH = RouteConfig(prefix="", tag="auth")
    GOOGLE = RouteConfig(prefix="/auth/google", tag="oauth")
    HEALTH = RouteConfig(prefix="/health", tag="health")


class Cookies:
    """Cookie names issued by the service."""

    SESSION = "session"
    OAUTH_STATE = "oauth_state"


# Common response definitions for reuse across routers
class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    UNAUTHORIZED: dict[int | str, dict[str, Any]] = {
        401: {"description": "Not authenticated or invalid credentials"}
    }
    BAD_REQUEST: dict[int | str, dict[str, Any]] = {
        400: {"description": "Invalid request data or email already registered"}
    }
    REDIRECT: dict[int | str, dict[str, Any]] = {
        302: {"description": "Redirect to the next step of the flow"}
    }


# HTML templates for the landing page and profile fragment
TemplatesDir = Path(__file__).parent.parent / "templates"
Templates = Jinja2Templates(directory=str(TemplatesDir))
