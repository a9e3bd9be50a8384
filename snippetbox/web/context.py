"""Per-request state shared between middleware stages and handlers."""

from dataclasses import dataclass, replace

from fastapi import Request

from snippetbox.core.application import Application
from snippetbox.core.sessions import Session


@dataclass(frozen=True)
class RequestCapabilities:
    """Facts derived for the current request by the authenticate/authorize stages."""

    authenticated: bool = False
    authorized: bool = False


def get_capabilities(request: Request) -> RequestCapabilities:
    capabilities = getattr(request.state, "capabilities", None)
    if capabilities is None:
        return RequestCapabilities()
    return capabilities


def set_capabilities(request: Request, **changes: bool) -> RequestCapabilities:
    capabilities = replace(get_capabilities(request), **changes)
    request.state.capabilities = capabilities
    return capabilities


def is_authenticated(request: Request) -> bool:
    return get_capabilities(request).authenticated


def is_authorized(request: Request) -> bool:
    return get_capabilities(request).authorized


def get_session(request: Request) -> Session:
    """Session loaded by the session stage.

    Raises:
        RuntimeError: If the route is not behind the session stage.
    """
    session = getattr(request.state, "session", None)
    if session is None:
        raise RuntimeError(f"no session loaded for {request.url.path}")
    return session


def get_application(request: Request) -> Application:
    return request.app.state.application
