"""
Middleware stages.

Standard stages wrap every request, in this order:
    RecoveryStage -> RequestLoggingStage -> SecurityHeadersStage

Route groups add their own stages in front of the handler:
    dynamic:   SessionStage -> CSRFStage -> AuthenticateStage -> AuthorizeStage
    protected: dynamic + RequireAuthenticationStage
    owner:     dynamic + RequireAuthorizationStage
"""

import logging
import uuid

from fastapi import HTTPException, Request, Response, status
from starlette.concurrency import run_in_threadpool

from snippetbox.core.logging_config import log_security_event, set_correlation_id
from snippetbox.core.security import (
    SECURITY_HEADERS,
    generate_csrf_secret,
    generate_csrf_token,
    validate_csrf_token,
)
from snippetbox.core.sessions import (
    AUTHENTICATED_USER_ID,
    CSRF_SECRET,
    REDIRECT_PATH_AFTER_LOGIN,
    SessionManager,
)
from snippetbox.stores.errors import ModelError
from snippetbox.stores.interfaces import UserModelInterface
from snippetbox.web.context import get_capabilities, get_session, set_capabilities
from snippetbox.web.helpers import redirect, server_error
from snippetbox.web.pipeline import Handler, Stage

logger = logging.getLogger(__name__)

UNSAFE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
LOGIN_PATH = "/user/login"


def client_address(request: Request) -> str:
    if request.client is None:
        return ""
    return f"{request.client.host}:{request.client.port}"


class RecoveryStage(Stage):
    """Turn any exception escaping the stack into a logged 500 and close the connection."""

    async def handle(self, request: Request, call_next: Handler) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            response = server_error(request, e)
            response.headers["Connection"] = "close"
            return response


class RequestLoggingStage(Stage):
    def __init__(self, log: logging.Logger = logger):
        self.log = log

    async def handle(self, request: Request, call_next: Handler) -> Response:
        set_correlation_id(request.headers.get("X-Request-ID") or str(uuid.uuid4()))

        uri = request.url.path
        if request.url.query:
            uri = f"{uri}?{request.url.query}"
        protocol = f"HTTP/{request.scope.get('http_version', '1.1')}"

        self.log.info("%s - %s %s %s", client_address(request), protocol, request.method, uri)
        return await call_next(request)


class SecurityHeadersStage(Stage):
    async def handle(self, request: Request, call_next: Handler) -> Response:
        response = await call_next(request)
        for header_name, header_value in SECURITY_HEADERS.items():
            response.headers[header_name] = header_value
        return response


class SessionStage(Stage):
    """Load the session before the handler runs and save it afterwards if it changed."""

    def __init__(self, manager: SessionManager):
        self.manager = manager

    async def handle(self, request: Request, call_next: Handler) -> Response:
        token = request.cookies.get(self.manager.cookie_name)
        session = await run_in_threadpool(self.manager.load, token)
        request.state.session = session

        response = await call_next(request)

        if session.modified:
            token = await run_in_threadpool(self.manager.commit, session)
            self.manager.write_cookie(response, token, session.expiry)
        elif session.destroyed:
            self.manager.expire_cookie(response)

        response.headers.append("Vary", "Cookie")
        return response


class CSRFStage(Stage):
    """
    Reject state-changing requests without a valid signed CSRF token.

    The token is read from the ``X-CSRF-Token`` header, or failing that from
    the ``csrf_token`` form field, and must have been issued to the current
    session. Every request gets a fresh token in ``request.state.csrf_token``
    for the templates to embed. Must run after SessionStage.
    """

    def __init__(self, secret_key: str, max_age: int = 3600):
        self.secret_key = secret_key
        self.max_age = max_age

    async def handle(self, request: Request, call_next: Handler) -> Response:
        session = get_session(request)
        session_secret = session.get_string(CSRF_SECRET)

        if request.method in UNSAFE_METHODS and not await self._validate(request, session_secret):
            logger.warning(f"CSRF token validation failed for {request.method} {request.url.path}")
            log_security_event(
                "csrf_validation_failure",
                "CSRF token validation failed",
                ip_address=request.client.host if request.client else None,
                extra_data={"endpoint": request.url.path},
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="CSRF token validation failed",
            )

        if not session_secret:
            session_secret = generate_csrf_secret()
            session.put(CSRF_SECRET, session_secret)

        request.state.csrf_token = generate_csrf_token(self.secret_key, session_secret)
        return await call_next(request)

    async def _validate(self, request: Request, session_secret: str) -> bool:
        if not session_secret:
            return False

        csrf_token = request.headers.get("X-CSRF-Token")

        if not csrf_token:
            # Try to get from form data for form submissions
            try:
                form_data = await request.form()
            except Exception as e:
                logger.debug(f"Could not read form for CSRF token: {e}")
                return False
            value = form_data.get("csrf_token")
            csrf_token = value if isinstance(value, str) else None

        if not csrf_token:
            return False

        return validate_csrf_token(csrf_token, self.secret_key, session_secret, max_age=self.max_age)


class AuthenticateStage(Stage):
    """Mark the request authenticated when the session's user still exists."""

    def __init__(self, users: UserModelInterface):
        self.users = users

    async def handle(self, request: Request, call_next: Handler) -> Response:
        user_id = get_session(request).get_int(AUTHENTICATED_USER_ID)
        if user_id == 0:
            return await call_next(request)

        try:
            exists = await run_in_threadpool(self.users.exists, user_id)
        except ModelError as e:
            return server_error(request, e)

        if exists:
            set_capabilities(request, authenticated=True)

        return await call_next(request)


class AuthorizeStage(Stage):
    """Mark the request authorized when the session's user is an owner."""

    def __init__(self, users: UserModelInterface):
        self.users = users

    async def handle(self, request: Request, call_next: Handler) -> Response:
        user_id = get_session(request).get_int(AUTHENTICATED_USER_ID)
        if user_id == 0:
            return await call_next(request)

        try:
            owner = await run_in_threadpool(self.users.authorize, user_id)
        except ModelError as e:
            return server_error(request, e)

        if owner:
            set_capabilities(request, authorized=True)

        return await call_next(request)


class _GateStage(Stage):
    capability = ""

    async def handle(self, request: Request, call_next: Handler) -> Response:
        if not getattr(get_capabilities(request), self.capability):
            # Replayed by the login handler once the user has signed in
            get_session(request).put(REDIRECT_PATH_AFTER_LOGIN, request.url.path)
            log_security_event(
                "gate_redirect",
                f"Request is not {self.capability}, redirecting to login",
                ip_address=request.client.host if request.client else None,
                extra_data={"endpoint": request.url.path},
            )
            return redirect(LOGIN_PATH)

        response = await call_next(request)
        # Pages behind a gate must not be cached by browsers or proxies
        response.headers["Cache-Control"] = "no-store"
        return response


class RequireAuthenticationStage(_GateStage):
    capability = "authenticated"


class RequireAuthorizationStage(_GateStage):
    capability = "authorized"
