"""Response helpers shared by handlers and middleware stages."""

import re
import traceback
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse, RedirectResponse
from jinja2 import TemplateError
from pydantic import ValidationError
from starlette import status

from snippetbox.core.sessions import FLASH
from snippetbox.core.validator import Validator
from snippetbox.web.context import get_application, get_session, is_authenticated, is_authorized

FormT = TypeVar("FormT", bound=Validator)

_ID_RX = re.compile(r"[+-]?[0-9]+")
_MAX_ID = 2**63 - 1


class FormDecodeError(Exception):
    """The submitted form could not be decoded into the expected fields."""


def server_error(request: Request, err: BaseException) -> Response:
    """Log the error with its traceback and send a 500.

    The traceback is only included in the response body in debug mode.
    """
    application = get_application(request)
    trace = "".join(traceback.format_exception(type(err), err, err.__traceback__))
    application.logger.error(
        "%s %s failed: %s", request.method, request.url.path, err,
        exc_info=(type(err), err, err.__traceback__),
    )

    if application.debug:
        return PlainTextResponse(trace, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return client_error(status.HTTP_500_INTERNAL_SERVER_ERROR)


def client_error(status_code: int) -> Response:
    return PlainTextResponse(HTTPStatus(status_code).phrase, status_code=status_code)


def not_found() -> Response:
    return client_error(status.HTTP_404_NOT_FOUND)


def redirect(url: str) -> Response:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


def parse_id(value: str) -> int:
    """Parse a positive record id from a path segment; 0 if it isn't one."""
    if not _ID_RX.fullmatch(value):
        return 0
    parsed = int(value)
    if parsed < 1 or parsed > _MAX_ID:
        return 0
    return parsed


def new_template_data(request: Request) -> Dict[str, Any]:
    """Values every page template can rely on."""
    return {
        "is_authenticated": is_authenticated(request),
        "is_authorized": is_authorized(request),
        "current_year": datetime.now(timezone.utc).year,
        "flash": get_session(request).pop_string(FLASH),
        "csrf_token": getattr(request.state, "csrf_token", ""),
        "form": None,
    }


def render(
    request: Request,
    status_code: int,
    page: str,
    data: Optional[Dict[str, Any]] = None,
) -> Response:
    application = get_application(request)
    try:
        return application.templates.TemplateResponse(
            request, page, data or {}, status_code=status_code
        )
    except TemplateError as e:
        return server_error(request, e)


async def decode_post_form(request: Request, form_cls: Type[FormT]) -> FormT:
    """
    Decode the request body into a form.

    Only the form's own fields are read; anything else in the body is ignored.

    Raises:
        FormDecodeError: If a field can't be converted to its declared type.
    """
    form_data = await request.form()
    values = {name: form_data[name] for name in form_cls.form_fields() if name in form_data}

    try:
        return form_cls.model_validate(values)
    except ValidationError as e:
        raise FormDecodeError(str(e)) from e
