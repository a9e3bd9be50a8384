"""Signup, login and logout"""

from http import HTTPStatus

from fastapi import Request, Response, status
from starlette.concurrency import run_in_threadpool

from snippetbox.core.config import settings
from snippetbox.core.limiter import limiter
from snippetbox.core.logging_config import log_security_event
from snippetbox.core.sessions import AUTHENTICATED_USER_ID, FLASH, REDIRECT_PATH_AFTER_LOGIN
from snippetbox.stores.errors import DuplicateEmailError, InvalidCredentialsError, ModelError
from snippetbox.web.context import get_application, get_session
from snippetbox.web.forms import UserLoginForm, UserSignupForm
from snippetbox.web.helpers import (
    FormDecodeError,
    client_error,
    decode_post_form,
    new_template_data,
    redirect,
    render,
    server_error,
)

DEFAULT_LOGIN_REDIRECT = "/snippet/create"


async def user_signup(request: Request) -> Response:
    data = new_template_data(request)
    data["form"] = UserSignupForm()
    return render(request, status.HTTP_200_OK, "signup.html", data)


@limiter.limit(settings.rate_limit_auth_endpoints)
async def user_signup_post(request: Request) -> Response:
    """
    Create an account.

    Rate limited per client address to slow down account enumeration.
    """
    application = get_application(request)

    try:
        form = await decode_post_form(request, UserSignupForm)
    except FormDecodeError:
        return client_error(status.HTTP_400_BAD_REQUEST)

    if not form.validate_input():
        data = new_template_data(request)
        data["form"] = form
        return render(request, HTTPStatus.UNPROCESSABLE_ENTITY, "signup.html", data)

    try:
        await run_in_threadpool(application.users.insert, form.name, form.email, form.password)
    except DuplicateEmailError:
        form.add_field_error("email", "Email address is already in use")
        data = new_template_data(request)
        data["form"] = form
        return render(request, HTTPStatus.UNPROCESSABLE_ENTITY, "signup.html", data)
    except ModelError as e:
        return server_error(request, e)

    get_session(request).put(FLASH, "Your signup was successful. Please log in")
    return redirect("/user/login")


async def user_login(request: Request) -> Response:
    data = new_template_data(request)
    data["form"] = UserLoginForm()
    return render(request, status.HTTP_200_OK, "login.html", data)


@limiter.limit(settings.rate_limit_auth_endpoints)
async def user_login_post(request: Request) -> Response:
    """
    Log a user in.

    The session token is renewed before the user id goes into the session,
    and the user is sent back to the page that bounced them to the login
    form, if any.

    Rate limited per client address to slow down credential stuffing.
    """
    application = get_application(request)

    try:
        form = await decode_post_form(request, UserLoginForm)
    except FormDecodeError:
        return client_error(status.HTTP_400_BAD_REQUEST)

    if not form.validate_input():
        data = new_template_data(request)
        data["form"] = form
        return render(request, HTTPStatus.UNPROCESSABLE_ENTITY, "login.html", data)

    try:
        user_id = await run_in_threadpool(application.users.authenticate, form.email, form.password)
    except InvalidCredentialsError:
        log_security_event(
            "login_failure",
            "Rejected login attempt",
            ip_address=request.client.host if request.client else None,
        )
        form.add_non_field_error("Email or password is incorrect")
        data = new_template_data(request)
        data["form"] = form
        return render(request, HTTPStatus.UNPROCESSABLE_ENTITY, "login.html", data)
    except ModelError as e:
        return server_error(request, e)

    session = get_session(request)
    try:
        await run_in_threadpool(session.renew_token)
    except ModelError as e:
        return server_error(request, e)

    session.put(AUTHENTICATED_USER_ID, user_id)

    url_path = session.pop_string(REDIRECT_PATH_AFTER_LOGIN)
    return redirect(url_path or DEFAULT_LOGIN_REDIRECT)


async def user_logout_post(request: Request) -> Response:
    session = get_session(request)
    try:
        await run_in_threadpool(session.renew_token)
    except ModelError as e:
        return server_error(request, e)

    session.remove(AUTHENTICATED_USER_ID)
    session.put(FLASH, "You've been logged out successfully!")
    return redirect("/")
