"""Account page and password change"""

from http import HTTPStatus

from fastapi import Request, Response, status
from starlette.concurrency import run_in_threadpool

from snippetbox.core.sessions import AUTHENTICATED_USER_ID, FLASH
from snippetbox.stores.errors import InvalidCredentialsError, ModelError, NoRecordError
from snippetbox.web.context import get_application, get_session
from snippetbox.web.forms import AccountPasswordUpdateForm
from snippetbox.web.helpers import (
    FormDecodeError,
    client_error,
    decode_post_form,
    new_template_data,
    redirect,
    render,
    server_error,
)


async def account_view(request: Request) -> Response:
    application = get_application(request)
    user_id = get_session(request).get_int(AUTHENTICATED_USER_ID)

    try:
        user = await run_in_threadpool(application.users.get, user_id)
    except NoRecordError:
        return redirect("/user/login")
    except ModelError as e:
        return server_error(request, e)

    data = new_template_data(request)
    data["user"] = user
    return render(request, status.HTTP_200_OK, "account.html", data)


async def account_password_update(request: Request) -> Response:
    data = new_template_data(request)
    data["form"] = AccountPasswordUpdateForm()
    return render(request, status.HTTP_200_OK, "password.html", data)


async def account_password_update_post(request: Request) -> Response:
    application = get_application(request)

    try:
        form = await decode_post_form(request, AccountPasswordUpdateForm)
    except FormDecodeError:
        return client_error(status.HTTP_400_BAD_REQUEST)

    if not form.validate_input():
        data = new_template_data(request)
        data["form"] = form
        return render(request, HTTPStatus.UNPROCESSABLE_ENTITY, "password.html", data)

    user_id = get_session(request).get_int(AUTHENTICATED_USER_ID)

    try:
        await run_in_threadpool(
            application.users.password_update, user_id, form.current_password, form.new_password
        )
    except InvalidCredentialsError:
        form.add_field_error("current_password", "Current password is incorrect")
        data = new_template_data(request)
        data["form"] = form
        return render(request, HTTPStatus.UNPROCESSABLE_ENTITY, "password.html", data)
    except ModelError as e:
        return server_error(request, e)

    get_session(request).put(FLASH, "Your password has been updated!")
    return redirect("/account/view")
