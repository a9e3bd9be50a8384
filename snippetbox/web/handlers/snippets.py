"""Snippet pages and the review counter"""

from http import HTTPStatus

from fastapi import Request, Response, status
from starlette.concurrency import run_in_threadpool

from snippetbox.core.sessions import AUTHENTICATED_USER_ID, FLASH
from snippetbox.stores.errors import ModelError, NoRecordError
from snippetbox.web.context import get_application, get_session
from snippetbox.web.forms import SnippetCreateForm
from snippetbox.web.helpers import (
    FormDecodeError,
    client_error,
    decode_post_form,
    new_template_data,
    not_found,
    parse_id,
    redirect,
    render,
    server_error,
)


async def snippet_view(request: Request, snippet_id: str) -> Response:
    application = get_application(request)

    parsed_id = parse_id(snippet_id)
    if parsed_id == 0:
        return not_found()

    try:
        snippet = await run_in_threadpool(application.snippets.get, parsed_id)
    except NoRecordError:
        return not_found()
    except ModelError as e:
        return server_error(request, e)

    # 0 for anonymous visitors, who always see a zero count
    user_id = get_session(request).get_int(AUTHENTICATED_USER_ID)

    try:
        review = await run_in_threadpool(application.reviews.get, user_id, snippet.id)
    except ModelError as e:
        return server_error(request, e)

    data = new_template_data(request)
    data["snippet"] = snippet
    data["review"] = review
    return render(request, status.HTTP_200_OK, "view.html", data)


async def snippet_create(request: Request) -> Response:
    data = new_template_data(request)
    data["form"] = SnippetCreateForm()
    return render(request, status.HTTP_200_OK, "create.html", data)


async def snippet_create_post(request: Request) -> Response:
    application = get_application(request)

    try:
        form = await decode_post_form(request, SnippetCreateForm)
    except FormDecodeError:
        return client_error(status.HTTP_400_BAD_REQUEST)

    if not form.validate_input():
        data = new_template_data(request)
        data["form"] = form
        return render(request, HTTPStatus.UNPROCESSABLE_ENTITY, "create.html", data)

    try:
        snippet_id = await run_in_threadpool(
            application.snippets.insert, form.title, form.content, form.expires
        )
    except ModelError as e:
        return server_error(request, e)

    get_session(request).put(FLASH, "Snippet successfully created!")
    return redirect(f"/snippet/view/{snippet_id}")


async def review_update_post(request: Request, snippet_id: str) -> Response:
    application = get_application(request)

    parsed_id = parse_id(snippet_id)
    if parsed_id == 0:
        return not_found()

    user_id = get_session(request).get_int(AUTHENTICATED_USER_ID)

    try:
        await run_in_threadpool(application.reviews.update, user_id, parsed_id)
    except NoRecordError:
        return not_found()
    except ModelError as e:
        return server_error(request, e)

    get_session(request).put(FLASH, "Review successfully submitted!")
    return redirect(f"/snippet/view/{parsed_id}")
