"""Home page and general web routes"""

from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from snippetbox.stores.errors import ModelError
from snippetbox.web.context import get_application
from snippetbox.web.helpers import new_template_data, render, server_error


async def home(request: Request) -> Response:
    """Landing page listing the latest snippets"""
    application = get_application(request)
    try:
        snippets = await run_in_threadpool(application.snippets.latest)
    except ModelError as e:
        return server_error(request, e)

    data = new_template_data(request)
    data["snippets"] = snippets
    return render(request, status.HTTP_200_OK, "home.html", data)


async def about_view(request: Request) -> Response:
    return render(request, status.HTTP_200_OK, "about.html", new_template_data(request))


async def ping(request: Request) -> Response:
    """Liveness check, outside every middleware chain but the standard one"""
    return PlainTextResponse("OK")
