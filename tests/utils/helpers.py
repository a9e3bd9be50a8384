"""
Test helper functions for common testing operations

Form posts need a CSRF token, which the templates embed in every form; these
helpers fetch a page, pull the token out and submit forms with it.
"""

import html
import re
from typing import Dict, Optional

from fastapi.testclient import TestClient
from httpx import Response

CSRF_TOKEN_RX = re.compile(r'<input type="hidden" name="csrf_token" value="(.+?)">')


def extract_csrf_token(body: str) -> str:
    """Pull the CSRF token out of a rendered page"""
    match = CSRF_TOKEN_RX.search(body)
    assert match is not None, "no csrf token found in body"
    return html.unescape(match.group(1))


def get_csrf_token(client: TestClient, path: str = "/user/signup") -> str:
    response = client.get(path)
    assert response.status_code == 200
    return extract_csrf_token(response.text)


def post_form(
    client: TestClient,
    path: str,
    data: Optional[Dict[str, str]] = None,
    csrf_token: Optional[str] = None,
) -> Response:
    """Submit a form the way a browser would, without following the redirect"""
    form = dict(data or {})
    form["csrf_token"] = csrf_token if csrf_token is not None else get_csrf_token(client)
    return client.post(path, data=form, follow_redirects=False)


def signup(client: TestClient, name: str, email: str, password: str) -> Response:
    return post_form(client, "/user/signup", {"name": name, "email": email, "password": password})


def login(client: TestClient, email: str, password: str) -> Response:
    return post_form(client, "/user/login", {"email": email, "password": password})


def session_cookie(client: TestClient, name: str = "session") -> Optional[str]:
    return client.cookies.get(name)
