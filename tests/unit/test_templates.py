"""
Unit tests for template helpers
"""

from datetime import datetime

import pytest

from snippetbox.core.templates import human_date, templates

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("value,expected", [
    (datetime(2023, 7, 19, 10, 15), "Jul 19 2023 at 10:15"),
    (datetime(2024, 3, 1, 9, 5), "Mar 01 2024 at 09:05"),
    (None, ""),
])
def test_human_date(value, expected):
    assert human_date(value) == expected


def test_human_date_is_registered_as_filter():
    template = templates.env.from_string("{{ value | human_date }}")
    assert template.render(value=datetime(2022, 12, 17, 10, 15)) == "Dec 17 2022 at 10:15"


@pytest.mark.parametrize("page", [
    "home.html", "view.html", "create.html", "signup.html",
    "login.html", "about.html", "account.html", "password.html",
])
def test_pages_exist(page):
    assert templates.get_template(page) is not None
