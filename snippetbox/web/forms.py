"""HTML form models. Field names match the ``name`` attributes in the templates."""

from snippetbox.core.validator import (
    EMAIL_RX,
    Validator,
    matches,
    max_chars,
    min_chars,
    not_blank,
    permitted_value,
)

DAY = 1
WEEK = 7
YEAR = 365
MIN_PASSWORD_CHARS = 8
TITLE_MAX_CHARS = 100

BLANK = "This field cannot be blank"


class SnippetCreateForm(Validator):
    title: str = ""
    content: str = ""
    expires: int = YEAR

    def validate_input(self) -> bool:
        self.check_field(not_blank(self.title), "title", BLANK)
        self.check_field(
            max_chars(self.title, TITLE_MAX_CHARS),
            "title",
            f"This field cannot be more than {TITLE_MAX_CHARS} characters long",
        )
        self.check_field(not_blank(self.content), "content", BLANK)
        self.check_field(
            permitted_value(self.expires, DAY, WEEK, YEAR),
            "expires",
            "This field must equal 1, 7 or 365",
        )
        return self.valid()


class UserSignupForm(Validator):
    name: str = ""
    email: str = ""
    password: str = ""

    def validate_input(self) -> bool:
        self.check_field(not_blank(self.name), "name", BLANK)
        self.check_field(not_blank(self.email), "email", BLANK)
        self.check_field(matches(self.email, EMAIL_RX), "email", "This field must be a valid email address")
        self.check_field(not_blank(self.password), "password", BLANK)
        self.check_field(
            min_chars(self.password, MIN_PASSWORD_CHARS),
            "password",
            f"This field must be at least {MIN_PASSWORD_CHARS} characters long",
        )
        return self.valid()


class UserLoginForm(Validator):
    email: str = ""
    password: str = ""

    def validate_input(self) -> bool:
        self.check_field(not_blank(self.email), "email", BLANK)
        self.check_field(matches(self.email, EMAIL_RX), "email", "This field must be a valid email address")
        self.check_field(not_blank(self.password), "password", BLANK)
        return self.valid()


class AccountPasswordUpdateForm(Validator):
    current_password: str = ""
    new_password: str = ""
    new_password_confirmation: str = ""

    def validate_input(self) -> bool:
        self.check_field(not_blank(self.current_password), "current_password", BLANK)
        self.check_field(not_blank(self.new_password), "new_password", BLANK)
        self.check_field(
            min_chars(self.new_password, MIN_PASSWORD_CHARS),
            "new_password",
            f"This field must be at least {MIN_PASSWORD_CHARS} characters long",
        )
        self.check_field(not_blank(self.new_password_confirmation), "new_password_confirmation", BLANK)
        self.check_field(
            self.new_password == self.new_password_confirmation,
            "new_password_confirmation",
            "Passwords do not match",
        )
        return self.valid()
