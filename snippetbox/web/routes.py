"""
Route table.

Each route group is an ``APIRouter`` whose endpoints run behind the group's
pipeline:

    dynamic    session, CSRF, authenticate, authorize
    protected  dynamic + require authentication
    owner      dynamic + require authorization
"""

from fastapi import APIRouter

from snippetbox.core.application import Application
from snippetbox.web.handlers import account, home, snippets, users
from snippetbox.web.middleware import (
    AuthenticateStage,
    AuthorizeStage,
    CSRFStage,
    RecoveryStage,
    RequestLoggingStage,
    RequireAuthenticationStage,
    RequireAuthorizationStage,
    SecurityHeadersStage,
    SessionStage,
)
from snippetbox.web.pipeline import Pipeline


def standard_pipeline() -> Pipeline:
    """Stages wrapping every request, outermost first."""
    return Pipeline(RecoveryStage(), RequestLoggingStage(), SecurityHeadersStage())


def dynamic_pipeline(application: Application) -> Pipeline:
    return Pipeline(
        SessionStage(application.sessions),
        CSRFStage(application.secret_key, max_age=application.settings.csrf_token_max_age),
        AuthenticateStage(application.users),
        AuthorizeStage(application.users),
    )


def routes(application: Application) -> APIRouter:
    """Build the application's routers."""
    dynamic = dynamic_pipeline(application)
    protected = dynamic.append(RequireAuthenticationStage())
    owner = dynamic.append(RequireAuthorizationStage())

    router = APIRouter()

    # Outside every route group
    router.add_api_route("/ping", home.ping, methods=["GET"])

    public_router = APIRouter(route_class=dynamic.route_class())
    public_router.add_api_route("/", home.home, methods=["GET"])
    public_router.add_api_route("/about", home.about_view, methods=["GET"])
    public_router.add_api_route("/snippet/view/{snippet_id}", snippets.snippet_view, methods=["GET"])
    public_router.add_api_route("/user/signup", users.user_signup, methods=["GET"])
    public_router.add_api_route("/user/signup", users.user_signup_post, methods=["POST"])
    public_router.add_api_route("/user/login", users.user_login, methods=["GET"])
    public_router.add_api_route("/user/login", users.user_login_post, methods=["POST"])

    protected_router = APIRouter(route_class=protected.route_class())
    protected_router.add_api_route("/user/logout", users.user_logout_post, methods=["POST"])
    protected_router.add_api_route("/account/view", account.account_view, methods=["GET"])
    protected_router.add_api_route(
        "/account/password/update", account.account_password_update, methods=["GET"]
    )
    protected_router.add_api_route(
        "/account/password/update", account.account_password_update_post, methods=["POST"]
    )
    protected_router.add_api_route(
        "/snippet/review/{snippet_id}", snippets.review_update_post, methods=["POST"]
    )

    owner_router = APIRouter(route_class=owner.route_class())
    owner_router.add_api_route("/snippet/create", snippets.snippet_create, methods=["GET"])
    owner_router.add_api_route("/snippet/create", snippets.snippet_create_post, methods=["POST"])

    router.include_router(public_router)
    router.include_router(protected_router)
    router.include_router(owner_router)
    return router
