"""
Unit tests for pipeline composition
"""

import pytest
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from snippetbox.web.pipeline import Pipeline, Stage

pytestmark = pytest.mark.unit


class RecordingStage(Stage):
    """Appends its name to ``request.state.trail`` on the way in and a header on the way out"""

    def __init__(self, name: str):
        self.name = name

    async def handle(self, request, call_next):
        trail = getattr(request.state, "trail", [])
        request.state.trail = trail + [self.name]
        response = await call_next(request)
        response.headers.append("X-Trail", self.name)
        return response


class ShortCircuitStage(Stage):
    async def handle(self, request, call_next):
        return PlainTextResponse("stopped", status_code=418)


async def endpoint(request: Request):
    return PlainTextResponse(",".join(request.state.trail))


class TestPipeline:

    def test_append_returns_new_pipeline(self):
        base = Pipeline(RecordingStage("a"))
        extended = base.append(RecordingStage("b"))

        assert len(base) == 1
        assert len(extended) == 2
        assert [s.name for s in extended.stages] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_wrap_runs_first_stage_outermost(self):
        handler = Pipeline(RecordingStage("a"), RecordingStage("b")).wrap(endpoint)
        request = Request({"type": "http", "method": "GET", "path": "/", "headers": [], "query_string": b""})

        response = await handler(request)

        assert response.body == b"a,b"
        # Headers are added on the way out, innermost first
        assert response.headers.getlist("x-trail") == ["b", "a"]

    @pytest.mark.asyncio
    async def test_stage_can_answer_without_calling_downstream(self):
        handler = Pipeline(ShortCircuitStage(), RecordingStage("never")).wrap(endpoint)
        request = Request({"type": "http", "method": "GET", "path": "/", "headers": [], "query_string": b""})

        response = await handler(request)

        assert response.status_code == 418
        assert not hasattr(request.state, "trail")


class TestInstallation:

    def test_route_class_wraps_router_endpoints(self):
        app = FastAPI()
        router = APIRouter(route_class=Pipeline(RecordingStage("inner")).route_class())
        router.add_api_route("/wrapped", endpoint, methods=["GET"])
        app.include_router(router)

        response = TestClient(app).get("/wrapped")

        assert response.text == "inner"
        assert response.headers["x-trail"] == "inner"

    def test_install_orders_middleware_and_route_stages(self):
        app = FastAPI()
        Pipeline(RecordingStage("outer-1"), RecordingStage("outer-2")).install(app)
        router = APIRouter(route_class=Pipeline(RecordingStage("inner")).route_class())
        router.add_api_route("/wrapped", endpoint, methods=["GET"])
        app.include_router(router)

        response = TestClient(app).get("/wrapped")

        assert response.text == "outer-1,outer-2,inner"

    def test_groups_do_not_share_stages(self):
        dynamic = Pipeline(RecordingStage("dynamic"))
        protected = dynamic.append(RecordingStage("protected"))

        app = FastAPI()
        public_router = APIRouter(route_class=dynamic.route_class())
        public_router.add_api_route("/public", endpoint, methods=["GET"])
        protected_router = APIRouter(route_class=protected.route_class())
        protected_router.add_api_route("/protected", endpoint, methods=["GET"])
        app.include_router(public_router)
        app.include_router(protected_router)

        client = TestClient(app)

        assert client.get("/public").text == "dynamic"
        assert client.get("/protected").text == "dynamic,protected"
