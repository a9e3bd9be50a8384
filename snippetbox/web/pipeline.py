"""
Composable request pipelines.

A stage receives the request and the next handler, and either answers the
request itself or calls through. Pipelines are immutable: ``append`` returns
a new pipeline, so the shared ``dynamic`` chain can be extended into the
``protected`` and ``owner`` chains without the three affecting each other.

Pipelines are installed in one of two ways:

* outermost stages wrap the whole application as Starlette middleware,
  through :class:`StageMiddleware`;
* per-route-group stages wrap each endpoint of a router, through the
  ``APIRoute`` subclass returned by :meth:`Pipeline.route_class`.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Tuple, Type

from fastapi import FastAPI, Request, Response
from fastapi.routing import APIRoute
from starlette.middleware.base import BaseHTTPMiddleware

Handler = Callable[[Request], Awaitable[Response]]


class Stage(ABC):
    """One step of a request pipeline."""

    @abstractmethod
    async def handle(self, request: Request, call_next: Handler) -> Response:
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


def _bind(stage: Stage, call_next: Handler) -> Handler:
    async def handler(request: Request) -> Response:
        return await stage.handle(request, call_next)

    return handler


class Pipeline:
    """An ordered, immutable list of stages. The first stage runs first."""

    def __init__(self, *stages: Stage):
        self._stages: Tuple[Stage, ...] = tuple(stages)

    @property
    def stages(self) -> Tuple[Stage, ...]:
        return self._stages

    def append(self, *stages: Stage) -> "Pipeline":
        return Pipeline(*self._stages, *stages)

    def wrap(self, endpoint: Handler) -> Handler:
        handler = endpoint
        for stage in reversed(self._stages):
            handler = _bind(stage, handler)
        return handler

    def install(self, app: FastAPI) -> None:
        """Install the stages as application middleware, first stage outermost."""
        # add_middleware prepends, so the last stage added ends up outermost
        for stage in reversed(self._stages):
            app.add_middleware(StageMiddleware, stage=stage)

    def route_class(self) -> Type[APIRoute]:
        """An APIRoute subclass that runs every endpoint through this pipeline."""
        pipeline = self

        class PipelineRoute(APIRoute):
            def get_route_handler(self) -> Handler:
                return pipeline.wrap(super().get_route_handler())

        return PipelineRoute

    def __len__(self) -> int:
        return len(self._stages)

    def __repr__(self) -> str:
        return f"Pipeline({', '.join(repr(stage) for stage in self._stages)})"


class StageMiddleware(BaseHTTPMiddleware):
    """Adapts a :class:`Stage` to Starlette's middleware interface."""

    def __init__(self, app, stage: Stage):
        super().__init__(app)
        self.stage = stage

    async def dispatch(self, request: Request, call_next):
        return await self.stage.handle(request, call_next)
