"""
Request pipeline.

An ordered sequence of stages sharing the ``process(context, next)``
contract, driven by a cursor over the stage tuple. The terminal callable
(normally the router) produces the response once every stage has passed
the request on.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Sequence, Tuple

from ..models.context import RequestContext
from ..models.response import ApiResponse, error_response
from .exceptions import ApiError

logger = logging.getLogger("api.pipeline")

NextStage = Callable[[RequestContext], ApiResponse]
Terminal = Callable[[RequestContext], ApiResponse]


class Stage(ABC):
    """One step of the middleware sequence."""

    name: str = "stage"

    @abstractmethod
    def process(self, context: RequestContext, next: NextStage) -> ApiResponse:
        """Handle the request, either answering it or delegating to ``next``."""


class _Cursor:
    """Walks the stage tuple for a single request."""

    __slots__ = ("_stages", "_terminal", "_index")

    def __init__(self, stages: Tuple[Stage, ...], terminal: Terminal):
        self._stages = stages
        self._terminal = terminal
        self._index = 0

    def __call__(self, context: RequestContext) -> ApiResponse:
        if self._index >= len(self._stages):
            return self._terminal(context)
        stage = self._stages[self._index]
        self._index += 1
        return stage.process(context, self)


class Pipeline:
    """
    Fixed middleware pipeline.

    Stages are frozen at construction; a request can only move forward
    through them, never re-enter an earlier one.
    """

    def __init__(self, stages: Sequence[Stage], terminal: Terminal):
        self._stages: Tuple[Stage, ...] = tuple(stages)
        self._terminal = terminal

    @property
    def stages(self) -> Tuple[Stage, ...]:
        return self._stages

    @property
    def stage_names(self) -> Tuple[str, ...]:
        return tuple(stage.name for stage in self._stages)

    def handle(self, context: RequestContext) -> ApiResponse:
        """Run one request through every stage and the terminal."""
        try:
            return _Cursor(self._stages, self._terminal)(context)
        except ApiError as e:
            return e.to_response()
        except Exception as e:
            logger.exception(
                f"Unhandled error in pipeline: {e}",
                extra={"method": context.method, "path": context.path},
            )
            return error_response("Internal Server Error", 500)
