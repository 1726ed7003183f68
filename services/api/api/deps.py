"""
Dependency Injection for the API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..core.pipeline import Pipeline


def get_pipeline(request: Request) -> Pipeline:
    return request.app.state.pipeline


# Service Dependency Type Aliases
PipelineDep = Annotated[Pipeline, Depends(get_pipeline)]
