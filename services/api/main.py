"""
User API - operational endpoints and a mock user API.

FastAPI only provides the ASGI shell: a single catch-all route hands every
request to the middleware pipeline, which ends in our own router.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from services.common.core.request_context import clear_request_id, set_request_id

from .api.deps import PipelineDep
from .api.routes import build_router
from .config import ApiConfig, load_config
from .core.logging_config import setup_logging
from .core.pipeline import Pipeline
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import REQUEST_ID_HEADER, build_stages
from .models.context import RequestContext
from .models.response import ApiResponse
from .services.metrics import MetricsCollector
from .services.user_store import MockUserRepository, UserRepository

# Every method reaches the pipeline so unknown ones get 404, not 405.
PIPELINE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]


async def to_request_context(request: Request) -> RequestContext:
    """Convert a Starlette request into the pipeline's RequestContext."""
    return RequestContext.build(
        method=request.method,
        path=request.url.path,
        headers=request.headers.items(),
        # Last value wins on duplicate keys.
        query_params=dict(request.query_params),
        raw_body=await request.body(),
        client=request.client.host if request.client else None,
    )


def to_starlette_response(result: ApiResponse, include_body: bool = True) -> Response:
    if not include_body:
        return Response(
            status_code=result.status_code, media_type=result.media_type, headers=result.headers
        )
    if result.is_empty:
        return Response(status_code=result.status_code, headers=result.headers)
    if result.is_json:
        return JSONResponse(
            status_code=result.status_code, content=result.body, headers=result.headers
        )
    return Response(
        content=result.body,
        status_code=result.status_code,
        media_type=result.media_type,
        headers=result.headers,
    )


def create_app(
    api_config: Optional[ApiConfig] = None,
    repository: Optional[UserRepository] = None,
    metrics: Optional[MetricsCollector] = None,
) -> FastAPI:
    """
    Assemble the application.

    Configuration is resolved once here and injected everywhere else.
    """
    api_config = api_config or load_config()
    metrics = metrics or MetricsCollector()
    router, docs = build_router(api_config, metrics, repository or MockUserRepository())
    pipeline = Pipeline(build_stages(api_config, router, metrics), router.dispatch)

    def lifespan(app: FastAPI):
        return manage_lifespan(app, api_config)

    app = FastAPI(
        title="User API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = api_config
    app.state.router = router
    app.state.docs = docs
    app.state.metrics = metrics
    app.state.pipeline = pipeline

    register_exception_handlers(app)

    @app.api_route("/{path:path}", methods=PIPELINE_METHODS, include_in_schema=False)
    async def pipeline_handler(request: Request, path: str, pipeline: PipelineDep):
        """
        Catch-all route: run the request through the middleware pipeline.
        """
        set_request_id(request.headers.get(REQUEST_ID_HEADER))
        try:
            context = await to_request_context(request)
            return to_starlette_response(
                pipeline.handle(context), include_body=request.method != "HEAD"
            )
        finally:
            clear_request_id()

    return app


config = load_config()
setup_logging(config)
app = create_app(config)
