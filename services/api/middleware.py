"""
Where: services/api/middleware.py
What: Pipeline stages for CORS, metrics, access logging, body decoding and authorization.
Why: Isolate cross-cutting request concerns from app assembly and handlers.
"""

import json
import logging
import time

from services.common.core.request_context import get_request_id

from .config import ApiConfig
from .core.cors import CorsNegotiator, is_preflight
from .core.exceptions import MalformedBodyError, PayloadTooLargeError, UnauthorizedError
from .core.pipeline import NextStage, Stage
from .core.security import authorize
from .models.context import RequestContext
from .models.response import ApiResponse, empty_response
from .services.metrics import MetricsCollector
from .services.route_matcher import Router

logger = logging.getLogger("api.access")

REQUEST_ID_HEADER = "X-Request-Id"


class CorsStage(Stage):
    """
    Adds CORS headers to every response and answers preflights.

    OPTIONS requests to any path stop here with 200 and no body.
    """

    name = "cors"

    def __init__(self, negotiator: CorsNegotiator):
        self.negotiator = negotiator

    def process(self, context: RequestContext, next: NextStage) -> ApiResponse:
        cors_headers = self.negotiator.negotiate(context.header("Origin"))

        if is_preflight(context.http_method):
            response = empty_response(status_code=200)
        else:
            response = next(context)

        response.headers.update(cors_headers)
        return response


class MetricsStage(Stage):
    """Records method, route template, status and latency per request."""

    name = "metrics"

    def __init__(self, collector: MetricsCollector, router: Router):
        self.collector = collector
        self.router = router

    def process(self, context: RequestContext, next: NextStage) -> ApiResponse:
        start_time = time.perf_counter()
        self.router.resolve(context)

        response = next(context)

        self.collector.observe(
            context.method,
            context.route_path,
            response.status_code,
            time.perf_counter() - start_time,
        )
        return response


class AccessLogStage(Stage):
    """Structured access logging, one line per request."""

    name = "access_log"

    def process(self, context: RequestContext, next: NextStage) -> ApiResponse:
        start_time = time.perf_counter()

        response = next(context)

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        request_id = get_request_id()
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id

        logger.info(
            f"{context.method} {context.path} {response.status_code}",
            extra={
                "method": context.method,
                "path": context.path,
                "route": context.route_path,
                "query_params": context.query_params,
                "status": response.status_code,
                "latency_ms": process_time_ms,
                "user_agent": context.header("user-agent"),
                "client_ip": context.client,
            },
        )
        return response


def _is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class BodyDecoderStage(Stage):
    """
    Parses JSON request bodies into ``context.body``.

    Non-JSON or empty bodies leave ``body`` as None.
    """

    name = "body_decoder"

    def __init__(self, max_body_bytes: int):
        self.max_body_bytes = max_body_bytes

    def process(self, context: RequestContext, next: NextStage) -> ApiResponse:
        if len(context.raw_body) > self.max_body_bytes:
            return PayloadTooLargeError().to_response()

        content_type = context.header("content-type", "")
        if context.raw_body and _is_json_content_type(content_type):
            try:
                context.body = json.loads(context.raw_body.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
                logger.warning(
                    f"Rejected malformed JSON body: {e}",
                    extra={"method": context.method, "path": context.path},
                )
                return MalformedBodyError().to_response()

        return next(context)


class AuthorizationStage(Stage):
    """
    Runs the authorization gate for routes that require it.

    Unmatched requests pass through so the router can answer 404.
    """

    name = "authorization"

    def __init__(self, config: ApiConfig, router: Router):
        self.config = config
        self.router = router

    def process(self, context: RequestContext, next: NextStage) -> ApiResponse:
        match = self.router.resolve(context)
        context.identity.environment = self.config.environment

        if match is None or not match.entry.requires_auth:
            return next(context)

        decision = authorize(context, self.config)
        if not decision.permitted:
            logger.warning(
                f"Authorization denied: {decision.reason}",
                extra={"method": context.method, "path": context.path},
            )
            return UnauthorizedError().to_response()

        context.identity.authorized = True
        return next(context)


def build_stages(config: ApiConfig, router: Router, collector: MetricsCollector) -> list:
    """The fixed stage order: CORS, metrics, access log, body decoder, authorization."""
    return [
        CorsStage(CorsNegotiator(config.environment, config.CORS_ALLOWED_ORIGINS)),
        MetricsStage(collector, router),
        AccessLogStage(),
        BodyDecoderStage(config.MAX_BODY_BYTES),
        AuthorizationStage(config, router),
    ]
