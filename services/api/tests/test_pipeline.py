"""
Where: services/api/tests/test_pipeline.py
What: Stage ordering, short-circuiting and the pipeline safety net.
"""

from services.api.core.exceptions import UnauthorizedError
from services.api.core.pipeline import Pipeline, Stage
from services.api.models.context import RequestContext
from services.api.models.response import json_response


class RecordingStage(Stage):
    def __init__(self, name, trail, short_circuit=False):
        self.name = name
        self.trail = trail
        self.short_circuit = short_circuit

    def process(self, context, next):
        self.trail.append(f"{self.name}:in")
        if self.short_circuit:
            return json_response({"stopped_by": self.name}, status_code=418)
        response = next(context)
        self.trail.append(f"{self.name}:out")
        return response


def _terminal(trail):
    def terminal(context):
        trail.append("terminal")
        return json_response({"ok": True})

    return terminal


def test_stages_run_in_order_around_terminal():
    trail = []
    pipeline = Pipeline(
        [RecordingStage("a", trail), RecordingStage("b", trail), RecordingStage("c", trail)],
        _terminal(trail),
    )

    response = pipeline.handle(RequestContext.build("GET", "/"))

    assert response.body == {"ok": True}
    assert trail == ["a:in", "b:in", "c:in", "terminal", "c:out", "b:out", "a:out"]
    assert pipeline.stage_names == ("a", "b", "c")


def test_short_circuit_skips_later_stages_and_terminal():
    trail = []
    pipeline = Pipeline(
        [
            RecordingStage("a", trail),
            RecordingStage("b", trail, short_circuit=True),
            RecordingStage("c", trail),
        ],
        _terminal(trail),
    )

    response = pipeline.handle(RequestContext.build("GET", "/"))

    assert response.status_code == 418
    assert response.body == {"stopped_by": "b"}
    assert trail == ["a:in", "b:in", "a:out"]


def test_each_request_gets_a_fresh_cursor():
    trail = []
    pipeline = Pipeline([RecordingStage("a", trail)], _terminal(trail))

    pipeline.handle(RequestContext.build("GET", "/"))
    pipeline.handle(RequestContext.build("GET", "/"))

    assert trail.count("terminal") == 2


def test_api_error_from_terminal_becomes_response():
    def terminal(context):
        raise UnauthorizedError()

    response = Pipeline([], terminal).handle(RequestContext.build("GET", "/"))

    assert response.status_code == 401
    assert response.body == {"error": "Invalid API key"}


def test_unexpected_error_becomes_500(caplog):
    def terminal(context):
        raise KeyError("missing")

    response = Pipeline([], terminal).handle(RequestContext.build("GET", "/boom"))

    assert response.status_code == 500
    assert response.body == {"error": "Internal Server Error"}
    assert any("Unhandled error in pipeline" in r.message for r in caplog.records)


def test_application_pipeline_order(client):
    pipeline = client.app.state.pipeline

    assert pipeline.stage_names == (
        "cors",
        "metrics",
        "access_log",
        "body_decoder",
        "authorization",
    )
