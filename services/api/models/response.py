"""
Response models.

Standardizes the output of the request pipeline.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"
HTML_MEDIA_TYPE = "text/html; charset=utf-8"


class ApiResponse(BaseModel):
    """
    Result produced by the terminal handler.

    Used to decouple the pipeline from FastAPI Response objects.
    ``body`` is None for empty responses, a str for text payloads and
    any other JSON-compatible value for JSON payloads.
    """

    status_code: int = 200
    media_type: Optional[str] = None
    body: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.body is None

    @property
    def is_json(self) -> bool:
        return not self.is_empty and not isinstance(self.body, (str, bytes))


def json_response(content: Any, status_code: int = 200) -> ApiResponse:
    return ApiResponse(status_code=status_code, media_type=JSON_MEDIA_TYPE, body=content)


def text_response(
    content: str, status_code: int = 200, media_type: str = TEXT_MEDIA_TYPE
) -> ApiResponse:
    return ApiResponse(status_code=status_code, media_type=media_type, body=content)


def empty_response(status_code: int = 204) -> ApiResponse:
    return ApiResponse(status_code=status_code)


def error_response(message: str, status_code: int) -> ApiResponse:
    return json_response({"error": message}, status_code=status_code)
