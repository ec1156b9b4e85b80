"""
Custom exception classes and RFC 7807 error handling.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict
from fastapi import Request
from fastapi.responses import JSONResponse


class ErrorResponse(BaseModel):
    """RFC 7807 Problem Details response model."""
    type: str
    title: str
    status: int
    detail: str
    instance: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
    ):
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        super().__init__(detail)


class BadRequestError(AppException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=400,
            error_type="https://problems.example.com/bad-request",
            title="Bad Request",
            detail=detail,
        )


class InvalidUrlError(BadRequestError):
    """No YouTube video id could be extracted from the given URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(detail=f"Invalid YouTube URL: '{url}'.")


class UpstreamFetchError(AppException):
    """Upstream content could not be fetched even after all fallbacks."""

    def __init__(self, detail: str = "Failed to fetch video data."):
        super().__init__(
            status_code=502,
            error_type="https://problems.example.com/upstream-fetch-failed",
            title="Bad Gateway",
            detail=detail,
        )


class ProviderUnavailableError(Exception):
    """A content provider strategy produced no usable data."""


def create_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    title: str,
    detail: str,
) -> JSONResponse:
    """Create a RFC 7807 compliant JSON error response."""
    error = ErrorResponse(
        type=error_type,
        title=title,
        status=status_code,
        detail=detail,
        instance=str(request.url.path),
    )
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(),
        media_type="application/problem+json",
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle AppException and return RFC 7807 response."""
    return create_error_response(
        request=request,
        status_code=exc.status_code,
        error_type=exc.error_type,
        title=exc.title,
        detail=exc.detail,
    )
