"""
Error taxonomy for plant analysis requests.

Every failure that ends a request is a `PlantAnalysisError` carrying the HTTP
status and the message shown to the client. Upstream details (status code,
response body) are kept on the exception for server-side logs only.
"""
from typing import Dict, Optional


class PlantAnalysisError(Exception):
    status_code: int = 500
    message: str = "Unknown error occurred"
    kind: str = "unexpected_failure"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_payload(self) -> Dict[str, str]:
        return {"error": self.message}


class MissingImageError(PlantAnalysisError):
    status_code = 400
    message = "Image is required"
    kind = "missing_image"


class UnsupportedImageError(PlantAnalysisError):
    status_code = 400
    message = "Only image files are supported"
    kind = "unsupported_image"


class ImageTooLargeError(PlantAnalysisError):
    status_code = 413
    message = "Image is too large"
    kind = "image_too_large"


class NotConfiguredError(PlantAnalysisError):
    status_code = 500
    message = "AI service not configured"
    kind = "not_configured"


class RateLimitedError(PlantAnalysisError):
    status_code = 429
    message = "Rate limit exceeded. Please try again in a moment."
    kind = "rate_limited"


class QuotaExceededError(PlantAnalysisError):
    status_code = 402
    message = "Usage limit reached. Please check your account."
    kind = "quota_exceeded"


class UpstreamError(PlantAnalysisError):
    status_code = 500
    message = "Failed to analyze plant"
    kind = "upstream_error"

    def __init__(self, *, upstream_status: Optional[int] = None, upstream_body: Optional[str] = None, detail: Optional[str] = None):
        super().__init__()
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.message} (upstream_status={self.upstream_status}, detail={self.detail})"


class MalformedUpstreamResponseError(UpstreamError):
    kind = "malformed_upstream_response"
