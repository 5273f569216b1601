"""Exceptions surfaced to the host by the analysis and dispatch pipelines."""

from __future__ import annotations


class AnalysisError(RuntimeError):
    """Base class for failures while analyzing a CI log."""


class MissingCredential(AnalysisError):
    """Raised when no API key is configured for the analysis endpoint."""

    def __init__(self) -> None:
        super().__init__("MiniMax API key is missing")


class RequestFailed(AnalysisError):
    """Raised when the analysis request never produced a response."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"request failed: {detail}")


class HttpError(AnalysisError):
    """Raised when the analysis endpoint answers with a non-success status."""

    def __init__(self, status: int, body_prefix: str) -> None:
        self.status = status
        self.body_prefix = body_prefix
        super().__init__(f"HTTP {status}: {body_prefix}")


class MalformedResponse(AnalysisError):
    """Raised when the response body is not valid JSON."""

    def __init__(self, detail: str, body_prefix: str) -> None:
        self.detail = detail
        self.body_prefix = body_prefix
        super().__init__(
            f"response is not valid JSON: {detail}, raw response: {body_prefix}"
        )


class UnexpectedShape(AnalysisError):
    """Raised when a JSON response matches none of the known provider formats."""

    def __init__(self, document: str) -> None:
        self.document = document
        super().__init__(f"Unexpected response: {document}")


class DispatchError(RuntimeError):
    """Base class for failures while handing a command to a terminal."""


class EmptyTemplate(DispatchError):
    """Raised when the CLI command template is blank."""

    def __init__(self) -> None:
        super().__init__("CLI command template is empty")


class UnsupportedPlatform(DispatchError):
    """Raised when no terminal automation exists for the current platform."""

    def __init__(self, platform: str) -> None:
        self.platform = platform
        super().__init__(
            f"open_cli is only available on macOS (running on {platform})"
        )


class LaunchFailed(DispatchError):
    """Raised when the terminal automation process cannot be spawned."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"failed to launch terminal: {detail}")


class GitHubError(RuntimeError):
    """Raised when a GitHub API call fails or returns an unexpected payload."""


class StoreError(RuntimeError):
    """Raised when the tracked-PR file cannot be read."""


__all__ = [
    "AnalysisError",
    "MissingCredential",
    "RequestFailed",
    "HttpError",
    "MalformedResponse",
    "UnexpectedShape",
    "DispatchError",
    "EmptyTemplate",
    "UnsupportedPlatform",
    "LaunchFailed",
    "GitHubError",
    "StoreError",
]
