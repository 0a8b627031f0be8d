"""Custom exception types used across the GitHub MCP server."""

from __future__ import annotations

from typing import Optional


class GitHubAPIError(Exception):
    """Raised when a GitHub API call fails.

    ``status_code`` is kept for logging and classification; callers only ever
    see the message text.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthError(GitHubAPIError):
    """Raised for missing credentials or a 401/403 response."""

    pass


class GitHubNotFoundError(GitHubAPIError):
    pass


class GitHubRateLimitError(GitHubAPIError):
    """Raised when GitHub responds with a rate limit error."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        retry_after: Optional[str] = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class UnknownToolError(LookupError):
    """Raised when a call names a tool that is not registered."""

    def __init__(self, tool: str) -> None:
        super().__init__(f"Unknown tool: {tool}")
        self.tool = tool


class ToolInputValidationError(ValueError):
    """Raised when tool arguments do not match the declared input schema.

    Kept to a single line that names the tool and, when known, the field.
    """

    def __init__(self, tool: str, message: str, *, field: Optional[str] = None) -> None:
        if field:
            text = f"Invalid arguments for tool {tool!r}: {message} (field={field})"
        else:
            text = f"Invalid arguments for tool {tool!r}: {message}"
        super().__init__(text)
        self.tool = tool
        self.field = field


__all__ = [
    "GitHubAPIError",
    "GitHubAuthError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "ToolInputValidationError",
    "UnknownToolError",
]
