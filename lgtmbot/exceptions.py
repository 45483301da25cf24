"""lgtmbot exception classes."""


class LGTMBotError(Exception):
    """Base exception for all lgtmbot errors."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class ConfigurationError(LGTMBotError):
    """Raised when the bot configuration is invalid or missing."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class RequestFormatError(LGTMBotError):
    """Raised when an inbound webhook request cannot be accepted.

    ``status_code`` is the HTTP status the webhook server answers with.
    """

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__("INVALID_REQUEST", message)


class InvalidContentTypeError(RequestFormatError):
    """Raised when the webhook request does not declare a JSON body."""

    def __init__(self) -> None:
        super().__init__("invalid content type")


class InvalidRequestError(RequestFormatError):
    """Raised when the webhook body is missing or is not a JSON object."""

    def __init__(self, message: str = "invalid request body") -> None:
        super().__init__(message)


class InvalidTokenError(RequestFormatError):
    """Raised when the ``X-Gitlab-Token`` header does not match."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("invalid webhook token")


class GitLabAPIError(LGTMBotError):
    """Raised when the GitLab API answers with an error status."""

    def __init__(
        self, code: str, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(code, message)
        self.status_code = status_code


class AuthenticationError(GitLabAPIError):
    """Raised when the private token is rejected (401)."""

    pass


class NotFoundError(GitLabAPIError):
    """Raised when the project or merge request does not exist (404)."""

    pass


class MergeConflictError(GitLabAPIError):
    """Raised when the merge request has conflicts and can not be merged (405)."""

    pass


class MergeNotAcceptableError(GitLabAPIError):
    """Raised when the merge request is already merged or closed (406)."""

    pass


class APIValidationError(GitLabAPIError):
    """Raised on other client errors (4xx)."""

    pass


class ServerError(GitLabAPIError):
    """Raised on server errors (5xx) and connection failures."""

    pass
