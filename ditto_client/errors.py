"""Exceptions raised by the Ditto client."""


class DittoError(Exception):
    """Base exception for all Ditto client failures."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class QueryValidationError(DittoError, ValueError):
    """Raised when a statement cannot be built from the given arguments."""


class DittoHTTPError(DittoError):
    """Exception raised when the Ditto execute endpoint returns a non-2xx status."""

    BODY_LIMIT = 256
    QUERY_LIMIT = 200

    def __init__(self, status_code: int, body: str, query: str):
        self.status_code = status_code
        self.body = _truncate(body, self.BODY_LIMIT).strip()
        self.query = _truncate(query, self.QUERY_LIMIT)
        super().__init__(
            f"ditto http {status_code}: {self.body} | query: {self.query}",
            details={"status_code": status_code},
        )


class DittoResponseError(DittoError):
    """Raised when a successful response does not carry a JSON body."""


class CommandError(DittoError):
    """An external command exited non-zero or could not be started."""

    def __init__(
        self,
        command: str,
        args: list[str],
        error: str,
        output: str = "",
        returncode: int | None = None,
    ):
        self.command = command
        self.args_list = list(args)
        self.error = error
        self.output = output
        self.returncode = returncode
        super().__init__(
            f"{command} {' '.join(args)}: {error}: {output}",
            details={"returncode": returncode},
        )


class ContainerError(DittoError):
    """A container lifecycle step failed."""


def _truncate(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


__all__ = [
    "DittoError",
    "QueryValidationError",
    "DittoHTTPError",
    "DittoResponseError",
    "CommandError",
    "ContainerError",
]
