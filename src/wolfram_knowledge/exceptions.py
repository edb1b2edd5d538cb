"""Error types raised by the Wolfram knowledge service.

Semantic misses (an unsuccessful query, no solution pod, an empty fact set)
are NOT exceptions: they come back as result values with ``success=False``
or as placeholder strings. Exceptions are reserved for configuration
problems, unusable input and transport-level failures.
"""


class WolframError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(WolframError, ValueError):
    """A required setting is missing or a setting failed validation."""


class InvalidQueryError(WolframError, ValueError):
    """The query text is empty or unusable and was never sent."""


class WolframAPIError(WolframError):
    """An outbound call to the Wolfram|Alpha API failed.

    Covers connectivity failures, non-success HTTP statuses, undecodable
    payloads and explicit remote failures. The underlying cause is chained
    via ``raise ... from``.

    Attributes:
        status_code: HTTP status of the failed response, if there was one
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
