"""Failure kinds raised by the trivia proxy.

Everything here is raised by the domain code and mapped to HTTP responses in
``main.py``. An unknown or already-answered question is not an error; the
coordinator returns ``None`` for it.
"""


class TriviaError(Exception):
    """Base class for every failure the proxy raises on purpose."""

    code = "trivia_error"


class InvalidArgumentError(TriviaError, ValueError):
    """A question id or answer text was empty or whitespace-only."""

    code = "invalid_argument"


class NullInputError(InvalidArgumentError):
    """A question id or answer text was missing entirely."""

    code = "null_input"


class UnrecognizedValueError(TriviaError, ValueError):
    """Upstream sent a difficulty or type token outside the known set."""

    code = "unrecognized_value"

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"Unrecognised {field} value: '{value}'.")
        self.field = field
        self.value = value


class UpstreamUnavailableError(TriviaError):
    """The question provider could not be reached or answered with an error."""

    code = "upstream_unavailable"


class UpstreamRateLimitedError(UpstreamUnavailableError):
    code = "upstream_rate_limited"


class UpstreamRejectedError(UpstreamUnavailableError):
    """The provider refused the filter parameters it was sent."""

    code = "upstream_rejected"


class EmptyOrMalformedResponseError(TriviaError):
    """The provider's body was empty or did not parse as the expected envelope."""

    code = "empty_or_malformed_response"
