from solcheck.models.upstream import INVALID_JSON, RATE_LIMITED


class CheckerError(Exception):
    pass


class ValidationError(CheckerError):
    """Malformed address; no upstream call is made."""


class FatalConfigurationError(CheckerError):
    """Required configuration is missing; the check cannot run at all."""


class UpstreamError(CheckerError):
    """Soft per-source failure. Never escapes an UpstreamClient."""

    kind = "request_failed"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def error_kind(self) -> str:
        return f"{self.kind}: {self.detail}" if self.detail else self.kind


class RateLimitedError(UpstreamError):
    kind = RATE_LIMITED

    @property
    def error_kind(self) -> str:
        return self.kind


class UpstreamTransportError(UpstreamError):
    kind = "request_failed"


class UpstreamParseError(UpstreamError):
    kind = INVALID_JSON

    @property
    def error_kind(self) -> str:
        return self.kind
