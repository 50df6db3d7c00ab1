"""Error taxonomy for the push pipelines.

Every orchestrator step either returns a value or raises one of the
``PipelineError`` subclasses below.  The HTTP layer renders them through
:func:`status_for`, the only place where an error kind becomes a status code.

Kind                Status  Meaning
------------------  ------  ------------------------------------------------
unauthorized        401     secret mismatch
soft_declined       202     well-formed but out-of-policy (tag, platform, track)
validation_failed   400     malformed commit / sha3 / filename / secret
upstream_failed     400     metadata, version or ledger failure
internal            500     anything else
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    SOFT_DECLINED = "soft_declined"
    VALIDATION_FAILED = "validation_failed"
    UPSTREAM_FAILED = "upstream_failed"
    INTERNAL = "internal"


_STATUS: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.SOFT_DECLINED: 202,
    ErrorKind.VALIDATION_FAILED: 400,
    ErrorKind.UPSTREAM_FAILED: 400,
    ErrorKind.INTERNAL: 500,
}


def status_for(kind: ErrorKind) -> int:
    """HTTP status code for an error kind."""
    return _STATUS[kind]


class PipelineError(Exception):
    """Base class for every outcome that ends a push without a transaction."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return status_for(self.kind)


class Unauthorized(PipelineError):
    kind = ErrorKind.UNAUTHORIZED


class SoftDeclined(PipelineError):
    kind = ErrorKind.SOFT_DECLINED


class ValidationFailed(PipelineError):
    kind = ErrorKind.VALIDATION_FAILED


class UpstreamFailed(PipelineError):
    kind = ErrorKind.UPSTREAM_FAILED


class InternalError(PipelineError):
    kind = ErrorKind.INTERNAL


def as_pipeline_error(exc: BaseException) -> PipelineError:
    """Return *exc* itself if already classified, else wrap it as internal."""
    if isinstance(exc, PipelineError):
        return exc
    return InternalError(str(exc) or type(exc).__name__)


# ── collaborator errors ─────────────────────────────────────────────


class ConfigError(ValueError):
    """Raised when the relay configuration is missing or malformed."""


class MetadataFetchError(RuntimeError):
    """Raised when a file cannot be read from the source host."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Unable to fetch {url}: {detail}")


class ManifestError(ValueError):
    """Raised when fetched release metadata cannot be interpreted."""


class LedgerRPCError(RuntimeError):
    """Raised when the ledger node fails or rejects a JSON-RPC call."""

    def __init__(self, method: str, detail: str, code: int | None = None) -> None:
        self.method = method
        self.code = code
        self.detail = detail
        suffix = f" (code {code})" if code is not None else ""
        super().__init__(f"{method} failed{suffix}: {detail}")


class ContractLookupError(RuntimeError):
    """Raised when a registry name does not resolve to a contract address."""
