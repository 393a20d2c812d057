"""Exception hierarchy for asacli.

All exceptions inherit from :class:`AsaError`, which carries an
:class:`ErrorKind` and an ``exit_code`` mapped to a constant from
:mod:`asacli.exit_codes`.  The top-level handler in :func:`asacli.app.main`
catches ``AsaError``, prints a single ``Error: <message>`` line and exits
with the matching code.  Each layer wraps lower-level failures with
``raise ... from exc`` so the originating cause stays attached.

Subclass hierarchy::

    AsaError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 3)
    +-- TokenExchangeError  (exit 4)
    +-- TransportError      (exit 5)
    +-- APIError            (exit 6)
    +-- AmbiguousOrgError   (exit 7)
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from asacli.exit_codes import (
    EXIT_AMBIGUOUS_ORG,
    EXIT_API_ERROR,
    EXIT_CONFIG_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_TOKEN_EXCHANGE,
    EXIT_TRANSPORT_ERROR,
)

if TYPE_CHECKING:
    from asacli.models import ErrorEntry


class ErrorKind(str, enum.Enum):
    """Failure category attached to every :class:`AsaError`."""

    GENERIC = "generic"
    USAGE = "usage"
    CONFIGURATION = "configuration"
    TOKEN_EXCHANGE = "token-exchange"
    TRANSPORT = "transport"
    API_ERROR = "api-error"
    AMBIGUOUS_ORG = "ambiguous-org"


class AsaError(Exception):
    """Base exception for all asacli errors.

    Every subclass sets a class-level ``kind`` and ``exit_code``.  The entry
    point catches this type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    kind: ErrorKind = ErrorKind.GENERIC
    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AsaError):
    """Raised for invalid CLI arguments."""

    kind = ErrorKind.USAGE
    exit_code = EXIT_INVALID_USAGE


class ConfigError(AsaError):
    """Raised for missing credentials, bad profiles, or an unreadable private key."""

    kind = ErrorKind.CONFIGURATION
    exit_code = EXIT_CONFIG_ERROR


class TokenExchangeError(AsaError):
    """Raised when the identity provider rejects or garbles the token exchange."""

    kind = ErrorKind.TOKEN_EXCHANGE
    exit_code = EXIT_TOKEN_EXCHANGE


class TransportError(AsaError):
    """Raised on network-level failures (timeout, DNS, connection refused, TLS)."""

    kind = ErrorKind.TRANSPORT
    exit_code = EXIT_TRANSPORT_ERROR


class APIError(AsaError):
    """Raised when a resource call returns a non-2xx status.

    Args:
        message: Aggregated error text.
        status_code: The HTTP status of the failed response.
        entries: Parsed entries of the provider's error envelope, empty when
            the body could not be parsed.
    """

    kind = ErrorKind.API_ERROR
    exit_code = EXIT_API_ERROR

    def __init__(
        self,
        message: str,
        status_code: int,
        entries: list[ErrorEntry] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.entries = entries or []


class AmbiguousOrgError(AsaError):
    """Raised when the organization cannot be resolved to exactly one account."""

    kind = ErrorKind.AMBIGUOUS_ORG
    exit_code = EXIT_AMBIGUOUS_ORG
