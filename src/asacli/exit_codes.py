"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to one error kind and is referenced by the corresponding
:class:`~asacli.exceptions.AsaError` subclass.  Shell wrappers can inspect
the exit code to tell a bad configuration from a rejected token or an API
error without parsing stderr.

Example::

    $ asa-cli campaigns list
    $ echo $?
    4   # EXIT_TOKEN_EXCHANGE -- the identity provider rejected the assertion
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIG_ERROR = 3
"""Credentials are missing or the private key cannot be read."""

EXIT_TOKEN_EXCHANGE = 4
"""The identity provider refused or mangled the token exchange."""

EXIT_TRANSPORT_ERROR = 5
"""A network-level error occurred (timeout, DNS failure, connection refused, TLS)."""

EXIT_API_ERROR = 6
"""The API answered with a non-2xx status."""

EXIT_AMBIGUOUS_ORG = 7
"""No organization id was configured and the account does not have exactly one."""
