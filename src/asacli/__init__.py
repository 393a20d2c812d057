"""asacli -- command-line client for the Apple Search Ads Campaign Management API.

The client authenticates as an API user with an ES256-signed client
assertion, caches the resulting access token per profile, and exposes the
campaign, ad group, keyword and reporting endpoints as CLI commands.

Typical workflow::

    asa-cli configure --client-id ... --team-id ... --key-id ... \\
        --private-key-path ~/keys/asa.pem
    asa-cli whoami
    asa-cli campaigns find --filter status=ENABLED --all

Modules:
    app: Typer application and CLI entry point.
    auth: Client assertion signing, token provider and authenticating transport.
    client: Envelope-unwrapping HTTP client and auto-paginator.
    config: XDG-aware configuration and credential profiles.
    exceptions: Exception hierarchy with exit-code mapping.
    models: Pydantic models shared across the package.
    output: stdout/stderr formatting system with Rich support.
    query: Filter and sort parsing for ``find`` commands.
    services: Thin per-resource endpoint wrappers.
    session: Per-invocation wiring and organization resolution.
"""

__version__ = "0.3.0"
