"""Auth command -- print the bearer token.

``apiservice token`` materialises the token on first use (decoding the
configured token key into the secure store) and prints it, which is handy
for pasting into other HTTP tools.
"""

from __future__ import annotations

import typer

from apiservice.auth import FileSecureStore, TokenProvider
from apiservice.config import resolve_config
from apiservice.exceptions import ApiServiceError
from apiservice.output import error, print_data


def token_command() -> None:
    """Print the Authorization header value, creating it if needed."""
    try:
        config = resolve_config(require_base_url=False)
        token = TokenProvider(config.token_key, FileSecureStore()).get_token()
    except ApiServiceError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    print_data(token)
