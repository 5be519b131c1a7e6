"""Rendering of command results as tables or structured documents."""

import json
from collections.abc import Iterable, Sequence
from typing import Any

import yaml
from rich.console import Console
from rich.measure import Measurement
from rich.table import Table

from rosa.core.models import (
    AccountRole,
    Cluster,
    IdentityProvider,
    IdentityProviderType,
    OIDCConfig,
)

OUTPUT_FORMATS = ("json", "yaml")
DEFAULT_PASSWORD_TYPES = frozenset({IdentityProviderType.HTPASSWD})

CONSOLE_HOST_SEGMENT = "console-openshift-console"
OAUTH_HOST_SEGMENT = "oauth-openshift"

_UNBOUNDED_WIDTH = 1_000_000


def print_structured(data: Any, fmt: str, console: Console | None = None) -> None:
    """Print data as JSON or YAML.

    Raises:
        ValueError: If the format is unknown
    """
    if fmt == "json":
        text = json.dumps(data, indent=2)
    elif fmt == "yaml":
        text = yaml.safe_dump(data, sort_keys=False).rstrip("\n")
    else:
        raise ValueError(f"Invalid output format '{fmt}'. Allowed values are [{' '.join(OUTPUT_FORMATS)}]")

    console = console or Console()
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


def new_table(*headers: str) -> Table:
    """Borderless, column aligned table."""
    table = Table(box=None, show_edge=False, pad_edge=False, header_style="bold")
    for header in headers:
        table.add_column(header, no_wrap=True, overflow="ignore")
    return table


def print_table(table: Table, console: Console | None = None) -> None:
    """Print a table without wrapping or truncating its cells."""
    console = console or Console()
    needed = Measurement.get(console, console.options.update_width(_UNBOUNDED_WIDTH), table).maximum
    if needed > console.width:
        console = Console(file=console.file, width=needed, highlight=False, color_system=console.color_system)
    console.print(table)


def get_auth_url(
    console_url: str,
    idp_name: str,
    idp_type: IdentityProviderType,
    password_types: Iterable[IdentityProviderType] = DEFAULT_PASSWORD_TYPES,
) -> str:
    """OAuth callback URL of an identity provider; empty for password types."""
    if idp_type in frozenset(password_types):
        return ""
    oauth_url = console_url.replace(CONSOLE_HOST_SEGMENT, OAUTH_HOST_SEGMENT, 1)
    return f"{oauth_url}/oauth2callback/{idp_name}"


def identity_providers_table(
    cluster: Cluster,
    idps: Sequence[IdentityProvider],
    password_types: Iterable[IdentityProviderType] = DEFAULT_PASSWORD_TYPES,
) -> Table:
    """Table of identity providers.

    A lone password provider has no auth URL, so the column is dropped.
    """
    password_types = frozenset(password_types)
    if len(idps) == 1 and idps[0].type in password_types:
        table = new_table("NAME", "TYPE")
    else:
        table = new_table("NAME", "TYPE", "AUTH URL")

    for idp in idps:
        row = [
            idp.name,
            idp.type.display_name,
            get_auth_url(cluster.console_url, idp.name, idp.type, password_types),
        ]
        table.add_row(*row[: len(table.columns)])
    return table


def oidc_configs_table(configs: Sequence[OIDCConfig]) -> Table:
    table = new_table("ID", "MANAGED", "ISSUER URL", "SECRET ARN")
    for config in configs:
        table.add_row(config.id, str(config.managed).lower(), config.issuer_url, config.secret_arn)
    return table


def account_roles_table(roles: Sequence[AccountRole]) -> Table:
    table = new_table("ROLE NAME", "ROLE TYPE", "ROLE ARN", "OPENSHIFT VERSION", "AWS MANAGED")
    for role in roles:
        table.add_row(
            role.role_name,
            role.role_type,
            role.role_arn,
            role.version,
            "Yes" if role.managed_policy else "No",
        )
    return table
