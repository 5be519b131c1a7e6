"""`rosa list` commands."""

import click

from rosa.cli.context import RosaContext, handle_errors, output_option, pass_rosa_context
from rosa.output import (
    account_roles_table,
    identity_providers_table,
    oidc_configs_table,
    print_structured,
    print_table,
)
from rosa.services.account_roles import list_account_roles
from rosa.services.identity_providers import list_identity_providers
from rosa.services.oidc_config import list_oidc_configs


@click.group(name="list")
def list_group() -> None:
    """List all resources of a specific type."""


@list_group.command(
    name="idps",
    epilog="""\b
Examples:
  # List all identity providers on a cluster named "mycluster"
  rosa list idps --cluster=mycluster""",
)
@click.option(
    "--cluster",
    "-c",
    "cluster_key",
    required=True,
    help="Name or ID of the cluster.",
)
@output_option
@pass_rosa_context
@handle_errors
def list_idps(rosa_ctx: RosaContext, cluster_key: str, output: str | None) -> None:
    """List identity providers for a cluster."""
    reporter = rosa_ctx.reporter
    cluster, idps = list_identity_providers(rosa_ctx.ocm_client, cluster_key)

    if output:
        print_structured([idp.to_api() for idp in idps], output)
        return

    if not idps:
        reporter.info(f"There are no identity providers configured for cluster '{cluster_key}'")
        return

    print_table(identity_providers_table(cluster, idps, rosa_ctx.config.idp.password_types))


@list_group.command(name="oidc-config")
@output_option
@pass_rosa_context
@handle_errors
def list_oidc_config(rosa_ctx: RosaContext, output: str | None) -> None:
    """List OIDC configs for the current organization."""
    configs = list_oidc_configs(rosa_ctx.ocm_client)

    if output:
        print_structured([config.to_api() for config in configs], output)
        return

    if not configs:
        rosa_ctx.reporter.info("There are no OIDC configs for your organization")
        return

    print_table(oidc_configs_table(configs))


@list_group.command(name="account-roles")
@click.option("--prefix", default=None, help="List only roles whose name starts with this prefix.")
@output_option
@pass_rosa_context
@handle_errors
def list_account_roles_cmd(rosa_ctx: RosaContext, prefix: str | None, output: str | None) -> None:
    """List account-wide IAM roles."""
    roles = list_account_roles(rosa_ctx.aws_client, prefix=prefix)

    if output:
        print_structured([role.model_dump(mode="json") for role in roles], output)
        return

    if not roles:
        rosa_ctx.reporter.info("There are no account roles available")
        return

    print_table(account_roles_table(roles))
