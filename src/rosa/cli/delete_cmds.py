"""`rosa delete` commands."""

import click

from rosa.cli.context import (
    RosaContext,
    handle_errors,
    pass_rosa_context,
    resolve_mode,
    yes_option,
)
from rosa.services.oidc_config import MODE_MANUAL, OIDCConfigService, validate_mode


@click.group(name="delete")
def delete_group() -> None:
    """Delete a specific resource."""


@delete_group.command(
    name="oidc-config",
    epilog="""\b
Examples:
  # Delete an OIDC config and its AWS resources
  rosa delete oidc-config --oidc-config-id <id> --mode auto -y""",
)
@click.option("--oidc-config-id", required=True, help="ID of the OIDC config to delete.")
@click.option("--mode", "-m", default="", help="How to perform the operation. Valid options are: auto, manual")
@yes_option
@pass_rosa_context
@handle_errors
def delete_oidc_config(rosa_ctx: RosaContext, oidc_config_id: str, mode: str, yes: bool) -> None:
    """Delete an OIDC config and the AWS resources backing it."""
    reporter = rosa_ctx.reporter
    validate_mode(mode)
    mode = resolve_mode(mode, yes)

    if not yes:
        click.confirm(f"Delete OIDC config '{oidc_config_id}'?", abort=True)

    service = OIDCConfigService(rosa_ctx.ocm_client, rosa_ctx.aws_client)
    result = service.delete(oidc_config_id, mode)

    if mode == MODE_MANUAL:
        reporter.info("Run the following commands to delete the AWS resources of the OIDC config:")
        for command in result.commands:
            click.echo(command)
    else:
        if result.provider_arn:
            reporter.info(f"Successfully deleted the OIDC provider '{result.provider_arn}'")
        else:
            reporter.warn(f"No OIDC provider found for issuer '{result.config.issuer_url}'")
        if not result.config.managed:
            reporter.info("Successfully deleted the S3 bucket and secret of the OIDC config")

    reporter.info(f"Successfully deleted OIDC config '{oidc_config_id}'")
