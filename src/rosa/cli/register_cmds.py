"""`rosa register` commands."""

import click

from rosa.cli.context import RosaContext, handle_errors, pass_rosa_context
from rosa.services.oidc_config import OIDCConfigService


@click.group(name="register")
def register_group() -> None:
    """Register a resource created outside of the CLI."""


@register_group.command(name="oidc-config")
@click.option("--issuer-url", required=True, help="Issuer URL of the OIDC config.")
@click.option("--secret-arn", required=True, help="Secrets Manager ARN of the private key.")
@click.option("--installer-role-arn", required=True, help="Installer role ARN.")
@pass_rosa_context
@handle_errors
def register_oidc_config(
    rosa_ctx: RosaContext, issuer_url: str, secret_arn: str, installer_role_arn: str
) -> None:
    """Register an unmanaged OIDC config whose AWS resources were created manually."""
    service = OIDCConfigService(rosa_ctx.ocm_client, rosa_ctx.aws_client)
    config = service.register(issuer_url, secret_arn, installer_role_arn)
    rosa_ctx.reporter.info(f"Registered OIDC config with ID '{config.id}'")
