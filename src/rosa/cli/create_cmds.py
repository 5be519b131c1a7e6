"""`rosa create` commands."""

from pathlib import Path

import click

from rosa.cli.context import (
    RosaContext,
    handle_errors,
    pass_rosa_context,
    resolve_mode,
    yes_option,
)
from rosa.core.models import CreatedOIDCConfig
from rosa.services.oidc_config import (
    MODE_AUTO,
    CreateOIDCConfigOptions,
    OIDCConfigService,
    validate_create_options,
    write_raw_files,
)


@click.group(name="create")
def create_group() -> None:
    """Create a resource from stdin."""


@create_group.command(
    name="oidc-config",
    epilog="""\b
Examples:
  # Create a managed OIDC config
  rosa create oidc-config --mode auto -y

  # Create an unmanaged OIDC config hosted in your account
  rosa create oidc-config --mode auto --managed=false --prefix myprefix \\
    --installer-role-arn arn:aws:iam::123456789012:role/ManagedOpenShift-Installer-Role""",
)
@click.option("--mode", "-m", default="", help="How to perform the operation. Valid options are: auto, manual")
@click.option(
    "--prefix",
    default="",
    help="Prefix for the bucket and secret of an unmanaged OIDC config (15 characters max).",
)
@click.option(
    "--installer-role-arn",
    default="",
    help="Installer role ARN used to register an unmanaged OIDC config.",
)
@click.option(
    "--managed",
    type=click.BOOL,
    is_flag=False,
    flag_value=True,
    default=True,
    show_default=True,
    help="Whether the OIDC config is managed by Red Hat (--managed=false for a user hosted one).",
)
@click.option(
    "--raw-files",
    is_flag=True,
    help="Write the key material and issuer documents to the current directory only.",
)
@yes_option
@pass_rosa_context
@handle_errors
def create_oidc_config(
    rosa_ctx: RosaContext,
    mode: str,
    prefix: str,
    installer_role_arn: str,
    managed: bool,
    raw_files: bool,
    yes: bool,
) -> None:
    """Create an OIDC config compliant with OIDC protocol."""
    reporter = rosa_ctx.reporter
    options = CreateOIDCConfigOptions(
        mode=mode,
        prefix=prefix,
        installer_role_arn=installer_role_arn,
        managed=managed,
        raw_files=raw_files,
    )
    if not options.raw_files and not options.mode:
        # Flag conflicts are reported before asking for anything
        validate_create_options(options.model_copy(update={"mode": MODE_AUTO}))
        options.mode = resolve_mode(options.mode, yes)

    validate_create_options(options)

    if options.raw_files:
        result = write_raw_files(options.prefix, rosa_ctx.config.aws.region, Path.cwd())
        _report_created(rosa_ctx, options, result)
        return

    kind = "managed" if options.managed else "unmanaged"
    if options.mode == MODE_AUTO and not yes:
        click.confirm(f"Create the {kind} OIDC config in your AWS account?", abort=True)

    reporter.info(f"Setting up {kind} OIDC configuration")
    service = OIDCConfigService(rosa_ctx.ocm_client, rosa_ctx.aws_client)
    result = service.create(options)
    _report_created(rosa_ctx, options, result)


def _report_created(
    rosa_ctx: RosaContext, options: CreateOIDCConfigOptions, result: CreatedOIDCConfig
) -> None:
    reporter = rosa_ctx.reporter

    if result.files:
        reporter.info("Files written to the current directory:")
        for path in result.files:
            click.echo(f"  {path}")
    if result.commands:
        reporter.info("Run the following commands to finish the OIDC config setup:")
        for command in result.commands:
            click.echo(command)
    if result.provider_arn:
        reporter.info(f"Created OIDC provider with ARN '{result.provider_arn}'")
    if result.config is not None:
        reporter.info(f"Registered OIDC config with ID '{result.config.id}'")
        if options.mode == MODE_AUTO:
            reporter.info(
                "To create a cluster with this OIDC config, run: "
                f"rosa create cluster --sts --oidc-config-id {result.config.id}"
            )
