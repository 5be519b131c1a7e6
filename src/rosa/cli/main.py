"""Main CLI entry point for ROSA."""

import click

from rosa import __version__
from rosa.cli.context import RosaContext
from rosa.cli.create_cmds import create_group
from rosa.cli.delete_cmds import delete_group
from rosa.cli.list_cmds import list_group
from rosa.cli.register_cmds import register_group
from rosa.core.config import LoggingConfig
from rosa.utils.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    envvar="ROSA_CONFIG",
    help="Path to configuration file (default ~/.rosa/config.yaml)",
)
@click.option("--debug", is_flag=True, help="Enable debug mode.")
@click.option("--profile", default=None, help="Use a specific AWS profile from your credential file.")
@click.option("--region", default=None, help="Use a specific AWS region, overriding the AWS_REGION environment variable.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    debug: bool,
    profile: str | None,
    region: str | None,
) -> None:
    """Command line tool for Red Hat OpenShift Service on AWS (ROSA)."""
    setup_logging(level="DEBUG" if debug else LoggingConfig().level)

    if not isinstance(ctx.obj, RosaContext):
        ctx.obj = RosaContext(
            config_path=config_path,
            debug=debug,
            profile=profile,
            region=region,
        )
    ctx.call_on_close(ctx.obj.cleanup)


cli.add_command(list_group)
cli.add_command(create_group)
cli.add_command(delete_group)
cli.add_command(register_group)


if __name__ == "__main__":
    cli()
