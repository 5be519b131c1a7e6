"""Runtime context shared by CLI commands."""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import click

from rosa.core.exceptions import RosaError
from rosa.utils.logging import get_logger, log_error, setup_logging
from rosa.utils.reporter import Reporter

if TYPE_CHECKING:
    from rosa.clients.aws_client import AWSClient
    from rosa.clients.ocm_client import OCMClient
    from rosa.core.config import RosaConfig

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

OUTPUT_FORMATS = ("json", "yaml")


class RosaContext:
    """Configuration and authenticated clients for one CLI invocation.

    Clients are built on first use so that commands which never talk to OCM or
    AWS do not need credentials. Operations receive the clients explicitly.
    """

    def __init__(
        self,
        config_path: str | None = None,
        debug: bool = False,
        profile: str | None = None,
        region: str | None = None,
        config: RosaConfig | None = None,
        reporter: Reporter | None = None,
        ocm_client: OCMClient | None = None,
        aws_client: AWSClient | None = None,
    ):
        self.config_path = config_path
        self.debug = debug
        self.profile = profile
        self.region = region
        self.reporter = reporter or Reporter(debug=debug)
        self._config = config
        self._ocm_client = ocm_client
        self._aws_client = aws_client

    @property
    def config(self) -> RosaConfig:
        """Get or load config lazily, applying command line overrides."""
        if self._config is None:
            from rosa.core.config import RosaConfig

            config = RosaConfig.load(self.config_path)
            if self.profile:
                config.aws.profile = self.profile
            if self.region:
                config.aws.region = self.region
            if not self.debug:
                setup_logging(
                    level=config.logging.level,
                    format=config.logging.format,
                    output=config.logging.output,
                )
            self._config = config
        return self._config

    @property
    def ocm_client(self) -> OCMClient:
        """Get or create the clusters management client lazily."""
        if self._ocm_client is None:
            from rosa.clients.ocm_client import OCMClient

            self.reporter.debug(f"Connecting to OCM at '{self.config.ocm.url}'")
            self._ocm_client = OCMClient.from_config(self.config.ocm)
        return self._ocm_client

    @property
    def aws_client(self) -> AWSClient:
        """Get or create the AWS client lazily."""
        if self._aws_client is None:
            from rosa.clients.aws_client import AWSClient

            self.reporter.debug(f"Creating AWS client in region '{self.config.aws.region}'")
            self._aws_client = AWSClient(
                region=self.config.aws.region,
                profile=self.config.aws.profile,
            )
        return self._aws_client

    def cleanup(self) -> None:
        """Release client resources at the end of the invocation."""
        if self._ocm_client is not None:
            self._ocm_client.close()


pass_rosa_context = click.make_pass_decorator(RosaContext)


def handle_errors(func: F) -> F:
    """Report RosaError failures and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except RosaError as e:
            log_error(logger, e, operation=ctx.command_path)
            ctx.find_object(RosaContext).reporter.error(str(e))
            ctx.exit(1)

    return wrapper  # type: ignore[return-value]


def output_option(func: F) -> F:
    return click.option(
        "--output",
        "-o",
        type=click.Choice(OUTPUT_FORMATS),
        default=None,
        help="Output format. Allowed formats are [json yaml]",
    )(func)


def yes_option(func: F) -> F:
    return click.option(
        "--yes",
        "-y",
        is_flag=True,
        help="Automatically answer yes to confirm operation.",
    )(func)


def resolve_mode(mode: str, yes: bool) -> str:
    """Ask for a mode when none was given; `auto` when not interactive."""
    if mode:
        return mode
    if yes:
        return "auto"
    return click.prompt(
        "Mode",
        type=click.Choice(["auto", "manual"]),
        default="auto",
        show_choices=True,
    )
