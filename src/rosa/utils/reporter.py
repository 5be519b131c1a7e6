"""User-facing message reporter."""

from rich.console import Console

from rosa.utils.logging import get_logger

logger = get_logger(__name__)

INFO_PREFIX = "I: "
WARN_PREFIX = "W: "
ERROR_PREFIX = "E: "
DEBUG_PREFIX = "D: "


class Reporter:
    """Prints prefixed messages for the user.

    Info goes to stdout; warnings, errors and debug output go to stderr. The
    reporter never terminates the process; the command layer owns exit codes.
    """

    def __init__(
        self,
        debug: bool = False,
        stdout: Console | None = None,
        stderr: Console | None = None,
    ):
        self.debug_enabled = debug
        self.stdout = stdout or Console(soft_wrap=True, highlight=False)
        self.stderr = stderr or Console(stderr=True, soft_wrap=True, highlight=False)

    def _print(self, console: Console, prefix: str, message: str, style: str | None) -> None:
        console.print(f"{prefix}{message}", style=style, markup=False, emoji=False, highlight=False)

    def info(self, message: str) -> None:
        self._print(self.stdout, INFO_PREFIX, message, "green")

    def warn(self, message: str) -> None:
        self._print(self.stderr, WARN_PREFIX, message, "yellow")

    def error(self, message: str) -> None:
        logger.debug("reported_error", message=message)
        self._print(self.stderr, ERROR_PREFIX, message, "red")

    def debug(self, message: str) -> None:
        if self.debug_enabled:
            self._print(self.stderr, DEBUG_PREFIX, message, None)
