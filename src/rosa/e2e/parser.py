"""Extract structured data from the CLI's human readable output."""

import re

from rosa.services.oidc_config import provider_id_from_arn
from rosa.utils.reporter import DEBUG_PREFIX, ERROR_PREFIX, INFO_PREFIX, WARN_PREFIX

TIP_PREFIXES = tuple(p.strip() for p in (INFO_PREFIX, WARN_PREFIX, ERROR_PREFIX)) + ("ERR:",)
REPORTER_PREFIXES = TIP_PREFIXES + (DEBUG_PREFIX.strip(),)

OIDC_PROVIDER_ARN_RE = re.compile(r"arn:aws[\w-]*:iam::\d{12}:oidc-provider/[^\s'\"]+")
OIDC_CONFIG_ID_RE = re.compile(r"OIDC config with ID '([^']+)'")
HEADER_CELL_RE = re.compile(r"\S+(?: \S+)*")


class TextData:
    """Output of one CLI invocation."""

    def __init__(self, output: str):
        self.output = output

    def lines(self) -> list[str]:
        return self.output.splitlines()

    def tip(self) -> str:
        """Reporter messages (info, warnings and errors), one per line."""
        return "\n".join(
            line.strip() for line in self.lines() if line.strip().startswith(TIP_PREFIXES)
        )

    def body(self) -> str:
        """Everything that is not a reporter message."""
        return "\n".join(
            line for line in self.lines() if not line.strip().startswith(REPORTER_PREFIXES)
        )


def parse_table(text: str) -> list[dict[str, str]]:
    """Parse a column aligned table into one dict per row.

    Column bounds come from the header, so empty cells are kept as "".
    Reporter messages and blank lines are ignored.
    """
    lines = [
        line.rstrip()
        for line in text.splitlines()
        if line.strip() and not line.strip().startswith(REPORTER_PREFIXES)
    ]
    if not lines:
        return []

    header = lines[0]
    # Header names hold single spaces; columns are at least two spaces apart
    columns = [(m.start(), m.group()) for m in HEADER_CELL_RE.finditer(header)]

    rows = []
    for line in lines[1:]:
        row = {}
        for i, (start, name) in enumerate(columns):
            end = columns[i + 1][0] if i + 1 < len(columns) else None
            row[name] = line[start:end].strip()
        rows.append(row)
    return rows


def extract_oidc_provider_arn(text: str) -> str:
    """First OIDC provider ARN found in the text, or ""."""
    match = OIDC_PROVIDER_ARN_RE.search(text)
    return match.group(0) if match else ""


def extract_oidc_provider_id_from_arn(provider_arn: str) -> str:
    return provider_id_from_arn(provider_arn) if provider_arn else ""


def extract_oidc_config_id(text: str) -> str:
    match = OIDC_CONFIG_ID_RE.search(text)
    return match.group(1) if match else ""
