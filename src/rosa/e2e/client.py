"""Drive the CLI like a user would and read back its text output."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from click.testing import CliRunner

from rosa.e2e.parser import TextData, parse_table
from rosa.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Combined stdout/stderr and exit code of one CLI invocation."""

    args: list[str]
    output: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def text_data(self) -> TextData:
        return TextData(self.output)

    def __str__(self) -> str:
        return self.output


@dataclass
class OIDCConfigRecord:
    """One row of `rosa list oidc-config`."""

    id: str = ""
    managed: str = ""
    issuer_url: str = ""
    secret_arn: str = ""


@dataclass
class OIDCConfigList:
    records: list[OIDCConfigRecord] = field(default_factory=list)

    def oidc_config(self, oidc_config_id: str) -> OIDCConfigRecord:
        """Record with this ID, or an empty record when absent."""
        for record in self.records:
            if record.id == oidc_config_id:
                return record
        return OIDCConfigRecord()


@dataclass
class AccountRoleRecord:
    """One row of `rosa list account-roles`."""

    role_name: str = ""
    role_type: str = ""
    role_arn: str = ""
    openshift_version: str = ""
    aws_managed: str = ""


@dataclass
class AccountRoleList:
    records: list[AccountRoleRecord] = field(default_factory=list)

    def installer_role(self, prefix: str, hosted_cp: bool = False) -> AccountRoleRecord | None:
        for record in self.records:
            if record.role_type != "Installer" or not record.role_name.startswith(prefix):
                continue
            if ("HCP-ROSA" in record.role_name) == hosted_cp:
                return record
        return None


Runner = Callable[[Sequence[str]], CommandResult]


class RosaClient:
    """Runs CLI commands either as a subprocess or in-process."""

    def __init__(self, binary: str = "rosa", env: dict[str, str] | None = None, runner: Runner | None = None):
        self.binary = binary
        self.env = env
        self._runner = runner or self._run_subprocess
        self.ocm_resource = OCMResourceService(self)

    @classmethod
    def in_process(cls, obj: Any = None) -> RosaClient:
        """Client that invokes the click application directly.

        Args:
            obj: Context object handed to the root command (e.g. a RosaContext
                with pre-built clients)
        """
        from rosa.cli.main import cli

        runner = CliRunner()

        def run(args: Sequence[str]) -> CommandResult:
            result = runner.invoke(cli, list(args), obj=obj)
            return CommandResult(args=list(args), output=result.output, exit_code=result.exit_code)

        return cls(runner=run)

    def _run_subprocess(self, args: Sequence[str]) -> CommandResult:
        completed = subprocess.run(
            [self.binary, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            env={**os.environ, **(self.env or {})},
            check=False,
        )
        return CommandResult(args=list(args), output=completed.stdout, exit_code=completed.returncode)

    def run(self, *args: str) -> CommandResult:
        logger.debug("running_rosa_command", args=list(args))
        result = self._runner(args)
        logger.debug("rosa_command_finished", args=list(args), exit_code=result.exit_code)
        return result


class OCMResourceService:
    """Resource commands used by the end-to-end scenarios."""

    def __init__(self, client: RosaClient):
        self.client = client

    def create_oidc_config(self, *flags: str) -> CommandResult:
        return self.client.run("create", "oidc-config", *flags)

    def delete_oidc_config(self, *flags: str) -> CommandResult:
        return self.client.run("delete", "oidc-config", *flags)

    def list_oidc_config(self) -> tuple[OIDCConfigList, CommandResult]:
        result = self.client.run("list", "oidc-config")
        records = [
            OIDCConfigRecord(
                id=row.get("ID", ""),
                managed=row.get("MANAGED", ""),
                issuer_url=row.get("ISSUER URL", ""),
                secret_arn=row.get("SECRET ARN", ""),
            )
            for row in parse_table(result.output)
        ] if result.ok else []
        return OIDCConfigList(records), result

    def list_account_role(self, *flags: str) -> tuple[AccountRoleList, CommandResult]:
        result = self.client.run("list", "account-roles", *flags)
        records = [
            AccountRoleRecord(
                role_name=row.get("ROLE NAME", ""),
                role_type=row.get("ROLE TYPE", ""),
                role_arn=row.get("ROLE ARN", ""),
                openshift_version=row.get("OPENSHIFT VERSION", ""),
                aws_managed=row.get("AWS MANAGED", ""),
            )
            for row in parse_table(result.output)
        ] if result.ok else []
        return AccountRoleList(records), result

    def get_oidc_id_from_list(self, provider_id: str) -> str:
        """ID of the listed config matching an OIDC provider ID.

        Raises:
            LookupError: If no listed config matches
        """
        oidc_configs, result = self.list_oidc_config()
        if not result.ok:
            raise LookupError(f"Failed to list OIDC configs: {result.text_data().tip()}")

        for record in oidc_configs.records:
            if record.id == provider_id or provider_id in record.issuer_url:
                return record.id
        raise LookupError(f"No OIDC config matches provider ID '{provider_id}'")
