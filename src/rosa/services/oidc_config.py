"""OIDC config lifecycle operations.

Managed configs are hosted by Red Hat: only the OCM record and the IAM OIDC
provider are created. Unmanaged configs are backed by resources in the user's
account: an S3 bucket serving the discovery document and key set, and a
Secrets Manager secret holding the private signing key.
"""

import re
import secrets
import shlex
import string
from pathlib import Path

from pydantic import BaseModel

from rosa.clients.aws_client import OIDC_CLIENT_IDS, AWSClient
from rosa.clients.ocm_client import OCMClient
from rosa.core.exceptions import OCMError, OIDCConfigInUseError, ValidationError
from rosa.core.models import CreatedOIDCConfig, DeletedOIDCConfig, OIDCConfig
from rosa.oidc.keys import (
    DISCOVERY_DOCUMENT_KEY,
    JWKS_KEY,
    build_discovery_document,
    build_jwks,
    generate_key_pair,
    to_json,
)
from rosa.oidc.thumbprint import fetch_thumbprint
from rosa.utils.logging import get_logger

logger = get_logger(__name__)

MODE_AUTO = "auto"
MODE_MANUAL = "manual"
ALLOWED_MODES = (MODE_AUTO, MODE_MANUAL)
INVALID_MODE_MESSAGE = f"Invalid mode. Allowed values are [{' '.join(ALLOWED_MODES)}]"

MAX_PREFIX_LENGTH = 15
DEFAULT_PREFIX = "oidc"
PREFIX_RE = re.compile(r"^[a-z]([-a-z0-9]*[a-z0-9])?$")
ROLE_ARN_RE = re.compile(r"^arn:aws[\w-]*:iam::\d{12}:role/[\w+=,.@/-]+$")

DISCOVERY_DOCUMENT_FILE = "discovery.json"
JWKS_FILE = "jwks.json"


class CreateOIDCConfigOptions(BaseModel):
    """Flags of `create oidc-config`."""

    mode: str = ""
    prefix: str = ""
    installer_role_arn: str = ""
    managed: bool = True
    raw_files: bool = False


def validate_mode(mode: str) -> None:
    if mode and mode not in ALLOWED_MODES:
        raise ValidationError(INVALID_MODE_MESSAGE)


def validate_create_options(options: CreateOIDCConfigOptions) -> None:
    """Reject flag combinations that cannot be honoured.

    Runs before any remote call.

    Raises:
        ValidationError: On the first conflicting or malformed flag
    """
    validate_mode(options.mode)

    if options.raw_files and options.mode:
        raise ValidationError("--raw-files param is not supported alongside --mode param")
    if options.raw_files and options.managed:
        raise ValidationError("--raw-files param is not supported for managed OIDC config")
    if options.managed and options.prefix:
        raise ValidationError("prefix param is not supported for managed OIDC config")
    if options.managed and options.installer_role_arn:
        raise ValidationError("role-arn param is not supported for managed OIDC config")

    if options.prefix:
        if len(options.prefix) > MAX_PREFIX_LENGTH:
            raise ValidationError(
                f"length of prefix is limited to {MAX_PREFIX_LENGTH} characters"
            )
        if not PREFIX_RE.match(options.prefix):
            raise ValidationError(
                "prefix must start with a letter and contain only lowercase "
                "alphanumeric characters and '-'"
            )

    if options.installer_role_arn and not ROLE_ARN_RE.match(options.installer_role_arn):
        raise ValidationError(
            f"installer-role-arn '{options.installer_role_arn}' is not a valid IAM role ARN"
        )
    if not options.managed and not options.raw_files and not options.installer_role_arn:
        raise ValidationError("installer-role-arn is required for unmanaged OIDC config")
    if not options.mode and not options.raw_files:
        raise ValidationError(f"mode is required; allowed values are [{' '.join(ALLOWED_MODES)}]")


def random_label(length: int = 4) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def bucket_issuer_url(bucket_name: str, region: str) -> str:
    return f"https://{bucket_name}.s3.{region}.amazonaws.com"


def bucket_from_issuer_url(issuer_url: str) -> str:
    """Bucket name of an S3 hosted issuer URL."""
    host = issuer_url.removeprefix("https://").split("/", 1)[0]
    return host.split(".s3.", 1)[0]


def provider_id_from_arn(provider_arn: str) -> str:
    """Trailing segment of an OIDC provider ARN.

    For managed configs this is the config ID; for unmanaged configs it is the
    issuer host, which is contained in the config's issuer URL.
    """
    return provider_arn.rsplit("/", 1)[-1]


def list_oidc_configs(ocm: OCMClient) -> list[OIDCConfig]:
    try:
        return ocm.list_oidc_configs()
    except OCMError as e:
        raise OCMError(f"Failed to list OIDC configs: {e}", e.status_code, e.reason) from e


def find_config_by_provider_id(configs: list[OIDCConfig], provider_id: str) -> OIDCConfig | None:
    for config in configs:
        if config.id == provider_id or provider_id in config.issuer_url:
            return config
    return None


def _write(path: Path, content: str | bytes, mode: int = 0o644) -> str:
    if isinstance(content, str):
        path.write_text(content)
    else:
        path.write_bytes(content)
    path.chmod(mode)
    return str(path)


def write_raw_files(prefix: str, region: str, output_dir: Path) -> CreatedOIDCConfig:
    """Write key material and issuer documents for a user hosted issuer.

    No remote call is made.
    """
    bucket_name = f"{prefix or DEFAULT_PREFIX}-{random_label()}"
    issuer_url = bucket_issuer_url(bucket_name, region)
    keys = generate_key_pair()

    files = [
        _write(output_dir / f"{bucket_name}-private-key.pem", keys.private_pem, 0o600),
        _write(output_dir / f"{bucket_name}-public-key.pem", keys.public_pem),
        _write(
            output_dir / f"{bucket_name}-{DISCOVERY_DOCUMENT_FILE}",
            to_json(build_discovery_document(issuer_url)),
        ),
        _write(output_dir / f"{bucket_name}-{JWKS_FILE}", to_json(build_jwks(keys.public_pem))),
    ]
    logger.info("oidc_raw_files_written", bucket_name=bucket_name, files=files)
    return CreatedOIDCConfig(files=files)


class OIDCConfigService:
    """Creates, lists and deletes OIDC configs."""

    def __init__(self, ocm: OCMClient, aws: AWSClient, output_dir: Path | None = None):
        self.ocm = ocm
        self.aws = aws
        self.output_dir = output_dir or Path.cwd()

    def list_configs(self) -> list[OIDCConfig]:
        return list_oidc_configs(self.ocm)

    def create(self, options: CreateOIDCConfigOptions) -> CreatedOIDCConfig:
        """Create an OIDC config.

        Raises:
            ValidationError: If the options conflict (nothing is created)
            OCMError, AWSError: If a remote step fails
        """
        validate_create_options(options)

        if options.raw_files:
            return write_raw_files(options.prefix, self.aws.region, self.output_dir)
        if options.managed:
            return self._create_managed(options.mode)
        return self._create_unmanaged(options)

    def _create_managed(self, mode: str) -> CreatedOIDCConfig:
        config = self.ocm.create_oidc_config(managed=True)
        thumbprint = fetch_thumbprint(config.issuer_url)

        if mode == MODE_MANUAL:
            return CreatedOIDCConfig(
                config=config,
                commands=[self._provider_command(config.issuer_url, thumbprint)],
            )

        provider_arn = self.aws.create_oidc_provider(config.issuer_url, thumbprint)
        return CreatedOIDCConfig(config=config, provider_arn=provider_arn)

    def _create_unmanaged(self, options: CreateOIDCConfigOptions) -> CreatedOIDCConfig:
        bucket_name = f"{options.prefix or DEFAULT_PREFIX}-{random_label()}"
        issuer_url = bucket_issuer_url(bucket_name, self.aws.region)
        secret_name = f"{bucket_name}-private-key"
        keys = generate_key_pair()
        discovery_document = to_json(build_discovery_document(issuer_url))
        jwks = to_json(build_jwks(keys.public_pem))

        logger.info("creating_unmanaged_oidc_config", bucket_name=bucket_name, mode=options.mode)

        if options.mode == MODE_MANUAL:
            return self._unmanaged_manual(
                bucket_name, issuer_url, secret_name, keys.private_pem, discovery_document, jwks
            )

        self.aws.create_public_bucket(bucket_name)
        self.aws.put_object(bucket_name, DISCOVERY_DOCUMENT_KEY, discovery_document)
        self.aws.put_object(bucket_name, JWKS_KEY, jwks)
        secret_arn = self.aws.create_secret(
            secret_name,
            keys.private_pem.decode("utf-8"),
            description="Private key of the OIDC issuer used for service account tokens",
        )

        config = self.ocm.create_oidc_config(
            managed=False,
            issuer_url=issuer_url,
            secret_arn=secret_arn,
            installer_role_arn=options.installer_role_arn,
        )
        thumbprint = fetch_thumbprint(issuer_url)
        provider_arn = self.aws.create_oidc_provider(issuer_url, thumbprint)
        return CreatedOIDCConfig(config=config, provider_arn=provider_arn)

    def _unmanaged_manual(
        self,
        bucket_name: str,
        issuer_url: str,
        secret_name: str,
        private_pem: bytes,
        discovery_document: str,
        jwks: str,
    ) -> CreatedOIDCConfig:
        private_key_file = _write(self.output_dir / f"{secret_name}.pem", private_pem, 0o600)
        discovery_file = _write(
            self.output_dir / f"{bucket_name}-{DISCOVERY_DOCUMENT_FILE}", discovery_document
        )
        jwks_file = _write(self.output_dir / f"{bucket_name}-{JWKS_FILE}", jwks)

        location = ""
        if self.aws.region != "us-east-1":
            location = f" --create-bucket-configuration LocationConstraint={self.aws.region}"
        q = shlex.quote
        commands = [
            f"aws s3api create-bucket --bucket {q(bucket_name)} --region {self.aws.region}{location}",
            f"aws s3api put-object --bucket {q(bucket_name)} --key {DISCOVERY_DOCUMENT_KEY} "
            f"--body {q(discovery_file)}",
            f"aws s3api put-object --bucket {q(bucket_name)} --key {JWKS_KEY} --body {q(jwks_file)}",
            f"aws secretsmanager create-secret --name {q(secret_name)} "
            f"--secret-string {q('file://' + private_key_file)} --region {self.aws.region}",
            "rosa register oidc-config --issuer-url "
            f"{issuer_url} --secret-arn <secret-arn> --installer-role-arn <installer-role-arn>",
        ]
        return CreatedOIDCConfig(
            commands=commands, files=[private_key_file, discovery_file, jwks_file]
        )

    def register(
        self, issuer_url: str, secret_arn: str, installer_role_arn: str
    ) -> OIDCConfig:
        """Register an unmanaged config whose resources were created manually."""
        if not issuer_url.startswith("https://"):
            raise ValidationError(f"issuer-url '{issuer_url}' must be an https URL")
        if not ROLE_ARN_RE.match(installer_role_arn):
            raise ValidationError(
                f"installer-role-arn '{installer_role_arn}' is not a valid IAM role ARN"
            )
        return self.ocm.create_oidc_config(
            managed=False,
            issuer_url=issuer_url,
            secret_arn=secret_arn,
            installer_role_arn=installer_role_arn,
        )

    def delete(self, oidc_config_id: str, mode: str = MODE_AUTO) -> DeletedOIDCConfig:
        """Delete an OIDC config and the AWS resources backing it.

        Raises:
            ValidationError: If the mode is unknown
            OIDCConfigNotFoundError: If no config has this ID
            OIDCConfigInUseError: If a cluster still uses the config
        """
        validate_mode(mode)
        mode = mode or MODE_AUTO

        config = self.ocm.get_oidc_config(oidc_config_id)
        if self.ocm.has_clusters_using_oidc_config(oidc_config_id):
            raise OIDCConfigInUseError(
                f"OIDC config '{oidc_config_id}' is in use by at least one cluster"
            )

        provider_arn = self.aws.find_oidc_provider_arn(config.issuer_url)

        if mode == MODE_MANUAL:
            commands = self._delete_commands(config, provider_arn)
            self.ocm.delete_oidc_config(oidc_config_id)
            return DeletedOIDCConfig(config=config, provider_arn=provider_arn or "", commands=commands)

        if provider_arn:
            self.aws.delete_oidc_provider(provider_arn)
        else:
            logger.warning("oidc_provider_not_found", issuer_url=config.issuer_url)

        if not config.managed:
            self.aws.delete_bucket(bucket_from_issuer_url(config.issuer_url))
            if config.secret_arn:
                self.aws.delete_secret(config.secret_arn)

        self.ocm.delete_oidc_config(oidc_config_id)
        return DeletedOIDCConfig(config=config, provider_arn=provider_arn or "")

    def _provider_command(self, issuer_url: str, thumbprint: str) -> str:
        return (
            f"aws iam create-open-id-connect-provider --url {issuer_url} "
            f"--client-id-list {' '.join(OIDC_CLIENT_IDS)} --thumbprint-list {thumbprint}"
        )

    def _delete_commands(self, config: OIDCConfig, provider_arn: str | None) -> list[str]:
        if provider_arn is None:
            account = self.aws.get_caller_identity()["account"]
            provider_arn = f"arn:aws:iam::{account}:oidc-provider/{config.issuer_host}"

        commands = [
            f"aws iam delete-open-id-connect-provider --open-id-connect-provider-arn {provider_arn}"
        ]
        if not config.managed:
            commands.append(f"aws s3 rb s3://{bucket_from_issuer_url(config.issuer_url)} --force")
            if config.secret_arn:
                commands.append(
                    f"aws secretsmanager delete-secret --secret-id {config.secret_arn} "
                    "--force-delete-without-recovery"
                )
        return commands
