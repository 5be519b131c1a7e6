"""AWS client for IAM, S3, STS and Secrets Manager operations."""

import json
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound

from rosa.core.exceptions import AWSError, ConfigurationError
from rosa.utils.logging import get_logger

logger = get_logger(__name__)

OIDC_CLIENT_IDS = ("openshift", "sts.amazonaws.com")
RED_HAT_MANAGED_TAG = {"Key": "red-hat-managed", "Value": "true"}


# BotoCoreError: credential, profile and connection failures
AWS_ERRORS = (ClientError, BotoCoreError)


def _error_code(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "Unknown")
    return type(error).__name__


def _describe(error: Exception) -> str:
    if isinstance(error, ClientError):
        return _error_code(error)
    return str(error)


class AWSClient:
    """AWS client used by the ROSA CLI."""

    def __init__(
        self,
        region: str = "us-east-1",
        profile: str | None = None,
        session: boto3.Session | None = None,
    ):
        """Initialize AWS client.

        Args:
            region: AWS region
            profile: AWS profile name (optional)
            session: Existing boto3 session (optional, overrides profile)

        Raises:
            ConfigurationError: If the profile is unknown or the session cannot be set up
        """
        self.region = region
        self.profile = profile

        try:
            if session:
                self.session = session
            elif profile:
                self.session = boto3.Session(profile_name=profile, region_name=region)
            else:
                self.session = boto3.Session(region_name=region)

            self.sts = self.session.client("sts")
            self.iam = self.session.client("iam")
            self.s3 = self.session.client("s3")
            self.secretsmanager = self.session.client("secretsmanager")
        except ProfileNotFound as e:
            raise ConfigurationError(f"AWS profile '{profile}' not found") from e
        except BotoCoreError as e:
            raise ConfigurationError(f"Failed to create AWS session: {e}") from e

        logger.debug("aws_client_initialized", region=region, profile=profile)

    def get_caller_identity(self) -> dict[str, str]:
        """Return the account and ARN of the current credentials.

        Raises:
            AWSError: If credentials are missing or invalid
        """
        try:
            response = self.sts.get_caller_identity()
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            logger.error("caller_identity_failed", error_code=error_code)
            raise AWSError(f"Failed to get AWS caller identity: {_describe(e)}", error_code) from e
        return {"account": response["Account"], "arn": response["Arn"]}

    def create_oidc_provider(
        self,
        issuer_url: str,
        thumbprint: str,
        client_ids: tuple[str, ...] = OIDC_CLIENT_IDS,
    ) -> str:
        """Create an IAM OIDC provider for an issuer.

        Returns:
            ARN of the created provider

        Raises:
            AWSError: If the provider cannot be created
        """
        try:
            logger.debug("creating_oidc_provider", issuer_url=issuer_url)
            response = self.iam.create_open_id_connect_provider(
                Url=issuer_url,
                ClientIDList=list(client_ids),
                ThumbprintList=[thumbprint],
                Tags=[RED_HAT_MANAGED_TAG],
            )
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            logger.error("oidc_provider_creation_failed", issuer_url=issuer_url, error_code=error_code)
            raise AWSError(
                f"Failed to create OIDC provider for '{issuer_url}': {_describe(e)}", error_code
            ) from e

        provider_arn = response["OpenIDConnectProviderArn"]
        logger.info("oidc_provider_created", provider_arn=provider_arn)
        return provider_arn

    def find_oidc_provider_arn(self, issuer_url: str) -> str | None:
        """Find the IAM OIDC provider registered for an issuer URL."""
        issuer_host = issuer_url.removeprefix("https://").rstrip("/")
        try:
            response = self.iam.list_open_id_connect_providers()
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            raise AWSError(f"Failed to list OIDC providers: {_describe(e)}", error_code) from e

        for provider in response.get("OpenIDConnectProviderList", []):
            arn = provider["Arn"]
            if arn.endswith(f":oidc-provider/{issuer_host}"):
                return arn
        return None

    def delete_oidc_provider(self, provider_arn: str) -> None:
        try:
            self.iam.delete_open_id_connect_provider(OpenIDConnectProviderArn=provider_arn)
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            logger.error("oidc_provider_deletion_failed", provider_arn=provider_arn, error_code=error_code)
            raise AWSError(
                f"Failed to delete OIDC provider '{provider_arn}': {_describe(e)}", error_code
            ) from e
        logger.info("oidc_provider_deleted", provider_arn=provider_arn)

    def create_public_bucket(self, bucket_name: str) -> None:
        """Create an S3 bucket whose objects are world readable.

        Raises:
            AWSError: If any step of the bucket setup fails
        """
        try:
            logger.debug("creating_bucket", bucket_name=bucket_name, region=self.region)
            kwargs: dict[str, Any] = {"Bucket": bucket_name}
            if self.region != "us-east-1":
                kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
            self.s3.create_bucket(**kwargs)

            self.s3.put_bucket_tagging(
                Bucket=bucket_name,
                Tagging={"TagSet": [RED_HAT_MANAGED_TAG]},
            )
            self.s3.put_public_access_block(
                Bucket=bucket_name,
                PublicAccessBlockConfiguration={
                    "BlockPublicAcls": True,
                    "IgnorePublicAcls": True,
                    "BlockPublicPolicy": False,
                    "RestrictPublicBuckets": False,
                },
            )
            policy = {
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Effect": "Allow",
                        "Principal": "*",
                        "Action": ["s3:GetObject"],
                        "Resource": [f"arn:aws:s3:::{bucket_name}/*"],
                    }
                ],
            }
            self.s3.put_bucket_policy(Bucket=bucket_name, Policy=json.dumps(policy))
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            logger.error("bucket_creation_failed", bucket_name=bucket_name, error_code=error_code)
            raise AWSError(f"Failed to create bucket '{bucket_name}': {_describe(e)}", error_code) from e

        logger.info("bucket_created", bucket_name=bucket_name)

    def put_object(
        self,
        bucket_name: str,
        key: str,
        body: str,
        content_type: str = "application/json",
    ) -> None:
        try:
            self.s3.put_object(Bucket=bucket_name, Key=key, Body=body.encode("utf-8"), ContentType=content_type)
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            raise AWSError(
                f"Failed to upload '{key}' to bucket '{bucket_name}': {_describe(e)}", error_code
            ) from e
        logger.debug("object_uploaded", bucket_name=bucket_name, key=key)

    def delete_bucket(self, bucket_name: str) -> None:
        """Empty and delete a bucket. A missing bucket is not an error."""
        try:
            paginator = self.s3.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket_name):
                objects = [{"Key": obj["Key"]} for obj in page.get("Contents", [])]
                if objects:
                    self.s3.delete_objects(Bucket=bucket_name, Delete={"Objects": objects})
            self.s3.delete_bucket(Bucket=bucket_name)
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            if error_code == "NoSuchBucket":
                logger.warning("bucket_not_found", bucket_name=bucket_name)
                return
            logger.error("bucket_deletion_failed", bucket_name=bucket_name, error_code=error_code)
            raise AWSError(f"Failed to delete bucket '{bucket_name}': {_describe(e)}", error_code) from e
        logger.info("bucket_deleted", bucket_name=bucket_name)

    def create_secret(self, secret_name: str, secret_value: str, description: str = "") -> str:
        """Store a secret in Secrets Manager.

        Returns:
            ARN of the created secret

        Raises:
            AWSError: If the secret cannot be created
        """
        try:
            logger.debug("creating_secret", secret_name=secret_name)
            response = self.secretsmanager.create_secret(
                Name=secret_name,
                Description=description,
                SecretString=secret_value,
                Tags=[RED_HAT_MANAGED_TAG],
            )
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            logger.error("secret_creation_failed", secret_name=secret_name, error_code=error_code)
            raise AWSError(f"Failed to store secret '{secret_name}': {_describe(e)}", error_code) from e

        logger.info("secret_created", secret_name=secret_name)
        return response["ARN"]

    def delete_secret(self, secret_id: str, force_delete: bool = True) -> None:
        """Delete a secret from Secrets Manager. A missing secret is not an error.

        Args:
            secret_id: Name or ARN of the secret
            force_delete: If True, delete immediately without recovery window
        """
        kwargs: dict[str, Any] = {"SecretId": secret_id}
        if force_delete:
            kwargs["ForceDeleteWithoutRecovery"] = True
        else:
            kwargs["RecoveryWindowInDays"] = 7

        try:
            self.secretsmanager.delete_secret(**kwargs)
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            if error_code == "ResourceNotFoundException":
                logger.warning("secret_not_found", secret_id=secret_id)
                return
            logger.error("secret_deletion_failed", secret_id=secret_id, error_code=error_code)
            raise AWSError(f"Failed to delete secret '{secret_id}': {_describe(e)}", error_code) from e
        logger.info("secret_deleted", secret_id=secret_id)

    def list_roles(self) -> list[dict[str, Any]]:
        """List every IAM role in the account."""
        roles: list[dict[str, Any]] = []
        try:
            paginator = self.iam.get_paginator("list_roles")
            for page in paginator.paginate():
                roles.extend(page.get("Roles", []))
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            raise AWSError(f"Failed to list IAM roles: {_describe(e)}", error_code) from e
        return roles

    def get_role_tags(self, role_name: str) -> dict[str, str]:
        try:
            response = self.iam.list_role_tags(RoleName=role_name)
        except AWS_ERRORS as e:
            error_code = _error_code(e)
            raise AWSError(f"Failed to get tags of role '{role_name}': {_describe(e)}", error_code) from e
        return {tag["Key"]: tag["Value"] for tag in response.get("Tags", [])}
