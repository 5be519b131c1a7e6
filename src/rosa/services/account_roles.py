"""Account-wide IAM role lookups."""

from rosa.clients.aws_client import AWSClient
from rosa.core.models import AccountRole
from rosa.utils.logging import get_logger

logger = get_logger(__name__)

ROLE_TYPE_TAG = "rosa_role_type"
VERSION_TAG = "rosa_openshift_version"
MANAGED_POLICIES_TAG = "rosa_managed_policies"
RED_HAT_MANAGED_TAG = "red-hat-managed"

# Role name suffix -> displayed role type
ROLE_SUFFIXES = {
    "-Installer-Role": "Installer",
    "-Support-Role": "Support",
    "-ControlPlane-Role": "Control plane",
    "-Worker-Role": "Worker",
}
ROLE_TYPE_TAG_VALUES = {
    "installer": "Installer",
    "support": "Support",
    "instance_controlplane": "Control plane",
    "instance_worker": "Worker",
}


def _role_type_from_name(role_name: str) -> str | None:
    for suffix, role_type in ROLE_SUFFIXES.items():
        if role_name.endswith(suffix):
            return role_type
    return None


def list_account_roles(aws: AWSClient, prefix: str | None = None) -> list[AccountRole]:
    """List the ROSA account roles in the current AWS account.

    Args:
        aws: AWS client
        prefix: Only return roles whose name starts with this prefix

    Returns:
        Account roles sorted by name
    """
    account_roles = []
    for role in aws.list_roles():
        role_name = role["RoleName"]
        role_type = _role_type_from_name(role_name)
        if role_type is None:
            continue
        if prefix and not role_name.startswith(prefix):
            continue

        tags = aws.get_role_tags(role_name)
        if tags.get(RED_HAT_MANAGED_TAG) != "true":
            continue

        account_roles.append(
            AccountRole(
                role_name=role_name,
                role_arn=role["Arn"],
                role_type=ROLE_TYPE_TAG_VALUES.get(tags.get(ROLE_TYPE_TAG, ""), role_type),
                version=tags.get(VERSION_TAG, ""),
                managed_policy=tags.get(MANAGED_POLICIES_TAG) == "true",
            )
        )

    logger.debug("account_roles_listed", count=len(account_roles), prefix=prefix)
    return sorted(account_roles, key=lambda r: r.role_name)


def find_installer_role(
    roles: list[AccountRole], prefix: str, hosted_cp: bool = False
) -> AccountRole | None:
    """Pick the installer role created with a given prefix."""
    for role in roles:
        if role.role_type != "Installer" or not role.role_name.startswith(prefix):
            continue
        if role.is_hosted_cp == hosted_cp:
            return role
    return None
