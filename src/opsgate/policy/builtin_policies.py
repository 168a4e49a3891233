"""Built-in infrastructure guardrails."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from opsgate.models.policy import EnforcementLevel, Policy, Severity
from opsgate.models.risk import RiskLevel
from opsgate.models.skill import Skill
from opsgate.policy.params import format_param, int_param

Clock = Callable[[], datetime]

PUBLIC_ACLS = frozenset({"public-read", "public-read-write"})
REQUIRED_TAGS = ("team", "env", "service")
OPEN_CIDRS = frozenset({"0.0.0.0/0", "::/0"})
SENSITIVE_PORTS = frozenset({"22", "3389", "3306", "5432"})
PRODUCTION_ENVS = ("production", "prod")
MAX_RESOURCES = 50
DEPLOY_WINDOW_HOURS = (9, 17)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def no_public_s3_policy() -> Policy:
    def check(skill: Skill, params: Mapping[str, Any], env: str) -> tuple[bool, str]:
        if "acl" not in params:
            return False, ""
        acl = format_param(params["acl"])
        if acl in PUBLIC_ACLS:
            return True, (
                f"S3 bucket cannot use public ACL '{acl}' — use a private ACL "
                "with CloudFront for public access"
            )
        return False, ""

    return Policy(
        name="no_public_s3",
        description="Deny S3 operations that could expose buckets publicly",
        enforcement=EnforcementLevel.DENY,
        severity=Severity.CRITICAL,
        applies_to=("aws.s3.*",),
        check=check,
    )


def require_tags_policy() -> Policy:
    def check(skill: Skill, params: Mapping[str, Any], env: str) -> tuple[bool, str]:
        if not params:
            return True, f"No tags provided — required tags: {', '.join(REQUIRED_TAGS)}"
        if "tags" not in params:
            return True, f"Missing required tags: {', '.join(REQUIRED_TAGS)}"
        tags = params["tags"]
        if not isinstance(tags, Mapping):
            return True, "Tags must be a key-value map"
        missing = [tag for tag in REQUIRED_TAGS if tag not in tags]
        if missing:
            return True, f"Missing required tags: {', '.join(missing)}"
        return False, ""

    return Policy(
        name="require_tags",
        description="Resources must have required tags (team, env, service)",
        enforcement=EnforcementLevel.WARN,
        severity=Severity.WARNING,
        applies_to=("aws.ec2.*", "aws.lambda.*", "gcp.gce.*", "azure.vm.*"),
        check=check,
    )


def no_wide_open_sg_policy() -> Policy:
    def check(skill: Skill, params: Mapping[str, Any], env: str) -> tuple[bool, str]:
        if "cidr" not in params:
            return False, ""
        cidr = format_param(params["cidr"])
        if cidr not in OPEN_CIDRS:
            return False, ""
        port = params.get("port")
        if port is not None and format_param(port) in SENSITIVE_PORTS:
            return True, f"Cannot open port {port} to {cidr} — use VPN or bastion host"
        return True, f"Inbound rule for {cidr} is too permissive — restrict to specific CIDR ranges"

    return Policy(
        name="no_wide_open_sg",
        description="Deny security group rules allowing 0.0.0.0/0 on sensitive ports",
        enforcement=EnforcementLevel.DENY,
        severity=Severity.CRITICAL,
        applies_to=("aws.sg.*",),
        check=check,
    )


def production_deploy_window_policy(clock: Optional[Clock] = None) -> Policy:
    clock = clock or _utc_now
    start, end = DEPLOY_WINDOW_HOURS

    def check(skill: Skill, params: Mapping[str, Any], env: str) -> tuple[bool, str]:
        now = clock().astimezone(timezone.utc)
        if now.weekday() >= 5:
            return True, f"Production deploys not recommended on weekends ({now:%A})"
        if now.hour < start or now.hour > end:
            return True, (
                "Production deploys not recommended outside business hours "
                f"(current: {now.hour:02d}:00 UTC, window: {start:02d}:00-{end:02d}:00)"
            )
        return False, ""

    return Policy(
        name="production_deploy_window",
        description="Production deployments only allowed during business hours (09:00-17:00 UTC, Mon-Fri)",
        enforcement=EnforcementLevel.WARN,
        severity=Severity.WARNING,
        applies_to=("k8s.deploy", "helm.upgrade", "terraform.apply", "argocd.sync"),
        environments=PRODUCTION_ENVS,
        check=check,
    )


def require_peer_review_policy() -> Policy:
    def check(skill: Skill, params: Mapping[str, Any], env: str) -> tuple[bool, str]:
        if skill.risk_level >= RiskLevel.CRITICAL and "_peer_reviewer" not in params:
            return True, "CRITICAL action in production requires peer review — set _peer_reviewer param"
        return False, ""

    return Policy(
        name="require_peer_review",
        description="CRITICAL actions require a peer reviewer confirmation",
        enforcement=EnforcementLevel.DENY,
        severity=Severity.CRITICAL,
        applies_to=("terraform.apply", "k8s.deploy", "aws.secrets.rotate"),
        environments=PRODUCTION_ENVS,
        check=check,
    )


def max_blast_radius_policy() -> Policy:
    def check(skill: Skill, params: Mapping[str, Any], env: str) -> tuple[bool, str]:
        count = int_param(params, "_resource_count")
        if count is not None and count > MAX_RESOURCES:
            return True, (
                f"Operation affects {count} resources (max: {MAX_RESOURCES}) — "
                "break into smaller batches"
            )
        return False, ""

    return Policy(
        name="max_blast_radius",
        description=f"Deny operations affecting more than {MAX_RESOURCES} resources at once",
        enforcement=EnforcementLevel.DENY,
        severity=Severity.CRITICAL,
        applies_to=("*",),
        check=check,
    )


def no_direct_prod_access_policy() -> Policy:
    def check(skill: Skill, params: Mapping[str, Any], env: str) -> tuple[bool, str]:
        if params.get("_iac_managed") is None:
            return True, (
                "Direct production mutations should go through Terraform/Pulumi — "
                "set _iac_managed=true to override"
            )
        return False, ""

    return Policy(
        name="no_direct_prod_access",
        description="Deny direct mutation of production resources without going through IaC",
        enforcement=EnforcementLevel.WARN,
        severity=Severity.WARNING,
        applies_to=("aws.ec2.scale", "azure.vm.resize", "aws.sg.*"),
        environments=PRODUCTION_ENVS,
        check=check,
    )


def enforce_encryption_policy() -> Policy:
    def check(skill: Skill, params: Mapping[str, Any], env: str) -> tuple[bool, str]:
        if "encryption" not in params:
            return False, ""
        if format_param(params["encryption"]) in ("none", "false"):
            return True, "Storage resources must have encryption enabled — use AES256 or aws:kms"
        return False, ""

    return Policy(
        name="enforce_encryption",
        description="Storage resources must have encryption enabled",
        enforcement=EnforcementLevel.DENY,
        severity=Severity.CRITICAL,
        applies_to=("aws.s3.*", "gcp.gcs.*", "azure.blob.*"),
        check=check,
    )


def builtin_policies(clock: Optional[Clock] = None) -> list[Policy]:
    return [
        no_public_s3_policy(),
        require_tags_policy(),
        no_wide_open_sg_policy(),
        production_deploy_window_policy(clock),
        require_peer_review_policy(),
        max_blast_radius_policy(),
        no_direct_prod_access_policy(),
        enforce_encryption_policy(),
    ]
