"""Built-in skill definitions."""

from __future__ import annotations

from opsgate.models.risk import RiskLevel
from opsgate.models.skill import (
    ExecutionConfig,
    ExecutionType,
    RollbackConfig,
    Skill,
    SkillInput,
    SkillOutput,
)

READ_ONLY = RollbackConfig(supported=False, procedure="Read-only operation, no rollback needed")


def _in(name: str, type_: str = "string", required: bool = False, description: str = "", default: str = "") -> SkillInput:
    return SkillInput(name=name, type=type_, required=required, description=description, default=default)


def _out(name: str, type_: str = "string", description: str = "") -> SkillOutput:
    return SkillOutput(name=name, type=type_, description=description)


def _cli(command: str, timeout: float = 60.0) -> ExecutionConfig:
    return ExecutionConfig(type=ExecutionType.CLI, command=command, timeout=timeout)


def aws_skills() -> list[Skill]:
    return [
        Skill(
            name="aws.ec2.list",
            description="List EC2 instances with filters (region, tag, state)",
            provider="aws",
            category="compute",
            inputs=[
                _in("region", description="AWS region to query", default="us-east-1"),
                _in("state", description="Instance state filter (running, stopped, etc.)"),
            ],
            outputs=[_out("instances", "list", "EC2 instance details"), _out("count", "int")],
            risk_level=RiskLevel.LOW,
            execution=_cli("aws ec2 describe-instances --region {region}", timeout=30),
            rollback=READ_ONLY,
        ),
        Skill(
            name="aws.ec2.scale",
            description="Scale Auto Scaling Groups up or down",
            provider="aws",
            category="compute",
            inputs=[
                _in("asg_name", required=True, description="Auto Scaling Group name"),
                _in("desired_capacity", "int", required=True, description="Target instance count"),
                _in("region", description="AWS region", default="us-east-1"),
            ],
            outputs=[_out("previous_capacity", "int"), _out("new_capacity", "int")],
            risk_level=RiskLevel.MEDIUM,
            requires_confirmation=True,
            execution=_cli(
                "aws autoscaling update-auto-scaling-group "
                "--auto-scaling-group-name {asg_name} --desired-capacity {desired_capacity}"
            ),
            rollback=RollbackConfig(
                supported=True,
                procedure="Restore previous desired capacity via aws autoscaling update-auto-scaling-group",
            ),
        ),
        Skill(
            name="aws.lambda.deploy",
            description="Deploy a new Lambda function code package",
            provider="aws",
            category="compute",
            inputs=[
                _in("function_name", required=True, description="Lambda function name"),
                _in("zip_file", required=True, description="Path to the deployment package"),
            ],
            outputs=[_out("version", description="Published version")],
            risk_level=RiskLevel.MEDIUM,
            requires_confirmation=True,
            execution=_cli(
                "aws lambda update-function-code --function-name {function_name} --zip-file fileb://{zip_file}"
            ),
            rollback=RollbackConfig(supported=True, procedure="Point the alias back at the previous version"),
        ),
        Skill(
            name="aws.s3.audit",
            description="Audit S3 bucket ACLs, encryption and versioning",
            provider="aws",
            category="storage",
            inputs=[_in("bucket_name", required=True, description="Bucket to audit")],
            outputs=[_out("findings", "list")],
            risk_level=RiskLevel.LOW,
            execution=_cli("aws s3api get-bucket-acl --bucket {bucket_name}", timeout=30),
            rollback=READ_ONLY,
        ),
        Skill(
            name="aws.s3.sync",
            description="Sync S3 bucket contents between environments",
            provider="aws",
            category="storage",
            inputs=[
                _in("source", required=True, description="Source bucket URI (s3://bucket/prefix)"),
                _in("destination", required=True, description="Destination bucket URI"),
                _in("acl", description="Canned ACL applied to synced objects"),
            ],
            outputs=[_out("files_synced", "int"), _out("bytes_transferred", "int")],
            risk_level=RiskLevel.HIGH,
            requires_confirmation=True,
            execution=_cli("aws s3 sync {source} {destination}", timeout=600),
            rollback=RollbackConfig(supported=False, procedure="Reverse sync from destination back to source"),
        ),
        Skill(
            name="aws.sg.audit",
            description="Audit security groups for overly permissive rules",
            provider="aws",
            category="networking",
            inputs=[_in("vpc_id", description="Restrict the audit to one VPC")],
            outputs=[_out("findings", "list")],
            risk_level=RiskLevel.LOW,
            execution=_cli("aws ec2 describe-security-groups", timeout=30),
            rollback=READ_ONLY,
        ),
        Skill(
            name="aws.secrets.rotate",
            description="Rotate secrets in AWS Secrets Manager",
            provider="aws",
            category="security",
            inputs=[
                _in("secret_id", required=True, description="Secret name or ARN"),
                _in("region", description="AWS region", default="us-east-1"),
            ],
            outputs=[_out("version_id", description="New secret version ID")],
            risk_level=RiskLevel.HIGH,
            requires_confirmation=True,
            execution=_cli("aws secretsmanager rotate-secret --secret-id {secret_id}"),
            rollback=RollbackConfig(
                supported=True,
                procedure="Restore previous secret version via aws secretsmanager update-secret-version-stage",
            ),
        ),
        Skill(
            name="aws.cost.report",
            description="Report cost and usage for a time range",
            provider="aws",
            category="cost",
            inputs=[_in("start", required=True), _in("end", required=True)],
            outputs=[_out("total", "string")],
            risk_level=RiskLevel.LOW,
            execution=_cli("aws ce get-cost-and-usage --time-period Start={start},End={end}", timeout=30),
            rollback=READ_ONLY,
        ),
    ]


def gcp_azure_skills() -> list[Skill]:
    return [
        Skill(
            name="gcp.gce.snapshot",
            description="Snapshot a Compute Engine disk",
            provider="gcp",
            category="compute",
            inputs=[
                _in("instance", required=True, description="Disk name"),
                _in("zone", required=True, description="GCE zone"),
                _in("name", required=True, description="Snapshot name"),
            ],
            outputs=[_out("snapshot_id")],
            risk_level=RiskLevel.LOW,
            execution=_cli("gcloud compute disks snapshot {instance} --zone={zone} --snapshot-names={name}"),
            rollback=RollbackConfig(supported=True, procedure="gcloud compute snapshots delete {name}"),
        ),
        Skill(
            name="azure.vm.resize",
            description="Resize an Azure virtual machine",
            provider="azure",
            category="compute",
            inputs=[
                _in("rg", required=True, description="Resource group"),
                _in("vm_name", required=True, description="VM name"),
                _in("size", required=True, description="Target VM size"),
            ],
            outputs=[_out("previous_size"), _out("new_size")],
            risk_level=RiskLevel.MEDIUM,
            requires_confirmation=True,
            execution=_cli("az vm resize --resource-group {rg} --name {vm_name} --size {size}", timeout=600),
            rollback=RollbackConfig(supported=True, procedure="Resize back to the previous VM size"),
        ),
    ]


def kubernetes_skills() -> list[Skill]:
    return [
        Skill(
            name="k8s.deploy",
            description="Deploy or roll out Kubernetes workloads",
            provider="k8s",
            category="deployment",
            inputs=[
                _in("namespace", required=True, description="Target Kubernetes namespace"),
                _in("deployment", required=True, description="Deployment name"),
                _in("image", required=True, description="Container image with tag"),
            ],
            outputs=[_out("status", description="Rollout status"), _out("revision", "int")],
            risk_level=RiskLevel.HIGH,
            requires_confirmation=True,
            execution=_cli(
                "kubectl set image deployment/{deployment} {deployment}={image} -n {namespace}",
                timeout=300,
            ),
            rollback=RollbackConfig(
                supported=True,
                procedure="kubectl rollout undo deployment/{deployment} -n {namespace}",
            ),
        ),
        Skill(
            name="k8s.rollback",
            description="Roll a Kubernetes deployment back to a previous revision",
            provider="k8s",
            category="deployment",
            inputs=[
                _in("namespace", required=True),
                _in("deployment", required=True),
                _in("revision", "int", description="Target revision (previous if omitted)", default="0"),
            ],
            outputs=[_out("rolled_back_to", "int")],
            risk_level=RiskLevel.HIGH,
            requires_confirmation=True,
            execution=_cli(
                "kubectl rollout undo deployment/{deployment} --to-revision={revision} -n {namespace}"
            ),
            rollback=RollbackConfig(supported=True, procedure="Roll forward to the revision that was replaced"),
        ),
        Skill(
            name="k8s.rollout.status",
            description="Watch the rollout status of a deployment",
            provider="k8s",
            category="deployment",
            inputs=[_in("namespace", required=True), _in("deployment", required=True)],
            outputs=[_out("status"), _out("ready_replicas", "int")],
            risk_level=RiskLevel.LOW,
            execution=_cli("kubectl rollout status deployment/{deployment} -n {namespace}", timeout=300),
            rollback=READ_ONLY,
        ),
    ]


def iac_skills() -> list[Skill]:
    return [
        Skill(
            name="terraform.plan",
            description="Generate a Terraform execution plan",
            provider="terraform",
            category="deployment",
            inputs=[_in("working_dir", required=True, description="Terraform working directory")],
            outputs=[_out("plan_output")],
            risk_level=RiskLevel.LOW,
            execution=ExecutionConfig(
                type=ExecutionType.TERRAFORM,
                command="terraform -chdir={working_dir} plan -no-color",
                timeout=300,
            ),
            rollback=READ_ONLY,
        ),
        Skill(
            name="terraform.apply",
            description="Apply a Terraform plan (CRITICAL — requires explicit confirmation)",
            provider="terraform",
            category="deployment",
            inputs=[_in("working_dir", required=True, description="Terraform working directory")],
            outputs=[_out("apply_output"), _out("resources_created", "int")],
            risk_level=RiskLevel.CRITICAL,
            requires_confirmation=True,
            execution=ExecutionConfig(
                type=ExecutionType.TERRAFORM,
                command="terraform -chdir={working_dir} apply -auto-approve",
                timeout=600,
            ),
            rollback=RollbackConfig(
                supported=True,
                procedure="Revert to the previous state via terraform apply with the prior .tfstate",
            ),
        ),
        Skill(
            name="helm.upgrade",
            description="Upgrade a Helm chart release",
            provider="helm",
            category="deployment",
            inputs=[
                _in("release_name", required=True),
                _in("chart", required=True),
                _in("namespace", required=True),
            ],
            outputs=[_out("revision", "int")],
            risk_level=RiskLevel.HIGH,
            requires_confirmation=True,
            execution=_cli("helm upgrade {release_name} {chart} -n {namespace}", timeout=300),
            rollback=RollbackConfig(supported=True, procedure="helm rollback {release_name} -n {namespace}"),
        ),
        Skill(
            name="argocd.sync",
            description="Trigger an ArgoCD application sync",
            provider="argocd",
            category="deployment",
            inputs=[_in("app_name", required=True, description="ArgoCD application name")],
            outputs=[_out("sync_status"), _out("health_status")],
            risk_level=RiskLevel.MEDIUM,
            requires_confirmation=True,
            execution=_cli("argocd app sync {app_name}", timeout=300),
            rollback=RollbackConfig(supported=True, procedure="argocd app rollback {app_name}"),
        ),
    ]


def cicd_skills() -> list[Skill]:
    return [
        Skill(
            name="github.actions.trigger",
            description="Dispatch a GitHub Actions workflow",
            provider="github",
            category="cicd",
            inputs=[
                _in("owner", required=True),
                _in("repo", required=True),
                _in("workflow_id", required=True),
            ],
            outputs=[_out("run_id")],
            risk_level=RiskLevel.MEDIUM,
            requires_confirmation=True,
            execution=ExecutionConfig(
                type=ExecutionType.API,
                command="POST /repos/{owner}/{repo}/actions/workflows/{workflow_id}/dispatches",
            ),
            rollback=RollbackConfig(supported=False, procedure="Cancel the workflow run"),
        ),
    ]


def builtin_skills() -> list[Skill]:
    return aws_skills() + gcp_azure_skills() + kubernetes_skills() + iac_skills() + cicd_skills()
