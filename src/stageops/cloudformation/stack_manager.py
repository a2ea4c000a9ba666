"""
CloudFormation stack create/update operations.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..config import RegionConfig
from ..context import DeployContext
from ..naming import LAMBDAS, RESOURCES, stack_name
from .templates import DEFAULT_STAMPS, TemplateUploader, UploadStamps

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_EMAIL = "me@me.com"
DYNAMO_RW_THROUGHPUT = "1"


@dataclass(frozen=True)
class StackDescriptor:
    """A stack submitted to the control plane."""

    stack_name: str
    stack_type: str
    stack_id: str
    status: Optional[str] = None
    parameters: List[Dict[str, Any]] = field(default_factory=list)

    def observe(self, record: Dict[str, Any]) -> "StackDescriptor":
        """Get a copy carrying the status from a describe record."""
        return replace(self, status=record.get("StackStatus"))


def parameter(key: str, value: str) -> Dict[str, Any]:
    return {
        "ParameterKey": key,
        "ParameterValue": value,
        "UsePreviousValue": False,
    }


def stage_tags(stage: str) -> List[Dict[str, str]]:
    return [{"Key": "STAGE", "Value": stage}]


class StackManager:
    """
    Create and update the lambdas and resources stacks of a project stage.

    Each operation uploads a fresh template to the region bucket and submits
    one create or update request. The returned descriptor has the stack id but
    no status yet; use ``StackStatusMonitor`` to wait for completion.
    """

    def __init__(self, stamps: Optional[UploadStamps] = None):
        self.stamps = stamps or DEFAULT_STAMPS

    def _uploader(self, region: str, context: DeployContext) -> TemplateUploader:
        return TemplateUploader(context.object_store(region), self.stamps)

    def _submit(
        self,
        stage: str,
        region: str,
        context: DeployContext,
        stack_type: str,
        creating: bool,
        params: Dict[str, Any],
    ) -> StackDescriptor:
        region_config = context.project.region_config(stage, region)
        name = stack_name(context.project_name, stage, stack_type)

        template_url = self._uploader(region, context).upload(
            context.project_root,
            region_config.region_bucket,
            context.project_name,
            stage,
            stack_type,
        )

        request = {"StackName": name, "TemplateURL": template_url, **params}
        controller = context.stack_controller(region)

        if creating:
            logger.info(f"Creating stack {name} in {region}")
            response = controller.create_stack(**request)
        else:
            logger.info(f"Updating stack {name} in {region}")
            response = controller.update_stack(**request)

        return StackDescriptor(
            stack_name=name,
            stack_type=stack_type,
            stack_id=response["StackId"],
            parameters=request["Parameters"],
        )

    @staticmethod
    def _lambda_parameters(region_config: RegionConfig) -> List[Dict[str, Any]]:
        return [parameter("LambdaRoleArn", region_config.iam_role_arn_lambda)]

    def create(self, stage: str, region: str, context: DeployContext) -> StackDescriptor:
        """Create the lambdas stack for a stage in one region."""
        region_config = context.project.region_config(stage, region)
        return self._submit(
            stage,
            region,
            context,
            LAMBDAS,
            creating=True,
            params={
                "Capabilities": [],
                "OnFailure": "ROLLBACK",
                "Parameters": self._lambda_parameters(region_config),
                "Tags": stage_tags(stage),
            },
        )

    def update(self, stage: str, region: str, context: DeployContext) -> StackDescriptor:
        """
        Update the lambdas stack for a stage in one region.

        CloudFormation rejects updates with no changes; that ClientError is
        raised unchanged.
        """
        region_config = context.project.region_config(stage, region)
        return self._submit(
            stage,
            region,
            context,
            LAMBDAS,
            creating=False,
            params={
                "Capabilities": [],
                "UsePreviousTemplate": False,
                "Parameters": self._lambda_parameters(region_config),
            },
        )

    def create_resources_stack(
        self,
        stage: str,
        region: str,
        context: DeployContext,
        domain: Optional[str] = None,
        notification_email: Optional[str] = None,
    ) -> StackDescriptor:
        """
        Create the resources stack for a stage in one region.

        Args:
            stage: Stage to deploy
            region: Region to deploy to
            context: Deployment context
            domain: Project domain, defaults to the project file's domain
            notification_email: Alarm address, defaults to me@me.com
        """
        project = context.project
        domain = domain or project.domain or ""
        notification_email = (
            notification_email
            or project.notification_email
            or DEFAULT_NOTIFICATION_EMAIL
        )

        return self._submit(
            stage,
            region,
            context,
            RESOURCES,
            creating=True,
            params={
                "Capabilities": ["CAPABILITY_IAM"],
                "OnFailure": "ROLLBACK",
                "Parameters": [
                    parameter("ProjectName", project.name),
                    parameter("Stage", stage),
                    parameter("DataModelStage", stage),
                    parameter("ProjectDomain", domain),
                    parameter("NotificationEmail", notification_email),
                    parameter("DynamoRWThroughput", DYNAMO_RW_THROUGHPUT),
                ],
                "Tags": stage_tags(stage),
            },
        )

    def update_resources_stack(
        self, stage: str, region: str, context: DeployContext
    ) -> StackDescriptor:
        """Update the resources stack for a stage in one region."""
        project = context.project
        return self._submit(
            stage,
            region,
            context,
            RESOURCES,
            creating=False,
            params={
                "Capabilities": ["CAPABILITY_IAM"],
                "UsePreviousTemplate": False,
                "Parameters": [
                    parameter("ProjectName", project.name),
                    parameter("Stage", stage),
                    parameter("DataModelStage", stage),
                ],
            },
        )
