"""
Ports for the control plane and object storage, and their boto3 adapters.

Stack and environment code only talks to ``StackController`` and
``ObjectStore``. The boto3 adapters translate between those calls and the
CloudFormation/S3 APIs and classify the errors callers care about.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import StackNotFoundError, StorageWriteError

logger = logging.getLogger(__name__)


def is_stack_missing(error: Exception) -> bool:
    """Check whether a control-plane error means the stack does not exist."""
    return "does not exist" in str(error)


class StackController(Protocol):
    """CloudFormation operations used by the stack lifecycle."""

    def create_stack(self, **params: Any) -> Dict[str, Any]:
        ...

    def update_stack(self, **params: Any) -> Dict[str, Any]:
        ...

    def describe_stack(self, stack_name: str) -> Dict[str, Any]:
        ...

    def list_resources_page(
        self, stack_name: str, next_token: Optional[str] = None
    ) -> Dict[str, Any]:
        ...


class ObjectStore(Protocol):
    """Key-addressed blob storage for templates and env files."""

    def put_object(
        self, bucket: str, key: str, body: bytes, content_type: str
    ) -> None:
        ...

    def get_object(self, bucket: str, key: str) -> bytes:
        ...

    def object_url(self, bucket: str, key: str) -> str:
        ...


class Boto3StackController:
    """StackController backed by a boto3 CloudFormation client."""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def for_region(cls, session: boto3.Session, region: str) -> "Boto3StackController":
        return cls(session.client("cloudformation", region_name=region))

    def create_stack(self, **params: Any) -> Dict[str, Any]:
        return dict(self.client.create_stack(**params))

    def update_stack(self, **params: Any) -> Dict[str, Any]:
        return dict(self.client.update_stack(**params))

    def describe_stack(self, stack_name: str) -> Dict[str, Any]:
        """
        Describe a single stack.

        Raises:
            StackNotFoundError: If the stack does not exist
        """
        try:
            response = self.client.describe_stacks(StackName=stack_name)
        except ClientError as e:
            if is_stack_missing(e):
                raise StackNotFoundError(str(e)) from e
            raise

        stacks = response.get("Stacks") or []
        if not stacks:
            raise StackNotFoundError(f"Stack {stack_name} does not exist")
        return dict(stacks[0])

    def list_resources_page(
        self, stack_name: str, next_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch one page of stack resource summaries.

        Raises:
            StackNotFoundError: If the stack does not exist
        """
        params = {"StackName": stack_name}
        if next_token:
            params["NextToken"] = next_token

        try:
            return dict(self.client.list_stack_resources(**params))
        except ClientError as e:
            if is_stack_missing(e):
                raise StackNotFoundError(str(e)) from e
            raise


class S3ObjectStore:
    """ObjectStore backed by a boto3 S3 client."""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def for_region(cls, session: boto3.Session, region: str) -> "S3ObjectStore":
        return cls(session.client("s3", region_name=region))

    def put_object(
        self, bucket: str, key: str, body: bytes, content_type: str
    ) -> None:
        """
        Write an object, replacing any existing object at the key.

        Raises:
            StorageWriteError: If the write fails
        """
        logger.debug(f"Writing s3://{bucket}/{key}")
        try:
            self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=body,
                ACL="private",
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageWriteError(f"Failed to write s3://{bucket}/{key}: {e}") from e

    def get_object(self, bucket: str, key: str) -> bytes:
        response = self.client.get_object(Bucket=bucket, Key=key)
        body = response.get("Body")
        if body is None:
            return b""
        return body.read()

    def object_url(self, bucket: str, key: str) -> str:
        """Get the https URL CloudFormation uses to fetch a template."""
        endpoint = self.client.meta.endpoint_url.rstrip("/")
        return f"{endpoint}/{bucket}/{key}"
