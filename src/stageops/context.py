"""
Immutable deployment context passed into every operation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import boto3

from .aws import Boto3StackController, ObjectStore, S3ObjectStore, StackController
from .config import Project


@dataclass(frozen=True)
class DeployContext:
    """
    Everything an operation needs besides its stage and region.

    Attributes:
        project: Loaded project definition
        project_root: Root directory of the project on disk
        stack_controllers: Builds a StackController for a region
        object_stores: Builds an ObjectStore for a region
    """

    project: Project
    project_root: Path
    stack_controllers: Callable[[str], StackController]
    object_stores: Callable[[str], ObjectStore]

    @classmethod
    def from_session(
        cls, project: Project, project_root: Path, session: boto3.Session
    ) -> "DeployContext":
        """Create a context whose clients all come from one boto3 session."""
        return cls(
            project=project,
            project_root=Path(project_root),
            stack_controllers=lambda region: Boto3StackController.for_region(
                session, region
            ),
            object_stores=lambda region: S3ObjectStore.for_region(session, region),
        )

    @property
    def project_name(self) -> str:
        return self.project.name

    def stack_controller(self, region: str) -> StackController:
        return self.stack_controllers(region)

    def object_store(self, region: str) -> ObjectStore:
        return self.object_stores(region)
