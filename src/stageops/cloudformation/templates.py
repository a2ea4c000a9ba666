"""
Staging rendered CloudFormation templates in S3.

Every upload gets its own timestamped key so earlier revisions stay available
for audit and rollback. Nothing here ever deletes old templates.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Union

from ..aws import ObjectStore
from ..errors import StorageWriteError
from ..naming import STACK_TYPE_SUFFIXES

logger = logging.getLogger(__name__)


def template_path(project_root: Union[str, Path], stack_type: str) -> Path:
    """Get the local path of the rendered template for a stack type."""
    return Path(project_root) / "cloudformation" / f"{stack_type}-cf.json"


def template_key(project_name: str, stage: str, stack_type: str, stamp: int) -> str:
    """Get the S3 key for one uploaded template revision."""
    return f"Serverless/{project_name}/{stage}/cloudformation/{stack_type}@{stamp}.json"


class UploadStamps:
    """Millisecond upload stamps that never repeat, safe to share between threads."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            stamp = int(self.clock() * 1000)
            if stamp <= self._last:
                stamp = self._last + 1
            self._last = stamp
            return stamp


# Shared by every uploader that is not handed its own stamps, so separate
# uploaders and managers in one process never produce the same key.
DEFAULT_STAMPS = UploadStamps()


class TemplateUploader:
    """Upload templates to an object store under versioned keys."""

    def __init__(self, store: ObjectStore, stamps: Optional[UploadStamps] = None):
        """
        Initialize the uploader.

        Args:
            store: Object store for the region being deployed
            stamps: Source of key timestamps, defaults to DEFAULT_STAMPS
        """
        self.store = store
        self.stamps = stamps or DEFAULT_STAMPS

    def upload(
        self,
        project_root: Union[str, Path],
        bucket: str,
        project_name: str,
        stage: str,
        stack_type: str,
    ) -> str:
        """
        Upload the rendered template for a stack type.

        Args:
            project_root: Project directory containing cloudformation/
            bucket: Region bucket to upload to
            project_name: Name of the project
            stage: Stage being deployed
            stack_type: "lambdas" or "resources"

        Returns:
            https URL of the uploaded template

        Raises:
            ValueError: If stack_type is not a known stack type
            StorageWriteError: If the template cannot be read or written
        """
        if stack_type not in STACK_TYPE_SUFFIXES:
            raise ValueError(
                f"Type {stack_type} invalid. Must be lambdas or resources"
            )

        path = template_path(project_root, stack_type)
        try:
            body = path.read_bytes()
        except OSError as e:
            raise StorageWriteError(f"Could not read template {path}: {e}") from e

        key = template_key(project_name, stage, stack_type, self.stamps.next())
        logger.info(f"Uploading {stack_type} template to s3://{bucket}/{key}")

        self.store.put_object(bucket, key, body, "application/json")
        return self.store.object_url(bucket, key)
