"""
Reading and writing the env file of one stage and region.

The local stage keeps its env file at back/.env inside the project. Every
other stage keeps one per region, in that region's bucket.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..aws import ObjectStore
from ..config import LOCAL_STAGE
from ..context import DeployContext
from ..errors import StorageWriteError
from ..results import Complete, Partial, Result
from .envfile import EnvMap

logger = logging.getLogger(__name__)


def local_env_path(project_root: Union[str, Path]) -> Path:
    return Path(project_root) / "back" / ".env"


def env_key(project_name: str, stage: str) -> str:
    """Get the S3 key of a stage's env file."""
    return f"Serverless/{project_name}/{stage}/envVars/.env"


@dataclass(frozen=True)
class LocalEnvLocation:
    path: Path

    def describe(self) -> str:
        return str(self.path)


@dataclass(frozen=True)
class RemoteEnvLocation:
    store: ObjectStore
    bucket: str
    key: str

    def describe(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


EnvLocation = Union[LocalEnvLocation, RemoteEnvLocation]


class EnvConfigStore:
    """Get and put env files for a stage and region."""

    def locate(self, stage: str, region: str, context: DeployContext) -> EnvLocation:
        """
        Work out where the env file for a stage and region lives.

        Creating the region's client happens here, on the calling thread, so
        the read or write itself can run on a worker thread.
        """
        if stage == LOCAL_STAGE:
            return LocalEnvLocation(local_env_path(context.project_root))

        region_config = context.project.region_config(stage, region)
        return RemoteEnvLocation(
            store=context.object_store(region),
            bucket=region_config.region_bucket,
            key=env_key(context.project_name, stage),
        )

    def read(self, location: EnvLocation) -> Result[EnvMap]:
        """
        Read and parse an env file.

        A missing or unreadable file is a normal state, so failures are logged
        and reported as ``Partial`` holding an empty map.
        """
        try:
            if isinstance(location, LocalEnvLocation):
                raw = location.path.read_bytes()
            else:
                logger.info(f"Getting ENV file from {location.describe()}")
                raw = location.store.get_object(location.bucket, location.key)
            return Complete(EnvMap.parse(raw or b""))
        except Exception as e:
            logger.warning(
                f"Trouble getting env from {location.describe()}: {e}"
            )
            return Partial(EnvMap.empty(), e)

    def write(self, location: EnvLocation, content: Union[bytes, str]) -> None:
        """
        Overwrite an env file.

        Raises:
            StorageWriteError: If the write fails
        """
        if isinstance(content, str):
            content = content.encode("utf-8")

        if isinstance(location, LocalEnvLocation):
            try:
                location.path.parent.mkdir(parents=True, exist_ok=True)
                location.path.write_bytes(content)
            except OSError as e:
                raise StorageWriteError(
                    f"Failed to write {location.describe()}: {e}"
                ) from e
            return

        logger.info(f"Putting ENV file to {location.describe()}")
        location.store.put_object(location.bucket, location.key, content, "text/plain")

    def get(self, stage: str, region: str, context: DeployContext) -> Result[EnvMap]:
        """Fetch the env map of a stage and region, never raising on read errors."""
        return self.read(self.locate(stage, region, context))

    def put(
        self,
        stage: str,
        region: str,
        content: Union[bytes, str],
        context: DeployContext,
    ) -> None:
        """Write raw env file contents for a stage and region."""
        self.write(self.locate(stage, region, context), content)
