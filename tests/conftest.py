"""
Shared fixtures for stageops tests.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from stageops.config import Project, RegionConfig
from stageops.context import DeployContext


@pytest.fixture
def project() -> Project:
    """Create a project with two dev regions and one prod region."""
    return Project(
        name="demo",
        stages={
            "dev": (
                RegionConfig("us-east-1", "demo-dev-use1", "arn:aws:iam::123456789012:role/dev-use1"),
                RegionConfig("eu-west-1", "demo-dev-euw1", "arn:aws:iam::123456789012:role/dev-euw1"),
            ),
            "prod": (
                RegionConfig("us-east-1", "demo-prod-use1", "arn:aws:iam::123456789012:role/prod-use1"),
            ),
        },
    )


@pytest.fixture
def controllers():
    """One mocked StackController per region."""
    return {}


@pytest.fixture
def stores():
    """One mocked ObjectStore per region."""
    return {}


@pytest.fixture
def context(project: Project, tmp_path: Path, controllers, stores) -> DeployContext:
    """Create a DeployContext whose clients are Mocks, created per region on demand."""

    def controller_for(region: str) -> Mock:
        return controllers.setdefault(region, Mock(name=f"cloudformation-{region}"))

    def store_for(region: str) -> Mock:
        if region not in stores:
            store = Mock(name=f"s3-{region}")
            store.object_url.side_effect = (
                lambda bucket, key: f"https://s3.amazonaws.com/{bucket}/{key}"
            )
            stores[region] = store
        return stores[region]

    return DeployContext(
        project=project,
        project_root=tmp_path,
        stack_controllers=controller_for,
        object_stores=store_for,
    )


@pytest.fixture
def templates(tmp_path: Path) -> Path:
    """Write rendered lambdas and resources templates into the project root."""
    cf_dir = tmp_path / "cloudformation"
    cf_dir.mkdir()
    (cf_dir / "lambdas-cf.json").write_text('{"Resources": {"Fn": {}}}')
    (cf_dir / "resources-cf.json").write_text('{"Resources": {"Table": {}}}')
    return cf_dir
