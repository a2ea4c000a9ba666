"""
Project configuration.

A project file maps each stage to the regions it deploys to. Each region entry
names the S3 bucket holding that region's templates and env file, and the IAM
role the lambdas run as:

    {
      "name": "demo",
      "domain": "example.com",
      "stages": {
        "dev": [
          {"region": "us-east-1", "regionBucket": "demo-dev-use1",
           "iamRoleArnLambda": "arn:aws:iam::123456789012:role/demo-dev-l"}
        ]
      }
    }
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from jsonschema import ValidationError, validate

from .errors import ConfigurationError
from .naming import is_valid_name_part

# Stage that reads and writes a local .env file instead of S3
LOCAL_STAGE = "local"

# Region wildcard meaning every region configured for a stage
ALL_REGIONS = "all"

PROJECT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name", "stages"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "domain": {"type": "string"},
        "notificationEmail": {"type": "string"},
        "stages": {
            "type": "object",
            "additionalProperties": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["region", "regionBucket", "iamRoleArnLambda"],
                    "properties": {
                        "region": {"type": "string", "minLength": 1},
                        "regionBucket": {"type": "string", "minLength": 1},
                        "iamRoleArnLambda": {"type": "string"},
                    },
                },
            },
        },
    },
}


@dataclass(frozen=True)
class RegionConfig:
    """Deployment settings for one region of a stage."""

    region: str
    region_bucket: str
    iam_role_arn_lambda: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegionConfig":
        """Create a region config from its project-file form."""
        return cls(
            region=data["region"],
            region_bucket=data["regionBucket"],
            iam_role_arn_lambda=data.get("iamRoleArnLambda", ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "region": self.region,
            "regionBucket": self.region_bucket,
            "iamRoleArnLambda": self.iam_role_arn_lambda,
        }


@dataclass(frozen=True)
class Project:
    """Immutable project definition shared by every operation."""

    name: str
    stages: Mapping[str, Tuple[RegionConfig, ...]] = field(default_factory=dict)
    domain: Optional[str] = None
    notification_email: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "stages", MappingProxyType(dict(self.stages)))

        if not is_valid_name_part(self.name):
            raise ConfigurationError(
                f"Invalid project name: {self.name}",
                details="Must contain only letters, numbers, and hyphens.",
            )

        for stage, regions in self.stages.items():
            if not is_valid_name_part(stage):
                raise ConfigurationError(
                    f"Invalid stage name: {stage}",
                    details="Must contain only letters, numbers, and hyphens.",
                )
            seen = set()
            for region_config in regions:
                if region_config.region in seen:
                    raise ConfigurationError(
                        f"Region {region_config.region} is defined more than once "
                        f"in stage {stage}"
                    )
                seen.add(region_config.region)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        """Create a project from a validated project-file document."""
        try:
            validate(instance=dict(data), schema=PROJECT_SCHEMA)
        except ValidationError as e:
            raise ConfigurationError(
                f"Project configuration validation failed: {e.message}",
                details=f"Path: {' -> '.join(str(p) for p in e.absolute_path)}",
            )

        stages = {
            stage: tuple(RegionConfig.from_dict(r) for r in regions)
            for stage, regions in data["stages"].items()
        }
        return cls(
            name=data["name"],
            stages=stages,
            domain=data.get("domain"),
            notification_email=data.get("notificationEmail"),
        )

    def has_stage(self, stage: str) -> bool:
        return stage in self.stages

    def regions_for(self, stage: str) -> Tuple[RegionConfig, ...]:
        """Get the region configs for a stage, in project-file order."""
        if not self.has_stage(stage):
            raise ConfigurationError(f"Stage {stage} does not exist in your project")
        return self.stages[stage]

    def region_config(self, stage: str, region: str) -> RegionConfig:
        """Get the config for one region of a stage."""
        for region_config in self.regions_for(stage):
            if region_config.region == region:
                return region_config
        raise ConfigurationError(
            f'Region "{region}" does not exist in stage "{stage}"'
        )


def load_project(path: Union[str, Path]) -> Project:
    """
    Load a project file.

    Files ending in .yaml or .yml are parsed as YAML, everything else as JSON.

    Args:
        path: Path to the project file

    Returns:
        Parsed and validated project

    Raises:
        ConfigurationError: If the file is missing, unparsable, or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Project file not found: {path}")

    try:
        with open(path, "r") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Failed to parse project file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Project file {path} must contain a mapping")

    return Project.from_dict(data)
