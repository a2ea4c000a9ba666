"""
Stack naming utilities.

Stack names are derived from project and stage only. CloudFormation already
namespaces stacks per account and region, so the same name is reused in every
region a stage deploys to.
"""

import re
from typing import Dict

LAMBDAS = "lambdas"
RESOURCES = "resources"

# Suffix appended to the stack name for each stack type
STACK_TYPE_SUFFIXES: Dict[str, str] = {
    LAMBDAS: "l",
    RESOURCES: "r",
}

# CloudFormation stack names allow alphanumerics and hyphens only, no underscores
STACK_NAME_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")


def stack_name(project_name: str, stage: str, stack_type: str) -> str:
    """
    Get the CloudFormation stack name for a project stage.

    Pattern: {project}-{stage}-{l|r}

    Args:
        project_name: Name of the project
        stage: Stage name (dev, prod, ...)
        stack_type: Either "lambdas" or "resources"

    Returns:
        Stack name (e.g., "demo-prod-r")

    Raises:
        ValueError: If stack_type is not a known stack type
    """
    try:
        suffix = STACK_TYPE_SUFFIXES[stack_type]
    except KeyError:
        raise ValueError(
            f"Type {stack_type} invalid. Must be {LAMBDAS} or {RESOURCES}"
        ) from None
    return "-".join([project_name, stage, suffix])


def lambdas_stack_name(project_name: str, stage: str) -> str:
    """Get the lambdas stack name."""
    return stack_name(project_name, stage, LAMBDAS)


def resources_stack_name(project_name: str, stage: str) -> str:
    """Get the resources stack name."""
    return stack_name(project_name, stage, RESOURCES)


def is_valid_name_part(value: str) -> bool:
    """Check that a project or stage name is usable inside a stack name."""
    return bool(STACK_NAME_PATTERN.match(value))
