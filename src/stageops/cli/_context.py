"""
Shared state for CLI commands.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import click

from ..config import load_project
from ..context import DeployContext
from ..credentials import create_session


def build_context(settings: Dict[str, Any]) -> DeployContext:
    """Load the project file and create a DeployContext from CLI settings."""
    project_file = Path(settings["project_file"])
    project_root: Optional[str] = settings.get("project_root")
    root = Path(project_root) if project_root else project_file.resolve().parent

    project = load_project(project_file)
    session = create_session(profile=settings.get("profile"))
    return DeployContext.from_session(project, root, session)


def get_context(ctx: click.Context) -> DeployContext:
    """Get the DeployContext for a command, creating it on first use."""
    settings = ctx.find_root().obj
    if "context" not in settings:
        settings["context"] = build_context(settings)
    return settings["context"]
