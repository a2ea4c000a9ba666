"""
stageops - CloudFormation stack lifecycle and per-region environment propagation
for projects deployed across a matrix of stages and regions.
"""

__version__ = "1.0.0"

from .config import Project, RegionConfig, load_project
from .context import DeployContext

__all__ = ["Project", "RegionConfig", "load_project", "DeployContext"]
