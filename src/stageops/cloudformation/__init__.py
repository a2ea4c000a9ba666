"""
CloudFormation stack lifecycle: template staging, create/update, status
polling, and resource discovery.
"""

from .monitor import StackStatusMonitor
from .resources import ResourceCatalog, ResourceSummary
from .stack_manager import StackDescriptor, StackManager
from .templates import TemplateUploader

__all__ = [
    "StackManager",
    "StackDescriptor",
    "StackStatusMonitor",
    "ResourceCatalog",
    "ResourceSummary",
    "TemplateUploader",
]
