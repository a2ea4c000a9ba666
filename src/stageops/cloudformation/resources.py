"""
Discovery of a stack's provisioned resources.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from ..aws import StackController
from ..errors import ResourceNotFoundError, StackNotFoundError
from ..results import Complete, Partial, Result

logger = logging.getLogger(__name__)

LAMBDA_FUNCTION = "AWS::Lambda::Function"


@dataclass(frozen=True)
class ResourceSummary:
    """One entry of a stack's resource listing."""

    logical_id: str
    physical_id: str
    resource_type: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResourceSummary":
        return cls(
            logical_id=data["LogicalResourceId"],
            physical_id=data.get("PhysicalResourceId", ""),
            resource_type=data.get("ResourceType", ""),
        )


class ResourceCatalog:
    """List stack resources and resolve logical ids to physical ids."""

    def __init__(self, controller: StackController):
        self.controller = controller

    def list_resources(self, stack_name: str) -> Result[List[ResourceSummary]]:
        """
        Collect every resource summary of a stack, one page at a time.

        An error other than "stack does not exist" ends pagination early. The
        summaries gathered so far are returned as a ``Partial`` carrying the
        error instead of raising.

        Args:
            stack_name: Name or id of the stack

        Returns:
            ``Complete`` with all summaries in page order, or ``Partial``

        Raises:
            StackNotFoundError: If the stack does not exist
        """
        summaries: List[ResourceSummary] = []
        next_token = None

        while True:
            try:
                page = self.controller.list_resources_page(stack_name, next_token)
            except StackNotFoundError:
                raise
            except Exception as e:
                logger.warning(
                    f"Stopped listing resources of {stack_name} after "
                    f"{len(summaries)} summaries: {e}"
                )
                return Partial(summaries, e)

            for item in page.get("StackResourceSummaries") or []:
                summaries.append(ResourceSummary.from_dict(item))

            next_token = page.get("NextToken")
            if not next_token:
                return Complete(summaries)

    @staticmethod
    def resolve_physical_ids(
        logical_ids: Iterable[str], summaries: Sequence[ResourceSummary]
    ) -> List[str]:
        """
        Map logical ids to physical ids, keeping the input order.

        Raises:
            ResourceNotFoundError: For the first logical id with no summary
        """
        physical_ids = []
        for logical_id in logical_ids:
            found = next(
                (s for s in summaries if s.logical_id == logical_id), None
            )
            if found is None:
                raise ResourceNotFoundError(logical_id)
            physical_ids.append(found.physical_id)

        return physical_ids

    @staticmethod
    def physical_ids_by_type(
        summaries: Iterable[ResourceSummary], resource_type: str = LAMBDA_FUNCTION
    ) -> Dict[str, str]:
        """Get logical id to physical id for every resource of one type."""
        return {
            s.logical_id: s.physical_id
            for s in summaries
            if s.resource_type == resource_type
        }
