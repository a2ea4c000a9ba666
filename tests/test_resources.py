"""
Tests for stack resource discovery.
"""

from unittest.mock import Mock, call

import pytest
from botocore.exceptions import ClientError

from stageops.cloudformation.resources import ResourceCatalog, ResourceSummary
from stageops.errors import ResourceNotFoundError, StackNotFoundError
from stageops.results import Complete, Partial


def summary(logical_id, resource_type="AWS::Lambda::Function"):
    return {
        "LogicalResourceId": logical_id,
        "PhysicalResourceId": f"demo-dev-{logical_id.lower()}",
        "ResourceType": resource_type,
    }


class TestListResources:
    """Test paginated resource listing."""

    def test_concatenates_pages_in_order(self) -> None:
        """Test every page is collected, following NextToken to the end."""
        controller = Mock()
        controller.list_resources_page.side_effect = [
            {"StackResourceSummaries": [summary("Users"), summary("Orders")], "NextToken": "t1"},
            {"StackResourceSummaries": [summary("Table", "AWS::DynamoDB::Table")], "NextToken": "t2"},
            {"StackResourceSummaries": [summary("Queue", "AWS::SQS::Queue")]},
        ]

        result = ResourceCatalog(controller).list_resources("demo-dev-l")

        assert isinstance(result, Complete)
        assert not result.is_partial
        assert [s.logical_id for s in result.value] == ["Users", "Orders", "Table", "Queue"]
        assert controller.list_resources_page.call_args_list == [
            call("demo-dev-l", None),
            call("demo-dev-l", "t1"),
            call("demo-dev-l", "t2"),
        ]

    def test_page_without_summaries(self) -> None:
        controller = Mock()
        controller.list_resources_page.side_effect = [
            {"NextToken": "t1"},
            {"StackResourceSummaries": [summary("Users")]},
        ]

        result = ResourceCatalog(controller).list_resources("demo-dev-l")

        assert [s.logical_id for s in result.value] == ["Users"]

    def test_transient_error_returns_partial(self) -> None:
        """Test an error on page 3 returns pages 1 and 2 without raising."""
        error = ClientError(
            {"Error": {"Code": "Throttling", "Message": "Rate exceeded"}},
            "ListStackResources",
        )
        controller = Mock()
        controller.list_resources_page.side_effect = [
            {"StackResourceSummaries": [summary("Users")], "NextToken": "t1"},
            {"StackResourceSummaries": [summary("Orders")], "NextToken": "t2"},
            error,
        ]

        result = ResourceCatalog(controller).list_resources("demo-dev-l")

        assert isinstance(result, Partial)
        assert result.is_partial
        assert result.cause is error
        assert [s.logical_id for s in result.value] == ["Users", "Orders"]

    def test_stack_not_found(self) -> None:
        controller = Mock()
        controller.list_resources_page.side_effect = StackNotFoundError(
            "Stack with id demo-dev-l does not exist"
        )

        with pytest.raises(StackNotFoundError):
            ResourceCatalog(controller).list_resources("demo-dev-l")


class TestResolvePhysicalIds:
    """Test logical to physical id resolution."""

    summaries = [
        ResourceSummary("Users", "demo-dev-users", "AWS::Lambda::Function"),
        ResourceSummary("Orders", "demo-dev-orders", "AWS::Lambda::Function"),
        ResourceSummary("Table", "demo-dev-table", "AWS::DynamoDB::Table"),
    ]

    def test_preserves_input_order(self) -> None:
        ids = ResourceCatalog.resolve_physical_ids(["Table", "Users", "Orders"], self.summaries)
        assert ids == ["demo-dev-table", "demo-dev-users", "demo-dev-orders"]

    def test_missing_logical_id(self) -> None:
        """Test the first unmatched id is named and nothing is returned."""
        with pytest.raises(ResourceNotFoundError) as exc_info:
            ResourceCatalog.resolve_physical_ids(["Users", "Billing", "Audit"], self.summaries)

        assert exc_info.value.logical_id == "Billing"
        assert "Billing" in str(exc_info.value)

    def test_exact_match_only(self) -> None:
        with pytest.raises(ResourceNotFoundError):
            ResourceCatalog.resolve_physical_ids(["users"], self.summaries)

    def test_physical_ids_by_type(self) -> None:
        assert ResourceCatalog.physical_ids_by_type(self.summaries) == {
            "Users": "demo-dev-users",
            "Orders": "demo-dev-orders",
        }
        assert ResourceCatalog.physical_ids_by_type(self.summaries, "AWS::DynamoDB::Table") == {
            "Table": "demo-dev-table"
        }
