"""
Tests for per-region env file storage.
"""

from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from stageops.environment.store import (
    EnvConfigStore,
    LocalEnvLocation,
    RemoteEnvLocation,
    env_key,
    local_env_path,
)
from stageops.errors import ConfigurationError, StorageWriteError
from stageops.results import Complete, Partial

NO_SUCH_KEY = ClientError(
    {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
    "GetObject",
)


class TestEnvConfigStore:
    """Test getting and putting env files."""

    def test_env_key(self) -> None:
        assert env_key("demo", "dev") == "Serverless/demo/dev/envVars/.env"

    def test_locate_remote(self, context, stores) -> None:
        location = EnvConfigStore().locate("dev", "eu-west-1", context)

        assert isinstance(location, RemoteEnvLocation)
        assert location.bucket == "demo-dev-euw1"
        assert location.key == "Serverless/demo/dev/envVars/.env"
        assert location.store is stores["eu-west-1"]

    def test_locate_local(self, context, tmp_path: Path) -> None:
        location = EnvConfigStore().locate("local", "us-east-1", context)

        assert location == LocalEnvLocation(tmp_path / "back" / ".env")
        assert local_env_path(tmp_path) == tmp_path / "back" / ".env"

    def test_locate_unknown_region(self, context) -> None:
        with pytest.raises(ConfigurationError):
            EnvConfigStore().locate("dev", "ap-south-1", context)

    def test_get_remote(self, context, stores) -> None:
        """Test a remote env file is fetched from the region bucket and parsed."""
        context.object_store("us-east-1").get_object.return_value = b"API_KEY=x\nOTHER=y\n"

        result = EnvConfigStore().get("dev", "us-east-1", context)

        assert isinstance(result, Complete)
        assert result.value.values == {"API_KEY": "x", "OTHER": "y"}
        assert result.value.raw == b"API_KEY=x\nOTHER=y\n"
        stores["us-east-1"].get_object.assert_called_once_with(
            "demo-dev-use1", "Serverless/demo/dev/envVars/.env"
        )

    def test_get_missing_object_degrades_to_empty(self, context, caplog) -> None:
        """Test a missing remote env file yields an empty map and a warning."""
        context.object_store("us-east-1").get_object.side_effect = NO_SUCH_KEY

        result = EnvConfigStore().get("dev", "us-east-1", context)

        assert isinstance(result, Partial)
        assert result.cause is NO_SUCH_KEY
        assert result.value.values == {}
        assert result.value.raw == b""
        assert "Trouble getting env" in caplog.text

    def test_get_empty_body(self, context) -> None:
        context.object_store("us-east-1").get_object.return_value = b""

        result = EnvConfigStore().get("dev", "us-east-1", context)

        assert isinstance(result, Complete)
        assert result.value.values == {}

    def test_get_local(self, context, tmp_path: Path) -> None:
        env_path = tmp_path / "back" / ".env"
        env_path.parent.mkdir()
        env_path.write_text("DEBUG=1\n")

        result = EnvConfigStore().get("local", "local", context)

        assert result.value.values == {"DEBUG": "1"}

    def test_get_local_missing(self, context) -> None:
        result = EnvConfigStore().get("local", "local", context)

        assert result.is_partial
        assert isinstance(result.cause, FileNotFoundError)

    def test_put_remote(self, context, stores) -> None:
        EnvConfigStore().put("dev", "eu-west-1", "OTHER=y\n", context)

        stores["eu-west-1"].put_object.assert_called_once_with(
            "demo-dev-euw1", "Serverless/demo/dev/envVars/.env", b"OTHER=y\n", "text/plain"
        )

    def test_put_remote_failure_propagates(self, context) -> None:
        """Test write failures are raised, unlike read failures."""
        context.object_store("us-east-1").put_object.side_effect = StorageWriteError("denied")

        with pytest.raises(StorageWriteError):
            EnvConfigStore().put("dev", "us-east-1", "A=1\n", context)

    def test_put_local(self, context, tmp_path: Path) -> None:
        EnvConfigStore().put("local", "local", "A=1\n", context)

        assert (tmp_path / "back" / ".env").read_text() == "A=1\n"

    def test_put_local_failure(self, context, tmp_path: Path) -> None:
        (tmp_path / "back").write_text("not a directory")

        with pytest.raises(StorageWriteError):
            EnvConfigStore().put("local", "local", "A=1\n", context)
