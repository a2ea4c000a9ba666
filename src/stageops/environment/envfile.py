"""
Plain KEY=VALUE env file format.

One record per line, newline terminated. CRLF line endings are accepted.
There is no quoting, escaping, or comment syntax, so keys and values must
not contain "=" or a newline.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Union


@dataclass
class EnvMap:
    """Parsed env file for one stage and region, plus the bytes it came from."""

    values: Dict[str, str] = field(default_factory=dict)
    raw: bytes = b""

    @classmethod
    def empty(cls) -> "EnvMap":
        return cls()

    @classmethod
    def parse(cls, raw: Union[bytes, str]) -> "EnvMap":
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        return cls(values=parse_env(raw), raw=raw)


def parse_env(raw: Union[bytes, str]) -> Dict[str, str]:
    """Parse env file contents into an ordered dict."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")

    values: Dict[str, str] = {}
    for line in raw.split("\n"):
        line = line.rstrip("\r")
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key] = value
    return values


def serialize_env(values: Mapping[str, str]) -> str:
    """Serialize a mapping as KEY=VALUE lines in iteration order."""
    return "".join(f"{key}={value}\n" for key, value in values.items())


def is_valid_env_token(value: str) -> bool:
    """Check that a key or value survives a serialize/parse round trip."""
    return "=" not in value and "\n" not in value and "\r" not in value
