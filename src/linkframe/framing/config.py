"""Wire constants and link configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..exceptions import ConfigurationError

START_TAG = 0x7B  # "{"
STOP_TAG = 0x7D  # "}"
ESCAPE_TAG = 0x5C  # "\"
MAX_PAYLOAD = 8

SCHEMES = ("hamming", "crc")
DEFAULT_SCHEME = "hamming"


def _require_byte(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise ConfigurationError(f"'{name}' must be a byte value (0-255)")
    return value


@dataclass(frozen=True)
class LinkCfg:
    """Framing and error-control configuration for one data link."""

    scheme: str = DEFAULT_SCHEME
    max_payload: int = MAX_PAYLOAD
    start_tag: int = START_TAG
    stop_tag: int = STOP_TAG
    escape_tag: int = ESCAPE_TAG

    def __post_init__(self) -> None:
        if self.scheme not in SCHEMES:
            raise ConfigurationError(f"Unsupported scheme: {self.scheme!r}")
        if (
            isinstance(self.max_payload, bool)
            or not isinstance(self.max_payload, int)
            or self.max_payload <= 0
        ):
            raise ConfigurationError("'max_payload' must be a positive integer")
        tags = [
            _require_byte("start_tag", self.start_tag),
            _require_byte("stop_tag", self.stop_tag),
            _require_byte("escape_tag", self.escape_tag),
        ]
        if len(set(tags)) != len(tags):
            raise ConfigurationError("start, stop and escape tags must be distinct")

    @property
    def tags(self) -> frozenset:
        return frozenset((self.start_tag, self.stop_tag, self.escape_tag))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheme": self.scheme,
            "max_payload": self.max_payload,
            "start_tag": self.start_tag,
            "stop_tag": self.stop_tag,
            "escape_tag": self.escape_tag,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "LinkCfg":
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigurationError("link configuration must be an object")
        unknown = set(data) - set(cls().to_dict())
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(
            scheme=data.get("scheme", DEFAULT_SCHEME),
            max_payload=data.get("max_payload", MAX_PAYLOAD),
            start_tag=data.get("start_tag", START_TAG),
            stop_tag=data.get("stop_tag", STOP_TAG),
            escape_tag=data.get("escape_tag", ESCAPE_TAG),
        )


DEFAULT_CFG = LinkCfg()


def load_config(path: Union[str, Path]) -> LinkCfg:
    """Load a :class:`LinkCfg` from a JSON file."""

    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read configuration file: {path}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError("configuration file is not valid JSON") from exc
    return LinkCfg.from_dict(data)


__all__ = [
    "DEFAULT_CFG",
    "DEFAULT_SCHEME",
    "ESCAPE_TAG",
    "LinkCfg",
    "MAX_PAYLOAD",
    "SCHEMES",
    "START_TAG",
    "STOP_TAG",
    "load_config",
]
