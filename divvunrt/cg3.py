"""Constraint Grammar stream helpers: stream commands and line parsing."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class CommandError(ValueError):
    """Raised when a command is misconfigured or given unsuitable input."""


class SentenceMode(Enum):
    """Which form of each cohort makes up a sentence."""

    SURFACE_FORM = "surface"
    PHONOLOGICAL_FORM = "phonological"

    @classmethod
    def parse(cls, text: str) -> "SentenceMode":
        """The mode named by ``text``; raises CommandError for unknown names."""
        for mode in cls:
            if mode.value == text:
                return mode
        raise CommandError(f"unknown sentence mode: {text!r}")


def _json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, sort_keys=True)


def _scalar(value: Any) -> str:
    """Render a bool, number or string the way a config value is written."""
    if isinstance(value, str):
        return value
    return _json(value)


def _join_json(values: list) -> str:
    return ",".join(_json(item) for item in values)


def _map_entry(key: str, value: Any) -> str:
    if value is None or isinstance(value, dict):
        return key
    if isinstance(value, list):
        return f"{key}=[{_join_json(value)}]"
    return f"{key}={_scalar(value)}"


def _require_text(text: Any) -> str:
    if not isinstance(text, str):
        raise CommandError(f"expected string input, got {type(text).__name__}")
    return text


@dataclass(frozen=True)
class StreamCmd:
    """Prefixes a CG stream with a ``<STREAMCMD:...>`` line."""

    key: str

    def __post_init__(self) -> None:
        if not isinstance(self.key, str):
            raise CommandError("key missing")

    def forward(self, text: str, config: Any = None) -> str:
        """Prefix ``text`` with the stream command, using ``config`` for variables.

        For ``SETVAR`` and ``REMVAR`` an empty configuration leaves the text
        unchanged; otherwise the configuration becomes the command's value.
        """
        text = _require_text(text)

        if self.key not in ("REMVAR", "SETVAR"):
            return f"<STREAMCMD:{self.key}>\n{text}"

        if config is None:
            return text
        if isinstance(config, list):
            if not config:
                return text
            value = _join_json(config)
        elif isinstance(config, dict):
            if not config:
                return text
            value = ",".join(_map_entry(k, config[k]) for k in sorted(config))
        elif isinstance(config, (bool, int, float, str)):
            value = _scalar(config)
        else:
            raise CommandError(f"unsupported config of type {type(config).__name__}")

        return f"<STREAMCMD:{self.key}:{value}>\n{text}"


CG_LINE = re.compile(
    "^\n"
    '("<(.*)>".*\n'
    '|(\t+)("[^"]*"\\S*)((?:\\s+\\S+)*)\\s*\n'
    "|:(.*)\n"
    "|(<STREAMCMD:FLUSH>)\n"
    "|(;\t+.*)\n"
    ")"
)


def to_json(text: str) -> list[list[Optional[str]]]:
    """Every match of the CG line pattern, as the full match followed by its groups."""
    text = _require_text(text)
    return [[match.group(0), *match.groups()] for match in CG_LINE.finditer(text)]