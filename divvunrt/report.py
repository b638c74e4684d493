"""Configuration parsing and markdown debug reports for pipeline runs."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from divvunrt.ast import Command

_ANSI_SGR = re.compile(r"\x1b\[[0-9;]*m")


class ConfigError(ValueError):
    """Raised when a ``key=value`` configuration entry cannot be parsed."""


@dataclass(frozen=True)
class TapEvent:
    """One event seen by the tap: the command key, the command and its output."""

    key: str
    command: Command
    event: Any


@dataclass
class PipelineRun:
    """The input of one pipeline run and every tap event it produced."""

    input: str
    events: list[TapEvent] = field(default_factory=list)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def parse_config(config: Iterable[str]) -> dict[str, Any]:
    """Parse ``key=json`` entries into a mapping ordered by key.

    Later entries for the same key replace earlier ones.
    """
    result: dict[str, Any] = {}
    for entry in config:
        key, sep, raw = entry.partition("=")
        if not sep:
            raise ConfigError(f"Invalid input: {entry}")
        try:
            result[key] = json.loads(raw, parse_constant=_reject_constant)
        except ValueError as exc:
            raise ConfigError(f"Invalid value for `{key}`: {exc}") from exc
    return dict(sorted(result.items()))


def strip_ansi_codes(text: str) -> str:
    """Remove ANSI colour and style escape sequences."""
    return _ANSI_SGR.sub("", text)


def render_markdown(run: PipelineRun) -> str:
    """Render a pipeline run as a markdown debug report."""
    lines = [
        "# Pipeline Debug Report",
        "",
        "## Input",
        "```",
        run.input,
        "```",
        "",
        "## Pipeline Execution",
        "",
    ]
    for event in run.events:
        command_str = strip_ansi_codes(str(event.command))
        event_str = strip_ansi_codes(str(event.event))
        lines.extend(
            [
                "<details>",
                f"<summary><code>[{event.key}]</code> <code>{command_str}</code></summary>",
                "",
                "```",
                event_str,
                "```",
                "</details>",
                "",
            ]
        )
    return "\n".join(lines) + "\n"


def save_markdown(run: Optional[PipelineRun], filename: Union[str, Path]) -> None:
    """Write the markdown report for ``run`` to ``filename``.

    Raises ValueError when there is no run to export.
    """
    if run is None:
        raise ValueError("No pipeline run to export")
    Path(filename).write_text(render_markdown(run), encoding="utf-8")