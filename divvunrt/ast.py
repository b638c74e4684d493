"""Pipeline definition model: commands, their arguments, references and values."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

ENTRY_REF = "#/entry"

_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

Value = Union[int, str, list, dict, None]


class DefinitionError(ValueError):
    """Raised when a pipeline definition or argument value is malformed."""


@dataclass(frozen=True)
class Ref:
    """A reference to a command (or the entry) by key."""

    ref: str

    def resolve(self, defn: "PipelineDefinition") -> Optional["Command"]:
        """Return the command this reference points at, or None."""
        return defn.commands.get(self.ref)


@dataclass(frozen=True)
class Entry:
    """The pipeline's entry point and the type of value it accepts."""

    value_type: str


@dataclass
class Arg:
    """A typed argument passed to a command."""

    type: str
    value_type: Optional[str] = None
    value: Value = None


InputValue = Union[Ref, Tuple[Ref, ...]]


@dataclass
class Command:
    """One step of a pipeline: a module command fed by one or more inputs."""

    module: str
    command: str
    input: InputValue
    returns: str
    args: dict[str, Arg] = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [
            f"\x1b[32m{self.module}\x1b[0m::\x1b[36m{self.command}\x1b[0m("
        ]
        parts.append(
            ", ".join(
                f"{name} = \x1b[90m<{arg.type}>\x1b[0m\x1b[1m{format_value(arg.value)}\x1b[0m"
                for name, arg in self.args.items()
            )
        )
        parts.append(f") \x1b[90m-> {self.returns}\x1b[0m")
        return "".join(parts)


@dataclass
class PipelineDefinition:
    """A whole pipeline: entry, output reference and commands in order."""

    entry: Entry
    output: Ref
    commands: dict[str, Command] = field(default_factory=dict)

    def assets(self) -> list[Path]:
        """Every path named by an argument whose type mentions ``path``."""
        found: list[Path] = []
        for command in self.commands.values():
            for arg in command.args.values():
                if "path" not in arg.type or arg.value is None:
                    continue
                as_map = try_as_map_path(arg.value)
                if as_map is not None:
                    found.extend(as_map.values())
                    continue
                as_array = try_as_array_path(arg.value)
                if as_array is not None:
                    found.extend(as_array)
                    continue
                as_path = try_as_path(arg.value)
                if as_path is not None:
                    found.append(as_path)
        return found

    def to_dict(self) -> dict[str, Any]:
        """Serialise to plain JSON-compatible data."""
        return {
            "entry": {"value_type": self.entry.value_type},
            "output": _ref_to_dict(self.output),
            "commands": {
                key: _command_to_dict(cmd) for key, cmd in self.commands.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PipelineDefinition":
        """Build a definition from parsed JSON data, validating its shape."""
        obj = _expect_mapping(data, "pipeline definition")
        entry_raw = _expect_mapping(_require(obj, "entry", "pipeline definition"), "entry")
        entry = Entry(_expect_str(_require(entry_raw, "value_type", "entry"), "entry.value_type"))
        output = _parse_ref(_require(obj, "output", "pipeline definition"), "output")
        commands_raw = _expect_mapping(
            _require(obj, "commands", "pipeline definition"), "commands"
        )
        commands = {
            _expect_str(key, "command key"): _parse_command(raw, f"commands.{key}")
            for key, raw in commands_raw.items()
        }
        return cls(entry=entry, output=output, commands=commands)


def _require(obj: Mapping[str, Any], key: str, where: str) -> Any:
    try:
        return obj[key]
    except KeyError:
        raise DefinitionError(f"missing field `{key}` in {where}") from None


def _expect_mapping(raw: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise DefinitionError(f"{where}: expected an object")
    return raw


def _expect_str(raw: Any, where: str) -> str:
    if not isinstance(raw, str):
        raise DefinitionError(f"{where}: expected a string")
    return raw


def _optional_str(raw: Any, where: str) -> Optional[str]:
    return None if raw is None else _expect_str(raw, where)


def _parse_ref(raw: Any, where: str) -> Ref:
    obj = _expect_mapping(raw, where)
    return Ref(_expect_str(_require(obj, "ref", where), f"{where}.ref"))


def _ref_to_dict(ref: Ref) -> dict[str, str]:
    return {"ref": ref.ref}


def _parse_input(raw: Any, where: str) -> InputValue:
    if isinstance(raw, Mapping):
        return _parse_ref(raw, where)
    if isinstance(raw, list):
        return tuple(_parse_ref(item, f"{where}[{i}]") for i, item in enumerate(raw))
    raise DefinitionError(f"{where}: expected a reference or a list of references")


def _input_to_json(value: InputValue) -> Any:
    if isinstance(value, Ref):
        return _ref_to_dict(value)
    return [_ref_to_dict(ref) for ref in value]


def _parse_value(raw: Any, where: str) -> Value:
    if raw is None or isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        raise DefinitionError(f"{where}: booleans are not valid argument values")
    if isinstance(raw, int):
        if not _INT_MIN <= raw <= _INT_MAX:
            raise DefinitionError(f"{where}: integer out of range")
        return raw
    if isinstance(raw, list):
        return [_parse_value(item, f"{where}[{i}]") for i, item in enumerate(raw)]
    if isinstance(raw, Mapping):
        return {
            _expect_str(k, f"{where} key"): _parse_value(v, f"{where}.{k}")
            for k, v in raw.items()
        }
    raise DefinitionError(f"{where}: unsupported value of type {type(raw).__name__}")


def _parse_arg(raw: Any, where: str) -> Arg:
    obj = _expect_mapping(raw, where)
    return Arg(
        type=_expect_str(_require(obj, "type", where), f"{where}.type"),
        value_type=_optional_str(obj.get("value_type"), f"{where}.value_type"),
        value=_parse_value(obj.get("value"), f"{where}.value"),
    )


def _parse_command(raw: Any, where: str) -> Command:
    obj = _expect_mapping(raw, where)
    args_raw = obj.get("args")
    args_obj = {} if args_raw is None else _expect_mapping(args_raw, f"{where}.args")
    return Command(
        module=_expect_str(_require(obj, "module", where), f"{where}.module"),
        command=_expect_str(_require(obj, "command", where), f"{where}.command"),
        input=_parse_input(_require(obj, "input", where), f"{where}.input"),
        returns=_expect_str(_require(obj, "returns", where), f"{where}.returns"),
        args={
            _expect_str(name, f"{where}.args key"): _parse_arg(a, f"{where}.args.{name}")
            for name, a in args_obj.items()
        },
    )


def _command_to_dict(cmd: Command) -> dict[str, Any]:
    return {
        "module": cmd.module,
        "command": cmd.command,
        "args": {
            name: {"type": a.type, "value_type": a.value_type, "value": a.value}
            for name, a in cmd.args.items()
        },
        "input": _input_to_json(cmd.input),
        "returns": cmd.returns,
    }


_SIMPLE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _quote(text: str) -> str:
    def escape(ch: str) -> str:
        if ch in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[ch]
        if unicodedata.category(ch) == "Cc":
            return f"\\u{{{ord(ch):x}}}"
        return ch

    return '"' + "".join(escape(ch) for ch in text) + '"'


def format_value(value: Value) -> str:
    """Render an argument value with terminal colours."""
    separator = "\x1b[1;37m, \x1b[0m"
    if value is None:
        return "\x1b[1;90m\u2400\x1b[0m"
    if isinstance(value, bool):
        raise DefinitionError("booleans are not valid argument values")
    if isinstance(value, int):
        return f"\x1b[1;32m{value}\x1b[0m"
    if isinstance(value, str):
        return f"\x1b[1;31m{_quote(value)}\x1b[0m"
    if isinstance(value, list):
        inner = separator.join(format_value(item) for item in value)
        return f"\x1b[1;37m[\x1b[0m{inner}\x1b[1;37m]\x1b[0m"
    if isinstance(value, Mapping):
        inner = separator.join(f"{k}: {format_value(v)}" for k, v in value.items())
        return f"\x1b[1;37m{{{inner}\x1b[1;37m}}\x1b[0m"
    raise DefinitionError(f"unsupported value of type {type(value).__name__}")


def try_as_int(value: Value) -> Optional[int]:
    """The value as an integer, or None."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def try_as_string(value: Value) -> Optional[str]:
    """The value as a string, or None."""
    return value if isinstance(value, str) else None


def try_as_path(value: Value) -> Optional[Path]:
    """The value as a path, or None."""
    return Path(value) if isinstance(value, str) else None


def try_as_array_string(value: Value) -> Optional[list[str]]:
    """The value as a list of strings, or None if it is not one."""
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


def try_as_array_path(value: Value) -> Optional[list[Path]]:
    """The value as a list of paths, or None if it is not one."""
    strings = try_as_array_string(value)
    return None if strings is None else [Path(s) for s in strings]


def _map_of_strings(value: Mapping[str, Value]) -> dict[str, str]:
    result: dict[str, str] = {}
    for key, item in value.items():
        if not isinstance(item, str):
            raise DefinitionError(f"map entry `{key}` is not a string")
        result[key] = item
    return result


def try_as_map_string(value: Value) -> Optional[dict[str, str]]:
    """The value as a map of strings, or None if it is not a map.

    Raises DefinitionError if it is a map holding a non-string entry.
    """
    if not isinstance(value, Mapping):
        return None
    return _map_of_strings(value)


def try_as_map_path(value: Value) -> Optional[dict[str, Path]]:
    """The value as a map of paths, or None if it is not a map.

    Raises DefinitionError if it is a map holding a non-string entry.
    """
    if not isinstance(value, Mapping):
        return None
    return {key: Path(item) for key, item in _map_of_strings(value).items()}