# divvunrt

Building blocks for working with language-technology pipelines: reading
and writing pipeline definitions, preparing and splitting Constraint
Grammar (CG3) streams, printing status lines on the console and writing
markdown debug reports of pipeline runs. It has no dependencies outside
the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## `divvunrt.ast`: pipeline definitions

A `PipelineDefinition` has an `entry` (an `Entry` with a `value_type`),
an `output` (a `Ref` naming a command key) and `commands`, an ordered
dict of `Command` objects. Each `Command` has a `module`, a `command`
name, an `input` (one `Ref`, or a tuple of them), a `returns` type and
`args`, a dict of `Arg` (`type`, `value_type`, `value`).

```python
from divvunrt.ast import PipelineDefinition

defn = PipelineDefinition.from_dict(data)   # data parsed from JSON
defn.assets()        # every Path named by an argument whose type mentions "path"
defn.to_dict()       # back to JSON-compatible data
print(defn.commands["tokenize"])            # coloured one-line summary
defn.output.resolve(defn)                   # the Command the output refers to, or None
```

`from_dict` raises `DefinitionError` (a `ValueError`) when a field is
missing or has the wrong shape. Argument values are plain Python values:
`int` (64-bit range), `str`, `list`, `dict` or `None`; booleans and
floats are rejected.

Helpers read a value as a particular shape and return `None` when it
does not match: `try_as_int`, `try_as_string`, `try_as_path`,
`try_as_array_string`, `try_as_array_path`, `try_as_map_string` and
`try_as_map_path`. The two map helpers raise `DefinitionError` if a map
holds a value that is not a string. `format_value` renders a value with
terminal colour codes.

## `divvunrt.shell`: console output

`Shell` writes status lines to stderr, with the status right-aligned to
twelve columns and coloured, and honours a `Verbosity` (`VERY_VERBOSE`,
`VERBOSE`, `NORMAL`, `QUIET`) and a `ColorChoice` (`ALWAYS`, `NEVER`,
`CARGO_AUTO`). In auto mode colour is used only on a terminal, and not
when `NO_COLOR` is set or `TERM` is `dumb`.

```python
from divvunrt.shell import Color, Shell

shell = Shell()                        # or Shell(stdout=..., stderr=...)
shell.status("Processing", "pipeline.ts")
shell.status_with_color("Running", "job", Color.CYAN)
shell.error("Asset file not found")    # printed even when quiet
shell.set_color_choice("never")        # "always", "never", "auto" or None
```

`Shell.from_write(stream)` sends everything, uncoloured, to one file-like
object, which suits tests. Other members: `print`, `status_header`,
`verbose`, `very_verbose` and `concise` (run a callback depending on the
verbosity), `write_stdout` and `write_stderr` (a fragment in a given
`Color`), `print_ansi_stdout` and `print_ansi_stderr` (text or bytes),
`out` and `err` (the underlying streams), `err_erase_line`,
`set_needs_clear`, `is_cleared`, `is_err_tty`, `err_supports_color`,
`out_supports_color`, the `color_choice` property and `err_width`, which
returns a `TtyWidth` with `diagnostic_terminal_width()` and
`progress_max_width()`.

## `divvunrt.cg3`: CG3 stream helpers

`StreamCmd(key).forward(text, config)` puts a `<STREAMCMD:key>` line in
front of the text. For the keys `SETVAR` and `REMVAR` the value comes from
`config`: `None`, an empty list or an empty dict leave the text unchanged;
a scalar is written as is; a list is written as comma-separated JSON; a
dict becomes `name=value` entries sorted by name, where `None` or a nested
dict gives just the name and a list gives `name=[...]`.

```python
from divvunrt.cg3 import StreamCmd, to_json

StreamCmd("SETVAR").forward("text", {"lang": "sme"})
# '<STREAMCMD:SETVAR:lang=sme>\ntext'
```

`to_json(text)` returns every match of the CG line pattern as a list: the
whole match followed by its groups (cohort, reading, text, flush and
comment parts), with `None` for groups that did not take part.
`SentenceMode.parse` accepts `"surface"` and `"phonological"`. Input that
is not a string, an unknown mode or an unsupported config raises
`CommandError` (a `ValueError`).

## `divvunrt.report`: configuration and debug reports

```python
from divvunrt.report import PipelineRun, TapEvent, parse_config, save_markdown

config = parse_config(["tokenize={\"lang\": \"sme\"}", "depth=2"])
run = PipelineRun(input="Some input", events=[TapEvent("tokenize", command, output)])
save_markdown(run, "pipeline_debug.md")
```

`parse_config` turns `key=<json>` entries into a dict ordered by key;
later entries replace earlier ones, and a missing `=` or bad JSON raises
`ConfigError`. `render_markdown(run)` returns the report as text, with
one collapsible section per event; `save_markdown` writes it and raises
`ValueError` when the run is `None`. `strip_ansi_codes` removes colour
and style escape sequences.

## What this package does not do

It does not execute pipelines: there is no scheduler that feeds input
through the commands of a `PipelineDefinition`, and no loading of bundle
archives. It does not compile pipeline scripts into definitions, and it
has no command-line program or interactive prompt. Of the CG3 commands
only stream-command prefixing and line splitting are here; grammar
application, multi-word splitting and sentence splitting need a CG3
engine, which is not included.