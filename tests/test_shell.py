import io

import pytest

from divvunrt.shell import Color, ColorChoice, Shell, TtyWidth, Verbosity


def _stream_shell(choice):
    out, err = io.StringIO(), io.StringIO()
    shell = Shell(stdout=out, stderr=err)
    shell.set_color_choice(choice)
    return shell, out, err


def test_tty_width_known():
    width = TtyWidth(80)
    assert width.diagnostic_terminal_width() == 80
    assert width.progress_max_width() == 80


def test_tty_width_guess_only_for_progress():
    width = TtyWidth(60, guessed=True)
    assert width.diagnostic_terminal_width() is None
    assert width.progress_max_width() == 60


def test_tty_width_no_tty():
    width = TtyWidth()
    assert width.diagnostic_terminal_width() is None
    assert width.progress_max_width() is None


def test_write_status_is_justified():
    buf = io.StringIO()
    shell = Shell.from_write(buf)
    shell.status("Creating", "pipeline.ts")
    assert buf.getvalue() == "Creating".rjust(12) + " pipeline.ts\n\n"


def test_write_status_header_without_message():
    buf = io.StringIO()
    shell = Shell.from_write(buf)
    shell.status_header("Header")
    assert buf.getvalue() == "Header".rjust(12) + " \n"


def test_write_error_is_not_justified():
    buf = io.StringIO()
    Shell.from_write(buf).error("boom")
    assert buf.getvalue() == "Error: boom\n\n"


def test_quiet_suppresses_status_but_not_error():
    buf = io.StringIO()
    shell = Shell.from_write(buf)
    shell.verbosity = Verbosity.QUIET
    shell.status("Creating", "x")
    assert buf.getvalue() == ""
    shell.error("bad")
    assert buf.getvalue().startswith("Error: bad")


def test_verbosity_callbacks():
    shell = Shell.from_write(io.StringIO())
    assert shell.verbose(lambda s: 1) == 1
    assert shell.very_verbose(lambda s: 2) is None
    assert shell.concise(lambda s: 3) is None
    shell.verbosity = Verbosity.VERY_VERBOSE
    assert shell.very_verbose(lambda s: 2) == 2
    shell.verbosity = Verbosity.NORMAL
    assert shell.concise(lambda s: 3) == 3
    assert shell.verbose(lambda s: 1) is None


def test_callback_receives_shell():
    shell = Shell.from_write(io.StringIO())
    assert shell.verbose(lambda s: s) is shell


def test_write_mode_color_choice_is_never():
    shell = Shell.from_write(io.StringIO())
    shell.set_color_choice("always")
    assert shell.color_choice is ColorChoice.NEVER
    assert shell.err_supports_color() is False
    assert shell.out_supports_color() is False


def test_invalid_color_choice_raises():
    shell, _, _ = _stream_shell("never")
    with pytest.raises(ValueError, match="bogus"):
        shell.set_color_choice("bogus")


def test_color_choice_always_colours_status():
    shell, _, err = _stream_shell("always")
    assert shell.color_choice is ColorChoice.ALWAYS
    assert shell.err_supports_color()
    shell.status("Creating", "pipeline.ts")
    text = err.getvalue()
    assert "\x1b[1m" in text
    assert "\x1b[32m" in text
    assert "Creating".rjust(12) in text
    assert text.endswith("\x1b[0m")


def test_color_choice_never_is_plain():
    shell, _, err = _stream_shell("never")
    assert not shell.err_supports_color()
    shell.status("Creating", "pipeline.ts")
    assert err.getvalue() == "Creating".rjust(12) + " pipeline.ts\n"


def test_auto_on_non_tty_has_no_colour():
    shell, _, _ = _stream_shell(None)
    assert shell.color_choice is ColorChoice.CARGO_AUTO
    assert not shell.err_supports_color()
    assert not shell.out_supports_color()


def test_non_tty_width_and_tty_flag():
    shell, _, _ = _stream_shell("always")
    assert shell.is_err_tty() is False
    assert shell.err_width() == TtyWidth()


def test_needs_clear_erases_with_colour():
    shell, _, err = _stream_shell("always")
    shell.set_needs_clear(True)
    assert not shell.is_cleared()
    shell.err()
    assert err.getvalue() == "\x1b[K"
    assert shell.is_cleared()


def test_needs_clear_stays_without_colour():
    buf = io.StringIO()
    shell = Shell.from_write(buf)
    shell.set_needs_clear(True)
    shell.out()
    assert buf.getvalue() == ""
    assert not shell.is_cleared()


def test_write_stdout_plain_and_coloured():
    buf = io.StringIO()
    Shell.from_write(buf).write_stdout("hello", Color.RED)
    assert buf.getvalue() == "hello"

    shell, out, _ = _stream_shell("always")
    shell.write_stdout("hello", Color.RED)
    text = out.getvalue()
    assert "\x1b[31m" in text
    assert "hello" in text


def test_write_stderr_plain_when_never():
    shell, out, err = _stream_shell("never")
    shell.write_stderr("frag", Color.CYAN)
    assert err.getvalue() == "frag"
    assert out.getvalue() == ""


def test_print_ansi_decodes_bytes():
    shell, out, err = _stream_shell("never")
    shell.print_ansi_stdout(b"\x1b[1mhi\x1b[0m")
    shell.print_ansi_stderr("err")
    assert out.getvalue() == "\x1b[1mhi\x1b[0m"
    assert err.getvalue() == "err"


def test_status_with_color_uses_given_colour():
    shell, _, err = _stream_shell("always")
    shell.status_with_color("Running", "app", Color.CYAN)
    assert "\x1b[36m" in err.getvalue()
    assert "app" in err.getvalue()