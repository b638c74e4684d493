import pytest

from divvunrt.cg3 import CommandError, SentenceMode, StreamCmd, to_json


def test_sentence_mode_parse_known_names():
    assert SentenceMode.parse("surface") is SentenceMode.SURFACE_FORM
    assert SentenceMode.parse("phonological") is SentenceMode.PHONOLOGICAL_FORM


def test_sentence_mode_parse_unknown_raises():
    with pytest.raises(CommandError):
        SentenceMode.parse("Surface")


def test_streamcmd_requires_string_key():
    with pytest.raises(CommandError):
        StreamCmd(None)


def test_streamcmd_plain_key_prefixes_input():
    assert StreamCmd("FLUSH").forward("abc", None) == "<STREAMCMD:FLUSH>\nabc"


def test_streamcmd_plain_key_ignores_config():
    cmd = StreamCmd("FLUSH")
    assert cmd.forward("abc", {"a": 1}) == cmd.forward("abc", None)


@pytest.mark.parametrize("key", ["SETVAR", "REMVAR"])
@pytest.mark.parametrize("config", [None, [], {}])
def test_streamcmd_var_empty_config_returns_input(key, config):
    assert StreamCmd(key).forward("text here", config) == "text here"


def test_streamcmd_string_config_is_written_raw():
    assert StreamCmd("SETVAR").forward("t", "x") == "<STREAMCMD:SETVAR:x>\nt"


def test_streamcmd_bool_config():
    assert StreamCmd("REMVAR").forward("t", True) == "<STREAMCMD:REMVAR:true>\nt"


def test_streamcmd_array_config_quotes_strings():
    out = StreamCmd("SETVAR").forward("t", ["a", 1])
    assert out == '<STREAMCMD:SETVAR:"a",1>\nt'


def test_streamcmd_object_config_entries():
    config = {"b": 1, "a": None, "c": "v", "d": ["x"], "e": {"n": 1}, "f": False}
    out = StreamCmd("SETVAR").forward("t", config)
    assert out == '<STREAMCMD:SETVAR:a,b=1,c=v,d=["x"],e,f=false>\nt'


def test_streamcmd_object_keys_sorted_regardless_of_order():
    cmd = StreamCmd("SETVAR")
    assert cmd.forward("t", {"z": 1, "a": 2}) == cmd.forward("t", {"a": 2, "z": 1})


def test_streamcmd_output_ends_with_input():
    text = "\"<word>\"\n\t\"word\" N\n"
    out = StreamCmd("SETVAR").forward(text, {"k": 3})
    assert out.startswith("<STREAMCMD:SETVAR:")
    assert out.endswith("\n" + text)


def test_streamcmd_rejects_non_string_input():
    with pytest.raises(CommandError):
        StreamCmd("FLUSH").forward(b"abc", None)


def test_to_json_no_leading_newline_has_no_matches():
    assert to_json('"<word>"\n') == []


def test_to_json_cohort_line():
    result = to_json('\n"<word>"\n')
    assert len(result) == 1
    groups = result[0]
    assert len(groups) == 9
    assert groups[1] == '"<word>"\n'
    assert groups[2] == "word"
    assert groups[3:] == [None] * 6


def test_to_json_reading_line():
    result = to_json('\n\t"lemma" N Sg\n')
    groups = result[0]
    assert groups[3] == "\t"
    assert groups[4] == '"lemma"'
    assert groups[5] == " N Sg"
    assert groups[2] is None


def test_to_json_text_line():
    groups = to_json("\n:some text\n")[0]
    assert groups[6] == "some text"


def test_to_json_flush_line():
    groups = to_json("\n<STREAMCMD:FLUSH>\n")[0]
    assert groups[7] == "<STREAMCMD:FLUSH>"


def test_to_json_removed_reading_line():
    groups = to_json('\n;\t"x" N\n')[0]
    assert groups[8] == ';\t"x" N'


def test_to_json_rejects_non_string():
    with pytest.raises(CommandError):
        to_json(42)