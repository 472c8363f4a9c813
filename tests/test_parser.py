import warnings
from io import StringIO
from pathlib import Path

import pytest

from inihandler import IniIOError, IniLines, IniParser, IniStore
from inihandler.ini import LineKind, classify


def parse(text: str):
    return IniParser.readstream(StringIO(text, newline=""))


@pytest.mark.parametrize(
    "line, kind, name, value",
    [
        ("", LineKind.COMMENT, "", ""),
        ("   \t\r", LineKind.COMMENT, "", ""),
        ("; note", LineKind.COMMENT, "", ""),
        ("  # note = 1", LineKind.COMMENT, "", ""),
        ("[Common]", LineKind.SECTION, "Common", ""),
        ("  [Call Sign] \r", LineKind.SECTION, "Call Sign", ""),
        ("[]", LineKind.SECTION, "", ""),
        ("[Broken", LineKind.OTHER, "", ""),
        ("just text", LineKind.OTHER, "", ""),
        ("= orphan value", LineKind.OTHER, "", ""),
        ("TX Power = 20", LineKind.PAIR, "TX Power", "20"),
        ("TX Power=20\r", LineKind.PAIR, "TX Power", "20"),
        ("Call Sign = OLD ; inline note", LineKind.PAIR, "Call Sign", "OLD"),
        ("Freq = 20m # band", LineKind.PAIR, "Freq", "20m"),
        ("Empty =", LineKind.PAIR, "Empty", ""),
        ("Expr = a=b", LineKind.PAIR, "Expr", "a=b"),
        (r"Path = C:\;D:\ ; two", LineKind.PAIR, "Path", "C:;D:\\"),
        (r"Tag = \#1", LineKind.PAIR, "Tag", "#1"),
        ("[a = b", LineKind.PAIR, "[a", "b"),
    ],
)
def test_classify(line, kind, name, value):
    parsed = classify(line)
    assert parsed.kind is kind
    assert parsed.name == name
    assert parsed.value == value


def test_readstream_builds_store_and_lines():
    text = (
        "orphan = 1\n"
        "; comment\n"
        "[Control]\n"
        "Transmit = False\n"
        "garbage line\n"
        "[Empty]\n"
        "[Common]\n"
        "Call Sign = AA0XX ; mine\n"
    )
    store, lines = parse(text)

    assert store.sections() == ["", "Control", "Empty", "Common"]
    assert store.get_value("", "orphan") == "1"
    assert store.get_value("Control", "Transmit") == "False"
    assert store.get_value("Common", "Call Sign") == "AA0XX"
    assert len(store["Empty"]) == 0

    assert len(lines) == 8
    assert lines[4] == "garbage line"
    assert lines.newline_at_eof
    assert store.line_of("Common", "Call Sign") == 7
    assert store.line_of("", "orphan") == 0
    assert not store.dirty


def test_readstream_keeps_crlf_and_missing_final_newline():
    store, lines = parse("[A]\r\nk = v\r\n; c")
    assert lines.lines == ["[A]\r", "k = v\r", "; c"]
    assert lines.crlf
    assert not lines.newline_at_eof
    assert store.get_value("A", "k") == "v"


def test_readstream_empty_text():
    store, lines = parse("")
    assert len(store) == 0
    assert len(lines) == 0
    assert lines.newline_at_eof


def test_duplicate_key_last_wins_with_warning():
    with pytest.warns(UserWarning, match="more than once"):
        store, _ = parse("[A]\nk = 1\nk = 2\n")
    assert store.get_value("A", "k") == "2"
    assert store.line_of("A", "k") == 2


def test_repeated_section_merges():
    store, _ = parse("[A]\nx = 1\n[B]\ny = 2\n[A]\nz = 3\n")
    assert store.sections() == ["A", "B"]
    assert dict(store["A"]) == {"x": "1", "z": "3"}


@pytest.mark.parametrize(
    "text",
    [
        "",
        "\n",
        "; only a comment",
        "[A]\nk = v\n",
        "[A]\r\nk = v ; note\r\n\r\n[B]\r\nx=1\r\n",
        "  indented = yes   # trailing\n[ spaced ]\nodd line\n",
        "[A]\nk = 1\nk = 2\n",
        "mixed\r\nendings\nhere\r",
    ],
)
def test_dumps_without_changes_is_identity(text):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        store, lines = parse(text)
    assert IniParser.dumps(store, lines) == text


def test_dumps_rewrites_only_changed_pairs():
    store, lines = parse(
        "; header comment\n[Common]\nCall Sign = OLD ; inline note\n"
        "Grid Square = ZZ99 ; untouched\n")
    store.set_string("Common", "Call Sign", "NEW")
    # same value as loaded, line stays as is.
    store.set_string("Common", "Grid Square", "ZZ99")
    assert IniParser.dumps(store, lines) == (
        "; header comment\n[Common]\nCall Sign = NEW\n"
        "Grid Square = ZZ99 ; untouched\n")


def test_dumps_rewrites_every_line_of_a_repeated_key():
    with pytest.warns(UserWarning):
        store, lines = parse("[A]\nk = 1\nother = x\nk = 2\n")
    store.set_int("A", "k", 3)
    assert IniParser.dumps(store, lines) == "[A]\nk = 3\nother = x\nk = 3\n"


def test_dumps_places_new_keys_and_sections():
    store, lines = parse(
        "; top\n"
        "[Common]\n"
        "TX Power = 20\n"
        "\n"
        "; about server\n"
        "[Server]\n"
        "Port = 1\n")
    store.set_string("Common", "Frequency", "20m")
    store.set_string("", "orphan", "yes")
    store.set_string("NewSection", "NewKey", "NewValue")
    store.set_bool("Other", "Flag", True)

    assert IniParser.dumps(store, lines) == (
        "orphan = yes\n"
        "; top\n"
        "[Common]\n"
        "TX Power = 20\n"
        "Frequency = 20m\n"
        "\n"
        "; about server\n"
        "[Server]\n"
        "Port = 1\n"
        "\n"
        "[NewSection]\n"
        "NewKey = NewValue\n"
        "\n"
        "[Other]\n"
        "Flag = true\n")


def test_dumps_new_key_in_empty_section_follows_header():
    store, lines = parse("[A]\n; nothing yet\n[B]\nx = 1\n")
    store.set_string("A", "k", "v")
    assert IniParser.dumps(store, lines) == (
        "[A]\nk = v\n; nothing yet\n[B]\nx = 1\n")


def test_dumps_into_empty_buffer():
    store = IniStore()
    store.set_int("A", "n", 1)
    store.set_int("B", "m", 2)
    assert IniParser.dumps(store, IniLines()) == "[A]\nn = 1\n\n[B]\nm = 2\n"


def test_dumps_keeps_crlf_for_new_lines():
    store, lines = parse("[A]\r\nk = 1\r\n")
    store.set_string("A", "k", "2")
    store.set_string("A", "j", "3")
    store.set_string("B", "x", "4")
    assert IniParser.dumps(store, lines) == (
        "[A]\r\nk = 2\r\nj = 3\r\n\r\n[B]\r\nx = 4\r\n")


def test_dumps_escapes_comment_marks():
    store, lines = parse("[A]\nk = 1\n")
    store.set_string("A", "k", "a;b#c")
    text = IniParser.dumps(store, lines)
    assert text == "[A]\nk = a\\;b\\#c\n"
    reloaded, _ = parse(text)
    assert reloaded.get_value("A", "k") == "a;b#c"


def test_writestream_matches_dumps():
    store, lines = parse("[A]\nk = 1\n")
    store.set_string("A", "k", "2")
    buf = StringIO()
    IniParser(None).writestream(buf, store, lines)
    assert buf.getvalue() == "[A]\nk = 2\n"


def test_read_and_write_file_round_trip(tmp_path: Path):
    raw = b"; c\r\n[A]\r\nk = v ; keep\r\n\r\nodd\r\nx=1"
    ini = tmp_path / "a.ini"
    ini.write_bytes(raw)
    parser = IniParser(str(ini))
    store, lines = parser.read()
    parser.write(store, lines)
    assert ini.read_bytes() == raw


def test_read_falls_back_to_detected_codec(tmp_path: Path):
    text = (
        "[Stammdaten]\n"
        "Name = Müller\n"
        "Straße = Hauptstraße 5\n"
        "Stadt = Zürich\n"
        "Bemerkung = Grüße aus Köln, schöne Größe\n"
    )
    raw = text.encode("latin-1")
    ini = tmp_path / "latin.ini"
    ini.write_bytes(raw)

    parser = IniParser(str(ini))
    store, lines = parser.read()
    assert parser.codec not in (None, "utf-8")
    assert store.has_section("Stammdaten")
    assert len(lines) == 5

    parser.write(store, lines)
    assert ini.read_bytes() == raw


def test_missing_filename_raises():
    parser = IniParser(None)
    with pytest.raises(IniIOError):
        parser.read()
    with pytest.raises(IniIOError):
        parser.write(IniStore(), IniLines())
    # still the OSError family.
    with pytest.raises(OSError):
        IniParser("").read()


def test_missing_file_raises_file_not_found(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        IniParser(str(tmp_path / "nope.ini")).read()


def test_write_to_unwritable_path_raises(tmp_path: Path):
    parser = IniParser(str(tmp_path / "no" / "such" / "dir.ini"))
    with pytest.raises(OSError):
        parser.write(IniStore(), IniLines())


def test_crlf_follows_most_lines():
    _, lines = parse("; lf first\n[A]\r\nk = 1\r\nj = 2\r\n")
    assert lines.crlf
    _, lines = parse("[A]\r\nk = 1\nj = 2\n")
    assert not lines.crlf
    # an unterminated last line does not count.
    _, lines = parse("[A]\r\nk = 1")
    assert lines.crlf


def test_dumps_new_lines_use_majority_ending():
    store, lines = parse("; lf first\n[A]\r\nk = 1\r\n")
    store.set_string("A", "j", "2")
    assert IniParser.dumps(store, lines) == (
        "; lf first\n[A]\r\nk = 1\r\nj = 2\r\n")
