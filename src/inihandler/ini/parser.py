# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2025/03/02 22:05:17
# @Author : Kariko Lin

"""Line preserving INI reader/writer.

Reading keeps every line of the file next to the parsed store,
so writing can replay the file and only touch the pairs whose
values actually changed. Comments, blank lines, odd lines and
the line endings all survive a load/save cycle.

What a line means is decided the same way on both sides:

    - blank, or starting with `;` / `#`: comment.
    - `[...]`: section header, name taken verbatim.
    - `key = value ; note`: a pair, `\\;` and `\\#` escape the markers.
    - anything else: kept, never interpreted.
"""

from enum import Enum
from io import StringIO, TextIOBase
from typing import NamedTuple

import chardet

from ..abstract import FileHandler
from .model import IniLines, IniSection, IniStore

WHITESPACES = ' \t\r\n'
COMMENT_MARKS = ';#'


class LineKind(str, Enum):
    COMMENT = 'comment'
    SECTION = 'section'
    PAIR = 'pair'
    OTHER = 'other'


class IniLine(NamedTuple):
    kind: LineKind
    name: str = ''   # section name, or key of a pair.
    value: str = ''


def _strip_comment(value: str) -> str:
    buf: list[str] = []
    i = 0
    while i < len(value):
        c = value[i]
        nxt = value[i + 1:i + 2]
        if c == '\\' and nxt and nxt in COMMENT_MARKS:
            buf.append(value[i + 1])
            i += 2
            continue
        if c in COMMENT_MARKS:
            break
        buf.append(c)
        i += 1
    return ''.join(buf).strip(WHITESPACES)


def escape_value(value: str) -> str:
    for mark in COMMENT_MARKS:
        value = value.replace(mark, '\\' + mark)
    return value


def classify(line: str) -> IniLine:
    trimmed = line.strip(WHITESPACES)
    if not trimmed or trimmed[0] in COMMENT_MARKS:
        return IniLine(LineKind.COMMENT)
    if trimmed[0] == '[' and trimmed[-1] == ']':
        return IniLine(LineKind.SECTION, trimmed[1:-1])
    if '=' not in trimmed:
        return IniLine(LineKind.OTHER)
    key, val = trimmed.split('=', 1)
    key = key.strip(WHITESPACES)
    if not key:
        return IniLine(LineKind.OTHER)
    return IniLine(LineKind.PAIR, key, _strip_comment(val))


class IniParser(FileHandler[tuple[IniStore, IniLines]]):
    def __init__(self, filename: str | None, encoding: str | None = 'utf-8'):
        super().__init__(filename)
        self._codec = encoding

    @property
    def codec(self) -> str | None:
        """Text codec used for the last read, and for writing."""
        return self._codec

    @staticmethod
    def readstream(buf: TextIOBase) -> tuple[IniStore, IniLines]:
        """Parse a decoded text stream.

        `buf` should not translate newlines (`newline=''`),
        otherwise CRLF files would come back as LF.
        """
        store, lines = IniStore(), IniLines()
        raw = buf.read().split('\n')
        if raw[-1] == '':
            raw.pop()
        else:
            lines.newline_at_eof = False

        section = ''
        for lineno, i in enumerate(raw):
            lines.lines.append(i)
            parsed = classify(i)
            match parsed.kind:
                case LineKind.SECTION:
                    section = parsed.name
                    store._declare_section(section)
                case LineKind.PAIR:
                    store._declare(section, parsed.name, parsed.value, lineno)
        return store, lines

    def _decode_file(self, filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        if codec['encoding'] is None or codec['confidence'] < 0.8:
            codec = {'encoding': 'utf-8'}

        # fallbacks
        try:
            buf = raw.decode(codec['encoding'])
            self._codec = codec['encoding']
        except (UnicodeDecodeError, LookupError):
            buf = raw.decode('latin-1')
            self._codec = 'latin-1'
        return StringIO(buf, newline='')

    def read(self) -> tuple[IniStore, IniLines]:
        """Read the file this parser is bound to.

        Raises `IniIOError` without a filename; errors of `open()`
        are passed through untouched.
        """
        fn = self._require_filename('loading')
        try:
            # on a wrong guess of encoding, let `chardet` have a try.
            with open(fn, 'r', encoding=self._codec, newline='') as fp:
                return self.readstream(fp)
        except UnicodeDecodeError:
            return self.readstream(self._decode_file(fn))

    @staticmethod
    def _output_section(
        section: IniSection, keys: list[str], cr: str
    ) -> list[str]:
        return [f'{k} = {escape_value(section[k])}{cr}' for k in keys]

    @staticmethod
    def _changed(
        store: IniStore, lines: IniLines, section: str, parsed: IniLine
    ) -> bool:
        # compare with the value that won at load time, so repeated
        # keys are left alone until their value really changes.
        loaded = parsed.value
        lineno = store.line_of(section, parsed.name)
        if lineno is not None and lineno < len(lines):
            loaded = classify(lines[lineno]).value
        return store[section][parsed.name] != loaded

    @classmethod
    def dumps(cls, store: IniStore, lines: IniLines) -> str:
        """Replay `lines` against `store`.

        - pairs whose value changed are rewritten as `key = value`,
          dropping their inline comment; everything else is copied.
        - keys missing from the file follow the last pair of their
          section (the header if it has none; top of file for
          the '' section).
        - sections missing from the file are appended at the end.
        """
        cr = '\r' if lines.crlf else ''
        # section -> keys having a line, and where to insert new ones.
        seen: dict[str, set[str]] = {}
        anchors: dict[str, int] = {'': -1}
        section = ''
        for lineno, i in enumerate(lines):
            parsed = classify(i)
            if parsed.kind is LineKind.SECTION:
                section = parsed.name
                anchors[section] = lineno
                seen.setdefault(section, set())
            elif parsed.kind is LineKind.PAIR:
                anchors[section] = lineno
                seen.setdefault(section, set()).add(parsed.name)

        inserts: dict[int, list[str]] = {}
        tail: list[list[str]] = []
        for name, data in store.items():
            missing = [k for k in data if k not in seen.get(name, ())]
            if name in anchors:
                if missing:
                    inserts.setdefault(anchors[name], []).extend(
                        cls._output_section(data, missing, cr))
            else:
                # new sections get written even when empty.
                tail.append([f'[{name}]{cr}']
                            + cls._output_section(data, missing, cr))

        out = list(inserts.get(-1, []))
        section = ''
        for lineno, i in enumerate(lines):
            parsed = classify(i)
            if parsed.kind is LineKind.SECTION:
                section = parsed.name
            if (parsed.kind is LineKind.PAIR
                    and store.has_key(section, parsed.name)
                    and cls._changed(store, lines, section, parsed)):
                eol = '\r' if i.endswith('\r') else ''
                value = escape_value(store[section][parsed.name])
                out.append(f'{parsed.name} = {value}{eol}')
            else:
                out.append(i)
            out.extend(inserts.get(lineno, []))

        for block in tail:
            if out and out[-1].strip(WHITESPACES):
                out.append(cr)
            out.extend(block)

        text = '\n'.join(out)
        if out and (lines.newline_at_eof or not lines.lines):
            text += '\n'
        return text

    def writestream(
        self, fp: TextIOBase, store: IniStore, lines: IniLines
    ) -> None:
        fp.write(self.dumps(store, lines))

    def write(self, store: IniStore, lines: IniLines) -> None:
        """Save `store` into the file, using `lines` as the layout.

        The text is rendered before the file gets truncated.
        """
        fn = self._require_filename('saving')
        text = self.dumps(store, lines)
        with open(fn, 'w', encoding=self._codec, newline='') as fp:
            fp.write(text)

    def __str__(self) -> str:
        return "INI file: " + super().__str__() + f" ({self._codec})"
