# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2025/03/02 21:36:52
# @Author : Kariko Lin

"""
In-memory side of an INI file: sections, the typed value store
and the raw line buffer the writer walks when saving.

```ini
; comments and blank lines only live in `IniLines`.
orphan = 1          ; stored under the '' section.

[Common]
Call Sign = AA0XX
TX Power = 20
```
"""

import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from warnings import warn

from ..errors import ConversionError, KeyNotFoundError, SectionNotFoundError

# range of a signed 32-bit int.
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

_INT_TOKEN = re.compile(r'[+-]?[0-9]+')
_DOUBLE_TOKEN = re.compile(
    r'[+-]?(?P<mantissa>[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')

TRUE_TOKENS = ('true', 't', '1')

_LINE_BREAKS = '\r\n'
_KEY_STARTS = '[;#'


def to_int(raw: str) -> int:
    text = raw.strip()
    if not _INT_TOKEN.fullmatch(text):
        raise ConversionError('integer', raw)
    value = int(text, 10)
    if not INT_MIN <= value <= INT_MAX:
        raise ConversionError('integer', raw, 'out of range')
    return value


def to_double(raw: str) -> float:
    text = raw.strip()
    match = _DOUBLE_TOKEN.fullmatch(text)
    if match is None:
        raise ConversionError('double', raw)
    value = float(text)
    if math.isinf(value):
        raise ConversionError('double', raw, 'out of range')
    # a non-zero literal that rounds to zero underflowed.
    if value == 0.0 and re.search(r'[1-9]', match['mantissa']):
        raise ConversionError('double', raw, 'out of range')
    return value


def to_bool(raw: str) -> bool:
    return raw.strip().lower() in TRUE_TOKENS


def from_int(value: int) -> str:
    return '%d' % value


def from_double(value: float) -> str:
    return '%f' % value


def from_bool(value: bool) -> str:
    return 'true' if value else 'false'


class IniSection(Mapping[str, str]):
    """Key/value pairs of one section, read only.

    Writes go through `IniStore.set_value()` so that the store
    knows it has unsaved changes.
    """
    def __init__(
        self, section_name: str, /,
        pairs: Mapping[str, str] | None = None
    ) -> None:
        self._name = section_name
        self._data: dict[str, str] = dict(pairs or {})

    @property
    def name(self) -> str:
        return self._name

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __str__(self) -> str:
        return f'[{self._name}]'

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._name, len(self._data))

    def to_dict(self) -> dict[str, str]:
        return self._data.copy()


@dataclass
class IniLines:
    """The file exactly as read, one entry per `\\n`-terminated line.

    A CRLF file keeps its `\\r` at the end of each entry.
    """
    lines: list[str] = field(default_factory=list)
    newline_at_eof: bool = True

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index]

    @property
    def crlf(self) -> bool:
        """Whether most terminated lines end in CRLF."""
        ended = self.lines if self.newline_at_eof else self.lines[:-1]
        crlf = sum(1 for i in ended if i.endswith('\r'))
        return crlf * 2 > len(ended)


class IniStore(Mapping[str, IniSection]):
    """Sections in the order they were first seen, plus typed access.

    `dirty` is set by every `set_*` call and cleared by whoever
    persists the store (see `IniFile.save()`).
    """
    def __init__(self) -> None:
        self.__raw: dict[str, IniSection] = {}
        # (section, key) -> line number of its last declaration.
        self.__index: dict[str, dict[str, int]] = {}
        self.dirty = False

    def __getitem__(self, key: str) -> IniSection:
        return self.__raw[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__raw

    def __len__(self) -> int:
        return len(self.__raw)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__raw)

    def __repr__(self) -> str:
        return 'IniStore(%s%s)' % (
            ', '.join(repr(i) for i in self.__raw.values()),
            ', dirty' if self.dirty else '')

    # for IniParser.readstream(), these never touch `dirty`.
    def _declare_section(self, section: str) -> IniSection:
        if section not in self.__raw:
            self.__raw[section] = IniSection(section)
        return self.__raw[section]

    def _declare(
        self, section: str, key: str, value: str, lineno: int
    ) -> None:
        sect = self._declare_section(section)
        if key in sect:
            warn(f'[{section}] declares "{key}" more than once, '
                 f'line {lineno + 1} wins.')
        sect._data[key] = value
        self.__index.setdefault(section, {})[key] = lineno

    def sections(self) -> list[str]:
        return list(self.__raw)

    def has_section(self, section: str) -> bool:
        return section in self.__raw

    def has_key(self, section: str, key: str) -> bool:
        return section in self.__raw and key in self.__raw[section]

    def line_of(self, section: str, key: str) -> int | None:
        """Where `key` was declared at load time, if anywhere."""
        return self.__index.get(section, {}).get(key)

    def get_value(self, section: str, key: str) -> str:
        if section not in self.__raw:
            raise SectionNotFoundError(section)
        sect = self.__raw[section]
        if key not in sect:
            raise KeyNotFoundError(section, key)
        return sect[key]

    get_string = get_value

    def get_int(self, section: str, key: str) -> int:
        return to_int(self.get_value(section, key))

    def get_double(self, section: str, key: str) -> float:
        return to_double(self.get_value(section, key))

    def get_bool(self, section: str, key: str) -> bool:
        return to_bool(self.get_value(section, key))

    def set_value(self, section: str, key: str, value: str) -> None:
        """Raises `ValueError` for anything a reload would read back
        differently: line breaks anywhere, or a key that is empty,
        padded, holds `=` or starts like a comment or header."""
        if any(c in _LINE_BREAKS for c in section + key + value):
            raise ValueError(
                f'[{section}] {key!r}: line breaks cannot be stored.')
        if (not key or key != key.strip(' \t') or '=' in key
                or key[0] in _KEY_STARTS):
            raise ValueError(f'[{section}] {key!r} is not a valid key.')
        self._declare_section(section)._data[key] = value
        self.dirty = True

    set_string = set_value

    def set_int(self, section: str, key: str, value: int) -> None:
        if not INT_MIN <= value <= INT_MAX:
            raise ConversionError('integer', from_int(value), 'out of range')
        self.set_value(section, key, from_int(value))

    def set_double(self, section: str, key: str, value: float) -> None:
        if not math.isfinite(value):
            raise ConversionError('double', repr(value), 'not finite')
        self.set_value(section, key, from_double(value))

    def set_bool(self, section: str, key: str, value: bool) -> None:
        self.set_value(section, key, from_bool(value))
