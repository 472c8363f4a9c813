# -*- encoding: utf-8 -*-
# @File   : inifile.py
# @Time   : 2025/03/03 00:41:26
# @Author : Kariko Lin

"""One INI file bound to a path: load it, read and change values,
then `commit_changes()` to write back only if something changed.

```python
ini = IniFile('/usr/local/etc/wsprrypi.ini')
power = ini.get_int('Common', 'TX Power')
ini.set_bool('Control', 'Transmit', True)
ini.commit_changes()
```

Nothing here is shared process wide; hold one instance and pass it
around if several places need the same file. Not thread safe.
"""

import logging
from typing import Callable, TypeVar

from .errors import ConversionError, NotFoundError
from .ini import IniLines, IniParser, IniStore

T = TypeVar('T')


class IniFile:
    def __init__(
        self, filename: str | None = None, *,
        encoding: str | None = 'utf-8',
        logger: logging.Logger | None = None
    ) -> None:
        """Without `filename` the instance stays empty
        until `set_filename()` is called."""
        self._log = logger or logging.getLogger('inihandler')
        self._encoding = encoding
        self._parser = IniParser(None, encoding)
        self._store = IniStore()
        self._lines = IniLines()
        if filename:
            self.set_filename(filename)
        else:
            self._log.info('IniFile instance created without filename.')

    @property
    def filename(self) -> str:
        return self._parser.filename

    @property
    def codec(self) -> str | None:
        return self._parser.codec

    @property
    def store(self) -> IniStore:
        return self._store

    @property
    def lines(self) -> IniLines:
        return self._lines

    @property
    def dirty(self) -> bool:
        """Whether there are changes not yet saved."""
        return self._store.dirty

    def set_filename(self, filename: str) -> None:
        """Bind to `filename` and load it.

        The name sticks even when loading fails, so a file
        that does not exist yet can still be saved later.
        """
        self._parser = IniParser(filename, self._encoding)
        self._log.info('Filename set to: %s', filename)
        self.load()

    def load(self) -> None:
        """(Re)load the bound file, dropping unsaved changes.

        On failure the previous content is kept and the error raised.
        """
        try:
            store, lines = self._parser.read()
        except OSError as e:
            self._log.error('Cannot open file %r: %s', self.filename, e)
            raise
        self._store, self._lines = store, lines
        self._log.info('Successfully loaded INI file: %s', self.filename)

    def save(self) -> None:
        try:
            self._parser.write(self._store, self._lines)
        except OSError as e:
            self._log.error('Cannot write to file %r: %s', self.filename, e)
            raise
        self._store.dirty = False
        self._log.info('Successfully saved INI file: %s', self.filename)

    def commit_changes(self) -> None:
        if not self._store.dirty:
            self._log.debug('No pending changes for %s.', self.filename)
            return
        self.save()

    def _checked(
        self, getter: Callable[[str, str], T], section: str, key: str
    ) -> T:
        try:
            return getter(section, key)
        except (NotFoundError, ConversionError) as e:
            self._log.error('Error reading [%s] %s: %s', section, key, e)
            raise

    def get_value(self, section: str, key: str) -> str:
        return self._checked(self._store.get_value, section, key)

    get_string = get_value

    def get_int(self, section: str, key: str) -> int:
        return self._checked(self._store.get_int, section, key)

    def get_double(self, section: str, key: str) -> float:
        return self._checked(self._store.get_double, section, key)

    def get_bool(self, section: str, key: str) -> bool:
        """`true`, `t` and `1` (any case) are true, all else false."""
        return self._checked(self._store.get_bool, section, key)

    def _stored(
        self, setter: Callable[[str, str, T], None],
        section: str, key: str, value: T
    ) -> None:
        try:
            setter(section, key, value)
        except ValueError as e:
            self._log.error('Error writing [%s] %s: %s', section, key, e)
            raise

    def set_value(self, section: str, key: str, value: str) -> None:
        self._stored(self._store.set_value, section, key, value)

    set_string = set_value

    def set_int(self, section: str, key: str, value: int) -> None:
        self._stored(self._store.set_int, section, key, value)

    def set_double(self, section: str, key: str, value: float) -> None:
        self._stored(self._store.set_double, section, key, value)

    def set_bool(self, section: str, key: str, value: bool) -> None:
        self._stored(self._store.set_bool, section, key, value)

    def __str__(self) -> str:
        return str(self._parser)
