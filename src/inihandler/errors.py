# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2025/03/02 21:20:41
# @Author : Kariko Lin


class IniIOError(OSError):
    """Raised when there is no filename to load from or save to.

    Failures of `open()` itself are left as the built-in `OSError` family.
    """


class NotFoundError(LookupError):
    """A read asked for something the store does not have."""


class SectionNotFoundError(NotFoundError):
    def __init__(self, section: str) -> None:
        super().__init__(f"Section '{section}' not found in INI file.")
        self.section = section


class KeyNotFoundError(NotFoundError):
    def __init__(self, section: str, key: str) -> None:
        super().__init__(
            f"Key '{key}' not found in section '{section}'.")
        self.section = section
        self.key = key


class ConversionError(ValueError):
    """A stored value cannot be read as the requested type."""
    def __init__(self, kind: str, raw: str, reason: str = 'invalid') -> None:
        super().__init__(f'Cannot convert {raw!r} to {kind}: {reason}.')
        self.kind = kind
        self.raw = raw
