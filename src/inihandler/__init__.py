# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2025/03/02 21:12:40
# @Author : Kariko Lin

from .errors import (
    IniIOError,
    NotFoundError,
    SectionNotFoundError,
    KeyNotFoundError,
    ConversionError
)
from .ini import IniSection, IniStore, IniLines, IniParser
from .inifile import IniFile

__all__ = [
    'IniFile', 'IniParser', 'IniSection', 'IniStore', 'IniLines',
    'IniIOError', 'NotFoundError', 'SectionNotFoundError',
    'KeyNotFoundError', 'ConversionError'
]
