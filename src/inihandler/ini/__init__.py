# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2025/03/02 21:30:11
# @Author : Kariko Lin

from .model import IniSection, IniStore, IniLines
from .parser import IniParser, IniLine, LineKind, classify
