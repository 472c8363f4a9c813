# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2025/03/02 21:14:08
# @Author : Kariko Lin

from abc import ABCMeta, abstractmethod
from typing import Any, Generic, TypeVar

from .errors import IniIOError

T = TypeVar('T')


class FileHandler(Generic[T], metaclass=ABCMeta):
    def __init__(self, filename: str | None) -> None:
        self._fn = filename or ''

    @property
    def filename(self) -> str:
        return self._fn

    def _require_filename(self, action: str) -> str:
        if not self._fn:
            raise IniIOError(f'Filename not set for {action}.')
        return self._fn

    @abstractmethod
    def read(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def write(self, *args: Any) -> None:
        raise NotImplementedError

    def __str__(self) -> str:
        return self._fn
