# -*- encoding: utf-8 -*-
# @File   : properties.py
# @Time   : 2026/10/17 15:30:12

"""A persistent set of properties.

Each key and its value is a string. Properties may be grouped by
INI sections (one level only), in which case every lookup needs
the section name as well.
"""

import os
from os import PathLike
from typing import Iterator
from warnings import warn

from .errors import InvalidKeyError, NullKeyError, NullSectionError
from .ini.model import PropertyMap, PropertySection
from .ini.parser import PropertiesParser, check_key, check_section_name


class Properties:
    """The property list, loaded from and saved to INI-like files.

    A property list may get another one as its "defaults",
    the new list then starts as a full copy of it:

        ```python
        defaults = Properties().load('defaults.properties')
        props = Properties.create(defaults)
        try:
            props.load('local.properties')
        except PropertyFileNotFoundError:
            pass  # keep the defaults
        ```

    `None` and `''` both count as a missing key or section name.
    """

    def __init__(
        self,
        defaults: 'Properties | None' = None,
        sections: bool = False,
        include_path: list[str | PathLike[str]] | None = None,
        encoding: str | None = 'utf-8'
    ) -> None:
        self._items = (
            PropertyMap() if defaults is None else defaults._items.copy())
        self._sections = sections
        self._include_path = include_path
        self._codec = encoding

    @classmethod
    def create(
        cls, defaults: 'Properties | None' = None, **kw
    ) -> 'Properties':
        """Factory method, same as calling the class."""
        return cls(defaults, **kw)

    @property
    def sectioned(self) -> bool:
        return self._sections

    @property
    def mapping(self) -> PropertyMap:
        """The underlying map; values are `str` or `PropertySection`."""
        return self._items

    def load(
        self, file: str | PathLike[str], sections: bool = False
    ) -> 'Properties':
        """Replace all properties with the ones read from `file`.

        Raises:
            PropertyFileNotFoundError: `file` not found in the include path,
                or found but empty (`EmptyPropertyFileError`).
            PropertyFileParseError: `file` is not a valid property file.
        """
        parser = PropertiesParser(file, self._codec, self._include_path)
        self._items = parser.read(sections)
        self._sections = sections
        return self

    def store(self, file: str | PathLike[str]) -> None:
        """Save the properties, sections included, to `file`.

        Raises:
            PropertyFileStoreError: `file` can not be written.
        """
        PropertiesParser(file, self._codec).write(self._items)

    @staticmethod
    def _check(reason: str | None) -> None:
        if reason is not None:
            raise InvalidKeyError(reason)

    def _section(
        self, key: str | None, section: str | None
    ) -> PropertySection | None:
        if not key:
            raise NullKeyError
        if not section:
            raise NullSectionError
        sect = self._items.get(section)
        return sect if isinstance(sect, PropertySection) else None

    def get_property(
        self, key: str | None, section: str | None = None
    ) -> str | None:
        """Value of `key` (in `section` for a sectioned list), or `None`."""
        if not self._sections:
            if not key:
                raise NullKeyError
            value = self._items.get(key)
            return None if isinstance(value, PropertySection) else value
        sect = self._section(key, section)
        return None if sect is None else sect.get(key)

    def set_property(
        self, key: str | None, value: str, section: str | None = None
    ) -> None:
        """Add or replace `key`.

        For a sectioned list, a `section` which does not exist yet is NOT
        created: nothing gets written and a `UserWarning` is issued.
        Use `add_section()` first.

        Raises:
            InvalidKeyError: `key` could not be read back once stored.
        """
        if not self._sections:
            if not key:
                raise NullKeyError
            self._check(check_key(key))
            self._items[key] = value
            return
        sect = self._section(key, section)
        self._check(check_key(key))
        if sect is None:
            warn(f'Section [{section}] not found, "{key}" not set.')
            return
        sect[key] = value

    def add_section(self, name: str | None) -> PropertySection:
        """Get section `name`, adding an empty one if missing."""
        if not name:
            raise NullSectionError
        self._check(check_section_name(name))
        sect = self._items.setdefault(name, {})
        if not isinstance(sect, PropertySection):
            raise ValueError(f'{name} is already a property, not a section')
        return sect

    def get_keys(self) -> list[str]:
        """All keys; for a sectioned list, the keys of every section in turn.

        Duplicates across sections are kept, top-level keys are skipped.
        """
        if not self._sections:
            return list(self._items.keys())
        keys: list[str] = []
        for sect in self._items.sections():
            keys.extend(sect.keys())
        return keys

    def render(self, newline: str = os.linesep) -> str:
        ret = ''
        for key, value in self._items.items():
            if isinstance(value, PropertySection):
                ret += f'{value}{newline}'
                for sect_key, sect_value in value.items():
                    ret += f'{sect_key}={sect_value}{newline}'
            else:
                ret += f'{key}={value}{newline}'
        return ret

    def exists(self, key: str) -> bool:
        return self._items.exists(key)

    def to_dict(self) -> dict[str, str | dict[str, str]]:
        return self._items.to_dict()

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return '%s(sections=%r, items=%d)' % (
            type(self).__name__, self._sections, len(self._items))
