# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2026/10/17 14:21:50

"""
Basically a property list, flat or grouped by one level of INI sections.

As for reading and writing files, just see `ini.parser`.
"""

from collections.abc import MutableMapping
from typing import Iterable, Iterator, Mapping, TypeAlias


class PropertySection(MutableMapping[str, str]):
    """A named group of key/value pairs, i.e. an INI `[section]`.

    Keys are unique and keep their insertion order.
    All pairs *should* be `str: str`, but, Python being dynamic,
    this is not enforced at runtime.
    """

    def __init__(
        self, section_name: str, /,
        pairs: Mapping[str, str] | Iterable[tuple[str, str]] = ()
    ) -> None:
        self._name = section_name
        self._data: dict[str, str] = dict(pairs)

    @property
    def name(self) -> str:
        return self._name

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PropertySection):
            return self._name == other._name and self._data == other._data
        return super().__eq__(other)

    def __str__(self) -> str:
        return f'[{self._name}]'

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._name, len(self._data))

    def copy(self) -> 'PropertySection':
        return PropertySection(self._name, self._data)

    def to_dict(self) -> dict[str, str]:
        return self._data.copy()


PropertyValue: TypeAlias = str | PropertySection


class PropertyMap(MutableMapping[str, PropertyValue]):
    """Ordered top-level container of a property list.

    Each value is either a plain string (a scalar property)
    or a `PropertySection`. Plain dicts assigned here get wrapped
    into sections, so one only has to check against `PropertySection`:

        ```python
        props['db'] = {'host': 'localhost'}
        isinstance(props['db'], PropertySection)  # True
        ```
    """

    def __init__(
        self,
        items: Mapping[str, PropertyValue | Mapping[str, str]] | None = None
    ) -> None:
        self.__raw: dict[str, PropertyValue] = {}
        for k, v in (items or {}).items():
            self[k] = v

    def __getitem__(self, key: str) -> PropertyValue:
        return self.__raw[key]

    def __setitem__(
        self, key: str, value: PropertyValue | Mapping[str, str]
    ) -> None:
        if isinstance(value, PropertySection):
            # shouldn't keep ptr to a section of another map.
            value = PropertySection(key, value.to_dict())
        elif isinstance(value, Mapping):
            value = PropertySection(key, value)
        self.__raw[key] = value

    def __delitem__(self, key: str) -> None:
        del self.__raw[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__raw

    def __len__(self) -> int:
        return len(self.__raw)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__raw)

    def __repr__(self) -> str:
        return '%s(%r)' % (type(self).__name__, self.to_dict())

    def exists(self, key: str) -> bool:
        return key in self.__raw

    def sections(self) -> Iterator[PropertySection]:
        """Sections only, in map order."""
        for v in self.__raw.values():
            if isinstance(v, PropertySection):
                yield v

    def scalars(self) -> Iterator[tuple[str, str]]:
        """`(key, value)` pairs which do not belong to any section."""
        for k, v in self.__raw.items():
            if not isinstance(v, PropertySection):
                yield k, v

    def setdefault(
        self, key: str, default: PropertyValue | Mapping[str, str] = ''
    ) -> PropertyValue:
        if key not in self.__raw:
            self[key] = default
        return self.__raw[key]

    def copy(self) -> 'PropertyMap':
        """Copy the map, sections included (they are not shared)."""
        return PropertyMap(self.__raw)

    def to_dict(self) -> dict[str, str | dict[str, str]]:
        """Plain (nested) dict of the whole map."""
        return {
            k: v.to_dict() if isinstance(v, PropertySection) else v
            for k, v in self.__raw.items()
        }
