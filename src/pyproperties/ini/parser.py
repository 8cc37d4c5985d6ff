# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2026/10/17 14:48:05

"""Reading and writing property files.

The grammar is the usual INI subset:

    ```ini
    ; comment, and so is this one:
    # comment
    key = value            ; inline comment after an unquoted value
    quoted = "a ; b"       ; quotes keep `;` verbatim

    [section]              ; only meaningful when reading with sections
    key = value
    ```

Relative paths are looked up in the current directory first,
then in every directory of the include path, in order.
See `set_include_path()`.
"""

import logging
import os
from io import StringIO, TextIOBase
from os import PathLike, fspath
from os.path import isabs, isfile, join

from chardet import detect as guess_codec

from ..abstract import FileHandler
from ..errors import (
    EmptyPropertyFileError,
    PropertyFileNotFoundError,
    PropertyFileParseError,
    PropertyFileStoreError,
)
from .model import PropertyMap, PropertySection

__all__ = [
    'PropertiesParser', 'escape', 'unescape',
    'check_key', 'check_section_name',
    'get_include_path', 'set_include_path', 'resolve',
]

logger = logging.getLogger(__name__)

# characters a key may not contain.
RESERVED_KEY_CHARS = frozenset('?{}|&~![()^"')

_ESCAPES = {'\\': '\\\\', "'": "\\'", '"': '\\"', '\0': '\\0'}
_UNESCAPES = {'\\': '\\', "'": "'", '"': '"', '0': '\0'}
# only understood between double quotes.
_QUOTED_UNESCAPES = {**_UNESCAPES, 'n': '\n', 'r': '\r'}

_include_path: list[str] = []


def get_include_path() -> list[str]:
    """Directories searched for relative paths, in order."""
    return list(_include_path)


def set_include_path(paths: list[str | PathLike[str]]) -> list[str]:
    """Replace the process-wide include path, returning the old one."""
    global _include_path
    old, _include_path = _include_path, [fspath(i) for i in paths]
    return old


def resolve(
    path: str | PathLike[str],
    include_path: list[str | PathLike[str]] | None = None
) -> str | None:
    """Locate `path`, the first existing file wins.

    Absolute paths are never searched for. Returns `None` if not found.
    """
    path = fspath(path)
    if isabs(path):
        return path if isfile(path) else None
    if include_path is None:
        include_path = _include_path
    for base in ['', *include_path]:
        candidate = join(fspath(base), path) if base else path
        logger.debug('looking for %s', candidate)
        if isfile(candidate):
            return candidate
    return None


def escape(value: str) -> str:
    """Backslash-escape quotes, backslashes and NUL (aka `addslashes`)."""
    return ''.join(_ESCAPES.get(c, c) for c in value)


def unescape(value: str, quoted: bool = False) -> str:
    """Reverse of `escape()`.

    Backslashes not followed by one of the escaped characters are kept,
    so that `C:\\Windows` reads back as is. With `quoted`, as for text
    between double quotes, `\\n` and `\\r` stand for line breaks too.
    """
    table = _QUOTED_UNESCAPES if quoted else _UNESCAPES
    ret, i = [], 0
    while i < len(value):
        c = value[i]
        if c == '\\' and i + 1 < len(value) and value[i + 1] in table:
            ret.append(table[value[i + 1]])
            i += 2
            continue
        ret.append(c)
        i += 1
    return ''.join(ret)


def check_key(key: str) -> str | None:
    """Why `key` could not be read back as a key, or `None` if it can."""
    if not key:
        return 'empty key'
    if key != key.strip():
        return f'key {key!r} has surrounding whitespace'
    if key[0] in ';#[':
        return f'key {key!r} would start a comment or header'
    if '=' in key or '\n' in key or '\r' in key:
        return f'key {key!r} contains "=" or a line break'
    if RESERVED_KEY_CHARS.intersection(key):
        return f'reserved character in key {key!r}'
    return None


def check_section_name(name: str) -> str | None:
    """Why `name` could not be read back as a section header, or `None`."""
    if not name:
        return 'empty section name'
    if name != name.strip():
        return f'section name {name!r} has surrounding whitespace'
    if ']' in name or '\n' in name or '\r' in name:
        return f'section name {name!r} contains "]" or a line break'
    return None


class PropertiesParser(FileHandler[PropertyMap]):
    def __init__(
        self,
        filename: str | PathLike[str],
        encoding: str | None = 'utf-8',
        include_path: list[str | PathLike[str]] | None = None
    ) -> None:
        super().__init__(filename, encoding)
        self._include_path = include_path

    @staticmethod
    def _parse_value(raw: str, source: str, lineno: int) -> str:
        raw = raw.strip()
        if raw[:1] == "'":
            # single quotes: verbatim, no escapes at all.
            end = raw.find("'", 1)
        elif raw[:1] == '"':
            end = 1
            while end < len(raw) and raw[end] != '"':
                end += 2 if raw[end] == '\\' else 1
            if end >= len(raw):
                end = -1
        else:
            return unescape(raw.split(';')[0].strip())
        if end < 0:
            raise PropertyFileParseError(
                source, f'unterminated {raw[0]} quoted value', lineno)
        rest = raw[end + 1:].strip()
        if rest and rest[0] not in ';#':
            raise PropertyFileParseError(
                source, f'unexpected {rest!r} after quoted value', lineno)
        return raw[1:end] if raw[0] == "'" else unescape(raw[1:end], True)

    @staticmethod
    def _format_value(value: str) -> str:
        ret = escape(value)
        # would get lost as comment, whitespace or next line otherwise.
        if '\n' in ret or '\r' in ret:
            ret = ret.replace('\r', '\\r').replace('\n', '\\n')
            ret = f'"{ret}"'
        elif ';' in ret or ret != ret.strip():
            ret = f'"{ret}"'
        return ret

    @staticmethod
    def readstream(
        buf: TextIOBase, sections: bool = False, source: str = '<stream>'
    ) -> PropertyMap:
        """Parse text which is already decoded, `read()` does the decoding.

        Keys before the first `[section]` stay at top level.
        If `sections` is false, headers get checked but keys never nest.
        """
        ret = PropertyMap()
        this_sect: PropertyMap | PropertySection = ret
        lineno = 0
        while i := buf.readline():
            lineno += 1
            line = i.strip()
            if not line or line[0] in ';#':
                continue
            if line[0] == '[':
                end = line.find(']')
                if end < 0:
                    raise PropertyFileParseError(
                        source, 'unterminated section header', lineno)
                rest = line[end + 1:].strip()
                if rest and rest[0] not in ';#':
                    raise PropertyFileParseError(
                        source, f'unexpected {rest!r} after header', lineno)
                name = line[1:end].strip()
                if not name:
                    raise PropertyFileParseError(
                        source, 'empty section name', lineno)
                if sections:
                    sect = ret.setdefault(name, {})
                    if not isinstance(sect, PropertySection):
                        raise PropertyFileParseError(
                            source, f'[{name}] clashes with a key', lineno)
                    this_sect = sect
                continue
            if '=' not in line:
                raise PropertyFileParseError(
                    source, f'expected "=" in {line!r}', lineno)
            key, val = line.split('=', 1)
            key = key.strip()
            if (reason := check_key(key)) is not None:
                raise PropertyFileParseError(source, reason, lineno)
            if this_sect is ret and isinstance(ret.get(key), PropertySection):
                raise PropertyFileParseError(
                    source, f'{key} clashes with a section', lineno)
            this_sect[key] = PropertiesParser._parse_value(
                val, source, lineno)
        if not ret:
            raise PropertyFileParseError(source, 'no properties found')
        return ret

    def _decode(self, raw: bytes) -> str:
        try:
            text = raw.decode(self._codec or 'utf-8')
        except UnicodeDecodeError:
            codec = guess_codec(raw)
            encoding = codec['encoding'] or 'latin-1'
            logger.debug(
                '%s is not %s, falling back to %s (confidence %s)',
                self._fn, self._codec, encoding, codec['confidence'])
            text = raw.decode(encoding, errors='replace')
        # utf-8 keeps the BOM as a character, `strip()` won't drop it.
        return text.removeprefix('\ufeff')

    def read(self, sections: bool = False) -> PropertyMap:
        """Read the file this parser was made for.

        Raises:
            PropertyFileNotFoundError: not found in the include path.
            EmptyPropertyFileError: found, but empty.
            PropertyFileParseError: found, but not valid.
        """
        found = resolve(self._fn, self._include_path)
        if found is None:
            raise PropertyFileNotFoundError(self._fn)
        try:
            with open(found, 'rb') as fp:
                raw = fp.read()
        except OSError as e:
            raise PropertyFileNotFoundError(
                self._fn, f'File {self._fn} can not be read: {e}') from e
        if not raw:
            raise EmptyPropertyFileError(self._fn)
        ret = self.readstream(StringIO(self._decode(raw)), sections, found)
        logger.debug('loaded %d entries from %s', len(ret), found)
        return ret

    @staticmethod
    def validate(items: PropertyMap) -> None:
        """Make sure every key and section name of `items` survives
        a write and a read back.

        Raises:
            PropertyFileStoreError: naming the first offending entry.
        """
        for key, _ in items.scalars():
            if (reason := check_key(key)) is not None:
                raise PropertyFileStoreError(f"Can't store {reason}")
        for sect in items.sections():
            if (reason := check_section_name(sect.name)) is not None:
                raise PropertyFileStoreError(f"Can't store {reason}")
            for key in sect:
                if (reason := check_key(key)) is not None:
                    raise PropertyFileStoreError(
                        f"Can't store {reason} in {sect}")

    @staticmethod
    def writestream(
        buf: TextIOBase, items: PropertyMap, *,
        pairing: str = ' = ', newline: str = os.linesep
    ) -> None:
        """Write `items` as property text.

        Scalars go first, so they are still top-level when read back;
        every section follows with its own header.
        """
        PropertiesParser.validate(items)
        fmt = PropertiesParser._format_value
        for key, val in items.scalars():
            buf.write(f'{key}{pairing}{fmt(val)}{newline}')
        for sect in items.sections():
            buf.write(f'{sect}{newline}')
            for key, val in sect.items():
                buf.write(f'{key}{pairing}{fmt(val)}{newline}')

    def write(self, instance: PropertyMap) -> None:
        """Save `instance` to the literal path, the include path is
        NOT used here. Nothing is touched if a key can not be stored.
        """
        self.validate(instance)
        try:
            fp = open(self._fn, 'w', encoding=self._codec, newline='')
        except (OSError, LookupError) as e:
            raise PropertyFileStoreError(
                f"Can't open property file {self._fn} for writing") from e
        written = False
        try:
            try:
                self.writestream(fp, instance)
                written = True
            finally:
                fp.close()
        except (OSError, UnicodeError) as e:
            raise PropertyFileStoreError(
                f'Error while closing and writing property file {self._fn}'
                if written else
                f"Can't write properties to property file {self._fn}"
            ) from e
        logger.debug('stored %d entries to %s', len(instance), self._fn)

    def __str__(self) -> str:
        return "Property file: " + super().__str__() + f"({self._codec})"
