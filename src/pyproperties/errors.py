# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2026/10/17 14:02:11

"""Failures raised by `pyproperties`.

All of them derive from `PropertiesError`, so a caller may catch the whole
family at once, or pick single kinds apart:

    ```python
    try:
        props.load('app.properties')
    except PropertyFileNotFoundError:
        props = Properties.create(defaults)
    ```
"""


class PropertiesError(Exception):
    """Base class of every error raised by this package."""
    pass


class PropertyFileNotFoundError(PropertiesError, FileNotFoundError):
    """The property file is neither at the given path
    nor in any directory of the include path."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(
            message or f'File {path} not found in include path')


class EmptyPropertyFileError(PropertyFileNotFoundError):
    """The property file exists, but has no content at all.

    Still a `PropertyFileNotFoundError`, whoever treats a missing file
    as "use the defaults" will do the same here.
    """

    def __init__(self, path: str) -> None:
        super().__init__(path, f'File {path} is empty')


class PropertyFileParseError(PropertiesError):
    """Content found, but it is not valid property syntax."""

    def __init__(
        self, source: str, reason: str, lineno: int | None = None
    ) -> None:
        self.source = source
        self.reason = reason
        self.lineno = lineno
        where = source if lineno is None else f'{source}:{lineno}'
        super().__init__(
            f'File {where} can not be parsed as property file: {reason}')


class PropertyFileStoreError(PropertiesError):
    """Opening, writing or closing the target file failed."""
    pass


class NullKeyError(PropertiesError, ValueError):
    """A property key is required but `None` (or empty) was passed."""

    def __init__(self) -> None:
        super().__init__('Passed key is null')


class NullSectionError(PropertiesError, ValueError):
    """A sectioned store got `None` (or empty) as section name."""

    def __init__(self) -> None:
        super().__init__('Passed section is null')


class InvalidKeyError(PropertiesError, ValueError):
    """A key or section name which could not be read back once stored,
    e.g. `a=b`, `#x` or a name with a line break."""
    pass
