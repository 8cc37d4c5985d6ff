# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2026/10/17 14:00:27

import logging

from .errors import (
    EmptyPropertyFileError,
    InvalidKeyError,
    NullKeyError,
    NullSectionError,
    PropertiesError,
    PropertyFileNotFoundError,
    PropertyFileParseError,
    PropertyFileStoreError,
)
from .ini import (
    PropertiesParser,
    PropertyMap,
    PropertySection,
    get_include_path,
    set_include_path,
)
from .properties import Properties

__all__ = [
    'Properties', 'PropertiesParser', 'PropertyMap', 'PropertySection',
    'get_include_path', 'set_include_path',
    'PropertiesError', 'PropertyFileNotFoundError', 'EmptyPropertyFileError',
    'PropertyFileParseError', 'PropertyFileStoreError',
    'NullKeyError', 'NullSectionError', 'InvalidKeyError',
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
