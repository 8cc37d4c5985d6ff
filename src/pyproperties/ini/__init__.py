# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2026/10/17 14:19:03

from .model import PropertyMap, PropertySection
from .parser import (
    PropertiesParser,
    check_key,
    check_section_name,
    escape,
    get_include_path,
    resolve,
    set_include_path,
    unescape,
)
