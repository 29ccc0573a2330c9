#  Copyright 2023 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel

_EXTENDS_KEY = 'extends'

T = TypeVar('T', bound=BaseModel)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Return a new dict with `override` merged over `base`, nested dicts are merged key by key. Inputs are untouched.

    >>> deep_merge(dict(a=1, b=dict(c=2, d=3)), dict(b=dict(d=5), e=6)) == dict(a=1, b=dict(c=2, d=5), e=6)
    True
    """
    merged = deepcopy(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


def dict_from_yaml(*, filepath: Union[Path, str]) -> dict[str, Any]:
    """Read a yaml file that must contain a mapping (an empty file counts as an empty mapping)."""
    if not os.path.isfile(filepath):
        raise ValueError(f"'{filepath}' is not a file")

    with open(filepath, 'r') as file:
        contents = yaml.safe_load(file)

    if contents is None:
        return {}

    if not isinstance(contents, dict):
        raise ValueError(f"'{filepath}' cannot be parsed as a dictionary")

    return contents


def dict_from_extended_yaml(*, filepath: Union[Path, str], custom_root: Optional[Path] = None) -> dict[str, Any]:
    """
    Read a yaml mapping that may extend another yaml file through the reserved 'extends' key.

    The 'extends' value is resolved relative to the extending file first, then relative to `custom_root`. Values of the
    extending file are deep-merged over the extended one.
    """
    extension_dict = dict_from_yaml(filepath=filepath)
    file_to_extend = extension_dict.pop(_EXTENDS_KEY, None)

    if not file_to_extend:
        return extension_dict

    filepath_to_extend = Path(filepath).parent / str(file_to_extend)

    if not os.path.isfile(filepath_to_extend) and custom_root:
        filepath_to_extend = custom_root / str(file_to_extend)

    try:
        dict_to_extend = dict_from_extended_yaml(filepath=filepath_to_extend, custom_root=custom_root)
    except RecursionError as e:
        raise ValueError('Cannot parse yaml with recursive extensions.') from e

    return deep_merge(dict_to_extend, extension_dict)


def model_from_extended_yaml(model: type[T], *, filepath: str, custom_root: Optional[Path] = None) -> T:
    """Read an (extended) yaml file and validate it with the given pydantic model."""
    settings_dict = dict_from_extended_yaml(filepath=filepath, custom_root=custom_root)
    return model.model_validate(settings_dict)
