#  Copyright 2025 Hathor Labs
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
from typing import NamedTuple, Optional

from structlog import get_logger

from primio import conf
from primio.conf.settings import PrimioSettings as Settings
from primio.primitives import ByteOrder

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'PRIMIO_CONFIG_YAML'


class _SettingsMetadata(NamedTuple):
    source: str
    settings: Settings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> Settings:
    """
    Returns the settings, loaded once per process.

    The yaml filepath is taken from the 'PRIMIO_CONFIG_YAML' env var, when it isn't set the packaged `native.yml` is
    used.
    """
    settings_yaml_filepath = os.environ.get(CONFIG_YAML_ENV_VAR, conf.NATIVE_SETTINGS_FILEPATH)
    return _load_settings_singleton(settings_yaml_filepath)


def get_settings_source() -> str:
    """ Returns the path of the settings YAML file that was loaded.

    XXX: Will raise an assertion error if get_global_settings() wasn't used before.
    """
    assert _settings_singleton is not None, 'get_global_settings() not called before'
    return _settings_singleton.source


def resolve_byte_order(byte_order: Optional[ByteOrder]) -> ByteOrder:
    """Use the given byte order, or the configured one when it's None."""
    if byte_order is not None:
        return byte_order
    # once loaded the settings never change, the env var is only read for the first load
    if _settings_singleton is not None:
        return _settings_singleton.settings.BYTE_ORDER
    return get_global_settings().BYTE_ORDER


def _load_settings_singleton(source: str) -> Settings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different file')

        return _settings_singleton.settings

    settings = Settings.from_yaml(filepath=source)
    logger.debug('settings loaded', source=source, byte_order=settings.BYTE_ORDER.value)
    _settings_singleton = _SettingsMetadata(source=source, settings=settings)

    return _settings_singleton.settings
