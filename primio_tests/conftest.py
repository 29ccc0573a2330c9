import os

from primio.conf import NATIVE_SETTINGS_FILEPATH

os.environ['PRIMIO_CONFIG_YAML'] = os.environ.get('PRIMIO_TEST_CONFIG_YAML', NATIVE_SETTINGS_FILEPATH)
