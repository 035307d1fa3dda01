import os

from dson.conf import UNITTESTS_SETTINGS_FILEPATH

os.environ['DSON_CONFIG_YAML'] = os.environ.get('DSON_TEST_CONFIG_YAML', UNITTESTS_SETTINGS_FILEPATH)
