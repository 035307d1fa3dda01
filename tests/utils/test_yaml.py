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
from pathlib import Path

import pytest

from dson.utils.yaml import dict_from_extended_yaml, dict_from_yaml

FIXTURES_DIR = Path(__file__).parent / 'fixtures'


@pytest.mark.parametrize('loader', [dict_from_yaml, dict_from_extended_yaml])
def test_invalid_filepath(loader):
    with pytest.raises(ValueError) as e:
        loader(filepath='fake_file.yml')

    assert str(e.value) == "'fake_file.yml' is not a file"


@pytest.mark.parametrize('loader', [dict_from_yaml, dict_from_extended_yaml])
def test_empty(loader):
    assert loader(filepath=FIXTURES_DIR / 'empty.yml') == {}


@pytest.mark.parametrize('loader', [dict_from_yaml, dict_from_extended_yaml])
def test_not_a_dictionary(loader):
    filepath = FIXTURES_DIR / 'number.yml'

    with pytest.raises(ValueError) as e:
        loader(filepath=filepath)

    assert str(e.value) == f"'{filepath}' cannot be parsed as a dictionary"


@pytest.mark.parametrize('loader', [dict_from_yaml, dict_from_extended_yaml])
def test_valid(loader):
    result = loader(filepath=FIXTURES_DIR / 'valid.yml')

    assert result == dict(MAGIC_NUMBER='01b10000', nested=dict(c=2, d=3))


def test_plain_loader_keeps_extends_key():
    result = dict_from_yaml(filepath=FIXTURES_DIR / 'valid_extends.yml')

    assert result['extends'] == 'valid.yml'


def test_extends():
    result = dict_from_extended_yaml(filepath=FIXTURES_DIR / 'valid_extends.yml')

    assert result == dict(MAGIC_NUMBER='deadbeef', nested=dict(c=2, d='dd', e='ee'))


def test_empty_extends():
    result = dict_from_extended_yaml(filepath=FIXTURES_DIR / 'empty_extends.yml')

    assert result == dict(DEFAULT_REVISION=3)


def test_unknown_extends():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=FIXTURES_DIR / 'invalid_extends.yml')

    assert "/fixtures/unknown_file.yml' is not a file" in str(e.value)


def test_self_extends():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=FIXTURES_DIR / 'self_extends.yml')

    assert 'self_extends.yml' in str(e.value)


def test_extends_cycle():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=FIXTURES_DIR / 'cycle_a.yml')

    assert 'extended more than once' in str(e.value)


def test_extends_chain():
    result = dict_from_extended_yaml(filepath=FIXTURES_DIR / 'chain_extends.yml')

    assert result == dict(MAGIC_NUMBER='deadbeef', nested=dict(c=2, d='dd', e='ee', f='ff'))
