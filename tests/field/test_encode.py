import pytest

from dson.exception import FieldCountMismatchError
from dson.field.data_type import DataType
from dson.field.encode import encode_values, set_num_all_children, set_num_direct_children
from dson.field.encoding_field import EncodingField


def _fields() -> list[EncodingField]:
    return [
        EncodingField(key='__revision_dont_touch', value_type=DataType.INT, value=0),
        EncodingField(key='root', value_type=DataType.OBJECT),
        EncodingField(key='flag', value_type=DataType.BOOL, value=True),
    ]


def test_encode_values_sets_bytes_and_is_object():
    fields = encode_values(_fields())
    assert [f.data for f in fields] == [bytes(4), b'', b'\x01']
    assert [f.is_object for f in fields] == [False, True, False]
    assert all(f.data is None for f in _fields())


def test_name_length_counts_utf8_bytes_and_terminator():
    assert EncodingField(key='foo', value_type=DataType.BOOL).name_length == 4
    assert EncodingField(key='ação', value_type=DataType.BOOL).name_length == 7


def test_set_children():
    fields = set_num_direct_children(_fields(), [0, 1, 0])
    fields = set_num_all_children(fields, [0, 1, 0])
    assert [(f.num_direct_children, f.num_all_children) for f in fields] == [(0, 0), (1, 1), (0, 0)]


def test_set_children_length_mismatch():
    with pytest.raises(FieldCountMismatchError):
        set_num_direct_children(_fields(), [0, 1])
    with pytest.raises(FieldCountMismatchError):
        set_num_all_children(_fields(), [0, 1, 0, 0])
