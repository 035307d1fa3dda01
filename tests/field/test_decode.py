import pytest

from dson.exception import InvalidDocumentError
from dson.field.data_type import DataType
from dson.field.decode import DECODERS, decode_value
from dson.field.encode import encode_value
from dson.name_hash import hash_string
from dson.serialization import SerializationError


def test_every_data_type_has_a_decoder():
    assert set(DECODERS) == set(DataType)


@pytest.mark.parametrize('value_type,value', [
    (DataType.BOOL, True),
    (DataType.BOOL, False),
    (DataType.CHAR, 'z'),
    (DataType.INT, -5),
    (DataType.FLOAT, 0.5),
    (DataType.STRING, 'hello'),
    (DataType.STRING, ''),
    (DataType.INT_VECTOR, [1, -2, 3]),
    (DataType.FLOAT_VECTOR, [0.5, -1.0]),
    (DataType.STRING_VECTOR, ['a', 'bc']),
    (DataType.HYBRID_VECTOR, [1, 'abc']),
    (DataType.TWO_BOOL, [True, False]),
    (DataType.TWO_INT, [7, -7]),
    (DataType.OBJECT, None),
])
def test_decode_mirrors_encode(value_type, value):
    assert decode_value(value_type, encode_value('key', value_type, value)) == value


def test_hashed_string_decodes_as_its_hash():
    data = encode_value('key', DataType.STRING, '###jester')
    assert decode_value(DataType.STRING, data) == hash_string('jester')


def test_trailing_data():
    with pytest.raises(SerializationError):
        decode_value(DataType.BOOL, b'\x01\x00')


def test_unknown_value_type():
    with pytest.raises(InvalidDocumentError):
        decode_value('not_a_type', b'')  # type: ignore[arg-type]
