import pytest

from dson.conf.settings import DsonSettings
from dson.exception import RevisionNotFoundError, ShapeMismatchError
from dson.field.data_type import DataType
from dson.field.encode import encode_values
from dson.field.encoding_field import EncodingField
from dson.layout.assembler import create_header, remove_revision_field, split_revision_field
from dson.layout.data import compute_data_length, compute_field_offsets

REVISION_FIELD_NAME = '__revision_dont_touch'


def _revision(value=0) -> EncodingField:
    return EncodingField(key=REVISION_FIELD_NAME, value_type=DataType.INT, value=value)


def test_single_bool_field():
    fields = encode_values([_revision(0), EncodingField(key='foo', value_type=DataType.BOOL, value=True)])
    header = create_header(fields)
    assert header.magic_number == bytes.fromhex('01b10000')
    assert header.revision == 0
    assert header.header_length == 64
    assert header.num_meta1_entries == 0
    assert header.num_meta2_entries == 1
    assert header.meta1_size == 0
    assert header.meta1_offset == 64
    assert header.meta2_offset == 64
    assert header.meta2_size == 12
    assert header.data_offset == 76
    assert header.data_length == 5
    assert header.get_layout_errors() == []


def test_single_float_field_with_3_char_key():
    fields = encode_values([EncodingField(key='abc', value_type=DataType.FLOAT, value=1.5)])
    assert compute_data_length(fields) == 8


def test_padding_fold():
    fields = encode_values([
        EncodingField(key='foo', value_type=DataType.BOOL, value=True),
        EncodingField(key='bar', value_type=DataType.INT, value=1),
        EncodingField(key='c', value_type=DataType.CHAR, value='c'),
        EncodingField(key='name', value_type=DataType.STRING, value='ab'),
    ])
    # foo\0 + 1 -> 5; bar\0 ends at 9, padded to 12, + 4 -> 16; c\0 + 1 -> 19; name\0 ends at 24, + 7 -> 31
    assert compute_field_offsets(fields) == [0, 5, 16, 19]
    assert compute_data_length(fields) == 31


def test_objects_count_in_meta1():
    fields = encode_values([
        _revision(2),
        EncodingField(key='root', value_type=DataType.OBJECT, num_direct_children=2, num_all_children=3),
        EncodingField(key='a', value_type=DataType.INT, value=1),
        EncodingField(key='inner', value_type=DataType.OBJECT, num_direct_children=1, num_all_children=1),
        EncodingField(key='b', value_type=DataType.BOOL, value=False),
    ])
    header = create_header(fields)
    assert header.revision == 2
    assert header.num_meta1_entries == 2
    assert header.meta1_size == 32
    assert header.num_meta2_entries == 4
    assert header.meta2_offset == 96
    assert header.data_offset == 64 + 32 + 48
    # root\0 -> 5; a\0 ends at 7, padded to 8, + 4 -> 12; inner\0 -> 18; b\0 + 1 -> 21
    assert header.data_length == 21


def test_revision_must_come_first():
    fields = encode_values([
        EncodingField(key='foo', value_type=DataType.BOOL, value=True),
        _revision(0),
    ])
    with pytest.raises(RevisionNotFoundError) as e:
        create_header(fields)
    assert e.value.actual_field_name == 'foo'
    assert e.value.expected_field_name == REVISION_FIELD_NAME


def test_revision_fails_before_anything_else():
    # fields are not encoded, computing any size would fail on them
    fields = [EncodingField(key='foo', value_type=DataType.INT, value=1)]
    with pytest.raises(RevisionNotFoundError):
        create_header(fields)


def test_empty_field_list():
    with pytest.raises(RevisionNotFoundError):
        create_header([])


def test_revision_must_be_a_number():
    fields = encode_values([EncodingField(key=REVISION_FIELD_NAME, value_type=DataType.STRING, value='x')])
    with pytest.raises(ShapeMismatchError):
        create_header(fields)


@pytest.mark.parametrize('value', [1 << 31, -(1 << 31) - 1, 1 << 40, float('inf'), float('nan')])
def test_revision_out_of_int32_range(value):
    with pytest.raises(ShapeMismatchError) as exc_info:
        create_header([_revision(value)])
    assert exc_info.value.key == REVISION_FIELD_NAME


@pytest.mark.parametrize('value', [(1 << 31) - 1, -(1 << 31), 7.9])
def test_revision_int32_limits(value):
    header = create_header(encode_values([_revision(value)]))
    assert header.revision == int(value)


def test_idempotent():
    fields = encode_values([
        _revision(0),
        EncodingField(key='foo', value_type=DataType.BOOL, value=True),
        EncodingField(key='bar', value_type=DataType.INT_VECTOR, value=[1, 2, 3]),
    ])
    assert create_header(fields) == create_header(fields)


def test_order_sensitive():
    foo = EncodingField(key='foo', value_type=DataType.BOOL, value=True)
    bar = EncodingField(key='bar', value_type=DataType.INT, value=1)
    header1 = create_header(encode_values([_revision(0), foo, bar]))
    header2 = create_header(encode_values([_revision(0), bar, foo]))
    assert header1.data_length == 16
    assert header2.data_length == 13


def test_custom_settings():
    settings = DsonSettings(MAGIC_NUMBER='deadbeef', REVISION_FIELD_NAME='rev')
    fields = encode_values([EncodingField(key='rev', value_type=DataType.INT, value=9)])
    header = create_header(fields, settings=settings)
    assert header.magic_number == bytes.fromhex('deadbeef')
    assert header.revision == 9
    assert header.num_meta2_entries == 0
    assert header.data_length == 0
    with pytest.raises(RevisionNotFoundError):
        create_header(fields)


def test_split_and_remove_revision_field():
    fields = [_revision(0), EncodingField(key='foo', value_type=DataType.BOOL, value=True)]
    revision_field, rest = split_revision_field(fields)
    assert revision_field is fields[0]
    assert rest == fields[1:]
    assert remove_revision_field(fields) == fields[1:]
