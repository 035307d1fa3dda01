import pytest

from dson.exception import FieldNameTooLongError, InvalidDocumentError, InvalidFieldNameError
from dson.field.data_type import DataType
from dson.field.encode import encode_values
from dson.field.encoding_field import EncodingField
from dson.layout.meta1 import NO_PARENT, Meta1Entry, create_meta1_block, decode_meta1_entry, encode_meta1_entry
from dson.layout.meta2 import (
    FIELD_INFO_NAME_LENGTH_MASK,
    FIELD_INFO_NUM_OBJECTS_MASK,
    FieldInfo,
    Meta2Entry,
    create_meta2_block,
    create_meta2_entry,
    decode_meta2_entry,
    encode_meta2_entry,
)
from dson.name_hash import hash_string
from dson.serialization import Deserializer, Serializer


def _tree_fields() -> list[EncodingField]:
    # root { a, inner { b }, other {} }, last
    return encode_values([
        EncodingField(key='root', value_type=DataType.OBJECT, num_direct_children=3, num_all_children=4),
        EncodingField(key='a', value_type=DataType.INT, value=1),
        EncodingField(key='inner', value_type=DataType.OBJECT, num_direct_children=1, num_all_children=1),
        EncodingField(key='b', value_type=DataType.BOOL, value=True),
        EncodingField(key='other', value_type=DataType.OBJECT),
        EncodingField(key='last', value_type=DataType.OBJECT),
    ])


@pytest.mark.parametrize('is_object,name_length,num_objects_before', [
    (False, 0, 0),
    (True, 0, 0),
    (False, 2, 0),
    (True, FIELD_INFO_NAME_LENGTH_MASK, 0),
    (False, 5, FIELD_INFO_NUM_OBJECTS_MASK),
    (True, FIELD_INFO_NAME_LENGTH_MASK, FIELD_INFO_NUM_OBJECTS_MASK),
])
def test_field_info_components_are_independent(is_object, name_length, num_objects_before):
    info = FieldInfo(is_object=is_object, name_length=name_length, num_objects_before=num_objects_before)
    packed = info.pack()
    assert packed & 1 == int(is_object)
    assert (packed >> 2) & FIELD_INFO_NAME_LENGTH_MASK == name_length
    assert packed >> 11 == num_objects_before
    assert packed & 0b10 == 0
    assert packed < 2**31
    assert FieldInfo.unpack(packed) == info


def test_field_info_out_of_range():
    with pytest.raises(ValueError):
        FieldInfo(is_object=False, name_length=FIELD_INFO_NAME_LENGTH_MASK + 1, num_objects_before=0).pack()
    with pytest.raises(ValueError):
        FieldInfo(is_object=False, name_length=1, num_objects_before=FIELD_INFO_NUM_OBJECTS_MASK + 1).pack()


def test_create_meta2_entry():
    field = encode_values([EncodingField(key='foo', value_type=DataType.BOOL, value=True)])[0]
    entry = create_meta2_entry(12, 3, field)
    assert entry.name_hash == hash_string('foo\0')
    assert entry.offset == 12
    assert entry.get_field_info() == FieldInfo(is_object=False, name_length=4, num_objects_before=3)
    assert entry.field_info == (4 << 2) | (3 << 11)


def test_create_meta2_entry_name_too_long():
    field = encode_values([EncodingField(key='x' * 11, value_type=DataType.BOOL, value=True)])[0]
    with pytest.raises(FieldNameTooLongError):
        create_meta2_entry(0, 0, field, max_field_name_length=10)
    create_meta2_entry(0, 0, field, max_field_name_length=11)


@pytest.mark.parametrize('key', ['', 'a\0b', 'ab\0'])
def test_create_meta2_entry_invalid_name(key):
    field = encode_values([EncodingField(key=key, value_type=DataType.BOOL, value=True)])[0]
    with pytest.raises(InvalidFieldNameError):
        create_meta2_entry(0, 0, field)


def test_create_meta2_block():
    entries = create_meta2_block(_tree_fields())
    assert [entry.offset for entry in entries] == [0, 5, 12, 18, 21, 27]
    infos = [entry.get_field_info() for entry in entries]
    assert [info.is_object for info in infos] == [True, False, True, False, True, True]
    assert [info.num_objects_before for info in infos] == [0, 1, 1, 2, 2, 3]
    assert [info.name_length for info in infos] == [5, 2, 6, 2, 6, 5]


def test_meta2_entry_bytes():
    entry = Meta2Entry(name_hash=0xffffffff, offset=8, field_info=(2 << 2) | 1)
    se = Serializer.build_bytes_serializer()
    encode_meta2_entry(se, entry)
    data = bytes(se.finalize())
    assert data.hex() == 'ffffffff' '08000000' '09000000'
    assert decode_meta2_entry(Deserializer.build_bytes_deserializer(data)) == entry


def test_create_meta1_block():
    entries = create_meta1_block(_tree_fields())
    assert entries == [
        Meta1Entry(parent_index=NO_PARENT, meta2_entry_index=0, num_direct_children=3, num_all_children=4),
        Meta1Entry(parent_index=0, meta2_entry_index=2, num_direct_children=1, num_all_children=1),
        Meta1Entry(parent_index=0, meta2_entry_index=4, num_direct_children=0, num_all_children=0),
        Meta1Entry(parent_index=NO_PARENT, meta2_entry_index=5, num_direct_children=0, num_all_children=0),
    ]


def test_meta1_index_matches_objects_before():
    fields = _tree_fields()
    meta1_entries = create_meta1_block(fields)
    meta2_entries = create_meta2_block(fields)
    for meta1_index, meta1_entry in enumerate(meta1_entries):
        info = meta2_entries[meta1_entry.meta2_entry_index].get_field_info()
        assert info.is_object
        assert info.num_objects_before == meta1_index


def test_create_meta1_block_too_many_descendants():
    fields = encode_values([
        EncodingField(key='root', value_type=DataType.OBJECT, num_direct_children=2, num_all_children=2),
        EncodingField(key='a', value_type=DataType.INT, value=1),
    ])
    with pytest.raises(InvalidDocumentError):
        create_meta1_block(fields)


def test_meta1_entry_bytes():
    entry = Meta1Entry(parent_index=NO_PARENT, meta2_entry_index=1, num_direct_children=2, num_all_children=3)
    se = Serializer.build_bytes_serializer()
    encode_meta1_entry(se, entry)
    data = bytes(se.finalize())
    assert data.hex() == 'ffffffff' '01000000' '02000000' '03000000'
    assert decode_meta1_entry(Deserializer.build_bytes_deserializer(data)) == entry
