import struct

from dson.conf.settings import DsonSettings
from dson.exception import (
    FieldNameTooLongError,
    InvalidDocumentError,
    InvalidFieldNameError,
    RevisionNotFoundError,
    ShapeMismatchError,
)
from dson.field.data_type import DataType
from dson.field.encoding_field import EncodingField
from dson.name_hash import hash_string
from dson.reader import read_document
from dson.writer import encode_document, encode_fields
from tests import unittest

TREE = [
    {'key': 'base_root', 'type': 'object', 'fields': [
        {'key': 'gold', 'type': 'int', 'value': 1500},
        {'key': 'is_new', 'type': 'bool', 'value': False},
        {'key': 'hero', 'type': 'object', 'fields': [
            {'key': 'class', 'type': 'string', 'value': 'jester'},
            {'key': 'stress', 'type': 'float', 'value': 12.5},
            {'key': 'quirks', 'type': 'string_vector', 'value': ['kleptomaniac', 'tough']},
            {'key': 'level', 'type': 'char', 'value': '3'},
        ]},
        {'key': 'position', 'type': 'two_int', 'value': [3, -1]},
        {'key': 'flags', 'type': 'two_bool', 'value': [True, False]},
        {'key': 'loot', 'type': 'int_vector', 'value': [1, 2, 3]},
        {'key': 'weights', 'type': 'float_vector', 'value': [0.5, 0.25]},
        {'key': 'mixed', 'type': 'hybrid_vector', 'value': [7, 'torch']},
        {'key': 'empty', 'type': 'object', 'fields': []},
    ]},
    {'key': 'dlc', 'type': 'file_json', 'value': {'ignored': True}},
]


class DocumentTest(unittest.TestCase):
    def test_single_bool_document(self):
        fields = [self.revision_field(0), EncodingField(key='foo', value_type=DataType.BOOL, value=True)]
        document = encode_document(fields)
        self.assertEqual(len(document), 64 + 12 + 5)
        self.assertEqual(document[:4], bytes.fromhex('01b10000'))
        self.assertEqual(struct.unpack_from('<Iii', document, 64), (hash_string('foo\0'), 0, 4 << 2))
        self.assertEqual(document[76:], b'foo\x00\x01')

    def test_alignment_padding_is_zeroed(self):
        fields = [
            self.revision_field(0),
            EncodingField(key='foo', value_type=DataType.BOOL, value=True),
            EncodingField(key='bar', value_type=DataType.INT, value=-1),
        ]
        document = encode_document(fields)
        data_block = document[64 + 24:]
        self.assertEqual(data_block, b'foo\x00\x01' + b'bar\x00' + bytes(3) + b'\xff\xff\xff\xff')

    def test_encode_fields(self):
        fields = self.flatten(TREE, revision=4)
        header, encoded_fields = encode_fields(fields)
        self.assertEqual(header.revision, 4)
        self.assertEqual(header.num_meta1_entries, 3)
        self.assertEqual(header.num_meta2_entries, len(fields) - 1)
        self.assertEqual([f.is_object for f in encoded_fields], [f.value_type is DataType.OBJECT for f in fields])
        self.assertTrue(all(f.data is not None for f in encoded_fields))

    def test_encode_fields_with_children_counts(self):
        fields = [self.revision_field(0), EncodingField(key='root', value_type=DataType.OBJECT)]
        _, encoded_fields = encode_fields(fields, [0, 5], [0, 6])
        self.assertEqual(encoded_fields[1].num_direct_children, 5)
        self.assertEqual(encoded_fields[1].num_all_children, 6)

    def test_round_trip(self):
        fields = self.flatten(TREE, revision=4)
        document = encode_document(fields)
        decoded = read_document(document)
        self.assertEqual(decoded.revision, 4)
        self.assertEqual([f.key for f in decoded.fields], [f.key for f in fields[1:]])
        self.assertEqual(
            [(f.num_direct_children, f.num_all_children) for f in decoded.fields if f.is_object],
            [(f.num_direct_children, f.num_all_children) for f in fields if f.value_type is DataType.OBJECT],
        )
        depths = {f.key: f.depth for f in decoded.fields}
        self.assertEqual(depths['base_root'], 0)
        self.assertEqual(depths['gold'], 1)
        self.assertEqual(depths['hero'], 1)
        self.assertEqual(depths['class'], 2)
        self.assertEqual(depths['position'], 1)
        self.assertEqual(depths['dlc'], 0)

        types = {f.key: f.value_type for f in fields}
        decoded_fields = decoded.to_encoding_fields(lambda field: types[field.key])
        values = {f.key: f.value for f in decoded_fields}
        self.assertEqual(values[self._settings.REVISION_FIELD_NAME], 4)
        self.assertEqual(values['gold'], 1500)
        self.assertEqual(values['is_new'], False)
        self.assertEqual(values['class'], 'jester')
        self.assertEqual(values['stress'], 12.5)
        self.assertEqual(values['quirks'], ['kleptomaniac', 'tough'])
        self.assertEqual(values['level'], '3')
        self.assertEqual(values['position'], [3, -1])
        self.assertEqual(values['flags'], [True, False])
        self.assertEqual(values['loot'], [1, 2, 3])
        self.assertEqual(values['weights'], [0.5, 0.25])
        self.assertEqual(values['mixed'], [7, 'torch'])
        self.assertIsNone(values['dlc'])

        # a document read back encodes to the same bytes
        self.assertEqual(encode_document(decoded_fields), document)

    def test_deterministic(self):
        self.assertEqual(encode_document(self.flatten(TREE)), encode_document(self.flatten(TREE)))

    def test_missing_revision(self):
        with self.assertRaises(RevisionNotFoundError):
            encode_document([EncodingField(key='foo', value_type=DataType.BOOL, value=True)])

    def test_name_too_long(self):
        settings = DsonSettings(MAX_FIELD_NAME_LENGTH=4)
        fields = [self.revision_field(0), EncodingField(key='abcde', value_type=DataType.BOOL, value=True)]
        with self.assertRaises(FieldNameTooLongError):
            encode_document(fields, settings=settings)

    def test_revision_out_of_range(self):
        for revision in [1 << 31, -(1 << 31) - 1]:
            with self.assertRaises(ShapeMismatchError):
                encode_document([self.revision_field(revision)])

    def test_zero_byte_in_name(self):
        fields = [self.revision_field(0), EncodingField(key='a\0b', value_type=DataType.BOOL, value=True)]
        with self.assertRaises(InvalidFieldNameError):
            encode_document(fields)
        with self.assertRaises(InvalidFieldNameError):
            self.flatten([{'key': 'a\0b', 'type': 'bool', 'value': True}])

    def test_children_overflow(self):
        fields = [
            self.revision_field(0),
            EncodingField(key='root', value_type=DataType.OBJECT, num_direct_children=1, num_all_children=1),
        ]
        with self.assertRaises(InvalidDocumentError):
            encode_document(fields)

    def test_read_empty_document(self):
        document = encode_document([self.revision_field(3)])
        self.assertEqual(len(document), 64)
        decoded = read_document(document)
        self.assertEqual(decoded.revision, 3)
        self.assertEqual(decoded.fields, [])


class InvalidDocumentTest(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        fields = [
            self.revision_field(0),
            EncodingField(key='foo', value_type=DataType.BOOL, value=True),
            EncodingField(key='bar', value_type=DataType.INT, value=-1),
        ]
        self.document = encode_document(fields)
        self.data_offset = 64 + 24

    def _assert_invalid(self, document: bytes) -> None:
        with self.assertRaises(InvalidDocumentError):
            read_document(document)

    def _patch(self, offset: int, data: bytes) -> bytes:
        document = bytearray(self.document)
        document[offset:offset + len(data)] = data
        return bytes(document)

    def test_valid(self):
        decoded = read_document(self.document)
        self.assertEqual([f.payload for f in decoded.fields], [b'\x01', b'\xff\xff\xff\xff'])

    def test_truncated(self):
        self._assert_invalid(self.document[:40])
        self._assert_invalid(self.document[:-1])

    def test_trailing_data(self):
        self._assert_invalid(self.document + b'\x00')

    def test_bad_magic_number(self):
        self._assert_invalid(self._patch(0, b'\x00'))

    def test_bad_header_length(self):
        self._assert_invalid(self._patch(8, struct.pack('<i', 60)))

    def test_name_not_zero_terminated(self):
        self._assert_invalid(self._patch(self.data_offset + 3, b'X'))

    def test_name_hash_mismatch(self):
        self._assert_invalid(self._patch(self.data_offset, b'g'))

    def test_padding_not_zeroed(self):
        self._assert_invalid(self._patch(self.data_offset + 9, b'\x01'))

    def test_offsets_out_of_order(self):
        # second meta2 entry offset set to the first field offset
        self._assert_invalid(self._patch(64 + 12 + 4, struct.pack('<i', 0)))

    def test_wrong_object_flag(self):
        # mark "foo" as an object without a meta1 entry
        self._assert_invalid(self._patch(64 + 8, struct.pack('<i', (4 << 2) | 1)))

    def test_meta1_entry_without_object(self):
        # one meta1 entry pointing past the end of the meta2 block
        document = bytearray(self.document[:64])
        document[16:28] = struct.pack('<iii', 16, 1, 64)
        document[48:52] = struct.pack('<i', 64 + 16)
        document[60:64] = struct.pack('<i', 64 + 16 + 24)
        document += struct.pack('<iiii', -1, 99, 0, 0)
        document += self.document[64:]
        self._assert_invalid(bytes(document))

    def test_two_meta1_entries_for_one_object(self):
        fields = [
            self.revision_field(0),
            EncodingField(key='root', value_type=DataType.OBJECT, num_direct_children=1, num_all_children=1),
            EncodingField(key='foo', value_type=DataType.BOOL, value=True),
        ]
        valid = encode_document(fields)
        data_length = len(valid) - (64 + 16 + 24)
        document = bytearray(valid[:64])
        document[16:28] = struct.pack('<iii', 32, 2, 64)
        document[48:52] = struct.pack('<i', 64 + 32)
        document[60:64] = struct.pack('<i', 64 + 32 + 24)
        document += valid[64:80] + valid[64:80] + valid[80:]
        self.assertEqual(len(document), 64 + 32 + 24 + data_length)
        self._assert_invalid(bytes(document))

    def test_read_from_bytearray(self):
        decoded = read_document(bytearray(self.document))
        self.assertEqual([f.key for f in decoded.fields], ['foo', 'bar'])

    def test_custom_magic_number(self):
        settings = DsonSettings(MAGIC_NUMBER='deadbeef')
        document = encode_document([self.revision_field(0)], settings=settings)
        self.assertEqual(document[:4], bytes.fromhex('deadbeef'))
        self.assertEqual(read_document(document, settings=settings).revision, 0)
        self._assert_invalid(document)
