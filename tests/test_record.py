from dataclasses import FrozenInstanceError

import pytest

from yasr.record import SchemaRecord, SchemaReference, SchemaType, SubjectVersion
from yasr.serde import JsonSerde


class TestSchemaRecord:
    def test_is_immutable(self):
        record = SchemaRecord(id=1, subject="orders", version=1, schema="{}")

        with pytest.raises(FrozenInstanceError):
            record.version = 2

    def test_references_are_stored_as_tuple(self):
        refs = [SchemaReference(name="Address", subject="address", version=1)]
        record = SchemaRecord(id=1, subject="orders", version=1, schema="{}", references=refs)

        refs.append(SchemaReference(name="Other", subject="other", version=1))

        assert isinstance(record.references, tuple)
        assert len(record.references) == 1
        assert record.has_references

    def test_location(self):
        record = SchemaRecord(id=42, subject="orders", version=3, schema="{}")

        assert record.location == SubjectVersion("orders", 3)
        assert str(record.location) == "orders/3"

    def test_codec_is_not_part_of_equality(self):
        plain = SchemaRecord(id=1, subject="orders", version=1, schema="{}")
        with_codec = plain.with_codec(JsonSerde())

        assert with_codec == plain
        assert hash(with_codec) == hash(plain)
        assert plain.codec is None
        assert isinstance(with_codec.codec, JsonSerde)

    @pytest.mark.parametrize(
        ("schema_type", "expected"),
        [
            (None, True),
            (SchemaType.AVRO, True),
            (SchemaType.PROTOBUF, False),
            (SchemaType.JSONSCHEMA, False),
        ],
    )
    def test_is_avro(self, schema_type, expected):
        record = SchemaRecord(
            id=1, subject="s", version=1, schema="{}", schema_type=schema_type
        )
        assert record.is_avro is expected

    def test_str(self):
        record = SchemaRecord(
            id=42,
            subject="orders",
            version=3,
            schema="{}",
            schema_type=SchemaType.AVRO,
            references=(SchemaReference("Address", "address", 1),),
        )

        assert str(record) == "orders/3 (id=42, type=AVRO, references=1)"
        assert str(record.references[0]) == "Address -> address/1"
