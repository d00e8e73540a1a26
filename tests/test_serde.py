import pytest

from yasr.exceptions import ConfigError, DecodeError, SerdeError
from yasr.serde import IntSerde, JsonSerde, StringSerde, get_serde

ORDER_SCHEMA = (
    '{"type": "record", "name": "Order", "fields": '
    '[{"name": "id", "type": "long"}, {"name": "item", "type": "string"}]}'
)


class TestGetSerde:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("string", StringSerde), ("INT", IntSerde), ("json", JsonSerde)],
    )
    def test_selects_by_name(self, name, expected):
        assert isinstance(get_serde(name), expected)

    def test_unknown_name(self):
        with pytest.raises(ConfigError, match="Unknown serde 'xml'") as excinfo:
            get_serde("xml")
        assert "avro, json, string, int" in str(excinfo.value)

    def test_avro_requires_schema(self):
        with pytest.raises(ConfigError, match="requires a schema"):
            get_serde("avro")


class TestStringSerde:
    def test_encode_decode(self):
        serde = StringSerde()
        assert serde.encode("héllo") == "héllo".encode("utf-8")
        assert serde.decode(b"plain") == "plain"

    def test_rejects_non_strings(self):
        with pytest.raises(SerdeError, match="int"):
            StringSerde().encode(5)

    def test_rejects_invalid_utf8(self):
        with pytest.raises(SerdeError, match="UTF-8"):
            StringSerde().decode(b"\xff\xfe")


class TestIntSerde:
    def test_encode_decode(self):
        serde = IntSerde()
        assert serde.encode(-42) == b"-42"
        assert serde.decode(b"1234") == 1234

    @pytest.mark.parametrize("value", [True, 1.5, "3", None])
    def test_rejects_non_integers(self, value):
        with pytest.raises(SerdeError):
            IntSerde().encode(value)

    def test_rejects_garbage(self):
        with pytest.raises(SerdeError, match="as an integer"):
            IntSerde().decode(b"twelve")

    @pytest.mark.parametrize("data", [b"4_2", b" 42 ", b"+42", b"42\n", b"", b"-", "42"])
    def test_rejects_non_decimal_text(self, data):
        with pytest.raises(SerdeError, match="as an integer"):
            IntSerde().decode(data)


class TestJsonSerde:
    def test_encode_decode(self):
        serde = JsonSerde()
        assert serde.decode(serde.encode({"a": [1, 2]})) == {"a": [1, 2]}

    def test_unserializable(self):
        with pytest.raises(SerdeError, match="not JSON serializable"):
            JsonSerde().encode({1, 2})

    def test_invalid_document(self):
        with pytest.raises(SerdeError, match="valid JSON"):
            JsonSerde().decode(b"{oops")


class TestAvroSerde:
    @pytest.fixture(autouse=True)
    def _requires_fastavro(self):
        pytest.importorskip("fastavro")

    def test_encode_decode(self):
        serde = get_serde("avro", ORDER_SCHEMA)
        data = serde.encode({"id": 7, "item": "book"})

        assert isinstance(data, bytes)
        assert serde.decode(data) == {"id": 7, "item": "book"}
        assert serde.name == "avro"

    def test_accepts_decoded_schema(self):
        serde = get_serde("avro", {"type": "string"})
        assert serde.decode(serde.encode("x")) == "x"

    def test_invalid_schema_json(self):
        with pytest.raises(DecodeError, match="not valid JSON"):
            get_serde("avro", "{not json")

    def test_invalid_avro_schema(self):
        with pytest.raises(DecodeError, match="Invalid Avro schema"):
            get_serde("avro", '{"type": "no-such-type"}')

    def test_value_not_matching_schema(self):
        serde = get_serde("avro", ORDER_SCHEMA)
        with pytest.raises(SerdeError, match="does not match"):
            serde.encode({"id": "seven", "item": "book"})
