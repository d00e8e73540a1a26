from __future__ import annotations

import json

import httpx
import pytest

from yasr.exceptions import (
    ConfigError,
    DecodeError,
    NotFoundError,
    RegistryError,
    TransportError,
)
from yasr.record import SchemaReference, SchemaType, SubjectVersion
from yasr.transport import HttpTransport
from yasr.transport.base import CONTENT_TYPE


def make_transport(handler, **kwargs) -> HttpTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpTransport("http://registry:8081/", client=client, **kwargs)


def json_response(status: int, payload) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(payload).encode())


class TestConstruction:
    @pytest.mark.parametrize("url", ["", "registry:8081", "ftp://registry"])
    def test_rejects_non_http_urls(self, url):
        with pytest.raises(ConfigError, match="Invalid registry URL"):
            HttpTransport(url)

    def test_strips_trailing_slash(self):
        transport = HttpTransport("http://registry:8081/")
        assert transport.base_url == "http://registry:8081"
        transport.close()

    def test_does_not_close_foreign_client(self):
        client = httpx.Client()
        with HttpTransport("http://registry", client=client):
            pass
        assert client.is_closed is False
        client.close()


class TestRequests:
    def test_sends_registry_media_type_and_extra_headers(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(200, ["orders"])

        transport = make_transport(handler, headers={"X-Team": "payments"})

        assert transport.list_subjects() == ["orders"]
        request = seen[0]
        assert request.method == "GET"
        assert str(request.url) == "http://registry:8081/subjects"
        assert request.headers["Accept"] == CONTENT_TYPE
        assert request.headers["Content-Type"] == CONTENT_TYPE
        assert request.headers["X-Team"] == "payments"

    def test_fetch_schema_by_subject_version(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/subjects/orders/versions/3"
            return json_response(
                200,
                {
                    "id": 42,
                    "subject": "orders",
                    "version": 3,
                    "schemaType": "AVRO",
                    "schema": '{"type": "string"}',
                    "references": [
                        {"name": "Address", "subject": "address", "version": 1}
                    ],
                },
            )

        record = make_transport(handler).fetch_schema_by_subject_version("orders", 3)

        assert (record.id, record.subject, record.version) == (42, "orders", 3)
        assert record.schema_type is SchemaType.AVRO
        assert record.references == (SchemaReference("Address", "address", 1),)

    def test_fetch_subject_versions_by_id_keeps_order(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/schemas/ids/42/versions"
            return json_response(
                200,
                [{"subject": "z", "version": 1}, {"subject": "a", "version": 2}],
            )

        locations = make_transport(handler).fetch_subject_versions_by_id(42)

        assert locations == [SubjectVersion("z", 1), SubjectVersion("a", 2)]

    def test_fetch_schema_by_id(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response(200, {"schema": '"string"'})

        payload = make_transport(handler).fetch_schema_by_id(1)

        assert payload.schema_text == '"string"'
        assert payload.schema_type is None

    def test_delete_subject(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            assert request.url.path == "/subjects/orders"
            assert request.url.params["permanent"] == "true"
            return json_response(200, [1, 2])

        assert make_transport(handler).delete_subject("orders", permanent=True) == [1, 2]


class TestErrors:
    @pytest.mark.parametrize("error_code", [40401, 40402, 40403])
    def test_not_found_codes(self, error_code):
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response(404, {"error_code": error_code, "message": "Subject not found."})

        with pytest.raises(NotFoundError, match="Subject not found.") as excinfo:
            make_transport(handler).list_versions("missing")

        assert excinfo.value.status_code == 404
        assert excinfo.value.error_code == error_code

    def test_structured_server_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response(500, {"error_code": 50001, "message": "Error in the backend"})

        with pytest.raises(RegistryError) as excinfo:
            make_transport(handler).list_subjects()

        assert not isinstance(excinfo.value, NotFoundError)
        assert excinfo.value.error_code == 50001

    def test_error_without_body_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, content=b"<html>Bad Gateway</html>")

        with pytest.raises(TransportError, match="HTTP 502") as excinfo:
            make_transport(handler).list_subjects()

        assert excinfo.value.status_code == 502

    def test_timeout_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError, match="timed out") as excinfo:
            make_transport(handler).list_subjects()

        assert excinfo.value.status_code is None

    def test_connection_error_is_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError, match="connection refused"):
            make_transport(handler).list_subjects()

    def test_non_json_success_is_decode_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"not json")

        with pytest.raises(DecodeError, match="not JSON"):
            make_transport(handler).list_subjects()

    def test_wrong_shape_is_decode_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response(200, {"id": "forty-two", "subject": "orders"})

        with pytest.raises(DecodeError, match="Malformed schema response"):
            make_transport(handler).fetch_schema_by_subject_version("orders", 3)
