import json
from datetime import date

import httpx
import pytest
from pydantic import BaseModel

from conftest import FakeTransport
from kree_request.client import KreeRequest
from kree_request.errors import (
    ApiError,
    ApiErrorNotDecodable,
    DeserializationError,
    GeneralError,
    SerializationError,
)
from kree_request.model import (
    BytesBody,
    Config,
    JsonBody,
    Method,
    RequestDescriptor,
    StaticBackend,
    StringBody,
    TransportResponse,
)
from kree_request.transport import HttpxTransport

BACKEND = StaticBackend("https://example.com/")


class Cheese(BaseModel):
    name: str
    age: int
    made_on: date | None = None


class ApiMessage(BaseModel):
    message: str


def _config(method=Method.GET, path="cheese", **kwargs) -> Config:
    return Config(method=method, backend=BACKEND, path=path, **kwargs)


@pytest.mark.asyncio
async def test_json_in_typed_value_out(mock_client):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"name": "brie", "age": 5})

    client = mock_client(handler)
    cheese = await client.request_json(
        _config(Method.POST, url_parameters={"age": "5"}, headers={"X-Api-Key": "k"}),
        Cheese(name="brie", age=5, made_on=date(2025, 1, 2)),
        response_type=Cheese,
    )

    assert cheese == Cheese(name="brie", age=5)
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://example.com/cheese?age=5"
    assert request.headers["x-api-key"] == "k"
    assert request.headers["content-length"] == str(len(request.content))
    assert json.loads(request.content) == {"name": "brie", "age": 5, "made_on": "2025-01-02"}


@pytest.mark.asyncio
async def test_no_body_no_output_returns_none(mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.content == b""
        return httpx.Response(204)

    client = mock_client(handler)

    assert await client.request_json(_config(Method.DELETE, path="cheese/1")) is None


@pytest.mark.asyncio
async def test_no_output_ignores_success_body(mock_client):
    client = mock_client(lambda request: httpx.Response(200, content=b"not json"))

    assert await client.request(_config()) is None


@pytest.mark.asyncio
async def test_decodes_collections(mock_client):
    client = mock_client(lambda request: httpx.Response(200, json=[{"name": "a", "age": 1}]))

    result = await client.request(_config(), response_type=list[Cheese])

    assert result == [Cheese(name="a", age=1)]


@pytest.mark.asyncio
async def test_string_body_sent_verbatim(mock_client):
    seen: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content)
        return httpx.Response(200, json={"name": "feta", "age": 2})

    client = mock_client(handler)
    result = await client.request_string(_config(Method.PUT), "name=feta", response_type=Cheese)

    assert seen == [b"name=feta"]
    assert result.name == "feta"


@pytest.mark.asyncio
async def test_bytes_body_sent_verbatim(mock_client):
    seen: list[bytes] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content)
        return httpx.Response(202)

    client = mock_client(handler)
    await client.request_data(_config(Method.PATCH), b"\x00\x01binary")

    assert seen == [b"\x00\x01binary"]


@pytest.mark.asyncio
async def test_fetch_returns_raw_success(mock_client):
    client = mock_client(
        lambda request: httpx.Response(200, content=b'{"a":1}', headers={"X-Count": "3"})
    )

    success = await client.fetch(_config(), JsonBody({"q": 1}))

    assert success.status == 200
    assert success.data == b'{"a":1}'
    assert success.headers["x-count"] == "3"


@pytest.mark.asyncio
async def test_unencodable_json_raises_before_sending():
    transport = FakeTransport()
    client = KreeRequest(transport)

    with pytest.raises(SerializationError):
        await client.request_json(_config(Method.POST), object())

    assert transport.calls == []


@pytest.mark.asyncio
async def test_unencodable_string_raises_serialization_error():
    client = KreeRequest(FakeTransport())

    with pytest.raises(SerializationError):
        await client.request(_config(Method.POST), StringBody("Gruyère", encoding="ascii"))


@pytest.mark.asyncio
async def test_mismatched_success_body_raises_deserialization_error(mock_client):
    client = mock_client(lambda request: httpx.Response(200, content=b'{"name":"brie"}'))

    with pytest.raises(DeserializationError) as excinfo:
        await client.request(_config(), response_type=Cheese)

    assert excinfo.value.status == 200
    assert excinfo.value.data == b'{"name":"brie"}'


@pytest.mark.asyncio
async def test_api_error_raised_unchanged(mock_client):
    client = mock_client(lambda request: httpx.Response(404, json={"message": "not found"}))

    with pytest.raises(ApiError) as excinfo:
        await client.request(_config(), response_type=Cheese, error_type=ApiMessage)

    assert excinfo.value.status == 404
    assert excinfo.value.error == ApiMessage(message="not found")


@pytest.mark.asyncio
async def test_undecodable_api_error(mock_client):
    client = mock_client(lambda request: httpx.Response(500, content=b"not json"))

    with pytest.raises(ApiErrorNotDecodable) as excinfo:
        await client.request(_config(), error_type=ApiMessage)

    assert excinfo.value.status == 500


@pytest.mark.asyncio
async def test_transport_timeout_raises_general_error(mock_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = mock_client(handler)

    with pytest.raises(GeneralError) as excinfo:
        await client.request(_config(timeout=0.5), response_type=Cheese)

    assert excinfo.value.status is None
    assert isinstance(excinfo.value.error, httpx.ConnectTimeout)


@pytest.mark.asyncio
async def test_logger_sees_every_attempt(mock_client, sink):
    responses = iter([httpx.Response(200, json={"name": "brie", "age": 5}), httpx.Response(503)])
    client = mock_client(lambda request: next(responses), logger=sink)

    await client.request_json(_config(Method.POST), {"name": "brie"}, response_type=Cheese)
    with pytest.raises(ApiErrorNotDecodable):
        await client.request_json(_config())

    assert sink.messages[0].startswith('POST https://example.com/cheese\nbody: {\n  "name": "brie"\n}')
    assert sink.messages[1] == "GET https://example.com/cheese\nbody: (none)\nresponse: (none)"


def test_static_helpers_exposed():
    assert KreeRequest.urlencoded_query_string({"a": "1+1"}) == "?a=1%2b1"
    assert KreeRequest.json_string(b"null") is None


@pytest.mark.asyncio
async def test_httpx_transport_preserves_duplicate_headers_and_timeout():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, headers=[("X-Id", "1"), ("X-Id", "2")], content=b"ok")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        transport = HttpxTransport(http_client)
        descriptor = RequestDescriptor(
            url="https://example.com/cheese",
            method=Method.GET,
            headers=(("Accept", "application/json"), ("Accept", "text/plain")),
        )
        response = await transport.execute(descriptor, 4.0)

    assert isinstance(response, TransportResponse)
    assert seen[0].headers.get_list("accept") == ["application/json", "text/plain"]
    assert seen[0].extensions["timeout"] == httpx.Timeout(4.0).as_dict()
    assert response.status_code == 200
    assert response.body == b"ok"
    assert ("x-id", "1") in response.headers and ("x-id", "2") in response.headers


@pytest.mark.asyncio
async def test_client_closes_owned_transport():
    client = KreeRequest()
    async with client:
        http_client = client.transport.client

    assert http_client.is_closed


@pytest.mark.asyncio
async def test_injected_bytes_body_type_is_bytes():
    transport = FakeTransport(TransportResponse(status_code=200, headers=(), body=b""))
    client = KreeRequest(transport)

    await client.request(_config(Method.POST), BytesBody(bytearray(b"abc")))

    descriptor, _ = transport.calls[0]
    assert descriptor.body == b"abc"
    assert type(descriptor.body) is bytes


@pytest.mark.asyncio
async def test_raised_errors_keep_underlying_failure():
    refused = httpx.ConnectError("refused")
    client = KreeRequest(FakeTransport(refused))

    with pytest.raises(GeneralError) as excinfo:
        await client.request(_config())

    assert excinfo.value.__cause__ is refused
