import base64
import json

import httpx
import pytest
import respx
from httpx import Response
from twentyi_mcp.core.errors import ErrorKind, TwentyIError


@pytest.mark.asyncio
async def test_get_request_success(client):
    async with respx.mock:
        route = respx.get("https://api.20i.com/package").mock(
            return_value=Response(200, json=[{"id": 1, "name": "example.com"}])
        )

        async with client:
            data = await client.get("/package")

        assert data == [{"id": 1, "name": "example.com"}]
        assert route.called


@pytest.mark.asyncio
async def test_headers_carry_base64_bearer_token(client):
    async with respx.mock:
        route = respx.get("https://api.20i.com/domain").mock(
            return_value=Response(200, json=[])
        )

        async with client:
            await client.get("/domain")

        sent = route.calls[0].request.headers
        expected = "Bearer " + base64.b64encode(b"test-api-key").decode()

        assert sent.get("Authorization") == expected
        assert sent.get("Accept") == "application/json"
        assert sent.get("Content-Type") == "application/json"


def test_timeout_is_fixed_at_thirty_seconds(client):
    assert client.timeout_seconds == 30.0
    assert client.http.timeout.read == 30.0


@pytest.mark.asyncio
async def test_post_sends_json_body(client):
    async with respx.mock:
        route = respx.post("https://api.20i.com/reseller/R-1/addWeb").mock(
            return_value=Response(200, json={"result": 42})
        )

        async with client:
            data = await client.post("/reseller/R-1/addWeb", json={"type": "linux"})

        assert data == {"result": 42}
        assert json.loads(route.calls[0].request.content) == {"type": "linux"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,kind",
    [
        (400, ErrorKind.VALIDATION),
        (403, ErrorKind.FORBIDDEN),
        (404, ErrorKind.NOT_FOUND),
        (401, ErrorKind.UNKNOWN),
        (500, ErrorKind.UNKNOWN),
    ],
)
async def test_status_maps_to_error_kind(client, status, kind):
    async with respx.mock:
        respx.get("https://api.20i.com/package/9").mock(
            return_value=Response(status, json={"message": "upstream says no"})
        )

        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.get("/package/9")

    assert exc.value.kind is kind
    assert exc.value.http_status == status
    assert "upstream says no" in exc.value.message
    assert exc.value.cause == {"status": status, "body": {"message": "upstream says no"}}


@pytest.mark.asyncio
async def test_non_json_error_body_is_kept_as_text(client):
    async with respx.mock:
        respx.get("https://api.20i.com/package/9").mock(
            return_value=Response(502, text="Bad Gateway")
        )

        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.get("/package/9")

    assert exc.value.kind is ErrorKind.UNKNOWN
    assert exc.value.cause["body"] == "Bad Gateway"


@pytest.mark.asyncio
async def test_html_error_page_is_stripped_and_reported(client):
    async with respx.mock:
        respx.get("https://api.20i.com/reseller").mock(
            return_value=Response(500, html="<html><h1>Error</h1></html>")
        )

        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.get("/reseller")

    assert exc.value.kind is ErrorKind.FORMAT
    assert exc.value.http_status == 500
    assert "HTML error page (500)" in exc.value.message
    assert "Error" in exc.value.message
    assert "<h1>" not in exc.value.message


@pytest.mark.asyncio
async def test_timeout_is_a_transport_error_without_retry(client):
    async with respx.mock:
        route = respx.get("https://api.20i.com/reseller").mock(
            side_effect=httpx.ReadTimeout("slow")
        )

        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.get("/reseller")

    assert exc.value.kind is ErrorKind.TRANSPORT
    assert exc.value.http_status is None
    assert "timeout" in exc.value.message.lower()
    assert isinstance(exc.value.cause, httpx.ReadTimeout)
    assert route.call_count == 1


@pytest.mark.asyncio
async def test_connect_error_is_a_transport_error(client):
    async with respx.mock:
        respx.get("https://api.20i.com/reseller").mock(
            side_effect=httpx.ConnectError("dns failure")
        )

        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.get("/reseller")

    assert exc.value.kind is ErrorKind.TRANSPORT
    assert "Network error" in exc.value.message


@pytest.mark.asyncio
async def test_empty_response_returns_empty_dict(client):
    async with respx.mock:
        respx.delete("https://api.20i.com/package/1").mock(return_value=Response(204))

        async with client:
            assert await client.delete("/package/1") == {}


@pytest.mark.asyncio
async def test_null_body_returns_empty_dict(client):
    async with respx.mock:
        respx.get("https://api.20i.com/domainVerification").mock(
            return_value=Response(200, text="null")
        )

        async with client:
            assert await client.get("/domainVerification") == {}


@pytest.mark.asyncio
async def test_json_text_with_wrong_content_type_is_parsed(client):
    async with respx.mock:
        respx.get("https://api.20i.com/package").mock(
            return_value=Response(200, text=' [{"id": 7}] ')
        )

        async with client:
            assert await client.get("/package") == [{"id": 7}]


@pytest.mark.asyncio
async def test_object_literal_body_is_format_error(client):
    async with respx.mock:
        respx.get("https://api.20i.com/package").mock(
            return_value=Response(200, text="Loaded: true")
        )

        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.get("/package")

    assert exc.value.kind is ErrorKind.FORMAT


@pytest.mark.asyncio
async def test_html_success_body_is_format_error(client):
    async with respx.mock:
        respx.get("https://api.20i.com/package").mock(
            return_value=Response(200, html="<html>Sign in</html>")
        )

        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.get("/package")

    assert exc.value.kind is ErrorKind.FORMAT
    assert "HTML instead of JSON" in exc.value.message


@pytest.mark.asyncio
async def test_in_band_error_is_raised(client):
    async with respx.mock:
        respx.post("https://api.20i.com/package/1/web/suspend").mock(
            return_value=Response(200, json={"error": "Package already suspended"})
        )

        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.post("/package/1/web/suspend", json={})

    assert exc.value.kind is ErrorKind.UNKNOWN
    assert exc.value.http_status == 200
    assert "already suspended" in exc.value.message


def test_injected_http_client_is_not_closed_by_client(credentials):
    from twentyi_mcp.core.client import TwentyIClient

    http = httpx.AsyncClient(base_url="https://api.20i.com")
    client = TwentyIClient(credentials=credentials, http=http)

    assert client.http is http
    assert client._owns_http is False


@pytest.mark.asyncio
async def test_unbuildable_url_is_a_validation_error(client):
    async with respx.mock(assert_all_called=False) as mock:
        async with client:
            with pytest.raises(TwentyIError) as exc:
                await client.get("/a\x01b")

    assert exc.value.kind is ErrorKind.VALIDATION
    assert isinstance(exc.value.cause, httpx.InvalidURL)
    assert not mock.calls


@pytest.mark.asyncio
async def test_request_on_closed_client_is_a_transport_error(client):
    await client.aclose()

    with pytest.raises(TwentyIError) as exc:
        await client.get("/package")

    assert exc.value.kind is ErrorKind.TRANSPORT
    assert exc.value.http_status is None
    assert isinstance(exc.value.cause, RuntimeError)


def test_path_segment_quotes_separators():
    from twentyi_mcp.core.client import path_segment

    assert path_segment("x/../../package/1") == "x%2F..%2F..%2Fpackage%2F1"
    assert path_segment("a?b#c") == "a%3Fb%23c"
    assert path_segment(42) == "42"
