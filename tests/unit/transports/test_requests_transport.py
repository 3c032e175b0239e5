"""Tests for RequestsTransport using the responses library."""

import io

import pytest
import requests
import responses
from responses import matchers

from bot_http_client.core.exceptions import ConnectionError, HTTPError, TimeoutError, TransportError
from bot_http_client.core.http_client import HTTPClient
from bot_http_client.core.options import FetchOptions, HttpBlob, RetryRequest
from bot_http_client.transports import RequestsTransport, create_transport

URL = "https://api.example.com/items"


@pytest.fixture
def transport():
    return RequestsTransport(timeout=10)


class TestRequestsTransport:

    @pytest.mark.asyncio
    async def test_get(self, transport, mock_responses):
        mock_responses.add(responses.GET, URL, json={"ok": True}, status=200)

        res = await transport.fetch(URL, FetchOptions())

        assert res.status_code == 200
        assert res.json() == {"ok": True}
        assert res.headers["content-type"] == "application/json"

    @pytest.mark.asyncio
    async def test_params_appended(self, transport, mock_responses):
        mock_responses.add(
            responses.GET,
            URL,
            body="ok",
            match=[matchers.query_param_matcher({"offset": "10", "limit": "5"})],
        )

        res = await transport.fetch(URL, FetchOptions(params={"offset": 10, "limit": 5}))

        assert res.status_code == 200

    @pytest.mark.asyncio
    async def test_post_form(self, transport, mock_responses):
        mock_responses.add(
            responses.POST,
            URL,
            body="ok",
            match=[matchers.urlencoded_params_matcher(
                {"chat_id": "1", "text": "hi", "disable_notification": "true"}
            )],
        )

        await transport.fetch(
            URL,
            FetchOptions(
                method="post",
                payload={"chat_id": 1, "text": "hi", "disable_notification": True, "caption": None},
            ),
        )

    @pytest.mark.asyncio
    async def test_post_multipart(self, transport, mock_responses):
        mock_responses.add(responses.POST, URL, body="ok")

        await transport.fetch(
            URL,
            FetchOptions(
                method="post",
                payload={"chat_id": 1, "photo": HttpBlob(b"PNGDATA", name="a.png", content_type="image/png")},
            ),
        )

        request = mock_responses.calls[0].request
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'filename="a.png"' in request.body
        assert b"PNGDATA" in request.body

    @pytest.mark.asyncio
    async def test_file_object_sent_by_name(self, transport, mock_responses, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"MP4DATA")
        mock_responses.add(responses.POST, URL, body="ok")

        with open(path, "rb") as stream:
            await transport.fetch(URL, FetchOptions(method="post", payload={"video": stream}))

        body = mock_responses.calls[0].request.body
        assert b'filename="clip.mp4"' in body
        assert b"MP4DATA" in body

    @pytest.mark.asyncio
    async def test_retried_upload_resends_file(self, mock_responses, sleep):
        mock_responses.add(responses.POST, URL, body="Internal Server Error", status=500)
        mock_responses.add(responses.POST, URL, body="ok", status=200)
        client = HTTPClient(RequestsTransport(), sleep=sleep)

        res = await client.fetch_with_retry(RetryRequest(
            url=URL,
            options=FetchOptions(method="post", payload={"chat_id": 1, "video": io.BytesIO(b"VIDEO-BYTES")}),
            retry=1,
        ))

        assert res.status_code == 200
        assert len(mock_responses.calls) == 2
        for call in mock_responses.calls:
            assert b"VIDEO-BYTES" in call.request.body
        assert sleep.delays == [1.0]

    @pytest.mark.asyncio
    async def test_headers_and_content_type(self, transport, mock_responses):
        mock_responses.add(
            responses.POST,
            URL,
            body="ok",
            match=[matchers.header_matcher({"X-Token": "t", "Content-Type": "application/json"})],
        )

        await transport.fetch(
            URL,
            FetchOptions(
                method="post",
                payload='{"a": 1}',
                headers={"X-Token": "t"},
                content_type="application/json",
            ),
        )

    @pytest.mark.asyncio
    async def test_http_error_raises_unless_muted(self, transport, mock_responses):
        mock_responses.add(responses.GET, URL, body="Bad Gateway", status=502)

        with pytest.raises(HTTPError) as exc_info:
            await transport.fetch(URL, FetchOptions())
        assert exc_info.value.status_code == 502

        res = await transport.fetch(URL, FetchOptions(mute_http_exceptions=True))
        assert res.status_code == 502
        assert res.text == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_redirect_not_followed(self, transport, mock_responses):
        mock_responses.add(
            responses.GET, URL, status=302, headers={"Location": "https://api.example.com/other"}
        )

        res = await transport.fetch(URL, FetchOptions(follow_redirects=False))

        assert res.status_code == 302
        assert res.headers["Location"] == "https://api.example.com/other"

    @pytest.mark.asyncio
    async def test_redirect_followed(self, transport, mock_responses):
        other = "https://api.example.com/other"
        mock_responses.add(responses.GET, URL, status=302, headers={"Location": other})
        mock_responses.add(responses.GET, other, body="moved")

        res = await transport.fetch(URL, FetchOptions())

        assert res.status_code == 200
        assert res.text == "moved"

    @pytest.mark.asyncio
    async def test_explicit_charset(self, transport, mock_responses):
        mock_responses.add(
            responses.GET,
            URL,
            body="привет".encode("windows-1251"),
            content_type="text/plain; charset=windows-1251",
        )

        res = await transport.fetch(URL, FetchOptions())

        assert res.encoding == "windows-1251"
        assert res.text == "привет"

    @pytest.mark.asyncio
    async def test_connection_error(self, transport, mock_responses):
        mock_responses.add(responses.GET, URL, body=requests.exceptions.ConnectionError("refused"))

        with pytest.raises(ConnectionError):
            await transport.fetch(URL, FetchOptions())

    @pytest.mark.asyncio
    async def test_timeout(self, transport, mock_responses):
        mock_responses.add(responses.GET, URL, body=requests.exceptions.ReadTimeout("slow"))

        with pytest.raises(TimeoutError):
            await transport.fetch(URL, FetchOptions())

    @pytest.mark.asyncio
    async def test_payload_size_limit(self, mock_responses):
        transport = RequestsTransport(max_payload_size=10)

        with pytest.raises(TransportError) as exc_info:
            await transport.fetch(URL, FetchOptions(method="post", payload={"text": "x" * 100}))

        assert "Limit Exceeded: URLFetch POST Size" in exc_info.value.message
        assert len(mock_responses.calls) == 0

    @pytest.mark.asyncio
    async def test_close_keeps_external_session(self):
        session = requests.Session()
        transport = RequestsTransport(session=session)

        await transport.close()

        assert transport.session is session


def test_create_transport():
    transport = create_transport("requests", timeout=5, max_payload_size=100)

    assert isinstance(transport, RequestsTransport)
    assert transport.timeout == 5
    assert transport.max_payload_size == 100


def test_create_unknown_transport():
    with pytest.raises(ValueError):
        create_transport("urllib")
