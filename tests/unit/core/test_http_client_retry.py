"""Тесты ретрай-цикла HTTPClient.fetch_with_retry."""

import pytest

from bot_http_client.core.exceptions import (
    PostSizeExceedLimitError,
    TooManyRequestsError,
    TooManyRetriesError,
    TransportError,
)
from bot_http_client.core.http_client import HTTPClient
from bot_http_client.core.options import FetchOptions, RetryRequest

URL = "https://api.example.com/items"


class TestSuccess:
    """Статус < 400 - успех без трат бюджета."""

    @pytest.mark.asyncio
    async def test_first_attempt_success(self, make_client, api, sleep):
        client = make_client(api.raw(200, "done"))

        res = await client.fetch_with_retry(RetryRequest(url=URL, retry=3))

        assert res.status_code == 200
        assert res.text == "done"
        assert len(client.transport.calls) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_redirect_status_is_success(self, make_client, api):
        client = make_client(api.raw(302))

        res = await client.fetch_with_retry(RetryRequest(url=URL))

        assert res.status_code == 302

    @pytest.mark.asyncio
    async def test_success_after_failures(self, make_client, api, sleep):
        client = make_client(api.raw(500, "boom"), api.raw(502, "bad gateway"), api.raw(200, "ok"))

        res = await client.fetch_with_retry(RetryRequest(url=URL, retry=2))

        assert res.status_code == 200
        assert len(client.transport.calls) == 3
        assert sleep.delays == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_attempts_are_muted(self, make_client, api):
        client = make_client(api.raw(200))

        await client.fetch_with_retry(
            RetryRequest(url=URL, options=FetchOptions(method="post", payload={"a": 1}))
        )

        _, options = client.transport.calls[0]
        assert options.mute_http_exceptions is True
        assert options.method == "post"
        assert options.payload == {"a": 1}


class TestRetryBudget:
    """Бюджет повторов."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("budget", [0, 1, 2, 3, 5, 10])
    async def test_budget_gives_n_plus_one_attempts(self, make_client, api, sleep, budget):
        client = make_client(api.raw(500, "Internal Server Error"))

        with pytest.raises(TooManyRetriesError) as exc_info:
            await client.fetch_with_retry(RetryRequest(url=URL, retry=budget))

        assert len(client.transport.calls) == budget + 1
        assert sleep.delays == [1.0] * budget
        assert str(exc_info.value) == "fetch error after retry: Internal Server Error"
        assert exc_info.value.last_message == "Internal Server Error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("budget", [1, 2, 4])
    async def test_success_on_last_attempt(self, make_client, api, sleep, budget):
        script = [api.raw(502, "Bad Gateway")] * budget + [api.raw(200, "ok")]
        client = make_client(*script)

        res = await client.fetch_with_retry(RetryRequest(url=URL, retry=budget))

        assert res.status_code == 200
        assert len(client.transport.calls) == budget + 1
        assert sleep.delays == [1.0] * budget

    @pytest.mark.asyncio
    async def test_zero_budget_single_attempt(self, make_client, api, sleep):
        client = make_client(api.raw(503, "unavailable"))

        with pytest.raises(TooManyRetriesError):
            await client.fetch_with_retry(RetryRequest(url=URL))

        assert len(client.transport.calls) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_custom_retry_second(self, make_client, api, sleep):
        client = make_client(api.raw(500), api.raw(200), retry_second=7)

        await client.fetch_with_retry(RetryRequest(url=URL, retry=1))

        assert sleep.delays == [7]

    def test_negative_retry_rejected(self):
        with pytest.raises(ValueError):
            RetryRequest(url=URL, retry=-1)


class TestTransportFailure:
    """Сбой транспорта - статус 9999, сообщение из исключения."""

    @pytest.mark.asyncio
    async def test_transport_error_is_retried(self, make_client, api, transport_error, sleep):
        client = make_client(transport_error, api.raw(200))

        res = await client.fetch_with_retry(RetryRequest(url=URL, retry=1))

        assert res.status_code == 200
        assert sleep.delays == [1.0]

    @pytest.mark.asyncio
    async def test_transport_error_message_in_final_error(self, make_client, transport_error):
        client = make_client(transport_error)

        with pytest.raises(TooManyRetriesError) as exc_info:
            await client.fetch_with_retry(RetryRequest(url=URL, retry=1))

        assert "Address unavailable" in str(exc_info.value)
        assert len(client.transport.calls) == 2

    @pytest.mark.asyncio
    async def test_handler_gets_none_on_transport_error(self, make_client, api, transport_error):
        seen = []
        client = make_client(transport_error, api.raw(200))

        await client.fetch_with_retry(
            RetryRequest(url=URL, retry=1, handle_retry=seen.append)
        )

        assert seen == [None]


class TestFatalConditions:
    """Условия без ретраев."""

    @pytest.mark.asyncio
    async def test_post_size_limit_in_body(self, make_client, api):
        client = make_client(api.raw(413, "Limit Exceeded: URLFetch POST Size."))

        with pytest.raises(PostSizeExceedLimitError):
            await client.fetch_with_retry(RetryRequest(url=URL, retry=5))

        assert len(client.transport.calls) == 1

    @pytest.mark.asyncio
    async def test_post_size_limit_from_transport(self, make_client):
        client = make_client(TransportError("Limit Exceeded: URLFetch POST Size.", URL))

        with pytest.raises(PostSizeExceedLimitError):
            await client.fetch_with_retry(RetryRequest(url=URL, retry=5))

        assert len(client.transport.calls) == 1

    @pytest.mark.asyncio
    async def test_429_raises_with_response(self, make_client, api, sleep):
        limited = api.error(429, "Too Many Requests: retry after 5", retry_after=5)
        client = make_client(limited)

        with pytest.raises(TooManyRequestsError) as exc_info:
            await client.fetch_with_retry(RetryRequest(url=URL, retry=5))

        assert exc_info.value.response is limited
        assert exc_info.value.status_code == 429
        assert len(client.transport.calls) == 1
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_handler_exception_propagates(self, make_client, api):
        def handler(res):
            raise RuntimeError("stop")

        client = make_client(api.raw(500))

        with pytest.raises(RuntimeError, match="stop"):
            await client.fetch_with_retry(RetryRequest(url=URL, retry=3, handle_retry=handler))

        assert len(client.transport.calls) == 1


class TestRetryHandler:
    """Колбэк handle_retry."""

    @pytest.mark.asyncio
    async def test_sync_handler_replaces_default_sleep(self, make_client, api, sleep):
        seen = []
        failed = api.raw(500, "boom")
        client = make_client(failed, api.raw(200))

        await client.fetch_with_retry(
            RetryRequest(url=URL, retry=1, handle_retry=seen.append)
        )

        assert seen == [failed]
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_async_handler_awaited(self, make_client, api):
        seen = []

        async def handler(res):
            seen.append(res.status_code)

        client = make_client(api.raw(500), api.raw(502), api.raw(200))

        await client.fetch_with_retry(RetryRequest(url=URL, retry=2, handle_retry=handler))

        assert seen == [500, 502]

    @pytest.mark.asyncio
    async def test_handler_not_called_when_budget_spent(self, make_client, api):
        seen = []
        client = make_client(api.raw(500))

        with pytest.raises(TooManyRetriesError):
            await client.fetch_with_retry(
                RetryRequest(url=URL, retry=1, handle_retry=seen.append)
            )

        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_default_handle_retry_sleeps(self, make_client, sleep):
        client = make_client(retry_second=2.5)

        await client.default_handle_retry()

        assert sleep.delays == [2.5]


class TestHTTPMethods:
    """Удобные методы get/post/put/patch/delete."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["post", "put", "patch"])
    async def test_body_methods(self, make_client, api, method):
        client = make_client(api.raw(200))

        await getattr(client, method)(URL, body={"k": "v"})

        _, options = client.transport.calls[0]
        assert options.method == method
        assert options.payload == {"k": "v"}

    @pytest.mark.asyncio
    async def test_get_with_params(self, make_client, api):
        client = make_client(api.raw(200))

        await client.get(URL, params={"offset": 10})

        _, options = client.transport.calls[0]
        assert options.method == "get"
        assert options.params == {"offset": 10}

    @pytest.mark.asyncio
    async def test_delete(self, make_client, api):
        client = make_client(api.raw(204))

        res = await client.delete(URL)

        assert res.status_code == 204
        assert client.transport.calls[0][1].method == "delete"

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, make_client, api):
        client = make_client(api.raw(200))

        async with client:
            await client.fetch(URL)

        assert client.transport.closed is True


class TestLogging:
    """Сообщения ретрай-цикла."""

    @pytest.mark.asyncio
    async def test_logs_fetch_errors_and_sleep(self, make_client, api):
        class Recorder:
            def __init__(self):
                self.messages = []

            def debug(self, message, **fields):
                self.messages.append(("debug", message))

            def info(self, message, **fields):
                self.messages.append(("info", message))

        logger = Recorder()
        client = make_client(api.raw(500, "boom"), api.raw(200), logger=logger)

        await client.fetch_with_retry(
            RetryRequest(url="https://api.telegram.org/bot123456:ABC-DEF/getMe", retry=1)
        )

        assert ("info", "fetch error: boom") in logger.messages
        assert ("info", "Sleep for 1.0 sec") in logger.messages
        debug_urls = [m for level, m in logger.messages if level == "debug"]
        assert debug_urls == ["https://api.telegram.org/bot***/getMe"] * 2


def test_negative_retry_second_rejected():
    with pytest.raises(ValueError):
        HTTPClient(transport=None, retry_second=-1)


@pytest.mark.asyncio
async def test_repeated_calls_give_equal_responses(make_client, api):
    client = make_client(api.raw(200, '{"ok": true}', {"Content-Type": "application/json"}))

    first = await client.fetch_with_retry(RetryRequest(url=URL))
    second = await client.fetch_with_retry(RetryRequest(url=URL))

    assert first == second
    assert first.copy() == second
