"""
Pytest configuration and fixtures for bot-http-client tests.
"""

import json

import pytest
import responses as responses_lib

from bot_http_client.core.exceptions import TransportError
from bot_http_client.core.http_client import HTTPClient
from bot_http_client.core.logging.config import LoggingConfig
from bot_http_client.core.response import HttpResponse
from bot_http_client.telegram.types import TelegramBot, TelegramRecipient
from bot_http_client.transports.base import Transport

BOT_TOKEN = "123456:ABC-DEF"


class Api:
    """Builders for scripted responses."""

    @staticmethod
    def raw(status_code=200, body=b"", headers=None):
        """HttpResponse from a status and a bytes/str/dict body."""
        if isinstance(body, dict):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return HttpResponse(status_code, headers or {}, body)

    @classmethod
    def ok(cls, result=None):
        return cls.raw(200, {"ok": True, "result": result if result is not None else True})

    @classmethod
    def error(cls, status_code, description, retry_after=None):
        body = {"ok": False, "error_code": status_code, "description": description}
        if retry_after is not None:
            body["parameters"] = {"retry_after": retry_after}
        return cls.raw(status_code, body)


class FakeTransport(Transport):
    """
    Transport replaying a script of responses.

    Script items are HttpResponse objects or exceptions to raise. The last
    item repeats once the script is exhausted.
    """

    name = "fake"

    def __init__(self, *script):
        super().__init__()
        self.script = list(script)
        self.calls = []
        self.closed = False

    async def fetch(self, url, options):
        self.calls.append((url, options))
        index = min(len(self.calls), len(self.script)) - 1
        item = self.script[index]
        if isinstance(item, Exception):
            raise item
        return item

    async def close(self):
        self.closed = True


class RecordingSleep:
    """Async sleep that records the requested delays instead of waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


@pytest.fixture
def api():
    return Api


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_client(sleep):
    """Build an HTTPClient over a scripted transport (``client.transport.calls``)."""

    def factory(*script, retry_second=1.0, logger=None):
        transport = FakeTransport(*script)
        return HTTPClient(transport, retry_second=retry_second, logger=logger, sleep=sleep)

    return factory


@pytest.fixture
def transport_error():
    return TransportError("Address unavailable: https://api.example.com")


@pytest.fixture
def bot():
    return TelegramBot(name="notifier", token=BOT_TOKEN)


@pytest.fixture
def recipient(bot):
    return TelegramRecipient(bot=bot, chat_id=-1001234567890)


@pytest.fixture
def pinned_recipient(bot):
    return TelegramRecipient(bot=bot, chat_id=-1001234567890, pin_all_message=True)


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def logging_config():
    return LoggingConfig.create(level="DEBUG", enable_console=True, enable_file=False)
