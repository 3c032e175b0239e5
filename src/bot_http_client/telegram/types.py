"""
Telegram Bot API types.

Recipients are plain frozen dataclasses supplied by the caller; API
responses are pydantic models parsed from the body text of every call.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from ..core.utils import parse_json

TG_MAX_CAPTION_LEN = 1024  # caption of photo, video or media group
TG_MAX_MESSAGE_LEN = 4096  # text message


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RECIPIENTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TelegramBot:
    """
    Bot identity.

    Args:
        name: Display name
        token: Bot API token
        is_default: Default bot of the caller's setup
    """
    name: str
    token: str
    is_default: bool = False

    def __repr__(self) -> str:
        return f"TelegramBot(name={self.name!r}, is_default={self.is_default})"


@dataclass(frozen=True)
class TelegramRecipient:
    """
    Destination of sent messages.

    Args:
        bot: Bot used to send
        chat_id: Destination chat id or @channel username
        pin_all_message: Pin every message sent to this chat
    """
    bot: TelegramBot
    chat_id: Union[int, str]
    pin_all_message: bool = False


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RESPONSE MODELS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class _ApiModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class TelegramFile(_ApiModel):
    file_id: str
    file_unique_id: Optional[str] = None


class TelegramChatRef(_ApiModel):
    id: int
    type: Optional[str] = None
    title: Optional[str] = None
    username: Optional[str] = None


class TelegramResponseResult(_ApiModel):
    """A sent message (the ``result`` of send-style endpoints)."""
    message_id: Optional[int] = None
    photo: Optional[List[TelegramFile]] = None
    video: Optional[TelegramFile] = None
    audio: Optional[TelegramFile] = None
    document: Optional[TelegramFile] = None
    animation: Optional[TelegramFile] = None
    media_group_id: Optional[str] = None
    caption: Optional[str] = None
    text: Optional[str] = None
    date: Optional[int] = None
    chat: Optional[TelegramChatRef] = None
    sender_chat: Optional[TelegramChatRef] = None


class ResponseParameters(_ApiModel):
    retry_after: Optional[int] = None
    migrate_to_chat_id: Optional[int] = None


class TelegramResponse(_ApiModel):
    """
    API envelope: ``{ok, description?, result?, error_code?, parameters?}``.

    ``result`` is kept as raw JSON because its shape depends on the
    endpoint (message, list of messages, bool, user, updates).
    """
    ok: bool
    description: Optional[str] = None
    result: Any = None
    error_code: Optional[int] = None
    parameters: Optional[ResponseParameters] = None

    @property
    def retry_after(self) -> Optional[int]:
        return self.parameters.retry_after if self.parameters else None

    def results(self) -> List[TelegramResponseResult]:
        """Result records as models (one for send calls, many for media groups)."""
        if isinstance(self.result, dict):
            return [TelegramResponseResult.model_validate(self.result)]
        if isinstance(self.result, list):
            return [
                TelegramResponseResult.model_validate(item)
                for item in self.result
                if isinstance(item, dict)
            ]
        return []


def parse_response(text: Optional[str]) -> Optional[TelegramResponse]:
    """
    Parse a response body into the API envelope.

    Malformed JSON or a body that is not an envelope gives None; callers
    treat that as an unknown outcome, not as success.

    Examples:
        >>> parse_response('{"ok": false, "error_code": 429, "parameters": {"retry_after": 5}}').retry_after
        5
        >>> parse_response('<html>502 Bad Gateway</html>') is None
        True
    """
    data = parse_json(text)
    if not isinstance(data, dict):
        return None
    try:
        return TelegramResponse.model_validate(data)
    except ValidationError:
        return None
