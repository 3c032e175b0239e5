"""
Utility functions for the HTTP client.

Includes:
- Tolerant JSON parsing
- Form value encoding for transports
- Masking of bot tokens and secrets for safe logging
"""

import json
import re
from typing import Any, Dict, Optional


SENSITIVE_KEYS = {
    'token',
    'access_token',
    'api_key',
    'apikey',
    'secret',
    'password',
    'authorization',
    'cookie',
    'set-cookie',
}

# https://api.telegram.org/bot123456:ABC-DEF/sendMessage -> .../bot***/sendMessage
BOT_TOKEN_PATTERN = re.compile(r'/bot\d+:[A-Za-z0-9_-]+')

DEFAULT_MASK = '***'


def parse_json(text: Optional[str]) -> Any:
    """
    Parse JSON text, returning None instead of raising on malformed input.

    Examples:
        >>> parse_json('{"ok": true}')
        {'ok': True}
        >>> parse_json('<html>Bad Gateway</html>') is None
        True
    """
    if text is None:
        return None
    try:
        return json.loads(text)
    except (ValueError, TypeError):
        return None


def encode_form_value(value: Any) -> str:
    """
    Convert a payload value to the string sent in a form field.

    Booleans become ``true``/``false``, dicts and lists are JSON-encoded
    (e.g. ``reply_markup``), everything else goes through ``str``.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    return str(value)


def mask_token(url: str, mask: str = DEFAULT_MASK) -> str:
    """
    Hide the bot token embedded in an API url path.

    Examples:
        >>> mask_token('https://api.telegram.org/bot123:ABC/getMe')
        'https://api.telegram.org/bot***/getMe'
    """
    if not url:
        return url
    return BOT_TOKEN_PATTERN.sub(f'/bot{mask}', url)


def mask_sensitive_data(data: Any, mask: str = DEFAULT_MASK) -> Any:
    """
    Recursively mask sensitive values in dicts, lists and strings.

    Dict keys listed in SENSITIVE_KEYS are replaced with the mask, strings
    have bot tokens removed from url paths. Other values are returned as is.

    Examples:
        >>> mask_sensitive_data({'token': '123:ABC', 'chat_id': 1})
        {'token': '***', 'chat_id': 1}
    """
    if data is None or isinstance(data, (bool, int, float)):
        return data

    if isinstance(data, str):
        return mask_token(data, mask)

    if isinstance(data, dict):
        return _mask_dict(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    return data


def _mask_dict(data: Dict[Any, Any], mask: str) -> Dict[Any, Any]:
    result = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_KEYS:
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result


def charset_from_content_type(content_type: Optional[str]) -> Optional[str]:
    """
    Extract an explicit charset from a Content-Type header value.

    Examples:
        >>> charset_from_content_type('text/html; charset=windows-1251')
        'windows-1251'
        >>> charset_from_content_type('application/json') is None
        True
    """
    if not content_type:
        return None
    for part in content_type.split(';')[1:]:
        key, _, value = part.strip().partition('=')
        if key.strip().lower() == 'charset' and value:
            return value.strip().strip('"\'') or None
    return None
