"""HMAC-SHA256 signing of Telegram Mini App initData.

The bot token never signs payload data directly. A secret scoped to
Mini App data is derived from it first:

    secret_key = HMAC-SHA256(key="WebAppData", msg=bot_token)
    hash = HMAC-SHA256(key=secret_key, msg=data_check_string).hexdigest()

Reference: https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

import hashlib
import hmac
from collections.abc import Mapping
from urllib.parse import urlencode

from .canonical import build_data_check_string
from .errors import InvalidHash

WEB_APP_DATA = b"WebAppData"


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def derive_secret_key(bot_token: str | bytes) -> bytes:
    return hmac.new(WEB_APP_DATA, _as_bytes(bot_token), hashlib.sha256).digest()


def compute_hash(bot_token: str | bytes, data_check_string: str) -> str:
    """Return the expected initData hash as lowercase hex."""
    secret_key = derive_secret_key(bot_token)
    return hmac.new(
        secret_key, data_check_string.encode("utf-8"), hashlib.sha256,
    ).hexdigest()


def check_hash(bot_token: str | bytes, data_check_string: str, claimed: str) -> None:
    """Raise InvalidHash unless ``claimed`` equals the expected hash.

    The claim is compared as-is, without hex decoding, so uppercase or
    malformed values simply fail to match.
    """
    expected = compute_hash(bot_token, data_check_string)
    if not hmac.compare_digest(expected.encode("ascii"), claimed.encode("utf-8")):
        raise InvalidHash()


def sign_init_data(bot_token: str | bytes, fields: Mapping[str, str]) -> str:
    """Build a urlencoded initData string signed with ``bot_token``.

    Mirrors what the Telegram client sends, for fixtures and tests.
    """
    params = {k: v for k, v in fields.items() if k != "hash"}
    params["hash"] = compute_hash(bot_token, build_data_check_string(params))
    return urlencode(params)
