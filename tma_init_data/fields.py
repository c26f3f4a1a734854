"""Decode the typed fields of an already authenticated initData payload.

Fields are decoded in a fixed order so a payload with several problems
always reports the same error: user, receiver, chat, auth_date,
can_send_after.
"""

import json
import re
from collections.abc import Callable

from pydantic import BaseModel, ValidationError

from .errors import InvalidJson, InvalidNumericField, MissingField
from .models import WebAppChat, WebAppInitData, WebAppUser

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U64_MAX = 2**64 - 1

PASSTHROUGH_FIELDS = ("query_id", "chat_type", "chat_instance", "start_param")


def _reject_duplicates(pairs: list[tuple[str, object]]) -> dict:
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise ValueError(f"duplicate key: {key}")
        obj[key] = value
    return obj


def _decode_json(pairs: dict[str, str], name: str, model: type[BaseModel]):
    raw = pairs.get(name)
    if raw is None:
        return None
    try:
        return model.model_validate(json.loads(raw, object_pairs_hook=_reject_duplicates))
    except (ValueError, ValidationError) as e:
        raise InvalidJson(name, e) from e


def _parse_unsigned(name: str, value: str) -> int:
    """Parse a u64 decimal: optional '+', ASCII digits, nothing else."""
    if not _UNSIGNED.fullmatch(value):
        raise InvalidNumericField(name)
    number = int(value)
    if number > _U64_MAX:
        raise InvalidNumericField(name)
    return number


def decode_fields(pairs: dict[str, str], clock: Callable[[], float]) -> WebAppInitData:
    """Build WebAppInitData from pairs whose hash has been verified."""
    user = _decode_json(pairs, "user", WebAppUser)
    receiver = _decode_json(pairs, "receiver", WebAppUser)
    chat = _decode_json(pairs, "chat", WebAppChat)

    if "auth_date" not in pairs:
        raise MissingField("auth_date")
    auth_date = _parse_unsigned("auth_date", pairs["auth_date"])

    can_send_after = None
    if "can_send_after" in pairs:
        can_send_after = _parse_unsigned("can_send_after", pairs["can_send_after"])

    passthrough = {name: pairs.get(name) for name in PASSTHROUGH_FIELDS}
    return WebAppInitData(
        auth_date=auth_date,
        user=user,
        receiver=receiver,
        chat=chat,
        can_send_after=can_send_after,
        clock=clock,
        **passthrough,
    )
