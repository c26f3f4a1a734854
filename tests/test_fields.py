"""Tests for typed field decoding and elapsed-time queries."""

import dataclasses
import json
from datetime import timedelta

import pytest
from pydantic import ValidationError

from tma_init_data.errors import InvalidJson, InvalidNumericField, MissingField
from tma_init_data.fields import decode_fields
from tma_init_data.models import WebAppInitData, WebAppUser


NOW = 1700000000


def _clock(now: float = NOW):
    return lambda: now


def _decode(**pairs) -> WebAppInitData:
    pairs.setdefault("auth_date", str(NOW))
    return decode_fields(pairs, _clock())


def _user(**fields) -> str:
    data = {"id": 1, "first_name": "A"}
    data.update(fields)
    return json.dumps(data)


class TestUserDecoding:
    def test_minimal_user_defaults(self):
        user = _decode(user=_user()).user
        assert user.id == 1
        assert user.first_name == "A"
        assert user.is_bot is None
        assert user.last_name is None
        assert user.username is None
        assert user.language_code is None
        assert user.photo_url is None
        assert user.is_premium is False
        assert user.added_to_attachment_menu is False
        assert user.allows_write_to_pm is False

    def test_full_user(self):
        user = _decode(user=_user(
            is_bot=False, last_name="B", username="ab", language_code="en",
            is_premium=True, added_to_attachment_menu=True,
            allows_write_to_pm=True, photo_url="https://t.me/i/userpic/1.jpg",
        )).user
        assert user.is_bot is False
        assert user.last_name == "B"
        assert user.username == "ab"
        assert user.language_code == "en"
        assert user.is_premium is True
        assert user.added_to_attachment_menu is True
        assert user.allows_write_to_pm is True
        assert user.photo_url == "https://t.me/i/userpic/1.jpg"

    def test_null_optional_string(self):
        assert _decode(user=_user(username=None)).user.username is None

    def test_negative_id(self):
        assert _decode(user=_user(id=-1001234567890)).user.id == -1001234567890

    def test_unknown_user_keys_ignored(self):
        assert _decode(user=_user(is_forum=True)).user.id == 1

    def test_user_is_immutable(self):
        user = _decode(user=_user()).user
        with pytest.raises(ValidationError):
            user.first_name = "B"

    @pytest.mark.parametrize("raw", [
        "not-json",
        "[]",
        "1",
        json.dumps({"first_name": "A"}),
        json.dumps({"id": 1}),
        _user(id="1"),
        _user(id=1.5),
        _user(id=2**63),
        _user(first_name=7),
        _user(is_premium="yes"),
        _user(is_premium=None),
        _user(is_bot=1),
        '{"id": 1, "id": 2, "first_name": "A"}',
    ])
    def test_malformed_user(self, raw):
        with pytest.raises(InvalidJson) as exc:
            _decode(user=raw)
        assert exc.value.name == "user"

    def test_absent_user_and_receiver(self):
        init_data = _decode()
        assert init_data.user is None
        assert init_data.receiver is None

    def test_receiver(self):
        assert _decode(receiver=_user(id=2)).receiver.id == 2

    def test_malformed_receiver(self):
        with pytest.raises(InvalidJson) as exc:
            _decode(user=_user(), receiver="{")
        assert exc.value.name == "receiver"


class TestChatDecoding:
    def test_chat(self):
        chat = _decode(chat=json.dumps({"id": -5, "type": "supergroup", "title": "T"})).chat
        assert chat.id == -5
        assert chat.type == "supergroup"
        assert chat.title == "T"
        assert chat.username is None

    def test_chat_missing_title(self):
        with pytest.raises(InvalidJson) as exc:
            _decode(chat=json.dumps({"id": -5, "type": "group"}))
        assert exc.value.name == "chat"


class TestNumericFields:
    def test_missing_auth_date(self):
        with pytest.raises(MissingField) as exc:
            decode_fields({"user": _user()}, _clock())
        assert exc.value.name == "auth_date"

    @pytest.mark.parametrize("value", ["0", "+5", "1700000000", str(2**64 - 1)])
    def test_valid_auth_date(self, value):
        assert _decode(auth_date=value).auth_date == int(value)

    @pytest.mark.parametrize("value", [
        "", "-1", " 1", "1 ", "1.0", "1e3", "1_000", "abc", "٣", str(2**64),
    ])
    def test_invalid_auth_date(self, value):
        with pytest.raises(InvalidNumericField) as exc:
            _decode(auth_date=value)
        assert exc.value.name == "auth_date"

    def test_user_error_reported_before_auth_date(self):
        with pytest.raises(InvalidJson):
            decode_fields({"user": "x", "auth_date": "x"}, _clock())

    def test_can_send_after(self):
        assert _decode(can_send_after="30").can_send_after == 30
        assert _decode().can_send_after is None

    def test_invalid_can_send_after(self):
        with pytest.raises(InvalidNumericField) as exc:
            _decode(can_send_after="later")
        assert exc.value.name == "can_send_after"


class TestPassthrough:
    def test_copied_verbatim(self):
        init_data = _decode(query_id="q", chat_type="private", chat_instance="1", start_param="p")
        assert init_data.query_id == "q"
        assert init_data.chat_type == "private"
        assert init_data.chat_instance == "1"
        assert init_data.start_param == "p"

    def test_absent(self):
        init_data = _decode()
        assert init_data.query_id is None
        assert init_data.start_param is None


class TestElapsedSinceAuth:
    def test_fresh(self):
        init_data = WebAppInitData(auth_date=NOW, clock=_clock(NOW + 0.9))
        assert init_data.elapsed_since_auth() == timedelta(0)

    def test_one_hour(self):
        init_data = WebAppInitData(auth_date=NOW - 3600, clock=_clock())
        assert init_data.elapsed_since_auth() == timedelta(seconds=3600)

    def test_future_auth_date(self):
        init_data = WebAppInitData(auth_date=NOW + 10, clock=_clock())
        assert init_data.elapsed_since_auth() is None

    def test_clock_before_epoch(self):
        init_data = WebAppInitData(auth_date=0, clock=_clock(-0.5))
        assert init_data.elapsed_since_auth() is None

    def test_clock_read_on_every_call(self):
        ticks = iter([NOW + 1, NOW + 5])
        init_data = WebAppInitData(auth_date=NOW, clock=lambda: next(ticks))
        assert init_data.elapsed_since_auth() == timedelta(seconds=1)
        assert init_data.elapsed_since_auth() == timedelta(seconds=5)

    def test_real_clock(self):
        import time
        init_data = WebAppInitData(auth_date=int(time.time()))
        assert init_data.elapsed_since_auth().total_seconds() < 5

    def test_record_is_immutable(self):
        init_data = WebAppInitData(auth_date=NOW)
        with pytest.raises(dataclasses.FrozenInstanceError):
            init_data.auth_date = 0

    def test_clock_excluded_from_equality(self):
        assert WebAppInitData(auth_date=NOW, clock=_clock(1)) == WebAppInitData(auth_date=NOW)
