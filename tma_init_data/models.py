"""Typed records decoded from validated initData."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

# Telegram uses negative ids for non-person actors such as channels.
Int64 = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]


class WebAppUser(BaseModel):
    """A user from the ``user`` or ``receiver`` field.

    ``is_bot`` stays None when the field is absent. The three flags
    default to False.
    """

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    id: Int64
    is_bot: bool | None = None
    first_name: str
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    is_premium: bool = False
    added_to_attachment_menu: bool = False
    allows_write_to_pm: bool = False
    photo_url: str | None = None


class WebAppChat(BaseModel):
    """The chat the Mini App was launched from, via an attachment menu."""

    model_config = ConfigDict(strict=True, frozen=True, extra="ignore")

    id: Int64
    type: str
    title: str
    username: str | None = None
    photo_url: str | None = None


@dataclass(frozen=True)
class WebAppInitData:
    auth_date: int
    user: WebAppUser | None = None
    receiver: WebAppUser | None = None
    chat: WebAppChat | None = None
    query_id: str | None = None
    chat_type: str | None = None
    chat_instance: str | None = None
    start_param: str | None = None
    can_send_after: int | None = None
    clock: Callable[[], float] = field(default=time.time, repr=False, compare=False)

    def elapsed_since_auth(self) -> timedelta | None:
        """Time since ``auth_date``, read from the clock on every call.

        Returns None if the clock is before the epoch or ``auth_date`` is
        in the future. Whole seconds only.
        """
        now = self.clock()
        if now < 0:
            return None
        secs = int(now) - self.auth_date
        if secs < 0:
            return None
        return timedelta(seconds=secs)
