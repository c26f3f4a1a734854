"""Validate Telegram Mini App initData and return the decoded record.

Stateless and synchronous: the secret is re-derived from the token on
every call and never leaves this module.
"""

import logging
import time
from collections.abc import Callable

from .canonical import build_data_check_string, parse_init_data, pop_hash
from .errors import InitDataError
from .fields import decode_fields
from .models import WebAppInitData
from .signing import check_hash

logger = logging.getLogger(__name__)


def validate_init_data(
    bot_token: str | bytes,
    raw: bytes | str,
    clock: Callable[[], float] = time.time,
) -> WebAppInitData:
    """Validate initData signed for ``bot_token`` and decode its fields.

    Raises an InitDataError subclass on the first failure, in order:
    MissingField("hash"), InvalidHash, InvalidJson (user, receiver, chat),
    MissingField/InvalidNumericField (auth_date, can_send_after).

    Freshness is not enforced here; use ``elapsed_since_auth()`` on the
    result to apply a max-age policy.
    """
    try:
        pairs = parse_init_data(raw)
        claimed = pop_hash(pairs)
        check_hash(bot_token, build_data_check_string(pairs), claimed)
        return decode_fields(pairs, clock)
    except InitDataError as e:
        logger.debug("initData rejected: %s (%s)", e, type(e).__name__)
        raise
