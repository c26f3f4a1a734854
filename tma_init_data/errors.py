"""Errors raised while validating Telegram Mini App initData.

Every error is fatal to a single validation call. Messages carry the
offending field name only, never the bot token or raw payload values.
"""


class InitDataError(ValueError):
    """Base class for all initData rejections."""

    reason = "invalid init data"

    def __str__(self) -> str:
        return self.reason


class MissingField(InitDataError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    @property
    def reason(self) -> str:
        return f"missing field: {self.name}"


class InvalidHash(InitDataError):
    reason = "invalid hash"


class InvalidJson(InitDataError):
    """A nested JSON field (user, receiver, chat) failed to decode.

    The decoder error is kept on ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, name: str, cause: Exception):
        super().__init__(name, cause)
        self.name = name
        self.cause = cause

    @property
    def reason(self) -> str:
        return f"invalid JSON in field: {self.name}"


class InvalidNumericField(InitDataError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    @property
    def reason(self) -> str:
        return f"invalid numeric field: {self.name}"
