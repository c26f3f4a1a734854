"""Decode initData and build the data-check-string used for signing."""

from urllib.parse import parse_qsl

from .errors import MissingField


def parse_init_data(raw: bytes | str) -> dict[str, str]:
    """Parse the urlencoded initData payload into a flat dict.

    Duplicate keys are last-wins. Any inconsistency this causes shows up
    as a hash mismatch, since the dict only feeds the signature check.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return dict(parse_qsl(raw, keep_blank_values=True, errors="replace"))


def pop_hash(pairs: dict[str, str]) -> str:
    """Remove and return the claimed hash from the parsed pairs."""
    try:
        return pairs.pop("hash")
    except KeyError:
        raise MissingField("hash") from None


def build_data_check_string(pairs: dict[str, str]) -> str:
    """Build the sorted newline-separated data-check-string for HMAC."""
    return "\n".join(f"{k}={v}" for k, v in sorted(pairs.items()))
