from dataclasses import dataclass


DEFAULT_MAX_AGE = 86400


@dataclass
class AuthConfig:
    bot_token: str
    max_age_seconds: int = DEFAULT_MAX_AGE  # 0 disables the age check
    auth_scheme: str = "tma"


def load_config(config) -> AuthConfig:
    """Build an AuthConfig from a parsed configparser object."""
    if not config.has_section("TELEGRAM"):
        raise ValueError("config has no [TELEGRAM] section")
    section = config["TELEGRAM"]

    bot_token = section.get("bot_token", "").strip()
    if not bot_token:
        raise ValueError("TELEGRAM.bot_token is empty")

    max_age = section.get("auth_max_age", "").strip()
    max_age_seconds = int(max_age) if max_age else DEFAULT_MAX_AGE
    if max_age_seconds < 0:
        raise ValueError("TELEGRAM.auth_max_age must not be negative")

    auth_scheme = section.get("auth_scheme", "").strip() or "tma"

    return AuthConfig(
        bot_token=bot_token,
        max_age_seconds=max_age_seconds,
        auth_scheme=auth_scheme,
    )
