from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .constants import DISCORD_API_BASE_URL, INTERACTION_TOKEN_LIFETIME
from .errors import DiscordConfigError
from .handlers import InteractionRouter, rest_responder
from .rest import DiscordRestClient

DEFAULT_BOT_TOKEN_ENV = "CORDKIT_BOT_TOKEN"
DEFAULT_APP_ID_ENV = "CORDKIT_APP_ID"
DEFAULT_PUBLIC_KEY_ENV = "CORDKIT_PUBLIC_KEY"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY = 1.0
DEFAULT_RETRY_MAX_DELAY = 30.0
DEFAULT_HANDLER_TIMEOUT_SECONDS = INTERACTION_TOKEN_LIFETIME.total_seconds()


def _env_name(cfg: Mapping[str, Any], key: str, default: str) -> str:
    value = str(cfg.get(key, default)).strip()
    if not value:
        raise DiscordConfigError(f"discord.{key} must be non-empty")
    return value


def _number(
    cfg: Mapping[str, Any], key: str, default: float, *, allow_zero: bool
) -> float:
    value = cfg.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DiscordConfigError(f"discord.{key} must be a number")
    if value < 0 or (value == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise DiscordConfigError(f"discord.{key} must be {bound}")
    return float(value)


@dataclass(frozen=True)
class DiscordClientConfig:
    bot_token_env: str
    app_id_env: str
    public_key_env: str
    bot_token: Optional[str]
    application_id: Optional[str]
    public_key: Optional[str]
    api_base_url: str = DISCORD_API_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY
    retry_max_delay: float = DEFAULT_RETRY_MAX_DELAY
    handler_timeout_seconds: float = DEFAULT_HANDLER_TIMEOUT_SECONDS

    @classmethod
    def from_raw(
        cls,
        raw: Optional[Mapping[str, Any]],
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> "DiscordClientConfig":
        cfg: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}
        environ = os.environ if env is None else env

        bot_token_env = _env_name(cfg, "bot_token_env", DEFAULT_BOT_TOKEN_ENV)
        app_id_env = _env_name(cfg, "app_id_env", DEFAULT_APP_ID_ENV)
        public_key_env = _env_name(cfg, "public_key_env", DEFAULT_PUBLIC_KEY_ENV)

        api_base_url = cfg.get("api_base_url", DISCORD_API_BASE_URL)
        if not isinstance(api_base_url, str) or not api_base_url.strip():
            raise DiscordConfigError("discord.api_base_url must be a non-empty string")

        max_retries = cfg.get("max_retries", DEFAULT_MAX_RETRIES)
        if isinstance(max_retries, bool) or not isinstance(max_retries, int):
            raise DiscordConfigError("discord.max_retries must be an integer")
        if max_retries < 0:
            raise DiscordConfigError("discord.max_retries must be >= 0")

        return cls(
            bot_token_env=bot_token_env,
            app_id_env=app_id_env,
            public_key_env=public_key_env,
            bot_token=environ.get(bot_token_env) or None,
            application_id=environ.get(app_id_env) or None,
            public_key=environ.get(public_key_env) or None,
            api_base_url=api_base_url.strip().rstrip("/"),
            timeout_seconds=_number(
                cfg, "timeout_seconds", DEFAULT_TIMEOUT_SECONDS, allow_zero=False
            ),
            max_retries=max_retries,
            retry_base_delay=_number(
                cfg, "retry_base_delay", DEFAULT_RETRY_BASE_DELAY, allow_zero=True
            ),
            retry_max_delay=_number(
                cfg, "retry_max_delay", DEFAULT_RETRY_MAX_DELAY, allow_zero=True
            ),
            handler_timeout_seconds=_number(
                cfg,
                "handler_timeout_seconds",
                DEFAULT_HANDLER_TIMEOUT_SECONDS,
                allow_zero=False,
            ),
        )

    def require_token(self) -> str:
        if not self.bot_token:
            raise DiscordConfigError(
                f"Discord bot token is not set; export {self.bot_token_env}"
            )
        return self.bot_token


def load_client_config(
    path: Path | str, *, env: Optional[Mapping[str, str]] = None
) -> DiscordClientConfig:
    """Load client settings from a YAML file.

    A top-level ``discord`` mapping is used when present, otherwise the whole
    document. A missing file yields the defaults.
    """
    config_path = Path(path)
    if not config_path.exists():
        return DiscordClientConfig.from_raw({}, env=env)
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise DiscordConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    except OSError as exc:
        raise DiscordConfigError(
            f"Failed to read config file {config_path}: {exc}"
        ) from exc
    if not isinstance(data, dict):
        raise DiscordConfigError(f"Config file must be a mapping: {config_path}")
    section = data.get("discord", data)
    if not isinstance(section, dict):
        raise DiscordConfigError(f"discord section must be a mapping: {config_path}")
    return DiscordClientConfig.from_raw(section, env=env)


def create_rest_client(config: DiscordClientConfig) -> DiscordRestClient:
    return DiscordRestClient(
        bot_token=config.require_token(),
        timeout_seconds=config.timeout_seconds,
        base_url=config.api_base_url,
        max_retries=config.max_retries,
        retry_base_delay=config.retry_base_delay,
        retry_max_delay=config.retry_max_delay,
    )


def create_interaction_router(
    config: DiscordClientConfig, client: DiscordRestClient
) -> InteractionRouter:
    """Router that answers through ``client`` within the configured timeout."""
    return InteractionRouter(
        responder=rest_responder(client),
        handler_timeout=config.handler_timeout_seconds,
    )
