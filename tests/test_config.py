from __future__ import annotations

from pathlib import Path

import pytest

from cordkit.config import (
    DEFAULT_BOT_TOKEN_ENV,
    DEFAULT_HANDLER_TIMEOUT_SECONDS,
    DiscordClientConfig,
    create_interaction_router,
    create_rest_client,
    load_client_config,
)
from cordkit.constants import DISCORD_API_BASE_URL
from cordkit.errors import DiscordConfigError


def test_defaults_read_credentials_from_env() -> None:
    cfg = DiscordClientConfig.from_raw(
        {}, env={DEFAULT_BOT_TOKEN_ENV: "token", "CORDKIT_APP_ID": "app"}
    )

    assert cfg.bot_token == "token"
    assert cfg.application_id == "app"
    assert cfg.public_key is None
    assert cfg.api_base_url == DISCORD_API_BASE_URL
    assert cfg.max_retries == 3
    assert cfg.handler_timeout_seconds == DEFAULT_HANDLER_TIMEOUT_SECONDS == 900.0


def test_custom_env_names_and_base_url() -> None:
    cfg = DiscordClientConfig.from_raw(
        {"bot_token_env": "MY_TOKEN", "api_base_url": "https://proxy.test/api/"},
        env={"MY_TOKEN": "secret", DEFAULT_BOT_TOKEN_ENV: "ignored"},
    )

    assert cfg.bot_token == "secret"
    assert cfg.api_base_url == "https://proxy.test/api"


@pytest.mark.parametrize(
    "raw",
    [
        {"timeout_seconds": 0},
        {"timeout_seconds": "10"},
        {"retry_base_delay": -1},
        {"max_retries": -1},
        {"max_retries": 1.5},
        {"max_retries": True},
        {"bot_token_env": "  "},
        {"api_base_url": ""},
        {"handler_timeout_seconds": 0},
    ],
)
def test_invalid_values_raise(raw: dict[str, object]) -> None:
    with pytest.raises(DiscordConfigError):
        DiscordClientConfig.from_raw(raw, env={})


def test_require_token_names_env_var() -> None:
    cfg = DiscordClientConfig.from_raw({}, env={})

    with pytest.raises(DiscordConfigError, match=DEFAULT_BOT_TOKEN_ENV):
        cfg.require_token()


def test_load_client_config_reads_discord_section(tmp_path: Path) -> None:
    path = tmp_path / "cordkit.yml"
    path.write_text(
        "discord:\n  timeout_seconds: 5\n  max_retries: 1\n  retry_base_delay: 0\n",
        encoding="utf-8",
    )

    cfg = load_client_config(path, env={})

    assert cfg.timeout_seconds == 5.0
    assert cfg.max_retries == 1
    assert cfg.retry_base_delay == 0.0


def test_load_client_config_accepts_flat_document(tmp_path: Path) -> None:
    path = tmp_path / "cordkit.yml"
    path.write_text("max_retries: 0\n", encoding="utf-8")

    assert load_client_config(path, env={}).max_retries == 0


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    cfg = load_client_config(tmp_path / "absent.yml", env={})

    assert cfg.timeout_seconds == 10.0


@pytest.mark.parametrize(
    "text",
    ["discord: [unclosed\n", "- a\n- b\n", "discord: 5\n"],
)
def test_invalid_config_files(tmp_path: Path, text: str) -> None:
    path = tmp_path / "cordkit.yml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(DiscordConfigError):
        load_client_config(path, env={})


@pytest.mark.anyio
async def test_create_rest_client_and_router() -> None:
    cfg = DiscordClientConfig.from_raw(
        {"handler_timeout_seconds": 2.5}, env={DEFAULT_BOT_TOKEN_ENV: "token"}
    )

    client = create_rest_client(cfg)
    try:
        assert client._authorization_header == "Bot token"
        router = create_interaction_router(cfg, client)
        assert router._handler_timeout == 2.5
    finally:
        await client.close()


def test_create_rest_client_requires_token() -> None:
    with pytest.raises(DiscordConfigError):
        create_rest_client(DiscordClientConfig.from_raw({}, env={}))
