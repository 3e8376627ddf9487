from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from cordkit.errors import DiscordAPIError, DiscordPermanentError, DiscordTransientError
from cordkit.rest import DiscordRestClient
from cordkit.types import ChannelType


async def _configure_mock_client(
    client: DiscordRestClient, transport: httpx.MockTransport
) -> None:
    await client._client.aclose()
    client._client = httpx.AsyncClient(
        base_url="https://discord.test/api/v10",
        transport=transport,
        timeout=10.0,
    )


def _client(**kwargs: Any) -> DiscordRestClient:
    return DiscordRestClient(
        bot_token="abc123", base_url="https://discord.test/api/v10", **kwargs
    )


@pytest.mark.anyio
async def test_discord_rest_client_sets_authorization_header() -> None:
    observed: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        observed["authorization"] = request.headers.get("Authorization")
        observed["path"] = request.url.path
        return httpx.Response(
            200, json={"id": "300", "type": 0, "guild_id": "100", "name": "general"}
        )

    client = _client()
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        channel = await client.channel("300")
    finally:
        await client.close()

    assert channel.name == "general"
    assert channel.type == ChannelType.GUILD_TEXT
    assert observed["authorization"] == "Bot abc123"
    assert observed["path"] == "/api/v10/channels/300"


@pytest.mark.anyio
async def test_lookup_routes() -> None:
    observed_paths: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        observed_paths.append((request.method, request.url.path))
        path = request.url.path
        if path.endswith("/roles"):
            return httpx.Response(
                200,
                json=[
                    {"id": "100", "name": "@everyone", "permissions": "1024"},
                    {"id": "200", "name": "mods", "permissions": "8192"},
                ],
            )
        if "/members/" in path:
            return httpx.Response(
                200, json={"user": {"id": "42", "username": "alice"}, "roles": ["200"]}
            )
        if path.startswith("/api/v10/users/"):
            return httpx.Response(200, json={"id": "42", "username": "alice"})
        return httpx.Response(200, json={"id": "100", "name": "guild", "owner_id": "1"})

    client = _client()
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        roles = await client.roles("100")
        member = await client.member("100", "42")
        user = await client.user("42")
        guild = await client.guild("100")
    finally:
        await client.close()

    assert [role.name for role in roles] == ["@everyone", "mods"]
    assert roles[1].permissions == 8192
    assert member.guild_id == "100"
    assert member.roles == ["200"]
    assert user.username == "alice"
    assert guild.owner_id == "1"
    assert observed_paths == [
        ("GET", "/api/v10/guilds/100/roles"),
        ("GET", "/api/v10/guilds/100/members/42"),
        ("GET", "/api/v10/users/42"),
        ("GET", "/api/v10/guilds/100"),
    ]


@pytest.mark.anyio
async def test_interaction_callback_and_webhook_routes() -> None:
    observed: list[tuple[str, str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        observed.append((request.method, request.url.path, body))
        if request.url.path.endswith("/callback"):
            return httpx.Response(204)
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json={"id": "msg-1"})

    client = _client()
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        callback = await client.create_interaction_response(
            interaction_id="i1",
            interaction_token="tok",
            payload={"type": 5},
        )
        followup = await client.create_followup_message(
            application_id="app",
            interaction_token="tok",
            payload={"content": "later"},
        )
        edited = await client.edit_original_interaction_response(
            application_id="app",
            interaction_token="tok",
            payload={"content": "edited"},
        )
        await client.delete_original_interaction_response(
            application_id="app", interaction_token="tok"
        )
    finally:
        await client.close()

    assert callback is None
    assert followup == {"id": "msg-1"}
    assert edited == {"id": "msg-1"}
    assert observed == [
        ("POST", "/api/v10/interactions/i1/tok/callback", {"type": 5}),
        ("POST", "/api/v10/webhooks/app/tok", {"content": "later"}),
        (
            "PATCH",
            "/api/v10/webhooks/app/tok/messages/@original",
            {"content": "edited"},
        ),
        ("DELETE", "/api/v10/webhooks/app/tok/messages/@original", None),
    ]


@pytest.mark.anyio
async def test_rate_limit_retry_after_retries_and_succeeds(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    attempts = {"count": 0}
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    monkeypatch.setattr("cordkit.rest.asyncio.sleep", fake_sleep)

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] < 3:
            return httpx.Response(429, headers={"Retry-After": "0.25"}, json={})
        return httpx.Response(200, json={"id": "42", "username": "alice"})

    client = _client()
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        user = await client.user("42")
    finally:
        await client.close()

    assert user.username == "alice"
    assert attempts["count"] == 3
    assert sleeps == [0.25, 0.25]


@pytest.mark.anyio
async def test_rate_limit_exhaustion_raises_api_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fake_sleep(_seconds: float) -> None:
        return None

    monkeypatch.setattr("cordkit.rest.asyncio.sleep", fake_sleep)

    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, headers={"Retry-After": "1.5"}, json={})

    client = _client(max_retries=2)
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        with pytest.raises(DiscordAPIError) as excinfo:
            await client.user("42")
    finally:
        await client.close()

    assert excinfo.value.status_code == 429
    assert excinfo.value.retry_after == 1.5
    assert not isinstance(excinfo.value, DiscordTransientError)


@pytest.mark.anyio
async def test_server_error_is_retried_then_succeeds() -> None:
    attempts = {"count": 0}

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] == 1:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(200, json={"id": "42"})

    client = _client(retry_base_delay=0, retry_max_delay=0)
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        user = await client.user("42")
    finally:
        await client.close()

    assert user.id == "42"
    assert attempts["count"] == 2


@pytest.mark.anyio
async def test_persistent_server_error_raises_transient_error() -> None:
    attempts = {"count": 0}

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(500, text="oops")

    client = _client(max_retries=2, retry_base_delay=0, retry_max_delay=0)
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        with pytest.raises(DiscordTransientError) as excinfo:
            await client.channel("300")
    finally:
        await client.close()

    assert excinfo.value.status_code == 500
    assert attempts["count"] == 3


@pytest.mark.anyio
async def test_network_error_is_retried() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"id": "42"})

    client = _client(retry_base_delay=0, retry_max_delay=0)
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        user = await client.user("42")
    finally:
        await client.close()

    assert user.id == "42"
    assert attempts["count"] == 2


@pytest.mark.anyio
@pytest.mark.parametrize("status_code", [401, 403, 404])
async def test_client_errors_are_permanent(status_code: int) -> None:
    attempts = {"count": 0}

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(status_code, json={"message": "nope"})

    client = _client(retry_base_delay=0)
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        with pytest.raises(DiscordPermanentError) as excinfo:
            await client.user("42")
    finally:
        await client.close()

    assert excinfo.value.status_code == status_code
    assert attempts["count"] == 1


@pytest.mark.anyio
async def test_non_object_response_is_an_api_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["not", "an", "object"])

    client = _client()
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        with pytest.raises(DiscordAPIError):
            await client.user("42")
    finally:
        await client.close()


@pytest.mark.anyio
async def test_non_json_success_is_an_api_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    client = _client()
    await _configure_mock_client(client, httpx.MockTransport(handler))
    try:
        with pytest.raises(DiscordAPIError):
            await client.channel("300")
    finally:
        await client.close()
