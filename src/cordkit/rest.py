from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import httpx

from .channels import Channel
from .constants import DISCORD_API_BASE_URL
from .errors import DiscordAPIError, DiscordPermanentError, DiscordTransientError
from .guilds import Guild, Role
from .logging_utils import log_event
from .retry import retry_transient
from .users import Member, User

logger = logging.getLogger(__name__)

_RETRYABLE_NETWORK_ERRORS = (
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
)


class DiscordRestClient:
    """Minimal Discord REST client.

    Rate limits (429) are waited out using ``Retry-After``. Server errors and
    network failures are retried with exponential backoff. 401 and 403 raise
    ``DiscordPermanentError``.
    """

    def __init__(
        self,
        *,
        bot_token: str,
        timeout_seconds: float = 10.0,
        base_url: str = DISCORD_API_BASE_URL,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        retry_max_delay: float = 30.0,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout_seconds)
        self._authorization_header = f"Bot {bot_token}"
        self._max_retries = max_retries
        self._request_with_retry = retry_transient(
            max_attempts=max_retries + 1,
            base_wait=retry_base_delay,
            max_wait=retry_max_delay,
        )(self._request_once)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DiscordRestClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _request_once(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | list[dict[str, Any]] | None = None,
        expect_json: bool = True,
    ) -> Any:
        rate_limit_retries = 0

        while True:
            try:
                response = await self._client.request(
                    method,
                    path,
                    json=payload,
                    headers={"Authorization": self._authorization_header},
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                if status_code == 429:
                    retry_after_raw = exc.response.headers.get("Retry-After")
                    if (
                        retry_after_raw is not None
                        and rate_limit_retries < self._max_retries
                    ):
                        rate_limit_retries += 1
                        try:
                            retry_after = max(float(retry_after_raw), 0.0)
                        except ValueError:
                            retry_after = 0.0
                        log_event(
                            logger,
                            logging.INFO,
                            "discord.rest.rate_limited",
                            method=method,
                            path=path,
                            retry_after=retry_after,
                            attempt=rate_limit_retries,
                        )
                        await asyncio.sleep(retry_after)
                        continue
                    raise DiscordAPIError(
                        f"Discord API rate limit exceeded for {method} {path}",
                        status_code=status_code,
                        retry_after=_parse_retry_after(retry_after_raw),
                    ) from exc

                body_preview = (
                    (exc.response.text or "").strip().replace("\n", " ")[:200]
                )
                if 500 <= status_code < 600:
                    log_event(
                        logger,
                        logging.WARNING,
                        "discord.rest.server_error",
                        method=method,
                        path=path,
                        status_code=status_code,
                    )
                    raise DiscordTransientError(
                        f"Discord API server error for {method} {path}: "
                        f"status={status_code} body={body_preview!r}",
                        status_code=status_code,
                    ) from exc
                if status_code in {401, 403}:
                    raise DiscordPermanentError(
                        f"Discord API authentication failure for {method} {path}: "
                        f"status={status_code} body={body_preview!r}",
                        status_code=status_code,
                        user_message="Discord rejected the bot credentials.",
                    ) from exc
                raise DiscordPermanentError(
                    f"Discord API request failed for {method} {path}: "
                    f"status={status_code} body={body_preview!r}",
                    status_code=status_code,
                ) from exc
            except _RETRYABLE_NETWORK_ERRORS as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "discord.rest.network_error",
                    method=method,
                    path=path,
                    exc=exc,
                )
                raise DiscordTransientError(
                    f"Discord API network error for {method} {path}: {exc}"
                ) from exc
            except httpx.HTTPError as exc:
                raise DiscordAPIError(
                    f"Discord API network error for {method} {path}: {exc}"
                ) from exc

            if not expect_json:
                return None
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as exc:
                raise DiscordAPIError(
                    f"Discord API returned non-JSON success response for {method} {path}"
                ) from exc

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | list[dict[str, Any]] | None = None,
        expect_json: bool = True,
    ) -> Any:
        return await self._request_with_retry(
            method, path, payload=payload, expect_json=expect_json
        )

    async def _get_object(self, path: str) -> dict[str, Any]:
        payload = await self._request("GET", path)
        if not isinstance(payload, dict):
            raise DiscordAPIError(f"Discord API returned a non-object for GET {path}")
        return payload

    async def channel(self, channel_id: str) -> Channel:
        return Channel.from_raw(await self._get_object(f"/channels/{channel_id}"))

    async def roles(self, guild_id: str) -> list[Role]:
        payload = await self._request("GET", f"/guilds/{guild_id}/roles")
        if not isinstance(payload, list):
            return []
        return [Role.from_raw(item) for item in payload if isinstance(item, dict)]

    async def user(self, user_id: str) -> User:
        return User.from_raw(await self._get_object(f"/users/{user_id}"))

    async def guild(self, guild_id: str) -> Guild:
        return Guild.from_raw(await self._get_object(f"/guilds/{guild_id}"))

    async def member(self, guild_id: str, user_id: str) -> Member:
        member = Member.from_raw(
            await self._get_object(f"/guilds/{guild_id}/members/{user_id}")
        )
        if member.guild_id is None:
            member.guild_id = guild_id
        return member

    async def create_interaction_response(
        self,
        *,
        interaction_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> None:
        await self._request(
            "POST",
            f"/interactions/{interaction_id}/{interaction_token}/callback",
            payload=payload,
            expect_json=False,
        )

    async def create_followup_message(
        self,
        *,
        application_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/webhooks/{application_id}/{interaction_token}",
            payload=payload,
        )
        return response if isinstance(response, dict) else {}

    async def edit_original_interaction_response(
        self,
        *,
        application_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        response = await self._request(
            "PATCH",
            f"/webhooks/{application_id}/{interaction_token}/messages/@original",
            payload=payload,
        )
        return response if isinstance(response, dict) else {}

    async def delete_original_interaction_response(
        self,
        *,
        application_id: str,
        interaction_token: str,
    ) -> None:
        await self._request(
            "DELETE",
            f"/webhooks/{application_id}/{interaction_token}/messages/@original",
            expect_json=False,
        )


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None
