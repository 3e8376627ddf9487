from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Protocol

from .constants import INTERACTION_TOKEN_LIFETIME
from .errors import AccessorContractError, DiscordTransientError
from .interactions import Interaction
from .logging_utils import log_event
from .responses import (
    InteractionResponse,
    SimpleResponse,
    autocomplete_result,
    pong,
)
from .types import InteractionType

Handler = Callable[[Interaction], Awaitable[Optional[InteractionResponse]]]
Responder = Callable[[Interaction, InteractionResponse], Awaitable[None]]

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class InteractionResponseSender(Protocol):
    async def create_interaction_response(
        self,
        *,
        interaction_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> None: ...


def rest_responder(client: InteractionResponseSender) -> Responder:
    """Responder posting handler results to the interaction callback endpoint."""

    async def _respond(interaction: Interaction, response: InteractionResponse) -> None:
        await client.create_interaction_response(
            interaction_id=interaction.id,
            interaction_token=interaction.token,
            payload=response.to_payload(),
        )

    return _respond


class InteractionRouter:
    """Routes decoded interactions to registered coroutine handlers.

    Commands and autocomplete requests are keyed by command name, message
    components and modal submits by custom id. Every ``on_*`` method returns a
    callable that removes the registration again.

    A handler may return an ``InteractionResponse``; it is handed to the
    router's ``responder`` when one is configured.
    """

    def __init__(
        self,
        *,
        responder: Optional[Responder] = None,
        handler_timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._responder = responder
        self._handler_timeout = (
            handler_timeout
            if handler_timeout is not None
            else INTERACTION_TOKEN_LIFETIME.total_seconds()
        )
        self._logger = logger or logging.getLogger(__name__)
        self._commands: dict[str, Handler] = {}
        self._autocomplete: dict[str, Handler] = {}
        self._components: dict[str, Handler] = {}
        self._modals: dict[str, Handler] = {}

    def on_command(self, name: str, handler: Handler) -> Callable[[], None]:
        return self._register(self._commands, name, handler)

    def on_autocomplete(self, name: str, handler: Handler) -> Callable[[], None]:
        return self._register(self._autocomplete, name, handler)

    def on_component(self, custom_id: str, handler: Handler) -> Callable[[], None]:
        return self._register(self._components, custom_id, handler)

    def on_modal(self, custom_id: str, handler: Handler) -> Callable[[], None]:
        return self._register(self._modals, custom_id, handler)

    @staticmethod
    def _register(
        registry: dict[str, Handler], key: str, handler: Handler
    ) -> Callable[[], None]:
        registry[key] = handler

        def _unregister() -> None:
            if registry.get(key) is handler:
                del registry[key]

        return _unregister

    def _resolve(self, interaction: Interaction) -> tuple[Optional[str], Optional[Handler]]:
        if interaction.type == InteractionType.APPLICATION_COMMAND:
            name = interaction.command_data().name
            return name, self._commands.get(name)
        if interaction.type == InteractionType.APPLICATION_COMMAND_AUTOCOMPLETE:
            name = interaction.command_data().name
            return name, self._autocomplete.get(name)
        if interaction.type == InteractionType.MESSAGE_COMPONENT:
            custom_id = interaction.message_component_data().custom_id
            return custom_id, self._components.get(custom_id)
        if interaction.type == InteractionType.MODAL_SUBMIT:
            custom_id = interaction.modal_submit_data().custom_id
            return custom_id, self._modals.get(custom_id)
        return None, None

    async def dispatch(self, interaction: Interaction) -> bool:
        """Run the handler registered for ``interaction``.

        Returns ``False`` when nothing is registered for it. Pings are answered
        with a pong directly.
        """
        if interaction.type == InteractionType.PING:
            await self._respond(interaction, pong())
            return True

        key, handler = self._resolve(interaction)
        if handler is None:
            log_event(
                self._logger,
                logging.INFO,
                "discord.interaction.unrouted",
                interaction_id=interaction.id,
                interaction_type=int(interaction.type),
                key=key,
            )
            return False

        try:
            response = await asyncio.wait_for(
                handler(interaction), timeout=self._handler_timeout
            )
        except asyncio.TimeoutError:
            log_event(
                self._logger,
                logging.WARNING,
                "discord.interaction.handler_timeout",
                interaction_id=interaction.id,
                key=key,
                timeout_seconds=self._handler_timeout,
            )
            return True
        except AccessorContractError:
            raise
        except DiscordTransientError as exc:
            log_event(
                self._logger,
                logging.WARNING,
                "discord.interaction.transient_error",
                interaction_id=interaction.id,
                key=key,
                exc=exc,
            )
            await self._respond_ephemeral(
                interaction, exc.user_message or UNEXPECTED_ERROR_MESSAGE
            )
            return True
        except Exception as exc:
            log_event(
                self._logger,
                logging.ERROR,
                "discord.interaction.unhandled_error",
                interaction_id=interaction.id,
                key=key,
                exc=exc,
            )
            await self._respond_ephemeral(interaction, UNEXPECTED_ERROR_MESSAGE)
            return True

        if response is not None:
            await self._respond(interaction, response)
        return True

    async def _respond(
        self, interaction: Interaction, response: InteractionResponse
    ) -> None:
        if self._responder is None:
            return
        await self._responder(interaction, response)

    async def _respond_ephemeral(self, interaction: Interaction, text: str) -> None:
        if self._responder is None:
            return
        try:
            await self._respond(interaction, _error_response(interaction, text))
        except Exception as exc:
            log_event(
                self._logger,
                logging.WARNING,
                "discord.interaction.error_response_failed",
                interaction_id=interaction.id,
                exc=exc,
            )


def _error_response(interaction: Interaction, text: str) -> InteractionResponse:
    # Autocomplete callbacks may only carry choices.
    if interaction.type == InteractionType.APPLICATION_COMMAND_AUTOCOMPLETE:
        return autocomplete_result([])
    return SimpleResponse().message(text).ephemeral().response()
