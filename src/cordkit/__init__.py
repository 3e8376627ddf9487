"""Typed models, codecs and permission resolution for the Discord API."""

from .channels import Channel, PermissionOverwrite, ThreadMetadata
from .components import (
    ActionRowChild,
    ActionsRow,
    Button,
    Component,
    Container,
    File,
    FileUpload,
    Label,
    MediaGallery,
    MediaGalleryItem,
    MessageComponent,
    ModalComponent,
    PartialEmoji,
    Section,
    SelectMenu,
    SelectMenuDefaultValue,
    SelectMenuOption,
    Separator,
    TextDisplay,
    TextInput,
    Thumbnail,
    UnfurledMediaItem,
    decode_component,
    decode_components,
    decode_message_component,
    decode_modal_component,
    encode_component,
    encode_components,
)
from .config import (
    DiscordClientConfig,
    create_interaction_router,
    create_rest_client,
    load_client_config,
)
from .constants import (
    DISCORD_API_BASE_URL,
    INTERACTION_ACK_DEADLINE,
    INTERACTION_TOKEN_LIFETIME,
    MAX_ACTION_ROW_COMPONENTS,
    MAX_MEDIA_GALLERY_ITEMS,
    MAX_SECTION_COMPONENTS,
    MAX_SELECT_OPTIONS,
)
from .errors import (
    AccessorContractError,
    ComponentTypeMismatchError,
    DiscordAPIError,
    DiscordConfigError,
    DiscordDecodeError,
    DiscordError,
    DiscordPermanentError,
    DiscordTransientError,
    StateNotFoundError,
    UnknownComponentError,
)
from .gateway import GatewayFrame, handle_dispatch, interaction_from_frame, parse_gateway_frame
from .guilds import Guild, Role, RoleColors, first_role_color
from .handlers import InteractionRouter, rest_responder
from .interactions import (
    CommandInteractionData,
    CommandInteractionDataOption,
    CommandInteractionDataResolved,
    Interaction,
    MessageComponentData,
    MessageComponentDataResolved,
    ModalSubmitData,
    decode_interaction,
)
from .permissions import compute_effective_permissions, has_permission
from .responses import (
    CommandOptionChoice,
    InteractionResponse,
    InteractionResponseData,
    ModalResponse,
    SimpleResponse,
    autocomplete_result,
    pong,
)
from .rest import DiscordRestClient
from .state import StateCache
from .types import (
    ApplicationCommandOptionType,
    ApplicationCommandType,
    ButtonStyle,
    ChannelType,
    ComponentType,
    InteractionContextType,
    InteractionResponseType,
    InteractionType,
    MessageFlags,
    PermissionOverwriteType,
    SelectDefaultValueType,
    SeparatorSpacing,
    TextInputStyle,
)
from .users import Member, User
from .verify import verify_interaction, verify_request_headers

__all__ = [
    "AccessorContractError",
    "ActionRowChild",
    "ActionsRow",
    "ApplicationCommandOptionType",
    "ApplicationCommandType",
    "Button",
    "ButtonStyle",
    "Channel",
    "ChannelType",
    "CommandInteractionData",
    "CommandInteractionDataOption",
    "CommandInteractionDataResolved",
    "CommandOptionChoice",
    "Component",
    "ComponentType",
    "ComponentTypeMismatchError",
    "Container",
    "DISCORD_API_BASE_URL",
    "DiscordAPIError",
    "DiscordClientConfig",
    "DiscordConfigError",
    "DiscordDecodeError",
    "DiscordError",
    "DiscordPermanentError",
    "DiscordRestClient",
    "DiscordTransientError",
    "File",
    "FileUpload",
    "GatewayFrame",
    "Guild",
    "INTERACTION_ACK_DEADLINE",
    "INTERACTION_TOKEN_LIFETIME",
    "Interaction",
    "InteractionContextType",
    "InteractionResponse",
    "InteractionResponseData",
    "InteractionResponseType",
    "InteractionRouter",
    "InteractionType",
    "Label",
    "MAX_ACTION_ROW_COMPONENTS",
    "MAX_MEDIA_GALLERY_ITEMS",
    "MAX_SECTION_COMPONENTS",
    "MAX_SELECT_OPTIONS",
    "MediaGallery",
    "MediaGalleryItem",
    "Member",
    "MessageComponent",
    "MessageComponentData",
    "MessageComponentDataResolved",
    "MessageFlags",
    "ModalComponent",
    "ModalResponse",
    "ModalSubmitData",
    "PartialEmoji",
    "PermissionOverwrite",
    "PermissionOverwriteType",
    "Role",
    "RoleColors",
    "Section",
    "SelectDefaultValueType",
    "SelectMenu",
    "SelectMenuDefaultValue",
    "SelectMenuOption",
    "Separator",
    "SeparatorSpacing",
    "SimpleResponse",
    "StateCache",
    "StateNotFoundError",
    "TextDisplay",
    "TextInput",
    "TextInputStyle",
    "ThreadMetadata",
    "Thumbnail",
    "UnfurledMediaItem",
    "UnknownComponentError",
    "User",
    "autocomplete_result",
    "compute_effective_permissions",
    "create_interaction_router",
    "create_rest_client",
    "decode_component",
    "decode_components",
    "decode_interaction",
    "decode_message_component",
    "decode_modal_component",
    "encode_component",
    "encode_components",
    "first_role_color",
    "handle_dispatch",
    "has_permission",
    "interaction_from_frame",
    "load_client_config",
    "parse_gateway_frame",
    "pong",
    "rest_responder",
    "verify_interaction",
    "verify_request_headers",
]
