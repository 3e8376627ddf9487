"""Message and modal components.

Every component travels as ``{"type": N, ...fields}``. In memory the
discriminant is not stored; it is derived from the class (and, for select
menus, from ``menu_type``) and exposed as ``component_type``.

Where a component may appear is expressed through three marker bases:
``MessageComponent`` (allowed in messages), ``ModalComponent`` (allowed in
modals) and ``ActionRowChild`` (allowed inside an action row). Decoding checks
them on every level, so a text input inside a message or a button inside a
modal raises ``ComponentTypeMismatchError`` instead of slipping through.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Mapping, Optional, cast

from .coercion import (
    as_bool,
    as_id,
    as_str,
    coerce_int,
    optional_list,
    optional_mapping,
    require_mapping,
)
from .errors import (
    ComponentTypeMismatchError,
    DiscordDecodeError,
    UnknownComponentError,
)
from .types import (
    SELECT_MENU_TYPES,
    ButtonStyle,
    ChannelType,
    ComponentType,
    SelectDefaultValueType,
    SeparatorSpacing,
    TextInputStyle,
    enum_or_int,
)


class Component:
    """Base of every component variant."""

    wire_type: ClassVar[ComponentType]

    @property
    def component_type(self) -> ComponentType:
        return self.wire_type

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type["Component"]
    ) -> "Component":
        raise NotImplementedError

    def to_payload(self) -> dict[str, Any]:
        raise NotImplementedError


class MessageComponent(Component):
    """Component that may be sent as part of a message."""


class ModalComponent(Component):
    """Component that may be shown in, or submitted from, a modal."""


class ActionRowChild(Component):
    """Component that may sit inside an action row."""


def _put(payload: dict[str, Any], key: str, value: Any) -> None:
    if value is None or value is False or value == "" or value == []:
        return
    payload[key] = value


def _component_id(data: Mapping[str, Any]) -> Optional[int]:
    return coerce_int(data.get("id"))


@dataclass
class PartialEmoji:
    id: Optional[str] = None
    name: Optional[str] = None
    animated: bool = False

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "PartialEmoji":
        data = require_mapping(payload, what="emoji")
        return cls(
            id=as_id(data.get("id")),
            name=as_str(data.get("name")),
            animated=as_bool(data.get("animated")),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        _put(payload, "id", self.id)
        _put(payload, "name", self.name)
        _put(payload, "animated", self.animated)
        return payload


def _optional_emoji(data: Mapping[str, Any], what: str) -> Optional[PartialEmoji]:
    raw = optional_mapping(data.get("emoji"), what=what)
    return PartialEmoji.from_raw(raw) if raw is not None else None


@dataclass
class UnfurledMediaItem:
    url: str = ""
    proxy_url: Optional[str] = None
    height: Optional[int] = None
    width: Optional[int] = None
    content_type: Optional[str] = None
    attachment_id: Optional[str] = None

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "UnfurledMediaItem":
        data = require_mapping(payload, what="media item")
        return cls(
            url=as_str(data.get("url")) or "",
            proxy_url=as_str(data.get("proxy_url")),
            height=coerce_int(data.get("height")),
            width=coerce_int(data.get("width")),
            content_type=as_str(data.get("content_type")),
            attachment_id=as_id(data.get("attachment_id")),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": self.url}
        _put(payload, "proxy_url", self.proxy_url)
        _put(payload, "height", self.height)
        _put(payload, "width", self.width)
        _put(payload, "content_type", self.content_type)
        _put(payload, "attachment_id", self.attachment_id)
        return payload


def _required_media(data: Mapping[str, Any], key: str) -> UnfurledMediaItem:
    raw = data.get(key)
    if raw is None:
        raise DiscordDecodeError(f"component is missing {key!r}")
    return UnfurledMediaItem.from_raw(raw)


@dataclass
class SelectMenuOption:
    label: str
    value: str
    description: Optional[str] = None
    emoji: Optional[PartialEmoji] = None
    default: bool = False

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "SelectMenuOption":
        data = require_mapping(payload, what="select option")
        return cls(
            label=as_str(data.get("label")) or "",
            value=as_str(data.get("value")) or "",
            description=as_str(data.get("description")),
            emoji=_optional_emoji(data, "select option emoji"),
            default=as_bool(data.get("default")),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"label": self.label, "value": self.value}
        _put(payload, "description", self.description)
        if self.emoji is not None:
            payload["emoji"] = self.emoji.to_payload()
        _put(payload, "default", self.default)
        return payload


@dataclass
class SelectMenuDefaultValue:
    id: str
    type: SelectDefaultValueType

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "SelectMenuDefaultValue":
        data = require_mapping(payload, what="select default value")
        try:
            value_type = SelectDefaultValueType(data.get("type"))
        except ValueError as exc:
            raise DiscordDecodeError(
                f"unknown select default value type: {data.get('type')!r}"
            ) from exc
        return cls(id=as_id(data.get("id")) or "", type=value_type)

    def to_payload(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type.value}


@dataclass
class MediaGalleryItem:
    media: UnfurledMediaItem
    description: Optional[str] = None
    spoiler: bool = False

    @classmethod
    def from_raw(cls, payload: Mapping[str, Any]) -> "MediaGalleryItem":
        data = require_mapping(payload, what="media gallery item")
        return cls(
            media=_required_media(data, "media"),
            description=as_str(data.get("description")),
            spoiler=as_bool(data.get("spoiler")),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"media": self.media.to_payload()}
        _put(payload, "description", self.description)
        _put(payload, "spoiler", self.spoiler)
        return payload


@dataclass
class ActionsRow(MessageComponent, ModalComponent):
    components: list[ActionRowChild] = field(default_factory=list)
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.ACTIONS_ROW

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "ActionsRow":
        data = require_mapping(payload, what="actions row")
        children = decode_components(
            optional_list(data.get("components"), what="actions row components"),
            expect=ActionRowChild,
        )
        for child in children:
            if not isinstance(child, context):
                raise ComponentTypeMismatchError(child, context)
        return cls(components=children, id=_component_id(data))

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "components": [child.to_payload() for child in self.components],
        }
        _put(payload, "id", self.id)
        return payload


@dataclass
class Button(MessageComponent, ActionRowChild):
    label: str = ""
    # 0 means unset; encoding replaces it with PRIMARY.
    style: ButtonStyle | int = 0
    custom_id: Optional[str] = None
    url: Optional[str] = None
    sku_id: Optional[str] = None
    emoji: Optional[PartialEmoji] = None
    disabled: bool = False
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.BUTTON

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "Button":
        data = require_mapping(payload, what="button")
        return cls(
            label=as_str(data.get("label")) or "",
            style=enum_or_int(ButtonStyle, data.get("style")) or 0,
            custom_id=as_str(data.get("custom_id")),
            url=as_str(data.get("url")),
            sku_id=as_id(data.get("sku_id")),
            emoji=_optional_emoji(data, "button emoji"),
            disabled=as_bool(data.get("disabled")),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        """Encode the button, defaulting an unset style to PRIMARY.

        The default is written back to ``self.style``, so encoding a fresh
        ``Button()`` leaves it with ``ButtonStyle.PRIMARY``. Encoding again
        yields the same payload.
        """
        if not self.style:
            self.style = ButtonStyle.PRIMARY
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "style": int(self.style),
        }
        _put(payload, "label", self.label)
        _put(payload, "custom_id", self.custom_id)
        _put(payload, "url", self.url)
        _put(payload, "sku_id", self.sku_id)
        if self.emoji is not None:
            payload["emoji"] = self.emoji.to_payload()
        _put(payload, "disabled", self.disabled)
        _put(payload, "id", self.id)
        return payload


@dataclass
class SelectMenu(MessageComponent, ModalComponent, ActionRowChild):
    custom_id: str = ""
    # None encodes as a string select.
    menu_type: Optional[ComponentType] = None
    placeholder: Optional[str] = None
    min_values: Optional[int] = None
    max_values: Optional[int] = None
    options: list[SelectMenuOption] = field(default_factory=list)
    default_values: list[SelectMenuDefaultValue] = field(default_factory=list)
    channel_types: list[ChannelType | int] = field(default_factory=list)
    # Submitted selection, only present in modal submits.
    values: list[str] = field(default_factory=list)
    required: Optional[bool] = None
    disabled: bool = False
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.STRING_SELECT

    @property
    def component_type(self) -> ComponentType:
        return self.menu_type or ComponentType.STRING_SELECT

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "SelectMenu":
        data = require_mapping(payload, what="select menu")
        menu_type = enum_or_int(ComponentType, data.get("type"))
        required_raw = data.get("required")
        return cls(
            custom_id=as_str(data.get("custom_id")) or "",
            menu_type=menu_type if menu_type in SELECT_MENU_TYPES else None,
            placeholder=as_str(data.get("placeholder")),
            min_values=coerce_int(data.get("min_values")),
            max_values=coerce_int(data.get("max_values")),
            options=[
                SelectMenuOption.from_raw(item)
                for item in optional_list(data.get("options"), what="select options")
            ],
            default_values=[
                SelectMenuDefaultValue.from_raw(item)
                for item in optional_list(
                    data.get("default_values"), what="select default values"
                )
            ],
            channel_types=[
                value
                for value in (
                    enum_or_int(ChannelType, item)
                    for item in optional_list(
                        data.get("channel_types"), what="select channel types"
                    )
                )
                if value is not None
            ],
            values=[
                str(item)
                for item in optional_list(data.get("values"), what="select values")
            ],
            required=required_raw if isinstance(required_raw, bool) else None,
            disabled=as_bool(data.get("disabled")),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "custom_id": self.custom_id,
        }
        _put(payload, "placeholder", self.placeholder)
        _put(payload, "min_values", self.min_values)
        _put(payload, "max_values", self.max_values)
        _put(payload, "options", [option.to_payload() for option in self.options])
        _put(
            payload,
            "default_values",
            [value.to_payload() for value in self.default_values],
        )
        _put(payload, "channel_types", [int(value) for value in self.channel_types])
        _put(payload, "values", list(self.values))
        if self.required is not None:
            payload["required"] = self.required
        _put(payload, "disabled", self.disabled)
        _put(payload, "id", self.id)
        return payload


@dataclass
class TextInput(ModalComponent, ActionRowChild):
    custom_id: str = ""
    # Absent on submitted inputs.
    style: Optional[TextInputStyle | int] = None
    # Only used by legacy action-row modals; labels wrap inputs otherwise.
    label: Optional[str] = None
    placeholder: Optional[str] = None
    value: Optional[str] = None
    required: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.TEXT_INPUT

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "TextInput":
        data = require_mapping(payload, what="text input")
        required_raw = data.get("required")
        return cls(
            custom_id=as_str(data.get("custom_id")) or "",
            style=enum_or_int(TextInputStyle, data.get("style")),
            label=as_str(data.get("label")),
            placeholder=as_str(data.get("placeholder")),
            value=as_str(data.get("value")),
            required=required_raw if isinstance(required_raw, bool) else None,
            min_length=coerce_int(data.get("min_length")),
            max_length=coerce_int(data.get("max_length")),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "custom_id": self.custom_id,
        }
        if self.style is not None:
            payload["style"] = int(self.style)
        _put(payload, "label", self.label)
        _put(payload, "placeholder", self.placeholder)
        _put(payload, "value", self.value)
        if self.required is not None:
            payload["required"] = self.required
        _put(payload, "min_length", self.min_length)
        _put(payload, "max_length", self.max_length)
        _put(payload, "id", self.id)
        return payload


@dataclass
class Section(MessageComponent):
    components: list[MessageComponent] = field(default_factory=list)
    accessory: Optional[MessageComponent] = None
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.SECTION

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "Section":
        data = require_mapping(payload, what="section")
        accessory_raw = data.get("accessory")
        return cls(
            components=decode_components(
                optional_list(data.get("components"), what="section components"),
                expect=MessageComponent,
            ),
            accessory=(
                decode_message_component(accessory_raw)
                if accessory_raw is not None
                else None
            ),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "components": [child.to_payload() for child in self.components],
        }
        if self.accessory is not None:
            payload["accessory"] = self.accessory.to_payload()
        _put(payload, "id", self.id)
        return payload


@dataclass
class TextDisplay(MessageComponent, ModalComponent):
    content: str = ""
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.TEXT_DISPLAY

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "TextDisplay":
        data = require_mapping(payload, what="text display")
        return cls(content=as_str(data.get("content")) or "", id=_component_id(data))

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": int(self.component_type)}
        _put(payload, "content", self.content)
        _put(payload, "id", self.id)
        return payload


@dataclass
class Thumbnail(MessageComponent):
    media: UnfurledMediaItem = field(default_factory=UnfurledMediaItem)
    description: Optional[str] = None
    spoiler: bool = False
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.THUMBNAIL

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "Thumbnail":
        data = require_mapping(payload, what="thumbnail")
        return cls(
            media=_required_media(data, "media"),
            description=as_str(data.get("description")),
            spoiler=as_bool(data.get("spoiler")),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "media": self.media.to_payload(),
        }
        _put(payload, "description", self.description)
        _put(payload, "spoiler", self.spoiler)
        _put(payload, "id", self.id)
        return payload


@dataclass
class MediaGallery(MessageComponent):
    items: list[MediaGalleryItem] = field(default_factory=list)
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.MEDIA_GALLERY

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "MediaGallery":
        data = require_mapping(payload, what="media gallery")
        return cls(
            items=[
                MediaGalleryItem.from_raw(item)
                for item in optional_list(data.get("items"), what="media gallery items")
            ],
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "items": [item.to_payload() for item in self.items],
        }
        _put(payload, "id", self.id)
        return payload


@dataclass
class File(MessageComponent):
    file: UnfurledMediaItem = field(default_factory=UnfurledMediaItem)
    spoiler: bool = False
    # Filled in by Discord on messages it returns.
    name: Optional[str] = None
    size: Optional[int] = None
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.FILE

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "File":
        data = require_mapping(payload, what="file")
        return cls(
            file=_required_media(data, "file"),
            spoiler=as_bool(data.get("spoiler")),
            name=as_str(data.get("name")),
            size=coerce_int(data.get("size")),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "file": self.file.to_payload(),
        }
        _put(payload, "spoiler", self.spoiler)
        _put(payload, "name", self.name)
        _put(payload, "size", self.size)
        _put(payload, "id", self.id)
        return payload


@dataclass
class Separator(MessageComponent):
    divider: Optional[bool] = None
    spacing: Optional[SeparatorSpacing | int] = None
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.SEPARATOR

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "Separator":
        data = require_mapping(payload, what="separator")
        divider_raw = data.get("divider")
        return cls(
            divider=divider_raw if isinstance(divider_raw, bool) else None,
            spacing=enum_or_int(SeparatorSpacing, data.get("spacing")),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": int(self.component_type)}
        if self.divider is not None:
            payload["divider"] = self.divider
        if self.spacing is not None:
            payload["spacing"] = int(self.spacing)
        _put(payload, "id", self.id)
        return payload


@dataclass
class Container(MessageComponent):
    components: list[MessageComponent] = field(default_factory=list)
    accent_color: Optional[int] = None
    spoiler: bool = False
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.CONTAINER

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "Container":
        data = require_mapping(payload, what="container")
        return cls(
            components=decode_components(
                optional_list(data.get("components"), what="container components"),
                expect=MessageComponent,
            ),
            accent_color=coerce_int(data.get("accent_color")),
            spoiler=as_bool(data.get("spoiler")),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "components": [child.to_payload() for child in self.components],
        }
        if self.accent_color is not None:
            payload["accent_color"] = self.accent_color
        _put(payload, "spoiler", self.spoiler)
        _put(payload, "id", self.id)
        return payload


@dataclass
class Label(ModalComponent):
    label: str = ""
    component: Optional[ModalComponent] = None
    description: Optional[str] = None
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.LABEL

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "Label":
        data = require_mapping(payload, what="label")
        child_raw = data.get("component")
        if child_raw is None:
            raise DiscordDecodeError("label is missing its component")
        return cls(
            label=as_str(data.get("label")) or "",
            component=decode_modal_component(child_raw),
            description=as_str(data.get("description")),
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": int(self.component_type)}
        _put(payload, "label", self.label)
        _put(payload, "description", self.description)
        if self.component is not None:
            payload["component"] = self.component.to_payload()
        _put(payload, "id", self.id)
        return payload


@dataclass
class FileUpload(ModalComponent):
    custom_id: str = ""
    min_values: Optional[int] = None
    max_values: Optional[int] = None
    required: Optional[bool] = None
    # Attachment ids, only present in modal submits.
    values: list[str] = field(default_factory=list)
    id: Optional[int] = None

    wire_type: ClassVar[ComponentType] = ComponentType.FILE_UPLOAD

    @classmethod
    def from_raw(
        cls, payload: Mapping[str, Any], *, context: type[Component] = Component
    ) -> "FileUpload":
        data = require_mapping(payload, what="file upload")
        required_raw = data.get("required")
        return cls(
            custom_id=as_str(data.get("custom_id")) or "",
            min_values=coerce_int(data.get("min_values")),
            max_values=coerce_int(data.get("max_values")),
            required=required_raw if isinstance(required_raw, bool) else None,
            values=[
                str(item)
                for item in optional_list(data.get("values"), what="file upload values")
            ],
            id=_component_id(data),
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": int(self.component_type),
            "custom_id": self.custom_id,
        }
        _put(payload, "min_values", self.min_values)
        _put(payload, "max_values", self.max_values)
        if self.required is not None:
            payload["required"] = self.required
        _put(payload, "values", list(self.values))
        _put(payload, "id", self.id)
        return payload


_VARIANTS: dict[int, type[Component]] = {
    ComponentType.ACTIONS_ROW: ActionsRow,
    ComponentType.BUTTON: Button,
    ComponentType.TEXT_INPUT: TextInput,
    ComponentType.SECTION: Section,
    ComponentType.TEXT_DISPLAY: TextDisplay,
    ComponentType.THUMBNAIL: Thumbnail,
    ComponentType.MEDIA_GALLERY: MediaGallery,
    ComponentType.FILE: File,
    ComponentType.SEPARATOR: Separator,
    ComponentType.CONTAINER: Container,
    ComponentType.LABEL: Label,
    ComponentType.FILE_UPLOAD: FileUpload,
}
_VARIANTS.update({menu_type: SelectMenu for menu_type in SELECT_MENU_TYPES})


def decode_component(
    payload: Any, expect: type[Component] = Component
) -> Component:
    """Decode one component and check it is usable where ``expect`` says.

    Raises:
        UnknownComponentError: ``type`` is an integer no variant claims.
        ComponentTypeMismatchError: the variant lacks the ``expect`` capability.
        DiscordDecodeError: the payload is otherwise malformed.
    """
    data = require_mapping(payload, what="component")
    raw_type = data.get("type")
    if not isinstance(raw_type, int) or isinstance(raw_type, bool):
        raise DiscordDecodeError(f"component type must be an integer, got {raw_type!r}")
    variant = _VARIANTS.get(raw_type)
    if variant is None:
        raise UnknownComponentError(raw_type)
    component = variant.from_raw(data, context=expect)
    if not isinstance(component, expect):
        raise ComponentTypeMismatchError(component, expect)
    return component


def decode_message_component(payload: Any) -> MessageComponent:
    return cast(MessageComponent, decode_component(payload, MessageComponent))


def decode_modal_component(payload: Any) -> ModalComponent:
    return cast(ModalComponent, decode_component(payload, ModalComponent))


def decode_components(
    items: Iterable[Any], expect: type[Component] = Component
) -> list[Any]:
    return [decode_component(item, expect) for item in items]


def encode_component(component: Component) -> dict[str, Any]:
    return component.to_payload()


def encode_components(components: Iterable[Component]) -> list[dict[str, Any]]:
    return [component.to_payload() for component in components]
