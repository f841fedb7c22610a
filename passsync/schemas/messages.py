# passsync/schemas/messages.py
"""
WebSocket wire protocol.

Inbound (connection → server) is a tagged union on `type`; anything that
does not parse into one of the variants is logged and ignored by the
socket handler. Outbound (server → connection) envelopes are plain models
serialized with camelCase keys.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel

from ..utils.clock import now_ms
from .admin import AdminActionRead
from .common import CamelModel
from .notifications import NotificationRead
from .pass_settings import PassSettingsRead
from .slots import SlotRead


# ──────────────────────────────────────────────────────────────────────────────
# Inbound
# ──────────────────────────────────────────────────────────────────────────────

class _InboundMessage(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def lift_payload(cls, data: Any) -> Any:
        # Older clients nest passCode/linkId under "payload"; top level wins.
        if isinstance(data, dict) and isinstance(data.get("payload"), dict):
            top = {k: v for k, v in data.items() if k != "payload" and v is not None}
            return {**data["payload"], **top}
        return data


class SubscribeMessage(_InboundMessage):
    type: Literal["subscribe"]
    pass_code: Optional[str] = None
    link_id: Optional[str] = None


class SubscribeSlotsMessage(_InboundMessage):
    type: Literal["subscribe_slots"]
    link_id: str = Field(min_length=1)


class UnsubscribeMessage(_InboundMessage):
    type: Literal["unsubscribe", "unsubscribe_slots"]
    link_id: str = Field(min_length=1)


class PingMessage(_InboundMessage):
    type: Literal["ping"]


InboundMessage = Annotated[
    Union[SubscribeMessage, SubscribeSlotsMessage, UnsubscribeMessage, PingMessage],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


def parse_inbound(raw: str | bytes) -> InboundMessage:
    """Parse one inbound frame. Raises pydantic.ValidationError on bad JSON / unknown type."""
    return inbound_adapter.validate_json(raw)


# ──────────────────────────────────────────────────────────────────────────────
# Outbound
# ──────────────────────────────────────────────────────────────────────────────

class TimestampData(CamelModel):
    timestamp: int = Field(default_factory=now_ms)


class ConnectedMessage(CamelModel):
    type: Literal["connected"] = "connected"
    data: TimestampData = Field(default_factory=TimestampData)


class PongMessage(CamelModel):
    type: Literal["pong"] = "pong"
    data: TimestampData = Field(default_factory=TimestampData)


class SlotUpdateMessage(CamelModel):
    type: Literal["slot_update"] = "slot_update"
    link_id: str
    action: Literal["created", "updated", "deleted"] = "updated"
    data: SlotRead
    timestamp: int = Field(default_factory=now_ms)


class SettingsUpdateMessage(CamelModel):
    type: Literal["settings_update"] = "settings_update"
    pass_code: str
    data: PassSettingsRead
    timestamp: int = Field(default_factory=now_ms)


class NotificationMessage(CamelModel):
    type: Literal["notification"] = "notification"
    pass_code: str
    data: NotificationRead
    timestamp: int = Field(default_factory=now_ms)


class AdminActionMessage(CamelModel):
    type: Literal["admin_action"] = "admin_action"
    data: AdminActionRead
    timestamp: int = Field(default_factory=now_ms)


class AnnouncementMessage(CamelModel):
    """Global push to every live connection (publish_all)."""
    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: int = Field(default_factory=now_ms)


OutboundMessage = Union[
    ConnectedMessage,
    PongMessage,
    SlotUpdateMessage,
    SettingsUpdateMessage,
    NotificationMessage,
    AdminActionMessage,
    AnnouncementMessage,
]


def encode(message: OutboundMessage) -> str:
    return message.model_dump_json(by_alias=True)
