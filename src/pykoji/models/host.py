"""Models for messages exchanged with the host frame."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from pykoji.models._base import KojiBaseModel


class HostEvent(KojiBaseModel):
    """A named event plus an optional data payload.

    On the wire the event name is carried as both ``_kojiEventName`` and
    ``_type`` and the payload keys are flattened into the message.
    """

    name: str
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("event name must be non-empty")
        return name

    def to_wire(self) -> dict[str, Any]:
        """Build the JSON-serializable message posted to the host."""
        return {
            "_kojiEventName": self.name,
            "_type": self.name,
            **self.data,
        }


def message_name(message: Any) -> str | None:
    """Return the event name of an inbound host message, if it has one.

    Hosts name their messages with ``event``; echoes of client messages use
    ``_type``. Either matches.
    """
    if not isinstance(message, dict):
        return None
    for key in ("event", "_type"):
        value = message.get(key)
        if isinstance(value, str) and value:
            return value
    return None


class SetValueData(KojiBaseModel):
    """Payload of ``KojiPreview.SetValue``."""

    path: list[str]
    new_value: dict[str, Any]
    skip_update: bool = False


class EncryptValueData(KojiBaseModel):
    """Payload of ``KojiPreview.EncryptValue``."""

    plaintext_value: Any


class DecryptValueData(KojiBaseModel):
    """Payload of ``KojiPreview.DecryptValue``."""

    encrypted_value: Any

