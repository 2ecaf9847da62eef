"""
Data models for the higa client.

Option payloads are closed records: each request body or query string is
described by a dataclass listing every field the remote API accepts. Fields
left at ``MISSING`` are omitted from the payload; an explicit ``None`` is
sent as JSON ``null``.
"""

from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union


class _MissingType:
    """Sentinel type for option fields that were not supplied."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING: Any = _MissingType()


class APIVersion(IntEnum):
    """Versions of the REST API the client can target."""
    V6 = 6
    V7 = 7
    V8 = 8
    V9 = 9


@dataclass
class Payload:
    """Base class for request bodies and query strings."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary, skipping unset fields."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not MISSING
        }

    def to_query(self) -> Dict[str, str]:
        """
        Convert to URL query parameters.

        Booleans are rendered as ``true``/``false`` and ``None`` values are
        dropped since a query string cannot carry a null.
        """
        query = {}
        for key, value in self.to_dict().items():
            if value is None:
                continue
            if isinstance(value, bool):
                query[key] = "true" if value else "false"
            else:
                query[key] = str(value)
        return query


@dataclass
class ModifyChannelOptions(Payload):
    """Fields accepted when modifying a channel or thread."""
    name: str = MISSING
    type: int = MISSING
    position: Optional[int] = MISSING
    topic: Optional[str] = MISSING
    nsfw: Optional[bool] = MISSING
    rate_limit_per_user: Optional[int] = MISSING
    bitrate: Optional[int] = MISSING
    user_limit: Optional[int] = MISSING
    permission_overwrites: Optional[List[Dict[str, Any]]] = MISSING
    parent_id: Optional[str] = MISSING
    rtc_region: Optional[str] = MISSING
    video_quality_mode: Optional[int] = MISSING
    default_auto_archive_duration: Optional[int] = MISSING
    icon: Optional[str] = MISSING
    archived: bool = MISSING
    auto_archive_duration: int = MISSING
    locked: bool = MISSING
    invitable: bool = MISSING


@dataclass
class GetMessagesQuery(Payload):
    """Query string for fetching channel messages."""
    around: str = MISSING
    before: str = MISSING
    after: str = MISSING
    limit: int = MISSING


@dataclass
class CreateMessageOptions(Payload):
    """Body for sending a message."""
    content: str = MISSING
    nonce: Union[int, str] = MISSING
    tts: bool = MISSING
    embeds: List[Dict[str, Any]] = MISSING
    allowed_mentions: Dict[str, Any] = MISSING
    message_reference: Dict[str, Any] = MISSING
    components: List[Dict[str, Any]] = MISSING
    sticker_ids: List[str] = MISSING
    flags: int = MISSING


@dataclass
class EditMessageOptions(Payload):
    """Body for editing a message."""
    content: Optional[str] = MISSING
    embeds: Optional[List[Dict[str, Any]]] = MISSING
    flags: Optional[int] = MISSING
    allowed_mentions: Optional[Dict[str, Any]] = MISSING
    components: Optional[List[Dict[str, Any]]] = MISSING
    attachments: Optional[List[Dict[str, Any]]] = MISSING


@dataclass
class BulkDeleteOptions(Payload):
    """Body for deleting several messages at once."""
    messages: List[str] = field(default_factory=list)


@dataclass
class EditPermissionsOptions(Payload):
    """Body for setting a permission overwrite on a channel."""
    type: int = MISSING
    allow: Optional[str] = MISSING
    deny: Optional[str] = MISSING


@dataclass
class CreateInviteOptions(Payload):
    """Body for creating a channel invite."""
    max_age: int = MISSING
    max_uses: int = MISSING
    temporary: bool = MISSING
    unique: bool = MISSING
    target_type: int = MISSING
    target_user_id: str = MISSING
    target_application_id: str = MISSING


@dataclass
class FollowChannelOptions(Payload):
    """Body for following a news channel."""
    webhook_channel_id: str = MISSING


@dataclass
class GroupDMAddRecipientOptions(Payload):
    """Body for adding a recipient to a group DM."""
    access_token: str = MISSING
    nick: str = MISSING


@dataclass
class StartThreadWithMessageOptions(Payload):
    """Body for starting a thread from an existing message."""
    name: str = MISSING
    auto_archive_duration: int = MISSING
    rate_limit_per_user: Optional[int] = MISSING


@dataclass
class StartThreadOptions(Payload):
    """Body for starting a thread that is not attached to a message."""
    name: str = MISSING
    auto_archive_duration: int = MISSING
    type: int = MISSING
    invitable: bool = MISSING
    rate_limit_per_user: Optional[int] = MISSING


@dataclass
class ArchivedThreadsQuery(Payload):
    """Query string for listing archived threads."""
    before: str = MISSING
    limit: int = MISSING
