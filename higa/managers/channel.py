"""
Channel resource manager.

Covers every endpoint rooted at ``/channels/{channel_id}``: the channel
itself, its messages, pins, invites, permission overwrites, group DM
recipients and threads.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from ..cache import CacheManager
from ..http import HTTPClient, Route
from ..models import (
    ArchivedThreadsQuery,
    BulkDeleteOptions,
    CreateInviteOptions,
    CreateMessageOptions,
    EditMessageOptions,
    EditPermissionsOptions,
    FollowChannelOptions,
    GetMessagesQuery,
    GroupDMAddRecipientOptions,
    ModifyChannelOptions,
    StartThreadOptions,
    StartThreadWithMessageOptions,
)
from .base import ResourceManager, to_body


# The API accepts between 2 and 100 ids per bulk delete and returns at most
# 100 messages per history page.
MAX_BULK_DELETE = 100

Channel = Dict[str, Any]
Message = Dict[str, Any]


class ChannelManager(ResourceManager):
    """
    Manager for channels and the resources nested under them.

    Channels and threads are cached in the ``channels`` partition, single
    messages in ``messages`` and created invites in ``invites``. Collections
    (message history, pins, invites, thread members, archived threads) are
    returned as fetched and never cached.
    """

    def __init__(self, http: HTTPClient, cache: CacheManager):
        """
        Initialize the channel manager.

        Args:
            http: Transport used for every request
            cache: The client's cache; this manager uses several partitions
        """
        super().__init__(http, cache.channels)
        self.messages = cache.messages
        self.invites = cache.invites

    # Channels

    async def get_channel(self, channel_id: str) -> Channel:
        """
        Get a channel.

        The cached representation is returned without a request when one is
        present.

        Args:
            channel_id: Channel identifier

        Returns:
            Channel object
        """
        return await self._fetch(
            channel_id,
            Route('GET', '/channels/{channel_id}', channel_id=channel_id)
        )

    async def modify_channel(
        self,
        channel_id: str,
        options: ModifyChannelOptions,
        reason: Optional[str] = None
    ) -> Channel:
        """
        Modify a channel's settings.

        Args:
            channel_id: Channel identifier
            options: Fields to change
            reason: Reason for the audit log

        Returns:
            The updated channel object, which also replaces the cached one
        """
        return await self._write(
            channel_id,
            Route('PATCH', '/channels/{channel_id}', channel_id=channel_id),
            body=to_body(options),
            reason=reason
        )

    async def delete_channel(self, channel_id: str, reason: Optional[str] = None) -> None:
        """
        Delete a channel, or close a private message.

        Args:
            channel_id: Channel identifier
            reason: Reason for the audit log
        """
        await self._delete(
            channel_id,
            Route('DELETE', '/channels/{channel_id}', channel_id=channel_id),
            reason=reason
        )

    # Messages

    async def get_channel_messages(
        self,
        channel_id: str,
        options: Optional[GetMessagesQuery] = None
    ) -> List[Message]:
        """
        Get messages from a channel.

        Args:
            channel_id: Channel identifier
            options: Pagination parameters (around/before/after/limit)

        Returns:
            List of message objects, most recent first
        """
        return await self._query(
            Route('GET', '/channels/{channel_id}/messages', channel_id=channel_id),
            options
        )

    async def get_channel_message(self, channel_id: str, message_id: str) -> Message:
        """
        Get a single message, from the cache when possible.

        Args:
            channel_id: Channel identifier
            message_id: Message identifier

        Returns:
            Message object
        """
        return await self._fetch(
            message_id,
            Route('GET', '/channels/{channel_id}/messages/{message_id}',
                  channel_id=channel_id, message_id=message_id),
            cache=self.messages
        )

    async def create_message(
        self,
        channel_id: str,
        options: CreateMessageOptions,
        reason: Optional[str] = None
    ) -> Message:
        """
        Send a message in a channel.

        Args:
            channel_id: Channel identifier
            options: Message content
            reason: Reason for the audit log

        Returns:
            The created message object
        """
        return await self._write(
            None,
            Route('POST', '/channels/{channel_id}/messages', channel_id=channel_id),
            body=to_body(options),
            reason=reason,
            cache=self.messages
        )

    async def crosspost_message(
        self,
        channel_id: str,
        message_id: str,
        reason: Optional[str] = None
    ) -> Message:
        """Publish a message from a news channel to every following channel."""
        return await self._write(
            message_id,
            Route('POST', '/channels/{channel_id}/messages/{message_id}/crosspost',
                  channel_id=channel_id, message_id=message_id),
            reason=reason,
            cache=self.messages
        )

    async def edit_message(
        self,
        channel_id: str,
        message_id: str,
        options: EditMessageOptions,
        reason: Optional[str] = None
    ) -> Message:
        """
        Edit a message.

        Args:
            channel_id: Channel identifier
            message_id: Message identifier
            options: Fields to change
            reason: Reason for the audit log

        Returns:
            The updated message object, which also replaces the cached one
        """
        return await self._write(
            message_id,
            Route('PATCH', '/channels/{channel_id}/messages/{message_id}',
                  channel_id=channel_id, message_id=message_id),
            body=to_body(options),
            reason=reason,
            cache=self.messages
        )

    async def delete_message(
        self,
        channel_id: str,
        message_id: str,
        reason: Optional[str] = None
    ) -> None:
        """Delete a message."""
        await self._delete(
            message_id,
            Route('DELETE', '/channels/{channel_id}/messages/{message_id}',
                  channel_id=channel_id, message_id=message_id),
            reason=reason,
            cache=self.messages
        )

    async def bulk_delete_messages(
        self,
        channel_id: str,
        messages: Union[BulkDeleteOptions, Sequence[str], int],
        reason: Optional[str] = None
    ) -> None:
        """
        Delete several messages in one request.

        When ``messages`` is an integer N, the N most recent messages are
        fetched first and their ids are deleted. If fewer exist, whatever was
        returned is deleted. A failed fetch aborts before anything is deleted.
        Counts above 100 are capped at 100, the most the API returns and
        accepts in one call. The API rejects a request holding a single id,
        so delete one message with ``delete_message``.

        Args:
            channel_id: Channel identifier
            messages: Message ids, a BulkDeleteOptions record, or a count
            reason: Reason for the audit log

        Raises:
            ValueError: If the count is lower than 1
            TypeError: If ``messages`` has an unsupported type
        """
        if isinstance(messages, bool):
            raise TypeError("messages must be a list of ids, BulkDeleteOptions or a count")

        if isinstance(messages, int):
            if messages < 1:
                raise ValueError(f"Message count must be at least 1, got {messages}")

            limit = min(messages, MAX_BULK_DELETE)
            recent = await self.get_channel_messages(channel_id, GetMessagesQuery(limit=limit))
            options = BulkDeleteOptions(messages=[message['id'] for message in recent])

            if not options.messages:
                self.logger.info(f"No messages to delete in channel {channel_id}")
                return

        elif isinstance(messages, BulkDeleteOptions):
            options = messages
        elif isinstance(messages, (list, tuple)):
            options = BulkDeleteOptions(messages=list(messages))
        else:
            raise TypeError("messages must be a list of ids, BulkDeleteOptions or a count")

        await self.http.request(
            Route('POST', '/channels/{channel_id}/messages/bulk-delete', channel_id=channel_id),
            body=options.to_dict(),
            reason=reason
        )

        for message_id in options.messages:
            self.messages.delete(message_id)

        self.logger.info(f"Bulk deleted {len(options.messages)} messages in channel {channel_id}")

    # Permission overwrites

    async def edit_channel_permissions(
        self,
        channel_id: str,
        overwrite_id: str,
        options: EditPermissionsOptions,
        reason: Optional[str] = None
    ) -> None:
        """
        Set the permission overwrite for a role or a member.

        Args:
            channel_id: Channel identifier
            overwrite_id: Role or user identifier
            options: Allowed and denied permission bitsets
            reason: Reason for the audit log
        """
        await self._action(
            Route('PUT', '/channels/{channel_id}/permissions/{overwrite_id}',
                  channel_id=channel_id, overwrite_id=overwrite_id),
            options,
            reason
        )

    async def delete_channel_permission(
        self,
        channel_id: str,
        overwrite_id: str,
        reason: Optional[str] = None
    ) -> None:
        """Remove the permission overwrite for a role or a member."""
        await self._action(
            Route('DELETE', '/channels/{channel_id}/permissions/{overwrite_id}',
                  channel_id=channel_id, overwrite_id=overwrite_id),
            reason=reason
        )

    # Invites

    async def get_channel_invites(self, channel_id: str) -> List[Dict[str, Any]]:
        """Get every invite of a channel."""
        return await self._query(
            Route('GET', '/channels/{channel_id}/invites', channel_id=channel_id)
        )

    async def create_channel_invite(
        self,
        channel_id: str,
        options: Optional[CreateInviteOptions] = None,
        reason: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create an invite for a channel.

        Args:
            channel_id: Channel identifier
            options: Invite settings; defaults are used when omitted
            reason: Reason for the audit log

        Returns:
            The invite object, cached under its code
        """
        return await self._write(
            None,
            Route('POST', '/channels/{channel_id}/invites', channel_id=channel_id),
            body=to_body(options or CreateInviteOptions()),
            reason=reason,
            cache=self.invites,
            key='code'
        )

    # News channels

    async def follow_news_channel(
        self,
        channel_id: str,
        options: FollowChannelOptions,
        reason: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Follow a news channel, relaying its posts to another channel.

        Returns:
            Followed channel object
        """
        return await self._action(
            Route('POST', '/channels/{channel_id}/followers', channel_id=channel_id),
            options,
            reason
        )

    async def trigger_typing_indicator(self, channel_id: str, reason: Optional[str] = None) -> None:
        """Show the typing indicator in a channel."""
        await self._action(
            Route('POST', '/channels/{channel_id}/typing', channel_id=channel_id),
            reason=reason
        )

    # Pins

    async def get_pinned_messages(self, channel_id: str) -> List[Message]:
        """Get the pinned messages of a channel."""
        return await self._query(
            Route('GET', '/channels/{channel_id}/pins', channel_id=channel_id)
        )

    async def pin_message(
        self,
        channel_id: str,
        message_id: str,
        reason: Optional[str] = None
    ) -> None:
        """Pin a message."""
        await self._action(
            Route('PUT', '/channels/{channel_id}/pins/{message_id}',
                  channel_id=channel_id, message_id=message_id),
            reason=reason
        )

    async def unpin_message(
        self,
        channel_id: str,
        message_id: str,
        reason: Optional[str] = None
    ) -> None:
        """Unpin a message."""
        await self._action(
            Route('DELETE', '/channels/{channel_id}/pins/{message_id}',
                  channel_id=channel_id, message_id=message_id),
            reason=reason
        )

    # Group DMs

    async def group_dm_add_recipient(
        self,
        channel_id: str,
        user_id: str,
        options: GroupDMAddRecipientOptions,
        reason: Optional[str] = None
    ) -> None:
        """
        Add a recipient to a group DM.

        Args:
            channel_id: Group DM channel identifier
            user_id: User identifier
            options: OAuth2 access token of the user and optional nickname
            reason: Reason for the audit log
        """
        await self._action(
            Route('PUT', '/channels/{channel_id}/recipients/{user_id}',
                  channel_id=channel_id, user_id=user_id),
            options,
            reason
        )

    async def group_dm_remove_recipient(
        self,
        channel_id: str,
        user_id: str,
        reason: Optional[str] = None
    ) -> None:
        """Remove a recipient from a group DM."""
        await self._action(
            Route('DELETE', '/channels/{channel_id}/recipients/{user_id}',
                  channel_id=channel_id, user_id=user_id),
            reason=reason
        )

    # Threads

    async def start_thread_with_message(
        self,
        channel_id: str,
        message_id: str,
        options: StartThreadWithMessageOptions,
        reason: Optional[str] = None
    ) -> Channel:
        """
        Start a thread from an existing message.

        Args:
            channel_id: Parent channel identifier
            message_id: Message the thread hangs off
            options: Thread settings
            reason: Reason for the audit log

        Returns:
            The thread channel object, cached with the other channels
        """
        return await self._write(
            None,
            Route('POST', '/channels/{channel_id}/messages/{message_id}/threads',
                  channel_id=channel_id, message_id=message_id),
            body=to_body(options),
            reason=reason
        )

    async def start_thread_without_message(
        self,
        channel_id: str,
        options: StartThreadOptions,
        reason: Optional[str] = None
    ) -> Channel:
        """Start a thread that is not attached to a message."""
        return await self._write(
            None,
            Route('POST', '/channels/{channel_id}/threads', channel_id=channel_id),
            body=to_body(options),
            reason=reason
        )

    async def join_thread(self, channel_id: str, reason: Optional[str] = None) -> None:
        """Add the current user to a thread."""
        await self._action(
            Route('PUT', '/channels/{channel_id}/thread-members/@me', channel_id=channel_id),
            reason=reason
        )

    async def add_thread_member(
        self,
        channel_id: str,
        user_id: str,
        reason: Optional[str] = None
    ) -> None:
        """Add another member to a thread."""
        await self._action(
            Route('PUT', '/channels/{channel_id}/thread-members/{user_id}',
                  channel_id=channel_id, user_id=user_id),
            reason=reason
        )

    async def leave_thread(self, channel_id: str, reason: Optional[str] = None) -> None:
        """Remove the current user from a thread."""
        await self._action(
            Route('DELETE', '/channels/{channel_id}/thread-members/@me', channel_id=channel_id),
            reason=reason
        )

    async def remove_thread_member(
        self,
        channel_id: str,
        user_id: str,
        reason: Optional[str] = None
    ) -> None:
        """Remove another member from a thread."""
        await self._action(
            Route('DELETE', '/channels/{channel_id}/thread-members/{user_id}',
                  channel_id=channel_id, user_id=user_id),
            reason=reason
        )

    async def get_thread_member(self, channel_id: str, user_id: str) -> Dict[str, Any]:
        """Get a member of a thread."""
        return await self._query(
            Route('GET', '/channels/{channel_id}/thread-members/{user_id}',
                  channel_id=channel_id, user_id=user_id)
        )

    async def list_thread_members(self, channel_id: str) -> List[Dict[str, Any]]:
        """List the members of a thread."""
        return await self._query(
            Route('GET', '/channels/{channel_id}/thread-members', channel_id=channel_id)
        )

    async def list_public_archived_threads(
        self,
        channel_id: str,
        options: Optional[ArchivedThreadsQuery] = None
    ) -> Dict[str, Any]:
        """
        List the archived public threads of a channel.

        Args:
            channel_id: Parent channel identifier
            options: Pagination parameters (before/limit)

        Returns:
            Object with ``threads``, ``members`` and ``has_more``
        """
        return await self._query(
            Route('GET', '/channels/{channel_id}/threads/archived/public', channel_id=channel_id),
            options
        )

    async def list_private_archived_threads(
        self,
        channel_id: str,
        options: Optional[ArchivedThreadsQuery] = None
    ) -> Dict[str, Any]:
        """List the archived private threads of a channel."""
        return await self._query(
            Route('GET', '/channels/{channel_id}/threads/archived/private', channel_id=channel_id),
            options
        )

    async def list_joined_private_archived_threads(
        self,
        channel_id: str,
        options: Optional[ArchivedThreadsQuery] = None
    ) -> Dict[str, Any]:
        """List the archived private threads the current user has joined."""
        return await self._query(
            Route('GET', '/channels/{channel_id}/users/@me/threads/archived/private',
                  channel_id=channel_id),
            options
        )
