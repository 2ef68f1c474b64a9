import asyncio
import logging

from boxsdk.object.group import Group

from core.exceptions import SlackLookupError
from models.data_models import (
    MEMBER_JOINED_CHANNEL,
    MEMBER_LEFT_CHANNEL,
    ChannelSyncResult,
    SlackUser,
    mirror_group_name,
)
from services.box_client import BoxClient
from services.slack_client import SlackClient


class GroupSyncService:
    """Keeps each channel's Box group in step with the channel's members"""

    def __init__(self, slack: SlackClient, box: BoxClient):
        self.slack = slack
        self.box = box





    async def get_group(self, channel_id: str) -> Group:
        """Find or create the group for a channel ID"""
        logging.info(f"Get group for channel {channel_id}")
        return await self.box.find_or_create_group(mirror_group_name(channel_id))





    async def sync_user(self, user: SlackUser, event_type: str, channel_id: str):
        """
        Sync a user to a group, or if the user is a bot, sync the whole
        channel to the group.
        """
        logging.info(f"Received {event_type} for {user.name}")

        group = await self.get_group(channel_id)

        if user.is_bot:
            return await self.sync_channel(channel_id, group.id)

        if not user.email:
            logging.info(f"User {user.name} has no email, skipping")
            return None

        if event_type == MEMBER_JOINED_CHANNEL:
            return await self.box.add_member(group.id, user.email)
        elif event_type == MEMBER_LEFT_CHANNEL:
            return await self.box.remove_member(group.id, user.email)

        logging.debug(f"Ignoring {event_type} in channel {channel_id}")
        return None





    async def sync_channel(self, channel_id: str, group_id: str) -> ChannelSyncResult:
        """Add every human member of a channel to its group"""
        logging.info(f"Syncing channel {channel_id} to group {group_id}")

        result = ChannelSyncResult(channel_id=channel_id, group_id=group_id)
        member_ids = await self.slack.list_channel_members(channel_id)

        outcomes = await asyncio.gather(
            *(self._sync_member(user_id, group_id) for user_id in member_ids),
            return_exceptions=True,
        )

        for user_id, outcome in zip(member_ids, outcomes):
            if isinstance(outcome, BaseException):
                logging.error(f"Failed to sync {user_id} to group {group_id}: {outcome}")
                result.failed[user_id] = str(outcome)
            elif outcome:
                result.added.append(user_id)
            else:
                result.skipped.append(user_id)

        logging.info(
            f"Synced channel {channel_id}: {len(result.added)} added, "
            f"{len(result.skipped)} skipped, {len(result.failed)} failed"
        )
        return result





    async def _sync_member(self, user_id: str, group_id: str) -> bool:
        """Add one channel member to the group; False when there is nothing to add"""
        try:
            user = await self.slack.get_user(user_id)
        except SlackLookupError:
            return False

        if user.is_bot or not user.email:
            return False

        return await self.box.add_member(group_id, user.email)
