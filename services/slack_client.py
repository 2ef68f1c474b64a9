import asyncio
import logging
from typing import List

import aiohttp
from slack_sdk.errors import SlackClientError
from slack_sdk.web.async_client import AsyncWebClient

from core.exceptions import SlackLookupError
from models.data_models import SlackUser


MEMBERS_PAGE_SIZE = 100

# AsyncWebClient lets aiohttp transport errors and timeouts through as they are
SLACK_ERRORS = (SlackClientError, aiohttp.ClientError, asyncio.TimeoutError)


class SlackClient:
    """Read-only lookups against the Slack Web API with the bot token"""

    def __init__(self, bot_token: str = None, client: AsyncWebClient = None):
        self.client = client or AsyncWebClient(token=bot_token)





    async def get_user(self, user_id: str) -> SlackUser:
        """Convert a Slack user ID to a full user"""
        try:
            response = await self.client.users_info(user=user_id)
        except SLACK_ERRORS as e:
            logging.error(f"Slack users.info failed for {user_id}: {e}")
            raise SlackLookupError(f"Could not look up Slack user {user_id}") from e

        user = response.get("user")
        if not user:
            logging.error(f"No user data found for {user_id}")
            raise SlackLookupError(f"No user data found for {user_id}")

        return SlackUser.from_api(user)





    async def list_channel_members(self, channel_id: str) -> List[str]:
        """List the IDs of every member of a channel, following pagination cursors"""
        members: List[str] = []
        cursor = None

        while True:
            try:
                response = await self.client.conversations_members(
                    channel=channel_id,
                    limit=MEMBERS_PAGE_SIZE,
                    cursor=cursor,
                )
            except SLACK_ERRORS as e:
                logging.error(f"Slack conversations.members failed for {channel_id}: {e}")
                raise SlackLookupError(f"Could not list members of channel {channel_id}") from e

            members.extend(response.get("members") or [])

            cursor = (response.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                break

        logging.info(f"Found {len(members)} members in channel {channel_id}")
        return members
