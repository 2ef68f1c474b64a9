import logging
from typing import Optional

from core.exceptions import SlackLookupError
from models.data_models import BOX_ITEM_TYPES, BoxAddRequest
from services.box_client import BOX_ERRORS, BoxClient
from services.group_sync import GroupSyncService
from services.slack_client import SlackClient


COMMAND = "/boxadd"

USAGE_MESSAGE = "Invalid input. Example usage: /boxadd file 123456"
SUCCESS_MESSAGE = "Provided all users with access to item"
FAILURE_MESSAGE = "Could not provide all users access"



def parse_boxadd_text(text: str) -> Optional[BoxAddRequest]:
    """Parse "<file|folder> <item id>", returning None when the text does not match"""
    parts = (text or "").split()
    if len(parts) != 2:
        return None

    item_type, item_id = parts
    if item_type not in BOX_ITEM_TYPES or not (item_id.isascii() and item_id.isdigit()):
        return None

    return BoxAddRequest(item_type=item_type, item_id=item_id)



class BoxAddCommand:
    """Handles /boxadd, adding a channel's group as collaborators on a file or folder"""

    def __init__(self, slack: SlackClient, box: BoxClient, group_sync: GroupSyncService):
        self.slack = slack
        self.box = box
        self.group_sync = group_sync





    async def handle(self, channel_id: str, user_id: str, text: str) -> str:
        """Run the command and return the message shown to the invoking user"""
        request = parse_boxadd_text(text)
        if not request:
            return USAGE_MESSAGE

        group = await self.group_sync.get_group(channel_id)

        try:
            slack_user = await self.slack.get_user(user_id)
        except SlackLookupError:
            return f"Could not find a Slack user with ID {user_id}"

        email = slack_user.email
        if not email:
            return f"Could not find an email address for Slack user {slack_user.name}"

        box_user = await self.box.find_user_by_email(email)
        if not box_user:
            return f"Could not find a Box user with email {email}"

        try:
            await self.box.create_collaboration(
                group.id,
                request.item_id,
                request.item_type,
                as_user_id=box_user.id,
            )
        except BOX_ERRORS as e:
            logging.error(f"Error adding group {group.id} to {request.item_type} {request.item_id}: {e}")
            return FAILURE_MESSAGE

        return SUCCESS_MESSAGE
