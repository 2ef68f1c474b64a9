from dataclasses import dataclass, field
from typing import Dict, List, Optional


MEMBER_JOINED_CHANNEL = "member_joined_channel"
MEMBER_LEFT_CHANNEL = "member_left_channel"

GROUP_NAME_PREFIX = "slack-"
SLACKBOT_USER_ID = "USLACKBOT"

BOX_ITEM_TYPES = ("file", "folder")



def mirror_group_name(channel_id: str) -> str:
    """Box group name for a Slack channel"""
    return f"{GROUP_NAME_PREFIX}{channel_id}"



@dataclass
class SlackUser:
    id: str
    name: str
    email: Optional[str] = None
    is_bot: bool = False

    @classmethod
    def from_api(cls, user: Dict) -> "SlackUser":
        profile = user.get("profile") or {}
        return cls(
            id=user.get("id", ""),
            name=user.get("name") or profile.get("real_name", ""),
            email=profile.get("email") or None,
            is_bot=bool(user.get("is_bot")) or user.get("id") == SLACKBOT_USER_ID,
        )



@dataclass
class SlackEvent:
    type: str
    channel: str
    user: str

    @classmethod
    def from_payload(cls, event: Dict) -> "SlackEvent":
        return cls(
            type=event.get("type", ""),
            channel=event.get("channel", ""),
            user=event.get("user", ""),
        )



@dataclass
class BoxAddRequest:
    item_type: str
    item_id: str



@dataclass
class ChannelSyncResult:
    channel_id: str
    group_id: str
    added: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
