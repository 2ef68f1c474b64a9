import asyncio
import logging
import weakref
from typing import Optional

from boxsdk import Client, JWTAuth
from boxsdk.exception import BoxException
from boxsdk.object.collaboration import CollaborationRole
from boxsdk.object.group import Group
from boxsdk.object.user import User
from requests.exceptions import RequestException

from models.data_models import BOX_ITEM_TYPES


GROUP_DESCRIPTION = "Slack channel collaboration group"
GROUP_INVITABILITY_LEVEL = "all_managed_users"
GROUP_ROLE_MEMBER = "member"

# boxsdk re-raises transport failures from requests unchanged
BOX_ERRORS = (BoxException, RequestException)


class BoxClient:
    """Group, membership and collaboration calls made as the Box enterprise service account"""

    def __init__(self, client: Client):
        self.client = client
        # Entries go away once no coroutine holds the lock
        self._group_locks = weakref.WeakValueDictionary()



    @classmethod
    def from_settings_file(cls, path: str) -> "BoxClient":
        """Authenticate as the enterprise service account described by a Box JWT app config"""
        auth = JWTAuth.from_settings_file(path)
        return cls(Client(auth))





    async def find_or_create_group(self, name: str) -> Group:
        """Find a group by exact name, creating it when it does not exist yet"""
        # Two events for a new channel must not both create the group
        lock = self._group_locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            self._group_locks[name] = lock

        async with lock:
            return await asyncio.to_thread(self._find_or_create_group, name)



    def _find_or_create_group(self, name: str) -> Group:
        for group in self.client.get_groups():
            if group.name == name:
                return group

        logging.info(f"Creating group {name}")
        return self.client.create_group(
            name,
            description=GROUP_DESCRIPTION,
            invitability_level=GROUP_INVITABILITY_LEVEL,
        )





    async def find_user_by_email(self, email: str) -> Optional[User]:
        """Enterprise user search, returning the user whose login is exactly the email"""
        return await asyncio.to_thread(self._find_user_by_email, email)



    def _find_user_by_email(self, email: str) -> Optional[User]:
        # filter_term is a prefix match on name and login
        for user in self.client.users(filter_term=email):
            if (user.login or "").lower() == email.lower():
                return user
        return None





    async def is_member(self, group_id: str, user_id: str) -> bool:
        return await asyncio.to_thread(self._is_member, group_id, user_id)



    def _is_member(self, group_id: str, user_id: str) -> bool:
        memberships = self.client.user(user_id).get_group_memberships()
        return any(m.group.id == group_id for m in memberships)





    async def add_member(self, group_id: str, email: str, role: str = GROUP_ROLE_MEMBER) -> bool:
        """Add a user to a group unless they are already in it"""
        logging.info(f"Adding {email} to group {group_id}")

        user = await self.find_user_by_email(email)
        if not user:
            logging.error(f"User {email} not found")
            return False

        if await self.is_member(group_id, user.id):
            logging.info(f"User {email} is already a member of group {group_id}")
            return False

        await asyncio.to_thread(self.client.group(group_id).add_member, user, role=role)
        logging.info(f"Added {email} to group {group_id}")
        return True





    async def remove_member(self, group_id: str, email: str) -> bool:
        """Remove the membership whose login matches the email, if any"""
        logging.info(f"Removing {email} from group {group_id}")
        return await asyncio.to_thread(self._remove_member, group_id, email)



    def _remove_member(self, group_id: str, email: str) -> bool:
        for membership in self.client.group(group_id).get_memberships():
            if membership.user.login.lower() == email.lower():
                self.client.group_membership(membership.id).delete()
                logging.info(f"Removed {email} from group {group_id}")
                return True

        logging.error(f"User {email} is not a member of group {group_id}")
        return False





    async def create_collaboration(
        self,
        group_id: str,
        item_id: str,
        item_type: str,
        as_user_id: str,
        role: str = CollaborationRole.VIEWER,
    ):
        """Give a group access to a file or folder, acting as the given Box user"""
        if item_type not in BOX_ITEM_TYPES:
            raise ValueError(f"Unsupported item type: {item_type}")

        return await asyncio.to_thread(
            self._create_collaboration, group_id, item_id, item_type, as_user_id, role
        )



    def _create_collaboration(self, group_id, item_id, item_type, as_user_id, role):
        # as_user returns a new client, the shared one keeps acting as the service account
        user_client = self.client.as_user(self.client.user(as_user_id))
        item = user_client.file(item_id) if item_type == "file" else user_client.folder(item_id)

        collaboration = item.collaborate(user_client.group(group_id), role)
        logging.info(f"Gave group {group_id} {role} access to {item_type} {item_id} (collaboration {collaboration.id})")
        return collaboration
