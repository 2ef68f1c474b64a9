from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from core.config import SlackConfig
from main import create_app
from models.data_models import SlackUser
from services.box_client import BoxClient
from services.slack_client import SlackClient

VERIFICATION_TOKEN = "test-verification-token"


def _slack_user(user_id="U1", name="alice", email="alice@example.com", is_bot=False):
    return SlackUser(id=user_id, name=name, email=email, is_bot=is_bot)


@pytest.fixture()
def group():
    return SimpleNamespace(id="g1", name="slack-C1")


@pytest.fixture()
def slack():
    """Slack adapter double; get_user returns alice unless a test overrides it."""
    fake = AsyncMock(spec=SlackClient)
    fake.get_user.return_value = _slack_user()
    fake.list_channel_members.return_value = []
    return fake


@pytest.fixture()
def box(group):
    """Box adapter double; every channel resolves to the same group."""
    fake = AsyncMock(spec=BoxClient)
    fake.find_or_create_group.return_value = group
    fake.find_user_by_email.return_value = SimpleNamespace(id="bu1", login="alice@example.com")
    fake.add_member.return_value = True
    fake.remove_member.return_value = True
    fake.create_collaboration.return_value = SimpleNamespace(id="c1")
    return fake


@pytest.fixture()
def box_sdk():
    """A stand-in for the boxsdk Client."""
    return MagicMock()


@pytest.fixture()
def app(slack, box):
    config = SlackConfig(verification_token=VERIFICATION_TOKEN, bot_token="xoxb-test")
    return create_app(slack_config=config, slack_client=slack, box_client=box)


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def make_slack_user():
    return _slack_user


@pytest.fixture()
def verification_token():
    return VERIFICATION_TOKEN
