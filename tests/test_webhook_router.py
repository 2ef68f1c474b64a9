import requests
from boxsdk.exception import BoxAPIException

from core.exceptions import SlackLookupError
from services.box_command import FAILURE_MESSAGE, SUCCESS_MESSAGE, USAGE_MESSAGE


def _event(token, event_type="member_joined_channel", user="U1", channel="C1"):
    return {
        "token": token,
        "type": "event_callback",
        "event": {"type": event_type, "channel": channel, "user": user},
    }


def _command(token, text="file 123456"):
    return {
        "token": token,
        "command": "/boxadd",
        "channel_id": "C1",
        "user_id": "U1",
        "text": text,
    }


def test_rejects_wrong_verification_token(client, slack, box):
    response = client.post("/event", json=_event("not-the-token"))

    assert response.status_code == 400
    assert response.text == "Slack Verification Failed"
    slack.get_user.assert_not_awaited()
    box.find_or_create_group.assert_not_awaited()


def test_rejects_missing_token_before_url_verification(client):
    response = client.post("/event", json={"type": "url_verification", "challenge": "xyz123"})

    assert response.status_code == 400


def test_url_verification_echoes_challenge(client, verification_token):
    response = client.post(
        "/event",
        json={"token": verification_token, "type": "url_verification", "challenge": "xyz123"},
    )

    assert response.status_code == 200
    assert response.json() == {"challenge": "xyz123"}


def test_member_joined_event_adds_member(client, slack, box, verification_token):
    response = client.post("/event", json=_event(verification_token))

    assert response.status_code == 200
    assert response.content == b""
    slack.get_user.assert_awaited_once_with("U1")
    box.find_or_create_group.assert_awaited_once_with("slack-C1")
    box.add_member.assert_awaited_once_with("g1", "alice@example.com")


def test_member_left_event_removes_member(client, box, verification_token):
    response = client.post("/event", json=_event(verification_token, "member_left_channel"))

    assert response.status_code == 200
    box.remove_member.assert_awaited_once_with("g1", "alice@example.com")


def test_event_for_unknown_user_is_acknowledged(client, slack, box, verification_token):
    slack.get_user.side_effect = SlackLookupError("No user data found for U404")

    response = client.post("/event", json=_event(verification_token, user="U404"))

    assert response.status_code == 200
    box.find_or_create_group.assert_not_awaited()


def test_event_box_error_is_acknowledged(client, box, verification_token):
    box.add_member.side_effect = BoxAPIException(status=500)

    response = client.post("/event", json=_event(verification_token))

    assert response.status_code == 200


def test_boxadd_command_form_post(client, box, verification_token):
    response = client.post("/event", data=_command(verification_token))

    assert response.status_code == 200
    assert response.text == SUCCESS_MESSAGE
    box.create_collaboration.assert_awaited_once_with("g1", "123456", "file", as_user_id="bu1")


def test_boxadd_command_usage_error(client, box, verification_token):
    response = client.post("/event", data=_command(verification_token, text="badtype abc"))

    assert response.status_code == 200
    assert response.text == USAGE_MESSAGE
    box.create_collaboration.assert_not_awaited()


def test_form_post_with_wrong_token(client, box):
    response = client.post("/event", data=_command("nope"))

    assert response.status_code == 400
    box.create_collaboration.assert_not_awaited()


def test_unclassified_payload_is_rejected(client, verification_token):
    response = client.post("/event", json={"token": verification_token, "type": "app_rate_limited"})

    assert response.status_code == 400


def test_unknown_command_is_rejected(client, verification_token):
    response = client.post("/event", data={"token": verification_token, "command": "/other"})

    assert response.status_code == 400


def test_malformed_json_is_rejected(client):
    response = client.post(
        "/event", content=b"{not json", headers={"content-type": "application/json"}
    )

    assert response.status_code == 400


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_event_box_network_error_is_acknowledged(client, box, verification_token):
    box.add_member.side_effect = requests.ConnectionError("reset")

    response = client.post("/event", json=_event(verification_token))

    assert response.status_code == 200


def test_boxadd_command_box_network_error(client, box, verification_token):
    box.find_user_by_email.side_effect = requests.ConnectionError("reset")

    response = client.post("/event", data=_command(verification_token))

    assert response.status_code == 200
    assert response.text == "Could not reach Box, please try again later"


def test_boxadd_command_collaboration_network_error(client, box, verification_token):
    box.create_collaboration.side_effect = requests.ConnectionError("reset")

    response = client.post("/event", data=_command(verification_token))

    assert response.status_code == 200
    assert response.text == FAILURE_MESSAGE


def test_event_callback_without_event_object_is_rejected(client, slack, verification_token):
    response = client.post(
        "/event", json={"token": verification_token, "type": "event_callback", "event": "oops"}
    )

    assert response.status_code == 400
    slack.get_user.assert_not_awaited()


def test_form_event_callback_is_rejected(client, slack, verification_token):
    response = client.post("/event", data={"token": verification_token, "type": "event_callback"})

    assert response.status_code == 400
    slack.get_user.assert_not_awaited()


def test_non_string_token_is_rejected(client):
    response = client.post("/event", json={"token": 12345, "type": "url_verification", "challenge": "x"})

    assert response.status_code == 400
