# tests/test_matrix_channel.py

from __future__ import annotations

import pytest
from nio import RoomSendError

from jokebot.connectors.matrix_client import MatrixDeliveryChannel, MatrixSendError


class FakeNioClient:
    def __init__(self, response=None) -> None:
        self.response = response
        self.calls: list[dict] = []

    async def room_send(self, **kwargs):
        self.calls.append(kwargs)
        return self.response


@pytest.mark.asyncio
async def test_send_posts_text_message_to_room() -> None:
    client = FakeNioClient()
    await MatrixDeliveryChannel(client).send("!room:example.org", "hello")

    assert client.calls == [
        {
            "room_id": "!room:example.org",
            "message_type": "m.room.message",
            "content": {"msgtype": "m.text", "body": "hello"},
            "ignore_unverified_devices": True,
        }
    ]


@pytest.mark.asyncio
async def test_error_response_becomes_exception() -> None:
    client = FakeNioClient(response=RoomSendError("You are not in this room", "M_FORBIDDEN"))
    with pytest.raises(MatrixSendError):
        await MatrixDeliveryChannel(client).send("!room:example.org", "hello")
