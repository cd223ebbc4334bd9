"""Fake push adapter that records notifications for test assertions."""

from uuid import uuid4

from commerce.notifications.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.should_succeed = True

    def configure(self, should_succeed: bool = True):
        self.should_succeed = should_succeed

    def send(self, recipient: str, title: str, body: str, data: dict | None = None) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": "Push delivery failed"}

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append(
            {"message_id": message_id, "recipient": recipient, "title": title, "body": body, "data": data}
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent_pushes.clear()
        self.should_succeed = True
