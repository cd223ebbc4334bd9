"""Best-effort notification dispatch.

``Notifier.send`` never raises. Delivery problems are logged and dropped;
they must never fail the operation that triggered the notification.

Push is addressed by user id. Email needs the user's address, and is
skipped when none is known.
"""

import structlog

from commerce.notifications.channel import EmailPort, PushPort


class Notifier:
    def __init__(self, email: EmailPort, push: PushPort | None = None, logger=None) -> None:
        self.email = email
        self.push = push
        self.logger = logger or structlog.get_logger(__name__)

    def send(self, user_id, subject: str, body: str, html_body: str | None = None, email: str | None = None) -> bool:
        """Send on every channel that can reach the user. Returns True if at least one delivered."""
        channels = []
        if email:
            channels.append(("email", email, lambda: self.email.send(email, subject, body, html_body)))
        else:
            self.logger.info("notification_skipped", channel="email", user_id=str(user_id), reason="no_address")
        if self.push is not None:
            channels.append(("push", str(user_id), lambda: self.push.send(str(user_id), subject, body)))

        delivered = False
        for name, recipient, dispatch in channels:
            try:
                result = dispatch()
            except Exception:
                self.logger.exception("notification_error", channel=name, recipient=recipient)
                continue

            if result.get("status") == "sent":
                delivered = True
                self.logger.info(
                    "notification_sent", channel=name, recipient=recipient, message_id=result.get("message_id")
                )
            else:
                self.logger.warning(
                    "notification_failed", channel=name, recipient=recipient, error=result.get("error")
                )
        return delivered

    def send_template(self, user_id, template, context: dict, email: str | None = None) -> bool:
        try:
            rendered = template.render(context)
        except Exception:
            self.logger.exception("notification_render_failed", template=template.__name__, user_id=str(user_id))
            return False
        return self.send(user_id, rendered["subject"], rendered["body"], rendered.get("html_body"), email=email)
