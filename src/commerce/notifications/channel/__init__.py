"""Notification channel selection."""

from commerce.notifications.channel.email_port import EmailPort
from commerce.notifications.channel.fake_email import FakeEmailAdapter
from commerce.notifications.channel.fake_push import FakePushAdapter
from commerce.notifications.channel.push_port import PushPort
from commerce.notifications.channel.smtp_email import SMTPEmailAdapter


def build_email_channel(settings) -> EmailPort:
    if settings.email_backend == "fake":
        return FakeEmailAdapter()
    if settings.email_backend == "smtp":
        return SMTPEmailAdapter(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.notification_sender,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.request_timeout_seconds,
        )
    raise ValueError(f"Unknown email backend: {settings.email_backend}")


def build_push_channel(settings) -> PushPort:  # noqa: ARG001
    # Only the in-memory adapter exists until a push provider is chosen
    return FakePushAdapter()
