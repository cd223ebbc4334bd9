"""Push channel port."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    @abstractmethod
    def send(self, recipient: str, title: str, body: str, data: dict | None = None) -> dict:
        """Send one push notification. Same result shape as ``EmailPort.send``."""
        ...
