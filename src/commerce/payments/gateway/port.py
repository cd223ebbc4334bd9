"""Payment gateway port.

The backend only needs two things from a gateway: an intent id that the
client pays against, and a way to check the proof the client returns.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class GatewayError(Exception):
    """The gateway could not be reached or rejected the request."""


@dataclass(frozen=True)
class PaymentProof:
    """What the client hands back after paying against an intent."""

    payment_id: str
    signature: str


class PaymentGateway(ABC):
    @abstractmethod
    def create_intent(self, order) -> str:
        """Register the order total with the gateway and return its intent id."""
        ...

    @abstractmethod
    def verify(self, intent_id: str, proof: PaymentProof) -> bool:
        """True if ``proof`` shows the intent was paid."""
        ...
