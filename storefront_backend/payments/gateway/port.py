"""Payment gateway port (abstract interface).

Defines the contract every payment processor adapter implements, so the
reconciler can run against StripeGateway in production and FakeGateway in
development and tests without changing any order or cart code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PaymentIntent:
    """Processor-side payment intent as the storefront sees it."""

    id: str
    client_secret: str
    status: str
    amount: int
    currency: str
    metadata: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_intent(
        self,
        amount_minor: int,
        currency: str,
        metadata: dict,
        idempotency_key: str,
    ) -> PaymentIntent:
        """Create a payment intent for `amount_minor` (cents)."""
        ...

    @abstractmethod
    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        """Fetch the current state of an existing payment intent."""
        ...
