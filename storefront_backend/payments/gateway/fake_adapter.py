"""Configurable fake payment gateway for development and testing.

Keeps intents in memory and never leaves the process. Honors idempotency
keys the way the real processor does: the same key returns the same
intent. Can be configured to fail so callers' PAYMENT_PROCESSOR_ERROR
path is testable.
"""

from uuid import uuid4

from core.exceptions import PaymentProcessorError
from payments.gateway.port import PaymentGateway, PaymentIntent


class FakeGateway(PaymentGateway):
    """Configurable in-memory payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Processor unavailable"
        self.calls: list[dict] = []
        self.intents: dict[str, PaymentIntent] = {}
        self._by_idempotency_key: dict[str, str] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Processor unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def set_status(self, intent_id: str, status: str) -> None:
        """Simulate the customer completing (or failing) a payment."""
        intent = self.intents[intent_id]
        self.intents[intent_id] = PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            status=status,
            amount=intent.amount,
            currency=intent.currency,
            metadata=intent.metadata,
        )

    def _fail_if_configured(self) -> None:
        if not self.should_succeed:
            raise PaymentProcessorError(self.failure_reason)

    def create_intent(
        self,
        amount_minor: int,
        currency: str,
        metadata: dict,
        idempotency_key: str,
    ) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_intent",
                "amount_minor": amount_minor,
                "currency": currency,
                "metadata": dict(metadata),
                "idempotency_key": idempotency_key,
            }
        )
        self._fail_if_configured()

        existing = self._by_idempotency_key.get(idempotency_key)
        if existing:
            return self.intents[existing]

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        intent = PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            status="requires_payment_method",
            amount=int(amount_minor),
            currency=currency,
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        self._by_idempotency_key[idempotency_key] = intent_id
        return intent

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        self.calls.append({"method": "retrieve_intent", "intent_id": intent_id})
        self._fail_if_configured()

        intent = self.intents.get(intent_id)
        if intent is None:
            raise PaymentProcessorError(f"No such payment_intent: {intent_id}")
        return intent
