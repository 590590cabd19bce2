"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- StripeGateway for production (PAYMENTS["GATEWAY"] == "stripe")
- FakeGateway for development and testing (PAYMENTS["GATEWAY"] == "fake")
"""

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway, PaymentIntent
from payments.gateway.stripe_adapter import StripeGateway

_current_gateway: PaymentGateway | None = None


def payments_config() -> dict:
    cfg = getattr(settings, "PAYMENTS", {}) or {}
    return cfg if isinstance(cfg, dict) else {}


def _build_default_gateway() -> PaymentGateway:
    cfg = payments_config()
    name = str(cfg.get("GATEWAY") or "stripe").strip().lower()

    if name == "fake":
        return FakeGateway()
    if name == "stripe":
        stripe_cfg = cfg.get("STRIPE") or {}
        return StripeGateway(stripe_cfg.get("SECRET_KEY") or "")

    raise ImproperlyConfigured(f"Unknown PAYMENTS['GATEWAY']: {name!r} (expected 'stripe' or 'fake')")


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_default_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the settings-configured gateway."""
    global _current_gateway
    _current_gateway = None


__all__ = [
    "FakeGateway",
    "PaymentGateway",
    "PaymentIntent",
    "StripeGateway",
    "get_gateway",
    "set_gateway",
    "reset_gateway",
    "payments_config",
]
