# payments/gateway/stripe_adapter.py
from __future__ import annotations

import json
import logging
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from core.exceptions import PaymentProcessorError
from payments.gateway.port import PaymentGateway, PaymentIntent

logger = logging.getLogger(__name__)

STRIPE_BASE = "https://api.stripe.com/v1"


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _parse_json_or_text(raw: str) -> dict[str, Any]:
    raw = raw or ""
    try:
        parsed = json.loads(raw)
    except ValueError:
        return {"kind": "text", "raw": raw}
    if isinstance(parsed, dict):
        return {"kind": "json", "json": parsed, "raw": raw}
    return {"kind": "json_non_object", "json": parsed, "raw": raw}


def _form_encode(params: dict) -> bytes:
    """
    Stripe takes form-encoded bodies with bracketed nested keys:
    {"metadata": {"order_id": "x"}} -> metadata[order_id]=x
    """
    flat: list[tuple[str, str]] = []
    for key, value in params.items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                flat.append((f"{key}[{sub_key}]", str(sub_value)))
        elif isinstance(value, bool):
            flat.append((key, "true" if value else "false"))
        else:
            flat.append((key, str(value)))
    return urlencode(flat).encode("utf-8")


def _to_intent(data: dict) -> PaymentIntent:
    try:
        return PaymentIntent(
            id=str(data["id"]),
            client_secret=str(data.get("client_secret") or ""),
            status=str(data.get("status") or ""),
            amount=int(data.get("amount") or 0),
            currency=str(data.get("currency") or ""),
            metadata=dict(data.get("metadata") or {}),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise PaymentProcessorError("Stripe returned an unexpected payment intent shape") from exc


class StripeGateway(PaymentGateway):
    """Stripe PaymentIntents over the REST API."""

    def __init__(self, secret_key: str, *, timeout: int = 25) -> None:
        self.secret_key = (secret_key or "").strip()
        self.timeout = timeout

    def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        idempotency_key: str = "",
    ) -> dict[str, Any]:
        if not self.secret_key:
            raise PaymentProcessorError(
                "Stripe secret key is not configured. "
                "Expected settings.PAYMENTS['STRIPE']['SECRET_KEY'] (env STRIPE_SECRET_KEY)."
            )

        headers = {
            "Authorization": f"Bearer {self.secret_key}",
            "Accept": "application/json",
        }
        data = None
        if params is not None:
            data = _form_encode(params)
            headers["Content-Type"] = "application/x-www-form-urlencoded"
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key

        req = Request(f"{STRIPE_BASE}{path}", data=data, headers=headers, method=method)

        try:
            with urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8", errors="replace")
                parsed_any = _parse_json_or_text(raw)
        except HTTPError as e:
            try:
                raw = e.read().decode("utf-8", errors="replace")
            except OSError:
                raw = ""
            parsed_any = _parse_json_or_text(raw)

            if parsed_any.get("kind") == "json":
                err = (parsed_any.get("json") or {}).get("error") or {}
                msg = err.get("message") or err.get("code") or "Stripe rejected request"
                logger.warning("Stripe HTTPError", extra={"status": e.code, "path": path})
                raise PaymentProcessorError(f"Stripe HTTPError: {e.code} {msg}") from e

            preview = _safe_preview(parsed_any.get("raw") or str(e))
            raise PaymentProcessorError(f"Stripe HTTPError: {e.code} {preview}") from e
        except URLError as e:
            raise PaymentProcessorError(f"Stripe URLError: {e.reason}") from e
        except OSError as e:
            raise PaymentProcessorError(f"Stripe request failed: {e}") from e

        if parsed_any.get("kind") != "json":
            raise PaymentProcessorError(
                f"Stripe returned non-JSON: {_safe_preview(parsed_any.get('raw') or '')}"
            )

        return parsed_any.get("json") or {}

    def create_intent(
        self,
        amount_minor: int,
        currency: str,
        metadata: dict,
        idempotency_key: str,
    ) -> PaymentIntent:
        payload = {
            "amount": int(amount_minor),
            "currency": str(currency).lower(),
            "metadata": metadata or {},
            "automatic_payment_methods": {"enabled": "true"},
        }
        data = self._request_json(
            "POST",
            "/payment_intents",
            params=payload,
            idempotency_key=idempotency_key,
        )
        return _to_intent(data)

    def retrieve_intent(self, intent_id: str) -> PaymentIntent:
        ref = str(intent_id or "").strip()
        if not ref:
            raise PaymentProcessorError("payment intent id is required")

        data = self._request_json("GET", f"/payment_intents/{quote(ref, safe='')}")
        return _to_intent(data)
