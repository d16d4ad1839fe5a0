"""Razorpay Orders API client used to initiate checkout payments."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from app.config import settings

from .exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

# Razorpay caps order notes at 15 key/value pairs of up to 256 chars each
MAX_NOTES = 15
MAX_NOTE_LENGTH = 256


class PaymentResult(BaseModel):
    id: str
    receipt: str
    status: str


def to_minor_units(amount: float) -> int:
    """Convert a currency amount (e.g. rupees) to its smallest unit (paise)."""
    return int(round(amount * 100))


def _normalize_notes(notes: Optional[Dict[str, Any]]) -> Dict[str, str]:
    normalized: Dict[str, str] = {}
    for key, value in (notes or {}).items():
        if value is None:
            continue
        if len(normalized) >= MAX_NOTES:
            break
        normalized[str(key)] = str(value)[:MAX_NOTE_LENGTH]
    return normalized


class RazorpayClient:
    def __init__(
        self,
        key_id: str | None = None,
        key_secret: str | None = None,
        api_url: str | None = None,
        currency: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._key_id = key_id if key_id is not None else settings.RAZORPAY_KEY_ID
        self._key_secret = (
            key_secret if key_secret is not None else settings.RAZORPAY_KEY_SECRET
        )
        self._api_url = (api_url or settings.RAZORPAY_API_URL).rstrip("/")
        self._currency = currency or settings.PAYMENT_CURRENCY
        self._client = httpx.Client(
            base_url=self._api_url,
            auth=(self._key_id, self._key_secret),
            timeout=settings.PAYMENT_TIMEOUT_SECONDS,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._key_id and self._key_secret)

    def charge(
        self,
        total_amount: float,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None,
    ) -> PaymentResult:
        """Create a provider-side order for the amount and return its reference."""
        if not self.is_configured:
            raise PaymentGatewayError("Razorpay credentials are not configured")

        payload = {
            "amount": to_minor_units(total_amount),
            "currency": self._currency,
            "receipt": receipt,
            "notes": _normalize_notes(notes),
        }
        try:
            response = self._client.post("/orders", json=payload)
        except httpx.HTTPError as exc:
            raise PaymentGatewayError(f"Payment provider unreachable: {exc}") from exc

        if response.is_error:
            raise PaymentGatewayError(
                f"Payment provider rejected order: {response.text[:200]}",
                status_code=response.status_code,
            )

        data = response.json()
        logger.info(
            "Created payment order %s for receipt %s", data.get("id"), receipt
        )
        return PaymentResult(
            id=data["id"],
            receipt=data.get("receipt") or receipt,
            status=data.get("status", "created"),
        )

    def close(self) -> None:
        self._client.close()


def get_payment_gateway():
    """FastAPI dependency yielding a payment client for one request."""
    client = RazorpayClient()
    try:
        yield client
    finally:
        client.close()
