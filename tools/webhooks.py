import os
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from tools.errors import WebhookError
from tools.record_actions import is_default_record_type, strip_fetch_prefix

EVENT_TYPES = ("created", "updated", "deleted")

DEFAULT_WEBHOOK_URLS = {
    "contacts": "https://api.integration.app/webhooks/app-events/4940cec8-9d47-41dd-8d8a-43c6741b048d",
    "companies": "https://api.integration.app/webhooks/app-events/0502c111-b765-47fd-94cc-450b93bd9e5c",
    "custom": "https://api.integration.app/webhooks/app-events/edd3514f-9d77-4ecf-bf3e-376fd8b10b14",
}


class WebhookForwarder:
    """Forwards record mutation events to Integration.app app-event webhooks."""

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        self.urls = {
            name: os.getenv(f"WEBHOOK_URL_{name.upper()}", url)
            for name, url in DEFAULT_WEBHOOK_URLS.items()
        }
        self.timeout = float(os.getenv("WEBHOOK_TIMEOUT", "20"))
        self._transport = transport

    def url_for(self, record_type: str) -> str:
        """Pick the endpoint for a record type; custom URL unless a default type has its own."""
        if is_default_record_type(record_type):
            return self.urls.get(strip_fetch_prefix(record_type), self.urls["custom"])
        return self.urls["custom"]

    def send(self, payload: Dict[str, Any]) -> Any:
        """
        Post a record event to the webhook for its record type.

        Args:
            payload: {"type", "data", "customerId", "instanceKey"?}, where
                instanceKey carries the record type

        Returns:
            Parsed JSON response of the webhook
        """
        if payload.get("type") not in EVENT_TYPES:
            raise ValueError(f"Unknown webhook event type: {payload.get('type')}")

        record_type = payload.get("instanceKey") or ""
        is_default = is_default_record_type(record_type)
        webhook_url = self.url_for(record_type)

        final_payload = dict(payload)
        if not is_default:
            final_payload["instanceKey"] = record_type

        logger.info(f"Sending {payload['type']} event for {record_type or 'unknown type'} to {webhook_url}")

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(webhook_url, json=final_payload)
        except httpx.HTTPError as e:
            logger.error(f"Error sending webhook: {e}")
            raise WebhookError(f"Webhook failed: {e}") from e

        if not response.is_success:
            logger.error(f"Webhook returned {response.status_code}")
            raise WebhookError(f"Webhook failed: {response.reason_phrase}")

        return response.json()


# Global forwarder instance
webhook_forwarder = WebhookForwarder()


def send_to_webhook(payload: Dict[str, Any]) -> Any:
    """Send a record event using the global forwarder."""
    return webhook_forwarder.send(payload)
