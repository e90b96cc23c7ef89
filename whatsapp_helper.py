"""
whatsapp_helper.py - Outbound messages via the WhatsApp Cloud API.

POST https://graph.facebook.com/{version}/{phone_number_id}/messages
Payload: {"messaging_product": "whatsapp", "to": "62812xxxx",
          "type": "text", "text": {"body": "..."}}

Delivery failures are logged (recipient + payload) and swallowed: a
reply that cannot be sent must not fail the webhook.
"""

import json
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config.constants import (
    WHATSAPP_ACCESS_TOKEN,
    WHATSAPP_API_VERSION,
    WHATSAPP_PHONE_NUMBER_ID,
    Timeouts,
)
from config.errors import DeliveryFailedError, InternalErrors
from security import mask_phone, secure_log

GRAPH_API_BASE = "https://graph.facebook.com"


def _safe_response_excerpt(resp: requests.Response, max_chars: int = 200) -> str:
    """Return compact response text for logs."""
    try:
        body = (resp.text or "").replace("\n", " ").replace("\r", " ").strip()
    except Exception:
        body = ""
    return body[:max_chars]


def build_text_payload(to: str, body: str) -> Dict[str, Any]:
    return {
        "messaging_product": "whatsapp",
        "to": to,
        "type": "text",
        "text": {"body": body},
    }


class WhatsAppSender:
    """Sends text replies through the Cloud API."""

    def __init__(self, phone_number_id: str = WHATSAPP_PHONE_NUMBER_ID,
                 access_token: str = WHATSAPP_ACCESS_TOKEN,
                 api_version: str = WHATSAPP_API_VERSION,
                 session: Optional[requests.Session] = None):
        self.phone_number_id = phone_number_id
        self.access_token = access_token
        self.api_version = api_version
        self._session = session

    @property
    def api_url(self) -> str:
        return f"{GRAPH_API_BASE}/{self.api_version}/{self.phone_number_id}/messages"

    @property
    def session(self) -> requests.Session:
        """Get request session with retries (lazy)."""
        if self._session is None:
            session = requests.Session()
            retry = Retry(total=3, backoff_factor=1, status_forcelist=[429, 500, 502, 503])
            adapter = HTTPAdapter(pool_connections=5, pool_maxsize=5, max_retries=retry)
            session.mount("https://", adapter)
            session.headers.update({
                'Authorization': f'Bearer {self.access_token}',
                'Content-Type': 'application/json',
            })
            self._session = session
        return self._session

    def deliver(self, to: str, body: str) -> Dict[str, Any]:
        """
        Send a text message.

        Returns:
            Cloud API response JSON

        Raises:
            DeliveryFailedError: missing config, network error or non-2xx status
        """
        if not self.phone_number_id or not self.access_token:
            raise DeliveryFailedError("WhatsApp params missing")

        payload = build_text_payload(to, body)
        try:
            resp = self.session.post(self.api_url, json=payload, timeout=Timeouts.REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise DeliveryFailedError(f"{type(e).__name__}: {e}") from e

        if resp.status_code not in (200, 201, 202):
            raise DeliveryFailedError(f"{resp.status_code}: {_safe_response_excerpt(resp)}")

        try:
            return resp.json()
        except ValueError:
            return {"status": "ok", "status_code": resp.status_code}

    def send(self, to: str, body: str) -> bool:
        """Send a text message. Returns False (and logs) instead of raising."""
        try:
            self.deliver(to, body)
        except DeliveryFailedError as e:
            secure_log("ERROR", f"[{InternalErrors.DELIVERY}] Error sending message: {e}",
                       to=to, payload=json.dumps(build_text_payload(to, body), ensure_ascii=False))
            return False

        secure_log("INFO", "Message sent", to=mask_phone(to))
        return True
