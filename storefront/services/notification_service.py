"""
Email notifications
Fire-and-forget calls to the mail endpoints; failures are logged, never retried or raised.
"""

from typing import Any, Dict, Optional

import requests

from ..core.database import DocumentStore


class EmailNotifier:

    def __init__(self, base_url: str, store: DocumentStore,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.store = store
        self.session = session or requests.Session()

    def send_approval_email(self, email: str, name: str) -> bool:
        return self._post("send-approval-email", {"email": email, "name": name})

    def send_rejection_email(self, email: str, name: str) -> bool:
        return self._post("send-rejection-email", {"email": email, "name": name})

    def send_email(self, to: str, subject: str, text: str, name: Optional[str] = None) -> bool:
        payload = {"to": to, "subject": subject, "text": text}
        if name:
            payload["name"] = name
        return self._post("send-email", payload)

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> bool:
        try:
            response = self.session.post(f"{self.base_url}/{endpoint}", json=payload)
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            self.store.log("email_error", detail={"endpoint": endpoint, "error": str(e)})
            return False
