# src/chat/webhook_client.py

import logging
from typing import Dict, List, Optional

import requests

from config import config
from utils.errors import NetworkError

logger = logging.getLogger(__name__)


class ChatClient:
    """Forwards user messages to the chat webhook"""

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None,
                 fallback_reply: Optional[str] = None):
        self.webhook_url = webhook_url or config.get_chat_webhook_url()
        self.timeout = float(timeout if timeout is not None else config.get('chat.timeout', 30))
        self.fallback_reply = fallback_reply or config.get('chat.fallback_reply')

    def request_reply(self, text: str) -> str:
        """POST the message and return the reply text, raising NetworkError on any failure"""
        try:
            response = requests.post(self.webhook_url, json={"text": text}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Chat webhook unreachable: {e}") from e

        if not response.ok:
            raise NetworkError(f"Chat webhook returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise NetworkError(f"Chat webhook returned invalid JSON: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("text"), str):
            raise NetworkError("Chat webhook response has no 'text' field")

        return payload["text"]

    def send(self, text: Optional[str]) -> Optional[str]:
        """Reply to a user message; blank messages are not sent"""
        if text is None or not text.strip():
            return None

        try:
            return self.request_reply(text)
        except NetworkError as e:
            logger.error(str(e))
            return self.fallback_reply


class ChatSession:
    """Ordered chat history for one page session"""

    def __init__(self, client: Optional[ChatClient] = None, greeting: Optional[str] = None):
        self.client = client or ChatClient()
        greeting = greeting or config.get('chat.greeting', 'Hello! How can I help you today?')
        self.messages: List[Dict[str, str]] = [{"role": "assistant", "content": greeting}]

    def send(self, text: Optional[str]) -> Optional[str]:
        """Append the user message and the bot reply; returns the reply"""
        if text is None or not text.strip():
            return None

        self.messages.append({"role": "user", "content": text})
        reply = self.client.send(text)
        self.messages.append({"role": "assistant", "content": reply})
        return reply
