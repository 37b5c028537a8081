"""
SMS gateway client used to deliver phone verification codes.
"""
import logging

import httpx

from ..config import settings
from ..core.errors import UpstreamError

logger = logging.getLogger("uvicorn.error")


class SmsClient:
    def __init__(self):
        self.api_url = settings.sms_api_url
        self.api_token = settings.sms_api_token
        self.username = settings.sms_username
        self.timeout = settings.sms_timeout

    def is_available(self) -> bool:
        """Check if the gateway is enabled and configured"""
        return settings.sms_enabled and bool(self.api_url)

    async def send(self, phone: str, text: str) -> bool:
        """
        Send ``text`` to ``phone``.

        Returns False when SMS delivery is disabled (the message is only logged).
        Raises UpstreamError when the gateway cannot be reached or refuses the message.
        """
        if not self.is_available():
            logger.info("[sms] disabled, would send to %s: %s", phone, text)
            return False

        params = {
            "api_token": self.api_token or "",
            "username": self.username or "",
            "receiver": phone,
            "text": text,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(self.api_url, params=params)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("[sms] sending to %s failed: %r", phone, e)
            raise UpstreamError("Could not send the verification SMS", category="SMS") from e

        logger.info("[sms] sent to %s", phone)
        return True


# Global singleton
sms_client = SmsClient()
