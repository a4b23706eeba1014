"""
SMS delivery for one-time codes.

- TwilioSmsSender: sends through the Twilio Messages API
- LoggingSmsSender: development fallback when Twilio is not configured

Senders report failures in the returned DeliveryReceipt. The auth service
never shows delivery problems to the caller.
"""

import asyncio
import logging
from typing import Optional

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from .models import DeliveryReceipt

logger = logging.getLogger(__name__)

OTP_MESSAGE = "Your Citizone verification code is {code}. It expires in {minutes} minutes."


def mask_phone(phone: str) -> str:
    """Keep only the last four digits for logs."""
    return f"******{phone[-4:]}" if len(phone) >= 4 else "****"


class TwilioSmsSender:
    """
    SMS sender backed by Twilio.

    The Twilio client is synchronous, so each send runs in a worker thread.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        country_code: str = "+1",
        ttl_minutes: int = 5,
        client: Optional[Client] = None,
    ):
        if not from_number:
            raise ValueError("A Twilio sender number is required")
        self._client = client or Client(account_sid, auth_token)
        self._from_number = from_number
        self._country_code = country_code
        self._ttl_minutes = ttl_minutes

    async def send(self, phone: str, code: str) -> DeliveryReceipt:
        body = OTP_MESSAGE.format(code=code, minutes=self._ttl_minutes)
        try:
            message = await asyncio.to_thread(
                self._client.messages.create,
                to=f"{self._country_code}{phone}",
                from_=self._from_number,
                body=body,
            )
        except TwilioRestException as e:
            logger.warning(f"Twilio rejected SMS to {mask_phone(phone)}: {e.msg}")
            return DeliveryReceipt(accepted=False, error=str(e.msg))
        return DeliveryReceipt(accepted=True, reference=message.sid)


class LoggingSmsSender:
    """Writes codes to the log instead of sending them."""

    async def send(self, phone: str, code: str) -> DeliveryReceipt:
        logger.info(f"SMS delivery not configured; OTP for {mask_phone(phone)} was not sent")
        logger.debug(f"OTP for {mask_phone(phone)}: {code}")
        return DeliveryReceipt(accepted=True, reference="log")
