"""
Transactional email via the Resend HTTP API.
Delivery is fire-and-forget: failures are logged, never raised.
"""
import logging

import httpx

from app.config import settings
from app.utils.helpers import mask_email

logger = logging.getLogger(__name__)


class EmailService:
    """Sends verification and password reset codes."""

    def __init__(self, api_key: str, api_url: str, sender: str, timeout: float = 10.0):
        self.api_key = api_key
        self.api_url = api_url
        self.sender = sender
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send(self, to: str, subject: str, html: str) -> bool:
        if not self.enabled:
            logger.warning(f"Email delivery disabled, not sending '{subject}' to {mask_email(to)}")
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.api_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": self.sender,
                        "to": [to],
                        "subject": subject,
                        "html": html,
                    },
                )
                response.raise_for_status()
            logger.info(f"Sent '{subject}' to {mask_email(to)}")
            return True
        except httpx.HTTPError as e:
            logger.error(f"Error sending '{subject}' to {mask_email(to)}: {e}")
            return False

    async def send_verification_email(self, to: str, code: str) -> bool:
        if settings.DEBUG and not self.enabled:
            logger.info(f"[DEV] Verification code for {to}: {code}")
        return await self.send(
            to,
            "Verification Code",
            f"<p>Your verification code is: <strong>{code}</strong></p>",
        )

    async def send_password_reset_email(self, to: str, code: str) -> bool:
        if settings.DEBUG and not self.enabled:
            logger.info(f"[DEV] Password reset code for {to}: {code}")
        return await self.send(
            to,
            "Password Reset Code",
            f"<p>Your password reset code is: <strong>{code}</strong></p>"
            f"<p>It expires in {settings.VERIFICATION_CODE_TTL_HOURS} hours.</p>",
        )


email_service = EmailService(
    api_key=settings.RESEND_API_KEY,
    api_url=settings.RESEND_API_URL,
    sender=settings.EMAIL_FROM,
    timeout=settings.EMAIL_TIMEOUT_SECONDS,
)
