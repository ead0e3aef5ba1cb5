import httpx

from clinicdesk.core.config import settings
from clinicdesk.core.logger import get_logger

logger = get_logger("captcha")

async def verify_captcha(token: str, secret_key: str) -> bool:
    """Check a Friendly Captcha solution. Any transport or decoding error counts as a failed check."""
    try:
        async with httpx.AsyncClient(timeout=settings.CAPTCHA_TIMEOUT_SECONDS) as client:
            response = await client.post(
                settings.CAPTCHA_VERIFY_URL,
                json={"solution": token, "secret": secret_key},
            )
            data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning(f"Captcha verification request failed: {exc}")
        return False
    return isinstance(data, dict) and data.get("success") is True
