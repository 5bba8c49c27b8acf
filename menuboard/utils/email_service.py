# menuboard/utils/email_service.py

import logging
from typing import Any

import resend

from menuboard.core.config import settings

log = logging.getLogger(__name__)


def _build_reset_email_html(name: str, reset_url: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 520px; margin: 0 auto;">
      <h2 style="color: #222;">Reset your password</h2>
      <p>Hi {name},</p>
      <p>We received a request to reset the password of your menu account.</p>
      <p style="margin: 24px 0;">
        <a href="{reset_url}" style="background: #222; color: #fff; padding: 12px 20px;
           border-radius: 6px; text-decoration: none;">Choose a new password</a>
      </p>
      <p style="color: #777; font-size: 13px;">If you didn't ask for this you can ignore this email.</p>
    </div>
    """


def send_password_reset_email(email: str, name: str, token: str) -> dict[str, Any]:
    """
    Send the password reset link through RESEND.

    Returns:
        dict with 'success' (bool) and 'message' (str)
    """
    if not settings.resend_api_key:
        return {"success": False, "message": "RESEND API key not configured"}

    if not settings.mail_from:
        return {"success": False, "message": "From email not configured"}

    reset_url = f"{settings.frontend_url.rstrip('/')}/reset-password?token={token}"

    try:
        # global setting in the resend library
        resend.api_key = settings.resend_api_key
        response = resend.Emails.send({
            "from": settings.mail_from,
            "to": [email],
            "subject": "Reset your password",
            "html": _build_reset_email_html(name or email, reset_url),
        })
    except Exception as e:
        log.error("Failed to send password reset email to %s: %s", email, e)
        return {"success": False, "message": f"Failed to send email: {e}"}

    log.info("Password reset email sent to %s", email)
    return {"success": True, "message": "Email sent", "id": response.get("id") if isinstance(response, dict) else None}
