"""Email templates for DevForum."""

from datetime import datetime
from typing import Optional


def _get_base_styles() -> str:
    """Base CSS styles for email templates."""
    return """
    <style>
        body { margin: 0; padding: 0; font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; }
        .email-container { max-width: 600px; margin: 0 auto; background-color: #ffffff; }
        .email-header { background: #111827; padding: 28px 24px; text-align: center; }
        .email-header h1 { color: #ffffff; font-size: 22px; margin: 0; font-weight: 600; }
        .email-body { padding: 32px 24px; color: #1f2937; line-height: 1.6; }
        .email-body h2 { color: #1f2937; font-size: 20px; margin: 0 0 16px 0; }
        .email-body p { margin: 0 0 16px 0; font-size: 15px; }
        .btn-primary { display: inline-block; background: #2563eb; color: #ffffff !important; padding: 14px 32px; border-radius: 8px; text-decoration: none; font-weight: 600; font-size: 16px; margin: 8px 0; }
        .link-fallback { font-size: 13px; color: #64748b; word-break: break-all; margin-top: 16px; }
        .link-fallback a { color: #2563eb; }
        .warning-box { background-color: #fef3c7; border-left: 4px solid #f59e0b; padding: 16px; margin: 24px 0; border-radius: 0 8px 8px 0; }
        .warning-box p { margin: 0; color: #92400e; font-size: 14px; }
        .email-footer { background-color: #f8fafc; padding: 24px; text-align: center; border-top: 1px solid #e2e8f0; }
        .email-footer p { margin: 0 0 8px 0; font-size: 13px; color: #64748b; }
    </style>
    """


def _get_header(title: str = "DevForum") -> str:
    return f"""
    <div class="email-header">
        <h1>{title}</h1>
    </div>
    """


def _get_footer(year: Optional[int] = None) -> str:
    if year is None:
        year = datetime.now().year
    return f"""
    <div class="email-footer">
        <p>This email was sent automatically. Please do not reply.</p>
        <p style="font-size: 11px; color: #94a3b8;">&copy; {year} DevForum</p>
    </div>
    """


def build_password_reset_email(
    *,
    user_name: str,
    reset_link: str,
    expires_in_minutes: int = 15,
) -> tuple[str, str, str]:
    """Build the password reset email.

    Returns:
        Tuple of (subject, html_body, text_body)
    """
    subject = "Reset your DevForum password"

    html_body = f"""
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        {_get_base_styles()}
    </head>
    <body style="background-color: #f1f5f9; padding: 24px 0;">
        <div class="email-container" style="border-radius: 12px; overflow: hidden;">
            {_get_header()}

            <div class="email-body">
                <h2>Password reset requested</h2>

                <p>Hi <strong>{user_name}</strong>,</p>

                <p>Someone asked to reset the password for your account. Use the button below to pick a new one.</p>

                <div style="text-align: center; margin: 32px 0;">
                    <a href="{reset_link}" class="btn-primary">Reset password</a>
                </div>

                <div class="link-fallback">
                    If the button does not work, paste this link into your browser:<br>
                    <a href="{reset_link}">{reset_link}</a>
                </div>

                <div class="warning-box">
                    <p>This link expires in <strong>{expires_in_minutes} minutes</strong>.
                    If you did not request a reset, you can ignore this email.</p>
                </div>
            </div>

            {_get_footer()}
        </div>
    </body>
    </html>
    """

    text_body = f"""
DEVFORUM - Password reset
=========================

Hi {user_name},

Someone asked to reset the password for your account. Open this link to pick a new one:
{reset_link}

The link expires in {expires_in_minutes} minutes. If you did not request a reset, ignore this email.
    """

    return subject, html_body, text_body
