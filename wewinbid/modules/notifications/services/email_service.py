"""
Outbound email over SMTP. HTML bodies get their CSS inlined with premailer so
they render consistently in mail clients.
"""
import html
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from premailer import transform

from wewinbid.config import settings

logger = logging.getLogger(__name__)

EMAIL_LAYOUT = """
<html>
<head>
<style>
  body {{ font-family: Arial, sans-serif; color: #1f2937; background: #f9fafb; }}
  .card {{ max-width: 560px; margin: 24px auto; background: #ffffff; padding: 24px; border-radius: 8px; }}
  h1 {{ font-size: 20px; color: #111827; }}
  p {{ font-size: 14px; line-height: 1.5; }}
  .button {{ display: inline-block; padding: 10px 18px; background: #2563eb; color: #ffffff; text-decoration: none; border-radius: 6px; }}
  .footer {{ font-size: 12px; color: #6b7280; margin-top: 24px; }}
</style>
</head>
<body>
  <div class="card">
    <h1>{title}</h1>
    <p>{message}</p>
    {action}
    <p class="footer">WeWinBid</p>
  </div>
</body>
</html>
"""


def render_email(title: str, message: str, link: Optional[str] = None, link_label: str = "Voir le détail") -> str:
    action = ""
    if link:
        url = link if link.startswith("http") else f"{settings.APP_URL}{link}"
        action = f'<p><a class="button" href="{html.escape(url)}">{html.escape(link_label)}</a></p>'
    body = EMAIL_LAYOUT.format(
        title=html.escape(title),
        message=html.escape(message).replace("\n", "<br>"),
        action=action,
    )
    return transform(body)


def send_html_email(to_email: str, subject: str, html_body: str, text_body: Optional[str] = None) -> bool:
    """
    Send one email. Returns False (and logs) when SMTP is not configured or
    delivery fails; callers treat email as best effort.
    """
    if not settings.SMTP_HOST:
        logger.debug(f"SMTP not configured, skipping email '{subject}' to {to_email}")
        return False

    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = settings.EMAIL_FROM
    message["To"] = to_email
    if text_body:
        message.attach(MIMEText(text_body, "plain", "utf-8"))
    message.attach(MIMEText(html_body, "html", "utf-8"))

    try:
        context = ssl.create_default_context()
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as server:
            server.starttls(context=context)
            if settings.SMTP_USER and settings.SMTP_PASSWORD:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.sendmail(settings.EMAIL_FROM, [to_email], message.as_string())
        logger.info(f"Email '{subject}' sent to {to_email}")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.warning(f"Failed to send email '{subject}' to {to_email}: {e}")
        return False


def send_notification_email(to_email: str, title: str, message: str, link: Optional[str] = None) -> bool:
    return send_html_email(to_email, title, render_email(title, message, link), text_body=message)
