"""Outbound email: best effort, never raises into the caller.

Every public ``notify_*``/``send_*`` helper returns ``True`` when a message
was handed to the SMTP server and ``False`` otherwise; failures are logged.
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape

from eventhub.config import settings
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.timeutils import to_local

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def send_email(to_email: str, to_name: str, subject: str, body: str) -> bool:
    """Send an HTML email. Returns True if successful, False otherwise."""
    if not settings.SMTP_HOST or not to_email:
        logger.info("Email '%s' to %s skipped: SMTP not configured", subject, to_email)
        return False

    msg = MIMEMultipart("alternative")
    msg["From"] = formataddr((settings.EMAIL_FROM_NAME, settings.EMAIL_FROM))
    msg["To"] = formataddr((to_name, to_email))
    msg["Subject"] = subject
    msg.attach(MIMEText(body, "html"))

    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as server:
            if settings.SMTP_USE_TLS:
                server.starttls()
            if settings.SMTP_USERNAME:
                server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send email '%s' to %s", subject, to_email)
        return False

    logger.info("Email '%s' sent to %s", subject, to_email)
    return True


def _wrap(content: str, link: str = "", link_text: str = "") -> str:
    button = ""
    if link:
        button = (
            '<div style="text-align: center; margin: 30px 0;">'
            f'<a href="{link}" style="background-color: #3b82f6; color: white; '
            f'padding: 12px 24px; text-decoration: none; border-radius: 6px;">{link_text}</a></div>'
        )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f"{content}{button}<p>Best regards,<br>The EventHub Team</p></div>"
    )


def _event_block(event: Event) -> str:
    start = to_local(event.start_time_utc, event.timezone)
    end = to_local(event.end_time_utc, event.timezone)
    return (
        '<div style="background-color: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        f"<h3>{escape(event.title)}</h3>"
        f"<p><strong>Date:</strong> {start:%A, %B %d, %Y}</p>"
        f"<p><strong>Time:</strong> {start:%H:%M} - {end:%H:%M} ({event.timezone})</p>"
        f"<p><strong>Location:</strong> {escape(event.address)}, {escape(event.city)}</p>"
        "</div>"
    )


def _event_link(event: Event) -> str:
    return f"{settings.FRONTEND_URL}/events/{event.event_id}"


def _preview(text: str) -> str:
    return text[:PREVIEW_LENGTH] + ("..." if len(text) > PREVIEW_LENGTH else "")


def send_welcome_email(user: User) -> bool:
    content = (
        '<h1 style="color: #3b82f6; text-align: center;">Welcome to EventHub!</h1>'
        f"<p>Hi {escape(user.name)},</p>"
        "<p>Thank you for joining EventHub! You can now create events, RSVP to events "
        "in your area and join the discussion.</p>"
    )
    return send_email(user.email, user.name, "Welcome to EventHub!",
                      _wrap(content, settings.FRONTEND_URL, "Explore Events"))


def send_password_reset_email(user: User, raw_token: str) -> bool:
    reset_url = f"{settings.FRONTEND_URL}/reset-password/{raw_token}"
    content = (
        '<h1 style="color: #3b82f6; text-align: center;">Password Reset Request</h1>'
        f"<p>Hi {escape(user.name)},</p>"
        "<p>You recently requested to reset your password for your EventHub account.</p>"
        "<p><strong>This link will expire in 10 minutes.</strong></p>"
        f'<p style="word-break: break-all; color: #666;">{reset_url}</p>'
    )
    return send_email(user.email, user.name, "Password Reset Request - EventHub",
                      _wrap(content, reset_url, "Reset Password"))


def send_rsvp_confirmation(user: User, event: Event) -> bool:
    content = (
        '<h1 style="color: #3b82f6;">RSVP Confirmed!</h1>'
        f"<p>Hi {escape(user.name)},</p>"
        f"<p>Your RSVP for <strong>{escape(event.title)}</strong> has been confirmed!</p>"
        f"{_event_block(event)}"
        "<p>We look forward to seeing you there!</p>"
    )
    return send_email(user.email, user.name, f"RSVP Confirmed - {event.title}",
                      _wrap(content, _event_link(event), "View Event"))


def send_event_update(user: User, event: Event) -> bool:
    content = (
        '<h1 style="color: #3b82f6;">Event Update</h1>'
        f"<p>Hi {escape(user.name)},</p>"
        f"<p>There has been an update to <strong>{escape(event.title)}</strong> that you're attending.</p>"
        f"{_event_block(event)}"
    )
    return send_email(user.email, user.name, f"Event Update - {event.title}",
                      _wrap(content, _event_link(event), "View Event"))


def notify_organizer_rsvp(organizer: User, attendee: User, event: Event, action: str, status: str = "") -> bool:
    """``action`` is one of ``created``, ``updated``, ``cancelled``."""
    subjects = {
        "created": "New RSVP Received",
        "updated": "RSVP Updated",
        "cancelled": "RSVP Cancelled",
    }
    if action == "cancelled":
        text = f"{escape(attendee.name)} has cancelled their RSVP for your event \"{escape(event.title)}\"."
    elif action == "updated":
        text = f"{escape(attendee.name)} has updated their RSVP to \"{status}\" for your event \"{escape(event.title)}\"."
    else:
        text = f"{escape(attendee.name)} has RSVPed \"{status}\" to your event \"{escape(event.title)}\"."
    return send_email(organizer.email, organizer.name, subjects[action],
                      _wrap(f"<p>Hi {escape(organizer.name)},</p><p>{text}</p>", _event_link(event), "View Event"))


def notify_new_comment(organizer: User, commenter: User, event: Event, content: str) -> bool:
    text = (
        f"{escape(commenter.name)} commented on your event \"{escape(event.title)}\": "
        f"\"{escape(_preview(content))}\""
    )
    return send_email(organizer.email, organizer.name, "New Comment on Your Event",
                      _wrap(f"<p>Hi {escape(organizer.name)},</p><p>{text}</p>", _event_link(event), "View Event"))


def notify_reply(parent_author: User, commenter: User, event: Event, content: str) -> bool:
    text = (
        f"{escape(commenter.name)} replied to your comment on \"{escape(event.title)}\": "
        f"\"{escape(_preview(content))}\""
    )
    return send_email(parent_author.email, parent_author.name, "Reply to Your Comment",
                      _wrap(f"<p>Hi {escape(parent_author.name)},</p><p>{text}</p>", _event_link(event), "View Event"))
