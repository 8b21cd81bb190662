from typing import List, Optional
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
import smtplib
import logging

from aayutrace.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Envoi des emails transactionnels (invitation, bienvenue, mot de passe,
    rappels, résumé quotidien)

    Toujours best-effort : un échec est journalisé et renvoie False,
    il ne fait jamais échouer l'opération qui a déclenché l'envoi.
    """

    def send_email(
        self, to_email: str, subject: str, body: str, html_body: Optional[str] = None
    ) -> bool:
        if not settings.SMTP_HOST or not settings.SMTP_USER or not settings.SMTP_PASSWORD:
            logger.warning(f"SMTP not configured, email to {to_email} not sent")
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = settings.SMTP_FROM_EMAIL
        msg["To"] = to_email

        msg.attach(MIMEText(body, "plain", "utf-8"))
        if html_body:
            msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
                server.starttls()
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

        logger.info(f"Email sent successfully to {to_email}")
        return True

    def send_invitation_email(
        self, to_email: str, family_name: str, inviter_name: str, invitation_url: str
    ) -> bool:
        subject = f"Invitation to join {family_name} on AayuTrace"
        body = f"""
            Hello,

            {inviter_name} invited you to join the family "{family_name}" on AayuTrace.
            Members share their household inventory, expiry dates and warranties.

            Join the family: {invitation_url}

            This invitation will expire in {settings.INVITATION_EXPIRE_DAYS} days.
            If you didn't expect this invitation, you can safely ignore this email.
        """
        html_body = f"""
            <h2>You're invited to join {family_name}</h2>
            <p>{inviter_name} invited you to share a household inventory on AayuTrace.</p>
            <p><a href="{invitation_url}">Join Family</a></p>
            <p>This invitation will expire in {settings.INVITATION_EXPIRE_DAYS} days.</p>
        """
        return self.send_email(to_email, subject, body, html_body)

    def send_welcome_email(self, to_email: str, full_name: Optional[str]) -> bool:
        subject = "Welcome to AayuTrace"
        body = f"""
            Hello {full_name or "there"},

            Your account is ready. Add your first products with their expiry
            and warranty dates and AayuTrace will remind you before they lapse.

            {settings.FRONTEND_URL}/dashboard
        """
        return self.send_email(to_email, subject, body)

    def send_password_reset_email(self, to_email: str, reset_url: str) -> bool:
        subject = "Reset your AayuTrace password"
        body = f"""
            Hello,

            We received a request to reset your password. Use the link below
            within {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes:

            {reset_url}

            If you didn't ask for a reset, you can ignore this email.
        """
        return self.send_email(to_email, subject, body)

    def send_reminder_email(self, to_email: str, title: str, message: str) -> bool:
        body = f"""
            Hello,

            {message}

            Open AayuTrace to review your products: {settings.FRONTEND_URL}/notifications
        """
        return self.send_email(to_email, title, body)

    def send_daily_digest_email(
        self, to_email: str, unread_titles: List[str], upcoming_lines: List[str]
    ) -> bool:
        subject = f"Your AayuTrace daily digest ({len(unread_titles)} unread)"

        body = "Hello,\n\nUnread notifications:\n"
        if unread_titles:
            body += "\n".join(f"  • {title}" for title in unread_titles)
        else:
            body += "  Nothing new."

        body += "\n\nComing up:\n"
        if upcoming_lines:
            body += "\n".join(f"  • {line}" for line in upcoming_lines)
        else:
            body += "  No dates in the coming days."

        body += f"\n\n{settings.FRONTEND_URL}/dashboard\n"
        return self.send_email(to_email, subject, body)
