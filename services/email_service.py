import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from core.config import Settings, settings as default_settings
from core.exceptions import TransientDependencyError
from services import email_templates
from utils.logger import get_logger

# Setup logger
logger = get_logger(__name__)


class EmailService:
    """
    Outbound email over SMTP.

    One instance is created at application startup and shared by every
    request. ``send`` never raises: a delivery failure is logged and
    reported as ``False`` so that the operation which triggered the email
    still succeeds.
    """

    def __init__(self, config: Settings = default_settings):
        self.config = config
        # Messages "sent" while ENV == "testing"
        self.outbox: list[dict] = []

    def send(self, to: str, subject: str, html: str, text: str | None = None) -> bool:
        # Skip email sending in test environment
        if self.config.ENV == "testing":
            logger.info(
                "[TEST MODE] Email skipped",
                extra={"recipient": to, "subject": subject}
            )
            self.outbox.append({"to": to, "subject": subject, "html": html, "text": text})
            return True

        logger.debug(
            "Attempting to send email",
            extra={"recipient": to, "subject": subject}
        )

        try:
            self._deliver(to, self._build_message(to, subject, html, text))
        except TransientDependencyError as e:
            logger.error(
                f"Failed to send email: {str(e)}",
                extra={
                    "recipient": to,
                    "subject": subject,
                    "error": str(e),
                    "error_type": type(e.__cause__).__name__
                },
                exc_info=True
            )
            return False

        logger.info(
            "Email sent successfully",
            extra={"recipient": to, "subject": subject}
        )
        return True

    def _build_message(self, to: str, subject: str, html: str, text: str | None) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.config.MAIL_FROM
        message["To"] = to

        # Plain part first so clients prefer the HTML one
        if text:
            message.attach(MIMEText(text, "plain"))
        message.attach(MIMEText(html, "html"))
        return message

    def _deliver(self, to: str, message: MIMEMultipart):
        try:
            if self.config.MAIL_PORT == 465:
                server = smtplib.SMTP_SSL(self.config.MAIL_SERVER, self.config.MAIL_PORT, timeout=10)
            else:
                server = smtplib.SMTP(self.config.MAIL_SERVER, self.config.MAIL_PORT, timeout=10)
            with server:
                if self.config.MAIL_PORT != 465:
                    server.starttls()
                server.login(self.config.MAIL_USERNAME, self.config.MAIL_PASSWORD)
                server.sendmail(self.config.MAIL_FROM, to, message.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise TransientDependencyError(str(e)) from e

    def close(self):
        logger.debug("Email service closed", extra={"outbox_size": len(self.outbox)})
        self.outbox.clear()

    def send_verification_email(self, to: str, username: str, code: str) -> bool:
        subject, html, text = email_templates.verification_email(username, code)
        return self.send(to, subject, html, text)

    def send_password_reset_email(self, to: str, username: str, raw_token: str) -> bool:
        subject, html, text = email_templates.password_reset_email(username, raw_token)
        return self.send(to, subject, html, text)

    def send_password_changed_email(self, to: str, username: str) -> bool:
        subject, html, text = email_templates.password_changed_email(username)
        return self.send(to, subject, html, text)

    def send_order_notification(self, order: dict) -> bool:
        subject, html, text = email_templates.order_notification_email(order)
        return self.send(self.config.ADMIN_EMAIL, subject, html, text)

    def send_custom_order_request(self, name: str, email: str, phone: str | None,
                                  details: str, date_needed: str | None) -> bool:
        subject, html, text = email_templates.custom_order_email(name, email, phone, details, date_needed)
        return self.send(self.config.ADMIN_EMAIL, subject, html, text)
