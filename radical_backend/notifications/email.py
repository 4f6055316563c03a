# radical_backend/notifications/email.py
import smtplib
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from email.message import EmailMessage

import requests
import sib_api_v3_sdk
from sib_api_v3_sdk.rest import ApiException

from radical_backend.logging_config import setup_logging

logger = setup_logging()

RESEND_API_URL = 'https://api.resend.com/emails'

EmailContent = namedtuple('EmailContent', ['subject', 'html', 'text'])


class EmailDeliveryError(Exception):
    """Raised by a sender when the provider refused or failed the message."""


def build_otp_email(admin_name, otp_code, ttl_minutes=10):
    year = datetime.now().year
    subject = "RADICAL DESIGN - Password Reset Verification Code"
    html = (
        f"<div style=\"font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;\">"
        f"<h1 style=\"color: #d4af37;\">RADICAL DESIGN Ltd</h1>"
        f"<p>Hi {admin_name},</p>"
        f"<p>You requested to reset your admin account password. "
        f"Use the verification code below to proceed:</p>"
        f"<p style=\"font-size: 36px; font-weight: bold; letter-spacing: 8px; color: #d4af37;\">{otp_code}</p>"
        f"<p>This code is valid for {ttl_minutes} minutes.</p>"
        f"<p><strong>Security Notice:</strong> Never share this code with anyone. "
        f"RADICAL DESIGN staff will never ask for this code.</p>"
        f"<p>If you didn't request a password reset, your account is safe. Just ignore this email.</p>"
        f"<p style=\"color: #666; font-size: 12px;\">&copy; {year} RADICAL DESIGN Ltd. All rights reserved.</p>"
        f"</div>"
    )
    text = (
        f"RADICAL DESIGN Ltd - Password Reset Verification Code\n\n"
        f"Hi {admin_name},\n\n"
        f"You requested to reset your admin account password. "
        f"Use the verification code below to proceed:\n\n"
        f"YOUR VERIFICATION CODE: {otp_code}\n\n"
        f"This code is valid for {ttl_minutes} minutes.\n\n"
        f"Never share this code with anyone. RADICAL DESIGN staff will never ask for this code.\n"
        f"If you didn't request a password reset, your account is safe. Just ignore this email.\n\n"
        f"(c) {year} RADICAL DESIGN Ltd. All rights reserved.\n"
    )
    return EmailContent(subject, html, text)


class ConsoleEmailSender:
    """Development sink: writes the message to the log instead of sending it."""

    def __init__(self, sender):
        self.sender = sender

    def send(self, to_email, content):
        logger.info("=" * 80)
        logger.info(f"[EMAIL] To: {to_email}")
        logger.info(f"[EMAIL] From: {self.sender}")
        logger.info(f"[EMAIL] Subject: {content.subject}")
        logger.info("-" * 80)
        logger.info(content.text)
        logger.info("=" * 80)
        return 'console'


class SmtpEmailSender:
    def __init__(self, sender, host, port=587, username=None, password=None, secure=False):
        self.sender = sender
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.secure = secure

    def send(self, to_email, content):
        if not self.host:
            raise EmailDeliveryError("SMTP host is not configured.")

        message = EmailMessage()
        message['Subject'] = content.subject
        message['From'] = self.sender
        message['To'] = to_email
        message.set_content(content.text)
        message.add_alternative(content.html, subtype='html')

        smtp_class = smtplib.SMTP_SSL if self.secure else smtplib.SMTP
        try:
            with smtp_class(self.host, self.port, timeout=30) as smtp:
                if not self.secure:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or '')
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDeliveryError(f"SMTP delivery failed: {e}") from e
        return message['Message-ID']


class BrevoEmailSender:
    def __init__(self, sender, api_key, sender_name='RADICAL DESIGN'):
        self.sender = sender
        self.api_key = api_key
        self.sender_name = sender_name

    def send(self, to_email, content):
        if not self.api_key:
            raise EmailDeliveryError("Brevo API key is not configured.")

        # Initialize Brevo API client
        configuration = sib_api_v3_sdk.Configuration()
        configuration.api_key['api-key'] = self.api_key
        api_client = sib_api_v3_sdk.ApiClient(configuration)
        api_instance = sib_api_v3_sdk.TransactionalEmailsApi(api_client)

        send_smtp_email = sib_api_v3_sdk.SendSmtpEmail(
            to=[{"email": to_email}],
            sender={"name": self.sender_name, "email": self.sender},
            subject=content.subject,
            html_content=content.html,
            text_content=content.text
        )
        try:
            api_response = api_instance.send_transac_email(send_smtp_email)
        except ApiException as e:
            raise EmailDeliveryError(
                f"Exception when calling TransactionalEmailsApi->send_transac_email: {e}") from e
        return getattr(api_response, 'message_id', None)


class ResendEmailSender:
    def __init__(self, sender, api_key, timeout=15):
        self.sender = sender
        self.api_key = api_key
        self.timeout = timeout

    def send(self, to_email, content):
        if not self.api_key:
            raise EmailDeliveryError("Resend API key is not configured.")

        try:
            response = requests.post(
                RESEND_API_URL,
                headers={'Authorization': f'Bearer {self.api_key}'},
                json={
                    'from': self.sender,
                    'to': [to_email],
                    'subject': content.subject,
                    'html': content.html,
                    'text': content.text,
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise EmailDeliveryError(f"Resend delivery failed: {e}") from e
        return response.json().get('id')


def create_sender(config):
    provider = (config.get('EMAIL_PROVIDER') or 'console').lower()
    sender = config.get('EMAIL_FROM')

    if provider == 'smtp':
        return SmtpEmailSender(
            sender,
            host=config.get('EMAIL_SMTP_HOST'),
            port=config.get('EMAIL_SMTP_PORT') or 587,
            username=config.get('EMAIL_SMTP_USER'),
            password=config.get('EMAIL_SMTP_PASS'),
            secure=bool(config.get('EMAIL_SMTP_SECURE')),
        )
    if provider == 'brevo':
        return BrevoEmailSender(sender, api_key=config.get('BREVO_API_KEY'))
    if provider == 'resend':
        return ResendEmailSender(sender, api_key=config.get('RESEND_API_KEY'))
    if provider != 'console':
        logger.warning(f"Unknown EMAIL_PROVIDER '{provider}', falling back to console.")
    return ConsoleEmailSender(sender)


class EmailDispatcher:
    """Hands e-mails to a sender without making the caller wait for the result.

    Delivery failures never propagate to the caller; they are logged, which is
    the only place the outcome of a dispatched message can be observed.
    """

    def __init__(self, sender, run_async=True, max_workers=2):
        self.sender = sender
        self.run_async = run_async
        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix='email') if run_async else None

    def dispatch(self, to_email, content):
        if self._executor is None:
            try:
                result = self.sender.send(to_email, content)
            except Exception as e:
                logger.error(f"Failed to send email to {to_email}: {e}")
                return None
            logger.info(f"Email sent successfully to {to_email}: {result}")
            return None

        future = self._executor.submit(self.sender.send, to_email, content)
        future.add_done_callback(lambda f: self._log_outcome(to_email, f))
        return future

    @staticmethod
    def _log_outcome(to_email, future):
        error = future.exception()
        if error is not None:
            logger.error(f"Failed to send email to {to_email}: {error}")
        else:
            logger.info(f"Email sent successfully to {to_email}: {future.result()}")

    def shutdown(self, wait=True):
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
