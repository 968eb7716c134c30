"""
Email Service for the Dentist Earnings Calculator
Sends the earnings report as an HTML email via SendGrid.

Features:
- SendGrid API integration
- Email validation (RFC 5322)
- Fixed report subject, sender bound to the service account
- Structured response handling (no retries; the user resubmits)
"""

import os
import re
import logging
from datetime import datetime
from typing import Optional, Tuple
from dataclasses import dataclass, field

from dotenv import load_dotenv
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from constants import REPORT_EMAIL_SUBJECT

load_dotenv()

logger = logging.getLogger(__name__)

# RFC 5322 address (practical subset)
EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

DEFAULT_SENDER_EMAIL = "relatorios@calculadora-dentista.pt"
DEFAULT_SENDER_NAME = "Calculadora de Rendimento"


@dataclass
class EmailConfig:
    """SendGrid credentials and the service account sender."""
    sendgrid_api_key: str = ""
    sender_email: str = DEFAULT_SENDER_EMAIL
    sender_name: str = DEFAULT_SENDER_NAME

    @classmethod
    def from_environment(cls) -> "EmailConfig":
        """SENDGRID_API_KEY, SENDER_EMAIL and SENDER_NAME (loaded from .env by python-dotenv)."""
        return cls(
            sendgrid_api_key=os.getenv("SENDGRID_API_KEY", ""),
            sender_email=os.getenv("SENDER_EMAIL", DEFAULT_SENDER_EMAIL),
            sender_name=os.getenv("SENDER_NAME", DEFAULT_SENDER_NAME),
        )

    def validate(self) -> Tuple[bool, str]:
        """Returns (is_valid, error_message)."""
        if not self.sendgrid_api_key:
            return False, "SENDGRID_API_KEY environment variable is not set"
        if not self.sendgrid_api_key.startswith("SG."):
            return False, "SENDGRID_API_KEY appears invalid (should start with 'SG.')"
        return True, ""


@dataclass
class EmailResult:
    """Outcome of one send, kept by the submission flow."""
    success: bool
    recipient: str
    sent_at: Optional[datetime] = None
    error_message: Optional[str] = None
    error_details: Optional[dict] = field(default_factory=dict)
    status_code: Optional[int] = None


MAX_EMAIL_LENGTH = 254


def validate_email(email: str) -> Tuple[bool, str]:
    """
    Check that a string is exactly one syntactically valid address.

    Returns:
        (is_valid, pt-PT error message or "")
    """
    address = (email or "").strip()
    if not address:
        return False, "O email é obrigatório"
    if "," in address or ";" in address:
        return False, "Indique apenas um endereço de email"
    if len(address) > MAX_EMAIL_LENGTH:
        return False, f"Email demasiado longo (máximo {MAX_EMAIL_LENGTH} caracteres)"
    if not EMAIL_REGEX.match(address):
        return False, "Formato de email inválido"
    # The regex allows dotless hosts such as "localhost"
    if "." not in address.rsplit("@", 1)[1]:
        return False, "Domínio de email inválido"
    return True, ""


class EmailService:
    """
    Sends the earnings report from the service account via SendGrid.

    Every send returns an EmailResult; nothing raises into the UI.

    Usage:
        service = EmailService()
        result = service.send_report_email("dentista@example.com", html, text)
        if not result.success:
            st.error(result.error_message)
    """

    def __init__(self, config: Optional[EmailConfig] = None):
        self.config = config or EmailConfig.from_environment()
        self._sg_client = None

    def is_configured(self) -> Tuple[bool, str]:
        return self.config.validate()

    def _get_sendgrid_client(self):
        """SendGrid client, created on first send."""
        if self._sg_client is None:
            self._sg_client = SendGridAPIClient(self.config.sendgrid_api_key)
        return self._sg_client

    def _build_message(self, recipient_email: str, subject: str,
                       html_body: str, plain_text: Optional[str]) -> Mail:
        return Mail(
            from_email=(self.config.sender_email, self.config.sender_name),
            to_emails=recipient_email,
            subject=subject,
            plain_text_content=plain_text or None,
            html_content=html_body,
        )

    @staticmethod
    def _result_from_response(recipient_email: str, response) -> EmailResult:
        status = response.status_code
        if status in (200, 201, 202):
            logger.info(f"Report email sent to {recipient_email} (status {status})")
            return EmailResult(
                success=True,
                recipient=recipient_email,
                sent_at=datetime.now(),
                status_code=status,
            )

        body = response.body.decode() if response.body else ""
        logger.error(f"SendGrid rejected report email: status={status} body={body[:200]}")
        return EmailResult(
            success=False,
            recipient=recipient_email,
            error_message=f"O envio falhou (estado {status})",
            error_details={"status_code": status, "body": body},
            status_code=status,
        )

    def send_html_email(self, recipient_email: str, subject: str, html_body: str,
                        plain_text: Optional[str] = None) -> EmailResult:
        """
        Send one HTML email (with optional text alternative) to one recipient.

        Configuration and address problems are returned as failed results
        before SendGrid is contacted.
        """
        configured, config_error = self.is_configured()
        if not configured:
            logger.warning(f"Email service not configured: {config_error}")
            return EmailResult(
                success=False,
                recipient=recipient_email,
                error_message=f"Serviço de email não configurado: {config_error}",
            )

        valid, address_error = validate_email(recipient_email)
        if not valid:
            return EmailResult(success=False, recipient=recipient_email, error_message=address_error)

        recipient = recipient_email.strip()
        try:
            message = self._build_message(recipient, subject, html_body, plain_text)
            response = self._get_sendgrid_client().send(message)
        except Exception as e:
            logger.exception("Failed to send report email")
            return EmailResult(
                success=False,
                recipient=recipient,
                error_message=f"Falha ao enviar o email: {e}",
                error_details={"exception_type": type(e).__name__, "message": str(e)},
            )
        return self._result_from_response(recipient, response)

    def send_report_email(self, recipient_email: str, html_body: str,
                          plain_text: Optional[str] = None) -> EmailResult:
        """Send the earnings report under the fixed report subject."""
        return self.send_html_email(recipient_email, REPORT_EMAIL_SUBJECT, html_body, plain_text)


# Convenience function for Streamlit usage
def get_email_service() -> EmailService:
    """Get configured email service instance."""
    return EmailService()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Email Service - Dentist Earnings Calculator")
    parser.add_argument(
        "--test",
        metavar="EMAIL",
        help="Send a sample report to the specified address"
    )
    args = parser.parse_args()

    service = EmailService()
    is_configured, msg = service.is_configured()
    if is_configured:
        print(f"✓ SendGrid configured, sender: {service.config.sender_name} <{service.config.sender_email}>")
    else:
        print(f"✗ {msg}")

    if args.test:
        from report_renderer import ReportRenderer
        from report_wizard import ReportFormState, TreatmentEntry

        sample = ReportFormState(
            clinic_name="CUF",
            contract_percentage="50",
            treatments=[TreatmentEntry("Limpeza", "100")],
        )
        renderer = ReportRenderer()
        result = service.send_report_email(
            recipient_email=args.test,
            html_body=renderer.render_html(sample),
            plain_text=renderer.render_text(sample),
        )
        if result.success:
            print(f"✓ Sample report sent to {result.recipient} (status {result.status_code})")
        else:
            print(f"✗ {result.error_message}")
            exit(1)
