"""
Submission Service

Runs the final step of the wizard: saves the report for signed-in users,
emails it when an address was given, and folds both results into one
SubmissionOutcome. Steps run in order (save, then email) and nothing is
retried; the user resubmits manually.

Outcome rules:
- Anonymous user: the email is the primary signal.
- Signed-in user: the save is the primary signal. A failed save does not
  stop the email; if the email then goes out the failed save is reported
  as a warning, otherwise the submission fails with persistence-error.
"""

import logging
from typing import Optional

import psycopg2

from email_service import EmailService
from report_renderer import ReportRenderer, ReportSummary, build_report_summary
from report_store import ReportStore
from report_wizard import (
    FailureReason,
    ReportFormState,
    Report,
    SubmissionOutcome,
    User,
)
from report_wizard.schema import validate_form
from report_wizard.utils.calculations import amount_or_zero

logger = logging.getLogger(__name__)

MSG_SUCCESS_EMAIL = "Relatório enviado com sucesso para {email}."
MSG_SUCCESS_SAVED = "Relatório guardado com sucesso."
MSG_SUCCESS_SAVED_AND_EMAILED = "Relatório guardado e enviado para {email}."
MSG_VALIDATION = "Existem campos por corrigir antes de enviar."
MSG_NO_DESTINATION = "Indique um email para receber o relatório."
MSG_PERSISTENCE = "Não foi possível guardar o relatório."
MSG_PRESET = "A clínica não foi guardada nas suas predefinições."
MSG_EMAIL_AFTER_SAVE = "O relatório foi guardado, mas o email não foi enviado: {error}"
MSG_UNEXPECTED = "Ocorreu um erro inesperado. Tente novamente."


class SubmissionService:
    """
    Orchestrates persistence and email for one wizard submission.

    Usage:
        service = SubmissionService(store=ReportStore(db), email_service=EmailService())
        outcome = service.submit(wizard.state, user=auth.get_current_user())
    """

    def __init__(self, store: Optional[ReportStore], email_service: EmailService,
                 renderer: Optional[ReportRenderer] = None):
        self.store = store
        self.email_service = email_service
        self.renderer = renderer or ReportRenderer()

    def submit(self, state: ReportFormState, user: Optional[User] = None) -> SubmissionOutcome:
        """
        Submit a confirmed form.

        Args:
            state: Form state from the wizard
            user: Signed-in user, or None for anonymous use

        Returns:
            SubmissionOutcome (never raises)
        """
        errors = validate_form(state)
        if errors:
            logger.info(f"Submission rejected, invalid fields: {sorted(errors)}")
            return SubmissionOutcome(
                success=False,
                reason=FailureReason.VALIDATION_FAILED,
                message=MSG_VALIDATION,
                errors=errors,
            )

        recipient = state.report_email.strip()
        if user is None and not recipient:
            return SubmissionOutcome(
                success=False,
                reason=FailureReason.VALIDATION_FAILED,
                message=MSG_NO_DESTINATION,
                errors={"report_email": MSG_NO_DESTINATION},
            )

        try:
            return self._submit(state, user, recipient)
        except Exception:
            logger.exception("Unexpected error during report submission")
            return SubmissionOutcome(
                success=False,
                reason=FailureReason.UNEXPECTED_ERROR,
                message=MSG_UNEXPECTED,
            )

    def _submit(self, state: ReportFormState, user: Optional[User], recipient: str) -> SubmissionOutcome:
        summary = build_report_summary(state)
        warnings = []

        report_saved = False
        if user is not None:
            report_saved = self._save_report(state, summary, user, warnings)

        email_sent = False
        email_error = None
        if recipient:
            result = self.email_service.send_report_email(
                recipient_email=recipient,
                html_body=self.renderer.render_html(state, summary),
                plain_text=self.renderer.render_text(state, summary),
            )
            email_sent = result.success
            email_error = result.error_message

        if user is None:
            if email_sent:
                return SubmissionOutcome(
                    success=True,
                    message=MSG_SUCCESS_EMAIL.format(email=recipient),
                    email_sent=True,
                )
            return SubmissionOutcome(
                success=False,
                reason=FailureReason.EMAIL_ERROR,
                message=email_error or "Falha ao enviar o email",
            )

        if report_saved:
            if recipient and not email_sent:
                warnings.append(MSG_EMAIL_AFTER_SAVE.format(error=email_error))
            message = MSG_SUCCESS_SAVED_AND_EMAILED.format(email=recipient) if email_sent else MSG_SUCCESS_SAVED
            return SubmissionOutcome(
                success=True,
                message=message,
                warnings=warnings,
                report_saved=True,
                email_sent=email_sent,
            )

        if email_sent:
            return SubmissionOutcome(
                success=True,
                message=MSG_SUCCESS_EMAIL.format(email=recipient),
                warnings=warnings,
                email_sent=True,
            )

        warnings = [w for w in warnings if w != MSG_PERSISTENCE]
        if recipient:
            warnings.append(email_error or "Falha ao enviar o email")
        return SubmissionOutcome(
            success=False,
            reason=FailureReason.PERSISTENCE_ERROR,
            message=MSG_PERSISTENCE,
            warnings=warnings,
        )

    def _save_report(self, state: ReportFormState, summary: ReportSummary,
                     user: User, warnings: list) -> bool:
        """Insert the report and upsert the clinic preset. Failures become warnings."""
        if self.store is None:
            logger.error("Report not saved: no database configured")
            warnings.append(MSG_PERSISTENCE)
            return False

        percentage = amount_or_zero(state.contract_percentage)
        report = Report(
            user_id=user.id,
            clinic_name=summary.clinic_name,
            contract_percentage=percentage,
            treatments=[t.to_dict() for t in state.treatments],
            costs=[c.to_dict() for c in state.costs],
            net_earnings=summary.earnings.net_earnings,
            report_email=state.report_email.strip(),
        )

        try:
            self.store.insert_report(report)
        except psycopg2.Error as e:
            logger.error(f"Failed to save report for user {user.id}: {type(e).__name__}: {e}")
            warnings.append(MSG_PERSISTENCE)
            return False

        try:
            self.store.upsert_clinic_preset(user.id, summary.clinic_name, percentage)
        except psycopg2.Error as e:
            logger.error(f"Failed to update clinic preset for user {user.id}: {type(e).__name__}: {e}")
            warnings.append(MSG_PRESET)

        return True
