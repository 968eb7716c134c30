"""
Test Suite for the submission orchestrator

Run with: python -m pytest tests/test_submission_service.py
"""

import unittest
from unittest.mock import Mock

from report_wizard import (
    FailureReason,
    ReportFormState,
    TreatmentEntry,
    CostEntry,
    User,
)
from report_wizard.services import SubmissionService
from report_wizard.services.submission_service import (
    MSG_NO_DESTINATION,
    MSG_PERSISTENCE,
    MSG_PRESET,
)
from tests.fakes import InMemoryReportStore, RecordingEmailService

USER = User(id="7d0c6f1e-0000-4000-8000-000000000001", email="dentista@example.com")


def confirmed_state(**overrides) -> ReportFormState:
    values = dict(
        clinic_name="CUF",
        contract_percentage="50",
        report_email="",
        confirm_details=True,
        treatments=[TreatmentEntry("Limpeza", "100")],
        costs=[CostEntry("Material", "10")],
    )
    values.update(overrides)
    return ReportFormState(**values)


class TestValidation(unittest.TestCase):

    def test_invalid_form_is_rejected_without_side_effects(self):
        store = InMemoryReportStore()
        email = RecordingEmailService()
        service = SubmissionService(store, email)

        outcome = service.submit(confirmed_state(confirm_details=False), user=USER)

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.reason, FailureReason.VALIDATION_FAILED)
        self.assertIn("confirm_details", outcome.errors)
        self.assertEqual(store.reports, [])
        self.assertEqual(email.sent, [])

    def test_anonymous_without_email_is_rejected(self):
        service = SubmissionService(InMemoryReportStore(), RecordingEmailService())

        outcome = service.submit(confirmed_state(), user=None)

        self.assertEqual(outcome.reason, FailureReason.VALIDATION_FAILED)
        self.assertEqual(outcome.message, MSG_NO_DESTINATION)


class TestAnonymousSubmission(unittest.TestCase):

    def test_email_sent(self):
        store = InMemoryReportStore()
        email = RecordingEmailService()
        service = SubmissionService(store, email)

        outcome = service.submit(confirmed_state(report_email="ana@example.com"), user=None)

        self.assertTrue(outcome.success)
        self.assertTrue(outcome.email_sent)
        self.assertFalse(outcome.report_saved)
        self.assertEqual(store.reports, [])
        self.assertEqual(len(email.sent), 1)
        self.assertEqual(email.sent[0]["to"], "ana@example.com")
        self.assertIn("40.00€", email.sent[0]["html"])
        self.assertIn("Ganhos Líquidos: 40.00€", email.sent[0]["text"])

    def test_email_failure(self):
        service = SubmissionService(InMemoryReportStore(), RecordingEmailService(fail=True))

        outcome = service.submit(confirmed_state(report_email="ana@example.com"), user=None)

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.reason, FailureReason.EMAIL_ERROR)
        self.assertIn("500", outcome.message)


class TestSignedInSubmission(unittest.TestCase):

    def test_saves_report_and_emails(self):
        store = InMemoryReportStore()
        email = RecordingEmailService()
        service = SubmissionService(store, email)

        outcome = service.submit(confirmed_state(report_email=USER.email), user=USER)

        self.assertTrue(outcome.success)
        self.assertTrue(outcome.report_saved)
        self.assertTrue(outcome.email_sent)
        self.assertEqual(outcome.warnings, [])

        report = store.reports[0]
        self.assertEqual(report.user_id, USER.id)
        self.assertEqual(report.clinic_name, "CUF")
        self.assertEqual(report.contract_percentage, 50.0)
        self.assertEqual(report.net_earnings, 40.0)
        self.assertEqual(report.treatments, [{"type": "Limpeza", "value": "100"}])
        self.assertEqual(report.costs, [{"type": "Material", "value": "10"}])
        self.assertIsNotNone(report.id)

    def test_upserts_clinic_preset(self):
        store = InMemoryReportStore()
        service = SubmissionService(store, RecordingEmailService())

        service.submit(confirmed_state(report_email=USER.email), user=USER)
        service.submit(confirmed_state(report_email=USER.email, contract_percentage="45"), user=USER)

        presets = store.list_clinic_presets(USER.id)
        self.assertEqual(len(presets), 1)
        self.assertEqual(presets[0].clinic_name, "CUF")
        self.assertEqual(presets[0].contract_percentage, 45.0)

    def test_custom_clinic_name_is_saved(self):
        store = InMemoryReportStore()
        service = SubmissionService(store, RecordingEmailService())

        service.submit(
            confirmed_state(clinic_name="Outro", custom_clinic_name="Clínica do Bairro", report_email=USER.email),
            user=USER,
        )

        self.assertEqual(store.reports[0].clinic_name, "Clínica do Bairro")
        self.assertEqual(store.list_clinic_presets(USER.id)[0].clinic_name, "Clínica do Bairro")

    def test_saved_without_email_address(self):
        email = RecordingEmailService()
        service = SubmissionService(InMemoryReportStore(), email)

        outcome = service.submit(confirmed_state(report_email=""), user=USER)

        self.assertTrue(outcome.success)
        self.assertFalse(outcome.email_sent)
        self.assertEqual(email.sent, [])

    def test_email_failure_after_save_is_a_warning(self):
        service = SubmissionService(InMemoryReportStore(), RecordingEmailService(fail=True))

        outcome = service.submit(confirmed_state(report_email=USER.email), user=USER)

        self.assertTrue(outcome.success)
        self.assertTrue(outcome.report_saved)
        self.assertFalse(outcome.email_sent)
        self.assertEqual(len(outcome.warnings), 1)

    def test_save_failure_with_email_sent(self):
        service = SubmissionService(InMemoryReportStore(fail_insert=True), RecordingEmailService())

        outcome = service.submit(confirmed_state(report_email=USER.email), user=USER)

        self.assertTrue(outcome.success)
        self.assertFalse(outcome.report_saved)
        self.assertTrue(outcome.email_sent)
        self.assertIn(MSG_PERSISTENCE, outcome.warnings)

    def test_save_and_email_failure(self):
        service = SubmissionService(InMemoryReportStore(fail_insert=True), RecordingEmailService(fail=True))

        outcome = service.submit(confirmed_state(report_email=USER.email), user=USER)

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.reason, FailureReason.PERSISTENCE_ERROR)
        self.assertEqual(outcome.message, MSG_PERSISTENCE)
        self.assertNotIn(MSG_PERSISTENCE, outcome.warnings)

    def test_save_failure_without_email(self):
        service = SubmissionService(InMemoryReportStore(fail_insert=True), RecordingEmailService())

        outcome = service.submit(confirmed_state(report_email=""), user=USER)

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.reason, FailureReason.PERSISTENCE_ERROR)

    def test_no_store_configured(self):
        service = SubmissionService(None, RecordingEmailService())

        outcome = service.submit(confirmed_state(report_email=""), user=USER)

        self.assertEqual(outcome.reason, FailureReason.PERSISTENCE_ERROR)

    def test_preset_failure_is_a_warning(self):
        store = InMemoryReportStore(fail_preset=True)
        service = SubmissionService(store, RecordingEmailService())

        outcome = service.submit(confirmed_state(report_email=USER.email), user=USER)

        self.assertTrue(outcome.success)
        self.assertTrue(outcome.report_saved)
        self.assertIn(MSG_PRESET, outcome.warnings)
        self.assertEqual(len(store.reports), 1)


class TestUnexpectedErrors(unittest.TestCase):

    def test_unexpected_exception_is_captured(self):
        email = Mock()
        email.send_report_email.side_effect = RuntimeError("boom")
        service = SubmissionService(InMemoryReportStore(), email)

        outcome = service.submit(confirmed_state(report_email="ana@example.com"), user=None)

        self.assertFalse(outcome.success)
        self.assertEqual(outcome.reason, FailureReason.UNEXPECTED_ERROR)


if __name__ == '__main__':
    unittest.main()
