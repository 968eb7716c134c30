"""
Test Suite for the non-rendering helpers of the wizard components

Run with: python -m pytest tests/test_components.py
"""

import unittest
from unittest.mock import patch, Mock

from constants import CLINIC_OPTIONS, OTHER_CLINIC
from report_wizard import ClinicPreset, CostEntry, User
from report_wizard.components.clinic_info import clinic_options, PLACEHOLDER
from report_wizard.components.widgets import (
    clear_widget_state,
    sync_widget_values,
    widget_key,
)
from report_wizard.controller import WizardController


class TestClinicOptions(unittest.TestCase):

    def test_without_presets_uses_clinic_list(self):
        options = clinic_options([])
        self.assertEqual(options[0], PLACEHOLDER)
        self.assertEqual(options[1:-1], CLINIC_OPTIONS)
        self.assertEqual(options[-1], OTHER_CLINIC)

    def test_presets_replace_clinic_list(self):
        presets = [
            ClinicPreset(id="p-1", user_id="u-1", clinic_name="CUF", contract_percentage=50.0),
            ClinicPreset(id="p-2", user_id="u-1", clinic_name="Clínica do Bairro", contract_percentage=40.0),
        ]
        self.assertEqual(clinic_options(presets), [PLACEHOLDER, "CUF", "Clínica do Bairro", OTHER_CLINIC])


class TestWidgetState(unittest.TestCase):

    def setUp(self):
        self.session = {}
        patcher = patch('report_wizard.components.widgets.st', Mock(session_state=self.session))
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_sync_copies_typed_values(self):
        wizard = WizardController()
        wizard.state.costs.append(CostEntry())
        treatment = wizard.state.treatments[0]
        cost = wizard.state.costs[0]
        self.session.update({
            widget_key("treatment", treatment.row_id, "type"): "Limpeza",
            widget_key("treatment", treatment.row_id, "value"): "100",
            widget_key("cost", cost.row_id, "value"): "10",
            widget_key("contract_percentage"): "50",
            widget_key("confirm_details"): True,
        })

        sync_widget_values(wizard)

        self.assertEqual(treatment.type, "Limpeza")
        self.assertEqual(treatment.value, "100")
        self.assertEqual(cost.value, "10")
        self.assertEqual(cost.type, "")
        self.assertEqual(wizard.state.contract_percentage, "50")
        self.assertTrue(wizard.state.confirm_details)

    def test_sync_keeps_account_email(self):
        wizard = WizardController(user=User(id="u-1", email="dentista@example.com"))
        self.session[widget_key("report_email")] = "outro@example.com"

        sync_widget_values(wizard)

        self.assertEqual(wizard.state.report_email, "dentista@example.com")

    def test_clear_only_wizard_keys(self):
        self.session.update({widget_key("clinic_name"): "CUF", "auth_user": {"id": "u-1"}})

        clear_widget_state()

        self.assertEqual(self.session, {"auth_user": {"id": "u-1"}})


if __name__ == '__main__':
    unittest.main()
