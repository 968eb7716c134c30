"""
Test Suite for earnings calculations and money formatting

Run with: python -m pytest tests/test_calculations.py
"""

import unittest

from report_wizard import ReportFormState, TreatmentEntry, CostEntry
from report_wizard.utils.calculations import (
    parse_amount,
    amount_or_zero,
    sum_amounts,
    calculate_net_earnings,
    calculate_earnings,
)
from report_wizard.utils.formatting import format_euro, format_percentage


class TestParseAmount(unittest.TestCase):
    """Tests for parse_amount()"""

    def test_integer_string(self):
        self.assertEqual(parse_amount("100"), 100.0)

    def test_decimal_string(self):
        self.assertEqual(parse_amount("12.5"), 12.5)

    def test_comma_decimal_separator(self):
        self.assertEqual(parse_amount("12,5"), 12.5)

    def test_surrounding_whitespace(self):
        self.assertEqual(parse_amount("  40 "), 40.0)

    def test_negative_number(self):
        self.assertEqual(parse_amount("-3"), -3.0)

    def test_empty_is_none(self):
        self.assertIsNone(parse_amount(""))
        self.assertIsNone(parse_amount("   "))
        self.assertIsNone(parse_amount(None))

    def test_non_numeric_is_none(self):
        self.assertIsNone(parse_amount("abc"))
        self.assertIsNone(parse_amount("1e5"))
        self.assertIsNone(parse_amount("10€"))

    def test_numbers_pass_through(self):
        self.assertEqual(parse_amount(7), 7.0)
        self.assertEqual(parse_amount(2.5), 2.5)

    def test_non_finite_and_bool_rejected(self):
        self.assertIsNone(parse_amount(float("nan")))
        self.assertIsNone(parse_amount(float("inf")))
        self.assertIsNone(parse_amount(True))

    def test_overflowing_digit_string_rejected(self):
        self.assertIsNone(parse_amount("9" * 400))
        self.assertEqual(parse_amount("9" * 20), float("9" * 20))


class TestSums(unittest.TestCase):

    def test_amount_or_zero(self):
        self.assertEqual(amount_or_zero("abc"), 0.0)
        self.assertEqual(amount_or_zero("15"), 15.0)

    def test_sum_amounts_ignores_blank_entries(self):
        self.assertEqual(sum_amounts(["10", "", "5.5", "x"]), 15.5)

    def test_sum_of_nothing_is_zero(self):
        self.assertEqual(sum_amounts([]), 0.0)


class TestCalculateEarnings(unittest.TestCase):
    """Tests for calculate_earnings()"""

    def test_net_earnings_formula(self):
        self.assertAlmostEqual(calculate_net_earnings(200, 30, 40), 50.0)

    def test_single_treatment_no_costs(self):
        state = ReportFormState(
            clinic_name="CUF",
            contract_percentage="50",
            treatments=[TreatmentEntry("Limpeza", "100")],
        )

        summary = calculate_earnings(state)

        self.assertEqual(summary.gross_total, 100.0)
        self.assertEqual(summary.cost_total, 0.0)
        self.assertEqual(summary.net_earnings, 50.0)
        self.assertEqual(summary.percentage, 50.0)

    def test_multiple_treatments_and_costs(self):
        state = ReportFormState(
            contract_percentage="40",
            treatments=[
                TreatmentEntry("Limpeza", "60"),
                TreatmentEntry("Extração", "140"),
            ],
            costs=[
                CostEntry("Material", "20"),
                CostEntry("", ""),
                CostEntry("Laboratório", "10,5"),
            ],
        )

        summary = calculate_earnings(state)

        self.assertEqual(summary.gross_total, 200.0)
        self.assertEqual(summary.cost_total, 30.5)
        self.assertAlmostEqual(summary.net_earnings, 49.5)

    def test_costs_can_make_net_negative(self):
        state = ReportFormState(
            contract_percentage="10",
            treatments=[TreatmentEntry("Consulta", "50")],
            costs=[CostEntry("Material", "20")],
        )

        self.assertAlmostEqual(calculate_earnings(state).net_earnings, -15.0)

    def test_zero_value_treatment(self):
        state = ReportFormState(
            contract_percentage="50",
            treatments=[TreatmentEntry("Revisão", "0")],
        )

        summary = calculate_earnings(state)

        self.assertEqual(summary.gross_total, 0.0)
        self.assertEqual(summary.net_earnings, 0.0)

    def test_invalid_percentage_counts_as_zero(self):
        state = ReportFormState(
            contract_percentage="",
            treatments=[TreatmentEntry("Limpeza", "100")],
        )

        self.assertEqual(calculate_earnings(state).net_earnings, 0.0)


class TestFormatting(unittest.TestCase):
    """Tests for format_euro() and format_percentage()"""

    def test_two_decimals_and_suffix(self):
        self.assertEqual(format_euro(100), "100.00€")
        self.assertEqual(format_euro(12.5), "12.50€")
        self.assertEqual(format_euro(99.999), "100.00€")

    def test_zero(self):
        self.assertEqual(format_euro(0), "0.00€")

    def test_negative_zero_is_normalised(self):
        self.assertEqual(format_euro(-0.001), "0.00€")

    def test_negative(self):
        self.assertEqual(format_euro(-12.5), "-12.50€")

    def test_none(self):
        self.assertEqual(format_euro(None), "—")

    def test_percentage(self):
        self.assertEqual(format_percentage(50.0), "50%")
        self.assertEqual(format_percentage(37.5), "37.5%")


if __name__ == '__main__':
    unittest.main()
