"""
Earnings Report Renderer using Jinja2

Builds one ReportSummary view model from the form state and renders it as:
1. The on-screen confirmation summary (report_wizard.components.confirmation)
2. A styled HTML email body
3. A plain-text email alternative

Every representation reads the formatted figures from the same
ReportSummary, so the confirmation screen and the email cannot disagree.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from constants import (
    REPORT_TITLE,
    REPORT_SUBTITLE,
    UNNAMED_TREATMENT_LABEL,
    UNNAMED_COST_LABEL,
    UNSPECIFIED_CLINIC_LABEL,
)
from report_wizard import ReportFormState, EarningsSummary
from report_wizard.utils.calculations import amount_or_zero, calculate_earnings
from report_wizard.utils.formatting import format_euro, format_percentage


@dataclass
class ReportLine:
    """One treatment or cost line as displayed."""
    label: str
    amount: float
    amount_label: str


@dataclass
class ReportSummary:
    """Presentation data shared by the confirmation screen and the email."""
    clinic_name: str
    percentage_label: str
    report_email: str
    treatments: List[ReportLine] = field(default_factory=list)
    costs: List[ReportLine] = field(default_factory=list)
    earnings: Optional[EarningsSummary] = None
    gross_total_label: str = ""
    cost_total_label: str = ""
    net_earnings_label: str = ""


def resolve_clinic_name(state: ReportFormState) -> str:
    """"Outro" resolves to the custom name, otherwise the picked clinic."""
    return state.resolved_clinic_name() or UNSPECIFIED_CLINIC_LABEL


def build_report_summary(state: ReportFormState) -> ReportSummary:
    """
    Build the view model for a form state.

    Blank cost rows (no description and no value) are left out; treatment
    rows are always listed.
    """
    earnings = calculate_earnings(state)

    treatments = []
    for treatment in state.treatments:
        amount = amount_or_zero(treatment.value)
        treatments.append(ReportLine(
            label=treatment.type.strip() or UNNAMED_TREATMENT_LABEL,
            amount=amount,
            amount_label=format_euro(amount),
        ))

    costs = []
    for cost in state.costs:
        if not cost.type.strip() and not cost.value.strip():
            continue
        amount = amount_or_zero(cost.value)
        costs.append(ReportLine(
            label=cost.type.strip() or UNNAMED_COST_LABEL,
            amount=amount,
            amount_label=format_euro(amount),
        ))

    return ReportSummary(
        clinic_name=resolve_clinic_name(state),
        percentage_label=format_percentage(earnings.percentage),
        report_email=state.report_email.strip(),
        treatments=treatments,
        costs=costs,
        earnings=earnings,
        gross_total_label=format_euro(earnings.gross_total),
        cost_total_label=format_euro(earnings.cost_total),
        net_earnings_label=format_euro(earnings.net_earnings),
    )


class ReportRenderer:
    """Render the earnings report email using Jinja2"""

    TEMPLATE_DIR = Path(__file__).parent / 'templates' / 'report_email'

    def __init__(self):
        """Initialize renderer with Jinja2 environment."""
        self.env = Environment(
            loader=FileSystemLoader(str(self.TEMPLATE_DIR)),
            # Treatment and clinic names are user input
            autoescape=select_autoescape(['html']),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_html(self, state: ReportFormState, summary: Optional[ReportSummary] = None) -> str:
        """
        Render the HTML email body.

        Args:
            state: Form state to report on
            summary: Prebuilt summary (built from state if omitted)

        Returns:
            Rendered HTML document
        """
        summary = summary or build_report_summary(state)
        template = self.env.get_template('report_email.html')
        return template.render(
            summary=summary,
            title=REPORT_TITLE,
            subtitle=REPORT_SUBTITLE,
        )

    def render_text(self, state: ReportFormState, summary: Optional[ReportSummary] = None) -> str:
        """Render the plain-text alternative."""
        summary = summary or build_report_summary(state)
        template = self.env.get_template('report_email.txt')
        return template.render(
            summary=summary,
            title=REPORT_TITLE,
            subtitle=REPORT_SUBTITLE,
        ).strip()
