"""
Confirmation Component

Renders the read-only report summary, the confirmation checkbox and the
result of the last submission.
"""

from typing import Optional

import pandas as pd
import streamlit as st

from report_renderer import ReportSummary, build_report_summary
from report_wizard import SubmissionOutcome
from report_wizard.controller import WizardController
from .widgets import bound_checkbox, show_field_error, widget_key


def _lines_frame(lines, label_header: str) -> pd.DataFrame:
    return pd.DataFrame(
        [{label_header: line.label, "Valor": line.amount_label} for line in lines]
    )


def render_summary(summary: ReportSummary) -> None:
    """Render a ReportSummary as Streamlit elements."""
    st.markdown("##### Resumo da Clínica")
    col1, col2 = st.columns(2)
    col1.metric("Clínica", summary.clinic_name)
    col2.metric("Percentagem do Contrato", summary.percentage_label)
    if summary.report_email:
        st.caption(f"O relatório será enviado para **{summary.report_email}**")

    st.markdown("##### Tratamentos Realizados")
    st.dataframe(_lines_frame(summary.treatments, "Tratamento"), hide_index=True, width="stretch")
    st.markdown(f"**Total Bruto:** {summary.gross_total_label}")

    st.markdown("##### Custos Deduzidos")
    if summary.costs:
        st.dataframe(_lines_frame(summary.costs, "Custo"), hide_index=True, width="stretch")
    else:
        st.caption("Sem custos registados")
    st.markdown(f"**Total de Custos:** {summary.cost_total_label}")

    st.markdown(
        f"""
        <div class="summary-card net-earnings">
            <span>Ganhos Líquidos</span>
            <strong>{summary.net_earnings_label}</strong>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_outcome(outcome: Optional[SubmissionOutcome]) -> None:
    if outcome is None:
        return
    if outcome.success:
        st.success(outcome.message)
    else:
        st.error(outcome.message)
    for warning in outcome.warnings:
        st.warning(warning)


def render_confirmation_step(wizard: WizardController,
                             outcome: Optional[SubmissionOutcome] = None) -> None:
    """
    Render the confirmation step.

    Args:
        wizard: Wizard controller
        outcome: Result of the last submission attempt, if any
    """
    render_summary(build_report_summary(wizard.state))

    st.markdown("---")
    wizard.state.confirm_details = bound_checkbox(
        "Confirmo que os dados estão corretos",
        key=widget_key("confirm_details"),
        value=wizard.state.confirm_details,
        disabled=wizard.submitting or wizard.submitted,
    )
    show_field_error(wizard.errors, "confirm_details")

    render_outcome(outcome)
