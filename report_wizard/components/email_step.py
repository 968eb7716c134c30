"""
Email Step Component

Only shown to anonymous users; signed-in users receive the report at
their account address.
"""

import streamlit as st

from report_wizard.controller import WizardController
from .widgets import bound_text_input, show_field_error, widget_key


def render_email_step(wizard: WizardController) -> None:
    st.markdown("#### Email para receber o relatório")
    st.caption("Deixe em branco se não pretender receber o relatório por email.")

    wizard.state.report_email = bound_text_input(
        "Email",
        key=widget_key("report_email"),
        value=wizard.state.report_email,
        placeholder="nome@exemplo.pt",
    )
    show_field_error(wizard.errors, "report_email")

    st.info("💡 Crie uma conta para guardar os seus relatórios e clínicas.")
