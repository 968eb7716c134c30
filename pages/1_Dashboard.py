"""
My Reports (Page 1)
Report history and saved clinics for signed-in users.
Two sections:
1. Saved clinics (name + contract percentage) used to prefill the wizard
2. Submitted reports, newest first
"""

import streamlit as st
import pandas as pd
import sys
import logging
from pathlib import Path
from typing import List

import psycopg2

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from auth_service import AuthService
from constants import APP_CONFIG, DATE_FORMAT, PAGE_NAMES, UNNAMED_COST_LABEL, UNNAMED_TREATMENT_LABEL
from database import get_database_connection
from report_store import ReportStore
from report_wizard import ClinicPreset, Report
from report_wizard.schema import validate_contract_percentage
from report_wizard.utils.calculations import amount_or_zero, parse_amount
from report_wizard.utils.formatting import format_euro, format_percentage
from report_wizard.components import render_account_panel

logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title=f"Meus Relatórios | {APP_CONFIG['title']}",
    page_icon=APP_CONFIG['icon'],
    layout=APP_CONFIG['layout'],
)


def _lines_frame(lines: List[dict], fallback_label: str) -> pd.DataFrame:
    rows = []
    for line in lines:
        # Blank cost rows are stored as submitted; skip them here
        if not str(line.get('type', '')).strip() and not str(line.get('value', '')).strip():
            continue
        rows.append({
            'Descrição': str(line.get('type', '')).strip() or fallback_label,
            'Valor': format_euro(amount_or_zero(line.get('value'))),
        })
    return pd.DataFrame(rows)


def render_presets(store: ReportStore, user_id: str, presets: List[ClinicPreset]) -> None:
    st.subheader("🏥 Clínicas guardadas")
    st.caption("As clínicas guardadas aparecem na lista do formulário com a percentagem preenchida.")

    if not presets:
        st.info("Ainda não tem clínicas guardadas. São guardadas automaticamente ao submeter um relatório.")

    for preset in presets:
        col_name, col_pct, col_delete = st.columns([3, 2, 1], vertical_alignment="center")
        col_name.markdown(f"**{preset.clinic_name}**")
        col_pct.markdown(format_percentage(preset.contract_percentage))
        if col_delete.button("Remover", key=f"delete_preset_{preset.id}"):
            try:
                store.delete_clinic_preset(user_id, preset.id)
                st.rerun()
            except psycopg2.Error as e:
                logger.error(f"Failed to delete clinic preset: {type(e).__name__}")
                st.error("Não foi possível remover a clínica.")

    with st.expander("➕ Adicionar clínica"):
        with st.form("add_preset_form", clear_on_submit=True):
            name = st.text_input("Nome da Clínica")
            percentage = st.text_input("Percentagem do seu contrato")
            submitted = st.form_submit_button("Guardar")

        if submitted:
            errors = validate_contract_percentage(percentage)
            if not name.strip():
                st.error("O nome da clínica é obrigatório")
            elif errors:
                st.error(next(iter(errors.values())))
            else:
                try:
                    store.upsert_clinic_preset(user_id, name.strip(), parse_amount(percentage))
                    st.rerun()
                except psycopg2.Error as e:
                    logger.error(f"Failed to save clinic preset: {type(e).__name__}")
                    st.error("Não foi possível guardar a clínica.")


def render_report(report: Report) -> None:
    created = report.created_at.strftime(DATE_FORMAT) if report.created_at else "—"
    title = f"{created} · {report.clinic_name} · {format_euro(report.net_earnings)}"

    with st.expander(title):
        col1, col2 = st.columns(2)
        col1.metric("Percentagem do Contrato", format_percentage(report.contract_percentage))
        col2.metric("Ganhos Líquidos", format_euro(report.net_earnings))

        st.markdown("**Tratamentos Realizados**")
        treatments = _lines_frame(report.treatments, UNNAMED_TREATMENT_LABEL)
        st.dataframe(treatments, hide_index=True, width="stretch")

        st.markdown("**Custos Deduzidos**")
        costs = _lines_frame(report.costs, UNNAMED_COST_LABEL)
        if costs.empty:
            st.caption("Sem custos registados")
        else:
            st.dataframe(costs, hide_index=True, width="stretch")

        if report.report_email:
            st.caption(f"Enviado para {report.report_email}")


def render_reports(reports: List[Report]) -> None:
    st.subheader("📄 Relatórios")

    if not reports:
        st.info("Ainda não submeteu nenhum relatório.")
        return

    total = sum(r.net_earnings for r in reports)
    col1, col2 = st.columns(2)
    col1.metric("Relatórios", len(reports))
    col2.metric("Ganhos líquidos acumulados", format_euro(total))

    for report in reports:
        render_report(report)


def main():
    auth = AuthService()
    user = render_account_panel(auth)

    st.title(PAGE_NAMES['dashboard'])

    if user is None:
        st.warning("Inicie sessão na barra lateral para ver os seus relatórios.")
        st.page_link("app.py", label=PAGE_NAMES['wizard'])
        return

    store = ReportStore(get_database_connection())
    try:
        presets = store.list_clinic_presets(user.id)
        reports = store.list_reports(user.id)
    except psycopg2.Error as e:
        logger.error(f"Failed to load dashboard data: {type(e).__name__}")
        st.error("Não foi possível carregar os seus dados. Tente novamente mais tarde.")
        return

    render_presets(store, user.id, presets)
    st.markdown("---")
    render_reports(reports)


main()
