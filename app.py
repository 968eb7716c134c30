"""
Dentist Earnings Calculator - Main Application
Streamlit wizard that turns a day of treatments into a net earnings report
"""

import sys
import logging
from pathlib import Path

# Configure logging BEFORE importing streamlit
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s: %(message)s',
    datefmt='%H:%M:%S',
    force=True  # Override any existing config
)
logging.info("APP STARTUP: Logging initialized")

import psycopg2
import streamlit as st

# Add current directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from constants import APP_CONFIG, PAGE_NAMES
from auth_service import AuthService
from database import get_database_connection
from email_service import get_email_service
from report_store import ReportStore
from report_wizard import WizardStep
from report_wizard.controller import WizardController
from report_wizard.services import SubmissionService
from report_wizard.utils.formatting import WIZARD_CSS
from report_wizard.components import (
    clear_widget_state,
    render_account_panel,
    render_step_indicator,
    render_navigation,
    render_treatments_step,
    render_costs_step,
    render_clinic_info_step,
    render_email_step,
    render_confirmation_step,
    sync_widget_values,
)

logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title=APP_CONFIG['title'],
    page_icon=APP_CONFIG['icon'],
    layout=APP_CONFIG['layout'],
    initial_sidebar_state=APP_CONFIG['initial_sidebar_state']
)


def initialize_session_state():
    """Initialize session state variables"""

    if 'wizard' not in st.session_state:
        st.session_state.wizard = WizardController()

    # Result of the last submission attempt
    if 'submission_outcome' not in st.session_state:
        st.session_state.submission_outcome = None


def get_report_store():
    """Report store for the current run, or None if the database is unavailable."""
    try:
        return ReportStore(get_database_connection())
    except Exception as e:
        logging.error(f"Failed to initialize database connection: {e}")
        return None


def load_clinic_presets(store, user):
    if store is None or user is None:
        return []
    try:
        return store.list_clinic_presets(user.id)
    except psycopg2.Error as e:
        logger.warning(f"Could not load clinic presets: {type(e).__name__}")
        return []


def start_submission(wizard: WizardController):
    """Submit button callback. The work itself runs in the page body."""
    if wizard.begin_submit():
        st.session_state.submission_outcome = None


def run_submission(wizard: WizardController, store):
    service = SubmissionService(store=store, email_service=get_email_service())
    with st.spinner("A enviar relatório..."):
        outcome = service.submit(wizard.state, user=wizard.user)
    wizard.end_submit(outcome.success)
    wizard.errors = dict(outcome.errors)
    st.session_state.submission_outcome = outcome
    logger.info(f"Submission finished: success={outcome.success} reason={outcome.reason}")


def start_new_report(wizard: WizardController):
    wizard.reset()
    clear_widget_state()
    st.session_state.submission_outcome = None


def main():
    """Main application entry point"""

    initialize_session_state()
    st.markdown(WIZARD_CSS, unsafe_allow_html=True)

    wizard = st.session_state.wizard
    auth = AuthService()

    user = render_account_panel(auth)
    wizard.set_user(user)

    if user is not None:
        st.sidebar.page_link("pages/1_Dashboard.py", label=PAGE_NAMES['dashboard'])

    store = get_report_store()

    st.title(f"{APP_CONFIG['icon']} {APP_CONFIG['title']}")
    st.caption("Calcule os seus ganhos líquidos do dia e receba o relatório por email.")

    sync_widget_values(wizard)
    wizard.revalidate()

    render_step_indicator(wizard)

    step = wizard.current_step
    if step == WizardStep.TREATMENTS:
        render_treatments_step(wizard)
    elif step == WizardStep.COSTS:
        render_costs_step(wizard)
    elif step == WizardStep.CLINIC_INFO:
        render_clinic_info_step(wizard, load_clinic_presets(store, user))
    elif step == WizardStep.EMAIL:
        render_email_step(wizard)
    elif step == WizardStep.CONFIRMATION:
        render_confirmation_step(wizard, st.session_state.submission_outcome)

    render_navigation(wizard, on_submit=lambda: start_submission(wizard))

    if wizard.submitting:
        run_submission(wizard, store)
        st.rerun()

    if wizard.submitted:
        st.button(
            "🧮 Novo relatório",
            key="new_report",
            on_click=start_new_report,
            args=(wizard,),
            width="stretch",
        )


if __name__ == "__main__":
    main()
