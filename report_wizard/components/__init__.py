"""
UI Components for the Report Wizard.

Each component is a Streamlit-based function that renders one step or
control of the wizard. The page orchestrator in app.py composes them.
"""

from .widgets import clear_widget_state, sync_widget_values, widget_key
from .stepper import render_step_indicator, render_navigation
from .entries import render_treatments_step, render_costs_step
from .clinic_info import render_clinic_info_step, clinic_options
from .email_step import render_email_step
from .confirmation import render_confirmation_step, render_summary, render_outcome
from .account_panel import render_account_panel

__all__ = [
    'clear_widget_state',
    'sync_widget_values',
    'widget_key',
    'render_step_indicator',
    'render_navigation',
    'render_treatments_step',
    'render_costs_step',
    'render_clinic_info_step',
    'clinic_options',
    'render_email_step',
    'render_confirmation_step',
    'render_summary',
    'render_outcome',
    'render_account_panel',
]
