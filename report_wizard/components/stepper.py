"""
Stepper Component

Step indicator along the top and Back / Next / Submit buttons along the
bottom of the wizard.
"""

from typing import Callable, Optional

import streamlit as st

from constants import STEP_TITLES
from report_wizard.controller import WizardController
from .widgets import sync_widget_values, widget_key


def _synced(wizard: WizardController, action: Callable, *args) -> None:
    sync_widget_values(wizard)
    action(*args)


def render_step_indicator(wizard: WizardController) -> None:
    """Numbered step buttons. Completed steps can be clicked to jump back."""
    steps = wizard.steps
    columns = st.columns(len(steps))

    for position, (column, step) in enumerate(zip(columns, steps)):
        title = STEP_TITLES[step.value]
        if step == wizard.current_step:
            label = f"**{position + 1}. {title}**"
        elif position < wizard.step_index:
            label = f"✓ {title}"
        else:
            label = f"{position + 1}. {title}"

        with column:
            st.button(
                label,
                key=widget_key("step", step.value),
                disabled=not wizard.can_go_to(step) or wizard.submitting,
                on_click=_synced,
                args=(wizard, wizard.go_to, step),
                type="primary" if step == wizard.current_step else "secondary",
                width="stretch",
            )

    st.progress((wizard.step_index + 1) / len(steps))


def render_navigation(wizard: WizardController,
                      on_submit: Optional[Callable[[], None]] = None) -> None:
    """
    Back / Next buttons, with Submit replacing Next on the last step.

    Args:
        wizard: Wizard controller
        on_submit: Called when the Submit button is clicked
    """
    st.markdown("---")
    col_back, _, col_next = st.columns([1, 2, 1])

    with col_back:
        if not wizard.is_first_step:
            st.button(
                "← Anterior",
                key=widget_key("nav_back"),
                on_click=_synced,
                args=(wizard, wizard.back),
                disabled=wizard.submitting,
                width="stretch",
            )

    with col_next:
        if wizard.is_last_step:
            st.button(
                "A enviar..." if wizard.submitting else "Terminar",
                key=widget_key("nav_submit"),
                type="primary",
                on_click=_synced if on_submit else None,
                args=(wizard, on_submit) if on_submit else None,
                disabled=not wizard.can_submit or wizard.submitted,
                width="stretch",
            )
        else:
            st.button(
                "Seguinte →",
                key=widget_key("nav_next"),
                type="primary",
                on_click=_synced,
                args=(wizard, wizard.next),
                width="stretch",
            )
