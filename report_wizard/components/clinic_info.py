"""
Clinic and contract percentage (step 3).

Anonymous users pick from the fixed clinic list. Signed-in users with
saved presets pick from their presets, which also fill the percentage.
"""

from typing import List

import streamlit as st

from constants import CLINIC_OPTIONS, OTHER_CLINIC
from report_wizard import ClinicPreset
from report_wizard.controller import WizardController
from .widgets import bound_text_input, show_field_error, widget_key

PLACEHOLDER = ""


def clinic_options(presets: List[ClinicPreset]) -> List[str]:
    """Options for the clinic selectbox, placeholder first and "Outro" last."""
    names = [p.clinic_name for p in presets] if presets else list(CLINIC_OPTIONS)
    names = [n for n in names if n != OTHER_CLINIC]
    return [PLACEHOLDER] + names + [OTHER_CLINIC]


def _on_clinic_change(wizard: WizardController, presets: List[ClinicPreset], key: str) -> None:
    selected = st.session_state[key]
    preset = next((p for p in presets if p.clinic_name == selected), None)
    if preset is not None:
        wizard.apply_preset(preset)
        st.session_state[widget_key("contract_percentage")] = wizard.state.contract_percentage
    else:
        wizard.state.clinic_name = selected


def render_clinic_info_step(wizard: WizardController, presets: List[ClinicPreset]) -> None:
    state = wizard.state
    options = clinic_options(presets)

    # A clinic that is no longer offered (e.g. preset deleted) falls back to the placeholder
    if state.clinic_name not in options:
        state.clinic_name = PLACEHOLDER

    select_key = widget_key("clinic_name")
    if st.session_state.get(select_key) not in options:
        st.session_state[select_key] = state.clinic_name

    state.clinic_name = st.selectbox(
        "Nome da Clínica",
        options=options,
        format_func=lambda name: "Selecione uma clínica" if name == PLACEHOLDER else name,
        key=select_key,
        on_change=_on_clinic_change,
        args=(wizard, presets, select_key),
    )
    show_field_error(wizard.errors, "clinic_name")

    if state.clinic_name == OTHER_CLINIC:
        state.custom_clinic_name = bound_text_input(
            "Nome da Clínica",
            key=widget_key("custom_clinic_name"),
            value=state.custom_clinic_name,
            placeholder="Introduza o nome da clínica",
        )
        show_field_error(wizard.errors, "custom_clinic_name")

    state.contract_percentage = bound_text_input(
        "Percentagem do seu contrato",
        key=widget_key("contract_percentage"),
        value=state.contract_percentage,
        placeholder="Introduza a sua percentagem",
    )
    show_field_error(wizard.errors, "contract_percentage")
