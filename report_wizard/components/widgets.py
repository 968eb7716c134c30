"""
Widget helpers shared by the step components.

Widgets are keyed and seeded from the controller state the first time they
render; after that Streamlit owns the widget value and the component writes
it back into the controller on every run.
"""

import streamlit as st

WIDGET_PREFIX = "wz_"


def widget_key(*parts) -> str:
    return WIDGET_PREFIX + "_".join(str(p) for p in parts)


def bound_text_input(label: str, key: str, value: str, **kwargs) -> str:
    if key not in st.session_state:
        st.session_state[key] = value
    return st.text_input(label, key=key, **kwargs)


def bound_checkbox(label: str, key: str, value: bool, **kwargs) -> bool:
    if key not in st.session_state:
        st.session_state[key] = value
    return st.checkbox(label, key=key, **kwargs)


def show_field_error(errors: dict, field_path: str) -> None:
    message = errors.get(field_path)
    if message:
        st.caption(f":red[⚠️ {message}]")


def clear_widget_state() -> None:
    """Drop every wizard widget value, e.g. after the form is reset."""
    for key in [k for k in st.session_state.keys() if str(k).startswith(WIDGET_PREFIX)]:
        del st.session_state[key]


def sync_widget_values(wizard) -> None:
    """
    Copy widget values from st.session_state into the form state.

    Button callbacks run before the script body re-renders the widgets, so
    they call this first to see what the user has just typed.
    """
    state = wizard.state
    session = st.session_state

    for treatment in state.treatments:
        treatment.type = session.get(widget_key("treatment", treatment.row_id, "type"), treatment.type)
        treatment.value = session.get(widget_key("treatment", treatment.row_id, "value"), treatment.value)
    for cost in state.costs:
        cost.type = session.get(widget_key("cost", cost.row_id, "type"), cost.type)
        cost.value = session.get(widget_key("cost", cost.row_id, "value"), cost.value)

    state.clinic_name = session.get(widget_key("clinic_name"), state.clinic_name)
    state.custom_clinic_name = session.get(widget_key("custom_clinic_name"), state.custom_clinic_name)
    state.contract_percentage = session.get(widget_key("contract_percentage"), state.contract_percentage)
    if not wizard.signed_in:
        state.report_email = session.get(widget_key("report_email"), state.report_email)
    state.confirm_details = session.get(widget_key("confirm_details"), state.confirm_details)
