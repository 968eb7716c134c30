"""
Treatment and cost row editors (steps 1 and 2).
"""

import streamlit as st

from report_wizard.controller import WizardController
from report_wizard.utils.formatting import format_euro
from .widgets import bound_text_input, show_field_error, widget_key


def render_treatments_step(wizard: WizardController) -> None:
    """Render the treatment rows with add/remove controls."""
    st.markdown("#### Tratamentos Realizados")

    treatments = wizard.state.treatments
    for index, treatment in enumerate(treatments):
        col_type, col_value, col_remove = st.columns([3, 2, 1], vertical_alignment="bottom")

        with col_type:
            treatment.type = bound_text_input(
                f"Tipo de Tratamento {index + 1}",
                key=widget_key("treatment", treatment.row_id, "type"),
                value=treatment.type,
                placeholder="Tipo de tratamento",
            )
            show_field_error(wizard.errors, f"treatments.{index}.type")

        with col_value:
            treatment.value = bound_text_input(
                "Valor (€)",
                key=widget_key("treatment", treatment.row_id, "value"),
                value=treatment.value,
                placeholder="0.00",
            )
            show_field_error(wizard.errors, f"treatments.{index}.value")

        with col_remove:
            if len(treatments) > 1:
                st.button(
                    "Remover",
                    key=widget_key("treatment", treatment.row_id, "remove"),
                    on_click=wizard.remove_treatment,
                    args=(index,),
                )

    show_field_error(wizard.errors, "treatments")
    st.button("➕ Adicionar Tratamento", key=widget_key("add_treatment"), on_click=wizard.add_treatment)
    st.caption(f"Total bruto: **{format_euro(wizard.earnings.gross_total)}**")


def render_costs_step(wizard: WizardController) -> None:
    """Render the optional cost rows."""
    st.markdown("#### Custos Associados")
    st.caption(
        "Adicione quaisquer custos que tenha como médico dentista "
        "que devem ser deduzidos do seu rendimento."
    )

    costs = wizard.state.costs
    if not costs:
        st.info("Sem custos registados. Pode avançar sem adicionar custos.")

    for index, cost in enumerate(costs):
        col_type, col_value, col_remove = st.columns([3, 2, 1], vertical_alignment="bottom")

        with col_type:
            cost.type = bound_text_input(
                f"Tipo de Custo {index + 1}",
                key=widget_key("cost", cost.row_id, "type"),
                value=cost.type,
                placeholder="Tipo de custo",
            )

        with col_value:
            cost.value = bound_text_input(
                "Valor (€)",
                key=widget_key("cost", cost.row_id, "value"),
                value=cost.value,
                placeholder="0.00",
            )
            show_field_error(wizard.errors, f"costs.{index}.value")

        with col_remove:
            st.button(
                "Remover",
                key=widget_key("cost", cost.row_id, "remove"),
                on_click=wizard.remove_cost,
                args=(index,),
            )

    st.button("➕ Adicionar Custo", key=widget_key("add_cost"), on_click=wizard.add_cost)
    st.caption(f"Total de custos: **{format_euro(wizard.earnings.cost_total)}**")
