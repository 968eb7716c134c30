"""
Report Form Schema - Validation Rules

Declarative rules for every wizard field plus the cross-field clinic rule.
Each validator returns a dict of field path -> message; an empty dict means
the fields are valid. Field paths match the widget keys used by the
components ("treatments.0.type", "costs.1.value", "contract_percentage"...).

Validation only reads the state, so it can run on every field change.
"""

from typing import Callable, Dict, List

from constants import (
    OTHER_CLINIC,
    MIN_CONTRACT_PERCENTAGE,
    MAX_CONTRACT_PERCENTAGE,
)
from email_service import validate_email
from report_wizard import (
    WizardStep,
    ReportFormState,
    TreatmentEntry,
    CostEntry,
)
from report_wizard.utils.calculations import parse_amount


# =============================================================================
# MESSAGES (pt-PT)
# =============================================================================

MSG_TREATMENT_TYPE_REQUIRED = "O tipo de tratamento é obrigatório"
MSG_TREATMENT_VALUE_INVALID = "O valor deve ser um número positivo ou zero"
MSG_TREATMENTS_REQUIRED = "Adicione pelo menos um tratamento"
MSG_COST_VALUE_INVALID = "O valor deve ser um número positivo"
MSG_CLINIC_REQUIRED = "Selecione uma clínica"
MSG_CUSTOM_CLINIC_REQUIRED = "O nome da clínica é obrigatório"
MSG_PERCENTAGE_INVALID = "A percentagem deve ser entre 0 e 100"
MSG_EMAIL_INVALID = "Email inválido"
MSG_CONFIRM_REQUIRED = "Deve confirmar os dados para prosseguir"


# =============================================================================
# FIELD VALIDATORS
# =============================================================================

def validate_treatments(treatments: List[TreatmentEntry]) -> Dict[str, str]:
    """Every treatment needs a type and a value >= 0; at least one row."""
    errors = {}
    if not treatments:
        errors["treatments"] = MSG_TREATMENTS_REQUIRED
        return errors

    for index, treatment in enumerate(treatments):
        if not treatment.type.strip():
            errors[f"treatments.{index}.type"] = MSG_TREATMENT_TYPE_REQUIRED
        value = parse_amount(treatment.value)
        if value is None or value < 0:
            errors[f"treatments.{index}.value"] = MSG_TREATMENT_VALUE_INVALID
    return errors


def validate_costs(costs: List[CostEntry]) -> Dict[str, str]:
    """Costs are optional; a value, when typed, must be a number >= 0."""
    errors = {}
    for index, cost in enumerate(costs):
        if not cost.value.strip():
            continue
        value = parse_amount(cost.value)
        if value is None or value < 0:
            errors[f"costs.{index}.value"] = MSG_COST_VALUE_INVALID
    return errors


def validate_contract_percentage(raw: str) -> Dict[str, str]:
    """0 < percentage <= 100"""
    value = parse_amount(raw)
    if value is None or not (MIN_CONTRACT_PERCENTAGE < value <= MAX_CONTRACT_PERCENTAGE):
        return {"contract_percentage": MSG_PERCENTAGE_INVALID}
    return {}


def validate_clinic_info(state: ReportFormState) -> Dict[str, str]:
    """Clinic must be picked; "Outro" requires a custom name."""
    errors = {}
    if not state.clinic_name:
        errors["clinic_name"] = MSG_CLINIC_REQUIRED
    elif state.clinic_name == OTHER_CLINIC and not state.custom_clinic_name.strip():
        errors["custom_clinic_name"] = MSG_CUSTOM_CLINIC_REQUIRED

    errors.update(validate_contract_percentage(state.contract_percentage))
    return errors


def validate_report_email(email: str) -> Dict[str, str]:
    """Empty is allowed; anything else must be a valid single address."""
    if not email or not email.strip():
        return {}
    is_valid, _ = validate_email(email)
    if not is_valid:
        return {"report_email": MSG_EMAIL_INVALID}
    return {}


def validate_confirmation(state: ReportFormState) -> Dict[str, str]:
    if state.confirm_details is not True:
        return {"confirm_details": MSG_CONFIRM_REQUIRED}
    return {}


# =============================================================================
# STEP / FORM VALIDATION
# =============================================================================

STEP_VALIDATORS: Dict[WizardStep, Callable[[ReportFormState], Dict[str, str]]] = {
    WizardStep.TREATMENTS: lambda state: validate_treatments(state.treatments),
    WizardStep.COSTS: lambda state: validate_costs(state.costs),
    WizardStep.CLINIC_INFO: validate_clinic_info,
    WizardStep.EMAIL: lambda state: validate_report_email(state.report_email),
    WizardStep.CONFIRMATION: validate_confirmation,
}


def validate_step(step: WizardStep, state: ReportFormState) -> Dict[str, str]:
    """Validate only the fields shown on one step."""
    return STEP_VALIDATORS[step](state)


def validate_form(state: ReportFormState) -> Dict[str, str]:
    """Validate the whole form, as done right before submission."""
    errors = {}
    for validator in STEP_VALIDATORS.values():
        errors.update(validator(state))
    return errors
