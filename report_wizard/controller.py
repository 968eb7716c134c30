"""
Wizard Controller

Holds the form state and the current step, and gates navigation on the
schema. The controller has no Streamlit dependency; the page keeps one
instance in st.session_state and calls into it from widget callbacks.
"""

import logging
from typing import Dict, List, Optional

from report_wizard import (
    ALL_STEPS,
    WizardStep,
    ReportFormState,
    TreatmentEntry,
    CostEntry,
    ClinicPreset,
    EarningsSummary,
    User,
)
from report_wizard.schema import validate_step
from report_wizard.utils.calculations import calculate_earnings

logger = logging.getLogger(__name__)


def compute_steps(signed_in: bool) -> List[WizardStep]:
    """
    Step list for the current session.

    Signed-in users already have an email address, so the Email step is
    removed from the list rather than hidden.
    """
    if signed_in:
        return [step for step in ALL_STEPS if step != WizardStep.EMAIL]
    return list(ALL_STEPS)


class WizardController:
    """
    Stepper state machine: Treatments -> Costs -> Clinic Info -> Email -> Confirmation.

    Usage:
        wizard = WizardController()
        wizard.state.treatments[0].type = "Limpeza"
        wizard.state.treatments[0].value = "100"
        if not wizard.next():
            show(wizard.errors)
    """

    def __init__(self, state: Optional[ReportFormState] = None, user: Optional[User] = None):
        self.state = state or ReportFormState()
        self.user = None
        self.current_step = WizardStep.TREATMENTS
        self.errors: Dict[str, str] = {}
        self.submitting = False
        self.submitted = False
        self.set_user(user)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    @property
    def steps(self) -> List[WizardStep]:
        return compute_steps(self.signed_in)

    def set_user(self, user: Optional[User]) -> None:
        """
        Bind the wizard to a session (or to none).

        A signed-in user's email becomes the report email; on sign-out it is
        cleared again unless it was edited. If the current step no longer
        exists it falls back to the step before it.
        """
        previous = self.user
        self.user = user
        if user is not None and user.email:
            self.state.report_email = user.email
        elif user is None and previous is not None and self.state.report_email == previous.email:
            self.state.report_email = ""

        if self.current_step not in self.steps:
            position = ALL_STEPS.index(self.current_step)
            earlier = [s for s in ALL_STEPS[:position] if s in self.steps]
            self.current_step = earlier[-1] if earlier else self.steps[0]

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def step_index(self) -> int:
        return self.steps.index(self.current_step)

    @property
    def is_first_step(self) -> bool:
        return self.step_index == 0

    @property
    def is_last_step(self) -> bool:
        return self.step_index == len(self.steps) - 1

    def next(self) -> bool:
        """
        Advance one step if the current step's fields are valid.

        Returns:
            True if the step changed. On failure self.errors holds the
            field messages.
        """
        if self.is_last_step:
            return False

        self.errors = validate_step(self.current_step, self.state)
        if self.errors:
            logger.debug(f"Step {self.current_step.value} blocked: {sorted(self.errors)}")
            return False

        self.current_step = self.steps[self.step_index + 1]
        return True

    def revalidate(self) -> None:
        """
        Refresh messages after a field change.

        Only runs once Next has been refused, so errors never appear before
        the user tries to leave the step.
        """
        if self.errors:
            self.errors = validate_step(self.current_step, self.state)

    def back(self) -> bool:
        """Go back one step. Never validates."""
        self.errors = {}
        if self.is_first_step:
            return False
        self.current_step = self.steps[self.step_index - 1]
        return True

    def can_go_to(self, step: WizardStep) -> bool:
        """Only the current step and steps before it can be jumped to."""
        return step in self.steps and self.steps.index(step) <= self.step_index

    def go_to(self, step: WizardStep) -> bool:
        if not self.can_go_to(step):
            return False
        self.errors = {}
        self.current_step = step
        return True

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def add_treatment(self) -> None:
        self.state.treatments.append(TreatmentEntry())

    def remove_treatment(self, index: int) -> bool:
        """Remove a treatment row. The last remaining row is kept."""
        if len(self.state.treatments) <= 1:
            return False
        if not 0 <= index < len(self.state.treatments):
            return False
        del self.state.treatments[index]
        self._drop_row_errors("treatments")
        return True

    def add_cost(self) -> None:
        self.state.costs.append(CostEntry())

    def remove_cost(self, index: int) -> bool:
        """Remove a cost row. Zero costs is valid."""
        if not 0 <= index < len(self.state.costs):
            return False
        del self.state.costs[index]
        self._drop_row_errors("costs")
        return True

    def _drop_row_errors(self, prefix: str) -> None:
        # Row indices shift after a removal
        self.errors = {k: v for k, v in self.errors.items() if not k.startswith(f"{prefix}.")}

    # ------------------------------------------------------------------
    # Clinic presets
    # ------------------------------------------------------------------

    def apply_preset(self, preset: ClinicPreset) -> None:
        """Select a saved clinic and take its contract percentage."""
        self.state.clinic_name = preset.clinic_name
        self.state.custom_clinic_name = ""
        self.state.contract_percentage = f"{preset.contract_percentage:g}"

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    @property
    def earnings(self) -> EarningsSummary:
        """Recomputed on every access."""
        return calculate_earnings(self.state)

    @property
    def can_submit(self) -> bool:
        return (
            self.current_step == WizardStep.CONFIRMATION
            and self.state.confirm_details is True
            and not self.submitting
        )

    def begin_submit(self) -> bool:
        """Mark a submission as in flight. Returns False if it may not start."""
        if not self.can_submit:
            return False
        self.submitting = True
        return True

    def end_submit(self, success: bool) -> None:
        self.submitting = False
        self.submitted = success

    def reset(self) -> None:
        """Start a new report, keeping the session."""
        self.state = ReportFormState()
        self.current_step = WizardStep.TREATMENTS
        self.errors = {}
        self.submitting = False
        self.submitted = False
        self.set_user(self.user)
