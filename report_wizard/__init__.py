"""
Report Wizard Module

Multi-step form that turns a day of treatments into a net earnings report.

Steps:
- Treatments: billable procedures performed (at least one row)
- Costs: deductible expenses (zero or more rows)
- Clinic Info: clinic name and contract percentage
- Email: where to send the report (skipped for signed-in users)
- Confirmation: summary, confirmation checkbox and submit
"""

import uuid
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from constants import OTHER_CLINIC


class WizardStep(Enum):
    """Wizard steps in display order."""
    TREATMENTS = "treatments"
    COSTS = "costs"
    CLINIC_INFO = "clinic_info"
    EMAIL = "email"
    CONFIRMATION = "confirmation"


ALL_STEPS = [
    WizardStep.TREATMENTS,
    WizardStep.COSTS,
    WizardStep.CLINIC_INFO,
    WizardStep.EMAIL,
    WizardStep.CONFIRMATION,
]


class FailureReason(Enum):
    """Why a submission did not succeed."""
    VALIDATION_FAILED = "validation-failed-upstream"
    PERSISTENCE_ERROR = "persistence-error"
    EMAIL_ERROR = "email-error"
    UNEXPECTED_ERROR = "unexpected-error"


@dataclass
class TreatmentEntry:
    """A billable procedure. Value is kept as typed by the user."""
    type: str = ""
    value: str = ""
    # Stable widget identity across row removals
    row_id: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False, repr=False)

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "value": self.value}


@dataclass
class CostEntry:
    """A deductible expense. Both fields are optional."""
    type: str = ""
    value: str = ""
    row_id: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False, repr=False)

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "value": self.value}


@dataclass
class ReportFormState:
    """
    Everything the wizard collects.

    Created with one blank treatment row and no costs; mutated step by step
    and consumed once at submission.
    """
    clinic_name: str = ""
    custom_clinic_name: str = ""
    contract_percentage: str = ""
    report_email: str = ""
    confirm_details: bool = False
    treatments: List[TreatmentEntry] = field(default_factory=lambda: [TreatmentEntry()])
    costs: List[CostEntry] = field(default_factory=list)

    def resolved_clinic_name(self) -> str:
        """Clinic name as it should appear on the report."""
        if self.clinic_name == OTHER_CLINIC:
            return self.custom_clinic_name.strip()
        return self.clinic_name


@dataclass
class User:
    """Signed-in user as returned by the identity provider."""
    id: str
    email: str


@dataclass
class ClinicPreset:
    """Saved clinic name + contract percentage, unique per user and name."""
    id: str
    user_id: str
    clinic_name: str
    contract_percentage: float


@dataclass
class Report:
    """Immutable snapshot of a submitted report, owned by a user."""
    user_id: str
    clinic_name: str
    contract_percentage: float
    treatments: List[Dict[str, str]]
    costs: List[Dict[str, str]]
    net_earnings: float
    report_email: str = ""
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class EarningsSummary:
    """Computed figures shared by the confirmation screen and the email."""
    gross_total: float
    cost_total: float
    net_earnings: float
    percentage: float


@dataclass
class SubmissionOutcome:
    """
    Single result of a submission.

    success is False only when the primary signal failed: the email for
    anonymous users, the save for signed-in users (unless the email still
    went out, in which case the failed save becomes a warning).
    """
    success: bool
    reason: Optional[FailureReason] = None
    message: str = ""
    warnings: List[str] = field(default_factory=list)
    report_saved: bool = False
    email_sent: bool = False
    errors: Dict[str, str] = field(default_factory=dict)
