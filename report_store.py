"""
Report Store

Relational store for reports and clinic presets, returning domain objects.
Wraps ReportQueries so the submission service and the dashboard never
touch SQL or DataFrames. Database errors (psycopg2.Error) propagate to
the caller, which decides whether they are fatal.
"""

import logging
from typing import List

import pandas as pd

from database import DatabaseConnection
from queries import ReportQueries
from report_wizard import ClinicPreset, Report

logger = logging.getLogger(__name__)


def _to_datetime(value):
    if value is None or pd.isna(value):
        return None
    return pd.Timestamp(value).to_pydatetime()


class ReportStore:
    """PostgreSQL-backed store for a user's reports and clinic presets."""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def insert_report(self, report: Report) -> Report:
        """Write a report snapshot. Returns it with id and created_at set."""
        result = ReportQueries.insert_report(
            self.db,
            user_id=report.user_id,
            clinic_name=report.clinic_name,
            contract_percentage=report.contract_percentage,
            treatments=report.treatments,
            costs=report.costs,
            net_earnings=report.net_earnings,
            report_email=report.report_email,
        )
        if not result.empty:
            row = result.iloc[0]
            report.id = str(row['id'])
            report.created_at = _to_datetime(row['created_at'])
        logger.info(f"Saved report {report.id} for user {report.user_id}")
        return report

    def list_reports(self, user_id: str) -> List[Report]:
        """A user's reports, newest first."""
        df = ReportQueries.list_reports(self.db, user_id)
        reports = []
        for row in df.to_dict('records'):
            reports.append(Report(
                id=str(row['id']),
                user_id=str(row['user_id']),
                clinic_name=row['clinic_name'],
                contract_percentage=float(row['contract_percentage']),
                treatments=list(row['treatments'] or []),
                costs=list(row['costs'] or []),
                net_earnings=float(row['net_earnings']),
                report_email=row.get('report_email') or "",
                created_at=_to_datetime(row['created_at']),
            ))
        return reports

    def upsert_clinic_preset(self, user_id: str, clinic_name: str, contract_percentage: float) -> ClinicPreset:
        result = ReportQueries.upsert_clinic_preset(self.db, user_id, clinic_name, contract_percentage)
        preset_id = str(result.iloc[0]['id']) if not result.empty else ""
        return ClinicPreset(
            id=preset_id,
            user_id=user_id,
            clinic_name=clinic_name,
            contract_percentage=contract_percentage,
        )

    def list_clinic_presets(self, user_id: str) -> List[ClinicPreset]:
        """A user's presets ordered by clinic name."""
        df = ReportQueries.list_clinic_presets(self.db, user_id)
        return [
            ClinicPreset(
                id=str(row['id']),
                user_id=str(row['user_id']),
                clinic_name=row['clinic_name'],
                contract_percentage=float(row['contract_percentage']),
            )
            for row in df.to_dict('records')
        ]

    def delete_clinic_preset(self, user_id: str, preset_id: str) -> None:
        ReportQueries.delete_clinic_preset(self.db, user_id, preset_id)
        logger.info(f"Deleted clinic preset {preset_id} for user {user_id}")
