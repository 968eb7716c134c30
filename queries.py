"""
SQL queries for the Dentist Earnings Calculator
All queries against the reports / clinic_settings PostgreSQL tables.
Every query is scoped by user_id.
"""

from typing import Optional
import pandas as pd
from psycopg2.extras import Json

from database import DatabaseConnection
from constants import REPORTS_TABLE, CLINIC_SETTINGS_TABLE


class ReportQueries:
    """SQL queries for reports and clinic presets"""

    @staticmethod
    def insert_report(db: DatabaseConnection, user_id: str, clinic_name: str,
                      contract_percentage: float, treatments: list, costs: list,
                      net_earnings: float, report_email: Optional[str] = None) -> pd.DataFrame:
        """
        Insert an immutable report snapshot

        Returns:
            DataFrame with the new row's id and created_at
        """
        query = f"""
        INSERT INTO {REPORTS_TABLE}
            (user_id, clinic_name, contract_percentage, treatments, costs,
             net_earnings, report_email)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        RETURNING id, created_at
        """
        params = (
            user_id,
            clinic_name,
            contract_percentage,
            Json(treatments),
            Json(costs),
            net_earnings,
            report_email or None,
        )
        return db.execute_query(query, params, commit=True)

    @staticmethod
    def list_reports(db: DatabaseConnection, user_id: str) -> pd.DataFrame:
        """Get a user's reports, newest first"""
        query = f"""
        SELECT
            id,
            user_id,
            clinic_name,
            contract_percentage,
            treatments,
            costs,
            net_earnings,
            report_email,
            created_at
        FROM {REPORTS_TABLE}
        WHERE user_id = %s
        ORDER BY created_at DESC
        """
        return db.execute_query(query, (user_id,))

    @staticmethod
    def upsert_clinic_preset(db: DatabaseConnection, user_id: str, clinic_name: str,
                             contract_percentage: float) -> pd.DataFrame:
        """
        Create or update a clinic preset (unique on user_id + clinic_name)

        Returns:
            DataFrame with the preset's id
        """
        query = f"""
        INSERT INTO {CLINIC_SETTINGS_TABLE}
            (user_id, clinic_name, contract_percentage, updated_at)
        VALUES (%s, %s, %s, NOW())
        ON CONFLICT (user_id, clinic_name)
        DO UPDATE SET
            contract_percentage = EXCLUDED.contract_percentage,
            updated_at = NOW()
        RETURNING id
        """
        return db.execute_query(query, (user_id, clinic_name, contract_percentage), commit=True)

    @staticmethod
    def list_clinic_presets(db: DatabaseConnection, user_id: str) -> pd.DataFrame:
        """Get a user's clinic presets ordered by name"""
        query = f"""
        SELECT id, user_id, clinic_name, contract_percentage
        FROM {CLINIC_SETTINGS_TABLE}
        WHERE user_id = %s
        ORDER BY clinic_name ASC
        """
        return db.execute_query(query, (user_id,))

    @staticmethod
    def delete_clinic_preset(db: DatabaseConnection, user_id: str, preset_id: str) -> pd.DataFrame:
        """Delete one of the user's presets; other users' rows are never touched"""
        query = f"""
        DELETE FROM {CLINIC_SETTINGS_TABLE}
        WHERE id = %s AND user_id = %s
        """
        return db.execute_query(query, (preset_id, user_id))
