"""
Constants and reference data for the Dentist Earnings Calculator
Includes the clinic list, wizard step titles and report wording
"""

# Clinics offered when the user has no saved presets
CLINIC_OPTIONS = [
    "Smile.up",
    "OralMED",
    "Malo Clinic",
    "Vitaldent",
    "CUF",
    "Master Dental",
    "Clínica Santa Madalena",
    "Clínica Médis",
    "O Meu Doutor",
    "Médico dos Dentes",
    "Dental Light",
]

# Literal option that unlocks the custom clinic name field
OTHER_CLINIC = "Outro"

# Contract percentage bounds (0 < p <= 100)
MIN_CONTRACT_PERCENTAGE = 0.0
MAX_CONTRACT_PERCENTAGE = 100.0

# Currency display
CURRENCY_SUFFIX = "€"
DECIMAL_PLACES = 2

# Wizard step titles (pt-PT)
STEP_TITLES = {
    'treatments': 'Tratamentos',
    'costs': 'Custos',
    'clinic_info': 'Informações da Clínica',
    'email': 'E-mail',
    'confirmation': 'Confirmação',
}

# Fallback labels for unnamed rows
UNNAMED_TREATMENT_LABEL = "Tratamento sem nome"
UNNAMED_COST_LABEL = "Custo sem nome"
UNSPECIFIED_CLINIC_LABEL = "Não especificado"

# Email report
REPORT_EMAIL_SUBJECT = "Relatório de Ganhos Diários - Dentista"
REPORT_TITLE = "Relatório de Ganhos Diários"
REPORT_SUBTITLE = "Calculadora de Rendimento Líquido - Dentista"

# Application configuration
APP_CONFIG = {
    'title': 'Calculadora de Rendimento Líquido',
    'icon': '🦷',
    'layout': 'centered',
    'initial_sidebar_state': 'expanded'
}

# Page names for navigation
PAGE_NAMES = {
    'wizard': '🧮 Novo Relatório',
    'dashboard': '📂 Meus Relatórios',
}

# Database tables
REPORTS_TABLE = "reports"
CLINIC_SETTINGS_TABLE = "clinic_settings"

# Date format for report history (pt-PT)
DATE_FORMAT = "%d/%m/%Y %H:%M"
