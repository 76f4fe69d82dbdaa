from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
REPORTS_DIR = DATA_DIR / "reports"

# Roster export file names
FILE_PATTERNS = {
    "positions": "positions.csv",
    "org_units": "org_units.csv",
    "finance": "finance.csv",
}

REQUIRED_COLUMNS = {
    "positions": {"position_id"},
    "org_units": {"branch_code", "directorate_code"},
    "finance": {"fund_centre_code", "vote_type", "budget"},
}

# HR exports use camelCase headers; map them to our field names
COLUMN_ALIASES = {
    "positionId": "position_id",
    "positionTitle": "position_title",
    "classificationGroup": "classification_group",
    "classificationLevel": "classification_level",
    "occupancyStatus": "occupancy_status",
    "incumbentName": "incumbent_name",
    "incumbentId": "incumbent_id",
    "tenureType": "tenure_type",
    "startDate": "start_date",
    "endDate": "end_date",
    "languageProfile": "language_profile",
    "branchCode": "branch_code",
    "branchName": "branch_name",
    "directorateCode": "directorate_code",
    "directorateName": "directorate_name",
    "divisionCode": "division_code",
    "divisionName": "division_name",
    "fundCentreCode": "fund_centre_code",
    "reportingToPositionId": "reporting_to_position_id",
    "fundingSource": "funding_source",
    "fundingSunsetDate": "funding_sunset_date",
    "isCritical": "is_critical",
    "isDoublebanked": "is_double_banked",
    "isDoubleBanked": "is_double_banked",
    "ee_visibleMinority": "ee_visible_minority",
    "eeGender": "ee_gender",
    "eeVisibleMinority": "ee_visible_minority",
    "eeIndigenous": "ee_indigenous",
    "eeDisability": "ee_disability",
    "voteType": "vote_type",
    "freeBalance": "free_balance",
    "fiscalYear": "fiscal_year",
    "p6Forecast": "p6_forecast",
    "priorYearActuals": "prior_year_actuals",
}

# Spellings seen in exports -> canonical occupancy status
STATUS_ALIASES = {
    "occupied": "Occupied",
    "occupied - acting": "Occupied-Acting",
    "occupied-acting": "Occupied-Acting",
    "acting": "Occupied-Acting",
    "vacant": "Vacant",
}

# Lower-cased, separator-free spellings -> canonical funding source
FUNDING_ALIASES = {
    "abase": "A-Base",
    "bbase": "B-Base",
    "program": "Program",
    "sunset": "Sunset",
}

TRUE_STRINGS = {"true", "t", "yes", "y", "1"}

# Lower-cased, separator-free spellings -> canonical finance vote type
VOTE_TYPE_ALIASES = {
    "salary": "Salary",
    "o&m": "O&M",
    "om": "O&M",
    "operating": "O&M",
    "capital": "Capital",
}
SALARY_VOTE = "Salary"

# Fund centre counts as aligned when |budget - HR salary cost| < 10% of budget
ALIGNMENT_TOLERANCE = 0.10

# Employment equity workforce availability targets, percent of occupied
EE_TARGETS = {
    "women": 48.0,
    "visible_minority": 22.0,
    "indigenous": 5.0,
    "disability": 9.0,
}
EE_WOMAN = "Woman"

# Workforce planning windows
DEFAULT_ENDING_WINDOW_DAYS = 365
DEFAULT_LIST_LIMIT = 30
