"""Default configuration constants for the BDA Tracker attrition engine."""

# Observation window (days). Day indices are 1-based; there is no Day 0.
DAYS_IN_WINDOW = 5
MIN_DAY = 1
MAX_DAY = DAYS_IN_WINDOW
DEFAULT_DAY = 1

# Attrition rate bounds (percent per day)
MIN_ATTRITION_PCT = 0.0
MAX_ATTRITION_PCT = 100.0

# Combat power threshold used for day-to-threshold projections
DEFAULT_THRESHOLD_FRACTION = 0.25

# Reconciliation policy
# use_attrition: blend the compound attrition model into destroyed counts
# manual_wins:   destroyed = max(manual, modeled); otherwise modeled replaces manual
DEFAULT_USE_ATTRITION = True
DEFAULT_MANUAL_WINS = True

# Variant spellings of composite unit labels -> canonical unit identifier.
# Keys and values are canonicalized (upper case, single spaces) before use.
UNIT_ALIASES = {
    "BDE HQ": "BDE HQ",
    "BDE-HQ": "BDE HQ",
    "BDEHQ": "BDE HQ",
    "BRIGADE HQ": "BDE HQ",
    "BRIGADE HEADQUARTERS": "BDE HQ",
    "BCG HQ": "BDE HQ",
}

# Fixed two-way group partition: primary members vs everyone else
PRIMARY_GROUP_NAME = "Maneuver BNs"
SECONDARY_GROUP_NAME = "Enablers"
PRIMARY_GROUP_MEMBERS = ["1651", "1652", "1653"]

# Force-wide total label
FORCE_TOTAL_NAME = "BCG"

# Spreadsheet export layout
EXPORT_SHEET_NAME = "BDA"
EXPORT_COLUMNS = [
    "BN",
    "Equipment Type",
    "On Hand",
    "Destroyed D1",
    "Destroyed D2",
    "Destroyed D3",
    "Destroyed D4",
    "Destroyed D5",
]
