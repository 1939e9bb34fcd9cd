"""
PocketCalc Configuration Settings
"""
import os

# Application Settings
APP_NAME = "PocketCalc"
VERSION = "1.0.0"

# Storage Settings
DB_PATH = os.environ.get(
    "POCKETCALC_DB_PATH",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "pocketcalc.db"),
)
HISTORY_KEY = "calculatorHistory"

# History Settings
MAX_HISTORY_ITEMS = 5

# Display Settings
EMPTY_EXPRESSION_TEXT = "0"
ERROR_TEXT = "Error"

# Keypad labels that map onto internal operators
KEYPAD_OPERATORS = {
    "+": "+",
    "-": "-",
    "*": "*",
    "/": "/",
    "×": "*",
    "÷": "/",
}

KEYPAD_UNARY = {
    "√": "sqrt",
    "x²": "square",
    "%": "percentage",
}

# Logging
LOG_LEVEL = os.environ.get("POCKETCALC_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Web API settings
WEB_HOST = os.environ.get("POCKETCALC_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("POCKETCALC_PORT", "8888"))
