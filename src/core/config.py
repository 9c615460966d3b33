"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("OPS_DB_PATH", PROJECT_ROOT / "data" / "db" / "ops-bridge.db"))

# =============================================================================
# REMOTE STORE (Bubble Data API)
# =============================================================================

BUBBLE_API_URL = os.environ.get("BUBBLE_API_URL", "https://opsapp.co/version-test/api/1.1")
BUBBLE_API_TOKEN = os.environ.get("BUBBLE_API_TOKEN", "")
BUBBLE_MIN_REQUEST_INTERVAL_MS = int(os.environ.get("BUBBLE_MIN_REQUEST_INTERVAL_MS", "500"))
BUBBLE_MAX_RETRIES = int(os.environ.get("BUBBLE_MAX_RETRIES", "3"))
BUBBLE_RETRY_DELAY_MS = int(os.environ.get("BUBBLE_RETRY_DELAY_MS", "1000"))
BUBBLE_TIMEOUT_SECONDS = float(os.environ.get("BUBBLE_TIMEOUT_SECONDS", "30"))
BUBBLE_PAGE_LIMIT = 100  # Data API refuses larger pages

# Data API type names, used as /obj/<type> path segments (lower-cased)
BUBBLE_TYPES = {
    "project": "Project",
    "task": "Task",
    "calendar_event": "calendarevent",  # Bubble stores this one lower-case
    "client": "Client",
    "sub_client": "Sub Client",  # Note the space
    "user": "User",
    "company": "Company",
    "task_type": "TaskType",
}

# =============================================================================
# CONVERSION DEFAULTS
# =============================================================================

DEFAULT_ACCENT_COLOR = "#59779F"
DEFAULT_PROJECT_COLOR = "#9CA3AF"
DEFAULT_EVENT_TITLE = "Untitled Event"
DEFAULT_CLIENT_NAME = "Unknown Client"
DEFAULT_SUB_CLIENT_NAME = "Unknown"
DEFAULT_COMPANY_NAME = "Unknown Company"

# Numeric timestamps below this magnitude are UNIX seconds, above it milliseconds
EPOCH_SECONDS_CUTOFF = 1e10

# Legacy status values still emitted by the store, mapped to canonical ones
TASK_STATUS_ALIASES = {"Scheduled": "Booked"}
PROJECT_STATUS_ALIASES = {"Pending": "RFQ"}

# External "employee type" text -> role
EMPLOYEE_TYPE_ROLES = {
    "Admin": "admin",
    "Office Crew": "officeCrew",
    "Field Crew": "fieldCrew",
}

# =============================================================================
# API CONFIGURATION
# =============================================================================

OPS_API_KEY = os.environ.get("OPS_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"

# =============================================================================
# COMPANY SETUP
# =============================================================================

# Task types seeded for a new company: (display, color)
DEFAULT_TASK_TYPES = [
    ("Quote", "#B5A381"),
    ("Installation", "#8195B5"),
    ("Repair", "#B58289"),
    ("Inspection", "#9DB582"),
    ("Consultation", "#A182B5"),
    ("Follow-up", "#C4A868"),
]
