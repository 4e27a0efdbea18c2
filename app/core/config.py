# /app/core/config.py

"""
Process-level settings, read once from the environment (and a local `.env`
file during development). Runtime exam settings such as the active subject or
the paper size are NOT here: they live in the `config` table and are managed
through `config_service`.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# --- Database ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./exam_portal.db")

# --- Bootstrap account, created on first startup if missing ---
DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "Admin123")
DEFAULT_ADMIN_DISPLAY_NAME = os.getenv("DEFAULT_ADMIN_DISPLAY_NAME", "Administrator")

# Used by bulk user creation when a row carries no password.
DEFAULT_PASSWORD_PREFIX = os.getenv("DEFAULT_PASSWORD_PREFIX", "safal")

# --- Google Sheet import ---
SHEET_FETCH_TIMEOUT = float(os.getenv("SHEET_FETCH_TIMEOUT", "30"))
