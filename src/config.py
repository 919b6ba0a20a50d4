"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "output"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Storage
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'adherence.sqlite'}")
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql").lower()  # "sql" | "memory"

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# OpenTelemetry
TRACING_ENABLED = os.getenv("TRACING_ENABLED", "false").lower() == "true"
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
SERVICE_NAME = os.getenv("SERVICE_NAME", "medication-adherence")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "development")

# HTTP API
API_PORT = int(os.getenv("API_PORT", "8000"))

# Inventory defaults (edit form / refill form)
DEFAULT_STOCK_THRESHOLD = float(os.getenv("DEFAULT_STOCK_THRESHOLD", "5"))
DEFAULT_PACK_SIZE = int(os.getenv("DEFAULT_PACK_SIZE", "30"))
