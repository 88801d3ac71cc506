"""Inspection core configuration and settings."""

import os
import sys
from pathlib import Path
import yaml
from dotenv import load_dotenv
from loguru import logger

load_dotenv()

# Paths
CONFIG_DIR = Path(__file__).parent
# Runtime data lives under the working directory, not the installed package
DATA_DIR = Path(os.getenv("DATA_DIR", Path.cwd() / "data"))
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", DATA_DIR / "output"))
LOG_DIR = Path(os.getenv("LOG_DIR", Path.cwd() / "logs"))

CHECKLIST_CONFIG = Path(os.getenv("CHECKLIST_CONFIG", CONFIG_DIR / "checklists.yaml"))
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR}/inspections.db")

# Dashboard alert feed size
RECENT_ALERTS_LIMIT = int(os.getenv("RECENT_ALERTS_LIMIT", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() in {"1", "true", "yes"}


def ensure_dirs() -> None:
    """Create the data/output/log directories if missing."""
    for d in [DATA_DIR, OUTPUT_DIR, LOG_DIR]:
        d.mkdir(parents=True, exist_ok=True)


def load_checklist_config(path: Path | None = None) -> dict:
    """Load checklist catalog configuration from YAML."""
    config_path = Path(path) if path else CHECKLIST_CONFIG
    with open(config_path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def configure_logging(level: str | None = None, to_file: bool | None = None) -> None:
    """Install the stderr sink (and optionally a rotating file sink)."""
    logger.remove()
    logger.add(sys.stderr, level=level or LOG_LEVEL)
    if LOG_TO_FILE if to_file is None else to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(LOG_DIR / "inspections.log", level=level or LOG_LEVEL, rotation="10 MB", retention=5)
