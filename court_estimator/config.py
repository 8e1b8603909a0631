# court_estimator/config.py
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


# Rate table CSV; falls back to ./rates.csv then ./samples/rates.csv
RATES_PATH = os.getenv("RATES_PATH")

# Proposal multipliers, both applied to the same base cost
TAX_RATE = _float_env("TAX_RATE", 0.06)
MARGIN_RATE = _float_env("MARGIN_RATE", 0.30)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
