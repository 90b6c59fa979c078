"""Configuration for the dose calculation engine.

Values come from environment variables with sensible defaults. Clinical
thresholds and alert priorities live in the rule modules.
"""

import os


class Config:
    """Engine and dashboard settings."""

    LOG_LEVEL = os.environ.get("DOSE_ENGINE_LOG_LEVEL", "INFO")
    ASSESSED_BY = os.environ.get("DOSE_ENGINE_ASSESSED_BY", "dose_engine_v1")

    # Target AUC used for the carboplatin Calvert dose hint
    CARBOPLATIN_TARGET_AUC = float(os.environ.get("CARBOPLATIN_TARGET_AUC", "5"))

    DASHBOARD_HOST = os.environ.get("DOSE_DASHBOARD_HOST", "127.0.0.1")
    DASHBOARD_PORT = int(os.environ.get("DOSE_DASHBOARD_PORT", "8082"))


config = Config()
