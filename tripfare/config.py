"""Runtime settings for the tripfare CLI.

TRIPFARE_* variables (from the environment or a .env file) pick the log level, an optional
baggage policy JSON file and the default report paths. Library calls never read them.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env once on module import
load_dotenv()


def _optional_path(name: str) -> Path | None:
    value = os.getenv(name)
    return Path(value) if value else None


@dataclass(slots=True)
class Settings:
    log_level: str = os.getenv("TRIPFARE_LOG_LEVEL", "INFO")
    policy_file: Path | None = _optional_path("TRIPFARE_POLICY_FILE")
    output_json: Path = Path(os.getenv("TRIPFARE_OUTPUT_JSON", "itineraries.json"))
    output_html: Path | None = _optional_path("TRIPFARE_OUTPUT_HTML")


settings = Settings()
