# eudr_compliance/config.py
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    records_file: str = "assessments.json"
    log_level: str = "INFO"
    operator_name: str = ""

    @property
    def records_path(self) -> Path:
        return self.data_dir / self.records_file

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=Path(os.getenv("EUDR_DATA_DIR", "data")),
            records_file=os.getenv("EUDR_RECORDS_FILE", "assessments.json"),
            log_level=os.getenv("EUDR_LOG_LEVEL", "INFO").upper(),
            operator_name=os.getenv("EUDR_OPERATOR_NAME", ""),
        )


def get_settings() -> Settings:
    """Settings from the current environment (and ``.env`` if present)."""
    return Settings.from_env()
