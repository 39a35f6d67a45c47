import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    data_source: str
    local_data_dir: Path
    log_level: str


def load_settings() -> Settings:
    repo_root = Path(__file__).resolve().parents[2]
    data_source = os.environ.get("DATA_SOURCE", "local")
    local_data_dir = Path(os.environ.get("LOCAL_DATA_DIR", "in/parquet"))
    if not local_data_dir.is_absolute():
        local_data_dir = repo_root / local_data_dir
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    return Settings(
        data_source=data_source,
        local_data_dir=local_data_dir,
        log_level=log_level,
    )
