import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    storage_key: str = "financialAssistantData"
    assistant_delay: float = 1.5
    log_level: str = "INFO"


def get_settings() -> Settings:
    data_dir = Path(os.getenv("FINASSIST_DATA_DIR") or Path.cwd() / ".data")
    return Settings(
        data_dir=data_dir,
        db_path=data_dir / "finassist.sqlite",
        storage_key=os.getenv("FINASSIST_STORAGE_KEY", "financialAssistantData"),
        assistant_delay=float(os.getenv("FINASSIST_ASSISTANT_DELAY", "1.5")),
        log_level=os.getenv("FINASSIST_LOG_LEVEL", "INFO"),
    )
