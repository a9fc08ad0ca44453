import os
from dataclasses import dataclass

from dotenv import load_dotenv


DEFAULT_DB_URL = "sqlite:///sipscribe.db"


@dataclass
class Settings:
    db_url: str = DEFAULT_DB_URL
    export_dir: str = "."
    log_level: str = "INFO"
    image_max_width: int = 1600


def get_settings() -> Settings:
    load_dotenv()
    max_width = os.getenv("SIPSCRIBE_IMAGE_MAX_WIDTH")
    return Settings(
        db_url=os.getenv("SIPSCRIBE_DB_URL", DEFAULT_DB_URL),
        export_dir=os.getenv("SIPSCRIBE_EXPORT_DIR", "."),
        log_level=os.getenv("SIPSCRIBE_LOG_LEVEL", "INFO").upper(),
        image_max_width=int(max_width) if max_width else 1600,
    )
