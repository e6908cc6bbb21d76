# selector/config.py
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

ENV_FILE = os.getenv("SELECTOR_ENV_FILE", "selector.env")
PACKAGE_TEMPLATE_DIR = Path(__file__).resolve().parent / "html"


class Settings(BaseModel):
    port: int = 7777
    images_dir: Path = Path("images")
    data_dir: Path = Path("data")
    # Stage annotation writes here and rename them into data_dir
    data_temp_dir: Optional[Path] = None
    template_dir: Path = PACKAGE_TEMPLATE_DIR
    log_dir: Path = Path("logs")
    log_level: str = "INFO"
    allowed_origins: str = "*"


def load_settings(env_file: str = ENV_FILE) -> Settings:
    """Build settings from the environment, after loading the optional env file."""
    load_dotenv(env_file)
    return Settings(
        port=int(os.getenv("PORT", 7777)),
        images_dir=Path(os.getenv("IMAGES_DIR", "images")),
        data_dir=Path(os.getenv("DATA_DIR", "data")),
        data_temp_dir=Path(os.environ["DATA_TEMP_DIR"]) if os.getenv("DATA_TEMP_DIR") else None,
        template_dir=Path(os.getenv("TEMPLATE_DIR", str(PACKAGE_TEMPLATE_DIR))),
        log_dir=Path(os.getenv("LOG_DIR", "logs")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        allowed_origins=os.getenv("ALLOWED_ORIGINS", "*"),
    )
