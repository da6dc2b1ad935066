# config/settings.py
import os
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LINES_", env_file=".env", extra="ignore")

    # Extraction defaults
    cutoff: float = float(os.getenv("LINES_CUTOFF", "0.3"))
    above: float = float(os.getenv("LINES_ABOVE", "0.7"))
    below: float = float(os.getenv("LINES_BELOW", "0.6"))
    stddev: float = float(os.getenv("LINES_STDDEV", "1.0"))
    kernel_size: int = int(os.getenv("LINES_KERNEL_SIZE", "15"))
    box_size: Optional[int] = None
    close_trailing_block: bool = os.getenv("LINES_CLOSE_TRAILING_BLOCK", "True").lower() == "true"
    clamp_crops: bool = os.getenv("LINES_CLAMP_CROPS", "False").lower() == "true"

    # Output settings
    output_dir: str = os.getenv("LINES_OUTPUT_DIR", "out")
    diagnostics_dir: str = os.getenv("LINES_DIAGNOSTICS_DIR", ".")
    write_diagnostics: bool = os.getenv("LINES_WRITE_DIAGNOSTICS", "True").lower() == "true"

    # Application settings
    app_host: str = os.getenv("LINES_APP_HOST", "0.0.0.0")
    app_port: int = int(os.getenv("LINES_APP_PORT", "8000"))
    app_reload: bool = os.getenv("LINES_APP_RELOAD", "False").lower() == "true"
    log_level: str = os.getenv("LINES_LOG_LEVEL", "INFO")


settings = Settings()
