import os
from dataclasses import dataclass
from dotenv import load_dotenv

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_log_level(name: str, default: str = "INFO") -> str:
    level = os.getenv(name, default).strip().upper()
    return level if level in LOG_LEVELS else default


@dataclass(frozen=True)
class Settings:
    # Logging
    log_level: str
    log_dir: str

    # Bid predictor
    use_predictor: bool
    target_acos: float


def get_settings() -> Settings:
    load_dotenv()  # reads .env if present

    return Settings(
        log_level=_env_log_level("PPC_LOG_LEVEL"),
        log_dir=os.getenv("PPC_LOG_DIR", "logs"),
        use_predictor=_env_bool("PPC_USE_PREDICTOR"),
        target_acos=float(os.getenv("PPC_TARGET_ACOS", "30")),
    )
