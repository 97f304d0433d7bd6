import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # API Settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    # Base URL the client uses to reach the server; derived from host/port when unset
    api_url: Optional[str] = os.getenv("API_URL")
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "10"))

    # Store Settings
    seed_store: bool = _env_flag("SEED_STORE", "True")

    # Application Settings
    app_name: str = os.getenv("APP_NAME", "Book Catalogue")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "False")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def base_url(self) -> str:
        if self.api_url:
            return self.api_url.rstrip("/")
        return f"http://{self.api_host}:{self.api_port}"


settings = Settings()
