from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CANDIDATES = "dist/app/main.py,app/main.py,src/app/main.py"
DEFAULT_DEGRADED_STATUS = 500
DEFAULT_DEGRADED_MESSAGE = (
    "The application failed to initialize. Check the function logs for details."
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Build output first, source layout last.
    candidates: str = Field(default=DEFAULT_CANDIDATES, alias="BOOTSTRAP_CANDIDATES")
    export_name: str = Field(default="app", alias="BOOTSTRAP_EXPORT_NAME")
    app_root: str | None = Field(default=None, alias="BOOTSTRAP_APP_ROOT")

    # Passed through to Mangum, which rejects unknown modes at construction time.
    lifespan: str = Field(default="off", alias="BOOTSTRAP_LIFESPAN")
    api_gateway_base_path: str = Field(default="/", alias="API_GATEWAY_BASE_PATH")

    degraded_status_code: int = Field(default=DEFAULT_DEGRADED_STATUS, alias="BOOTSTRAP_DEGRADED_STATUS")
    degraded_message: str = Field(default=DEFAULT_DEGRADED_MESSAGE, alias="BOOTSTRAP_DEGRADED_MESSAGE")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parents[1]

    @property
    def root_dir(self) -> Path:
        if self.app_root:
            return Path(self.app_root).expanduser().resolve()
        return self.base_dir

    @property
    def candidates_list(self) -> tuple[str, ...]:
        candidates: list[str] = []
        for candidate in self.candidates.split(","):
            normalized_candidate = candidate.strip()
            if normalized_candidate:
                candidates.append(normalized_candidate)
        return tuple(candidates)

    @model_validator(mode="after")
    def validate_degraded_response(self) -> "Settings":
        if not 500 <= self.degraded_status_code <= 599:
            raise ValueError("BOOTSTRAP_DEGRADED_STATUS must be a 5xx status code.")
        if not self.degraded_message.strip():
            raise ValueError("BOOTSTRAP_DEGRADED_MESSAGE must not be empty.")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
