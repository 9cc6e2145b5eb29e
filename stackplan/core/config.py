from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Tunables loaded from environment variables (prefix ``STACKPLAN_``).

    Scoring numbers are empirically chosen and only meaningful relative to
    each other. Raising ``confidence_ceiling`` lowers every reported
    confidence; the thresholds gate the compiled-language detectors where
    file extensions alone are weak evidence.

    Remote layout
    ─────────────
    Releases live under ``{remote_app_base_dir}/{app}/releases/{ts}`` and
    Python virtualenvs under ``{remote_app_base_dir}/{app}/shared/venv``.
    """

    model_config = SettingsConfigDict(
        env_prefix="STACKPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Detection scoring
    confidence_ceiling: float = 6.0
    compiled_framework_threshold: float = 4.0
    hugo_threshold: float = 3.0

    @field_validator("confidence_ceiling")
    @classmethod
    def ceiling_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("confidence_ceiling must be positive")
        return v

    # Remote host layout
    remote_app_base_dir: str = "/srv"
    deploy_user: str = "deploy"
    env_file_mode: int = 0o600
    default_app_port: int = 3000

    # Nixpacks
    nixpacks_install_url: str = "https://nixpacks.com/install.sh"
    nixpacks_venv: str = "/opt/venv"

    # Local executor
    command_timeout_seconds: int = 1800

    # App
    debug: bool = False


def get_settings() -> Settings:
    return Settings()
