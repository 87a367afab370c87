"""Environment settings using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SeqSimSettings(BaseSettings):
    """Runtime settings read from the environment or a .env file."""

    log_level: str = Field(default="INFO", alias="SEQSIM_LOG_LEVEL")
    output_dir: str = Field(default="out", alias="SEQSIM_OUTPUT_DIR")
    parallel: bool = Field(default=False, alias="SEQSIM_PARALLEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


settings = SeqSimSettings()
