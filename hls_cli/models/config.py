"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, Field, field_validator

DEFAULT_MAX_WORKERS = 10
DEFAULT_MANIFEST_RETRIES = 3
DEFAULT_SEGMENT_RETRIES = 12


class DownloadConfig(BaseModel):
    """A validated configuration model for the application."""

    # Download Settings
    max_workers: int = DEFAULT_MAX_WORKERS
    manifest_retries: int = DEFAULT_MANIFEST_RETRIES
    segment_retries: int = DEFAULT_SEGMENT_RETRIES
    backoff_base: float = 1.0

    # Network Settings
    connect_timeout: float = 15.0
    read_timeout: float = 90.0

    # File Options
    scratch_dir: str = "."

    # Internal fields not loaded from INI file
    source_url: str = Field("", repr=False)
    output_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of concurrent segment downloads."""
        if v < 1 or v > 32:
            raise ValueError("Max workers must be between 1 and 32.")
        return v

    @field_validator("manifest_retries", "segment_retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Retry counts cannot be negative.")
        return v

    @field_validator("backoff_base")
    @classmethod
    def validate_backoff(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Backoff base delay cannot be negative.")
        return v

    @field_validator("connect_timeout", "read_timeout")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeouts must be positive.")
        return v

    @field_validator("scratch_dir")
    @classmethod
    def validate_scratch_dir(cls, v: str) -> str:
        if not v:
            raise ValueError("Scratch directory cannot be empty.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"source_url", "output_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
