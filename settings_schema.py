from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SettingsSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    storage_key: str = "ichikaWorkoutLogEntries"
    theme_key: str = "ichikaThemePreference"
    quota_bytes: int = 5 * 1024 * 1024
    log_level: str = "WARNING"
    date_filter_default: str = ""

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return level

    @field_validator("quota_bytes")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("quota_bytes must be 0 or greater")
        return v


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
