from typing import Literal
from pydantic import BaseModel, Field, ValidationError, field_validator


class SettingsSchema(BaseModel):
    weight_unit: Literal["kg", "lb"] = "kg"
    history_sessions: int = Field(default=5, ge=1)
    default_rep_range: str = ""

    @field_validator("default_rep_range", mode="before")
    @classmethod
    def _range_as_text(cls, v):
        # YAML reads an unquoted ``10`` as an int
        return "" if v is None else str(v)


def validate_settings(data: dict) -> SettingsSchema:
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
