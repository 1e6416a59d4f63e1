"""Chrome trace-event record model."""

from pydantic import BaseModel, ConfigDict, field_validator

COMPLETE_PHASE = "X"


class ChromeTraceEvent(BaseModel):
    """A single record from a Chrome trace file.

    Only complete events (``ph == "X"``) carry a duration. Timestamps are
    kept as text, as they appear in the file; numeric JSON values are
    accepted and converted.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    ph: str
    ts: str
    dur: str | None = None

    @field_validator("ts", "dur", mode="before")
    @classmethod
    def _numbers_as_text(cls, value):
        if isinstance(value, bool):
            raise ValueError("expected a number or numeric string")
        if isinstance(value, (int, float)):
            return repr(value)
        return value

    @property
    def is_complete(self) -> bool:
        return self.ph == COMPLETE_PHASE
