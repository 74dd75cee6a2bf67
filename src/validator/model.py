# src/validator/model.py (Validation Layer)
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ValidationError(BaseModel):
    line: int = 1
    col: int = 0
    message: str
    severity: str = "ERROR"
    spec_url: Optional[str] = None
    code: Optional[str] = None
    params: List[str] = Field(default_factory=list)

    @field_validator("spec_url", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    def format(self, with_spec_url: bool = False) -> str:
        msg = f"line {self.line}, col {self.col}: {self.message}"
        if with_spec_url and self.spec_url:
            msg += f" (see {self.spec_url})"
        return msg


class ValidationReport(BaseModel):
    status: str = "UNKNOWN"
    errors: List[ValidationError] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.status == "PASS"

    @property
    def messages(self) -> List[str]:
        """Error lines in the 'line L, col C: message' form the report parsers read."""
        return [error.format() for error in self.errors]

    @property
    def error_count(self) -> int:
        return sum(1 for e in self.errors if e.severity == "ERROR")
