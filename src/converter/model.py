# src/converter/model.py (Conversion Layer)
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ConversionSettings(BaseModel):
    url: str
    output_dir: Path = Field(default_factory=Path.cwd)
    css_path: Path = Field(default_factory=lambda: Path.cwd() / "inline.css")
    render: bool = Field(default=True, description="Render with a headless browser instead of a plain GET.")
    verify_output: bool = Field(default=False, description="Validate modified.html again after writing it.")
    original_file_name: str = "original.html"
    modified_file_name: str = "modified.html"
    replacement_tag: str = "div"
    lang: str = "en"
    keep_json_ld: bool = True
    rewrite_document_relative: bool = False
    fail_on_validator_unavailable: bool = False


class ConversionResult(BaseModel):
    url: str
    domain: str
    original_path: Path
    modified_path: Path
    rendered: bool = True
    validation_status: str = "UNKNOWN"
    initial_error_count: int = 0
    removed_attributes: List[str] = Field(default_factory=list)
    replaced_tags: List[str] = Field(default_factory=list)
    verification_status: Optional[str] = None
    remaining_error_count: Optional[int] = None
    timers: Dict[str, float] = Field(default_factory=dict)
    duration: float = 0.0
