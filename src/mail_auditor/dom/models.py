# src/mail_auditor/dom/models.py
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict


class HTMLDocument(BaseModel):
    """
    Represents a parsed HTML email.

    Holds the raw source (template tokens are scanned there), the parsed
    tree every pass queries, and the visible body text shared by the
    text-based passes. Frozen once built; passes must only read from it.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    raw_html: str
    soup: BeautifulSoup
    base_path: Optional[Path] = None

    has_doctype: bool = False
    root_tag_valid: bool = False

    body_text: str = ""
