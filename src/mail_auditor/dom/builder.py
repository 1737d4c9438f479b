# src/mail_auditor/dom/builder.py
import logging
import re
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup, Doctype, NavigableString, CData

from .models import HTMLDocument
from ..errors import InputError, ParseError

logger = logging.getLogger(__name__)


class DOMBuilder:
    """
    Builder responsible for turning raw HTML into a read-only HTMLDocument.
    Malformed markup is repaired by the parser the way a browser would;
    only input that is not text at all is rejected.
    """

    def parse_doc(
            self,
            html: Union[str, bytes],
            base_path: Optional[Union[str, Path]] = None
    ) -> HTMLDocument:
        """
        Parses raw HTML content into an HTMLDocument.

        Args:
            html (str | bytes): The HTML source. Bytes are decoded as UTF-8.
            base_path (Optional[str | Path]): Directory local image paths are resolved against.

        Returns:
            HTMLDocument: The parsed document.

        Raises:
            InputError: If the input is not text.
            ParseError: If bytes cannot be decoded as UTF-8.
        """
        text = self._to_text(html)

        # The BOM is not part of the document
        clean_html = text.replace('\ufeff', '')
        try:
            soup = BeautifulSoup(clean_html, 'html.parser')
        except Exception as e:
            raise ParseError(f"HTML could not be parsed: {e}") from e

        # --- Basic Validity Checks ---
        found_doctype = bool(re.search(r'<!doctype', clean_html[:1000], re.IGNORECASE))
        if not found_doctype:
            for item in soup.contents:
                if isinstance(item, Doctype):
                    found_doctype = True
                    break

        found_root = bool(soup.find('html'))

        body_text = self._visible_text(soup)
        logger.debug("Parsed document: %d chars, %d chars of body text", len(clean_html), len(body_text))

        return HTMLDocument(
            raw_html=clean_html,
            soup=soup,
            base_path=Path(base_path) if base_path else None,
            has_doctype=found_doctype,
            root_tag_valid=found_root,
            body_text=body_text,
        )

    def load_file(self, path: Union[str, Path]) -> HTMLDocument:
        """Reads an HTML file from disk; its directory becomes the base path."""
        file_path = Path(path)
        try:
            data = file_path.read_bytes()
        except OSError as e:
            raise InputError(f"Could not read {file_path}: {e}") from e
        return self.parse_doc(data, base_path=file_path.resolve().parent)

    @staticmethod
    def _to_text(html: Union[str, bytes, None]) -> str:
        if isinstance(html, str):
            return html
        if isinstance(html, (bytes, bytearray)):
            try:
                return bytes(html).decode('utf-8')
            except UnicodeDecodeError as e:
                raise ParseError(f"Document is not valid UTF-8 text: {e}") from e
        raise InputError(f"Expected HTML text, got {type(html).__name__}")

    @staticmethod
    def _visible_text(soup: BeautifulSoup) -> str:
        """
        Text content of <body>. Fragments without a body fall back to every
        text node outside <head>. Script and style contents are skipped.
        """
        if soup.body is not None:
            return soup.body.get_text()

        parts = []
        for node in soup.descendants:
            if type(node) not in (NavigableString, CData):
                continue
            if node.find_parent('head') is not None:
                continue
            parts.append(str(node))
        return "".join(parts)
