"""
Response wrapper for standardized response handling.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict
import re


@dataclass
class RawResponse:
    """
    Status, headers and fully read body of one HTTP exchange.
    """
    status_code: int
    headers: Dict[str, str]
    body: bytes
    url: str
    elapsed_time: float = 0.0

    _text: Optional[str] = field(default=None, repr=False)

    @property
    def text(self) -> str:
        """Get response body as text."""
        if self._text is None:
            encoding = self._detect_encoding()
            try:
                self._text = self.body.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                # latin-1 accepts any byte
                self._text = self.body.decode("latin-1")
        return self._text

    def _detect_encoding(self) -> str:
        """Detect character encoding from headers, BOM or XML declaration."""
        content_type = self.get_header("content-type", "")
        match = re.search(r"charset=([^\s;]+)", content_type, re.I)
        if match:
            return match.group(1).strip("\"'")

        if self.body.startswith(b"\xef\xbb\xbf"):
            return "utf-8-sig"
        elif self.body.startswith(b"\xff\xfe"):
            return "utf-16-le"
        elif self.body.startswith(b"\xfe\xff"):
            return "utf-16-be"

        head = self.body[:200].decode("ascii", errors="ignore")
        match = re.search(r'<\?xml[^>]+encoding=["\']([^"\']+)["\']', head)
        if match:
            return match.group(1)

        return "utf-8"

    @property
    def is_success(self) -> bool:
        """Check if response status is 2xx."""
        return 200 <= self.status_code < 300

    def get_header(
        self,
        name: str,
        default: Optional[str] = None
    ) -> Optional[str]:
        """Get header value (case-insensitive)."""
        name_lower = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name_lower:
                return value
        return default
