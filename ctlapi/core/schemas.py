"""
Response schema variants for the XML API.

API 1.1 reports the outcome in a ``success`` root attribute and puts
failures in ``message``/``stacktrace`` elements. API 1.2 signals failure
with ``Exception`` elements carrying ``Message``/``Stacktrace`` children.
One variant is chosen per request from the API version.
"""

import re
import xml.etree.ElementTree as ET
from typing import Optional, Tuple, Union

from .exceptions import ResponseParseException

_PROLOG = re.compile(r"<\?.*?\?>|<!--.*?-->|<!DOCTYPE[^>]*>", re.S)
_EXCEPTION_PREFIX = re.compile(r".*Exception: *")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_document(body: Union[str, bytes]) -> Optional[ET.Element]:
    """
    Parse an XML response body.

    Returns:
        The root element, or None when the body holds no element at all
        (empty, whitespace, or only a prolog/comments).

    Raises:
        ResponseParseException: the body is not well-formed XML
    """
    text = body.decode("utf-8", errors="ignore") if isinstance(body, bytes) else body
    if not _PROLOG.sub("", (text or "").lstrip("\ufeff")).strip():
        return None

    try:
        return ET.fromstring(body)
    except ET.ParseError as e:
        raise ResponseParseException(str(e), body=text, cause=e) from e


def strip_exception_prefix(text: Optional[str]) -> str:
    """Drop a leading ``'... Exception: '`` from a server error message."""
    if text is None:
        return ""
    return _EXCEPTION_PREFIX.sub("", text, count=1)


def attribute_as_int(value: Optional[str]) -> int:
    """Lenient integer conversion: leading digits count, anything else is 0."""
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


class ResponseSchema:
    """Base variant: the 1.1 convention."""

    name = "1.1"
    message_tag = "message"
    trace_tag = "stacktrace"

    def is_success(self, root: ET.Element) -> bool:
        return attribute_as_int(root.get("success")) == 1

    def extract_session_id(self, root: ET.Element) -> Optional[str]:
        return root.get("session-id")

    def extract_error(self, root: ET.Element) -> Tuple[Optional[str], Optional[str]]:
        """Return (error message, stack trace) from a failed response."""
        message = self._first_text(root, self.message_tag)
        trace = self._first_text(root, self.trace_tag)
        if message is not None:
            message = strip_exception_prefix(message)
        return message, trace

    @staticmethod
    def _first_text(root: ET.Element, tag: str) -> Optional[str]:
        for element in root.iter(tag):
            return element.text or ""
        return None


class V11Schema(ResponseSchema):
    pass


class V12Schema(ResponseSchema):
    """1.2: success unless the document carries an Exception element."""

    name = "1.2"
    exception_tag = "Exception"
    message_tag = "Message"
    trace_tag = "Stacktrace"

    def is_success(self, root: ET.Element) -> bool:
        if super().is_success(root):
            return True
        return not any(True for _ in root.iter(self.exception_tag))

    def _first_text(self, root: ET.Element, tag: str) -> Optional[str]:
        for exception in root.iter(self.exception_tag):
            child = exception.find(tag)
            if child is not None:
                return child.text or ""
        return None


def schema_for(api_version: str) -> ResponseSchema:
    """Select the response schema for an API version string."""
    if re.search(r"1\.2", api_version or ""):
        return V12Schema()
    return V11Schema()
