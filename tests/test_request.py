"""
tests/test_request.py
Request construction and response schema helpers.
Run: pytest tests/test_request.py -v
"""

import dataclasses

import pytest

from ctlapi.core.config import ClientConfig
from ctlapi.core.exceptions import ResponseParseException, ValidationException
from ctlapi.core.request_wrapper import ApiRequest
from ctlapi.core.response_wrapper import RawResponse
from ctlapi.core.schemas import (
    V11Schema,
    V12Schema,
    attribute_as_int,
    parse_document,
    schema_for,
    strip_exception_prefix,
)


class TestApiRequest:

    def test_from_template(self):
        req = ApiRequest.from_template("https://nx.local:3780/api/API_VERSION/xml", "<R/>", "1.2")
        assert req.url == "https://nx.local:3780/api/1.2/xml"
        assert req.host == "nx.local"
        assert req.port == 3780
        assert req.path == "/api/1.2/xml"
        assert req.headers == {"Content-Type": "text/xml"}
        assert req.verify_ssl is False

    def test_default_https_port(self):
        req = ApiRequest(url="https://nx.local/api/1.1/xml")
        assert req.port == 443
        assert req.endpoint == "https://nx.local/api/1.1/xml"

    def test_config_headers_and_timeout(self):
        config = ClientConfig.from_dict({"request": {"timeout": 12, "default_headers": {"X-Trace": "1"}}})
        req = ApiRequest.from_template("https://nx.local/api/API_VERSION/xml", "<R/>", config=config)
        assert req.timeout == 12
        assert req.headers == {"X-Trace": "1", "Content-Type": "text/xml"}

    @pytest.mark.parametrize("url", ["nx.local/api", "ftp://nx.local/api", ""])
    def test_invalid_url(self, url):
        with pytest.raises(ValidationException):
            ApiRequest(url=url)

    def test_immutable(self):
        req = ApiRequest(url="https://nx.local/api/1.1/xml", body="<A/>")
        with pytest.raises(dataclasses.FrozenInstanceError):
            req.body = "<B/>"


class TestRawResponse:

    def test_charset_from_header(self):
        raw = RawResponse(200, {"Content-Type": "text/xml; charset=latin-1"}, "café".encode("latin-1"), "u")
        assert raw.text == "café"

    def test_encoding_from_xml_declaration(self):
        body = '<?xml version="1.0" encoding="ISO-8859-1"?><a>é</a>'.encode("latin-1")
        assert RawResponse(200, {}, body, "u").text.endswith("<a>é</a>")

    def test_status(self):
        raw = RawResponse(404, {}, b"not found", "u")
        assert raw.is_success is False


class TestSchemaHelpers:

    @pytest.mark.parametrize("value,expected", [
        ("1", 1), ("0", 0), (" 1", 1), ("1abc", 1), ("true", 0), (None, 0), ("", 0),
    ])
    def test_attribute_as_int(self, value, expected):
        assert attribute_as_int(value) == expected

    @pytest.mark.parametrize("text,expected", [
        ("com.rapid7.NexposeAPIException: Bad login", "Bad login"),
        ("Exception:   spaced", "spaced"),
        ("plain message", "plain message"),
        (None, ""),
    ])
    def test_strip_exception_prefix(self, text, expected):
        assert strip_exception_prefix(text) == expected

    def test_parse_document_returns_root(self):
        root = parse_document(b'<LoginResponse success="1"/>')
        assert root.tag == "LoginResponse"

    @pytest.mark.parametrize("body", [b"", "  ", "<!-- nothing --><?xml-stylesheet href='a'?>"])
    def test_parse_document_rootless(self, body):
        assert parse_document(body) is None

    def test_parse_document_bom_only_is_rootless(self):
        assert parse_document(b'\xef\xbb\xbf<?xml version="1.0"?>') is None

    def test_parse_document_bom_with_root(self):
        root = parse_document(b'\xef\xbb\xbf<?xml version="1.0"?><LogoutResponse success="1"/>')
        assert root.tag == "LogoutResponse"

    def test_parse_document_malformed(self):
        with pytest.raises(ResponseParseException):
            parse_document("<a><b></a>")

    def test_schema_selection(self):
        assert isinstance(schema_for("1.2"), V12Schema)
        assert isinstance(schema_for("1.1"), V11Schema)
        assert isinstance(schema_for(""), V11Schema)

    def test_v12_trace_from_any_exception(self):
        root = parse_document(
            "<R><Exception><Message>m</Message></Exception>"
            "<Exception><Stacktrace>t</Stacktrace></Exception></R>"
        )
        assert V12Schema().extract_error(root) == ("m", "t")
