"""
src/api/multipart.py
=====================
Multipart Audio Reader - Nova Voice Relay

Responsibility:
    - Stream a multipart/form-data request body through python-multipart
    - Collect the raw bytes of the audio field and its optional filename

A part is kept as bytes whether or not its Content-Disposition carries a
filename, so recorders that omit the filename still deliver intact audio.
Repeated parts with the same field name are concatenated in order.

This module does NOT:
    - Validate or decode audio
    - Apply the default filename (see src.api.upload)
"""

from dataclasses import dataclass

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.requests import Request


# ---------------------------------------------------------------------------
# Exceptions / data types
# ---------------------------------------------------------------------------


class MultipartBodyError(Exception):
    """Raised when a multipart body cannot be parsed."""
    pass


@dataclass(frozen=True)
class FilePart:
    """Bytes and declared filename (None when absent) of one form field."""

    payload: bytes
    filename: str | None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def read_file_part(request: Request, field_name: str = "file") -> FilePart | None:
    """
    Read `field_name` out of a multipart request body.

    Returns:
        FilePart, or None when the request is not multipart or carries no
        such field.

    Raises:
        MultipartBodyError: On a missing boundary or a malformed body.
    """
    content_type, params = parse_options_header(request.headers.get("content-type", ""))
    if content_type != b"multipart/form-data":
        return None

    boundary = params.get(b"boundary")
    if not boundary:
        raise MultipartBodyError("multipart body has no boundary")

    collector = _FieldCollector(field_name.encode("utf-8"))
    parser = MultipartParser(boundary, collector.callbacks())

    try:
        async for chunk in request.stream():
            if chunk:
                parser.write(chunk)
        parser.finalize()
    except MultipartParseError as exc:
        raise MultipartBodyError(f"malformed multipart body: {exc}") from exc

    return collector.result()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


class _FieldCollector:
    """python-multipart callback target that keeps one field's bytes."""

    def __init__(self, field_name: bytes):
        self._field_name = field_name
        self._chunks: list[bytes] = []
        self._found = False
        self._filename: str | None = None

        self._header_field = b""
        self._header_value = b""
        self._headers: dict[bytes, bytes] = {}
        self._in_field = False

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self._on_part_begin,
            "on_header_field": self._on_header_field,
            "on_header_value": self._on_header_value,
            "on_header_end": self._on_header_end,
            "on_headers_finished": self._on_headers_finished,
            "on_part_data": self._on_part_data,
        }

    def result(self) -> FilePart | None:
        if not self._found:
            return None
        return FilePart(payload=b"".join(self._chunks), filename=self._filename)

    def _on_part_begin(self) -> None:
        self._headers = {}
        self._in_field = False

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def _on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        if options.get(b"name") != self._field_name:
            return

        self._in_field = True
        self._found = True
        filename = options.get(b"filename")
        if filename is not None:
            self._filename = filename.decode("utf-8", errors="replace")

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._in_field:
            self._chunks.append(data[start:end])
