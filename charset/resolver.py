from __future__ import annotations

import codecs
from dataclasses import dataclass
from enum import Enum

import structlog

logger = structlog.get_logger(__name__)

SNIFF_LIMIT = 1000


class EncodingChoice(Enum):
    """Text encodings the resolver knows how to apply.

    The value is the Python codec used to decode bytes. Shift_JIS and
    ISO-2022-JP use the superset codecs pages labelled with those names
    are actually written in (Windows-31J NEC/IBM extensions, JIS X 0201
    katakana).
    """

    UTF_8 = "utf-8"
    UTF_16LE = "utf-16-le"
    SHIFT_JIS = "cp932"
    EUC_JP = "euc_jp"
    ISO_2022_JP = "iso2022_jp_ext"
    WINDOWS_1252 = "cp1252"

    @property
    def codec(self) -> str:
        return self.value


# latin1 is approximated by cp1252
ALIASES: dict[str, EncodingChoice] = {
    "utf-8": EncodingChoice.UTF_8,
    "utf8": EncodingChoice.UTF_8,
    "shift_jis": EncodingChoice.SHIFT_JIS,
    "shift-jis": EncodingChoice.SHIFT_JIS,
    "sjis": EncodingChoice.SHIFT_JIS,
    "euc-jp": EncodingChoice.EUC_JP,
    "eucjp": EncodingChoice.EUC_JP,
    "iso-2022-jp": EncodingChoice.ISO_2022_JP,
    "windows-1252": EncodingChoice.WINDOWS_1252,
    "cp1252": EncodingChoice.WINDOWS_1252,
    "iso-8859-1": EncodingChoice.WINDOWS_1252,
    "latin1": EncodingChoice.WINDOWS_1252,
}

_BOMS: tuple[tuple[bytes, EncodingChoice], ...] = (
    (b"\xef\xbb\xbf", EncodingChoice.UTF_8),
    (b"\xff\xfe", EncodingChoice.UTF_16LE),
    # big-endian BOM is decoded as little-endian too
    (b"\xfe\xff", EncodingChoice.UTF_16LE),
)


@dataclass(frozen=True)
class DecodedText:
    text: str
    encoding: EncodingChoice
    source: str  # "utf8-strict" | "declared" | "bom" | "heuristic" | "default"
    replaced: bool = False


def parse_declared_charset(content_type: str | None) -> str | None:
    """Return the lower-cased ``charset=`` token of a Content-Type value, if any."""
    if not content_type:
        return None
    idx = content_type.lower().find("charset=")
    if idx < 0:
        return None
    value = content_type[idx + len("charset=") :].split(";", 1)[0]
    token = value.strip().strip("\"'").strip().lower()
    return token or None


def lookup_encoding(token: str | None) -> EncodingChoice | None:
    if not token:
        return None
    return ALIASES.get(token.strip().lower())


def _looks_shift_jis(a: int, b: int) -> bool:
    lead = 0x81 <= a <= 0x9F or 0xE0 <= a <= 0xFC
    trail = 0x40 <= b <= 0x7E or 0x80 <= b <= 0xFC
    return lead and trail


def _looks_euc_jp(a: int, b: int) -> bool:
    return 0xA1 <= a <= 0xFE and 0xA1 <= b <= 0xFE


def detect_encoding(body: bytes) -> tuple[EncodingChoice, str]:
    """Guess an encoding from the bytes alone.

    Order is fixed: BOM, then a Shift_JIS byte-pair test over the first
    ``SNIFF_LIMIT`` bytes, then the EUC-JP pair test, then UTF-8.
    Returns ``(encoding, source)``.
    """
    for bom, choice in _BOMS:
        if body.startswith(bom):
            return choice, "bom"

    head = body[:SNIFF_LIMIT]
    pairs = list(zip(head, head[1:]))
    if any(_looks_shift_jis(a, b) for a, b in pairs):
        return EncodingChoice.SHIFT_JIS, "heuristic"
    if any(_looks_euc_jp(a, b) for a, b in pairs):
        return EncodingChoice.EUC_JP, "heuristic"
    return EncodingChoice.UTF_8, "default"


def _strip_bom(body: bytes) -> bytes:
    for bom, _choice in _BOMS:
        if body.startswith(bom):
            return body[len(bom) :]
    return body


def _c1_controls(exc: UnicodeError) -> tuple[str, int]:
    # bytes cp1252 leaves undefined decode to the C1 control with the same value
    if not isinstance(exc, UnicodeDecodeError):
        raise exc
    undefined = exc.object[exc.start : exc.end]
    return "".join(chr(b) for b in undefined), exc.end


codecs.register_error("textproxy-c1-controls", _c1_controls)


def _lossy_decode(body: bytes, encoding: EncodingChoice) -> tuple[str, bool]:
    if encoding is EncodingChoice.WINDOWS_1252:
        return body.decode(encoding.codec, errors="textproxy-c1-controls"), False
    try:
        return body.decode(encoding.codec), False
    except UnicodeDecodeError:
        return body.decode(encoding.codec, errors="replace"), True


def decode_body(body: bytes, content_type: str | None = None) -> DecodedText:
    """Decode ``body`` to text, never raising on bad bytes.

    Valid UTF-8 is returned unchanged. Otherwise the charset declared in
    ``content_type`` is used when it is one we know, and the byte heuristics
    in :func:`detect_encoding` are the last resort. Malformed sequences are
    replaced with U+FFFD and reported through ``DecodedText.replaced``.
    """
    try:
        return DecodedText(body.decode("utf-8"), EncodingChoice.UTF_8, "utf8-strict")
    except UnicodeDecodeError:
        pass

    declared = lookup_encoding(parse_declared_charset(content_type))
    if declared is not None:
        text, replaced = _lossy_decode(body, declared)
        return DecodedText(text, declared, "declared", replaced)

    encoding, source = detect_encoding(body)
    payload = _strip_bom(body) if source == "bom" else body
    text, replaced = _lossy_decode(payload, encoding)
    return DecodedText(text, encoding, source, replaced)


def decode_and_report(
    body: bytes, content_type: str | None = None, *, log=None, **context
) -> DecodedText:
    """:func:`decode_body`, logging a ``decode_replaced_bytes`` warning on loss.

    ``context`` (e.g. the request URL) is added to the warning event.
    """
    decoded = decode_body(body, content_type)
    if decoded.replaced:
        (log or logger).warning(
            "decode_replaced_bytes",
            encoding=decoded.encoding.name,
            source=decoded.source,
            content_type=content_type or "",
            size_bytes=len(body),
            **context,
        )
    return decoded


def resolve_and_decode(body: bytes, content_type: str | None = None, *, log=None) -> str:
    return decode_and_report(body, content_type, log=log).text
