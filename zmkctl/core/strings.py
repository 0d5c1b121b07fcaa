"""Conversion of device identity strings between hidapi text and UTF-8.

hidapi hands back manufacturer/product/serial strings decoded from the
platform's wide characters, so a single ``str`` character is one native
code unit. Output is produced into a bounded buffer and conversion stops
on a character boundary; characters with no UTF-8 form are an error,
never replaced or dropped.
"""

from __future__ import annotations

import codecs
import logging

from zmkctl.core.errors import EncodingError

# One byte of the device-side buffer is reserved for the terminator.
MAX_PORTABLE_BYTES = 255
MAX_NATIVE_CHARS = 255

LOGGER = logging.getLogger(__name__)


def to_portable(native: str | None, *, limit: int = MAX_PORTABLE_BYTES) -> str:
    if native is None:
        raise EncodingError("Device string is unavailable")

    out = bytearray()
    encoder = codecs.getincrementalencoder("utf-8")("strict")
    try:
        for index, char in enumerate(native):
            try:
                chunk = encoder.encode(char)
            except UnicodeEncodeError as exc:
                raise EncodingError(
                    f"Character {char!r} at position {index} has no UTF-8 representation"
                ) from exc
            if len(out) + len(chunk) > limit:
                LOGGER.debug("Truncated device string at %d of %d characters", index, len(native))
                break
            out += chunk
    finally:
        encoder.reset()
    return out.decode("utf-8")


def to_native(portable: str | bytes, *, limit: int = MAX_NATIVE_CHARS) -> str:
    if isinstance(portable, str):
        # argv text carries undecodable bytes as surrogate escapes
        try:
            raw = portable.encode("utf-8", "surrogateescape")
        except UnicodeEncodeError as exc:
            raise EncodingError(f"String {portable!r} is not valid text") from exc
    else:
        raw = bytes(portable)

    chars: list[str] = []
    decoder = codecs.getincrementaldecoder("utf-8")("strict")
    try:
        for offset in range(len(raw)):
            try:
                text = decoder.decode(raw[offset : offset + 1])
            except UnicodeDecodeError as exc:
                raise EncodingError(f"Invalid UTF-8 sequence at byte {offset}") from exc
            chars.extend(text)
            if len(chars) > limit:
                raise EncodingError(f"String exceeds {limit} characters")
        try:
            decoder.decode(b"", final=True)
        except UnicodeDecodeError as exc:
            raise EncodingError("Truncated UTF-8 sequence at end of string") from exc
    finally:
        decoder.reset()
    return "".join(chars)
