"""
Codec: AppData <-> transport string

The document is the app data serialised as compact JSON, UTF-8 encoded,
then base64 encoded. Base64 keeps accented category names and
descriptions intact in stores that mangle multi-byte text. It is not
encryption.

decode() never raises. It returns either Decoded (the parsed JSON value,
not yet normalised) or DecodeFailure saying which step failed.
"""

import base64
import binascii
import json
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel

from mes_comptes.models.finance import AppData


class DecodeFailureKind(str, Enum):
    """Which step of decoding failed."""
    TRANSFORM = "transform"  # not base64, or not UTF-8 underneath
    JSON = "json"            # base64 was fine, the payload is not JSON


class DecodeFailure(BaseModel):
    kind: DecodeFailureKind
    message: str


class Decoded(BaseModel):
    """A successfully decoded JSON value of unknown shape."""
    value: Any


DecodeResult = Union[Decoded, DecodeFailure]


def to_json(data: AppData) -> str:
    """Serialise app data to its canonical JSON text."""
    return json.dumps(
        data.to_document(),
        ensure_ascii=False,
        separators=(",", ":"),
        allow_nan=False,
    )


def encode(data: AppData) -> str:
    """Encode app data into the stored text form."""
    raw = to_json(data).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode(text: str) -> DecodeResult:
    """Invert encode(). Surrounding whitespace is ignored."""
    try:
        raw = base64.b64decode(text.strip(), validate=True)
        payload = raw.decode("utf-8")
    except (binascii.Error, ValueError) as e:
        # UnicodeDecodeError is a ValueError
        return DecodeFailure(kind=DecodeFailureKind.TRANSFORM, message=str(e))

    try:
        return Decoded(value=json.loads(payload))
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, oversized integer literals, runaway nesting
        return DecodeFailure(kind=DecodeFailureKind.JSON, message=str(e))


def parse_plain_json(text: str) -> DecodeResult:
    """Parse a document saved before base64 encoding was introduced."""
    try:
        return Decoded(value=json.loads(text))
    except (ValueError, RecursionError) as e:
        return DecodeFailure(kind=DecodeFailureKind.JSON, message=str(e))
