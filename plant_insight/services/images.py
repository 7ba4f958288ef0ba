"""
Image payload helpers.

The browser sends photos as data URIs (FileReader.readAsDataURL). Uploads
arriving as multipart files are turned into the same form so the gateway
always receives `data:<mime>;base64,<bytes>` with the original bytes intact.
"""
import base64
import binascii
import re
from typing import Optional, Tuple
from urllib.parse import unquote_to_bytes

DEFAULT_IMAGE_MIME = "image/jpeg"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*?)(?P<b64>;base64)?,(?P<data>.*)$", re.DOTALL)
_IMAGE_URL_RE = re.compile(r"^\s*https?://", re.IGNORECASE)


def is_data_uri(value: str) -> bool:
    return bool(value) and value.lstrip().lower().startswith("data:")


def to_data_uri(data: bytes, mime_type: Optional[str] = None) -> str:
    """Encode raw image bytes as a base64 data URI."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_IMAGE_MIME};base64,{encoded}"


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Return (mime_type, raw bytes) for a data URI.

    Raises ValueError when the string is not a well-formed data URI.
    """
    match = _DATA_URI_RE.match((uri or "").strip())
    if not match:
        raise ValueError("Not a data URI")
    mime = match.group("mime") or "text/plain"
    payload = match.group("data")
    if match.group("b64"):
        try:
            return mime, base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 payload in data URI: {e}")
    return mime, unquote_to_bytes(payload)


def is_bare_base64(value: str) -> bool:
    try:
        base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def normalize_image_payload(image: str) -> str:
    """Wrap bare base64 as a JPEG data URI; anything else (data URIs, URLs) is forwarded as given."""
    if is_data_uri(image) or _IMAGE_URL_RE.match(image) or not is_bare_base64(image):
        return image
    return f"data:{DEFAULT_IMAGE_MIME};base64,{image.strip()}"
