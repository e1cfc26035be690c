"""Image capture — turns an uploaded image file into an inline data URL.

The data URL is stored directly on the client record and rendered by
the front end as-is.
"""

import base64
import logging
import mimetypes

from app.domain.exceptions import ImageCaptureError

logger = logging.getLogger(__name__)

# Leading bytes of the formats browsers render natively.
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def sniff_image_type(content: bytes) -> str | None:
    """Detect the image MIME type from the file signature, or None."""
    for signature, mime_type in _SIGNATURES:
        if content.startswith(signature):
            return mime_type
    if len(content) >= 12 and content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return None


class DataUrlImageEncoder:
    """Encodes image uploads as ``data:<mime>;base64,<payload>`` strings."""

    def __init__(self, max_bytes: int):
        self._max_bytes = max_bytes

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def encode(
        self,
        content: bytes,
        filename: str = "",
        content_type: str | None = None,
    ) -> str:
        """Return the inline representation of ``content``.

        Raises:
            ImageCaptureError: The file is empty, too large or not an image.
        """
        if not content:
            raise ImageCaptureError("Uploaded image is empty")
        if len(content) > self._max_bytes:
            raise ImageCaptureError(
                f"Image is {len(content)} bytes; the limit is {self._max_bytes} bytes"
            )

        mime_type = sniff_image_type(content)
        if mime_type is None:
            declared = content_type or mimetypes.guess_type(filename)[0] or ""
            if not declared.startswith("image/") or declared == "image/svg+xml":
                raise ImageCaptureError(
                    f"'{filename or 'upload'}' is not a supported image ({declared or 'unknown type'})"
                )
            mime_type = declared

        encoded = base64.b64encode(content).decode("ascii")
        logger.info("Encoded image %s (%s, %d bytes)", filename or "<upload>", mime_type, len(content))
        return f"data:{mime_type};base64,{encoded}"
