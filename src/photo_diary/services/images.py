"""Image helpers for uploaded photos: thumbnails and capture time."""

from datetime import datetime
from io import BytesIO

from PIL import Image

THUMBNAIL_SIZE = (400, 400)
THUMBNAIL_CONTENT_TYPE = "image/webp"

_EXIF_IFD = 0x8769
_DATE_TIME_ORIGINAL = 36867
_DATE_TIME = 306
_EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


def render_thumbnail(image_bytes: bytes) -> bytes:
    """Downscale an image into a WebP thumbnail."""
    input_buffer = BytesIO(image_bytes)
    output_buffer = BytesIO()

    with Image.open(input_buffer) as image:
        image.thumbnail(THUMBNAIL_SIZE)
        image.convert("RGB").save(output_buffer, format="WEBP")

    return output_buffer.getvalue()


def read_capture_time(image_bytes: bytes) -> datetime | None:
    """Return the EXIF capture timestamp of an image, if it has one."""
    try:
        with Image.open(BytesIO(image_bytes)) as image:
            exif = image.getexif()
    except OSError:
        return None
    raw = exif.get_ifd(_EXIF_IFD).get(_DATE_TIME_ORIGINAL) or exif.get(_DATE_TIME)
    if not isinstance(raw, str):
        return None
    try:
        return datetime.strptime(raw.strip("\x00 "), _EXIF_DATE_FORMAT)
    except ValueError:
        return None
