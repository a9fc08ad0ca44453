import base64
import binascii
from io import BytesIO
from pathlib import Path
from typing import Tuple, Union

from PIL import Image, UnidentifiedImageError

from sipscribe.exceptions import InvalidTastingError


DATA_URL_PREFIX = "data:image/jpeg;base64,"


def compress_jpeg(img_bytes: bytes, max_width: int = 1600, quality: int = 85) -> Tuple[bytes, int, int]:
    with Image.open(BytesIO(img_bytes)) as im:
        im = im.convert("RGB")
        w, h = im.size
        if w > max_width:
            r = max_width / float(w)
            im = im.resize((max_width, int(h * r)), Image.LANCZOS)
        out = BytesIO()
        im.save(out, format="JPEG", quality=quality, optimize=True)
        return out.getvalue(), im.width, im.height


def image_to_data_url(source: Union[str, Path, bytes], max_width: int = 1600) -> str:
    """Downscale a picture to JPEG and inline it as an ``imageBase64`` data URL."""
    raw = source if isinstance(source, bytes) else Path(source).expanduser().read_bytes()
    try:
        data, _, _ = compress_jpeg(raw, max_width=max_width)
    except UnidentifiedImageError as exc:
        raise InvalidTastingError("Attached file is not a readable image") from exc
    return DATA_URL_PREFIX + base64.b64encode(data).decode("ascii")


def data_url_to_bytes(data_url: str) -> bytes:
    """Decode any base64 data URL (or bare base64 payload) back to bytes."""
    _, sep, payload = data_url.partition(";base64,")
    if not sep:
        payload = data_url
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise InvalidTastingError("imageBase64 is not valid base64 data") from exc
