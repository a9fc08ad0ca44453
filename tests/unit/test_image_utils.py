"""
Unit tests for sipscribe/image_utils.py — inline image attachments.
"""

from io import BytesIO

import pytest
from PIL import Image


def _png(width: int, height: int) -> bytes:
    out = BytesIO()
    Image.new("RGBA", (width, height), (120, 20, 40, 255)).save(out, format="PNG")
    return out.getvalue()


class TestCompressJpeg:

    def test_wide_image_is_downscaled(self):
        from sipscribe.image_utils import compress_jpeg
        data, w, h = compress_jpeg(_png(3200, 800), max_width=1600)
        assert (w, h) == (1600, 400)
        with Image.open(BytesIO(data)) as im:
            assert im.format == "JPEG"

    def test_small_image_keeps_size(self):
        from sipscribe.image_utils import compress_jpeg
        _, w, h = compress_jpeg(_png(300, 200))
        assert (w, h) == (300, 200)


class TestDataUrl:

    def test_image_to_data_url_from_file(self, tmp_path):
        from sipscribe.image_utils import DATA_URL_PREFIX, data_url_to_bytes, image_to_data_url
        path = tmp_path / "label.png"
        path.write_bytes(_png(64, 32))

        url = image_to_data_url(path)
        assert url.startswith(DATA_URL_PREFIX)
        with Image.open(BytesIO(data_url_to_bytes(url))) as im:
            assert im.size == (64, 32)

    def test_max_width_is_honoured(self):
        from sipscribe.image_utils import data_url_to_bytes, image_to_data_url
        url = image_to_data_url(_png(1000, 500), max_width=100)
        with Image.open(BytesIO(data_url_to_bytes(url))) as im:
            assert im.size == (100, 50)

    def test_non_image_bytes_raise(self):
        from sipscribe.exceptions import InvalidTastingError
        from sipscribe.image_utils import image_to_data_url
        with pytest.raises(InvalidTastingError):
            image_to_data_url(b"definitely not a picture")

    def test_bare_base64_payload_decodes(self):
        from sipscribe.image_utils import data_url_to_bytes
        assert data_url_to_bytes("aGVsbG8=") == b"hello"

    def test_garbage_payload_raises(self):
        from sipscribe.exceptions import InvalidTastingError
        from sipscribe.image_utils import data_url_to_bytes
        with pytest.raises(InvalidTastingError):
            data_url_to_bytes("data:image/png;base64,@@@")
