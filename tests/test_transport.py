import os

import pytest

from nobg.transport import decode_data_url, encode_data_url, mime_type_for


def test_round_trip_is_byte_identical():
    data = os.urandom(4096) + b"\x00\xff" * 10
    url = encode_data_url(data, "image/png")
    assert url.startswith("data:image/png;base64,")
    assert decode_data_url(url) == data


def test_round_trip_empty_payload():
    assert decode_data_url(encode_data_url(b"", "image/webp")) == b""


@pytest.mark.parametrize("path, mime", [
    ("a.jpg", "image/jpeg"),
    ("a.JPEG", "image/jpeg"),
    ("dir/b.png", "image/png"),
    ("c.WebP", "image/webp"),
])
def test_mime_type_for(path, mime):
    assert mime_type_for(path) == mime


def test_decode_rejects_missing_prefix():
    with pytest.raises(ValueError):
        decode_data_url("aGVsbG8=")


def test_decode_rejects_non_image_mime():
    with pytest.raises(ValueError):
        decode_data_url("data:text/plain;base64,aGVsbG8=")


def test_decode_rejects_bad_base64():
    with pytest.raises(ValueError):
        decode_data_url("data:image/png;base64,***not base64***")
