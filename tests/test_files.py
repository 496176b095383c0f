import os

from nobg import config
from nobg.files import default_save_name, validate_image, write_data_url
from nobg.models import Failure, ImageRecord, Saved
from nobg.transport import decode_data_url, encode_data_url


def test_valid_jpeg_produces_record(make_file):
    path = make_file("holiday.jpg", size=2 * 1024 * 1024, prefix=b"\xff\xd8\xff")
    record = validate_image(path)
    assert isinstance(record, ImageRecord)
    assert record.mime_type == "image/jpeg"
    assert record.display_name == "holiday.jpg"
    assert record.byte_size == 2 * 1024 * 1024
    assert record.source_path == os.path.abspath(path)
    assert record.encoded_bytes.startswith("data:image/jpeg;base64,")
    assert decode_data_url(record.encoded_bytes)[:3] == b"\xff\xd8\xff"


def test_extension_check_is_case_insensitive(make_file):
    assert isinstance(validate_image(make_file("SHOT.PNG")), ImageRecord)
    assert isinstance(validate_image(make_file("shot.WebP")), ImageRecord)


def test_unsupported_extension_is_validation_failure(make_file):
    for name in ("notes.txt", "scan.bmp", "photo.gif", "noext"):
        result = validate_image(make_file(name))
        assert isinstance(result, Failure)
        assert result.kind == "validation"
        assert "Unsupported" in result.reason


def test_oversize_file_is_validation_failure(make_file):
    path = make_file("huge.png", size=25 * 1024 * 1024)
    result = validate_image(path)
    assert isinstance(result, Failure)
    assert result.kind == "validation"
    assert f"{config.MAX_FILE_SIZE_MB} MiB" in result.reason


def test_missing_file_is_io_failure(tmp_path):
    result = validate_image(str(tmp_path / "gone.jpg"))
    assert isinstance(result, Failure)
    assert result.kind == "io"


def test_default_save_name():
    assert default_save_name("portrait.jpg") == "portrait_no_bg.png"
    assert default_save_name("my.holiday.photo.webp") == "my.holiday.photo_no_bg.png"
    assert default_save_name("/some/dir/cat.PNG") == "cat_no_bg.png"
    assert default_save_name(None) == "image_no_bg.png"
    assert default_save_name("") == "image_no_bg.png"


def test_write_data_url_writes_raw_bytes(tmp_path):
    dest = tmp_path / "out.png"
    result = write_data_url(encode_data_url(b"\x89PNG\r\n\x1a\nbody", "image/png"), str(dest))
    assert result == Saved(path=str(dest))
    assert dest.read_bytes() == b"\x89PNG\r\n\x1a\nbody"


def test_write_data_url_reports_write_failure(tmp_path):
    dest = tmp_path / "missing-dir" / "out.png"
    result = write_data_url(encode_data_url(b"x", "image/png"), str(dest))
    assert isinstance(result, Failure)
    assert result.kind == "io"
    assert not dest.exists()


def test_write_data_url_rejects_malformed_payload(tmp_path):
    result = write_data_url("not a data url", str(tmp_path / "out.png"))
    assert isinstance(result, Failure)
    assert result.kind == "io"
