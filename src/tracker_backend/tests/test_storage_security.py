import pytest

from tracker_backend.storage_security import (
    sanitize_filename,
    file_extension,
    guess_content_type,
    validate_image_size,
    validate_image_content_type,
    validate_path_segment,
    perform_image_validation
)
from tracker_backend.storage_config import MAX_IMAGE_UPLOAD_SIZE, format_bytes
from tracker_backend.api.exceptions import BadRequestException


class TestFilenameSanitization:
    """Test filename sanitization"""

    def test_normal_filename(self):
        assert sanitize_filename("avatar.png") == "avatar.png"
        assert sanitize_filename("my_file_123.jpg") == "my_file_123.jpg"

    def test_path_traversal_prevention(self):
        assert sanitize_filename("../../../etc/passwd") == "passwd"
        assert sanitize_filename("/etc/passwd") == "passwd"
        assert sanitize_filename("..\\..\\windows\\system32\\config") == "config"

    def test_special_characters_removal(self):
        assert sanitize_filename("file<>:|?*.png") == "file.png"
        assert sanitize_filename("my@photo#2024!.jpg") == "myphoto2024.jpg"

    def test_space_handling(self):
        assert sanitize_filename("my photo name.png") == "my_photo_name.png"
        assert sanitize_filename("file   with   spaces.gif") == "file_with_spaces.gif"

    def test_hidden_file_prevention(self):
        assert sanitize_filename(".hidden.png") == "_hidden.png"
        assert sanitize_filename("..double_dot.png") == "_double_dot.png"

    def test_long_filename_truncation(self):
        result = sanitize_filename("a" * 150 + ".png")
        assert len(result) <= 104
        assert result.endswith(".png")

    def test_unicode_support(self):
        assert sanitize_filename("图片.png") == "图片.png"

    def test_empty_filename(self):
        assert sanitize_filename("") == "unnamed_file"
        assert sanitize_filename("   ") == "unnamed_file"


class TestNaming:

    def test_file_extension(self):
        assert file_extension("photo.JPG") == "jpg"
        assert file_extension("archive.tar.gz") == "gz"
        assert file_extension("noext") == "bin"
        assert file_extension("trailing.") == "bin"

    def test_content_type_guess(self):
        assert guess_content_type("a.png", "image/webp") == "image/webp"
        assert guess_content_type("a.png", None) == "image/png"
        assert guess_content_type("a.png", "application/octet-stream") == "image/png"
        assert guess_content_type("unknown", None) == "application/octet-stream"

    def test_path_segments(self):
        validate_path_segment("avatar", "folder")
        validate_path_segment("team-logos_2", "folder")
        for bad in ("../up", "a/b", "with space", ""):
            with pytest.raises(BadRequestException):
                validate_path_segment(bad, "folder")


class TestImageValidation:

    def test_size_limits(self):
        assert validate_image_size(1024) == (True, None)
        assert validate_image_size(MAX_IMAGE_UPLOAD_SIZE) == (True, None)

        valid, error = validate_image_size(MAX_IMAGE_UPLOAD_SIZE + 1)
        assert valid is False
        assert "exceeds maximum" in error

        valid, error = validate_image_size(0)
        assert valid is False
        assert "No file" in error

    def test_content_types(self):
        assert validate_image_content_type("image/png") == (True, None)
        assert validate_image_content_type("IMAGE/JPEG; charset=binary") == (True, None)

        valid, error = validate_image_content_type("application/pdf")
        assert valid is False
        assert "not an image" in error

    def test_full_validation_raises(self):
        perform_image_validation("image/png", 10)
        with pytest.raises(BadRequestException):
            perform_image_validation("text/plain", 10)
        with pytest.raises(BadRequestException):
            perform_image_validation("image/png", 0)

    def test_format_bytes(self):
        assert format_bytes(512) == "512.00 B"
        assert format_bytes(10 * 1024 * 1024) == "10.00 MB"
