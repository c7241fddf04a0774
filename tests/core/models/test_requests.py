import pytest
from pydantic import ValidationError

from core.models.requests import ImageFileRequest, ImageIdRequest
from core.utils.constants import MAX_FILE_SIZE
from core.utils.events import UploadedFile


class TestImageIdRequest:
    def test_valid(self) -> None:
        assert ImageIdRequest(image_id=" img_1 ").image_id == "img_1"

    def test_rejects_slash(self) -> None:
        with pytest.raises(ValidationError):
            ImageIdRequest(image_id="img/1")

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValidationError):
            ImageIdRequest(image_id="")

    def test_rejects_missing(self) -> None:
        with pytest.raises(ValidationError):
            ImageIdRequest.model_validate({"image_id": None})


class TestImageFileRequest:
    def test_valid(self) -> None:
        request = ImageFileRequest(file=UploadedFile(filename="a.png", content=b"data"))

        assert request.file.filename == "a.png"

    def test_rejects_empty_file(self) -> None:
        with pytest.raises(ValidationError, match="Uploaded file is empty"):
            ImageFileRequest(file=UploadedFile(filename="a.png", content=b""))

    def test_rejects_large_file(self) -> None:
        content = b"x" * (MAX_FILE_SIZE + 1)

        with pytest.raises(ValidationError, match="4MB"):
            ImageFileRequest(file=UploadedFile(filename="a.png", content=content))

    def test_accepts_file_at_limit(self) -> None:
        content = b"x" * MAX_FILE_SIZE

        assert ImageFileRequest(file=UploadedFile(filename="a.png", content=content)).file.size == MAX_FILE_SIZE

    def test_rejects_plain_string(self) -> None:
        with pytest.raises(ValidationError):
            ImageFileRequest.model_validate({"file": "not a file"})
