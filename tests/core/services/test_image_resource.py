import json

import pytest

from core.imaging.processor import EncodedImage
from core.models.errors import DecodeError, NotFoundError, StorageError, ValidationError
from core.services.image_resource import ImageResource


@pytest.fixture
def resource(s3_bucket) -> ImageResource:
    return ImageResource()


class TestGenerateImageId:
    def test_prefix_and_uniqueness(self) -> None:
        first = ImageResource.generate_image_id()
        second = ImageResource.generate_image_id()

        assert first.startswith("img_")
        assert first != second


class TestGuessExtension:
    @pytest.mark.parametrize(
        ("image_format", "expected"),
        [("PNG", "png"), ("JPEG", "jpg"), ("BMP", "bmp"), ("PPM", "ppm"), ("GIF", "gif")],
    )
    def test_from_content(self, make_image, image_format, expected) -> None:
        assert ImageResource.guess_extension(make_image(image_format, (10, 10))) == expected

    def test_not_an_image(self) -> None:
        with pytest.raises(ValidationError) as exc:
            ImageResource.guess_extension(b"plain text, not pixels")

        assert exc.value.message == "The file must be an image"
        assert exc.value.details == {"field": "file"}


class TestFindOrFail:
    def test_found(self, resource, store_image) -> None:
        store_image("img_1")

        assert resource.find_or_fail("img_1").original_name == "cat.png"

    def test_missing(self, resource) -> None:
        with pytest.raises(NotFoundError):
            resource.find_or_fail("img_missing")


class TestCreate:
    def test_writes_blob_and_metadata(self, resource, make_image, s3_list_keys, s3_get_object) -> None:
        content = make_image("JPEG", (30, 20))

        metadata = resource.create(original_name="photo.upload", file_data=content)

        assert metadata.extension == "jpg"
        assert metadata.original_name == "photo.upload"
        assert s3_list_keys() == [f"{metadata.id}/image.jpg", f"{metadata.id}/meta.json"]
        assert s3_get_object(f"{metadata.id}/image.jpg") == content
        assert json.loads(s3_get_object(f"{metadata.id}/meta.json"))["id"] == metadata.id

    def test_rejects_non_image(self, resource, s3_list_keys) -> None:
        with pytest.raises(ValidationError):
            resource.create(original_name="notes.txt", file_data=b"hello")

        assert s3_list_keys() == []


class TestLoadPipeline:
    def test_decodes_stored_bytes(self, resource, store_image) -> None:
        store_image("img_1", size=(64, 32))

        pipeline = resource.load_pipeline(resource.find_or_fail("img_1"))

        assert pipeline.size == (64, 32)
        assert pipeline.target_format == "PNG"

    def test_corrupt_stored_bytes(self, resource, store_image) -> None:
        store_image("img_1", content=b"corrupted")

        with pytest.raises(DecodeError) as exc:
            resource.load_pipeline(resource.find_or_fail("img_1"))

        assert exc.value.message == "Stored image could not be decoded"

    def test_missing_blob(self, resource, s3_put_object, sample_metadata) -> None:
        s3_put_object("img_1/meta.json", json.dumps(sample_metadata).encode(), "application/json")

        with pytest.raises(NotFoundError):
            resource.load_pipeline(resource.find_or_fail("img_1"))


class TestReplace:
    def test_swaps_blob_and_extension(self, resource, store_image, make_image, s3_list_keys) -> None:
        store_image("img_1")
        image = resource.find_or_fail("img_1")

        updated = resource.replace(image, original_name="new.gif", file_data=make_image("GIF", (5, 5)))

        assert updated.id == "img_1"
        assert updated.extension == "gif"
        assert updated.original_name == "new.gif"
        assert updated.created_at == image.created_at
        assert updated.updated_at != image.updated_at
        assert s3_list_keys() == ["img_1/image.gif", "img_1/meta.json"]


class TestPersist:
    def test_keeps_name_by_default(self, resource, store_image, s3_get_object) -> None:
        store_image("img_1")
        image = resource.find_or_fail("img_1")
        rendered = EncodedImage(content=b"new-bytes", mime_type="image/png")

        saved = resource.persist(image, rendered)

        assert saved.original_name == "cat.png"
        assert s3_get_object("img_1/image.png") == b"new-bytes"

    def test_new_extension(self, resource, store_image, s3_list_keys) -> None:
        store_image("img_1")
        image = resource.find_or_fail("img_1")
        rendered = EncodedImage(content=b"jpeg-bytes", mime_type="image/jpeg")

        saved = resource.persist(image, rendered, original_name="cat.jpeg", extension="jpeg")

        assert saved.extension == "jpeg"
        assert s3_list_keys() == ["img_1/image.jpeg", "img_1/meta.json"]


class TestDestroy:
    def test_removes_directory(self, resource, store_image, s3_list_keys) -> None:
        store_image("img_1")
        store_image("img_2")

        resource.destroy(resource.find_or_fail("img_1"))

        assert s3_list_keys() == ["img_2/image.png", "img_2/meta.json"]


class TestWithDoubles:
    def test_storage_failure_skips_metadata(self, make_image) -> None:
        class FailingStorage:
            def write_image(self, **_):
                raise StorageError(message="Unable to store image at this time")

        class RecordingMetadata:
            created = False

            def create_metadata(self, **_):
                self.created = True

        metadata = RecordingMetadata()
        resource = ImageResource(storage=FailingStorage(), metadata=metadata)

        with pytest.raises(StorageError):
            resource.create(original_name="a.png", file_data=make_image("PNG", (4, 4)))

        assert metadata.created is False
