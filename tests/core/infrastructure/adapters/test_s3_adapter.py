import pytest
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.utils.constants import ENV_IMAGE_S3_BUCKET_NAME


class TestS3Adapter:
    def test_init_missing_bucket_env(self, monkeypatch):
        monkeypatch.delenv(ENV_IMAGE_S3_BUCKET_NAME, raising=False)

        with pytest.raises(RuntimeError):
            S3Adapter()

    def test_put_and_get_object_success(self, s3_bucket, s3_get_object):
        adapter = S3Adapter()

        adapter.put_object(
            key="img_1/image.jpeg",
            body=b"image-bytes",
            content_type="image/jpeg",
            metadata={"image_id": "img_1"},
        )

        assert s3_get_object("img_1/image.jpeg") == b"image-bytes"
        assert adapter.get_object(key="img_1/image.jpeg")["ContentType"] == "image/jpeg"

    def test_get_object_missing_key_raises_client_error(self, s3_bucket):
        adapter = S3Adapter()

        with pytest.raises(ClientError) as exc:
            adapter.get_object(key="missing/image.jpeg")

        assert exc.value.response["Error"]["Code"] == "NoSuchKey"

    def test_delete_object_success(self, s3_put_object, s3_list_keys):
        s3_put_object("img_1/image.png", b"data", "image/png")

        S3Adapter().delete_object(key="img_1/image.png")

        assert s3_list_keys() == []

    def test_list_keys_under_prefix(self, s3_put_object):
        s3_put_object("img_1/image.png", b"a")
        s3_put_object("img_1/meta.json", b"{}")
        s3_put_object("img_10/meta.json", b"{}")

        assert sorted(S3Adapter().list_keys(prefix="img_1/")) == ["img_1/image.png", "img_1/meta.json"]

    def test_list_prefixes(self, s3_put_object):
        s3_put_object("img_b/meta.json", b"{}")
        s3_put_object("img_a/meta.json", b"{}")
        s3_put_object("img_a/image.png", b"a")

        assert list(S3Adapter().list_prefixes()) == ["img_a/", "img_b/"]

    def test_delete_objects(self, s3_put_object, s3_list_keys):
        s3_put_object("img_1/image.png", b"a")
        s3_put_object("img_1/meta.json", b"{}")
        s3_put_object("img_2/meta.json", b"{}")

        errors = S3Adapter().delete_objects(keys=["img_1/image.png", "img_1/meta.json"])

        assert errors == []
        assert s3_list_keys() == ["img_2/meta.json"]

    def test_delete_objects_empty(self, s3_bucket):
        assert S3Adapter().delete_objects(keys=[]) == []
