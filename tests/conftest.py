"""
Pytest configuration and fixtures for image-transformation tests.
Provides AWS mocking, S3 fixtures with proper cleanup and Pillow-generated images.
"""

import io
import json
import os
from collections.abc import Callable
from typing import Any

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-image-bucket")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-transformation-service")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageTransformationService")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ.pop("IMAGE_API_BASE_URL", None)

import boto3  # noqa: E402
import pytest  # noqa: E402
from botocore.exceptions import ClientError  # noqa: E402
from moto import mock_aws  # noqa: E402
from PIL import Image  # noqa: E402


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (reused, moto cleans up on context exit)
    """
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        try:
            s3_client.create_bucket(Bucket=bucket_name)
        except ClientError as e:
            if e.response["Error"]["Code"] != "BucketAlreadyOwnedByYou":
                raise

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("img_1/image.png", image_bytes, "image/png")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        return s3_bucket.put_object(
            Bucket=bucket_name, Key=key, Body=body, ContentType=content_type
        )

    return _put


@pytest.fixture
def s3_get_object(s3_bucket) -> Callable[[str], bytes]:
    """
    Helper to get an object from S3.

    Usage:
        content = s3_get_object("img_1/image.png")
    """

    def _get(key: str) -> bytes:
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        response: dict[str, Any] = s3_bucket.get_object(
            Bucket=bucket_name,
            Key=key,
        )
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_list_keys(s3_bucket) -> Callable[[], list[str]]:
    """Helper returning every key in the test bucket."""

    def _list() -> list[str]:
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        response = s3_bucket.list_objects_v2(Bucket=bucket_name)
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _list


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory rendering a solid-colour image with Pillow.

    Usage:
        png = make_image("PNG", (200, 200))
        jpeg = make_image("JPEG", (40, 20), color=(255, 0, 0))
    """

    def _make(
        image_format: str = "PNG",
        size: tuple[int, int] = (200, 200),
        color: tuple[int, ...] = (200, 100, 50),
        mode: str = "RGB",
    ) -> bytes:
        buffer = io.BytesIO()
        Image.new(mode, size, color).save(buffer, format=image_format)
        return buffer.getvalue()

    return _make


@pytest.fixture
def decode_image() -> Callable[[bytes], Image.Image]:
    """Open rendered bytes with Pillow for assertions."""

    def _decode(data: bytes) -> Image.Image:
        image = Image.open(io.BytesIO(data))
        image.load()
        return image

    return _decode


@pytest.fixture
def sample_metadata() -> dict[str, Any]:
    """Single stored metadata record."""
    return {
        "id": "img_1",
        "original_name": "cat.png",
        "extension": "png",
        "created_at": "2024-01-01T10:00:00+00:00",
        "updated_at": "2024-01-01T10:00:00+00:00",
    }


@pytest.fixture
def store_image(s3_put_object, make_image) -> Callable[..., dict[str, Any]]:
    """
    Helper writing an image directory (bytes plus meta.json) straight to S3.

    Usage:
        meta = store_image("img_1", original_name="cat.png")
    """

    def _store(
        image_id: str,
        *,
        original_name: str = "cat.png",
        image_format: str = "PNG",
        extension: str = "png",
        size: tuple[int, int] = (200, 200),
        content: bytes | None = None,
    ) -> dict[str, Any]:
        meta = {
            "id": image_id,
            "original_name": original_name,
            "extension": extension,
            "created_at": "2024-01-01T10:00:00+00:00",
            "updated_at": "2024-01-01T10:00:00+00:00",
        }
        body = content if content is not None else make_image(image_format, size)

        s3_put_object(f"{image_id}/image.{extension}", body, f"image/{extension}")
        s3_put_object(
            f"{image_id}/meta.json",
            json.dumps(meta, indent=4).encode("utf-8"),
            "application/json",
        )
        return meta

    return _store
