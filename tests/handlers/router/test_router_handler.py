import base64
import json

import pytest

from handlers.delete_image.handler import handler as delete_image
from handlers.get_image.handler import handler as get_image
from handlers.get_image_representation.handler import handler as get_image_representation
from handlers.list_images.handler import handler as list_images
from handlers.router.handler import handler, match_path, resolve_route
from handlers.transform_image.handler import handler as transform_image
from handlers.upload_image.handler import handler as upload_image


class TestResolveRoute:
    @pytest.mark.parametrize(
        ("method", "path", "expected", "params"),
        [
            ("GET", "/images", list_images, {}),
            ("POST", "/images/", upload_image, {}),
            ("GET", "/images/img_1", get_image, {"image_id": "img_1"}),
            ("DELETE", "/images/img_1", delete_image, {"image_id": "img_1"}),
            (
                "GET",
                "/images/img_1/representation",
                get_image_representation,
                {"image_id": "img_1"},
            ),
            (
                "PUT",
                "/images/img_1/set-opacity",
                transform_image,
                {"image_id": "img_1", "operation": "set-opacity"},
            ),
        ],
    )
    def test_matches(self, method, path, expected, params) -> None:
        route_handler, path_params, _ = resolve_route(method, path)

        assert route_handler is expected
        assert path_params == params

    def test_method_not_allowed(self) -> None:
        route_handler, _, allowed = resolve_route("PATCH", "/images/img_1")

        assert route_handler is None
        assert sorted(allowed) == ["DELETE", "GET", "PUT"]

    def test_unknown_path(self) -> None:
        assert resolve_route("GET", "/nothing/here") == (None, {}, [])


def test_match_path_rejects_empty_parameter() -> None:
    assert match_path(("images", "{image_id}"), ["images", ""]) is None


class TestRouterHandler:
    def test_unknown_route(self, api_event, lambda_context) -> None:
        response = handler(api_event("GET", "/unknown"), lambda_context)

        assert response["statusCode"] == 404

    def test_method_not_allowed(self, api_event, lambda_context) -> None:
        response = handler(api_event("PATCH", "/images"), lambda_context)

        assert response["statusCode"] == 405
        assert response["headers"]["Allow"] == "GET,POST"

    def test_options_preflight(self, api_event, lambda_context) -> None:
        assert handler(api_event("OPTIONS", "/images/img_1"), lambda_context)["statusCode"] == 204


class TestImageLifecycle:
    """Upload, render, transform, re-encode and delete one image through the router."""

    def test_full_lifecycle(self, api_event, multipart, lambda_context, s3_bucket, make_image, decode_image) -> None:
        body, headers = multipart(file=("cat.png", make_image("PNG", (200, 200)), "image/png"))
        created = handler(api_event("POST", "/images", headers=headers, body=body), lambda_context)

        assert created["statusCode"] == 201
        image_id = json.loads(created["body"])["id"]
        path = f"/images/{image_id}"

        shown = handler(api_event("GET", path, query={"width": "50", "height": "50"}), lambda_context)
        assert decode_image(base64.b64decode(shown["body"])).size == (50, 50)

        representation = json.loads(handler(api_event("GET", f"{path}/representation"), lambda_context)["body"])
        assert representation["extension"] == "png"

        resized = handler(
            api_event("PUT", f"{path}/resize", query={"width": "80", "height": "60"}),
            lambda_context,
        )
        assert resized["statusCode"] == 200

        stored = handler(api_event("GET", path), lambda_context)
        assert decode_image(base64.b64decode(stored["body"])).size == (80, 60)

        encoded = handler(api_event("PUT", f"{path}/encode", query={"format": "jpg"}), lambda_context)
        assert encoded["headers"]["Content-Type"] == "image/jpeg"

        representation = json.loads(handler(api_event("GET", f"{path}/representation"), lambda_context)["body"])
        assert representation["extension"] == "jpeg"
        assert representation["original_name"] == "cat.jpeg"

        listed = json.loads(handler(api_event("GET", "/images"), lambda_context)["body"])
        assert listed == [representation]

        deleted = handler(api_event("DELETE", path), lambda_context)
        assert deleted["statusCode"] == 204

        missing = handler(api_event("GET", f"{path}/representation"), lambda_context)
        assert missing["statusCode"] == 404
