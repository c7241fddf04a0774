#!/usr/bin/env python3
"""
Seed script to populate the system via API endpoints.

Uploads the given image files, or a few generated sample images when no
file is given, then lists what the API now holds.

Run:
    python seed/seed_images.py \
      --api-id <API-ID> \
      [path/to/image.png ...]
"""

import argparse
import io
import mimetypes
from pathlib import Path
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
from PIL import Image
import requests

logger = Logger(service="seed")


API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/images"

SAMPLE_IMAGES: tuple[tuple[str, str, tuple[int, int], str], ...] = (
    ("cat.png", "PNG", (200, 200), "orange"),
    ("landscape.jpg", "JPEG", (640, 360), "seagreen"),
    ("badge.gif", "GIF", (64, 64), "navy"),
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed images via Image Transformation API")

    parser.add_argument(
        "--api-id",
        default=None,
        help="API Gateway ID (LocalStack); ignored when --base-url is given",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="Full URL of the /images collection",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Image files to upload (defaults to generated samples)",
    )

    args = parser.parse_args()
    if not args.base_url and not args.api_id:
        parser.error("one of --api-id or --base-url is required")

    return args


def generate_samples() -> list[tuple[str, bytes, str]]:
    """Render simple solid-colour images for local testing."""
    samples: list[tuple[str, bytes, str]] = []

    for name, image_format, size, colour in SAMPLE_IMAGES:
        buffer = io.BytesIO()
        Image.new("RGB", size, colour).save(buffer, format=image_format)
        samples.append((name, buffer.getvalue(), Image.MIME[image_format]))

    return samples


def load_files(paths: list[Path]) -> list[tuple[str, bytes, str]]:
    files: list[tuple[str, bytes, str]] = []

    for path in paths:
        if not path.exists():
            logger.warning("Image file not found", extra={"path": str(path)})
            continue

        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        files.append((path.name, path.read_bytes(), content_type))

    return files


def seed_images() -> None:
    try:
        args = parse_args()
        upload_url = args.base_url or API_URL.format(args.api_id)
        files = load_files(args.paths) if args.paths else generate_samples()

        logger.info(
            "Starting seeding process",
            extra={"api_base_url": upload_url, "count": len(files)},
        )

        for name, content, content_type in files:
            response = requests.post(
                upload_url,
                files={"file": (name, content, content_type)},
                timeout=30,
            )

            if response.status_code == 201:
                response_json = cast(dict[str, Any], response.json())
                logger.info(
                    "Seeded image",
                    extra={
                        "image": name,
                        "image_id": response_json.get("id"),
                        "url": response_json.get("url"),
                    },
                )
            else:
                logger.error(
                    "Failed to seed image",
                    extra={
                        "image": name,
                        "status": response.status_code,
                        "response": response.text,
                    },
                )

        logger.info("Seeding completed")

        list_response = requests.get(upload_url, timeout=30)

        logger.info(
            "List images response",
            extra={
                "status": list_response.status_code,
                "response": list_response.json() if list_response.ok else list_response.text,
            },
        )

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_images()
