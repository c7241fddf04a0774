#!/usr/bin/env python3
"""
Cleanup script to remove every image via API endpoints.

Run:
    python seed/cleanup_images.py \
      --api-id <API-ID>
"""

import argparse
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
import requests

logger = Logger(service="cleanup")

API_URL = "http://localhost:4566/restapis/{0}/snd/_user_request_/images"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Delete all images via Image Transformation API")

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
        "--dry-run",
        action="store_true",
        help="Only list the images that would be deleted",
    )

    args = parser.parse_args()
    if not args.base_url and not args.api_id:
        parser.error("one of --api-id or --base-url is required")

    return args


def cleanup_images() -> None:
    try:
        args = parse_args()
        base_url = args.base_url or API_URL.format(args.api_id)

        logger.info("Starting cleanup process", extra={"api_base_url": base_url})

        response = requests.get(base_url, timeout=30)

        if not response.ok:
            logger.error(
                "Failed to list images",
                extra={"status": response.status_code, "response": response.text},
            )
            sys.exit(1)

        images = cast(list[dict[str, Any]], response.json())

        if not images:
            logger.info("No images found for cleanup")
            return

        for image in images:
            image_id = image["id"]

            if args.dry_run:
                logger.info(
                    "Would delete image",
                    extra={"image_id": image_id, "original_name": image.get("original_name")},
                )
                continue

            delete_resp = requests.delete(f"{base_url}/{image_id}", timeout=30)

            if delete_resp.status_code == 204:
                logger.info("Deleted image", extra={"image_id": image_id})
            else:
                logger.error(
                    "Failed to delete image",
                    extra={
                        "image_id": image_id,
                        "status": delete_resp.status_code,
                        "response": delete_resp.text,
                    },
                )

        logger.info("Cleanup completed successfully")

    except Exception as exc:
        logger.exception("Cleanup failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    cleanup_images()
