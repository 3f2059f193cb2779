"""
Profile Service.

The two backend collaborators the submission needs: image upload and
profile setup. ProfileCollaborator is the seam; ProfileService is the
HTTP-backed implementation.
"""

import logging
from typing import Any, Callable, Protocol

from sheshape.http import ApiClient, ApiError

from .images import StagedImage

logger = logging.getLogger(__name__)

PROFILE_IMAGE_PATH = "/api/users/profile/image"
PROFILE_SETUP_PATH = "/api/users/profile/setup"


class ProfileCollaborator(Protocol):
    async def upload_profile_image(self, image: StagedImage) -> str: ...

    async def setup_profile(self, payload: dict) -> Any: ...


class ProfileService:
    """
    Backend profile endpoints.

    on_profile_ready runs after a successful setup; the application uses it
    to redirect to the dashboard.
    """

    def __init__(
        self,
        client: ApiClient,
        on_profile_ready: Callable[[Any], None] | None = None,
    ):
        self.client = client
        self.on_profile_ready = on_profile_ready

    async def upload_profile_image(self, image: StagedImage) -> str:
        """Upload the staged image and return its durable URL."""
        files = {
            "file": (image.source.filename, image.source.data, image.content_type),
        }
        result = await self.client.post(PROFILE_IMAGE_PATH, files=files)

        url = None
        if isinstance(result, dict):
            url = result.get("url") or result.get("imageUrl")
        elif isinstance(result, str):
            url = result

        if not url:
            raise ApiError("Image upload returned no URL", payload=result)

        logger.info(f"Uploaded profile image {image.source.filename!r}")
        return url

    async def setup_profile(self, payload: dict) -> Any:
        result = await self.client.post(PROFILE_SETUP_PATH, payload)
        logger.info("Profile setup accepted")
        if self.on_profile_ready:
            self.on_profile_ready(result)
        return result
