# backend/utils/image_host.py
import logging
from typing import List
from urllib.parse import urljoin, urlparse

import httpx

from config import settings
from utils.errors import ImageHostError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/jpg"}


def resource_id_from_url(url: str, folder: str) -> str:
    """'https://host/x/task-manager/abc.png' -> 'task-manager/abc'"""
    path = urlparse(url).path or url
    image = path.rstrip("/").split("/")[-1]
    image_name = image.split(".")[0]
    return f"{folder}/{image_name}"


class ImageHostClient:
    def __init__(self):
        # Service endpoint, credentials and target folder from settings
        self.api_url = settings.IMAGE_HOST_URL
        self.api_key = settings.IMAGE_HOST_API_KEY
        self.folder = settings.IMAGE_FOLDER

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"} if self.api_key else {}

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        # Store the image and return its public URL
        upload_url = urljoin(self.api_url, "/upload")
        files = {"file": (filename, content, content_type)}
        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    upload_url, data={"folder": self.folder}, files=files, headers=self._headers()
                )
                response.raise_for_status()
                return response.json()["secure_url"]
            except (httpx.RequestError, httpx.HTTPStatusError, KeyError, ValueError) as e:
                logger.error(f"Image upload error: {e}")
                raise ImageHostError(str(e)) from e

    async def delete(self, resource_ids: List[str]) -> None:
        # Remove previously uploaded images by resource id
        delete_url = urljoin(self.api_url, "/delete")
        payload = {"resource_ids": resource_ids, "type": "upload", "resource_type": "image"}
        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(delete_url, json=payload, headers=self._headers())
                response.raise_for_status()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Image delete error: {e}")
                raise ImageHostError(str(e)) from e

    def resource_id_for(self, url: str) -> str:
        return resource_id_from_url(url, self.folder)


image_host = ImageHostClient()


def get_image_host() -> ImageHostClient:
    return image_host
