# tests/fakes.py

from __future__ import annotations

from utils.errors import ImageHostError
from utils.image_host import resource_id_from_url


class FakeImageHost:
    """
    In-memory stand-in for ImageHostClient.

    Records uploads and deletions so tests can assert on them, and can be
    told to fail either call to exercise the error path.
    """

    def __init__(self, folder: str = "task-manager") -> None:
        self.folder = folder
        self.uploaded: list[tuple[str, bytes, str]] = []
        self.deleted: list[str] = []
        self.fail_upload: str | None = None
        self.fail_delete: str | None = None

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        if self.fail_upload:
            raise ImageHostError(self.fail_upload)
        self.uploaded.append((filename, content, content_type))
        stem = filename.rsplit(".", 1)[0]
        return f"https://img.example.com/{self.folder}/{stem}-{len(self.uploaded)}.png"

    async def delete(self, resource_ids: list[str]) -> None:
        if self.fail_delete:
            raise ImageHostError(self.fail_delete)
        self.deleted.extend(resource_ids)

    def resource_id_for(self, url: str) -> str:
        return resource_id_from_url(url, self.folder)
