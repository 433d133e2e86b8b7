"""Blob stores for wordset documents and generated artifacts."""

from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote

import httpx

import config


class StorageError(Exception):
    """Raised when a storage backend fails (network, HTTP or filesystem)."""

    pass


class UploadCollision(StorageError):
    """Raised when a write would replace an existing object and overwrite is disabled."""

    pass


class BlobStore(ABC):
    """Abstract key/value store of named binary objects."""

    @abstractmethod
    def list_names(self, suffix: str | None = None, limit: int | None = None) -> list[str]:
        """List object names, sorted by name descending."""
        ...

    @abstractmethod
    def read(self, name: str) -> bytes:
        """Read an object. Raises StorageError if it cannot be read."""
        ...

    @abstractmethod
    def write(
        self,
        name: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        allow_overwrite: bool = False,
    ) -> None:
        """Write an object. Raises UploadCollision if it exists and allow_overwrite is False."""
        ...

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether an object exists."""
        ...


class LocalBlobStore(BlobStore):
    """Directory-backed blob store."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        return self.root / name

    def list_names(self, suffix: str | None = None, limit: int | None = None) -> list[str]:
        if not self.root.is_dir():
            return []
        names = sorted(
            (p.name for p in self.root.iterdir() if p.is_file()),
            reverse=True,
        )
        if suffix:
            names = [n for n in names if n.endswith(suffix)]
        if limit is not None:
            names = names[:limit]
        return names

    def read(self, name: str) -> bytes:
        try:
            return self._path(name).read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {name}: {e}") from e

    def write(
        self,
        name: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        allow_overwrite: bool = False,
    ) -> None:
        path = self._path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        # "x" fails on an existing file without touching it
        mode = "wb" if allow_overwrite else "xb"
        try:
            with open(path, mode) as f:
                f.write(data)
        except FileExistsError as e:
            raise UploadCollision(f"Object already exists: {name}") from e
        except OSError as e:
            raise StorageError(f"Failed to write {name}: {e}") from e

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()


class SupabaseBlobStore(BlobStore):
    """Blob store backed by a Supabase Storage bucket (REST API)."""

    def __init__(
        self,
        url: str,
        key: str,
        bucket: str,
        client: httpx.Client | None = None,
        timeout: float = config.STORAGE_TIMEOUT,
    ):
        self.base_url = url.rstrip("/") + "/storage/v1"
        self.bucket = bucket
        self._client = client or httpx.Client(timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {key}",
            "apikey": key,
        }

    def _object_url(self, name: str) -> str:
        return f"{self.base_url}/object/{self.bucket}/{quote(name)}"

    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {**self._headers, **kwargs.pop("headers", {})}
        try:
            return self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise StorageError(f"{method} {url} failed: {e}") from e

    def list_names(self, suffix: str | None = None, limit: int | None = None) -> list[str]:
        response = self._request(
            "POST",
            f"{self.base_url}/object/list/{self.bucket}",
            json={
                "prefix": "",
                "limit": limit or config.WORDSET_LIST_LIMIT,
                "offset": 0,
                "sortBy": {"column": "name", "order": "desc"},
            },
        )
        if response.status_code != 200:
            raise StorageError(
                f"Failed to list bucket {self.bucket}: {response.status_code} {response.text[:200]}"
            )

        try:
            entries = response.json()
        except ValueError as e:
            raise StorageError(f"Failed to parse list response for bucket {self.bucket}: {e}") from e
        if not isinstance(entries, list):
            raise StorageError(f"Unexpected list response for bucket {self.bucket}")

        names = [e["name"] for e in entries if isinstance(e, dict) and e.get("name")]
        if suffix:
            names = [n for n in names if n.endswith(suffix)]
        return names

    def read(self, name: str) -> bytes:
        response = self._request("GET", self._object_url(name))
        if response.status_code != 200:
            raise StorageError(f"Failed to download {name}: {response.status_code}")
        return response.content

    def write(
        self,
        name: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        allow_overwrite: bool = False,
    ) -> None:
        response = self._request(
            "POST",
            self._object_url(name),
            content=data,
            headers={
                "Content-Type": content_type,
                "x-upsert": "true" if allow_overwrite else "false",
            },
        )
        if response.status_code in (200, 201):
            return
        # Supabase reports duplicates as 409, or as 400 with a "Duplicate" body
        if response.status_code == 409 or "Duplicate" in response.text:
            raise UploadCollision(f"Object already exists: {self.bucket}/{name}")
        raise StorageError(
            f"Failed to upload {name}: {response.status_code} {response.text[:200]}"
        )

    def exists(self, name: str) -> bool:
        response = self._request("HEAD", self._object_url(name))
        return response.status_code == 200

    def close(self) -> None:
        self._client.close()
