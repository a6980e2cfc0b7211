# utils/artifact_store.py
"""
Artifact stores that publish minted artifacts to content-addressed storage.

Two publishers are provided:

- IPFSArtifactStore talks to an IPFS HTTP API (a local Kubo node or a pinning
  service exposing the same endpoint). The preview image is added first, then
  metadata.json referencing it; the returned locator points at the metadata.
- InMemoryArtifactStore content-addresses artifacts in process. It is used for
  local runs, previews and tests.

Environment variables (IPFSArtifactStore.from_env):
- IPFS_API_URL: base URL of the HTTP API (default http://127.0.0.1:5001)
- IPFS_API_TOKEN (optional): bearer token sent with every upload
- IPFS_GATEWAY_URL (optional): gateway used to display ipfs:// locators
- STORAGE_TIMEOUT (optional): request timeout in seconds

Typical usage:

from utils.artifact_store import IPFSArtifactStore
async with IPFSArtifactStore.from_env() as store:
    locator = await store.upload(artifact)

Uploads are never retried here; a retry is a new mint attempt with a new
artifact.
"""
from __future__ import annotations

import base64
import hashlib
import json
import logging
import os
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import httpx

from monitoring.metrics import ARTIFACT_UPLOAD_BYTES
from utils.constants import (
    DEFAULT_IPFS_API_URL,
    DEFAULT_IPFS_GATEWAY,
    DEFAULT_TIMEOUT,
    HTTP_FORBIDDEN,
    HTTP_PAYLOAD_TOO_LARGE,
    HTTP_PAYMENT_REQUIRED,
    HTTP_TOO_MANY_REQUESTS,
    HTTP_UNAUTHORIZED,
    METADATA_FILENAME,
)
from utils.exceptions import ConfigurationError, UploadError

if TYPE_CHECKING:
    from artifact.metadata import ArtifactMetadata
    from config.config_models import StorageConfig

logger = logging.getLogger(__name__)

IPFS_SCHEME = "ipfs://"


def gateway_url(locator: str, gateway: str = DEFAULT_IPFS_GATEWAY) -> str:
    """Map an ipfs:// locator to an HTTP gateway URL; other locators are returned as-is"""
    if not locator.startswith(IPFS_SCHEME):
        return locator
    return gateway.rstrip("/") + "/" + locator[len(IPFS_SCHEME):]


class IPFSArtifactStore:
    """Publishes artifacts through the IPFS HTTP API ``/api/v0/add`` endpoint"""

    backend = "ipfs"

    def __init__(
        self,
        api_url: Optional[str] = DEFAULT_IPFS_API_URL,
        api_token: Optional[str] = None,
        gateway: str = DEFAULT_IPFS_GATEWAY,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the store.

        Args:
            api_url: Base URL of the IPFS HTTP API; None leaves the store unconfigured
            api_token: Optional bearer token for pinning services
            gateway: Gateway base URL used by gateway_url()
            timeout: Request timeout in seconds
            client: Pre-built httpx client (tests inject a MockTransport)
        """
        self.api_url = api_url.rstrip("/") if api_url else None
        self.api_token = api_token
        self.gateway = gateway
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_env(cls) -> "IPFSArtifactStore":
        """Construct a store using environment variables."""
        return cls(
            api_url=os.environ.get("IPFS_API_URL", DEFAULT_IPFS_API_URL),
            api_token=os.environ.get("IPFS_API_TOKEN") or None,
            gateway=os.environ.get("IPFS_GATEWAY_URL", DEFAULT_IPFS_GATEWAY),
            timeout=float(os.environ.get("STORAGE_TIMEOUT", DEFAULT_TIMEOUT)),
        )

    @classmethod
    def from_config(cls, config: "StorageConfig") -> "IPFSArtifactStore":
        return cls(
            api_url=config.api_url,
            api_token=config.api_token,
            gateway=config.gateway_url,
            timeout=config.timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_url)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "IPFSArtifactStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def gateway_url(self, locator: str) -> str:
        return gateway_url(locator, self.gateway)

    def _headers(self) -> Dict[str, str]:
        if self.api_token:
            return {"Authorization": f"Bearer {self.api_token}"}
        return {}

    async def _add(self, filename: str, content: bytes, mime_type: str) -> str:
        """Add one file wrapped in a directory; returns the directory CID"""
        url = f"{self.api_url}/api/v0/add"
        params = {"wrap-with-directory": "true", "cid-version": "1", "pin": "true"}
        try:
            response = await self.client.post(
                url,
                params=params,
                files={"file": (filename, content, mime_type)},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Storage upload of {filename} failed: {e}")
            raise UploadError(f"Storage network error: {e}") from e

        status = response.status_code
        if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
            raise UploadError(f"Storage rejected the API token (HTTP {status})")
        if status in (HTTP_PAYMENT_REQUIRED, HTTP_PAYLOAD_TOO_LARGE, HTTP_TOO_MANY_REQUESTS):
            raise UploadError(f"Storage quota exceeded (HTTP {status}): {response.text.strip()}")
        if status < 200 or status >= 300:
            raise UploadError(f"Storage upload failed (HTTP {status}): {response.text.strip()}")

        return self._directory_cid(response.text, filename)

    @staticmethod
    def _directory_cid(body: str, filename: str) -> str:
        """The add endpoint streams one JSON object per entry; the wrapper has an empty name"""
        entries: List[dict] = []
        for line in body.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise UploadError(f"Unreadable storage response: {line[:80]}") from e

        for entry in entries:
            if entry.get("Name") == "" and entry.get("Hash"):
                return entry["Hash"]
        raise UploadError(f"Storage response did not include a directory for {filename}")

    async def upload(self, artifact: "ArtifactMetadata") -> str:
        """
        Publish the preview image and metadata.json.

        Returns:
            ``ipfs://<cid>/metadata.json`` locator of the metadata document
        """
        if not self.is_configured:
            raise ConfigurationError("IPFS_API_URL must be set to upload artifacts")

        image_cid = await self._add(artifact.image_filename, artifact.preview_image, artifact.image_mime_type)
        image_locator = f"{IPFS_SCHEME}{image_cid}/{artifact.image_filename}"
        logger.info(f"Uploaded preview image: {image_locator}")

        metadata = artifact.metadata_bytes(image_locator)
        metadata_cid = await self._add(METADATA_FILENAME, metadata, "application/json")
        locator = f"{IPFS_SCHEME}{metadata_cid}/{METADATA_FILENAME}"

        ARTIFACT_UPLOAD_BYTES.labels(backend=self.backend).observe(len(artifact.preview_image) + len(metadata))
        logger.info(f"Uploaded artifact metadata: {locator}")
        return locator


class InMemoryArtifactStore:
    """Content-addresses artifacts in process; locators are stable for identical content"""

    backend = "memory"

    def __init__(self, gateway: str = DEFAULT_IPFS_GATEWAY):
        self.gateway = gateway
        self._objects: Dict[str, bytes] = {}
        self.uploads: List[str] = []

    @property
    def is_configured(self) -> bool:
        return True

    @staticmethod
    def content_id(*parts: bytes) -> str:
        digest = hashlib.sha256()
        for part in parts:
            digest.update(hashlib.sha256(part).digest())
        return "b" + base64.b32encode(digest.digest()).decode("ascii").lower().rstrip("=")

    def _put(self, filename: str, content: bytes) -> str:
        locator = f"{IPFS_SCHEME}{self.content_id(filename.encode('utf-8'), content)}/{filename}"
        self._objects[locator] = content
        return locator

    async def upload(self, artifact: "ArtifactMetadata") -> str:
        image_locator = self._put(artifact.image_filename, artifact.preview_image)
        metadata = artifact.metadata_bytes(image_locator)
        locator = self._put(METADATA_FILENAME, metadata)
        self.uploads.append(locator)
        ARTIFACT_UPLOAD_BYTES.labels(backend=self.backend).observe(len(artifact.preview_image) + len(metadata))
        logger.debug(f"Stored artifact in memory: {locator}")
        return locator

    def get(self, locator: str) -> bytes:
        try:
            return self._objects[locator]
        except KeyError:
            raise KeyError(f"No object stored at {locator}") from None

    def get_metadata(self, locator: str) -> dict:
        return json.loads(self.get(locator).decode("utf-8"))

    def items(self) -> List[Tuple[str, bytes]]:
        return list(self._objects.items())

    async def aclose(self) -> None:
        """Nothing to release; objects stay readable"""

    def gateway_url(self, locator: str) -> str:
        return gateway_url(locator, self.gateway)


def create_artifact_store(config: "StorageConfig"):
    """Build the publisher selected by ``config.backend``"""
    if config.backend == "memory":
        return InMemoryArtifactStore(gateway=config.gateway_url)
    return IPFSArtifactStore.from_config(config)
