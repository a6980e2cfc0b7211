# artifact/metadata.py
"""
Artifact metadata model.

ArtifactMetadata is created once per mint attempt and never mutated. It is
serialized to ERC-721 style metadata JSON when published to storage.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union

from artifact.layout import Theme
from utils.constants import PREVIEW_IMAGE_FILENAME


@dataclass(frozen=True)
class Attribute:
    trait_type: str
    value: Union[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {"trait_type": self.trait_type, "value": self.value}


@dataclass(frozen=True)
class Provenance:
    original_text: str
    encoded_text: str
    creator_address: str
    created_at: datetime

    @property
    def creation_date(self) -> str:
        """ISO-8601 UTC timestamp with millisecond precision"""
        stamp = self.created_at.astimezone(timezone.utc)
        return stamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{stamp.microsecond // 1000:03d}Z"

    def to_dict(self) -> Dict[str, str]:
        return {
            "original_text": self.original_text,
            "emoji_translation": self.encoded_text,
            "creator_address": self.creator_address,
            "creation_date": self.creation_date,
        }


@dataclass(frozen=True)
class ArtifactMetadata:
    title: str
    description: str
    preview_image: bytes
    attributes: Tuple[Attribute, ...]
    provenance: Provenance
    theme: Theme = Theme.LIGHT
    image_filename: str = PREVIEW_IMAGE_FILENAME
    image_mime_type: str = "image/png"

    def attribute(self, trait_type: str) -> Optional[Union[str, int]]:
        for attr in self.attributes:
            if attr.trait_type == trait_type:
                return attr.value
        return None

    def to_metadata_json(self, image_locator: str) -> Dict[str, Any]:
        """Metadata document as published, with the image replaced by its locator"""
        return {
            "name": self.title,
            "description": self.description,
            "image": image_locator,
            "attributes": [a.to_dict() for a in self.attributes],
            "emoji_data": self.provenance.to_dict(),
        }

    def metadata_bytes(self, image_locator: str) -> bytes:
        return json.dumps(self.to_metadata_json(image_locator), ensure_ascii=False, indent=2).encode("utf-8")

    def __repr__(self) -> str:
        return (
            f"ArtifactMetadata(title={self.title!r}, theme={self.theme.value}, "
            f"image={len(self.preview_image)} bytes, creator={self.provenance.creator_address!r})"
        )
