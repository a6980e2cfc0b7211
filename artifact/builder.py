# artifact/builder.py
"""
Artifact Builder: produces the immutable ArtifactMetadata for one mint attempt.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from artifact.layout import Theme, build_preview_layout
from artifact.metadata import ArtifactMetadata, Attribute, Provenance
from artifact.renderer import MatplotlibRenderer, PreviewRenderer
from config.config_models import ArtifactConfig

logger = logging.getLogger(__name__)

DESCRIPTION_TEMPLATE = (
    'A unique emoji translation created on Celo blockchain. '
    'Original text: "{original}" transformed into: "{encoded}"'
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp()) * 1000 + moment.microsecond // 1000


class ArtifactBuilder:
    """
    Builds artifact metadata and its preview image.

    The layout is computed declaratively and handed to a PreviewRenderer, so
    the rendering backend can be swapped (tests use a stub renderer).
    """

    def __init__(
        self,
        renderer: Optional[PreviewRenderer] = None,
        config: Optional[ArtifactConfig] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.renderer = renderer if renderer is not None else MatplotlibRenderer()
        self.config = config if config is not None else ArtifactConfig()
        self.clock = clock

    def preview(
        self,
        original_text: str,
        encoded_text: str,
        theme: Union[Theme, str, bool, None] = None,
    ) -> bytes:
        """Render the preview image only"""
        layout = build_preview_layout(
            original_text,
            encoded_text,
            theme=self.resolve_theme(theme),
            footer=self.config.footer,
        )
        return self.renderer.render(layout)

    def build(
        self,
        original_text: str,
        encoded_text: str,
        creator_address: str,
        theme: Union[Theme, str, bool, None] = None,
    ) -> ArtifactMetadata:
        """
        Build the artifact for a translation.

        Args:
            original_text: Text as typed; stored untruncated
            encoded_text: Symbol encoding of the text
            creator_address: Address that will own the token
            theme: Preview theme; the configured default when None

        Returns:
            ArtifactMetadata ready to publish

        Raises:
            RenderError: If the preview image could not be produced
        """
        theme = self.resolve_theme(theme)
        created_at = self.clock()
        image = self.preview(original_text, encoded_text, theme)

        attributes = (
            Attribute("Original Text", original_text),
            Attribute("Emoji Translation", encoded_text),
            Attribute("Text Length", len(original_text)),
            Attribute("Emoji Count", len(encoded_text)),
            Attribute("Theme", theme.label),
        )
        artifact = ArtifactMetadata(
            title=f"{self.config.title_prefix} #{_epoch_millis(created_at)}",
            description=DESCRIPTION_TEMPLATE.format(original=original_text, encoded=encoded_text),
            preview_image=image,
            attributes=attributes,
            provenance=Provenance(
                original_text=original_text,
                encoded_text=encoded_text,
                creator_address=creator_address,
                created_at=created_at,
            ),
            theme=theme,
        )
        logger.info(f"Built artifact {artifact.title} for {creator_address}")
        return artifact

    def resolve_theme(self, theme: Union[Theme, str, bool, None]) -> Theme:
        return Theme.coerce(self.config.theme if theme is None else theme)


def build_artifact(
    original_text: str,
    encoded_text: str,
    creator_address: str,
    theme: Union[Theme, str, bool, None] = Theme.LIGHT,
) -> ArtifactMetadata:
    """Build an artifact with the default renderer and configuration"""
    return ArtifactBuilder().build(original_text, encoded_text, creator_address, theme)
