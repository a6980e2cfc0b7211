"""
Artifact package: metadata model, preview layout and rendering, builder.
"""
from .layout import PreviewLayout, Theme, build_preview_layout, truncate_for_display, wrap_symbols
from .metadata import ArtifactMetadata, Attribute, Provenance
from .renderer import MatplotlibRenderer, PreviewRenderer
from .builder import ArtifactBuilder, build_artifact

__all__ = [
    "ArtifactBuilder",
    "ArtifactMetadata",
    "Attribute",
    "MatplotlibRenderer",
    "PreviewLayout",
    "PreviewRenderer",
    "Provenance",
    "Theme",
    "build_artifact",
    "build_preview_layout",
    "truncate_for_display",
    "wrap_symbols",
]
