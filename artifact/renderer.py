# artifact/renderer.py
"""
Rendering backends for the artifact preview.

A renderer turns a PreviewLayout into encoded image bytes. The matplotlib
backend draws on an off-screen Agg canvas, so no display is required.
"""
import io
import logging
import time
import warnings
from typing import Protocol

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.patches import FancyBboxPatch

from artifact.layout import PreviewLayout
from monitoring.metrics import ARTIFACT_RENDER_TIME
from utils.constants import PREVIEW_DPI
from utils.exceptions import RenderError

logger = logging.getLogger(__name__)


class PreviewRenderer(Protocol):
    """Interface for anything that can rasterize a PreviewLayout"""

    def render(self, layout: PreviewLayout) -> bytes:
        ...


class MatplotlibRenderer:
    """Renders preview layouts to PNG with matplotlib's Agg backend"""

    def __init__(self, dpi: int = PREVIEW_DPI, image_format: str = "png"):
        self.dpi = dpi
        self.image_format = image_format

    def _px_to_pt(self, px: float) -> float:
        return px * 72.0 / self.dpi

    def render(self, layout: PreviewLayout) -> bytes:
        start = time.time()
        try:
            fig = plt.figure(figsize=(layout.width / self.dpi, layout.height / self.dpi), dpi=self.dpi)
        except (MemoryError, ValueError, RuntimeError) as e:
            logger.error(f"Could not allocate a {layout.width}x{layout.height} drawing surface: {e}")
            raise RenderError(f"Could not allocate a {layout.width}x{layout.height} drawing surface: {e}") from e

        try:
            ax = fig.add_axes([0, 0, 1, 1])
            # Canvas coordinates: origin top-left, y grows downwards
            ax.set_xlim(0, layout.width)
            ax.set_ylim(layout.height, 0)
            ax.axis('off')

            self._draw_background(ax, layout)
            for box in layout.boxes:
                ax.add_patch(FancyBboxPatch(
                    (box.x, box.y), box.width, box.height,
                    boxstyle=f"round,pad=0,rounding_size={box.radius}",
                    facecolor=box.fill,
                    edgecolor='none',
                    alpha=box.alpha,
                    zorder=1,
                ))
            for region in layout.texts:
                ax.text(
                    region.x, region.y, region.text,
                    ha=region.align,
                    va='baseline',
                    fontsize=self._px_to_pt(region.font_size),
                    color=region.color,
                    family=region.family,
                    fontweight='bold' if region.bold else 'normal',
                    parse_math=False,
                    zorder=2,
                )

            buffer = io.BytesIO()
            with warnings.catch_warnings():
                # Emoji glyphs are often missing from the installed fonts
                warnings.simplefilter("ignore", UserWarning)
                fig.savefig(buffer, format=self.image_format, dpi=self.dpi)
            image = buffer.getvalue()
        except (MemoryError, ValueError, RuntimeError, OSError) as e:
            logger.error(f"Preview rendering failed: {e}")
            raise RenderError(f"Preview rendering failed: {e}") from e
        finally:
            plt.close(fig)

        ARTIFACT_RENDER_TIME.labels(theme=layout.theme.value).observe(time.time() - start)
        logger.debug(f"Rendered {layout.theme.value} preview ({len(image)} bytes)")
        return image

    def _draw_background(self, ax, layout: PreviewLayout):
        """Fill the canvas with the diagonal gradient"""
        xs = np.linspace(0.0, 1.0, 256)
        ramp = (xs[np.newaxis, :] + xs[:, np.newaxis]) / 2.0
        cmap = LinearSegmentedColormap.from_list(
            "preview_background", [layout.background.start, layout.background.end]
        )
        ax.imshow(
            ramp,
            cmap=cmap,
            extent=(0, layout.width, layout.height, 0),
            aspect='auto',
            interpolation='bilinear',
            zorder=0,
        )
