"""Image encoders that serialize a rendered pixel grid to disk."""

from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path
from typing import Protocol
from uuid import uuid4

from PIL import Image

from ..errors import EncodeError
from ..rasterizer import PixelGrid

logger = logging.getLogger(__name__)


class ImageEncoder(Protocol):
    def encode(self, grid: PixelGrid, path: Path) -> None: ...


def grid_to_image(grid: PixelGrid) -> Image.Image:
    """Wrap the grid's RGBA buffer in a Pillow image without copying it."""
    return Image.frombuffer(
        "RGBA", (grid.width, grid.height), grid.data, "raw", "RGBA", 0, 1
    )


class PngImageEncoder:
    """Write PNG via write-then-replace; a failed encode leaves no partial file."""

    def __init__(self, *, compress_level: int = 6) -> None:
        self.compress_level = compress_level

    def encode(self, grid: PixelGrid, path: Path) -> None:
        path = Path(path)
        tmp_path = path.with_name(f"{path.name}.{uuid4().hex}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            image = grid_to_image(grid)
            image.save(tmp_path, format="PNG", compress_level=self.compress_level)
            tmp_path.replace(path)
        except (OSError, ValueError) as exc:
            raise EncodeError(f"Failed to save image: {exc}") from exc
        finally:
            with suppress(OSError):
                tmp_path.unlink()
        logger.debug(
            "Encoded PNG",
            extra={"path": str(path), "width": grid.width, "height": grid.height},
        )
