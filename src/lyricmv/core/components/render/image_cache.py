"""Decode-once cache for cover and background images."""

import base64
import io
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, Tuple

import numpy as np
from PIL import Image, ImageOps

from ....config import DECODE_WORKERS, VIDEO_HEIGHT, VIDEO_WIDTH
from ....exceptions import ImageDecodeError, RenderError
from ....utils.logging import get_logger

logger = get_logger(__name__)


def decode_image_ref(image_ref: str) -> Image.Image:
    """Decode a file path or ``data:`` URI into an RGB image."""
    try:
        if image_ref.startswith("data:"):
            header, _, payload = image_ref.partition(",")
            if ";base64" not in header:
                raise ValueError("only base64 data URIs are supported")
            source = io.BytesIO(base64.b64decode(payload, validate=True))
        else:
            source = Path(image_ref)
        with Image.open(source) as img:
            return img.convert("RGB")
    except (OSError, ValueError) as e:
        raise ImageDecodeError(image_ref, str(e)) from e


class ImageCache:
    """Decoded images keyed by reference, scoped to one render run.

    ``fitted`` results are computed once per (reference, size) and shared
    read-only between frame renders.
    """

    def __init__(self, width: int = VIDEO_WIDTH, height: int = VIDEO_HEIGHT):
        self.width = width
        self.height = height
        self._images: Dict[str, Image.Image] = {}
        self._fitted: Dict[Tuple[str, int, int], np.ndarray] = {}
        self._lock = threading.Lock()

    def __enter__(self) -> "ImageCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __contains__(self, image_ref: str) -> bool:
        return image_ref in self._images

    def __len__(self) -> int:
        return len(self._images)

    def preload(self, image_refs: Iterable[str], max_workers: int = DECODE_WORKERS) -> None:
        """Decode every distinct reference up front.

        Decoding fans out over a bounded pool and joins on all of them; the
        first failure is raised as ImageDecodeError.
        """
        pending = [ref for ref in dict.fromkeys(image_refs) if ref not in self._images]
        if not pending:
            return
        logger.debug(f"Decoding {len(pending)} images with {max_workers} workers")
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            decoded = list(pool.map(decode_image_ref, pending))
        with self._lock:
            for ref, img in zip(pending, decoded):
                self._images[ref] = img
        for ref in pending:
            self.cover(ref)

    def add(self, image_ref: str, image: Image.Image) -> None:
        """Register an already decoded image under ``image_ref``."""
        with self._lock:
            self._images[image_ref] = image.convert("RGB")

    def get(self, image_ref: str) -> Image.Image:
        try:
            return self._images[image_ref]
        except KeyError:
            raise RenderError(f"Image not loaded: {image_ref[:60]}") from None

    def fitted(self, image_ref: str, width: int, height: int) -> np.ndarray:
        """Return the image scaled to cover ``width`` x ``height``, center-cropped."""
        key = (image_ref, width, height)
        cached = self._fitted.get(key)
        if cached is not None:
            return cached
        img = self.get(image_ref)
        fitted = np.asarray(
            ImageOps.fit(img, (width, height), Image.Resampling.LANCZOS, centering=(0.5, 0.5))
        )
        with self._lock:
            self._fitted.setdefault(key, fitted)
        return self._fitted[key]

    def cover(self, image_ref: str) -> np.ndarray:
        """Frame-sized cover fit of ``image_ref``."""
        return self.fitted(image_ref, self.width, self.height)

    def clear(self) -> None:
        with self._lock:
            self._images.clear()
            self._fitted.clear()
