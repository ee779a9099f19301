"""Price-tag image sources: USB camera shots and uploaded files."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class CameraCapture:
    camera_index: int
    image_path: str
    captured_at: str  # ISO8601


def _import_cv2():
    try:
        import cv2
    except ImportError:
        raise ImportError(
            "opencv-python is required: pip install opencv-python"
        ) from None
    return cv2


def collect_uploads(paths: list[str]) -> list[str]:
    """Check uploaded tag images before they become pending items.

    Raises:
        FileNotFoundError: If a path does not exist.
        ValueError: If a file is not an image.
    """
    accepted: list[str] = []
    for path in paths:
        p = Path(path)
        if not p.is_file():
            raise FileNotFoundError(f"No such image: {path}")
        mime = mimetypes.guess_type(p.name)[0] or ""
        if not mime.startswith("image/"):
            raise ValueError(f"Not an image file: {path}")
        accepted.append(str(p))
    return accepted


class TagCamera:
    """Photograph shelf price tags with one or more USB cameras.

    Each shot is saved as a JPEG in *save_dir* and its path is handed on
    as one pending item of a scan batch.
    """

    def __init__(
        self,
        camera_indices: list[int] | None = None,
        save_dir: str = "/tmp/pricewise",
        jpeg_quality: int = 80,
        warmup_frames: int = 3,
    ) -> None:
        self._camera_indices = camera_indices or [0]
        self._save_dir = Path(save_dir)
        self._save_dir.mkdir(parents=True, exist_ok=True)
        self._jpeg_quality = jpeg_quality
        self._warmup_frames = warmup_frames

    def capture_all(self) -> list[str]:
        """Shoot one tag per configured camera; return the saved image paths."""
        return [self.capture(idx).image_path for idx in self._camera_indices]

    def capture(self, camera_index: int) -> CameraCapture:
        """Shoot a single tag photo from the specified camera.

        Raises:
            RuntimeError: If the camera can't be opened, read, or the JPEG
                can't be written.
        """
        cv2 = _import_cv2()

        cap = cv2.VideoCapture(camera_index)
        if not cap.isOpened():
            raise RuntimeError(
                f"Could not open camera {camera_index}. Check the connection."
            )

        try:
            # First frames are often dark while auto exposure settles.
            for _ in range(self._warmup_frames):
                cap.read()
            ret, frame = cap.read()
            if not ret or frame is None:
                raise RuntimeError(
                    f"Could not read a frame from camera {camera_index}."
                )
        finally:
            cap.release()

        now = datetime.now(timezone.utc)
        filepath = self._save_dir / f"tag{camera_index}_{now:%Y%m%d_%H%M%S_%f}.jpg"

        ok = cv2.imwrite(
            str(filepath), frame, [cv2.IMWRITE_JPEG_QUALITY, self._jpeg_quality]
        )
        if not ok:
            raise RuntimeError(f"Could not save tag photo to {filepath}")
        logger.debug("Saved tag photo %s", filepath)

        return CameraCapture(
            camera_index=camera_index,
            image_path=str(filepath),
            captured_at=now.isoformat(),
        )

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available USB camera indices by probing."""
        cv2 = _import_cv2()

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
            cap.release()
        return available
