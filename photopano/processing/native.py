import io
import logging
import math
from typing import List, Sequence, Tuple

import cv2
import numpy as np
from PIL import Image

from .capability import ImageCapability
from ..models.panorama import ImageMetadata


class NativeImageCapability(ImageCapability):
    """OpenCV for pixels, Pillow for header metadata. Images are BGR uint8 arrays."""

    name = "native"

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @property
    def available(self) -> bool:
        return True

    def read_metadata(self, data: bytes) -> ImageMetadata:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
            fmt = (img.format or "unknown").lower()
        return ImageMetadata.from_size(width, height, fmt, len(data))

    def decode(self, data: bytes) -> np.ndarray:
        image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
        if image is None:
            raise ValueError("Could not load image: unsupported or corrupt data")
        return image

    def encode(self, image: np.ndarray, quality: int = 90, fmt: str = "jpeg") -> bytes:
        if fmt == "png":
            success, buffer = cv2.imencode(".png", image, [cv2.IMWRITE_PNG_COMPRESSION, 1])
        else:
            success, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])

        if not success:
            raise IOError(f"Could not encode image as {fmt}")
        return buffer.tobytes()

    def size_of(self, image: np.ndarray) -> Tuple[int, int]:
        h, w = image.shape[:2]
        return w, h

    def resize_cover(self, image: np.ndarray, width: int, height: int) -> np.ndarray:
        h, w = image.shape[:2]
        scale = max(width / w, height / h)

        new_w = max(width, int(math.ceil(w * scale - 1e-6)))
        new_h = max(height, int(math.ceil(h * scale - 1e-6)))

        interpolation = cv2.INTER_AREA if scale < 1 else cv2.INTER_LINEAR
        resized = cv2.resize(image, (new_w, new_h), interpolation=interpolation)

        left = (new_w - width) // 2
        top = (new_h - height) // 2
        return np.ascontiguousarray(resized[top:top + height, left:left + width])

    def resize_fill(self, image: np.ndarray, width: int, height: int) -> np.ndarray:
        h, w = image.shape[:2]
        interpolation = cv2.INTER_AREA if width * height < w * h else cv2.INTER_LINEAR
        return cv2.resize(image, (width, height), interpolation=interpolation)

    def extend(self, image: np.ndarray, top: int, bottom: int, left: int, right: int,
               color: Sequence[int]) -> np.ndarray:
        return cv2.copyMakeBorder(image, top, bottom, left, right,
                                  cv2.BORDER_CONSTANT, value=[int(c) for c in color])

    def modulate(self, image: np.ndarray, brightness: float, saturation: float) -> np.ndarray:
        hsv = cv2.cvtColor(image, cv2.COLOR_BGR2HSV).astype(np.float32)
        hsv[..., 1] *= saturation
        hsv[..., 2] *= brightness
        np.clip(hsv, 0, 255, out=hsv)
        return cv2.cvtColor(hsv.astype(np.uint8), cv2.COLOR_HSV2BGR)

    def create_canvas(self, width: int, height: int, color: Sequence[int] = (0, 0, 0)) -> np.ndarray:
        canvas = np.zeros((height, width, 3), dtype=np.uint8)
        canvas[:, :] = [int(c) for c in color]
        return canvas

    def composite(self, canvas: np.ndarray, overlays: List[Tuple[np.ndarray, int, int]]) -> np.ndarray:
        canvas_h, canvas_w = canvas.shape[:2]

        for image, left, top in overlays:
            h, w = image.shape[:2]

            x0, y0 = max(left, 0), max(top, 0)
            x1, y1 = min(left + w, canvas_w), min(top + h, canvas_h)
            if x1 <= x0 or y1 <= y0:
                self.logger.debug(f"Overlay at ({left}, {top}) lies outside the canvas")
                continue

            canvas[y0:y1, x0:x1] = image[y0 - top:y1 - top, x0 - left:x1 - left]

        return canvas
