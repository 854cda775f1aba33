"""Shared fixtures: synthetic photos drawn with OpenCV and ready-made engines."""
import cv2
import numpy as np
import pytest

from photopano.config.settings import Settings
from photopano.models.panorama import SourceImage
from photopano.processing.capability import UnavailableImageCapability, get_image_capability
from photopano.processing.pipeline import PanoramaEngine


def draw_sample(width: int, height: int, seed: int = 0) -> np.ndarray:
    """Draw a busy test photo so resizes and crops are visible."""
    rng = np.random.default_rng(seed)
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, :] = rng.integers(40, 200, size=3)
    for _ in range(6):
        x0, y0 = int(rng.integers(0, width)), int(rng.integers(0, height))
        x1, y1 = int(rng.integers(0, width)), int(rng.integers(0, height))
        color = tuple(int(c) for c in rng.integers(0, 255, size=3))
        cv2.rectangle(img, (x0, y0), (x1, y1), color, -1)
    cv2.putText(img, f'Image {seed}', (10, 40), cv2.FONT_HERSHEY_SIMPLEX, 1, (255, 255, 255), 2)
    return img


def encode_sample(width: int, height: int, seed: int = 0, ext: str = ".jpg") -> bytes:
    success, buffer = cv2.imencode(ext, draw_sample(width, height, seed))
    assert success
    return buffer.tobytes()


def decode(data: bytes) -> np.ndarray:
    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
    assert image is not None
    return image


@pytest.fixture
def settings():
    settings = Settings()
    settings.show_progress = False
    return settings


@pytest.fixture
def lossless_settings(settings):
    settings.output_format = "png"
    return settings


@pytest.fixture
def engine(settings):
    return PanoramaEngine(settings, get_image_capability("native"))


@pytest.fixture
def lossless_engine(lossless_settings):
    return PanoramaEngine(lossless_settings, get_image_capability("native"))


@pytest.fixture
def degraded_engine(settings):
    return PanoramaEngine(settings, UnavailableImageCapability())


@pytest.fixture
def photo():
    return SourceImage.from_bytes(encode_sample(1200, 900, seed=1))


@pytest.fixture
def photo_file(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(encode_sample(1600, 1000, seed=2))
    return SourceImage.from_path(path)
