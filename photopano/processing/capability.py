"""
Image capability abstraction.

Every component that touches pixels goes through an ImageCapability. The
concrete implementation is picked once (see get_image_capability) and passed
in, so a host without the native image stack degrades instead of crashing.
"""
import importlib.util
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Sequence, Tuple

from ..models.panorama import ImageMetadata
from .errors import ImageProcessingUnavailable

logger = logging.getLogger(__name__)

NATIVE_MODULES = ("cv2", "numpy", "PIL")


class ImageCapability(ABC):
    """Decode, transform and encode images on the running host."""

    name = "abstract"

    @property
    @abstractmethod
    def available(self) -> bool:
        pass

    @abstractmethod
    def read_metadata(self, data: bytes) -> ImageMetadata:
        """Read width, height and format from an encoded image."""
        pass

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        pass

    @abstractmethod
    def encode(self, image: Any, quality: int = 90, fmt: str = "jpeg") -> bytes:
        pass

    @abstractmethod
    def size_of(self, image: Any) -> Tuple[int, int]:
        """Return (width, height) of a decoded image."""
        pass

    @abstractmethod
    def resize_cover(self, image: Any, width: int, height: int) -> Any:
        """Scale to cover width x height, then centre-crop to exactly that size."""
        pass

    @abstractmethod
    def resize_fill(self, image: Any, width: int, height: int) -> Any:
        """Stretch to exactly width x height, ignoring aspect ratio."""
        pass

    @abstractmethod
    def extend(self, image: Any, top: int, bottom: int, left: int, right: int,
               color: Sequence[int]) -> Any:
        pass

    @abstractmethod
    def modulate(self, image: Any, brightness: float, saturation: float) -> Any:
        pass

    @abstractmethod
    def create_canvas(self, width: int, height: int, color: Sequence[int] = (0, 0, 0)) -> Any:
        pass

    @abstractmethod
    def composite(self, canvas: Any, overlays: List[Tuple[Any, int, int]]) -> Any:
        """Paint (image, left, top) overlays onto the canvas in order; later ones win."""
        pass


class UnavailableImageCapability(ImageCapability):
    """Stand-in used when the host cannot process images.

    Components must check ``available`` and take their fallback path before
    touching pixels. Reaching any pixel operation here is a programming error
    and raises ImageProcessingUnavailable.
    """

    name = "unavailable"

    @property
    def available(self) -> bool:
        return False

    def read_metadata(self, data):
        return ImageMetadata.unknown()

    def _unsupported(self, *args, **kwargs):
        raise ImageProcessingUnavailable()

    decode = _unsupported
    encode = _unsupported
    size_of = _unsupported
    resize_cover = _unsupported
    resize_fill = _unsupported
    extend = _unsupported
    modulate = _unsupported
    create_canvas = _unsupported
    composite = _unsupported


def detect_backend() -> str:
    """Return "native" when the image stack can be found, else "unavailable"."""
    missing = [name for name in NATIVE_MODULES if importlib.util.find_spec(name) is None]
    if missing:
        logger.warning(f"Image processing modules not available ({', '.join(missing)}) - "
                       f"using degraded fallback processing")
        return "unavailable"
    return "native"


def _load_native_or_unavailable() -> ImageCapability:
    # Installed is not the same as loadable, e.g. opencv without libGL.
    try:
        from .native import NativeImageCapability
    except ImportError as e:
        logger.warning(f"Image processing modules failed to load ({e}) - "
                       f"using degraded fallback processing")
        return UnavailableImageCapability()
    return NativeImageCapability()


def get_image_capability(backend: str = "auto") -> ImageCapability:
    """
    Get the image capability for the current host.

    Args:
        backend: "native", "unavailable", or "auto" to detect

    Returns:
        ImageCapability instance

    Raises:
        ImportError: If backend is "native" and the image stack cannot load
        ValueError: If backend is unknown
    """
    if backend == "auto":
        if detect_backend() == "native":
            capability = _load_native_or_unavailable()
        else:
            capability = UnavailableImageCapability()
    elif backend == "native":
        from .native import NativeImageCapability
        capability = NativeImageCapability()
    elif backend == "unavailable":
        capability = UnavailableImageCapability()
    else:
        raise ValueError(f"Unknown image backend: {backend}")

    logger.info(f"Using {capability.name} image capability")
    return capability
