import logging

from ..models.methods import AI_DEPTH, CYLINDRICAL, PERSPECTIVE, TILE_REPEAT
from ..models.panorama import ConversionResult, Dimensions, SourceImage
from .capability import ImageCapability
from .errors import ConversionFailure

PANORAMA_WIDTH = 4096
PANORAMA_HEIGHT = 2048
TILE_COUNT = 4


class ProjectionConverter:
    """Turns a single ordinary photo into a 4096x2048 equirectangular canvas."""

    def __init__(self, settings, capability: ImageCapability):
        self.settings = settings
        self.capability = capability
        self.logger = logging.getLogger(__name__)

        self._methods = {
            PERSPECTIVE: self._perspective,
            CYLINDRICAL: self._cylindrical,
            TILE_REPEAT: self._tile_repeat,
            AI_DEPTH: self._ai_depth,
        }

    def convert(self, source: SourceImage, method: str = PERSPECTIVE) -> ConversionResult:
        if method not in self._methods:
            self.logger.warning(f"Unknown conversion method '{method}', using {PERSPECTIVE}")
            method = PERSPECTIVE

        self.logger.info(f"Converting {source.name} to panorama using {method} method...")

        if not self.capability.available:
            return self._fallback(source, method)

        try:
            return self._methods[method](source)
        except ConversionFailure:
            raise
        except Exception as e:
            self.logger.error(f"Panorama conversion failed: {str(e)}")
            raise ConversionFailure(method, e) from e

    def _fallback(self, source: SourceImage, method: str) -> ConversionResult:
        # Original bytes pass through untouched; the dimensions are the nominal canvas size.
        self.logger.warning(f"Image processing not available - {method} conversion returns the source unmodified")
        return ConversionResult(
            success=True,
            method=f"{method}_fallback",
            dimensions=Dimensions(PANORAMA_WIDTH, PANORAMA_HEIGHT),
            message="Image processing not available - source returned without conversion",
            image_bytes=source.read_bytes()
        )

    def _encode(self, canvas) -> bytes:
        return self.capability.encode(canvas, self.settings.output_quality, self.settings.output_format)

    def _result(self, method: str, image_bytes: bytes, message: str) -> ConversionResult:
        return ConversionResult(
            success=True,
            method=method,
            dimensions=Dimensions(PANORAMA_WIDTH, PANORAMA_HEIGHT),
            message=message,
            image_bytes=image_bytes
        )

    def _perspective(self, source: SourceImage) -> ConversionResult:
        region_w = PANORAMA_WIDTH // 3
        region_h = PANORAMA_HEIGHT // 2
        pad_x = PANORAMA_WIDTH - region_w
        pad_y = PANORAMA_HEIGHT - region_h

        image = self.capability.decode(source.read_bytes())
        region = self.capability.resize_cover(image, region_w, region_h)
        del image
        canvas = self.capability.extend(
            region,
            top=pad_y // 2, bottom=pad_y - pad_y // 2,
            left=pad_x // 2, right=pad_x - pad_x // 2,
            color=(0, 0, 0)
        )

        return self._result(PERSPECTIVE, self._encode(canvas), "Converted using perspective projection")

    def _cylindrical(self, source: SourceImage) -> ConversionResult:
        band_h = PANORAMA_HEIGHT // 2
        pad_y = PANORAMA_HEIGHT - band_h

        image = self.capability.decode(source.read_bytes())
        band = self.capability.resize_cover(image, PANORAMA_WIDTH, band_h)
        del image
        canvas = self.capability.extend(
            band,
            top=pad_y // 2, bottom=pad_y - pad_y // 2, left=0, right=0,
            color=self.settings.cylindrical_background
        )
        canvas = self.capability.modulate(
            canvas,
            brightness=self.settings.cylindrical_brightness,
            saturation=self.settings.cylindrical_saturation
        )

        return self._result(CYLINDRICAL, self._encode(canvas), "Converted using cylindrical projection")

    def _tile_repeat(self, source: SourceImage) -> ConversionResult:
        tile_w = PANORAMA_WIDTH // TILE_COUNT

        image = self.capability.decode(source.read_bytes())
        tile = self.capability.resize_cover(image, tile_w, PANORAMA_HEIGHT)
        del image

        canvas = self.capability.create_canvas(PANORAMA_WIDTH, PANORAMA_HEIGHT, (0, 0, 0))
        canvas = self.capability.composite(
            canvas, [(tile, i * tile_w, 0) for i in range(TILE_COUNT)]
        )
        del tile

        return self._result(TILE_REPEAT, self._encode(canvas), "Converted using tile repeat method")

    def _ai_depth(self, source: SourceImage) -> ConversionResult:
        # Depth-aware conversion is not implemented; this is the perspective result.
        self.logger.info("AI depth conversion - using fallback perspective method")
        try:
            return self._perspective(source)
        except Exception as e:
            raise ConversionFailure(AI_DEPTH, e) from e
