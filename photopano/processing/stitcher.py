import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from tqdm import tqdm

from ..models.panorama import LAYOUTS, Dimensions, SourceImage, StitchOptions, StitchResult
from .capability import ImageCapability
from .utils import round_half_up

PANORAMA_MIN_WIDTH = 4096
FALLBACK_DIMENSIONS = Dimensions(4096, 2048)


class ImageStitcher:
    """Composites several photos into one image.

    Stitching never raises: every failure comes back as
    ``StitchResult(success=False, error=...)``.
    """

    def __init__(self, settings, capability: ImageCapability):
        self.settings = settings
        self.capability = capability
        self.logger = logging.getLogger(__name__)

    def stitch(self, images: List[SourceImage],
               options: Union[StitchOptions, Dict[str, Any], None] = None) -> StitchResult:
        self.logger.info("Starting image stitching process...")

        try:
            options = self._resolve_options(options)

            if len(images) < 2:
                self.logger.error("Need at least 2 images to stitch")
                return StitchResult.failure("At least 2 images required for stitching")

            if not self.capability.available:
                return self._fallback_stitch(images, options)

            if options.layout not in LAYOUTS:
                return StitchResult.failure(f"Unsupported stitching method: {options.layout}")

            self.logger.info(f"Stitching {len(images)} images using {options.layout} method")

            if options.layout == "horizontal":
                image_bytes, dimensions = self._horizontal_stitch(images, options)
            elif options.layout == "vertical":
                image_bytes, dimensions = self._vertical_stitch(images, options)
            else:
                image_bytes, dimensions = self._panoramic_stitch(images, options)

        except Exception as e:
            self.logger.error(f"Image stitching error: {str(e)}")
            return StitchResult.failure(str(e) or "Failed to stitch images")

        self.logger.info(f"Stitched panorama is {dimensions.width}x{dimensions.height}")
        return StitchResult(
            success=True,
            image_bytes=image_bytes,
            dimensions=dimensions,
            method=options.layout
        )

    def _resolve_options(self, options) -> StitchOptions:
        if isinstance(options, StitchOptions):
            return options

        data = dict(options or {})
        data.setdefault('layout', data.pop('method', self.settings.default_layout))
        data.setdefault('overlap', self.settings.default_overlap)
        data.setdefault('quality', self.settings.default_quality)
        return StitchOptions.from_dict(data)

    def _load_images(self, images: List[SourceImage]) -> List[Tuple[Any, int, int]]:
        loaded = []
        for source in tqdm(images, desc="Loading images", unit="image",
                           disable=not self.settings.show_progress):
            image = self.capability.decode(source.read_bytes())
            width, height = self.capability.size_of(image)
            loaded.append((image, width, height))
        return loaded

    def _horizontal_stitch(self, images: List[SourceImage], options: StitchOptions) -> Tuple[bytes, Dimensions]:
        canvas, dimensions = self._horizontal_canvas(images, options.overlap)
        return self._encode(canvas, options), dimensions

    def _horizontal_canvas(self, images, overlap: float):
        loaded = self._load_images(images)

        total_width = sum(width * (1 - overlap) for _, width, _ in loaded)
        # the last image keeps its full width
        total_width += loaded[-1][1] * overlap
        max_height = max(height for _, _, height in loaded)

        canvas_width = round_half_up(total_width)
        canvas = self.capability.create_canvas(canvas_width, max_height)

        overlays = []
        left = 0.0
        for image, width, height in loaded:
            overlays.append((image, round_half_up(left), round_half_up((max_height - height) / 2)))
            left += width * (1 - overlap)

        canvas = self.capability.composite(canvas, overlays)
        return canvas, Dimensions(canvas_width, max_height)

    def _vertical_stitch(self, images: List[SourceImage], options: StitchOptions) -> Tuple[bytes, Dimensions]:
        overlap = options.overlap
        loaded = self._load_images(images)

        total_height = sum(height * (1 - overlap) for _, _, height in loaded)
        total_height += loaded[-1][2] * overlap
        max_width = max(width for _, width, _ in loaded)

        canvas_height = round_half_up(total_height)
        canvas = self.capability.create_canvas(max_width, canvas_height)

        overlays = []
        top = 0.0
        for image, width, height in loaded:
            overlays.append((image, round_half_up((max_width - width) / 2), round_half_up(top)))
            top += height * (1 - overlap)

        canvas = self.capability.composite(canvas, overlays)
        del loaded, overlays
        return self._encode(canvas, options), Dimensions(max_width, canvas_height)

    def _panoramic_stitch(self, images: List[SourceImage], options: StitchOptions) -> Tuple[bytes, Dimensions]:
        canvas, dimensions = self._horizontal_canvas(images, options.overlap)

        # Stretched, not cropped: wide composites get distorted into 2:1.
        target_width = max(dimensions.width, PANORAMA_MIN_WIDTH)
        # odd composite widths are rounded up so the height is exactly half
        target_width += target_width % 2
        target_height = target_width // 2
        panorama = self.capability.resize_fill(canvas, target_width, target_height)
        del canvas

        return self._encode(panorama, options), Dimensions(target_width, target_height)

    def _encode(self, canvas, options: StitchOptions) -> bytes:
        return self.capability.encode(canvas, options.quality_percent, self.settings.output_format)

    def _fallback_stitch(self, images: List[SourceImage], options: StitchOptions) -> StitchResult:
        self.logger.warning("Image processing not available - using first image as panorama base")

        # The returned bytes are the untouched first image; the dimensions are
        # the nominal panorama size, not the size of those bytes.
        image_bytes: Optional[bytes] = images[0].read_bytes()
        return StitchResult(
            success=True,
            image_bytes=image_bytes,
            dimensions=FALLBACK_DIMENSIONS,
            method=f"{options.layout}_fallback"
        )
