import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Union

from ..config.settings import Settings
from ..models.methods import PERSPECTIVE, ConversionMethodDescriptor, list_methods
from ..models.panorama import (ConversionResult, MethodRecommendation, ProcessedPanorama,
                               SourceImage, StitchOptions, StitchResult, ValidationReport)
from .advisor import recommend_methods
from .capability import ImageCapability, get_image_capability
from .converter import ProjectionConverter
from .stitcher import ImageStitcher
from .thumbnail import ThumbnailGenerator
from .validator import ImageValidator


class PanoramaEngine:
    """Entry point for callers: validation, conversion, stitching and previews.

    Every call is independent. Nothing limits how many run at once, so
    concurrent work on large images is bounded only by available memory.
    """

    def __init__(self, settings: Settings = None, capability: ImageCapability = None):
        self.settings = settings or Settings()
        self.logger = logging.getLogger(__name__)

        self.capability = capability or get_image_capability(self.settings.image_backend)

        self.validator = ImageValidator(self.settings, self.capability)
        self.converter = ProjectionConverter(self.settings, self.capability)
        self.stitcher = ImageStitcher(self.settings, self.capability)
        self.thumbnailer = ThumbnailGenerator(self.settings, self.capability)

    def validate(self, source: SourceImage) -> ValidationReport:
        return self.validator.validate(source)

    def convert(self, source: SourceImage, method: str = PERSPECTIVE) -> ConversionResult:
        return self.converter.convert(source, method)

    def recommend(self, report: ValidationReport) -> List[MethodRecommendation]:
        return recommend_methods(report)

    def list_methods(self) -> List[ConversionMethodDescriptor]:
        return list_methods()

    def stitch(self, images: List[SourceImage],
               options: Union[StitchOptions, Dict[str, Any], None] = None) -> StitchResult:
        return self.stitcher.stitch(images, options)

    def thumbnail(self, source: Union[SourceImage, bytes], width: int = 400, height: int = 200) -> bytes:
        return self.thumbnailer.thumbnail(source, width, height)

    async def validate_async(self, source: SourceImage) -> ValidationReport:
        return await asyncio.to_thread(self.validate, source)

    async def convert_async(self, source: SourceImage, method: str = PERSPECTIVE) -> ConversionResult:
        return await asyncio.to_thread(self.convert, source, method)

    async def stitch_async(self, images: List[SourceImage],
                           options: Union[StitchOptions, Dict[str, Any], None] = None) -> StitchResult:
        return await asyncio.to_thread(self.stitch, images, options)

    async def thumbnail_async(self, source: Union[SourceImage, bytes],
                              width: int = 400, height: int = 200) -> bytes:
        return await asyncio.to_thread(self.thumbnail, source, width, height)

    def process_single_image(self, source: SourceImage, method: str = PERSPECTIVE) -> ProcessedPanorama:
        """Validate, convert and preview one photo.

        Raises ConversionFailure when the conversion itself fails. A photo
        that fails validation comes back with ``error`` set and no image.
        """
        start_time = time.time()
        self.logger.info(f"Starting single image conversion for: {source.name}")

        report = self.validate(source)
        panorama = ProcessedPanorama(source_images=[source.name], validation=report)

        if not report.is_valid:
            self.logger.error(f"Image validation failed: {'; '.join(report.issues)}")
            panorama.error = "Image validation failed"
            return panorama

        for issue in report.issues:
            self.logger.warning(f"Validation issue: {issue}")

        result = self.convert(source, method)
        panorama.image = result.image_bytes
        panorama.width = result.dimensions.width
        panorama.height = result.dimensions.height
        panorama.method = result.method
        panorama.thumbnail = self.thumbnail(result.image_bytes)

        self.logger.info(f"Conversion completed in {time.time() - start_time:.2f} seconds")
        return panorama

    def process_images(self, sources: List[SourceImage],
                       options: Union[StitchOptions, Dict[str, Any], None] = None) -> ProcessedPanorama:
        """Stitch several photos and preview the composite."""
        start_time = time.time()
        self.logger.info(f"Starting stitching pipeline for {len(sources)} images")

        result = self.stitch(sources, options)
        panorama = ProcessedPanorama(source_images=[source.name for source in sources])

        if not result.success:
            self.logger.error(f"Stitching failed: {result.error}")
            panorama.error = result.error
            return panorama

        panorama.image = result.image_bytes
        panorama.width = result.dimensions.width
        panorama.height = result.dimensions.height
        panorama.method = result.method

        try:
            panorama.thumbnail = self.thumbnail(result.image_bytes)
        except Exception as e:
            self.logger.warning(f"Failed to generate thumbnail: {str(e)}")

        self.logger.info(f"Stitching pipeline completed in {time.time() - start_time:.2f} seconds")
        return panorama


def create_engine(config_path: Optional[str] = None) -> PanoramaEngine:
    return PanoramaEngine(Settings(config_path))
