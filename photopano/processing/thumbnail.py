import logging
from typing import Union

from ..models.panorama import SourceImage
from .capability import ImageCapability
from .errors import ConversionFailure


class ThumbnailGenerator:

    def __init__(self, settings, capability: ImageCapability):
        self.settings = settings
        self.capability = capability
        self.logger = logging.getLogger(__name__)

    def thumbnail(self, source: Union[SourceImage, bytes], width: int = 400, height: int = 200) -> bytes:
        """Cover-fit the image to exactly width x height.

        Without image processing the source bytes come back unchanged, so
        they need not match the requested size.
        """
        if not isinstance(source, SourceImage):
            source = SourceImage.from_bytes(source)

        if not self.capability.available:
            self.logger.warning("Image processing not available for thumbnail generation, using original image")
            return source.read_bytes()

        try:
            image = self.capability.decode(source.read_bytes())
            preview = self.capability.resize_cover(image, width, height)
            return self.capability.encode(preview, self.settings.thumbnail_quality, "jpeg")
        except Exception as e:
            self.logger.error(f"Thumbnail generation failed: {str(e)}")
            raise ConversionFailure("thumbnail", e) from e
