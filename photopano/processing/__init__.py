from .capability import ImageCapability, UnavailableImageCapability, get_image_capability
from .validator import ImageValidator
from .converter import ProjectionConverter
from .advisor import recommend_methods
from .stitcher import ImageStitcher
from .thumbnail import ThumbnailGenerator
from .errors import ConversionFailure, ImageProcessingUnavailable
from .pipeline import PanoramaEngine, create_engine

__all__ = [
    'ImageCapability',
    'UnavailableImageCapability',
    'get_image_capability',
    'ImageValidator',
    'ProjectionConverter',
    'recommend_methods',
    'ImageStitcher',
    'ThumbnailGenerator',
    'ConversionFailure',
    'ImageProcessingUnavailable',
    'PanoramaEngine',
    'create_engine'
]
