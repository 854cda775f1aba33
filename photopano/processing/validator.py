import logging

from ..models.panorama import ImageMetadata, SourceImage, ValidationReport
from .capability import ImageCapability


class ImageValidator:

    def __init__(self, settings, capability: ImageCapability):
        self.settings = settings
        self.capability = capability
        self.logger = logging.getLogger(__name__)

    def validate(self, source: SourceImage) -> ValidationReport:
        """Check whether a source photo is suitable for panorama conversion.

        Low resolution and oversized files make the report invalid. An odd
        aspect ratio is only reported as an issue.
        """
        if not self.capability.available:
            self.logger.warning(f"Image processing not available - limited validation for {source.name}")
            return ValidationReport(
                is_valid=True,
                issues=["Image processing not available - image validation limited"],
                metadata=ImageMetadata.unknown()
            )

        try:
            metadata = self.capability.read_metadata(source.read_bytes())
        except Exception as e:
            self.logger.error(f"Error validating image {source.name}: {str(e)}")
            return ValidationReport(
                is_valid=False,
                issues=[f"Image validation failed: {str(e)}"],
                metadata=None
            )

        report = ValidationReport(metadata=metadata)

        if metadata.width < self.settings.min_width or metadata.height < self.settings.min_height:
            report.issues.append(
                f"Image resolution too low (minimum {self.settings.min_width}x{self.settings.min_height})"
            )
            report.is_valid = False

        if not self.settings.min_aspect_ratio <= metadata.aspect_ratio <= self.settings.max_aspect_ratio:
            report.issues.append("Unusual aspect ratio may not convert well")

        if metadata.size_bytes > self.settings.max_file_size:
            max_mb = self.settings.max_file_size // (1024 * 1024)
            report.issues.append(f"File size too large (maximum {max_mb}MB)")
            report.is_valid = False

        self.logger.info(f"Validated {source.name}: {metadata.width}x{metadata.height} "
                         f"{metadata.format}, valid={report.is_valid}, issues={len(report.issues)}")
        return report
