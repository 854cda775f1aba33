"""Data models for the photo-to-panorama engine."""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Union
from pathlib import Path
import json


LAYOUTS = ("horizontal", "vertical", "panoramic")


class Unknown:
    """Sentinel for metadata that could not be read on this host.

    Deliberately not a number: comparing it or doing arithmetic with it fails.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "unknown"

    def __str__(self):
        return "unknown"


UNKNOWN = Unknown()


@dataclass(frozen=True)
class SourceImage:
    """A caller-owned input image, given either as a file path or as bytes."""
    path: Optional[str] = None
    data: Optional[bytes] = field(default=None, repr=False)

    def __post_init__(self):
        if (self.path is None) == (self.data is None):
            raise ValueError("SourceImage needs exactly one of path or data")

    @classmethod
    def from_path(cls, path) -> 'SourceImage':
        return cls(path=str(path))

    @classmethod
    def from_bytes(cls, data: bytes) -> 'SourceImage':
        return cls(data=bytes(data))

    @property
    def name(self) -> str:
        return Path(self.path).name if self.path is not None else "<buffer>"

    def read_bytes(self) -> bytes:
        if self.data is not None:
            return self.data
        return Path(self.path).read_bytes()

    @property
    def size_bytes(self) -> int:
        if self.data is not None:
            return len(self.data)
        return Path(self.path).stat().st_size


@dataclass(frozen=True)
class ImageMetadata:
    width: Union[int, Unknown]
    height: Union[int, Unknown]
    format: str
    size_bytes: Union[int, Unknown]
    aspect_ratio: Union[float, Unknown]

    @classmethod
    def from_size(cls, width: int, height: int, format: str, size_bytes: int) -> 'ImageMetadata':
        return cls(width, height, format, size_bytes, width / height)

    @classmethod
    def unknown(cls) -> 'ImageMetadata':
        return cls(UNKNOWN, UNKNOWN, str(UNKNOWN), UNKNOWN, UNKNOWN)

    @property
    def is_known(self) -> bool:
        return not isinstance(self.width, Unknown)

    def to_dict(self) -> Dict[str, Any]:
        def plain(value):
            return str(value) if isinstance(value, Unknown) else value

        return {
            'width': plain(self.width),
            'height': plain(self.height),
            'format': self.format,
            'size': plain(self.size_bytes),
            'aspect_ratio': plain(self.aspect_ratio),
        }


@dataclass
class ValidationReport:
    is_valid: bool = True
    issues: List[str] = field(default_factory=list)
    metadata: Optional[ImageMetadata] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_valid': self.is_valid,
            'issues': list(self.issues),
            'metadata': self.metadata.to_dict() if self.metadata is not None else None,
        }


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    def to_dict(self) -> Dict[str, int]:
        return {'width': self.width, 'height': self.height}


@dataclass
class ConversionResult:
    success: bool
    method: str
    dimensions: Dimensions
    message: str
    image_bytes: bytes = field(default=b"", repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'method': self.method,
            'dimensions': self.dimensions.to_dict(),
            'message': self.message,
        }


@dataclass(frozen=True)
class StitchOptions:
    layout: str = "horizontal"
    overlap: float = 0.1
    quality_percent: int = 90

    def __post_init__(self):
        if not 0 <= self.overlap < 1:
            raise ValueError(f"overlap must be in [0, 1), got {self.overlap}")
        if not 1 <= self.quality_percent <= 100:
            raise ValueError(f"quality_percent must be in [1, 100], got {self.quality_percent}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StitchOptions':
        """Build options from the request-style keys (method, overlap, quality)."""
        defaults = cls()
        return cls(
            layout=data.get('layout', data.get('method', defaults.layout)),
            overlap=float(data.get('overlap', defaults.overlap)),
            quality_percent=int(data.get('quality', defaults.quality_percent)),
        )


@dataclass
class StitchResult:
    success: bool
    image_bytes: Optional[bytes] = field(default=None, repr=False)
    dimensions: Optional[Dimensions] = None
    method: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> 'StitchResult':
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'dimensions': self.dimensions.to_dict() if self.dimensions else None,
            'method': self.method,
            'error': self.error,
        }


@dataclass(frozen=True)
class MethodRecommendation:
    method: str
    reason: str


@dataclass
class ProcessedPanorama:
    """Represents a finished panorama with its preview and provenance."""
    image: Optional[bytes] = field(default=None, repr=False)
    thumbnail: Optional[bytes] = field(default=None, repr=False)
    width: int = 0
    height: int = 0
    method: str = ""
    source_images: List[str] = None
    validation: Optional[ValidationReport] = None
    error: Optional[str] = None

    def __post_init__(self):
        if self.source_images is None:
            self.source_images = []

    @property
    def success(self) -> bool:
        return self.image is not None and self.error is None

    def save_image(self, output_path: str, thumbnail_path: str = None):
        """Persist the panorama bytes (and optionally the thumbnail) to disk."""
        if self.image is None:
            raise ValueError("No panorama image to save")
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(self.image)

        if thumbnail_path and self.thumbnail is not None:
            thumbnail_path = Path(thumbnail_path)
            thumbnail_path.parent.mkdir(parents=True, exist_ok=True)
            thumbnail_path.write_bytes(self.thumbnail)

    def save_metadata(self, metadata_path: str):
        """Save panorama metadata to a JSON file."""
        metadata = {
            'width': self.width,
            'height': self.height,
            'method': self.method,
            'source_images': self.source_images,
            'validation': self.validation.to_dict() if self.validation else None,
            'error': self.error,
        }

        metadata_path = Path(metadata_path)
        metadata_path.parent.mkdir(parents=True, exist_ok=True)

        with open(metadata_path, 'w') as f:
            json.dump(metadata, f, indent=2)
