"""Static catalog of the projection methods offered to clients."""
from dataclasses import dataclass, asdict
from typing import List, Dict, Any


PERSPECTIVE = "perspective"
CYLINDRICAL = "cylindrical"
TILE_REPEAT = "tile_repeat"
AI_DEPTH = "ai_depth"


@dataclass(frozen=True)
class ConversionMethodDescriptor:
    id: str
    name: str
    description: str
    quality_tier: str
    speed_tier: str
    recommended: bool = False
    premium: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


METHOD_CATALOG = (
    ConversionMethodDescriptor(
        id=PERSPECTIVE,
        name="Perspective Projection",
        description="Fast conversion using perspective projection",
        quality_tier="Good",
        speed_tier="Fast",
        recommended=True,
    ),
    ConversionMethodDescriptor(
        id=CYLINDRICAL,
        name="Cylindrical Projection",
        description="Creates cylindrical panorama effect",
        quality_tier="Good",
        speed_tier="Fast",
    ),
    ConversionMethodDescriptor(
        id=TILE_REPEAT,
        name="Tile Repeat",
        description="Repeats image to create panorama pattern",
        quality_tier="Basic",
        speed_tier="Very Fast",
    ),
    ConversionMethodDescriptor(
        id=AI_DEPTH,
        name="AI Depth Conversion",
        description="AI-powered depth-aware conversion (Premium)",
        quality_tier="Excellent",
        speed_tier="Slow",
        premium=True,
    ),
)


def list_methods() -> List[ConversionMethodDescriptor]:
    return list(METHOD_CATALOG)
