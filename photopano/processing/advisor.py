from typing import List

from ..models.methods import AI_DEPTH, CYLINDRICAL, PERSPECTIVE
from ..models.panorama import MethodRecommendation, ValidationReport

WIDE_ASPECT_RATIO = 2.0
TALL_ASPECT_RATIO = 0.8
HIGH_RESOLUTION_WIDTH = 2048


def recommend_methods(report: ValidationReport) -> List[MethodRecommendation]:
    """Suggest conversion methods for a validated image. Advisory only."""
    metadata = report.metadata
    if metadata is None or not metadata.is_known:
        return []

    recommendations = []
    if metadata.aspect_ratio > WIDE_ASPECT_RATIO:
        recommendations.append(MethodRecommendation(
            PERSPECTIVE, "wide aspect ratio works well with perspective projection"))
    elif metadata.aspect_ratio < TALL_ASPECT_RATIO:
        recommendations.append(MethodRecommendation(
            CYLINDRICAL, "tall images work better with cylindrical projection"))
    else:
        recommendations.append(MethodRecommendation(
            PERSPECTIVE, "standard aspect ratio - perspective projection recommended"))

    if metadata.width >= HIGH_RESOLUTION_WIDTH:
        recommendations.append(MethodRecommendation(
            AI_DEPTH, "high resolution image suitable for AI-enhanced conversion"))

    return recommendations
