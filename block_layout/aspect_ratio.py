"""
Aspect ratio resolution for image cells.

Maps the closed set of aspect-ratio identifiers (16:9, 9:16, 1:1) to numeric
width/height ratios. Unknown or missing identifiers resolve to 16:9 so layout
always produces some geometry.
"""

from typing import Any, Optional

from models import AspectRatio

DEFAULT_ASPECT_RATIO = AspectRatio.LANDSCAPE

ASPECT_RATIO_CONFIGS = {
    AspectRatio.LANDSCAPE: {"ratio": 16 / 9, "label": "Landscape (16:9)"},
    AspectRatio.PORTRAIT: {"ratio": 9 / 16, "label": "Portrait (9:16)"},
    AspectRatio.SQUARE: {"ratio": 1.0, "label": "Square (1:1)"},
}


class AspectRatioResolver:
    """Resolves aspect ratio identifiers to width/height ratios"""

    @staticmethod
    def is_valid(value: Any) -> bool:
        if isinstance(value, AspectRatio):
            return True
        return isinstance(value, str) and value in {ar.value for ar in AspectRatio}

    @staticmethod
    def normalize(value: Any) -> AspectRatio:
        """Return the matching AspectRatio, or the default for anything unknown"""
        if isinstance(value, AspectRatio):
            return value
        if AspectRatioResolver.is_valid(value):
            return AspectRatio(value)
        return DEFAULT_ASPECT_RATIO

    @staticmethod
    def resolve(ratio_id: Optional[Any]) -> float:
        """Width/height ratio for an identifier, 16:9 when unknown"""
        return ASPECT_RATIO_CONFIGS[AspectRatioResolver.normalize(ratio_id)]["ratio"]

    @staticmethod
    def implied_height(ratio_id: Optional[Any], width_px: float) -> float:
        """Height that keeps ``width_px`` at the given ratio"""
        return width_px / AspectRatioResolver.resolve(ratio_id)

    @staticmethod
    def pixel_height(ratio_id: Optional[Any], width_px: float) -> int:
        return int(round(AspectRatioResolver.implied_height(ratio_id, width_px)))

    @staticmethod
    def options() -> list[dict[str, str]]:
        """Value/label pairs for selection widgets"""
        return [
            {"value": ratio.value, "label": config["label"]}
            for ratio, config in ASPECT_RATIO_CONFIGS.items()
        ]
