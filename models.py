import math
from dataclasses import asdict, dataclass, field
from enum import Enum, IntEnum
from typing import Any, Optional, Union


class BodyType(Enum):
    PIE = "pie"
    BAR = "bar"
    KPI = "kpi"
    TEXT = "text"
    IMAGE = "image"
    TABLE = "table"


class AspectRatio(Enum):
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    SQUARE = "1:1"


class ImageMode(Enum):
    COVER = "cover"
    SET_INTRINSIC = "setIntrinsic"


class ImageFreeStrategy(Enum):
    FALLBACK = "fallback"
    MULTIPLIER = "multiplier"


class HeightResolutionPriority(IntEnum):
    """Lower value wins when several constraints can be satisfied"""

    INTRINSIC_MEDIA = 1
    BLOCK_ASPECT_RATIO = 2
    READABILITY_ENFORCEMENT = 3
    STRUCTURAL_FAILURE = 4


class RequiredAction(Enum):
    """Remedies ordered by cost, cheapest first"""

    REFLOW = "reflow"
    AGGREGATE = "aggregate"
    INCREASE_HEIGHT = "increaseHeight"
    SPLIT_BLOCK = "splitBlock"


ACTION_ORDER = list(RequiredAction)


def order_actions(actions) -> list[RequiredAction]:
    """Deduplicate actions and sort them by cost"""
    unique = set(actions)
    return [action for action in ACTION_ORDER if action in unique]


def _coerce_aspect_ratio(value: Any) -> Optional[Union[AspectRatio, str]]:
    # Unknown identifiers are kept as-is so the resolver can fall back softly
    if value is None or isinstance(value, AspectRatio):
        return value
    try:
        return AspectRatio(value)
    except ValueError:
        return value


@dataclass
class ContentMetadata:
    """Content facts the fit validator needs about a cell"""

    char_count: int = 0
    line_count: int = 0
    row_count: int = 0
    bar_count: int = 0
    legend_item_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ContentMetadata":
        """Build from camelCase or snake_case keys, ignoring unknown ones"""
        data = data or {}
        aliases = {
            "charCount": "char_count",
            "lineCount": "line_count",
            "rowCount": "row_count",
            "barCount": "bar_count",
            "legendItemCount": "legend_item_count",
        }
        values = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if (
                name in cls.__dataclass_fields__
                and isinstance(value, (int, float))
                and math.isfinite(value)
            ):
                values[name] = max(0, int(value))
        return cls(**values)


@dataclass
class CellConfiguration:
    """One visual unit inside a block"""

    chart_id: str
    cell_width: int
    body_type: BodyType
    aspect_ratio: Optional[Union[AspectRatio, str]] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    image_mode: Optional[ImageMode] = None
    intrinsic_height_px: Optional[float] = None  # natural height for setIntrinsic images
    content_metadata: Optional[ContentMetadata] = None

    def __post_init__(self):
        if self.cell_width < 0:
            raise ValueError(f"cell_width must be >= 0, got {self.cell_width} for {self.chart_id}")
        if not isinstance(self.body_type, BodyType):
            self.body_type = BodyType(self.body_type)
        if self.image_mode is not None and not isinstance(self.image_mode, ImageMode):
            self.image_mode = ImageMode(self.image_mode)
        self.aspect_ratio = _coerce_aspect_ratio(self.aspect_ratio)

    @property
    def is_image(self) -> bool:
        return self.body_type is BodyType.IMAGE

    @property
    def is_intrinsic(self) -> bool:
        return self.is_image and self.image_mode is ImageMode.SET_INTRINSIC

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        aspect = self.aspect_ratio
        return {
            "chart_id": self.chart_id,
            "cell_width": self.cell_width,
            "body_type": self.body_type.value,
            "aspect_ratio": aspect.value if isinstance(aspect, AspectRatio) else aspect,
            "title": self.title,
            "subtitle": self.subtitle,
            "image_mode": self.image_mode.value if self.image_mode else None,
            "intrinsic_height_px": self.intrinsic_height_px,
            "content_metadata": (
                self.content_metadata.to_dict() if self.content_metadata else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CellConfiguration":
        """Create from dictionary for JSON deserialization"""
        metadata = data.get("content_metadata")
        return cls(
            chart_id=data["chart_id"],
            cell_width=data.get("cell_width", 1),
            body_type=BodyType(data.get("body_type", "kpi")),
            aspect_ratio=data.get("aspect_ratio"),
            title=data.get("title"),
            subtitle=data.get("subtitle"),
            image_mode=ImageMode(data["image_mode"]) if data.get("image_mode") else None,
            intrinsic_height_px=data.get("intrinsic_height_px"),
            content_metadata=ContentMetadata.from_dict(metadata) if metadata else None,
        )


@dataclass
class BlockLayoutInput:
    """A block to lay out: its width and its ordered cells"""

    block_id: str
    block_width_px: float
    cells: list[CellConfiguration] = field(default_factory=list)


@dataclass
class CellLayout:
    chart_id: str
    width_px: float
    height_px: int


@dataclass
class SyncedFonts:
    """Title/subtitle font sizes shared across a block"""

    title_px: int
    subtitle_px: int


@dataclass
class BlockLayoutResult:
    """Results of a block solve"""

    block_id: str
    block_height_px: int
    synced_fonts: SyncedFonts
    cells: list[CellLayout]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BlockAspectRatio:
    """Block-level aspect ratio declared by the report author"""

    ratio: Union[AspectRatio, str]
    is_soft_constraint: bool = True

    def __post_init__(self):
        self.ratio = _coerce_aspect_ratio(self.ratio)


@dataclass
class HeightResolutionInput:
    block_id: str
    block_width_px: float
    cells: list[CellConfiguration] = field(default_factory=list)
    block_aspect_ratio: Optional[BlockAspectRatio] = None
    max_allowed_height: Optional[float] = None


@dataclass
class BlockHeightResolution:
    """Winning height and the constraint that decided it"""

    height_px: int
    priority: HeightResolutionPriority
    reason: str
    can_increase: bool
    requires_split: bool


@dataclass
class ElementFitValidation:
    fits: bool
    required_height: Optional[float] = None
    min_font_size: Optional[float] = None
    current_font_size: Optional[float] = None
    violations: list[str] = field(default_factory=list)
    required_actions: list[RequiredAction] = field(default_factory=list)


@dataclass
class CapacityCheck:
    valid: bool
    total_units: int
    error: Optional[str] = None


@dataclass
class RatioCheck:
    valid: bool
    error: Optional[str] = None


@dataclass
class BlockDimensions:
    """Grid-contract dimensions of a block: width:height ratio height and unit widths"""

    valid: bool
    block_height_px: float
    total_units: int
    grid_columns: str
    item_widths: list[float] = field(default_factory=list)
    error: Optional[str] = None
    override_error: Optional[str] = None  # set when a requested ratio override was ignored

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BlockValidationResult:
    """Editor-facing validation of one block"""

    block_id: str
    height_resolution: BlockHeightResolution
    element_validations: list[ElementFitValidation]
    publish_blocked: bool
    publish_block_reason: Optional[str] = None
    required_actions: list[RequiredAction] = field(default_factory=list)


@dataclass
class PublishValidity:
    can_publish: bool
    blocked_blocks: list[dict[str, str]] = field(default_factory=list)


@dataclass
class LayoutEngineConfig:
    """Numeric thresholds used by the layout engine"""

    min_height_px: int = 150
    max_height_px: int = 800
    fallback_height_px: int = 360
    text_cell_width_px: int = 300  # default, may be overridden upstream
    min_font_size_px: float = 12.0
    max_font_size_px: float = 64.0
    growth_step_px: int = 20
    max_block_units: int = 4
    max_cell_units: int = 2
    image_free_strategy: ImageFreeStrategy = ImageFreeStrategy.FALLBACK

    def __post_init__(self):
        if not isinstance(self.image_free_strategy, ImageFreeStrategy):
            self.image_free_strategy = ImageFreeStrategy(self.image_free_strategy)
        if self.min_height_px <= 0 or self.max_height_px < self.min_height_px:
            raise ValueError(
                f"Invalid height envelope [{self.min_height_px}, {self.max_height_px}]"
            )
        if self.growth_step_px <= 0:
            raise ValueError("growth_step_px must be > 0")
        if self.min_font_size_px <= 0 or self.max_font_size_px < self.min_font_size_px:
            raise ValueError(
                f"Invalid font range [{self.min_font_size_px}, {self.max_font_size_px}]"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = asdict(self)
        data["image_free_strategy"] = self.image_free_strategy.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LayoutEngineConfig":
        """Create from dictionary, missing keys keep their defaults"""
        defaults = cls()
        return cls(
            min_height_px=data.get("min_height_px", defaults.min_height_px),
            max_height_px=data.get("max_height_px", defaults.max_height_px),
            fallback_height_px=data.get("fallback_height_px", defaults.fallback_height_px),
            text_cell_width_px=data.get("text_cell_width_px", defaults.text_cell_width_px),
            min_font_size_px=data.get("min_font_size_px", defaults.min_font_size_px),
            max_font_size_px=data.get("max_font_size_px", defaults.max_font_size_px),
            growth_step_px=data.get("growth_step_px", defaults.growth_step_px),
            max_block_units=data.get("max_block_units", defaults.max_block_units),
            max_cell_units=data.get("max_cell_units", defaults.max_cell_units),
            image_free_strategy=ImageFreeStrategy(
                data.get("image_free_strategy", defaults.image_free_strategy.value)
            ),
        )
