"""
Element fit validation.

Decides whether a cell's content fits the height a block resolved to and, if
not, which remedies the caller may apply before solving again. Remedies are
always reported cheapest first: reflow, aggregate, increaseHeight, splitBlock.

Text is the dominant case: its content length interacts with the available
vertical space through the font size. Content size is obtained from a
``ContentSizeEstimator`` so the measurement strategy can be swapped in tests
or by a renderer that measures real glyphs.
"""

import math
from typing import Callable, Optional, Protocol

from block_layout.layout_config import LayoutConfig
from block_layout.typography import TypographySystem
from block_layout.unit_allocator import UnitWidthAllocator
from models import (
    BodyType,
    CellConfiguration,
    ContentMetadata,
    ElementFitValidation,
    LayoutEngineConfig,
    RequiredAction,
    order_actions,
)

FONT_SEARCH_TOLERANCE = 0.25
SMALLEST_FONT_PX = 1.0


class ContentSizeEstimator(Protocol):
    def estimate_required_height(
        self, metadata: ContentMetadata, width_px: float, font_size_px: float
    ) -> float:
        """Height in pixels needed to show the content at ``font_size_px``"""
        ...


class TextMetricsEstimator:
    """Estimates wrapped text height from average glyph metrics"""

    def __init__(
        self,
        char_width_factor: float = LayoutConfig.TEXT_CHAR_WIDTH_FACTOR,
        line_height: float = TypographySystem.LINE_HEIGHTS["text"],
        padding_px: float = LayoutConfig.CHART_BODY_PADDING,
    ):
        self.char_width_factor = char_width_factor
        self.line_height = line_height
        self.padding_px = padding_px

    def line_count(self, metadata: ContentMetadata, width_px: float, font_size_px: float) -> int:
        usable_width = max(1.0, width_px - self.padding_px)
        chars_per_line = max(1, math.floor(usable_width / (font_size_px * self.char_width_factor)))
        wrapped = math.ceil(metadata.char_count / chars_per_line) if metadata.char_count else 0
        return max(wrapped, metadata.line_count)

    def estimate_required_height(
        self, metadata: ContentMetadata, width_px: float, font_size_px: float
    ) -> float:
        lines = self.line_count(metadata, width_px, font_size_px)
        if lines == 0:
            return 0.0
        return lines * font_size_px * self.line_height + self.padding_px


def _largest_fitting_font(
    low: float, high: float, fits: Callable[[float], bool]
) -> Optional[float]:
    """Binary search for the largest font in [low, high] that fits"""
    if not fits(low):
        return None
    if fits(high):
        return high
    while high - low > FONT_SEARCH_TOLERANCE:
        mid = (low + high) / 2
        if fits(mid):
            low = mid
        else:
            high = mid
    return round(low, 2)


def _fits() -> ElementFitValidation:
    return ElementFitValidation(fits=True)


class ElementFitValidator:
    """Checks content of each cell type against its allotted space"""

    def __init__(
        self,
        config: Optional[LayoutEngineConfig] = None,
        estimator: Optional[ContentSizeEstimator] = None,
    ):
        self.config = config or LayoutEngineConfig()
        self.estimator = estimator or TextMetricsEstimator()
        self._validators = {
            BodyType.TEXT: self._validate_text,
            BodyType.TABLE: self._validate_table,
            BodyType.PIE: self._validate_pie,
            BodyType.BAR: self._validate_bar,
            BodyType.KPI: self._validate_always_fits,
            BodyType.IMAGE: self._validate_always_fits,
        }

    def validate(
        self,
        cell: CellConfiguration,
        container_height: float,
        container_width: float,
        max_height: Optional[float] = None,
    ) -> ElementFitValidation:
        validator = self._validators[cell.body_type]
        return validator(cell, container_height, container_width, max_height)

    def validate_cells(
        self,
        cells: list[CellConfiguration],
        height_px: float,
        block_width_px: float,
        max_height: Optional[float] = None,
    ) -> list[ElementFitValidation]:
        """Validate every cell at a shared height, each at its grid-allotted width"""
        total_units = UnitWidthAllocator.total_units(cells)
        return [
            self.validate(
                cell,
                height_px,
                UnitWidthAllocator.item_width(cell.cell_width, total_units, block_width_px),
                max_height,
            )
            for cell in cells
        ]

    def _title_band(self, cell: CellConfiguration) -> float:
        fonts = TypographySystem.get_synced_fonts()
        band = 0.0
        if cell.title:
            band += fonts.title_px * TypographySystem.LINE_HEIGHTS["tight"]
        if cell.subtitle:
            band += fonts.subtitle_px * TypographySystem.LINE_HEIGHTS["tight"]
        return band

    def _validate_text(self, cell, container_height, container_width, max_height):
        metadata = cell.content_metadata or ContentMetadata()
        title_band = self._title_band(cell)
        available = container_height - title_band

        def fits_at(font_size: float) -> bool:
            required = self.estimator.estimate_required_height(
                metadata, container_width, font_size
            )
            return required <= available

        min_font = self.config.min_font_size_px
        best_font = _largest_fitting_font(min_font, self.config.max_font_size_px, fits_at)
        if best_font is not None:
            return ElementFitValidation(fits=True, current_font_size=best_font)

        implied_font = _largest_fitting_font(SMALLEST_FONT_PX, min_font, fits_at)
        required_height = (
            self.estimator.estimate_required_height(metadata, container_width, min_font)
            + title_band
        )
        actions = [
            RequiredAction.REFLOW,
            RequiredAction.AGGREGATE,
            RequiredAction.INCREASE_HEIGHT,
        ]
        violations = [
            f"Text needs {required_height:.0f}px at the minimum font size of {min_font:g}px, "
            f"only {container_height:.0f}px available"
        ]
        if max_height is not None and required_height > max_height:
            actions.append(RequiredAction.SPLIT_BLOCK)
            violations.append(
                f"Required height {required_height:.0f}px exceeds the maximum of {max_height:.0f}px"
            )
        return ElementFitValidation(
            fits=False,
            required_height=required_height,
            min_font_size=min_font,
            current_font_size=implied_font if implied_font is not None else SMALLEST_FONT_PX,
            violations=violations,
            required_actions=order_actions(actions),
        )

    def _validate_table(self, cell, container_height, container_width, max_height):
        metadata = cell.content_metadata or ContentMetadata()
        max_rows = LayoutConfig.TABLE_MAX_VISIBLE_ROWS
        if metadata.row_count <= max_rows:
            return _fits()
        return ElementFitValidation(
            fits=False,
            violations=[
                f"Table has {metadata.row_count} rows, exceeds maximum of {max_rows} visible rows"
            ],
            required_actions=[RequiredAction.AGGREGATE],
        )

    def _validate_pie(self, cell, container_height, container_width, max_height):
        metadata = cell.content_metadata or ContentMetadata()
        required_height = LayoutConfig.pie_required_height(metadata.legend_item_count)
        if container_height >= required_height:
            return _fits()
        actions = [RequiredAction.INCREASE_HEIGHT]
        if max_height is not None and required_height > max_height:
            actions.append(RequiredAction.SPLIT_BLOCK)
        return ElementFitValidation(
            fits=False,
            required_height=required_height,
            violations=[
                f"Pie chart requires minimum height of {required_height:.0f}px "
                f"for {metadata.legend_item_count} legend items"
            ],
            required_actions=order_actions(actions),
        )

    def _validate_bar(self, cell, container_height, container_width, max_height):
        metadata = cell.content_metadata or ContentMetadata()
        required_height = LayoutConfig.bar_required_height(metadata.bar_count)
        if container_height >= required_height:
            return _fits()
        actions = [
            RequiredAction.REFLOW,
            RequiredAction.AGGREGATE,
            RequiredAction.INCREASE_HEIGHT,
        ]
        if max_height is not None and required_height > max_height:
            actions.append(RequiredAction.SPLIT_BLOCK)
        return ElementFitValidation(
            fits=False,
            required_height=float(required_height),
            violations=[
                f"Bar chart requires minimum height of {required_height}px "
                f"for {metadata.bar_count} bars"
            ],
            required_actions=order_actions(actions),
        )

    def _validate_always_fits(self, cell, container_height, container_width, max_height):
        # KPIs are compact; images are sized by their aspect ratio during height resolution
        return _fits()
