"""
Block dimensions under the 4-unit grid contract.

Independently of its cells, a block is laid out at a ``width:height`` ratio
of 4:1. Blocks made only of text and tables may override the ratio with
``"4:N"`` for N in 1..10 to give long content more room. Invalid overrides
fall back to 4:1 and report why in ``override_error``.

Usage:
    from block_layout.block_dimensions import BlockDimensionCalculator
    dims = BlockDimensionCalculator.dimensions(cells, 1200, "4:6")
"""

import re
from typing import Optional

from block_layout.block_solver import check_block_width
from block_layout.unit_allocator import UnitWidthAllocator
from models import BlockDimensions, BodyType, CellConfiguration, RatioCheck

RATIO_PATTERN = re.compile(r"(\d+):(\d+)")

DEFAULT_RATIO_DIVISOR = 4
RATIO_WIDTH = 4
MIN_RATIO_HEIGHT = 1
MAX_RATIO_HEIGHT = 10

OVERRIDE_BODY_TYPES = (BodyType.TEXT, BodyType.TABLE)


def _parse_ratio(block_aspect_ratio: str) -> Optional[tuple[int, int]]:
    match = RATIO_PATTERN.fullmatch(block_aspect_ratio)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


class BlockDimensionCalculator:
    """Height from the block ratio and unit-proportional item widths"""

    @staticmethod
    def block_height(block_width_px: float, block_aspect_ratio: Optional[str] = None) -> float:
        """``W / 4`` by default, ``W * h / w`` for a ``"w:h"`` override"""
        check_block_width(block_width_px)
        parsed = _parse_ratio(block_aspect_ratio) if block_aspect_ratio else None
        if parsed is None or parsed[0] <= 0 or parsed[1] <= 0:
            return block_width_px / DEFAULT_RATIO_DIVISOR
        ratio_width, ratio_height = parsed
        return (block_width_px * ratio_height) / ratio_width

    @staticmethod
    def validate_ratio_range(block_aspect_ratio: str) -> RatioCheck:
        """Overrides must be ``4:1`` through ``4:10``"""
        parsed = _parse_ratio(block_aspect_ratio)
        if parsed is None:
            return RatioCheck(
                valid=False,
                error=f'Invalid aspect ratio format: {block_aspect_ratio}. Expected format: "width:height"',
            )
        ratio_width, ratio_height = parsed
        if ratio_width != RATIO_WIDTH:
            return RatioCheck(
                valid=False, error=f"Aspect ratio width must be {RATIO_WIDTH}. Got: {ratio_width}"
            )
        if not MIN_RATIO_HEIGHT <= ratio_height <= MAX_RATIO_HEIGHT:
            return RatioCheck(
                valid=False,
                error=(
                    f"Aspect ratio height must be between {MIN_RATIO_HEIGHT} and "
                    f"{MAX_RATIO_HEIGHT}. Got: {ratio_height}"
                ),
            )
        return RatioCheck(valid=True)

    @staticmethod
    def validate_override(cells: list[CellConfiguration]) -> RatioCheck:
        """Only text/table blocks may change their ratio"""
        if not cells:
            return RatioCheck(valid=False, error="Cannot apply aspect ratio override to empty block")
        invalid = [cell.body_type.value for cell in cells if cell.body_type not in OVERRIDE_BODY_TYPES]
        if invalid:
            return RatioCheck(
                valid=False,
                error=(
                    "Aspect ratio override only allowed for text/table blocks. "
                    f"Found invalid types: {', '.join(invalid)}"
                ),
            )
        return RatioCheck(valid=True)

    @staticmethod
    def dimensions(
        cells: list[CellConfiguration],
        block_width_px: float,
        block_aspect_ratio: Optional[str] = None,
        max_units: int = 4,
    ) -> BlockDimensions:
        """Capacity check, block height and per-item widths in one pass"""
        capacity = UnitWidthAllocator.validate_capacity(cells, max_units)
        grid_columns = UnitWidthAllocator.grid_columns(cells)

        if not capacity.valid:
            return BlockDimensions(
                valid=False,
                error=capacity.error,
                block_height_px=BlockDimensionCalculator.block_height(block_width_px),
                total_units=capacity.total_units,
                grid_columns=grid_columns,
                item_widths=[0.0 for _ in cells],
            )

        ratio = None
        override_error = None
        if block_aspect_ratio:
            check = BlockDimensionCalculator.validate_ratio_range(block_aspect_ratio)
            if check.valid:
                check = BlockDimensionCalculator.validate_override(cells)
            if check.valid:
                ratio = block_aspect_ratio
            else:
                override_error = check.error

        item_widths = [
            UnitWidthAllocator.item_width(cell.cell_width or 1, capacity.total_units, block_width_px)
            for cell in cells
        ]
        return BlockDimensions(
            valid=True,
            block_height_px=BlockDimensionCalculator.block_height(block_width_px, ratio),
            total_units=capacity.total_units,
            grid_columns=grid_columns,
            item_widths=item_widths,
            override_error=override_error,
        )
