"""
Block height solver.

Every cell of a block shares one height ``H``. Image cells keep their aspect
ratio, so an image is ``ratio * H`` wide, while non-image cells take
``units * width_per_unit``. The block width is the sum of both:

    W = nonImageWidth + H * sum(ratios)
    H = (W - nonImageWidth) / sum(ratios)

The result is clamped to the readable envelope and rounded to a whole pixel.
Blocks without images (or without units) have nothing to solve against and
get the fixed fallback height; heuristic sizing for those blocks lives in
``HeightMultiplierPolicy`` and is selected by the caller.
"""

import math
from typing import Optional

from block_layout.aspect_ratio import AspectRatioResolver
from block_layout.layout_config import LayoutConfig
from block_layout.typography import TypographySystem
from block_layout.unit_allocator import UnitWidthAllocator
from models import (
    BlockLayoutInput,
    BlockLayoutResult,
    BodyType,
    CellConfiguration,
    CellLayout,
    LayoutEngineConfig,
)


def check_block_width(block_width_px: float) -> None:
    """Block width must be a positive finite number"""
    if not isinstance(block_width_px, (int, float)) or isinstance(block_width_px, bool):
        raise ValueError(f"block_width_px must be a number, got {block_width_px!r}")
    if not math.isfinite(block_width_px) or block_width_px <= 0:
        raise ValueError(f"block_width_px must be > 0 and finite, got {block_width_px}")


def cell_widths(
    cells: list[CellConfiguration], height_px: int, config: LayoutEngineConfig
) -> list[CellLayout]:
    """Per-cell widths at a given shared height

    Images are sized from their ratio, text cells get the fixed text width and
    every other type reports 0 because its width comes from the column grid.
    """
    layouts = []
    for cell in cells:
        if cell.is_image:
            width = AspectRatioResolver.resolve(cell.aspect_ratio) * height_px
        elif cell.body_type is BodyType.TEXT:
            width = float(config.text_cell_width_px)
        else:
            width = 0.0
        layouts.append(CellLayout(chart_id=cell.chart_id, width_px=width, height_px=height_px))
    return layouts


class BlockHeightSolver:
    """Solves the single shared height of a block from its image aspect ratios"""

    def __init__(self, config: Optional[LayoutEngineConfig] = None):
        self.config = config or LayoutEngineConfig()

    def raw_height(self, cells: list[CellConfiguration], block_width_px: float) -> Optional[float]:
        """Unclamped height, or None when there is nothing to solve against"""
        check_block_width(block_width_px)

        total_units = UnitWidthAllocator.total_units(cells)
        if total_units == 0:
            return None

        width_per_unit = UnitWidthAllocator.width_per_unit(block_width_px, total_units)
        non_image_width = sum(
            cell.cell_width * width_per_unit for cell in cells if not cell.is_image
        )
        sum_aspect_ratios = sum(
            AspectRatioResolver.resolve(cell.aspect_ratio) for cell in cells if cell.is_image
        )
        if sum_aspect_ratios == 0:
            return None

        return (block_width_px - non_image_width) / sum_aspect_ratios

    def solve_height(self, cells: list[CellConfiguration], block_width_px: float) -> int:
        """Shared height in pixels, clamped to the readable envelope"""
        height = self.raw_height(cells, block_width_px)
        if height is None:
            return self.config.fallback_height_px
        return LayoutConfig.clamp_height(
            height, self.config.min_height_px, self.config.max_height_px
        )

    def solve(self, layout_input: BlockLayoutInput) -> BlockLayoutResult:
        height = self.solve_height(layout_input.cells, layout_input.block_width_px)
        return BlockLayoutResult(
            block_id=layout_input.block_id,
            block_height_px=height,
            synced_fonts=TypographySystem.get_synced_fonts(),
            cells=cell_widths(layout_input.cells, height, self.config),
        )
