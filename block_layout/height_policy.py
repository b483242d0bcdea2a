"""
Height multiplier policy for image-free blocks.

Without images there is no geometric constraint to solve, so the row height
is a heuristic multiple of one grid unit's width.
"""

from typing import Optional

from block_layout.block_solver import cell_widths, check_block_width
from block_layout.typography import TypographySystem
from block_layout.unit_allocator import UnitWidthAllocator
from models import BlockLayoutInput, BlockLayoutResult, LayoutEngineConfig


class HeightMultiplierPolicy:
    """Unit-count to height-ratio lookup"""

    def __init__(self, config: Optional[LayoutEngineConfig] = None):
        self.config = config or LayoutEngineConfig()

    @staticmethod
    def multiplier(total_units: int) -> float:
        if total_units <= 0:
            return 1.0
        if total_units == 1:
            # A lone unit reads best wide and short (2:1)
            return 0.5
        if total_units <= 3:
            return 1.0
        return 1.5

    def target_height(
        self, block_width_px: float, total_units: int, max_height: Optional[float] = None
    ) -> int:
        check_block_width(block_width_px)
        if max_height is None:
            max_height = self.config.max_height_px

        unit_width = UnitWidthAllocator.width_per_unit(block_width_px, total_units)
        target = int(round(unit_width * self.multiplier(total_units)))
        return int(min(target, max_height))

    def solve(
        self, layout_input: BlockLayoutInput, max_height: Optional[float] = None
    ) -> BlockLayoutResult:
        total_units = UnitWidthAllocator.total_units(layout_input.cells)
        height = self.target_height(layout_input.block_width_px, total_units, max_height)
        return BlockLayoutResult(
            block_id=layout_input.block_id,
            block_height_px=height,
            synced_fonts=TypographySystem.get_synced_fonts(),
            cells=cell_widths(layout_input.cells, height, self.config),
        )
