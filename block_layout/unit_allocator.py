"""
Grid-unit width allocation.

A block's width is divided between its cells in proportion to their declared
grid units. These helpers convert units to pixels, build the matching
``fr`` column template and check the per-block unit capacity.
"""

from typing import Iterable

from models import CapacityCheck, CellConfiguration


class UnitWidthAllocator:
    """Converts grid units to pixel widths"""

    @staticmethod
    def total_units(cells: Iterable[CellConfiguration]) -> int:
        return sum(cell.cell_width for cell in cells)

    @staticmethod
    def width_per_unit(block_width_px: float, total_units: int) -> float:
        """Pixel width of one grid unit; the whole block when there are no units"""
        if total_units <= 0:
            return float(block_width_px)
        return block_width_px / total_units

    @staticmethod
    def item_width(units: int, total_units: int, block_width_px: float) -> float:
        if total_units <= 0:
            return float(block_width_px)
        return (units / total_units) * block_width_px

    @staticmethod
    def grid_columns(cells: list[CellConfiguration]) -> str:
        """Column template such as ``"2fr 1fr 1fr"``"""
        if not cells:
            return "1fr"
        return " ".join(f"{cell.cell_width or 1}fr" for cell in cells)

    @staticmethod
    def validate_capacity(cells: list[CellConfiguration], max_units: int = 4) -> CapacityCheck:
        """A block may not hold more than ``max_units`` grid units"""
        # Zero-width cells still take a column when rendered
        total = sum(cell.cell_width or 1 for cell in cells)
        if total > max_units:
            return CapacityCheck(
                valid=False,
                total_units=total,
                error=(
                    f"Block capacity exceeded: sum of chart widths ({total}) "
                    f"exceeds maximum ({max_units} units)"
                ),
            )
        return CapacityCheck(valid=True, total_units=total)
