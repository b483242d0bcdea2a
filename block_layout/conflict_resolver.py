"""
Layout conflict resolution.

When several sizing pressures apply to one block, a single height wins by a
fixed priority order:

1. intrinsic media: a ``setIntrinsic`` image dictates the row height,
2. block aspect ratio: a declared block-level ratio (soft or hard),
3. readability enforcement: grow toward the cap until content fits,
4. structural failure: content does not fit even at the cap, split the block.

Every decision carries a human-readable ``reason``.
"""

import math
from typing import Optional

from block_layout.aspect_ratio import AspectRatioResolver
from block_layout.block_solver import BlockHeightSolver, check_block_width
from block_layout.fit_validator import ElementFitValidator
from block_layout.layout_config import LayoutConfig
from block_layout.unit_allocator import UnitWidthAllocator
from models import (
    BlockHeightResolution,
    CellConfiguration,
    ElementFitValidation,
    HeightResolutionInput,
    HeightResolutionPriority,
    LayoutEngineConfig,
    RequiredAction,
)

# Image geometry and a hard block ratio agree when within this many pixels
GEOMETRY_TOLERANCE_PX = 1.0


def _needs_height(validations: list[ElementFitValidation]) -> list[ElementFitValidation]:
    return [
        v
        for v in validations
        if not v.fits and RequiredAction.INCREASE_HEIGHT in v.required_actions
    ]


class LayoutConflictResolver:
    """Arbitrates between competing block height constraints"""

    def __init__(
        self,
        config: Optional[LayoutEngineConfig] = None,
        solver: Optional[BlockHeightSolver] = None,
        validator: Optional[ElementFitValidator] = None,
    ):
        self.config = config or LayoutEngineConfig()
        self.solver = solver or BlockHeightSolver(self.config)
        self.validator = validator or ElementFitValidator(self.config)

    def _cap(self, max_allowed_height: Optional[float]) -> int:
        if max_allowed_height is None:
            return self.config.max_height_px
        if max_allowed_height <= 0:
            raise ValueError(f"max_allowed_height must be > 0, got {max_allowed_height}")
        # Sub-pixel caps still leave one whole pixel
        return max(1, int(math.floor(max_allowed_height)))

    def _clamp(self, height: float, cap: int) -> int:
        return LayoutConfig.clamp_height(height, min(self.config.min_height_px, cap), cap)

    @staticmethod
    def intrinsic_height(
        cell: CellConfiguration, total_units: int, block_width_px: float
    ) -> float:
        """Natural height of an image, from its pixels or its allotted width"""
        if cell.intrinsic_height_px is not None and cell.intrinsic_height_px > 0:
            return float(cell.intrinsic_height_px)
        width = UnitWidthAllocator.item_width(cell.cell_width, total_units, block_width_px)
        return AspectRatioResolver.implied_height(cell.aspect_ratio, width)

    def _candidate(
        self, resolution_input: HeightResolutionInput, cap: int
    ) -> tuple[int, HeightResolutionPriority, str]:
        """Height proposed by the highest applicable priority before readability checks"""
        cells = resolution_input.cells
        width = resolution_input.block_width_px
        aspect = resolution_input.block_aspect_ratio

        intrinsic_cells = [cell for cell in cells if cell.is_intrinsic]
        if intrinsic_cells:
            total_units = UnitWidthAllocator.total_units(cells)
            natural = max(self.intrinsic_height(c, total_units, width) for c in intrinsic_cells)
            height = self._clamp(natural, cap)
            if aspect is not None:
                label = AspectRatioResolver.normalize(aspect.ratio).value
                reason = f"image intrinsic height overrides {label} block preference"
            else:
                reason = "image intrinsic height sets the block height"
            if height != int(round(natural)):
                reason += f" (clamped from {natural:.0f}px to {height}px)"
            return height, HeightResolutionPriority.INTRINSIC_MEDIA, reason

        if aspect is not None:
            label = AspectRatioResolver.normalize(aspect.ratio).value
            kind = "soft" if aspect.is_soft_constraint else "hard"
            implied = AspectRatioResolver.implied_height(aspect.ratio, width)
            geometry = self.solver.raw_height(cells, width)
            conflicts = (
                geometry is not None and abs(geometry - implied) > GEOMETRY_TOLERANCE_PX
            )
            if aspect.is_soft_constraint or not conflicts:
                height = self._clamp(implied, cap)
                return (
                    height,
                    HeightResolutionPriority.BLOCK_ASPECT_RATIO,
                    f"{kind} {label} block aspect ratio sets height to {height}px",
                )
            height = self._clamp(self.solver.solve_height(cells, width), cap)
            return (
                height,
                HeightResolutionPriority.READABILITY_ENFORCEMENT,
                f"hard {label} block aspect ratio ({implied:.0f}px) conflicts with "
                f"image geometry ({geometry:.0f}px), using computed height {height}px",
            )

        height = self._clamp(self.solver.solve_height(cells, width), cap)
        return (
            height,
            HeightResolutionPriority.READABILITY_ENFORCEMENT,
            f"no intrinsic media or block aspect ratio, using computed height {height}px",
        )

    def resolve(self, resolution_input: HeightResolutionInput) -> BlockHeightResolution:
        check_block_width(resolution_input.block_width_px)
        cap = self._cap(resolution_input.max_allowed_height)
        cells = resolution_input.cells
        width = resolution_input.block_width_px

        height, priority, reason = self._candidate(resolution_input, cap)

        failing = _needs_height(self.validator.validate_cells(cells, height, width, cap))
        if not failing:
            return BlockHeightResolution(
                height_px=height,
                priority=priority,
                reason=reason,
                can_increase=height < cap,
                requires_split=False,
            )

        start = height
        while failing and height < cap:
            required = max(v.required_height or 0 for v in failing)
            target = max(height + self.config.growth_step_px, required)
            height = min(cap, int(math.ceil(target)))
            failing = _needs_height(self.validator.validate_cells(cells, height, width, cap))

        if not failing:
            return BlockHeightResolution(
                height_px=height,
                priority=HeightResolutionPriority.READABILITY_ENFORCEMENT,
                reason=f"height grown from {start}px to {height}px for readability ({reason})",
                can_increase=height < cap,
                requires_split=False,
            )

        return BlockHeightResolution(
            height_px=cap,
            priority=HeightResolutionPriority.STRUCTURAL_FAILURE,
            reason=(
                f"content does not fit even at the maximum height of {cap}px, "
                f"block must be split ({len(failing)} cell(s) failing)"
            ),
            can_increase=False,
            requires_split=True,
        )
