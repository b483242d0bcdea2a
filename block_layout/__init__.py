"""
Block Layout Engine
===================

This package computes the shared height and per-cell widths of report blocks:
- AspectRatioResolver: aspect ratio identifiers to numeric ratios
- UnitWidthAllocator: grid units to pixel widths
- BlockDimensionCalculator: 4:N block ratio heights and unit item widths
- BlockHeightSolver: aspect-ratio anchored height solve
- HeightMultiplierPolicy: heuristic height for image-free blocks
- LayoutConflictResolver: priority-ordered height arbitration
- ElementFitValidator: content fit checks and remedies
- ReportLayoutEngine: per-report layout and summaries

Usage:
    from block_layout import BlockHeightSolver, LayoutConflictResolver
"""

from .aspect_ratio import AspectRatioResolver
from .block_dimensions import BlockDimensionCalculator
from .block_solver import BlockHeightSolver
from .config_manager import LayoutConfigManager
from .conflict_resolver import LayoutConflictResolver
from .editor_validation import (
    check_publish_validity,
    validate_block_for_editor,
    validate_blocks_for_editor,
)
from .fit_validator import ContentSizeEstimator, ElementFitValidator, TextMetricsEstimator
from .height_policy import HeightMultiplierPolicy
from .report_layout import ReportLayoutEngine
from .unit_allocator import UnitWidthAllocator

__all__ = [
    "AspectRatioResolver",
    "BlockDimensionCalculator",
    "BlockHeightSolver",
    "ContentSizeEstimator",
    "ElementFitValidator",
    "HeightMultiplierPolicy",
    "LayoutConfigManager",
    "LayoutConflictResolver",
    "ReportLayoutEngine",
    "TextMetricsEstimator",
    "UnitWidthAllocator",
    "check_publish_validity",
    "validate_block_for_editor",
    "validate_blocks_for_editor",
]
