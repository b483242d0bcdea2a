"""
Editor Validation API
=====================

Editor-facing entry point for block validation. Raw block payloads from the
report editor (camelCase JSON objects) are normalized at this boundary, then
the block height is resolved and every cell is checked for fit.

Publishing is blocked when a block ends in structural failure, when any cell
asks for a block split, or when the block exceeds its grid-unit capacity.

Usage:
    from block_layout.editor_validation import validate_blocks_for_editor
    results = validate_blocks_for_editor(blocks, 1200)
    validity = check_publish_validity(results)
"""

import logging
import math
from typing import Any, Optional

from block_layout.aspect_ratio import AspectRatioResolver
from block_layout.conflict_resolver import LayoutConflictResolver
from block_layout.fit_validator import ElementFitValidator
from block_layout.unit_allocator import UnitWidthAllocator
from models import (
    BlockAspectRatio,
    BlockValidationResult,
    BodyType,
    CellConfiguration,
    ContentMetadata,
    HeightResolutionInput,
    HeightResolutionPriority,
    ImageMode,
    LayoutEngineConfig,
    PublishValidity,
    RequiredAction,
    order_actions,
)

logger = logging.getLogger(__name__)


def normalize_cell_width(width: Any, max_units: int = 2) -> int:
    """Round to a whole unit and clamp to [1, max_units]; 1 when missing"""
    if isinstance(width, bool) or not isinstance(width, (int, float)):
        return 1
    if not math.isfinite(width):
        return 1
    return min(max_units, max(1, int(round(width))))


def normalize_intrinsic_height(value: Any) -> Optional[float]:
    """Positive finite pixel height, None for anything else"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        if value is not None:
            logger.warning(f"Ignoring non-numeric intrinsic height {value!r}")
        return None
    if not math.isfinite(value) or value <= 0:
        logger.warning(f"Ignoring intrinsic height {value!r}")
        return None
    return float(value)


def normalize_body_type(element_type: Any) -> BodyType:
    """Canonical body type, ``kpi`` for unknown values"""
    try:
        return BodyType(element_type)
    except ValueError:
        logger.warning(f"Unknown element type {element_type!r}, treating as kpi")
        return BodyType.KPI


def _normalize_aspect_ratio(value: Any, chart_id: str):
    if value is not None and not AspectRatioResolver.is_valid(value):
        logger.warning(f"Unknown aspect ratio {value!r} on {chart_id}, using 16:9")
    return AspectRatioResolver.normalize(value)


def _normalize_image_mode(value: Any) -> Optional[ImageMode]:
    if value is None:
        return None
    try:
        return ImageMode(value)
    except ValueError:
        logger.warning(f"Unknown image mode {value!r}, ignoring")
        return None


def normalize_cells(block: dict[str, Any], max_cell_units: int = 2) -> list[CellConfiguration]:
    """Convert editor cells to CellConfiguration objects"""
    block_ratio = (block.get("blockAspectRatio") or {}).get("ratio")
    cells = []
    for cell in block.get("cells", []):
        chart_id = str(cell.get("chartId"))
        body_type = normalize_body_type(cell.get("elementType"))
        aspect_ratio = None
        if body_type is BodyType.IMAGE:
            aspect_ratio = _normalize_aspect_ratio(
                cell.get("aspectRatio", block_ratio), chart_id
            )
        metadata = cell.get("contentMetadata")
        cells.append(
            CellConfiguration(
                chart_id=chart_id,
                cell_width=normalize_cell_width(cell.get("width"), max_cell_units),
                body_type=body_type,
                aspect_ratio=aspect_ratio,
                title=cell.get("title"),
                subtitle=cell.get("subtitle"),
                image_mode=_normalize_image_mode(cell.get("imageMode")),
                intrinsic_height_px=normalize_intrinsic_height(cell.get("intrinsicHeight")),
                content_metadata=ContentMetadata.from_dict(metadata) if metadata else None,
            )
        )
    return cells


def build_resolution_input(
    block: dict[str, Any], block_width_px: float, max_cell_units: int = 2
) -> HeightResolutionInput:
    block_id = str(block.get("blockId"))
    raw_aspect = block.get("blockAspectRatio")
    block_aspect = None
    if raw_aspect:
        block_aspect = BlockAspectRatio(
            ratio=_normalize_aspect_ratio(raw_aspect.get("ratio"), block_id),
            is_soft_constraint=bool(raw_aspect.get("isSoftConstraint", True)),
        )
    return HeightResolutionInput(
        block_id=block_id,
        block_width_px=block_width_px,
        cells=normalize_cells(block, max_cell_units),
        block_aspect_ratio=block_aspect,
        max_allowed_height=block.get("maxAllowedHeight"),
    )


def validate_block_for_editor(
    block: dict[str, Any],
    block_width_px: float,
    config: Optional[LayoutEngineConfig] = None,
) -> BlockValidationResult:
    """
    Validate a single editor block.

    Args:
        block: Editor payload with ``blockId``, ``cells`` and optional
            ``blockAspectRatio`` / ``maxAllowedHeight``
        block_width_px: Width of the block in pixels
        config: Engine thresholds, defaults when omitted

    Returns:
        BlockValidationResult with the height resolution and per-cell fit checks
    """
    config = config or LayoutEngineConfig()
    resolver = LayoutConflictResolver(config)
    validator = ElementFitValidator(config)

    resolution_input = build_resolution_input(block, block_width_px, config.max_cell_units)
    resolution = resolver.resolve(resolution_input)
    cap = resolution_input.max_allowed_height or config.max_height_px

    element_validations = validator.validate_cells(
        resolution_input.cells, resolution.height_px, block_width_px, cap
    )

    actions = [a for v in element_validations for a in v.required_actions]
    publish_blocked = False
    publish_block_reason = None

    capacity = UnitWidthAllocator.validate_capacity(
        resolution_input.cells, config.max_block_units
    )
    if resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE:
        publish_blocked = True
        publish_block_reason = resolution.reason
        actions.append(RequiredAction.SPLIT_BLOCK)
    elif not capacity.valid:
        publish_blocked = True
        publish_block_reason = capacity.error
        actions.append(RequiredAction.SPLIT_BLOCK)
    elif RequiredAction.SPLIT_BLOCK in actions:
        publish_blocked = True
        publish_block_reason = "Element requires block split"

    logger.debug(
        f"Block {resolution_input.block_id}: {resolution.height_px}px "
        f"({resolution.priority.name}) - {resolution.reason}"
    )
    if publish_blocked:
        logger.info(f"Block {resolution_input.block_id} blocks publishing: {publish_block_reason}")

    return BlockValidationResult(
        block_id=resolution_input.block_id,
        height_resolution=resolution,
        element_validations=element_validations,
        publish_blocked=publish_blocked,
        publish_block_reason=publish_block_reason,
        required_actions=order_actions(actions),
    )


def validate_blocks_for_editor(
    blocks: list[dict[str, Any]],
    block_width_px: float,
    config: Optional[LayoutEngineConfig] = None,
) -> list[BlockValidationResult]:
    return [validate_block_for_editor(block, block_width_px, config) for block in blocks]


def check_publish_validity(results: list[BlockValidationResult]) -> PublishValidity:
    """A report can be published when no block is blocked"""
    blocked = [
        {"block_id": result.block_id, "reason": result.publish_block_reason or "Structural failure"}
        for result in results
        if result.publish_blocked
    ]
    return PublishValidity(can_publish=not blocked, blocked_blocks=blocked)
