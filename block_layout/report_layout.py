"""
Report layout engine.

Lays out every block of a report: image blocks go through the aspect-ratio
solve, image-free blocks through the configured strategy (the fixed fallback
height or the unit multiplier heuristic). Results can be summarized into a
Polars DataFrame for diagnostics.
"""

import logging
import time
from functools import wraps
from typing import Optional

import polars as pl

from block_layout.aspect_ratio import AspectRatioResolver
from block_layout.block_solver import BlockHeightSolver
from block_layout.height_policy import HeightMultiplierPolicy
from logging_config import log_block_layout
from models import (
    BlockLayoutInput,
    BlockLayoutResult,
    ImageFreeStrategy,
    LayoutEngineConfig,
)

SUMMARY_SCHEMA = {
    "block_id": pl.Utf8,
    "block_height_px": pl.Int64,
    "cell_count": pl.Int64,
    "image_cells": pl.Int64,
    "image_width_px": pl.Float64,
}


def _layout_performance_monitor(func_name: str):
    """Decorator for monitoring ReportLayoutEngine timings"""

    def decorator(func):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            try:
                result = func(self, *args, **kwargs)
                execution_time = time.time() - start_time
                self._performance_metrics.setdefault(func_name, []).append(execution_time)
                self.logger.info(
                    f"ReportLayoutEngine.{func_name} executed in {execution_time:.4f} seconds"
                )
                return result
            except Exception as e:
                execution_time = time.time() - start_time
                self.logger.error(
                    f"ReportLayoutEngine.{func_name} failed after {execution_time:.4f} seconds: {str(e)}"
                )
                raise

        return wrapper

    return decorator


class ReportLayoutEngine:
    """Selects the height path for each block and lays out whole reports"""

    def __init__(self, config: Optional[LayoutEngineConfig] = None):
        self.config = config or LayoutEngineConfig()
        self.solver = BlockHeightSolver(self.config)
        self.policy = HeightMultiplierPolicy(self.config)
        self.logger = logging.getLogger(__name__)
        self._performance_metrics: dict[str, list[float]] = {}

    def _warn_unknown_ratios(self, layout_input: BlockLayoutInput) -> None:
        for cell in layout_input.cells:
            if cell.is_image and not AspectRatioResolver.is_valid(cell.aspect_ratio):
                self.logger.warning(
                    f"Block {layout_input.block_id}: image {cell.chart_id} has aspect ratio "
                    f"{cell.aspect_ratio!r}, using 16:9"
                )

    def layout_block(self, layout_input: BlockLayoutInput) -> BlockLayoutResult:
        self._warn_unknown_ratios(layout_input)
        has_images = any(cell.is_image for cell in layout_input.cells)

        if not has_images and self.config.image_free_strategy is ImageFreeStrategy.MULTIPLIER:
            result = self.policy.solve(layout_input)
            path = "multiplier"
        else:
            result = self.solver.solve(layout_input)
            path = "aspect-ratio" if has_images else "fallback"

        self.logger.debug(
            f"Block {layout_input.block_id}: {result.block_height_px}px via {path} "
            f"({len(layout_input.cells)} cells)"
        )
        log_block_layout(result, self.logger)
        return result

    @_layout_performance_monitor("layout_report")
    def layout_report(self, blocks: list[BlockLayoutInput]) -> list[BlockLayoutResult]:
        return [self.layout_block(block) for block in blocks]

    @staticmethod
    def summarize(
        blocks: list[BlockLayoutInput], results: list[BlockLayoutResult]
    ) -> pl.DataFrame:
        """One row per block with its height and the width taken by images"""
        if len(blocks) != len(results):
            raise ValueError(
                f"Got {len(blocks)} blocks but {len(results)} results to summarize"
            )
        rows = []
        for block, result in zip(blocks, results):
            image_ids = {cell.chart_id for cell in block.cells if cell.is_image}
            image_widths = [cell.width_px for cell in result.cells if cell.chart_id in image_ids]
            rows.append(
                {
                    "block_id": result.block_id,
                    "block_height_px": result.block_height_px,
                    "cell_count": len(result.cells),
                    "image_cells": len(image_widths),
                    "image_width_px": float(sum(image_widths)),
                }
            )
        return pl.DataFrame(rows, schema=SUMMARY_SCHEMA)

    def get_performance_metrics(self) -> dict[str, list[float]]:
        return dict(self._performance_metrics)
