"""
Layout Constants for the Block Layout Engine
============================================

This module contains the geometric constants used when sizing report blocks:
spacing on the 8px grid, per-element content geometry used by fit validation,
and the height clamp shared by every height-producing path.

Classes:
    LayoutConfig: 8px grid system and element geometry constants

Usage:
    from block_layout.layout_config import LayoutConfig
    height = LayoutConfig.clamp_height(1066.7, 150, 800)
"""

import math


class LayoutConfig:
    """8px grid system and element geometry constants"""

    # 8px grid system
    SPACING = {
        "xs": 8,  # 0.5rem
        "sm": 16,  # 1rem
    }

    # Body padding of every chart cell: 2 x 8px
    CHART_BODY_PADDING = SPACING["sm"]

    # Bar charts: 2-line label at line-height 1.2, 20px minimum track, 8px row gap
    BAR_LABEL_HEIGHT = 40
    BAR_MIN_TRACK_HEIGHT = 20
    BAR_ROW_SPACING = SPACING["xs"]

    # Pie charts: title and legend take shares of the cell, the pie gets the rest
    PIE_MIN_RADIUS = 50
    PIE_TITLE_SHARE = 0.3
    PIE_LEGEND_SHARE = 0.3
    PIE_LEGEND_SHARE_CROWDED = 0.5
    PIE_CROWDED_LEGEND_ITEMS = 5

    # Tables never show more rows than this without aggregation
    TABLE_MAX_VISIBLE_ROWS = 17

    # Average glyph width relative to font size
    TEXT_CHAR_WIDTH_FACTOR = 0.55

    @staticmethod
    def clamp_height(height: float, min_height: float, max_height: float) -> int:
        """Clamp a raw height into [min_height, max_height] and round to a whole pixel"""
        if math.isnan(height):
            return int(round(min_height))
        final_height = max(min_height, min(height, max_height))
        return int(round(final_height))

    @staticmethod
    def bar_required_height(bar_count: int) -> int:
        """Height needed to show every bar with its label"""
        if bar_count <= 0:
            return 0
        per_row = max(LayoutConfig.BAR_LABEL_HEIGHT, LayoutConfig.BAR_MIN_TRACK_HEIGHT)
        return (
            LayoutConfig.CHART_BODY_PADDING
            + bar_count * per_row
            + (bar_count - 1) * LayoutConfig.BAR_ROW_SPACING
        )

    @staticmethod
    def pie_required_height(legend_item_count: int) -> float:
        """Height needed for a readable pie plus its legend"""
        legend_share = LayoutConfig.PIE_LEGEND_SHARE
        if legend_item_count > LayoutConfig.PIE_CROWDED_LEGEND_ITEMS:
            legend_share = LayoutConfig.PIE_LEGEND_SHARE_CROWDED
        pie_share = 1.0 - LayoutConfig.PIE_TITLE_SHARE - legend_share
        return round((LayoutConfig.PIE_MIN_RADIUS * 2) / pie_share, 6)
