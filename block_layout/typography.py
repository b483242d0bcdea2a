"""
Typography System for the Block Layout Engine
=============================================

Font sizes and line heights used to size text inside report blocks, plus the
title/subtitle pair every block shares.

Classes:
    TypographySystem: Font scale, line heights and synced block fonts

Usage:
    from block_layout.typography import TypographySystem
    fonts = TypographySystem.get_synced_fonts()
"""

from models import SyncedFonts


class TypographySystem:
    """Font scale with proper hierarchy"""

    # Typography scale (px)
    SCALE = {
        "sm": 14,  # 0.875rem
        "lg": 18,  # 1.125rem
    }

    # Titles use tight leading, body text a slightly looser one
    LINE_HEIGHTS = {"tight": 1.2, "text": 1.3}

    @staticmethod
    def get_synced_fonts(title: str = "lg", subtitle: str = "sm") -> SyncedFonts:
        """Title/subtitle sizes shared by every cell of a block"""
        return SyncedFonts(
            title_px=TypographySystem.SCALE[title],
            subtitle_px=TypographySystem.SCALE[subtitle],
        )
