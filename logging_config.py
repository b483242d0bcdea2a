"""
Logging configuration for the block layout engine
Provides console and file logging for tracing height decisions
"""

import logging
import sys
from pathlib import Path

LAYOUT_LOGGERS = (
    "block_layout.report_layout",
    "block_layout.editor_validation",
)


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for better readability"""

    # Color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def format(self, record):
        # Color a copy so file handlers sharing the record keep the plain level name
        record = logging.makeLogRecord(record.__dict__)
        level_color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        record.levelname = f"{level_color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_enhanced_logging(
    level: str = "INFO",
    enable_file_logging: bool = False,
    enable_layout_debug: bool = False,
    log_file_path: str = "block_layout.log",
):
    """
    Setup logging configuration

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_file_logging: Whether to log to file
        enable_layout_debug: Whether to log every block height decision
        log_file_path: Path to log file
    """

    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    # Console handler with colors
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(
        ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logger.addHandler(console_handler)

    if enable_file_logging:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)-20s:%(lineno)-4d | %(funcName)-20s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)
        logger.info(f"📝 Log file: {log_path.absolute()}")

    if enable_layout_debug:
        for name in LAYOUT_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)
        console_handler.setLevel(min(numeric_level, logging.DEBUG))
        logger.setLevel(min(numeric_level, logging.DEBUG))
        logger.info("🔍 Block layout debugging enabled")

    return logger


def log_block_layout(result, logger=None):
    """
    Log a BlockLayoutResult cell by cell for debugging

    Args:
        result: BlockLayoutResult to describe
        logger: Logger instance (if None, uses this module's logger)
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    logger.debug(f"📐 Block {result.block_id}: height {result.block_height_px}px")
    for cell in result.cells:
        logger.debug(f"   {cell.chart_id}: {cell.width_px:.1f} x {cell.height_px}px")


def quick_debug_setup():
    """Quick setup for tracing layout decisions"""
    return setup_enhanced_logging(level="DEBUG", enable_layout_debug=True)
