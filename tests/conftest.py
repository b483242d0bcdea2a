"""
Test Configuration and Fixtures for the Block Layout Engine
===========================================================

Central fixtures shared by the layout engine tests:
- engine components built from one LayoutEngineConfig
- a cell factory for concise block construction
- assertion helpers for the invariants every layout result must honor
"""

import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from block_layout import (
    BlockHeightSolver,
    ElementFitValidator,
    HeightMultiplierPolicy,
    LayoutConflictResolver,
    ReportLayoutEngine,
)
from models import (
    AspectRatio,
    BlockLayoutResult,
    BodyType,
    CellConfiguration,
    ContentMetadata,
    ImageMode,
    LayoutEngineConfig,
)

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)

# =============================================================================
# ENGINE FIXTURES
# =============================================================================


@pytest.fixture
def engine_config():
    return LayoutEngineConfig()


@pytest.fixture
def solver(engine_config):
    return BlockHeightSolver(engine_config)


@pytest.fixture
def policy(engine_config):
    return HeightMultiplierPolicy(engine_config)


@pytest.fixture
def validator(engine_config):
    return ElementFitValidator(engine_config)


@pytest.fixture
def resolver(engine_config):
    return LayoutConflictResolver(engine_config)


@pytest.fixture
def report_engine(engine_config):
    return ReportLayoutEngine(engine_config)


# =============================================================================
# CELL FACTORIES
# =============================================================================


def make_cell(chart_id, body_type, width=1, **kwargs):
    """Build a CellConfiguration with short keyword names"""
    metadata = kwargs.pop("metadata", None)
    return CellConfiguration(
        chart_id=chart_id,
        cell_width=width,
        body_type=BodyType(body_type),
        content_metadata=ContentMetadata(**metadata) if metadata else None,
        **kwargs,
    )


def image_cell(chart_id, ratio=AspectRatio.LANDSCAPE, width=1, intrinsic=False, **kwargs):
    return make_cell(
        chart_id,
        "image",
        width,
        aspect_ratio=ratio,
        image_mode=ImageMode.SET_INTRINSIC if intrinsic else None,
        **kwargs,
    )


@pytest.fixture
def cell_factory():
    return make_cell


@pytest.fixture
def image_factory():
    return image_cell


# =============================================================================
# UTILITY FUNCTIONS FOR TESTS
# =============================================================================


def assert_shared_height(result: BlockLayoutResult):
    """Every cell of a block must carry the block height"""
    assert all(cell.height_px == result.block_height_px for cell in result.cells), (
        f"Block {result.block_id} has cells off the shared height {result.block_height_px}: "
        f"{[cell.height_px for cell in result.cells]}"
    )


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest markers for organized test execution."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Tests spanning several components")
    config.addinivalue_line("markers", "scenario: Worked layout scenarios")
    config.addinivalue_line("markers", "edge_case: Edge cases and boundary condition tests")
