"""
Tests for the editor validation API: payload normalization, publish gating
and the ordering of required actions.
"""

import json
import logging
import math

import pytest

from block_layout import (
    check_publish_validity,
    validate_block_for_editor,
    validate_blocks_for_editor,
)
from block_layout.editor_validation import (
    build_resolution_input,
    normalize_body_type,
    normalize_cell_width,
    normalize_cells,
    normalize_intrinsic_height,
)
from models import (
    AspectRatio,
    BodyType,
    HeightResolutionPriority,
    ImageMode,
    LayoutEngineConfig,
    RequiredAction,
)


def editor_block(block_id, *cells, **extra):
    block = {"blockId": block_id, "cells": list(cells)}
    block.update(extra)
    return block


def editor_cell(chart_id, element_type, width=1, **extra):
    cell = {"chartId": chart_id, "elementType": element_type, "width": width}
    cell.update(extra)
    return cell


class TestNormalization:
    @pytest.mark.parametrize(
        "raw,expected",
        [(1, 1), (2, 2), (5, 2), (0, 1), (0.4, 1), (1.6, 2), (-3, 1), (None, 1), ("2", 1), (True, 1), (math.nan, 1)],
    )
    def test_cell_width(self, raw, expected):
        assert normalize_cell_width(raw) == expected

    def test_cell_width_respects_max_units(self):
        assert normalize_cell_width(4, max_units=4) == 4

    def test_known_body_type(self):
        assert normalize_body_type("table") is BodyType.TABLE

    def test_unknown_body_type_becomes_kpi(self, caplog):
        with caplog.at_level(logging.WARNING, logger="block_layout.editor_validation"):
            assert normalize_body_type("gauge") is BodyType.KPI
        assert "gauge" in caplog.text

    def test_cells_read_camel_case_payload(self):
        block = editor_block(
            "b1",
            editor_cell(
                "img",
                "image",
                3,
                aspectRatio="9:16",
                imageMode="setIntrinsic",
                intrinsicHeight=420,
                title="Floor plan",
            ),
            editor_cell("txt", "text", contentMetadata={"charCount": 300, "lineCount": 4}),
        )
        image, text = normalize_cells(block)

        assert image.cell_width == 2
        assert image.aspect_ratio is AspectRatio.PORTRAIT
        assert image.image_mode is ImageMode.SET_INTRINSIC
        assert image.intrinsic_height_px == 420
        assert image.title == "Floor plan"
        assert text.body_type is BodyType.TEXT
        assert text.aspect_ratio is None
        assert text.content_metadata.char_count == 300
        assert text.content_metadata.line_count == 4

    def test_image_inherits_block_aspect_ratio(self):
        block = editor_block(
            "b1", editor_cell("img", "image"), blockAspectRatio={"ratio": "1:1"}
        )
        assert normalize_cells(block)[0].aspect_ratio is AspectRatio.SQUARE

    @pytest.mark.edge_case
    def test_unknown_aspect_ratio_becomes_landscape(self, caplog):
        block = editor_block("b1", editor_cell("img", "image", aspectRatio="4:3"))
        with caplog.at_level(logging.WARNING, logger="block_layout.editor_validation"):
            cells = normalize_cells(block)
        assert cells[0].aspect_ratio is AspectRatio.LANDSCAPE
        assert "4:3" in caplog.text

    def test_unknown_image_mode_is_ignored(self):
        block = editor_block("b1", editor_cell("img", "image", imageMode="stretch"))
        assert normalize_cells(block)[0].image_mode is None

    def test_resolution_input(self):
        block = editor_block(
            "b7",
            editor_cell("kpi", "kpi"),
            blockAspectRatio={"ratio": "16:9", "isSoftConstraint": False},
            maxAllowedHeight=600,
        )
        resolution_input = build_resolution_input(block, 1000)

        assert resolution_input.block_id == "b7"
        assert resolution_input.block_width_px == 1000
        assert resolution_input.block_aspect_ratio.ratio is AspectRatio.LANDSCAPE
        assert resolution_input.block_aspect_ratio.is_soft_constraint is False
        assert resolution_input.max_allowed_height == 600


class TestValidateBlock:
    def test_simple_block_can_publish(self):
        result = validate_block_for_editor(editor_block("b1", editor_cell("kpi", "kpi")), 1200)

        assert result.block_id == "b1"
        assert result.height_resolution.height_px == 360
        assert result.publish_blocked is False
        assert result.publish_block_reason is None
        assert result.required_actions == []
        assert [v.fits for v in result.element_validations] == [True]

    def test_image_block_height(self):
        block = editor_block(
            "b1",
            editor_cell("img", "image", 2, aspectRatio="16:9"),
            editor_cell("kpi", "kpi"),
        )
        result = validate_block_for_editor(block, 1200)
        assert result.height_resolution.height_px == 450
        assert not result.publish_blocked

    @pytest.mark.scenario
    def test_intrinsic_image_payload(self):
        block = editor_block(
            "b1",
            editor_cell("img", "image", imageMode="setIntrinsic", intrinsicHeight=500),
            blockAspectRatio={"ratio": "16:9", "isSoftConstraint": True},
        )
        result = validate_block_for_editor(block, 533)

        assert result.height_resolution.priority is HeightResolutionPriority.INTRINSIC_MEDIA
        assert result.height_resolution.height_px == 500

    def test_structural_failure_blocks_publishing(self):
        block = editor_block("big", editor_cell("bars", "bar", contentMetadata={"barCount": 20}))
        result = validate_block_for_editor(block, 1200)

        assert result.height_resolution.priority is HeightResolutionPriority.STRUCTURAL_FAILURE
        assert result.publish_blocked is True
        assert result.publish_block_reason == result.height_resolution.reason
        assert result.required_actions == [
            RequiredAction.REFLOW,
            RequiredAction.AGGREGATE,
            RequiredAction.INCREASE_HEIGHT,
            RequiredAction.SPLIT_BLOCK,
        ]

    def test_block_max_height_is_honored(self):
        block = editor_block("b1", editor_cell("pie", "pie"), maxAllowedHeight=200)
        result = validate_block_for_editor(block, 1200)

        assert result.height_resolution.height_px == 200
        assert result.publish_blocked is True

    def test_capacity_exceeded_blocks_publishing(self):
        block = editor_block(
            "wide",
            editor_cell("a", "kpi", 2),
            editor_cell("b", "kpi", 2),
            editor_cell("c", "kpi", 2),
        )
        result = validate_block_for_editor(block, 1200)

        assert result.publish_blocked is True
        assert "exceeds maximum (4 units)" in result.publish_block_reason
        assert result.required_actions == [RequiredAction.SPLIT_BLOCK]

    def test_aggregation_does_not_block_publishing(self):
        block = editor_block("tbl", editor_cell("rows", "table", contentMetadata={"rowCount": 40}))
        result = validate_block_for_editor(block, 1200)

        assert result.publish_blocked is False
        assert result.required_actions == [RequiredAction.AGGREGATE]

    def test_custom_config(self):
        block = editor_block("big", editor_cell("bars", "bar", contentMetadata={"barCount": 20}))
        result = validate_block_for_editor(block, 1200, LayoutEngineConfig(max_height_px=1000))

        assert result.height_resolution.height_px == 968
        assert result.publish_blocked is False

    @pytest.mark.edge_case
    def test_empty_block(self):
        result = validate_block_for_editor(editor_block("empty"), 1200)
        assert result.element_validations == []
        assert result.publish_blocked is False


class TestPublishValidity:
    @pytest.fixture
    def blocks(self):
        return [
            editor_block("ok", editor_cell("kpi", "kpi")),
            editor_block("big", editor_cell("bars", "bar", contentMetadata={"barCount": 20})),
            editor_block("img", editor_cell("img", "image", aspectRatio="1:1")),
        ]

    def test_validates_every_block_in_order(self, blocks):
        results = validate_blocks_for_editor(blocks, 1200)
        assert [r.block_id for r in results] == ["ok", "big", "img"]

    def test_blocked_blocks_are_listed(self, blocks):
        validity = check_publish_validity(validate_blocks_for_editor(blocks, 1200))

        assert validity.can_publish is False
        assert [b["block_id"] for b in validity.blocked_blocks] == ["big"]
        assert "split" in validity.blocked_blocks[0]["reason"]

    def test_clean_report_can_publish(self):
        results = validate_blocks_for_editor([editor_block("ok", editor_cell("kpi", "kpi"))], 1200)
        validity = check_publish_validity(results)
        assert validity.can_publish is True
        assert validity.blocked_blocks == []

    def test_empty_report_can_publish(self):
        assert check_publish_validity([]).can_publish is True


class TestMalformedPayloads:
    @pytest.mark.parametrize("raw,expected", [(420, 420.0), (12.5, 12.5), ("500px", None), (None, None), (True, None), (0, None), (-20, None), (math.inf, None)])
    def test_intrinsic_height(self, raw, expected):
        assert normalize_intrinsic_height(raw) == expected

    @pytest.mark.edge_case
    def test_string_intrinsic_height_uses_image_geometry(self, caplog):
        block = editor_block(
            "b1",
            editor_cell("img", "image", aspectRatio="16:9", imageMode="setIntrinsic", intrinsicHeight="500px"),
        )
        with caplog.at_level(logging.WARNING, logger="block_layout.editor_validation"):
            result = validate_block_for_editor(block, 1200)

        assert result.height_resolution.priority is HeightResolutionPriority.INTRINSIC_MEDIA
        assert result.height_resolution.height_px == 675
        assert "500px" in caplog.text

    @pytest.mark.edge_case
    def test_non_finite_content_counts_from_json(self):
        payload = (
            '{"blockId": "b1", "cells": [{"chartId": "txt", "elementType": "text", '
            '"width": 1, "contentMetadata": {"charCount": NaN, "lineCount": 2}}]}'
        )
        result = validate_block_for_editor(json.loads(payload), 1200)

        assert result.publish_blocked is False
        assert [v.fits for v in result.element_validations] == [True]
