"""Unit tests for viewer value objects."""

import pytest
from sadaam_editor.domain.value_objects.viewer import (
    MAX_SCALE, MIN_SCALE, ViewerTransform, clamp_scale
)


class TestClampScale:

    def test_within_bounds(self):
        assert clamp_scale(2.0) == 2.0

    def test_below_min(self):
        assert clamp_scale(0.1) == MIN_SCALE

    def test_above_max(self):
        assert clamp_scale(9.0) == MAX_SCALE


class TestViewerTransform:

    def test_identity(self):
        transform = ViewerTransform.identity()
        assert transform.is_identity
        assert transform == ViewerTransform(1.0, 0.0, 0.0)

    def test_out_of_range_scale_rejected(self):
        with pytest.raises(ValueError):
            ViewerTransform(scale=0.1)
        with pytest.raises(ValueError):
            ViewerTransform(scale=6.0)

    def test_zoomed_by_keeps_offset(self):
        transform = ViewerTransform(scale=1.0, offset_x=5, offset_y=-3)
        zoomed = transform.zoomed_by(0.5)
        assert zoomed.scale == pytest.approx(1.5)
        assert (zoomed.offset_x, zoomed.offset_y) == (5, -3)
        # Original untouched
        assert transform.scale == 1.0

    def test_zoomed_by_clamps(self):
        assert ViewerTransform(scale=4.8).zoomed_by(0.5).scale == MAX_SCALE
        assert ViewerTransform(scale=0.6).zoomed_by(-0.5).scale == MIN_SCALE

    def test_translated_to(self):
        moved = ViewerTransform(scale=2.0).translated_to(12.5, -4)
        assert moved.scale == 2.0
        assert (moved.offset_x, moved.offset_y) == (12.5, -4)
        assert not moved.is_identity
