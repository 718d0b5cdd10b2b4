"""
Tests for geometry primitives.
"""

import math

import pytest

from gridforge.geometry import CanvasSize, Padding, Point, Rect, calculate_distance


class TestRect:
    """Tests for Rect."""

    def test_rect_properties(self):
        """Rect computed properties work."""
        rect = Rect(x=10, y=20, width=50, height=30)
        assert rect.x2 == 60
        assert rect.y2 == 50
        assert rect.center == Point(x=35, y=35)
        assert rect.area == 1500

    def test_aspect_ratio(self):
        """Aspect ratio is width / height, 0 for zero height."""
        assert Rect(width=200, height=100).aspect_ratio == 2.0
        assert Rect(width=200, height=0).aspect_ratio == 0.0

    def test_contains_is_edge_inclusive(self):
        """Points on the border are inside."""
        rect = Rect(x=0, y=0, width=10, height=10)
        assert rect.contains(0, 0)
        assert rect.contains(10, 10)
        assert rect.contains(5, 5)
        assert not rect.contains(10.1, 5)
        assert not rect.contains(-1, 5)

    def test_is_valid(self):
        """Negative or non-finite values are invalid."""
        assert Rect(x=-5, y=-5, width=10, height=10).is_valid()
        assert Rect(width=0, height=0).is_valid()
        assert not Rect(width=-1, height=10).is_valid()
        assert not Rect(width=10, height=math.inf).is_valid()
        assert not Rect(x=math.nan, width=10, height=10).is_valid()

    def test_to_int_tuple(self):
        """Rect converts to int tuple."""
        rect = Rect(x=10.5, y=20.7, width=50.2, height=30.9)
        assert rect.to_int_tuple() == (10, 20, 50, 30)

    def test_from_dict(self):
        """Rect validates from plain dicts."""
        rect = Rect.model_validate({'x': 1, 'y': 2, 'width': 3, 'height': 4})
        assert rect.model_dump() == {'x': 1.0, 'y': 2.0, 'width': 3.0, 'height': 4.0}


class TestPoints:
    """Tests for points and distances."""

    def test_distance(self):
        """Distance is Euclidean."""
        assert calculate_distance(Point(x=0, y=0), Point(x=3, y=4)) == pytest.approx(5.0)
        assert calculate_distance(Point(x=100, y=100), Point(x=105, y=95)) == pytest.approx(math.sqrt(50))

    def test_as_tuple(self):
        assert Point(x=1.5, y=2).as_tuple() == (1.5, 2.0)

    def test_defaults(self):
        """Canvas size and padding default to zero."""
        assert CanvasSize().width == 0
        assert Padding().model_dump() == {'top': 0, 'bottom': 0, 'left': 0, 'right': 0}
