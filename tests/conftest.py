"""
Pytest fixtures for GridForge tests
"""

import pytest

from gridforge import CanvasSize, Grid


def text_region(text: str, line_index: int, x: float, y: float, width: float = 200,
                height: float = 60) -> dict:
    """Raw detector record for a text line."""
    return {
        'type': 'text',
        'text': text,
        'lineIndex': line_index,
        'bounds': {'x': x, 'y': y, 'width': width, 'height': height},
    }


def region(x: float, y: float, width: float = 100, height: float = 100) -> dict:
    """Raw detector record for an open area."""
    return {'type': 'region', 'bounds': {'x': x, 'y': y, 'width': width, 'height': height}}


def layout(*rows: list) -> dict:
    """Detector output for the given rows. Columns are the longest row."""
    return {
        'rows': len(rows),
        'cols': max((len(row) for row in rows), default=0),
        'matrix': [list(row) for row in rows],
    }


class ScriptedDetector:
    """
    Detector returning prepared layouts.

    Each detect() call returns the current `result`; the arguments are
    recorded in `calls`.
    """

    def __init__(self, result=None):
        self.result = result if result is not None else layout()
        self.calls = []

    def detect(self, canvas_size, text_line_bounds, padding):
        self.calls.append((canvas_size, list(text_line_bounds), padding))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def canvas_size() -> CanvasSize:
    return CanvasSize(width=1080, height=1350)


@pytest.fixture
def detector() -> ScriptedDetector:
    """
    Detector with a small mixed layout.
    :return: Detector producing 3 text lines and 2 open areas
    """
    return ScriptedDetector(layout(
        [text_region('A', 0, 100, 0)],
        [region(50, 50), text_region('B', 1, 300, 70)],
        [text_region('C', 2, 100, 300), region(400, 400)],
    ))


@pytest.fixture
def grid(detector, canvas_size) -> Grid:
    """Grid built from the mixed layout."""
    g = Grid(detector, lambda: canvas_size)
    assert g.build()
    return g
