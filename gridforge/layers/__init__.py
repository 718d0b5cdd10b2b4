"""
Layer Registry

Fixed-order compositing layers for grid cells:

    background (0) < behind-text (1) < text (2) < above-text (3)

Text-line cells default to 'text', content cells to 'behind-text'.
"""

from .layer import LAYER_NAMES, LAYER_ORDER, Layer, LayerId
from .registry import LayerRegistry

__all__ = [
    'Layer',
    'LayerId',
    'LayerRegistry',
    'LAYER_NAMES',
    'LAYER_ORDER',
]
