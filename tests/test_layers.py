"""
Tests for the layer registry.
"""

import pytest

from gridforge.cells import ContentCell, TextLineCell
from gridforge.exceptions import LayerError
from gridforge.layers import LAYER_ORDER, LayerId, LayerRegistry


@pytest.fixture
def registry():
    return LayerRegistry()


class TestLayerRegistry:
    """Tests for layer assignment and ordering."""

    def test_default_layers(self, registry):
        """Four layers in fixed order."""
        layers = registry.get_layers()
        assert [layer.id for layer in layers] == [
            LayerId.BACKGROUND, LayerId.BEHIND_TEXT, LayerId.TEXT, LayerId.ABOVE_TEXT,
        ]
        assert [layer.order for layer in layers] == [0, 1, 2, 3]
        assert LAYER_ORDER['text'] == 2

    def test_default_assignment(self, registry):
        """Text lines go to 'text', content cells to 'behind-text'."""
        text = TextLineCell.create('A', 0, 0, 0)
        content = ContentCell.create()
        assert registry.assign_default(text).id == LayerId.TEXT
        assert registry.assign_default(content).id == LayerId.BEHIND_TEXT
        assert LayerRegistry.default_layer_for(text) == LayerId.TEXT
        assert LayerRegistry.default_layer_for(content) == LayerId.BEHIND_TEXT

    def test_assign_is_a_move(self, registry):
        """A cell belongs to one layer at a time."""
        cell = ContentCell.create()
        registry.assign(cell, 'behind-text')
        registry.assign(cell, LayerId.ABOVE_TEXT)

        assert registry.layer_of(cell).id == LayerId.ABOVE_TEXT
        assert cell.layer == 'above-text'
        assert registry.get_layer('behind-text').get_cell_count() == 0
        assert registry.get_layer('above-text').get_cell_count() == 1

    def test_assign_same_layer_twice(self, registry):
        cell = ContentCell.create()
        registry.assign(cell, 'background')
        registry.assign(cell, 'background')
        assert len(registry.get_layer('background')) == 1

    def test_equal_cells_are_distinct_members(self, registry):
        """Membership is by object, not by field equality."""
        a = ContentCell.create(content_id='same')
        b = ContentCell.create(content_id='same')
        registry.assign(a, 'text')
        registry.assign(b, 'text')
        assert registry.get_layer('text').get_cell_count() == 2

    def test_unknown_layer(self, registry):
        with pytest.raises(LayerError):
            registry.assign(ContentCell.create(), 'foreground')
        with pytest.raises(LayerError):
            registry.get_layer('foreground')

    def test_cells_in_order(self, registry):
        """Sorted by layer order, then insertion order."""
        above = ContentCell.create()
        text = TextLineCell.create('A', 0, 0, 0)
        behind_1 = ContentCell.create()
        behind_2 = ContentCell.create()
        registry.assign(above, 'above-text')
        registry.assign(text, 'text')
        registry.assign(behind_1, 'behind-text')
        registry.assign(behind_2, 'behind-text')

        ordered = registry.cells_in_order()
        assert [id(cell) for cell in ordered] == [id(behind_1), id(behind_2), id(text), id(above)]

    def test_hidden_layers_are_skipped(self, registry):
        text = TextLineCell.create('A', 0, 0, 0)
        content = ContentCell.create()
        registry.assign_default(text)
        registry.assign_default(content)

        registry.set_visible('text', False)
        assert not registry.is_visible('text')
        assert [id(cell) for cell in registry.cells_in_order()] == [id(content)]
        # Hidden cells keep their membership
        assert registry.layer_of(text).id == LayerId.TEXT

    def test_remove(self, registry):
        cell = ContentCell.create()
        registry.assign_default(cell)
        assert registry.remove(cell)
        assert not registry.remove(cell)
        assert registry.layer_of(cell) is None

    def test_clear_keeps_visibility(self, registry):
        registry.assign_default(ContentCell.create())
        registry.set_visible('behind-text', False)
        registry.clear()
        assert registry.get_layer('behind-text').get_cell_count() == 0
        assert not registry.is_visible('behind-text')

        registry.reset()
        assert registry.is_visible('behind-text')

    def test_layer_stats(self, registry):
        registry.assign_default(TextLineCell.create('A', 0, 0, 0))
        stats = registry.get_layer_stats()
        assert stats['text'] == {'name': 'Text', 'order': 2, 'visible': True, 'cellCount': 1}
        assert stats['background']['cellCount'] == 0
