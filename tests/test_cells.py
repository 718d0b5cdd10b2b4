"""
Tests for the cell models: identity, content payloads, animations and
serialization.
"""

import pytest

from gridforge.cells import (
    AnimationKind,
    BaseCell,
    CellAnimation,
    ContentCell,
    ContentKind,
    EmptyContent,
    FillContent,
    MediaContent,
    TextBlockContent,
    TextLineCell,
    cell_from_dict,
    content_from_dict,
    get_cell_class,
    text_content_id,
)
from gridforge.geometry import Point, Rect
from gridforge.layers import LayerId


class TestTextLineCell:
    """Tests for text-line cells."""

    def test_create(self):
        """Text cell stores text, line index and position."""
        cell = TextLineCell.create('HELLO', 0, 1, 2)
        assert cell.text == 'HELLO'
        assert cell.line_index == 0
        assert (cell.row, cell.col) == (1, 2)
        assert cell.is_text_line()
        assert not cell.is_content()
        assert cell.layer == LayerId.TEXT

    def test_content_id_is_derived_from_text(self):
        """Same text and line index give the same id."""
        a = TextLineCell.create('HELLO', 0, 0, 0)
        b = TextLineCell.create('HELLO', 0, 3, 1)
        c = TextLineCell.create('WORLD', 0, 0, 0)
        assert a.content_id == b.content_id == text_content_id(0, 'HELLO')
        assert a.content_id != c.content_id
        assert a.content_id.startswith('text-0-')

    def test_content_id_depends_on_line_index(self):
        """Repeated text on different lines gets different ids."""
        assert text_content_id(0, 'LA') != text_content_id(1, 'LA')

    def test_set_text_recomputes_id(self):
        """Changing the text changes the identity."""
        cell = TextLineCell.create('B', 1, 0, 0)
        old_id = cell.content_id
        new_id = cell.set_text('B2')
        assert new_id != old_id
        assert cell.content_id == new_id == text_content_id(1, 'B2')

    def test_is_empty(self):
        """Blank text lines are empty."""
        assert TextLineCell.create('  ', 0, 0, 0).is_empty()
        assert not TextLineCell.create('X', 0, 0, 0).is_empty()

    def test_update_style(self):
        """Style accepts snake_case and camelCase names."""
        cell = TextLineCell.create('X', 0, 0, 0)
        cell.update_style(font_size=72, color='#ff0000', fontFamily='Impact', unknown=1)
        assert cell.style.font_size == 72
        assert cell.style.color == '#ff0000'
        assert cell.style.font_family == 'Impact'

    def test_alignment(self):
        cell = TextLineCell.create('X', 0, 0, 0)
        cell.update_style(alignment='right')
        assert cell.alignment == 'right'


class TestContentCell:
    """Tests for content cells."""

    def test_create_empty(self):
        """New content cells are empty and get a random id."""
        a = ContentCell.create(row=0, col=1)
        b = ContentCell.create(row=0, col=1)
        assert a.is_empty()
        assert a.content_kind == ContentKind.EMPTY
        assert a.content_id and b.content_id and a.content_id != b.content_id
        assert a.layer == LayerId.BEHIND_TEXT

    def test_default_layer_is_a_string(self):
        """Default layers read as plain values, like assigned ones."""
        assert type(ContentCell.create().layer) is str
        assert ContentCell.create().to_api_dict()['layer'] == 'behind-text'
        text = TextLineCell.create('A', 0, 0, 0)
        assert type(text.layer) is str
        assert text.layer == 'text'

    def test_create_with_kind(self):
        cell = ContentCell.create('fill', 2, 0)
        assert cell.is_fill()
        assert not cell.is_empty()

    def test_content_id_is_stable(self):
        """Changing the payload keeps the id."""
        cell = ContentCell.create()
        content_id = cell.content_id
        cell.set_content(MediaContent(ref='asset-1'))
        cell.set_content_type('text')
        cell.clear_content()
        assert cell.content_id == content_id

    def test_set_content_from_dict(self):
        """Payload dicts dispatch on kind."""
        cell = ContentCell.create()
        cell.set_content({'kind': 'media', 'ref': 'x', 'scale': 0.5})
        assert isinstance(cell.content, MediaContent)
        assert cell.has_media()
        assert cell.content.scale == 0.5

    def test_unresolved_media_is_occupied(self):
        """A media placeholder without ref still occupies the cell."""
        cell = ContentCell.create('media')
        assert not cell.is_empty()
        assert not cell.has_media()
        assert not cell.content.is_resolved()

    def test_text_block(self):
        cell = ContentCell.create()
        cell.set_content(TextBlockContent(text='Sale'))
        assert cell.has_text()
        assert cell.content.style.font_size == 'auto'

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            ContentCell.create('hologram')

    def test_content_from_dict(self):
        assert isinstance(content_from_dict(None), EmptyContent)
        assert isinstance(content_from_dict({'kind': 'fill'}), FillContent)


class TestCellGeometry:
    """Tests for spatial helpers shared by all cells."""

    def test_spatial_helpers(self):
        cell = ContentCell.create(bounds=Rect(x=50, y=50, width=100, height=50))
        assert cell.center() == Point(x=100, y=75)
        assert cell.area() == 5000
        assert cell.aspect_ratio() == 2.0
        assert cell.contains(60, 60)
        assert not cell.contains(10, 10)

    def test_original_bounds(self):
        """Reset returns to the saved rest position and stops animation."""
        cell = ContentCell.create(bounds=Rect(x=0, y=0, width=10, height=10))
        cell.save_original_bounds()
        cell.set_animation('bounce').play()
        cell.bounds = Rect(x=5, y=5, width=10, height=10)
        cell.reset_to_original()
        assert cell.bounds == Rect(x=0, y=0, width=10, height=10)
        assert not cell.animation.is_playing


class TestCellAnimation:
    """Tests for animation records."""

    def test_set_animation_defaults(self):
        """Unspecified values come from settings."""
        cell = TextLineCell.create('X', 0, 0, 0)
        animation = cell.set_animation('pulse')
        assert cell.has_animation()
        assert animation.kind == AnimationKind.PULSE
        assert animation.intensity == 20.0
        assert animation.speed == 1.0
        assert not animation.is_playing

    def test_set_animation_replaces(self):
        cell = TextLineCell.create('X', 0, 0, 0)
        first = cell.set_animation('sway')
        second = cell.set_animation('rotate', intensity=5, speed=2)
        assert cell.animation is second
        assert first is not second
        assert second.intensity == 5

    def test_unknown_kind(self):
        cell = TextLineCell.create('X', 0, 0, 0)
        with pytest.raises(ValueError):
            cell.set_animation('wobble')

    def test_play_pause_and_config(self):
        animation = CellAnimation()
        animation.play()
        assert animation.get_status()['isPlaying']
        animation.pause()
        assert not animation.is_playing
        animation.update_config(kind='bounce', speed=3)
        assert animation.kind == 'bounce'
        assert animation.speed == 3
        assert animation.intensity == 20.0

    def test_remove_animation(self):
        cell = ContentCell.create()
        cell.set_animation()
        cell.remove_animation()
        assert not cell.has_animation()

    def test_serialization_uses_aliases(self):
        data = CellAnimation(kind='rotate', is_playing=True).to_api_dict()
        assert data == {'type': 'rotate', 'intensity': 20.0, 'speed': 1.0, 'isPlaying': True}
        assert CellAnimation.from_api_dict(data).is_playing

    def test_default_kind_is_a_string(self):
        """The default kind reads as its plain value, like an assigned one."""
        animation = CellAnimation()
        assert animation.get_status()['type'] == 'sway'
        assert type(animation.kind) is str
        assert type(ContentCell.create().set_animation().kind) is str


class TestCellSerialization:
    """Tests for serialize/deserialize."""

    def test_text_cell_round_trip(self):
        """All fields survive, including the animation."""
        cell = TextLineCell.create('HELLO', 2, 1, 0, bounds=Rect(x=1, y=2, width=3, height=4))
        cell.display_id = 4
        cell.save_original_bounds()
        cell.set_animation('bounce', intensity=7).play()

        restored = BaseCell.deserialize(cell.serialize())
        assert isinstance(restored, TextLineCell)
        assert restored.model_dump() == cell.model_dump()

    def test_content_cell_round_trip(self):
        cell = ContentCell.create(row=1, col=1, bounds=Rect(x=5, y=5, width=50, height=50))
        cell.set_content(MediaContent(ref='asset-9', scale=1.5))
        data = cell.to_api_dict()
        assert data['type'] == 'content'
        assert data['contentId'] == cell.content_id
        assert data['content']['kind'] == 'media'
        assert data['_version'] == 1

        restored = cell_from_dict(data)
        assert isinstance(restored, ContentCell)
        assert restored.content_id == cell.content_id
        assert restored.content == cell.content

    def test_stored_text_id_is_kept(self):
        """A saved content id is not re-derived on load."""
        data = TextLineCell.create('A', 0, 0, 0).to_api_dict()
        data['contentId'] = 'text-legacy'
        assert cell_from_dict(data).content_id == 'text-legacy'

    def test_legacy_records(self):
        """Old type, layer and contentType names are migrated."""
        text = cell_from_dict({'type': 'main-text', 'text': 'A', 'layer': 'main-text', 'id': 3})
        assert isinstance(text, TextLineCell)
        assert text.layer == LayerId.TEXT
        assert text.display_id == 3

        content = cell_from_dict({
            'type': 'spot',
            'contentType': 'image',
            'content': {'ref': 'legacy.png'},
            'layer': 'above-main-text',
        })
        assert isinstance(content, ContentCell)
        assert isinstance(content.content, MediaContent)
        assert content.content.ref == 'legacy.png'
        assert content.layer == LayerId.ABOVE_TEXT

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            get_cell_class('hexagon')
        with pytest.raises(ValueError):
            cell_from_dict({'type': 'hexagon'})
