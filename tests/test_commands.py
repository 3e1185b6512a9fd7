"""
Tests for the individual commands, executed directly without a manager.
"""

import pytest

from atlas_plotter.commands import (
    AddColliderCommand,
    AddSpriteCommand,
    CompositeCommand,
    ModifySpritePropertyCommand,
    RemoveColliderCommand,
    RemoveSpriteCommand,
)
from atlas_plotter.sprite_data import Collider, SpriteProperty


class TestAddSpriteCommand:
    def test_execute_undo_redo(self, collection):
        command = AddSpriteCommand(collection)

        command.execute()
        sprite = command.added_sprite
        color = collection.get_item_color(sprite.id)
        assert collection.items == (sprite,)
        assert collection.selected_item is sprite

        command.undo()
        assert collection.items == ()
        assert collection.selected_item is None

        command.redo()
        assert collection.items == (sprite,)
        assert collection.selected_item is sprite
        assert collection.get_item_color(sprite.id) == color

    def test_redo_appends(self, collection, make_sprite):
        first = make_sprite(1)
        collection.add_existing_item_internal(first)
        command = AddSpriteCommand(collection)
        command.execute()
        command.undo()
        later = make_sprite(2)
        collection.add_existing_item_internal(later)

        command.redo()

        assert collection.items == (first, later, command.added_sprite)

    def test_undo_before_execute_is_noop(self, collection):
        command = AddSpriteCommand(collection)
        command.undo()
        command.redo()
        assert collection.items == ()

    def test_publishes_events(self, collection, events):
        added, removed = [], []
        events.sprite_added.connect(lambda sprite: added.append(sprite))
        events.sprite_removed.connect(lambda sprite: removed.append(sprite))
        command = AddSpriteCommand(collection, events)

        command.execute()
        command.undo()
        command.redo()

        sprite = command.added_sprite
        assert added == [sprite, sprite]
        assert removed == [sprite]

    def test_name(self, collection):
        assert AddSpriteCommand(collection).name == "Add Sprite"


class TestRemoveSpriteCommand:
    def test_undo_restores_original_index(self, collection, make_sprite):
        a, b, c = make_sprite(1, "a"), make_sprite(2, "b"), make_sprite(3, "c")
        for sprite in (a, b, c):
            collection.add_existing_item_internal(sprite)
        command = RemoveSpriteCommand(collection, b)

        command.execute()
        assert collection.items == (a, c)

        command.undo()
        assert collection.items == (a, b, c)

    def test_captures_state_at_construction(self, collection, make_sprite):
        a, b = make_sprite(1), make_sprite(2)
        collection.add_existing_item_internal(a)
        collection.add_existing_item_internal(b)
        collection.selected_item = a

        command = RemoveSpriteCommand(collection, a)

        assert command.original_index == 0
        assert command.previous_selection_id == a.id

    def test_undo_reselects_previous_selection(self, collection, make_sprite):
        a, b = make_sprite(1), make_sprite(2)
        collection.add_existing_item_internal(a)
        collection.add_existing_item_internal(b)
        collection.selected_item = a
        command = RemoveSpriteCommand(collection, a)

        command.execute()
        assert collection.selected_item is b

        command.undo()
        assert collection.selected_item is a

    def test_redo_removes_again(self, collection, make_sprite, events):
        a = make_sprite(1)
        collection.add_existing_item_internal(a)
        removed = []
        events.sprite_removed.connect(lambda sprite: removed.append(sprite))
        command = RemoveSpriteCommand(collection, a, events)

        command.execute()
        command.undo()
        command.redo()

        assert collection.items == ()
        assert removed == [a, a]

    def test_stale_index_falls_back_to_append(self, collection, make_sprite):
        a, b, c = make_sprite(1), make_sprite(2), make_sprite(3)
        for sprite in (a, b, c):
            collection.add_existing_item_internal(sprite)
        command = RemoveSpriteCommand(collection, c)
        command.execute()
        collection.remove_item_internal(a)
        collection.remove_item_internal(b)

        command.undo()

        assert collection.items == (c,)

    def test_name_uses_sprite_name(self, collection, make_sprite):
        sprite = make_sprite(1, "rock_01")
        collection.add_existing_item_internal(sprite)
        assert RemoveSpriteCommand(collection, sprite).name == "Remove Sprite 'rock_01'"


class TestModifySpritePropertyCommand:
    def test_source_x_round_trip(self, make_sprite):
        sprite = make_sprite(1)
        sprite.source.x = 5
        command = ModifySpritePropertyCommand(sprite, "source.x", 5, 20)

        command.execute()
        assert sprite.source.x == 20

        command.undo()
        assert sprite.source.x == 5

        command.redo()
        assert sprite.source.x == 20

    def test_top_level_field(self, make_sprite):
        sprite = make_sprite(1, "old")
        command = ModifySpritePropertyCommand(sprite, SpriteProperty.NAME, "old", "new")

        command.execute()
        assert sprite.name == "new"
        command.undo()
        assert sprite.name == "old"

    def test_unknown_path_rejected_at_construction(self, make_sprite):
        with pytest.raises(ValueError):
            ModifySpritePropertyCommand(make_sprite(1), "source.depth", 0, 1)

    def test_publishes_modified_event(self, make_sprite, events):
        sprite = make_sprite(1)
        seen = []
        events.sprite_modified.connect(lambda target, path: seen.append((target, path)))
        command = ModifySpritePropertyCommand(sprite, SpriteProperty.BREAKING_FRAME_DURATION, 0, 90, events)

        command.execute()
        command.undo()

        assert seen == [(sprite, "breaking_animation.frame_duration")] * 2
        assert sprite.breaking_animation.frame_duration == 0

    def test_name(self, make_sprite):
        command = ModifySpritePropertyCommand(make_sprite(1, "rock"), "Source.Width", 16, 32)
        assert command.name == "Modify Sprite 'rock' source.width"


class TestCompositeCommand:
    def test_undo_runs_steps_in_reverse(self, make_sprite):
        sprite = make_sprite(1)
        sprite.source.x = 5
        command = CompositeCommand(
            "Nudge twice",
            [
                ModifySpritePropertyCommand(sprite, "source.x", 5, 6),
                ModifySpritePropertyCommand(sprite, "source.x", 6, 7),
            ],
        )

        command.execute()
        assert sprite.source.x == 7
        command.undo()
        assert sprite.source.x == 5
        command.redo()
        assert sprite.source.x == 7
        assert command.name == "Nudge twice"


class TestAddColliderCommand:
    def test_execute_undo_redo(self, make_sprite):
        sprite = make_sprite(1)
        existing = list(sprite.colliders)
        collider = Collider("rectangle", 0, 0, 8, 8)
        command = AddColliderCommand(sprite, collider)

        command.execute()
        assert sprite.colliders == existing + [collider]

        command.undo()
        assert sprite.colliders == existing

        command.redo()
        assert sprite.colliders[-1] is collider

    def test_undo_removes_by_identity(self, make_sprite):
        sprite = make_sprite(1)
        twin = Collider("rectangle", 0, 0, 8, 8)
        sprite.colliders.append(twin)
        collider = Collider("rectangle", 0, 0, 8, 8)
        command = AddColliderCommand(sprite, collider)

        command.execute()
        command.undo()

        assert sprite.colliders[-1] is twin

    def test_undo_of_missing_collider_is_noop(self, make_sprite):
        sprite = make_sprite(1)
        command = AddColliderCommand(sprite, Collider())
        command.undo()
        assert len(sprite.colliders) == 1

    def test_notifies_sprite_observers(self, make_sprite, events):
        sprite = make_sprite(1)
        paths, added = [], []
        sprite.subscribe(lambda record, path: paths.append(path))
        events.collider_added.connect(lambda target, collider: added.append(collider))
        collider = Collider()

        AddColliderCommand(sprite, collider, events).execute()

        assert paths == ["colliders"]
        assert added == [collider]

    def test_name(self, make_sprite):
        assert AddColliderCommand(make_sprite(1, "rock"), Collider()).name == "Add Collider to 'rock'"


class TestRemoveColliderCommand:
    def test_undo_restores_position(self, make_sprite):
        sprite = make_sprite(1)
        middle = Collider("rectangle", 1, 1, 1, 1)
        last = Collider("rectangle", 2, 2, 2, 2)
        sprite.colliders.extend([middle, last])
        first = sprite.colliders[0]
        command = RemoveColliderCommand(sprite, middle)

        command.execute()
        assert sprite.colliders == [first, last]

        command.undo()
        assert sprite.colliders == [first, middle, last]

        command.redo()
        assert sprite.colliders == [first, last]

    def test_out_of_bounds_index_appends(self, make_sprite):
        sprite = make_sprite(1)
        extra = Collider()
        sprite.colliders.append(extra)
        command = RemoveColliderCommand(sprite, extra)
        command.execute()
        sprite.colliders.clear()

        command.undo()

        assert sprite.colliders == [extra]

    def test_collider_not_on_sprite(self, make_sprite):
        sprite = make_sprite(1)
        stranger = Collider()
        command = RemoveColliderCommand(sprite, stranger)
        assert command.original_index == -1

        command.execute()
        assert len(sprite.colliders) == 1

        command.undo()
        assert sprite.colliders[-1] is stranger

    def test_name(self, make_sprite):
        sprite = make_sprite(1, "rock")
        command = RemoveColliderCommand(sprite, sprite.colliders[0])
        assert command.name == "Remove Collider from 'rock'"
