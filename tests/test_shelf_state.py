"""Tests for ShelfState (zone-scoped shelf layout)."""

import logging

import pytest

from store_layout.core.entities import Shelf
from store_layout.state.shelf_state import ShelfState


class TestScope:
    def test_metrics_for_loaded_zone(self, shelf_state):
        metrics = shelf_state.shelf_metrics
        assert metrics.utilization == pytest.approx(7.5)
        assert metrics.unused_space == pytest.approx(74)
        assert metrics.accessibility == pytest.approx(100)
        assert metrics.overlapping_shelves is False

    def test_other_zones_excluded(self, shelf_state):
        shelf_state.add_shelf(name="Far", x=0, y=0, width=10, height=8, zone_id="z2")
        snap = shelf_state.snapshot()
        assert [s.id for s in snap.shelves] == ["s1", "s2"]
        assert snap.metrics.utilization == pytest.approx(7.5)

    def test_overlap_not_detected_across_zones(self, shelf_state):
        shelf_state.add_shelf(name="Twin", x=1, y=1, width=3, height=1, zone_id="z2")
        assert not any(s.is_overlapping for s in shelf_state.shelves)

    def test_switch_zone(self, shelf_state):
        shelf_state.add_shelf(name="Only", x=0, y=0, width=5, height=5, zone_id="z2")
        snap = shelf_state.load_zone("z2", 10, 10)
        assert snap.zone_id == "z2"
        assert [s.name for s in snap.shelves] == ["Only"]
        assert snap.metrics.utilization == pytest.approx(25)

    def test_switch_zone_clears_foreign_selection(self, shelf_state):
        shelf_state.select_shelf("s1")
        shelf_state.load_zone("z2", 5, 5)
        assert shelf_state.selected_shelf_id is None

    def test_unload_zone(self, shelf_state):
        shelf_state.select_shelf("s1")
        snap = shelf_state.unload_zone()
        assert shelf_state.zone_id is None
        assert (shelf_state.zone_width, shelf_state.zone_height) == (0, 0)
        assert shelf_state.selected_shelf_id is None
        assert snap.shelves == ()
        assert snap.metrics.utilization == 0
        assert [s.id for s in shelf_state.shelves] == ["s1", "s2"]
        with pytest.raises(ValueError, match="No zone loaded"):
            shelf_state.add_shelf(name="A", x=0, y=0, width=1, height=1)

    def test_no_zone_loaded(self):
        state = ShelfState()
        with pytest.raises(ValueError, match="No zone loaded"):
            state.add_shelf(name="A", x=0, y=0, width=1, height=1)

    def test_invalid_zone_dimensions(self, shelf_state):
        with pytest.raises(ValueError, match="positive"):
            shelf_state.load_zone("z1", 0, 8)
        assert shelf_state.zone_width == 10

    def test_shelves_by_category(self, shelf_state):
        assert [s.id for s in shelf_state.shelves_by_category("specialty")] == ["s2"]


class TestOverlapGap:
    def test_near_touching_shelves_overlap(self, shelf_state):
        snap = shelf_state.update_shelf("s2", x=4.05)
        assert all(s.is_overlapping for s in snap.shelves)
        assert snap.metrics.overlapping_shelves is True

    def test_clear_aisle_does_not_overlap(self, shelf_state):
        snap = shelf_state.update_shelf("s2", x=4.2)
        assert not any(s.is_overlapping for s in snap.shelves)

    def test_overlap_then_resolved(self, shelf_state):
        shelf_state.update_shelf("s2", x=2, y=1)
        snap = shelf_state.update_shelf("s2", x=6, y=5)
        assert not any(s.is_overlapping for s in snap.shelves)
        assert snap.metrics.overlapping_shelves is False


class TestAccessibility:
    def test_half_walkway(self):
        state = ShelfState(shelves=[
            Shelf(id="a", name="Wall", x=0, y=0, width=10, height=6, zone_id="z"),
        ])
        metrics = state.load_zone("z", 10, 8).metrics
        assert metrics.utilization == pytest.approx(75)
        assert metrics.accessibility == pytest.approx(50)

    def test_overfull_zone_goes_negative(self):
        state = ShelfState(shelves=[
            Shelf(id="a", name="A", x=0, y=0, width=4, height=4, zone_id="z"),
            Shelf(id="b", name="B", x=0, y=0, width=4, height=4, zone_id="z"),
        ])
        metrics = state.load_zone("z", 4, 4).metrics
        assert metrics.utilization == 100
        # walkway 16 - 32 = -16 -> -16 / 16 * 200
        assert metrics.accessibility == pytest.approx(-200)
        assert metrics.unused_space == 0


class TestMutations:
    def test_add_defaults_to_loaded_zone(self, shelf_state):
        snap = shelf_state.add_shelf({"name": "New", "x": 7, "y": 5, "width": 2, "height": 1})
        added = snap.shelves[-1]
        assert added.zone_id == "z1"
        assert added.id.startswith("shelf-")
        assert added.category == "general"

    def test_add_logs(self, shelf_state, caplog):
        with caplog.at_level(logging.INFO, logger="store_layout"):
            shelf_state.add_shelf(name="New", x=7, y=5, width=2, height=1)
        assert "Adding shelf" in caplog.text

    def test_update_unknown_is_noop(self, shelf_state):
        before = shelf_state.snapshot()
        assert shelf_state.update_shelf("nope", x=3) == before

    def test_update_clamped(self, shelf_state):
        snap = shelf_state.update_shelf("s1", x=9, y=-2, clamp=True)
        s1 = snap.shelf("s1")
        assert (s1.x, s1.y) == (7, 0)

    def test_update_clamp_ignores_other_zones(self, shelf_state):
        shelf_state.add_shelf(name="Far", x=0, y=0, width=3, height=1, zone_id="z2")
        far = shelf_state.shelves_in_zone("z2")[0]
        shelf_state.update_shelf(far.id, x=15, y=12, clamp=True)
        moved = shelf_state.get_shelf(far.id)
        assert (moved.x, moved.y) == (15, 12)

    def test_update_rejects_bad_size(self, shelf_state):
        with pytest.raises(ValueError, match="height"):
            shelf_state.update_shelf("s1", height=-1)

    def test_delete_clears_selection(self, shelf_state):
        shelf_state.select_shelf("s1")
        snap = shelf_state.delete_shelf("s1")
        assert [s.id for s in snap.shelves] == ["s2"]
        assert shelf_state.selected_shelf is None

    def test_delete_all_in_zone(self, shelf_state):
        shelf_state.add_shelf(name="Other", x=0, y=0, width=1, height=1, zone_id="z2")
        snap = shelf_state.delete_all_shelves_in_zone()
        assert snap.shelves == ()
        assert snap.metrics.utilization == 0
        assert [s.name for s in shelf_state.shelves] == ["Other"]

    def test_apply_shelf_suggestion(self, shelf_state):
        shelf_state.add_shelf(name="Other", x=0, y=0, width=1, height=1, zone_id="z2")
        snap = shelf_state.apply_shelf_suggestion([
            {"name": "Row A", "x": 0.5, "y": 0.5, "width": 9, "height": 1, "category": "aisle"},
            {"name": "Row B", "x": 0.5, "y": 3, "width": 9, "height": 1, "category": "aisle"},
        ])
        assert [s.name for s in snap.shelves] == ["Row A", "Row B"]
        assert all(s.zone_id == "z1" for s in snap.shelves)
        assert {"s1", "s2"}.isdisjoint(s.id for s in shelf_state.shelves)
        assert len(shelf_state.shelves_in_zone("z2")) == 1

    def test_orphaned_shelves(self, shelf_state):
        assert [s.id for s in shelf_state.orphaned_shelves(["z2"])] == ["s1", "s2"]
        assert shelf_state.orphaned_shelves(["z1"]) == []


class TestQuickActions:
    def test_duplicate(self, shelf_state):
        snap = shelf_state.duplicate_shelf("s1")
        copy = snap.shelves[-1]
        assert copy.name == "Main Display (Copy)"
        assert (copy.x, copy.y) == (1.5, 1.5)
        assert (copy.width, copy.height, copy.category) == (3, 1, "general")
        assert copy.id != "s1"
        assert snap.shelf("s1").is_overlapping and copy.is_overlapping

    def test_duplicate_kept_inside_zone(self, shelf_state):
        shelf_state.update_shelf("s1", x=7, y=7)
        copy = shelf_state.duplicate_shelf("s1").shelves[-1]
        assert (copy.x, copy.y) == (7, 7)

    def test_rotate(self, shelf_state):
        s1 = shelf_state.rotate_shelf("s1").shelf("s1")
        assert (s1.width, s1.height) == (1, 3)

    def test_rotate_refused_when_it_would_not_fit(self, shelf_state):
        shelf_state.update_shelf("s1", y=6)
        s1 = shelf_state.rotate_shelf("s1").shelf("s1")
        assert (s1.width, s1.height) == (3, 1)

    def test_snap_to_grid(self, shelf_state):
        shelf_state.update_shelf("s1", x=1.2, y=1.3)
        s1 = shelf_state.snap_shelf_to_grid("s1").shelf("s1")
        assert (s1.x, s1.y) == (1.0, 1.5)

    def test_center(self, shelf_state):
        s1 = shelf_state.center_shelf("s1").shelf("s1")
        assert (s1.x, s1.y) == (3.5, 3.5)

    def test_unknown_shelf_is_noop(self, shelf_state):
        before = shelf_state.snapshot()
        assert shelf_state.duplicate_shelf("nope") == before
        assert shelf_state.rotate_shelf("nope") == before

    def test_out_of_bounds(self, shelf_state):
        shelf_state.update_shelf("s2", x=9)
        assert [s.id for s in shelf_state.out_of_bounds_shelves()] == ["s2"]


class TestOptimize:
    def test_packs_with_aisles(self, shelf_state):
        shelf_state.update_shelf("s2", x=1, y=1)
        snap = shelf_state.optimize_shelves()
        assert (snap.shelf("s1").x, snap.shelf("s1").y) == (0.5, 0.5)
        assert (snap.shelf("s2").x, snap.shelf("s2").y) == (4.0, 0.5)
        assert snap.metrics.overlapping_shelves is False
        assert shelf_state.last_pack_result.is_lossless

    def test_leaves_other_zones_alone(self, shelf_state):
        shelf_state.add_shelf(name="Other", x=3, y=3, width=1, height=1, zone_id="z2")
        shelf_state.optimize_shelves()
        other = shelf_state.shelves_in_zone("z2")[0]
        assert (other.x, other.y) == (3, 3)

    def test_requires_zone(self):
        with pytest.raises(ValueError, match="No zone loaded"):
            ShelfState().optimize_shelves()

    def test_detect_overlaps_idempotent(self, shelf_state):
        shelf_state.update_shelf("s2", x=2, y=1)
        first = shelf_state.detect_overlaps()
        assert shelf_state.detect_overlaps() == first
