"""
Tests for the state container, move geometry and the card catalog.

Tests:
- Board operations
- Geometry (flip, board edges, jumps)
- Catalog lookups and power binding
"""

import pytest

from ..engine_core.catalog import CardCatalog
from ..engine_core.geometry import PathStep, resolve_moves, rays, ORTHOGONAL
from ..engine_core.powers import PowerRegistry
from ..engine_core.state import (
    BoardCell,
    CardRef,
    CombatSide,
    GameState,
    Player,
    EMBLEMS,
    FIGHTERS,
    corner_pair,
    mirror,
)
from .mocks import RED, BLUE, build_catalog, card_slug, make_tribe


def red(role: str) -> CardRef:
    return CardRef(tribe=RED, type=FIGHTERS, slug=card_slug(RED, role))


class TestBoard:
    """Tests for board operations on GameState."""

    @pytest.fixture
    def state(self):
        state = GameState(room_id="r")
        state.players["p1"] = Player("p1", "Ana", RED, is_first_player=True)
        state.players["p2"] = Player("p2", "Bo", BLUE)
        return state

    def test_place_and_lookup(self, state):
        cell = state.place(BoardCell("p1", 1, 2, red("scout")))

        assert state.cell_at(1, 2) is cell
        assert state.is_occupied(1, 2)
        assert not state.is_occupied(2, 1)
        assert state.cells_of("p1") == [cell]
        assert state.cells_of("p2") == []

    def test_place_on_occupied_cell_fails(self, state):
        state.place(BoardCell("p1", 1, 2, red("scout")))

        with pytest.raises(ValueError):
            state.place(BoardCell("p2", 1, 2, red("brute")))

    def test_place_off_board_fails(self, state):
        with pytest.raises(ValueError):
            state.place(BoardCell("p1", 6, 0, red("scout")))

    def test_move_cell(self, state):
        state.place(BoardCell("p1", 1, 2, red("scout")))

        cell = state.move_cell((1, 2), (1, 4))

        assert cell.position == (1, 4)
        assert state.cell_at(1, 2) is None

    def test_move_onto_occupied_cell_fails(self, state):
        state.place(BoardCell("p1", 1, 2, red("scout")))
        state.place(BoardCell("p2", 1, 3, red("brute")))

        with pytest.raises(ValueError):
            state.move_cell((1, 2), (1, 3))

    def test_remove_cell(self, state):
        state.place(BoardCell("p1", 1, 2, red("scout")))

        removed = state.remove_cell(1, 2)

        assert removed.card == red("scout")
        assert state.board == []
        with pytest.raises(ValueError):
            state.remove_cell(1, 2)

    def test_other_player(self, state):
        assert state.other_player_id("p1") == "p2"
        assert state.other_player_id("p2") == "p1"

    def test_mirror(self):
        assert mirror(0, 0) == (5, 5)
        assert mirror(2, 2) == (3, 3)
        assert mirror(*mirror(1, 4)) == (1, 4)

    def test_corner_pairs(self):
        assert corner_pair(0) == (0, 2)
        assert corner_pair(2) == (0, 2)
        assert corner_pair(1) == (1, 3)
        assert corner_pair(3) == (1, 3)
        with pytest.raises(ValueError):
            corner_pair(4)

    def test_combat_snapshot_is_independent(self, state):
        """Later board changes never alter a combat side."""
        cell = state.place(BoardCell("p1", 1, 2, red("scout")))

        side = CombatSide.snapshot(cell, "attacker", move=[(1, 3)])
        state.move_cell((1, 2), (1, 4))

        assert side.position == (1, 2)
        assert side.move == [(1, 3)]
        assert not side.has_value

    def test_emblem_flag(self):
        assert CardRef(RED, EMBLEMS, "red-banner").is_emblem
        assert not red("scout").is_emblem


class TestGeometry:
    """Tests for resolve_moves."""

    def test_offsets_from_origin(self):
        paths = resolve_moves((2, 2), [[(0, 1), (0, 2)]])

        assert paths == [[PathStep(2, 3), PathStep(2, 4)]]

    def test_flip_negates_offsets(self):
        paths = resolve_moves((2, 2), [[(0, 1), (0, 2)]], flip=True)

        assert paths == [[PathStep(2, 1), PathStep(2, 0)]]

    def test_path_is_cut_at_board_edge(self):
        paths = resolve_moves((1, 4), [[(0, 1), (0, 2), (0, 3)]])

        assert paths == [[PathStep(1, 5)]]

    def test_path_leaving_board_immediately_is_dropped(self):
        paths = resolve_moves((0, 0), rays(ORTHOGONAL, 1))

        assert [p[0].position for p in paths] == [(0, 1), (1, 0)]

    def test_jump_flag(self):
        paths = resolve_moves((2, 2), [[(0, 1, True), (0, 2)]])

        assert paths[0][0].jump is True
        assert paths[0][1].jump is False


class TestCatalog:
    """Tests for CardCatalog."""

    def test_resolve_card(self, catalog):
        card = catalog.resolve_card(red("brute"))

        assert card.name == "Red Brute"
        assert card.corners == (5, 5, 5, 5)
        assert not card.has_power

    def test_unknown_card(self, catalog):
        with pytest.raises(KeyError):
            catalog.resolve_card(CardRef(RED, FIGHTERS, "nope"))

    def test_unknown_tribe(self, catalog):
        assert not catalog.has_tribe("green")
        with pytest.raises(KeyError):
            catalog.tribe("green")

    def test_emblem_reference(self, catalog):
        tribe = catalog.tribe(RED)

        ref = tribe.card_ref("red-banner")

        assert ref.type == EMBLEMS
        assert catalog.resolve_card(ref).name == "Red Banner"

    def test_power_resolver_is_bound(self):
        def trick(game, action, done):
            done()

        catalog = build_catalog(trick=trick)

        assert catalog.resolve_card(red("trickster")).resolver is trick
        assert catalog.resolve_card(red("dud")).resolver is None
        assert catalog.resolve_card(red("dud")).has_power

    def test_tribes_are_listed(self, catalog):
        assert [t.slug for t in catalog.list_tribes()] == [RED, BLUE]


class TestPowerRegistry:
    """Tests for PowerRegistry."""

    def test_register_and_get(self):
        registry = PowerRegistry()

        @registry.register(RED, "red-trickster")
        def trick(game, action, done):
            done()

        assert registry.get(RED, "red-trickster") is trick
        assert (RED, "red-trickster") in registry
        assert len(registry) == 1

    def test_duplicate_registration_fails(self):
        registry = PowerRegistry()
        registry.register(RED, "red-trickster")(lambda g, a, d: d())

        with pytest.raises(ValueError):
            registry.register(RED, "red-trickster")(lambda g, a, d: d())

    def test_merge(self):
        first, second = PowerRegistry(), PowerRegistry()
        first.register(RED, "a")(lambda g, a, d: d())
        second.register(BLUE, "b")(lambda g, a, d: d())

        merged = first.merge(second)

        assert set(merged) == {(RED, "a"), (BLUE, "b")}

    def test_catalog_without_powers(self):
        catalog = CardCatalog([make_tribe(RED)])

        assert len(catalog.powers) == 0
