"""Tests for the per-character resource ledger."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dnd_tracker.models.character import Character, ResourceState, ability_modifier
from dnd_tracker.models.enums import Ability, ClassId, DiagnosticKind, RestType
from dnd_tracker.resources.ledger import (
    AdjustUsed,
    ResourceLedger,
    SetTotal,
    SetUsed,
    Toggle,
    mutate_resource,
)


class TestCharacterModels:
    """Tests for the character snapshot models."""

    def test_used_cannot_exceed_total(self) -> None:
        """Test the pool invariant."""
        with pytest.raises(ValidationError):
            ResourceState(total=2, used=3)

    def test_clamped(self) -> None:
        """Test clamped construction."""
        assert ResourceState.clamped(3, 9) == ResourceState(total=3, used=3)
        assert ResourceState.clamped(-1, -1) == ResourceState(total=0, used=0)

    def test_class_key_coerced(self) -> None:
        """Test canonical class names become ClassId."""
        assert Character(class_key="Rôdeur").class_key is ClassId.RANGER
        assert Character(class_key="Artificier").class_key == "Artificier"

    @pytest.mark.parametrize(("score", "expected"), [(1, -5), (9, -1), (10, 0), (11, 0), (15, 2), (30, 10)])
    def test_ability_modifier(self, score: int, expected: int) -> None:
        """Test floor((score - 10) / 2)."""
        assert ability_modifier(score) == expected


class TestComputedResources:
    """Tests for auto_level and auto_ability_mod resources."""

    def test_set_total_rejected(self, paladin: Character) -> None:
        """Test writing a computed total is an invalid mutation."""
        result = mutate_resource(paladin, "lay_on_hands", SetTotal(30))

        assert result.success is False
        assert result.diagnostic is not None
        assert result.diagnostic.kind is DiagnosticKind.INVALID_MUTATION
        assert result.diagnostic.details["operation"] == "set_total"
        assert result.character == paladin

    def test_spend(self, paladin: Character) -> None:
        """Test spending from a computed pool."""
        result = mutate_resource(paladin, "lay_on_hands", AdjustUsed(3))

        assert result.success is True
        assert result.state == ResourceState(total=25, used=3)
        assert result.delta == "+3 used"
        assert result.message == "3 Imposition des mains used"

    def test_overspend_clamped(self, paladin: Character) -> None:
        """Test used never exceeds the total."""
        result = mutate_resource(paladin, "lay_on_hands", AdjustUsed(100))

        assert result.state == ResourceState(total=25, used=25)

    def test_recover(self, paladin: Character) -> None:
        """Test a negative delta recovers uses, floored at zero."""
        ledger = ResourceLedger(paladin)
        ledger.mutate("lay_on_hands", AdjustUsed(3))

        result = ledger.mutate("lay_on_hands", AdjustUsed(-5))

        assert result.state == ResourceState(total=25, used=0)
        assert result.delta == "-3 used"
        assert result.message.endswith("recovered")

    def test_set_used_clamped(self, paladin: Character) -> None:
        """Test SetUsed clamps into the pool."""
        assert mutate_resource(paladin, "lay_on_hands", SetUsed(-1)).state.used == 0
        assert mutate_resource(paladin, "lay_on_hands", SetUsed(99)).state.used == 25

    def test_ability_total(self, bard: Character) -> None:
        """Test bardic inspiration follows the charisma modifier."""
        assert ResourceLedger(bard).state("bardic_inspiration") == ResourceState(total=3, used=0)


class TestFixedResources:
    """Tests for player-edited totals."""

    def test_set_total_resets_used(self, barbarian: Character) -> None:
        """Test a new total resets the used counter."""
        ledger = ResourceLedger(barbarian)
        ledger.mutate("rage", SetTotal(5))
        ledger.mutate("rage", AdjustUsed(2))

        result = ledger.mutate("rage", SetTotal(4))

        assert result.state == ResourceState(total=4, used=0)
        assert result.delta == "updated"

    def test_default_total_from_formula(self, barbarian: Character) -> None:
        """Test an untouched pool starts at its default total."""
        assert ResourceLedger(barbarian).state("rage") == ResourceState(total=3, used=0)

    def test_negative_total_rejected(self, barbarian: Character) -> None:
        """Test a negative total is rejected."""
        result = mutate_resource(barbarian, "rage", SetTotal(-1))

        assert result.success is False

    def test_toggle_rejected(self, barbarian: Character) -> None:
        """Test numeric resources cannot be toggled."""
        assert mutate_resource(barbarian, "rage", Toggle()).success is False


class TestBooleanResources:
    """Tests for on/off resources."""

    def test_toggle(self, wizard: Character) -> None:
        """Test toggling flips the used flag."""
        ledger = ResourceLedger(wizard)

        first = ledger.mutate("arcane_recovery", Toggle())
        second = ledger.mutate("arcane_recovery", Toggle())

        assert (first.flag, second.flag) == (True, False)
        assert first.delta == "updated"

    def test_numeric_operations_rejected(self, wizard: Character) -> None:
        """Test boolean resources have no counters."""
        result = mutate_resource(wizard, "arcane_recovery", AdjustUsed(1))

        assert result.success is False
        assert result.flag is False

    def test_set_total_rejected_flag_unchanged(self, wizard: Character) -> None:
        """Test SetTotal on a boolean resource is invalid and keeps the flag."""
        ledger = ResourceLedger(wizard)
        ledger.mutate("arcane_recovery", Toggle())

        result = ledger.mutate("arcane_recovery", SetTotal(3))

        assert result.success is False
        assert result.diagnostic.kind is DiagnosticKind.INVALID_MUTATION
        assert result.flag is True
        assert ledger.flag("arcane_recovery") is True


class TestRejections:
    """Tests for unknown and inactive resources."""

    def test_unknown_key(self, barbarian: Character) -> None:
        """Test an unknown key is reported, not raised."""
        result = mutate_resource(barbarian, "ki_points", AdjustUsed(1))

        assert result.success is False
        assert result.diagnostic.details["resource_key"] == "ki_points"

    def test_inactive_resource(self) -> None:
        """Test a resource before its first level."""
        monk = Character(level=1, class_key=ClassId.MONK)

        result = mutate_resource(monk, "supernatural_metabolism", AdjustUsed(1))

        assert result.success is False


class TestRecompute:
    """Tests for level and ability changes."""

    def test_level_down_clamps_used(self, paladin: Character) -> None:
        """Test used is clamped to a smaller computed total."""
        ledger = ResourceLedger(paladin)
        ledger.mutate("lay_on_hands", AdjustUsed(20))

        ledger.recompute(level=3)

        assert ledger.state("lay_on_hands") == ResourceState(total=15, used=15)
        assert ledger.state("channel_divinity") == ResourceState(total=2, used=0)

    def test_level_up_keeps_used(self, paladin: Character) -> None:
        """Test used is never raised by a level up."""
        ledger = ResourceLedger(paladin)
        ledger.mutate("lay_on_hands", AdjustUsed(10))

        ledger.recompute(level=10)

        assert ledger.state("lay_on_hands") == ResourceState(total=50, used=10)

    def test_fixed_total_kept(self, barbarian: Character) -> None:
        """Test player totals survive a recompute."""
        ledger = ResourceLedger(barbarian)
        ledger.mutate("rage", SetTotal(7))

        ledger.recompute(level=20)

        assert ledger.state("rage") == ResourceState(total=7, used=0)

    def test_ability_change(self, bard: Character) -> None:
        """Test ability totals follow new modifiers."""
        ledger = ResourceLedger(bard)
        ledger.mutate("bardic_inspiration", AdjustUsed(3))

        ledger.recompute(ability_modifiers={Ability.CHA: 1})

        assert ledger.state("bardic_inspiration") == ResourceState(total=1, used=1)

    def test_level_clamped(self, barbarian: Character) -> None:
        """Test an impossible level is clamped and reported."""
        ledger = ResourceLedger(barbarian)

        diagnostics = ledger.recompute(level=25)

        assert ledger.character.level == 20
        assert diagnostics[0].kind is DiagnosticKind.OUT_OF_RANGE

    def test_level_below_first_level_drops_pool(self, paladin: Character) -> None:
        """Test a pool no longer available is removed and not saved."""
        ledger = ResourceLedger(paladin)
        ledger.mutate("channel_divinity", AdjustUsed(1))

        ledger.recompute(level=2)

        assert "channel_divinity" not in ledger.character.resources
        assert ledger.state("channel_divinity") is None
        assert ledger.to_persisted() == {"lay_on_hands": 10, "used_lay_on_hands": 0}

    def test_pool_returns_with_defaults(self, paladin: Character) -> None:
        """Test a dropped pool starts fresh when the level comes back."""
        ledger = ResourceLedger(paladin)
        ledger.mutate("channel_divinity", AdjustUsed(2))
        ledger.recompute(level=2)

        ledger.recompute(level=5)

        assert ledger.state("channel_divinity") == ResourceState(total=2, used=0)


class TestRest:
    """Tests for rests."""

    def test_short_rest(self) -> None:
        """Test a short rest restores short-rest resources only."""
        fighter = Character(level=5, class_key=ClassId.FIGHTER)
        ledger = ResourceLedger(fighter)
        ledger.mutate("action_surge", AdjustUsed(1))

        assert ledger.rest(RestType.SHORT_REST) == ["action_surge"]
        assert ledger.state("action_surge").used == 0

    def test_short_rest_skips_long_rest_resources(self, barbarian: Character) -> None:
        """Test rage needs a long rest."""
        ledger = ResourceLedger(barbarian)
        ledger.mutate("rage", AdjustUsed(2))

        assert ledger.rest(RestType.SHORT_REST) == []
        assert ledger.state("rage").used == 2

    def test_long_rest_restores_everything(self, wizard: Character) -> None:
        """Test a long rest clears flags too."""
        ledger = ResourceLedger(wizard)
        ledger.mutate("arcane_recovery", Toggle())

        ledger.rest(RestType.LONG_REST)

        assert ledger.flag("arcane_recovery") is False


class TestPersistence:
    """Tests for the flat persisted layout."""

    def test_to_persisted_mirrors_legacy_key(self) -> None:
        """Test the monk pool is saved under both keys."""
        ledger = ResourceLedger(Character(level=5, class_key=ClassId.MONK))
        ledger.mutate("credo_points", AdjustUsed(2))

        data = ledger.to_persisted()

        assert data["credo_points"] == 5
        assert data["used_credo_points"] == 2
        assert data["ki_points"] == 5
        assert data["used_ki_points"] == 2

    def test_to_persisted_boolean(self, wizard: Character) -> None:
        """Test boolean resources persist only their used flag."""
        ledger = ResourceLedger(wizard)
        ledger.mutate("arcane_recovery", Toggle())

        assert ledger.to_persisted() == {"used_arcane_recovery": True}

    def test_to_persisted_derived(self) -> None:
        """Test derived display values are included."""
        ledger = ResourceLedger(Character(level=7, class_key=ClassId.ROGUE))

        assert ledger.to_persisted() == {"sneak_attack": "4d6"}

    def test_from_persisted_legacy_key(self) -> None:
        """Test legacy ki values load into the credo pool."""
        ledger = ResourceLedger.from_persisted(
            {"ki_points": 4, "used_ki_points": 1},
            class_key=ClassId.MONK,
            level=4,
        )

        assert ledger.state("credo_points") == ResourceState(total=4, used=1)
        assert ledger.state("supernatural_metabolism") == ResourceState(total=1, used=0)

    def test_from_persisted_current_key_wins(self) -> None:
        """Test current keys take precedence over legacy ones."""
        ledger = ResourceLedger.from_persisted(
            {"credo_points": 5, "used_credo_points": 0, "ki_points": 3, "used_ki_points": 3},
            class_key=ClassId.MONK,
            level=5,
        )

        assert ledger.state("credo_points") == ResourceState(total=5, used=0)

    def test_from_persisted_clamps_used(self) -> None:
        """Test an invalid persisted pool is repaired."""
        ledger = ResourceLedger.from_persisted({"rage": 3, "used_rage": 9}, class_key="Barbare", level=3)

        assert ledger.state("rage") == ResourceState(total=3, used=3)

    def test_round_trip(self) -> None:
        """Test a saved ledger reloads to the same pools."""
        ledger = ResourceLedger(Character(level=6, class_key=ClassId.PALADIN))
        ledger.mutate("lay_on_hands", AdjustUsed(7))
        ledger.mutate("channel_divinity", AdjustUsed(1))

        restored = ResourceLedger.from_persisted(ledger.to_persisted(), class_key=ClassId.PALADIN, level=6)

        assert restored.character.resources == ledger.character.resources
