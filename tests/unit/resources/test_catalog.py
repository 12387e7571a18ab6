"""Tests for the class resource catalog."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from dnd_tracker.core.exceptions import ValidationError
from dnd_tracker.models.enums import Ability, ClassId, ResourceKind, RestType
from dnd_tracker.resources.catalog import (
    ResourceCatalog,
    ResourceDefinition,
    ResourceFormula,
    sneak_attack_dice,
)


@pytest.fixture
def catalog() -> ResourceCatalog:
    """Provide the built-in catalog."""
    return ResourceCatalog()


class TestResourceFormula:
    """Tests for total formulas."""

    def test_per_level(self) -> None:
        """Test a linear formula."""
        assert ResourceFormula(per_level=5).evaluate(7) == 35

    def test_breakpoints(self) -> None:
        """Test the highest reached breakpoint applies."""
        formula = ResourceFormula(breakpoints={1: 2, 3: 3, 6: 4})

        assert [formula.evaluate(level) for level in (1, 2, 3, 5, 6, 20)] == [2, 2, 3, 3, 4, 4]

    def test_ability_modifier_floor(self) -> None:
        """Test ability formulas never go below zero."""
        formula = ResourceFormula(ability=Ability.CHA)

        assert formula.evaluate(5, {Ability.CHA: 4}) == 4
        assert formula.evaluate(5, {Ability.CHA: -1}) == 0
        assert formula.evaluate(5) == 0


class TestResourceDefinition:
    """Tests for definition validation."""

    def test_computed_kind_requires_formula(self) -> None:
        """Test auto_level resources need a formula."""
        with pytest.raises(PydanticValidationError):
            ResourceDefinition(key="x", label="X", kind=ResourceKind.AUTO_LEVEL)

    def test_boolean_rejects_formula(self) -> None:
        """Test boolean resources have no formula."""
        with pytest.raises(PydanticValidationError):
            ResourceDefinition(key="x", label="X", kind=ResourceKind.BOOLEAN, formula=ResourceFormula(constant=1))

    def test_ability_kind_needs_ability(self) -> None:
        """Test auto_ability_mod resources need an ability formula."""
        with pytest.raises(PydanticValidationError):
            ResourceDefinition(
                key="x",
                label="X",
                kind=ResourceKind.AUTO_ABILITY_MOD,
                formula=ResourceFormula(per_level=1),
            )


class TestResourceCatalog:
    """Tests for catalog lookups."""

    def test_definitions_for_level(self, catalog: ResourceCatalog) -> None:
        """Test resources gated by level."""
        assert [d.key for d in catalog.definitions_for(ClassId.PALADIN, 2)] == ["lay_on_hands"]
        assert [d.key for d in catalog.definitions_for(ClassId.PALADIN, 3)] == [
            "lay_on_hands",
            "channel_divinity",
        ]

    def test_lookup_by_plain_string(self, catalog: ResourceCatalog) -> None:
        """Test class keys compare equal to their folder names."""
        assert catalog.definition("Rôdeur", "favored_foe") is not None

    def test_unknown_class(self, catalog: ResourceCatalog) -> None:
        """Test unknown classes have no resources."""
        assert catalog.definitions_for("Artificier", 5) == ()

    @pytest.mark.parametrize(("level", "expected"), [(1, 2), (3, 3), (6, 4), (12, 5), (17, 6), (20, 6)])
    def test_rage_totals(self, catalog: ResourceCatalog, level: int, expected: int) -> None:
        """Test barbarian rage by level."""
        definition = catalog.definition(ClassId.BARBARIAN, "rage")

        assert definition is not None
        assert definition.total_for(level) == expected

    def test_recharge(self, catalog: ResourceCatalog) -> None:
        """Test short and long rest resources."""
        assert catalog.definition(ClassId.FIGHTER, "action_surge").recharge is RestType.SHORT_REST
        assert catalog.definition(ClassId.BARBARIAN, "rage").recharge is RestType.LONG_REST

    def test_legacy_aliases(self, catalog: ResourceCatalog) -> None:
        """Test the monk's legacy ki key."""
        assert catalog.legacy_aliases(ClassId.MONK) == {"ki_points": "credo_points"}

    def test_derived_values(self, catalog: ResourceCatalog) -> None:
        """Test sneak attack is a derived display value."""
        assert catalog.derived_values(ClassId.ROGUE, 5) == {"sneak_attack": "3d6"}
        assert catalog.derived_values(ClassId.FIGHTER, 5) == {}

    def test_duplicate_keys_rejected(self) -> None:
        """Test a class cannot list a key twice."""
        rage = ResourceDefinition(
            key="rage",
            label="Rage",
            kind=ResourceKind.FIXED,
            formula=ResourceFormula(constant=2),
        )

        with pytest.raises(ValidationError) as exc_info:
            ResourceCatalog({ClassId.BARBARIAN: (rage, rage)})

        assert exc_info.value.details["invalid_value"] == ["rage"]


def test_sneak_attack_dice() -> None:
    """Test one d6 per two levels, rounded up."""
    assert [sneak_attack_dice(level) for level in (1, 2, 3, 20)] == ["1d6", "1d6", "2d6", "10d6"]
