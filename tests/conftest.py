"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the D&D character tracker test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from dnd_tracker.content.store import InMemoryContentStore
from dnd_tracker.core.config import Settings
from dnd_tracker.models.character import Character
from dnd_tracker.models.enums import Ability, ClassId


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dnd_tracker.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings() -> Settings:
    """Provide settings with sequential fetching and default parsing."""
    return Settings()


# =============================================================================
# Content Fixtures
# =============================================================================


RANGER_DOCUMENT = """# Rôdeur

Le rôdeur est un chasseur des terres sauvages.

## Niveau 1 : Ennemi juré
Vous marquez une créature comme votre proie.

### Niveau 2 : Style de combat
Choisissez un style de combat.

### Niveau 3 : Sous-classe de rôdeur
Choisissez une sous-classe.

### Niveau 5 : Attaque supplémentaire
Vous attaquez deux fois.

### Compétences
Athlétisme, Discrétion, Survie.
"""

HUNTER_DOCUMENT = """# Chasseur

### Niveau 3 : Proie du chasseur
Colosse ou briseur de hordes.

### Niveau 7 : Tactiques défensives
Échapper à la horde.
"""


@pytest.fixture
def ranger_documents() -> dict[str, str]:
    """Provide a ranger class document and its hunter subclass.

    Returns:
        Dictionary of content path to markdown text.
    """
    return {
        "Rôdeur/README.md": RANGER_DOCUMENT,
        "Rôdeur/Subclasses/Sous-classe - Chasseur.md": HUNTER_DOCUMENT,
    }


@pytest.fixture
def content_store(ranger_documents: dict[str, str]) -> InMemoryContentStore:
    """Provide an in-memory content store seeded with ranger documents."""
    return InMemoryContentStore(ranger_documents)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def paladin() -> Character:
    """Provide a level 5 paladin with no tracked resources yet."""
    return Character(level=5, class_key=ClassId.PALADIN, ability_modifiers={Ability.CHA: 3})


@pytest.fixture
def barbarian() -> Character:
    """Provide a level 3 barbarian."""
    return Character(level=3, class_key=ClassId.BARBARIAN)


@pytest.fixture
def bard() -> Character:
    """Provide a level 4 bard with a +3 charisma modifier."""
    return Character(level=4, class_key=ClassId.BARD, ability_modifiers={Ability.CHA: 3})


@pytest.fixture
def wizard() -> Character:
    """Provide a level 2 wizard."""
    return Character(level=2, class_key=ClassId.WIZARD)
