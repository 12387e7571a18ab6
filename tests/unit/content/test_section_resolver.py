"""Tests for section resolution."""

from __future__ import annotations

from dnd_tracker.content.resolver import SectionResolver
from dnd_tracker.content.store import InMemoryContentStore
from dnd_tracker.core.config import ContentSettings, Settings
from dnd_tracker.models.enums import DiagnosticKind, SectionOrigin


def _titles(resolution) -> list[str]:
    return [section.title for section in resolution.sections]


class TestSectionResolver:
    """Tests for SectionResolver."""

    def test_class_and_subclass(self, content_store: InMemoryContentStore, settings: Settings) -> None:
        """Test English names resolve the French documents."""
        resolver = SectionResolver(content_store, settings=settings)

        resolution = resolver.resolve("ranger", "hunter", level=5)

        assert resolution.class_path == "Rôdeur/README.md"
        assert resolution.subclass_path == "Rôdeur/Subclasses/Sous-classe - Chasseur.md"
        assert "Proie du chasseur" in _titles(resolution)
        assert "Tactiques défensives" not in _titles(resolution)
        assert resolution.diagnostics == ()

    def test_subclass_sections_after_class_sections(
        self,
        content_store: InMemoryContentStore,
        settings: Settings,
    ) -> None:
        """Test class sections precede subclass sections of the same level."""
        resolution = SectionResolver(content_store, settings=settings).resolve("Rôdeur", "Chasseur", 3)
        level_three = [s for s in resolution.sections if s.level == 3]

        assert [s.origin for s in level_three] == [SectionOrigin.CLASS, SectionOrigin.SUBCLASS]

    def test_missing_class(self, settings: Settings) -> None:
        """Test an unknown class yields a not_found diagnostic, not an error."""
        resolution = SectionResolver(InMemoryContentStore(), settings=settings).resolve("Artificier")

        assert resolution.sections == ()
        assert resolution.found is False
        assert [d.kind for d in resolution.diagnostics] == [DiagnosticKind.NOT_FOUND]

    def test_missing_subclass_keeps_class_sections(
        self,
        content_store: InMemoryContentStore,
        settings: Settings,
    ) -> None:
        """Test a missing subclass still returns class sections."""
        resolution = SectionResolver(content_store, settings=settings).resolve("Rôdeur", "Inconnu", 3)

        assert resolution.class_path == "Rôdeur/README.md"
        assert resolution.subclass_path is None
        assert "Ennemi juré" in _titles(resolution)
        assert resolution.diagnostics[0].kind is DiagnosticKind.NOT_FOUND

    def test_cache_hit_skips_store(self, content_store: InMemoryContentStore, settings: Settings) -> None:
        """Test a second resolution of the same pair reuses the parse."""
        resolver = SectionResolver(content_store, settings=settings)
        resolver.resolve("Rôdeur", level=2)
        attempts = len(content_store.attempts)

        resolution = resolver.resolve("rodeur", level=5)

        assert len(content_store.attempts) == attempts
        assert "Attaque supplémentaire" in _titles(resolution)

    def test_incomplete_result_not_cached(self, settings: Settings) -> None:
        """Test a failed lookup is retried once the document appears."""
        store = InMemoryContentStore()
        resolver = SectionResolver(store, settings=settings)
        assert resolver.resolve("Barde").found is False

        store.add("Barde/README.md", "### Niveau 1 : Inspiration bardique\nUn dé.")

        assert _titles(resolver.resolve("Barde")) == ["Inspiration bardique"]

    def test_clear_cache(self, content_store: InMemoryContentStore, settings: Settings) -> None:
        """Test clearing the cache refetches documents."""
        resolver = SectionResolver(content_store, settings=settings)
        resolver.resolve("Rôdeur")
        attempts = len(content_store.attempts)

        resolver.clear_cache()
        resolver.resolve("Rôdeur")

        assert len(content_store.attempts) > attempts

    def test_level_clamped(self, content_store: InMemoryContentStore, settings: Settings) -> None:
        """Test an out-of-range level is clamped and reported."""
        resolution = SectionResolver(content_store, settings=settings).resolve("Rôdeur", level=25)

        assert resolution.level == 20
        assert resolution.diagnostics[0].kind is DiagnosticKind.OUT_OF_RANGE
        assert "Attaque supplémentaire" in _titles(resolution)

    def test_parse_diagnostics_forwarded(self, settings: Settings) -> None:
        """Test malformed headings surface on the resolution."""
        store = InMemoryContentStore({"Clerc/README.md": "###Conduit divin\nTexte"})

        resolution = SectionResolver(store, settings=settings).resolve("Clerc")

        assert [d.kind for d in resolution.diagnostics] == [DiagnosticKind.PARSE_DEGRADED]
        assert _titles(resolution) == ["General"]

    def test_ranger_without_subclass_at_level_three(
        self,
        content_store: InMemoryContentStore,
        settings: Settings,
    ) -> None:
        """Test a class-only lookup shows class sections up to the level."""
        resolution = SectionResolver(content_store, settings=settings).resolve("Rôdeur", None, 3)

        assert resolution.sections
        assert all(s.origin is SectionOrigin.CLASS for s in resolution.sections)
        assert all(s.level <= 3 for s in resolution.sections)
        assert resolution.diagnostics == ()


class TestSubclassLookup:
    """Tests for the number of subclass paths tried."""

    def test_missing_subclass_attempts_bounded(self, settings: Settings) -> None:
        """Test a missing subclass stays under the class folder and the cap."""
        store = InMemoryContentStore({"Barbare/README.md": "### Niveau 1 : Rage\nA"})

        resolution = SectionResolver(store, settings=settings).resolve("Barbare", "Voie de l’Arbre-Monde", 3)
        subclass_attempts = store.attempts[1:]

        assert resolution.subclass_path is None
        assert store.attempts[0] == "Barbare/README.md"
        assert 0 < len(subclass_attempts) <= settings.content.max_subclass_candidates
        assert all(path.startswith("Barbare/Subclasses/") for path in subclass_attempts)

    def test_missing_subclass_remembered(self, settings: Settings) -> None:
        """Test a repeated lookup of a missing subclass does not hit the store."""
        store = InMemoryContentStore({"Barbare/README.md": "### Niveau 1 : Rage\nA"})
        resolver = SectionResolver(store, settings=settings)
        first = resolver.resolve("Barbare", "Voie de l’Arbre-Monde", 3)
        attempts = len(store.attempts)

        second = resolver.resolve("Barbare", "Voie de l’Arbre-Monde", 5)

        assert len(store.attempts) == attempts
        assert second.diagnostics == first.diagnostics
        assert second.diagnostics[0].kind is DiagnosticKind.NOT_FOUND

    def test_canonical_subclass_spelling_tried_first(self, settings: Settings) -> None:
        """Test an English subclass name tries the French file first."""
        store = InMemoryContentStore(
            {
                "Moine/README.md": "### Niveau 1 : Arts martiaux\nA",
                "Moine/Subclasses/Sous-classe - Credo de la paume.md": "### Niveau 3 : Paume\nB",
            }
        )

        resolution = SectionResolver(store, settings=settings).resolve("Moine", "Way of the Open Hand", 3)

        assert resolution.subclass_path == "Moine/Subclasses/Sous-classe - Credo de la paume.md"
        assert store.attempts == ["Moine/README.md", "Moine/Subclasses/Sous-classe - Credo de la paume.md"]

    def test_cap_from_settings(self) -> None:
        """Test the candidate cap is configurable."""
        settings = Settings(content=ContentSettings(max_subclass_candidates=5))
        store = InMemoryContentStore({"Barbare/README.md": "### Niveau 1 : Rage\nA"})

        SectionResolver(store, settings=settings).resolve("Barbare", "Berserker", 3)

        assert len(store.attempts) == 6
