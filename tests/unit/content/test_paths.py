"""Tests for candidate content paths."""

from __future__ import annotations

from dnd_tracker.content.paths import ContentPathBuilder


class TestClassPaths:
    """Tests for class document candidates."""

    def test_index_documents_first(self) -> None:
        """Test README and index come before the named document."""
        assert ContentPathBuilder.class_paths(["Barde"]) == (
            "Barde/README.md",
            "Barde/index.md",
            "Barde/Barde.md",
        )

    def test_title_cased_file(self) -> None:
        """Test a lowercase spelling also tries a title-cased file name."""
        paths = ContentPathBuilder.class_paths(["rodeur"])

        assert "rodeur/rodeur.md" in paths
        assert "rodeur/Rodeur.md" in paths

    def test_spelling_order_kept(self) -> None:
        """Test every path of a spelling precedes the next spelling."""
        paths = ContentPathBuilder.class_paths(["Rodeur", "Rôdeur"])

        assert paths.index("Rodeur/Rodeur.md") < paths.index("Rôdeur/README.md")


class TestSubclassPaths:
    """Tests for subclass document candidates."""

    def test_stems(self) -> None:
        """Test prefixed stems for every dash style, then the bare name."""
        assert ContentPathBuilder.subclass_stems("Chasseur") == [
            "Sous-classe - Chasseur",
            "Sous-classe – Chasseur",
            "Sous-classe — Chasseur",
            "Chasseur",
        ]

    def test_prefixed_file_first(self) -> None:
        """Test the conventional file name is tried first."""
        paths = ContentPathBuilder.subclass_paths(["Rôdeur"], ["Chasseur"])

        assert paths[0] == "Rôdeur/Subclasses/Sous-classe - Chasseur.md"

    def test_files_before_folders(self) -> None:
        """Test direct files are tried before folder layouts."""
        paths = ContentPathBuilder.subclass_paths(["Rôdeur"], ["Chasseur"])

        assert paths.index("Rôdeur/Subclasses/Chasseur.md") < paths.index(
            "Rôdeur/Subclasses/Sous-classe - Chasseur/README.md"
        )
        assert "Rôdeur/Subclasses/Chasseur/Chasseur.md" in paths

    def test_no_duplicates(self) -> None:
        """Test candidates are unique."""
        paths = ContentPathBuilder.subclass_paths(["Moine", "Moine"], ["Credo de la paume", "credo de la paume"])

        assert len(paths) == len(set(paths))

    def test_limit_keeps_highest_priority(self) -> None:
        """Test a limit truncates the ordered list."""
        paths = ContentPathBuilder.subclass_paths(["Rôdeur"], ["Chasseur", "Hunter"])

        limited = ContentPathBuilder.subclass_paths(["Rôdeur"], ["Chasseur", "Hunter"], limit=10)

        assert limited == paths[:10]

    def test_first_spelling_complete_before_next(self) -> None:
        """Test folder layouts of the first spelling precede files of the next."""
        paths = ContentPathBuilder.subclass_paths(["Rôdeur"], ["Chasseur", "Hunter"])

        assert paths.index("Rôdeur/Subclasses/Chasseur/README.md") < paths.index(
            "Rôdeur/Subclasses/Sous-classe - Hunter.md"
        )
