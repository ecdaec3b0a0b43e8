"""Unit tests for merged inventory rows."""

from kitctl.models.merge import MergedItem, Provenance


class TestMergedItem:
    """Tests for MergedItem."""

    def test_to_dict(self) -> None:
        """to_dict exposes the provenance value under source."""
        item = MergedItem("Git.Git", "Git", "2.43.0", True, Provenance.BOTH)

        assert item.to_dict() == {
            "id": "Git.Git",
            "name": "Git",
            "version": "2.43.0",
            "is_installed": True,
            "source": "both",
        }

    def test_backup_only_value(self) -> None:
        """Backup-only rows serialize as backup."""
        item = MergedItem("htop", "htop", None, False, Provenance.BACKUP_ONLY)
        assert item.to_dict()["source"] == "backup"
