"""Unit tests for the reconciliation engine."""

import itertools
import random

import pytest
from kitctl.core.reconcile import merge, merge_records, record_version, split_actionable
from kitctl.models.merge import MergedItem, Provenance
from kitctl.models.package import AptItem, ExtensionRecord, FlatpakItem, WingetItem

# (id, name, version) tuples stand in for records in the generic merge
Row = tuple[str, str, str | None]


def _merge(installed: list[Row], backed_up: list[Row]) -> list[MergedItem]:
    return merge(
        installed,
        backed_up,
        identity_of=lambda row: row[0],
        name_of=lambda row: row[1],
        version_of=lambda row: row[2],
    )


class TestMerge:
    """Tests for the generic merge function."""

    def test_installed_and_backup_only(self) -> None:
        """An identity on both sides takes the live version; backup-only items are not installed."""
        installed = [("a", "Alpha", "2")]
        backed_up = [("a", "Alpha", "1"), ("b", "Beta", "3")]

        merged = _merge(installed, backed_up)

        assert merged == [
            MergedItem("a", "Alpha", "2", True, Provenance.BOTH),
            MergedItem("b", "Beta", "3", False, Provenance.BACKUP_ONLY),
        ]

    def test_installed_sort_before_backup_only_regardless_of_name(self) -> None:
        """Installed items come first even when their name sorts later."""
        merged = _merge([("z", "Zulu", "1")], [("a", "Alpha", "1")])
        assert [m.id for m in merged] == ["z", "a"]

    def test_installed_only(self) -> None:
        """Items not in the backup are marked installed."""
        merged = _merge([("a", "Alpha", "1")], [])
        assert merged[0].provenance == Provenance.INSTALLED
        assert merged[0].is_installed is True

    def test_empty_inputs(self) -> None:
        """Nothing in, nothing out."""
        assert _merge([], []) == []

    def test_live_name_wins(self) -> None:
        """The installed copy supplies the display name as well as the version."""
        merged = _merge([("a", "New Name", "2")], [("a", "Old Name", "1")])
        assert merged[0].display_name == "New Name"

    def test_empty_name_falls_back_to_identity(self) -> None:
        """An item without a name is shown by its identity."""
        merged = _merge([], [("pkg.id", "", "1")])
        assert merged[0].display_name == "pkg.id"

    def test_duplicate_identity_later_entry_wins(self) -> None:
        """A side listing an identity twice keeps the later entry."""
        merged = _merge([("a", "Alpha", "1"), ("a", "Alpha", "2")], [])
        assert len(merged) == 1
        assert merged[0].version == "2"

    def test_name_sort_is_case_insensitive(self) -> None:
        """Names are ordered without regard to case."""
        merged = _merge([("1", "beta", None), ("2", "Alpha", None), ("3", "Gamma", None)], [])
        assert [m.display_name for m in merged] == ["Alpha", "beta", "Gamma"]

    def test_order_does_not_depend_on_input_order(self) -> None:
        """Permuting the inputs gives the same result."""
        installed = [("a", "Same", "1"), ("b", "Same", "1"), ("c", "Other", "1")]
        backed_up = [("d", "Same", "1"), ("e", "Another", "1")]
        expected = _merge(installed, backed_up)

        for perm in itertools.permutations(installed):
            assert _merge(list(perm), list(reversed(backed_up))) == expected


class TestMergeProperties:
    """Property checks over randomized inputs."""

    @pytest.fixture
    def samples(self) -> list[tuple[list[Row], list[Row]]]:
        """Random pairs of live and backed-up rows with overlapping identities."""
        rng = random.Random(20240205)
        pool = [f"pkg{i}" for i in range(12)]
        samples = []
        for _ in range(50):
            installed = [
                (pid, f"Name {pid[::-1]}", f"{rng.randint(1, 9)}")
                for pid in rng.sample(pool, rng.randint(0, len(pool)))
            ]
            backed_up = [
                (pid, f"Saved {pid}", f"{rng.randint(1, 9)}")
                for pid in rng.sample(pool, rng.randint(0, len(pool)))
            ]
            samples.append((installed, backed_up))
        return samples

    def test_every_identity_appears_exactly_once(self, samples) -> None:
        """The merged size equals the size of the identity union."""
        for installed, backed_up in samples:
            merged = _merge(installed, backed_up)
            ids = [m.id for m in merged]
            assert len(ids) == len(set(ids))
            assert set(ids) == {r[0] for r in installed} | {r[0] for r in backed_up}

    def test_live_version_wins(self, samples) -> None:
        """Identities on both sides always carry the installed version."""
        for installed, backed_up in samples:
            live = {r[0]: r[2] for r in installed}
            saved = {r[0] for r in backed_up}
            for item in _merge(installed, backed_up):
                if item.id in live and item.id in saved:
                    assert item.provenance == Provenance.BOTH
                    assert item.version == live[item.id]

    def test_sorted_installed_first_then_by_name(self, samples) -> None:
        """Installed items precede the rest and names never decrease within a group."""
        for installed, backed_up in samples:
            merged = _merge(installed, backed_up)
            flags = [m.is_installed for m in merged]
            assert flags == sorted(flags, reverse=True)
            for group in (True, False):
                names = [m.display_name.casefold() for m in merged if m.is_installed is group]
                assert names == sorted(names)


class TestMergeRecords:
    """Tests for merging typed records."""

    def test_winget_records(self) -> None:
        """Winget records merge on PackageId and show their Name."""
        installed = [WingetItem(package_id="Git.Git", name="Git", version="2.44.0")]
        backed_up = [
            WingetItem(package_id="Git.Git", name="Git", version="2.43.0"),
            WingetItem(package_id="7zip.7zip", name="7-Zip", version="23.01"),
        ]

        merged = merge_records(installed, backed_up)

        assert [(m.id, m.version, m.provenance) for m in merged] == [
            ("Git.Git", "2.44.0", Provenance.BOTH),
            ("7zip.7zip", "23.01", Provenance.BACKUP_ONLY),
        ]

    def test_flatpak_records_merge_on_name(self) -> None:
        """Flatpak items are matched by display name."""
        live = FlatpakItem(name="GIMP", application="org.gimp.GIMP", version="2.10.36")
        saved = FlatpakItem(name="GIMP", application="org.gimp.GIMP", version="2.10.34")

        merged = merge_records([live], [saved])

        assert merged[0].id == "GIMP"
        assert merged[0].provenance == Provenance.BOTH

    def test_record_version_empty_is_none(self) -> None:
        """An empty version reads as unknown."""
        assert record_version(FlatpakItem(name="X", application="org.x.X")) is None
        assert record_version(ExtensionRecord(id="a.b")) is None
        assert record_version(AptItem(package="curl", version="8.5.0")) == "8.5.0"


class TestSplitActionable:
    """Tests for split_actionable function."""

    def test_splits_by_installed_flag(self) -> None:
        """Installed ids can be backed up, the rest restored."""
        merged = _merge([("a", "Alpha", "1")], [("a", "Alpha", "1"), ("b", "Beta", "1")])
        assert split_actionable(merged) == (["a"], ["b"])
