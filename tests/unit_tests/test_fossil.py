from fossil_store.fossil import FOSSIL_SUFFIX, is_fossil, parse_logical_path, project, to_fossil
from fossil_store.versions import (
    Active,
    Hidden,
    VersionAction,
    VersionEntry,
    newest_per_name,
    newest_state,
)


def entry(name, version_id, action=VersionAction.ACTIVE, size=1):
    return VersionEntry(name=name, version_id=version_id, action=action, size=size)


def test_parse_logical_path():
    assert parse_logical_path("chunks/ab.fsl") == ("chunks/ab", True)
    assert parse_logical_path("chunks/ab") == ("chunks/ab", False)
    assert to_fossil("chunks/ab") == "chunks/ab" + FOSSIL_SUFFIX
    assert is_fossil("chunks/ab.fsl")
    assert not is_fossil("chunks/fsl")


def test_project_only_marks_hidden_state():
    assert project("ab", Active(version_id="1", size=3)) == "ab"
    assert project("ab", Hidden(version_id="2")) == "ab.fsl"


def test_entry_state_is_a_sum_type():
    assert entry("a", "1", size=7).state == Active(version_id="1", size=7)
    assert entry("a", "2", VersionAction.HIDDEN, 0).state == Hidden(version_id="2", size=0)


def test_newest_state_requires_exact_name():
    entries = [entry("chunks/abc", "1")]

    assert newest_state(entries, "chunks/ab") is None
    assert newest_state([], "chunks/ab") is None
    assert newest_state(entries, "chunks/abc") == Active(version_id="1", size=1)


def test_newest_per_name_skips_older_versions():
    entries = [
        entry("a", "3", VersionAction.HIDDEN),
        entry("a", "2"),
        entry("b", "1"),
    ]

    assert [e.version_id for e in newest_per_name(entries)] == ["3", "1"]
