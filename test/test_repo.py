import logging

import pretend  # type: ignore
import pytest

import pacmeta._repo as repo_module
from pacmeta._repo import (
    DEFAULT_REGISTRY,
    GitRepo,
    PackageRepo,
    RepoRegistry,
    RepoRegistryError,
    ambiguous_pairs,
    detect_os_id,
    lookup_git_repo,
)

_TEMPLATE = GitRepo(
    url="https://git.example.com/${REPO}.git",
    branch="packages/${BASE}",
    path="repos/${REPO}-${ARCH}",
)


def _entry(os_ids, repos, git=_TEMPLATE):
    return PackageRepo(os=frozenset(os_ids), repo=frozenset(repos), git=git)


def test_substitute():
    assert _TEMPLATE.substitute("core", "bash", "x86_64") == GitRepo(
        url="https://git.example.com/core.git",
        branch="packages/bash",
        path="repos/core-x86_64",
    )


def test_substitute_repeated_placeholders():
    template = GitRepo(url="${BASE}/${BASE}", branch="${ARCH}", path="${REPO}${REPO}")
    assert template.substitute("r", "b", "a") == GitRepo(url="b/b", branch="a", path="rr")


def test_ambiguous_pairs():
    entries = [
        _entry({"arch"}, {"core", "extra"}),
        _entry({"arch", "manjaro"}, {"core"}),
        _entry({"manjaro"}, {"extra"}),
    ]
    assert ambiguous_pairs(entries) == [("arch", "core")]
    assert ambiguous_pairs(entries[1:]) == []
    assert ambiguous_pairs([]) == []


def test_registry_rejects_ambiguous_entries():
    with pytest.raises(RepoRegistryError, match="arch:core"):
        RepoRegistry([_entry({"arch"}, {"core"}), _entry({"arch"}, {"core", "extra"})])


def test_registry_allows_disjoint_entries():
    registry = RepoRegistry([_entry({"arch"}, {"core"}), _entry({"parabola"}, {"core"})])
    assert len(registry.entries) == 2


def test_find():
    other = GitRepo(url="https://elsewhere.example.com", branch="main", path="${BASE}")
    registry = RepoRegistry([_entry({"arch"}, {"core"}), _entry({"arch"}, {"aur"}, other)])

    assert registry.find("core", "bash", "x86_64", os_id="arch") == GitRepo(
        url="https://git.example.com/core.git",
        branch="packages/bash",
        path="repos/core-x86_64",
    )
    assert registry.find("aur", "yay", "x86_64", os_id="arch") == GitRepo(
        url="https://elsewhere.example.com", branch="main", path="yay"
    )


def test_find_unknown(caplog):
    registry = RepoRegistry([_entry({"arch"}, {"core"})])

    with caplog.at_level(logging.DEBUG, logger="pacmeta"):
        assert registry.find("unknown", "bash", "x86_64", os_id="arch") is None
        assert registry.find("core", "bash", "x86_64", os_id="debian") is None

    assert "no git location for unknown/bash on arch" in caplog.text


def test_find_uses_detected_os(monkeypatch):
    monkeypatch.setenv("PACMETA_OS_ID", "parabola")
    registry = RepoRegistry([_entry({"arch"}, {"core"}), _entry({"parabola"}, {"core"})])

    assert registry.find("core", "bash", "x86_64") is not None
    assert RepoRegistry([_entry({"arch"}, {"core"})]).find("core", "bash", "x86_64") is None


def test_default_registry_is_unambiguous():
    assert ambiguous_pairs(DEFAULT_REGISTRY.entries) == []


@pytest.mark.parametrize(
    "repo, url",
    [
        ("core", "https://git.archlinux.org/svntogit/packages.git"),
        ("testing", "https://git.archlinux.org/svntogit/packages.git"),
        ("community", "https://git.archlinux.org/svntogit/community.git"),
        ("multilib-testing", "https://git.archlinux.org/svntogit/community.git"),
    ],
)
def test_lookup_git_repo(monkeypatch, repo, url):
    monkeypatch.setenv("PACMETA_OS_ID", "arch")

    assert lookup_git_repo(repo, "bash", "x86_64") == GitRepo(
        url=url, branch="packages/bash", path=f"repos/{repo}-x86_64"
    )


def test_lookup_git_repo_unknown(monkeypatch):
    monkeypatch.setenv("PACMETA_OS_ID", "arch")
    assert lookup_git_repo("aur", "yay", "x86_64") is None

    detect_os_id.cache_clear()
    monkeypatch.setenv("PACMETA_OS_ID", "debian")
    assert lookup_git_repo("core", "bash", "x86_64") is None


def test_read_os_id(tmp_path):
    missing = tmp_path / "missing"
    without_id = tmp_path / "without-id"
    without_id.write_text('NAME="Nothing"\n')
    os_release = tmp_path / "os-release"
    os_release.write_text('NAME="Arch Linux"\nPRETTY_NAME="Arch Linux"\nID=arch\nID_LIKE=\n')
    quoted = tmp_path / "quoted"
    quoted.write_text('ID="manjaro"\n')

    assert repo_module._read_os_id([missing, os_release]) == "arch"
    assert repo_module._read_os_id([without_id, quoted]) == "manjaro"
    assert repo_module._read_os_id([missing, without_id]) is None


def test_read_os_id_undecodable(tmp_path):
    os_release = tmp_path / "os-release"
    os_release.write_bytes(b'NAME="\xff\xfe"\nID=arch\n')

    assert repo_module._read_os_id([os_release]) == "arch"


def test_detect_os_id_env_override(monkeypatch):
    read = pretend.call_recorder(lambda: "arch")
    monkeypatch.setattr(repo_module, "_read_os_id", read)
    monkeypatch.setenv("PACMETA_OS_ID", "artix")

    assert detect_os_id() == "artix"
    assert read.calls == []


def test_detect_os_id_reads_once(monkeypatch):
    read = pretend.call_recorder(lambda: "manjaro")
    monkeypatch.setattr(repo_module, "_read_os_id", read)
    monkeypatch.delenv("PACMETA_OS_ID", raising=False)

    assert detect_os_id() == "manjaro"
    assert detect_os_id() == "manjaro"
    assert read.calls == [pretend.call()]


def test_detect_os_id_fallback(monkeypatch, caplog):
    monkeypatch.setattr(repo_module, "_read_os_id", pretend.call_recorder(lambda: None))
    monkeypatch.delenv("PACMETA_OS_ID", raising=False)

    assert detect_os_id() == "arch"
    assert "could not determine the OS identifier" in caplog.text
