import os

import pytest

from ttpforge.fsys import OsFileSystem, make_test_fs
from ttpforge.repo import REPO_CONFIG_FILE_NAME, RepoError, RepoSpec
from ttpforge.repocollection import RepoCollection


def make_fs():
    return make_test_fs(
        {
            "repos/a/" + REPO_CONFIG_FILE_NAME: b'ttp_search_paths: ["ttps", "more/ttps"]',
            "repos/a/ttps/foo/bar/baz/wut.yaml": b"placeholder",
            "repos/a/more/ttps/absolute/victory.yaml": b"placeholder",
            "repos/b/" + REPO_CONFIG_FILE_NAME: b'ttp_search_paths: ["even/more/ttps"]',
            "repos/b/even/more/ttps/attempt/again.yaml": b'ttp_search_paths: ["even/more/ttps"]',
            "not-a-repo/my-ttp.yaml": b"placeholder",
        }
    )


A = RepoSpec(name="default", path="repos/a")
B = RepoSpec(name="additional", path="repos/b")


@pytest.mark.parametrize(
    "specs",
    [
        [A, RepoSpec(path="repos/b")],
        [A, RepoSpec(name="additional")],
        [A, RepoSpec(name="default", path="repos/b")],
    ],
    ids=["empty-name", "empty-path", "same-name"],
)
def test_invalid_specs(specs):
    with pytest.raises(RepoError):
        RepoCollection(make_fs(), specs, "")


@pytest.mark.parametrize(
    "ttp_ref",
    [
        "default//foo/bar//baz/wut.yaml",
        "notreal//foo/bar/baz/wut.yaml",
        "default//foo/bar/baz/notreal.yaml",
    ],
)
def test_invalid_refs(ttp_ref):
    rc = RepoCollection(make_fs(), [A], "")
    with pytest.raises(RepoError):
        rc.resolve_ttp_ref(ttp_ref)


@pytest.mark.parametrize(
    "specs, ttp_ref, expected_name, expected_path",
    [
        ([A], "default//foo/bar/baz/wut.yaml", "default", "repos/a/ttps/foo/bar/baz/wut.yaml"),
        (
            [A, B],
            "additional//attempt/again.yaml",
            "additional",
            "repos/b/even/more/ttps/attempt/again.yaml",
        ),
        (
            [A, B],
            "repos/b/even/more/ttps/attempt/again.yaml",
            "b",
            "repos/b/even/more/ttps/attempt/again.yaml",
        ),
        (
            [],
            "repos/b/even/more/ttps/attempt/again.yaml",
            "b",
            "repos/b/even/more/ttps/attempt/again.yaml",
        ),
    ],
)
def test_valid_refs(specs, ttp_ref, expected_name, expected_path):
    rc = RepoCollection(make_fs(), specs, "")
    repo, path = rc.resolve_ttp_ref(ttp_ref)
    assert repo.name == expected_name
    assert path.replace(os.sep, "/") == expected_path


def test_path_without_parent_repo():
    rc = RepoCollection(make_fs(), [A, B], "")
    with pytest.raises(RepoError, match="no parent repository"):
        rc.resolve_ttp_ref("not-a-repo/my-ttp.yaml")


def test_missing_plain_path():
    rc = RepoCollection(make_fs(), [A], "")
    with pytest.raises(RepoError, match="does not exist"):
        rc.resolve_ttp_ref("repos/a/nothing.yaml")


def test_get_repo():
    rc = RepoCollection(make_fs(), [A, B], "")
    assert rc.get_repo("additional").full_path.replace(os.sep, "/") == "repos/b"
    with pytest.raises(RepoError):
        rc.get_repo("missing")


def test_list_ttps():
    rc = RepoCollection(make_fs(), [A, B], "")
    assert rc.list_ttps() == [
        "default//foo/bar/baz/wut.yaml",
        "default//absolute/victory.yaml",
        "additional//attempt/again.yaml",
    ]


def test_list_ttps_empty_collection():
    assert RepoCollection(make_fs(), [], "").list_ttps() == []


def test_resolve_on_real_fs(tmp_path):
    repo_dir = tmp_path / "myrepo"
    (repo_dir / "ttps").mkdir(parents=True)
    (repo_dir / REPO_CONFIG_FILE_NAME).write_text('ttp_search_paths: ["ttps"]')
    ttp = repo_dir / "ttps" / "x.yaml"
    ttp.write_text("placeholder")

    rc = RepoCollection(OsFileSystem(), [], "")
    repo, path = rc.resolve_ttp_ref(str(ttp))
    assert repo.name == "myrepo"
    assert path == os.path.abspath(str(ttp))
    assert repo.find_ttp("x.yaml") == os.path.normpath(str(ttp))