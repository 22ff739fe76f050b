"""Tests for compose folder discovery and output layout."""

import pytest

from kompose_patch.config import ConvertOptions
from kompose_patch.core.discovery import (
    discover_compose_folders,
    find_compose_file,
    find_managed_sources,
    output_dir_for,
)
from kompose_patch.errors import ComposeFileNotFound


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "compose.yaml").write_text("services: {}\n")
    for sub, filename in [("api", "docker-compose.yaml"), ("db", "compose.yaml"), ("web/nested", "compose.yml")]:
        (tmp_path / sub).mkdir(parents=True)
        (tmp_path / sub / filename).write_text("services: {}\n")
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "README.md").write_text("hi")
    # kompose output from an earlier run must not be picked up
    (tmp_path / "k8s-manifests" / "api").mkdir(parents=True)
    (tmp_path / "k8s-manifests" / "api" / "compose.yaml").write_text("services: {}\n")
    return tmp_path


def test_discover_compose_folders(tree):
    assert discover_compose_folders(tree) == [
        tree,
        tree / "api",
        tree / "db",
        tree / "web" / "nested",
    ]


def test_discover_respects_output_dirname(tree):
    folders = discover_compose_folders(tree, ConvertOptions(output_dirname="out"))
    assert tree / "k8s-manifests" / "api" in folders


def test_find_compose_file_priority(tmp_path):
    (tmp_path / "docker-compose.yaml").write_text("")
    assert find_compose_file(tmp_path).name == "docker-compose.yaml"
    (tmp_path / "compose.yaml").write_text("")
    assert find_compose_file(tmp_path).name == "compose.yaml"


def test_find_compose_file_missing(tmp_path):
    with pytest.raises(ComposeFileNotFound, match="No compose file found"):
        find_compose_file(tmp_path)


def test_output_dir_for(tree):
    assert output_dir_for(tree, tree) == tree / "k8s-manifests"
    assert output_dir_for(tree, tree / "web" / "nested") == tree / "k8s-manifests" / "nested"


def test_find_managed_sources(tmp_path):
    for name in ["b.ini", "a.conf", "tls.key", "tls.crt", "notes.txt", "compose.yaml", "x.conf.orig"]:
        (tmp_path / name).write_text("")
    (tmp_path / "dir.conf").mkdir()

    configs, secrets = find_managed_sources(tmp_path)

    assert [p.name for p in configs] == ["a.conf", "b.ini"]
    assert [p.name for p in secrets] == ["tls.crt", "tls.key"]
