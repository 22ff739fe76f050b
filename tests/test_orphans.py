"""Tests for claim artifact deletion and the leftover-claim sweep."""

from kompose_patch.parser.manifest import PodManifest
from kompose_patch.rewrite.orphans import claim_artifact_paths, delete_claim_artifact, sweep_orphans

from manifests import container, pod, pvc


def test_claim_artifact_paths(tmp_path):
    assert claim_artifact_paths(tmp_path, "cfgvol") == [
        tmp_path / "cfgvol-persistentvolumeclaim.yaml",
        tmp_path / "cfgvol-persistentvolumeclaim.yml",
    ]


def test_delete_claim_artifact(tmp_path, write_claim):
    yaml_claim = write_claim("cfgvol")
    yml_claim = write_claim("cfgvol", ext="yml")
    other = write_claim("datavol")

    deleted = delete_claim_artifact(tmp_path, "cfgvol")

    assert deleted == [yaml_claim, yml_claim]
    assert not yaml_claim.exists()
    assert not yml_claim.exists()
    assert other.exists()


def test_delete_missing_artifact_is_noop(tmp_path):
    assert delete_claim_artifact(tmp_path, "nothing") == []


def test_delete_without_directory(tmp_path, write_claim):
    claim = write_claim("cfgvol")
    assert delete_claim_artifact(None, "cfgvol") == []
    assert claim.exists()


def test_sweep_removes_leftover_managed_claim(tmp_path, write_claim, caplog):
    claim = write_claim("stale")
    m = PodManifest(pod(
        volumes=[pvc("stale"), pvc("data")],
        containers=[container("web", ("stale", "/etc/app.conf"), ("data", "/data"))],
    ), source="web-pod.yaml")

    with caplog.at_level("WARNING"):
        result = sweep_orphans(m, tmp_path)

    assert result.removed_volumes == ["stale"]
    assert result.dropped_mounts == [("web", "/etc/app.conf")]
    assert result.deleted_artifacts == [claim]
    assert [v.name for v in m.volumes] == ["data"]
    assert m.body["spec"]["containers"][0]["volumeMounts"] == [{"mountPath": "/data", "name": "data"}]
    assert m.unresolved_mounts() == []
    assert "leftover mounts of claim volume 'stale'" in caplog.text


def test_sweep_leaves_unmanaged_claims():
    m = PodManifest(pod(
        volumes=[pvc("data"), {"name": "app-config", "configMap": {"name": "app-config"}}],
        containers=[container("web", ("data", "/data/out.log"), ("app-config", "/etc/app.conf"))],
    ))

    result = sweep_orphans(m)

    assert result.removed_volumes == []
    assert [v.name for v in m.volumes] == ["data", "app-config"]


def test_sweep_keeps_unmanaged_mounts_of_claim(tmp_path, write_claim):
    claim = write_claim("mixed")
    m = PodManifest(pod(
        volumes=[pvc("mixed")],
        containers=[container("web", ("mixed", "/etc/app.conf"), ("mixed", "/var/data"))],
    ))

    result = sweep_orphans(m, tmp_path)

    assert result.dropped_mounts == [("web", "/etc/app.conf")]
    assert result.kept_volumes == ["mixed"]
    assert result.removed_volumes == []
    assert result.deleted_artifacts == []
    assert claim.exists()
    assert m.body["spec"]["containers"][0]["volumeMounts"] == [{"mountPath": "/var/data", "name": "mixed"}]
    assert m.unresolved_mounts() == []
