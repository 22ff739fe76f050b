"""Tests for the click command line."""

import yaml
from click.testing import CliRunner

from kompose_patch import pipeline
from kompose_patch.cli import main

from manifests import container, pod, pvc


def test_patch_command(tmp_path, write_manifest, write_claim):
    path = write_manifest("web-pod.yaml", pod(
        volumes=[pvc("tlsvol")],
        containers=[container("web", ("tlsvol", "/certs/server.crt"))],
    ))
    write_claim("tlsvol")

    result = CliRunner().invoke(main, ["patch", str(tmp_path), "--no-color"])

    assert result.exit_code == 0, result.output
    assert "Deleted" in result.output
    assert f"Patched {path}" in result.output
    saved = yaml.safe_load(path.read_text())
    assert saved["spec"]["volumes"] == [{"name": "server-crt-secret", "secret": {"secretName": "server-crt-secret"}}]


def test_patch_dry_run_shows_changes(tmp_path, write_manifest):
    path = write_manifest("web-pod.yaml", pod(
        volumes=[pvc("cfgvol")],
        containers=[container("web", ("cfgvol", "/etc/app.ini"))],
    ))
    before = path.read_text()

    result = CliRunner().invoke(main, ["patch", str(tmp_path), "--dry-run", "--no-color"])

    assert result.exit_code == 0, result.output
    assert "Would patch" in result.output
    assert "spec.containers[0].volumeMounts[0].name: cfgvol -> app-config" in result.output
    assert path.read_text() == before


def test_patch_exits_nonzero_on_bad_manifest(tmp_path, write_manifest):
    (tmp_path / "broken-pod.yaml").write_text("spec: [")
    write_manifest("web-pod.yaml", pod(volumes=[], containers=[]))

    result = CliRunner().invoke(main, ["patch", str(tmp_path)])

    assert result.exit_code == 1
    assert "Malformed manifest" in result.output


def test_convert_without_compose_files(tmp_path):
    result = CliRunner().invoke(main, ["convert", str(tmp_path)])

    assert result.exit_code == 1
    assert "no compose.yaml or docker-compose.yaml found" in result.output


def test_convert_passes_options(tmp_path, monkeypatch):
    (tmp_path / "compose.yaml").write_text("services: {}\n")
    seen = {}

    def fake_convert_folder(root, folder, options):
        seen["options"] = options
        return pipeline.FolderReport(folder, output_dir=root / options.output_dirname)

    monkeypatch.setattr(pipeline, "convert_folder", fake_convert_folder)

    result = CliRunner().invoke(main, [
        "convert", str(tmp_path),
        "--output-dirname", "manifests",
        "--manifest-suffix", "-deployment.yaml",
        "--kompose", "/opt/kompose",
        "--timeout", "5",
    ])

    assert result.exit_code == 0, result.output
    options = seen["options"]
    assert options.output_dirname == "manifests"
    assert options.manifest_suffixes == ("-deployment.yaml",)
    assert options.kompose_bin == "/opt/kompose"
    assert options.timeout == 5
    assert "All done!" in result.output
