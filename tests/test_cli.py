import base64

import pytest

from kubeop.cli.main import KubeOpCLI, parse_env, read_archive

from conftest import DEPLOYMENT_YAML, OPERATOR_GROUP_YAML, SERVICE_YAML, build_archive


def test_inspect_runs_offline(tmp_path, capsys):
    archive = tmp_path / "deployment.b64"
    archive.write_text(build_archive([
        ("deployment.yaml", DEPLOYMENT_YAML),
        ("bundle.yaml", SERVICE_YAML + "---\n" + OPERATOR_GROUP_YAML),
    ]))

    assert KubeOpCLI().run(["inspect", str(archive)]) == 0
    assert "OperatorGroup" in capsys.readouterr().out


def test_raw_tarball_is_encoded(tmp_path):
    encoded = build_archive([("deployment.yaml", DEPLOYMENT_YAML)])
    tarball = tmp_path / "deployment.tar.gz"
    tarball.write_bytes(base64.b64decode(encoded))

    assert read_archive(str(tarball)) == encoded


def test_bad_archive_exits_with_error(tmp_path):
    archive = tmp_path / "broken.b64"
    archive.write_text("definitely not base64 ***")

    assert KubeOpCLI().run(["inspect", str(archive)]) == 1


def test_missing_file_exits_with_error(tmp_path):
    assert KubeOpCLI().run(["inspect", str(tmp_path / "nope")]) == 1


def test_parse_env_pairs():
    assert parse_env(["A=1", "B=x=y", "EMPTY="]) == {"A": "1", "B": "x=y", "EMPTY": ""}
    with pytest.raises(ValueError):
        parse_env(["NOVALUE"])
