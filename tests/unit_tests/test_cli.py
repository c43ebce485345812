import pytest
from click.testing import CliRunner

from fossil_store.cli import cli


@pytest.fixture
def runner(mocked_aws):
    return CliRunner()


def test_show_config(runner):
    result = runner.invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert "S3_BUCKET_NAME: test-fossil-bucket" in result.output
    assert "testing" not in result.output


def test_capabilities(runner):
    result = runner.invoke(cli, ["capabilities"])

    assert result.exit_code == 0
    assert "Move implemented: True" in result.output


def test_put_hide_list_and_unhide(runner):
    with runner.isolated_filesystem():
        with open("chunk.bin", "wb") as f:
            f.write(b"0123456789")

        assert runner.invoke(cli, ["put", "chunk.bin", "chunks/abcd"]).exit_code == 0
        assert "abcd" in runner.invoke(cli, ["ls", "chunks"]).output

        assert runner.invoke(cli, ["hide", "chunks/abcd"]).exit_code == 0
        listed = runner.invoke(cli, ["ls", "chunks"]).output
        assert "abcd.fsl" in listed

        assert runner.invoke(cli, ["stat", "chunks/abcd"]).exit_code == 1
        assert runner.invoke(cli, ["stat", "chunks/abcd.fsl"]).exit_code == 0

        assert runner.invoke(cli, ["unhide", "chunks/abcd"]).exit_code == 0
        result = runner.invoke(cli, ["stat", "chunks/abcd"])
        assert result.exit_code == 0
        assert "10 bytes" in result.output


def test_get_downloads_file(runner):
    with runner.isolated_filesystem():
        with open("snapshot", "wb") as f:
            f.write(b"{}")
        runner.invoke(cli, ["put", "snapshot", "snapshots/1/1"])

        result = runner.invoke(cli, ["get", "snapshots/1/1", "restored"])

        assert result.exit_code == 0
        with open("restored", "rb") as f:
            assert f.read() == b"{}"


def test_get_missing_file_fails(runner):
    with runner.isolated_filesystem():
        result = runner.invoke(cli, ["get", "snapshots/9/9", "restored"])

    assert result.exit_code != 0
    assert "Error" in result.output
