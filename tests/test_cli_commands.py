import os
from pathlib import Path

from click.testing import CliRunner

from deporder.cli import deporder


def _make_fragments(root: Path) -> Path:
    root.mkdir()
    (root / "path.sh").write_text("# after: env.sh\nexport PATH=$HOME/bin:$PATH\n")
    (root / "env.sh").write_text("# before: prompt.sh\nexport EDITOR=vi\n")
    (root / "prompt.sh").write_text("PS1='$ '\n")
    (root / "alias.sh").write_text("alias ll='ls -l'\n")
    (root / ".ignored").write_text("# before: env.sh\n")
    return root


def test_order_subcommand(tmp_path: Path):
    root = _make_fragments(tmp_path / "rc.d")
    result = CliRunner().invoke(deporder, ["order", str(root)])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["env.sh", "path.sh", "prompt.sh", "alias.sh"]


def test_compile_to_stdout(tmp_path: Path):
    root = _make_fragments(tmp_path / "rc.d")
    result = CliRunner().invoke(deporder, ["compile", str(root)])
    assert result.exit_code == 0, result.output
    out = result.output
    assert out.startswith(f"\n# START env.sh\n# from {root.resolve() / 'env.sh'}\n")
    starts = [line for line in out.splitlines() if line.startswith("# START")]
    assert starts == [
        "# START env.sh",
        "# START path.sh",
        "# START prompt.sh",
        "# START alias.sh",
    ]
    assert "# END alias.sh" in out
    assert ".ignored" not in out


def test_compile_timed(tmp_path: Path):
    root = _make_fragments(tmp_path / "rc.d")
    result = CliRunner().invoke(deporder, ["compile", "--timed", str(root)])
    assert result.exit_code == 0, result.output
    assert "{ echo -n env.sh; time (" in result.output
    assert ") }\n# END env.sh" in result.output


def test_compile_to_file_and_skip_when_up_to_date(tmp_path: Path):
    root = _make_fragments(tmp_path / "rc.d")
    out = tmp_path / "rc.compiled"
    runner = CliRunner()

    result = runner.invoke(deporder, ["compile", str(root), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert "# START path.sh" in out.read_text()

    out.write_text("sentinel")
    newest = max(p.stat().st_mtime for p in root.iterdir())
    os.utime(out, (newest + 10, newest + 10))
    result = runner.invoke(deporder, ["compile", str(root), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text() == "sentinel"

    os.utime(out, (newest - 10, newest - 10))
    result = runner.invoke(deporder, ["compile", str(root), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text() != "sentinel"


def test_cycle_is_reported(tmp_path: Path):
    root = tmp_path / "rc.d"
    root.mkdir()
    (root / "a").write_text("# before: b\n")
    (root / "b").write_text("# before: a\n")
    result = CliRunner().invoke(deporder, ["order", str(root)])
    assert result.exit_code == 1
    assert "error: dependency cycle detected:" in result.output
    assert "a -> b" in result.output
    assert "b -> a" in result.output


def test_compile_cycle_is_reported(tmp_path: Path):
    root = tmp_path / "rc.d"
    root.mkdir()
    (root / "a").write_text("# after: a\n")
    result = CliRunner().invoke(deporder, ["compile", str(root)])
    assert result.exit_code == 1
    assert "a -> a" in result.output


def test_missing_root_is_an_access_error(tmp_path: Path):
    result = CliRunner().invoke(deporder, ["order", str(tmp_path / "missing")])
    assert result.exit_code == 1
    assert result.output.startswith("error: ")
    assert "missing" in result.output


def test_workers_option_and_env(tmp_path: Path):
    root = _make_fragments(tmp_path / "rc.d")
    runner = CliRunner()
    result = runner.invoke(
        deporder,
        ["--log-level", "debug", "order", "--workers", "1", str(root)],
        env={"DEPORDER_QUEUE_SIZE": "1"},
    )
    assert result.exit_code == 0, result.output
    assert "env.sh" in result.output


def test_invalid_env_configuration(tmp_path: Path):
    result = CliRunner().invoke(
        deporder, ["order", str(tmp_path)], env={"DEPORDER_QUEUE_SIZE": "0"}
    )
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_version_flag():
    result = CliRunner().invoke(deporder, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip()


def test_compile_to_file_preserves_fragment_bytes(tmp_path: Path):
    root = tmp_path / "rc.d"
    root.mkdir()
    raw = b"echo caf\xe9\r\nexport X=1\r\n"
    (root / "a.sh").write_bytes(raw)
    out = tmp_path / "rc.compiled"
    result = CliRunner().invoke(deporder, ["compile", str(root), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert raw in out.read_bytes()


def test_failed_compile_leaves_no_output_behind(tmp_path: Path):
    root = tmp_path / "rc.d"
    root.mkdir()
    (root / "a").write_text("# before: b\n")
    (root / "b").write_text("# before: a\n")
    (root / "x").write_text("echo x\n")
    out = tmp_path / "rc.compiled"
    runner = CliRunner()
    for _ in range(2):
        result = runner.invoke(deporder, ["compile", str(root), "--out", str(out)])
        assert result.exit_code == 1
        assert "error: dependency cycle detected:" in result.output
        assert not out.exists()
    assert list(tmp_path.iterdir()) == [root]


def test_failed_compile_keeps_previous_output(tmp_path: Path):
    root = tmp_path / "rc.d"
    root.mkdir()
    (root / "a").write_text("# after: a\n")
    out = tmp_path / "rc.compiled"
    out.write_text("previous")
    os.utime(out, (0, 0))
    result = CliRunner().invoke(deporder, ["compile", str(root), "--out", str(out)])
    assert result.exit_code == 1
    assert out.read_text() == "previous"


def test_compile_into_missing_directory_is_reported(tmp_path: Path):
    root = _make_fragments(tmp_path / "rc.d")
    out = tmp_path / "nope" / "rc.compiled"
    result = CliRunner().invoke(deporder, ["compile", str(root), "--out", str(out)])
    assert result.exit_code == 1
    assert result.output.startswith(f"error: {out}")


def test_unusable_output_path_is_reported(tmp_path: Path):
    root = _make_fragments(tmp_path / "rc.d")
    blocker = tmp_path / "plain-file"
    blocker.write_text("")
    result = CliRunner().invoke(
        deporder, ["compile", str(root), "--out", str(blocker / "rc.compiled")]
    )
    assert result.exit_code == 1
    assert result.output.startswith("error: ")
