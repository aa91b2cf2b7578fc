from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
import yaml

from dupblocks.cli import main


def _write_pair(root: Path) -> None:
    (root / "one.py").write_text(
        "def f():\n    a = 1\n    b = 2\n    return a + b\nprint(f())\n", encoding="utf-8"
    )
    (root / "two.py").write_text(
        "class K:\n    def f():\n        a = 1\n        b = 2\n        return a + b\n",
        encoding="utf-8",
    )


def _run(argv: list[str]) -> tuple[int, str, str]:
    out = io.StringIO()
    err = io.StringIO()
    code = main(argv, out_stream=out, err_stream=err)
    return code, out.getvalue(), err.getvalue()


def test_ignore_indentation_flag_finds_reindented_block(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_pair(tmp_path)
    monkeypatch.chdir(tmp_path)

    exact_code, exact_out, _ = _run(["--min-lines", "3", "*.py"])
    loose_code, loose_out, _ = _run(["--ignore-indentation", "--min-lines", "3", "*.py"])

    assert exact_code == loose_code == 0
    assert exact_out == "blocks: []\n"
    block = yaml.safe_load(loose_out)["blocks"][0]
    assert block["hits"] == [
        {"file": "one.py", "start_line": 1, "end_line": 4},
        {"file": "two.py", "start_line": 2, "end_line": 5},
    ]
    assert block["content"] == "def f():\n    a = 1\n    b = 2\n    return a + b\n"


def test_config_file_in_working_directory_supplies_settings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_pair(tmp_path)
    (tmp_path / "dupblocks.toml").write_text(
        "\n".join(
            [
                "[detect]",
                "min_lines = 3",
                "ignore_indentation = true",
                'patterns = ["*.py"]',
                "",
                "[report]",
                'format = "json"',
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    code, out, err = _run([])

    assert code == 0, err
    assert json.loads(out)["blocks"][0]["lines"] == 4


def test_diagnostics_log_option_writes_jsonl(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_pair(tmp_path)
    monkeypatch.chdir(tmp_path)

    code, _, err = _run(["--min-lines", "2", "--diagnostics-log", "logs/run.jsonl", "*.py"])

    assert code == 0
    assert err == ""
    events = [
        json.loads(line)
        for line in (tmp_path / "logs" / "run.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    stages = [event["stage"] for event in events]
    assert stages[0] == "config"
    assert stages[-1] == "report"
    assert events[0]["metadata"]["detect"]["min_lines"] == 2


def test_debug_flag_writes_progress_to_stderr(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_pair(tmp_path)
    monkeypatch.chdir(tmp_path)

    code, _, err = _run(["--debug", "--min-lines", "3", "*.py", "missing/*.py"])

    assert code == 0
    lines = err.splitlines()
    assert lines[:3] == [
        "[debug] min_lines=3",
        "[debug] ignore_indentation=false",
        "[debug] patterns: *.py missing/*.py",
    ]
    assert "[debug]   base does not exist, skipping" in lines
    assert "[debug] files matched: 2" in lines
    assert lines[-1] == "[debug] blocks after sort: 0"


def test_repeated_runs_are_byte_identical(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_pair(tmp_path)
    (tmp_path / "three.py").write_text(
        "    a = 1\n    b = 2\nprint(f())\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)

    outputs = {_run(["--min-lines", "2", "*.py"])[1] for _ in range(3)}

    assert len(outputs) == 1


@pytest.mark.parametrize(
    ("argv", "message"),
    [
        (["--min-lines", "0", "*.py"], "overrides.min_lines"),
        (["*.py"], "'detect.min_lines' is required"),
        (["--min-lines", "3"], "At least one file pattern"),
        (["--min-lines", "3", "--config", "absent.toml", "*.py"], "Cannot read config file"),
    ],
)
def test_configuration_errors_exit_with_usage_code(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, argv: list[str], message: str
) -> None:
    monkeypatch.chdir(tmp_path)

    code, out, err = _run(argv)

    assert code == 2
    assert out == ""
    assert err.startswith("usage: dupblocks")
    assert message in err


def test_non_integer_min_lines_is_an_argparse_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        main(["--min-lines", "many", "*.py"])

    assert excinfo.value.code == 2


@pytest.mark.parametrize("log_arg", ["blocker/run.jsonl", "logdir"])
def test_unusable_diagnostics_log_exits_with_usage_code(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, log_arg: str
) -> None:
    _write_pair(tmp_path)
    (tmp_path / "blocker").write_text("not a directory\n", encoding="utf-8")
    (tmp_path / "logdir").mkdir()
    monkeypatch.chdir(tmp_path)

    code, out, err = _run(["--min-lines", "2", "--diagnostics-log", log_arg, "*.py"])

    assert code == 2
    assert out == ""
    assert err.startswith("usage: dupblocks")
    assert f"error: Cannot open diagnostics log '{log_arg}'" in err
