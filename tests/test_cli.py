from pathlib import Path
from unittest.mock import Mock

import pytest

import cli
import pokefetch.runner
from pokefetch.outcome import AggregateReport, Failed, FailureReason, Success


def fake_report(*outcomes):
    return AggregateReport(outcomes=list(outcomes), elapsed=0.5)


def test_fetch_passes_items_and_config(monkeypatch, tmp_path, capsys):
    run_batch = Mock(return_value=fake_report(Success("bulbasaur", Path("b.json"), attempts=1)))
    monkeypatch.setattr(pokefetch.runner, "run_batch", run_batch)

    code = cli.main(
        [
            "fetch",
            "bulbasaur",
            "--output-dir", str(tmp_path / "out"),
            "--log-file", str(tmp_path / "fetch.log"),
            "--max-retries", "5",
            "--max-workers", "8",
            "--retry-delay", "0.5",
            "--no-preflight",
        ]
    )

    assert code == 0
    items, config = run_batch.call_args.args
    assert items == ["bulbasaur"]
    assert config.max_retries == 5
    assert config.max_workers == 8
    assert config.retry_delay == 0.5
    assert config.preflight is False
    assert config.output_dir == tmp_path / "out"
    assert "Fetched 1/1 items (100.0% success)" in capsys.readouterr().out


def test_fetch_exit_code_reflects_failures(monkeypatch, tmp_path):
    report = fake_report(
        Success("bulbasaur", Path("b.json"), attempts=1),
        Failed("xx", FailureReason.INVALID_IDENTIFIER, attempts=0),
    )
    monkeypatch.setattr(pokefetch.runner, "run_batch", Mock(return_value=report))

    code = cli.main(["fetch", "bulbasaur", "xx", "--log-file", str(tmp_path / "f.log")])

    assert code == 1


def test_items_file_is_merged_and_defaults_apply(monkeypatch, tmp_path):
    run_batch = Mock(return_value=fake_report())
    monkeypatch.setattr(pokefetch.runner, "run_batch", run_batch)
    items_file = tmp_path / "items.txt"
    items_file.write_text("charmander\nsquirtle\n", encoding="utf-8")

    cli.main(["fetch", "bulbasaur", "--items-file", str(items_file)])
    assert run_batch.call_args.args[0] == ["bulbasaur", "charmander", "squirtle"]

    cli.main(["fetch"])
    assert run_batch.call_args.args[0] == ["bulbasaur", "ivysaur", "venusaur"]


def test_report_flag_writes_json(monkeypatch, tmp_path):
    report = fake_report(Success("bulbasaur", Path("b.json"), attempts=1))
    monkeypatch.setattr(pokefetch.runner, "run_batch", Mock(return_value=report))
    report_path = tmp_path / "report.json"

    cli.main(["fetch", "bulbasaur", "--report", str(report_path)])

    assert report_path.exists()


@pytest.mark.parametrize(
    "argv",
    [
        ["fetch", "--max-retries", "0"],
        ["fetch", "--rate-limit-multiplier", "1"],
        ["fetch", "--items-file", "does/not/exist.txt"],
        ["fetch", "--max-workers", "many"],
    ],
)
def test_bad_arguments_exit_with_usage_error(argv):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    assert excinfo.value.code == 2
