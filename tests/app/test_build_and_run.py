# tests/app/test_build_and_run.py
import io
import json

import pytest

from roamly.app.build import build
from roamly.domain.state import Phase
from roamly.io.kernel_logging import KernelLogging
from roamly.io.recorder import JsonlSink, MemorySink
from roamly.io.repository import InMemoryRepository
from roamly.main import parse_args, run

DESTINATIONS = {
    "destinations": [
        {"id": 1, "type": "plane", "start": [52.17, 20.97], "coords": [35.9, 14.51], "name": "Valletta"},
        {"id": 2, "type": "car", "start": [52.23, 21.01], "coords": [54.35, 18.65], "name": "Gdańsk"},
    ]
}


@pytest.fixture
def data_file(tmp_path):
    p = tmp_path / "destinations.json"
    p.write_text(json.dumps(DESTINATIONS), encoding="utf8")
    return p


def test_build_runs(data_file):
    cfg = {
        "name": "test",
        "run_id": "t-1",
        "data": {"path": str(data_file)},
        "animation": {"duration_ms": 600},
    }
    sink = MemorySink()
    app = build(cfg, sinks=(sink,))
    assert isinstance(app.kernel._hooks, KernelLogging)

    app.catalog.load()
    app.catalog.on_marker_click(app.catalog.get_destination(2))
    app.kernel.run()
    assert app.journey.phase is Phase.DETAILS
    assert all(e.run_id == "t-1" for e in sink.events)
    assert sink.names()[0] == "journey_selected"


def test_jsonl_sink_writes_one_line_per_event():
    buf = io.StringIO()
    app = build(repository=InMemoryRepository(), sinks=(JsonlSink(buf),), use_logging=False)
    app.catalog.load()
    app.journey.reset()
    line = json.loads(buf.getvalue().strip())
    assert line["name"] == "journey_reset"
    assert line["run_id"] == "local"


def test_cli_plays_every_destination(data_file, tmp_path, capsys):
    cfg = tmp_path / "app.yaml"
    cfg.write_text("runId: cli\nanimation:\n  durationMs: 300\n", encoding="utf8")
    assert run([str(data_file), "--config", str(cfg), "--log-level", "WARNING"]) == 0

    events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    arrived = [e["destination_id"] for e in events if e["name"] == "journey_phase" and e["phase"] == "details"]
    assert arrived == [1, 2]
    assert {e["run_id"] for e in events} == {"cli"}


def test_cli_reports_unknown_destination(data_file):
    assert run([str(data_file), "--select", "2", "--select", "99"]) == 1


def test_cli_rejects_bad_speed(data_file):
    with pytest.raises(SystemExit):
        parse_args([str(data_file), "--speed", "0"])
