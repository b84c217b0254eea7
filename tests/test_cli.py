"""Tests for the command line entry point."""

import json

import pytest

from bac_tracker.main import main


def test_cli_logs_drink_and_prints_bac(tmp_path, capsys):
    state_file = tmp_path / "state.json"
    code = main(["--weight", "150", "--female", "--drink", "12", "oz", "5", "--state", str(state_file)])
    assert code == 0
    out = capsys.readouterr().out
    assert "Profile: female, 150 lb" in out
    assert "BAC now: 0.037% (safe)" in out
    assert "Time until zero: 2 hours 19 minutes" in out

    state = json.loads(state_file.read_text())
    assert state["user_profile"]["gender"] == "female"
    assert len(state["beverages"]) == 1


def test_cli_state_persists_and_delete(tmp_path, capsys):
    state_file = tmp_path / "state.json"
    main(["--weight", "70", "--unit", "kg", "--drink", "330", "ml", "5", "30", "--state", str(state_file)])
    beverage_id = json.loads(state_file.read_text())["beverages"][0]["id"]
    capsys.readouterr()

    main(["--delete", str(beverage_id), "--state", str(state_file)])
    out = capsys.readouterr().out
    assert "Profile: male, 70 kg" in out
    assert "BAC now: 0.000% (safe)" in out
    assert "Time until zero: N/A" in out
    assert json.loads(state_file.read_text())["beverages"] == []


def test_cli_demo(capsys):
    assert main(["--demo"]) == 0
    out = capsys.readouterr().out
    assert out.count(" oz @ ") == 3


def test_cli_rejects_bad_drink():
    with pytest.raises(SystemExit) as exc:
        main(["--drink", "12", "oz"])
    assert exc.value.code == 2


def test_cli_graph(tmp_path):
    pytest.importorskip("matplotlib")
    out = tmp_path / "graph.png"
    assert main(["--demo", "--graph", str(out)]) == 0
    assert out.exists()


@pytest.mark.parametrize("minutes_ago", ["nan", "inf", "1e15", "1e8", "soon"])
def test_cli_rejects_bad_minutes_ago(minutes_ago):
    with pytest.raises(SystemExit) as exc:
        main(["--drink", "12", "oz", "5", minutes_ago])
    assert exc.value.code == 2


def test_cli_weight_update_keeps_gender_and_unit(tmp_path, capsys):
    state_file = tmp_path / "state.json"
    main(["--female", "--weight", "60", "--unit", "kg", "--state", str(state_file)])
    capsys.readouterr()

    main(["--weight", "65", "--state", str(state_file)])
    assert "Profile: female, 65 kg" in capsys.readouterr().out

    main(["--male", "--state", str(state_file)])
    assert "Profile: male, 65 kg" in capsys.readouterr().out
