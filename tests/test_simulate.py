"""
Tests for the headless simulation runner.
"""

import argparse
import json

import pytest

from tools.simulate import main, parse_actions, run


def test_parse_actions_sorted():
    assert parse_actions("5:play, 1:feed,,2.5:sleep") == [(1.0, "feed"), (2.5, "sleep"), (5.0, "play")]


@pytest.mark.parametrize("text", ["feed", "x:feed", "1:dance", "-1:feed"])
def test_parse_actions_rejects(text):
    with pytest.raises(argparse.ArgumentTypeError):
        parse_actions(text)


def test_short_run_only_decays():
    summary = run(20, seed=1)
    assert summary["stats"]["hunger"] == 92
    assert summary["stats"]["energy"] == 92
    assert summary["evolution"] == "eligible"
    assert summary["notifications"] == {}


def test_secret_ritual_after_stats_drop():
    actions = parse_actions("251:feed,252:feed,253:feed,254:play,255:sleep")
    summary = run(260, actions, seed=3)
    assert summary["actions_performed"] == 5
    assert summary["notifications"]["secret_found"] == 1


def test_run_with_data_dir_saves(tmp_path):
    run(10, data_dir=str(tmp_path), name="Rex", avatar="cat")
    assert json.loads((tmp_path / "petName.json").read_text(encoding="utf-8")) == "Rex"
    again = run(10, data_dir=str(tmp_path), name="Other")
    assert again["name"] == "Rex"
    assert again["avatar"] == "cat"
    assert again["stats"]["hunger"] == 92


def test_main_prints_json(capsys):
    assert main(["--seconds", "10", "--seed", "5", "--name", "Rex"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["name"] == "Rex"
    assert out["stats"]["happiness"] == 96


def test_main_rejects_bad_actions():
    with pytest.raises(SystemExit):
        main(["--actions", "3:dance"])
