"""
Unit tests for the JSON key/value persistence.
"""

import json
import os

import pytest

from models.pet import PetStats
from services.persistence import KEY_NAME, KEY_STATS, Persistence


def test_missing_values_fall_back(persistence):
    assert persistence.load_name() is None
    assert persistence.load_avatar() == "dog"
    assert persistence.load_stats() == PetStats()
    assert persistence.read("anything", default=7) == 7


def test_round_trip_each_key(persistence):
    stats = PetStats(hunger=1, energy=2, happiness=3, evolved=True, avatar="turtle")
    assert persistence.save_name("Rex")
    assert persistence.save_avatar("cat")
    assert persistence.save_stats(stats)
    assert persistence.load_name() == "Rex"
    assert persistence.load_avatar() == "cat"
    assert persistence.load_stats() == stats


def test_stats_file_is_plain_json(persistence):
    persistence.save_stats(PetStats(hunger=50))
    with open(persistence.path_for(KEY_STATS), encoding="utf-8") as f:
        data = json.load(f)
    assert data == {"hunger": 50, "energy": 100, "happiness": 100, "evolved": False, "avatarId": "dog"}


def test_unparseable_file_is_treated_as_absent(persistence):
    with open(persistence.path_for(KEY_NAME), "w", encoding="utf-8") as f:
        f.write('"unterminated')
    assert persistence.load_name() is None


def test_wrong_shape_stats_use_defaults(persistence):
    persistence.write(KEY_STATS, ["not", "a", "dict"])
    assert persistence.load_stats() == PetStats()


@pytest.mark.parametrize("text", [
    '{"hunger": Infinity, "energy": 50, "happiness": 50}',
    '{"hunger": 1e999, "energy": 50, "happiness": 50}',
    '{"hunger": NaN, "energy": -Infinity, "happiness": 50}',
])
def test_non_finite_stats_fall_back_per_field(persistence, text):
    with open(persistence.path_for(KEY_STATS), "w", encoding="utf-8") as f:
        f.write(text)
    s = persistence.load_stats()
    assert s.hunger == 100
    assert s.happiness == 50
    assert 0 <= s.energy <= 100


def test_overwrite_leaves_no_temp_files(persistence):
    for i in range(3):
        persistence.save_name(f"Pet{i}")
    assert sorted(os.listdir(persistence.base_dir)) == ["petName.json"]
    assert persistence.load_name() == "Pet2"


def test_failed_write_returns_false_and_cleans_up(persistence):
    assert persistence.write("bad", {"x": object()}) is False
    assert not any(name.endswith(".tmp") for name in os.listdir(persistence.base_dir))


def test_creates_nested_directory(tmp_path):
    p = Persistence(str(tmp_path / "a" / "b"))
    assert p.save_avatar("bird")
    assert (tmp_path / "a" / "b" / "petAvatar.json").exists()
