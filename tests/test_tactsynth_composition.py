import json
from pathlib import Path
from typing import Any

import pytest

from tactsynth.composition import (
    Composition,
    NoteEvent,
    load_composition,
    loads_composition,
    parse_composition,
)
from tactsynth.errors import MalformedCompositionError


def _composition() -> dict[str, Any]:
    return {
        "bpm": 120,
        "channels": [{"volume": 0.5}, {"volume": 0.25}],
        "composition": [
            {
                "channels": [
                    [[{"note": "a1", "len": 1.0}], [{"note": "p", "len": 1.0}]],
                    [[{"note": "c1", "len": 2.0}, {"note": "e1", "len": 2.0}]],
                ]
            }
        ],
    }


def test_parse_composition_reads_schema() -> None:
    composition = parse_composition(_composition())
    assert composition.bpm == 120
    assert composition.volumes == [0.5, 0.25]
    assert composition.quarter_seconds == pytest.approx(0.5)
    assert len(composition.measures) == 1
    first_beat = composition.measures[0].channels[0][0]
    assert first_beat == [NoteEvent(note="a1", len=1.0)]


def test_note_length_accepts_field_name() -> None:
    assert NoteEvent(note="a1", length=0.5).length == 0.5


def test_unknown_keys_are_ignored() -> None:
    data = _composition()
    data["title"] = "study"
    assert isinstance(parse_composition(data), Composition)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda data: data.pop("bpm"),
        lambda data: data.update(bpm=0),
        lambda data: data.update(bpm=-60),
        lambda data: data.update(bpm=60.5),
        lambda data: data.update(bpm="60"),
        lambda data: data.pop("channels"),
        lambda data: data["channels"][0].pop("volume"),
        lambda data: data["composition"][0]["channels"].pop(),
        lambda data: data["composition"][0]["channels"][0].append([]),
        lambda data: data["composition"][0]["channels"][0][0][0].pop("len"),
        lambda data: data["composition"][0]["channels"][0][0][0].update(len="long"),
        lambda data: data["composition"][0]["channels"][0][0][0].update(len="0.5"),
        lambda data: data["composition"][0]["channels"][0][0][0].update(len=True),
        lambda data: data["composition"][0]["channels"][0][0][0].update(len=float("nan")),
        lambda data: data["channels"][0].update(volume="0.5"),
        lambda data: data["channels"][0].update(volume=True),
        lambda data: data["channels"][0].update(volume=float("nan")),
        lambda data: data["channels"][0].update(volume=float("inf")),
    ],
)
def test_malformed_compositions_are_rejected(mutate: Any) -> None:
    data = _composition()
    mutate(data)
    with pytest.raises(MalformedCompositionError):
        parse_composition(data)


def test_loads_composition_rejects_invalid_json() -> None:
    with pytest.raises(MalformedCompositionError):
        loads_composition("{bpm: 60")
    with pytest.raises(MalformedCompositionError):
        loads_composition("[]")


def test_load_composition_from_file(tmp_path: Path) -> None:
    path = tmp_path / "song.json"
    path.write_text(json.dumps(_composition()), encoding="utf-8")
    assert load_composition(path).bpm == 120


def test_load_composition_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MalformedCompositionError):
        load_composition(tmp_path / "missing.json")


def test_integer_lengths_and_volumes_are_numbers() -> None:
    data = _composition()
    data["channels"][0]["volume"] = 1
    data["composition"][0]["channels"][0][0][0]["len"] = 2
    composition = parse_composition(data)
    assert composition.volumes[0] == 1.0
    assert composition.measures[0].channels[0][0][0].length == 2.0
