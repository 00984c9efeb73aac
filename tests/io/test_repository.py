import json

import pytest
from pydantic import ValidationError

from roamly.domain.entities.destination import Destination
from roamly.io.repository import InMemoryRepository, JsonDestinationRepository, parse_destinations

RAW = {
    "destinations": [
        {
            "id": 1,
            "type": "plane",
            "start": [52.1672, 20.9679],
            "coords": [35.8989, 14.5146],
            "name": "Valletta",
            "date": "May 2023",
            "description": "Limestone and sea.",
            "imageUrl": "https://example.org/valletta.jpg",
            "videoUrl": "",
        },
        {
            "id": 2,
            "type": "train",
            "start": [52.2297, 21.0122],
            "coords": [50.0647, 19.9450],
            "name": "Kraków",
            "videoUrl": "https://youtu.be/abc123",
        },
    ]
}


def write(tmp_path, payload):
    p = tmp_path / "destinations.json"
    p.write_text(json.dumps(payload), encoding="utf8")
    return p


def test_parse_maps_file_fields_to_destinations():
    a, b = parse_destinations(RAW)
    assert a == Destination(
        id=1,
        kind="plane",
        start=(52.1672, 20.9679),
        end=(35.8989, 14.5146),
        name="Valletta",
        date="May 2023",
        description="Limestone and sea.",
        image_url="https://example.org/valletta.jpg",
        video_url=None,  # blank URLs are absent
    )
    assert b.date == "" and b.image_url is None
    assert b.video_url == "https://youtu.be/abc123"


@pytest.mark.parametrize(
    "bad",
    [
        {},
        {"destinations": [{"id": 1, "type": "boat", "start": [0, 0], "coords": [1, 1], "name": "x"}]},
        {"destinations": [{"id": 1, "type": "car", "start": [0], "coords": [1, 1], "name": "x"}]},
        {"destinations": [{"id": 1, "type": "car", "start": [0, 0], "name": "x"}]},
    ],
)
def test_parse_rejects_malformed_records(bad):
    with pytest.raises(ValidationError):
        parse_destinations(bad)


def test_json_repository_loads_queries_and_saves(tmp_path):
    path = write(tmp_path, RAW)
    repo = JsonDestinationRepository(path)
    assert not repo.is_loaded()
    with pytest.raises(RuntimeError):
        repo.all()

    assert [d.id for d in repo.load()] == [1, 2]
    assert repo.is_loaded()
    assert repo.get_by_id(2).name == "Kraków"
    assert repo.get_by_id(3) is None
    assert [d.id for d in repo.get_by_kind("plane")] == [1]
    assert repo.get_by_kind("car") == []

    repo.update(2, name="Cracow")
    repo.remove(1)
    repo.save()

    saved = json.loads(path.read_text(encoding="utf8"))
    assert saved == {
        "destinations": [
            {
                "id": 2,
                "type": "train",
                "start": [52.2297, 21.0122],
                "coords": [50.0647, 19.945],
                "name": "Cracow",
                "date": "",
                "description": "",
                "videoUrl": "https://youtu.be/abc123",
            }
        ]
    }
    assert [d.name for d in JsonDestinationRepository(path).load()] == ["Cracow"]


def test_missing_file_raises(tmp_path):
    repo = JsonDestinationRepository(tmp_path / "nope.json")
    with pytest.raises(FileNotFoundError):
        repo.load()
    assert not repo.is_loaded()


def test_in_memory_crud_rules():
    d = Destination(7, "car", (0.0, 0.0), (1.0, 1.0), "Here")
    repo = InMemoryRepository([d])
    repo.load()
    with pytest.raises(ValueError):
        repo.add(d)
    with pytest.raises(ValueError):
        repo.update(7, id=8)
    assert repo.update(8, name="x") is None
    assert repo.update(7, id=7, name="There").name == "There"
    assert repo.remove(7)
    assert not repo.remove(7)
    assert repo.all() == []


def test_updates_and_additions_follow_the_file_rules():
    d = Destination(7, "car", (0.0, 0.0), (1.0, 1.0), "Here")
    repo = InMemoryRepository([d])
    repo.load()
    with pytest.raises(ValidationError):
        repo.update(7, kind="boat")
    with pytest.raises(ValidationError):
        repo.update(7, end=(1.0,))
    assert repo.get_by_id(7) == d
    with pytest.raises(ValidationError):
        repo.add(Destination(8, "zeppelin", (0.0, 0.0), (1.0, 1.0), "Up"))
    assert repo.get_by_id(8) is None
