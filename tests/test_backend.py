"""Tests for the YAML trip backend."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path

import pytest
import yaml

from tripboard.store.backend import BackendError, YamlTripBackend

TRIP = """
destinations:
  - id: ams
    name: Amsterdam
offers:
  - type: taxi
    offers:
      - {id: taxi-radio, title: Choose the radio station, price: 60}
waypoints:
  - id: wp-1
    type: taxi
    base_price: 20
    date_from: "2030-03-18T10:30:00"
    date_to: "2030-03-18T11:00:00+00:00"
    destination: ams
    offers: [taxi-radio]
"""


@pytest.fixture
def trip_file(tmp_path: Path) -> Path:
    path = tmp_path / "trip.yaml"
    path.write_text(TRIP, encoding="utf-8")
    return path


def test_loads_trip_document(trip_file: Path) -> None:
    backend = YamlTripBackend(trip_file)

    async def fetch() -> None:
        waypoints = await backend.get_waypoints()
        destinations = await backend.get_destinations()
        offers = await backend.get_offers()
        assert waypoints[0].offers == ("taxi-radio",)
        assert waypoints[0].date_from.tzinfo is not None
        assert destinations[0].name == "Amsterdam"
        assert offers[0].offers[0].price == 60

    asyncio.run(fetch())


def test_mutations_are_written_back(trip_file: Path) -> None:
    backend = YamlTripBackend(trip_file)

    async def mutate() -> str:
        (waypoint,) = await backend.get_waypoints()
        updated = await backend.update_waypoint(replace(waypoint, is_favorite=True))
        created = await backend.add_waypoint(replace(updated, id=""))
        await backend.delete_waypoint("wp-1")
        return created.id

    created_id = asyncio.run(mutate())

    saved = yaml.safe_load(trip_file.read_text(encoding="utf-8"))
    assert [item["id"] for item in saved["waypoints"]] == [created_id]
    assert saved["waypoints"][0]["is_favorite"] is True
    assert YamlTripBackend(trip_file).to_dict() == saved


def test_unknown_waypoint_is_rejected(trip_file: Path) -> None:
    backend = YamlTripBackend(trip_file)
    with pytest.raises(BackendError):
        asyncio.run(backend.delete_waypoint("ghost"))


def test_invalid_documents(tmp_path: Path) -> None:
    not_a_mapping = tmp_path / "list.yaml"
    not_a_mapping.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(BackendError, match="mapping"):
        YamlTripBackend(not_a_mapping)

    broken = tmp_path / "broken.yaml"
    broken.write_text("waypoints:\n  - id: x\n", encoding="utf-8")
    with pytest.raises(BackendError, match="Invalid trip file"):
        YamlTripBackend(broken)

    with pytest.raises(BackendError, match="Cannot read"):
        YamlTripBackend(tmp_path / "missing.yaml")


def test_failed_write_keeps_previous_trip(
    trip_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    backend = YamlTripBackend(trip_file)
    before = backend.to_dict()

    def fail_write(waypoints: object) -> None:
        raise BackendError("disk full")

    monkeypatch.setattr(backend, "_persist", fail_write)

    async def mutate() -> None:
        (waypoint,) = await backend.get_waypoints()
        with pytest.raises(BackendError):
            await backend.update_waypoint(replace(waypoint, is_favorite=True))
        with pytest.raises(BackendError):
            await backend.add_waypoint(replace(waypoint, id=""))
        with pytest.raises(BackendError):
            await backend.delete_waypoint("wp-1")
        assert backend.to_dict() == before
        assert await backend.get_waypoints() == [waypoint]

        monkeypatch.undo()
        await backend.delete_waypoint("wp-1")
        assert await backend.get_waypoints() == []

    asyncio.run(mutate())

    assert yaml.safe_load(trip_file.read_text(encoding="utf-8"))["waypoints"] == []
