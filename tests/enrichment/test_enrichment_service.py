from __future__ import annotations

import json
import logging
import math

import pytest

from flight4d.enrichment.airport_catalog import AirportCatalog, MissingAirportError
from flight4d.enrichment.enrich_cli import main as enrich_main
from flight4d.enrichment.enrichment_service import EnrichmentInputs, EnrichmentService, enrich_record
from flight4d.enrichment.flight_records import parse_flight_record
from flight4d.enrichment.output_records import (
    flight_from_record,
    flight_to_record,
    load_flights,
    write_enriched_flights,
)
from flight4d.enrichment.route_parser import RouteParseError
from flight4d.safety.separation_config import SimulationConfig
from flight4d.trajectory.domain_types import Point2D, TrajectoryError
from flight4d.trajectory.geodesy import KNOT_TO_MPS
from flight4d.trajectory.path_builder import PathBuilder

AIRPORTS = {
    "CYYZ": {"lat": 43.6777, "lon": -79.6248},
    "CYUL": {"lat": 45.4706, "lon": -73.7408},
    "CYOW": {"lat": 45.3225, "lon": -75.6692},
}

OUTPUT_KEYS = {
    "ACID",
    "planeType",
    "passengers",
    "isCargo",
    "departure",
    "arrival",
    "cruiseAltFt",
    "speedKts",
    "depTime",
    "arrTime",
    "durationSec",
    "distanceMeters",
    "waypoints",
    "trajectory",
}


def _raw(**overrides):
    raw = {
        "ACID": "ACA101",
        "Plane type": "A320",
        "departure airport": "CYYZ",
        "arrival airport": "CYUL",
        "departure time": 1_700_000_000,
        "aircraft speed": 450,
        "altitude": 35000,
        "route": "44.5N/77.0W",
        "passengers": 150,
        "is_cargo": False,
    }
    raw.update(overrides)
    return raw


@pytest.fixture
def catalog() -> AirportCatalog:
    return AirportCatalog.from_mapping(AIRPORTS)


def test_enrich_record_derives_arrival_from_distance_and_speed(catalog):
    flight = enrich_record(parse_flight_record(_raw()), catalog)

    expected_waypoints = (Point2D(43.6777, -79.6248), Point2D(44.5, -77.0), Point2D(45.4706, -73.7408))
    assert flight.waypoints == expected_waypoints
    distance_m = PathBuilder(expected_waypoints).total_length
    expected_duration = math.floor(distance_m / (450 * KNOT_TO_MPS) + 0.5)
    assert flight.distance_meters == math.floor(distance_m + 0.5)
    assert flight.dep_time == 1_700_000_000
    assert flight.arr_time == 1_700_000_000 + expected_duration
    assert flight.duration_sec == expected_duration

    first, last = flight.trajectory[0], flight.trajectory[-1]
    assert (first.t, first.lat, first.lon, first.alt_ft) == (1_700_000_000, 43.6777, -79.6248, 0)
    assert (last.t, last.lat, last.lon, last.alt_ft) == (flight.arr_time, 45.4706, -73.7408, 0)
    assert max(p.alt_ft for p in flight.trajectory) == 35000


def test_explicit_arrival_time_is_used(catalog):
    flight = enrich_record(
        parse_flight_record(_raw(**{"arrival time": 1_700_003_600})), catalog, step_sec=600
    )
    assert flight.arr_time == 1_700_003_600
    assert [p.t - flight.dep_time for p in flight.trajectory] == [0, 600, 1200, 1800, 2400, 3000, 3600]


def test_missing_airport_names_code_and_flight(catalog):
    record = parse_flight_record(_raw(**{"arrival airport": "CYXX"}))
    with pytest.raises(MissingAirportError) as excinfo:
        enrich_record(record, catalog)
    assert excinfo.value.icao == "CYXX"
    assert "CYXX" in str(excinfo.value)
    assert "ACA101" in str(excinfo.value)
    assert isinstance(excinfo.value, KeyError)


def test_bad_route_token_names_flight_and_token(catalog):
    record = parse_flight_record(_raw(route="44.5N/77.0W 45.0Z/76.0W"))
    with pytest.raises(RouteParseError) as excinfo:
        enrich_record(record, catalog)
    assert "ACA101" in str(excinfo.value)
    assert excinfo.value.token == "45.0Z"


def test_non_positive_duration_gives_empty_trajectory_rejected_downstream(catalog, caplog):
    record = parse_flight_record(_raw(**{"arrival time": 1_700_000_000}))
    with caplog.at_level(logging.WARNING):
        flight = enrich_record(record, catalog)
    assert flight.trajectory == ()
    assert "non-positive duration" in caplog.text
    with pytest.raises(TrajectoryError, match="ACA101"):
        flight_from_record(flight_to_record(flight))


def test_enrichment_is_all_or_nothing(catalog):
    records = [
        parse_flight_record(_raw()),
        parse_flight_record(_raw(ACID="WJA202", **{"departure airport": "KJFK"})),
    ]
    service = EnrichmentService(catalog, SimulationConfig(trajectory_step_sec=120))
    with pytest.raises(MissingAirportError, match="WJA202"):
        service.enrich(records)


def test_output_record_contract(catalog):
    flight = enrich_record(parse_flight_record(_raw()), catalog)
    record = flight_to_record(flight)
    assert set(record) == OUTPUT_KEYS
    assert record["departure"] == {"icao": "CYYZ", "lat": 43.6777, "lon": -79.6248}
    assert record["arrival"]["icao"] == "CYUL"
    assert record["cruiseAltFt"] == 35000
    assert record["speedKts"] == 450
    assert record["isCargo"] is False
    assert record["durationSec"] == record["arrTime"] - record["depTime"]
    assert set(record["trajectory"][0]) == {"t", "lat", "lon", "altFt"}
    assert set(record["waypoints"][1]) == {"lat", "lon"}


def test_write_and_load_round_trip(tmp_path, catalog):
    records = [parse_flight_record(_raw()), parse_flight_record(_raw(ACID="JZA303", route=""))]
    flights = EnrichmentService(catalog).enrich(records)
    path = write_enriched_flights(tmp_path / "out" / "flights_4d.json", flights)

    loaded = load_flights(path)
    assert [f.id for f in loaded] == ["ACA101", "JZA303"]
    assert loaded[1].waypoints == (Point2D(43.6777, -79.6248), Point2D(45.4706, -73.7408))
    assert len(loaded[0].trajectory) == len(flights[0].trajectory)
    assert loaded[0].trajectory[-1].t == flights[0].arr_time


def test_load_flights_requires_array(tmp_path):
    path = tmp_path / "flights_4d.json"
    path.write_text(json.dumps({"ACID": "X"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_flights(path)


def test_enrich_cli_writes_output(tmp_path):
    flights_path = tmp_path / "flights.json"
    airports_path = tmp_path / "airport.json"
    output_path = tmp_path / "flights_4d.json"
    config_path = tmp_path / "sim.yaml"
    flights_path.write_text(json.dumps([_raw(), _raw(ACID="POE404", route="")]), encoding="utf-8")
    airports_path.write_text(json.dumps(AIRPORTS), encoding="utf-8")
    config_path.write_text("trajectory_step_sec: 300\n", encoding="utf-8")

    enrich_main(
        [
            "--flights",
            str(flights_path),
            "--airports",
            str(airports_path),
            "--output",
            str(output_path),
            "--config",
            str(config_path),
            "--log-level",
            "ERROR",
        ]
    )

    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert [entry["ACID"] for entry in payload] == ["ACA101", "POE404"]
    times = [p["t"] for p in payload[0]["trajectory"]]
    assert times[1] - times[0] == 300


def test_enrich_cli_reports_missing_airport(tmp_path):
    flights_path = tmp_path / "flights.json"
    airports_path = tmp_path / "airport.json"
    flights_path.write_text(json.dumps([_raw(**{"arrival airport": "EGLL"})]), encoding="utf-8")
    airports_path.write_text(json.dumps(AIRPORTS), encoding="utf-8")

    with pytest.raises(SystemExit, match="EGLL"):
        enrich_main(
            [
                "--flights",
                str(flights_path),
                "--airports",
                str(airports_path),
                "--output",
                str(tmp_path / "never.json"),
                "--log-level",
                "ERROR",
            ]
        )
    assert not (tmp_path / "never.json").exists()


def _write_inputs(tmp_path, records):
    flights_path = tmp_path / "flights.json"
    airports_path = tmp_path / "airport.json"
    flights_path.write_text(json.dumps(records), encoding="utf-8")
    airports_path.write_text(json.dumps(AIRPORTS), encoding="utf-8")
    return EnrichmentInputs(flights_path=str(flights_path), airports_path=str(airports_path))


def test_service_from_inputs_enriches_configured_flights(tmp_path):
    inputs = _write_inputs(tmp_path, [_raw(), _raw(ACID="POE404", route="")])
    service = EnrichmentService.from_inputs(inputs, SimulationConfig(trajectory_step_sec=600))

    assert service.flights_path == tmp_path / "flights.json"
    flights = service.run()
    assert [f.id for f in flights] == ["ACA101", "POE404"]
    assert flights[0].trajectory[1].t - flights[0].trajectory[0].t == 600


def test_service_from_inputs_requires_existing_flights_file(tmp_path):
    inputs = _write_inputs(tmp_path, [_raw()])
    missing = EnrichmentInputs(flights_path=tmp_path / "nope.json", airports_path=inputs.airports_path)
    with pytest.raises(FileNotFoundError, match="nope.json"):
        EnrichmentService.from_inputs(missing)


def test_service_without_flights_path_cannot_load(catalog):
    with pytest.raises(ValueError, match="flights_path"):
        EnrichmentService(catalog).load_records()


def test_enrich_cli_reports_unwritable_output(tmp_path):
    inputs = _write_inputs(tmp_path, [_raw()])
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(SystemExit, match="ERROR"):
        enrich_main(
            [
                "--flights",
                str(inputs.flights_path),
                "--airports",
                str(inputs.airports_path),
                "--output",
                str(blocker / "flights_4d.json"),
                "--log-level",
                "ERROR",
            ]
        )
