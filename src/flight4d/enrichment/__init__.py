"""Flight-plan parsing and 4D enrichment."""

from .airport_catalog import AirportCatalog, MissingAirportError
from .enrichment_service import EnrichmentInputs, EnrichmentService, enrich_record
from .flight_records import (
    FLIGHT_FIELDS,
    FlightRecord,
    FlightRecordError,
    load_flight_records,
    parse_flight_record,
)
from .output_records import flight_from_record, flight_to_record, load_flights, write_enriched_flights
from .route_parser import RouteParseError, parse_route

__all__ = [
    "AirportCatalog",
    "EnrichmentInputs",
    "EnrichmentService",
    "FLIGHT_FIELDS",
    "FlightRecord",
    "FlightRecordError",
    "MissingAirportError",
    "RouteParseError",
    "enrich_record",
    "flight_from_record",
    "flight_to_record",
    "load_flight_records",
    "load_flights",
    "parse_flight_record",
    "parse_route",
    "write_enriched_flights",
]
