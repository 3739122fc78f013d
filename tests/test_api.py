import logging
import time
import unittest

from fastapi.testclient import TestClient

from floodrisk.assessment_service import FloodRiskService
from floodrisk.config import Settings
from floodrisk.data_sources.base import CallablePlaceLookup
from floodrisk.domain import (
    Coordinate,
    Direction,
    LocationReport,
    Place,
    RiskLevel,
    SaferLocationResult,
)
from floodrisk.errors import TransientProviderFailure
from floodrisk.main import app as fastapi_app
from floodrisk.risk_engine import assess_risk

HOUSTON = Coordinate(latitude=29.7604, longitude=-95.3698)

SAFER = SaferLocationResult(
    name="Katy, Texas",
    coordinate=Coordinate(latitude=29.79, longitude=-95.82),
    distance_miles=20,
    direction=Direction.W,
    level=RiskLevel.LOW,
)


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        self.records.append(record)


class FakeService:
    def __init__(self, place=None, search_error=None, safer=SAFER):
        self.place = place
        self.search_error = search_error
        self.safer = safer
        self.evaluated = []

    async def evaluate(self, coord):
        self.evaluated.append(coord)
        assessment = assess_risk(25, 45, True)
        return LocationReport(
            coordinate=coord,
            assessment=assessment,
            description=assessment.description,
            safer_location=self.safer,
            safer_search_performed=True,
        )

    async def find_safer(self, coord):
        return self.safer

    async def search_location(self, query):
        if self.search_error:
            raise self.search_error
        return self.place


class TestApi(unittest.TestCase):
    def setUp(self):
        import floodrisk.api as api_mod

        self.api_mod = api_mod
        self._orig_service = api_mod.SERVICE
        self.service = FakeService(place=Place(name="Houston, Harris County, Texas", coordinate=HOUSTON))
        api_mod.SERVICE = self.service
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        self.api_mod.SERVICE = self._orig_service

    def test_assess(self):
        resp = self.client.post("/v1/assess", json={"latitude": 29.7604, "longitude": -95.3698})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["assessment"]["level"], "high")
        self.assertEqual(body["description"], "High flood risk - consider evacuation")
        self.assertEqual(body["safer_location"]["name"], "Katy, Texas")
        self.assertEqual(self.service.evaluated, [HOUSTON])

    def test_assess_logs_structured_fields(self):
        handler = _ListHandler()
        base_logger = self.api_mod.logger.logger
        orig_level = base_logger.level
        base_logger.setLevel(logging.DEBUG)
        base_logger.addHandler(handler)
        try:
            self.client.post("/v1/assess", json={"latitude": 29.7604, "longitude": -95.3698})
        finally:
            base_logger.removeHandler(handler)
            base_logger.setLevel(orig_level)
        by_message = {record.getMessage(): record for record in handler.records}
        self.assertEqual(by_message["Assessing location"].coordinate, HOUSTON.as_text())
        self.assertEqual(by_message["Assessment result"].level, "high")
        self.assertEqual(by_message["Assessment result"].tag, "floodrisk/api")

    def test_assess_rejects_out_of_range(self):
        resp = self.client.post("/v1/assess", json={"latitude": 95, "longitude": 0})
        self.assertEqual(resp.status_code, 422)
        resp = self.client.post("/v1/assess", json={"latitude": 0, "longitude": 0, "extra": 1})
        self.assertEqual(resp.status_code, 422)

    def test_search(self):
        resp = self.client.get("/v1/search", params={"q": "Houston"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["place"]["name"], "Houston, Harris County, Texas")
        self.assertEqual(body["report"]["coordinate"], {"latitude": 29.7604, "longitude": -95.3698})

    def test_search_empty_query(self):
        resp = self.client.get("/v1/search", params={"q": "  "})
        self.assertEqual(resp.status_code, 400)

    def test_search_not_found(self):
        self.api_mod.SERVICE = FakeService(place=None)
        resp = self.client.get("/v1/search", params={"q": "Atlantis"})
        self.assertEqual(resp.status_code, 404)

    def test_search_provider_failure(self):
        self.api_mod.SERVICE = FakeService(search_error=TransientProviderFailure("HTTP 503", source="nominatim"))
        resp = self.client.get("/v1/search", params={"q": "Houston"})
        self.assertEqual(resp.status_code, 502)

    def test_search_timeout_is_bad_gateway(self):
        def slow_forward(query, timeout):
            time.sleep(0.5)
            return None

        self.api_mod.SERVICE = FloodRiskService(
            settings=Settings(geocode_timeout_seconds=0.05),
            elevation=object(),
            rainfall=object(),
            water=object(),
            places=CallablePlaceLookup(reverse=lambda c, t: None, forward=slow_forward),
            search=object(),
        )
        resp = self.client.get("/v1/search", params={"q": "Houston"})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json(), {"detail": "Error searching for location."})

    def test_safer_location(self):
        resp = self.client.post("/v1/safer-location", json={"latitude": 29.7604, "longitude": -95.3698})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["result"]["direction"], "W")

    def test_safer_location_none(self):
        self.api_mod.SERVICE = FakeService(safer=None)
        resp = self.client.post("/v1/safer-location", json={"latitude": 29.7604, "longitude": -95.3698})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"result": None})

    def test_safe_areas(self):
        resp = self.client.get("/v1/safe-areas", params={"latitude": 39.75, "longitude": -105.0, "limit": 2})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([item["area"]["name"] for item in body], ["Denver, CO", "Boulder, CO"])

    def test_reference_locations(self):
        resp = self.client.get("/v1/reference-locations")
        self.assertEqual(resp.status_code, 200)
        names = [loc["name"] for loc in resp.json()]
        self.assertIn("Houston, TX", names)
        self.assertEqual(len(names), 16)


if __name__ == "__main__":
    unittest.main()
