import unittest

from floodrisk.domain import Coordinate, RiskLevel
from floodrisk.reference_data import REFERENCE_LOCATIONS, SAFE_AREAS, nearest_safe_areas
from floodrisk.risk_engine import assess_risk


class TestReferenceData(unittest.TestCase):
    def test_counts(self):
        self.assertEqual(len(REFERENCE_LOCATIONS), 16)
        self.assertEqual(len(SAFE_AREAS), 5)
        self.assertTrue(all(area.risk == RiskLevel.LOW for area in SAFE_AREAS))

    def test_nearest_safe_areas_sorted(self):
        origin = Coordinate(latitude=39.75, longitude=-105.0)
        ranked = nearest_safe_areas(origin, limit=3)
        self.assertEqual([area.name for area, _ in ranked], ["Denver, CO", "Boulder, CO", "Salt Lake City, UT"])
        distances = [distance for _, distance in ranked]
        self.assertEqual(distances, sorted(distances))
        self.assertLess(distances[0], 1.0)

    def test_limit(self):
        origin = Coordinate(latitude=29.76, longitude=-95.37)
        self.assertEqual(len(nearest_safe_areas(origin, limit=10)), 5)
        self.assertEqual(nearest_safe_areas(origin, limit=0), [])

    def test_houston_reference_matches_engine(self):
        houston = next(loc for loc in REFERENCE_LOCATIONS if loc.name == "Houston, TX")
        assessment = assess_risk(houston.elevation_m, houston.rainfall_mm, True)
        self.assertEqual(assessment.level, houston.risk)


if __name__ == "__main__":
    unittest.main()
