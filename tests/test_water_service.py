import unittest

from floodrisk.config import Settings
from floodrisk.data_sources.base import CallableWaterFeatureLookup
from floodrisk.data_sources.nominatim_client import NamedFeature
from floodrisk.domain import Coordinate
from floodrisk.errors import TransientProviderFailure
from floodrisk.water_service import WATER_QUERY_TERMS, WaterProximityChecker, is_water_feature

POINT = Coordinate(latitude=41.8781, longitude=-87.6298)


class TestIsWaterFeature(unittest.TestCase):
    def test_type_tags(self):
        self.assertTrue(is_water_feature(NamedFeature(name="Lake Michigan", category="natural", type="water")))
        self.assertTrue(is_water_feature(NamedFeature(name="Gulf", category="place", type="sea")))
        self.assertTrue(is_water_feature(NamedFeature(name="Atlantic", category="place", type="Ocean")))

    def test_water_class(self):
        self.assertTrue(is_water_feature(NamedFeature(name="Reservoir", category="water", type="reservoir")))

    def test_address_tags(self):
        feature = NamedFeature(name="Pier", category="man_made", type="pier", address={"lake": "Lake Michigan"})
        self.assertTrue(is_water_feature(feature))

    def test_non_water(self):
        feature = NamedFeature(name="Water Street", category="highway", type="residential", address={"city": "Chicago"})
        self.assertFalse(is_water_feature(feature))


class TestWaterProximityChecker(unittest.IsolatedAsyncioTestCase):
    def _checker(self, features_fn):
        return WaterProximityChecker(
            CallableWaterFeatureLookup(features=features_fn),
            settings=Settings(geocode_timeout_seconds=1, water_search_radius_deg=0.2),
        )

    async def test_near_water(self):
        seen = {}

        def features(coord, radius, timeout, term):
            seen["radius"] = radius
            return [NamedFeature(name="Lake Michigan", category="natural", type="water")]

        self.assertTrue(await self._checker(features).is_near_water(POINT))
        self.assertEqual(seen["radius"], 0.2)

    async def test_queries_every_term_when_nothing_matches(self):
        terms = []

        def features(coord, radius, timeout, term):
            terms.append(term)
            return [NamedFeature(name="Water Street", category="highway", type="residential")]

        self.assertFalse(await self._checker(features).is_near_water(POINT))
        self.assertEqual(terms, list(WATER_QUERY_TERMS))
        self.assertIn("ocean", terms)
        self.assertIn("sea", terms)

    async def test_stops_at_first_matching_term(self):
        terms = []

        def features(coord, radius, timeout, term):
            terms.append(term)
            if term == "sea":
                return [NamedFeature(name="Gulf of Mexico", category="place", type="sea")]
            return []

        self.assertTrue(await self._checker(features).is_near_water(Coordinate(latitude=29.7604, longitude=-95.3698)))
        self.assertEqual(terms, ["ocean", "sea"])

    async def test_no_features(self):
        self.assertFalse(await self._checker(lambda c, r, t, q: []).is_near_water(POINT))

    async def test_errors_default_to_false(self):
        def fail(coord, radius, timeout, term):
            raise TransientProviderFailure("HTTP 429", source="nominatim")

        self.assertFalse(await self._checker(fail).is_near_water(POINT))


if __name__ == "__main__":
    unittest.main()
