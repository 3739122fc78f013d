import math
import random
import unittest

from floodrisk.domain import Coordinate
from floodrisk.simulation import (
    SECONDS_PER_YEAR,
    regional_elevation_base,
    regional_rainfall_base,
    seasonal_factor,
    simulated_elevation,
    simulated_rainfall,
)


class FixedRandom(random.Random):
    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


class TestSimulatedElevation(unittest.TestCase):
    def test_regional_bases(self):
        self.assertEqual(regional_elevation_base(Coordinate(latitude=40.02, longitude=-105.27)), 1600)  # Boulder
        self.assertEqual(regional_elevation_base(Coordinate(latitude=25.76, longitude=-80.19)), 50)  # Miami
        self.assertEqual(regional_elevation_base(Coordinate(latitude=41.88, longitude=-87.63)), 100)  # Chicago

    def test_jitter_is_bounded_and_clamped(self):
        miami = Coordinate(latitude=25.76, longitude=-80.19)
        self.assertEqual(simulated_elevation(miami, FixedRandom(0.0)), 0.0)
        self.assertEqual(simulated_elevation(miami, FixedRandom(0.5)), 50.0)
        self.assertEqual(simulated_elevation(miami, FixedRandom(0.99)), 148.0)

    def test_never_negative(self):
        rng = random.Random(11)
        for i in range(200):
            coord = Coordinate(latitude=20 + i * 0.1, longitude=-80 - i * 0.2)
            self.assertGreaterEqual(simulated_elevation(coord, rng), 0.0)


class TestSimulatedRainfall(unittest.TestCase):
    def test_regional_bases(self):
        self.assertEqual(regional_rainfall_base(Coordinate(latitude=27.95, longitude=-82.46)), 65)  # Tampa
        self.assertEqual(regional_rainfall_base(Coordinate(latitude=47.61, longitude=-122.33)), 25)  # Seattle
        self.assertEqual(regional_rainfall_base(Coordinate(latitude=40.76, longitude=-111.89)), -10)  # Salt Lake City

    def test_seasonal_factor_range(self):
        self.assertAlmostEqual(seasonal_factor(0), 1.0)
        self.assertAlmostEqual(seasonal_factor(SECONDS_PER_YEAR / 4), 1.3)
        self.assertAlmostEqual(seasonal_factor(SECONDS_PER_YEAR * 3 / 4), 0.7)

    def test_floor_and_rounding(self):
        slc = Coordinate(latitude=40.76, longitude=-111.89)
        self.assertEqual(simulated_rainfall(slc, FixedRandom(0.0), clock=lambda: 0.0), 0.0)
        tampa = Coordinate(latitude=27.95, longitude=-82.46)
        value = simulated_rainfall(tampa, FixedRandom(0.25), clock=lambda: 0.0)
        self.assertEqual(value, 70.0)
        self.assertTrue(math.isclose(value * 10, round(value * 10)))


if __name__ == "__main__":
    unittest.main()
