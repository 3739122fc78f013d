import os
import unittest

from floodrisk.config import Settings


class TestConfig(unittest.TestCase):
    def test_settings_defaults(self):
        previous = os.environ.pop("FLOOD_ENABLE_GOOGLE", None)
        try:
            s = Settings()
            self.assertTrue(s.enable_usgs)
            self.assertTrue(s.enable_open_elevation)
            self.assertFalse(s.enable_google)
            self.assertEqual(s.elevation_cache_ttl_seconds, 3600)
            self.assertEqual(s.elevation_max_retries, 2)
            self.assertEqual(s.nws_base_url, "https://api.weather.gov")
        finally:
            if previous is not None:
                os.environ["FLOOD_ENABLE_GOOGLE"] = previous

    def test_settings_env_override(self):
        previous = os.environ.get("FLOOD_ELEVATION_TIMEOUT_SECONDS")
        try:
            os.environ["FLOOD_ELEVATION_TIMEOUT_SECONDS"] = "2.5"
            s = Settings()
            self.assertEqual(s.elevation_timeout_seconds, 2.5)
        finally:
            if previous is None:
                os.environ.pop("FLOOD_ELEVATION_TIMEOUT_SECONDS", None)
            else:
                os.environ["FLOOD_ELEVATION_TIMEOUT_SECONDS"] = previous

    def test_base_url_trailing_slash_stripped(self):
        s = Settings(nws_base_url="https://example.com/", nominatim_base_url="https://osm.example//")
        self.assertEqual(s.nws_base_url, "https://example.com")
        self.assertEqual(s.nominatim_base_url, "https://osm.example")

    def test_placeholder_keys_are_missing(self):
        s = Settings(google_maps_api_key="YOUR_GOOGLE_MAPS_API_KEY", mapbox_api_key="  ")
        self.assertIsNone(s.google_maps_api_key)
        self.assertIsNone(s.mapbox_api_key)
        s = Settings(google_maps_api_key=" abc ")
        self.assertEqual(s.google_maps_api_key, "abc")


if __name__ == "__main__":
    unittest.main()
