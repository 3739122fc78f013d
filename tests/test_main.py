import unittest

from fastapi.testclient import TestClient

from floodrisk.main import app


class TestMain(unittest.TestCase):
    def test_app_metadata(self):
        self.assertEqual(app.title, "Flood Risk Planner")
        paths = app.openapi()["paths"]
        self.assertIn("/v1/assess", paths)
        self.assertIn("/v1/safer-location", paths)
        self.assertIn("get", paths["/v1/search"])

    def test_health(self):
        resp = TestClient(app).get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
