# tests/test_packaging.py

"""Sanity checks on the project metadata in pyproject.toml."""

import tomllib
import unittest
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


class TestProjectMetadata(unittest.TestCase):
    """pyproject.toml declares what the package needs."""

    def setUp(self) -> None:
        with PYPROJECT.open("rb") as fh:
            self.project = tomllib.load(fh)["project"]

    def test_no_long_description_file(self) -> None:
        """The distribution publishes no readme file."""
        self.assertNotIn("readme", self.project)

    def test_console_script(self) -> None:
        self.assertEqual(self.project["scripts"]["pricetrend"], "main:main")

    def test_runtime_stack_declared(self) -> None:
        names = {
            dep.split(">")[0].split("=")[0].strip().lower()
            for dep in self.project["dependencies"]
        }
        for required in (
            "curl_cffi",
            "cloudscraper",
            "beautifulsoup4",
            "lxml",
            "python-dotenv",
            "rich",
            "textual",
        ):
            self.assertIn(required, names)


if __name__ == "__main__":
    unittest.main()
