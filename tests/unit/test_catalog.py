"""Unit tests for the fixture catalog."""

import unittest

from floorsnap.layout.catalog import (
    DEFAULT_CATALOG,
    DEFAULT_ENTRIES,
    Catalog,
    ElementCategory,
    FixtureType,
)


class TestCatalog(unittest.TestCase):
    """Test catalog lookups."""

    def test_every_fixture_type_has_a_default_entry(self):
        self.assertEqual(set(DEFAULT_ENTRIES), set(FixtureType))
        self.assertEqual(len(DEFAULT_CATALOG), len(FixtureType))

    def test_resolve_by_string_key(self):
        entry = DEFAULT_CATALOG.resolve("base")
        self.assertEqual(entry.default_width, 24)
        self.assertEqual(entry.default_depth, 24)
        self.assertEqual(entry.category, ElementCategory.CABINET)

    def test_resolve_appliance(self):
        entry = DEFAULT_CATALOG.resolve(FixtureType.REFRIGERATOR)
        self.assertEqual(entry.category, ElementCategory.APPLIANCE)
        self.assertEqual((entry.default_width, entry.default_depth), (36, 30))

    def test_unknown_keys(self):
        self.assertIsNone(DEFAULT_CATALOG.resolve("hot-tub"))
        self.assertNotIn("hot-tub", DEFAULT_CATALOG)
        self.assertNotIn(42, DEFAULT_CATALOG)
        self.assertIsNone(FixtureType.parse("hot-tub"))

    def test_partial_catalog(self):
        """Types missing from a reduced catalog are treated as unknown."""
        catalog = Catalog({FixtureType.BASE: DEFAULT_ENTRIES[FixtureType.BASE]})
        self.assertIn("base", catalog)
        self.assertIn(FixtureType.BASE, catalog)
        self.assertNotIn(FixtureType.STOVE, catalog)
        self.assertIsNone(catalog.resolve("stove"))
        self.assertEqual(catalog.types(), [FixtureType.BASE])


if __name__ == "__main__":
    unittest.main()
