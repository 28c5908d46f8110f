"""
Tests for grounding-context selection.
"""

import unittest

from catalog.models import PricingConfig, ProductRecord
from catalog.relevance import NO_MATCHES_MARKER, build_context, format_context, select

BRANDS = ["Chanel", "Dior", "Tom Ford", "Guerlain", "Creed"]


def make_catalog(n=50):
    return [
        ProductRecord(
            id=str(i),
            brand=BRANDS[i % len(BRANDS)],
            name=f"Eau de Parfum {i}",
            base_price=float(10 + i),
        )
        for i in range(n)
    ]


class TestSelect(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_brand_query_returns_matches_in_catalog_order(self):
        result = select("chanel", self.catalog, limit=40)
        self.assertEqual(len(result), 10)
        self.assertTrue(all(r.brand == "Chanel" for r in result))
        self.assertEqual([r.id for r in result], [str(i) for i in range(0, 50, 5)])

    def test_limit_caps_results(self):
        result = select("chanel", self.catalog, limit=4)
        self.assertEqual([r.id for r in result], ["0", "5", "10", "15"])

    def test_case_insensitive_substring(self):
        result = select("TOM F", self.catalog, limit=100)
        self.assertEqual({r.brand for r in result}, {"Tom Ford"})

    def test_name_substring(self):
        result = select("m 42", self.catalog, limit=100)
        self.assertEqual([r.id for r in result], ["42"])

    def test_long_tokens_match_individually(self):
        result = select("есть ли creed или dior?", self.catalog, limit=100)
        self.assertEqual({r.brand for r in result}, {"Creed"})
        # "dior?" keeps its punctuation and so does not match
        result = select("creed dior", self.catalog, limit=100)
        self.assertEqual({r.brand for r in result}, {"Creed", "Dior"})
        self.assertEqual([r.id for r in result], sorted([r.id for r in result], key=int))

    def test_short_tokens_are_ignored(self):
        catalog = [ProductRecord(id="1", brand="Abc", name="Xyz", base_price=1.0)]
        self.assertEqual(select("abc xyz", catalog, limit=10), [])
        self.assertEqual(len(select("abc", catalog, limit=10)), 1)

    def test_no_matches(self):
        self.assertEqual(select("versace", self.catalog, limit=30), [])

    def test_blank_query_selects_nothing(self):
        self.assertEqual(select("   ", self.catalog, limit=30), [])

    def test_result_is_bounded_subset(self):
        for query in ("eau", "parfum 1", "guerlain dior creed", "x"):
            for limit in (0, 1, 7, 100):
                with self.subTest(query=query, limit=limit):
                    result = select(query, self.catalog, limit=limit)
                    self.assertLessEqual(len(result), limit)
                    positions = [self.catalog.index(r) for r in result]
                    self.assertEqual(positions, sorted(positions))


class TestContext(unittest.TestCase):

    def test_lines_use_display_prices(self):
        catalog = [
            ProductRecord(id="1", brand="Chanel", name="No.5", base_price=120.0),
            ProductRecord(id="2", brand="Chanel", name="Coco", base_price=None),
        ]
        config = PricingConfig(exchange_rate=98, fixed_markup=1500)
        self.assertEqual(
            format_context(catalog, config),
            "Chanel | No.5 | 13,260 ₽\nChanel | Coco | По запросу",
        )

    def test_empty_selection_gets_marker(self):
        config = PricingConfig()
        self.assertEqual(format_context([], config), NO_MATCHES_MARKER)
        self.assertEqual(build_context("versace", make_catalog(), config), NO_MATCHES_MARKER)


if __name__ == "__main__":
    unittest.main()
