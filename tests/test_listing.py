"""Unit tests for app.services.listing: pagination math and sort order."""

import math
import random
import unittest

from app.services.listing import paginate, sort_items


class TestPaginateMath(unittest.TestCase):
    """total_pages = ceil(total / page_size); has_next / has_prev follow the page number."""

    def test_first_page(self) -> None:
        items, p = paginate(list(range(10)), page=1, page_size=3)
        self.assertEqual(items, [0, 1, 2])
        self.assertEqual(p.total, 10)
        self.assertEqual(p.total_pages, 4)
        self.assertTrue(p.has_next)
        self.assertFalse(p.has_prev)

    def test_last_partial_page(self) -> None:
        items, p = paginate(list(range(10)), page=4, page_size=3)
        self.assertEqual(items, [9])
        self.assertFalse(p.has_next)
        self.assertTrue(p.has_prev)

    def test_page_past_end_is_empty_not_error(self) -> None:
        items, p = paginate(list(range(10)), page=7, page_size=3)
        self.assertEqual(items, [])
        self.assertEqual(p.total, 10)
        self.assertEqual(p.total_pages, 4)
        self.assertFalse(p.has_next)
        self.assertTrue(p.has_prev)

    def test_empty_input(self) -> None:
        items, p = paginate([], page=1, page_size=10)
        self.assertEqual(items, [])
        self.assertEqual(p.total_pages, 0)
        self.assertFalse(p.has_next)
        self.assertFalse(p.has_prev)

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(ValueError):
            paginate([1], page=0, page_size=1)
        with self.assertRaises(ValueError):
            paginate([1], page=1, page_size=0)

    def test_pages_concatenate_to_full_list(self) -> None:
        rng = random.Random(3)
        for _ in range(25):
            n = rng.randint(0, 57)
            size = rng.randint(1, 12)
            data = list(range(n))
            _, first = paginate(data, 1, size)
            self.assertEqual(first.total_pages, math.ceil(n / size))
            collected = []
            for page in range(1, first.total_pages + 1):
                chunk, _ = paginate(data, page, size)
                collected.extend(chunk)
            self.assertEqual(collected, data)


class TestSortItems(unittest.TestCase):
    """sort_items orders by key, reversing for desc, without touching the input."""

    def test_ascending_and_descending(self) -> None:
        words = ["pear", "Apple", "banana", "cherry"]
        asc = sort_items(words, key=str.lower)
        desc = sort_items(words, key=str.lower, sort_order="desc")
        for a, b in zip(asc, asc[1:]):
            self.assertLessEqual(a.lower(), b.lower())
        for a, b in zip(desc, desc[1:]):
            self.assertGreaterEqual(a.lower(), b.lower())
        self.assertEqual(words, ["pear", "Apple", "banana", "cherry"])

    def test_numeric_key(self) -> None:
        self.assertEqual(sort_items([3, 10, 2], key=lambda x: x), [2, 3, 10])


if __name__ == "__main__":
    unittest.main()
