"""Unit tests for app.services.books: catalog shape, search and sort keys."""

import unittest

from app.services.books import BOOK_SORT_KEYS, build_catalog, search_books
from app.services.listing import sort_items


class TestCatalog(unittest.TestCase):
    """build_catalog returns fresh, fully localised Book objects."""

    def test_every_book_has_three_locales(self) -> None:
        books = build_catalog()
        self.assertGreaterEqual(len(books), 10)
        for book in books:
            for text in (book.book_name, book.author_description, book.book_description):
                self.assertTrue(text.my and text.en and text.zh)

    def test_ids_unique(self) -> None:
        ids = [b.id for b in build_catalog()]
        self.assertEqual(len(ids), len(set(ids)))

    def test_each_call_builds_new_objects(self) -> None:
        first, second = build_catalog(), build_catalog()
        self.assertEqual(first, second)
        self.assertIsNot(first[0], second[0])


class TestSearchBooks(unittest.TestCase):
    """search_books matches any title locale, author, isbn and category."""

    def setUp(self) -> None:
        self.books = build_catalog()

    def test_author_case_insensitive(self) -> None:
        result = search_books(self.books, "ORWELL")
        self.assertEqual([b.author for b in result], ["George Orwell"])

    def test_chinese_title(self) -> None:
        result = search_books(self.books, "时间简史")
        self.assertEqual([b.book_name.en for b in result], ["A Brief History of Time"])

    def test_isbn(self) -> None:
        result = search_books(self.books, "978-0132350884")
        self.assertEqual([b.book_name.en for b in result], ["Clean Code"])

    def test_category(self) -> None:
        result = search_books(self.books, "philosophy")
        self.assertTrue(result)
        self.assertTrue(all(b.category == "Philosophy" for b in result))


class TestBookSortKeys(unittest.TestCase):

    def test_price_descending(self) -> None:
        ordered = sort_items(build_catalog(), BOOK_SORT_KEYS["price"], "desc")
        for a, b in zip(ordered, ordered[1:]):
            self.assertGreaterEqual(a.price, b.price)

    def test_book_name_uses_english_title(self) -> None:
        ordered = sort_items(build_catalog(), BOOK_SORT_KEYS["bookName"])
        titles = [b.book_name.en.lower() for b in ordered]
        self.assertEqual(titles, sorted(titles))


if __name__ == "__main__":
    unittest.main()
