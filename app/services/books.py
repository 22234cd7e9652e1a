"""Read-only demo book catalog with trilingual (Myanmar, English, Chinese) text."""

from app.schemas.book import Book, LocalizedText
from app.services.listing import SortKey

# Category label per locale: en -> (my, zh).
CATEGORY_LABELS: dict[str, tuple[str, str]] = {
    "Fiction": ("ဝတ္ထု", "小说"),
    "Science": ("သိပ္ပံ", "科学"),
    "History": ("သမိုင်း", "历史"),
    "Technology": ("နည်းပညာ", "技术"),
    "Philosophy": ("ဒဿနိကဗေဒ", "哲学"),
}

# (en title, zh title, author, category, isbn, price, stock, en description)
_CATALOG: tuple[tuple[str, str, str, str, str, float, int, str], ...] = (
    ("Pride and Prejudice", "傲慢与偏见", "Jane Austen", "Fiction",
     "978-0141439518", 9.99, 24, "A comedy of manners about Elizabeth Bennet and Mr. Darcy."),
    ("Nineteen Eighty-Four", "一九八四", "George Orwell", "Fiction",
     "978-0451524935", 8.49, 31, "A dystopia of surveillance, propaganda and Big Brother."),
    ("To Kill a Mockingbird", "杀死一只知更鸟", "Harper Lee", "Fiction",
     "978-0061120084", 10.99, 0, "A childhood in Alabama seen through a trial that divides a town."),
    ("A Brief History of Time", "时间简史", "Stephen Hawking", "Science",
     "978-0553380163", 14.5, 12, "Black holes, the big bang and the nature of time for general readers."),
    ("The Selfish Gene", "自私的基因", "Richard Dawkins", "Science",
     "978-0198788607", 13.25, 7, "Evolution explained from the point of view of the gene."),
    ("Sapiens", "人类简史", "Yuval Noah Harari", "History",
     "978-0062316097", 18.99, 40, "How Homo sapiens came to dominate the planet."),
    ("Guns, Germs, and Steel", "枪炮、病菌与钢铁", "Jared Diamond", "History",
     "978-0393354324", 16.75, 9, "Why some societies conquered others, told through geography."),
    ("The Pragmatic Programmer", "程序员修炼之道", "Andrew Hunt", "Technology",
     "978-0135957059", 42.0, 15, "Practical advice on the craft of writing software."),
    ("Clean Code", "代码整洁之道", "Robert C. Martin", "Technology",
     "978-0132350884", 37.99, 22, "Principles and patterns for readable, maintainable code."),
    ("Structure and Interpretation of Computer Programs", "计算机程序的构造和解释",
     "Harold Abelson", "Technology", "978-0262510875", 55.0, 3,
     "Programming as the construction of abstractions, taught in Scheme."),
    ("Meditations", "沉思录", "Marcus Aurelius", "Philosophy",
     "978-0812968255", 7.95, 18, "Private notes of a Roman emperor on Stoic practice."),
    ("The Republic", "理想国", "Plato", "Philosophy",
     "978-0140455113", 11.5, 5, "A dialogue on justice and the ideal city."),
)

BOOK_SORT_KEYS: dict[str, SortKey] = {
    "bookName": lambda b: b.book_name.en.lower(),
    "author": lambda b: b.author.lower(),
    "price": lambda b: b.price,
    "stock": lambda b: b.stock,
    "category": lambda b: b.category.lower(),
    "isbn": lambda b: b.isbn,
}


def build_catalog() -> list[Book]:
    """Construct the catalog fresh; nothing here is cached or mutable across calls."""
    books = []
    for i, (title, title_zh, author, category, isbn, price, stock, blurb) in enumerate(
        _CATALOG, start=1
    ):
        category_my, category_zh = CATEGORY_LABELS[category]
        title_my = f"{title} (မြန်မာဘာသာပြန်)"
        books.append(
            Book(
                id=f"book_{i}",
                book_name=LocalizedText(my=title_my, en=title, zh=title_zh),
                author_description=LocalizedText(
                    my=f"{author} - {category_my} စာရေးဆရာ",
                    en=f"{author}, author in {category.lower()}.",
                    zh=f"{author}，{category_zh}领域作家。",
                ),
                book_description=LocalizedText(
                    my=f"{title_my} သည် {category_my} စာအုပ်ဖြစ်သည်။",
                    en=blurb,
                    zh=f"《{title_zh}》是一部{category_zh}作品。",
                ),
                isbn=isbn,
                author=author,
                price=price,
                stock=stock,
                category=category,
            )
        )
    return books


def search_books(books: list[Book], search_key: str) -> list[Book]:
    """Case-insensitive substring over every title locale, author, isbn and category."""
    needle = search_key.lower()

    def haystack(book: Book) -> tuple[str, ...]:
        name = book.book_name
        return (name.my, name.en, name.zh, book.author, book.isbn, book.category)

    return [b for b in books if any(needle in field.lower() for field in haystack(b))]
