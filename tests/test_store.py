from concurrent.futures import ThreadPoolExecutor
from datetime import date

from book_catalogue.book import Book
from book_catalogue.store import SEED_BOOK_ID, BookStore


def _book(title="Sapiens", author="Yuval Noah Harari", isbn="9780099590088"):
    return Book(title, author, date(2014, 9, 4), isbn)


def test_seeded_store_holds_expert_fsharp():
    store = BookStore()
    books = store.list_all()
    assert len(books) == 1
    seed = books[0]
    assert seed.book_id == SEED_BOOK_ID == 1
    assert seed.title == "Expert F# 4.0"
    assert seed.publish_date == date(2015, 12, 28)
    assert seed.isbn == "978-1-484207-41-3"


def test_first_insert_after_seed_gets_next_id():
    store = BookStore()
    assert store.insert(_book()) == 2


def test_unseeded_store_starts_at_one():
    store = BookStore(seed=False)
    assert store.list_all() == []
    assert store.insert(_book()) == 1


def test_insert_then_list_contains_exactly_that_record():
    store = BookStore(seed=False)
    book = _book()
    book.book_id = 99  # ignored by the store
    new_id = store.insert(book)

    matches = [b for b in store.list_all() if b.book_id == new_id]
    assert len(matches) == 1
    stored = matches[0]
    assert (stored.title, stored.author, stored.publish_date, stored.isbn) == (
        book.title, book.author, book.publish_date, book.isbn)
    assert store.get(99) is None


def test_concurrent_inserts_get_distinct_positive_ids():
    store = BookStore()

    def insert(i):
        return store.insert(_book(title=f"Book {i}", isbn=str(i)))

    with ThreadPoolExecutor(max_workers=16) as pool:
        ids = list(pool.map(insert, range(500)))

    assert len(set(ids)) == 500
    assert all(i > 0 for i in ids)
    assert SEED_BOOK_ID not in ids
    assert len(store) == 501


def test_delete_returns_true_once():
    store = BookStore()
    new_id = store.insert(_book())
    assert store.delete(new_id) is True
    assert store.delete(new_id) is False
    assert store.delete(12345) is False


def test_update_missing_id_leaves_store_unchanged():
    store = BookStore()
    before = store.list_all()
    ghost = _book()
    ghost.book_id = 42
    assert store.update(ghost) is False
    assert store.list_all() == before


def test_update_replaces_record_wholesale():
    store = BookStore()
    new_id = store.insert(_book())
    replacement = Book("New Title", "New Author", date(2020, 1, 2), "X", book_id=new_id)
    assert store.update(replacement) is True
    assert store.get(new_id) == replacement


def test_records_are_copied_in_and_out():
    store = BookStore(seed=False)
    book = _book()
    new_id = store.insert(book)
    book.title = "Changed outside"
    listed = store.list_all()[0]
    listed.title = "Changed in snapshot"
    assert store.get(new_id).title == "Sapiens"


def test_concurrent_updates_and_deletes_on_different_ids():
    store = BookStore(seed=False)
    ids = [store.insert(_book(title=f"B{i}", isbn=str(i))) for i in range(100)]

    def work(book_id):
        if book_id % 2:
            return store.delete(book_id)
        return store.update(Book("Updated", "A", date(2020, 1, 1), "X", book_id=book_id))

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(work, ids))

    assert all(results)
    remaining = store.list_all()
    assert len(remaining) == 50
    assert all(b.title == "Updated" for b in remaining)


def test_reads_while_writers_run_see_whole_records():
    store = BookStore(seed=False)
    book_id = store.insert(Book("v0", "a0", date(2000, 1, 1), "i0"))
    stop = []

    def writer():
        for i in range(1, 300):
            store.update(Book(f"v{i}", f"a{i}", date(2000, 1, 1), f"i{i}", book_id=book_id))
        stop.append(True)

    def reader():
        torn = 0
        while not stop:
            b = store.get(book_id)
            if b.title[1:] != b.author[1:] or b.title[1:] != b.isbn[1:]:
                torn += 1
        return torn

    with ThreadPoolExecutor(max_workers=3) as pool:
        readers = [pool.submit(reader), pool.submit(reader)]
        pool.submit(writer).result()
        assert [r.result() for r in readers] == [0, 0]
    assert store.get(book_id).title == "v299"
