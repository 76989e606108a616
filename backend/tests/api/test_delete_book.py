"""Delete Book — DELETE /books/{id} soft-deletes.

Invariants:
    - Existing id → 200 {"message": "Book successfully deleted"}
    - Row stays in the table with deleted_at set
    - Deleted book excluded from GET /books and GET /books/{id}
    - Unknown, already deleted, or non-numeric id → 404
"""

from sqlalchemy import select

from bookstore.models.book import Book


async def test_delete_existing_returns_200(client, seed_book):
    res = await client.delete(f"/books/{seed_book.id}")

    assert res.status_code == 200
    assert res.json() == {"message": "Book successfully deleted"}


async def test_delete_keeps_row_with_marker(client, seed_book, test_db):
    await client.delete(f"/books/{seed_book.id}")

    result = await test_db.execute(
        select(Book.deleted_at).where(Book.id == seed_book.id),
    )
    assert result.scalar_one() is not None


async def test_delete_excludes_book_from_reads(client, seed_book):
    await client.delete(f"/books/{seed_book.id}")

    assert (await client.get(f"/books/{seed_book.id}")).status_code == 404
    assert (await client.get("/books")).json() == []


async def test_delete_twice_returns_404(client, seed_book):
    await client.delete(f"/books/{seed_book.id}")

    res = await client.delete(f"/books/{seed_book.id}")
    assert res.status_code == 404
    assert res.json()["error"] == "Book not found"


async def test_delete_unknown_id_returns_404(client):
    res = await client.delete("/books/777")
    assert res.status_code == 404


async def test_delete_non_numeric_id_returns_404(client):
    res = await client.delete("/books/abc")
    assert res.status_code == 404
