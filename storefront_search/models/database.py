from pathlib import Path
import aiosqlite


async def init_db(db_path: str):
    """Create tables if they don't exist. Called once on app startup."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    async with aiosqlite.connect(db_path) as db:
        await db.executescript("""
            CREATE TABLE IF NOT EXISTS customer_account_urls (
                shop_domain     TEXT PRIMARY KEY,
                url             TEXT NOT NULL,
                created_at      TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at      TEXT NOT NULL DEFAULT (datetime('now'))
            );
        """)
        await db.commit()


# --- Customer account URL cache ---

async def get_customer_account_url(db_path: str, shop_domain: str) -> str | None:
    """Fetch the cached customer account URL for a shop hostname. None if not cached."""
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute(
            "SELECT url FROM customer_account_urls WHERE shop_domain = ?",
            (shop_domain,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return row[0]


async def store_customer_account_url(db_path: str, shop_domain: str, url: str):
    """Cache a customer account URL. Storing the same key twice is harmless."""
    async with aiosqlite.connect(db_path) as db:
        await db.execute(
            """
            INSERT INTO customer_account_urls (shop_domain, url) VALUES (?, ?)
            ON CONFLICT(shop_domain) DO UPDATE SET
                url = excluded.url,
                updated_at = datetime('now')
            """,
            (shop_domain, url),
        )
        await db.commit()
