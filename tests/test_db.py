from sqlalchemy import inspect

from study_focus import db
from study_focus.store import SessionStore


def test_db_url_defaults_to_data_dir(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    assert db.get_db_url() == f"sqlite+aiosqlite:///{tmp_path / 'data' / 'data.db'}"
    assert (tmp_path / "data").is_dir()


async def test_init_db_creates_tables(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'focus.db'}")
    await db.init_db()
    try:
        async with db.get_engine().connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        assert {"study_sessions", "fatigue_scores"} <= set(tables)
        assert await SessionStore().recent_sessions("u1", 5) == []
    finally:
        await db.close_db()
    assert db._engine is None
