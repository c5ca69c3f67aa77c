import pytest

from url_shortener import db


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the repository at a fresh SQLite file for one test"""
    monkeypatch.setattr(db, "DB_PATH", str(tmp_path / "url_shortener.db"))
    db.URLRepository.initialize_db()
    return db.DB_PATH
