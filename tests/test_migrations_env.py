"""Tests for the Alembic database URL helpers."""

import pytest

from migrations.env_helpers import get_database_url, normalize_database_url


class TestNormalizeDatabaseUrl:
    @pytest.mark.parametrize(
        "url",
        ["postgres://u:p@h:5432/db", "postgresql://u:p@h:5432/db"],
    )
    def test_driver_prefix(self, url):
        assert normalize_database_url(url) == "postgresql+psycopg2://u:p@h:5432/db"

    def test_password_injected(self):
        url = normalize_database_url("postgresql://u@h:5432/db", "s3cr3t")

        assert url == "postgresql+psycopg2://u:s3cr3t@h:5432/db"

    def test_existing_password_kept(self):
        url = normalize_database_url("postgresql://u:p@h/db", "other")

        assert url == "postgresql+psycopg2://u:p@h/db"


class TestGetDatabaseUrl:
    def test_missing(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(RuntimeError, match="DATABASE_URL"):
            get_database_url()

    def test_keyword_dsn_rejected(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "dbname=db user=u")

        with pytest.raises(RuntimeError, match="must be a URL"):
            get_database_url()

    def test_password_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u@h/db")
        monkeypatch.setenv("DB_PASSWORD", "pw")

        assert get_database_url() == "postgresql+psycopg2://u:pw@h/db"
