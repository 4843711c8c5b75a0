"""
Tests for DB session helpers and the readiness check
"""
from unittest.mock import MagicMock, patch

import psycopg

from ecofinance.config import Settings
from ecofinance.infrastructure.db import session


def test_check_db_connection_uses_plain_psycopg_dsn():
    settings = Settings(DATABASE_URL="postgresql+psycopg://eco:pw@db:5432/ecofinance")
    with patch.object(session, "get_settings", return_value=settings), \
            patch.object(session.psycopg, "connect") as connect:
        session.check_db_connection()

    connect.assert_called_once_with("postgresql://eco:pw@db:5432/ecofinance", connect_timeout=3)
    cursor = connect.return_value.__enter__.return_value.cursor.return_value.__enter__.return_value
    cursor.execute.assert_called_once_with("SELECT 1;")


def test_get_db_closes_session():
    db = MagicMock()
    with patch.object(session, "get_session_factory", return_value=lambda: db):
        gen = session.get_db()
        assert next(gen) is db
        gen.close()

    db.close.assert_called_once()


def test_ready_reports_unavailable_database(client):
    with patch("ecofinance.main.check_db_connection", side_effect=psycopg.OperationalError("down")):
        response = client.get("/ready")

    assert response.status_code == 500
    assert response.json() == {"message": "Ошибка сервера"}


def test_ready(client):
    with patch("ecofinance.main.check_db_connection", return_value=None):
        response = client.get("/ready")

    assert response.status_code == 200
    assert response.text == "ok"
