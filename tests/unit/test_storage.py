"""Tests for SQLite storage layer."""
import json
import sqlite3

import pytest

from defcite.documents import SQLiteStorage
from defcite.errors import DocumentNotFoundError


def _add(storage, user_id="user-1", **kwargs):
    fields = dict(
        filename="intro.pdf",
        original_text="Algoritma adalah urutan langkah.",
        keyword="algoritma",
        author="Smith, J.",
        publication_year=2020,
    )
    fields.update(kwargs)
    return storage.add_document(user_id=user_id, **fields)


class TestSQLiteStorage:
    """Tests for SQLiteStorage."""

    def test_create_tables(self, tmp_path):
        """SQLiteStorage creates the documents table."""
        db_path = str(tmp_path / "t.db")
        SQLiteStorage(db_path).create_tables()

        conn = sqlite3.connect(db_path)
        tables = [t[0] for t in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()]
        conn.close()
        assert "documents" in tables

    def test_create_tables_idempotent(self, storage):
        storage.create_tables()
        assert storage.get_document_count() == 0

    def test_migration_adds_missing_column(self, tmp_path):
        """Databases created before the bibliography column get it added."""
        db_path = str(tmp_path / "old.db")
        conn = sqlite3.connect(db_path)
        conn.execute(
            "CREATE TABLE documents (id TEXT PRIMARY KEY, user_id TEXT, filename TEXT, original_text TEXT, "
            "citation_format TEXT, keyword TEXT, author TEXT, publication_year INTEGER, paraphrased TEXT, "
            "citation TEXT, definition_found INTEGER, original_definition TEXT, additional_info TEXT, "
            "created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
        )
        conn.commit()
        conn.close()

        SQLiteStorage(db_path).create_tables()

        conn = sqlite3.connect(db_path)
        columns = [row[1] for row in conn.execute("PRAGMA table_info(documents)")]
        conn.close()
        assert "bibliography" in columns

    def test_add_and_get_document(self, storage):
        doc_id = _add(storage, additional_info='{"sentenceCount": 3}')
        doc = storage.get_document(doc_id, "user-1")

        assert doc["keyword"] == "algoritma"
        assert doc["publication_year"] == 2020
        assert doc["citation_format"] == "APA"
        assert doc["paraphrased"] is None
        assert doc["definition_found"] is None

    def test_get_document_scoped_to_user(self, storage):
        """Another user's document id is reported as not found."""
        doc_id = _add(storage)
        with pytest.raises(DocumentNotFoundError):
            storage.get_document(doc_id, "user-2")

    def test_get_missing_document(self, storage):
        with pytest.raises(DocumentNotFoundError):
            storage.get_document("missing", "user-1")

    def test_update_result(self, storage):
        doc_id = _add(storage)
        storage.update_result(
            doc_id,
            paraphrased="Parafrase.",
            citation="Menurut Smith (2020), parafrase.",
            bibliography="Smith, J. (2020). Intro. Dokumen Akademik.",
            definition_found=True,
            original_definition="Algoritma adalah urutan langkah.",
            additional_info=json.dumps({"sentenceCount": 2, "actualSentenceCount": 2}),
        )
        doc = storage.get_document(doc_id, "user-1")
        assert doc["paraphrased"] == "Parafrase."
        assert doc["definition_found"] is True

    def test_prefilled_results(self, storage):
        doc_id = _add(storage, paraphrased="Teks.", definition_found=True)
        assert storage.get_document(doc_id, "user-1")["paraphrased"] == "Teks."


class TestHistory:
    """Tests for list_history."""

    def test_newest_first_and_scoped(self, storage):
        first = _add(storage, keyword="pertama")
        second = _add(storage, keyword="kedua")
        _add(storage, user_id="user-2")

        history = storage.list_history("user-1")
        assert [d["id"] for d in history] == [second, first]

    def test_sentence_info(self, storage):
        _add(storage, additional_info='{"sentenceCount": 3, "actualSentenceCount": 3}')
        info = storage.list_history("user-1")[0]["sentence_info"]
        assert info == {"sentence_count": 3, "actual_sentence_count": 3}

    @pytest.mark.parametrize("additional_info", [None, "{broken", '{"other": 1}'])
    def test_sentence_info_unknown(self, storage, additional_info):
        _add(storage, additional_info=additional_info)
        info = storage.list_history("user-1")[0]["sentence_info"]
        assert info == {"sentence_count": "Unknown", "actual_sentence_count": "Unknown"}

    def test_document_count(self, storage):
        _add(storage)
        _add(storage, user_id="user-2")
        assert storage.get_document_count() == 2
