import json
import sqlite3
import uuid
from contextlib import contextmanager

from defcite.errors import DocumentNotFoundError

HISTORY_COLUMNS = (
    "id, filename, keyword, citation_format, paraphrased, citation, bibliography, "
    "definition_found, original_definition, author, publication_year, additional_info, created_at"
)


class SQLiteStorage:
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    @contextmanager
    def _connect(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def create_tables(self) -> None:
        with self._connect() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    filename TEXT NOT NULL,
                    original_text TEXT NOT NULL,
                    citation_format TEXT NOT NULL DEFAULT 'APA',
                    keyword TEXT NOT NULL,
                    author TEXT NOT NULL,
                    publication_year INTEGER NOT NULL,
                    paraphrased TEXT,
                    citation TEXT,
                    bibliography TEXT,
                    definition_found INTEGER,
                    original_definition TEXT,
                    additional_info TEXT,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );

                CREATE INDEX IF NOT EXISTS idx_documents_user_id ON documents(user_id);
            """)
            self._run_migrations(conn)

    def _run_migrations(self, conn) -> None:
        self._migrate_add_column(conn, "documents", "bibliography", "TEXT")

    def _migrate_add_column(self, conn, table: str, column: str, col_type: str) -> None:
        """Add column to table if it doesn't exist (idempotent migration)."""
        cursor = conn.execute(f"PRAGMA table_info({table})")
        columns = [row[1] for row in cursor.fetchall()]
        if column not in columns:
            conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}")

    def add_document(
        self,
        user_id: str,
        filename: str,
        original_text: str,
        keyword: str,
        author: str,
        publication_year: int,
        citation_format: str = "APA",
        additional_info: str | None = None,
        **results,
    ) -> str:
        """Insert a document; *results* may pre-fill paraphrase columns. Returns its id."""
        doc_id = uuid.uuid4().hex
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO documents
                    (id, user_id, filename, original_text, citation_format, keyword, author,
                     publication_year, paraphrased, citation, bibliography, definition_found,
                     original_definition, additional_info)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (doc_id, user_id, filename, original_text, citation_format, keyword, author,
                 publication_year, results.get("paraphrased"), results.get("citation"),
                 results.get("bibliography"), results.get("definition_found"),
                 results.get("original_definition"), additional_info),
            )
        return doc_id

    def get_document(self, doc_id: str, user_id: str) -> dict:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM documents WHERE id = ? AND user_id = ?",
                (doc_id, user_id),
            ).fetchone()
        if row is None:
            raise DocumentNotFoundError(f"Document {doc_id} not found")
        return self._row_to_dict(row)

    def update_result(
        self,
        doc_id: str,
        paraphrased: str,
        citation: str,
        bibliography: str,
        definition_found: bool,
        original_definition: str,
        additional_info: str | None = None,
    ) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                UPDATE documents
                SET paraphrased = ?, citation = ?, bibliography = ?, definition_found = ?,
                    original_definition = ?, additional_info = ?
                WHERE id = ?
                """,
                (paraphrased, citation, bibliography, definition_found, original_definition,
                 additional_info, doc_id),
            )

    def list_history(self, user_id: str) -> list[dict]:
        """Documents for *user_id*, newest first, with decoded sentence info."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {HISTORY_COLUMNS} FROM documents WHERE user_id = ? "
                "ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            ).fetchall()

        history = []
        for row in rows:
            d = self._row_to_dict(row)
            d["sentence_info"] = self._sentence_info(d.get("additional_info"))
            history.append(d)
        return history

    def get_document_count(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) FROM documents").fetchone()
        return row[0]

    @staticmethod
    def _sentence_info(additional_info: str | None) -> dict:
        info = {"sentence_count": "Unknown", "actual_sentence_count": "Unknown"}
        if not additional_info:
            return info
        try:
            parsed = json.loads(additional_info)
        except json.JSONDecodeError:
            return info
        if isinstance(parsed, dict):
            info["sentence_count"] = parsed.get("sentenceCount") or "Unknown"
            info["actual_sentence_count"] = parsed.get("actualSentenceCount") or "Unknown"
        return info

    @staticmethod
    def _row_to_dict(row: sqlite3.Row) -> dict:
        d = dict(row)
        if d.get("definition_found") is not None:
            d["definition_found"] = bool(d["definition_found"])
        return d
