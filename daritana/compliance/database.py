"""ClauseDatabase — SQLite-backed clause storage and queries.

Uses stdlib sqlite3 only.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from daritana.compliance.clauses import Clause
from daritana.config import ALL_TYPES
from daritana.exceptions import ClauseDataError

logger = logging.getLogger(__name__)

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS clauses (
    pk INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    section TEXT NOT NULL DEFAULT '',
    category TEXT NOT NULL,
    applicable_types TEXT NOT NULL DEFAULT '["*"]',
    requirements TEXT NOT NULL DEFAULT '[]',
    severity TEXT,
    recommendation TEXT NOT NULL DEFAULT '',
    keywords TEXT NOT NULL DEFAULT '[]',
    explainers TEXT NOT NULL DEFAULT '{}'
);

CREATE INDEX IF NOT EXISTS idx_clauses_section ON clauses(section);
CREATE INDEX IF NOT EXISTS idx_clauses_category ON clauses(category);
"""

_FTS_SQL = """\
CREATE VIRTUAL TABLE IF NOT EXISTS clauses_fts USING fts5(
    title, description, keywords, content=clauses, content_rowid=pk
);
"""

_FTS_TRIGGER_SQL = """\
CREATE TRIGGER IF NOT EXISTS clauses_ai AFTER INSERT ON clauses BEGIN
    INSERT INTO clauses_fts(rowid, title, description, keywords)
    VALUES (new.pk, new.title, new.description, new.keywords);
END;

CREATE TRIGGER IF NOT EXISTS clauses_ad AFTER DELETE ON clauses BEGIN
    INSERT INTO clauses_fts(clauses_fts, rowid, title, description, keywords)
    VALUES ('delete', old.pk, old.title, old.description, old.keywords);
END;
"""


def load_clauses_file(path: str | Path) -> list[Clause]:
    """Load clause reference data from a JSON file.

    The file holds either a list of clause objects or an object with a
    ``clauses`` list.

    Raises
    ------
    ClauseDataError
        If the file cannot be read, is not valid JSON, or holds an
        invalid clause record.
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise ClauseDataError(f"Cannot read clause file {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise ClauseDataError(f"Clause file {p} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("clauses")
    if not isinstance(data, list):
        raise ClauseDataError(f"Clause file {p} must contain a list of clauses.")

    clauses: list[Clause] = []
    for index, record in enumerate(data):
        try:
            clauses.append(Clause.model_validate(record))
        except ValidationError as e:
            raise ClauseDataError(f"Invalid clause #{index} in {p}: {e}") from e

    logger.info("Loaded %d clauses from %s", len(clauses), p)
    return clauses


class ClauseDatabase:
    """SQLite-backed clause database with full-text search.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Use ``':memory:'`` for
        in-memory databases (useful for testing).
    auto_seed:
        If *True* (default), seed the database with the bundled UBBL
        clauses on first access if the clauses table is empty.
    """

    def __init__(self, db_path: str | Path = ":memory:", *, auto_seed: bool = True) -> None:
        self._db_path = str(db_path)
        self._conn: sqlite3.Connection | None = None
        self._auto_seed = auto_seed
        self._fts = False
        self._lock = threading.RLock()

    @property
    def conn(self) -> sqlite3.Connection:
        """Lazy-initialise and return the database connection."""
        with self._lock:
            if self._conn is None:
                self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
                self._conn.row_factory = sqlite3.Row
                self._init_schema()
                if self._auto_seed and self._is_empty():
                    self._seed()
            return self._conn

    def _init_schema(self) -> None:
        """Create tables and indexes if they don't exist."""
        self.conn.executescript(_SCHEMA_SQL)
        try:
            self.conn.executescript(_FTS_SQL)
            self.conn.executescript(_FTS_TRIGGER_SQL)
            self._fts = True
        except sqlite3.OperationalError:
            # FTS5 may not be available on all builds
            logger.debug("FTS5 not available; full-text search disabled.")
        self.conn.commit()

    def _is_empty(self) -> bool:
        cur = self.conn.execute("SELECT COUNT(*) FROM clauses")
        return cur.fetchone()[0] == 0

    def _seed(self) -> None:
        """Seed with the bundled clause table."""
        from daritana.compliance.seed_data import SEED_CLAUSES
        self.add_clauses(SEED_CLAUSES)
        logger.info("Seeded %d UBBL clauses.", len(SEED_CLAUSES))

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    # -- Loading -------------------------------------------------------------

    def add_clause(self, clause: Clause) -> None:
        """Insert a clause.

        Raises
        ------
        ClauseDataError
            If a clause with the same id already exists.
        """
        with self._lock:
            try:
                self.conn.execute(
                    """\
                    INSERT INTO clauses (id, title, description, section, category,
                                         applicable_types, requirements, severity,
                                         recommendation, keywords, explainers)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        clause.id,
                        clause.title,
                        clause.description,
                        clause.section,
                        clause.category.value,
                        json.dumps(clause.applicable_types),
                        json.dumps([r.model_dump(mode="json") for r in clause.requirements]),
                        clause.severity.value if clause.severity else None,
                        clause.recommendation,
                        json.dumps(clause.keywords),
                        json.dumps(clause.explainers),
                    ),
                )
            except sqlite3.IntegrityError as e:
                self.conn.rollback()
                raise ClauseDataError(f"Duplicate clause id '{clause.id}'.") from e
            self.conn.commit()

    def add_clauses(self, clauses: list[Clause]) -> int:
        """Insert several clauses. Returns the number inserted."""
        for clause in clauses:
            self.add_clause(clause)
        return len(clauses)

    def load_file(self, path: str | Path) -> int:
        """Load clauses from a JSON file into the database."""
        return self.add_clauses(load_clauses_file(path))

    # -- Queries -------------------------------------------------------------

    def get_clause(self, clause_id: str) -> Clause | None:
        """Fetch a single clause by id."""
        with self._lock:
            cur = self.conn.execute("SELECT * FROM clauses WHERE id = ?", (clause_id,))
            row = cur.fetchone()
        if row is None:
            return None
        return self._row_to_clause(row)

    def get_clauses(
        self,
        *,
        building_type: str | None = None,
        section: str | None = None,
        category: str | None = None,
    ) -> list[Clause]:
        """Query clauses with optional filters, in load order.

        Parameters
        ----------
        building_type:
            Filter to clauses that apply to this building type (also
            includes ``'*'`` universal clauses).
        section:
            Filter to a by-law part, e.g. ``'Part VII'``.
        category:
            Filter to ``'mandatory'``, ``'conditional'`` or ``'recommended'``.
        """
        clauses: list[str] = []
        params: list[Any] = []

        if building_type:
            clauses.append("(applicable_types LIKE ? OR applicable_types LIKE ?)")
            params.append(f'%"{building_type}"%')
            params.append(f'%"{ALL_TYPES}"%')

        if section:
            clauses.append("section = ?")
            params.append(section)

        if category:
            clauses.append("category = ?")
            params.append(category)

        where = " AND ".join(clauses) if clauses else "1=1"
        with self._lock:
            cur = self.conn.execute(
                f"SELECT * FROM clauses WHERE {where} ORDER BY pk", params,
            )
            rows = cur.fetchall()
        result = [self._row_to_clause(row) for row in rows]
        if building_type:
            # LIKE is a coarse pre-filter; confirm exact membership
            result = [c for c in result if c.applies_to(building_type)]
        return result

    def search_clauses(self, query: str) -> list[Clause]:
        """Search clause id, title, description and keywords.

        Uses FTS5 prefix matching when available and falls back to a
        ``LIKE`` scan otherwise.
        """
        terms = [t for t in query.lower().split() if t]
        if not terms:
            return self.get_clauses()

        with self._lock:
            conn = self.conn
            if self._fts:
                match = " AND ".join('"' + t.replace('"', '""') + '"*' for t in terms)
                try:
                    cur = conn.execute(
                        """\
                        SELECT clauses.* FROM clauses
                        WHERE clauses.pk IN (
                            SELECT rowid FROM clauses_fts WHERE clauses_fts MATCH ?
                        ) OR lower(clauses.id) LIKE ?
                        ORDER BY clauses.pk
                        """,
                        (match, f"%{query.lower().strip()}%"),
                    )
                    return [self._row_to_clause(row) for row in cur.fetchall()]
                except sqlite3.OperationalError:
                    logger.debug("FTS query failed for %r; using LIKE search.", query, exc_info=True)

            like = f"%{query.lower().strip()}%"
            cur = conn.execute(
                """\
                SELECT * FROM clauses
                WHERE lower(id) LIKE ? OR lower(title) LIKE ?
                   OR lower(description) LIKE ? OR lower(keywords) LIKE ?
                ORDER BY pk
                """,
                (like, like, like, like),
            )
            return [self._row_to_clause(row) for row in cur.fetchall()]

    def sections(self) -> list[str]:
        """Return the distinct sections in load order."""
        with self._lock:
            cur = self.conn.execute(
                "SELECT section FROM clauses GROUP BY section ORDER BY MIN(pk)"
            )
            return [row[0] for row in cur.fetchall()]

    def count(self) -> int:
        """Return total number of clauses."""
        with self._lock:
            cur = self.conn.execute("SELECT COUNT(*) FROM clauses")
            return cur.fetchone()[0]

    # -- Internal ------------------------------------------------------------

    @staticmethod
    def _row_to_clause(row: sqlite3.Row) -> Clause:
        """Convert a database row to a Clause model."""
        return Clause(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            section=row["section"],
            category=row["category"],
            applicable_types=json.loads(row["applicable_types"]),
            requirements=json.loads(row["requirements"]),
            severity=row["severity"],
            recommendation=row["recommendation"],
            keywords=json.loads(row["keywords"]),
            explainers=json.loads(row["explainers"]),
        )
