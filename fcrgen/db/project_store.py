from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2.extras import Json

from fcrgen.models.project import Project, ProjectSummary

"""Project store on PostgreSQL.

One row per project in fcr_projects; the processed records and the copy map
are JSONB so every record round-trips with its field names intact. The store
works on a DB-API cursor supplied by the caller (fcrgen.db.connection.db_cursor
in the CLI, a fake cursor in tests) and never retries: a failed statement
surfaces as ProjectStoreError.
"""

__all__ = [
    "PROJECTS_TABLE",
    "PROJECTS_DDL",
    "ProjectStoreError",
    "ProjectNotFoundError",
    "ProjectConflictError",
    "ProjectValidationError",
    "ProjectStore",
]

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "fcr_projects"

PROJECTS_DDL = f"""
CREATE TABLE IF NOT EXISTS {PROJECTS_TABLE} (
    id BIGSERIAL PRIMARY KEY,
    name TEXT NOT NULL,
    year INTEGER NOT NULL,
    processed_data JSONB NOT NULL DEFAULT '[]'::jsonb,
    copied_boxes JSONB NOT NULL DEFAULT '{{}}'::jsonb,
    is_archived BOOLEAN NOT NULL DEFAULT FALSE,
    export_count INTEGER NOT NULL DEFAULT 0,
    last_export_date TIMESTAMPTZ,
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    UNIQUE (name, year)
)
"""

_PROJECT_COLUMNS = (
    "id, name, year, processed_data, copied_boxes, is_archived, "
    "export_count, last_export_date, created_at, updated_at"
)
_SUMMARY_COLUMNS = "id, name, year, is_archived, created_at, updated_at"


class ProjectStoreError(Exception):
    pass


class ProjectNotFoundError(ProjectStoreError):
    def __init__(self, project_id: int) -> None:
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class ProjectConflictError(ProjectStoreError):
    def __init__(self, name: str, year: int) -> None:
        super().__init__(f"Project with this name and year already exists: {name} {year}")
        self.name = name
        self.year = year


class ProjectValidationError(ProjectStoreError):
    pass


def _validated_name(name: Any) -> str:
    text = str(name).strip() if name is not None else ""
    if not text:
        raise ProjectValidationError("Project name is required")
    return text


def _validated_year(year: Any) -> int:
    if year is None or (isinstance(year, str) and not year.strip()):
        raise ProjectValidationError("Project year is required")
    try:
        return int(year)
    except (TypeError, ValueError) as e:
        raise ProjectValidationError(f"Project year must be a number: {year!r}") from e


def _validated_records(records: Any) -> list[dict[str, Any]]:
    if not isinstance(records, Sequence) or isinstance(records, str) or len(records) == 0:
        raise ProjectValidationError("Processed data is required")
    return [dict(r) for r in records]


def _copied_map(copied: Mapping[str, Any] | None) -> dict[str, bool]:
    return {str(k): True for k, v in (copied or {}).items() if v}


def _row_to_project(row: Sequence[Any]) -> Project:
    return Project(
        id=row[0],
        name=row[1],
        year=row[2],
        processed_data=list(row[3] or []),
        copied_boxes=dict(row[4] or {}),
        is_archived=bool(row[5]),
        export_count=row[6] or 0,
        last_export_date=row[7],
        created_at=row[8],
        updated_at=row[9],
    )


class ProjectStore:
    """CRUD over fcr_projects for one cursor."""

    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor

    def _execute(self, sql: str, params: Sequence[Any] | None = None) -> None:
        try:
            self.cursor.execute(sql, params)
        except psycopg2.Error as e:
            raise ProjectStoreError(f"database error: {e}") from e

    def _fetchone(self) -> Sequence[Any] | None:
        try:
            return self.cursor.fetchone()
        except psycopg2.Error as e:
            raise ProjectStoreError(f"database error: {e}") from e

    def ensure_schema(self) -> None:
        self._execute(PROJECTS_DDL)

    def _exists(self, name: str, year: int, exclude_id: int | None = None) -> bool:
        if exclude_id is None:
            self._execute(
                f"SELECT id FROM {PROJECTS_TABLE} WHERE name = %s AND year = %s", (name, year)
            )
        else:
            self._execute(
                f"SELECT id FROM {PROJECTS_TABLE} WHERE name = %s AND year = %s AND id <> %s",
                (name, year, exclude_id),
            )
        return self._fetchone() is not None

    def create(
        self,
        name: str,
        year: int | str,
        processed_data: Sequence[Mapping[str, Any]],
        copied_boxes: Mapping[str, Any] | None = None,
    ) -> Project:
        """Insert a project.

        Raises:
            ProjectValidationError: blank name, missing year, empty records
            ProjectConflictError: a project with the same name and year exists
        """
        name = _validated_name(name)
        year_value = _validated_year(year)
        records = _validated_records(processed_data)

        if self._exists(name, year_value):
            raise ProjectConflictError(name, year_value)
        try:
            self.cursor.execute(
                f"INSERT INTO {PROJECTS_TABLE} (name, year, processed_data, copied_boxes) "
                f"VALUES (%s, %s, %s, %s) RETURNING {_PROJECT_COLUMNS}",
                (name, year_value, Json(records), Json(_copied_map(copied_boxes))),
            )
        except pg_errors.UniqueViolation as e:
            raise ProjectConflictError(name, year_value) from e
        except psycopg2.Error as e:
            raise ProjectStoreError(f"database error: {e}") from e
        row = self._fetchone()
        if row is None:
            raise ProjectStoreError("insert returned no row")
        logger.debug("project created id=%s name=%s year=%s", row[0], name, year_value)
        return _row_to_project(row)

    def list_projects(self, include_archived: bool = False) -> list[ProjectSummary]:
        """Project summaries, most recently updated first."""
        where = "" if include_archived else " WHERE is_archived = FALSE"
        self._execute(
            f"SELECT {_SUMMARY_COLUMNS} FROM {PROJECTS_TABLE}{where} ORDER BY updated_at DESC"
        )
        try:
            rows = self.cursor.fetchall()
        except psycopg2.Error as e:
            raise ProjectStoreError(f"database error: {e}") from e
        return [ProjectSummary(*row) for row in rows]

    def get(self, project_id: int) -> Project:
        self._execute(f"SELECT {_PROJECT_COLUMNS} FROM {PROJECTS_TABLE} WHERE id = %s", (project_id,))
        row = self._fetchone()
        if row is None:
            raise ProjectNotFoundError(project_id)
        return _row_to_project(row)

    def _update(self, project_id: int, assignments: list[str], params: list[Any]) -> Project:
        sets = ", ".join(assignments + ["updated_at = now()"])
        self._execute(
            f"UPDATE {PROJECTS_TABLE} SET {sets} WHERE id = %s RETURNING {_PROJECT_COLUMNS}",
            (*params, project_id),
        )
        row = self._fetchone()
        if row is None:
            raise ProjectNotFoundError(project_id)
        return _row_to_project(row)

    def update(
        self,
        project_id: int,
        *,
        name: str | None = None,
        year: int | str | None = None,
        processed_data: Sequence[Mapping[str, Any]] | None = None,
        copied_boxes: Mapping[str, Any] | None = None,
    ) -> Project:
        """Change only the supplied fields; updated_at is always refreshed."""
        assignments: list[str] = []
        params: list[Any] = []
        new_name = _validated_name(name) if name is not None else None
        new_year = _validated_year(year) if year is not None else None

        if new_name is not None or new_year is not None:
            current = self.get(project_id)
            check_name = new_name if new_name is not None else current.name
            check_year = new_year if new_year is not None else current.year
            if self._exists(check_name, check_year, exclude_id=project_id):
                raise ProjectConflictError(check_name, check_year)
        if new_name is not None:
            assignments.append("name = %s")
            params.append(new_name)
        if new_year is not None:
            assignments.append("year = %s")
            params.append(new_year)
        if processed_data is not None:
            assignments.append("processed_data = %s")
            params.append(Json(_validated_records(processed_data)))
        if copied_boxes is not None:
            assignments.append("copied_boxes = %s")
            params.append(Json(_copied_map(copied_boxes)))
        return self._update(project_id, assignments, params)

    def update_copy_status(self, project_id: int, copied_boxes: Mapping[str, Any]) -> Project:
        return self._update(project_id, ["copied_boxes = %s"], [Json(_copied_map(copied_boxes))])

    def archive(self, project_id: int, archived: bool = True) -> Project:
        return self._update(project_id, ["is_archived = %s"], [archived])

    def record_export(self, project_id: int) -> Project:
        return self._update(
            project_id, ["export_count = export_count + 1", "last_export_date = now()"], []
        )

    def delete(self, project_id: int) -> None:
        self._execute(f"DELETE FROM {PROJECTS_TABLE} WHERE id = %s RETURNING id", (project_id,))
        if self._fetchone() is None:
            raise ProjectNotFoundError(project_id)
        logger.debug("project deleted id=%s", project_id)
