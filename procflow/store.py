"""Persistence of process definition names and file paths."""

from __future__ import annotations

from sqlalchemy import Column, MetaData, String, Table, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

PROCESS_DEFINITIONS_TABLE = "process_definitions"

_metadata = MetaData()
_definitions = Table(
    PROCESS_DEFINITIONS_TABLE,
    _metadata,
    Column("name", String, primary_key=True),
    Column("path", String, nullable=False),
)

_UPSERT = text(
    f"INSERT INTO {PROCESS_DEFINITIONS_TABLE} (name, path) "
    "VALUES (:name, :path) "
    "ON CONFLICT (name) DO UPDATE SET path = EXCLUDED.path"
)
_SELECT_PATH = text(f"SELECT path FROM {PROCESS_DEFINITIONS_TABLE} WHERE name = :name")


class StoreError(Exception):
    """Raised when the definition store cannot be read or written."""


class DefinitionNotFoundError(StoreError, LookupError):
    """Raised when no definition is stored under a name."""


class ProcessDefinitionStore:
    """Maps process names to the files that define them."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create_schema(self) -> None:
        """Create the definitions table if it does not exist."""
        _metadata.create_all(self.engine, checkfirst=True)

    def save_process_definition_meta(self, name: str, path: str) -> None:
        """Insert ``name`` with ``path``, replacing the path if the name exists."""
        try:
            with self.engine.begin() as conn:
                conn.execute(_UPSERT, {"name": name, "path": path})
        except SQLAlchemyError as err:
            raise StoreError(f"failed to insert process metadata: {err}") from err

    def get_process_path_by_name(self, name: str) -> str:
        """Return the path stored for ``name``."""
        try:
            with self.engine.connect() as conn:
                path = conn.execute(_SELECT_PATH, {"name": name}).scalar_one_or_none()
        except SQLAlchemyError as err:
            raise StoreError(f"failed to fetch path for process {name}: {err}") from err
        if path is None:
            raise DefinitionNotFoundError(f"process definition not found: {name}")
        return path