"""Indexing of process definition files into the definition store."""

from __future__ import annotations

import logging
import threading
from typing import Protocol

logger = logging.getLogger(__name__)

POLL_INTERVAL = 30.0


class Store(Protocol):
    """Where process definition metadata is saved."""

    def save_process_definition_meta(self, name: str, path: str) -> None:
        """Record that process ``name`` is defined in ``path``."""


class Reader(Protocol):
    """Source of process definition files."""

    def read_yaml_files(self) -> list[str]:
        """Return the paths of all definition files."""

    def get_process_name_from_file(self, path: str) -> str:
        """Return the process name declared in ``path``."""


class IndexingError(Exception):
    """Raised when process definitions cannot be indexed."""


class LoaderService:
    """Reads definition files and stores where each process is defined."""

    def __init__(self, store: Store, reader: Reader) -> None:
        self.store = store
        self.reader = reader

    def index_process_definitions(self) -> None:
        """Save the name and path of every definition file; stop at the first failure."""
        try:
            files = self.reader.read_yaml_files()
        except Exception as err:
            raise IndexingError(f"failed to read process config files: {err}") from err

        for path in files or []:
            try:
                name = self.reader.get_process_name_from_file(path)
            except Exception as err:
                raise IndexingError(f"failed to get process name: {err}") from err
            try:
                self.store.save_process_definition_meta(name, path)
            except Exception as err:
                raise IndexingError(
                    f"failed to store process definition metadata: {err}"
                ) from err


def run_loader(
    service: LoaderService,
    stop_event: threading.Event,
    interval: float = POLL_INTERVAL,
) -> None:
    """Index definitions every ``interval`` seconds until ``stop_event`` is set.

    Raises IndexingError on the first failed pass.
    """
    while not stop_event.wait(interval):
        try:
            service.index_process_definitions()
        except Exception as err:
            raise IndexingError(f"failed to process config files: {err}") from err
    logger.info("process config loader stopped")