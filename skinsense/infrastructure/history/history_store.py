"""Local analysis history stored as a JSON file, newest entry first."""
import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from skinsense.domain.models import AnalysisResult


logger = logging.getLogger(__name__)


MAX_HISTORY = 20


class HistoryStore:
    """Keeps the most recent analyses, dropping the oldest past the limit."""

    def __init__(self, storage_path: Optional[str] = None, max_entries: int = MAX_HISTORY):
        """
        Initialize HistoryStore.

        Args:
            storage_path: Path to JSON file for history storage.
                         Defaults to .streamlit/history.json
            max_entries: Number of analyses kept
        """
        if storage_path is None:
            # Navigate from this file to project root, then to .streamlit/history.json
            project_root = Path(__file__).parent.parent.parent.parent
            storage_path = str(project_root / ".streamlit" / "history.json")

        self.storage_path = storage_path
        self.max_entries = max_entries

    def _load_records(self) -> List[Any]:
        """Load raw records from storage file."""
        try:
            with open(self.storage_path, 'r', encoding='utf-8') as f:
                records = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning("Unreadable history file %s: %s", self.storage_path, e)
            return []
        if not isinstance(records, list):
            logger.warning("History file %s does not hold a list; ignoring it", self.storage_path)
            return []
        return records

    def _save(self, entries: List[AnalysisResult]) -> None:
        """Save entries to storage file. Write failures are logged, not raised."""
        storage_dir = os.path.dirname(self.storage_path)
        try:
            if storage_dir:
                os.makedirs(storage_dir, exist_ok=True)
            with open(self.storage_path, 'w', encoding='utf-8') as f:
                json.dump([entry.to_record() for entry in entries], f, indent=2)
        except (OSError, TypeError) as e:
            logger.warning("Failed to save history to %s: %s", self.storage_path, e)

    def load(self) -> List[AnalysisResult]:
        """
        Load stored analyses.

        Returns:
            Up to max_entries results, newest first. Entries that do not
            validate are skipped.
        """
        entries: List[AnalysisResult] = []
        for record in self._load_records()[:self.max_entries]:
            try:
                entries.append(AnalysisResult.model_validate(record))
            except ValidationError as e:
                logger.warning("Skipping invalid history entry: %s", e)
        return entries

    def add(self, result: AnalysisResult) -> List[AnalysisResult]:
        """
        Add a finished analysis at the front of the history.

        Args:
            result: The analysis to store

        Returns:
            The updated history, newest first
        """
        entries = [result] + self.load()
        entries = entries[:self.max_entries]
        self._save(entries)
        return entries

    def clear(self) -> None:
        try:
            os.remove(self.storage_path)
        except FileNotFoundError:
            pass
