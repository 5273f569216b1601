from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from .errors import StoreError

LOGGER = logging.getLogger(__name__)


@dataclass
class TrackedPR:
    """A pull request the user follows."""

    repo: str
    number: int
    added_at: str


class TrackedPRStore:
    """Manage persistence of tracked pull requests in a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.records: list[TrackedPR] = []
        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                self.records = [TrackedPR(**item) for item in data]
            except (OSError, ValueError, TypeError) as exc:
                raise StoreError(f"cannot read tracked PRs from {path}: {exc}") from exc

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [asdict(r) for r in self.records]
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, repo: str, number: int) -> TrackedPR | None:
        for record in self.records:
            if record.repo == repo and record.number == number:
                return record
        return None

    def add(self, repo: str, number: int) -> TrackedPR:
        existing = self.get(repo, number)
        if existing:
            return existing
        record = TrackedPR(
            repo=repo, number=number, added_at=datetime.now(UTC).isoformat()
        )
        self.records.append(record)
        self._save()
        LOGGER.info("tracking PR %s#%d", repo, number)
        return record

    def remove(self, repo: str, number: int) -> bool:
        record = self.get(repo, number)
        if record is None:
            return False
        self.records.remove(record)
        self._save()
        LOGGER.info("stopped tracking PR %s#%d", repo, number)
        return True

    def list_all(self) -> list[TrackedPR]:
        return list(self.records)


__all__ = ["TrackedPR", "TrackedPRStore"]
