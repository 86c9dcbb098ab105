"""Data access layer for loan applications"""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from statement_scoring.domain.models import AnalysisResult, EligibilityResult


@dataclass(frozen=True)
class ApplicationRecord:
    """One scored application handed over by the pipeline"""

    id: str
    user_id: str
    analysis: AnalysisResult
    eligibility: EligibilityResult
    status: str  # "approved" or "rejected"
    created_at: datetime
    personal_info: Dict[str, Any] = field(default_factory=dict)


class ApplicationRepository(Protocol):
    def save(self, record: ApplicationRecord) -> ApplicationRecord:
        ...

    def get(self, application_id: str, user_id: str) -> Optional[ApplicationRecord]:
        ...

    def list_for_user(self, user_id: str, limit: int = 20) -> List[ApplicationRecord]:
        ...


def new_application_record(
    user_id: str,
    analysis: AnalysisResult,
    eligibility: EligibilityResult,
    personal_info: Dict[str, Any] | None = None,
) -> ApplicationRecord:
    return ApplicationRecord(
        id=str(uuid.uuid4()),
        user_id=user_id,
        analysis=analysis,
        eligibility=eligibility,
        status="approved" if eligibility.eligible else "rejected",
        created_at=datetime.now(timezone.utc),
        personal_info=dict(personal_info or {}),
    )


class InMemoryApplicationRepository:
    """Process-local repository; safe to share between worker threads"""

    def __init__(self):
        self._records: Dict[str, ApplicationRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: ApplicationRecord) -> ApplicationRecord:
        with self._lock:
            self._records[record.id] = record
        return record

    def get(self, application_id: str, user_id: str) -> Optional[ApplicationRecord]:
        """Fetch an application only when it belongs to the user"""
        with self._lock:
            record = self._records.get(application_id)
        if record is None or record.user_id != user_id:
            return None
        return record

    def list_for_user(self, user_id: str, limit: int = 20) -> List[ApplicationRecord]:
        """Fetch recent applications for a user, newest first"""
        with self._lock:
            records = [r for r in self._records.values() if r.user_id == user_id]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit]
