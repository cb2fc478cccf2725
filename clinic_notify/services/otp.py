from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
import logging
import secrets
import threading
from typing import Callable, Hashable

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class OtpRecord:
    code: str
    expires_at: datetime


class OtpOutcome(str, Enum):
    VALID = "valid"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    MISMATCH = "mismatch"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OtpStore:
    """In-memory, single-use challenges keyed by subject.

    Pending challenges live only as long as the process. Expired entries are
    dropped when the next validation for the same subject finds them.
    """

    def __init__(
        self,
        ttl_seconds: int = 300,
        code_length: int = 6,
        clock: Clock = _utcnow,
    ) -> None:
        if code_length < 1:
            raise ValueError("code_length must be positive")
        self._ttl = timedelta(seconds=ttl_seconds)
        self._code_length = code_length
        self._clock = clock
        self._records: dict[Hashable, OtpRecord] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, subject: Hashable) -> OtpRecord:
        record = OtpRecord(
            code=self._generate_code(),
            expires_at=self._clock() + self._ttl,
        )
        with self._lock:
            replaced = subject in self._records
            self._records[subject] = record
        LOGGER.info("Issued OTP subject=%s replaced=%s", subject, replaced)
        return record

    def validate(self, subject: Hashable, code: str) -> OtpOutcome:
        with self._lock:
            record = self._records.get(subject)
            if record is None:
                outcome = OtpOutcome.NOT_FOUND
            elif self._clock() >= record.expires_at:
                del self._records[subject]
                outcome = OtpOutcome.EXPIRED
            elif not secrets.compare_digest(
                record.code.encode("utf-8"), code.encode("utf-8")
            ):
                outcome = OtpOutcome.MISMATCH
            else:
                del self._records[subject]
                outcome = OtpOutcome.VALID
        LOGGER.info("Validated OTP subject=%s outcome=%s", subject, outcome.value)
        return outcome

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, subject: object) -> bool:
        with self._lock:
            return subject in self._records

    def _generate_code(self) -> str:
        # No leading zeros: the code is always exactly code_length digits.
        lowest = 10 ** (self._code_length - 1)
        value = lowest + secrets.randbelow(10**self._code_length - lowest)
        return str(value)
