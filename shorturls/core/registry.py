"""Registry module for URL Shortener Service.

This module owns the in-memory mapping from short code to record and
provides dependency injection of the shared instance for FastAPI endpoints.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi import Request

from .config import settings
from .exceptions import (
    CodeCollisionError,
    ExpiredError,
    GenerationExhaustedError,
    NotFoundError,
    ValidityTooLargeError,
)
from .locks import ReadWriteLock
from ..models.url import Click, ShortURLRecord, ShortURLStats
from ..utils.shortener import generate_short_code, validate_short_code, validate_url

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class Registry:
    """Registry class for managing short URL records and their lifecycle."""

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        default_validity_minutes: Optional[int] = None,
        max_generation_attempts: Optional[int] = None,
        max_validity_minutes: Optional[int] = None,
        code_generator: Optional[Callable[[], str]] = None,
    ):
        """Initialize an empty registry.

        Args:
            clock: Callable returning the current time. Defaults to UTC now.
            default_validity_minutes: Validity used when none (or a
                non-positive one) is requested.
            max_generation_attempts: Attempts at finding an unused generated
                code before giving up.
            max_validity_minutes: Longest validity a caller may request.
            code_generator: Callable producing candidate short codes.
        """
        self._clock = clock or utc_now
        self.default_validity_minutes = (
            default_validity_minutes or settings.default_validity_minutes
        )
        self.max_generation_attempts = (
            max_generation_attempts or settings.max_generation_attempts
        )
        self.max_validity_minutes = (
            max_validity_minutes or settings.max_validity_minutes
        )
        self._generate = code_generator or generate_short_code
        self._records: dict[str, ShortURLRecord] = {}
        self._lock = ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._records)

    def __contains__(self, code: str) -> bool:
        with self._lock.read_locked():
            return code in self._records

    def create(
        self,
        original_url: str,
        validity_minutes: Optional[int] = None,
        custom_code: Optional[str] = None,
    ) -> tuple[str, datetime]:
        """Create a new short URL record.

        Args:
            original_url: The original long URL.
            validity_minutes: Lifetime in minutes.
            custom_code: Optional caller-chosen short code.

        Returns:
            Tuple of the short code and its expiry timestamp.

        Raises:
            InvalidURLError: If the URL is empty or malformed.
            InvalidShortCodeError: If the custom code has a bad format.
            ValidityTooLargeError: If the validity exceeds the maximum.
            CodeCollisionError: If the custom code is already taken.
            GenerationExhaustedError: If no unused code could be generated.
        """
        normalized_url = validate_url(original_url)

        if not validity_minutes or validity_minutes <= 0:
            validity_minutes = self.default_validity_minutes
        if validity_minutes > self.max_validity_minutes:
            raise ValidityTooLargeError(
                f"Validity must be at most {self.max_validity_minutes} minutes"
            )
        try:
            validity = timedelta(minutes=validity_minutes)
        except OverflowError as e:
            raise ValidityTooLargeError() from e
        logger.debug(f"URL validity set to {validity_minutes} minutes")

        if custom_code:
            validate_short_code(custom_code)
            record = self._insert_if_absent(custom_code, normalized_url, validity)
            if record is None:
                logger.warning(f"Shortcode collision: {custom_code}")
                raise CodeCollisionError()
        else:
            record = self._insert_generated(normalized_url, validity)

        logger.info(f"Short URL created: {record.code} -> {normalized_url}")
        return record.code, record.expires_at

    def _insert_generated(
        self, original_url: str, validity: timedelta
    ) -> ShortURLRecord:
        for attempt in range(1, self.max_generation_attempts + 1):
            code = self._generate()
            record = self._insert_if_absent(code, original_url, validity)
            if record is not None:
                logger.debug(f"Generated shortcode {code} after {attempt} attempt(s)")
                return record
        logger.error(
            f"No unused shortcode after {self.max_generation_attempts} attempts"
        )
        raise GenerationExhaustedError()

    def _insert_if_absent(
        self, code: str, original_url: str, validity: timedelta
    ) -> Optional[ShortURLRecord]:
        """Insert a new record unless the code is taken.

        The existence check and the insert share one write lock acquisition.

        Returns:
            The inserted record, or None if the code already exists.
        """
        with self._lock.write_locked():
            if code in self._records:
                return None
            now = self._clock()
            try:
                expires_at = now + validity
            except OverflowError as e:
                raise ValidityTooLargeError() from e
            record = ShortURLRecord(
                code=code,
                original_url=original_url,
                created_at=now,
                expires_at=expires_at,
            )
            self._records[code] = record
            return record

    def resolve(self, code: str) -> str:
        """Get the original URL for a short code.

        Does not record a click.

        Args:
            code: The short URL code.

        Returns:
            The normalized original URL.

        Raises:
            NotFoundError: If the code is unknown.
            ExpiredError: If the code is past its expiry.
        """
        with self._lock.read_locked():
            record = self._records.get(code)
            if record is None:
                raise NotFoundError()
            if record.is_expired(self._clock()):
                logger.warning(f"Shortcode expired: {code}")
                raise ExpiredError()
            return record.original_url

    def record_click(
        self, code: str, source: str = "direct", location: str = "unknown"
    ) -> None:
        """Record a click on a short code.

        Expiry is not checked here; callers resolve first.

        Args:
            code: The short URL code.
            source: Referring page, or "direct".
            location: Best-effort location of the visitor.

        Raises:
            NotFoundError: If the code is unknown.
        """
        with self._lock.write_locked():
            record = self._records.get(code)
            if record is None:
                raise NotFoundError()
            record.click_history.append(
                Click(timestamp=self._clock(), source=source, location=location)
            )
            record.click_count += 1
            total = record.click_count
        logger.info(f"Click recorded for {code} (total: {total})")

    def stats(self, code: str) -> ShortURLStats:
        """Get a snapshot of a short code's analytics.

        Stats stay available after the code expires.

        Args:
            code: The short URL code.

        Returns:
            Copy of the current click count, timestamps and click history.

        Raises:
            NotFoundError: If the code is unknown.
        """
        with self._lock.read_locked():
            record = self._records.get(code)
            if record is None:
                raise NotFoundError()
            return ShortURLStats(
                total_clicks=record.click_count,
                created_at=record.created_at,
                expires_at=record.expires_at,
                clicks=list(record.click_history),
            )

    def purge_expired(self, grace: timedelta = timedelta(0)) -> int:
        """Remove records that expired more than ``grace`` ago.

        Args:
            grace: How long expired records are kept around for stats.

        Returns:
            Number of records removed.
        """
        with self._lock.write_locked():
            cutoff = self._clock() - grace
            expired = [
                code
                for code, record in self._records.items()
                if record.expires_at < cutoff
            ]
            for code in expired:
                del self._records[code]
        if expired:
            logger.info(f"Purged {len(expired)} expired short URLs")
        return len(expired)


def get_registry(request: Request) -> Registry:
    """Get the application's registry for dependency injection.

    Args:
        request: FastAPI request object.

    Returns:
        Registry instance created at startup.
    """
    return request.app.state.registry
