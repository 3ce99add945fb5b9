"""Fingerprint-keyed storage for finished roasts.

Artifact metadata lives in a diskcache (SQLite-backed, safe across threads
and processes, durable across restarts). Video bytes live next to it as
``{fingerprint}.mp4`` files written through a temp file and an atomic
rename. The video is always written before its metadata, so an artifact a
reader can see always points at a complete file.

Keys are checked against the fingerprint pattern before any I/O.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from diskcache import Cache

from roast_agent.fingerprint import is_valid_fingerprint
from roast_agent.models import CachedArtifact

logger = logging.getLogger(__name__)

VIDEO_EXTENSION = ".mp4"
VIDEO_FILE_PATTERN = re.compile(r"^[a-f0-9]{64}\.mp4$")


class InvalidFingerprintError(ValueError):
    """Raised for keys that are not 64-char lowercase hex digests."""


class CacheWriteError(Exception):
    """Raised when an artifact could not be stored durably."""


def is_valid_video_name(name: object) -> bool:
    return isinstance(name, str) and VIDEO_FILE_PATTERN.match(name) is not None


class RoastStore:
    """Write-once artifact store keyed by request fingerprint.

    Example usage:
        store = RoastStore(".data/roasts")

        cached = store.read(fingerprint)
        if cached:
            return cached

        url = store.save_video(fingerprint, mp4_bytes)
        store.write(fingerprint, artifact)
    """

    def __init__(self, storage_dir: str | Path = ".data/roasts", url_prefix: str = "/roasts"):
        """Initialize the store.

        Args:
            storage_dir: Root directory for metadata and video files
            url_prefix: Path prefix for public video URLs
        """
        self.storage_dir = Path(storage_dir)
        self.video_dir = self.storage_dir / "videos"
        self.url_prefix = url_prefix.rstrip("/")
        self.video_dir.mkdir(parents=True, exist_ok=True)
        self.cache = Cache(str(self.storage_dir / "artifacts"))

        # Statistics tracking
        self.hits = 0
        self.misses = 0

        logger.info(f"Initialized roast store at {self.storage_dir}")

    def _check(self, fingerprint: str) -> None:
        if not is_valid_fingerprint(fingerprint):
            raise InvalidFingerprintError(f"Invalid fingerprint: {str(fingerprint)[:80]!r}")

    def video_url(self, fingerprint: str) -> str:
        self._check(fingerprint)
        return f"{self.url_prefix}/{fingerprint}{VIDEO_EXTENSION}"

    def read(self, fingerprint: str) -> Optional[CachedArtifact]:
        """Get the stored artifact for a fingerprint.

        I/O errors and malformed entries count as a miss.

        Raises:
            InvalidFingerprintError: Key is not a well-formed fingerprint
        """
        self._check(fingerprint)
        try:
            raw = self.cache.get(fingerprint)
        except Exception as e:
            logger.warning(f"Artifact read error for {fingerprint[:12]}: {e}")
            self.misses += 1
            return None

        artifact = None
        if raw is not None:
            try:
                artifact = CachedArtifact.from_dict(json.loads(raw))
            except (TypeError, ValueError) as e:
                logger.warning(f"Corrupt artifact entry for {fingerprint[:12]}: {e}")
            if artifact is not None and artifact.fingerprint != fingerprint:
                logger.warning(f"Artifact entry for {fingerprint[:12]} belongs to another fingerprint")
                artifact = None

        if artifact is None:
            self.misses += 1
            logger.debug(f"Store MISS for {fingerprint[:12]} (hit rate: {self.hit_rate:.1%})")
            return None

        self.hits += 1
        logger.debug(f"Store HIT for {fingerprint[:12]} (hit rate: {self.hit_rate:.1%})")
        return artifact

    def write(self, fingerprint: str, artifact: CachedArtifact) -> None:
        """Store the artifact for a fingerprint.

        Raises:
            InvalidFingerprintError: Key is not a well-formed fingerprint
            CacheWriteError: The entry could not be persisted
        """
        self._check(fingerprint)
        if artifact.fingerprint != fingerprint:
            raise ValueError("Artifact fingerprint does not match the key it is stored under")
        try:
            self.cache.set(fingerprint, json.dumps(artifact.to_dict(), ensure_ascii=False))
        except Exception as e:
            raise CacheWriteError(f"Failed to store artifact {fingerprint[:12]}: {e}") from e
        logger.debug(f"Stored artifact {fingerprint[:12]}")

    def save_video(self, fingerprint: str, data: bytes) -> str:
        """Write video bytes for a fingerprint and return their public URL.

        Raises:
            InvalidFingerprintError: Key is not a well-formed fingerprint
            CacheWriteError: The file could not be written
        """
        self._check(fingerprint)
        target = self.video_dir / f"{fingerprint}{VIDEO_EXTENSION}"
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(dir=self.video_dir, suffix=".tmp", delete=False) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, target)
        except OSError as e:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise CacheWriteError(f"Failed to write video {fingerprint[:12]}: {e}") from e
        logger.debug(f"Saved video {target.name} ({len(data)} bytes)")
        return self.video_url(fingerprint)

    def video_path(self, name: str) -> Optional[Path]:
        """Resolve a ``{fingerprint}.mp4`` name to its file, or None.

        The name is pattern-checked before touching the filesystem.
        """
        if not is_valid_video_name(name):
            return None
        path = self.video_dir / name
        return path if path.is_file() else None

    def read_video(self, name: str) -> Optional[bytes]:
        path = self.video_path(name)
        if path is None:
            return None
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def clear(self) -> int:
        """Remove all artifacts and videos.

        Returns:
            Number of artifact entries that were cleared
        """
        entry_count = len(self.cache)
        self.cache.clear()
        for video in self.video_dir.glob(f"*{VIDEO_EXTENSION}"):
            video.unlink(missing_ok=True)
        self.hits = 0
        self.misses = 0
        logger.info(f"Roast store cleared ({entry_count} entries removed)")
        return entry_count

    def get_stats(self) -> dict:
        """Get store statistics."""
        video_bytes = sum(p.stat().st_size for p in self.video_dir.glob(f"*{VIDEO_EXTENSION}"))
        return {
            "total_requests": self.hits + self.misses,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hit_rate,
            "entry_count": len(self.cache),
            "metadata_bytes": self.cache.volume(),
            "video_mb": round(video_bytes / (1024 * 1024), 2),
            "storage_dir": str(self.storage_dir),
        }

    def log_stats(self) -> None:
        stats = self.get_stats()
        logger.info(
            f"Store Stats - Requests: {stats['total_requests']}, "
            f"Hit Rate: {stats['hit_rate']:.1%}, "
            f"Entries: {stats['entry_count']}, "
            f"Videos: {stats['video_mb']}MB"
        )

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def close(self) -> None:
        """Close the metadata cache and release resources."""
        try:
            self.cache.close()
        except Exception as e:
            logger.warning(f"Error closing roast store: {e}")
