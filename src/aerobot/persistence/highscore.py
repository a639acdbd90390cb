"""High score persistence with a local file and optional remote sync.

The local JSON file is always written first and synchronously, so an
offline machine or a crash never loses a new record. The remote endpoint
is best effort: reads fall back to the local file, writes are pushed in a
background task and every failure is logged and swallowed.

Remote protocol:
    GET  <remote_url>  ->  {"highScore": <number>}
    POST <remote_url>  <-  {"score": <int>}
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional, Set

import aiohttp

logger = logging.getLogger(__name__)


def parse_score(value: Any) -> Optional[int]:
    """Coerce a persisted value into a non-negative int, or None if malformed."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if number != number or number in (float("inf"), float("-inf")):
        return None
    return max(0, int(number))


class HighScoreStore:
    """Loads and saves the best score.

    Args:
        local_path: JSON file used as durable local storage
        remote_url: Optional endpoint for global high score sync
        timeout: Total timeout in seconds for a remote request
    """

    LOCAL_KEY = "highScore"

    def __init__(
        self,
        local_path: Path,
        remote_url: Optional[str] = None,
        timeout: float = 5.0,
    ):
        self._local_path = Path(local_path)
        self._remote_url = remote_url or None
        self._timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None
        self._pending: Set[asyncio.Task] = set()

    @property
    def local_path(self) -> Path:
        return self._local_path

    @property
    def remote_enabled(self) -> bool:
        return self._remote_url is not None

    # ----------------------------
    # Local storage
    # ----------------------------

    def load_local(self) -> int:
        """Read the local high score; 0 when missing or corrupt."""
        if not self._local_path.exists():
            return 0
        try:
            with open(self._local_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read local high score: {e}")
            return 0

        if isinstance(data, dict):
            data = data.get(self.LOCAL_KEY)
        score = parse_score(data)
        if score is None:
            logger.warning(f"Ignoring malformed local high score: {data!r}")
            return 0
        return score

    def save_local(self, score: int) -> bool:
        """Write the high score to the local file."""
        score = max(0, int(score))
        try:
            self._local_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._local_path, "w", encoding="utf-8") as f:
                json.dump({self.LOCAL_KEY: score}, f)
        except OSError as e:
            logger.error(f"Failed to save local high score: {e}")
            return False
        logger.debug(f"Saved local high score {score}")
        return True

    # ----------------------------
    # Remote storage
    # ----------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers={"Content-Type": "application/json"},
            )
        return self._session

    async def fetch_remote(self) -> Optional[int]:
        """Fetch the global high score; None on any failure."""
        if not self._remote_url:
            return None
        try:
            session = await self._get_session()
            async with session.get(self._remote_url) as response:
                if response.status != 200:
                    logger.warning(f"Remote high score returned HTTP {response.status}")
                    return None
                data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            logger.warning("Timeout loading remote high score")
            return None
        except aiohttp.ClientError as e:
            logger.warning(f"Network error loading remote high score: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Malformed remote high score payload: {e}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error loading remote high score: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Unexpected remote high score payload: {data!r}")
            return None
        return parse_score(data.get(self.LOCAL_KEY))

    async def push_remote(self, score: int) -> bool:
        """Send a score to the remote endpoint. Never raises."""
        if not self._remote_url:
            return False
        try:
            session = await self._get_session()
            async with session.post(self._remote_url, json={"score": int(score)}) as response:
                if response.status >= 400:
                    logger.warning(f"Remote high score sync failed: HTTP {response.status}")
                    return False
        except asyncio.TimeoutError:
            logger.warning("Timeout syncing remote high score")
            return False
        except aiohttp.ClientError as e:
            logger.warning(f"Network error syncing remote high score: {e}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error syncing remote high score: {e}")
            return False

        logger.info(f"Remote high score synced: {score}")
        return True

    # ----------------------------
    # Adapter API
    # ----------------------------

    async def load(self) -> int:
        """Best known high score: remote when reachable, else local, else 0."""
        local = self.load_local()
        remote = await self.fetch_remote()
        if remote is None:
            if self.remote_enabled:
                logger.info(f"Using local high score {local}")
            return local
        return max(remote, local)

    def save(self, score: int) -> Optional[asyncio.Task]:
        """Persist locally now, then push to the remote in the background.

        Returns:
            The background sync task, or None when no sync was scheduled
        """
        score = max(0, int(score))
        self.save_local(score)

        if not self._remote_url:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, skipping remote sync")
            return None

        task = loop.create_task(self.push_remote(score))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def close(self) -> None:
        """Wait for pending syncs and close the HTTP session."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
