"""Speaker registry: one ``Speaker`` per identity key."""

import logging
import threading
from typing import Callable, Dict, Iterator, Optional

from diarize.core.speaker import Speaker

SpeakerFactory = Callable[[Optional[str], Optional[str]], Speaker]

logger = logging.getLogger(__name__)


class SpeakerRegistry:
    """
    Maps identity keys to speakers for the lifetime of its owner.

    Entries are never evicted. The first registration for a key wins: later
    calls with a different gender, or with another speaker object, get the
    stored speaker back unchanged.
    """

    def __init__(self, factory: SpeakerFactory):
        """
        Args:
            factory: Builds a fresh UBM-backed speaker from (uri, gender)
        """
        self._factory = factory
        self._speakers: Dict[str, Speaker] = {}
        self._lock = threading.Lock()

    def find_or_create(self, uri: str, gender: Optional[str] = None) -> Speaker:
        speaker = self._speakers.get(uri)
        if speaker is not None:
            return speaker

        with self._lock:
            speaker = self._speakers.get(uri)
            if speaker is None:
                speaker = self._factory(uri, gender)
                self._speakers[uri] = speaker
                logger.debug(f"[REGISTRY] Created speaker {uri!r} (gender={gender!r})")
        return speaker

    def register(self, speaker: Speaker) -> Speaker:
        """Store ``speaker`` under its uri unless the key is taken; return the stored one."""
        if speaker.uri is None:
            raise ValueError("Cannot register an anonymous speaker")

        with self._lock:
            return self._speakers.setdefault(speaker.uri, speaker)

    def get(self, uri: str) -> Optional[Speaker]:
        return self._speakers.get(uri)

    def __contains__(self, uri: str) -> bool:
        return uri in self._speakers

    def __len__(self) -> int:
        return len(self._speakers)

    def __iter__(self) -> Iterator[Speaker]:
        return iter(list(self._speakers.values()))
