"""Round state machine.

One round of the game: a song, a growing list of guesses and the amount
of preview audio the player has unlocked. Invalid requests are rejected
by returning ``False``/``None`` and never change state.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .matcher import MatchVerdict, explain

logger = logging.getLogger(__name__)

# Shared by every round so a timer armed for one round never matches another
_exposure_tokens = itertools.count(1)

ATTEMPT_DURATIONS = (1, 3, 5, 7, 10)

PLAYING = 'playing'
WON = 'won'
LOST = 'lost'

# Why a lost round was lost
ATTRITION = 'attrition'
REVEALED = 'revealed'


@dataclass
class GuessResult:
    text: str
    verdict: MatchVerdict
    status: str
    attempt_index: int

    @property
    def correct(self) -> bool:
        return self.verdict.matched


class Round:
    def __init__(self, song, durations: Sequence[int] = ATTEMPT_DURATIONS, log=None):
        if song is None:
            raise ValueError('A round needs a song')
        self.song = song
        self.durations = tuple(durations)
        self.attempt_index = 0
        self.status = PLAYING
        self.guesses: List[str] = []
        self.revealed = False
        self.loss_reason: Optional[str] = None
        self.is_playing = False
        self.exposure_seconds = 0
        self._exposure_token = 0
        self.logger = log or logger

    @classmethod
    def start(cls, song, durations: Sequence[int] = ATTEMPT_DURATIONS, log=None) -> 'Round':
        return cls(song, durations, log)

    @property
    def max_attempts(self) -> int:
        return len(self.durations)

    @property
    def is_over(self) -> bool:
        return self.status != PLAYING

    @property
    def exposure_token(self) -> Optional[int]:
        """Token of the exposure currently in flight, if any."""
        return self._exposure_token if self.is_playing else None

    def _authorize(self, level_index: int) -> int:
        self._exposure_token = next(_exposure_tokens)
        self.is_playing = True
        self.exposure_seconds = self.durations[level_index]
        self.logger.info(
            f"[exposure-set] song={self.song.id} level={level_index} seconds={self.exposure_seconds} token={self._exposure_token}"
        )
        return self._exposure_token

    def _end_exposure(self) -> None:
        # Invalidate whatever timer is armed
        self._exposure_token = next(_exposure_tokens)
        self.is_playing = False

    def request_exposure(self, level_index: int) -> bool:
        # Replays stay available after the round ends
        if self.is_playing:
            return False
        unlocked = min(self.attempt_index, self.max_attempts - 1)
        if not 0 <= level_index <= unlocked:
            self.logger.info(f"[exposure-denied] song={self.song.id} level={level_index} unlocked={self.attempt_index}")
            return False
        self._authorize(level_index)
        return True

    def finish_exposure(self, token: int) -> bool:
        """Clear the busy flag when ``token`` is still the live exposure."""
        if not self.is_playing or token != self._exposure_token:
            self.logger.info(f"[exposure-abort] song={self.song.id} token={token} live={self.exposure_token}")
            return False
        self.is_playing = False
        return True

    def advance(self) -> bool:
        """Skip: spend an attempt and play the next, longer preview."""
        if self.is_over or self.is_playing or self.attempt_index >= self.max_attempts - 1:
            return False
        self.attempt_index += 1
        self._authorize(self.attempt_index)
        return True

    def reveal(self) -> bool:
        if self.is_over:
            return False
        self.revealed = True
        self.status = LOST
        self.loss_reason = REVEALED
        self._end_exposure()
        self.logger.info(f"[reveal] song={self.song.id} attempt={self.attempt_index}")
        return True

    def submit_guess(self, text: str) -> Optional[GuessResult]:
        if self.is_over or not (text or '').strip():
            return None
        verdict = explain(text, self.song, self.guesses)
        self.guesses.append(text)
        self.attempt_index += 1
        if verdict.matched:
            self.status = WON
            self._end_exposure()
        elif self.attempt_index >= self.max_attempts:
            self.status = LOST
            self.revealed = True
            self.loss_reason = ATTRITION
            self._end_exposure()
        self.logger.info(
            f"[guess] song={self.song.id} attempt={self.attempt_index} matched={verdict.matched} "
            f"repeated={verdict.repeated} status={self.status}"
        )
        return GuessResult(text=text, verdict=verdict, status=self.status, attempt_index=self.attempt_index)

    def unlocked_durations(self) -> List[int]:
        last = min(self.attempt_index, self.max_attempts - 1)
        return list(self.durations[:last + 1])

    def to_dict(self):
        song = self.song.to_dict()
        if not self.is_over:
            # Answer card is only rendered once the round is over
            song.pop('title', None)
            song.pop('artist_name', None)
            song.pop('cover_url', None)
        return {
            'song': song,
            'attempt_index': self.attempt_index,
            'max_attempts': self.max_attempts,
            'status': self.status,
            'loss_reason': self.loss_reason,
            'guesses': list(self.guesses),
            'revealed': self.revealed,
            'is_playing': self.is_playing,
            'exposure_seconds': self.exposure_seconds,
            'unlocked_durations': self.unlocked_durations(),
            'can_skip': not self.is_over and not self.is_playing and self.attempt_index < self.max_attempts - 1,
            'can_reveal': not self.is_over,
        }
