import threading
from dataclasses import dataclass
from typing import Optional

from songle import socketio
from .playback import PLAYER_ROOM
from .quota import DailyQuotaGate, Eligibility
from .round import ATTEMPT_DURATIONS, GuessResult, Round


@dataclass
class StartResult:
    started: bool
    eligibility: Eligibility
    round: Optional[Round] = None


class GameSessionController:
    """Single-player session: quota gate, song provider and the active round.

    Mutations are serialized with one lock because the exposure timer and
    the eligibility poller call back from background tasks.
    """

    def __init__(self, gate: DailyQuotaGate, provider, playback, timer=None, poller=None,
                 durations=ATTEMPT_DURATIONS, logger=None, notify=True):
        self.gate = gate
        self.provider = provider
        self.playback = playback
        self.timer = timer
        self.poller = poller
        self.durations = tuple(durations)
        self.logger = logger or gate.logger
        self.notify = notify
        self.round: Optional[Round] = None
        self._lock = threading.RLock()

    # ---- helpers ----

    def _emit_state(self) -> None:
        if self.notify:
            socketio.emit('state_update', self.state(), to=PLAYER_ROOM, namespace='/ws')

    def _play_current(self) -> None:
        rnd = self.round
        token = rnd.exposure_token
        self.playback.play(rnd.song.preview_url, rnd.exposure_seconds)
        if self.timer is not None:
            self.timer.arm(token, rnd.exposure_seconds, self.on_exposure_expired)

    def _halt_playback(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
        self.playback.stop()

    # ---- operations ----

    def eligibility(self) -> Eligibility:
        with self._lock:
            result = self.gate.check_eligibility()
        if not result.can_play and self.poller is not None:
            self.poller.start()
        return result

    def eligibility_payload(self) -> dict:
        payload = self.eligibility().to_dict()
        with self._lock:
            payload.update(self.gate.to_dict())
        return payload

    def _denied(self, result: Eligibility) -> StartResult:
        self.logger.info(f"[round-denied] cooldown_remaining={result.cooldown_remaining}")
        if self.poller is not None:
            self.poller.start()
        return StartResult(started=False, eligibility=result, round=self.round)

    def start_round(self) -> StartResult:
        with self._lock:
            result = self.gate.check_eligibility()
        if not result.can_play:
            return self._denied(result)
        # The fetch may hit the network; timers and other requests keep running meanwhile
        song = self.provider.fetch_song()
        with self._lock:
            result = self.gate.check_eligibility()
            if not result.can_play:
                return self._denied(result)
            if self.round is not None and self.round.is_playing:
                self._halt_playback()
            self.round = Round.start(song, self.durations, log=self.logger)
            self.gate.record_round_started()
            self.logger.info(
                f"[round-start] song={song.id} played_today={self.gate.quota.songs_played}/{self.gate.songs_per_day}"
            )
        self._emit_state()
        return StartResult(started=True, eligibility=result, round=self.round)

    def request_exposure(self, level_index: int) -> bool:
        with self._lock:
            if self.round is None or not self.round.request_exposure(level_index):
                return False
            self._play_current()
        self._emit_state()
        return True

    def skip(self) -> bool:
        with self._lock:
            if self.round is None or not self.round.advance():
                return False
            self._play_current()
        self._emit_state()
        return True

    def reveal(self) -> bool:
        with self._lock:
            if self.round is None:
                return False
            was_playing = self.round.is_playing
            if not self.round.reveal():
                return False
            if was_playing:
                self._halt_playback()
        self._emit_state()
        return True

    def submit_guess(self, text: str) -> Optional[GuessResult]:
        with self._lock:
            if self.round is None:
                return None
            was_playing = self.round.is_playing
            result = self.round.submit_guess(text)
            if result is None:
                return None
            if was_playing and self.round.is_over:
                self._halt_playback()
        self._emit_state()
        return result

    def on_exposure_expired(self, token: int) -> None:
        with self._lock:
            if self.round is None or not self.round.finish_exposure(token):
                return
            self.playback.stop()
        self._emit_state()

    def state(self) -> dict:
        with self._lock:
            rnd = self.round
            return {
                'round': rnd.to_dict() if rnd is not None else None,
                'quota': self.gate.to_dict(),
                'attempt_durations': list(self.durations),
                'max_attempts': len(self.durations),
                'can_reveal': rnd is not None and not rnd.is_over,
            }
