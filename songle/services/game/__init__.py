"""Game domain services: matching, rounds, the daily quota and timers.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""

from flask import current_app

from .controller import GameSessionController
from .playback import SocketPlaybackDevice
from .quota import DailyQuotaGate
from .scheduler import EligibilityPoller, ExposureTimer
from .songs import build_song_provider
from .store import SQLAlchemyQuotaStore

EXTENSION_KEY = 'songle.controller'


def build_controller(app) -> GameSessionController:
    cfg = app.config
    gate = DailyQuotaGate(
        SQLAlchemyQuotaStore(cfg.get('QUOTA_RECORD_NAME', 'daily_quota'), log=app.logger),
        songs_per_day=int(cfg.get('SONGS_PER_DAY', 5)),
        cooldown_hours=float(cfg.get('COOLDOWN_HOURS', 12)),
        log=app.logger,
    )
    controller = GameSessionController(
        gate,
        build_song_provider(cfg, log=app.logger),
        SocketPlaybackDevice(),
        timer=ExposureTimer(app),
        durations=cfg.get('ATTEMPT_DURATIONS') or (1, 3, 5, 7, 10),
        logger=app.logger,
    )
    controller.poller = EligibilityPoller(app, controller.eligibility_payload)
    return controller


def get_controller() -> GameSessionController:
    """Controller for the current app, created on first use.

    The quota is read from the database at that point, so this must run
    inside an app context.
    """
    app = current_app._get_current_object()
    controller = app.extensions.get(EXTENSION_KEY)
    if controller is None:
        controller = build_controller(app)
        app.extensions[EXTENSION_KEY] = controller
    return controller
