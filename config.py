import os


def _int_list(value):
    return [int(v) for v in value.split(',') if v.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///songle.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = [o for o in os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173').split(',') if o]
    # Preview length unlocked by each attempt (seconds)
    ATTEMPT_DURATIONS = _int_list(os.environ.get('ATTEMPT_DURATIONS', '1,3,5,7,10'))
    # Daily quota
    SONGS_PER_DAY = int(os.environ.get('SONGS_PER_DAY', '5'))
    COOLDOWN_HOURS = float(os.environ.get('COOLDOWN_HOURS', '12'))
    ELIGIBILITY_POLL_SEC = int(os.environ.get('ELIGIBILITY_POLL_SEC', '60'))
    QUOTA_RECORD_NAME = os.environ.get('QUOTA_RECORD_NAME', 'daily_quota')
    # Song search. An empty proxy entry means "query the API directly".
    DEEZER_SEARCH_URL = os.environ.get('DEEZER_SEARCH_URL', 'https://api.deezer.com/search')
    SONG_SOURCE_PROXIES = os.environ.get('SONG_SOURCE_PROXIES', ',https://api.allorigins.win/raw?url=').split(',')
    SONG_FETCH_TIMEOUT_SEC = float(os.environ.get('SONG_FETCH_TIMEOUT_SEC', '8'))
    SONG_SOURCE_OFFLINE = os.environ.get('SONG_SOURCE_OFFLINE', '').lower() in ('1', 'true', 'yes')
    # Optional: heartbeat interval for timer worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
