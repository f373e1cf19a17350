"""Song acquisition.

A ``SongProvider`` walks a ranked list of sources and always ends with a
static offline list, so callers never have to handle a missing song.
"""

import logging
import random
from dataclasses import dataclass, asdict
from typing import Optional, Sequence
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Song:
    id: str
    title: str
    artist_name: str
    preview_url: str
    cover_url: str

    def to_dict(self):
        return asdict(self)


SEARCH_ARTISTS = [
    'Eladio Carrión',
    'Bad Bunny',
    'J Balvin',
    'Maluma',
    'Ozuna',
    'Anuel AA',
    'Karol G',
    'Natti Natasha',
    'Farruko',
    'Sech',
    'Rauw Alejandro',
    'Myke Towers',
    'Feid',
    'Arcángel',
    'Daddy Yankee',
]

FALLBACK_SONGS = [
    Song(
        id='fallback-1',
        title='Tití Me Preguntó',
        artist_name='Bad Bunny',
        preview_url='https://cdns-preview-6.dzcdn.net/stream/c-6b8c8c8c8c8c8c8c8c8c8c8c8c8c8c8-1.mp3',
        cover_url='https://e-cdns-images.dzcdn.net/images/cover/2e018122cb56986277102d2041a592c8/264x264-000000-80-0-0.jpg',
    ),
    Song(
        id='fallback-2',
        title='Me Porto Bonito',
        artist_name='Bad Bunny',
        preview_url='https://cdns-preview-7.dzcdn.net/stream/c-7b8c8c8c8c8c8c8c8c8c8c8c8c8c8c8-1.mp3',
        cover_url='https://e-cdns-images.dzcdn.net/images/cover/2e018122cb56986277102d2041a592c8/264x264-000000-80-0-0.jpg',
    ),
    Song(
        id='fallback-3',
        title='Ginza',
        artist_name='J Balvin',
        preview_url='https://cdns-preview-8.dzcdn.net/stream/c-8b8c8c8c8c8c8c8c8c8c8c8c8c8c8c8-1.mp3',
        cover_url='https://e-cdns-images.dzcdn.net/images/cover/3f018122cb56986277102d2041a592c8/264x264-000000-80-0-0.jpg',
    ),
]


class StaticSongSource:
    name = 'static'

    def __init__(self, songs: Sequence[Song] = FALLBACK_SONGS, rng: Optional[random.Random] = None):
        if not songs:
            raise ValueError('StaticSongSource needs at least one song')
        self.songs = list(songs)
        self.rng = rng or random.Random()

    def fetch(self) -> Song:
        return self.rng.choice(self.songs)


class DeezerSearchSource:
    """Search Deezer for a random track by one of ``artists``.

    ``proxy`` is prepended verbatim to the search URL, which is how the
    public CORS relays expect to be called. An empty proxy queries Deezer
    directly.
    """

    def __init__(self, base_url: str, proxy: str = '', artists: Sequence[str] = SEARCH_ARTISTS,
                 timeout: float = 8.0, session=None, rng: Optional[random.Random] = None):
        self.base_url = base_url
        self.proxy = proxy or ''
        self.artists = list(artists)
        self.timeout = timeout
        self.session = session or requests.Session()
        self.rng = rng or random.Random()

    @property
    def name(self) -> str:
        return f"deezer via {self.proxy}" if self.proxy else 'deezer'

    def search_url(self, artist: str) -> str:
        query = quote(f'artist:"{artist}"')
        url = f"{self.base_url}?q={query}&limit=50"
        if self.proxy:
            # Relays take the target as a single (encoded) argument
            return f"{self.proxy}{quote(url, safe='') if self.proxy.endswith('=') else url}"
        return url

    def fetch(self) -> Optional[Song]:
        artist = self.rng.choice(self.artists)
        resp = self.session.get(
            self.search_url(artist),
            headers={'Accept': 'application/json'},
            timeout=self.timeout,
        )
        if not resp.ok:
            logger.info(f"[song-source] {self.name} returned status {resp.status_code}")
            return None
        tracks = [t for t in (resp.json().get('data') or []) if t.get('preview')]
        if not tracks:
            return None
        track = self.rng.choice(tracks)
        return Song(
            id=str(track['id']),
            title=track['title'],
            artist_name=track['artist']['name'],
            preview_url=track['preview'],
            cover_url=(track.get('album') or {}).get('cover', ''),
        )


class SongProvider:
    """Try each source in order; the fallback source always answers."""

    def __init__(self, sources, fallback: Optional[StaticSongSource] = None, log=None):
        self.sources = list(sources)
        self.fallback = fallback or StaticSongSource()
        self.logger = log or logger

    def fetch_song(self) -> Song:
        for source in self.sources:
            try:
                song = source.fetch()
            except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
                self.logger.warning(f"[song-source-failed] source={source.name} error={exc!r}")
                continue
            if song is not None:
                self.logger.info(f"[song-fetched] source={source.name} song={song.id}")
                return song
            self.logger.info(f"[song-source-empty] source={source.name}")
        song = self.fallback.fetch()
        self.logger.info(f"[song-fallback] using offline song {song.id}")
        return song


def build_song_provider(config, log=None) -> SongProvider:
    if config.get('SONG_SOURCE_OFFLINE'):
        return SongProvider([], log=log)
    session = requests.Session()
    timeout = float(config.get('SONG_FETCH_TIMEOUT_SEC', 8))
    base_url = config.get('DEEZER_SEARCH_URL', 'https://api.deezer.com/search')
    sources = [
        DeezerSearchSource(base_url, proxy=proxy.strip(), timeout=timeout, session=session)
        for proxy in config.get('SONG_SOURCE_PROXIES', [''])
    ]
    return SongProvider(sources, log=log)
