from typing import Iterable, NamedTuple


class MatchVerdict(NamedTuple):
    matched: bool
    repeated: bool = False
    title_match: bool = False
    artist_match: bool = False


def normalize(text: str) -> str:
    return (text or '').lower().strip()


def is_repeat(guess: str, prior_guesses: Iterable[str]) -> bool:
    g = normalize(guess)
    return any(normalize(prior) == g for prior in prior_guesses)


def field_matches(g: str, field: str) -> bool:
    """Permissive overlap between a normalized guess and a lower-cased field.

    Substring in either direction, or a whitespace token of one side
    overlapping the other.
    """
    return (
        g in field
        or field in g
        or any(g in word for word in field.split())
        or any(word in field for word in g.split())
    )


def explain(guess: str, song, prior_guesses: Iterable[str] = ()) -> MatchVerdict:
    # Repeats never score, even when they would match
    if is_repeat(guess, prior_guesses):
        return MatchVerdict(matched=False, repeated=True)
    g = normalize(guess)
    title_match = field_matches(g, song.title.lower())
    artist_match = field_matches(g, song.artist_name.lower())
    return MatchVerdict(
        matched=title_match or artist_match,
        title_match=title_match,
        artist_match=artist_match,
    )


def matches(guess: str, song, prior_guesses: Iterable[str] = ()) -> bool:
    return explain(guess, song, prior_guesses).matched
