from songle.services.game.matcher import explain, is_repeat, matches, normalize
from songle.services.game.songs import Song


def _song(title, artist):
    return Song(id='x', title=title, artist_name=artist, preview_url='', cover_url='')


def test_normalize_lowercases_and_trims():
    assert normalize('  Bad Bunny \n') == 'bad bunny'


def test_matching_ignores_case_and_surrounding_whitespace():
    song = _song('Tití Me Preguntó', 'Bad Bunny')
    assert matches('Bad Bunny', song) is True
    assert matches('  bad bunny ', song) is True
    assert matches('Bad Bunny', song) == matches('  bAD bUNNY   ', song)


def test_artist_token_matches_ginza():
    verdict = explain('balvin', _song('Ginza', 'J Balvin'))
    assert verdict.matched
    assert verdict.artist_match
    assert not verdict.title_match


def test_partial_title_and_extra_words_match():
    song = _song('Me Porto Bonito', 'Bad Bunny')
    assert matches('porto', song)
    assert matches('me porto bonito remix', song)
    # A token of the guess contained in the title
    assert matches('bonito sabor', song)


def test_unrelated_guess_does_not_match():
    song = _song('Ginza', 'J Balvin')
    assert not matches('Despacito', song)
    assert not matches('daddy yankee', song)


def test_repeated_guess_never_matches():
    song = _song('Ginza', 'J Balvin')
    assert matches('ginza', song, ['despacito'])
    verdict = explain('  GINZA ', song, ['Ginza'])
    assert verdict.matched is False
    assert verdict.repeated is True


def test_is_repeat_normalizes_prior_guesses():
    assert is_repeat('hello', ['  HELLO  '])
    assert not is_repeat('hello', ['hell o'])


def test_interior_double_space_is_not_a_wildcard():
    song = _song('Ginza', 'J Balvin')
    assert not matches('qqq  zzz', song)
