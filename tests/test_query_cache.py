from lyricdb.index.models import SearchResult
from lyricdb.search.cache import QueryCache

from tests.conftest import FakeClock


def _results(*files):
    return [SearchResult(id=f, raw_lyric_file=f, metadata=[], platforms=["ncm"]) for f in files]


def test_lookup_miss_on_empty_cache(cache):
    assert cache.lookup("roy") == (None, False)


def test_keys_are_isolated(cache):
    cache.store("roy", _results("a.lrc"))
    results, hit = cache.lookup("roy")
    assert hit
    assert [r.raw_lyric_file for r in results] == ["a.lrc"]
    assert cache.lookup("aimer") == (None, False)


def test_entry_expires_after_ttl_without_access(cache, clock):
    cache.store("roy", _results("a.lrc"))
    clock.advance(299)
    assert cache.lookup("roy")[1]
    clock.advance(1)
    assert cache.lookup("roy") == (None, False)


def test_store_overwrites_and_restarts_ttl(cache, clock):
    cache.store("roy", _results("a.lrc"))
    clock.advance(200)
    cache.store("roy", _results("b.ttml"))
    clock.advance(200)
    results, hit = cache.lookup("roy")
    assert hit
    assert results[0].raw_lyric_file == "b.ttml"


def test_clear_drops_everything(cache):
    cache.store("roy", _results("a.lrc"))
    cache.store("aimer", _results("b.ttml"))
    assert cache.clear() == 2
    assert len(cache) == 0
    assert cache.lookup("roy") == (None, False)
    assert cache.lookup("aimer") == (None, False)


def test_cap_breach_sweeps_only_expired_entries():
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=10, max_entries=3, clock=clock)
    cache.store("old-1", _results("a"))
    cache.store("old-2", _results("b"))
    clock.advance(11)
    cache.store("new-1", _results("c"))
    assert len(cache) == 3

    cache.store("new-2", _results("d"))
    assert len(cache) == 2
    assert cache.lookup("new-1")[1]
    assert cache.lookup("new-2")[1]


def test_entry_exactly_at_ttl_is_swept():
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=10, max_entries=1, clock=clock)
    cache.store("old", _results("a"))
    clock.advance(10)
    assert not cache.lookup("old")[1]

    cache.store("new", _results("b"))
    assert len(cache) == 1
    assert cache.lookup("new")[1]


def test_cap_is_soft_when_nothing_has_expired():
    clock = FakeClock()
    cache = QueryCache(ttl_seconds=10, max_entries=2, clock=clock)
    for key in ("a", "b", "c", "d"):
        cache.store(key, _results(key))
    assert len(cache) == 4
    assert all(cache.lookup(k)[1] for k in ("a", "b", "c", "d"))


def test_tuple_keys_are_supported(cache):
    cache.store(("roy", ("ncm",)), _results("a.lrc"))
    assert cache.lookup(("roy", ("ncm",)))[1]
    assert not cache.lookup(("roy", ("ncm", "qq")))[1]

