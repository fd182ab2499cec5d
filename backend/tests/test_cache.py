"""Unit tests for the Valkey-backed analysis cache."""

from fakes import FakeRedis
from policycheck.cache import AssessmentCache
from policycheck.extraction import ParsedDocument
from policycheck.utils import cache_identity


class TestAssessmentCache:
    def test_round_trip_with_ttl(self, fake_redis):
        cache = AssessmentCache(fake_redis, ttl_seconds=60)
        cache.set_json("example.com/terms", ParsedDocument(product="Acme"))
        assert cache.get_json("example.com/terms", ParsedDocument) == ParsedDocument(product="Acme")
        assert fake_redis.ttls["policycheck:analysis:example.com/terms"] == 60

    def test_miss(self, fake_redis):
        cache = AssessmentCache(fake_redis, ttl_seconds=60)
        assert cache.get_json("nothing", ParsedDocument) is None

    def test_unreadable_entry_is_miss(self, fake_redis):
        cache = AssessmentCache(fake_redis, ttl_seconds=60)
        fake_redis.store[cache.key("bad")] = b"{not json"
        assert cache.get_json("bad", ParsedDocument) is None

    def test_backend_errors_are_misses(self):
        cache = AssessmentCache(FakeRedis(fail=True), ttl_seconds=60)
        cache.set_json("k", ParsedDocument())
        assert cache.get_json("k", ParsedDocument) is None


class TestCacheIdentity:
    def test_registered_domain_and_path(self):
        assert cache_identity("https://www.example.com/Terms/") == "example.com/terms"

    def test_subdomains_share_identity(self):
        assert cache_identity("https://shop.example.com/tos") == cache_identity("https://example.com/tos")

    def test_bare_host(self):
        assert cache_identity("example.com") == "example.com/"
