"""Tests for PriceCache."""

from decimal import Decimal

from stockwatch.market.cache import PriceCache
from stockwatch.market.models import PriceState


def _batch(**prices):
    return {t: PriceState.flat(t, Decimal(p)) for t, p in prices.items()}


class TestPriceCache:
    """Unit tests for the PriceCache."""

    def test_empty(self):
        """A fresh cache knows no tickers."""
        cache = PriceCache()
        assert len(cache) == 0
        assert cache.get("GOOG") is None
        assert cache.get_all() == {}

    def test_publish_and_get(self):
        """Test publishing a batch and reading it back."""
        cache = PriceCache()
        batch = _batch(GOOG="175.00", TSLA="250.00")
        cache.publish(batch)
        assert cache.get("GOOG") == batch["GOOG"]
        assert set(cache.get_all()) == {"GOOG", "TSLA"}

    def test_publish_replaces_whole_batch(self):
        """Tickers missing from the new batch are gone, not stale."""
        cache = PriceCache()
        cache.publish(_batch(GOOG="175.00", TSLA="250.00"))
        cache.publish(_batch(GOOG="176.00"))
        assert "TSLA" not in cache
        assert cache.get_price("GOOG") == Decimal("176.00")

    def test_get_all_is_a_copy(self):
        """Mutating the returned mapping does not touch the cache."""
        cache = PriceCache()
        cache.publish(_batch(GOOG="175.00"))
        snapshot = cache.get_all()
        snapshot.clear()
        assert "GOOG" in cache

    def test_held_snapshot_survives_publish(self):
        """A reader's snapshot keeps the batch it was taken from."""
        cache = PriceCache()
        cache.publish(_batch(GOOG="175.00"))
        before = cache.get_all()
        cache.publish(_batch(GOOG="180.00"))
        assert before["GOOG"].price == Decimal("175.00")

    def test_publish_copies_input(self):
        """Later changes to the caller's dict are not visible."""
        cache = PriceCache()
        batch = _batch(GOOG="175.00")
        cache.publish(batch)
        batch["TSLA"] = PriceState.flat("TSLA", Decimal("1"))
        assert "TSLA" not in cache

    def test_version_increments_per_batch(self):
        """Test that version counter increments once per publish."""
        cache = PriceCache()
        v0 = cache.version
        cache.publish(_batch(GOOG="1", TSLA="2"))
        assert cache.version == v0 + 1
        cache.publish(_batch(GOOG="3", TSLA="4"))
        assert cache.version == v0 + 2

    def test_get_price_convenience(self):
        """Test the convenience get_price method."""
        cache = PriceCache()
        cache.publish(_batch(GOOG="190.50"))
        assert cache.get_price("GOOG") == Decimal("190.50")
        assert cache.get_price("NOPE") is None
