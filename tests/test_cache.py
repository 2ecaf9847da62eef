"""
Unit tests for the cache store.
"""

import pytest

from higa.cache import CacheManager, CacheStore


class TestCacheStore:
    """Test cases for CacheStore."""
    
    def test_missing_entry(self):
        """Lookups of unknown ids signal absence instead of failing."""
        store = CacheStore("channel")
        
        assert store.has("1") is False
        assert store.get("1") is None
        store.delete("1")  # No error
    
    def test_set_get_delete(self):
        store = CacheStore("channel")
        store.set("1", {"id": "1", "name": "general"})
        
        assert store.has("1")
        assert "1" in store
        assert store.get("1") == {"id": "1", "name": "general"}
        assert len(store) == 1
        
        store.delete("1")
        
        assert not store.has("1")
        assert len(store) == 0
    
    def test_set_overwrites(self):
        store = CacheStore("channel")
        store.set("1", {"id": "1", "name": "old"})
        store.set("1", {"id": "1", "name": "new"})
        
        assert store.get("1")["name"] == "new"
        assert len(store) == 1
    
    def test_iteration_and_clear(self):
        store = CacheStore("message")
        store.set("a", {})
        store.set("b", {})
        
        assert sorted(store) == ["a", "b"]
        
        store.clear()
        assert len(store) == 0


class TestCacheManager:
    """Test cases for CacheManager."""
    
    def test_partitions_are_independent(self):
        """The same id in two kinds never collides."""
        cache = CacheManager()
        cache.channels.set("1", {"kind": "channel"})
        cache.users.set("1", {"kind": "user"})
        
        assert cache.channels.get("1") == {"kind": "channel"}
        assert cache.users.get("1") == {"kind": "user"}
        
        cache.channels.delete("1")
        assert cache.users.has("1")
    
    def test_instances_do_not_share_state(self):
        first = CacheManager()
        second = CacheManager()
        first.channels.set("1", {})
        
        assert not second.channels.has("1")
    
    def test_partition_lookup(self):
        cache = CacheManager()
        assert cache.partition("messages") is cache.messages
        
        with pytest.raises(KeyError):
            cache.partition("emojis")
    
    def test_stats_and_clear(self):
        cache = CacheManager()
        cache.channels.set("1", {})
        cache.messages.set("2", {})
        cache.messages.set("3", {})
        
        assert cache.stats() == {
            "channels": 1,
            "messages": 2,
            "users": 0,
            "guilds": 0,
            "invites": 0
        }
        
        cache.clear()
        assert sum(cache.stats().values()) == 0
