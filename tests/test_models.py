"""
Unit tests for option records.
"""

import copy

import pytest

from higa.models import (
    MISSING,
    APIVersion,
    ArchivedThreadsQuery,
    BulkDeleteOptions,
    CreateInviteOptions,
    CreateMessageOptions,
    GetMessagesQuery,
    ModifyChannelOptions,
    StartThreadOptions
)


class TestMissing:
    """Test the MISSING sentinel."""
    
    def test_singleton_and_falsy(self):
        assert not MISSING
        assert repr(MISSING) == "MISSING"
        assert copy.deepcopy(MISSING) is MISSING


class TestPayload:
    """Test body and query serialization."""
    
    def test_unset_fields_are_omitted(self):
        options = ModifyChannelOptions(name="rules", nsfw=False)
        
        assert options.to_dict() == {"name": "rules", "nsfw": False}
    
    def test_explicit_none_is_kept(self):
        """None clears a nullable field and must reach the body as null."""
        options = ModifyChannelOptions(parent_id=None)
        
        assert options.to_dict() == {"parent_id": None}
    
    def test_empty_record(self):
        assert CreateInviteOptions().to_dict() == {}
        assert GetMessagesQuery().to_query() == {}
    
    def test_nested_values_are_forwarded_untouched(self):
        embeds = [{"title": "Hello", "fields": [{"name": "a", "value": "b"}]}]
        options = CreateMessageOptions(content="hi", embeds=embeds)
        
        assert options.to_dict()["embeds"] is embeds
    
    def test_query_rendering(self):
        query = GetMessagesQuery(before="123", limit=50).to_query()
        
        assert query == {"before": "123", "limit": "50"}
    
    def test_query_booleans_and_nulls(self):
        query = StartThreadOptions(invitable=True, rate_limit_per_user=None).to_query()
        
        assert query == {"invitable": "true"}
    
    def test_archived_threads_query(self):
        assert ArchivedThreadsQuery(limit=2).to_query() == {"limit": "2"}
    
    def test_bulk_delete_defaults_to_empty_list(self):
        first = BulkDeleteOptions()
        second = BulkDeleteOptions()
        first.messages.append("1")
        
        assert second.to_dict() == {"messages": []}
    
    def test_unknown_fields_are_rejected(self):
        with pytest.raises(TypeError):
            ModifyChannelOptions(colour="red")


class TestAPIVersion:
    
    def test_versions(self):
        assert [version.value for version in APIVersion] == [6, 7, 8, 9]
        assert APIVersion(9) is APIVersion.V9
