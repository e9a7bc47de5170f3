"""Tests for the per-search query context."""

from medusa_openapi_search.search.query_processor import (
    build_query_context,
    expand_identifier_words,
)


class TestBuildQueryContext:
    """Test cases for build_query_context."""

    def test_tokens_and_non_stop_tokens(self):
        context = build_query_context("List the Promotions!")

        assert context.tokens == ("list", "the", "promotions")
        assert context.non_stop_tokens == ("promotions",)
        assert context.token_count == 3

    def test_compact_query(self):
        """Test the whole query collapses to alphanumerics."""
        context = build_query_context("Admin Get-Promotions")
        assert context.compact_query == "admingetpromotions"

    def test_only_stopwords(self):
        context = build_query_context("show me the list")

        assert context.tokens == ("show", "me", "the", "list")
        assert context.non_stop_tokens == ()

    def test_empty_query(self):
        context = build_query_context("")

        assert context.tokens == ("",)
        assert context.compact_query == ""

    def test_custom_stopwords(self):
        context = build_query_context("cancel order", stopwords=frozenset({"order"}))
        assert context.non_stop_tokens == ("cancel",)

    def test_identifier_query_is_split(self):
        """Test an operation id typed as a query is split like the indexed id."""
        context = build_query_context("AdminGetPromotions")

        assert context.tokens == ("admin", "get", "promotions")
        assert context.non_stop_tokens == ("admin", "promotions")
        assert context.compact_query == "admingetpromotions"


class TestExpandIdentifierWords:
    """Test cases for expand_identifier_words."""

    def test_plain_query_matches_tokenize_query(self):
        assert expand_identifier_words("Cancel a Fulfillment!") == [
            "cancel",
            "a",
            "fulfillment",
        ]

    def test_mixed_query(self):
        assert expand_identifier_words("schema for AdminGetOrders") == [
            "schema",
            "for",
            "admin",
            "get",
            "orders",
        ]
