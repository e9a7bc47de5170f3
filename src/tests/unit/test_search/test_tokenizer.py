"""Tests for tokenization of operation metadata and queries."""

import pytest

from medusa_openapi_search.search.tokenizer import (
    STOPWORDS,
    normalize_token,
    tokenize,
    tokenize_query,
)


class TestNormalizeToken:
    """Test cases for normalize_token."""

    def test_lowercases_and_strips_punctuation(self):
        assert normalize_token("Hello-World!") == "helloworld"

    def test_keeps_digits(self):
        assert normalize_token("V2") == "v2"

    def test_empty_result(self):
        assert normalize_token("!!!") == ""
        assert normalize_token("") == ""


class TestTokenize:
    """Test cases for tokenize."""

    def test_splits_camel_case(self):
        """Test operation ids split at lower-to-upper boundaries."""
        assert tokenize("AdminGetPromotionsId", preserve_stopwords=True) == [
            "admin",
            "get",
            "promotions",
            "id",
        ]

    def test_digit_to_upper_boundary(self):
        assert tokenize("v2Orders") == ["v2", "orders"]

    def test_splits_paths_on_punctuation(self):
        assert tokenize("/admin/promotions/{id}") == ["admin", "promotions", "id"]

    def test_removes_stopwords_by_default(self):
        assert tokenize("listPromotions") == ["promotions"]

    def test_preserve_stopwords(self):
        assert tokenize("listPromotions", preserve_stopwords=True) == [
            "list",
            "promotions",
        ]

    def test_all_stopwords_returns_unfiltered_tokens(self):
        """Test filtering never empties a non-empty token list."""
        assert tokenize("List the") == ["list", "the"]

    def test_none_yields_no_tokens(self):
        assert tokenize(None) == []

    def test_non_string_values_are_stringified(self):
        assert tokenize(42) == ["42"]

    def test_custom_stopwords(self):
        assert tokenize("cancel the order", stopwords={"order"}) == ["cancel", "the"]

    def test_order_of_appearance(self):
        assert tokenize("orders for regions orders", preserve_stopwords=True) == [
            "orders",
            "for",
            "regions",
            "orders",
        ]


class TestTokenizeQuery:
    """Test cases for tokenize_query."""

    def test_whitespace_split_and_normalization(self):
        result = tokenize_query("  Cancel a Fulfillment! ")

        assert result.tokens == ["cancel", "a", "fulfillment"]
        assert result.normalized == "cancel a fulfillment!"
        assert result.original == "  Cancel a Fulfillment! "

    def test_punctuation_inside_word_is_removed_not_split(self):
        assert tokenize_query("order-items").tokens == ["orderitems"]

    def test_stopwords_are_kept(self):
        assert tokenize_query("list the promotions").tokens == [
            "list",
            "the",
            "promotions",
        ]

    def test_camel_case_not_split(self):
        assert tokenize_query("AdminGetPromotions").tokens == ["admingetpromotions"]

    @pytest.mark.parametrize("query", ["", "   ", "?!"])
    def test_never_empty(self, query):
        """Test degenerate queries fall back to one normalized token."""
        assert tokenize_query(query).tokens == [""]

    def test_case_and_punctuation_insensitive(self):
        assert (
            tokenize_query("Cancel Fulfillment!").tokens
            == tokenize_query("cancel fulfillment").tokens
        )


def test_default_stopwords():
    """Test the default stopword set."""
    assert {"a", "list", "get", "show", "what", "with"} <= STOPWORDS
    assert "promotions" not in STOPWORDS
    assert len(STOPWORDS) == 24
