# =============================================================================
# Probability Engine Tests
# =============================================================================

import math

import pytest

from nbayes.core import CategoryStore, ProbabilityError, Vocabulary, calculate_probabilities, max_class
from nbayes.core.probability import renormalize


class TestRenormalize:
    def test_reciprocal_renormalization(self):
        # -1, -1, -2  ->  4/1, 4/1, 4/2  ->  0.4, 0.4, 0.2
        scores = renormalize({"a": -1.0, "b": -1.0, "c": -2.0})
        assert scores["a"] == pytest.approx(0.4)
        assert scores["b"] == pytest.approx(0.4)
        assert scores["c"] == pytest.approx(0.2)

    def test_not_a_softmax(self):
        scores = renormalize({"a": -1.0, "b": -2.0})
        softmax_a = math.exp(-1.0) / (math.exp(-1.0) + math.exp(-2.0))
        assert scores["a"] == pytest.approx(2 / 3)
        assert scores["a"] != pytest.approx(softmax_a)

    def test_zero_raw_score_is_fatal(self):
        with pytest.raises(ProbabilityError):
            renormalize({"a": 0.0, "b": -1.0})


class TestCalculateProbabilities:
    def make(self):
        vocab = Vocabulary()
        store = CategoryStore()
        for category, tokens in (("x", ["a", "a", "b"]), ("y", ["b", "c"])):
            store.increment_examples(category)
            for token in tokens:
                vocab.seen(token)
                store.add_token(category, token)
        return vocab, store

    def test_matches_hand_computed_scores(self):
        vocab, store = self.make()
        result = calculate_probabilities(["a"], vocab, store, k=1)

        # V = 3, priors ln(1/2); x: ln(3/6), y: ln(1/5)
        raw_x = math.log(3 / 6) + math.log(0.5)
        raw_y = math.log(1 / 5) + math.log(0.5)
        normalizer = raw_x + raw_y
        inter_x, inter_y = normalizer / raw_x, normalizer / raw_y
        assert result["x"] == pytest.approx(inter_x / (inter_x + inter_y))
        assert result["y"] == pytest.approx(inter_y / (inter_x + inter_y))

    def test_scores_sum_to_one(self):
        vocab, store = self.make()
        result = calculate_probabilities(["a", "c", "zzz", "b"], vocab, store)
        assert sum(result.values()) == pytest.approx(1.0)

    def test_no_categories_gives_empty_result(self):
        result = calculate_probabilities(["a"], Vocabulary(), CategoryStore())
        assert len(result) == 0
        assert result.max_class() is None

    def test_empty_query_single_category_is_fatal(self):
        vocab = Vocabulary()
        store = CategoryStore()
        store.increment_examples("only")
        store.add_token("only", "a")
        vocab.seen("a")
        with pytest.raises(ProbabilityError):
            calculate_probabilities([], vocab, store)

    def test_zero_k_with_unseen_token_is_fatal(self):
        vocab, store = self.make()
        with pytest.raises(ProbabilityError):
            calculate_probabilities(["c"], vocab, store, k=0)

    def test_category_without_examples_is_fatal(self):
        vocab = Vocabulary()
        store = CategoryStore()
        store.increment_examples("x")
        store.add_token("x", "a")
        store.add_token("y", "b")
        vocab.seen("a")
        vocab.seen("b")
        with pytest.raises(ProbabilityError):
            calculate_probabilities(["a"], vocab, store)

    def test_category_without_examples_scores_under_uniform_prior(self):
        vocab = Vocabulary()
        store = CategoryStore()
        store.increment_examples("x")
        store.add_token("x", "a")
        store.add_token("y", "b")
        vocab.seen("a")
        vocab.seen("b")
        result = calculate_probabilities(["a"], vocab, store, assume_uniform=True)
        assert sum(result.values()) == pytest.approx(1.0)


class TestMaxClass:
    def test_picks_highest(self):
        assert max_class({"a": 0.2, "b": 0.5, "c": 0.3}) == "b"

    def test_tie_returns_one_of_the_tied(self):
        assert max_class({"a": 0.5, "b": 0.5}) in ("a", "b")

    def test_empty(self):
        assert max_class({}) is None
