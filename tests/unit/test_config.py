"""Tests for configuration dataclasses."""

import pytest

from mindtree.config import (
    DEFAULT_STRUCTURE_KEYWORDS,
    ClusteringConfig,
    HeuristicConfig,
    SynthesisConfig,
)
from mindtree.exceptions import ConfigurationError


class TestSynthesisConfig:
    def test_defaults(self):
        config = SynthesisConfig()
        assert config.max_topic_length == 100
        assert config.plain_group_size == 3
        assert config.prefer_semantic is True
        assert config.time_budget_s is None
        assert config.xml_include_text is False

    def test_nested_defaults_are_independent(self):
        first = SynthesisConfig()
        second = SynthesisConfig()
        assert first.heuristic is not second.heuristic
        assert first.clustering is not second.clustering

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_depth": 0},
            {"max_topic_length": 3},
            {"plain_group_size": 0},
            {"time_budget_s": 0},
            {"time_budget_s": -1.5},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            SynthesisConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            SynthesisConfig(max_depth=-1)


class TestHeuristicConfig:
    def test_all_keywords_merges_locales(self):
        keywords = HeuristicConfig().all_keywords()
        assert "overview" in keywords
        assert "背景" in keywords

    def test_all_keywords_lowercases_and_dedupes(self):
        config = HeuristicConfig(keywords={"en": ("Overview", "overview"), "de": ("Überblick",)})
        assert config.all_keywords() == ("overview", "überblick")

    def test_custom_locale_added(self):
        config = HeuristicConfig(
            keywords={**DEFAULT_STRUCTURE_KEYWORDS, "fr": ("sommaire",)}
        )
        assert "sommaire" in config.all_keywords()

    def test_default_keywords_not_shared(self):
        config = HeuristicConfig()
        config.keywords["xx"] = ("custom",)
        assert "xx" not in DEFAULT_STRUCTURE_KEYWORDS

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_sections": 0},
            {"max_points": 0},
            {"min_chunks": 0},
            {"min_chunks": 6, "max_chunks": 5},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            HeuristicConfig(**kwargs)


class TestClusteringConfig:
    def test_defaults(self):
        config = ClusteringConfig()
        assert (config.min_clusters, config.max_clusters) == (2, 8)
        assert config.min_paragraph_length == 30
        assert config.max_paragraphs == 200
        assert config.random_state == 42

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_clusters": 1},
            {"min_clusters": 5, "max_clusters": 2},
            {"max_retries": 2},
            {"max_retries": -1},
            {"embedding_batch_size": 0},
            {"min_cluster_size": 0},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            ClusteringConfig(**kwargs)

    def test_error_message_names_values(self):
        with pytest.raises(ConfigurationError, match=r"min_clusters \(5\)"):
            ClusteringConfig(min_clusters=5, max_clusters=2)
