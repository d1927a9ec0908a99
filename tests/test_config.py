"""Tests for analyzer configuration."""

from __future__ import annotations

import json

import pytest

from webtask_analyzer import Analyzer, AnalyzerConfig


class TestAnalyzerConfig:
    def test_valid(self):
        config = AnalyzerConfig(cluster_url="https://c", container_name="box", token="t")
        assert config.cluster_url == "https://c"
        assert config.timeout is None

    @pytest.mark.parametrize("missing", ["cluster_url", "container_name", "token"])
    def test_empty_values_rejected(self, missing):
        values = {"cluster_url": "https://c", "container_name": "box", "token": "t"}
        values[missing] = ""
        with pytest.raises(ValueError, match=missing):
            AnalyzerConfig(**values)

    def test_wrong_type_rejected(self):
        with pytest.raises(ValueError):
            AnalyzerConfig(cluster_url=42, container_name="box", token="t")

    def test_negative_timeout_rejected(self):
        with pytest.raises(ValueError):
            AnalyzerConfig(cluster_url="https://c", container_name="box", token="t", timeout=-1)

    def test_repr_hides_token(self):
        config = AnalyzerConfig(cluster_url="https://c", container_name="box", token="hunter2")
        assert "hunter2" not in repr(config)


class TestFromEnvironment:
    def test_not_configured(self, monkeypatch):
        for name in ("WEBTASK_CLUSTER_URL", "WEBTASK_CONTAINER", "WEBTASK_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        assert AnalyzerConfig.from_environment() is None

    def test_configured(self, monkeypatch):
        monkeypatch.setenv("WEBTASK_CLUSTER_URL", "https://env")
        monkeypatch.setenv("WEBTASK_CONTAINER", "envbox")
        monkeypatch.setenv("WEBTASK_TOKEN", "envtoken")
        config = AnalyzerConfig.from_environment()
        assert (config.cluster_url, config.container_name, config.token) == (
            "https://env",
            "envbox",
            "envtoken",
        )

    def test_partially_configured(self, monkeypatch):
        monkeypatch.setenv("WEBTASK_CLUSTER_URL", "https://env")
        monkeypatch.delenv("WEBTASK_CONTAINER", raising=False)
        monkeypatch.delenv("WEBTASK_TOKEN", raising=False)
        with pytest.raises(ValueError):
            AnalyzerConfig.from_environment()


class TestFromProfile:
    def test_named_profile(self, tmp_path):
        profiles = tmp_path / ".webtask"
        profiles.write_text(
            json.dumps({"staging": {"url": "https://stage", "container": "sbox", "token": "st"}})
        )
        config = AnalyzerConfig.from_profile("staging", profiles)
        assert (config.cluster_url, config.container_name, config.token) == (
            "https://stage",
            "sbox",
            "st",
        )

    def test_missing_profile(self, tmp_path):
        profiles = tmp_path / ".webtask"
        profiles.write_text(json.dumps({"other": {}}))
        with pytest.raises(ValueError, match="Missing a webtask profile 'default'"):
            AnalyzerConfig.from_profile(path=profiles)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError):
            AnalyzerConfig.from_profile(path=tmp_path / "absent")


class TestAnalyzerConstruction:
    def test_keyword_arguments(self):
        analyzer = Analyzer(cluster_url="https://c", container_name="box", token="t")
        assert analyzer.config.container_name == "box"

    def test_missing_settings(self):
        with pytest.raises(ValueError):
            Analyzer(cluster_url="https://c", container_name="box")

    def test_config_must_be_config(self):
        with pytest.raises(ValueError):
            Analyzer({"cluster_url": "https://c"})

    def test_config_and_keywords_rejected(self):
        config = AnalyzerConfig(cluster_url="https://c", container_name="box", token="t")
        with pytest.raises(ValueError, match="not both"):
            Analyzer(config, token="other")
