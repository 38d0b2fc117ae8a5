"""
Tests for chart insight generation
"""

import pytest
from openai import OpenAI

from app.config import Settings
from app.core.table import ChartSeries
from app.core.cells import TextCell
from app.services.insight_service import InsightService, build_chart_prompt, build_insight_client


class TestBuildChartPrompt:

    def test_includes_series(self):
        prompt = build_chart_prompt(["Jan", "Feb"], [1.0, 2.5], "Month", "Revenue", "Sales")

        assert 'Labels: ["Jan", "Feb"]' in prompt
        assert "Data: [1.0, 2.5]" in prompt
        assert "X-Axis: Month" in prompt
        assert "Y-Axis: Revenue" in prompt
        assert "Dataset Label: Sales" in prompt

    def test_defaults(self):
        prompt = build_chart_prompt([], [])

        assert "X-Axis: X" in prompt
        assert "Y-Axis: Y" in prompt
        assert "Dataset Label: Data" in prompt


class TestInsightService:

    def test_generate_insight(self, chat_client):
        service = InsightService(chat_client, "test-model")

        insight = service.generate_insight(["a"], [1.0], "A", "B")

        assert insight == "- Sales peak in March"
        kwargs = chat_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert 'Labels: ["a"]' in kwargs["messages"][-1]["content"]

    def test_series_insight_uses_axis_labels(self, chat_client):
        service = InsightService(chat_client, "test-model")
        series = ChartSeries("Month", "Revenue", labels=(TextCell("Jan"),), data=(4.0,))

        service.generate_series_insight(series, dataset_label="Sales")

        content = chat_client.chat.completions.create.call_args.kwargs["messages"][-1]["content"]
        assert "X-Axis: Month" in content
        assert "Dataset Label: Sales" in content

    def test_provider_error_returns_none(self, chat_client):
        chat_client.chat.completions.create.side_effect = RuntimeError("rate limited")
        service = InsightService(chat_client, "test-model")

        assert service.generate_insight(["a"], [1.0]) is None

    def test_no_client(self):
        service = InsightService(None, "test-model")

        assert service.available is False
        assert service.generate_insight(["a"], [1.0]) is None
        service.close()

    def test_close_releases_client(self, chat_client):
        InsightService(chat_client, "test-model").close()
        chat_client.close.assert_called_once()


class TestBuildInsightClient:

    def test_disabled_provider(self):
        assert build_insight_client(Settings(AI_PROVIDER="none")) is None

    def test_openai_without_key(self):
        assert build_insight_client(Settings(AI_PROVIDER="openai", OPENAI_API_KEY=None)) is None

    def test_openai_client(self):
        client = build_insight_client(Settings(AI_PROVIDER="openai", OPENAI_API_KEY="sk-test"))
        try:
            assert isinstance(client, OpenAI)
        finally:
            client.close()

    def test_azure_model_is_deployment(self):
        config = Settings(AI_PROVIDER="azure", AZURE_OPENAI_DEPLOYMENT="charts-gpt")
        assert config.insight_model == "charts-gpt"
        assert config.insights_enabled is False


class TestIntegration:

    @pytest.mark.integration
    def test_live_insight(self):
        """Generate an insight against a real provider"""
        # Requires provider credentials
        pytest.skip("Requires AI provider credentials")
