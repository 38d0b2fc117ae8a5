"""
Insight Service - AI-generated commentary on chart data
"""

import json
import logging
from typing import Any, List, Optional, Sequence

from openai import AzureOpenAI, OpenAI

from app.config import Settings
from app.core.table import ChartSeries

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a data analyst. Provide clear, concise insights about chart data."


def build_insight_client(config: Settings):
    """
    Create the chat client for the configured provider

    Args:
        config: Application settings

    Returns:
        OpenAI or AzureOpenAI client, or None when no provider is configured
    """
    if not config.insights_enabled:
        logger.warning("AI provider not configured, chart insights are disabled")
        return None

    if config.AI_PROVIDER == "azure":
        client = AzureOpenAI(
            api_key=config.AZURE_OPENAI_KEY,
            api_version=config.AZURE_OPENAI_API_VERSION,
            azure_endpoint=config.AZURE_OPENAI_ENDPOINT,
            timeout=config.INSIGHT_TIMEOUT_SECONDS,
        )
        logger.info(f"Initialized Azure OpenAI with deployment: {config.insight_model}")
        return client

    client = OpenAI(
        api_key=config.OPENAI_API_KEY,
        base_url=config.OPENAI_BASE_URL or None,
        timeout=config.INSIGHT_TIMEOUT_SECONDS,
    )
    logger.info(f"Initialized OpenAI with model: {config.insight_model}")
    return client


def build_chart_prompt(
    labels: Sequence[Any],
    data: Sequence[float],
    x_label: Optional[str] = None,
    y_label: Optional[str] = None,
    dataset_label: Optional[str] = None,
) -> str:
    """Analyst prompt asking for bullet-point insights on one series"""
    return (
        "You are a data analyst. Analyze the following chart data and provide "
        "clear insights in bullet points.\n"
        f"Labels: {json.dumps(list(labels), default=str)}\n"
        f"Data: {json.dumps(list(data))}\n"
        f"X-Axis: {x_label or 'X'}\n"
        f"Y-Axis: {y_label or 'Y'}\n"
        f"Dataset Label: {dataset_label or 'Data'}\n"
    )


class InsightService:
    """Generates chart insights through an injected chat client"""

    def __init__(self, client, model: str):
        self.client = client
        self.model = model

    @property
    def available(self) -> bool:
        return self.client is not None

    def generate_insight(
        self,
        labels: List[Any],
        data: List[float],
        x_label: Optional[str] = None,
        y_label: Optional[str] = None,
        dataset_label: Optional[str] = None,
    ) -> Optional[str]:
        """
        Ask the model for insights on chart data

        Returns:
            Insight text or None if generation failed
        """
        if not self.client:
            return None

        prompt = build_chart_prompt(labels, data, x_label, y_label, dataset_label)
        logger.debug(f"Insight prompt: {prompt}")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.3,
                max_tokens=500,
            )
            insight = (response.choices[0].message.content or "").strip()
            logger.info(f"Generated chart insight: {len(insight)} characters")
            return insight or None

        except Exception as e:
            logger.error(f"Error generating chart insight: {e}")
            return None

    def generate_series_insight(
        self,
        series: ChartSeries,
        dataset_label: Optional[str] = None,
    ) -> Optional[str]:
        """Insights for a projected chart series"""
        return self.generate_insight(
            labels=series.raw_labels(),
            data=list(series.data),
            x_label=series.x_axis_label,
            y_label=series.y_axis_label,
            dataset_label=dataset_label,
        )

    def close(self):
        """Release the client's connection pool"""
        if self.client is not None:
            self.client.close()
