"""AI-backed spending insights via a chat-completion endpoint."""
import re
import json
from typing import Optional

import requests
from pydantic import ValidationError

from .models import AnalysisContext, AnalysisResult
from spendlens.config.settings import AppSettings, get_settings
from spendlens.utils.formatting import format_currency, format_date
from spendlens.utils.logger import get_logger
from spendlens.utils.exceptions import AIRequestError, MissingCredentialError, ResponseParseError

logger = get_logger()

STRICT_SCHEMA_HINT = "Return valid JSON that matches the schema exactly. No extra keys."

SYSTEM_PROMPT = """You are a friendly, knowledgeable personal finance advisor analyzing a user's spending patterns.

Your goal is to:
1. Provide actionable, personalized insights about their spending
2. Identify patterns, trends, and potential savings opportunities
3. Offer encouragement and practical advice
4. Be conversational and empathetic, not judgmental
5. Focus on specific categories and amounts

Always respond in valid JSON format with this structure:
{
  "summary": "Brief 1-2 sentence overview of their spending period",
  "insights": ["insight1", "insight2", "insight3"],
  "recommendations": ["rec1", "rec2"],
  "tone": "positive|neutral|cautionary"
}

Keep insights concise (1-2 sentences each), specific, and actionable."""


class AIInsightGenerator:
    """Generates spending insights with an OpenAI-compatible chat-completion API."""

    def __init__(
        self,
        api_key: Optional[str],
        settings: AppSettings = None,
        session: requests.Session = None,
        currency_code: str = "USD"
    ):
        """
        Initialize insight generator.

        Args:
            api_key: Bearer token for the endpoint; None or empty disables requests
            settings: Endpoint, model and request limits
            session: HTTP session used for every request
            currency_code: Display currency for amounts in the prompt
        """
        self.api_key = api_key
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.currency_code = currency_code

    def generate(self, context: AnalysisContext) -> AnalysisResult:
        """
        Request insights, retrying once on a failed or malformed response.

        Args:
            context: Aggregated period data

        Returns:
            Validated AnalysisResult

        Raises:
            MissingCredentialError: No API key configured (never retried)
            AIRequestError: Endpoint failed twice
            ResponseParseError: Response was malformed twice
        """
        if not self.api_key:
            raise MissingCredentialError("No API key configured for AI analysis")

        try:
            return self._request_insights(context)
        except ResponseParseError as e:
            logger.warning(f"AI response did not match schema, retrying with strict reminder: {e}")
            return self._request_insights(context, retry_hint=STRICT_SCHEMA_HINT)
        except AIRequestError as e:
            logger.warning(f"AI request failed, retrying once: {e}")
            return self._request_insights(context)

    def _request_insights(self, context: AnalysisContext, retry_hint: Optional[str] = None) -> AnalysisResult:
        """Issue exactly one request and parse its content."""
        prompt = self._build_analysis_prompt(context)
        if retry_hint:
            prompt += "\n\n" + retry_hint

        request_body = {
            "model": self.settings.llm_model_name,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            "temperature": self.settings.llm_temperature,
            "max_tokens": self.settings.llm_max_tokens,
            "response_format": {"type": "json_object"}
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        logger.debug(f"Requesting AI insights from {self.settings.llm_model_name}")
        try:
            response = self.session.post(
                self.settings.llm_api_url,
                json=request_body,
                headers=headers,
                timeout=self.settings.llm_timeout_seconds
            )
        except requests.RequestException as e:
            raise AIRequestError(f"AI endpoint unreachable: {e}") from e

        if response.status_code != 200:
            raise AIRequestError(
                f"AI endpoint returned HTTP {response.status_code}",
                status_code=response.status_code
            )

        content = self._extract_content(response)
        logger.debug(f"AI response: {content[:500]}")
        return self._parse_response(content)

    @staticmethod
    def _extract_content(response: requests.Response) -> str:
        """Pull ``choices[0].message.content`` out of the response body."""
        try:
            content = response.json()["choices"][0]["message"]["content"]
        except ValueError as e:
            raise ResponseParseError(f"AI endpoint returned a non-JSON body: {e}") from e
        except (KeyError, IndexError, TypeError) as e:
            raise ResponseParseError(f"AI response has no message content: {e!r}") from e

        if not isinstance(content, str) or not content.strip():
            raise ResponseParseError("AI response message content is empty")
        return content

    def _parse_response(self, response_text: str) -> AnalysisResult:
        """Parse LLM JSON content against the AnalysisResult schema."""
        cleaned = response_text.strip()
        if cleaned.startswith("```"):
            # Remove markdown code blocks
            lines = cleaned.split("\n")
            cleaned = "\n".join(lines[1:-1]) if len(lines) > 2 else cleaned
            if cleaned.startswith("json"):
                cleaned = cleaned[4:].strip()

        # If the model wrapped JSON in text, keep the outermost object
        json_match = re.search(r'\{.*\}', cleaned, re.DOTALL)
        if json_match:
            cleaned = json_match.group(0)

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError:
            data = self._loads_repaired(cleaned, response_text)

        try:
            return AnalysisResult.model_validate(data)
        except ValidationError as e:
            logger.error(f"AI response validation failed: {e}")
            raise ResponseParseError(f"AI response does not match expected schema: {e}") from e

    @staticmethod
    def _loads_repaired(cleaned: str, response_text: str) -> dict:
        """Second parse attempt after fixing smart quotes and trailing commas."""
        repaired = cleaned.replace('“', '"').replace('”', '"')
        repaired = re.sub(r',\s*([\]}])', r'\1', repaired)
        try:
            return json.loads(repaired)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            logger.debug(f"Response text: {response_text[:500]}")
            raise ResponseParseError(f"Invalid JSON response from AI: {e}") from e

    def _build_analysis_prompt(self, context: AnalysisContext) -> str:
        """Build the user message describing the period."""
        category_breakdown = "\n".join(
            f"• {item.category.display_name}: {self._money(item.total)}" for item in context.top_categories
        )
        changes = "\n".join(
            f"• {delta.category.display_name}: "
            f"{'+' if delta.delta_pct > 0 else ''}{delta.delta_pct * 100:.1f}%"
            for delta in context.deltas
        )
        merchants = ", ".join(context.recurring_merchants) if context.recurring_merchants else "None detected"

        spending_change = context.total_spending - context.previous_period_spending
        if context.previous_period_spending > 0:
            change_pct = float(spending_change / context.previous_period_spending * 100)
        else:
            change_pct = 0.0
        change_sign = "+" if spending_change >= 0 else "-"

        return f"""Analyze this user's spending for the period {format_date(context.period_start)} to {format_date(context.period_end)}:

TOTAL SPENDING: {self._money(context.total_spending)}
Previous period: {self._money(context.previous_period_spending)}
Change: {change_sign}{self._money(abs(spending_change))} ({change_pct:.1f}%)

TOP SPENDING CATEGORIES:
{category_breakdown}

CHANGES VS PREVIOUS PERIOD:
{changes}

RECURRING MERCHANTS:
{merchants}

Provide personalized insights, identify patterns, suggest savings opportunities, and offer encouragement."""

    def _money(self, amount) -> str:
        return format_currency(amount, self.currency_code)
