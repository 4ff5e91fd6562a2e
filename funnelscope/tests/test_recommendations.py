"""
AI Recommendation Service Test Module

Tests prompt rendering, reply parsing and the Gemini HTTP call.

Test Coverage:
- Prompt carries business context, INR formatting and the gap analysis
- Bottleneck values are formatted in the metric's own unit
- Reply parsing: fenced JSON, no JSON, invalid JSON, malformed entries
- HTTP call: request shape, non-2xx replies, transport errors, missing key

The LLM endpoint is replaced with httpx.MockTransport; no network is used.
"""

import json
from typing import Any, Dict, List

import httpx
import pytest

from funnelscope.models.enums import Priority, RecommendationCategory
from funnelscope.services.gap_analysis import analyze_gap
from funnelscope.services.recommendations import (
    DEFAULT_SUMMARY,
    INVALID_JSON_SUMMARY,
    UNPARSEABLE_SUMMARY,
    RecommendationServiceError,
    build_recommendation_prompt,
    generate_recommendations,
    parse_recommendations,
)


VALID_REPLY: Dict[str, Any] = {
    "summary": "Registration is the constraint.",
    "keyInsights": ["Landing page converts at a quarter of benchmark"],
    "recommendations": [
        {
            "category": "funnel",
            "title": "Rebuild the registration page",
            "description": "Lead with the outcome and add testimonials.",
            "expectedImpact": "2x registrations",
            "implementationTime": "1-2 weeks",
            "priority": "high",
            "actionItems": ["Add testimonials", "Shorten the form"],
        },
    ],
}


def _gemini_body(text: str) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def gap(webinar_metrics, funnel):
    return analyze_gap(webinar_metrics, funnel.funnel_type)


class TestBuildPrompt:

    def test_business_context(self, prospect, funnel, webinar_metrics, gap, products):
        prompt = build_recommendation_prompt(prospect, funnel, webinar_metrics, gap, products)

        assert "- Business: Mindful Growth Academy" in prompt
        assert "- Industry: Coaching" in prompt
        assert "- Current Monthly Revenue: ₹5,00,000" in prompt
        assert "- Target Monthly Revenue: ₹15,00,000" in prompt
        assert "- Primary Product: Career Accelerator" in prompt
        assert "- Ticket Price: ₹50,000" in prompt
        assert "- Funnel Type: Live Webinar Funnel" in prompt
        assert "- Funnel Name: Weekly Masterclass" in prompt

    def test_current_metrics(self, prospect, funnel, webinar_metrics, gap, products):
        prompt = build_recommendation_prompt(prospect, funnel, webinar_metrics, gap, products)

        assert "- Ad Spend: ₹1,00,000" in prompt
        assert "- Registration Rate: 10.00%" in prompt
        assert "- ROAS: 3.00x" in prompt
        assert "- Cost Per Lead: ₹200.00" in prompt

    def test_gap_analysis_section(self, prospect, funnel, webinar_metrics, gap, products):
        prompt = build_recommendation_prompt(prospect, funnel, webinar_metrics, gap, products)

        assert "- Overall Health: warning" in prompt
        assert "- Primary Bottleneck: Registration Rate" in prompt
        assert "  - Current: 10.00%" in prompt
        assert "  - Benchmark: 30.00% - 50.00%" in prompt
        assert "  - Variance: -75.00%" in prompt
        assert "- Registration Rate: 75.0% below benchmark" in prompt
        assert "- Cost Per Lead: 33.3% above benchmark" in prompt

    def test_currency_bottleneck_uses_rupees(self, prospect, funnel, webinar_metrics, products):
        metrics = webinar_metrics.model_copy(update={"registration_rate": 0})
        gap = analyze_gap(metrics, funnel.funnel_type)

        prompt = build_recommendation_prompt(prospect, funnel, metrics, gap, products)

        assert "- Primary Bottleneck: Cost Per Lead" in prompt
        assert "  - Current: ₹200" in prompt
        assert "  - Benchmark: ₹80.00 - ₹250" in prompt

    def test_no_bottleneck_no_products(self, prospect, funnel, webinar_metrics, products):
        healthy = webinar_metrics.model_copy(
            update={"registration_rate": 45, "cost_per_lead": 140},
        )
        gap = analyze_gap(healthy, funnel.funnel_type)

        prompt = build_recommendation_prompt(prospect, funnel, healthy, gap, [])

        assert "- Primary Bottleneck: None identified" in prompt
        assert "  - Current:" not in prompt
        assert "- Primary Product: Not specified" in prompt
        assert "- Ticket Price: ₹0" in prompt

    def test_reply_format_and_market_notes(self, prospect, funnel, webinar_metrics, gap, products):
        prompt = build_recommendation_prompt(prospect, funnel, webinar_metrics, gap, products)

        assert '"category": "immediate|structural|funnel|creative|budget"' in prompt
        assert "Important Context for India Market" in prompt
        assert "Provide 5-8 recommendations" in prompt


class TestParseRecommendations:

    def test_valid_reply(self):
        result = parse_recommendations(json.dumps(VALID_REPLY))

        assert result.summary == "Registration is the constraint."
        assert result.keyInsights == ["Landing page converts at a quarter of benchmark"]
        assert len(result.recommendations) == 1
        rec = result.recommendations[0]
        assert rec.category == RecommendationCategory.FUNNEL
        assert rec.priority == Priority.HIGH
        assert rec.actionItems == ["Add testimonials", "Shorten the form"]

    def test_json_inside_code_fence(self):
        text = "Here you go:\n```json\n" + json.dumps(VALID_REPLY, indent=2) + "\n```\nGood luck!"

        result = parse_recommendations(text)

        assert result.summary == "Registration is the constraint."
        assert len(result.recommendations) == 1

    def test_no_json(self):
        result = parse_recommendations("I cannot help with that.")

        assert result.summary == UNPARSEABLE_SUMMARY
        assert result.recommendations == []
        assert result.keyInsights == []

    def test_empty_reply(self):
        assert parse_recommendations("").summary == UNPARSEABLE_SUMMARY

    def test_invalid_json(self):
        result = parse_recommendations('{"summary": "cut off", "recommendations": [}')

        assert result.summary == INVALID_JSON_SUMMARY
        assert result.recommendations == []

    def test_truncated_reply_without_closing_brace(self):
        result = parse_recommendations('{"summary": "cut off", "recommendations": [')
        assert result.summary == UNPARSEABLE_SUMMARY

    def test_missing_summary_gets_default(self):
        result = parse_recommendations('{"recommendations": []}')

        assert result.summary == DEFAULT_SUMMARY
        assert result.keyInsights == []

    def test_malformed_entries_dropped(self):
        reply = dict(VALID_REPLY)
        reply["recommendations"] = [
            VALID_REPLY["recommendations"][0],
            {"category": "telepathy", "title": "x", "description": "y"},
            {"title": "no category"},
            "not an object",
        ]

        result = parse_recommendations(json.dumps(reply))

        assert [r.title for r in result.recommendations] == ["Rebuild the registration page"]

    def test_optional_fields_defaulted(self):
        reply = {
            "summary": "s",
            "recommendations": [{"category": "budget", "title": "t", "description": "d"}],
        }

        rec = parse_recommendations(json.dumps(reply)).recommendations[0]

        assert rec.priority == Priority.MEDIUM
        assert rec.actionItems == []
        assert rec.expectedImpact == ""


class TestGenerateRecommendations:

    @pytest.fixture
    def captured(self) -> List[httpx.Request]:
        return []

    def _client(self, captured, status_code=200, body=None, content=None) -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=body)

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    @pytest.mark.asyncio
    async def test_success(
        self, captured, prospect, funnel, webinar_metrics, gap, products, test_settings,
    ):
        client = self._client(captured, body=_gemini_body(json.dumps(VALID_REPLY)))

        result = await generate_recommendations(
            prospect, funnel, webinar_metrics, gap, products, test_settings, client=client,
        )

        assert result.summary == "Registration is the constraint."
        assert len(captured) == 1
        request = captured[0]
        assert request.method == "POST"
        assert request.url.host == "llm.test"
        assert request.url.params["key"] == "test-gemini-key"
        sent = json.loads(request.content)
        assert "Mindful Growth Academy" in sent["contents"][0]["parts"][0]["text"]
        assert sent["generationConfig"] == {
            "temperature": 0.7,
            "topK": 40,
            "topP": 0.95,
            "maxOutputTokens": 2048,
        }

    @pytest.mark.asyncio
    async def test_missing_key(
        self, prospect, funnel, webinar_metrics, gap, products, unconfigured_settings,
    ):
        with pytest.raises(RecommendationServiceError) as exc_info:
            await generate_recommendations(
                prospect, funnel, webinar_metrics, gap, products, unconfigured_settings,
            )

        assert exc_info.value.not_configured is True

    @pytest.mark.asyncio
    async def test_non_2xx_raises(
        self, captured, prospect, funnel, webinar_metrics, gap, products, test_settings,
    ):
        client = self._client(captured, status_code=429, body={"error": "quota"})

        with pytest.raises(RecommendationServiceError) as exc_info:
            await generate_recommendations(
                prospect, funnel, webinar_metrics, gap, products, test_settings, client=client,
            )

        assert exc_info.value.not_configured is False
        assert "429" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error_raises(
        self, prospect, funnel, webinar_metrics, gap, products, test_settings,
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

        with pytest.raises(RecommendationServiceError):
            await generate_recommendations(
                prospect, funnel, webinar_metrics, gap, products, test_settings, client=client,
            )

    @pytest.mark.asyncio
    async def test_unparseable_text_falls_back(
        self, captured, prospect, funnel, webinar_metrics, gap, products, test_settings,
    ):
        client = self._client(captured, body=_gemini_body("Sorry, no JSON today."))

        result = await generate_recommendations(
            prospect, funnel, webinar_metrics, gap, products, test_settings, client=client,
        )

        assert result.summary == UNPARSEABLE_SUMMARY
        assert result.recommendations == []

    @pytest.mark.asyncio
    async def test_empty_candidates_fall_back(
        self, captured, prospect, funnel, webinar_metrics, gap, products, test_settings,
    ):
        client = self._client(captured, body={"candidates": []})

        result = await generate_recommendations(
            prospect, funnel, webinar_metrics, gap, products, test_settings, client=client,
        )

        assert result.summary == UNPARSEABLE_SUMMARY

    @pytest.mark.asyncio
    async def test_non_json_body_falls_back(
        self, captured, prospect, funnel, webinar_metrics, gap, products, test_settings,
    ):
        client = self._client(captured, content=b"<html>gateway</html>")

        result = await generate_recommendations(
            prospect, funnel, webinar_metrics, gap, products, test_settings, client=client,
        )

        assert result.summary == UNPARSEABLE_SUMMARY
