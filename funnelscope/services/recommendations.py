"""
AI Recommendation Service

Builds an India-market consultant prompt from a funnel's records and gap
analysis, sends it to the Gemini generateContent API, and parses the reply
into structured recommendations.

The LLM is unreliable by nature:
- transport failures, non-2xx replies and a missing API key raise
  RecommendationServiceError
- a reply that cannot be parsed never raises; it yields a fallback response
  with a summary explaining the failure and empty lists
- individual recommendation entries that fail validation are dropped
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from funnelscope.core.config import Settings
from funnelscope.models.schemas import (
    AIRecommendation,
    AIRecommendationsResponse,
    Funnel,
    FunnelMetrics,
    GapAnalysisResult,
    Product,
    Prospect,
)
from funnelscope.services.formatting import format_metric, format_number
from funnelscope.services.records import select_primary_product


logger = logging.getLogger(__name__)


DEFAULT_SUMMARY = "AI-generated recommendations based on your funnel analysis."
UNPARSEABLE_SUMMARY = "Unable to parse AI recommendations. Please try again."
INVALID_JSON_SUMMARY = "Error parsing AI recommendations."

# Outermost {...} block, across newlines
_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


class RecommendationServiceError(Exception):
    """The LLM collaborator is not configured or the call failed."""

    def __init__(self, message: str, not_configured: bool = False):
        super().__init__(message)
        self.not_configured = not_configured


# =============================================================================
# Prompt
# =============================================================================

_REPLY_FORMAT = """{
  "summary": "A brief 2-3 sentence executive summary of the funnel's current state and primary focus areas",
  "keyInsights": ["Insight 1", "Insight 2", "Insight 3"],
  "recommendations": [
    {
      "category": "immediate|structural|funnel|creative|budget",
      "title": "Recommendation title",
      "description": "Detailed description of the recommendation",
      "expectedImpact": "Expected impact in INR or percentage improvement",
      "implementationTime": "1-2 weeks|2-4 weeks|1-2 months",
      "priority": "high|medium|low",
      "actionItems": ["Action 1", "Action 2", "Action 3"]
    }
  ]
}"""

_MARKET_NOTES = """**Important Context for India Market:**
1. Cost considerations: India has lower CPCs and CPLs compared to Western markets
2. Trust factors: Social proof, testimonials, and community are crucial
3. Payment preferences: Consider EMI options, UPI payments, and price sensitivity
4. Language and localization: Consider regional language content if applicable
5. Mobile-first: Most traffic comes from mobile devices
6. Meta Ads best practices for India: Focus on video content, UGC, and relatable messaging

Provide 5-8 recommendations across different categories. Focus on actionable, specific tactics that can be implemented immediately or within 1-2 months. Include expected ROI in INR where possible."""


def _rupees(value: Optional[float]) -> str:
    return f"₹{format_number(value or 0)}"


def build_recommendation_prompt(
    prospect: Prospect,
    funnel: Funnel,
    metrics: FunnelMetrics,
    gap_analysis: GapAnalysisResult,
    products: List[Product],
) -> str:
    """Render the consultant prompt for one funnel."""
    primary_product = select_primary_product(products)
    bottleneck = gap_analysis.primaryBottleneck

    lines = [
        "You are an expert sales funnel consultant specializing in the India market "
        "for coaches, consultants, agencies, and SaaS companies. Analyze the following "
        "funnel data and provide actionable recommendations.",
        "",
        "**Business Context:**",
        f"- Business: {prospect.business_name}",
        f"- Industry: {prospect.industry_vertical or 'Not specified'}",
        f"- Niche: {prospect.niche_description or 'Not specified'}",
        f"- Current Monthly Revenue: {_rupees(prospect.current_monthly_revenue)}",
        f"- Target Monthly Revenue: {_rupees(prospect.target_monthly_revenue)}",
        f"- Primary Product: {primary_product.product_name if primary_product else 'Not specified'}",
        f"- Ticket Price: {_rupees(primary_product.ticket_price if primary_product else 0)}",
        "",
        "**Funnel Configuration:**",
        f"- Funnel Type: {funnel.funnel_type}",
        f"- Funnel Name: {funnel.funnel_name or 'Not specified'}",
        "",
        "**Current Metrics:**",
        f"- Ad Spend: {_rupees(metrics.ad_spend)}",
        f"- Registrations: {format_number(metrics.registrations)}",
        f"- Registration Rate: {metrics.registration_rate:.2f}%",
        f"- Attendees: {format_number(metrics.attendees)}",
        f"- Show-Up Rate: {metrics.show_up_rate:.2f}%",
        f"- Sales Calls Completed: {format_number(metrics.sales_calls_completed)}",
        f"- Closes: {format_number(metrics.closes)}",
        f"- Close Rate: {metrics.close_rate:.2f}%",
        f"- Revenue Generated: {_rupees(metrics.revenue_generated)}",
        f"- ROAS: {metrics.roas:.2f}x",
        f"- CTR: {metrics.ctr:.2f}%",
        f"- CPC: ₹{metrics.cpc:.2f}",
        f"- Cost Per Lead: ₹{metrics.cost_per_lead:.2f}",
        "",
        "**Gap Analysis:**",
        f"- Overall Health: {gap_analysis.overallHealth.value}",
        f"- Primary Bottleneck: {bottleneck.metricName if bottleneck else 'None identified'}",
    ]

    if bottleneck is not None:
        lines.extend([
            f"  - Current: {format_metric(bottleneck.metricKey, bottleneck.currentValue)}",
            f"  - Benchmark: {format_metric(bottleneck.metricKey, bottleneck.benchmarkMin)}"
            f" - {format_metric(bottleneck.metricKey, bottleneck.benchmarkMax)}",
            f"  - Variance: {bottleneck.variance:.2f}%",
        ])

    lines.extend(["", "**Key Issues:**"])
    lines.extend(
        f"- {issue.metricName}: {abs(issue.variance):.1f}% "
        f"{'below' if issue.variance < 0 else 'above'} benchmark"
        for issue in gap_analysis.secondaryIssues
    )

    lines.extend(["", "**Opportunities:**"])
    lines.extend(
        f"- {opp.metricName}: {abs(opp.variance):.1f}% better than benchmark"
        for opp in gap_analysis.opportunities
    )

    lines.extend([
        "",
        "**Instructions:**",
        "Provide recommendations in the following JSON format:",
        "",
        _REPLY_FORMAT,
        "",
        _MARKET_NOTES,
    ])
    return "\n".join(lines)


# =============================================================================
# Reply parsing
# =============================================================================


def _valid_recommendations(entries: Any) -> List[AIRecommendation]:
    if not isinstance(entries, list):
        return []
    recommendations: List[AIRecommendation] = []
    for entry in entries:
        try:
            recommendations.append(AIRecommendation.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Dropping malformed recommendation: {e.error_count()} errors")
    return recommendations


def parse_recommendations(generated_text: str) -> AIRecommendationsResponse:
    """
    Parse the LLM reply into structured recommendations.

    The outermost {...} block is taken as the JSON payload, so prose or code
    fences around it are ignored. Never raises.
    """
    match = _JSON_BLOCK.search(generated_text or "")
    if match is None:
        logger.warning("LLM reply contained no JSON object")
        return AIRecommendationsResponse(summary=UNPARSEABLE_SUMMARY)

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"LLM reply is not valid JSON: {e}")
        return AIRecommendationsResponse(summary=INVALID_JSON_SUMMARY)

    if not isinstance(parsed, dict):
        return AIRecommendationsResponse(summary=INVALID_JSON_SUMMARY)

    insights = parsed.get("keyInsights")
    summary = parsed.get("summary")
    return AIRecommendationsResponse(
        summary=summary if isinstance(summary, str) and summary else DEFAULT_SUMMARY,
        keyInsights=[str(i) for i in insights] if isinstance(insights, list) else [],
        recommendations=_valid_recommendations(parsed.get("recommendations")),
    )


def _extract_text(payload: Dict[str, Any]) -> str:
    """candidates[0].content.parts[0].text, or an empty string."""
    try:
        return payload["candidates"][0]["content"]["parts"][0]["text"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


# =============================================================================
# LLM call
# =============================================================================


async def generate_recommendations(
    prospect: Prospect,
    funnel: Funnel,
    metrics: FunnelMetrics,
    gap_analysis: GapAnalysisResult,
    products: List[Product],
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> AIRecommendationsResponse:
    """
    Ask the LLM for recommendations on one funnel.

    Args:
        prospect, funnel, metrics, gap_analysis, products: Prompt inputs
        settings: Supplies the API key, endpoint and generation config
        client: Optional HTTP client; a short-lived one is created if omitted

    Raises:
        RecommendationServiceError: If no API key is configured, or the HTTP
            call fails or returns a non-2xx status
    """
    if not settings.gemini_api_key:
        raise RecommendationServiceError(
            "Gemini API key not configured. Set GEMINI_API_KEY in the environment.",
            not_configured=True,
        )

    prompt = build_recommendation_prompt(prospect, funnel, metrics, gap_analysis, products)
    body = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": settings.gemini_temperature,
            "topK": settings.gemini_top_k,
            "topP": settings.gemini_top_p,
            "maxOutputTokens": settings.gemini_max_output_tokens,
        },
    }

    logger.info(f"Requesting AI recommendations for funnel {funnel.id}")

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.gemini_timeout_seconds) as own_client:
                resp = await own_client.post(
                    settings.gemini_api_url,
                    params={"key": settings.gemini_api_key},
                    json=body,
                )
        else:
            resp = await client.post(
                settings.gemini_api_url,
                params={"key": settings.gemini_api_key},
                json=body,
            )
    except httpx.HTTPError as e:
        logger.error(f"Gemini API call failed: {e}", exc_info=True)
        raise RecommendationServiceError(f"Gemini API call failed: {e}") from e

    if resp.status_code != 200:
        logger.error(f"Gemini API error ({resp.status_code}): {resp.text[:200]}")
        raise RecommendationServiceError(f"Gemini API error ({resp.status_code})")

    try:
        payload = resp.json()
    except ValueError:
        logger.warning("Gemini API returned a non-JSON body")
        payload = {}

    return parse_recommendations(_extract_text(payload))
