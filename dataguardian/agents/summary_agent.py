"""Privacy summary agent.

Asks the configured LLM for a structured privacy summary of a site's
trackers.  The model's reply is parsed best-effort and trimmed to
bounded list lengths.  Whenever the model is unavailable, fails or
returns something unparseable, a deterministic summary derived from
the tracker hostnames is returned instead, with ``success=False``.
"""

from __future__ import annotations

from typing import Any

from openai import AsyncAzureOpenAI, AsyncOpenAI

from dataguardian.agents import config as agent_config
from dataguardian.agents import llm_client
from dataguardian.agents.prompts import privacy_summary
from dataguardian.analysis import taxonomy
from dataguardian.models import analysis
from dataguardian.utils import errors, json_parsing, logger, retry
from dataguardian.utils import url as url_mod

log = logger.create_logger(agent_config.AGENT_PRIVACY_SUMMARY)

MAX_TOKENS = 800

# Upper bounds on each list in an accepted summary.
_MAX_COLLECT = 8
_MAX_SHARE_WITH = 10
_MAX_RISKS = 6
_MAX_BREAKDOWN = 5

NOT_AVAILABLE = "Information not available"


# ── Fallback summary ────────────────────────────────────────────


def _companies_for(trackers: list[str]) -> list[str]:
    companies: list[str] = []
    if any("google" in t for t in trackers):
        companies.append("Google")
    if any("facebook" in t for t in trackers):
        companies.append("Meta/Facebook")
    if any("ads" in t or "doubleclick" in t or "adnxs" in t for t in trackers):
        companies.append("Advertising Networks")
    if any("analytics" in t or "mixpanel" in t or "hotjar" in t for t in trackers):
        companies.append("Analytics Providers")
    return companies or ["Third-party partners"]


def _describe_tracker(tracker: str) -> str:
    if "google" in tracker:
        return f"{tracker}: Google's tracking service for analytics and advertising"
    if "facebook" in tracker:
        return f"{tracker}: Meta's social media and advertising tracker"
    if "doubleclick" in tracker:
        return f"{tracker}: Google's advertising network for targeted ads"
    return f"{tracker}: Third-party tracking and analytics service"


def create_fallback_summary(trackers: list[str], site_url: str) -> analysis.AISummary:
    """Build a deterministic summary from tracker hostnames alone."""
    count = len(trackers)
    domain = url_mod.site_hostname(site_url)

    collect = [
        "Browsing behavior and page views",
        "Device and browser information",
        "IP address and location data",
    ]
    risks = [f"Your browsing on {domain} may be tracked across other websites"]
    if count > 5:
        collect.append("User interactions and clicks")
        risks.append("Detailed behavioral profiling for advertising")
    if count > 10:
        collect.append("Cross-site tracking data")
        risks.append("Extensive data sharing with multiple partners")

    return analysis.AISummary(
        what_they_collect=collect,
        who_they_share_with=_companies_for(trackers),
        how_long_they_keep="Up to 2 years or indefinitely" if count > 8 else "Varies by service",
        key_risks=risks,
        tracker_breakdown=[_describe_tracker(t) for t in trackers[:4]],
    )


# ── Response validation ─────────────────────────────────────────


def _string_list(value: Any, limit: int, default: list[str]) -> list[str]:
    if not isinstance(value, list):
        return list(default)
    return [str(item) for item in value if isinstance(item, (str, int, float))][:limit]


def validate_summary(raw: dict[str, Any]) -> analysis.AISummary:
    """Coerce a parsed model reply into an :class:`AISummary` with bounded lists."""
    keep = raw.get("howLongTheyKeep")
    return analysis.AISummary(
        what_they_collect=_string_list(raw.get("whatTheyCollect"), _MAX_COLLECT, [NOT_AVAILABLE]),
        who_they_share_with=_string_list(raw.get("whoTheyShareWith"), _MAX_SHARE_WITH, [NOT_AVAILABLE]),
        how_long_they_keep=keep if isinstance(keep, str) else NOT_AVAILABLE,
        key_risks=_string_list(
            raw.get("keyRisks"), _MAX_RISKS, ["Privacy risks could not be determined"]
        ),
        tracker_breakdown=_string_list(raw.get("trackerBreakdown"), _MAX_BREAKDOWN, []),
    )


# ── Public API ──────────────────────────────────────────────────


def _fallback_result(
    trackers: list[str], site_url: str, note: str, raw_response: str | None = None
) -> analysis.AISummaryResult:
    return analysis.AISummaryResult(
        success=False,
        note=note,
        summary=create_fallback_summary(trackers, site_url),
        tracker_count=len(trackers),
        tracker_details=taxonomy.classify_all(trackers),
        raw_response=raw_response,
    )


async def _complete(client: AsyncOpenAI | AsyncAzureOpenAI, model: str, prompt: str) -> str:
    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": privacy_summary.INSTRUCTIONS},
            {"role": "user", "content": prompt},
        ],
        max_tokens=MAX_TOKENS,
        response_format={"type": "json_object"},
    )
    return response.choices[0].message.content or ""


async def generate_ai_summary(
    trackers: list[str],
    site_url: str,
    client: AsyncOpenAI | AsyncAzureOpenAI | None = None,
    model: str | None = None,
) -> analysis.AISummaryResult:
    """Produce an AI privacy summary for *trackers* found on *site_url*.

    Never raises: configuration, transport and parsing problems all
    degrade to the fallback summary with an explanatory ``note``.

    Args:
        trackers: Tracker hostnames detected on the page.
        site_url: The analysed page URL.
        client: Optional pre-built OpenAI client (defaults to the
            environment-configured one).
        model: Model or deployment name to use with *client*.
    """
    if client is None:
        configured = llm_client.get_client()
        if configured is None:
            return _fallback_result(trackers, site_url, "AI analysis unavailable - API key missing")
        client, default_model = configured
        model = model or default_model

    log.start_timer("ai-summary")
    try:
        text = await retry.with_retry(
            lambda: _complete(client, model or "", privacy_summary.build_user_prompt(site_url, trackers)),
            context="ai-summary",
        )
    except Exception as exc:
        log.end_timer("ai-summary", "AI summary failed")
        log.error("AI summary request failed", {"error": errors.get_error_message(exc)})
        return _fallback_result(trackers, site_url, f"AI analysis failed: {errors.get_error_message(exc)}")

    log.end_timer("ai-summary", "AI summary received")

    parsed = json_parsing.load_json_from_text(text)
    if not isinstance(parsed, dict):
        log.warn("Failed to parse AI response as JSON", {"text": text[:200]})
        return _fallback_result(trackers, site_url, "AI response could not be parsed", raw_response=text)

    summary = validate_summary(parsed)
    log.success("AI summary parsed", {"risks": len(summary.key_risks), "sharedWith": len(summary.who_they_share_with)})
    return analysis.AISummaryResult(
        success=True,
        summary=summary,
        tracker_count=len(trackers),
        tracker_details=taxonomy.classify_all(trackers),
        raw_response=text,
    )
