"""
narrative/fallback.py
---------------------
Plain-language explanation of an analysis, built from per-bucket templates,
plus the call-to-action shown for each risk level.

No network model is called here; :func:`build_prompt` renders the summary
an external text generator would receive, and
:func:`generate_fallback_explanation` is what the CLI prints.
"""

from __future__ import annotations

import logging

from treadsight.core.models import (
    AnalysisResult,
    CallToAction,
    Explanation,
    RiskLevel,
    TreadBucket,
    WeatherMode,
)
from treadsight.core.numeric import round_half_up

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "This is an estimate based on photo analysis and assumptions. "
    "For precise measurement, visit a certified tire professional."
)

_CTA: dict[RiskLevel, CallToAction] = {
    RiskLevel.SAFE: CallToAction(
        label="Set Reminder",
        description="We'll remind you to check again in 3 months",
        icon="bell",
        urgency="low",
    ),
    RiskLevel.MONITOR: CallToAction(
        label="Schedule Free Inspection",
        description="Get a professional measurement at your nearest store",
        icon="calendar",
        urgency="medium",
    ),
    RiskLevel.PLAN_SOON: CallToAction(
        label="Lock Price Today",
        description="Reserve today's price before your next replacement",
        icon="tag",
        urgency="high",
    ),
    RiskLevel.REPLACE_NOW: CallToAction(
        label="Book Install Now",
        description="Your tires need immediate attention for your safety",
        icon="alert-triangle",
        urgency="critical",
    ),
}

_ACTIONS: dict[TreadBucket, str] = {
    TreadBucket.NEW: "Set a reminder to check again in 3-4 months.",
    TreadBucket.HEALTHY: "Schedule a professional inspection at your next service visit.",
    TreadBucket.MODERATE: "Book a free inspection and start comparing replacement tires.",
    TreadBucket.LOW: "Lock in pricing today and schedule replacement within the next few weeks.",
    TreadBucket.CRITICAL: "Book a tire replacement appointment immediately for your safety.",
}


def cta_for_risk(risk: RiskLevel | str) -> CallToAction:
    """Call-to-action for *risk*; raises ``UnknownEnumError`` for unknown labels."""
    return _CTA[RiskLevel.parse(risk)]


def build_prompt(analysis: AnalysisResult, weather_mode: WeatherMode | str = WeatherMode.DRY) -> str:
    mode = WeatherMode.parse(weather_mode)
    est = analysis.tread_estimate
    hs = analysis.health_score
    rng = est.depth_range
    return (
        "Analyze this tire condition:\n"
        f"- Tread Depth: {rng.min:g}-{rng.max:g}/32\" ({est.bucket.value} condition)\n"
        f"- Health Score: {hs.score}/100\n"
        f"- Risk Level: {hs.risk_level.value}\n"
        f"- Estimated Remaining Life: ~{analysis.wear_prediction.remaining_months} months\n"
        f"- Weather Context: {mode.value} conditions\n"
        f"- Confidence: {round_half_up(est.confidence * 100)}%\n"
        "\n"
        f"Provide analysis considering {mode.value} driving conditions. Be helpful and calm."
    )


def generate_fallback_explanation(
    analysis: AnalysisResult,
    weather_mode: WeatherMode | str = WeatherMode.DRY,
) -> Explanation:
    """Templated :class:`Explanation` for the analysed bucket."""
    mode = WeatherMode.parse(weather_mode)
    bucket = analysis.tread_estimate.bucket
    score = analysis.health_score.score
    months = analysis.wear_prediction.remaining_months

    explanation = Explanation(
        narrative=_narrative(bucket, months, mode),
        key_insights=_insights(bucket, score, months),
        recommended_action=_ACTIONS[bucket],
        disclaimer=DISCLAIMER,
    )
    logger.debug("Fallback explanation built for bucket=%s mode=%s", bucket.value, mode.value)
    return explanation


# ------------------------------------------------------------------
# Templates
# ------------------------------------------------------------------

def _narrative(bucket: TreadBucket, months: int, mode: WeatherMode) -> str:
    wet_or_snow = mode is not WeatherMode.DRY

    if bucket is TreadBucket.NEW:
        return (
            "Your tires appear to be in excellent condition with substantial tread remaining. "
            f"Based on our analysis, you have approximately {months} months of safe driving ahead. "
            "Continue with regular rotation and inspection schedules to maximize tire life."
        )
    if bucket is TreadBucket.HEALTHY:
        return (
            "Your tires are in good shape with healthy tread depth. "
            f"Our estimate suggests around {months} months of service life remaining. "
            "Regular maintenance and rotations will help ensure even wear and optimal performance."
        )
    if bucket is TreadBucket.MODERATE:
        text = (
            "Your tires are showing moderate wear and should be monitored more closely. "
            f"With an estimated {months} months remaining, now is a good time to start planning for replacement."
        )
        if wet_or_snow:
            text += f" In {mode.value} conditions, reduced tread affects stopping distance significantly."
        return text
    if bucket is TreadBucket.LOW:
        text = (
            "Your tires are approaching the end of their service life with limited tread remaining. "
            f"We estimate approximately {months} months before reaching the legal minimum."
        )
        if mode is WeatherMode.SNOW:
            text += " Snow and ice performance is notably compromised at this depth."
        elif mode is WeatherMode.WET:
            text += " Wet performance is notably compromised at this depth."
        else:
            text += " Consider scheduling a replacement soon."
        return text

    hazard = f"{mode.value} weather driving poses serious safety risks" if wet_or_snow else "safety is compromised"
    return (
        "Your tires have critically low tread and should be replaced as soon as possible. "
        f"At this depth, stopping distances are significantly increased and {hazard}. "
        "We strongly recommend immediate professional inspection."
    )


def _insights(bucket: TreadBucket, score: int, months: int) -> list[str]:
    if bucket is TreadBucket.NEW:
        return [
            f"Health score of {score}/100 indicates excellent condition",
            "Tread depth is well above safety thresholds",
            "No immediate action needed; maintain regular rotation schedule",
        ]
    if bucket is TreadBucket.HEALTHY:
        return [
            f"Health score of {score}/100 shows good tire condition",
            f"Approximately {months} months of service life estimated",
            "Continue monitoring at regular intervals",
        ]
    if bucket is TreadBucket.MODERATE:
        return [
            f"Health score of {score}/100: entering monitor zone",
            "Wet traction begins declining at this depth",
            "Start comparing replacement options and pricing",
        ]
    if bucket is TreadBucket.LOW:
        return [
            f"Health score of {score}/100: replacement recommended soon",
            "Stopping distance in wet conditions significantly increased",
            f"Estimated {months} months until legal minimum",
        ]
    return [
        f"Health score of {score}/100: immediate attention needed",
        "Tire is at or near legal minimum tread depth",
        "Hydroplaning risk is extremely high in wet conditions",
    ]
