"""
Slider scorer.

Options encode the slider as ``[min, max, step, unit]`` or
``{"min", "max", "step", "unit"}``. A submission is correct when it lies
within a tolerance of the stored value:

    tolerance = max(step / 2, explicit tolerance, range_fraction * |max - min|)

Broken slider configuration never fails scoring; it only removes the
affected tolerance term.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from learnflow.core.models import QuestionType

from . import register
from .base import ScoreResult, ScoringConfig, ScoringContext
from .normalizer import parse_json_loose


@dataclass
class SliderSpec:
    min: float
    max: float
    step: float
    unit: str = ""


def to_number(value: Any) -> float:
    """Numeric value of a submission or stored answer; NaN when not numeric."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def parse_slider_spec(options: Any, config: ScoringConfig) -> SliderSpec:
    if isinstance(options, list):
        padded = list(options) + [None] * (4 - len(options))
        unit = padded[3]
        return SliderSpec(
            min=to_number(padded[0]),
            max=to_number(padded[1]),
            step=to_number(padded[2]),
            unit="" if unit is None else str(unit),
        )
    if isinstance(options, dict):
        unit = options.get("unit")
        return SliderSpec(
            min=to_number(options.get("min")),
            max=to_number(options.get("max")),
            step=to_number(options.get("step")),
            unit="" if unit is None else str(unit),
        )
    return SliderSpec(
        min=config.slider_default_min,
        max=config.slider_default_max,
        step=config.slider_default_step,
    )


def explicit_tolerance(meta: dict) -> float:
    """Author-configured tolerance from source metadata, NaN when absent."""
    slider_meta = meta.get("slider")
    candidates = (
        slider_meta.get("tolerance") if isinstance(slider_meta, dict) else None,
        meta.get("sliderTolerance"),
        meta.get("tolerance"),
    )
    for candidate in candidates:
        if candidate is not None:
            return to_number(candidate)
    return math.nan


def slider_tolerance(spec: SliderSpec, meta: dict, config: ScoringConfig) -> float:
    step = spec.step if math.isfinite(spec.step) and spec.step > 0 else config.slider_default_step
    tolerance = step / 2

    if math.isfinite(spec.min) and math.isfinite(spec.max):
        tolerance = max(tolerance, abs(spec.max - spec.min) * config.slider_range_fraction)

    explicit = explicit_tolerance(meta)
    if math.isfinite(explicit) and explicit > 0:
        tolerance = max(tolerance, explicit)

    return tolerance


@register(QuestionType.SLIDER)
class SliderScorer:
    """Scorer for numeric slider questions."""

    def score(self, ctx: ScoringContext, user_answer: Any) -> ScoreResult:
        spec = parse_slider_spec(ctx.options, ctx.config)
        correct = to_number(parse_json_loose(ctx.correct_raw))
        submitted = to_number(user_answer)

        if not math.isfinite(correct) or not math.isfinite(submitted):
            return ScoreResult.correct_if(False, correct if math.isfinite(correct) else None)

        tolerance = slider_tolerance(spec, ctx.meta, ctx.config)
        matched = abs(submitted - correct) <= tolerance + ctx.config.slider_epsilon
        return ScoreResult.correct_if(matched, correct, tolerance=tolerance, unit=spec.unit)
