"""
Valuation Aggregator Module - Combined Valuation Summary
FinDash Financial Analysis Core

Orchestrates the DCF and comparables valuators, depending on which inputs
were supplied, and reconciles their outputs into one summary with key
assumptions, recommendations, risk factors and a confidence level.

Methodology:
    Variance   = |DCF per share - comparables average| / midpoint x 100
    Confidence = +2 both methods (or +1 one method)
                 +1 terminal value share of EV below 60%
                 +1 clean peer group (no outliers)
                 high >= 4, medium >= 2, else low

Inputs: optional DCFInputs, optional industry + TargetMetrics
Outputs: ValuationSummary

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from enum import Enum

from .comparables_valuator import (
    ComparablesValuationResult,
    ComparablesValuator,
    TargetMetrics,
)
from .config import LOGGER
from .dataset import SeriesCalculatorBase
from .dcf_valuator import DCFInputs, DCFResult, DCFValuator
from .reference_data import PeerRepository


__version__ = "1.0.0"


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

class ValuationConfig:
    """Configuration parameters for valuation reconciliation."""

    # Method agreement
    VARIANCE_THRESHOLD: float = 30.0            # % variance flagged for review

    # Terminal value dependency (% of EV)
    TV_EXTEND_PROJECTION: float = 75.0
    TV_RISK: float = 70.0
    TV_CONFIDENCE: float = 60.0

    # Confidence scoring
    SCORE_BOTH_METHODS: int = 2
    SCORE_ONE_METHOD: int = 1
    HIGH_CONFIDENCE_MIN: int = 4
    MEDIUM_CONFIDENCE_MIN: int = 2


# =============================================================================
# ENUMERATIONS
# =============================================================================

class ConfidenceLevel(Enum):
    """Confidence in the combined valuation."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass
class ValuationSummary:
    """Combined valuation output."""

    dcf: Optional[DCFResult] = None
    comparables: Optional[ComparablesValuationResult] = None
    method_variance_pct: Optional[float] = None
    recommendations: List[str] = field(default_factory=list)
    risk_factors: List[str] = field(default_factory=list)
    key_assumptions: List[str] = field(default_factory=list)
    confidence_score: int = 0
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dcf": self.dcf.to_dict() if self.dcf else None,
            "comparables": self.comparables.to_dict() if self.comparables else None,
            "method_variance_pct": self.method_variance_pct,
            "recommendations": self.recommendations,
            "risk_factors": self.risk_factors,
            "key_assumptions": self.key_assumptions,
            "confidence_score": self.confidence_score,
            "confidence_level": self.confidence_level.value,
        }


# =============================================================================
# VALUATION AGGREGATOR
# =============================================================================

class ValuationAggregator(SeriesCalculatorBase):
    """
    Runs DCF and/or comparables valuation and reconciles the results.

    Usage:
        aggregator = ValuationAggregator()
        summary = aggregator.value(dcf_inputs, "Technology - Software", target)
    """

    def __init__(
        self,
        dcf_valuator: Optional[DCFValuator] = None,
        comparables_valuator: Optional[ComparablesValuator] = None,
        peer_repository: Optional[PeerRepository] = None,
    ):
        self.dcf_valuator = dcf_valuator or DCFValuator()
        self.comparables_valuator = comparables_valuator or ComparablesValuator(peer_repository)
        self.logger = LOGGER

    def value(
        self,
        dcf_inputs: Optional[DCFInputs] = None,
        industry: Optional[str] = None,
        target: Optional[TargetMetrics] = None,
    ) -> ValuationSummary:
        """
        Perform complete valuation.

        DCF runs when dcf_inputs is supplied; comparables run when both an
        industry and target metrics are supplied.

        Raises:
            InvalidInputError: Propagated from DCF input validation
        """
        self.logger.info("Starting combined valuation")
        summary = ValuationSummary()

        if dcf_inputs is not None:
            summary.dcf = self.dcf_valuator.value(dcf_inputs)
            summary.key_assumptions = [
                f"Terminal growth rate: {dcf_inputs.terminal_growth_rate:g}%",
                f"Discount rate (WACC): {dcf_inputs.discount_rate:g}%",
                f"Projection period: {dcf_inputs.projection_years} years",
            ]

        if industry and target is not None:
            summary.comparables = self.comparables_valuator.value(industry, target)

        summary.method_variance_pct = self.method_variance(summary)
        summary.recommendations = self.generate_recommendations(summary)
        summary.risk_factors = self.identify_risk_factors(summary)
        summary.confidence_score = self.confidence_score(summary)
        summary.confidence_level = self.confidence_level(summary.confidence_score)

        self.logger.info(f"Combined valuation complete: confidence={summary.confidence_level.value}")
        return summary

    def method_variance(self, summary: ValuationSummary) -> Optional[float]:
        """Percent gap between DCF per share and the comparables average."""
        if summary.dcf is None or summary.comparables is None:
            return None
        dcf_value = summary.dcf.value_per_share
        comp_value = summary.comparables.implied_valuations.average_valuation
        midpoint = (dcf_value + comp_value) / 2
        return self.safe_divide(abs(dcf_value - comp_value), midpoint) * 100

    def generate_recommendations(self, summary: ValuationSummary) -> List[str]:
        cfg = ValuationConfig
        recommendations: List[str] = []

        if summary.method_variance_pct is not None:
            if summary.method_variance_pct > cfg.VARIANCE_THRESHOLD:
                recommendations.append(
                    "Significant variance between DCF and comparable analysis - review assumptions"
                )
            else:
                recommendations.append(
                    "DCF and comparable analysis show reasonable alignment - good validation"
                )

        if summary.dcf is not None:
            if summary.dcf.summary.terminal_value_percent > cfg.TV_EXTEND_PROJECTION:
                recommendations.append("High terminal value dependency - consider extending projection period")
            recommendations.append("Perform sensitivity analysis on key value drivers")

        recommendations.append("Consider industry cycles and company-specific factors")
        recommendations.append("Update valuation regularly as new information becomes available")
        return recommendations

    def identify_risk_factors(self, summary: ValuationSummary) -> List[str]:
        risks: List[str] = []

        if summary.dcf is not None and summary.dcf.summary.terminal_value_percent > ValuationConfig.TV_RISK:
            risks.append("High terminal value dependency increases forecast uncertainty")

        if summary.comparables is not None and summary.comparables.outliers:
            risks.append("Peer group contains outliers that may skew multiples")

        risks.append("Market conditions and investor sentiment can impact multiples")
        risks.append("Company execution risk on growth and margin assumptions")
        risks.append("Regulatory and competitive landscape changes")
        return risks

    @staticmethod
    def confidence_score(summary: ValuationSummary) -> int:
        cfg = ValuationConfig
        score = 0

        if summary.dcf is not None and summary.comparables is not None:
            score += cfg.SCORE_BOTH_METHODS
        elif summary.dcf is not None or summary.comparables is not None:
            score += cfg.SCORE_ONE_METHOD

        if summary.dcf is not None and summary.dcf.summary.terminal_value_percent < cfg.TV_CONFIDENCE:
            score += 1

        if summary.comparables is not None and not summary.comparables.outliers:
            score += 1

        return score

    @staticmethod
    def confidence_level(score: int) -> ConfidenceLevel:
        if score >= ValuationConfig.HIGH_CONFIDENCE_MIN:
            return ConfidenceLevel.HIGH
        if score >= ValuationConfig.MEDIUM_CONFIDENCE_MIN:
            return ConfidenceLevel.MEDIUM
        return ConfidenceLevel.LOW


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def perform_complete_valuation(
    dcf_inputs: Optional[DCFInputs] = None,
    industry: Optional[str] = None,
    target: Optional[TargetMetrics] = None,
    peer_repository: Optional[PeerRepository] = None,
) -> ValuationSummary:
    """
    Convenience function for combined valuation.

    Returns:
        ValuationSummary
    """
    return ValuationAggregator(peer_repository=peer_repository).value(dcf_inputs, industry, target)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # Configuration
    "ValuationConfig",

    # Enumerations
    "ConfidenceLevel",

    # Data Containers
    "ValuationSummary",

    # Aggregator
    "ValuationAggregator",

    # Functions
    "perform_complete_valuation",
]
