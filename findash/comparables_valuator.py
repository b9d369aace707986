"""
Comparables Valuation Module - Relative Valuation
FinDash Financial Analysis Core

Implements relative valuation of a target company against a peer group of
comparable companies.

Methodology:
    - Select the peer group for the target's industry
    - Filter peer multiples to sane ranges before averaging
    - Compute mean and median P/E, EV/EBITDA and P/B
    - Implied value = target metric x average peer multiple
    - Average valuation = mean of the three implied values
    - Flag peers with extreme multiples as outliers

Unknown industries fall back to the repository's default peer group; the
resolved group is recorded on the result.

Inputs: industry label and TargetMetrics
Outputs: ComparablesValuationResult

Version: 1.0.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple

from .config import LOGGER
from .dataset import SeriesCalculatorBase
from .reference_data import ComparableCompany, PeerRepository, StaticPeerRepository


__version__ = "1.0.0"


# =============================================================================
# CONFIGURATION CONSTANTS
# =============================================================================

class ComparablesConfig:
    """Configuration parameters for comparables valuation."""

    # Multiple validity ranges (exclusive) used before averaging
    PE_MIN: float = 0.0
    PE_MAX: float = 100.0
    EV_EBITDA_MIN: float = 0.0
    EV_EBITDA_MAX: float = 100.0
    PB_MIN: float = 0.0
    PB_MAX: float = 50.0

    # Outlier bounds (inclusive normal range)
    PE_OUTLIER_LOW: float = 5.0
    PE_OUTLIER_HIGH: float = 60.0
    EV_EBITDA_OUTLIER_LOW: float = 5.0
    EV_EBITDA_OUTLIER_HIGH: float = 50.0

    # Recommendation triggers
    HIGH_PE: float = 30.0
    LOW_EV_EBITDA: float = 15.0
    LOW_EBITDA_MARGIN: float = 0.1


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass
class TargetMetrics:
    """Target company figures the peer multiples are applied to."""

    revenue: float
    ebitda: float
    net_income: float
    book_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "revenue": self.revenue,
            "ebitda": self.ebitda,
            "net_income": self.net_income,
            "book_value": self.book_value,
        }


@dataclass
class PeerMultiples:
    """Mean and median of the filtered peer multiples."""

    avg_pe: float = 0.0
    median_pe: float = 0.0
    avg_ev_ebitda: float = 0.0
    median_ev_ebitda: float = 0.0
    avg_price_to_book: float = 0.0
    median_price_to_book: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avg_pe": self.avg_pe,
            "median_pe": self.median_pe,
            "avg_ev_ebitda": self.avg_ev_ebitda,
            "median_ev_ebitda": self.median_ev_ebitda,
            "avg_price_to_book": self.avg_price_to_book,
            "median_price_to_book": self.median_price_to_book,
        }


@dataclass
class ImpliedValuations:
    pe_valuation: float = 0.0
    ev_ebitda_valuation: float = 0.0
    price_to_book_valuation: float = 0.0
    average_valuation: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pe_valuation": self.pe_valuation,
            "ev_ebitda_valuation": self.ev_ebitda_valuation,
            "price_to_book_valuation": self.price_to_book_valuation,
            "average_valuation": self.average_valuation,
        }


@dataclass
class ComparablesValuationResult:
    """Complete comparables valuation result."""

    requested_industry: str
    peer_group_industry: str
    target: TargetMetrics
    peer_multiples: PeerMultiples
    implied_valuations: ImpliedValuations
    peers: List[ComparableCompany] = field(default_factory=list)
    outliers: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.requested_industry != self.peer_group_industry

    def to_dict(self) -> Dict[str, Any]:
        return {
            "requested_industry": self.requested_industry,
            "peer_group_industry": self.peer_group_industry,
            "target": self.target.to_dict(),
            "peer_multiples": self.peer_multiples.to_dict(),
            "implied_valuations": self.implied_valuations.to_dict(),
            "peers": [p.to_dict() for p in self.peers],
            "outliers": self.outliers,
            "recommendations": self.recommendations,
        }


# =============================================================================
# COMPARABLES VALUATOR
# =============================================================================

class ComparablesValuator(SeriesCalculatorBase):
    """
    Values a target against peer trading multiples.

    Usage:
        valuator = ComparablesValuator()
        result = valuator.value("Technology - Software", TargetMetrics(...))
    """

    def __init__(self, repository: Optional[PeerRepository] = None):
        self.repository = repository or StaticPeerRepository()
        self.logger = LOGGER

    def value(self, industry: str, target: TargetMetrics) -> ComparablesValuationResult:
        """
        Run comparables valuation.

        Args:
            industry: Peer group label
            target: Target company figures

        Returns:
            ComparablesValuationResult
        """
        self.logger.info(f"Starting comparables valuation for industry: {industry}")

        resolved, peers = self.resolve_peer_group(industry)
        multiples = self.compute_peer_multiples(peers)

        implied = ImpliedValuations(
            pe_valuation=target.net_income * multiples.avg_pe,
            ev_ebitda_valuation=target.ebitda * multiples.avg_ev_ebitda,
            price_to_book_valuation=target.book_value * multiples.avg_price_to_book,
        )
        implied.average_valuation = (
            implied.pe_valuation + implied.ev_ebitda_valuation + implied.price_to_book_valuation
        ) / 3

        result = ComparablesValuationResult(
            requested_industry=industry,
            peer_group_industry=resolved,
            target=target,
            peer_multiples=multiples,
            implied_valuations=implied,
            peers=peers,
            outliers=self.identify_outliers(peers),
            recommendations=self.generate_recommendations(multiples, target),
        )

        self.logger.info(
            f"Comparables valuation complete: {len(peers)} peers, "
            f"average valuation={implied.average_valuation:,.2f}"
        )
        return result

    def resolve_peer_group(self, industry: str) -> Tuple[str, List[ComparableCompany]]:
        """Peer group for the industry, falling back to the default group."""
        peers = self.repository.get_peers(industry)
        if peers is not None:
            return industry, peers

        default = self.repository.default_industry
        self.logger.warning(f"Unknown peer industry '{industry}'; falling back to '{default}'")
        return default, self.repository.get_peers(default) or []

    def compute_peer_multiples(self, peers: List[ComparableCompany]) -> PeerMultiples:
        """Mean and median of each multiple within its validity range."""
        cfg = ComparablesConfig
        pe = [p.pe_ratio for p in peers if cfg.PE_MIN < p.pe_ratio < cfg.PE_MAX]
        ev = [p.ev_ebitda_ratio for p in peers if cfg.EV_EBITDA_MIN < p.ev_ebitda_ratio < cfg.EV_EBITDA_MAX]
        pb = [p.price_to_book_ratio for p in peers if cfg.PB_MIN < p.price_to_book_ratio < cfg.PB_MAX]

        return PeerMultiples(
            avg_pe=self.mean(pe),
            median_pe=self.median(pe),
            avg_ev_ebitda=self.mean(ev),
            median_ev_ebitda=self.median(ev),
            avg_price_to_book=self.mean(pb),
            median_price_to_book=self.median(pb),
        )

    @staticmethod
    def identify_outliers(peers: List[ComparableCompany]) -> List[str]:
        """Text list of peers with extreme P/E or EV/EBITDA multiples."""
        cfg = ComparablesConfig
        outliers: List[str] = []
        for peer in peers:
            if peer.pe_ratio > cfg.PE_OUTLIER_HIGH or peer.pe_ratio < cfg.PE_OUTLIER_LOW:
                outliers.append(f"{peer.name} - Extreme P/E ratio ({peer.pe_ratio:.1f})")
            if peer.ev_ebitda_ratio > cfg.EV_EBITDA_OUTLIER_HIGH or peer.ev_ebitda_ratio < cfg.EV_EBITDA_OUTLIER_LOW:
                outliers.append(f"{peer.name} - Unusual EV/EBITDA ({peer.ev_ebitda_ratio:.1f})")
        return outliers

    @staticmethod
    def generate_recommendations(multiples: PeerMultiples, target: TargetMetrics) -> List[str]:
        """Advisory text from multiple levels and the target's EBITDA margin."""
        cfg = ComparablesConfig
        recommendations: List[str] = []

        if multiples.avg_pe > cfg.HIGH_PE:
            recommendations.append(
                "High P/E multiples suggest growth expectations - ensure company can deliver"
            )

        if multiples.avg_ev_ebitda < cfg.LOW_EV_EBITDA:
            recommendations.append(
                "Low EV/EBITDA multiples may indicate value opportunity or sector headwinds"
            )

        # Margin check only applies to a target with revenue
        if target.revenue > 0 and target.ebitda / target.revenue < cfg.LOW_EBITDA_MARGIN:
            recommendations.append("Consider margin improvement initiatives to justify peer multiples")

        recommendations.append("Use median multiples for more conservative estimates due to outlier sensitivity")
        recommendations.append("Consider company-specific factors that may warrant premium/discount to peers")
        return recommendations


# =============================================================================
# CONVENIENCE FUNCTION
# =============================================================================

def value_company_comparables(
    industry: str,
    target: TargetMetrics,
    repository: Optional[PeerRepository] = None,
) -> ComparablesValuationResult:
    """
    Convenience function for comparables valuation.

    Returns:
        ComparablesValuationResult
    """
    return ComparablesValuator(repository).value(industry, target)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    # Version
    "__version__",

    # Configuration
    "ComparablesConfig",

    # Data Containers
    "TargetMetrics",
    "PeerMultiples",
    "ImpliedValuations",
    "ComparablesValuationResult",

    # Valuator
    "ComparablesValuator",

    # Functions
    "value_company_comparables",
]
