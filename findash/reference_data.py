"""
Reference Data Module - Peer Companies and Industry Benchmarks
FinDash Financial Analysis Core

Static reference tables consumed by the comparable-company and benchmark
engines, exposed through swappable repository interfaces so that a live data
source can replace the constant tables without touching analysis logic.

Components:
    - ComparableCompany: peer financials with trading multiples
    - BenchmarkBand / IndustryBenchmark: per-metric performance bands
    - PeerRepository / BenchmarkRepository: lookup interfaces
    - StaticPeerRepository / StaticBenchmarkRepository: constant defaults

Lookups return None for unknown industries; the engines decide the fallback.

Version: 1.0.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Any, Tuple


__version__ = "1.0.0"


# =============================================================================
# DATA CONTAINERS
# =============================================================================

@dataclass(frozen=True)
class ComparableCompany:
    """Peer company financials and trading multiples."""

    name: str
    market_cap: float
    revenue: float
    ebitda: float
    net_income: float
    book_value: float
    pe_ratio: float
    ev_ebitda_ratio: float
    price_to_book_ratio: float
    sector: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "market_cap": self.market_cap,
            "revenue": self.revenue,
            "ebitda": self.ebitda,
            "net_income": self.net_income,
            "book_value": self.book_value,
            "pe_ratio": self.pe_ratio,
            "ev_ebitda_ratio": self.ev_ebitda_ratio,
            "price_to_book_ratio": self.price_to_book_ratio,
            "sector": self.sector,
        }


@dataclass(frozen=True)
class BenchmarkBand:
    """Performance thresholds for one metric, best band first."""

    excellent: float
    good: float
    average: float
    poor: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "excellent": self.excellent,
            "good": self.good,
            "average": self.average,
            "poor": self.poor,
        }


@dataclass(frozen=True)
class IndustryBenchmark:
    """Benchmark bands for one industry keyed by metric name."""

    industry: str
    sector: str
    bands: Mapping[str, BenchmarkBand]
    description: str = ""
    market_size: str = ""
    key_metrics: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Catalogue entries are shared by every lookup, so keep them read-only
        object.__setattr__(self, "bands", MappingProxyType(dict(self.bands)))
        object.__setattr__(self, "key_metrics", tuple(self.key_metrics))

    def band(self, metric: str) -> Optional[BenchmarkBand]:
        return self.bands.get(metric)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "industry": self.industry,
            "sector": self.sector,
            "bands": {k: v.to_dict() for k, v in self.bands.items()},
            "description": self.description,
            "market_size": self.market_size,
            "key_metrics": list(self.key_metrics),
        }


# =============================================================================
# REPOSITORY INTERFACES
# =============================================================================

class PeerRepository(ABC):
    """Source of comparable companies grouped by industry label."""

    default_industry: str

    @abstractmethod
    def get_peers(self, industry: str) -> Optional[List[ComparableCompany]]:
        """Peers for an industry, or None when the industry is unknown."""

    @abstractmethod
    def industries(self) -> List[str]:
        """All industry labels with a peer group."""


class BenchmarkRepository(ABC):
    """Source of per-industry benchmark bands."""

    default_industry: str

    @abstractmethod
    def get_benchmark(self, industry: str) -> Optional[IndustryBenchmark]:
        """Benchmark for an industry, or None when the industry is unknown."""

    @abstractmethod
    def all_benchmarks(self) -> List[IndustryBenchmark]:
        """Every benchmark in catalogue order."""


# =============================================================================
# STATIC PEER DATA
# =============================================================================

_PEER_GROUPS: Dict[str, Tuple[ComparableCompany, ...]] = {
    "Technology - Software": (
        ComparableCompany(
            name="Microsoft Corporation",
            market_cap=2_800_000_000_000,
            revenue=211_915_000_000,
            ebitda=89_035_000_000,
            net_income=72_361_000_000,
            book_value=206_223_000_000,
            pe_ratio=28.5,
            ev_ebitda_ratio=25.2,
            price_to_book_ratio=12.8,
            sector="Technology",
        ),
        ComparableCompany(
            name="Salesforce Inc",
            market_cap=245_000_000_000,
            revenue=31_352_000_000,
            ebitda=5_654_000_000,
            net_income=4_136_000_000,
            book_value=24_739_000_000,
            pe_ratio=44.2,
            ev_ebitda_ratio=35.8,
            price_to_book_ratio=8.2,
            sector="Technology",
        ),
        ComparableCompany(
            name="Adobe Inc",
            market_cap=240_000_000_000,
            revenue=19_408_000_000,
            ebitda=7_875_000_000,
            net_income=5_594_000_000,
            book_value=24_018_000_000,
            pe_ratio=35.6,
            ev_ebitda_ratio=28.9,
            price_to_book_ratio=9.8,
            sector="Technology",
        ),
    ),
    "Retail - E-commerce": (
        ComparableCompany(
            name="Amazon.com Inc",
            market_cap=1_650_000_000_000,
            revenue=574_785_000_000,
            ebitda=71_654_000_000,
            net_income=30_425_000_000,
            book_value=201_876_000_000,
            pe_ratio=45.2,
            ev_ebitda_ratio=23.8,
            price_to_book_ratio=7.9,
            sector="Consumer Discretionary",
        ),
        ComparableCompany(
            name="Shopify Inc",
            market_cap=95_000_000_000,
            revenue=7_063_000_000,
            ebitda=789_000_000,
            net_income=2_866_000_000,
            book_value=8_456_000_000,
            pe_ratio=28.4,
            ev_ebitda_ratio=89.5,
            price_to_book_ratio=10.2,
            sector="Consumer Discretionary",
        ),
    ),
    "Manufacturing - Industrial": (
        ComparableCompany(
            name="General Electric",
            market_cap=180_000_000_000,
            revenue=74_196_000_000,
            ebitda=9_876_000_000,
            net_income=5_465_000_000,
            book_value=56_432_000_000,
            pe_ratio=25.8,
            ev_ebitda_ratio=18.2,
            price_to_book_ratio=2.8,
            sector="Industrials",
        ),
        ComparableCompany(
            name="Caterpillar Inc",
            market_cap=160_000_000_000,
            revenue=67_060_000_000,
            ebitda=12_890_000_000,
            net_income=6_705_000_000,
            book_value=23_187_000_000,
            pe_ratio=16.8,
            ev_ebitda_ratio=12.4,
            price_to_book_ratio=6.2,
            sector="Industrials",
        ),
    ),
}


# =============================================================================
# STATIC BENCHMARK DATA
# =============================================================================

def _bands(**metrics: Tuple[float, float, float, float]) -> Dict[str, BenchmarkBand]:
    return {name: BenchmarkBand(*values) for name, values in metrics.items()}


_INDUSTRY_BENCHMARKS: Tuple[IndustryBenchmark, ...] = (
    IndustryBenchmark(
        industry="Technology - Software",
        sector="Technology",
        bands=_bands(
            gross_margin=(85, 75, 65, 50),
            net_margin=(25, 18, 12, 5),
            roe=(25, 18, 12, 6),
            roa=(15, 10, 6, 3),
            debt_to_equity=(0.3, 0.5, 0.8, 1.5),
            current_ratio=(3.0, 2.5, 2.0, 1.2),
            asset_turnover=(1.5, 1.2, 0.9, 0.6),
        ),
        description="High-margin software companies with scalable business models",
        market_size="$500B+ globally",
        key_metrics=("Recurring Revenue", "Customer Acquisition Cost", "Churn Rate"),
    ),
    IndustryBenchmark(
        industry="Retail - E-commerce",
        sector="Consumer Discretionary",
        bands=_bands(
            gross_margin=(50, 40, 30, 20),
            net_margin=(15, 10, 6, 2),
            roe=(20, 15, 10, 5),
            roa=(12, 8, 5, 2),
            debt_to_equity=(0.4, 0.7, 1.0, 1.8),
            current_ratio=(2.5, 2.0, 1.5, 1.0),
            asset_turnover=(2.5, 2.0, 1.5, 1.0),
        ),
        description="Online retail with focus on inventory management and logistics",
        market_size="$4.2T globally",
        key_metrics=("Conversion Rate", "Average Order Value", "Inventory Turnover"),
    ),
    IndustryBenchmark(
        industry="Manufacturing - Industrial",
        sector="Industrials",
        bands=_bands(
            gross_margin=(40, 30, 25, 15),
            net_margin=(12, 8, 5, 2),
            roe=(18, 12, 8, 4),
            roa=(10, 7, 4, 2),
            debt_to_equity=(0.5, 0.8, 1.2, 2.0),
            current_ratio=(2.0, 1.5, 1.2, 0.9),
            asset_turnover=(1.8, 1.4, 1.0, 0.7),
        ),
        description="Asset-heavy manufacturing with longer business cycles",
        market_size="$2.3T globally",
        key_metrics=("Capacity Utilization", "Working Capital", "CAPEX/Revenue"),
    ),
    IndustryBenchmark(
        industry="Financial Services - Banking",
        sector="Financials",
        bands=_bands(
            gross_margin=(70, 60, 50, 35),
            net_margin=(30, 22, 15, 8),
            roe=(15, 12, 9, 5),
            roa=(1.5, 1.2, 0.9, 0.5),
            debt_to_equity=(8.0, 10.0, 12.0, 16.0),
            current_ratio=(1.2, 1.1, 1.0, 0.9),
            asset_turnover=(0.15, 0.12, 0.09, 0.06),
        ),
        description="Traditional banking with regulatory capital requirements",
        market_size="$130T globally",
        key_metrics=("Net Interest Margin", "Loan Loss Provisions", "Tier 1 Capital"),
    ),
    IndustryBenchmark(
        industry="Healthcare - Pharmaceuticals",
        sector="Healthcare",
        bands=_bands(
            gross_margin=(80, 70, 60, 45),
            net_margin=(25, 18, 12, 6),
            roe=(20, 15, 10, 5),
            roa=(12, 8, 5, 2),
            debt_to_equity=(0.3, 0.5, 0.8, 1.3),
            current_ratio=(3.5, 2.8, 2.2, 1.5),
            asset_turnover=(1.0, 0.8, 0.6, 0.4),
        ),
        description="R&D intensive with high regulatory barriers and IP protection",
        market_size="$1.4T globally",
        key_metrics=("R&D Spend", "Pipeline Value", "Patent Expiry"),
    ),
    IndustryBenchmark(
        industry="Energy - Oil & Gas",
        sector="Energy",
        bands=_bands(
            gross_margin=(35, 25, 18, 10),
            net_margin=(15, 10, 6, 2),
            roe=(16, 12, 8, 3),
            roa=(8, 6, 4, 1),
            debt_to_equity=(0.4, 0.7, 1.1, 2.0),
            current_ratio=(1.8, 1.4, 1.1, 0.8),
            asset_turnover=(1.2, 0.9, 0.7, 0.4),
        ),
        description="Commodity-driven with high capital requirements and volatility",
        market_size="$4.5T globally",
        key_metrics=("Production Cost", "Reserves", "CAPEX Efficiency"),
    ),
    IndustryBenchmark(
        industry="Real Estate - REITs",
        sector="Real Estate",
        bands=_bands(
            gross_margin=(70, 60, 50, 35),
            net_margin=(45, 35, 25, 15),
            roe=(12, 9, 6, 3),
            roa=(6, 4, 3, 1),
            debt_to_equity=(1.0, 1.5, 2.0, 3.0),
            current_ratio=(1.5, 1.2, 1.0, 0.7),
            asset_turnover=(0.25, 0.20, 0.15, 0.10),
        ),
        description="Income-focused with high leverage and asset appreciation",
        market_size="$3.7T globally",
        key_metrics=("FFO", "Occupancy Rate", "Net Asset Value"),
    ),
    IndustryBenchmark(
        industry="Consumer Goods - FMCG",
        sector="Consumer Staples",
        bands=_bands(
            gross_margin=(45, 35, 28, 20),
            net_margin=(12, 8, 5, 2),
            roe=(18, 14, 10, 6),
            roa=(8, 6, 4, 2),
            debt_to_equity=(0.5, 0.8, 1.2, 2.0),
            current_ratio=(2.0, 1.6, 1.3, 1.0),
            asset_turnover=(2.0, 1.6, 1.2, 0.8),
        ),
        description="Stable demand with brand strength and distribution networks",
        market_size="$15T globally",
        key_metrics=("Market Share", "Brand Value", "Distribution Reach"),
    ),
)


# =============================================================================
# STATIC REPOSITORIES
# =============================================================================

class StaticPeerRepository(PeerRepository):
    """Peer repository backed by the constant peer table."""

    default_industry = "Technology - Software"

    def __init__(self, peer_groups: Optional[Dict[str, Tuple[ComparableCompany, ...]]] = None):
        self._groups = dict(peer_groups) if peer_groups is not None else dict(_PEER_GROUPS)

    def get_peers(self, industry: str) -> Optional[List[ComparableCompany]]:
        peers = self._groups.get(industry)
        return list(peers) if peers is not None else None

    def industries(self) -> List[str]:
        return list(self._groups)


class StaticBenchmarkRepository(BenchmarkRepository):
    """Benchmark repository backed by the constant benchmark table."""

    default_industry = "Technology - Software"

    def __init__(self, benchmarks: Optional[Tuple[IndustryBenchmark, ...]] = None):
        items = benchmarks if benchmarks is not None else _INDUSTRY_BENCHMARKS
        self._benchmarks: Dict[str, IndustryBenchmark] = {b.industry: b for b in items}

    def get_benchmark(self, industry: str) -> Optional[IndustryBenchmark]:
        return self._benchmarks.get(industry)

    def all_benchmarks(self) -> List[IndustryBenchmark]:
        return list(self._benchmarks.values())


__all__ = [
    "__version__",
    "ComparableCompany",
    "BenchmarkBand",
    "IndustryBenchmark",
    "PeerRepository",
    "BenchmarkRepository",
    "StaticPeerRepository",
    "StaticBenchmarkRepository",
]
