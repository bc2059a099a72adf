# eudr_compliance/risk_tables.py
"""
Static deforestation risk tables used by the scoring engine.

Country tiers follow Global Forest Watch / FAO hotspots; commodity weights
follow the seven EUDR Annex I commodities plus common derived products.
Both tables are module-level constants wrapped in read-only mappings and are
shared by every scoring call.
"""
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple, Optional

from .models import RiskLevel


class CommodityRisk(NamedTuple):
    score: int
    reason: str


# Point deduction per country tier
COUNTRY_PENALTIES: Mapping[RiskLevel, int] = MappingProxyType(
    {
        RiskLevel.HIGH: 25,
        RiskLevel.MEDIUM: 15,
        RiskLevel.LOW: 5,
    }
)

_COUNTRY_RISK: Dict[str, RiskLevel] = {
    # High risk - active deforestation hotspots
    "Brazil": RiskLevel.HIGH,
    "Indonesia": RiskLevel.HIGH,
    "Democratic Republic of Congo": RiskLevel.HIGH,
    "Bolivia": RiskLevel.HIGH,
    "Peru": RiskLevel.HIGH,
    "Colombia": RiskLevel.HIGH,
    "Cameroon": RiskLevel.HIGH,
    "Myanmar": RiskLevel.HIGH,
    "Ivory Coast": RiskLevel.HIGH,
    "Ghana": RiskLevel.HIGH,
    "Nigeria": RiskLevel.HIGH,
    "Madagascar": RiskLevel.HIGH,
    # Medium risk - historical or emerging concerns
    "Malaysia": RiskLevel.MEDIUM,
    "Vietnam": RiskLevel.MEDIUM,
    "Thailand": RiskLevel.MEDIUM,
    "Laos": RiskLevel.MEDIUM,
    "Cambodia": RiskLevel.MEDIUM,
    "Papua New Guinea": RiskLevel.MEDIUM,
    "Ecuador": RiskLevel.MEDIUM,
    "Venezuela": RiskLevel.MEDIUM,
    "Paraguay": RiskLevel.MEDIUM,
    "Argentina": RiskLevel.MEDIUM,
    "India": RiskLevel.MEDIUM,
    "Tanzania": RiskLevel.MEDIUM,
    "Mozambique": RiskLevel.MEDIUM,
    "Zambia": RiskLevel.MEDIUM,
    "Ethiopia": RiskLevel.MEDIUM,
    # Low risk - stable or increasing forest cover
    "Uruguay": RiskLevel.LOW,
    "Chile": RiskLevel.LOW,
    "Costa Rica": RiskLevel.LOW,
    "United States": RiskLevel.LOW,
    "Canada": RiskLevel.LOW,
    "Australia": RiskLevel.LOW,
    "New Zealand": RiskLevel.LOW,
    "Japan": RiskLevel.LOW,
    "United Kingdom": RiskLevel.LOW,
    "Norway": RiskLevel.LOW,
    "Switzerland": RiskLevel.LOW,
    "Germany": RiskLevel.LOW,
    "France": RiskLevel.LOW,
    "Netherlands": RiskLevel.LOW,
    "Belgium": RiskLevel.LOW,
    "Spain": RiskLevel.LOW,
    "Italy": RiskLevel.LOW,
    "Portugal": RiskLevel.LOW,
    # Default for unlisted countries
    "Other": RiskLevel.HIGH,
}

COUNTRY_RISK: Mapping[str, RiskLevel] = MappingProxyType(_COUNTRY_RISK)

COMMODITY_RISK: Mapping[str, CommodityRisk] = MappingProxyType(
    {
        "Cattle": CommodityRisk(
            30,
            "Leading driver of deforestation globally; complex indirect supply "
            "chains make traceability challenging.",
        ),
        "Soya": CommodityRisk(
            25,
            "High risk of conversion from forests and savannahs, particularly "
            "in South America.",
        ),
        "Oil Palm": CommodityRisk(
            25,
            "Historical link to large-scale deforestation in Southeast Asia and "
            "emerging risks in Africa.",
        ),
        "Palm Oil": CommodityRisk(
            25, "Same as Oil Palm - major deforestation driver."
        ),
        "Wood": CommodityRisk(
            25,
            "Direct forest degradation and illegal logging risks; complex "
            "supply chains.",
        ),
        "Leather": CommodityRisk(
            28, "Linked to cattle farming, major deforestation driver."
        ),
        "Cocoa": CommodityRisk(
            20,
            "Risk of expansion into protected forest areas, particularly in "
            "West Africa.",
        ),
        "Coffee": CommodityRisk(
            15,
            "Risk of encroachment into highland and cloud forests; shade "
            "coffee less risky.",
        ),
        "Rubber": CommodityRisk(
            15,
            "Emerging risk driver in Southeast Asia and Africa with plantation "
            "expansion.",
        ),
        "Other": CommodityRisk(
            10,
            "Risk varies by specific commodity; requires individual assessment.",
        ),
    }
)


def _casefold_key(table: Mapping[str, object], name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    wanted = name.strip().casefold()
    for key in table:
        if key.casefold() == wanted:
            return key
    return None


def country_risk_level(country: Optional[str]) -> RiskLevel:
    """Tier for ``country``; anything unlisted is treated as High."""
    key = _casefold_key(COUNTRY_RISK, country)
    if key is None:
        return COUNTRY_RISK["Other"]
    return COUNTRY_RISK[key]


def is_listed_country(country: Optional[str]) -> bool:
    return _casefold_key(COUNTRY_RISK, country) not in (None, "Other")


def commodity_key(product_type: Optional[str]) -> str:
    """Table key for ``product_type``, ``"Other"`` when unlisted."""
    return _casefold_key(COMMODITY_RISK, product_type) or "Other"


def commodity_risk(product_type: Optional[str]) -> CommodityRisk:
    return COMMODITY_RISK[commodity_key(product_type)]
