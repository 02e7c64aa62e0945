"""Report labels

Month abbreviations, cost-category labels and placeholder names used by the
analytics reports, per supported locale. Spanish follows the mill's own
reports ("oct 26", "Caña"); English is provided for integrations.
"""
from enum import Enum
from typing import Dict, List

SUPPORTED_LOCALES = ("es", "en")


class CostCategory(str, Enum):
    """The five fixed cost categories of a production lot"""
    CANE = "cane"
    LABOR = "labor"
    ENERGY = "energy"
    PACKAGING = "packaging"
    TRANSPORT = "transport"


# Fixed category order; also the tie-break order in cost breakdowns
COST_CATEGORIES: List[CostCategory] = [
    CostCategory.CANE,
    CostCategory.LABOR,
    CostCategory.ENERGY,
    CostCategory.PACKAGING,
    CostCategory.TRANSPORT,
]

MONTH_ABBREVIATIONS: Dict[str, List[str]] = {
    "es": ["ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sep", "oct", "nov", "dic"],
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
}

COST_CATEGORY_LABELS: Dict[str, Dict[CostCategory, str]] = {
    "es": {
        CostCategory.CANE: "Caña",
        CostCategory.LABOR: "Mano de Obra",
        CostCategory.ENERGY: "Energía",
        CostCategory.PACKAGING: "Empaques",
        CostCategory.TRANSPORT: "Transporte",
    },
    "en": {
        CostCategory.CANE: "Cane",
        CostCategory.LABOR: "Labor",
        CostCategory.ENERGY: "Energy",
        CostCategory.PACKAGING: "Packaging",
        CostCategory.TRANSPORT: "Transport",
    },
}

UNKNOWN_ENTITY_LABEL: Dict[str, str] = {
    "es": "Desconocido",
    "en": "Unknown",
}

FORECAST_PERIOD_PREFIX: Dict[str, str] = {
    "es": "Mes",
    "en": "Month",
}


def _check_locale(locale: str) -> str:
    if locale not in SUPPORTED_LOCALES:
        raise ValueError(f"Unsupported report locale: {locale!r}")
    return locale


def month_abbreviation(month: int, locale: str) -> str:
    """Abbreviated month name, month in 1..12"""
    return MONTH_ABBREVIATIONS[_check_locale(locale)][month - 1]


def cost_category_label(category: CostCategory, locale: str) -> str:
    return COST_CATEGORY_LABELS[_check_locale(locale)][category]


def unknown_entity_label(locale: str) -> str:
    return UNKNOWN_ENTITY_LABEL[_check_locale(locale)]


def forecast_period_label(number: int, locale: str) -> str:
    return f"{FORECAST_PERIOD_PREFIX[_check_locale(locale)]} {number}"
