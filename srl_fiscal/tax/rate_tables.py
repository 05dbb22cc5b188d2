"""
Rate Tables Module

Static reference data: regional IRAP rates and VAT settlement regimes.
"""

from types import MappingProxyType

# Aliquote IRAP regionali 2025 (percentuali)
IRAP_RATES = MappingProxyType({
    "PIEMONTE": 3.9,
    "VALLE_AOSTA": 3.9,
    "LOMBARDIA": 3.9,
    "TRENTINO": 2.68,  # PA Trento
    "VENETO": 4.08,
    "FRIULI": 3.9,
    "LIGURIA": 3.9,
    "EMILIA_ROMAGNA": 4.65,
    "TOSCANA": 3.9,
    "UMBRIA": 3.9,
    "MARCHE": 4.73,
    "LAZIO": 4.82,
    "ABRUZZO": 4.82,
    "MOLISE": 4.82,
    "CAMPANIA": 4.97,
    "PUGLIA": 4.82,
    "BASILICATA": 3.9,
    "CALABRIA": 4.82,
    "SICILIA": 3.9,
    "SARDEGNA": 2.93,
})

VAT_MONTHLY = "MENSILE"
VAT_QUARTERLY = "TRIMESTRALE"

VAT_REGIMES = MappingProxyType({
    VAT_MONTHLY: MappingProxyType({
        "label": "Liquidazione Mensile",
        "frequency": 12,
        "description": "Obbligo per fatturato > €400k",
    }),
    VAT_QUARTERLY: MappingProxyType({
        "label": "Liquidazione Trimestrale",
        "frequency": 4,
        "description": "Standard per fatturato ≤ €400k",
    }),
})

DEFAULT_VAT_FREQUENCY = 4

MONTH_NAMES = (
    "Gennaio", "Febbraio", "Marzo", "Aprile", "Maggio", "Giugno",
    "Luglio", "Agosto", "Settembre", "Ottobre", "Novembre", "Dicembre",
)


def vat_frequency(regime: str) -> int:
    """Number of settlements per year for a regime code (quarterly if unknown)."""
    regime_info = VAT_REGIMES.get(regime)
    if regime_info is None:
        return DEFAULT_VAT_FREQUENCY
    return regime_info["frequency"]
