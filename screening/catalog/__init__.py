"""Built-in instrument definitions and the catalog that serves them."""
from screening.catalog.ad8 import AD8
from screening.catalog.mmse import MMSE
from screening.catalog.moca import MOCA
from screening.catalog.parkinsons import PARKINSONS
from screening.catalog.phq9 import PHQ9
from screening.catalog.registry import InstrumentCatalog, validate_definition

BUILTIN_DEFINITIONS = (MOCA, PHQ9, MMSE, AD8, PARKINSONS)

__all__ = ["BUILTIN_DEFINITIONS", "InstrumentCatalog", "validate_definition"]
