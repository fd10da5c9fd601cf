"""Instrument Catalog: read-only registry of instrument definitions.

Definitions are validated once at construction. A catalog is an explicit
object handed to the engine; nothing in the package mutates it afterwards.
"""
from decimal import Decimal
from typing import Iterable, Optional, Union

import structlog

from screening.exceptions import CatalogError, UnknownInstrument
from screening.models.enums import InstrumentId, RiskAlgorithm
from screening.models.instrument import InstrumentDefinition

logger = structlog.get_logger(__name__)

# Instruments whose declared max score is known not to match the sum of
# their section maximums. Reported, not corrected.
KNOWN_MAX_SCORE_DISCREPANCIES: frozenset[InstrumentId] = frozenset({InstrumentId.PARKINSONS})


def validate_definition(
    definition: InstrumentDefinition,
    allow_max_score_mismatch: bool = False,
) -> None:
    """Check catalog invariants for one definition.

    Raises:
        CatalogError: On the first violated invariant.
    """
    name = definition.id.value

    question_ids = [q.id for q in definition.questions]
    duplicates = sorted({qid for qid in question_ids if question_ids.count(qid) > 1})
    if duplicates:
        raise CatalogError(f"{name}: duplicate question ids {duplicates}")

    declared = {s.id for s in definition.sections}
    scored = {s.section_id for s in definition.scoring.sections}
    if declared != scored:
        raise CatalogError(f"{name}: declared sections {sorted(declared)} "
                           f"do not match scored sections {sorted(scored)}")
    for question in definition.questions:
        if question.section is not None and question.section not in declared:
            raise CatalogError(f"{name}: question {question.id} names unknown section "
                               f"'{question.section}'")

    config = definition.scoring
    if config.min_score >= config.max_score:
        raise CatalogError(f"{name}: min_score must be below max_score")
    if config.section_max_total != config.max_score and not allow_max_score_mismatch:
        raise CatalogError(f"{name}: section maximums add up to {config.section_max_total}, "
                           f"declared max_score is {config.max_score}")

    mapping = definition.risk_mapping
    ranges = mapping.ranges
    if not ranges:
        raise CatalogError(f"{name}: risk mapping has no ranges")
    if ranges[0].score_min != config.min_score or ranges[-1].score_max != config.max_score:
        raise CatalogError(f"{name}: risk ranges must span "
                           f"[{config.min_score}, {config.max_score}]")
    for prev, nxt in zip(ranges, ranges[1:]):
        if not prev.score_max < nxt.score_min <= prev.score_max + Decimal(1):
            raise CatalogError(f"{name}: risk ranges leave a gap or overlap at "
                               f"{prev.score_max}..{nxt.score_min}")

    scores = [bp.score for bp in mapping.breakpoints]
    if not scores or scores != sorted(scores):
        raise CatalogError(f"{name}: breakpoints must be non-empty and ordered by score")
    if mapping.algorithm == RiskAlgorithm.CUSTOM and not mapping.strategy:
        raise CatalogError(f"{name}: custom risk algorithm requires a strategy name")
    if not mapping.low_cut <= mapping.moderate_cut:
        raise CatalogError(f"{name}: low_cut must not exceed moderate_cut")


class InstrumentCatalog:
    """Registry of validated instrument definitions, in registration order.

    Parameters
    ----------
    definitions:
        Definitions to register. Defaults to the five built-in instruments.
    known_discrepancies:
        Instruments allowed to declare a max score different from the sum
        of their section maximums.
    """

    def __init__(
        self,
        definitions: Optional[Iterable[InstrumentDefinition]] = None,
        known_discrepancies: frozenset[InstrumentId] = KNOWN_MAX_SCORE_DISCREPANCIES,
    ) -> None:
        if definitions is None:
            from screening.catalog import BUILTIN_DEFINITIONS
            definitions = BUILTIN_DEFINITIONS

        self._definitions: dict[InstrumentId, InstrumentDefinition] = {}
        self.discrepancies: dict[InstrumentId, tuple[Decimal, Decimal]] = {}
        for definition in definitions:
            if definition.id in self._definitions:
                raise CatalogError(f"instrument '{definition.id.value}' registered twice")
            allowed = definition.id in known_discrepancies
            validate_definition(definition, allow_max_score_mismatch=allowed)
            config = definition.scoring
            if config.section_max_total != config.max_score:
                self.discrepancies[definition.id] = (config.max_score, config.section_max_total)
                logger.warning(
                    "max_score_discrepancy",
                    instrument=definition.id.value,
                    declared_max=float(config.max_score),
                    section_total=float(config.section_max_total),
                )
            self._definitions[definition.id] = definition

        logger.info("instrument_catalog_initialized",
                    instruments=[i.value for i in self._definitions])

    def get_definition(self, instrument_id: Union[InstrumentId, str]) -> InstrumentDefinition:
        """Return the definition for ``instrument_id``.

        Raises:
            UnknownInstrument: If the id is not registered.
        """
        try:
            key = InstrumentId(instrument_id)
        except ValueError:
            raise UnknownInstrument(str(instrument_id)) from None
        definition = self._definitions.get(key)
        if definition is None:
            raise UnknownInstrument(key.value)
        return definition

    def list_instruments(self) -> list[InstrumentId]:
        return list(self._definitions)

    def __contains__(self, instrument_id: object) -> bool:
        try:
            return InstrumentId(instrument_id) in self._definitions
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self._definitions)
