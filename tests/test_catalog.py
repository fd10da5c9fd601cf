"""Tests for the instrument catalog and its built-in definitions."""
from decimal import Decimal

import pytest

from screening.catalog import BUILTIN_DEFINITIONS, InstrumentCatalog, validate_definition
from screening.catalog.phq9 import PHQ9
from screening.catalog.registry import KNOWN_MAX_SCORE_DISCREPANCIES
from screening.exceptions import CatalogError, UnknownInstrument
from screening.models import InstrumentId, Question, RiskAlgorithm
from screening.scoring.aggregator import resolve_section


class TestCatalogLookup:
    """Tests for InstrumentCatalog access."""

    def test_all_five_instruments_registered(self, catalog):
        assert catalog.list_instruments() == [
            InstrumentId.MOCA,
            InstrumentId.PHQ9,
            InstrumentId.MMSE,
            InstrumentId.AD8,
            InstrumentId.PARKINSONS,
        ]
        assert len(catalog) == 5

    def test_lookup_by_string(self, catalog):
        assert catalog.get_definition("phq9").id == InstrumentId.PHQ9
        assert "mmse" in catalog
        assert "gds" not in catalog

    def test_unknown_instrument_raises(self, catalog):
        with pytest.raises(UnknownInstrument) as exc_info:
            catalog.get_definition("gds")
        assert exc_info.value.instrument_id == "gds"
        assert isinstance(exc_info.value, LookupError)

    def test_registering_twice_rejected(self):
        with pytest.raises(CatalogError):
            InstrumentCatalog(definitions=(PHQ9, PHQ9))


class TestSectionTotals:
    """Declared section maximums add up to the instrument maximum."""

    @pytest.mark.parametrize("definition", BUILTIN_DEFINITIONS, ids=lambda d: d.id.value)
    def test_section_total_matches_or_is_known(self, definition):
        config = definition.scoring
        if definition.id in KNOWN_MAX_SCORE_DISCREPANCIES:
            assert config.section_max_total != config.max_score
        else:
            assert config.section_max_total == config.max_score

    def test_symptom_screen_discrepancy_reported(self, catalog):
        assert catalog.discrepancies == {InstrumentId.PARKINSONS: (Decimal(44), Decimal(41))}

    def test_discrepancy_rejected_when_not_allowed(self):
        from screening.catalog.parkinsons import PARKINSONS

        with pytest.raises(CatalogError, match="section maximums"):
            validate_definition(PARKINSONS)


class TestSectionAssignment:
    """Every built-in question resolves to a declared section."""

    @pytest.mark.parametrize("definition", BUILTIN_DEFINITIONS, ids=lambda d: d.id.value)
    def test_every_question_has_a_section(self, definition):
        declared = {s.id for s in definition.sections}
        for question in definition.questions:
            assert resolve_section(definition, question) in declared, question.id

    def test_moca_delayed_recall_not_taken_by_orientation(self, catalog):
        moca = catalog.get_definition(InstrumentId.MOCA)
        question = moca.get_question("moca_delayed_recall")
        assert resolve_section(moca, question) == "delayed_recall"

    def test_explicit_section_wins(self, catalog):
        ad8 = catalog.get_definition(InstrumentId.AD8)
        assert resolve_section(ad8, ad8.get_question("ad8_q3")) == "memory"

    def test_question_counts(self, catalog):
        counts = {i: len(catalog.get_definition(i).questions) for i in catalog.list_instruments()}
        assert counts == {
            InstrumentId.MOCA: 23,
            InstrumentId.PHQ9: 9,
            InstrumentId.MMSE: 20,
            InstrumentId.AD8: 8,
            InstrumentId.PARKINSONS: 12,
        }


class TestValidation:
    """validate_definition rejects broken definitions."""

    def test_duplicate_question_ids(self):
        broken = PHQ9.model_copy(update={"questions": PHQ9.questions + (PHQ9.questions[0],)})
        with pytest.raises(CatalogError, match="duplicate"):
            validate_definition(broken)

    def test_ranges_must_span_score_range(self):
        mapping = PHQ9.risk_mapping.model_copy(update={"ranges": PHQ9.risk_mapping.ranges[:2]})
        with pytest.raises(CatalogError, match="span"):
            validate_definition(PHQ9.model_copy(update={"risk_mapping": mapping}))

    def test_ranges_must_not_leave_gaps(self):
        low, moderate, high = PHQ9.risk_mapping.ranges
        gapped = moderate.model_copy(update={"score_min": Decimal(12)})
        mapping = PHQ9.risk_mapping.model_copy(update={"ranges": (low, gapped, high)})
        with pytest.raises(CatalogError, match="gap"):
            validate_definition(PHQ9.model_copy(update={"risk_mapping": mapping}))

    def test_breakpoints_must_be_ordered(self):
        points = tuple(reversed(PHQ9.risk_mapping.breakpoints))
        mapping = PHQ9.risk_mapping.model_copy(update={"breakpoints": points})
        with pytest.raises(CatalogError, match="ordered"):
            validate_definition(PHQ9.model_copy(update={"risk_mapping": mapping}))

    def test_custom_algorithm_requires_strategy(self):
        mapping = PHQ9.risk_mapping.model_copy(update={"algorithm": RiskAlgorithm.CUSTOM})
        with pytest.raises(CatalogError, match="strategy"):
            validate_definition(PHQ9.model_copy(update={"risk_mapping": mapping}))

    def test_unknown_explicit_section(self):
        stray = Question(id="phq9_extra", section="sleep")
        broken = PHQ9.model_copy(update={"questions": PHQ9.questions + (stray,)})
        with pytest.raises(CatalogError, match="unknown section"):
            validate_definition(broken)

    def test_builtins_are_valid(self):
        for definition in BUILTIN_DEFINITIONS:
            validate_definition(
                definition,
                allow_max_score_mismatch=definition.id in KNOWN_MAX_SCORE_DISCREPANCIES,
            )
