"""AD8 Dementia Screening Interview (informant version).

Eight yes/no items about change over the last years; 8 points. Items
are grouped by cognitive domain through explicit section ids.

Risk curve (score → %)
----------------------
  0 → 0,  1 → 2.5,  2 → 20,  3 → 40,  4 → 40,  8 → 80
"""
from screening.catalog.builders import breakpoints, d, option_question, risk_range
from screening.catalog.demographics import INFORMANT_INTERVIEW
from screening.models.enums import InstrumentId, RiskAlgorithm, RiskCategory
from screening.models.instrument import (
    InstrumentDefinition,
    RiskMapping,
    ScoringConfig,
    Section,
    SectionScoring,
)

YES_NO = ("No", "Sí")

_ITEMS = (
    ("ad8_q1", "executive_function",
     "¿Ha tenido problemas con el juicio (por ejemplo, caer en estafas, tomar "
     "decisiones financieras pobres, comprar regalos inapropiados)?"),
    ("ad8_q2", "behavioral", "¿Ha tenido menos interés en pasatiempos/actividades?"),
    ("ad8_q3", "memory",
     "¿Repite las mismas cosas una y otra vez (preguntas, historias o declaraciones)?"),
    ("ad8_q4", "executive_function",
     "¿Ha tenido problemas para aprender a usar herramientas, aparatos o dispositivos "
     "(por ejemplo, computadora, microondas, control remoto)?"),
    ("ad8_q5", "orientation", "¿Ha olvidado el mes o el año correcto?"),
    ("ad8_q6", "executive_function",
     "¿Ha tenido problemas para manejar asuntos financieros complicados (por ejemplo, "
     "balancear la chequera, impuestos sobre la renta, pagar cuentas)?"),
    ("ad8_q7", "memory", "¿Ha tenido problemas para recordar citas?"),
    ("ad8_q8", "general_cognition", "¿Ha tenido problemas constantes de pensamiento y/o memoria?"),
)

AD8 = InstrumentDefinition(
    id=InstrumentId.AD8,
    name="AD8 Dementia Screening Interview",
    description="Entrevista a informante sobre cambios cognitivos",
    sections=(
        Section(id="executive_function", name="Función ejecutiva"),
        Section(id="memory", name="Memoria"),
        Section(id="behavioral", name="Conducta"),
        Section(id="orientation", name="Orientación"),
        Section(id="general_cognition", name="Cognición general"),
    ),
    questions=tuple(
        option_question(question_id, text, YES_NO, section=section)
        for question_id, section, text in _ITEMS
    ),
    scoring=ScoringConfig(
        max_score=d(8),
        sections=(
            SectionScoring(section_id="executive_function", max_score=d(3)),
            SectionScoring(section_id="memory", max_score=d(2)),
            SectionScoring(section_id="behavioral", max_score=d(1)),
            SectionScoring(section_id="orientation", max_score=d(1)),
            SectionScoring(section_id="general_cognition", max_score=d(1)),
        ),
    ),
    risk_mapping=RiskMapping(
        algorithm=RiskAlgorithm.THRESHOLD,
        ranges=(
            risk_range(RiskCategory.LOW, (0, 1), (0, "2.5")),
            risk_range(RiskCategory.MODERATE, (2, 3), (20, 40)),
            risk_range(RiskCategory.HIGH, (4, 8), (40, 80)),
        ),
        breakpoints=breakpoints((0, 0), (1, "2.5"), (2, 20), (3, 40), (4, 40), (8, 80)),
        low_cut=d(5),
        moderate_cut=d(40),
        confidence_width=d(12),
    ),
    demographics=INFORMANT_INTERVIEW,
)
