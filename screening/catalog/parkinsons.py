"""Parkinson's disease symptom-severity screen.

Three weighted sections combined as Σ section_score × weight:

  motor            5 items × 0-4   max 20   weight 2
  non_motor        4 items × 0-3   max 12   weight 1.5
  daily_activities 3 items × 0-3   max  9   weight 1

The declared maximum is 44 while the section maximums add up to 41; both
values are kept as published and the catalog reports the mismatch.

Risk curve (score → %)
----------------------
  0 → 0,  8 → 10,  18 → 50,  44 → 90
"""
from screening.catalog.builders import breakpoints, d, option_question, risk_range
from screening.catalog.demographics import SYMPTOM_SEVERITY
from screening.models.enums import InstrumentId, RiskAlgorithm, RiskCategory
from screening.models.instrument import (
    InstrumentDefinition,
    RiskMapping,
    ScoringConfig,
    Section,
    SectionScoring,
)

MOTOR_LABELS = ("Nunca", "Raramente", "A veces", "Frecuentemente", "Siempre")
SYMPTOM_LABELS = ("Nunca", "Leve", "Moderado", "Severo")

_MOTOR = (
    ("parkinsons_tremor",
     "¿Ha notado temblor en las manos, brazos o piernas cuando están en reposo?"),
    ("parkinsons_rigidity",
     "¿Ha notado rigidez o tensión en sus músculos, especialmente en brazos, piernas o cuello?"),
    ("parkinsons_bradykinesia",
     "¿Ha notado que sus movimientos se han vuelto más lentos de lo normal?"),
    ("parkinsons_balance", "¿Ha tenido problemas de equilibrio o inestabilidad al caminar?"),
    ("parkinsons_gait",
     "¿Ha notado cambios en su forma de caminar (pasos más cortos, arrastrando los pies, "
     "dificultad para iniciar la marcha)?"),
)
_NON_MOTOR = (
    ("parkinsons_smell", "¿Ha notado pérdida o disminución del sentido del olfato?"),
    ("parkinsons_sleep",
     "¿Ha tenido problemas para dormir, incluyendo movimientos violentos durante los sueños?"),
    ("parkinsons_constipation",
     "¿Ha experimentado estreñimiento crónico (menos de 3 evacuaciones por semana)?"),
    ("parkinsons_mood",
     "¿Ha experimentado cambios en su estado de ánimo, incluyendo depresión, ansiedad o apatía?"),
)
_DAILY = (
    ("parkinsons_handwriting",
     "¿Ha notado que su letra se ha vuelto más pequeña o más difícil de leer?"),
    ("parkinsons_voice", "¿Ha notado cambios en su voz (más suave, ronca o monótona)?"),
    ("parkinsons_facial_expression",
     "¿Le han dicho que su expresión facial parece menos animada o que parece "
     "triste/enojado sin estarlo?"),
)

PARKINSONS = InstrumentDefinition(
    id=InstrumentId.PARKINSONS,
    name="Cribado de síntomas de Parkinson",
    description="Severidad de síntomas motores, no motores y de actividades diarias",
    sections=(
        Section(id="motor", name="Síntomas motores"),
        Section(id="non_motor", name="Síntomas no motores"),
        Section(id="daily_activities", name="Actividades diarias"),
    ),
    questions=(
        tuple(option_question(qid, text, MOTOR_LABELS, section="motor") for qid, text in _MOTOR)
        + tuple(option_question(qid, text, SYMPTOM_LABELS, section="non_motor")
                for qid, text in _NON_MOTOR)
        + tuple(option_question(qid, text, SYMPTOM_LABELS, section="daily_activities")
                for qid, text in _DAILY)
    ),
    scoring=ScoringConfig(
        max_score=d(44),
        formula="weighted_sum",
        sections=(
            SectionScoring(section_id="motor", max_score=d(20), weight=d(2)),
            SectionScoring(section_id="non_motor", max_score=d(12), weight=d("1.5")),
            SectionScoring(section_id="daily_activities", max_score=d(9), weight=d(1)),
        ),
    ),
    risk_mapping=RiskMapping(
        algorithm=RiskAlgorithm.WEIGHTED_THRESHOLD,
        ranges=(
            risk_range(RiskCategory.LOW, (0, 8), (0, 10)),
            risk_range(RiskCategory.MODERATE, (9, 18), (14, 50)),
            risk_range(RiskCategory.HIGH, (19, 44), ("51.5", 90)),
        ),
        breakpoints=breakpoints((0, 0), (8, 10), (18, 50), (44, 90)),
        low_cut=d(10),
        moderate_cut=d(50),
        confidence_width=d(15),
    ),
    demographics=SYMPTOM_SEVERITY,
)
