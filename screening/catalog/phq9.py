"""Patient Health Questionnaire-9 (PHQ-9), Spanish version.

Nine items scored 0-3 over the last two weeks; 27 points. Item 9 screens
for thoughts of self-harm.

Risk curve (score → %)
----------------------
  0 → 0,  4 → 5,  9 → 20,  14 → 40,  19 → 70,  27 → 100
"""
from screening.catalog.builders import breakpoints, d, option_question, risk_range
from screening.catalog.demographics import DEPRESSION_SCALE
from screening.models.enums import InstrumentId, RiskAlgorithm, RiskCategory
from screening.models.instrument import (
    InstrumentDefinition,
    RiskMapping,
    ScoringConfig,
    Section,
    SectionScoring,
)

SUICIDE_ITEM_ID = "phq9_q9"

FREQUENCY_LABELS = (
    "Para nada",
    "Varios días",
    "Más de la mitad de los días",
    "Casi todos los días",
)

_ITEMS = (
    "Poco interés o placer en hacer cosas",
    "Se ha sentido decaído(a), deprimido(a) o sin esperanzas",
    "Dificultad para quedarse o permanecer dormido(a), o dormir demasiado",
    "Se ha sentido cansado(a) o con poca energía",
    "Falta de apetito o comer en exceso",
    "Se ha sentido mal con usted mismo(a), o que es un fracaso o que ha quedado "
    "mal con usted mismo(a) o con su familia",
    "Dificultad para concentrarse en cosas, tales como leer el periódico o ver la televisión",
    "¿Se ha movido o hablado tan lento que otras personas podrían haberlo(a) notado? "
    "O lo contrario: muy inquieto(a) o agitado(a)",
    "Pensamientos de que estaría mejor muerto(a) o de lastimarse de alguna manera",
)

PHQ9 = InstrumentDefinition(
    id=InstrumentId.PHQ9,
    name="Patient Health Questionnaire-9 (PHQ-9)",
    description="Cribado de síntomas depresivos en las últimas dos semanas",
    sections=(
        Section(id="depression_symptoms", name="Síntomas depresivos", markers=("phq9_q",)),
    ),
    questions=tuple(
        option_question(f"phq9_q{i}", text, FREQUENCY_LABELS)
        for i, text in enumerate(_ITEMS, start=1)
    ),
    scoring=ScoringConfig(
        max_score=d(27),
        sections=(SectionScoring(section_id="depression_symptoms", max_score=d(27)),),
    ),
    risk_mapping=RiskMapping(
        algorithm=RiskAlgorithm.THRESHOLD,
        ranges=(
            risk_range(RiskCategory.LOW, (0, 9), (0, 20)),
            risk_range(RiskCategory.MODERATE, (10, 14), (24, 40)),
            risk_range(RiskCategory.HIGH, (15, 27), (46, 100)),
        ),
        breakpoints=breakpoints((0, 0), (4, 5), (9, 20), (14, 40), (19, 70), (27, 100)),
        low_cut=d(20),
        moderate_cut=d(40),
        confidence_width=d(8),
    ),
    demographics=DEPRESSION_SCALE,
)
