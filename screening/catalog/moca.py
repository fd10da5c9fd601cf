"""Montreal Cognitive Assessment (MoCA), Spanish version.

Eight sections, 30 points. Registration is administered but not scored;
one point is added for 12 years of education or fewer.

Risk curve (score → %)
----------------------
  30 → 1,  26 → 5,  25 → 5,  18 → 40,  17 → 40,  0 → 95
"""
from screening.catalog.builders import breakpoints, d, risk_range
from screening.catalog.demographics import COGNITIVE_SCREEN
from screening.models.enums import InstrumentId, RiskAlgorithm, RiskCategory
from screening.models.instrument import (
    CalculatedRule,
    CustomRule,
    DirectRule,
    InstrumentDefinition,
    LookupRule,
    Question,
    RiskMapping,
    ScoreAdjustment,
    ScoringConfig,
    Section,
    SectionScoring,
)

RECALL_WORDS = ("CARA", "SEDA", "IGLESIA", "CLAVEL", "ROJO")

# Stroke thresholds for the placeholder drawing heuristic
CLOCK_FEATURES = (
    {"name": "contour", "min_strokes": 0},
    {"name": "numbers", "min_strokes": 5},
    {"name": "hands", "min_strokes": 10},
    {"name": "time_accuracy", "min_strokes": 12},
)
CUBE_FEATURES = ({"name": "cube", "min_strokes": 3},)

# MoCA conversion of correct subtractions: 0 → 0, 1 → 1, 2-3 → 2, 4-5 → 3
SERIAL_SEVENS_POINTS = (0, 1, 2, 2, 3, 3)


def _lookup(answers: tuple[str, ...], match: str = "exact") -> LookupRule:
    return LookupRule(
        table={answer: d(1) for answer in answers},
        match=match,
        accent_insensitive=True,
    )


SECTIONS = (
    Section(id="visuospatial", name="Visuoespacial / Ejecutiva",
            markers=("trail_making", "cube_copy", "clock_drawing")),
    Section(id="naming", name="Identificación", markers=("naming",)),
    Section(id="memory", name="Memoria", markers=("memory",)),
    Section(id="attention", name="Atención",
            markers=("digit_span", "vigilance", "serial_7s", "attention")),
    Section(id="language", name="Lenguaje",
            markers=("sentence_repetition", "verbal_fluency", "fluency")),
    Section(id="abstraction", name="Abstracción", markers=("similarities", "abstraction")),
    Section(id="delayed_recall", name="Recuerdo diferido", markers=("delayed_recall",)),
    Section(id="orientation", name="Orientación",
            markers=("date", "month", "year", "day", "place", "city")),
)

QUESTIONS = (
    # Visuospatial / executive
    Question(id="moca_trail_making",
             text="Conecte los números y letras alternando: 1-A-2-B-3-C-4-D-5",
             rule=DirectRule()),
    Question(id="moca_cube_copy", text="Copie el cubo exactamente como se muestra",
             rule=CustomRule(strategy="drawing_heuristic",
                             params={"features": CUBE_FEATURES, "max_points": 1})),
    Question(id="moca_clock_drawing", text="Dibuje un reloj que marque las 11:10",
             rule=CustomRule(strategy="drawing_heuristic",
                             params={"features": CLOCK_FEATURES, "max_points": 3})),
    # Naming
    Question(id="moca_naming_lion", text="¿Qué animal es este?",
             rule=_lookup(("león", "leona"))),
    Question(id="moca_naming_rhino", text="¿Qué animal es este?",
             rule=_lookup(("rinoceronte", "rino"))),
    Question(id="moca_naming_camel", text="¿Qué animal es este?",
             rule=_lookup(("camello", "dromedario"))),
    # Memory (registration only)
    Question(id="moca_memory_registration",
             text="Repita estas palabras: CARA, SEDA, IGLESIA, CLAVEL, ROJO",
             rule=DirectRule(points=d(0))),
    # Attention
    Question(id="moca_digit_span", text="Repita los números en orden directo: 2-1-8-5-4",
             rule=DirectRule()),
    Question(id="moca_digit_span_backward", text="Repita los números en orden inverso: 7-4-2",
             rule=DirectRule()),
    Question(id="moca_vigilance", text="Toque cuando escuche la letra A",
             rule=CalculatedRule(formula="count_threshold",
                                 params={"key": "correct_responses", "min_count": 3})),
    Question(id="moca_serial_7s", text="Reste 7 de 100, y siga restando 7 de cada resultado",
             rule=CalculatedRule(formula="serial_subtraction",
                                 params={"start": 100, "step": 7, "count": 5,
                                         "points_table": SERIAL_SEVENS_POINTS})),
    # Language
    Question(id="moca_sentence_repetition_1",
             text='Repita esta oración: "El gato siempre se esconde bajo el sofá cuando hay visitas"',
             rule=_lookup(("el gato siempre se esconde bajo el sofá cuando hay visitas",))),
    Question(id="moca_sentence_repetition_2",
             text='Repita esta oración: "Espero que él le entregue el mensaje una vez que ella se lo pida"',
             rule=_lookup(("espero que él le entregue el mensaje una vez que ella se lo pida",))),
    Question(id="moca_verbal_fluency",
             text="Diga todas las palabras que pueda que comiencen con la letra F (en 1 minuto)",
             rule=CalculatedRule(formula="word_count_threshold", params={"min_words": 11})),
    # Abstraction
    Question(id="moca_similarities_1", text="¿En qué se parecen un tren y una bicicleta?",
             rule=_lookup(("transporte", "medios de transporte", "vehículos",
                           "se mueven", "sirven para moverse", "para transportarse"),
                          match="contains")),
    Question(id="moca_similarities_2", text="¿En qué se parecen un reloj y una regla?",
             rule=_lookup(("instrumentos de medición", "miden", "sirven para medir",
                           "herramientas de medición"),
                          match="contains")),
    # Delayed recall
    Question(id="moca_delayed_recall", text="¿Cuáles eran las 5 palabras que le dije al principio?",
             rule=CustomRule(strategy="recall_match", params={"target_words": RECALL_WORDS})),
    # Orientation
    Question(id="moca_date", text="¿Qué fecha es hoy?",
             rule=CustomRule(strategy="orientation_date", params={"tolerance_days": 1})),
    Question(id="moca_month", text="¿En qué mes estamos?",
             rule=CustomRule(strategy="orientation_month")),
    Question(id="moca_year", text="¿En qué año estamos?",
             rule=CustomRule(strategy="orientation_year")),
    Question(id="moca_day", text="¿Qué día de la semana es hoy?",
             rule=CustomRule(strategy="orientation_weekday")),
    Question(id="moca_place", text="¿En qué lugar estamos?", rule=DirectRule()),
    Question(id="moca_city", text="¿En qué ciudad estamos?", rule=DirectRule()),
)

MOCA = InstrumentDefinition(
    id=InstrumentId.MOCA,
    name="Montreal Cognitive Assessment (MoCA)",
    description="Cribado de deterioro cognitivo leve",
    sections=SECTIONS,
    questions=QUESTIONS,
    scoring=ScoringConfig(
        min_score=d(0),
        max_score=d(30),
        sections=(
            SectionScoring(section_id="visuospatial", max_score=d(5)),
            SectionScoring(section_id="naming", max_score=d(3)),
            SectionScoring(section_id="memory", max_score=d(0)),
            SectionScoring(section_id="attention", max_score=d(6)),
            SectionScoring(section_id="language", max_score=d(3)),
            SectionScoring(section_id="abstraction", max_score=d(2)),
            SectionScoring(section_id="delayed_recall", max_score=d(5)),
            SectionScoring(section_id="orientation", max_score=d(6)),
        ),
        adjustments=(
            ScoreAdjustment(field="years_of_education", operator="<=", threshold=12,
                            points=d(1), description="Ajuste por escolaridad ≤ 12 años"),
        ),
    ),
    risk_mapping=RiskMapping(
        algorithm=RiskAlgorithm.THRESHOLD,
        ranges=(
            risk_range(RiskCategory.HIGH, (0, 17), (95, 40)),
            risk_range(RiskCategory.MODERATE, (18, 25), (40, 5)),
            risk_range(RiskCategory.LOW, (26, 30), (5, 1)),
        ),
        breakpoints=breakpoints((0, 95), (17, 40), (18, 40), (25, 5), (26, 5), (30, 1)),
        low_cut=d(5),
        moderate_cut=d(40),
        confidence_width=d(8),
    ),
    demographics=COGNITIVE_SCREEN,
)
