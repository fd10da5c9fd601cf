"""Mini-Mental State Examination (MMSE), Spanish version.

Five sections, 30 points, no demographic score adjustment.

Risk curve (score → %)
----------------------
  0 → 95,  11 → 70,  12 → 70,  17 → 40,  18 → 40,  23 → 5,  24 → 5,  29 → 0
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
    ScoringConfig,
    Section,
    SectionScoring,
)

REGISTRATION_WORDS = ("PELOTA", "BANDERA", "ÁRBOL")
COMMAND_STEPS = ("tomar_papel", "doblar_papel", "poner_en_suelo")
PENTAGON_FEATURES = ({"name": "intersecting_pentagons", "min_strokes": 5},)


def _lookup(*answers: str) -> LookupRule:
    return LookupRule(table={answer: d(1) for answer in answers}, accent_insensitive=True)


SECTIONS = (
    Section(id="orientation", name="Orientación",
            markers=("mmse_year", "mmse_season", "mmse_date", "mmse_day", "mmse_month",
                     "mmse_country", "mmse_state", "mmse_city", "mmse_hospital", "mmse_floor")),
    Section(id="registration", name="Registro", markers=("mmse_registration",)),
    Section(id="attention_calculation", name="Atención y Cálculo", markers=("mmse_serial_7s",)),
    Section(id="recall", name="Recuerdo", markers=("mmse_recall",)),
    Section(id="language", name="Lenguaje",
            markers=("mmse_naming", "mmse_repetition", "mmse_three_stage",
                     "mmse_reading", "mmse_writing", "mmse_copying")),
)

QUESTIONS = (
    # Orientation in time
    Question(id="mmse_year", text="¿En qué año estamos?",
             rule=CustomRule(strategy="orientation_year")),
    Question(id="mmse_season", text="¿En qué estación del año estamos?",
             rule=CustomRule(strategy="orientation_season")),
    Question(id="mmse_date", text="¿Qué fecha es hoy?",
             rule=CustomRule(strategy="orientation_date", params={"tolerance_days": 1})),
    Question(id="mmse_day", text="¿Qué día de la semana es hoy?",
             rule=CustomRule(strategy="orientation_weekday")),
    Question(id="mmse_month", text="¿En qué mes estamos?",
             rule=CustomRule(strategy="orientation_month")),
    # Orientation in place
    Question(id="mmse_country", text="¿En qué país estamos?",
             rule=_lookup("méxico", "estados unidos mexicanos")),
    Question(id="mmse_state", text="¿En qué estado o provincia estamos?", rule=DirectRule()),
    Question(id="mmse_city", text="¿En qué ciudad estamos?", rule=DirectRule()),
    Question(id="mmse_hospital", text="¿En qué lugar estamos? (hospital, clínica, casa, etc.)",
             rule=DirectRule()),
    Question(id="mmse_floor", text="¿En qué piso estamos?", rule=DirectRule()),
    # Registration
    Question(id="mmse_registration", text="Repita estas tres palabras: PELOTA, BANDERA, ÁRBOL",
             rule=CustomRule(strategy="recall_match",
                             params={"target_words": REGISTRATION_WORDS,
                                     "answer_keys": ("words",),
                                     "accent_insensitive": True})),
    # Attention and calculation
    Question(id="mmse_serial_7s",
             text="Reste 7 de 100 y siga restando 7 del resultado. Dé los primeros 5 resultados.",
             rule=CalculatedRule(formula="serial_subtraction",
                                 params={"start": 100, "step": 7, "count": 5})),
    # Recall
    Question(id="mmse_recall", text="Recuerde las tres palabras que le dije al principio",
             rule=CustomRule(strategy="recall_match",
                             params={"target_words": REGISTRATION_WORDS,
                                     "answer_keys": ("recalled_words", "words"),
                                     "accent_insensitive": True})),
    # Language
    Question(id="mmse_naming_watch", text="¿Cómo se llama esto? (mostrar reloj)",
             rule=_lookup("reloj", "reloj de pulsera", "reloj de mano")),
    Question(id="mmse_naming_pencil", text="¿Cómo se llama esto? (mostrar lápiz)",
             rule=_lookup("lápiz", "pluma", "bolígrafo")),
    Question(id="mmse_repetition", text='Repita exactamente esta frase: "Ni sí, ni no, ni pero"',
             rule=_lookup("ni sí, ni no, ni pero", "ni si ni no ni pero")),
    Question(id="mmse_three_stage_command",
             text='Siga estas instrucciones: "Tome el papel con la mano derecha, '
                  'dóblelo por la mitad y póngalo en el suelo"',
             rule=CustomRule(strategy="multi_step_instruction",
                             params={"max_steps": 3, "steps": COMMAND_STEPS})),
    Question(id="mmse_reading", text='Lea esta frase y haga lo que dice: "CIERRE LOS OJOS"',
             rule=DirectRule()),
    Question(id="mmse_writing", text="Escriba una oración completa sobre cualquier tema",
             rule=CustomRule(strategy="sentence_writing", params={"min_length": 6})),
    Question(id="mmse_copying", text="Copie este dibujo exactamente",
             rule=CustomRule(strategy="drawing_heuristic",
                             params={"features": PENTAGON_FEATURES, "max_points": 1})),
)

MMSE = InstrumentDefinition(
    id=InstrumentId.MMSE,
    name="Mini-Mental State Examination (MMSE)",
    description="Evaluación breve del estado cognitivo",
    sections=SECTIONS,
    questions=QUESTIONS,
    scoring=ScoringConfig(
        max_score=d(30),
        sections=(
            SectionScoring(section_id="orientation", max_score=d(10)),
            SectionScoring(section_id="registration", max_score=d(3)),
            SectionScoring(section_id="attention_calculation", max_score=d(5)),
            SectionScoring(section_id="recall", max_score=d(3)),
            SectionScoring(section_id="language", max_score=d(9)),
        ),
    ),
    risk_mapping=RiskMapping(
        algorithm=RiskAlgorithm.THRESHOLD,
        ranges=(
            risk_range(RiskCategory.HIGH, (0, 11), (95, 70)),
            risk_range(RiskCategory.HIGH, (12, 17), (70, 40)),
            risk_range(RiskCategory.MODERATE, (18, 23), (40, 5)),
            risk_range(RiskCategory.LOW, (24, 30), (5, 0)),
        ),
        breakpoints=breakpoints(
            (0, 95), (11, 70), (12, 70), (17, 40), (18, 40), (23, 5), (24, 5), (29, 0), (30, 0),
        ),
        low_cut=d(5),
        moderate_cut=d(40),
        confidence_width=d(8),
    ),
    demographics=COGNITIVE_SCREEN,
)
