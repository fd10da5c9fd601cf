"""Pytest fixtures and configuration."""
from datetime import datetime, timezone

import pytest

from screening.catalog import InstrumentCatalog
from screening.engine import ScreeningEngine
from screening.models import Gender, Response, ScoringContext, UserProfile

# Monday 19 October 2026, northern-hemisphere autumn
REFERENCE_INSTANT = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)


def responses(answers: dict) -> list[Response]:
    """Build responses in dict order."""
    return [Response(question_id=qid, answer=answer) for qid, answer in answers.items()]


PERFECT_MOCA = {
    "moca_trail_making": True,
    "moca_cube_copy": {"stroke_count": 4},
    "moca_clock_drawing": {"stroke_count": 13},
    "moca_naming_lion": "León",
    "moca_naming_rhino": "rinoceronte",
    "moca_naming_camel": "Camello",
    "moca_memory_registration": True,
    "moca_digit_span": True,
    "moca_digit_span_backward": True,
    "moca_vigilance": {"correct_responses": 5},
    "moca_serial_7s": [93, 86, 79, 72, 65],
    "moca_sentence_repetition_1": "El gato siempre se esconde bajo el sofá cuando hay visitas",
    "moca_sentence_repetition_2": "Espero que él le entregue el mensaje una vez que ella se lo pida",
    "moca_verbal_fluency": ["foca", "fuego", "flor", "fama", "fila", "final",
                            "fino", "firma", "fruta", "feria", "fiesta"],
    "moca_similarities_1": "Son medios de transporte",
    "moca_similarities_2": "Ambos sirven para medir",
    "moca_delayed_recall": {"recalled_words": ["cara", "seda", "iglesia", "clavel", "rojo"]},
    "moca_date": "2026-10-19",
    "moca_month": "octubre",
    "moca_year": 2026,
    "moca_day": "Lunes",
    "moca_place": True,
    "moca_city": True,
}

PERFECT_MMSE = {
    "mmse_year": 2026,
    "mmse_season": "Otoño",
    "mmse_date": "2026-10-19",
    "mmse_day": "lunes",
    "mmse_month": 10,
    "mmse_country": "México",
    "mmse_state": True,
    "mmse_city": True,
    "mmse_hospital": True,
    "mmse_floor": True,
    "mmse_registration": {"words": ["pelota", "bandera", "árbol"]},
    "mmse_serial_7s": [93, 86, 79, 72, 65],
    "mmse_recall": {"recalled_words": ["PELOTA", "BANDERA", "ARBOL"]},
    "mmse_naming_watch": "reloj",
    "mmse_naming_pencil": "lápiz",
    "mmse_repetition": "Ni sí, ni no, ni pero",
    "mmse_three_stage_command": ["tomar_papel", "doblar_papel", "poner_en_suelo"],
    "mmse_reading": True,
    "mmse_writing": "Hoy es un buen día.",
    "mmse_copying": {"stroke_count": 10},
}

# Nine points: place orientation, naming, reading and two registration words
MMSE_SCORE_9 = {
    "mmse_state": True,
    "mmse_city": True,
    "mmse_hospital": True,
    "mmse_floor": True,
    "mmse_reading": True,
    "mmse_naming_watch": "reloj",
    "mmse_naming_pencil": "lapiz",
    "mmse_registration": {"words": ["pelota", "bandera"]},
}


def phq9_answers(*values: int) -> dict:
    return {f"phq9_q{i}": value for i, value in enumerate(values, start=1)}


@pytest.fixture
def reference_instant():
    return REFERENCE_INSTANT


@pytest.fixture
def catalog():
    return InstrumentCatalog()


@pytest.fixture
def engine(catalog):
    return ScreeningEngine(catalog=catalog)


@pytest.fixture
def adult_profile():
    """Profile inside every neutral demographic band."""
    return UserProfile(age=50, years_of_education=14, gender=Gender.OTHER)


@pytest.fixture
def elderly_profile():
    return UserProfile(age=78, years_of_education=6, gender=Gender.FEMALE)


@pytest.fixture
def context(adult_profile, reference_instant):
    return ScoringContext(profile=adult_profile, reference_instant=reference_instant)
