"""Recommendation Catalog: read-only recommendation templates.

Templates are grouped as
  - medical templates per instrument × risk category,
  - lifestyle templates per lifestyle category,
  - emergency templates, injected when an emergency trigger fires,
  - rule templates, selected by instrument-specific score rules,
  - composite templates, used when several results are combined.

Templates carry no instrument or risk level when shared; the engine
stamps both when it selects a template for a result.
"""
from typing import Iterable, Mapping, Optional

import structlog

from screening.models.enums import (
    InstrumentId,
    LifestyleCategory,
    Priority,
    RecommendationCategory,
    RecommendationType,
    RiskCategory,
)
from screening.models.recommendation import Recommendation, Resource

logger = structlog.get_logger(__name__)

MEDICAL = RecommendationType.MEDICAL
LIFESTYLE = RecommendationType.LIFESTYLE
MONITORING = RecommendationType.MONITORING
EDUCATIONAL = RecommendationType.EDUCATIONAL

IMMEDIATE = RecommendationCategory.IMMEDIATE
SHORT_TERM = RecommendationCategory.SHORT_TERM
LONG_TERM = RecommendationCategory.LONG_TERM

CRISIS_LINE = Resource(
    title="National suicide prevention line (24/7)",
    kind="phone",
    detail="800-290-0024",
)


def _rec(
    rec_id: str,
    type_: RecommendationType,
    category: RecommendationCategory,
    priority: Priority,
    title: str,
    description: str,
    steps: Iterable[str],
    follow_up_days: int,
    evidence_level: Optional[str] = None,
    resources: Iterable[Resource] = (),
) -> Recommendation:
    return Recommendation(
        id=rec_id,
        type=type_,
        category=category,
        priority=priority,
        title=title,
        description=description,
        action_steps=tuple(steps),
        resources=tuple(resources),
        follow_up_days=follow_up_days,
        evidence_level=evidence_level,
    )


# ── Medical templates per instrument × risk ─────────────────────────────────

MEDICAL_TEMPLATES: dict[tuple[InstrumentId, RiskCategory], tuple[Recommendation, ...]] = {
    (InstrumentId.MOCA, RiskCategory.LOW): (
        _rec("moca_low_routine_checkup", MEDICAL, LONG_TERM, Priority.LOW,
             "Routine medical check-up",
             "Keep yearly check-ups that include a brief cognitive review.",
             ("Schedule an annual visit with your primary-care doctor",
              "Repeat the cognitive screen in 12 months"),
             365, "B"),
    ),
    (InstrumentId.MOCA, RiskCategory.MODERATE): (
        _rec("moca_moderate_specialist", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Specialist consultation",
             "Results suggest possible mild cognitive impairment; a specialist should review them.",
             ("Request a referral to neurology or geriatrics",
              "Bring these results to the appointment",
              "Ask about a full neuropsychological assessment"),
             30, "A",
             (Resource(title="Public-health neurology network", kind="website"),)),
    ),
    (InstrumentId.MOCA, RiskCategory.HIGH): (
        _rec("moca_high_urgent_evaluation", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Urgent neurological evaluation",
             "Results indicate significant cognitive impairment that needs prompt evaluation.",
             ("Book a neurology appointment within days",
              "Go with a family member or carer",
              "Prepare a list of current medications"),
             3, "A",
             (Resource(title="Neurological emergency services", kind="phone"),)),
    ),
    (InstrumentId.PHQ9, RiskCategory.LOW): (
        _rec("phq9_low_wellness", LIFESTYLE, LONG_TERM, Priority.LOW,
             "Mental well-being",
             "Few depressive symptoms; keep up habits that protect mood.",
             ("Keep regular sleep and activity routines",
              "Stay in touch with friends and family"),
             180, "B"),
    ),
    (InstrumentId.PHQ9, RiskCategory.MODERATE): (
        _rec("phq9_moderate_counseling", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Psychological counselling",
             "Moderate depressive symptoms benefit from structured psychological support.",
             ("Contact a psychologist or counselling service",
              "Discuss the results with your doctor"),
             14, "A"),
    ),
    (InstrumentId.PHQ9, RiskCategory.HIGH): (
        _rec("phq9_high_psychiatric_care", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Specialised psychiatric care",
             "Severe depressive symptoms require specialised care.",
             ("Arrange a psychiatric consultation as soon as possible",
              "Tell someone you trust how you are feeling",
              "Keep the crisis line number at hand"),
             1, "A", (CRISIS_LINE,)),
    ),
    (InstrumentId.MMSE, RiskCategory.LOW): (
        _rec("mmse_low_cognitive_health", LIFESTYLE, LONG_TERM, Priority.LOW,
             "Preventive cognitive health",
             "Cognitive performance is within the expected range.",
             ("Stay mentally and physically active",
              "Repeat the screen in two years"),
             730, "B"),
    ),
    (InstrumentId.MMSE, RiskCategory.MODERATE): (
        _rec("mmse_moderate_geriatric_eval", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Geriatric evaluation",
             "Results suggest cognitive changes that a geriatric assessment should clarify.",
             ("Request a comprehensive geriatric assessment",
              "Review medications that can affect cognition"),
             21, "A"),
    ),
    (InstrumentId.MMSE, RiskCategory.HIGH): (
        _rec("mmse_high_dementia_workup", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Dementia work-up",
             "Results are compatible with dementia and need a diagnostic work-up.",
             ("See a neurologist or memory clinic",
              "Request blood tests and brain imaging",
              "Involve family in care planning"),
             7, "A"),
    ),
    (InstrumentId.AD8, RiskCategory.LOW): (
        _rec("ad8_low_monitoring", MONITORING, LONG_TERM, Priority.LOW,
             "Cognitive monitoring",
             "The informant reports few changes; keep observing over time.",
             ("Repeat the informant interview in a year",
              "Note any new memory or behaviour changes"),
             365, "B"),
    ),
    (InstrumentId.AD8, RiskCategory.MODERATE): (
        _rec("ad8_moderate_memory_clinic", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Memory clinic referral",
             "Reported changes warrant assessment at a memory clinic.",
             ("Ask for a memory-clinic referral",
              "Bring the informant to the appointment"),
             30, "A"),
    ),
    (InstrumentId.AD8, RiskCategory.HIGH): (
        _rec("ad8_high_dementia_evaluation", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Urgent dementia evaluation",
             "Many reported changes; a dementia evaluation should be arranged soon.",
             ("Arrange a specialist evaluation within two weeks",
              "Review safety at home and with finances"),
             14, "A"),
    ),
    (InstrumentId.PARKINSONS, RiskCategory.LOW): (
        _rec("parkinsons_low_prevention", LIFESTYLE, LONG_TERM, Priority.LOW,
             "Parkinson's prevention",
             "Few motor or non-motor symptoms reported.",
             ("Keep regular physical activity",
              "Report any new tremor or slowness to your doctor"),
             365, "B"),
    ),
    (InstrumentId.PARKINSONS, RiskCategory.MODERATE): (
        _rec("parkinsons_moderate_neurology", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Neurological evaluation",
             "Reported symptoms should be assessed by a neurologist.",
             ("Request a neurology appointment",
              "Keep a diary of symptoms and when they occur"),
             30, "A"),
    ),
    (InstrumentId.PARKINSONS, RiskCategory.HIGH): (
        _rec("parkinsons_high_movement_specialist", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Movement-disorder specialist",
             "Symptom burden is high; a movement-disorder specialist should evaluate it.",
             ("Book a movement-disorder clinic appointment",
              "Record a short video of the symptoms for the visit"),
             14, "A",
             (Resource(title="Parkinson's specialist directory", kind="website"),)),
    ),
}


# ── Lifestyle templates ─────────────────────────────────────────────────────

LIFESTYLE_TEMPLATES: dict[LifestyleCategory, tuple[Recommendation, ...]] = {
    LifestyleCategory.EXERCISE: (
        _rec("lifestyle_aerobic_exercise", LIFESTYLE, LONG_TERM, Priority.MEDIUM,
             "Aerobic exercise",
             "Regular aerobic activity supports brain and heart health.",
             ("Walk briskly 30 minutes, five days a week",
              "Start gently and increase gradually"),
             30, "A",
             (Resource(title="Exercise routines for older adults", kind="document"),)),
        _rec("lifestyle_strength_training", LIFESTYLE, LONG_TERM, Priority.MEDIUM,
             "Strength training",
             "Muscle-strengthening exercise improves balance and independence.",
             ("Do resistance exercises twice a week",
              "Include balance practice"),
             30, "B"),
    ),
    LifestyleCategory.NUTRITION: (
        _rec("lifestyle_mediterranean_diet", LIFESTYLE, LONG_TERM, Priority.MEDIUM,
             "Mediterranean diet",
             "A Mediterranean-style diet is associated with slower cognitive decline.",
             ("Eat vegetables, fruit, legumes and whole grains daily",
              "Use olive oil and eat fish twice a week"),
             30, "A",
             (Resource(title="Mediterranean diet guide", kind="document"),)),
        _rec("lifestyle_brain_foods", LIFESTYLE, LONG_TERM, Priority.MEDIUM,
             "Brain-healthy foods",
             "Some foods provide nutrients linked with brain health.",
             ("Add nuts, berries and leafy greens",
              "Limit ultra-processed food and added sugar"),
             30, "B"),
    ),
    LifestyleCategory.COGNITIVE: (
        _rec("lifestyle_mental_stimulation", LIFESTYLE, LONG_TERM, Priority.MEDIUM,
             "Mental stimulation",
             "Challenging mental activities help maintain cognitive reserve.",
             ("Read, play strategy games or do puzzles daily",
              "Vary the activities every few weeks"),
             30, "B",
             (Resource(title="Brain-training applications", kind="website"),)),
        _rec("lifestyle_lifelong_learning", LIFESTYLE, LONG_TERM, Priority.MEDIUM,
             "Lifelong learning",
             "Learning new skills builds cognitive reserve.",
             ("Take a course or learn a language or instrument",),
             90, "B"),
    ),
    LifestyleCategory.SLEEP: (
        _rec("lifestyle_sleep_hygiene", LIFESTYLE, SHORT_TERM, Priority.MEDIUM,
             "Sleep hygiene",
             "Good sleep supports memory consolidation and mood.",
             ("Keep fixed bed and wake times",
              "Avoid screens and caffeine in the evening",
              "Aim for 7 to 8 hours of sleep"),
             14, "B"),
    ),
    LifestyleCategory.SOCIAL: (
        _rec("lifestyle_social_engagement", LIFESTYLE, LONG_TERM, Priority.MEDIUM,
             "Social engagement",
             "Staying socially active protects mood and cognition.",
             ("Join a community group or volunteer",
              "Plan regular contact with family and friends"),
             30, "B"),
    ),
}


# ── Emergency templates ─────────────────────────────────────────────────────

EMERGENCY_TEMPLATES: dict[str, Recommendation] = {
    rec.id: rec for rec in (
        _rec("emergency_suicide_risk", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Suicide risk: immediate attention",
             "Thoughts of self-harm were reported. Seek help now.",
             ("Call the crisis line or emergency services now",
              "Do not stay alone; contact someone you trust",
              "Remove access to means of self-harm"),
             0, "A", (CRISIS_LINE,)),
        _rec("emergency_severe_confusion", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Severe confusion: urgent evaluation",
             "The score indicates severe cognitive impairment or acute confusion.",
             ("Seek same-day medical evaluation",
              "Rule out acute causes such as infection or medication effects",
              "Make sure the person is supervised"),
             0, "A"),
        _rec("emergency_comprehensive_evaluation", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Multiple risk factors: urgent evaluation",
             "A high-risk result combined with several risk factors needs prompt medical review.",
             ("Contact a doctor within 24 hours",
              "Share these results and the listed risk factors"),
             0, "B"),
    )
}


# ── Instrument-rule templates ───────────────────────────────────────────────

RULE_TEMPLATES: dict[str, Recommendation] = {
    rec.id: rec for rec in (
        # MoCA
        _rec("moca_urgent_consultation", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Urgent neurological consultation",
             "Significant cognitive impairment detected.",
             ("Book a neurology consultation within two weeks",
              "Bring a relative who can describe recent changes"),
             14, "A"),
        _rec("moca_neuroimaging", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Neuroimaging studies",
             "Brain imaging helps identify the cause of cognitive impairment.",
             ("Ask your doctor about MRI or CT imaging",),
             30, "A"),
        _rec("moca_specialist_evaluation", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Specialist evaluation",
             "Possible mild cognitive impairment; confirm with a specialist.",
             ("Request a neuropsychological evaluation",),
             30, "A"),
        _rec("moca_cognitive_monitoring", MONITORING, LONG_TERM, Priority.MEDIUM,
             "Cognitive monitoring",
             "Track cognitive performance over time.",
             ("Repeat the MoCA in six months",),
             180, "B"),
        _rec("moca_memory_training", LIFESTYLE, SHORT_TERM, Priority.MEDIUM,
             "Memory training",
             "Delayed recall was low; targeted memory practice can help.",
             ("Practise memory techniques such as association and visualisation",),
             30, "B"),
        _rec("moca_attention_exercises", LIFESTYLE, SHORT_TERM, Priority.MEDIUM,
             "Attention exercises",
             "Attention tasks were difficult; practise focused attention.",
             ("Do short daily concentration exercises",),
             30, "B"),
        # PHQ-9
        _rec("phq9_suicide_risk", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Follow-up of self-harm thoughts",
             "Thoughts of self-harm need same-week professional follow-up.",
             ("Schedule a mental-health appointment within 24 hours",
              "Create a safety plan with a professional"),
             1, "A", (CRISIS_LINE,)),
        _rec("phq9_psychiatric_care", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Psychiatric care",
             "Severe depression usually needs combined psychiatric treatment.",
             ("See a psychiatrist within a few days",),
             2, "A"),
        _rec("phq9_psychotherapy", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Psychotherapy",
             "Evidence-based psychotherapy is effective for depression.",
             ("Start cognitive behavioural therapy or a similar approach",),
             14, "A"),
        _rec("phq9_medication_evaluation", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Medication evaluation",
             "A doctor can assess whether antidepressant treatment is indicated.",
             ("Discuss treatment options with your doctor",),
             21, "A"),
        _rec("phq9_self_help", EDUCATIONAL, SHORT_TERM, Priority.MEDIUM,
             "Self-help strategies",
             "Structured self-help can ease mild to moderate symptoms.",
             ("Plan one pleasant activity per day",
              "Use a mood diary"),
             30, "B"),
        # MMSE
        _rec("mmse_severe_impairment", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Severe cognitive impairment",
             "The score indicates severe impairment.",
             ("Arrange a specialist assessment within days",),
             2, "A"),
        _rec("mmse_safety_assessment", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Home safety assessment",
             "Severe impairment raises safety risks at home.",
             ("Review driving, cooking and medication handling",
              "Consider supervision or care support"),
             7, "B"),
        _rec("mmse_moderate_impairment", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Moderate cognitive impairment",
             "The score indicates moderate impairment that needs specialist follow-up.",
             ("See a neurologist or geriatrician",),
             14, "A"),
        _rec("mmse_mild_impairment", MONITORING, SHORT_TERM, Priority.MEDIUM,
             "Mild cognitive changes",
             "Mild changes should be followed up and re-tested.",
             ("Repeat the screen and discuss with your doctor",),
             30, "B"),
        _rec("mmse_elderly_care", LIFESTYLE, SHORT_TERM, Priority.MEDIUM,
             "Healthy ageing support",
             "Specific support for people over 75.",
             ("Review hearing, vision and medications yearly",),
             30, "B"),
        # AD8
        _rec("ad8_dementia_evaluation", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Dementia evaluation",
             "Changes reported by the informant justify a dementia evaluation.",
             ("Arrange a cognitive evaluation with a specialist",),
             14, "A"),
        _rec("ad8_family_support", EDUCATIONAL, SHORT_TERM, Priority.HIGH,
             "Family support",
             "Families benefit from information and support early on.",
             ("Contact a caregiver support association",),
             30, "B"),
        _rec("ad8_monitoring", MONITORING, SHORT_TERM, Priority.MEDIUM,
             "Close monitoring",
             "Keep observing the reported changes.",
             ("Repeat the interview in three months",),
             30, "B"),
        _rec("ad8_prevention", LIFESTYLE, LONG_TERM, Priority.MEDIUM,
             "Cognitive prevention",
             "Healthy habits help preserve cognition.",
             ("Stay physically, mentally and socially active",),
             90, "B"),
        # Parkinson's
        _rec("parkinsons_neurology_consultation", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Neurology consultation",
             "Symptoms suggest Parkinson's disease and need neurological assessment.",
             ("See a neurologist within two weeks",),
             14, "A"),
        _rec("parkinsons_multidisciplinary_care", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Multidisciplinary care",
             "Physiotherapy, speech and occupational therapy improve function.",
             ("Ask for referrals to rehabilitation services",),
             30, "A"),
        _rec("parkinsons_exercise_therapy", LIFESTYLE, SHORT_TERM, Priority.HIGH,
             "Exercise therapy",
             "Targeted exercise improves mobility and balance.",
             ("Start a supervised exercise programme",),
             7, "A"),
        _rec("parkinsons_early_evaluation", MEDICAL, SHORT_TERM, Priority.MEDIUM,
             "Early evaluation",
             "Early assessment of symptoms allows timely management.",
             ("Discuss the symptoms with your doctor",),
             30, "B"),
        _rec("parkinsons_lifestyle_modifications", LIFESTYLE, SHORT_TERM, Priority.MEDIUM,
             "Lifestyle modifications",
             "Activity and diet changes can ease early symptoms.",
             ("Exercise regularly and eat a fibre-rich diet",),
             30, "B"),
        _rec("parkinsons_motor_management", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Motor symptom management",
             "Motor symptoms are prominent and can be treated.",
             ("Review treatment options for tremor and rigidity",),
             14, "A"),
        _rec("parkinsons_nonmotor_management", MEDICAL, SHORT_TERM, Priority.MEDIUM,
             "Non-motor symptom management",
             "Sleep, mood and bowel symptoms deserve specific treatment.",
             ("Mention sleep, mood and constipation problems to your doctor",),
             21, "B"),
    )
}


# ── Composite templates ─────────────────────────────────────────────────────

COMPOSITE_TEMPLATES: dict[str, Recommendation] = {
    rec.id: rec for rec in (
        _rec("composite_multiple_high_risk", MEDICAL, IMMEDIATE, Priority.URGENT,
             "Several high-risk results",
             "More than one screen shows high risk; coordinate a comprehensive evaluation.",
             ("Arrange a comprehensive multidisciplinary evaluation",),
             7, "A"),
        _rec("composite_cognitive_depression", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Cognition and mood",
             "Depression can affect cognitive performance and vice versa.",
             ("Treat mood symptoms and re-assess cognition afterwards",),
             21, "A"),
        _rec("composite_parkinson_cognitive", MEDICAL, SHORT_TERM, Priority.HIGH,
             "Movement and cognition",
             "Motor symptoms together with cognitive changes need joint evaluation.",
             ("Ask for a movement-disorder clinic with cognitive assessment",),
             21, "B"),
        _rec("composite_multiple_cognitive", MONITORING, SHORT_TERM, Priority.MEDIUM,
             "Consistent cognitive findings",
             "Several cognitive screens point to changes.",
             ("Share all cognitive results with your specialist",),
             30, "B"),
    )
}


class RecommendationCatalog:
    """Read-only access to recommendation templates.

    Parameters
    ----------
    medical, lifestyle, emergency, rules, composite:
        Override the built-in template tables.
    """

    def __init__(
        self,
        medical: Optional[Mapping[tuple[InstrumentId, RiskCategory], tuple[Recommendation, ...]]] = None,
        lifestyle: Optional[Mapping[LifestyleCategory, tuple[Recommendation, ...]]] = None,
        emergency: Optional[Mapping[str, Recommendation]] = None,
        rules: Optional[Mapping[str, Recommendation]] = None,
        composite: Optional[Mapping[str, Recommendation]] = None,
    ) -> None:
        self.medical = dict(medical if medical is not None else MEDICAL_TEMPLATES)
        self.lifestyle = dict(lifestyle if lifestyle is not None else LIFESTYLE_TEMPLATES)
        self._by_id: dict[str, Recommendation] = {}
        for table in (
            emergency if emergency is not None else EMERGENCY_TEMPLATES,
            rules if rules is not None else RULE_TEMPLATES,
            composite if composite is not None else COMPOSITE_TEMPLATES,
        ):
            self._by_id.update(table)
        logger.info(
            "recommendation_catalog_initialized",
            medical=len(self.medical),
            lifestyle=len(self.lifestyle),
            named=len(self._by_id),
        )

    def get(self, rec_id: str) -> Recommendation:
        """Named template (emergency, rule or composite).

        Raises:
            KeyError: If no template has this id.
        """
        return self._by_id[rec_id]

    def medical_for(self, instrument: InstrumentId, category: RiskCategory) -> list[Recommendation]:
        return list(self.medical.get((instrument, category), ()))

    def lifestyle_for(self, categories: Iterable[LifestyleCategory]) -> list[Recommendation]:
        selected: list[Recommendation] = []
        for category in categories:
            selected.extend(self.lifestyle.get(category, ()))
        return selected
