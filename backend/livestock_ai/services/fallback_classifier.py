"""Rule-based diagnosis used when the generative model is unavailable.

Rules are evaluated top to bottom and the first match wins. The last rule
always matches.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from livestock_ai.models.rag import Diagnosis

logger = logging.getLogger(__name__)

SymptomPredicate = Callable[[Sequence[str]], bool]

FALLBACK_CONFIDENCE = "Medium"


def any_symptom_mentions(symptoms: Sequence[str], term: str) -> bool:
    """Case-insensitive substring test against each symptom independently."""
    needle = term.lower()
    return any(needle in s.lower() for s in symptoms)


def mentions(*terms: str) -> SymptomPredicate:
    """Predicate that holds when every term is mentioned by some symptom."""

    def predicate(symptoms: Sequence[str]) -> bool:
        return all(any_symptom_mentions(symptoms, t) for t in terms)

    return predicate


def _always(symptoms: Sequence[str]) -> bool:
    return True


@dataclass(frozen=True)
class FallbackRule:
    name: str
    predicate: SymptomPredicate
    disease: str
    explanation: str
    treatment: str


_GENERAL_CARE = (
    "Supportive care including proper nutrition, hydration, and stress "
    "reduction should be provided. Monitor the animal closely and isolate it "
    "if infectious disease is suspected."
)

FALLBACK_RULES: tuple[FallbackRule, ...] = (
    FallbackRule(
        name="respiratory",
        predicate=mentions("fever", "respiratory"),
        disease="Respiratory Infection (Possibly Pneumonia)",
        explanation=(
            "The combination of fever and respiratory symptoms strongly suggests "
            "a respiratory tract infection. Pneumonia in cattle can be caused by "
            "various bacterial or viral pathogens. Early symptoms often include "
            "elevated body temperature, difficulty breathing, and coughing. If "
            "left untreated, the condition can progress to severe respiratory "
            "distress. The infection may be exacerbated by environmental factors "
            "such as poor ventilation or stress. Prompt veterinary intervention "
            "is crucial to prevent complications."
        ),
        treatment=(
            "Immediate veterinary consultation is recommended. Treatment "
            "typically involves antibiotics prescribed by a veterinarian, "
            "anti-inflammatory medication to control fever, and good "
            "ventilation. " + _GENERAL_CARE
        ),
    ),
    FallbackRule(
        name="gastrointestinal",
        predicate=mentions("diarrhea"),
        disease="Gastrointestinal Infection or Parasitic Condition",
        explanation=(
            "Diarrhea in livestock often indicates gastrointestinal disturbance, "
            "which can result from bacterial infections, viral pathogens, or "
            "parasitic infestations. The condition leads to fluid loss and "
            "potential dehydration if not addressed promptly. Common causes "
            "include E. coli, Salmonella, or intestinal parasites. Affected "
            "animals may also show signs of dehydration, weight loss, and "
            "reduced appetite. Proper diagnosis requires fecal examination and "
            "laboratory testing."
        ),
        treatment=(
            "Provide oral or intravenous fluid therapy to correct dehydration. "
            "Antimicrobials may be needed if the cause is bacterial, and "
            "deworming if parasites are confirmed by fecal testing. "
            + _GENERAL_CARE
        ),
    ),
    FallbackRule(
        name="musculoskeletal",
        predicate=mentions("lameness"),
        disease="Musculoskeletal Disorder or Foot Rot",
        explanation=(
            "Lameness and difficulty walking in cattle can indicate various "
            "musculoskeletal problems or infectious conditions like foot rot. "
            "Foot rot is a common bacterial infection affecting the hooves, "
            "causing pain and mobility issues. Environmental factors such as "
            "wet, muddy conditions increase susceptibility. If multiple limbs "
            "are affected, systemic diseases or nutritional deficiencies may be "
            "involved. Early detection and treatment are essential to prevent "
            "chronic lameness."
        ),
        treatment=(
            "Examine and trim the affected hooves, and move the animal to dry, "
            "clean footing. Antibiotics may be required for foot rot, as "
            "prescribed by a veterinarian. " + _GENERAL_CARE
        ),
    ),
    FallbackRule(
        name="mastitis",
        predicate=mentions("milk"),
        disease="Mastitis or Metabolic Disorder",
        explanation=(
            "Reduced milk production can be a sign of mastitis (udder "
            "infection) or metabolic disorders affecting lactating animals. "
            "Mastitis is characterized by inflammation of the mammary gland, "
            "often caused by bacterial infection. Clinical signs may include "
            "swelling, heat, and pain in the udder. Metabolic causes could "
            "include ketosis or calcium deficiency. Proper diagnosis requires "
            "milk testing and clinical examination."
        ),
        treatment=(
            "Test the milk (for example with a California Mastitis Test) and "
            "consult a veterinarian about intramammary antibiotics or "
            "anti-inflammatory drugs. Check energy and calcium status if a "
            "metabolic cause is suspected. " + _GENERAL_CARE
        ),
    ),
    FallbackRule(
        name="general",
        predicate=_always,
        disease="General Infectious Disease",
        explanation=(
            "These symptoms warrant professional veterinary evaluation to "
            "determine the exact underlying condition. Multiple symptom "
            "presentation can indicate various infectious, metabolic, or "
            "environmental health challenges. A thorough clinical examination "
            "is needed to differentiate between potential diagnoses. Laboratory "
            "tests, including blood work and pathogen screening, may be "
            "necessary. Please consult with a qualified veterinarian for "
            "accurate diagnosis and treatment planning."
        ),
        treatment=(
            "Immediate veterinary consultation is recommended for accurate "
            "diagnosis and treatment planning. " + _GENERAL_CARE
        ),
    ),
)


def match_rule(
    symptoms: Sequence[str],
    rules: Sequence[FallbackRule] = FALLBACK_RULES,
) -> FallbackRule:
    """Return the first rule whose predicate holds for ``symptoms``."""
    for rule in rules:
        if rule.predicate(symptoms):
            return rule
    raise LookupError("No fallback rule matched; the rule table needs a catch-all rule")


def _presentation(symptoms: Sequence[str]) -> str:
    count = len(symptoms)
    plural = "s" if count != 1 else ""
    return (
        f"The animal is presenting with {count} notable symptom{plural}: "
        f"{', '.join(symptoms)}. "
    )


def classify(
    symptoms: Sequence[str],
    rules: Sequence[FallbackRule] = FALLBACK_RULES,
) -> Diagnosis:
    """Diagnose from symptoms alone, without calling any model."""
    rule = match_rule(symptoms, rules)
    logger.info("Fallback classifier matched rule %r for %d symptoms", rule.name, len(symptoms))
    return Diagnosis(
        disease=rule.disease,
        confidence=FALLBACK_CONFIDENCE,
        explanation=_presentation(symptoms) + rule.explanation,
        treatment=rule.treatment,
        raw_response="",
        provenance="heuristic",
    )
