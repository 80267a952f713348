"""
Prompt construction for exercise generation.

A fresh scenario and complexity are drawn for every request so the
provider does not keep returning the same sentence. The random source is
injectable so tests can seed it.
"""

import random
from dataclasses import dataclass
from typing import Optional

from .categories import profile_for
from .models import Category, Complexity
from .schemas import EXERCISE_SCHEMA


@dataclass(frozen=True)
class GenerationRequest:
    """A fully composed instruction, plus the parameters that went into it."""
    category: Category
    scenario: str
    complexity: Complexity
    tone: str
    prompt: str                      # Text handed to the content provider


def build_prompt(category: Category, rng: Optional[random.Random] = None) -> GenerationRequest:
    """
    Compose the generation instruction for one exercise in `category`.

    The scenario comes only from the category's own scenario set; the tone
    is fixed per category.
    """
    rng = rng or random.Random()
    category = Category(category)
    profile = profile_for(category)

    scenario = rng.choice(profile.scenarios)
    complexity = rng.choice(list(Complexity))

    prompt = (
        f"{EXERCISE_SCHEMA.strip()}\n\n"
        f"Task: {profile.instruction}\n\n"
        f"Scenario: {scenario}\n"
        f"Complexity: {complexity.value} (the sentence should read as {complexity.value}-level English)\n"
        f"Tone: {profile.tone}\n\n"
        "Generate ONE JSON object."
    )

    return GenerationRequest(
        category=category,
        scenario=scenario,
        complexity=complexity,
        tone=profile.tone,
        prompt=prompt,
    )
