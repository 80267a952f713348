"""
Per-category prompt content and the static fallback table.

Each Category maps to a base instruction, a closed set of scenarios (one
is chosen at random per request), a fixed tone, and exactly one canned
Exercise that is shown when live generation fails.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from .models import Category, Exercise, VocabularyItem


@dataclass(frozen=True)
class CategoryProfile:
    instruction: str                 # Base generation instruction
    scenarios: Tuple[str, ...]
    tone: str
    fallback: Exercise


# ---------------------------------------------------------------------------
# Fallback exercises
# ---------------------------------------------------------------------------

_PROFESSIONAL_FALLBACK = Exercise(
    source_text=(
        "虽然我们的用户获取成本略有上升，但留存率相比上个季度提高了15%，"
        "这表明我们的目标用户更加精准了。"
    ),
    target_text=(
        "Although our CAC has increased slightly, the retention rate is up 15% "
        "quarter-over-quarter, indicating we are targeting a more qualified audience."
    ),
    vocabulary=(
        VocabularyItem(term="CAC", definition="用户获取成本"),
        VocabularyItem(term="Quarter-over-Quarter", definition="环比"),
        VocabularyItem(term="qualified audience", definition="精准受众"),
    ),
)

_CASUAL_FALLBACK = Exercise(
    source_text="如果不喝一杯浓缩咖啡，我就无法开始新的一天。它能帮我提神，让我为早上的晨会做好准备。",
    target_text=(
        "I can't start my day without a shot of espresso. It gives me a kick "
        "and gets me ready for the morning briefing."
    ),
    vocabulary=(
        VocabularyItem(term="shot of espresso", definition="一杯浓缩咖啡"),
        VocabularyItem(term="give a kick", definition="提神"),
        VocabularyItem(term="briefing", definition="简报"),
    ),
)


# ---------------------------------------------------------------------------
# Category profiles
# ---------------------------------------------------------------------------

CATEGORY_PROFILES: Mapping[Category, CategoryProfile] = MappingProxyType({
    Category.PROFESSIONAL: CategoryProfile(
        instruction=(
            "Generate a sentence related to Data Analysis, Business Intelligence, "
            "or Corporate Strategy. Use professional vocabulary like 'ROI', "
            "'churn rate', 'outlier', 'segmentation', 'YoY', 'drill down', etc."
        ),
        scenarios=(
            "presenting a quarterly business review to senior leadership",
            "explaining an A/B test result to the product team",
            "investigating a sudden spike in customer churn",
            "handing over a KPI dashboard to a new stakeholder",
            "writing up a postmortem for a broken data pipeline",
            "negotiating next year's analytics budget",
            "flagging outliers in a regional sales forecast",
        ),
        tone="analytical and precise, like a senior analyst briefing executives",
        fallback=_PROFESSIONAL_FALLBACK,
    ),
    Category.CASUAL: CategoryProfile(
        instruction=(
            "Generate a sentence related to modern daily life in Western culture, "
            "casual conversation, travel, or office small talk. Use idiomatic "
            "expressions and phrasal verbs like 'catch up', 'rain check', "
            "'play it by ear', etc."
        ),
        scenarios=(
            "ordering a drink at a busy coffee shop",
            "catching up with a coworker on Monday morning",
            "taking a rain check on dinner plans with a friend",
            "making small talk in the elevator before a meeting",
            "planning a spontaneous weekend road trip",
            "returning a faulty gadget at a store",
            "chatting with a neighbour about the weather",
        ),
        tone="idiomatic and conversational, like a native speaker chatting with friends",
        fallback=_CASUAL_FALLBACK,
    ),
})

FALLBACK_EXERCISES: Mapping[Category, Exercise] = MappingProxyType({
    category: profile.fallback for category, profile in CATEGORY_PROFILES.items()
})


def profile_for(category: Category) -> CategoryProfile:
    return CATEGORY_PROFILES[Category(category)]


def fallback_for(category: Category) -> Exercise:
    """Return the canned exercise shown when generation fails for `category`."""
    return FALLBACK_EXERCISES[Category(category)]
