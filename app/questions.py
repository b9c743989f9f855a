from collections import Counter
from typing import List, Sequence

from app.errors import ConfigurationError
from app.scoring import ITEMS_PER_SUBSCALE, RESPONSE_COUNT
from app.types import Dimension, Question, Subscale

# =========================
# Assessment Questions
# =========================

CATALOG_LABEL = "v1"

# (text, dimension, subscale, is_reversed) in canonical order 1..36
QUESTION_BANK = [
    # Alignment / Personal Discipline
    ("I can state our firm's top three priorities for this year without looking them up.", "alignment", "pd", False),
    ("I check my weekly plans against the firm's goals before committing my time.", "alignment", "pd", False),
    ("When priorities change, I adjust my own work within a day or two.", "alignment", "pd", False),
    ("I often work on what feels urgent even when it is not what the firm agreed matters most.", "alignment", "pd", True),
    # Alignment / Collective Systems
    ("Our goals are written down in a place everyone on the team can find.", "alignment", "cs", False),
    ("We have a regular meeting where priorities are reviewed and confirmed.", "alignment", "cs", False),
    ("New work requests are checked against agreed priorities before they are accepted.", "alignment", "cs", False),
    ("Different people on our team would describe our priorities very differently.", "alignment", "cs", True),
    # Alignment / Observable Behaviors
    ("Leaders here refer to our stated priorities when making decisions.", "alignment", "ob", False),
    ("When two requests conflict, people resolve it by pointing to the agreed goals.", "alignment", "ob", False),
    ("I regularly see colleagues decline work that falls outside our priorities.", "alignment", "ob", False),
    ("Team members explain how their work connects to firm-wide objectives.", "alignment", "ob", False),
    # Execution / Personal Discipline
    ("I break large commitments into concrete next steps with dates.", "execution", "pd", False),
    ("I finish what I start before picking up new work.", "execution", "pd", False),
    ("I protect time in my calendar for my most important tasks.", "execution", "pd", False),
    ("My deadlines slip more often than I would like to admit.", "execution", "pd", True),
    # Execution / Collective Systems
    ("We use a shared system to track who is doing what and by when.", "execution", "cs", False),
    ("Handoffs between people follow a clear, documented process.", "execution", "cs", False),
    ("Work frequently stalls because nobody knows the next step.", "execution", "cs", True),
    ("Recurring work is supported by checklists or templates.", "execution", "cs", False),
    # Execution / Observable Behaviors
    ("Projects on this team are delivered on the date they were promised.", "execution", "ob", False),
    ("When something is blocked, people raise it quickly rather than waiting.", "execution", "ob", False),
    ("I see colleagues follow through on small commitments made in meetings.", "execution", "ob", False),
    ("Deadlines here are treated as suggestions rather than commitments.", "execution", "ob", True),
    # Accountability / Personal Discipline
    ("When I miss a commitment, I tell the affected people before they have to ask.", "accountability", "pd", False),
    ("I take ownership of my mistakes without blaming circumstances.", "accountability", "pd", False),
    ("I ask for feedback on my own performance.", "accountability", "pd", False),
    ("I tend to wait for someone to follow up with me before I report on my progress.", "accountability", "pd", True),
    # Accountability / Collective Systems
    ("Every important task has a single clearly named owner.", "accountability", "cs", False),
    ("We review results against commitments on a regular schedule.", "accountability", "cs", False),
    ("It is often unclear who is responsible when something goes wrong.", "accountability", "cs", True),
    ("Our performance expectations are written down and shared.", "accountability", "cs", False),
    # Accountability / Observable Behaviors
    ("People here hold each other to commitments respectfully and directly.", "accountability", "ob", False),
    ("Missed commitments are discussed openly rather than ignored.", "accountability", "ob", False),
    ("Underperformance tends to be tolerated here for a long time.", "accountability", "ob", True),
    ("Leaders model accountability by owning their own misses in front of the team.", "accountability", "ob", False),
]

SCORES = {
    5: "Strongly Agree",
    4: "Agree",
    3: "Neutral",
    2: "Disagree",
    1: "Strongly Disagree",
}


def default_catalog() -> List[Question]:
    return [
        Question(question_order=order, text=text, dimension=dimension, subscale=subscale, is_reversed=is_reversed)
        for order, (text, dimension, subscale, is_reversed) in enumerate(QUESTION_BANK, start=1)
    ]


def validate_catalog(questions: Sequence[Question]) -> None:
    """
    Check the catalog shape every version must have.

    Rule:
      36 questions, unique question_order,
      exactly 4 per (dimension, subscale) pair.
    """
    if len(questions) != RESPONSE_COUNT:
        raise ConfigurationError(f"question catalog must have {RESPONSE_COUNT} questions, has {len(questions)}")

    orders = Counter(q.question_order for q in questions)
    duplicates = sorted(order for order, count in orders.items() if count > 1)
    if duplicates:
        raise ConfigurationError(f"duplicate question_order values in catalog: {duplicates}")

    groups = Counter((q.dimension, q.subscale) for q in questions)
    for dimension in Dimension:
        for subscale in Subscale:
            count = groups.get((dimension, subscale), 0)
            if count != ITEMS_PER_SUBSCALE:
                raise ConfigurationError(
                    f"{dimension.value}/{subscale.value} must have {ITEMS_PER_SUBSCALE} questions, has {count}"
                )
