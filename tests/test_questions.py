from collections import Counter
from dataclasses import replace

import pytest

from app.errors import ConfigurationError
from app.questions import QUESTION_BANK, SCORES, default_catalog, validate_catalog
from app.types import Dimension, Question, Subscale


def test_default_catalog_is_valid():
    catalog = default_catalog()

    validate_catalog(catalog)
    assert [q.question_order for q in catalog] == list(range(1, 37))


def test_default_catalog_has_four_items_per_group():
    groups = Counter((q.dimension, q.subscale) for q in default_catalog())

    assert len(groups) == 9
    assert set(groups.values()) == {4}


def test_default_catalog_reversed_items():
    reversed_ids = [q.question_order for q in default_catalog() if q.is_reversed]

    assert reversed_ids == [4, 8, 16, 19, 24, 28, 31, 35]


def test_question_bank_texts_are_unique():
    texts = [text for text, *_ in QUESTION_BANK]

    assert len(set(texts)) == len(texts)


def test_score_labels_cover_the_scale():
    assert sorted(SCORES) == [1, 2, 3, 4, 5]
    assert SCORES[5] == "Strongly Agree"
    assert SCORES[1] == "Strongly Disagree"


def test_question_coerces_string_enums():
    question = Question(1, "text", "execution", "ob")

    assert question.dimension is Dimension.EXECUTION
    assert question.subscale is Subscale.OB
    assert question.is_reversed is False


@pytest.mark.parametrize("dimension, subscale", [("focus", "pd"), ("alignment", "xx")])
def test_question_rejects_unknown_enum_values(dimension, subscale):
    with pytest.raises(ValueError):
        Question(1, "text", dimension, subscale)


def test_wrong_size_catalog_is_rejected(catalog):
    with pytest.raises(ConfigurationError, match="36 questions, has 35"):
        validate_catalog(catalog[:-1])


def test_duplicate_order_is_rejected(catalog):
    catalog[1] = replace(catalog[1], question_order=1)

    with pytest.raises(ConfigurationError, match="duplicate question_order"):
        validate_catalog(catalog)


def test_unbalanced_groups_are_rejected(catalog):
    # Move one alignment/pd item into alignment/cs.
    catalog[0] = replace(catalog[0], subscale=Subscale.CS)

    with pytest.raises(ConfigurationError, match="alignment/pd must have 4 questions, has 3"):
        validate_catalog(catalog)
