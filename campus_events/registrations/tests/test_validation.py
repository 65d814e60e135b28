import pytest
from rest_framework.exceptions import ValidationError

from campus_events.registrations.validation import validate_feedback_responses
from campus_events.registrations.validation import validate_registration_answers

FIELDS = [
    {"name": "branch", "type": "select", "required": True, "options": ["CSE", "ECE"]},
    {"name": "team_size", "type": "number"},
    {"name": "contact", "type": "email"},
    {"name": "veg", "type": "checkbox"},
    {"name": "about", "type": "textarea"},
]


def test_valid_answers_are_cleaned():
    cleaned = validate_registration_answers(
        FIELDS,
        {"branch": "CSE", "team_size": 3, "about": "  hi  ", "veg": False},
    )
    assert cleaned == {"branch": "CSE", "team_size": 3, "about": "hi", "veg": False}


def test_no_fields_no_answers():
    assert validate_registration_answers([], None) == {}


@pytest.mark.parametrize(
    ("answers", "message"),
    [
        ({}, "'branch' is required"),
        ({"branch": "  "}, "'branch' is required"),
        ({"branch": "MECH"}, "'branch' must be one of: CSE, ECE"),
        ({"branch": "CSE", "team_size": "3"}, "'team_size' must be a number"),
        ({"branch": "CSE", "team_size": True}, "'team_size' must be a number"),
        ({"branch": "CSE", "contact": "nope"}, "'contact' must be a valid email address"),
        ({"branch": "CSE", "veg": "yes"}, "'veg' must be true or false"),
        ({"branch": "CSE", "about": 12}, "'about' must be text"),
        ({"branch": "CSE", "shoe_size": 9}, "Unknown registration field 'shoe_size'"),
    ],
)
def test_rejected_answers(answers, message):
    with pytest.raises(ValidationError) as exc:
        validate_registration_answers(FIELDS, answers)
    assert str(exc.value.detail[0]) == message


def test_answers_must_be_a_mapping():
    with pytest.raises(ValidationError):
        validate_registration_answers(FIELDS, ["CSE"])


QUESTIONS = [
    {"question": "How was it?", "type": "rating", "required": True},
    {"question": "Anything else?", "type": "text"},
]


def test_feedback_responses():
    responses = {"How was it?": 4, "Anything else?": "More snacks"}
    assert validate_feedback_responses(QUESTIONS, responses) == responses


@pytest.mark.parametrize(
    "responses",
    [
        {"How was it?": 6},
        {"How was it?": "great"},
        {"Anything else?": 3},
        {"Who are you?": "me"},
    ],
)
def test_rejected_feedback_responses(responses):
    with pytest.raises(ValidationError):
        validate_feedback_responses(QUESTIONS, responses)


def test_required_question_may_be_skipped():
    assert validate_feedback_responses(QUESTIONS, {}) == {}
