import pytest
from pydantic import ValidationError

from app.schemas import AddMemberRequest, CreateTeamRequest, DisplayNameRequest, SubmitAssessmentRequest


def _team_payload(**overrides):
    payload = {
        "leaderName": "Dana Leader",
        "leaderEmail": "Dana@Example.com",
        "firmName": "Acme & Co",
        "participantEmails": ["a@example.com", "b@example.com"],
    }
    payload.update(overrides)
    return payload


def test_create_team_accepts_camel_case():
    request = CreateTeamRequest.model_validate(_team_payload())

    assert request.leader_name == "Dana Leader"
    assert request.leader_email == "dana@example.com"
    assert request.participant_emails == ["a@example.com", "b@example.com"]


def test_participants_are_lowercased_and_deduplicated():
    request = CreateTeamRequest.model_validate(
        _team_payload(participantEmails=["A@example.com", "a@example.com", "b@example.com", "dana@example.com"])
    )

    assert request.participant_emails == ["a@example.com", "b@example.com", "dana@example.com"]
    assert request.invitees() == ["a@example.com", "b@example.com"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"leaderName": "D"},
        {"firmName": " "},
        {"leaderEmail": "not-an-email"},
        {"participantEmails": []},
        {"participantEmails": ["nope"]},
        {"participantEmails": [f"p{i}@example.com" for i in range(100)]},
    ],
)
def test_create_team_rejects_bad_input(overrides):
    with pytest.raises(ValidationError):
        CreateTeamRequest.model_validate(_team_payload(**overrides))


def test_add_member_lowercases_email():
    assert AddMemberRequest.model_validate({"email": "New@Example.COM"}).email == "new@example.com"


def test_display_name_is_stripped_and_bounded():
    assert DisplayNameRequest.model_validate({"displayName": "  Sam  "}).display_name == "Sam"

    with pytest.raises(ValidationError):
        DisplayNameRequest.model_validate({"displayName": " S "})
    with pytest.raises(ValidationError):
        DisplayNameRequest.model_validate({"displayName": "x" * 256})


def test_submit_keys_are_question_ids():
    request = SubmitAssessmentRequest.model_validate({"responses": {"1": 5, "2": 3}})

    assert request.responses == {1: 5, 2: 3}


def test_submit_rejects_non_integer_values():
    with pytest.raises(ValidationError):
        SubmitAssessmentRequest.model_validate({"responses": {"1": "5"}})
    with pytest.raises(ValidationError):
        SubmitAssessmentRequest.model_validate({"responses": {"1": 2.5}})
