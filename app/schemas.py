from typing import Dict, List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

MAX_PARTICIPANTS = 99  # plus the leader


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class CreateTeamRequest(ApiModel):
    leader_name: str = Field(min_length=2)
    leader_email: EmailStr
    firm_name: str = Field(min_length=2)
    participant_emails: List[EmailStr] = Field(min_length=1, max_length=MAX_PARTICIPANTS)

    @field_validator("leader_email")
    @classmethod
    def lower_leader_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("participant_emails")
    @classmethod
    def dedupe_participants(cls, value: List[str]) -> List[str]:
        seen = []
        for email in value:
            email = email.strip().lower()
            if email not in seen:
                seen.append(email)
        return seen

    def invitees(self) -> List[str]:
        return [email for email in self.participant_emails if email != self.leader_email]


class AddMemberRequest(ApiModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        return value.lower()


class DisplayNameRequest(ApiModel):
    display_name: str = Field(min_length=2, max_length=255)


class SubmitAssessmentRequest(ApiModel):
    # Keyed by canonical question id, not display position.
    responses: Dict[int, StrictInt]
