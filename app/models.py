import datetime as dt
import uuid
from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db import Base
from app.types import Question


def new_id() -> str:
    return str(uuid.uuid4())


class QuestionVersion(Base):
    __tablename__ = "question_versions"

    id = Column(Integer, primary_key=True)
    label = Column(String(64), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=dt.datetime.utcnow)

    questions = relationship("QuestionRow", back_populates="version", order_by="QuestionRow.question_order")


class QuestionRow(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True)
    version_id = Column(Integer, ForeignKey("question_versions.id", ondelete="CASCADE"), nullable=False)
    question_order = Column(Integer, nullable=False)
    text = Column(String(500), nullable=False)
    dimension = Column(String(32), nullable=False)
    subscale = Column(String(8), nullable=False)
    is_reversed = Column(Boolean, nullable=False, default=False)

    version = relationship("QuestionVersion", back_populates="questions")
    __table_args__ = (UniqueConstraint("version_id", "question_order", name="uq_question_version_order"),)

    def to_question(self) -> Question:
        return Question(
            question_order=self.question_order,
            text=self.text,
            dimension=self.dimension,
            subscale=self.subscale,
            is_reversed=self.is_reversed,
        )


class Team(Base):
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=new_id)
    leader_name = Column(String(255), nullable=False)
    leader_email = Column(String(255), nullable=False)
    firm_name = Column(String(255), nullable=False)
    question_version_id = Column(Integer, ForeignKey("question_versions.id"), nullable=False)
    admin_token_hash = Column(String(128), unique=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=dt.datetime.utcnow)

    members = relationship("TeamMember", back_populates="team", order_by="TeamMember.created_at")
    report = relationship("TeamReport", back_populates="team", uselist=False)


class TeamMember(Base):
    __tablename__ = "team_members"

    id = Column(String(36), primary_key=True, default=new_id)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    email = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=True)
    is_leader = Column(Boolean, nullable=False, default=False)
    completed = Column(Boolean, nullable=False, default=False)
    assessment_token_hash = Column(String(128), unique=True, nullable=False)
    responses = Column(JSON, nullable=True)
    alignment_score = Column(Float, nullable=True)
    execution_score = Column(Float, nullable=True)
    accountability_score = Column(Float, nullable=True)
    subscales = Column(JSON, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=dt.datetime.utcnow)

    team = relationship("Team", back_populates="members")
    __table_args__ = (UniqueConstraint("team_id", "email", name="uq_team_member_email"),)

    @property
    def strengths(self) -> dict:
        return {
            "alignment": self.alignment_score,
            "execution": self.execution_score,
            "accountability": self.accountability_score,
        }


class TeamReport(Base):
    __tablename__ = "team_reports"

    id = Column(Integer, primary_key=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="CASCADE"), unique=True, nullable=False)
    report_token_hash = Column(String(128), unique=True, nullable=False)
    completion_count = Column(Integer, nullable=False)
    total_count = Column(Integer, nullable=False)
    scores_json = Column(JSON, nullable=False)
    generated_at = Column(DateTime, nullable=False, default=dt.datetime.utcnow)

    team = relationship("Team", back_populates="report")


class EmailEvent(Base):
    __tablename__ = "email_events"

    id = Column(Integer, primary_key=True)
    team_id = Column(String(36), ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    team_member_id = Column(String(36), ForeignKey("team_members.id", ondelete="SET NULL"), nullable=True)
    email_type = Column(String(32), nullable=False)
    recipient_email = Column(String(255), nullable=False)
    success = Column(Boolean, nullable=False)
    provider_message_id = Column(String(255), nullable=True)
    error = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False, default=dt.datetime.utcnow)
