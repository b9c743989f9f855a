import logging
from datetime import datetime, timezone
from typing import List, Optional

import pydantic
from fastapi import BackgroundTasks, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app import email as mailer
from app.config import settings
from app.db import Base, engine, get_session
from app.errors import ApiError, ConfigurationError, ValidationError
from app.models import QuestionRow, QuestionVersion, Team, TeamMember, TeamReport, new_id
from app.questions import CATALOG_LABEL, SCORES, default_catalog, validate_catalog
from app.reports import MemberScores, build_scores_json, team_averages
from app.schemas import AddMemberRequest, CreateTeamRequest, DisplayNameRequest, SubmitAssessmentRequest
from app.scoring import score_all
from app.security import ADMIN, ASSESSMENT, REPORT, derive_raw_token, hash_token
from app.shuffle import shuffled_order
from app.types import Question

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Operating Strengths Assessment")

CONFIGURATION_MESSAGE = "Assessment configuration error. Please contact support."
NO_STORE = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


# =========================
# Responses and Errors
# =========================

def ok(data, status_code: int = 200, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse({"success": True, "data": data}, status_code=status_code, headers=headers)


def error_response(status_code: int, message: str, code: str, retryable: bool = False, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": {"message": message, "code": code, "retryable": retryable}},
        status_code=status_code,
        headers=headers,
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return error_response(exc.status_code, exc.message, exc.code, exc.retryable, exc.headers)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return error_response(400, str(exc), "VALIDATION_ERROR")


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return error_response(500, CONFIGURATION_MESSAGE, "CONFIGURATION_ERROR")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request data"
    return error_response(400, message, "VALIDATION_ERROR")


# =========================
# Startup
# =========================

async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@app.on_event("startup")
async def startup_event():
    await init_db()
    async with AsyncSession(engine) as session:
        await ensure_question_catalog(session)
        await session.commit()


@app.on_event("shutdown")
async def shutdown_event():
    await engine.dispose()


async def ensure_question_catalog(session: AsyncSession) -> None:
    result = await session.execute(select(func.count(QuestionVersion.id)))
    if result.scalar_one() > 0:
        return
    catalog = default_catalog()
    validate_catalog(catalog)
    version = QuestionVersion(label=CATALOG_LABEL, is_active=True)
    session.add(version)
    await session.flush()
    session.add_all(
        [
            QuestionRow(
                version_id=version.id,
                question_order=q.question_order,
                text=q.text,
                dimension=q.dimension.value,
                subscale=q.subscale.value,
                is_reversed=q.is_reversed,
            )
            for q in catalog
        ]
    )
    logger.info("Seeded question catalog %s with %d questions", CATALOG_LABEL, len(catalog))


# =========================
# Lookups
# =========================

def link(path: str, raw_token: str) -> str:
    return f"{settings.base_url}/{path}/{raw_token}"


def assessment_token(member_id: str) -> str:
    return derive_raw_token(ASSESSMENT, member_id, settings.token_secret)


async def get_active_version(session: AsyncSession) -> Optional[QuestionVersion]:
    result = await session.execute(
        select(QuestionVersion)
        .where(QuestionVersion.is_active.is_(True))
        .order_by(QuestionVersion.created_at.desc(), QuestionVersion.id.desc())
        .limit(1)
    )
    return result.scalars().first()


async def load_catalog(session: AsyncSession, version_id: int) -> List[Question]:
    result = await session.execute(
        select(QuestionRow).where(QuestionRow.version_id == version_id).order_by(QuestionRow.question_order)
    )
    return [row.to_question() for row in result.scalars().all()]


async def get_member_by_token(session: AsyncSession, token: str) -> TeamMember:
    result = await session.execute(select(TeamMember).where(TeamMember.assessment_token_hash == hash_token(token)))
    member = result.scalars().first()
    if not member:
        raise ApiError(404, "Invalid assessment link", "INVALID_TOKEN")
    return member


async def get_team_by_admin_token(session: AsyncSession, token: str) -> Team:
    result = await session.execute(select(Team).where(Team.admin_token_hash == hash_token(token)))
    team = result.scalars().first()
    if not team:
        raise ApiError(401, "Unauthorized: invalid admin token", "UNAUTHORIZED")
    return team


async def get_team_members(session: AsyncSession, team_id: str) -> List[TeamMember]:
    result = await session.execute(
        select(TeamMember).where(TeamMember.team_id == team_id).order_by(TeamMember.created_at, TeamMember.email)
    )
    return list(result.scalars().all())


def to_member_scores(member: TeamMember) -> MemberScores:
    return MemberScores(
        display_name=member.display_name,
        email=member.email,
        strengths=member.strengths,
        subscales=member.subscales,
    )


def new_member(team_id: str, email: str, display_name: Optional[str] = None, is_leader: bool = False):
    member_id = new_id()
    raw_token = assessment_token(member_id)
    member = TeamMember(
        id=member_id,
        team_id=team_id,
        email=email,
        display_name=display_name,
        is_leader=is_leader,
        completed=False,
        assessment_token_hash=hash_token(raw_token),
    )
    return member, raw_token


# =========================
# Teams
# =========================

@app.post("/api/teams")
async def create_team(
    payload: CreateTeamRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
):
    invitees = payload.invitees()
    if not invitees:
        raise ApiError(400, "Please include at least 1 participant besides the leader.", "NO_PARTICIPANTS")

    version = await get_active_version(session)
    if not version:
        logger.error("No active question version found")
        raise ApiError(500, CONFIGURATION_MESSAGE, "NO_ACTIVE_VERSION")

    team_id = new_id()
    admin_raw = derive_raw_token(ADMIN, team_id, settings.token_secret)
    session.add(
        Team(
            id=team_id,
            leader_name=payload.leader_name,
            leader_email=payload.leader_email,
            firm_name=payload.firm_name,
            question_version_id=version.id,
            admin_token_hash=hash_token(admin_raw),
        )
    )
    leader, leader_raw = new_member(team_id, payload.leader_email, payload.leader_name, is_leader=True)
    participants = [new_member(team_id, email) for email in invitees]
    session.add(leader)
    session.add_all([member for member, _ in participants])
    await session.commit()

    dashboard_url = link("d", admin_raw)
    leader_assessment_url = link("a", leader_raw)
    participant_count = 1 + len(participants)
    logger.info("Created team %s for %s with %d members", team_id, payload.firm_name, participant_count)

    background_tasks.add_task(
        mailer.send_leader_welcome,
        leader_email=payload.leader_email,
        leader_name=payload.leader_name,
        firm_name=payload.firm_name,
        member_count=participant_count,
        dashboard_link=dashboard_url,
        assessment_link=leader_assessment_url,
        team_id=team_id,
        team_member_id=leader.id,
    )
    for member, raw_token in participants:
        background_tasks.add_task(
            mailer.send_participant_invite,
            participant_email=member.email,
            leader_name=payload.leader_name,
            firm_name=payload.firm_name,
            assessment_link=link("a", raw_token),
            team_id=team_id,
            team_member_id=member.id,
        )

    return ok(
        {
            "teamId": team_id,
            "dashboardUrl": dashboard_url,
            "leaderAssessmentUrl": leader_assessment_url,
            "participantCount": participant_count,
        },
        status_code=201,
    )


# =========================
# Assessment
# =========================

@app.get("/api/assessment/{token}/questions")
async def assessment_questions(token: str, session: AsyncSession = Depends(get_session)):
    member = await get_member_by_token(session, token)
    team = await session.get(Team, member.team_id)
    catalog = await load_catalog(session, team.question_version_id)

    # is_reversed and subscale stay on the server
    ordered = shuffled_order(member.id, settings.randomization_secret, catalog)
    questions = [
        {"id": q.question_order, "text": q.text, "dimension": q.dimension.value, "position": position}
        for position, q in enumerate(ordered, start=1)
    ]
    return ok(
        {
            "questions": questions,
            "scale": [{"value": value, "label": label} for value, label in SCORES.items()],
            "memberId": member.id,
            "memberName": member.display_name,
            "isCompleted": member.completed,
        }
    )


@app.post("/api/assessment/{token}/name")
async def save_display_name(token: str, body: dict = Body(...), session: AsyncSession = Depends(get_session)):
    try:
        payload = DisplayNameRequest.model_validate(body)
    except pydantic.ValidationError as exc:
        raise ApiError(400, exc.errors()[0]["msg"], "INVALID_DISPLAY_NAME") from exc

    member = await get_member_by_token(session, token)
    if member.completed:
        raise ApiError(409, "Assessment already completed", "ALREADY_COMPLETED")
    member.display_name = payload.display_name
    await session.commit()
    return ok({"displayName": payload.display_name})


@app.post("/api/assessment/{token}/submit")
async def submit_assessment(
    token: str,
    payload: SubmitAssessmentRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
):
    member = await get_member_by_token(session, token)
    if member.completed:
        raise ApiError(409, "Assessment already completed", "ALREADY_COMPLETED")

    team = await session.get(Team, member.team_id)
    catalog = await load_catalog(session, team.question_version_id)
    validate_catalog(catalog)

    results = score_all(payload.responses, catalog)
    strengths = {dimension.value: result.strength for dimension, result in results.items()}
    subscales = {dimension.value: result.subscales() for dimension, result in results.items()}

    # Single guarded write so a second submission can never overwrite scores.
    result = await session.execute(
        update(TeamMember)
        .where(TeamMember.id == member.id, TeamMember.completed.is_(False))
        .values(
            completed=True,
            responses={str(key): value for key, value in sorted(payload.responses.items())},
            alignment_score=strengths["alignment"],
            execution_score=strengths["execution"],
            accountability_score=strengths["accountability"],
            subscales=subscales,
            completed_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await session.rollback()
        raise ApiError(409, "Assessment already completed", "ALREADY_COMPLETED")
    await session.commit()
    logger.info("Member %s of team %s completed the assessment", member.id, member.team_id)

    background_tasks.add_task(
        mailer.send_personal_results,
        participant_email=member.email,
        display_name=member.display_name or "Team Member",
        strengths=strengths,
        team_id=member.team_id,
        team_member_id=member.id,
    )
    return ok(strengths)


# =========================
# Leader Dashboard
# =========================

@app.get("/api/dashboard/{token}")
async def dashboard(token: str, session: AsyncSession = Depends(get_session)):
    team = await get_team_by_admin_token(session, token)
    members = await get_team_members(session, team.id)
    completed = [m for m in members if m.completed]
    report = (await session.execute(select(TeamReport.id).where(TeamReport.team_id == team.id))).first()

    return ok(
        {
            "team": {"id": team.id, "firmName": team.firm_name, "leaderName": team.leader_name},
            "members": [
                {
                    "id": m.id,
                    "email": m.email,
                    "displayName": m.display_name,
                    "isLeader": m.is_leader,
                    "completed": m.completed,
                }
                for m in members
            ],
            "completionCount": len(completed),
            "totalCount": len(members),
            "teamAverages": team_averages([to_member_scores(m) for m in completed]),
            "reportUrl": link("r", derive_raw_token(REPORT, team.id, settings.token_secret)) if report else None,
        }
    )


@app.post("/api/dashboard/{token}/add-member")
async def add_member(
    token: str,
    payload: AddMemberRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
):
    team = await get_team_by_admin_token(session, token)

    count = (await session.execute(select(func.count(TeamMember.id)).where(TeamMember.team_id == team.id))).scalar_one()
    if count >= settings.max_team_size:
        raise ApiError(409, f"Team is full (maximum {settings.max_team_size} members)", "TEAM_FULL")

    existing = await session.execute(
        select(TeamMember.id).where(TeamMember.team_id == team.id, TeamMember.email == payload.email)
    )
    if existing.first():
        raise ApiError(409, "Email is already a member of this team", "DUPLICATE_EMAIL")

    member, raw_token = new_member(team.id, payload.email)
    session.add(member)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ApiError(409, "Email is already a member of this team", "DUPLICATE_EMAIL") from exc
    logger.info("Added member %s to team %s", member.id, team.id)

    background_tasks.add_task(
        mailer.send_participant_invite,
        participant_email=member.email,
        leader_name=team.leader_name,
        firm_name=team.firm_name,
        assessment_link=link("a", raw_token),
        team_id=team.id,
        team_member_id=member.id,
    )
    return ok({"memberId": member.id, "email": member.email}, status_code=201)


@app.post("/api/dashboard/{token}/members/{member_id}/resend")
async def resend_invite(
    token: str,
    member_id: str,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
):
    team = await get_team_by_admin_token(session, token)
    result = await session.execute(
        select(TeamMember).where(TeamMember.id == member_id, TeamMember.team_id == team.id)
    )
    member = result.scalars().first()
    if not member:
        raise ApiError(404, "Member not found or does not belong to this team", "NOT_FOUND")
    if member.completed:
        raise ApiError(400, "Cannot resend: member has already completed the assessment", "ALREADY_COMPLETED")

    # Same deterministic link as the original invite
    background_tasks.add_task(
        mailer.send_participant_invite,
        participant_email=member.email,
        leader_name=team.leader_name,
        firm_name=team.firm_name,
        assessment_link=link("a", assessment_token(member.id)),
        team_id=team.id,
        team_member_id=member.id,
        reminder=True,
    )
    return ok({"message": "Invitation resent successfully"})


# =========================
# Reports
# =========================

@app.post("/api/dashboard/{token}/report")
async def generate_report(token: str, background_tasks: BackgroundTasks, session: AsyncSession = Depends(get_session)):
    team = await get_team_by_admin_token(session, token)
    members = await get_team_members(session, team.id)
    completed = [m for m in members if m.completed]
    if not completed:
        raise ApiError(400, "No completed assessments yet", "NO_COMPLETIONS")

    generated_at = datetime.utcnow()
    try:
        scores_json = build_scores_json(
            [to_member_scores(m) for m in completed],
            total_count=len(members),
            generated_at=generated_at.replace(tzinfo=timezone.utc),
        )
    except ValidationError as exc:
        logger.error("Team %s has completed members without scores: %s", team.id, exc)
        raise ApiError(500, "Completed assessments are missing scores/subscales", "DATA_INTEGRITY_ERROR") from exc

    report_raw = derive_raw_token(REPORT, team.id, settings.token_secret)
    report = (await session.execute(select(TeamReport).where(TeamReport.team_id == team.id))).scalars().first()
    if report is None:
        report = TeamReport(team_id=team.id)
        session.add(report)
    report.report_token_hash = hash_token(report_raw)
    report.completion_count = scores_json["completion_count"]
    report.total_count = scores_json["total_count"]
    report.scores_json = scores_json
    report.generated_at = generated_at
    await session.commit()

    report_url = link("r", report_raw)
    logger.info("Generated report for team %s (%d/%d complete)", team.id, report.completion_count, report.total_count)

    leader = next((m for m in members if m.is_leader), None)
    background_tasks.add_task(
        mailer.send_report_ready,
        leader_email=team.leader_email,
        leader_name=team.leader_name,
        firm_name=team.firm_name,
        completion_count=scores_json["completion_count"],
        total_count=scores_json["total_count"],
        report_link=report_url,
        team_id=team.id,
        team_member_id=leader.id if leader else None,
    )
    return ok({"reportUrl": report_url})


@app.get("/api/report/{token}")
async def get_report(token: str, session: AsyncSession = Depends(get_session)):
    result = await session.execute(
        select(TeamReport.scores_json, Team.firm_name)
        .join(Team, Team.id == TeamReport.team_id)
        .where(TeamReport.report_token_hash == hash_token(token))
    )
    row = result.first()
    if not row:
        raise ApiError(404, "Report not found", "NOT_FOUND", headers=NO_STORE)
    scores_json, firm_name = row
    return ok({"firmName": firm_name, "scoresJson": scores_json}, headers=NO_STORE)


@app.get("/health")
async def healthcheck():
    return {"status": "ok"}
