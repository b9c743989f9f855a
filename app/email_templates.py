from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from app.scoring import RESPONSE_COUNT

TEMPLATE_DIR = Path(__file__).parent / "templates" / "email"

env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass
class EmailTemplate:
    subject: str
    text: str
    html: str


def _render(name: str, subject: str, **context) -> EmailTemplate:
    context.update(subject=subject, year=datetime.utcnow().year)
    return EmailTemplate(
        subject=subject,
        text=env.get_template(f"{name}.txt").render(**context),
        html=env.get_template(f"{name}.html").render(**context),
    )


def leader_welcome(leader_name: str, firm_name: str, member_count: int, dashboard_link: str, assessment_link: str) -> EmailTemplate:
    return _render(
        "leader_welcome",
        "Your Operating Strengths Assessment is Ready",
        leader_name=leader_name,
        firm_name=firm_name,
        member_count=member_count,
        dashboard_link=dashboard_link,
        assessment_link=assessment_link,
    )


def participant_invite(leader_name: str, firm_name: str, assessment_link: str, reminder: bool = False) -> EmailTemplate:
    subject = f"{leader_name} invited you to the Operating Strengths Assessment"
    if reminder:
        subject = f"Reminder: {subject}"
    return _render(
        "participant_invite",
        subject,
        leader_name=leader_name,
        firm_name=firm_name,
        assessment_link=assessment_link,
        question_count=RESPONSE_COUNT,
        reminder=reminder,
    )


def personal_results(display_name: str, alignment: float, execution: float, accountability: float) -> EmailTemplate:
    scores = [("Alignment", alignment), ("Execution", execution), ("Accountability", accountability)]
    return _render("personal_results", "Your Operating Strengths Results", display_name=display_name, scores=scores)


def report_ready(leader_name: str, firm_name: str, completion_count: int, total_count: int, report_link: str) -> EmailTemplate:
    return _render(
        "report_ready",
        f"Operating Strengths Report Ready for {firm_name}",
        leader_name=leader_name,
        firm_name=firm_name,
        completion_count=completion_count,
        total_count=total_count,
        report_link=report_link,
    )
