import logging
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional

import aiosmtplib

from app import db, email_templates
from app.config import settings
from app.models import EmailEvent

logger = logging.getLogger(__name__)

LEADER_WELCOME = "leader_welcome"
PARTICIPANT_INVITE = "participant_invite"
PARTICIPANT_RESEND = "participant_resend"
PERSONAL_RESULTS = "personal_results"
REPORT_READY = "report_ready"


async def send_email(
    to_email: str,
    subject: str,
    text_content: str,
    html_content: str,
    host: str = None,
    port: int = None,
    username: str = None,
    password: str = None,
    use_tls: bool = None,
    from_email: str = None,
    from_name: str = None,
) -> str:
    # Fallback to configured settings
    host = host or settings.smtp_host
    port = int(port or settings.smtp_port)
    username = username or settings.smtp_username
    password = password or settings.smtp_password
    use_tls = use_tls if use_tls is not None else settings.smtp_use_tls
    from_email = from_email or settings.smtp_from_email
    from_name = from_name or settings.smtp_from_name

    message = EmailMessage()
    message["From"] = f"{from_name} <{from_email}>"
    message["To"] = to_email
    message["Subject"] = subject
    message["Message-ID"] = make_msgid()
    message.set_content(text_content)
    message.add_alternative(html_content, subtype="html")

    # Port 465 is implicit TLS, anything else upgrades with STARTTLS when enabled
    is_ssl_port = (port == 465)

    smtp_client = aiosmtplib.SMTP(
        hostname=host,
        port=port,
        use_tls=is_ssl_port,
        start_tls=not is_ssl_port and use_tls,
    )
    async with smtp_client:
        if username:
            await smtp_client.login(username, password)
        await smtp_client.send_message(message)

    logger.info("Email %r sent to %s", subject, to_email)
    return message["Message-ID"]


async def record_email_event(
    email_type: str,
    recipient_email: str,
    success: bool,
    team_id: Optional[str] = None,
    team_member_id: Optional[str] = None,
    provider_message_id: Optional[str] = None,
    error: Optional[str] = None,
) -> None:
    async with db.SessionLocal() as session:
        session.add(
            EmailEvent(
                team_id=team_id,
                team_member_id=team_member_id,
                email_type=email_type,
                recipient_email=recipient_email,
                success=success,
                provider_message_id=provider_message_id,
                error=error,
            )
        )
        await session.commit()


async def deliver(
    email_type: str,
    to_email: str,
    template: email_templates.EmailTemplate,
    team_id: Optional[str] = None,
    team_member_id: Optional[str] = None,
) -> bool:
    """
    Send one templated email and record the attempt.

    Delivery failures are logged and stored on the email event. They are not
    retried and never reach the HTTP caller.
    """
    try:
        message_id = await send_email(
            to_email=to_email,
            subject=template.subject,
            text_content=template.text,
            html_content=template.html,
        )
    except (aiosmtplib.SMTPException, OSError) as exc:
        logger.error("SMTP error sending %s to %s: %s", email_type, to_email, exc)
        await record_email_event(email_type, to_email, False, team_id, team_member_id, error=str(exc))
        return False

    await record_email_event(email_type, to_email, True, team_id, team_member_id, provider_message_id=message_id)
    return True


# =========================
# Assessment Emails
# =========================

async def send_leader_welcome(
    leader_email: str, leader_name: str, firm_name: str, member_count: int,
    dashboard_link: str, assessment_link: str, team_id: str, team_member_id: str,
) -> bool:
    template = email_templates.leader_welcome(leader_name, firm_name, member_count, dashboard_link, assessment_link)
    return await deliver(LEADER_WELCOME, leader_email, template, team_id, team_member_id)


async def send_participant_invite(
    participant_email: str, leader_name: str, firm_name: str, assessment_link: str,
    team_id: str, team_member_id: str, reminder: bool = False,
) -> bool:
    template = email_templates.participant_invite(leader_name, firm_name, assessment_link, reminder=reminder)
    email_type = PARTICIPANT_RESEND if reminder else PARTICIPANT_INVITE
    return await deliver(email_type, participant_email, template, team_id, team_member_id)


async def send_personal_results(
    participant_email: str, display_name: str, strengths: dict, team_id: str, team_member_id: str,
) -> bool:
    template = email_templates.personal_results(
        display_name, strengths["alignment"], strengths["execution"], strengths["accountability"]
    )
    return await deliver(PERSONAL_RESULTS, participant_email, template, team_id, team_member_id)


async def send_report_ready(
    leader_email: str, leader_name: str, firm_name: str, completion_count: int, total_count: int,
    report_link: str, team_id: str, team_member_id: Optional[str] = None,
) -> bool:
    template = email_templates.report_ready(leader_name, firm_name, completion_count, total_count, report_link)
    return await deliver(REPORT_READY, leader_email, template, team_id, team_member_id)
