from app import email_templates


def test_leader_welcome():
    template = email_templates.leader_welcome(
        leader_name="Dana",
        firm_name="Acme",
        member_count=4,
        dashboard_link="http://testserver/dashboard/abc",
        assessment_link="http://testserver/assessment/def",
    )

    assert template.subject == "Your Operating Strengths Assessment is Ready"
    assert "4 team members have been invited" in template.text
    assert "http://testserver/dashboard/abc" in template.text
    assert 'href="http://testserver/assessment/def"' in template.html


def test_participant_invite_and_reminder():
    invite = email_templates.participant_invite("Dana", "Acme", "http://testserver/assessment/xyz")
    reminder = email_templates.participant_invite("Dana", "Acme", "http://testserver/assessment/xyz", reminder=True)

    assert invite.subject == "Dana invited you to the Operating Strengths Assessment"
    assert reminder.subject == "Reminder: Dana invited you to the Operating Strengths Assessment"
    assert "Answer 36 questions" in invite.text
    assert invite.text.startswith("You're invited!")
    assert reminder.text.startswith("A quick reminder:")
    assert "http://testserver/assessment/xyz" in reminder.html


def test_html_escapes_user_input():
    template = email_templates.participant_invite("<b>Dana</b>", "Acme & Co", "http://testserver/assessment/xyz")

    assert "&lt;b&gt;Dana&lt;/b&gt;" in template.html
    assert "Acme &amp; Co" in template.html
    assert "Acme & Co" in template.text


def test_personal_results_formats_scores():
    template = email_templates.personal_results("Sam", alignment=7.8, execution=10.0, accountability=1.0)

    assert template.subject == "Your Operating Strengths Results"
    assert "7.8" in template.text
    assert "10.0" in template.html
    assert "Accountability" in template.text


def test_report_ready():
    template = email_templates.report_ready("Dana", "Acme", 3, 5, "http://testserver/report/r1")

    assert template.subject == "Operating Strengths Report Ready for Acme"
    assert "3 of 5 team members" in template.text
    assert "http://testserver/report/r1" in template.html
