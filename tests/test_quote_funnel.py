import re

import pytest

from app.core.config import settings
from app.core.exceptions import IntakeStepError, InvalidInputError
from app.intake.quote_funnel import FunnelStep, QuoteFunnel, UploadedFile
from app.models import Lead, LeadFile
from app.schemas.intake import QuoteFunnelAnswers
from app.services.intake_service import ATTACHMENT_FAILED_WARNING

ANSWERS = {
    "indoorOutdoor": "exterior",
    "signType": "letras corpóreas",
    "lighting": "LED",
    "size": "3x1 m",
    "hasLogo": "no",
    "name": "María Pérez",
    "phone": "+1 786 555 0199",
    "email": "Maria@Example.com",
    "contactPreference": "whatsapp",
}

LOGO = UploadedFile(filename="logo.png", content_type="image/png", data=b"\x89PNG....")

# Forces a multipart body when no logo is sent
NO_FILES = {"unused": ("blank.txt", b"", "text/plain")}


def walk_to_contact(funnel: QuoteFunnel) -> None:
    funnel.answer(indoor_outdoor="interior")
    funnel.advance()
    funnel.answer(sign_type="vinil")
    funnel.advance()
    funnel.answer(lighting="sin luz")
    funnel.advance()
    funnel.answer(size="1x1 m")
    funnel.advance()
    funnel.answer(has_logo="no")
    funnel.advance()


class TestFunnelStateMachine:
    """Step guards of the six-step quote funnel."""

    def test_starts_on_first_step(self):
        funnel = QuoteFunnel()

        assert funnel.step == FunnelStep.INDOOR_OUTDOOR
        assert funnel.missing_fields() == ["indoor_outdoor"]
        assert not funnel.can_advance()

    def test_incomplete_step_does_not_advance(self):
        funnel = QuoteFunnel()

        with pytest.raises(IntakeStepError) as exc:
            funnel.advance()

        assert exc.value.code == "STEP_INCOMPLETE"
        assert funnel.step == FunnelStep.INDOOR_OUTDOOR

    def test_blank_answer_is_incomplete(self):
        funnel = QuoteFunnel()
        funnel.answer(indoor_outdoor="   ")

        assert not funnel.can_advance()

    def test_back_is_one_step_and_bounded(self):
        funnel = QuoteFunnel()
        assert funnel.back() == FunnelStep.INDOOR_OUTDOOR

        funnel.answer(indoor_outdoor="interior")
        funnel.advance()
        funnel.answer(sign_type="vinil")
        funnel.advance()

        assert funnel.back() == FunnelStep.SIGN_TYPE
        assert funnel.answers.sign_type == "vinil"

    def test_logo_required_unless_declined(self):
        funnel = QuoteFunnel()
        walk_to_contact(funnel)
        funnel.back()
        funnel.answer(has_logo="sí")

        assert funnel.missing_fields() == ["logo"]
        funnel.attach_logo(UploadedFile("empty.png", "image/png", b""))
        assert funnel.missing_fields() == ["logo"]
        funnel.attach_logo(LOGO)
        assert funnel.advance() == FunnelStep.CONTACT_INFO

    def test_contact_step_cannot_advance(self):
        funnel = QuoteFunnel()
        walk_to_contact(funnel)

        with pytest.raises(IntakeStepError):
            funnel.advance()

    def test_cannot_submit_before_contact_step(self):
        funnel = QuoteFunnel()

        with pytest.raises(IntakeStepError):
            funnel.prepare_submission()

    def test_cancel_discards_everything(self):
        funnel = QuoteFunnel()
        walk_to_contact(funnel)
        funnel.attach_logo(LOGO)

        funnel.cancel()

        assert funnel.step == FunnelStep.INDOOR_OUTDOOR
        assert funnel.answers == QuoteFunnelAnswers()
        assert funnel.logo is None

    def test_unknown_field(self):
        with pytest.raises(InvalidInputError) as exc:
            QuoteFunnel().answer(colour="red")
        assert exc.value.code == "INVALID_FIELD"

    def test_submission_payload(self):
        funnel = QuoteFunnel.replay(QuoteFunnelAnswers.model_validate(ANSWERS))

        submission = funnel.prepare_submission(now_ms=1718035200123)

        assert submission.ticket_number == "EG35200123"
        assert submission.lead.source == "wizard"
        assert submission.lead.preferred_contact == "whatsapp"
        assert submission.logo is None
        assert funnel.step == FunnelStep.CONTACT_INFO

    def test_short_clock_is_zero_padded(self):
        funnel = QuoteFunnel.replay(QuoteFunnelAnswers.model_validate(ANSWERS))

        assert funnel.prepare_submission(now_ms=4321).ticket_number == "EG00004321"

    def test_submitted_funnel_is_closed(self):
        funnel = QuoteFunnel.replay(QuoteFunnelAnswers.model_validate(ANSWERS))
        funnel.prepare_submission()
        funnel.mark_submitted()

        with pytest.raises(InvalidInputError) as exc:
            funnel.answer(name="Otra")
        assert exc.value.code == "FUNNEL_SUBMITTED"

    def test_replay_stops_at_first_gap(self):
        answers = dict(ANSWERS, lighting="")

        with pytest.raises(IntakeStepError) as exc:
            QuoteFunnel.replay(QuoteFunnelAnswers.model_validate(answers))

        assert "lighting" in exc.value.detail


class TestQuoteFunnelEndpoint:
    @pytest.mark.asyncio
    async def test_submission_creates_one_wizard_lead(self, client, row_count):
        response = await client.post(
            "/api/v1/intake/quote-funnel", data=ANSWERS, files=NO_FILES
        )

        assert response.status_code == 201, response.text
        data = response.json()
        assert re.fullmatch(r"EG\d{8}", data["ticketNumber"])
        lead = data["lead"]
        assert lead["source"] == "wizard"
        assert lead["status"] == "new"
        assert lead["email"] == "maria@example.com"
        assert lead["ticketNumber"] == data["ticketNumber"]
        for answer in ("exterior", "letras corpóreas", "LED", "3x1 m", "Logo: no"):
            assert answer in lead["notes"]
        assert data["file"] is None
        assert data["warning"] is None
        assert await row_count(Lead) == 1
        assert await row_count(LeadFile) == 0

    @pytest.mark.asyncio
    async def test_logo_is_attached(self, client, row_count):
        response = await client.post(
            "/api/v1/intake/quote-funnel",
            data={**ANSWERS, "hasLogo": "sí"},
            files={"logo": ("logo.png", b"\x89PNG....", "image/png")},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["file"]["leadId"] == data["lead"]["id"]
        assert data["file"]["fileUrl"].startswith("data:image/png;base64,")
        assert await row_count(LeadFile) == 1

    @pytest.mark.asyncio
    async def test_oversized_logo_keeps_lead(self, client, row_count, monkeypatch):
        monkeypatch.setattr(settings, "MAX_FILE_SIZE", 4)

        response = await client.post(
            "/api/v1/intake/quote-funnel",
            data={**ANSWERS, "hasLogo": "sí"},
            files={"logo": ("logo.png", b"\x89PNG....", "image/png")},
        )

        assert response.status_code == 201
        assert response.json()["warning"] == ATTACHMENT_FAILED_WARNING
        assert response.json()["file"] is None
        assert await row_count(Lead) == 1
        assert await row_count(LeadFile) == 0

    @pytest.mark.asyncio
    async def test_incomplete_answers_write_nothing(self, client, row_count):
        answers = {k: v for k, v in ANSWERS.items() if k != "contactPreference"}

        response = await client.post(
            "/api/v1/intake/quote-funnel", data=answers, files=NO_FILES
        )

        assert response.status_code == 400
        assert response.json()["code"] == "STEP_INCOMPLETE"
        assert await row_count(Lead) == 0

    @pytest.mark.asyncio
    async def test_requires_multipart(self, client):
        response = await client.post("/api/v1/intake/quote-funnel", json=ANSWERS)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CONTENT_TYPE"
