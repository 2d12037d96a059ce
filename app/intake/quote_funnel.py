"""The quote funnel: a six-step sign quote wizard.

``IndoorOutdoor -> SignType -> Lighting -> Size -> LogoUpload ->
ContactInfo -> Submitted``.  Steps advance one at a time, only when the
current step's required answers are present, and may go back one at a
time.  Nothing is persisted until the terminal submission; cancelling
discards every answer.

The funnel itself never touches the database.  :meth:`prepare_submission`
hands back the lead payload and optional logo, and the intake service
performs the writes before calling :meth:`mark_submitted`.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import IntakeStepError, InvalidInputError
from app.core.numbering import generate_ticket_number
from app.schemas.common import LeadSource
from app.schemas.intake import QuoteFunnelAnswers
from app.schemas.lead import LeadCreate

NO_LOGO = "no"


class FunnelStep(IntEnum):
    INDOOR_OUTDOOR = 1
    SIGN_TYPE = 2
    LIGHTING = 3
    SIZE = 4
    LOGO_UPLOAD = 5
    CONTACT_INFO = 6
    SUBMITTED = 7


_REQUIRED_FIELDS: Dict[FunnelStep, Tuple[str, ...]] = {
    FunnelStep.INDOOR_OUTDOOR: ("indoor_outdoor",),
    FunnelStep.SIGN_TYPE: ("sign_type",),
    FunnelStep.LIGHTING: ("lighting",),
    FunnelStep.SIZE: ("size",),
    FunnelStep.LOGO_UPLOAD: ("has_logo",),
    FunnelStep.CONTACT_INFO: ("name", "phone", "email", "contact_preference"),
}


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class FunnelSubmission:
    ticket_number: str
    lead: LeadCreate
    logo: Optional[UploadedFile]


def _filled(value: Optional[str]) -> bool:
    return bool(value and value.strip())


class QuoteFunnel:
    def __init__(self) -> None:
        self._step = FunnelStep.INDOOR_OUTDOOR
        self._answers = QuoteFunnelAnswers()
        self._logo: Optional[UploadedFile] = None

    @property
    def step(self) -> FunnelStep:
        return self._step

    @property
    def answers(self) -> QuoteFunnelAnswers:
        return self._answers

    @property
    def logo(self) -> Optional[UploadedFile]:
        return self._logo

    def answer(self, **fields: Optional[str]) -> None:
        """Record answers for any step; unknown field names are rejected."""
        self._ensure_open()
        unknown = set(fields) - set(QuoteFunnelAnswers.model_fields)
        if unknown:
            raise InvalidInputError(
                f"Unknown funnel field(s): {', '.join(sorted(unknown))}",
                "INVALID_FIELD",
            )
        self._answers = self._answers.model_copy(update=fields)

    def attach_logo(self, upload: Optional[UploadedFile]) -> None:
        self._ensure_open()
        self._logo = upload

    def missing_fields(self, step: Optional[FunnelStep] = None) -> List[str]:
        """Required answers still empty for *step* (default: the current one)."""
        step = self._step if step is None else step
        missing = [
            name
            for name in _REQUIRED_FIELDS.get(step, ())
            if not _filled(getattr(self._answers, name))
        ]
        if step == FunnelStep.LOGO_UPLOAD and not missing and self._needs_logo():
            if self._logo is None or self._logo.size == 0:
                missing.append("logo")
        return missing

    def can_advance(self) -> bool:
        return self._step < FunnelStep.CONTACT_INFO and not self.missing_fields()

    def advance(self) -> FunnelStep:
        self._ensure_open()
        if self._step == FunnelStep.CONTACT_INFO:
            raise IntakeStepError("Contact information is completed by submitting")
        self._require_complete(self._step)
        self._step = FunnelStep(self._step + 1)
        return self._step

    def back(self) -> FunnelStep:
        self._ensure_open()
        if self._step > FunnelStep.INDOOR_OUTDOOR:
            self._step = FunnelStep(self._step - 1)
        return self._step

    def cancel(self) -> None:
        """Discard every answer and start over; nothing was persisted."""
        self._step = FunnelStep.INDOOR_OUTDOOR
        self._answers = QuoteFunnelAnswers()
        self._logo = None

    def build_notes(self, ticket_number: str) -> str:
        a = self._answers
        return (
            f"Indoor/Outdoor: {a.indoor_outdoor}\n"
            f"Tipo: {a.sign_type}\n"
            f"Iluminación: {a.lighting}\n"
            f"Tamaño: {a.size}\n"
            f"Logo: {a.has_logo}\n"
            f"Ticket: {ticket_number}"
        )

    def prepare_submission(self, now_ms: Optional[int] = None) -> FunnelSubmission:
        """Build the terminal payload without leaving the contact step.

        If the writes that follow fail the funnel is still on
        ``CONTACT_INFO`` and may be submitted again.
        """
        self._ensure_open()
        if self._step != FunnelStep.CONTACT_INFO:
            raise IntakeStepError(
                f"Cannot submit from step {self._step.value} ({self._step.name.lower()})"
            )
        self._require_complete(FunnelStep.CONTACT_INFO)
        ticket_number = generate_ticket_number(now_ms)
        a = self._answers
        lead = LeadCreate(
            name=a.name,
            email=a.email,
            phone=a.phone,
            source=LeadSource.wizard.value,
            notes=self.build_notes(ticket_number),
            preferred_contact=a.contact_preference,
            ticket_number=ticket_number,
        )
        logo = self._logo if self._needs_logo() else None
        return FunnelSubmission(ticket_number=ticket_number, lead=lead, logo=logo)

    def mark_submitted(self) -> None:
        self._step = FunnelStep.SUBMITTED

    @classmethod
    def replay(
        cls, answers: QuoteFunnelAnswers, logo: Optional[UploadedFile] = None
    ) -> "QuoteFunnel":
        """Walk a fresh funnel through every step with *answers*.

        Stops with :class:`IntakeStepError` at the first incomplete step;
        on success the funnel sits on ``CONTACT_INFO`` ready to submit.
        """
        funnel = cls()
        for step, names in _REQUIRED_FIELDS.items():
            funnel.answer(**{name: getattr(answers, name) for name in names})
            if step == FunnelStep.LOGO_UPLOAD:
                funnel.attach_logo(logo)
            if step != FunnelStep.CONTACT_INFO:
                funnel.advance()
        return funnel

    def _needs_logo(self) -> bool:
        has_logo = self._answers.has_logo
        return _filled(has_logo) and has_logo.strip().lower() != NO_LOGO

    def _require_complete(self, step: FunnelStep) -> None:
        missing = self.missing_fields(step)
        if missing:
            raise IntakeStepError(
                f"Step {step.value} ({step.name.lower()}) is incomplete: "
                f"missing {', '.join(missing)}"
            )

    def _ensure_open(self) -> None:
        if self._step == FunnelStep.SUBMITTED:
            raise InvalidInputError(
                "Quote funnel was already submitted", "FUNNEL_SUBMITTED"
            )
