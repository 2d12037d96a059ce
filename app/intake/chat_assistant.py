"""Chat-based ticket intake.

A linear conversation:

``ask_service -> ask_question_1..3 -> ask_name -> ask_email -> ask_phone
-> generate_ticket -> open_ended``

Only the first answer is interpreted: its language is guessed and the
requested service is classified into one of three question sets.  Every
later answer is taken verbatim.  After the phone number the ticket is
generated and handed to the :class:`TicketClient`; the conversation then
stays open-ended and simply offers more help.

The engine is stateless between turns: the caller passes the previous
:class:`ChatState` back in with each message.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Tuple

from app.core.exceptions import InvalidInputError
from app.core.numbering import generate_ticket_number
from app.intake.language import (
    ENGLISH,
    PORTUGUESE,
    SPANISH,
    detect_language,
    ui_language,
)
from app.intake.ticket_client import TicketClient
from app.schemas.intake import ChatState, ChatTurnResponse
from app.schemas.ticket import TicketCreate, TicketDetails

logger = logging.getLogger(__name__)


class ChatStep(str, Enum):
    ASK_SERVICE = "ask_service"
    ASK_QUESTION_1 = "ask_question_1"
    ASK_QUESTION_2 = "ask_question_2"
    ASK_QUESTION_3 = "ask_question_3"
    ASK_NAME = "ask_name"
    ASK_EMAIL = "ask_email"
    ASK_PHONE = "ask_phone"
    GENERATE_TICKET = "generate_ticket"
    OPEN_ENDED = "open_ended"


SIGN = "sign"
LOGO = "logo"
WEBSITE = "website"

_SERVICE_LABELS: Dict[str, Dict[str, str]] = {
    SIGN: {SPANISH: "letrero", ENGLISH: "sign", PORTUGUESE: "letreiro"},
    LOGO: {SPANISH: "logo", ENGLISH: "logo", PORTUGUESE: "logo"},
    WEBSITE: {SPANISH: "página web", ENGLISH: "website", PORTUGUESE: "site"},
}

QUESTIONS: Dict[str, Dict[str, Tuple[str, str, str]]] = {
    SIGN: {
        SPANISH: (
            "¿El letrero será para interior o exterior?",
            "¿Qué tamaño aproximado necesitas? (pequeño, mediano, grande o personalizado)",
            "¿Lo quieres con luz LED o sin luz?",
        ),
        ENGLISH: (
            "Will the sign be for indoor or outdoor use?",
            "What approximate size do you need? (small, medium, large or custom)",
            "Do you want it with LED lighting or without light?",
        ),
        PORTUGUESE: (
            "O letreiro será para uso interno ou externo?",
            "Qual tamanho aproximado você precisa? (pequeno, médio, grande ou personalizado)",
            "Você quer com iluminação LED ou sem luz?",
        ),
    },
    LOGO: {
        SPANISH: (
            "¿Ya tienes una idea del estilo de logo que buscas? (moderno, clásico, minimalista, etc.)",
            "¿Qué colores prefieres para tu logo?",
            "¿Cuál es el nombre de tu empresa o negocio?",
        ),
        ENGLISH: (
            "Do you already have an idea of the logo style you're looking for? (modern, classic, minimalist, etc.)",
            "What colors do you prefer for your logo?",
            "What is the name of your company or business?",
        ),
        PORTUGUESE: (
            "Você já tem uma ideia do estilo de logo que procura? (moderno, clássico, minimalista, etc.)",
            "Quais cores você prefere para seu logo?",
            "Qual é o nome da sua empresa ou negócio?",
        ),
    },
    WEBSITE: {
        SPANISH: (
            "¿Qué tipo de página web necesitas? (landing page simple o página completa con funcionalidades)",
            "¿Ya tienes contenido e imágenes preparadas o necesitas ayuda con eso?",
            "¿Necesitas la página web urgente o tienes tiempo?",
        ),
        ENGLISH: (
            "What type of website do you need? (simple landing page or full website with features)",
            "Do you already have content and images prepared or do you need help with that?",
            "Do you need the website urgently or do you have time?",
        ),
        PORTUGUESE: (
            "Que tipo de site você precisa? (landing page simples ou site completo com funcionalidades)",
            "Você já tem conteúdo e imagens preparados ou precisa de ajuda com isso?",
            "Você precisa do site com urgência ou tem tempo?",
        ),
    },
}

_PROMPTS: Dict[str, Dict[str, str]] = {
    "service_chosen": {
        SPANISH: "¡Excelente elección! Vamos a hacer algunas preguntas sobre tu {service}.",
        ENGLISH: "Excellent choice! Let's ask some questions about your {service}.",
        PORTUGUESE: "Excelente escolha! Vamos fazer algumas perguntas sobre seu {service}.",
    },
    "ask_name": {
        SPANISH: "¡Perfecto! Ahora necesito tus datos para crear tu ticket. ¿Cuál es tu nombre completo?",
        ENGLISH: "Perfect! Now I need your information to create your ticket. What is your full name?",
        PORTUGUESE: "Perfeito! Agora preciso dos seus dados para criar seu ticket. Qual é o seu nome completo?",
    },
    "ask_email": {
        SPANISH: "¿Cuál es tu correo electrónico?",
        ENGLISH: "What is your email address?",
        PORTUGUESE: "Qual é o seu e-mail?",
    },
    "ask_phone": {
        SPANISH: "¿Cuál es tu número de teléfono?",
        ENGLISH: "What is your phone number?",
        PORTUGUESE: "Qual é o seu número de telefone?",
    },
    "ticket_created": {
        SPANISH: "Ticket creado. Número de ticket: #{ticket}. Servicio: {service}. Nuestro equipo te contactará en las próximas 24 horas.",
        ENGLISH: "Ticket created. Ticket number: #{ticket}. Service: {service}. Our team will contact you within the next 24 hours.",
        PORTUGUESE: "Ticket criado. Número do ticket: #{ticket}. Serviço: {service}. Nossa equipe entrará em contato nas próximas 24 horas.",
    },
    "ticket_pending": {
        SPANISH: "Registramos tu información de contacto (ticket #{ticket}), pero la confirmación está pendiente. Te contactaremos pronto.",
        ENGLISH: "We recorded your contact information (ticket #{ticket}), but confirmation is pending. We will contact you soon.",
        PORTUGUESE: "Registramos suas informações de contato (ticket #{ticket}), mas a confirmação está pendente. Entraremos em contato em breve.",
    },
    "anything_else": {
        SPANISH: "¿Hay algo más en lo que pueda ayudarte?",
        ENGLISH: "Is there anything else I can help you with?",
        PORTUGUESE: "Há algo mais em que eu possa ajudá-lo?",
    },
}


def classify_service(text: str, language: str) -> Tuple[str, str]:
    """Map the first answer to ``(service label, question set)``.

    Unrecognised answers keep the visitor's own words as the label and
    fall back to the website questions.
    """
    lowered = text.strip().lower()
    if any(word in lowered for word in ("letrero", "sign", "letreiro")) or lowered == "1":
        question_set = SIGN
    elif "logo" in lowered or lowered == "2":
        question_set = LOGO
    elif (
        any(word in lowered for word in ("web", "página", "website", "site"))
        or lowered == "3"
    ):
        question_set = WEBSITE
    else:
        return text.strip(), WEBSITE
    return _SERVICE_LABELS[question_set][language], question_set


def _prompt(key: str, language: str, **values: str) -> str:
    return _PROMPTS[key][language].format(**values)


class ChatAssistant:
    def __init__(self, ticket_client: TicketClient) -> None:
        self._ticket_client = ticket_client

    async def handle(
        self, state: Optional[ChatState], message: Optional[str]
    ) -> ChatTurnResponse:
        """Consume one visitor message and return the reply and next state."""
        text = (message or "").strip()
        if not text:
            raise InvalidInputError("Message cannot be empty", "INVALID_MESSAGE")

        state = state.model_copy(deep=True) if state else ChatState()
        try:
            step = ChatStep(state.step)
        except ValueError:
            raise InvalidInputError(
                f"Unknown conversation step: {state.step}", "INVALID_STATE"
            ) from None

        if step == ChatStep.ASK_SERVICE:
            return self._choose_service(state, text)
        if step in (
            ChatStep.ASK_QUESTION_1,
            ChatStep.ASK_QUESTION_2,
            ChatStep.ASK_QUESTION_3,
        ):
            return self._record_answer(state, step, text)
        if step == ChatStep.ASK_NAME:
            state.name = text
            return self._reply(
                state, ChatStep.ASK_EMAIL, _prompt("ask_email", self._lang(state))
            )
        if step == ChatStep.ASK_EMAIL:
            state.email = text
            return self._reply(
                state, ChatStep.ASK_PHONE, _prompt("ask_phone", self._lang(state))
            )
        if step == ChatStep.ASK_PHONE:
            state.phone = text
            return await self._generate_ticket(state)
        return self._reply(
            state, ChatStep.OPEN_ENDED, _prompt("anything_else", self._lang(state))
        )

    def _choose_service(self, state: ChatState, text: str) -> ChatTurnResponse:
        if not state.language:
            state.language = detect_language(text)
        language = self._lang(state)
        state.service, state.question_set = classify_service(text, language)
        reply = "\n\n".join(
            (
                _prompt("service_chosen", language, service=state.service),
                QUESTIONS[state.question_set][language][0],
            )
        )
        return self._reply(state, ChatStep.ASK_QUESTION_1, reply)

    def _record_answer(
        self, state: ChatState, step: ChatStep, text: str
    ) -> ChatTurnResponse:
        number = int(step.value[-1])
        state.answers[f"question{number}"] = text
        language = self._lang(state)
        if number < 3:
            question = QUESTIONS[state.question_set or WEBSITE][language][number]
            return self._reply(state, ChatStep(f"ask_question_{number + 1}"), question)
        return self._reply(state, ChatStep.ASK_NAME, _prompt("ask_name", language))

    async def _generate_ticket(self, state: ChatState) -> ChatTurnResponse:
        state.step = ChatStep.GENERATE_TICKET.value
        state.ticket_number = generate_ticket_number()
        language = self._lang(state)
        ticket = TicketCreate(
            name=state.name,
            email=state.email,
            phone=state.phone,
            service=state.service,
            details=TicketDetails(**state.answers),
            ticket_number=state.ticket_number,
            language=ui_language(language),
        )
        confirmed = await self._ticket_client.submit(ticket)
        if confirmed:
            logger.info("Chat ticket %s generated", state.ticket_number)
            reply = _prompt(
                "ticket_created",
                language,
                ticket=state.ticket_number,
                service=state.service or "",
            )
        else:
            logger.warning(
                "Chat ticket %s generated but not confirmed", state.ticket_number
            )
            reply = _prompt("ticket_pending", language, ticket=state.ticket_number)
        return self._reply(state, ChatStep.OPEN_ENDED, reply)

    @staticmethod
    def _lang(state: ChatState) -> str:
        return state.language if state.language in QUESTIONS[SIGN] else SPANISH

    @staticmethod
    def _reply(state: ChatState, step: ChatStep, reply: str) -> ChatTurnResponse:
        state.step = step.value
        return ChatTurnResponse(
            state=state, reply=reply, ticket_number=state.ticket_number
        )
