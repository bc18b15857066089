"""
AI follow-up suggestions.

Drafts a follow-up email for a job opening with the configured LLM. Without an
OPENAI_API_KEY a deterministic template draft is returned instead, so the
endpoint works in development and tests.
"""
import json
import logging
from typing import Optional, Tuple
from openai import APIError
from sqlalchemy.orm import Session

from prospectflow.core.config import OPENAI_API_KEY, OPENAI_MODEL
from prospectflow.db.models.user import User
from prospectflow.db.models.job_opening import JobOpening
from prospectflow.llm.provider import LLMProvider
from prospectflow.llm.openai_provider import OpenAIProvider
from prospectflow.schemas.ai import FollowUpSuggestionRequest, FollowUpSuggestionResponse
from prospectflow.services import job_opening_service, settings_service
from prospectflow.services.follow_up_service import default_content

logger = logging.getLogger(__name__)

ORDINALS = {1: "first", 2: "second", 3: "third"}

TEMPLATE_LINES = {
    1: "I wanted to follow up on my earlier email about the {role} role at {company}. "
       "I'm still very interested and would be glad to share more about my background.",
    2: "I'm checking in again regarding the {role} position at {company}. "
       "I'd appreciate any update you can share on the hiring process.",
    3: "I'm reaching out one last time about the {role} opportunity at {company}. "
       "If the timing isn't right, I'd be grateful if you could keep me in mind for future openings.",
}


class AISuggestionError(RuntimeError):
    """The LLM call failed."""


def get_provider() -> Optional[LLMProvider]:
    """LLM provider when an API key is configured, otherwise None."""
    if not OPENAI_API_KEY:
        return None
    return OpenAIProvider(api_key=OPENAI_API_KEY)


def _greeting_name(opening: JobOpening) -> str:
    if opening.contacts:
        return opening.contacts[0].name.split()[0]
    return "there"


def template_suggestion(
    opening: JobOpening,
    user: User,
    follow_up_number: int,
    signature: str = "",
    subject: str = "",
    extra_context: Optional[str] = None,
) -> Tuple[str, str]:
    """Deterministic subject and body for a follow-up."""
    subject = subject or f"Following up: {opening.role_title} at {opening.company_name_cache}"
    paragraphs = [
        f"Hi {_greeting_name(opening)},",
        TEMPLATE_LINES[follow_up_number].format(role=opening.role_title, company=opening.company_name_cache),
    ]
    if extra_context and extra_context.strip():
        paragraphs.append(extra_context.strip())
    paragraphs.append("Thank you for your time.")
    paragraphs.append(signature or f"Best regards,\n{user.full_name}")
    return subject, "\n\n".join(paragraphs)


def _build_messages(opening: JobOpening, user: User, request: FollowUpSuggestionRequest, signature: str) -> list:
    contact_names = ", ".join(c.name for c in opening.contacts) or "the hiring team"
    sent = sum(1 for f in opening.follow_ups if f.status == "Sent")
    prompt = (
        f"Write the {ORDINALS[request.follow_up_number]} follow-up email from {user.full_name} "
        f"about the {opening.role_title} role at {opening.company_name_cache}.\n"
        f"Recipients: {contact_names}.\n"
        f"Initial email sent on {opening.initial_email_date.isoformat()}; follow-ups already sent: {sent}.\n"
        f"Current status: {opening.status}.\n"
        f"Tone: {request.tone}. Keep it under 150 words, polite and specific.\n"
    )
    if opening.notes:
        prompt += f"Notes about the opening: {opening.notes}\n"
    if request.extra_context:
        prompt += f"Also mention: {request.extra_context}\n"
    if signature:
        prompt += f"End with this signature exactly:\n{signature}\n"
    prompt += 'Respond with JSON: {"subject": "...", "body": "..."}'
    return [
        {"role": "system", "content": "You write short, professional follow-up emails for job seekers and sales outreach."},
        {"role": "user", "content": prompt},
    ]


def suggest_follow_up(db: Session, user: User, request: FollowUpSuggestionRequest) -> FollowUpSuggestionResponse:
    """
    Draft a follow-up email for one of the user's job openings.

    Raises:
        LookupError: opening not found for this user
        AISuggestionError: the LLM call failed
    """
    opening = job_opening_service.get_job_opening(db, user.id, request.job_opening_id)
    templates = settings_service.get_templates(db, user.id)
    default_subject, _ = default_content(templates, request.follow_up_number - 1)
    signature = templates.shared_signature.strip()

    provider = get_provider()
    if provider is None:
        subject, body = template_suggestion(
            opening, user, request.follow_up_number, signature, default_subject, request.extra_context
        )
        logger.info(f"Template follow-up draft for job_opening_id={opening.id}")
        return FollowUpSuggestionResponse(subject=subject, body=body, source="template")

    try:
        response = provider.chat(
            _build_messages(opening, user, request, signature),
            model=OPENAI_MODEL,
            temperature=0.7,
            response_format={"type": "json_object"},
        )
    except APIError as e:
        raise AISuggestionError(f"AI suggestion failed: {e}")

    try:
        parsed = json.loads(response.content)
        subject = str(parsed.get("subject") or "").strip()
        body = str(parsed.get("body") or "").strip()
    except (json.JSONDecodeError, AttributeError):
        logger.warning("LLM returned non-JSON content, using it as the body")
        subject, body = "", response.content.strip()

    if not body:
        raise AISuggestionError("AI suggestion was empty")

    logger.info(
        f"AI follow-up draft for job_opening_id={opening.id}: "
        f"tokens_in={response.tokens_in}, tokens_out={response.tokens_out}"
    )
    return FollowUpSuggestionResponse(
        subject=subject or default_subject or f"Following up: {opening.role_title} at {opening.company_name_cache}",
        body=body,
        source="ai",
    )
