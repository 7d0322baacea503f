"""
AI document generation for a tender.

The prompt combines the template's section instructions, the tender and the
company profile. Gemini writes the document when configured; otherwise a
deterministic template rendering is returned so the feature keeps working
offline or when the provider fails.
"""
import json
import logging
import re
import uuid
from dataclasses import dataclass
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session
from sse_starlette.sse import ServerSentEvent

from wewinbid.core.ai import GeminiClient
from wewinbid.core.errors import AppError, NotFoundError, ValidationError
from wewinbid.core.helpers import utcnow
from wewinbid.db.database import SessionLocal
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.companies.db.schema import Company
from wewinbid.modules.documents.db.schema import Document, DocumentStatusEnum, DocumentTypeEnum
from wewinbid.modules.documents.services.templates import DocumentTemplate, get_template
from wewinbid.modules.tenders.db.schema import Tender
from wewinbid.modules.tenders.repositories.repository import TenderRepository

logger = logging.getLogger(__name__)

PROVIDER_GEMINI = "gemini"
PROVIDER_TEMPLATE = "template"


@dataclass
class GenerationContext:
    """Everything needed to generate a document, detached from the DB session."""
    user_id: uuid.UUID
    company_id: uuid.UUID
    tender_id: uuid.UUID
    document_type: DocumentTypeEnum
    title: str
    prompt: str
    template: DocumentTemplate
    tender: dict
    company: dict


def _tender_facts(tender: Tender) -> dict:
    return {
        "title": tender.title,
        "reference": tender.reference,
        "buyer": tender.buyer_name or "Non précisé",
        "deadline": tender.deadline.strftime("%d/%m/%Y %H:%M") if tender.deadline else "Non précisée",
        "description": tender.description or "",
        "sector": tender.sector.value if tender.sector else "Non précisé",
        "value": f"{tender.estimated_value:,.0f} €".replace(",", " ") if tender.estimated_value else "Non précisée",
    }


def _company_facts(company: Company) -> dict:
    return {
        "name": company.name,
        "description": company.description or "",
        "city": company.city or "",
        "employee_count": company.employee_count,
        "annual_revenue": company.annual_revenue,
        "sectors": ", ".join(company.sectors or []),
        "certifications": ", ".join(company.certifications or []),
        "references_count": company.references_count,
    }


def build_prompt(template: DocumentTemplate, tender: dict, company: dict, custom_prompt: Optional[str] = None) -> str:
    sections = "\n".join(f"## {s.title}\n{s.instructions}" for s in template.sections)
    prompt = f"""Tu es un expert en réponse aux appels d'offres publics et privés.
Rédige le document « {template.name} » en français, au format Markdown, pour l'appel d'offres ci-dessous.
Utilise exactement les sections suivantes, chacune introduite par un titre de niveau 2 (##) :

{sections}

APPEL D'OFFRES
- Titre : {tender['title']}
- Référence : {tender['reference']}
- Acheteur : {tender['buyer']}
- Date limite : {tender['deadline']}
- Secteur : {tender['sector']}
- Montant estimé : {tender['value']}
- Description : {tender['description']}

ENTREPRISE CANDIDATE
{json.dumps(company, ensure_ascii=False, indent=2)}

Reste factuel : n'invente ni chiffres ni certifications absents des informations fournies."""
    if custom_prompt:
        prompt += f"\n\nConsignes supplémentaires : {custom_prompt}"
    return prompt


def render_template_content(template: DocumentTemplate, tender: dict, company: dict) -> str:
    parts = []
    for section in template.sections:
        parts.append(
            f"## {section.title}\n\n"
            f"{section.instructions}\n\n"
            f"{company['name']} répond à l'appel d'offres « {tender['title']} » (référence {tender['reference']}) "
            f"publié par {tender['buyer']}. Date limite de remise : {tender['deadline']}."
        )
    return "\n\n".join(parts)


def split_sections(content: str) -> List[dict]:
    """Split markdown on level-2 headings into ordered sections."""
    sections = []
    matches = list(re.finditer(r"^##\s+(.+)$", content, flags=re.MULTILINE))
    if not matches:
        return [{"id": "section-1", "title": "Document", "content": content.strip(), "order": 1}]
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(content)
        title = match.group(1).strip()
        slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-") or f"section-{index + 1}"
        sections.append({
            "id": slug,
            "title": title,
            "content": content[match.end():end].strip(),
            "order": index + 1,
        })
    return sections


def save_generated_document(db: Session, context: GenerationContext, content: str) -> Document:
    document = Document(
        company_id=context.company_id,
        created_by=context.user_id,
        tender_id=context.tender_id,
        name=context.title,
        type=context.document_type,
        status=DocumentStatusEnum.DRAFT,
        content=content,
    )
    db.add(document)
    db.commit()
    db.refresh(document)
    return document


class GenerationService:
    def __init__(self, db: Session):
        self.db = db

    def prepare(self, user: User, tender_id: uuid.UUID, document_type: DocumentTypeEnum,
                custom_prompt: Optional[str] = None) -> GenerationContext:
        template = get_template(document_type)
        if template is None:
            raise ValidationError(f"No generation template for document type {document_type.value}")
        tender = TenderRepository(self.db).get_for_company(user.company_id, tender_id)
        if not tender:
            raise NotFoundError("Tender not found")
        company = self.db.get(Company, user.company_id)

        tender_facts = _tender_facts(tender)
        company_facts = _company_facts(company)
        return GenerationContext(
            user_id=user.id,
            company_id=user.company_id,
            tender_id=tender.id,
            document_type=document_type,
            title=f"{template.name} - {tender.title}",
            prompt=build_prompt(template, tender_facts, company_facts, custom_prompt),
            template=template,
            tender=tender_facts,
            company=company_facts,
        )

    def generate(self, context: GenerationContext, save: bool = False) -> dict:
        content, provider = None, PROVIDER_TEMPLATE
        if GeminiClient.is_configured():
            try:
                content = GeminiClient().generate_text(context.prompt)
                provider = PROVIDER_GEMINI
            except AppError as e:
                logger.warning(f"AI generation unavailable, falling back to template rendering: {e.detail}")
        if content is None:
            content = render_template_content(context.template, context.tender, context.company)

        document_id = save_generated_document(self.db, context, content).id if save else None
        logger.info(f"Generated {context.document_type.value} for tender {context.tender_id} with {provider}")
        return {
            "document_type": context.document_type,
            "title": context.title,
            "content": content,
            "sections": split_sections(content),
            "provider": provider,
            "generated_at": utcnow(),
            "document_id": document_id,
        }


def _template_chunks(context: GenerationContext) -> Iterator[str]:
    content = render_template_content(context.template, context.tender, context.company)
    for section in split_sections(content):
        yield f"## {section['title']}\n\n{section['content']}\n\n"


def _event(event: str, payload: dict) -> ServerSentEvent:
    return ServerSentEvent(data=json.dumps(payload, ensure_ascii=False, default=str), event=event)


def stream_generation(context: GenerationContext, save: bool = False) -> Iterator[ServerSentEvent]:
    """SSE stream: progress, chunk*, then done (or error)."""
    yield _event("progress", {"stage": "started", "message": "Génération en cours"})
    try:
        parts = []
        provider = PROVIDER_TEMPLATE
        if GeminiClient.is_configured():
            try:
                for chunk in GeminiClient().stream_text(context.prompt):
                    provider = PROVIDER_GEMINI
                    parts.append(chunk)
                    yield _event("chunk", {"content": chunk})
            except AppError as e:
                # Text already sent cannot be replaced
                if parts:
                    raise
                logger.warning(f"AI streaming unavailable, falling back to template rendering: {e.detail}")
        if not parts:
            provider = PROVIDER_TEMPLATE
            for chunk in _template_chunks(context):
                parts.append(chunk)
                yield _event("chunk", {"content": chunk})

        content = "".join(parts).strip()
        document_id = None
        if save:
            yield _event("progress", {"stage": "saving", "message": "Enregistrement du document"})
            db = SessionLocal()
            try:
                document_id = save_generated_document(db, context, content).id
            finally:
                db.close()

        yield _event("done", {
            "document_type": context.document_type.value,
            "title": context.title,
            "content": content,
            "sections": split_sections(content),
            "provider": provider,
            "generated_at": utcnow().isoformat(),
            "document_id": str(document_id) if document_id else None,
        })
    except Exception as e:
        logger.error(f"Streaming generation failed for tender {context.tender_id}: {e}", exc_info=True)
        yield _event("error", {"message": "Document generation failed"})
