"""
Builds a tender draft from an uploaded call-for-tender document.

Gemini is asked for a JSON summary when configured; otherwise (or when the
model reply cannot be used) a set of regular expressions picks out the
common fields of French tender notices.
"""
import logging
import re
from datetime import datetime
from typing import Optional

from wewinbid.core.ai import GeminiClient, parse_json_response
from wewinbid.core.errors import AppError
from wewinbid.modules.tenders.db.schema import SectorEnum
from wewinbid.modules.tenders.models.pydantic_models import TenderDraft

logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 30000

EXTRACTION_PROMPT = """Tu es un expert des marchés publics. Analyse le document d'appel d'offres ci-dessous et retourne UNIQUEMENT un objet JSON avec les clés suivantes :
{{
  "title": "objet du marché",
  "reference": "référence ou numéro du marché",
  "buyer_name": "nom de l'acheteur",
  "deadline": "date limite de remise des offres au format YYYY-MM-DDTHH:MM:SS",
  "estimated_value": montant estimé en euros (nombre) ou null,
  "description": "résumé en 3 phrases",
  "sector": l'une des valeurs {sectors} ou null,
  "country": "code pays ISO à 2 lettres"
}}
Si une information est introuvable, utilise null.

DOCUMENT :
{text}
"""

_DATE_PATTERN = re.compile(
    r"(?:date\s+limite|remise\s+des\s+offres|avant\s+le)[^0-9]{0,60}(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})(?:[^0-9]{1,10}(\d{1,2})\s*[h:]\s*(\d{2})?)?",
    re.IGNORECASE,
)
_REFERENCE_PATTERN = re.compile(r"(?:r[ée]f[ée]rence|n°\s*de\s*march[ée]|march[ée]\s*n°)\s*[:\-]?\s*([A-Z0-9][A-Z0-9_./-]{2,50})", re.IGNORECASE)
_TITLE_PATTERN = re.compile(r"objet\s+(?:du\s+march[ée]|de\s+la\s+consultation)\s*[:\-]?\s*(.+)", re.IGNORECASE)
_BUYER_PATTERN = re.compile(r"(?:pouvoir\s+adjudicateur|acheteur|ma[iî]tre\s+d'ouvrage)\s*[:\-]?\s*(.+)", re.IGNORECASE)
_VALUE_PATTERN = re.compile(r"(?:montant|valeur)\s+(?:estim[ée]e?|global)[^0-9]{0,40}([\d\s.,]{3,})\s*(?:€|eur|euros)", re.IGNORECASE)

_SECTOR_KEYWORDS = {
    SectorEnum.CONSTRUCTION: ("travaux", "construction", "bâtiment", "génie civil"),
    SectorEnum.IT_SOFTWARE: ("logiciel", "informatique", "numérique", "développement"),
    SectorEnum.CLEANING: ("nettoyage", "propreté"),
    SectorEnum.SECURITY_PRIVATE: ("gardiennage", "sécurité privée", "surveillance humaine"),
    SectorEnum.SECURITY_ELECTRONIC: ("vidéoprotection", "vidéosurveillance", "contrôle d'accès"),
    SectorEnum.CATERING: ("restauration", "repas"),
    SectorEnum.TRANSPORT: ("transport",),
    SectorEnum.ENERGY: ("énergie", "électricité", "photovoltaïque"),
    SectorEnum.MAINTENANCE: ("maintenance", "entretien"),
    SectorEnum.CONSULTING: ("conseil", "assistance à maîtrise d'ouvrage", "étude"),
    SectorEnum.HEALTHCARE: ("santé", "hospitalier", "médical"),
    SectorEnum.EDUCATION: ("formation", "enseignement", "scolaire"),
    SectorEnum.LOGISTICS: ("logistique", "entreposage"),
}


def _first_line(value: str, limit: int = 500) -> str:
    return value.strip().splitlines()[0].strip()[:limit]


def _parse_amount(raw: str) -> Optional[float]:
    cleaned = raw.replace("\u00a0", "").replace(" ", "")
    if "," in cleaned and "." in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    else:
        cleaned = cleaned.replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def guess_sector(text: str) -> Optional[SectorEnum]:
    lowered = text.lower()
    best, best_hits = None, 0
    for sector, keywords in _SECTOR_KEYWORDS.items():
        hits = sum(lowered.count(keyword) for keyword in keywords)
        if hits > best_hits:
            best, best_hits = sector, hits
    return best


def extract_draft_with_patterns(text: str) -> TenderDraft:
    draft = TenderDraft(country="FR")
    if match := _TITLE_PATTERN.search(text):
        draft.title = _first_line(match.group(1))
    if match := _REFERENCE_PATTERN.search(text):
        draft.reference = match.group(1).rstrip(".")
    if match := _BUYER_PATTERN.search(text):
        draft.buyer_name = _first_line(match.group(1), 255)
    if match := _DATE_PATTERN.search(text):
        day, month, year, hour, minute = match.groups()
        try:
            draft.deadline = datetime(int(year), int(month), int(day), int(hour or 12), int(minute or 0))
        except ValueError:
            draft.deadline = None
    if match := _VALUE_PATTERN.search(text):
        draft.estimated_value = _parse_amount(match.group(1))
    draft.sector = guess_sector(text)
    paragraphs = [p.strip() for p in text.split("\n") if len(p.strip()) > 40]
    if paragraphs:
        draft.description = " ".join(paragraphs[:3])[:1000]
    return draft


def _draft_from_ai(data: dict) -> TenderDraft:
    sector = data.get("sector")
    if sector not in SectorEnum.__members__:
        sector = None
    deadline = data.get("deadline")
    try:
        deadline = datetime.fromisoformat(deadline) if deadline else None
    except (TypeError, ValueError):
        deadline = None
    value = data.get("estimated_value")
    return TenderDraft(
        title=data.get("title"),
        reference=data.get("reference"),
        buyer_name=data.get("buyer_name"),
        deadline=deadline,
        estimated_value=value if isinstance(value, (int, float)) else None,
        description=data.get("description"),
        sector=sector,
        country=(data.get("country") or "FR")[:2].upper(),
    )


def extract_tender_draft(text: str) -> tuple[TenderDraft, str]:
    """Returns the draft and the provider that produced it."""
    if GeminiClient.is_configured():
        prompt = EXTRACTION_PROMPT.format(
            sectors=", ".join(SectorEnum.__members__),
            text=text[:MAX_PROMPT_CHARS],
        )
        try:
            reply = GeminiClient().generate_text(prompt)
            return _draft_from_ai(parse_json_response(reply)), "gemini"
        except (AppError, ValueError) as e:
            logger.warning(f"AI extraction unavailable, falling back to pattern extraction: {e}")
    return extract_draft_with_patterns(text), "patterns"
