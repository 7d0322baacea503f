"""
Tender compatibility scoring.

Six weighted criteria (documents, experience, budget, timeline, compliance,
competition) add up to a score out of 100, from which the grade, a summary,
the top recommendations and an estimated win probability are derived.
"""
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from wewinbid.core.errors import NotFoundError
from wewinbid.core.helpers import days_until, round_half_up, utcnow
from wewinbid.modules.auth.db.schema import User
from wewinbid.modules.companies.db.schema import Company
from wewinbid.modules.documents.db.schema import Document, DocumentTypeEnum
from wewinbid.modules.subscription.services.subscription_service import SubscriptionService
from wewinbid.modules.tenders.db.schema import Tender, TenderTypeEnum
from wewinbid.modules.tenders.repositories.repository import TenderRepository

logger = logging.getLogger(__name__)

REQUIRED_DOCUMENTS = {
    TenderTypeEnum.PUBLIC: (
        DocumentTypeEnum.DC1,
        DocumentTypeEnum.DC2,
        DocumentTypeEnum.KBIS,
        DocumentTypeEnum.TAX_ATTESTATION,
        DocumentTypeEnum.SOCIAL_ATTESTATION,
        DocumentTypeEnum.INSURANCE_RC,
        DocumentTypeEnum.TECHNICAL_MEMO,
    ),
    TenderTypeEnum.PRIVATE: (
        DocumentTypeEnum.QUOTE,
        DocumentTypeEnum.COMPANY_PRESENTATION,
        DocumentTypeEnum.REFERENCES_LIST,
    ),
}

DEFAULT_AVG_CONTRACT_VALUE = 50000
MAX_RECOMMENDATIONS = 5


@dataclass
class Criterion:
    key: str
    name: str
    score: int
    max_score: int
    details: str
    improvements: List[str] = field(default_factory=list)


def _format_amount(value: float) -> str:
    return f"{value:,.0f}".replace(",", " ")


def score_documents(tender: Tender, document_types: Iterable[DocumentTypeEnum]) -> Criterion:
    required = REQUIRED_DOCUMENTS[tender.type]
    present = set(document_types)
    provided = [doc for doc in required if doc in present]
    completeness = len(provided) / len(required)
    improvements = []
    missing = len(required) - len(provided)
    if missing:
        improvements.append(f"Téléchargez {missing} documents manquants")
    if DocumentTypeEnum.TECHNICAL_MEMO in required and DocumentTypeEnum.TECHNICAL_MEMO not in present:
        improvements.append("Ajoutez votre mémoire technique")
    return Criterion(
        key="documents",
        name="Complétude documentaire",
        score=round_half_up(completeness * 25),
        max_score=25,
        details=f"{len(provided)}/{len(required)} documents fournis",
        improvements=improvements,
    )


def score_experience(tender: Tender, company: Company) -> Criterion:
    score = 0
    improvements = []
    sectors = company.sectors or []
    sector = tender.sector.value if tender.sector else None
    relevant = sector is not None and sector in sectors
    if relevant:
        score += 10
    else:
        improvements.append(f'Ajoutez des références dans le secteur "{sector or "non renseigné"}"')

    references = company.references_count or 0
    if references >= 5:
        score += 10
    elif references >= 3:
        score += 6
        improvements.append("Ajoutez plus de références clients")
    else:
        score += 3
        improvements.append("Constituez un dossier de références solide")

    return Criterion(
        key="experience",
        name="Expérience & Références",
        score=score,
        max_score=20,
        details=f"{references} références, secteur {'pertinent' if relevant else 'différent'}",
        improvements=improvements,
    )


def score_budget(tender: Tender, company: Company) -> Criterion:
    improvements = []
    estimated = tender.estimated_value or 0
    average = company.avg_contract_value or DEFAULT_AVG_CONTRACT_VALUE
    ratio = estimated / average
    if 0.5 <= ratio <= 2:
        score = 15
    elif 0.25 <= ratio <= 4:
        score = 10
        if ratio > 2:
            improvements.append("Ce marché est plus important que vos contrats habituels")
    else:
        score = 5
        improvements.append("La valeur de ce marché est éloignée de vos contrats types")
    return Criterion(
        key="budget",
        name="Alignement budgétaire",
        score=score,
        max_score=15,
        details=f"Valeur estimée: {_format_amount(estimated)}€",
        improvements=improvements,
    )


def score_timeline(tender: Tender, now: Optional[datetime] = None) -> Criterion:
    if tender.deadline is None:
        return Criterion(
            key="timeline",
            name="Faisabilité délai",
            score=8,
            max_score=15,
            details="Date limite non spécifiée",
            improvements=["Vérifiez la date limite de dépôt"],
        )

    days = days_until(tender.deadline, now)
    if days > 21:
        score, improvements = 15, []
    elif days > 14:
        score, improvements = 12, ["Délai confortable mais commencez rapidement"]
    elif days > 7:
        score, improvements = 8, ["Délai serré - priorisez ce dossier"]
    elif days > 0:
        score, improvements = 4, ["URGENT: Moins de 7 jours pour finaliser"]
    else:
        score, improvements = 0, ["Date limite dépassée"]
    return Criterion(
        key="timeline",
        name="Faisabilité délai",
        score=score,
        max_score=15,
        details=f"{days} jours restants" if days > 0 else "Délai dépassé",
        improvements=improvements,
    )


def score_compliance(company: Company) -> Criterion:
    score = 0
    improvements = []
    if company.certifications:
        score += 5
    else:
        improvements.append("Obtenez des certifications (ISO, Qualibat, etc.)")
    if company.has_rc_insurance:
        score += 5
    else:
        improvements.append("Assurez-vous d'avoir une RC Pro à jour")
    if company.has_fiscal_attestation:
        score += 5
    else:
        improvements.append("Mettez à jour votre attestation fiscale")
    return Criterion(
        key="compliance",
        name="Conformité réglementaire",
        score=score,
        max_score=15,
        details=f"{score}/15 critères de conformité",
        improvements=improvements,
    )


def score_competition(tender: Tender) -> Criterion:
    estimated = tender.estimated_value or 0
    if tender.type == TenderTypeEnum.PRIVATE:
        score, improvements = 8, ["Personnalisez votre approche pour le client"]
    elif estimated < 40000:
        score, improvements = 7, []
    elif estimated < 200000:
        score, improvements = 5, ["Marché concurrentiel - démarquez-vous"]
    else:
        score, improvements = 3, ["Forte concurrence - excellez sur tous les critères"]
    return Criterion(
        key="competition",
        name="Positionnement concurrentiel",
        score=score,
        max_score=10,
        details="Marché privé" if tender.type == TenderTypeEnum.PRIVATE else "Marché public",
        improvements=improvements,
    )


def get_grade(percentage: int) -> str:
    if percentage >= 85:
        return "A"
    if percentage >= 70:
        return "B"
    if percentage >= 55:
        return "C"
    if percentage >= 40:
        return "D"
    return "F"


def calculate_win_probability(percentage: int, tender_type: TenderTypeEnum) -> int:
    multiplier = 1.2 if tender_type == TenderTypeEnum.PRIVATE else 0.8
    return min(round_half_up(percentage * multiplier), 95)


def generate_summary(percentage: int, criteria: List[Criterion]) -> str:
    weak_points = ", ".join(c.name.lower() for c in criteria if c.score / c.max_score < 0.6)
    if percentage >= 85:
        return "Excellent dossier ! Vous êtes très bien positionné pour remporter ce marché."
    if percentage >= 70:
        return f"Bon dossier avec quelques points à améliorer : {weak_points}."
    if percentage >= 55:
        return f"Dossier correct mais nécessite des améliorations sur : {weak_points}."
    return f"Dossier à renforcer significativement. Concentrez-vous sur : {weak_points}."


def calculate_score(
    tender: Tender,
    company: Company,
    document_types: Iterable[DocumentTypeEnum],
    now: Optional[datetime] = None,
) -> dict:
    now = now or utcnow()
    criteria = [
        score_documents(tender, document_types),
        score_experience(tender, company),
        score_budget(tender, company),
        score_timeline(tender, now),
        score_compliance(company),
        score_competition(tender),
    ]
    total = sum(c.score for c in criteria)
    max_score = sum(c.max_score for c in criteria)
    pct = round_half_up(total / max_score * 100)
    recommendations = [item for c in criteria for item in c.improvements][:MAX_RECOMMENDATIONS]
    return {
        "tender_id": tender.id,
        "total_score": total,
        "max_score": max_score,
        "percentage": pct,
        "grade": get_grade(pct),
        "criteria": [asdict(c) for c in criteria],
        "summary": generate_summary(pct, criteria),
        "recommendations": recommendations,
        "win_probability": calculate_win_probability(pct, tender.type),
        "calculated_at": now,
    }


class ScoringService:
    def __init__(self, db: Session):
        self.db = db

    def _load(self, user: User, tender_id) -> Tender:
        tender = TenderRepository(self.db).get_for_company(user.company_id, tender_id)
        if not tender:
            raise NotFoundError("Tender not found")
        return tender

    def score_tender(self, user: User, tender_id) -> dict:
        company = user.company
        SubscriptionService(self.db).ensure_feature(company, "ai_score")
        tender = self._load(user, tender_id)

        document_types = [
            row.type for row in
            self.db.query(Document.type).filter(Document.tender_id == tender.id, Document.company_id == company.id).all()
        ]
        result = calculate_score(tender, company, document_types)

        tender.ai_score = result["percentage"]
        stored = dict(result, tender_id=str(tender.id), calculated_at=result["calculated_at"].isoformat())
        tender.ai_score_details = stored
        tender.ai_score_updated_at = result["calculated_at"]
        TenderRepository(self.db).add_history(
            tender.id, user.id, "scored", details={"score": result["percentage"], "grade": result["grade"]}
        )
        self.db.commit()
        logger.info(f"Tender {tender.id} scored {result['percentage']} ({result['grade']})")
        return result

    def get_score(self, user: User, tender_id) -> dict:
        tender = self._load(user, tender_id)
        if not tender.ai_score_details:
            raise NotFoundError("This tender has not been scored yet")
        return tender.ai_score_details
