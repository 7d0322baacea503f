import uuid
from datetime import datetime, timedelta

from wewinbid.modules.companies.db.schema import Company
from wewinbid.modules.documents.db.schema import DocumentTypeEnum
from wewinbid.modules.tenders.db.schema import SectorEnum, Tender, TenderTypeEnum
from wewinbid.modules.tenders.services.scoring_service import (
    REQUIRED_DOCUMENTS,
    calculate_score,
    calculate_win_probability,
    get_grade,
    score_budget,
    score_documents,
    score_timeline,
)

NOW = datetime(2026, 3, 2, 9, 0, 0)


def make_tender(**fields):
    defaults = dict(
        id=uuid.uuid4(), type=TenderTypeEnum.PUBLIC, title="Surveillance", country="FR",
        sector=SectorEnum.CONSTRUCTION, estimated_value=100000, deadline=NOW + timedelta(days=30),
    )
    defaults.update(fields)
    return Tender(**defaults)


def strong_company():
    return Company(
        name="Bâtisseurs", sectors=["CONSTRUCTION"], certifications=["ISO 9001"], references_count=6,
        avg_contract_value=100000, has_rc_insurance=True, has_fiscal_attestation=True,
    )


def test_complete_public_file_scores_grade_a():
    result = calculate_score(make_tender(), strong_company(), REQUIRED_DOCUMENTS[TenderTypeEnum.PUBLIC], now=NOW)

    scores = {c["key"]: c["score"] for c in result["criteria"]}
    assert scores == {
        "documents": 25, "experience": 20, "budget": 15, "timeline": 15, "compliance": 15, "competition": 5,
    }
    assert result["total_score"] == 95
    assert result["max_score"] == 100
    assert result["percentage"] == 95
    assert result["grade"] == "A"
    assert result["win_probability"] == 76
    assert result["summary"].startswith("Excellent dossier")


def test_weak_private_file_scores_grade_f():
    tender = make_tender(type=TenderTypeEnum.PRIVATE, sector=None, estimated_value=None, deadline=None)
    result = calculate_score(tender, Company(name="Nouvelle", sectors=[], certifications=[], references_count=0,
                                              has_rc_insurance=False, has_fiscal_attestation=False), [], now=NOW)

    assert result["total_score"] == 24
    assert result["grade"] == "F"
    assert result["win_probability"] == 29
    assert len(result["recommendations"]) == 5


def test_documents_counts_distinct_required_types():
    tender = make_tender()
    criterion = score_documents(tender, [DocumentTypeEnum.DC1, DocumentTypeEnum.DC1, DocumentTypeEnum.KBIS])
    assert criterion.details == "2/7 documents fournis"
    assert criterion.score == 7
    assert "Ajoutez votre mémoire technique" in criterion.improvements


def test_budget_far_from_usual_contracts():
    criterion = score_budget(make_tender(estimated_value=1_000_000), strong_company())
    assert criterion.score == 5


def test_timeline_thresholds():
    assert score_timeline(make_tender(deadline=NOW + timedelta(days=10)), NOW).score == 8
    assert score_timeline(make_tender(deadline=NOW + timedelta(days=3)), NOW).score == 4
    past = score_timeline(make_tender(deadline=NOW - timedelta(days=1)), NOW)
    assert past.score == 0
    assert past.details == "Délai dépassé"


def test_grade_boundaries():
    assert [get_grade(p) for p in (85, 84, 70, 69, 55, 54, 40, 39)] == ["A", "B", "B", "C", "C", "D", "D", "F"]


def test_win_probability_is_capped():
    assert calculate_win_probability(100, TenderTypeEnum.PRIVATE) == 95
    assert calculate_win_probability(50, TenderTypeEnum.PUBLIC) == 40
