from datetime import datetime

from wewinbid.modules.tenders.db.schema import SectorEnum
from wewinbid.modules.tenders.services.extraction_service import (
    extract_draft_with_patterns,
    extract_tender_draft,
    guess_sector,
)

NOTICE = """AVIS D'APPEL PUBLIC A LA CONCURRENCE
Pouvoir adjudicateur : Ville de Lyon
Objet du marché : Prestations de gardiennage du siège administratif
Référence : AO-2026-17
Montant estimé : 120 000,00 € HT
Date limite de réception des offres : 15/06/2026 à 14h30
Le présent marché couvre la surveillance des sites municipaux pendant trois ans.
"""


def test_pattern_extraction():
    draft = extract_draft_with_patterns(NOTICE)
    assert draft.title == "Prestations de gardiennage du siège administratif"
    assert draft.reference == "AO-2026-17"
    assert draft.buyer_name == "Ville de Lyon"
    assert draft.deadline == datetime(2026, 6, 15, 14, 30)
    assert draft.estimated_value == 120000.0
    assert draft.sector == SectorEnum.SECURITY_PRIVATE
    assert draft.country == "FR"
    assert draft.description.startswith("Objet du marché")


def test_invalid_date_is_dropped():
    draft = extract_draft_with_patterns("Date limite : 31/02/2026")
    assert draft.deadline is None


def test_sector_guess():
    assert guess_sector("Travaux de construction d'un gymnase") == SectorEnum.CONSTRUCTION
    assert guess_sector("Fourniture de papier") is None


def test_falls_back_to_patterns_without_ai():
    draft, provider = extract_tender_draft(NOTICE)
    assert provider == "patterns"
    assert draft.reference == "AO-2026-17"
