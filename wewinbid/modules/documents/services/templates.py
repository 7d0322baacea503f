"""
Catalogue of document types the generator knows how to write.

Each template lists its sections with the instructions given to the model;
the same sections drive the offline fallback when no AI provider is
configured.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from wewinbid.modules.documents.db.schema import DocumentTypeEnum


@dataclass(frozen=True)
class TemplateSection:
    id: str
    title: str
    instructions: str


@dataclass(frozen=True)
class DocumentTemplate:
    key: DocumentTypeEnum
    name: str
    category: str
    description: str
    sections: List[TemplateSection] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "key": self.key.value,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "sections": [{"id": s.id, "title": s.title} for s in self.sections],
        }


TEMPLATES: Dict[DocumentTypeEnum, DocumentTemplate] = {
    t.key: t for t in [
        DocumentTemplate(
            key=DocumentTypeEnum.TECHNICAL_MEMO,
            name="Mémoire technique",
            category="technical",
            description="Réponse technique détaillée au cahier des charges.",
            sections=[
                TemplateSection("context", "Compréhension du besoin", "Reformuler le besoin de l'acheteur et les enjeux du marché."),
                TemplateSection("organisation", "Organisation et moyens", "Décrire l'équipe, les moyens humains et matériels mobilisés."),
                TemplateSection("methodology", "Méthodologie d'exécution", "Détailler les étapes de réalisation et les livrables."),
                TemplateSection("quality", "Démarche qualité", "Présenter le contrôle qualité, le suivi et les indicateurs."),
                TemplateSection("environment", "Engagements environnementaux", "Présenter les mesures environnementales et RSE."),
            ],
        ),
        DocumentTemplate(
            key=DocumentTypeEnum.COVER_LETTER,
            name="Lettre de candidature",
            category="administrative",
            description="Lettre d'accompagnement de l'offre.",
            sections=[
                TemplateSection("introduction", "Objet", "Présenter la candidature et le marché visé."),
                TemplateSection("motivation", "Motivation", "Expliquer l'intérêt de l'entreprise pour ce marché."),
                TemplateSection("closing", "Conclusion", "Conclure avec une formule de politesse professionnelle."),
            ],
        ),
        DocumentTemplate(
            key=DocumentTypeEnum.METHODOLOGY,
            name="Note méthodologique",
            category="technical",
            description="Méthodologie d'intervention proposée.",
            sections=[
                TemplateSection("approach", "Approche générale", "Décrire l'approche retenue et ses principes."),
                TemplateSection("phases", "Phasage", "Présenter les phases, jalons et livrables."),
                TemplateSection("risks", "Gestion des risques", "Identifier les risques principaux et les mesures associées."),
            ],
        ),
        DocumentTemplate(
            key=DocumentTypeEnum.COMPANY_PRESENTATION,
            name="Présentation de l'entreprise",
            category="commercial",
            description="Présentation de la société, de ses références et certifications.",
            sections=[
                TemplateSection("overview", "Qui sommes-nous", "Présenter l'entreprise, son histoire et ses chiffres clés."),
                TemplateSection("expertise", "Savoir-faire", "Décrire les domaines d'expertise et les secteurs couverts."),
                TemplateSection("certifications", "Certifications et assurances", "Lister certifications, assurances et attestations."),
            ],
        ),
        DocumentTemplate(
            key=DocumentTypeEnum.COMMERCIAL_PROPOSAL,
            name="Proposition commerciale",
            category="commercial",
            description="Offre commerciale synthétique.",
            sections=[
                TemplateSection("summary", "Synthèse de l'offre", "Résumer la proposition et sa valeur ajoutée."),
                TemplateSection("scope", "Périmètre", "Détailler les prestations incluses."),
                TemplateSection("pricing", "Conditions financières", "Présenter les principes de prix et conditions de paiement."),
            ],
        ),
        DocumentTemplate(
            key=DocumentTypeEnum.QUALITY_PLAN,
            name="Plan d'assurance qualité",
            category="technical",
            description="Organisation qualité spécifique au marché.",
            sections=[
                TemplateSection("organisation", "Organisation qualité", "Décrire les responsabilités qualité."),
                TemplateSection("controls", "Contrôles et autocontrôles", "Présenter les points de contrôle et enregistrements."),
                TemplateSection("improvement", "Amélioration continue", "Décrire le traitement des non-conformités."),
            ],
        ),
        DocumentTemplate(
            key=DocumentTypeEnum.SAFETY_PLAN,
            name="Plan de prévention sécurité",
            category="technical",
            description="Mesures de santé et sécurité au travail.",
            sections=[
                TemplateSection("risks", "Analyse des risques", "Identifier les risques liés aux interventions."),
                TemplateSection("measures", "Mesures de prévention", "Décrire les mesures de prévention et équipements."),
                TemplateSection("training", "Formation", "Présenter les formations et habilitations du personnel."),
            ],
        ),
        DocumentTemplate(
            key=DocumentTypeEnum.REFERENCES_LIST,
            name="Liste de références",
            category="commercial",
            description="Références de marchés similaires.",
            sections=[
                TemplateSection("references", "Références similaires", "Présenter des références comparables au marché."),
                TemplateSection("clients", "Clients principaux", "Lister les principaux clients publics et privés."),
            ],
        ),
    ]
}


def list_templates() -> List[dict]:
    return [t.to_dict() for t in TEMPLATES.values()]


def get_template(document_type: DocumentTypeEnum) -> Optional[DocumentTemplate]:
    return TEMPLATES.get(document_type)
