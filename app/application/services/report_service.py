"""
Report service — PDF exports of statistics and single projects (reportlab).
"""

from datetime import datetime
from io import BytesIO
from typing import List, Optional
from xml.sax.saxutils import escape

import structlog
from reportlab.lib import colors
from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.core.exceptions import ReportGenerationException
from app.domain.models.project import ResearchProject
from app.domain.schemas.statistics import AdvancedStats, ProjectStats

logger = structlog.get_logger(__name__)

HEADER_COLOR = HexColor("#2c3e50")
STRIPE_COLOR = HexColor("#f2f4f6")


def _styles():
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name="ReportTitle",
        parent=styles["Title"],
        fontSize=20,
        textColor=HEADER_COLOR,
        alignment=TA_CENTER,
        spaceAfter=6,
    ))
    styles.add(ParagraphStyle(
        name="ReportSubtitle",
        parent=styles["Normal"],
        fontSize=10,
        textColor=HexColor("#7f8c8d"),
        alignment=TA_CENTER,
        spaceAfter=12,
    ))
    styles.add(ParagraphStyle(
        name="Section",
        parent=styles["Heading2"],
        textColor=HEADER_COLOR,
        spaceBefore=12,
        spaceAfter=6,
    ))
    return styles


def _table(rows: List[List[str]], col_widths: Optional[List[float]] = None) -> Table:
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, STRIPE_COLOR]),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    return table


def _money(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:,.0f} FCFA".replace(",", " ")


def _build(story: list, title: str) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
    )
    doc.build(story)
    return buffer.getvalue()


def _statistics_story(stats: ProjectStats, title: str) -> list:
    styles = _styles()
    story = [
        Paragraph(escape(title), styles["ReportTitle"]),
        Paragraph(f"Généré le {datetime.now():%d/%m/%Y %H:%M}", styles["ReportSubtitle"]),
        Paragraph("Vue d'ensemble", styles["Section"]),
    ]

    overview = [
        ["Indicateur", "Valeur"],
        ["Projets", str(stats.total_projects)],
        ["En cours", str(stats.projects_en_cours)],
        ["Suspendus", str(stats.projects_suspendus)],
        ["Terminés", str(stats.projects_termines)],
        ["Avancement moyen", f"{stats.average_progress:.1f} %"],
        ["Budget total", _money(stats.total_budget)],
    ]
    if isinstance(stats, AdvancedStats):
        overview.append(["Projets en retard", str(stats.overdue_projects)])
        overview.append(["Utilisateurs", str(stats.total_users)])
    story.append(_table(overview, [10 * cm, 6 * cm]))

    story.append(Paragraph("Répartition par domaine", styles["Section"]))
    domain_rows = [["Domaine", "Projets", "Budget"]]
    for domain in dict.fromkeys([*stats.projects_by_domain, *stats.budget_by_domain]):
        domain_rows.append([
            domain,
            str(stats.projects_by_domain.get(domain, 0)),
            _money(stats.budget_by_domain.get(domain, 0.0)),
        ])
    story.append(_table(domain_rows, [8 * cm, 3 * cm, 5 * cm]))

    if stats.projects_by_owner:
        story.append(Paragraph("Projets par responsable", styles["Section"]))
        owner_rows = [["Nom", "Email", "Projets"]]
        for owner in stats.projects_by_owner.values():
            owner_rows.append([owner.name, owner.email, str(owner.count)])
        story.append(_table(owner_rows, [6 * cm, 7 * cm, 3 * cm]))

    if isinstance(stats, AdvancedStats):
        story.append(Paragraph("Évolution mensuelle", styles["Section"]))
        month_rows = [["Mois", "Nouveaux projets", "Nouveaux utilisateurs"]]
        for month, count in stats.projects_by_month.items():
            month_rows.append([month, str(count), str(stats.new_users_by_month.get(month, 0))])
        story.append(_table(month_rows, [5 * cm, 5 * cm, 6 * cm]))

    return story


def _project_story(project: ResearchProject) -> list:
    styles = _styles()
    owner = project.owner.full_name if project.owner is not None else "-"
    story = [
        Paragraph(escape(project.title), styles["ReportTitle"]),
        Paragraph(f"Fiche projet n° {project.id}", styles["ReportSubtitle"]),
        Paragraph("Informations générales", styles["Section"]),
    ]

    details = [
        ["Champ", "Valeur"],
        ["Domaine", project.domain or "-"],
        ["Statut", project.status_label],
        ["Avancement", f"{project.progress or 0} %"],
        ["Responsable", owner],
        ["Encadrant", project.supervisor or "-"],
        ["Institution", project.institution or "-"],
        ["Budget", _money(project.budget)],
        ["Début", project.start_date.strftime("%d/%m/%Y") if project.start_date else "-"],
        ["Fin", project.end_date.strftime("%d/%m/%Y") if project.end_date else "-"],
    ]
    story.append(_table(details, [5 * cm, 11 * cm]))

    story.append(Paragraph("Description", styles["Section"]))
    story.append(Paragraph(escape(project.description or "Aucune description"), styles["BodyText"]))

    story.append(Paragraph("Participants", styles["Section"]))
    participants = project.participants_list or "Aucun participant"
    for line in participants.splitlines():
        story.append(Paragraph(escape(line) or "&nbsp;", styles["BodyText"]))
    story.append(Spacer(1, 0.5 * cm))
    return story


def render_statistics_pdf(stats: ProjectStats, title: str = "Rapport statistique") -> bytes:
    try:
        content = _build(_statistics_story(stats, title), title)
    except Exception as e:
        logger.error("Statistics PDF generation failed", error=str(e), exc_info=True)
        raise ReportGenerationException("Erreur lors de la génération du rapport PDF")
    logger.info("Statistics PDF generated", size=len(content))
    return content


def render_project_pdf(project: ResearchProject) -> bytes:
    try:
        content = _build(_project_story(project), project.title)
    except Exception as e:
        logger.error("Project PDF generation failed", project_id=project.id, error=str(e), exc_info=True)
        raise ReportGenerationException("Erreur lors de la génération du rapport PDF")
    logger.info("Project PDF generated", project_id=project.id, size=len(content))
    return content
