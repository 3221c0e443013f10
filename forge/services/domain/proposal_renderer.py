"""
Domain service: Proposal PDF rendering for submitted site evaluations.
"""
import io
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import logging

from babel.dates import format_datetime
from babel.numbers import format_currency, format_decimal
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from forge.config import settings
from forge.domain.errors import InvalidStateError
from forge.domain.models import EvaluationStatus, SiteEvaluation

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
LOCALE = "en_IN"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w\s.\-]", re.ASCII)

_AREA_UNIT_LABELS = {
    "acres": "acres",
    "sqmeters": "sq m",
}


@dataclass
class ProposalDocument:
    """Rendered proposal ready to be served as an attachment."""
    content: bytes
    filename: str
    media_type: str = PDF_MEDIA_TYPE


def format_cost(amount: Optional[float], currency: str = "INR") -> str:
    """
    Format a cost with Indian digit grouping and no fraction digits.

    Missing amounts are formatted as zero.
    """
    return format_currency(
        amount or 0,
        currency,
        format="¤¤ #,##,##0",
        locale=LOCALE,
        currency_digits=False,
    )


def format_area_value(area: float) -> str:
    """Area with Indian digit grouping and at most two fraction digits."""
    return format_decimal(area, format="#,##,##0.##", locale=LOCALE)


def proposal_filename(evaluation_name: str) -> str:
    """
    Build a download filename from an evaluation name.

    Keeps ASCII letters, digits, underscores, '-', '.' and whitespace.
    """
    stem = _UNSAFE_FILENAME_CHARS.sub("", evaluation_name)
    stem = re.sub(r"\s+", " ", stem).strip()
    return f"{stem or 'proposal'}.pdf"


class ProposalRenderer:
    """Renders a one-page proposal PDF summarising an evaluation."""

    def __init__(self, title: Optional[str] = None, compress: bool = True):
        self.title = title or settings.proposal_title
        self.compress = compress

    def proposal_lines(
        self,
        evaluation: SiteEvaluation,
        farm_name: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> list[str]:
        generated_at = generated_at or datetime.now(timezone.utc)
        unit = _AREA_UNIT_LABELS[evaluation.area_unit.value]
        infrastructure = (
            evaluation.infrastructure_recommendation.value
            if evaluation.infrastructure_recommendation
            else "Not specified"
        )
        return [
            f"Farm: {farm_name or 'N/A'}",
            f"Evaluation: {evaluation.name}",
            f"Area: {format_area_value(evaluation.area)} {unit}",
            f"Infrastructure: {infrastructure}",
            f"Estimated Cost: {format_cost(evaluation.cost_estimate, evaluation.cost_currency)}",
            f"Generated: {format_datetime(generated_at, format='medium', locale=LOCALE)}",
        ]

    def render(
        self,
        evaluation: SiteEvaluation,
        farm_name: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> ProposalDocument:
        """
        Render the proposal for a submitted evaluation.

        Args:
            evaluation: Evaluation to summarise
            farm_name: Name of the farm the evaluation belongs to
            generated_at: Timestamp printed on the document, defaults to now

        Returns:
            ProposalDocument with PDF bytes and a download filename

        Raises:
            InvalidStateError: If the evaluation has not been submitted
        """
        if evaluation.status != EvaluationStatus.SUBMITTED:
            raise InvalidStateError(
                "Proposal PDF is only available for submitted evaluations"
            )

        buffer = io.BytesIO()
        width, height = A4
        margin = 50

        pdf = canvas.Canvas(buffer, pagesize=A4, pageCompression=1 if self.compress else 0)
        pdf.setTitle(f"{self.title} - {evaluation.name}")

        y = height - margin - 18
        pdf.setFont("Helvetica-Bold", 18)
        pdf.drawCentredString(width / 2, y, self.title)

        y -= 36
        pdf.setFont("Helvetica", 12)
        for line in self.proposal_lines(evaluation, farm_name, generated_at):
            pdf.drawString(margin, y, line)
            y -= 18

        pdf.showPage()
        pdf.save()

        content = buffer.getvalue()
        logger.info(f"Rendered proposal for evaluation {evaluation.id} ({len(content)} bytes)")
        return ProposalDocument(content=content, filename=proposal_filename(evaluation.name))
