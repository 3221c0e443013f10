"""
Unit tests for proposal rendering.
"""
from datetime import datetime, timezone
import pytest

from forge.domain.errors import InvalidStateError
from forge.domain.models import (
    AreaUnit,
    EvaluationStatus,
    InfrastructureType,
    SiteEvaluation,
)
from forge.services.domain.proposal_renderer import (
    PDF_MEDIA_TYPE,
    ProposalRenderer,
    format_area_value,
    format_cost,
    proposal_filename,
)


@pytest.fixture
def submitted_evaluation() -> SiteEvaluation:
    return SiteEvaluation(
        owner_id="user-1",
        name="North Plot",
        area=6,
        infrastructure_recommendation=InfrastructureType.SHADE_NET,
        cost_estimate=2_400_000,
        status=EvaluationStatus.SUBMITTED,
    )


@pytest.fixture
def renderer() -> ProposalRenderer:
    return ProposalRenderer(title="Test Proposal", compress=False)


class TestRender:
    """Tests for PDF rendering."""

    def test_renders_pdf(self, renderer, submitted_evaluation):
        document = renderer.render(submitted_evaluation, farm_name="Green Acres")

        assert document.content.startswith(b"%PDF")
        assert document.content.rstrip().endswith(b"%%EOF")
        assert document.media_type == PDF_MEDIA_TYPE
        assert document.filename == "North Plot.pdf"

    def test_pdf_contains_summary(self, renderer, submitted_evaluation):
        content = renderer.render(submitted_evaluation, farm_name="Green Acres").content

        assert b"Test Proposal" in content
        assert b"Farm: Green Acres" in content
        assert b"Evaluation: North Plot" in content
        assert b"Area: 6 acres" in content
        assert b"Infrastructure: Shade Net" in content
        assert b"24,00,000" in content

    def test_compressed_pdf(self, submitted_evaluation):
        document = ProposalRenderer(compress=True).render(submitted_evaluation)

        assert document.content.startswith(b"%PDF")

    def test_draft_rejected(self, renderer, submitted_evaluation):
        draft = submitted_evaluation.model_copy(update={"status": EvaluationStatus.DRAFT})

        with pytest.raises(InvalidStateError, match="only available for submitted evaluations"):
            renderer.render(draft)


class TestProposalLines:
    """Tests for the text printed on the proposal."""

    def test_missing_values(self, renderer):
        evaluation = SiteEvaluation(
            owner_id="user-1",
            name="Bare",
            area=1500,
            area_unit=AreaUnit.SQUARE_METERS,
            status=EvaluationStatus.SUBMITTED,
        )

        lines = renderer.proposal_lines(evaluation)

        assert "Farm: N/A" in lines
        assert "Area: 1,500 sq m" in lines
        assert "Infrastructure: Not specified" in lines
        assert lines[4].startswith("Estimated Cost: ")
        assert lines[4].endswith(" 0")

    def test_large_area_in_full(self, renderer):
        evaluation = SiteEvaluation(
            owner_id="user-1",
            name="Estate",
            area=1_234_567,
            area_unit=AreaUnit.SQUARE_METERS,
            status=EvaluationStatus.SUBMITTED,
        )

        assert renderer.proposal_lines(evaluation)[2] == "Area: 12,34,567 sq m"

    def test_fractional_area_two_decimals(self, renderer, submitted_evaluation):
        evaluation = submitted_evaluation.model_copy(update={"area": 12.3456789})

        assert renderer.proposal_lines(evaluation)[2] == "Area: 12.35 acres"

    def test_generation_timestamp(self, renderer, submitted_evaluation):
        generated_at = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)

        lines = renderer.proposal_lines(submitted_evaluation, generated_at=generated_at)

        assert lines[-1].startswith("Generated: ")
        assert "2025" in lines[-1]


class TestFormatting:
    """Tests for cost and filename formatting."""

    def test_indian_grouping(self):
        assert format_cost(2_400_000) == "INR 24,00,000"

    def test_small_amount(self):
        assert format_cost(150_000) == "INR 1,50,000"

    def test_missing_amount_is_zero(self):
        assert format_cost(None) == "INR 0"

    def test_other_currency(self):
        assert format_cost(1_000, "USD") == "USD 1,000"

    @pytest.mark.parametrize("name,expected", [
        ("North Plot", "North Plot.pdf"),
        ("Plot #7 (east)!", "Plot 7 east.pdf"),
        ("site_a-v1.2", "site_a-v1.2.pdf"),
        ("  Padded  name ", "Padded name.pdf"),
        ("Khet/क्षेत्र", "Khet.pdf"),
        ("***", "proposal.pdf"),
    ])
    def test_filename(self, name, expected):
        assert proposal_filename(name) == expected

    @pytest.mark.parametrize("area,expected", [
        (6, "6"),
        (2.5, "2.5"),
        (1_000_000, "10,00,000"),
        (0.5, "0.5"),
    ])
    def test_area_value(self, area, expected):
        assert format_area_value(area) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
