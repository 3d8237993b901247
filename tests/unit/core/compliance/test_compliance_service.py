"""
Tests for ComplianceScoringService.

Verifies the weighted overall score, the four sub-scores, status
thresholds and the ranked improvement list.
"""
from datetime import datetime, timezone

import pytest

from core.compliance import Chemical, ComplianceScoringService, Employee, calculate_compliance_score
from core.compliance.service import AT_RISK, GETTING_CLOSE, INSPECTION_READY, NEEDS_WORK
from core.config_loader import CategoryWeights, ComplianceConfig
from core.training.status import ALL_MODULES

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _chemical(chem_id, name, sds_status="current", labeled=True):
    return Chemical(id=chem_id, product_name=name, sds_status=sds_status, labeled=labeled)


def _trained_employee(emp_id="e1", name="Ana"):
    return Employee(
        id=emp_id,
        name=name,
        completed_modules=set(ALL_MODULES),
        last_training=datetime(2025, 3, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def service():
    return ComplianceScoringService()


class TestEmptyInventory:

    def test_empty_collections_score_90(self, service):
        """Empty inputs score full marks everywhere except the written program (1 of 3 checks)."""
        result = service.score([], [], now=NOW)

        assert result.overall == 90
        assert result.breakdown.sds.pct == 100
        assert result.breakdown.labels.pct == 100
        assert result.breakdown.training.pct == 100
        assert result.breakdown.program.current == 1
        assert result.breakdown.program.total == 3
        assert result.breakdown.program.pct == 33
        assert result.status == INSPECTION_READY
        assert result.status_color == "green"
        assert result.improvements == []
        assert result.action_item_count == 0


class TestScoring:

    def test_mixed_inventory(self, service):
        chemicals = [
            _chemical("c1", "Acetone"),
            _chemical("c2", "Bleach", sds_status="missing", labeled=False),
        ]
        result = service.score(chemicals, [_trained_employee()], now=NOW)

        assert result.breakdown.sds.pct == 50
        assert result.breakdown.labels.pct == 50
        assert result.breakdown.training.pct == 100
        assert result.breakdown.program.pct == 100
        # 15 + 12.5 + 30 + 15 = 72.5, rounded half up
        assert result.overall == 73
        assert result.status == GETTING_CLOSE
        assert result.status_color == "amber"

    def test_breakdown_reports_counts_and_weights(self, service):
        chemicals = [_chemical("c1", "Acetone"), _chemical("c2", "Bleach", sds_status="expired")]
        result = service.score(chemicals, [_trained_employee()], now=NOW)

        sds = result.breakdown.sds
        assert (sds.current, sds.total, sds.weight, sds.label) == (1, 2, 30.0, "SDS Coverage")
        assert result.breakdown.labels.label == "Container Labels"
        assert result.breakdown.training.label == "Employee Training"
        assert result.breakdown.program.label == "Written Program"

    def test_due_soon_counts_as_trained(self, service):
        emp = Employee(
            id="e1", name="Ana", completed_modules=set(ALL_MODULES),
            last_training=datetime(2024, 6, 15, tzinfo=timezone.utc),
        )
        result = service.score([_chemical("c1", "Acetone")], [emp], now=NOW)

        assert result.breakdown.training.current == 1
        assert result.improvements == []

    def test_custom_weights(self):
        config = ComplianceConfig(weights=CategoryWeights(sds=100, labels=0, training=0, program=0))
        chemicals = [_chemical("c1", "Acetone"), _chemical("c2", "Bleach", sds_status="missing")]

        result = calculate_compliance_score(chemicals, [_trained_employee()], config=config, now=NOW)

        assert result.overall == 50


class TestImprovements:

    def test_unlabeled_missing_chemical_counts_twice(self, service):
        chemicals = [
            _chemical("c1", "Acetone"),
            _chemical("c2", "Bleach", sds_status="missing", labeled=False),
        ]
        result = service.score(chemicals, [_trained_employee()], now=NOW)

        assert result.action_item_count == 2
        assert [(i.text, i.points) for i in result.improvements] == [
            ("Find SDS for Bleach", 15),
            ("Print label for Bleach", 13),
        ]

    def test_top_three_keeps_emission_order_on_ties(self, service):
        chemicals = [
            _chemical("c1", "Acetone", sds_status="missing", labeled=False),
            _chemical("c2", "Bleach", sds_status="missing", labeled=False),
        ]
        employees = [
            Employee(id="e1", name="Ana"),
            Employee(id="e2", name="Ben"),
        ]
        result = service.score(chemicals, employees, now=NOW)

        assert [i.text for i in result.improvements] == [
            "Complete training for Ana (new hire)",
            "Complete training for Ben (new hire)",
            "Find SDS for Acetone",
        ]
        assert all(i.points == 15 for i in result.improvements)
        assert result.action_item_count == 6
        assert result.overall == 15
        assert result.status == AT_RISK
        assert result.status_color == "red"

    def test_training_improvement_texts(self, service):
        employees = [
            Employee(id="e1", name="Ana", completed_modules={"m1", "m2", "m3"}),
            Employee(id="e2", name="Ben", completed_modules=set(ALL_MODULES),
                     last_training=datetime(2023, 1, 1, tzinfo=timezone.utc)),
            _trained_employee("e3", "Cy"),
        ]
        result = service.score([], employees, now=NOW)

        texts = [i.text for i in result.improvements]
        assert texts == [
            "Finish training for Ana (4 modules left)",
            "Refresh training for Ben (annual overdue)",
        ]
        # round(30 / 3)
        assert result.improvements[0].points == 10
        assert result.action_item_count == 2

    def test_expired_sds_suggestion(self, service):
        result = service.score([_chemical("c1", "Degreaser", sds_status="expired")], [], now=NOW)

        assert result.improvements[0].text == "Update expired SDS for Degreaser"
        assert result.improvements[0].points == 30


class TestStatusThresholds:

    @pytest.mark.parametrize("overall,status,color", [
        (100, INSPECTION_READY, "green"),
        (90, INSPECTION_READY, "green"),
        (89, GETTING_CLOSE, "amber"),
        (70, GETTING_CLOSE, "amber"),
        (69, NEEDS_WORK, "red"),
        (50, NEEDS_WORK, "red"),
        (49, AT_RISK, "red"),
        (0, AT_RISK, "red"),
    ])
    def test_status_bands(self, service, overall, status, color):
        assert service.status_for(overall) == status
        assert service.color_for(overall) == color
