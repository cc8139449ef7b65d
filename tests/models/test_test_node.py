import pytest
from pydantic import ValidationError

from passoff.models.test_node import TestCounts, TestNode, TestResult


class TestTestNode:
    """Tests for the TestNode model."""

    def test_leaf_and_suite(self) -> None:
        leaf = TestNode(name="login", passed=True)
        suite = TestNode(name="Suite", children=[leaf])
        empty = TestNode(name="Empty")

        assert leaf.is_leaf
        assert not suite.is_leaf
        assert not empty.is_leaf
        assert empty.leaf_counts() == TestCounts()

    def test_wire_names(self) -> None:
        node = TestNode.model_validate(
            {
                "testName": "ws",
                "passed": False,
                "ecCategory": "websocket",
                "errorMessage": "expected 200",
                "numTestsPassed": 0,
            }
        )
        assert node.name == "ws"
        assert node.is_extra_credit
        assert node.error_message == "expected 200"
        assert node.leaf_counts() == TestCounts(0, 0, 0, 1)
        assert node.model_dump(by_alias=True)["testName"] == "ws"

    def test_null_category_is_required_test(self) -> None:
        node = TestNode.model_validate({"testName": "t", "passed": True, "ecCategory": None})
        assert node.ec_category == ""
        assert node.leaf_counts() == TestCounts(1, 0, 0, 0)

    def test_negative_counter_fails(self) -> None:
        with pytest.raises(ValidationError):
            TestNode(name="t", num_tests_failed=-1)

    def test_frozen(self) -> None:
        node = TestNode(name="t", passed=True)
        with pytest.raises(ValidationError):
            node.passed = False

    def test_missing_name_fails(self) -> None:
        with pytest.raises(ValidationError):
            TestNode.model_validate({"passed": True})


class TestTestCounts:
    def test_plus_and_totals(self) -> None:
        total = TestCounts(1, 2, 3, 4).plus(TestCounts(1, 1, 1, 1))
        assert total == TestCounts(2, 3, 4, 5)
        assert total.tests_run == 5
        assert total.extra_credit_run == 9


class TestTestResult:
    def test_error_flag(self) -> None:
        assert TestResult(error="crash").has_error
        assert not TestResult().has_error

    def test_aggregated_recomputes_both_trees(self) -> None:
        result = TestResult(
            root=TestNode(name="r", children=[TestNode(name="a", passed=True)]),
            extra_credit=TestNode(name="ec", children=[TestNode(name="b", passed=True, ec_category="x")]),
        ).aggregated()

        assert result.root.counts == TestCounts(1, 0, 0, 0)
        assert result.extra_credit.counts == TestCounts(0, 0, 1, 0)

    def test_aggregated_without_trees(self) -> None:
        result = TestResult(error="crash").aggregated()
        assert result.root is None
        assert result.error == "crash"
