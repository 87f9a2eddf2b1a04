"""
Tests for the engine executor and preflight checks.
"""

from vaultdev.adapters.mock import MockRunner
from vaultdev.core.engine.executor import (
    ExecutionPlan,
    ExecutionReport,
    execute_plan,
    generate_operation_id,
)
from vaultdev.core.models.action import Receipt
from vaultdev.core.services.dns_check import check_resolution
from vaultdev.core.services.preflight import run_preflight


def _plan(*steps) -> ExecutionPlan:
    plan = ExecutionPlan(operation_id="op-test", workflow="test")
    for step_id, receipt_factory, fatal in steps:
        plan.add(step_id, step_id.title(), receipt_factory, fatal=fatal)
    return plan


class TestExecutePlan:
    def test_all_succeed(self):
        plan = _plan(
            ("a", lambda: Receipt.success(step_id="a"), True),
            ("b", lambda: Receipt.skip(step_id="b"), False),
        )
        report = execute_plan(plan)
        assert report.status == "ok"
        assert report.succeeded == 1
        assert report.skipped == 1
        assert not report.aborted

    def test_fatal_failure_aborts(self):
        ran = []
        plan = _plan(
            ("a", lambda: Receipt.failure(step_id="a", error="no sudo"), True),
            ("b", lambda: ran.append("b") or Receipt.success(step_id="b"), False),
        )
        report = execute_plan(plan)
        assert report.status == "failed"
        assert report.aborted_at == "a"
        assert report.not_run == ["b"]
        assert ran == []

    def test_best_effort_failure_continues(self):
        plan = _plan(
            ("a", lambda: Receipt.failure(step_id="a", error="docker gone"), False),
            ("b", lambda: Receipt.success(step_id="b"), False),
        )
        report = execute_plan(plan)
        assert report.status == "partial"
        assert report.failed == 1
        assert report.succeeded == 1
        assert report.total == 2

    def test_exception_becomes_receipt(self):
        def explode():
            raise RuntimeError("kaboom")

        plan = _plan(("a", explode, True), ("b", lambda: Receipt.success(step_id="b"), False))
        report = execute_plan(plan)
        assert report.receipts[0].failed
        assert "kaboom" in report.receipts[0].error
        assert report.aborted_at == "a"

    def test_callback_sees_every_step(self):
        seen = []
        plan = _plan(
            ("a", lambda: Receipt.success(step_id="a"), False),
            ("b", lambda: Receipt.failure(step_id="b", error="x"), False),
        )
        execute_plan(plan, on_step=lambda step, receipt: seen.append((step.id, receipt.status)))
        assert seen == [("a", "ok"), ("b", "failed")]

    def test_warnings_collected(self):
        plan = _plan(("a", lambda: Receipt.success(step_id="a", warnings=["w1", "w2"]), False))
        assert execute_plan(plan).warnings == ["w1", "w2"]


class TestExecutionReport:
    def test_receipt_lookup(self):
        report = ExecutionReport(receipts=[Receipt.success(step_id="x")])
        assert report.receipt("x").ok
        assert report.receipt("missing") is None

    def test_to_dict(self):
        report = ExecutionReport(
            operation_id="op-1",
            workflow="setup",
            receipts=[Receipt.success(step_id="x")],
        )
        d = report.to_dict()
        assert d["status"] == "ok"
        assert d["receipts"][0]["step_id"] == "x"


class TestOperationId:
    def test_format(self):
        op_id = generate_operation_id("setup")
        assert op_id.startswith("setup-")
        assert len(op_id.split("-")) == 4

    def test_unique(self):
        assert generate_operation_id() != generate_operation_id()


# ── Preflight ────────────────────────────────────────────────────────


class TestPreflight:
    def test_all_pass(self, registry, runner):
        runner.make_available("vault")
        report = run_preflight(registry)
        assert report.ok
        assert [c.name for c in report.checks] == ["privileges", "compose", "vault-cli"]
        assert report.warnings == []

    def test_not_privileged(self, settings, workdir, runner, make_registry):
        registry = make_registry(settings, workdir, runner, privileged=False)
        report = run_preflight(registry)
        assert not report.ok
        assert report.fatal_failures[0].name == "privileges"
        assert "sudo" in report.fatal_failures[0].message

    def test_no_docker(self, settings, workdir, make_registry):
        registry = make_registry(settings, workdir, MockRunner())
        report = run_preflight(registry)
        assert [c.name for c in report.fatal_failures] == ["compose"]

    def test_compose_unsupported(self, registry, runner):
        runner.set_failure(["docker", "compose", "version"], stderr="'compose' is not a docker command")
        report = run_preflight(registry)
        assert "not supported" in report.fatal_failures[0].message

    def test_missing_vault_cli_is_warning(self, registry):
        report = run_preflight(registry)
        assert report.ok
        assert [c.name for c in report.warnings] == ["vault-cli"]

    def test_teardown_only_checks_privileges(self, settings, workdir, make_registry):
        registry = make_registry(settings, workdir, MockRunner())
        report = run_preflight(registry, require_compose=False)
        assert report.ok
        assert [c.name for c in report.checks] == ["privileges"]


class TestDnsCheck:
    def test_resolves(self):
        assert check_resolution("vault.example.com", "127.0.0.1", lambda h: "127.0.0.1") is None

    def test_wrong_address(self):
        warning = check_resolution("vault.example.com", "127.0.0.1", lambda h: "10.1.2.3")
        assert "10.1.2.3" in warning

    def test_unresolvable(self):
        def fail(hostname):
            raise OSError("Name or service not known")

        warning = check_resolution("vault.example.com", "127.0.0.1", fail)
        assert "does not resolve" in warning
