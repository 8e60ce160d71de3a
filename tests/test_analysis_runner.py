import asyncio

from finwise import config
from finwise.advice import PRO_TIPS
from finwise.analysis import (
    EXPENSES_EXCEED_INCOME_ERROR,
    AnalysisRunner,
    FinancialInput,
    FixedRandomSource,
    analyze_async,
)


def test_analyze_async_returns_result_after_delay():
    outcome = asyncio.run(analyze_async(FinancialInput(5000, 3500), delay=0.01))
    assert outcome.ok
    assert outcome.result.savings == 1500
    assert outcome.result.pro_tip in PRO_TIPS


def test_analyze_async_rejects_invalid_input_without_waiting(monkeypatch):
    async def fail_sleep(delay):
        raise AssertionError("invalid input must not reach the delay")

    monkeypatch.setattr("finwise.analysis.asyncio.sleep", fail_sleep)
    outcome = asyncio.run(analyze_async(FinancialInput(3000, 3000)))
    assert not outcome.ok
    assert outcome.result is None
    assert outcome.errors == {"expenses": EXPENSES_EXCEED_INCOME_ERROR}


def test_analyze_async_uses_configured_delay(monkeypatch):
    seen = []
    real_sleep = asyncio.sleep

    async def recording_sleep(delay):
        seen.append(delay)
        await real_sleep(0)

    monkeypatch.setattr(config, "ANALYSIS_DELAY_SECONDS", 0.25)
    monkeypatch.setattr("finwise.analysis.asyncio.sleep", recording_sleep)
    asyncio.run(analyze_async(FinancialInput(10, 5)))
    assert seen == [0.25]


def test_runner_exposes_pending_state():
    async def scenario():
        runner = AnalysisRunner(delay=0.01)
        runner.submit(FinancialInput(5000, 3500))
        pending_before = runner.pending
        latest_before = runner.latest
        outcome = await runner.wait()
        return pending_before, latest_before, runner.pending, outcome

    pending_before, latest_before, pending_after, outcome = asyncio.run(scenario())
    assert pending_before is True
    assert latest_before is None
    assert pending_after is False
    assert outcome.result.savings == 1500


def test_runner_last_trigger_wins():
    async def scenario():
        runner = AnalysisRunner(delay=0.05, random_source=FixedRandomSource(1))
        first = runner.submit(FinancialInput(5000, 3500, "low"))
        second = runner.submit(FinancialInput(4000, 1000, "high"))
        outcome = await runner.wait()
        return first, second, outcome, runner.latest

    first, second, outcome, latest = asyncio.run(scenario())
    assert first.cancelled()
    assert second.done() and not second.cancelled()
    assert outcome is latest
    assert outcome.result.savings == 3000
    assert outcome.result.investment_advice[0].risk_tag == "High"
    assert outcome.result.pro_tip == PRO_TIPS[1]


def test_superseded_run_does_not_overwrite_latest():
    async def scenario():
        runner = AnalysisRunner(delay=0)
        runner.submit(FinancialInput(5000, 3500))
        current = await runner.wait()
        stale = await runner._run(FinancialInput(100, 50), runner._generation - 1)
        return runner, current, stale

    runner, current, stale = asyncio.run(scenario())
    assert stale.result.savings == 50
    assert runner.latest is current
    assert runner.latest.result.savings == 1500


def test_runner_cancel_and_reset():
    async def scenario():
        runner = AnalysisRunner(delay=0.05)
        task = runner.submit(FinancialInput(5000, 3500))
        runner.cancel()
        await asyncio.wait({task})
        cancelled_latest = runner.latest
        runner.submit(FinancialInput(200, 100))
        await runner.wait()
        finished = runner.latest
        runner.reset()
        return task, cancelled_latest, finished, runner

    task, cancelled_latest, finished, runner = asyncio.run(scenario())
    assert task.cancelled()
    assert cancelled_latest is None
    assert finished.result.savings == 100
    assert runner.latest is None
    assert not runner.pending


def test_runner_reports_validation_errors():
    async def scenario():
        runner = AnalysisRunner(delay=0.01)
        runner.submit(FinancialInput(0, 10))
        return await runner.wait()

    outcome = asyncio.run(scenario())
    assert not outcome.ok
    assert set(outcome.errors) == {"income", "expenses"}
