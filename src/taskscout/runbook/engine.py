"""Runbook execution engine.

Lifecycle of one run::

    LOADED -> VALIDATING -> RESOLVING -> EXECUTING -> COMPLETED | ABORTED
                  |
                  +-> FAILED_VALIDATION

Validation and resolution finish before any step runs, so a broken runbook
never has partial side effects. Steps then run strictly in declared order,
each one waiting for the previous process to end.

Per step:

1. A false condition records SKIPPED.
2. A ``confirm`` step in an interactive run asks the confirmer. A decline
   records SKIPPED; with ``decline_aborts`` (the default) the run aborts
   unless the step is ``optional``. Non-interactive runs never ask.
3. The interpolated command goes to the ``ProcessExecutor``. Exit 0 is
   SUCCESS. A non-zero exit is FAILED, an expired timeout TIMED_OUT.
4. FAILED or TIMED_OUT on a step that is neither ``optional`` nor
   ``continue_on_error`` aborts the run with ``RunbookFailed``, which
   carries the partial report.

A dry run stops after building the interpolated plan and never touches the
executor.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from taskscout.exceptions import (
    ConfigValidationError,
    RunbookError,
    RunbookFailed,
    StepDeclined,
    StepFailed,
    StepTimedOut,
)
from taskscout.runbook.conditions import evaluate, parse_condition
from taskscout.runbook.executor import ProcessExecutor, SubprocessExecutor
from taskscout.runbook.models import (
    PlannedStep,
    Runbook,
    RunbookExecutionReport,
    RunbookState,
    Step,
    StepResult,
    StepStatus,
)
from taskscout.runbook.validation import validate_runbook
from taskscout.runbook.variables import Prompter, interpolate, resolve_variables

logger = logging.getLogger(__name__)

Confirmer = Callable[[PlannedStep], bool]


class RunbookEngine:
    """Validates, resolves and executes runbooks.

    Args:
        executor: Runs step commands. Defaults to ``SubprocessExecutor``.
        prompter: Asks for unresolved variables in interactive runs.
        confirmer: Approves ``confirm`` steps in interactive runs. Without
            one, every confirmation is declined.
        decline_aborts: Whether declining a non-optional step aborts the run.
    """

    def __init__(
        self,
        executor: ProcessExecutor | None = None,
        prompter: Prompter | None = None,
        confirmer: Confirmer | None = None,
        decline_aborts: bool = True,
    ) -> None:
        self.executor = executor if executor is not None else SubprocessExecutor()
        self.prompter = prompter
        self.confirmer = confirmer
        self.decline_aborts = decline_aborts
        self.state = RunbookState.LOADED

    def validate(self, runbook: Runbook) -> None:
        """Validate ``runbook``; see ``validate_runbook``."""
        self.state = RunbookState.VALIDATING
        try:
            validate_runbook(runbook)
        except ConfigValidationError:
            self.state = RunbookState.FAILED_VALIDATION
            raise

    def resolve(
        self,
        runbook: Runbook,
        overrides: Mapping[str, Any] | None = None,
        interactive: bool = False,
    ) -> dict[str, Any]:
        """Resolve the runbook's variables to typed values."""
        self.state = RunbookState.RESOLVING
        try:
            return resolve_variables(runbook, overrides, interactive, self.prompter)
        except ConfigValidationError:
            self.state = RunbookState.FAILED_VALIDATION
            raise

    def plan(self, runbook: Runbook, values: Mapping[str, Any]) -> list[PlannedStep]:
        """Interpolate every step and evaluate its condition."""
        planned: list[PlannedStep] = []
        for step in runbook.steps:
            will_run = True
            skip_reason = ""
            if step.condition is not None:
                condition = parse_condition(step.condition, step.name)
                will_run = evaluate(condition, values, runbook.variables)
                if not will_run:
                    skip_reason = f"condition not met: {step.condition}"
            planned.append(PlannedStep(
                name=step.name,
                command=interpolate(step.command, values),
                working_dir=interpolate(step.working_dir, values) if step.working_dir else None,
                env={key: interpolate(value, values) for key, value in step.env.items()},
                will_run=will_run,
                needs_confirm=step.confirm,
                skip_reason=skip_reason,
            ))
        return planned

    def run(
        self,
        runbook: Runbook,
        overrides: Mapping[str, Any] | None = None,
        dry_run: bool = False,
        interactive: bool = False,
    ) -> RunbookExecutionReport:
        """Validate, resolve and execute ``runbook``.

        Returns:
            The execution report (only ``planned`` is filled for a dry run).

        Raises:
            ConfigValidationError: If validation or resolution fails. No step
                has run.
            RunbookFailed: If a step stopped the run. ``report`` holds the
                partial results.
        """
        self.validate(runbook)
        values = self.resolve(runbook, overrides, interactive)
        planned = self.plan(runbook, values)
        report = RunbookExecutionReport(
            name=runbook.name, variables=values, dry_run=dry_run, planned=planned,
        )
        if dry_run:
            logger.info("Dry run of %s: %d step(s) planned", runbook.name, len(planned))
            self.state = RunbookState.COMPLETED
            return report

        self.state = RunbookState.EXECUTING
        for step, plan in zip(runbook.steps, planned):
            if not plan.will_run:
                logger.info("Skipping step %s (%s)", step.name, plan.skip_reason)
                report.results.append(StepResult(
                    name=step.name,
                    status=StepStatus.SKIPPED,
                    command=plan.command,
                    reason=plan.skip_reason,
                ))
                continue

            if plan.needs_confirm and interactive and not self._confirm(plan):
                report.results.append(StepResult(
                    name=step.name,
                    status=StepStatus.SKIPPED,
                    command=plan.command,
                    reason="declined",
                ))
                if self.decline_aborts and not step.optional:
                    self._abort(report, step.name, StepDeclined(step.name))
                logger.info("Step %s declined, continuing", step.name)
                continue

            result = self._execute(step, plan)
            report.results.append(result)
            if result.status is StepStatus.SUCCESS:
                continue
            cause: RunbookError
            if result.status is StepStatus.TIMED_OUT:
                cause = StepTimedOut(step.name, step.timeout or 0)
            else:
                cause = StepFailed(step.name, result.exit_code)
            if step.optional or step.continue_on_error:
                logger.warning("%s; continuing", cause)
                continue
            self._abort(report, step.name, cause)

        self.state = RunbookState.COMPLETED
        return report

    def _confirm(self, plan: PlannedStep) -> bool:
        if self.confirmer is None:
            logger.warning("No confirmer available; declining step %s", plan.name)
            return False
        return bool(self.confirmer(plan))

    def _execute(self, step: Step, plan: PlannedStep) -> StepResult:
        logger.info("Running step %s: %s", step.name, plan.command)
        try:
            outcome = self.executor.run(plan.command, plan.working_dir, plan.env, step.timeout)
        except OSError as exc:
            logger.warning("Step %s could not start: %s", step.name, exc)
            return StepResult(
                name=step.name,
                status=StepStatus.FAILED,
                command=plan.command,
                reason=str(exc),
            )
        if outcome.timed_out:
            status = StepStatus.TIMED_OUT
            reason = f"timed out after {step.timeout:g}s" if step.timeout else "timed out"
        elif outcome.exit_code == 0:
            status = StepStatus.SUCCESS
            reason = ""
        else:
            status = StepStatus.FAILED
            reason = f"exit status {outcome.exit_code}"
        return StepResult(
            name=step.name,
            status=status,
            output=outcome.output,
            duration=outcome.duration,
            exit_code=outcome.exit_code,
            command=plan.command,
            reason=reason,
        )

    def _abort(self, report: RunbookExecutionReport, step_name: str, cause: RunbookError) -> None:
        report.aborted = True
        self.state = RunbookState.ABORTED
        logger.error("Runbook %s aborted at step %s: %s", report.name, step_name, cause)
        raise RunbookFailed(step_name, cause, report)


def run_runbook(
    runbook: Runbook,
    overrides: Mapping[str, Any] | None = None,
    dry_run: bool = False,
    interactive: bool = False,
    executor: ProcessExecutor | None = None,
    prompter: Prompter | None = None,
    confirmer: Confirmer | None = None,
    decline_aborts: bool = True,
) -> RunbookExecutionReport:
    """Run a runbook with a one-off ``RunbookEngine``.

    See ``RunbookEngine.run`` for the semantics and exceptions.
    """
    engine = RunbookEngine(executor, prompter, confirmer, decline_aborts)
    return engine.run(runbook, overrides, dry_run, interactive)
