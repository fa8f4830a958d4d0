from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional


@dataclass
class ResolverStep:
    """Step descriptor for the first-answer-wins runner."""
    name: str
    fn: Callable[[object], Optional[str]]
    skip_if: Optional[Callable[[object], bool]] = None


class StepRunner:
    """Ordered step runner that stops at the first step producing an answer."""

    def __init__(self, steps: List[ResolverStep]) -> None:
        """Purpose: Initialize the runner with an ordered list of steps.
        Inputs/Outputs: Input is a list of ResolverStep; no return value.
        Side Effects / State: Stores the step list for later execution.
        Dependencies: None beyond ResolverStep definitions.
        Failure Modes: None; assumes valid callables in steps.
        If Removed: Resolution strategies are never executed and nothing answers.
        Testing Notes: Provide a minimal step list and ensure order is preserved.
        """
        # Store the steps; order defines precedence.
        self._steps = steps

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self._steps]

    def run(self, context: object) -> Optional[ResolverStep]:
        """Purpose: Execute steps in order until one returns a non-empty answer.
        Inputs/Outputs: Input is a context object with an `answer` attribute; output
            is the step that answered, or None when every step declined.
        Side Effects / State: Sets context.answer from the winning step.
        Dependencies: Depends on ResolverStep.fn and ResolverStep.skip_if semantics.
        Failure Modes: Exceptions in step functions propagate to the caller.
        If Removed: The resolver cannot apply its ordered strategies.
        Testing Notes: Verify skip_if and that later steps never run after a hit.
        """
        # Iterate steps, honoring skip_if guards, and stop at the first answer.
        for step in self._steps:
            if step.skip_if and step.skip_if(context):
                continue
            answer = step.fn(context)
            if answer:
                context.answer = answer
                return step
        return None
