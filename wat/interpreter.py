from __future__ import annotations

from wat import SExpression, WatValue
from wat.config import configure_logging
from wat.evaluation.evaluator import evaluate
from wat.types.environment import Environment


class Interpreter:
    """
    Evaluates Wat programs against one long-lived top-level environment.

    Trait declarations made with a top-level `impl` persist across calls.
    An Interpreter is not thread-safe: give each thread its own instance or
    serialise calls to `eval`.
    """

    def __init__(self):
        configure_logging()
        self._env: Environment = Environment()

    @property
    def env(self) -> Environment:
        """The top-level environment. Inspect it through `bindings` and `traits`."""
        return self._env

    def eval(self, code: str | SExpression) -> WatValue:
        return evaluate(code, self._env)

    evaluate = eval
