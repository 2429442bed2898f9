# Core type aliases for Wat's data model.
# Code and runtime values are plain Python objects: forms are lists, literals
# are int/float/str/bool, and Symbol/Keyword/Nil come from wat.types.
#
# Naming guidance:
# - SExpression: use in reader/parser code to denote syntactic forms.
# - WatValue:    use in evaluator/runtime code to denote evaluated values
#                (Entity, EntityList, Closure, raw literals or Nil).

import logging
from typing import Any, Callable

WatValue = Any
SExpression = WatValue

# Evaluator function type passed into special forms
EvaluatorFn = Callable[..., WatValue]

logging.getLogger(__name__).addHandler(logging.NullHandler())
