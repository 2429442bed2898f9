"""Registry of core forms for the Wat evaluator.

Maps Symbols to handler functions. Every handler takes
`(tail, env, evaluate_fn, depth)` and returns a value; soft failures come
back as Error entities. The evaluator consults this table before treating a
form as a closure application.
"""

from wat.types.symbol import Symbol
from wat.evaluation.special_forms.entity_form import entity_form
from wat.evaluation.special_forms.list_form import list_form
from wat.evaluation.special_forms.arithmetic_forms import add_form, sub_form, mul_form, eq_form
from wat.evaluation.special_forms.let_form import let_form
from wat.evaluation.special_forms.impl_form import impl_form
from wat.evaluation.special_forms.lambda_form import lambda_form

SPECIAL_FORMS = {
    Symbol("entity"): entity_form,
    Symbol("list"): list_form,
    Symbol("add"): add_form,
    Symbol("sub"): sub_form,
    Symbol("mul"): mul_form,
    Symbol("eq"): eq_form,
    Symbol("let"): let_form,
    Symbol("impl"): impl_form,
    Symbol("lambda"): lambda_form,
}
