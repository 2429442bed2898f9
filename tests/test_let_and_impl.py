import pytest

from wat.errors import WatUnboundSymbol
from wat.evaluation.evaluator import evaluate
from wat.types.entity import Entity, TRUE
from wat.types.nil import Nil
from wat.types.symbol import Symbol
from wat.types.type_tags import TypeTag, TraitTag


def Int(n):
    return Entity(TypeTag.Integer, n)


# ---------------- let ----------------

@pytest.mark.parametrize(
    "source,expected",
    [
        ("(let ((x be (entity Integer 5))) (add x 3))", Int(8)),
        ("(let ((x be (Integer 1)) (y be (add x 1))) (add x y))", Int(3)),
        ("(let ((x be (Integer 1)) (x be (add x 10))) x)", Int(11)),
        ("(let ((x be (Integer 2))) (let ((y be (Integer 3))) (mul x y)))", Int(6)),
        ("(let () (add 1 2) (add 3 4))", Int(7)),
        ("(let ((s be \"text\")) s)", "text"),
    ]
)
def test_let(source, expected):
    assert evaluate(source) == expected


def test_let_empty_body_is_nil():
    assert evaluate("(let ((x be (Integer 1))))") is Nil


def test_let_unbound_variable_is_hard_failure():
    with pytest.raises(WatUnboundSymbol, match="Unbound variable: x"):
        evaluate("(let () (add x 1))")


def test_let_bindings_do_not_leak(env):
    evaluate("(let ((x be (Integer 1))) x)", env)
    assert "x" not in {str(name) for name in env.bindings}
    with pytest.raises(WatUnboundSymbol):
        evaluate("(let () x)", env)


def test_inner_let_shadowing_does_not_change_outer():
    source = """
    (let ((x be (Integer 1)))
      (let ((x be (Integer 2))) x)
      x)
    """
    assert evaluate(source) == Int(1)


@pytest.mark.parametrize(
    "source",
    [
        "(let ((x (Integer 1))) x)",
        "(let ((x is (Integer 1))) x)",
        "(let ((x be (Integer 1) extra)) x)",
        "(let ((\"x\" be (Integer 1))) 1)",
        "(let (x) x)",
    ]
)
def test_invalid_binding(source):
    result = evaluate(source)
    assert result.is_error
    assert "invalid binding" in result.message


def test_invalid_binding_evaluates_nothing(env):
    result = evaluate("(let ((a be (impl Numeric for Noun)) (b (Integer 1))) a)", env)
    assert result.is_error
    assert env.traits_for(TypeTag.Noun) == frozenset()


@pytest.mark.parametrize("source", ["(let)", "(let x x)"])
def test_invalid_let_syntax(source):
    result = evaluate(source)
    assert result.is_error
    assert "invalid let syntax" in result.message


# ---------------- fixing closures bound by let ----------------

ADDER = "(adder be (lambda ((n as Integer)) returns Lambda (lambda ((x as Integer)) returns Integer (add x n))))"


def test_fixed_closure_keeps_names_the_let_does_not_bind():
    # `n` lives only in the snapshot taken when `adder` returned; a snapshot
    # of the let scope alone would leave it unbound.
    source = f"(let ({ADDER} (add3 be (adder 3))) (add3 4))"
    assert evaluate(source) == Int(7)


def test_fixed_closure_prefers_the_let_scope_on_a_clash():
    # The let binds `n` as well, so the let scope's value wins over the one
    # captured by the returned closure.
    source = f"(let ({ADDER} (n be (Integer 100)) (add3 be (adder 3))) (add3 4))"
    assert evaluate(source) == Int(104)


def test_bound_returned_closure_is_fixed():
    closure = evaluate(f"(let ({ADDER} (add3 be (adder 3))) add3)")
    assert closure.fixed
    assert closure.env.lookup(Symbol("n")) == Int(3)
    assert closure.env.lookup(Symbol("add3")).same_origin(closure)


# ---------------- impl ----------------

def test_impl_returns_true_and_registers(env):
    assert evaluate("(impl Relatable for Noun)", env) == TRUE
    assert env.has_trait(TypeTag.Noun, TraitTag.Relatable)


def test_impl_is_idempotent(env):
    evaluate("(impl Relatable for Noun)", env)
    evaluate("(impl Relatable for Noun)", env)
    assert env.traits[TypeTag.Noun] == frozenset({TraitTag.Relatable})


def test_impl_accumulates(env):
    evaluate("(impl Relatable for Noun) (impl Countable for Noun) (impl Numeric for Integer)", env)
    assert env.traits[TypeTag.Noun] == frozenset({TraitTag.Relatable, TraitTag.Countable})
    assert env.traits[TypeTag.Integer] == frozenset({TraitTag.Numeric})


def test_impl_inside_let_does_not_leak(env):
    evaluate("(impl Numeric for Noun)", env)
    result = evaluate("(let ((x be (impl Relatable for Noun))) x)", env)
    assert result == TRUE
    assert env.traits[TypeTag.Noun] == frozenset({TraitTag.Numeric})


def test_impl_in_let_body_visible_inside_the_let(env):
    from wat.evaluation.special_forms import SPECIAL_FORMS

    seen = {}

    def seen_traits(tail, scope, evaluate_fn, depth):
        seen["traits"] = scope.traits_for(TypeTag.Verb)
        return TRUE

    SPECIAL_FORMS[Symbol("seen_traits")] = seen_traits
    try:
        evaluate("(let () (impl Temporal for Verb) (seen_traits))", env)
    finally:
        del SPECIAL_FORMS[Symbol("seen_traits")]
    assert seen["traits"] == frozenset({TraitTag.Temporal})
    assert env.traits_for(TypeTag.Verb) == frozenset()


@pytest.mark.parametrize(
    "source",
    [
        "(impl Flying for Noun)",
        "(impl Numeric for Animal)",
        "(impl Noun for Numeric)",
        '(impl "Numeric" for Noun)',
    ]
)
def test_impl_invalid_names(source):
    result = evaluate(source)
    assert result.is_error
    assert "invalid trait/type" in result.message


@pytest.mark.parametrize(
    "source",
    [
        "(impl Numeric Noun)",
        "(impl Numeric to Noun)",
        "(impl Numeric for)",
        "(impl Numeric for Noun Verb)",
        "(impl)",
    ]
)
def test_impl_invalid_syntax(source):
    result = evaluate(source)
    assert result.is_error
    assert "invalid impl syntax" in result.message
