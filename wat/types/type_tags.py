"""Closed sets of type tags and trait tags.

Both are plain Enums whose values are the names used in program text, so
`TypeTag.from_name("Noun")` and `TypeTag("Noun")` agree.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class TypeTag(Enum):
    Noun = "Noun"
    Verb = "Verb"
    Time = "Time"
    Adverb = "Adverb"
    String = "String"
    Integer = "Integer"
    Float = "Float"
    Boolean = "Boolean"
    Pronoun = "Pronoun"
    Preposition = "Preposition"
    Adjective = "Adjective"
    Error = "Error"
    Lambda = "Lambda"

    @classmethod
    def from_name(cls, name: object) -> Optional[TypeTag]:
        """Return the tag spelled `name`, or None when it is not in the set."""
        try:
            return cls(str(name))
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


class TraitTag(Enum):
    Numeric = "Numeric"
    Relatable = "Relatable"
    Comparable = "Comparable"
    Countable = "Countable"
    Temporal = "Temporal"
    Descriptive = "Descriptive"

    @classmethod
    def from_name(cls, name: object) -> Optional[TraitTag]:
        try:
            return cls(str(name))
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


STRING_TYPES = frozenset({
    TypeTag.Noun,
    TypeTag.Verb,
    TypeTag.Time,
    TypeTag.Adverb,
    TypeTag.String,
    TypeTag.Pronoun,
    TypeTag.Preposition,
    TypeTag.Adjective,
    TypeTag.Error,
})

NUMERIC_TYPES = frozenset({TypeTag.Integer, TypeTag.Float})

# Kinds the `list` form accepts as elements
LISTABLE_TYPES = frozenset({
    TypeTag.Noun,
    TypeTag.Time,
    TypeTag.Verb,
    TypeTag.Integer,
    TypeTag.Float,
})

# Heads rewritten to `(entity <Tag> ...)` before dispatch
SUGAR_TYPES = frozenset(
    tag.value for tag in TypeTag if tag not in (TypeTag.Error, TypeTag.Lambda)
)

# Structural sugar: role name -> value of the injected `role` attribute
ROLE_SUGAR = {
    "Subject": "subject",
    "Object": "object",
}

SUGAR_NAMES = SUGAR_TYPES | frozenset(ROLE_SUGAR)
