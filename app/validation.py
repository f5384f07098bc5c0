"""Field rules for movie payloads.

Each field has an ordered list of rules. A rule is a predicate over the
trimmed text value and the message reported when the predicate fails.
All failing rules are reported, not only the first one per field.
app.validation.py
"""
import re
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from pydantic import BaseModel

GENEROS = ("Ação", "Terror", "Drama", "Comédia", "Documentário")

_DIGITS = re.compile(r"[0-9]+")


class Rule(NamedTuple):
    check: Callable[[str], bool]
    message: str


class FieldError(BaseModel):
    value: Optional[Any] = None
    msg: str
    param: str
    location: str = "body"


class ValidationResult(NamedTuple):
    data: Dict[str, Any]
    errors: List[FieldError]


def _not_empty(value: str) -> bool:
    return value != ""

def _is_numeric(value: str) -> bool:
    return bool(_DIGITS.fullmatch(value))

def _min_length(n: int):
    return lambda value: len(value) >= n

def _max_length(n: int):
    return lambda value: len(value) <= n


MOVIE_RULES: Dict[str, List[Rule]] = {
    "genero": [
        Rule(_not_empty, "É obrigatório informar o genero do filme"),
        Rule(lambda value: value in GENEROS,
             "O genêro informado deve ser Ação, Terror, Drama, Comédia ou Documentário"),
    ],
    "nome": [
        Rule(_not_empty, "É obrigatório informar o nome do filme"),
        Rule(_min_length(2), "O nome do filme informado é muito curto. Informe ao menos 2 caracteres"),
        Rule(_max_length(100), "O nome do filme informado é muito longo. Informe ao máximo 100 caracteres"),
    ],
    "diretor": [
        Rule(_not_empty, "É obrigatório informar o nome do diretor"),
        Rule(_min_length(2), "O nome do diretor é muito curto. Informe ao menos 2 caracteres"),
        Rule(_max_length(100), "O nome do diretor é muito longo. Informe no máximo 100 caracteres"),
    ],
    "ano": [
        Rule(_not_empty, "É obrigatório informar o ano que o filme foi lançado"),
        Rule(_is_numeric, "O ano só pode conter números"),
        Rule(_min_length(3), "O ano digitado não pode ser usado. Informe um ano entre 1900 a 2025"),
        Rule(_max_length(4), "O ano digitado não pode ser usado. Informe um ano entre 1900 a 2025"),
    ],
    "nota": [
        Rule(_not_empty, "É obrigatório informar a nota do filme"),
        Rule(_is_numeric, "a nota só pode conter números de 0 a 10"),
        # never fails
        Rule(_min_length(0), "O numero digitado não pode ser usado. Informe um número entre 0 a 10"),
        Rule(_max_length(2), "O numero digitado não pode ser usado. Informe um número entre 0 a 10"),
    ],
}


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_movie(payload: Dict[str, Any], rules: Dict[str, List[Rule]] = MOVIE_RULES) -> ValidationResult:
    """Check ``payload`` against ``rules``.

    Returns the sanitized copy of the payload (ruled fields that were sent are
    stored as trimmed text, other fields are left as they are) together with
    the list of violations. An empty list means the payload is valid.
    """
    data = dict(payload)
    errors: List[FieldError] = []
    for field, field_rules in rules.items():
        raw = payload.get(field)
        text = _as_text(raw)
        if field in payload:
            data[field] = text
        # an absent field carries no value key, only a sent one does
        sent = {"value": raw} if field in payload else {}
        for rule in field_rules:
            if not rule.check(text):
                errors.append(FieldError(msg=rule.message, param=field, location="body", **sent))
    return ValidationResult(data, errors)


def errors_by_field(errors: List[FieldError]) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for error in errors:
        grouped.setdefault(error.param, []).append(error.msg)
    return grouped
