from __future__ import annotations


class DomainError(Exception):
    """Base para erros de dominio."""


class AccessInputError(DomainError):
    """Parametros invalidos para consulta de acessos."""

    code = "invalid_request"


class InvalidUserIdsError(AccessInputError):
    """Lista de user_ids ausente, vazia ou com valores nao inteiros."""

    code = "invalid_user_ids"


class TooManyUserIdsError(AccessInputError):
    """Quantidade de user_ids acima do limite por requisicao."""

    code = "too_many_user_ids"


class MissingSinceError(AccessInputError):
    """Parametro since ausente."""

    code = "missing_since"


class InvalidSinceError(AccessInputError):
    """Parametro since nao e uma data valida."""

    code = "invalid_since"


class InvalidUntilError(AccessInputError):
    """Parametro until vazio ou invalido."""

    code = "invalid_until"


class InvalidAccessWindowError(AccessInputError):
    """Janela de consulta com until anterior ou igual a since."""

    code = "invalid_range"
