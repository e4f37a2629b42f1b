# matchday/exceptions.py
"""
Errores de dominio de la votación MOTM.

Cada error lleva el código HTTP con el que lo reporta el router y un
mensaje pensado para mostrarse tal cual al usuario.
"""


class VoteError(Exception):
    status_code = 400
    detail = "No se pudo registrar el voto"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


class Unauthenticated(VoteError):
    status_code = 401
    detail = "Tenés que iniciar sesión para votar"


class UnverifiedIdentity(VoteError):
    status_code = 403
    detail = "Verificá tu email antes de votar. Revisá tu bandeja de entrada."


class VotingClosed(VoteError):
    status_code = 400
    detail = "La votación para este partido está cerrada"


class MatchNotFound(VotingClosed):
    status_code = 404
    detail = "Partido no encontrado"


class InvalidPlayer(VoteError):
    status_code = 400
    detail = "El jugador no pertenece a ninguno de los equipos del partido"


class DuplicateVote(VoteError):
    status_code = 409
    detail = "Ya votaste en este partido"


class ResultsHidden(VoteError):
    status_code = 403
    detail = "Los resultados se muestran después de votar y mientras la votación está abierta"


class StorageFailure(VoteError):
    status_code = 500
    detail = "Error guardando el voto, intentá de nuevo"
