# matchday/utils/voting_window.py
"""
Reglas de la ventana de votación.

Funciones puras: no tocan la base ni tienen efectos colaterales, así que se
testean sin servicios externos.

- live      -> votación abierta siempre.
- finished  -> abierta mientras now < updated_at + período de gracia.
               Sin updated_at se considera cerrada.
- scheduled -> cerrada siempre.

Los resultados parciales sólo se muestran a quien ya votó y mientras la
ventana sigue abierta, para no influir a los indecisos.
"""
from datetime import datetime, timedelta

from matchday.config import settings
from matchday.models.match import MatchStatus


def grace_period_delta(grace_period: timedelta | None = None) -> timedelta:
    if grace_period is not None:
        return grace_period
    return timedelta(minutes=settings.VOTING_GRACE_PERIOD_MINUTES)


def voting_ends_at(match, grace_period: timedelta | None = None) -> datetime | None:
    """Momento en que cierra la votación de un partido finalizado."""
    if match.updated_at is None:
        return None
    return match.updated_at + grace_period_delta(grace_period)


def is_voting_open(match, now: datetime, grace_period: timedelta | None = None) -> bool:
    if match.status == MatchStatus.live:
        return True

    if match.status == MatchStatus.finished:
        ends_at = voting_ends_at(match, grace_period)
        if ends_at is None:
            return False
        return now < ends_at

    return False


def can_reveal_results(voting_open: bool, has_voted: bool) -> bool:
    return voting_open and has_voted
