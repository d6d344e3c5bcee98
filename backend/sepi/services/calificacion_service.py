from typing import Iterable, List, Mapping, Optional

from sepi.rubricas import Criterio


def _puntaje_de(scores: Iterable[Mapping], criterio_id: str) -> Optional[float]:
    for score in scores:
        if score.get('criterio_id') == criterio_id:
            return score.get('puntaje')
    return None


def compute_final_score(scores: Iterable[Mapping], criteria: Iterable[Criterio]) -> float:
    """Nota final ponderada: suma de puntaje * peso / 100 por criterio.

    Un criterio sin puntaje aporta 0 y un puntaje sin criterio se ignora.
    No se valida ni se recorta el rango de los valores.
    """
    scores = list(scores)
    total = 0.0
    for criterio in criteria:
        puntaje = _puntaje_de(scores, criterio.id)
        if puntaje is None:
            continue
        total += puntaje * (criterio.peso / 100)
    return total


def is_evaluation_complete(scores: Iterable[Mapping], criteria: List[Criterio]) -> bool:
    """Una evaluación se puede guardar cuando todos los criterios tienen puntaje mayor a 0."""
    if not criteria:
        return False
    scores = list(scores)
    for criterio in criteria:
        puntaje = _puntaje_de(scores, criterio.id)
        if puntaje is None or puntaje <= 0:
            return False
    return True


def initial_scores(criteria: Iterable[Criterio]) -> List[dict]:
    """Puntajes en cero para cada criterio de la rúbrica."""
    return [{'criterio_id': c.id, 'puntaje': 0} for c in criteria]
