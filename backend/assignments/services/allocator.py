"""Per-student question selection for the non-manual assignment types.

All randomness goes through an injected `rng` exposing ``sample(population, k)``
(any `random.Random`). Production uses `random.SystemRandom()`; tests pass a
seeded `random.Random` to get a reproducible draw.
"""
import logging
import math
import random
from typing import List, Optional, Sequence, Tuple

from academics.services.identity import StudentIdentity
from assignments.models import Assignment
from question_bank.models import Question

logger = logging.getLogger(__name__)


def default_rng():
    return random.SystemRandom()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def draw(population: Sequence, k: int, rng) -> list:
    """Uniformly draw up to `k` distinct items from `population`."""
    if k <= 0 or not population:
        return []
    return rng.sample(list(population), min(k, len(population)))


def pool_questions(pool_ids: Sequence[int]) -> List[Tuple[int, str]]:
    """Return ``(pk, topic)`` for pool ids that still exist, in pool order, deduplicated."""
    topics = dict(Question.objects.filter(pk__in=list(pool_ids)).values_list('pk', 'topic'))
    seen = set()
    out = []
    for qid in pool_ids:
        if qid in topics and qid not in seen:
            seen.add(qid)
            out.append((qid, topics[qid]))
    return out


def select_bracket(rules: Sequence[dict], percent: float) -> Optional[dict]:
    """Pick the rule whose ``[min, max]`` contains `percent`.

    Rules may overlap; the one with the highest `min` wins, so a student on a
    shared boundary lands in the stricter bracket.
    """
    for rule in sorted(rules, key=lambda r: r['min'], reverse=True):
        if rule['min'] <= percent <= rule['max']:
            return rule
    return None


def allocate_random(pool: Sequence[Tuple[int, str]], count: Optional[int], rng) -> List[int]:
    return draw([qid for qid, _ in pool], count or 0, rng)


def allocate_weighted(pool: Sequence[Tuple[int, str]], total_q: int, topic_weights: Sequence[dict], rng) -> List[int]:
    """Draw `total_q` questions honouring per-topic percentage shares.

    Each topic contributes ``round(total_q * weight / 100)`` questions (fewer
    if the topic runs dry); the shortfall is filled from the rest of the pool
    without repeating a question, and rounding overshoot is truncated.
    """
    chosen: List[int] = []
    taken = set()
    for tw in topic_weights or []:
        n = round_half_up(total_q * tw['weight'] / 100)
        candidates = [qid for qid, topic in pool if topic == tw['topic'] and qid not in taken]
        for qid in draw(candidates, n, rng):
            taken.add(qid)
            chosen.append(qid)

    if len(chosen) < total_q:
        rest = [qid for qid, _ in pool if qid not in taken]
        for qid in draw(rest, total_q - len(chosen), rng):
            taken.add(qid)
            chosen.append(qid)

    return chosen[:total_q]


def allocate(assignment: Assignment, identity: StudentIdentity, percent: float, rng=None) -> List[int]:
    """Select question ids for one student, or ``[]`` when nothing applies.

    manual assignments never produce a per-student selection.
    """
    rng = rng or default_rng()
    kind = assignment.type

    if kind == Assignment.TYPE_MANUAL:
        return []

    if kind == Assignment.TYPE_PERSONALIZED:
        targeted = assignment.target_students.filter(pk__in=identity.internal_ids).exists()
        if not targeted:
            logger.info('roll=%s is not targeted by personalized assignment=%s', identity.roll, assignment.pk)
            return []
        return allocate_random(pool_questions(assignment.question_pool), assignment.question_count, rng)

    if kind == Assignment.TYPE_RANDOMIZED:
        return allocate_random(pool_questions(assignment.question_pool), assignment.question_count, rng)

    if kind == Assignment.TYPE_BATCH_ATTENDANCE:
        rule = select_bracket(assignment.rules or [], percent)
        if rule is None:
            logger.info('No bracket matches percent=%.2f for roll=%s assignment=%s', percent, identity.roll, assignment.pk)
            return []
        return allocate_weighted(pool_questions(assignment.question_pool), int(rule['count']), assignment.topic_weights, rng)

    raise ValueError(f'Unknown assignment type {kind!r}')
