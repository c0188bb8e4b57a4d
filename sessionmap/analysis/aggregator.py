"""Session reaction aggregator — pure fold over analysis documents."""

from typing import Iterable, Union

from sessionmap.analysis.ingest import parse_analysis
from sessionmap.analysis.models import (
    AggregatedResults,
    AnalysisDocument,
    Confidence,
    DailyData,
    Level,
    Reaction,
    SessionStat,
)


def format_pct(numerator: int, denominator: int) -> str:
    """Percentage to one decimal place, or ``"0"`` when *denominator* is 0."""
    if denominator <= 0:
        return "0"
    return f"{numerator / denominator * 100:.1f}"


def finalize_stat(tested: int, successful: int, moves: list[float]) -> SessionStat:
    """Derive probability, average move and confidence from raw counts."""
    avg_move = f"{sum(moves) / len(moves):.1f}" if moves else "0"
    return SessionStat(
        tested=tested,
        successful=successful,
        moves=tuple(moves),
        probability=format_pct(successful, tested),
        avg_move=avg_move,
        confidence=Confidence.from_sample_size(tested),
    )


def aggregate(
    analyses: Iterable[Union[AnalysisDocument, dict]],
) -> AggregatedResults:
    """Fold analysis documents into per-level statistics.

    Raw dicts are normalised through the ingestion boundary first.
    Reactions whose level name matches none of the canonical levels are
    kept in ``all_reactions`` but do not count towards any statistic.

    Returns:
        A fresh ``AggregatedResults``; inputs are never mutated.
    """
    tested = {level: 0 for level in Level}
    successful = {level: 0 for level in Level}
    moves: dict[Level, list[float]] = {level: [] for level in Level}

    daily_data: list[DailyData] = []
    all_reactions: list[Reaction] = []

    for analysis in analyses:
        doc = analysis if isinstance(analysis, AnalysisDocument) else parse_analysis(analysis)
        for day in doc.days:
            daily_data.append(day)
            for reaction in day.reactions:
                all_reactions.append(reaction)
                level = reaction.level
                if level is None:
                    continue
                tested[level] += 1
                if reaction.reacted:
                    successful[level] += 1
                    moves[level].append(reaction.move)

    session_stats = {
        level: finalize_stat(tested[level], successful[level], moves[level])
        for level in Level
    }
    successful_count = sum(1 for r in all_reactions if r.reacted)

    return AggregatedResults(
        session_stats=session_stats,
        daily_data=tuple(daily_data),
        all_reactions=tuple(all_reactions),
        total_days=len(daily_data),
        total_reactions=len(all_reactions),
        successful_reactions=successful_count,
        overall_success_rate=format_pct(successful_count, len(all_reactions)),
    )
