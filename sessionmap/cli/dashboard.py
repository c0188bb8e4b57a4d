"""CLI dashboard — prints session stats and backtest results to the console."""

from sessionmap.analysis.models import AggregatedResults
from sessionmap.backtest.stats import PerformanceMetrics


def print_summary(results: AggregatedResults, metrics: PerformanceMetrics) -> str:
    """Format and print the per-level table and the performance summary.

    Returns:
        The formatted string (also printed to stdout).
    """
    lines = [
        "──────────────── SessionMap Summary ────────────────",
        f"  Days:            {results.total_days}",
        f"  Reactions:       {results.total_reactions}",
        f"  Success Rate:    {results.overall_success_rate}%",
        "",
        f"  {'Level':<15}{'Tested':>7}{'Won':>6}{'Prob':>8}{'Avg':>8}  Confidence",
    ]
    for level, stat in results.session_stats.items():
        lines.append(
            f"  {level.display_name:<15}{stat.tested:>7}{stat.successful:>6}"
            f"{stat.probability + '%':>8}{stat.avg_move:>8}  {stat.confidence.value}"
        )

    pf = f"{metrics.profit_factor:.2f}" if metrics.profit_factor else "N/A"
    lines += [
        "",
        f"  Trades:          {metrics.total_trades}",
        f"  Net P&L:         ${metrics.net_pnl:,.2f}",
        f"  Win Rate:        {metrics.win_rate:.1f}%",
        f"  Profit Factor:   {pf}",
        f"  Max Drawdown:    ${metrics.max_drawdown:,.2f}",
        f"  Reward/Risk:     {metrics.reward_risk_ratio:.2f}",
        "────────────────────────────────────────────────────",
    ]
    output = "\n".join(lines)
    print(output)
    return output
