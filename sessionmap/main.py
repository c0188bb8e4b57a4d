"""SessionMap — application entry point.

Boots the FastAPI internal server and provides the CLI entry point for
serving the API or analysing a saved batch of analysis documents offline.
"""

import logging

from fastapi import FastAPI

from sessionmap.api.routers import router

app = FastAPI(title="SessionMap Internal API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("sessionmap")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli() -> None:
    """Parse CLI arguments and dispatch to the appropriate mode."""
    import argparse

    parser = argparse.ArgumentParser(description="SessionMap trade analytics")
    parser.add_argument(
        "--mode",
        choices=["serve", "analyze"],
        default="serve",
        help="Run the API server or analyse a JSON file (default: serve)",
    )
    parser.add_argument(
        "--input",
        help="Analysis JSON file (a document or a list of documents) for analyze mode",
    )
    parser.add_argument("--env-file", help="Path to a .env file")
    args = parser.parse_args()

    if args.mode == "analyze":
        from sessionmap.config import load_risk_policy
        from dotenv import load_dotenv

        load_dotenv(dotenv_path=args.env_file)
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        if not args.input:
            parser.error("--input is required in analyze mode")
        _run_analyze(args.input, load_risk_policy())
        return

    from sessionmap.config import load_config

    config = load_config(args.env_file)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    _run_server(config)


def _run_server(config) -> None:
    """Start the API server with the Gemini client wired in."""
    import uvicorn

    from sessionmap.api.routers import configure_routers
    from sessionmap.forecast.client import GeminiClient

    configure_routers(
        client=GeminiClient(config),
        policy=config.risk,
        history_max_days=config.history_max_days,
    )
    logger.info("Starting SessionMap API on port %d", config.api_port)
    uvicorn.run(app, host="0.0.0.0", port=config.api_port, log_level="info")


def _run_analyze(path: str, policy) -> None:
    """Aggregate and backtest a saved analysis file, then print a summary."""
    import json
    import pathlib

    from sessionmap.analysis.aggregator import aggregate
    from sessionmap.analysis.events import tag_analysis
    from sessionmap.analysis.ingest import parse_analysis
    from sessionmap.backtest.stats import calculate_performance
    from sessionmap.cli.dashboard import print_summary

    raw = json.loads(pathlib.Path(path).read_text(encoding="utf-8"))
    docs = raw if isinstance(raw, list) else [raw]
    results = aggregate(tag_analysis(parse_analysis(d)) for d in docs)
    metrics = calculate_performance(results.daily_data, policy)
    logger.info(
        "Backtest complete: %d trades, PnL: $%.2f, Win rate: %.1f%%",
        metrics.total_trades,
        metrics.net_pnl,
        metrics.win_rate,
    )
    print_summary(results, metrics)


if __name__ == "__main__":
    _run_cli()
