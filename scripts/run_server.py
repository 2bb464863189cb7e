"""
Run the Trade Agent API with uvicorn.

Usage:
    python scripts/run_server.py [--host HOST] [--port PORT] [--reload] [--log-level LEVEL]

Defaults can also come from the environment (or .env):
    TRADE_AGENT_HOST  (default 127.0.0.1)
    TRADE_AGENT_PORT  (default 8000)
    OPENAI_API_KEY    enables GM-style summaries from OpenAI; MockLLMClient otherwise

--log-level also sets the level of the trade_agent loggers, so
`--log-level debug` prints every scored round of the search.
"""

import argparse
import logging
import os

import uvicorn


ENDPOINTS = [
    ("GET", "/health"),
    ("POST", "/equalize"),
    ("POST", "/api/runs"),
    ("GET", "/api/runs/{run_id}"),
    ("GET", "/api/runs"),
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the Trade Agent API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--host", default=os.environ.get("TRADE_AGENT_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("TRADE_AGENT_PORT", "8000")))
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
    )
    return parser.parse_args()


def main():
    args = parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    base = f"http://{args.host}:{args.port}"
    print(f"Trade Agent API on {base} ({'reload' if args.reload else 'no reload'})")
    for method, path in ENDPOINTS:
        print(f"  {method:<5} {base}{path}")
    print(f"  docs  {base}/docs")

    uvicorn.run(
        "trade_agent.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
