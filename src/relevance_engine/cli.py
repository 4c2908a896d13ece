"""Command line interface for scoring text pairs."""

from __future__ import annotations

import argparse
import json
import sys

from .config import Settings
from .engine import RelevanceEngine, RelevanceResult, ScoringStrategy
from .errors import RelevanceError
from .samples import SAMPLE_CASES


def _add_output_options(parser: argparse.ArgumentParser, *, suppress: bool = False) -> None:
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in ScoringStrategy],
        default=argparse.SUPPRESS if suppress else None,
        help="Scoring strategy (defaults to DEFAULT_STRATEGY or 'lexical')",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Print results as JSON",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Estimate how relevant one person's knowledge is to another's")
    _add_output_options(parser)

    # Options are accepted after the subcommand too; SUPPRESS keeps the
    # subcommand from resetting values given before it.
    common = argparse.ArgumentParser(add_help=False)
    _add_output_options(common, suppress=True)
    subparsers = parser.add_subparsers(dest="command", required=True)

    score = subparsers.add_parser("score", parents=[common], help="Score a primary text against a secondary text")
    score.add_argument("primary", help="What the primary person knows")
    score.add_argument("secondary", help="What the secondary person knows")

    subparsers.add_parser("samples", parents=[common], help="Score the bundled sample cases")
    return parser


def _print_result(label: str | None, result: RelevanceResult, as_json: bool) -> None:
    if as_json:
        payload = result.to_dict()
        if label:
            payload = {"sample": label, **payload}
        print(json.dumps(payload))
        return
    if label:
        print(f"[{label}]")
    verdict = "relevant" if result.is_relevant else "not relevant"
    print(f"score={result.score:.3f} ({verdict})")
    print(result.explanation)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    engine = RelevanceEngine(settings)

    try:
        if args.command == "score":
            result = engine.calculate_relevance(args.primary, args.secondary, strategy=args.strategy)
            _print_result(None, result, args.json)
        else:
            for case in SAMPLE_CASES:
                result = engine.calculate_relevance(case.primary, case.secondary, strategy=args.strategy)
                _print_result(case.id, result, args.json)
    except RelevanceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
