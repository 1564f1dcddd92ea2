"""
Command line entry point.

    strengths-coach parse report.pdf [--json] [--no-ai]
    strengths-coach coach report.pdf "How can I use Strategic at work?"
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from strengths_coach.models.coaching import CoachingRequest, CoachingRequestType, ServiceError
from strengths_coach.models.config import SystemParams
from strengths_coach.models.strength import ParsedPDFResult, UserProfile
from strengths_coach.services.coaching_service import ClaudeCoachingService
from strengths_coach.services.pdf_parser import CliftonStrengthsPDFParser
from strengths_coach.utils.logger import configure_logging
from strengths_coach.utils.rate_limiter import RequestRateLimiter

console = Console()


def render_profile(profile: UserProfile, result: ParsedPDFResult) -> None:
    """Print a parsed profile as rich tables."""
    console.print(f"[bold]{profile.name}[/bold]  {profile.assessment_date.isoformat()}")
    console.print(
        f"Format: {profile.format.value}  Leading domain: "
        f"[green]{profile.leading_domain.value}[/green]  "
        f"(via {result.extraction_method})"
    )

    table = Table(title="Strengths")
    table.add_column("Rank", justify="right")
    table.add_column("Strength")
    table.add_column("Domain")
    for strength in profile.strengths:
        table.add_row(str(strength.rank), strength.name, strength.domain.value)
    console.print(table)

    domains = Table(title="Domains")
    domains.add_column("Domain")
    domains.add_column("Count", justify="right")
    for summary in profile.domain_summary:
        domains.add_row(summary.domain.value, str(summary.count))
    console.print(domains)

    for warning in result.warnings:
        console.print(f"[yellow][!] {warning}[/yellow]")


async def _parse(args: argparse.Namespace, params: SystemParams) -> ParsedPDFResult:
    parser_config = params.parser
    if args.no_ai:
        parser_config = parser_config.model_copy(update={"ai_fallback_enabled": False})
    return await CliftonStrengthsPDFParser(parser_config).parse_pdf_from_path(args.pdf)


def _print_failure(result: ParsedPDFResult) -> None:
    error = result.error.value if result.error else "UNKNOWN"
    console.print(f"[red][X] {error}: {result.message}[/red]")


def cmd_parse(args: argparse.Namespace, params: SystemParams) -> int:
    result = asyncio.run(_parse(args, params))
    if args.json:
        print(result.model_dump_json(by_alias=True, exclude={"full_text_content"}, indent=2))
    elif result.data is not None:
        render_profile(result.data, result)

    if not result.success:
        _print_failure(result)
        return 1
    return 0


async def _coach(args: argparse.Namespace, params: SystemParams) -> int:
    result = await _parse(args, params)
    if not result.success:
        _print_failure(result)
        return 1

    service = ClaudeCoachingService(
        params.coaching, RequestRateLimiter.from_config(params.rate_limits)
    )
    request = CoachingRequest(
        message=args.message,
        type=CoachingRequestType(args.type),
        strengths_profile=result.data,
    )
    try:
        reply = await service.generate_coaching_response(request)
    except ServiceError as e:
        console.print(f"[red][X] {e.code}: {e}[/red]")
        return 1

    console.print(reply.response)
    if reply.follow_up_questions:
        console.print("\n[bold]Questions to explore:[/bold]")
        for question in reply.follow_up_questions:
            console.print(f"  - {question}")
    return 0


def cmd_coach(args: argparse.Namespace, params: SystemParams) -> int:
    return asyncio.run(_coach(args, params))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="strengths-coach",
        description="Parse CliftonStrengths reports and get strengths-based coaching",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to system_params.json")
    parser.add_argument("--log-file", type=Path, default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Extract a profile from a report PDF")
    parse_cmd.add_argument("pdf", type=Path)
    parse_cmd.add_argument("--json", action="store_true", help="Print camelCase JSON")
    parse_cmd.add_argument("--no-ai", action="store_true", help="Disable the AI fallback")
    parse_cmd.set_defaults(func=cmd_parse)

    coach_cmd = subparsers.add_parser("coach", help="Ask the coach about a report")
    coach_cmd.add_argument("pdf", type=Path)
    coach_cmd.add_argument("message")
    coach_cmd.add_argument(
        "--type",
        choices=[t.value for t in CoachingRequestType],
        default=CoachingRequestType.GENERAL_CHAT.value,
    )
    coach_cmd.add_argument("--no-ai", action="store_true", help="Disable the AI fallback")
    coach_cmd.set_defaults(func=cmd_coach)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        params = SystemParams.load(args.config) if args.config else SystemParams.load_or_default()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red][X] Invalid configuration: {e}[/red]")
        return 1

    configure_logging(log_file=args.log_file, log_level=params.log_level)
    return args.func(args, params)


if __name__ == "__main__":
    sys.exit(main())
