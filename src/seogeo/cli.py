"""Command-line interface for the SEO/GEO analyzer."""

import sys
import json
import logging
from typing import Optional

from seogeo.analyzer import AnalysisError, SEOGeoAnalyzer
from seogeo.config import Config
from seogeo.database import HistoryStore
from seogeo.email_report import EmailDeliveryError, EmailReportRenderer, EmailSender
from seogeo.fetcher import PageFetcher
from seogeo.geo_scoring import RUBRICS
from seogeo.llm import RecommendationClient
from seogeo.logging_config import setup_logging
from seogeo.models import AnalysisReport

logger = logging.getLogger(__name__)


def print_report(report: AnalysisReport):
    """Print an analysis report in a formatted way.

    Args:
        report: AnalysisReport object
    """
    print(f"\n{'=' * 60}")
    print(f"SEO/GEO Analysis for: {report.url}")
    print(f"{'=' * 60}")
    print(f"\n📊 SEO Score: {report.seo_score}/100")
    print(f"🤖 GEO Score: {report.geo_score}/100 ({report.rubric} rubric)")

    print("\nSEO Breakdown:")
    for factor in report.seo.factors:
        print(f"  • {factor.name}: {factor.points_awarded}/{factor.points_max} - {factor.explanation}")

    print("\nGEO Breakdown:")
    for factor in report.geo.factors:
        print(f"  • {factor.name}: {factor.points_awarded}/{factor.points_max} - {factor.explanation}")

    if report.issues:
        print("\n⚠️  Issues:")
        for issue in report.issues:
            print(f"  • {issue}")

    if report.geo_tags:
        print(f"\n🌍 Regions: {', '.join(report.geo_tags)}")

    if report.recommendations:
        print("\n💡 Recommendations:")
        for rec in report.recommendations:
            print(f"  • [{rec.priority.upper()}] {rec.title}: {rec.detail}")

    print(f"\n{'=' * 60}\n")


def write_output(output: str, output_file: Optional[str]):
    if output_file:
        with open(output_file, "w") as f:
            f.write(output)
        print(f"Results written to {output_file}", file=sys.stderr)
    else:
        print(output)


def build_recommender(config: Config) -> Optional[RecommendationClient]:
    """Create the recommendation client, or None when no API key is configured."""
    if not config.llm_api_key:
        logger.warning("LLM_API_KEY not set; skipping recommendations")
        return None
    return RecommendationClient(
        api_key=config.llm_api_key,
        model=config.llm_model,
        provider=config.llm_provider,
        base_url=config.llm_base_url,
        timeout=config.llm_timeout,
    )


def analyze_command(args, config: Config):
    """Analyze a URL for SEO and AI-search readiness."""
    history = HistoryStore(config.database_url) if config.persist_history else None
    try:
        _run_analysis(args, config, history)
    finally:
        if history:
            history.close()


def _run_analysis(args, config: Config, history: Optional[HistoryStore]):
    recommender = None if args.no_recommendations else build_recommender(config)

    analyzer = SEOGeoAnalyzer(
        rubric=args.rubric or config.rubric,
        fetcher=PageFetcher(user_agent=config.user_agent, timeout=config.fetch_timeout),
        recommender=recommender,
        history=history,
    )

    try:
        print(f"Analyzing {args.url}...", file=sys.stderr)
        report = analyzer.analyze_url(args.url)
    except AnalysisError as e:
        status = f" (status {e.status_code})" if e.status_code else ""
        print(f"Error: failed to analyze {args.url}: {e}{status}", file=sys.stderr)
        sys.exit(1)
    finally:
        analyzer.close()

    if args.output == "json":
        write_output(json.dumps(report.to_dict(), indent=2, default=str), args.output_file)
    else:
        print_report(report)

    if args.email_html:
        with open(args.email_html, "w") as f:
            f.write(EmailReportRenderer().render(report))
        print(f"Email HTML written to {args.email_html}", file=sys.stderr)

    if args.email:
        sender = EmailSender(
            api_key=config.resend_api_key,
            from_address=config.email_from,
            history=history,
        )
        try:
            message_id = sender.send(args.email, report)
        except (ValueError, EmailDeliveryError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Report emailed to {args.email} (message {message_id})", file=sys.stderr)


def history_command(args, config: Config):
    """Show the stored analysis history for a domain."""
    store = HistoryStore(config.database_url)
    reports = store.get_reports_for_domain(args.domain)
    store.close()

    if not reports:
        print(f"No historical data found for domain: {args.domain}")
        return

    if args.output == "json":
        print(json.dumps(reports, indent=2, default=str))
        return

    print(f"\n{'=' * 60}")
    print(f"Analysis History for: {args.domain}")
    print(f"{'=' * 60}\n")
    for report in reports:
        print(f"Date: {report['created_at']}")
        print(f"  URL: {report['url']}")
        print(f"  Rubric: {report.get('rubric') or 'N/A'}")
        print(f"  SEO Score: {report.get('seo_score', 'N/A')}")
        print(f"  GEO Score: {report.get('geo_score', 'N/A')}")
        print("-" * 30)


def main(argv=None):
    """Main CLI entry point."""
    import argparse

    config = Config.from_env()
    levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    default_level = config.log_level.upper() if config.log_level.upper() in levels else "INFO"

    parser = argparse.ArgumentParser(
        description="SEO/GEO Analyzer - Score pages for traditional search and AI-search readiness"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=levels,
        default=default_level,
        help="Set logging verbosity (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze command parser
    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze a URL for SEO and GEO."
    )
    analyze_parser.add_argument("url", help="URL to analyze")
    analyze_parser.add_argument(
        "--rubric",
        choices=sorted(RUBRICS),
        help="AI-readiness rubric (default: RUBRIC or business)",
    )
    analyze_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    analyze_parser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file (only for json format)",
    )
    analyze_parser.add_argument(
        "--no-recommendations",
        action="store_true",
        help="Skip LLM recommendations",
    )
    analyze_parser.add_argument(
        "--email",
        help="Email the report to this address (requires RESEND_API_KEY)",
    )
    analyze_parser.add_argument(
        "--email-html",
        help="Write the rendered email HTML to this file",
    )
    analyze_parser.set_defaults(func=analyze_command)

    # History command parser
    history_parser = subparsers.add_parser(
        "history", help="Show stored analysis history for a domain."
    )
    history_parser.add_argument(
        "domain", help="The domain to show history for (e.g., example.com)"
    )
    history_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    history_parser.set_defaults(func=history_command)

    args = parser.parse_args(argv)

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        args.func(args, config)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
