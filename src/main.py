"""Command-line entry point for roastreel."""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from roast_agent.agent import RoastPipeline, RoastPipelineError
from roast_agent.models import EnergyMode, RoastResult, ValidationError
from utils.config import load_config, setup_logging, validate_config

logger = logging.getLogger(__name__)


class RoastCLI:
    """Rich terminal front end for the roast pipeline."""

    def __init__(self, config: Optional[dict] = None, console: Optional[Console] = None):
        self.config = config if config is not None else load_config()
        self.console = console or Console()
        self._pipeline: Optional[RoastPipeline] = None

    @property
    def pipeline(self) -> RoastPipeline:
        if self._pipeline is None:
            errors = validate_config(self.config)
            if errors:
                raise ValueError("Configuration errors: " + "; ".join(errors))
            self._pipeline = RoastPipeline.from_config(self.config)
        return self._pipeline

    def display_result(self, result: RoastResult) -> None:
        """Show the finished roast."""
        info = Table(show_header=False, box=None, padding=(0, 2))
        info.add_column("Property", style="cyan")
        info.add_column("Value", style="white")
        info.add_row("Fingerprint", result.fingerprint)
        info.add_row("Video", result.video_url)
        info.add_row("Duration", f"{result.duration_seconds:.1f}s")
        info.add_row("Budget", f"{result.max_words} words @ {result.words_per_second} wps")
        info.add_row("Cached", "yes" if result.from_cache else "no")
        if result.cache_write_error:
            info.add_row("Cache write", f"[red]{result.cache_write_error}[/red]")

        self.console.print(Panel(info, title="[bold]Roast[/bold]", border_style="green"))
        self.console.print(Panel("\n".join(result.lines), title="Script", border_style="blue"))
        self.console.print(f"[bold]Caption:[/bold] {result.caption}")
        if result.video_prompt:
            self.console.print(Panel(result.video_prompt, title="Video prompt", border_style="magenta"))

    async def roast(self, args: argparse.Namespace) -> int:
        payload = {
            "tweet_id": args.tweet_id,
            "startup_name": args.startup,
            "tweet_text": args.text,
            "author_handle": args.author,
            "website": args.website,
            "angle": args.angle,
            "target_seconds": args.seconds,
            "energy_mode": args.energy,
        }
        try:
            result = await self.pipeline.run(payload)
        except ValidationError as e:
            self.console.print(f"[red]Invalid request:[/red] {e}")
            return 2
        except RoastPipelineError as e:
            self.console.print(f"[red]Roast failed:[/red] {e}")
            return 1
        else:
            if args.srt_out:
                self.pipeline.subtitle_engine.save_srt_file(result.srt, args.srt_out)
                self.console.print(f"Subtitles written to {args.srt_out}")
            self.display_result(result)
            self.pipeline.store.log_stats()
            return 0
        finally:
            await self.close()

    async def clear_cache(self, _args: argparse.Namespace) -> int:
        try:
            result = await self.pipeline.clear_cache()
        finally:
            await self.close()
        if not result.success:
            self.console.print(f"[red]Failed to clear cache:[/red] {result.error}")
            return 1
        self.console.print(f"Cleared {result.count} cached roast(s)")
        return 0

    async def close(self) -> None:
        if self._pipeline is not None:
            await self._pipeline.close()
            self._pipeline = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="roastreel: turn a startup tweet into a short roast video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  roastreel roast --tweet-id 1 --startup Acme --text "We raised $5M"
  roastreel roast --tweet-id 1 --startup Acme --text "..." --energy normal --seconds 15
  roastreel clear-cache
        """,
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    roast = subparsers.add_parser("roast", help="Build (or recall) the roast for one tweet")
    roast.add_argument("--tweet-id", required=True)
    roast.add_argument("--startup", required=True, help="Startup name")
    roast.add_argument("--text", required=True, help="Tweet text")
    roast.add_argument("--author", default=None, help="Author handle")
    roast.add_argument("--website", default=None)
    roast.add_argument("--angle", default=None, help="Optional comedic angle")
    roast.add_argument("--seconds", type=int, default=12, help="Target video length")
    roast.add_argument(
        "--energy",
        type=str.upper,
        choices=[mode.value for mode in EnergyMode],
        default=EnergyMode.HYPER.value,
    )
    roast.add_argument("--srt-out", default=None, help="Also write the subtitles to this file")

    subparsers.add_parser("clear-cache", help="Remove every cached roast and video")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    config = load_config()
    setup_logging(args.log_level or config.get("log_level", "INFO"))

    cli = RoastCLI(config)
    handler = cli.roast if args.command == "roast" else cli.clear_cache

    try:
        exit_code = asyncio.run(handler(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Application error: {e}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
