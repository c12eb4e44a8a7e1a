import sys
import argparse
import textwrap

import pyfiglet
from loguru import logger

from bitflip import canonical
from bitflip.campaign import CampaignParams, run_campaign
from bitflip.report import console_observer, render
from bitflip.result import ConfigurationError


def print_welcome(parser: argparse.ArgumentParser) -> None:
    print("Welcome! Avaliable arguments:\n")
    help_text = parser.format_help()
    options_start = help_text.find("options:")
    if options_start != -1:
        options_text = help_text[options_start:]
        print(textwrap.indent(options_text, "    "))
    else:
        print(textwrap.indent(help_text, "    "))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inject bitflips into integers.")
    parser.add_argument("--mode", type=str, default="iteration", help="Test type: iteration, variable or time.")
    parser.add_argument("--count", type=str, default="10", help="Flip/variable count, or seconds for time.")
    parser.add_argument("--rates", type=float, nargs="+", default=[0.01], help="Error rates, one run per rate.")
    parser.add_argument("--value", type=lambda x: int(x, 0), nargs="+", default=[0], help="Values to corrupt (0x.. allowed).")
    parser.add_argument("--calls", type=int, default=None, help="Upper bound of inject calls. Unbounded for time mode by default.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--width", type=int, default=canonical.DEFAULT_WIDTH, help="Canonical width in bits.")
    parser.add_argument("--output", type=str, default=None, help="Write rendered output to file.")
    parser.add_argument("--quiet", action="store_true", help="Don't print every flip event.")
    return parser


def parse_count(mode: str, raw: str) -> int | float:
    if mode in ("iteration", "variable"):
        return int(raw)
    return float(raw)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print_welcome(parser=parser)
        return 1

    args = parser.parse_args(argv)
    try:
        count = parse_count(args.mode, args.count)
    except ValueError:
        parser.error(f"invalid count {args.count!r} for mode {args.mode!r}")

    if args.quiet:
        logger.remove()
        logger.add(sys.stderr, level="WARNING")
    else:
        print(pyfiglet.figlet_format("BitFlip"), file=sys.stderr)

    logger.info(f"Test starting. Type={args.mode}, count={count}, rates={args.rates}")
    params = CampaignParams(
        mode=args.mode, count=count, rates=args.rates, values=args.value,
        max_calls=args.calls, seed=args.seed, width=args.width
    )

    try:
        injector, summary = run_campaign(
            params=params, observer=None if args.quiet else console_observer
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    logger.info(f"Campaign done. Calls={summary.calls}, finished={summary.finished}")
    rendered = render(injector.output)
    if not rendered.ok:
        return 3

    if args.output:
        with open(args.output, "w") as f:
            f.write(rendered.text)
        logger.info(f"Output saved to {args.output}")
    else:
        print(rendered.text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
