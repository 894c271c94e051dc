"""
Command-line interface for Paint Numbers.

Provides commands for generating templates and writing a default config.
"""

import argparse
import sys

from paintnumbers.config import load_config, save_default_config
from paintnumbers.tracer import configure_tracer, get_tracer


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="paintnumbers",
        description="Paint Numbers: turn a photo into a paint-by-numbers template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Generate a template from an image")
    run_parser.add_argument(
        "--input", "-i",
        required=True,
        help="Input image file",
    )
    run_parser.add_argument(
        "--out", "-o",
        required=True,
        help="Output directory",
    )
    run_parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    run_parser.add_argument(
        "--colors",
        type=int,
        default=None,
        help="Palette size (overrides config)",
    )
    run_parser.add_argument(
        "--min-region-size",
        type=int,
        default=None,
        help="Regions smaller than this many pixels are merged (overrides config)",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug artifact generation",
    )
    run_parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    run_parser.add_argument(
        "--trace-level",
        default="INFO",
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    run_parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )
    run_parser.add_argument(
        "--trace-json",
        action="store_true",
        help="Enable JSON trace output",
    )

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="paintnumbers_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return handle_run(args)
    elif args.command == "init-config":
        return handle_init_config(args)

    return 0


def handle_run(args):
    """Handle the run command."""
    config = load_config(args.config)

    configure_tracer(
        enabled=args.trace or config.tracing.enabled,
        level=args.trace_level if args.trace else config.tracing.level,
        file_path=args.trace_file or config.tracing.file_path,
        json_output=args.trace_json or config.tracing.json_output,
    )

    tracer = get_tracer()

    if args.colors is not None:
        config.quantize.num_colors = args.colors
    if args.min_region_size is not None:
        config.regions.min_region_size = args.min_region_size

    try:
        from paintnumbers.pipeline import run_pipeline

        with tracer.span("cli_run", module="cli"):
            result = run_pipeline(
                input_path=args.input,
                out_dir=args.out,
                config=config,
                debug=args.debug,
            )
    except Exception as e:
        tracer.event(f"Pipeline failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1
    finally:
        tracer.config.close()

    print(f"\nTemplate generated successfully.")
    print(f"  Size: {result.preview.width}x{result.preview.height}")
    print(f"  Colors: {len(result.palette)}")
    print(f"  Regions: {len(result.regions)}")
    print(f"  Numbered regions: {len(result.labels)}")
    print(f"  Result id: {result.result_id}")
    print(f"\nOutputs saved to: {args.out}/")
    print(f"  - template.png")
    print(f"  - preview.png")
    print(f"  - palette.json")
    print(f"  - regions.json")

    if result.validation is not None and result.validation.has_errors:
        print(f"\n[!] Validation errors detected. Review validation_report.json")
        return 1

    return 0


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
