"""
Clean Chronicle preprocessed app-usage exports into one analysis-ready table.

Usage:
    python scripts/run_cleaning.py --input_dir INPUT/ChronicleData --output_dir OUTPUT/study_a
    python scripts/run_cleaning.py --input_dir data/ --output_dir out/ --config chronicle_pacific
    python scripts/run_cleaning.py --input_dir data/ --output_dir out/ --timezone America/Chicago
    python scripts/run_cleaning.py --list_configs
"""
import argparse
import sys
from pathlib import Path

# Ensure src/ is importable
_SCRIPT_DIR = Path(__file__).parent.absolute()
_SRC_DIR = _SCRIPT_DIR.parent / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from core import DEFAULT_CONFIG, OUTPUT_ROOT, RAW_INPUT_DIRECTORY, list_configs  # noqa: E402


def main():
    parser = argparse.ArgumentParser(
        description="Clean Chronicle app-usage exports"
    )
    parser.add_argument("--input_dir", type=str, default=RAW_INPUT_DIRECTORY,
                        help=f"Folder containing the CSV exports (default: {RAW_INPUT_DIRECTORY})")
    parser.add_argument("--output_dir", type=str, default=OUTPUT_ROOT,
                        help=f"Folder for cleaned_data.csv and logs (default: {OUTPUT_ROOT})")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG,
                        help=f"Config preset (default: {DEFAULT_CONFIG})")
    parser.add_argument("--timezone", type=str, default=None,
                        help="Override the preset's timezone, e.g. America/Chicago")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress console logging")
    parser.add_argument("--progress", action="store_true",
                        help="Show progress bars")
    parser.add_argument("--list_configs", action="store_true",
                        help="List config presets and exit")
    args = parser.parse_args()

    if args.list_configs:
        for name, description in list_configs().items():
            print(f"  {name:<22} {description}")
        return

    from pipeline import run_pipeline

    result = run_pipeline(
        input_dir=args.input_dir,
        output_dir=args.output_dir,
        config_name=args.config,
        timezone=args.timezone,
        quiet=args.quiet,
        show_progress=args.progress,
    )

    if not result['success']:
        print(f"Cleaning failed: {result['error']}", file=sys.stderr)
        sys.exit(1)

    print(f"\nCleaning complete:")
    print(f"  Rows:   {result['rows']}")
    print(f"  Output: {result['output_file']}")


if __name__ == '__main__':
    main()
