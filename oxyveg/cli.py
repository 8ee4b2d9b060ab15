import argparse
import logging
from pathlib import Path

from oxyveg.config import StudyConfig, load_config
from oxyveg.copse import load_copse_runs
from oxyveg.ecophysiology import classify_response, photosynthesis_response_surface
from oxyveg.spreadsheets import SpreadsheetKind, create_totals_spreadsheets

logger = logging.getLogger(__name__)


def _load(args):
    config = load_config(args.config) if args.config else StudyConfig()
    if getattr(args, 'workers', None):
        config.max_workers = args.workers
    return config


def run_totals(args):
    config = _load(args)
    outputs = create_totals_spreadsheets(args.main_dir, args.data_dir, which_spreadsheet=args.which,
                                         config=config, progress=args.progress)
    logger.info('Generated %d spreadsheet(s)', len(outputs))


def run_surface(args):
    surface = photosynthesis_response_surface(pathway=args.pathway)
    df = classify_response(surface)
    Path(args.output).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.output, index=False)
    logger.info('Response surface saved as %s', args.output)


def run_copse(args):
    config = _load(args)
    directory = args.directory
    if directory is None:
        if config.data_dir is None:
            raise SystemExit('No COPSE directory: pass --directory or set data_dir in the configuration')
        directory = Path(config.data_dir) / 'COPSE_output' / 'output'
    df = load_copse_runs(directory)
    Path(args.output).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.output, index=False)
    logger.info('COPSE runs saved as %s', args.output)


def build_parser():
    parser = argparse.ArgumentParser(
        prog='oxyveg',
        description='Global totals and photosynthesis response data for the oxygen-vegetation study',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  oxyveg totals ~/project /Volumes/LPJLMfire/Output --which master
  oxyveg totals ~/project --config study.json --workers 4
  oxyveg surface --pathway C3 -o photosynthesis_surface.csv
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    totals = subparsers.add_parser('totals', help='Regenerate the global totals spreadsheets')
    totals.add_argument('main_dir', help='Project directory (spreadsheets go to data/LPJLMfire_output/totals)')
    totals.add_argument('data_dir', nargs='?', default=None, help='LPJ-LMfire output directory')
    totals.add_argument('--which', default='ALL', choices=[k.value.upper() for k in SpreadsheetKind]
                        + [k.value for k in SpreadsheetKind], help='Spreadsheets to generate')
    totals.add_argument('--config', help='JSON configuration file')
    totals.add_argument('--workers', type=int, help='Files read in parallel')
    totals.add_argument('--progress', action='store_true', help='Show progress bars')
    totals.set_defaults(func=run_totals)

    surface = subparsers.add_parser('surface', help='Gross photosynthesis over O2 x CO2')
    surface.add_argument('--pathway', default='C3', choices=['C3', 'C4'])
    surface.add_argument('-o', '--output', default='photosynthesis_surface.csv')
    surface.set_defaults(func=run_surface)

    copse = subparsers.add_parser('copse', help='Stack the precomputed COPSE runs into one table')
    copse.add_argument('--directory', help='Folder with the COPSE_*.txt files')
    copse.add_argument('--config', help='JSON configuration file (uses data_dir)')
    copse.add_argument('-o', '--output', default='copse_runs.csv')
    copse.set_defaults(func=run_copse)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')
    args.func(args)


if __name__ == '__main__':
    main()
