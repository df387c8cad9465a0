import os
import sys
import logging
import argparse

# Add the current directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from configuration import DEFAULT_PLOTS_DIR, DEFAULT_PLOT_PREFIX, LOG_LEVEL
from common.errors import InvariantViolation

# Set up logging (only if not already configured)
if not logging.root.handlers:
    logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
                        format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


class ThroughputPlotCLI:
    """CLI for turning recorded test runs into graphs and series tables."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description='Latency under load plotting CLI',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Render the graph of a recorded test run
  python cli.py plot --run-dir results/run_20241201_120000 --output-dir plots

  # One throughput chart per direction, plus data transferred
  python cli.py plot --run-dir results/run_20241201_120000 --split-throughput --transferred

  # Export the derived byte and rate series
  python cli.py export --run-dir results/run_20241201_120000 --output series.parquet
            """
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Plot command
        plot_parser = subparsers.add_parser('plot', help='Render a test run graph')
        plot_parser.add_argument('--run-dir', type=str, required=True,
                                 help='Directory holding the Parquet files of a test run')
        plot_parser.add_argument('--output-dir', type=str, default=DEFAULT_PLOTS_DIR,
                                 help=f'Output directory for the graph (default: {DEFAULT_PLOTS_DIR})')
        plot_parser.add_argument('--prefix', type=str, default=DEFAULT_PLOT_PREFIX,
                                 help=f'File name prefix for the graph (default: {DEFAULT_PLOT_PREFIX})')
        plot_parser.add_argument('--split-throughput', action='store_true',
                                 help='Draw one throughput chart per direction with per-stream overlays')
        plot_parser.add_argument('--transferred', action='store_true',
                                 help='Add a chart of the data transferred')
        plot_parser.add_argument('--max-throughput', type=int, default=None,
                                 help='Minimum throughput axis bound in bits per second')
        plot_parser.add_argument('--max-latency', type=int, default=None,
                                 help='Minimum latency axis bound in milliseconds')
        plot_parser.add_argument('--width', type=int, default=None, help='Image width in pixels')
        plot_parser.add_argument('--height', type=int, default=None, help='Image height in pixels')
        plot_parser.add_argument('--title', type=str, default=None, help='Graph title')

        # Export command
        export_parser = subparsers.add_parser('export', help='Export derived series to Parquet')
        export_parser.add_argument('--run-dir', type=str, required=True,
                                   help='Directory holding the Parquet files of a test run')
        export_parser.add_argument('--output', type=str, required=True,
                                   help='Path of the Parquet file to write')

        return parser

    def _assemble(self, run_dir):
        from persistence.parquet import RunParquetStore
        from algorithms.result_assembler import assemble

        run = RunParquetStore(run_dir).load()
        return assemble(run)

    def run_plot(self, args):
        """Run the plot command."""
        try:
            from visualizations.base import PlotConfig
            from visualizations.dashboard import DashboardPlotter

            logger.info("=== Plot Test Run ===")

            if not os.path.isdir(args.run_dir):
                logger.error(f"Run directory not found: {args.run_dir}")
                return 1

            result = self._assemble(args.run_dir)
            config = PlotConfig(
                split_throughput=args.split_throughput,
                transferred=args.transferred,
                max_throughput=args.max_throughput,
                max_latency=args.max_latency,
                width=args.width,
                height=args.height,
                title=args.title,
            )
            path = DashboardPlotter(result, config).create_graph(args.output_dir, args.prefix)

            if path:
                logger.info(f"Graph written to {path}")
                return 0
            else:
                logger.error("No graph was created")
                return 1

        except InvariantViolation as e:
            logger.error(f"Inconsistent test run data: {e}")
            return 1
        except Exception as e:
            logger.error(f"Error in plot command: {e}")
            return 1

    def run_export(self, args):
        """Run the export command."""
        try:
            from persistence.parquet import export_derived

            logger.info("=== Export Derived Series ===")

            if not os.path.isdir(args.run_dir):
                logger.error(f"Run directory not found: {args.run_dir}")
                return 1

            result = self._assemble(args.run_dir)
            path = export_derived(result, args.output)
            logger.info(f"Series written to {path}")
            return 0

        except InvariantViolation as e:
            logger.error(f"Inconsistent test run data: {e}")
            return 1
        except Exception as e:
            logger.error(f"Error in export command: {e}")
            return 1

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            if parsed_args.command == 'plot':
                return self.run_plot(parsed_args)
            elif parsed_args.command == 'export':
                return self.run_export(parsed_args)
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1


def main():
    """Main entry point."""
    cli = ThroughputPlotCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
