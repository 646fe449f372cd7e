#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
mcy_mutations.py - extract, align and analyze mcy gene mutations
author: Bill Thompson
license: GPL 3
copyright: 2026-10-17
"""
import sys
import argparse
import logging

from mcy_pipeline import STEPS, MissingDatasetError, run_pipeline
from pipeline_config import PipelineConfig, load_config

logger = logging.getLogger(__name__)

def GetArgs(argv: list[str] | None = None) -> argparse.Namespace:
    """Get command line arguments

    Parameters
    ----------
    argv : list[str] | None, optional
        arguments to parse, by default sys.argv[1:]

    Returns
    -------
    argparse.Namespace
        The command line arguments
    """
    def ParseArgs(parser):
        class Parser(argparse.ArgumentParser):
            def error(self, message):
                sys.stderr.write('error: %s\n' % message)
                self.print_help()
                sys.exit(2)

        parser = Parser(description='Extract mcy genes, align them, and analyze mutations.')
        parser.add_argument('-c', '--config',
                            required = False,
                            help = 'YAML configuration file. Settings left out keep their defaults.',
                            type = str)
        parser.add_argument('-s', '--steps',
                            required = False,
                            nargs = '+',
                            choices = STEPS,
                            default = list(STEPS),
                            help = 'Pipeline steps to run, by default all of them. Steps always run in pipeline order.')
        parser.add_argument('-m', '--msa_root',
                            required = False,
                            help = 'Directory of alignments and reports. Overrides the configuration file.',
                            type = str)
        parser.add_argument('-v', '--verbose',
                            action = 'store_true',
                            help = 'Show debug messages')

        return parser.parse_args(argv)

    parser = argparse.ArgumentParser()
    args = ParseArgs(parser)

    return args

def main(argv: list[str] | None = None) -> int:
    args = GetArgs(argv)

    logging.basicConfig(level = logging.DEBUG if args.verbose else logging.INFO,
                        format = '%(asctime)s - %(levelname)s - %(message)s')

    if args.config is not None:
        try:
            config = load_config(args.config)
        except (OSError, ValueError) as e:
            logger.error(f'Could not read config file. {e}')
            return 1
    else:
        config = PipelineConfig()

    if args.msa_root is not None:
        config.msa_root = args.msa_root

    try:
        run_pipeline(config, args.steps)
    except MissingDatasetError as e:
        logger.error(str(e))
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
