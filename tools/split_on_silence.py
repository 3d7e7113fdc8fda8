#!/usr/bin/env python3

"""
split_on_silence.py

Split an audio or video file into chunks no longer than --maxlen seconds,
cutting at detected silence ends when possible. Writes chunk_000.<format>,
chunk_001.<format>, ... plus offsets.json and silencedetect.log to --outdir.
"""

# Standard Library
import argparse
import os
import sys

script_dir = os.path.dirname(os.path.abspath(__file__))
repo_root = os.path.dirname(script_dir)
if repo_root not in sys.path:
	sys.path.insert(0, repo_root)

# local repo modules
from fillercutlib.core import config as pipeline_config
from fillercutlib.core import errors
from fillercutlib.core import utils
from fillercutlib.core.splitter import SplitStage

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.

	Returns:
		argparse.Namespace: Parsed command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Split audio into silence-aligned chunks."
	)
	parser.add_argument(
		'-i', '--in', dest='input_file', required=True,
		help="Input audio or video file."
	)
	parser.add_argument(
		'-o', '--outdir', dest='outdir', required=True,
		help="Output directory for chunks and offsets.json."
	)
	parser.add_argument(
		'-c', '--config', dest='config_file', default=None,
		help="Pipeline config YAML."
	)
	parser.add_argument(
		'-m', '--maxlen', dest='max_len', type=float, default=None,
		help="Max chunk length in seconds."
	)
	parser.add_argument(
		'-s', '--silence_db', dest='silence_db', type=float, default=None,
		help="Silence threshold in dB."
	)
	parser.add_argument(
		'-d', '--silence_dur', dest='silence_dur', type=float, default=None,
		help="Minimum silence duration in seconds."
	)
	parser.add_argument(
		'-f', '--format', dest='chunk_format', default=None,
		help="Chunk container format, e.g. wav, mp3, flac."
	)
	parser.add_argument(
		'-w', '--prefer_window', dest='prefer_window', type=float, default=None,
		help="Window around the target cut time to look for a silence end."
	)
	parser.add_argument(
		'-n', '--min_chunk', dest='min_chunk', type=float, default=None,
		help="Minimum chunk duration in seconds."
	)
	parser.add_argument(
		'-q', '--quiet', dest='quiet', action='store_true',
		help="Only print warnings and errors."
	)
	parser.set_defaults(quiet=False)
	args = parser.parse_args(argv)
	return args

#============================================

def main(argv: list = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	utils.set_quiet_mode(args.quiet)
	overrides = {
		'max_len': args.max_len,
		'silence_db': args.silence_db,
		'silence_dur': args.silence_dur,
		'chunk_format': args.chunk_format,
		'prefer_window': args.prefer_window,
		'min_chunk': args.min_chunk,
	}
	config = pipeline_config.resolve_config(args.config_file, overrides)
	segments = SplitStage(config).run(args.input_file, args.outdir)
	utils.info(f"Chunks: {len(segments)}")
	utils.info("Done.")
	return

#============================================

if __name__ == '__main__':
	errors.run_main(main)
