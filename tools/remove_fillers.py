#!/usr/bin/env python3

"""
remove_fillers.py

Remove filler words (e.g. "heu", "euh", "[UH]", "[UM]") from a video in one
ffmpeg pass with select/aselect filters, using a word-level timestamp
transcript such as full_transcript_timestamps.txt.
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
from fillercutlib.core.remover import FillerRemovalStage

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.

	Returns:
		argparse.Namespace: Parsed command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Remove filler words from a video using word timestamps."
	)
	parser.add_argument('-i', '--input', dest='input_file', required=True,
		help="Input video.")
	parser.add_argument('-t', '--transcript', dest='transcript_file', required=True,
		help="Word timestamp transcript.")
	parser.add_argument('-o', '--output', dest='output_file', required=True,
		help="Output video.")
	parser.add_argument('-c', '--config', dest='config_file', default=None,
		help="Pipeline config YAML.")
	parser.add_argument('-w', '--word', dest='words', default=None,
		help="Comma-separated filler words.")
	parser.add_argument('--pad', dest='pad', type=float, default=None,
		help="Symmetric padding in seconds (before=after).")
	parser.add_argument('--pad-before', dest='pad_before', type=float, default=None,
		help="Padding before each filler in seconds.")
	parser.add_argument('--pad-after', dest='pad_after', type=float, default=None,
		help="Padding after each filler in seconds.")
	parser.add_argument('--merge-gap', dest='merge_gap', type=float, default=None,
		help="Merge remove ranges separated by at most this many seconds.")
	parser.add_argument('--min-word-dur', dest='min_word_dur', type=float, default=None,
		help="Ignore matched words shorter than this many seconds.")
	parser.add_argument('--vcodec', dest='vcodec', default=None,
		help="Video codec, e.g. h264_nvenc or libx264.")
	parser.add_argument('--preset', dest='preset', default=None,
		help="nvenc preset p1..p7.")
	parser.add_argument('--cq', dest='cq', default=None,
		help="nvenc constant quality.")
	parser.add_argument('--acodec', dest='acodec', default=None,
		help="Audio codec.")
	parser.add_argument('--ab', dest='ab', default=None,
		help="Audio bitrate, e.g. 192k.")
	parser.add_argument('-p', '--progress', dest='progress', action='store_true',
		help="Show encode progress in clean seconds.")
	parser.add_argument('-P', '--no-progress', dest='progress', action='store_false',
		help="Hide encode progress.")
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help="Only print warnings and errors.")
	parser.set_defaults(progress=None)
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
		'words': args.words,
		'pad': args.pad,
		'pad_before': args.pad_before,
		'pad_after': args.pad_after,
		'merge_gap': args.merge_gap,
		'min_word_dur': args.min_word_dur,
		'vcodec': args.vcodec,
		'preset': args.preset,
		'cq': args.cq,
		'acodec': args.acodec,
		'ab': args.ab,
		'progress': args.progress,
	}
	config = pipeline_config.resolve_config(args.config_file, overrides)
	FillerRemovalStage(config).run(args.input_file, args.transcript_file,
		args.output_file)
	return

#============================================

if __name__ == '__main__':
	errors.run_main(main)
