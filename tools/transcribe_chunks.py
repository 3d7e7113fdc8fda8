#!/usr/bin/env python3

"""
transcribe_chunks.py

Transcribe every chunk listed in offsets.json, then merge the per-chunk
words into full_transcript_text.txt, full_transcript_timestamps.txt and
full_transcript.srt on the absolute timeline.
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
from fillercutlib.core.merger import TranscribeStage

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.

	Returns:
		argparse.Namespace: Parsed command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Transcribe audio chunks and merge the transcripts."
	)
	parser.add_argument(
		'-d', '--chunksdir', dest='chunks_dir', default='./chunks',
		help="Directory with chunk files."
	)
	parser.add_argument(
		'-O', '--offsets', dest='offsets_path', default=None,
		help="offsets.json path, default is CHUNKSDIR/offsets.json."
	)
	parser.add_argument(
		'-t', '--transcribe', dest='transcribe_script', default=None,
		help="Speech-to-text script, called as PYTHON SCRIPT --f CHUNK."
	)
	parser.add_argument(
		'-p', '--python', dest='python_bin', default=None,
		help="Python interpreter used to run the script."
	)
	parser.add_argument(
		'-c', '--config', dest='config_file', default=None,
		help="Pipeline config YAML."
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
		'transcribe_script': args.transcribe_script,
		'python_bin': args.python_bin,
	}
	config = pipeline_config.resolve_config(args.config_file, overrides)
	chunks_dir = args.chunks_dir.rstrip('/') or '/'
	TranscribeStage(config).run(chunks_dir, args.offsets_path)
	utils.info("DONE.")
	return

#============================================

if __name__ == '__main__':
	errors.run_main(main)
