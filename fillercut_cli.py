#!/usr/bin/env python3

import argparse
import yaml
from fillercutlib.core import config as pipeline_config
from fillercutlib.core import errors
from fillercutlib.core import utils
from fillercutlib.core.project import FillerCutProject

#============================================

def parse_args(argv: list = None):
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Split, transcribe, and remove filler words from a video")
	parser.add_argument('input_video',
		help='source video file (mkv, mp4, ...)')
	parser.add_argument('-c', '--config', dest='config_file',
		help='pipeline config yaml')
	parser.add_argument('-o', '--output', dest='output',
		help='cleaned video output path')
	parser.add_argument('-w', '--word', dest='words',
		help='comma-separated filler words, e.g. "heu,euh,[UH]"')
	parser.add_argument('-t', '--transcribe', dest='transcribe_script',
		help='speech-to-text script called as PYTHON SCRIPT --f CHUNK')
	parser.add_argument('-p', '--python', dest='python_bin',
		help='python interpreter of the transcription environment')
	parser.add_argument('-d', '--chunks-dir', dest='chunks_dir',
		help='directory for audio chunks and transcripts')
	parser.add_argument('-q', '--quiet', dest='quiet', action='store_true',
		help='only print warnings and errors')
	parser.add_argument('-n', '--dump-config', dest='dump_config', action='store_true',
		help='print the resolved config and exit')
	parser.set_defaults(quiet=False)
	args = parser.parse_args(argv)
	return args

#============================================

def main(argv: list = None):
	args = parse_args(argv)
	utils.set_quiet_mode(args.quiet)
	overrides = {
		'output': args.output,
		'words': args.words,
		'transcribe_script': args.transcribe_script,
		'python_bin': args.python_bin,
		'chunks_dir': args.chunks_dir,
	}
	config = pipeline_config.resolve_config(args.config_file, overrides)
	if args.dump_config:
		print(yaml.safe_dump(config.as_dict(), sort_keys=False))
		return
	project = FillerCutProject(config)
	project.run(args.input_video)

#============================================

def cli() -> None:
	errors.run_main(main)


if __name__ == '__main__':
	cli()
