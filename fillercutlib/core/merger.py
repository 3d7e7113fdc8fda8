#!/usr/bin/env python3

# Standard Library
import json
import os

# local repo modules
from fillercutlib.core import transcript
from fillercutlib.core import utils
from fillercutlib.core.errors import InputError
from fillercutlib.core.errors import ToolError
from fillercutlib.media.runner import ToolRunner
from fillercutlib.media.transcriber import Transcriber

#============================================

FULL_TEXT_FILE = "full_transcript_text.txt"
FULL_TIMESTAMPS_FILE = "full_transcript_timestamps.txt"
FULL_SRT_FILE = "full_transcript.srt"

#============================================

def load_offsets(offsets_path: str) -> list:
	"""
	Load the segment list written by the split stage.

	Args:
		offsets_path: offsets.json path.

	Returns:
		list: Segment dicts that carry file and start_s.
	"""
	utils.ensure_file_exists(offsets_path)
	with open(offsets_path, 'r', encoding='utf-8') as handle:
		try:
			data = json.load(handle)
		except json.JSONDecodeError as error:
			raise InputError(f"offsets file is not valid JSON: {offsets_path}: {error}")
	if not isinstance(data, list):
		raise InputError(f"offsets file must hold a list: {offsets_path}")
	segments = []
	for record in data:
		if not isinstance(record, dict):
			continue
		if record.get('file') is None or record.get('start_s') is None:
			continue
		segments.append(record)
	return segments

#============================================

def _write_text(path: str, text: str) -> None:
	with open(path, 'w', encoding='utf-8') as handle:
		handle.write(text)
	return

#============================================

class TranscribeStage():
	def __init__(self, config, runner=None):
		self.config = config
		if runner is None:
			runner = ToolRunner(timeout=config.timeout)
		self.transcriber = Transcriber(runner, config.transcribe_script,
			config.python_bin)

	#============================
	def _transcribe_chunk(self, chunks_dir: str, chunk_file: str, offset: float) -> list:
		"""
		Transcribe one chunk and keep its raw and parsed outputs.

		Returns:
			list: Chunk-relative word items, empty on failure.
		"""
		chunk_path = os.path.join(chunks_dir, chunk_file)
		chunk_base = os.path.splitext(chunk_file)[0]
		stdout_path = os.path.join(chunks_dir, f"{chunk_base}.transcript.stdout.txt")
		stderr_path = os.path.join(chunks_dir, f"{chunk_base}.transcript.stderr.log")
		parsed_path = os.path.join(chunks_dir, f"{chunk_base}.transcript.parsed.json")
		utils.info(f"==> Transcribing {chunk_file} (offset {offset}s)")
		try:
			(returncode, stdout, stderr) = self.transcriber.transcribe(chunk_path)
		except ToolError as error:
			# a hung or missing transcriber only loses this chunk
			utils.warn(f"transcribe failed for {chunk_path}: {error}")
			(returncode, stdout, stderr) = (error.returncode, "", f"{error}\n")
		_write_text(stdout_path, stdout)
		_write_text(stderr_path, stderr)
		if returncode != 0:
			utils.warn(f"see {stderr_path}")
		if stdout.strip() == "":
			utils.warn(f"empty stdout for {chunk_file}, nothing to parse")
			_write_text(parsed_path, json.dumps([], indent=4))
			return []
		(items, skipped) = transcript.parse_timestamped_lines(stdout)
		_write_text(parsed_path, json.dumps(items, indent=4, ensure_ascii=False))
		if skipped > 0:
			utils.info(f"{chunk_file}: skipped {skipped} non-timestamp lines")
		if len(items) == 0:
			utils.warn(f"no timestamp lines parsed for {chunk_file}, check {stdout_path}")
		return items

	#============================
	def run(self, chunks_dir: str, offsets_path: str = None) -> dict:
		"""
		Transcribe every chunk listed in offsets.json and merge the results.

		Args:
			chunks_dir: Directory with the chunk files.
			offsets_path: offsets.json path, defaults to chunks_dir/offsets.json.

		Returns:
			dict: Merged words and output paths.
		"""
		if not os.path.isdir(chunks_dir):
			raise InputError(f"chunks dir not found: {chunks_dir}")
		if offsets_path is None:
			offsets_path = os.path.join(chunks_dir, "offsets.json")
		utils.ensure_file_exists(self.config.transcribe_script)
		segments = load_offsets(offsets_path)
		present = [seg for seg in segments
			if os.path.isfile(os.path.join(chunks_dir, seg['file']))]
		if len(present) == 0:
			raise InputError(f"no chunk files from {offsets_path} found in {chunks_dir}")
		merged = []
		chunk_texts = []
		for segment in present:
			offset = float(segment['start_s'])
			items = self._transcribe_chunk(chunks_dir, segment['file'], offset)
			if len(items) == 0:
				continue
			chunk_texts.append(transcript.join_item_words(items))
			merged = transcript.merge_chunk(merged, items, offset, segment['file'])
		text_path = os.path.join(chunks_dir, FULL_TEXT_FILE)
		timestamps_path = os.path.join(chunks_dir, FULL_TIMESTAMPS_FILE)
		srt_path = os.path.join(chunks_dir, FULL_SRT_FILE)
		_write_text(text_path, "\n".join(chunk_texts))
		_write_text(timestamps_path, transcript.build_timestamp_text(merged))
		cues = transcript.group_cues(merged)
		_write_text(srt_path, transcript.build_srt(cues))
		utils.info("")
		utils.info(f"Chunks transcribed: {len(chunk_texts)} of {len(present)}")
		utils.info(f"Words: {len(merged)} | Subtitle cues: {len(cues)}")
		utils.info(f" - {text_path}")
		utils.info(f" - {timestamps_path}")
		utils.info(f" - {srt_path}")
		return {
			'words': merged,
			'cues': cues,
			'text_path': text_path,
			'timestamps_path': timestamps_path,
			'srt_path': srt_path,
		}
