#!/usr/bin/env python3

# Standard Library
import json
import os

# local repo modules
from fillercutlib.core import segmenter
from fillercutlib.core import utils
from fillercutlib.media.ffmpeg_extract import MediaProbe
from fillercutlib.media.ffmpeg_extract import SilenceDetector
from fillercutlib.media.ffmpeg_render import MediaEncoder
from fillercutlib.media.runner import ToolRunner

#============================================

OFFSETS_FILE = "offsets.json"
SILENCE_LOG_FILE = "silencedetect.log"

#============================================

class SplitStage():
	def __init__(self, config, runner=None):
		self.config = config
		if runner is None:
			runner = ToolRunner(timeout=config.timeout)
		self.probe = MediaProbe(runner)
		self.detector = SilenceDetector(runner)
		self.encoder = MediaEncoder(runner)

	#============================
	def run(self, input_file: str, outdir: str) -> list:
		"""
		Split input_file into silence-aligned chunks inside outdir.

		Args:
			input_file: Audio or video file.
			outdir: Chunk output directory.

		Returns:
			list: Segment dicts as written to offsets.json.
		"""
		config = self.config
		utils.ensure_file_exists(input_file)
		utils.ensure_dir(outdir)
		total_duration = self.probe.duration(input_file)
		utils.info(f"Input: {input_file}")
		utils.info(f"Duration: {utils.format_timestamp(total_duration)} ({total_duration:.2f}s)")
		utils.info(f"Max chunk length: {config.max_len}s | silence_db: {config.silence_db}dB"
			f" | silence_dur: {config.silence_dur}s")
		utils.info(f"Prefer window: {config.prefer_window}s around target"
			f" | min_chunk: {config.min_chunk}s")
		utils.info(f"Output dir: {outdir} | format: {config.chunk_format}")
		(silences, cut_points, raw_log) = self.detector.detect(input_file,
			config.silence_db, config.silence_dur)
		log_path = os.path.join(outdir, SILENCE_LOG_FILE)
		with open(log_path, 'w', encoding='utf-8') as handle:
			handle.write(raw_log)
		utils.info(f"Detected silences: {len(silences)}"
			f" | Candidate cut points (silence_end): {len(cut_points)}")
		if len(cut_points) == 0:
			utils.warn(f"no silences detected, hard cut every {config.max_len}s")
		segments = segmenter.plan_segments(total_duration, cut_points,
			config.max_len, config.min_chunk, config.prefer_window,
			config.chunk_format)
		for segment in segments:
			utils.info(f"#{segment['index']:03d}  {segment['start_hms']}  ->  "
				f"{segment['end_hms']}   ({segment['duration_s']:.2f}s)   {segment['file']}")
			out_file = os.path.join(outdir, segment['file'])
			self.encoder.extract_chunk(input_file, out_file, segment['start_s'],
				segment['end_s'], config.chunk_format)
		records = segmenter.segments_for_json(segments)
		offsets_path = os.path.join(outdir, OFFSETS_FILE)
		with open(offsets_path, 'w', encoding='utf-8') as handle:
			json.dump(records, handle, indent=4, ensure_ascii=False)
		utils.info(f"Offsets saved to: {offsets_path}")
		utils.info(f"Silence detect log saved to: {log_path}")
		return records
