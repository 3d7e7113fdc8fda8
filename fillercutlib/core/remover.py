#!/usr/bin/env python3

# Standard Library
import time

# local repo modules
from fillercutlib.core import intervals
from fillercutlib.core import transcript
from fillercutlib.core import utils
from fillercutlib.core.errors import InputError
from fillercutlib.media.ffmpeg_extract import MediaProbe
from fillercutlib.media.ffmpeg_render import MediaEncoder
from fillercutlib.media.ffmpeg_render import codec_args
from fillercutlib.media.runner import ToolRunner

#============================================

class FillerRemovalStage():
	def __init__(self, config, runner=None):
		self.config = config
		if runner is None:
			runner = ToolRunner(timeout=config.timeout)
		self.probe = MediaProbe(runner)
		self.encoder = MediaEncoder(runner)

	#============================
	def plan(self, words: list, total_duration: float) -> tuple:
		"""
		Compute remove and keep ranges for the configured fillers.

		Returns:
			tuple: (matches, remove, keep)
		"""
		config = self.config
		matches = intervals.match_fillers(words, config.words, config.min_word_dur)
		(remove, keep) = intervals.keep_from_matches(matches, config.pad_before,
			config.pad_after, config.merge_gap, total_duration)
		return (matches, remove, keep)

	#============================
	def run(self, input_file: str, transcript_file: str, output_file: str) -> dict:
		"""
		Re-encode input_file without the filler words found in transcript_file.

		Args:
			input_file: Source video.
			transcript_file: Absolute word timestamps, one "[a -> b] word" per line.
			output_file: Cleaned video path.

		Returns:
			dict: Summary values.
		"""
		t0 = time.time()
		config = self.config
		utils.ensure_file_exists(input_file)
		utils.ensure_file_exists(transcript_file)
		utils.info(f"Input: {input_file}")
		utils.info(f"Transcript: {transcript_file}")
		utils.info(f"Output: {output_file}")
		utils.info(f"Pad: before={config.pad_before}s after={config.pad_after}s"
			f" | Merge-gap: {config.merge_gap}s")
		utils.info(f"Targets (normalized): {','.join(config.words)}")
		utils.info(f"Video codec: {config.vcodec} | preset: {config.preset} | cq: {config.cq}")
		utils.info(f"Audio codec: {config.acodec} | bitrate: {config.ab}")
		total_duration = self.probe.duration(input_file)
		(words, skipped) = transcript.read_timestamp_file(transcript_file)
		if skipped > 0:
			utils.info(f"Skipped transcript lines: {skipped}")
		(matches, remove, keep) = self.plan(words, total_duration)
		if len(matches) > 0 and len(keep) == 0:
			raise InputError("nothing left to keep after filler removal, "
				f"{len(matches)} fillers cover the whole {total_duration:.3f}s")
		encode_args = codec_args(config.vcodec, config.preset, config.cq,
			config.acodec, config.ab)
		if len(matches) == 0:
			utils.info("No matches found. Re-encoding whole video with chosen codecs.")
			self.encoder.encode_passthrough(input_file, output_file, encode_args)
		else:
			removed_seconds = intervals.sum_intervals(remove)
			keep_seconds = intervals.sum_intervals(keep)
			utils.info(f"Duration original: {utils.format_timestamp(total_duration)}"
				f" ({total_duration}s)")
			utils.info(f"Found matches: {len(matches)}")
			utils.info(f"Remove segments (merged): {len(remove)}"
				f" | removed {utils.format_timestamp(removed_seconds)}")
			utils.info(f"Keep segments: {len(keep)}"
				f" | clean est. {utils.format_timestamp(keep_seconds)}")
			utils.info("Running single-pass ffmpeg (filter_complex)...")
			self.encoder.encode_filtered(input_file, output_file, keep,
				encode_args, progress=config.progress)
		final_duration = self.probe.duration(output_file)
		elapsed = utils.elapsed_since(t0)
		utils.info(f"Done: {output_file}")
		utils.info(f"Final output duration: {utils.format_timestamp(final_duration)}"
			f" ({final_duration}s)")
		utils.info(f"Total execution time: {utils.format_timestamp(elapsed)}"
			f" ({elapsed:.2f}s)")
		return {
			'matches': matches,
			'remove': remove,
			'keep': keep,
			'total_duration': total_duration,
			'final_duration': final_duration,
			'output_file': output_file,
		}
