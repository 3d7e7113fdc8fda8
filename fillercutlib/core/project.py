#!/usr/bin/env python3

# Standard Library
import os

# local repo modules
from fillercutlib.core import utils
from fillercutlib.core.merger import TranscribeStage
from fillercutlib.core.remover import FillerRemovalStage
from fillercutlib.core.splitter import SplitStage
from fillercutlib.media.ffmpeg_render import MediaEncoder
from fillercutlib.media.runner import ToolRunner

#============================================

def mp4_path_for(input_video: str) -> str:
	"""
	Path of the MP4 used for the final encode.

	MP4 inputs are used as-is; anything else gets a sibling .mp4 file.
	"""
	(base, ext) = os.path.splitext(input_video)
	if ext.lower() == '.mp4':
		return input_video
	return f"{base}.mp4"

#============================================

class FillerCutProject():
	def __init__(self, config, runner=None, work_dir: str = None):
		self.config = config
		if runner is None:
			runner = ToolRunner(timeout=config.timeout)
		self.runner = runner
		if work_dir is None:
			work_dir = os.getcwd()
		self.work_dir = work_dir
		self.encoder = MediaEncoder(runner)
		self.splitter = SplitStage(config, runner)
		self.transcriber = TranscribeStage(config, runner)
		self.remover = FillerRemovalStage(config, runner)

	#============================
	def _path(self, path: str) -> str:
		if os.path.isabs(path):
			return path
		return os.path.join(self.work_dir, path)

	#============================
	def run(self, input_video: str) -> dict:
		"""
		Run extract, split, transcribe, convert, and filler removal in order.

		Args:
			input_video: Source video (mkv, mp4, ...).

		Returns:
			dict: Summary of the filler removal stage.
		"""
		utils.ensure_file_exists(input_video)
		audio_wav = self._path(self.config.audio_wav)
		chunks_dir = self._path(self.config.chunks_dir)
		output_file = self._path(self.config.output)
		utils.info(f"[INFO] Input video: {input_video}")
		utils.info(f"[INFO] Extracting audio: {audio_wav}")
		self.encoder.extract_audio(input_video, audio_wav)
		utils.info(f"[INFO] Splitting on silence into: {chunks_dir}")
		self.splitter.run(audio_wav, chunks_dir)
		utils.info("[INFO] Transcribing chunks and merging transcripts")
		merged = self.transcriber.run(chunks_dir)
		mp4_video = mp4_path_for(input_video)
		if mp4_video != input_video:
			utils.info(f"[INFO] Converting to MP4 (stream copy): {mp4_video}")
			self.encoder.convert_to_mp4(input_video, mp4_video)
		else:
			utils.info("[INFO] Input already MP4, skipping conversion")
		utils.info(f"[INFO] Removing fillers => {output_file}")
		summary = self.remover.run(mp4_video, merged['timestamps_path'], output_file)
		utils.info(f"[DONE] Output: {output_file}")
		return summary
