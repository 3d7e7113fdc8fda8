#!/usr/bin/env python3

# Standard Library
import os
import time

# PIP3 modules
from tqdm import tqdm

# local repo modules
from fillercutlib.core import intervals
from fillercutlib.core import utils
from fillercutlib.core.errors import ToolError
from fillercutlib.media import ffmpeg_extract

#============================================

def codec_args(vcodec: str, preset: str, cq: str, acodec: str, ab: str) -> list:
	"""
	Build encoder arguments for the output video.

	Args:
		vcodec: Video codec name.
		preset: nvenc preset (p1..p7).
		cq: nvenc constant quality value.
		acodec: Audio codec name.
		ab: Audio bitrate.

	Returns:
		list: ffmpeg arguments.
	"""
	args = ["-c:v", vcodec]
	if 'nvenc' in vcodec:
		args += ["-preset", str(preset), "-cq", str(cq)]
	elif vcodec == 'libx264':
		args += ["-crf", "18", "-preset", "veryfast"]
	args += ["-c:a", acodec, "-b:a", ab]
	return args

#============================================

def build_filter_complex(keep: list) -> str:
	expr = intervals.build_between_expr(keep, precision=3, escape_commas=True)
	# reset timestamps after dropping frames/samples
	video_chain = f"[0:v]select='{expr}',setpts=N/FRAME_RATE/TB[v]"
	audio_chain = f"[0:a]aselect='{expr}',asetpts=N/SR/TB[a]"
	return f"{video_chain};{audio_chain}"

#============================================

def parse_progress_seconds(line: str):
	"""
	Read the playback position from an ffmpeg -progress line.

	Returns:
		float or None: Seconds, when the line carries out_time_ms/out_time_us.
	"""
	for key in ("out_time_us=", "out_time_ms="):
		if line.startswith(key):
			raw_value = line[len(key):].strip()
			if not raw_value.lstrip('-').isdigit():
				return None
			# both keys are microseconds in ffmpeg's progress output
			return max(0.0, int(raw_value) / 1000000.0)
	return None

#============================================

class KeepProgress():
	"""
	Map ffmpeg source-time progress onto kept seconds and drive a tqdm bar.
	"""
	def __init__(self, keep: list, enabled: bool = True):
		self.keep = keep
		self.total_keep = intervals.sum_intervals(keep)
		self.clean_seconds = 0.0
		self.source_seconds = 0.0
		self.finished = False
		self.bar = None
		if enabled and not utils.is_quiet_mode():
			self.bar = tqdm(total=round(self.total_keep, 2), unit="s",
				desc="clean", bar_format="{l_bar}{bar}| {n:.1f}/{total:.1f}s [{elapsed}<{remaining}]")

	#============================
	def handle_line(self, line: str) -> None:
		if line == "progress=end":
			self.finished = True
			self._advance(self.total_keep)
			return
		source_seconds = parse_progress_seconds(line)
		if source_seconds is None:
			return
		self.source_seconds = source_seconds
		self._advance(intervals.kept_before(source_seconds, self.keep))

	#============================
	def _advance(self, clean_seconds: float) -> None:
		if clean_seconds <= self.clean_seconds:
			return
		if self.bar is not None:
			self.bar.update(round(clean_seconds - self.clean_seconds, 3))
		self.clean_seconds = clean_seconds

	#============================
	def close(self) -> None:
		if self.bar is not None:
			self.bar.close()
			self.bar = None

#============================================

class MediaEncoder():
	def __init__(self, runner):
		self.runner = runner

	#============================
	def _run_checked(self, cmd: list, out_file: str, label: str) -> None:
		(returncode, stdout, stderr) = self.runner.invoke(cmd)
		if returncode != 0:
			raise ToolError(f"{label} failed (exit {returncode})",
				returncode, detail=stderr)
		if not os.path.isfile(out_file):
			raise ToolError(f"{label} failed, no output file: {out_file}")
		return

	#============================
	def extract_audio(self, input_file: str, wav_path: str) -> str:
		cmd = ffmpeg_extract.build_extract_audio_command(input_file, wav_path)
		self._run_checked(cmd, wav_path, "extract audio")
		return wav_path

	#============================
	def extract_chunk(self, input_file: str, out_file: str, start: float,
		end: float, chunk_format: str) -> str:
		cmd = ffmpeg_extract.build_extract_chunk_command(input_file, out_file,
			start, end, chunk_format)
		self._run_checked(cmd, out_file, f"extract chunk [{start:.3f},{end:.3f}]")
		return out_file

	#============================
	def convert_to_mp4(self, input_file: str, mp4_file: str) -> str:
		cmd = [
			"ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
			"-i", input_file,
			"-c", "copy",
			mp4_file,
		]
		self._run_checked(cmd, mp4_file, "convert to mp4")
		return mp4_file

	#============================
	def encode_passthrough(self, input_file: str, out_file: str,
		encode_args: list) -> str:
		"""
		Re-encode the whole video with the chosen codecs.
		"""
		cmd = ["ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
			"-i", input_file]
		cmd += encode_args
		cmd.append(out_file)
		self._run_checked(cmd, out_file, "ffmpeg re-encode")
		return out_file

	#============================
	def build_filtered_command(self, input_file: str, out_file: str, keep: list,
		encode_args: list, progress: bool) -> list:
		cmd = ["ffmpeg", "-y", "-i", input_file,
			"-filter_complex", build_filter_complex(keep),
			"-map", "[v]", "-map", "[a]"]
		cmd += encode_args
		if progress:
			cmd += ["-progress", "pipe:1", "-nostats", "-loglevel", "error"]
		cmd.append(out_file)
		return cmd

	#============================
	def encode_filtered(self, input_file: str, out_file: str, keep: list,
		encode_args: list, progress: bool = True) -> str:
		"""
		Encode only the keep intervals in a single ffmpeg pass.

		Args:
			input_file: Source video.
			out_file: Output video.
			keep: Ascending keep ranges.
			encode_args: Codec arguments from codec_args().
			progress: Show progress mapped onto kept seconds.

		Returns:
			str: Output path.
		"""
		t0 = time.time()
		cmd = self.build_filtered_command(input_file, out_file, keep,
			encode_args, progress)
		if not progress:
			self._run_checked(cmd, out_file, "ffmpeg filtered encode")
			return out_file
		tracker = KeepProgress(keep)
		try:
			(returncode, stderr) = self.runner.invoke_streaming(cmd, tracker.handle_line)
		finally:
			tracker.close()
		if returncode != 0:
			raise ToolError(f"ffmpeg failed with exit code {returncode}",
				returncode, detail=stderr)
		if not os.path.isfile(out_file):
			raise ToolError(f"ffmpeg filtered encode failed, no output file: {out_file}")
		utils.info(f"Encode complete in {int(time.time() - t0)} seconds")
		return out_file
