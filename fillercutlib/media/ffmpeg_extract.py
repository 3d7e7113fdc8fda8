#!/usr/bin/env python3

# Standard Library
import re

# local repo modules
from fillercutlib.core import utils
from fillercutlib.core.errors import InputError
from fillercutlib.core.segmenter import cut_points_from_silences

#============================================

SILENCE_START_RE = re.compile(r'silence_start:\s*(-?[0-9.]+)')
SILENCE_END_RE = re.compile(
	r'silence_end:\s*([0-9.]+)\s*\|\s*silence_duration:\s*([0-9.]+)'
)

# mono 16 kHz is what the transcription model expects
TRANSCRIBE_SAMPLE_RATE = 16000

#============================================

def parse_silencedetect(text: str) -> list:
	"""
	Parse ffmpeg silencedetect log lines into silence ranges.

	Args:
		text: Combined ffmpeg output.

	Returns:
		list: Silence dicts with start/end/duration.
	"""
	silences = []
	current_start = None
	for line in text.splitlines():
		start_match = SILENCE_START_RE.search(line)
		if start_match is not None:
			current_start = max(0.0, float(start_match.group(1)))
			continue
		end_match = SILENCE_END_RE.search(line)
		if end_match is None:
			continue
		end = float(end_match.group(1))
		duration = float(end_match.group(2))
		start = current_start
		if start is None:
			# start line missing, derive it from the reported duration
			start = max(0.0, end - duration)
		silences.append({
			'start': start,
			'end': end,
			'duration': duration,
		})
		current_start = None
	return silences

#============================================

class SilenceDetector():
	def __init__(self, runner):
		self.runner = runner

	#============================
	def build_command(self, input_file: str, silence_db: float,
		silence_dur: float) -> list:
		audio_filter = f"silencedetect=noise={silence_db:.2f}dB:d={silence_dur:.2f}"
		return [
			"ffmpeg", "-hide_banner", "-nostats",
			"-i", input_file,
			"-vn", "-sn",
			"-af", audio_filter,
			"-f", "null", "-",
		]

	#============================
	def detect(self, input_file: str, silence_db: float, silence_dur: float) -> tuple:
		"""
		Detect silences in a media file.

		Args:
			input_file: Media file path.
			silence_db: Noise threshold in dB.
			silence_dur: Minimum silence length in seconds.

		Returns:
			tuple: (silences, cut_points, raw_log)
		"""
		cmd = self.build_command(input_file, silence_db, silence_dur)
		(returncode, stdout, stderr) = self.runner.invoke(cmd)
		raw_log = stdout + stderr
		if returncode != 0:
			# detector output is usually still complete
			utils.warn(f"ffmpeg silencedetect exit code={returncode}")
		silences = parse_silencedetect(raw_log)
		cut_points = cut_points_from_silences(silences)
		return (silences, cut_points, raw_log)

#============================================

class MediaProbe():
	def __init__(self, runner):
		self.runner = runner

	#============================
	def duration(self, media_file: str) -> float:
		"""
		Read the container duration with ffprobe.

		Args:
			media_file: Media file path.

		Returns:
			float: Duration in seconds.
		"""
		cmd = [
			"ffprobe", "-v", "error",
			"-show_entries", "format=duration",
			"-of", "default=nk=1:nw=1",
			media_file,
		]
		(returncode, stdout, stderr) = self.runner.invoke(cmd)
		if returncode != 0:
			raise InputError(f"ffprobe failed to read duration: {media_file}",
				detail=stderr)
		return utils.parse_seconds(stdout.strip(), f"duration from ffprobe for {media_file}")

#============================================

def build_extract_audio_command(input_file: str, wav_path: str) -> list:
	return [
		"ffmpeg", "-y", "-hide_banner", "-loglevel", "error",
		"-i", input_file,
		"-vn", "-ac", "1", "-ar", str(TRANSCRIBE_SAMPLE_RATE),
		"-sample_fmt", "s16",
		wav_path,
	]

#============================================

def build_extract_chunk_command(input_file: str, out_file: str, start: float,
	end: float, chunk_format: str) -> list:
	"""
	Build the command that cuts one audio chunk.

	-ss/-to follow -i for accurate cuts.
	"""
	cmd = [
		"ffmpeg", "-hide_banner", "-y", "-loglevel", "error",
		"-i", input_file,
		"-vn", "-sn",
		"-ss", f"{start:.3f}", "-to", f"{end:.3f}",
		"-ac", "1", "-ar", str(TRANSCRIBE_SAMPLE_RATE),
	]
	if chunk_format.lower() == 'wav':
		cmd += ["-c:a", "pcm_s16le"]
	cmd.append(out_file)
	return cmd
