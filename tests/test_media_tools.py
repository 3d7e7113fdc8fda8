#!/usr/bin/env python3

"""
Tests for ffmpeg/ffprobe command building and output parsing.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)
TESTS_DIR = os.path.dirname(os.path.abspath(__file__))
if TESTS_DIR not in sys.path:
	sys.path.insert(0, TESTS_DIR)

# local repo modules
import fake_tools
from fillercutlib.core import utils
from fillercutlib.core.errors import InputError
from fillercutlib.core.errors import ToolError
from fillercutlib.media import ffmpeg
from fillercutlib.media import ffmpeg_extract
from fillercutlib.media import ffmpeg_render
from fillercutlib.media.transcriber import Transcriber

#============================================

SILENCE_LOG = """
[silencedetect @ 0x55d0] silence_start: 3.2
[silencedetect @ 0x55d0] silence_end: 4.5 | silence_duration: 1.3
size=N/A time=00:00:10.00 bitrate=N/A speed= 512x
[silencedetect @ 0x55d0] silence_start: -0.01
[silencedetect @ 0x55d0] silence_end: 7.25 | silence_duration: 0.75
"""

#============================================

@pytest.fixture(autouse=True)
def _loud_mode():
	utils.set_quiet_mode(False)
	yield
	utils.set_quiet_mode(False)

#============================================

def test_parse_silencedetect() -> None:
	silences = ffmpeg_extract.parse_silencedetect(SILENCE_LOG)
	assert silences == [
		{'start': 3.2, 'end': 4.5, 'duration': 1.3},
		{'start': 0.0, 'end': 7.25, 'duration': 0.75},
	]

#============================================

def test_parse_silencedetect_missing_start() -> None:
	"""
	Ensure an end line without a start line derives the start.
	"""
	text = "[silencedetect @ 0x1] silence_end: 12.5 | silence_duration: 2.5\n"
	silences = ffmpeg_extract.parse_silencedetect(text)
	assert silences == [{'start': 10.0, 'end': 12.5, 'duration': 2.5}]
	text = "silence_end: 0.4 | silence_duration: 0.9\n"
	assert ffmpeg_extract.parse_silencedetect(text)[0]['start'] == 0.0

#============================================

def test_silence_detector_command_and_cut_points() -> None:
	runner = fake_tools.FakeRunner(lambda args: (0, "", SILENCE_LOG))
	detector = ffmpeg.SilenceDetector(runner)
	(silences, cut_points, raw_log) = detector.detect("talk.mp4", -45.0, 0.5)
	assert runner.calls[0] == [
		"ffmpeg", "-hide_banner", "-nostats",
		"-i", "talk.mp4",
		"-vn", "-sn",
		"-af", "silencedetect=noise=-45.00dB:d=0.50",
		"-f", "null", "-",
	]
	assert len(silences) == 2
	assert cut_points == [4.5, 7.25]
	assert "silence_end: 7.25" in raw_log

#============================================

def test_silence_detector_warns_on_failure(capsys) -> None:
	runner = fake_tools.FakeRunner(lambda args: (1, "", SILENCE_LOG))
	(silences, cut_points, raw_log) = ffmpeg.SilenceDetector(runner).detect(
		"talk.mp4", -30.0, 1.0)
	assert cut_points == [4.5, 7.25]
	captured = capsys.readouterr()
	assert "WARN: ffmpeg silencedetect exit code=1" in captured.err

#============================================

def test_probe_duration() -> None:
	runner = fake_tools.FakeRunner(fake_tools.ffprobe_durations({"talk.mp4": 400.25}))
	assert ffmpeg.MediaProbe(runner).duration("talk.mp4") == 400.25
	assert runner.calls[0] == [
		"ffprobe", "-v", "error",
		"-show_entries", "format=duration",
		"-of", "default=nk=1:nw=1",
		"talk.mp4",
	]

#============================================

@pytest.mark.parametrize("answer", [
	(1, "", "talk.mp4: Invalid data found when processing input"),
	(0, "N/A\n", ""),
	(0, "0.000000\n", ""),
	(0, "", ""),
])
def test_probe_duration_errors(answer) -> None:
	runner = fake_tools.FakeRunner(lambda args: answer)
	with pytest.raises(InputError):
		ffmpeg.MediaProbe(runner).duration("talk.mp4")

#============================================

def test_extract_chunk_command() -> None:
	cmd = ffmpeg_extract.build_extract_chunk_command("audio.wav", "chunks/chunk_001.wav",
		176.5, 355.9, "wav")
	assert cmd[cmd.index("-i") + 1] == "audio.wav"
	# accurate seek: -ss after -i
	assert cmd.index("-ss") > cmd.index("-i")
	assert cmd[cmd.index("-ss") + 1] == "176.500"
	assert cmd[cmd.index("-to") + 1] == "355.900"
	assert cmd[cmd.index("-ar") + 1] == "16000"
	assert "pcm_s16le" in cmd
	assert cmd[-1] == "chunks/chunk_001.wav"
	flac_cmd = ffmpeg_extract.build_extract_chunk_command("audio.wav", "c.flac",
		0.0, 1.0, "flac")
	assert "pcm_s16le" not in flac_cmd

#============================================

def test_codec_args() -> None:
	assert ffmpeg.codec_args("h264_nvenc", "p7", "18", "aac", "192k") == [
		"-c:v", "h264_nvenc", "-preset", "p7", "-cq", "18",
		"-c:a", "aac", "-b:a", "192k",
	]
	assert ffmpeg.codec_args("libx264", "p7", "18", "aac", "128k") == [
		"-c:v", "libx264", "-crf", "18", "-preset", "veryfast",
		"-c:a", "aac", "-b:a", "128k",
	]
	assert ffmpeg.codec_args("libx265", "p7", "18", "aac", "192k") == [
		"-c:v", "libx265", "-c:a", "aac", "-b:a", "192k",
	]

#============================================

def test_build_filter_complex() -> None:
	graph = ffmpeg_render.build_filter_complex([[0.6, 10.0]])
	assert graph == (
		"[0:v]select='between(t\\,0.600\\,10.000)',setpts=N/FRAME_RATE/TB[v];"
		"[0:a]aselect='between(t\\,0.600\\,10.000)',asetpts=N/SR/TB[a]"
	)

#============================================

@pytest.mark.parametrize("line,expected", [
	("out_time_us=1500000", 1.5),
	("out_time_ms=2250000", 2.25),
	("out_time_us=-40000", 0.0),
	("out_time_us=N/A", None),
	("out_time=00:00:01.500000", None),
	("frame=42", None),
])
def test_parse_progress_seconds(line, expected) -> None:
	assert ffmpeg_render.parse_progress_seconds(line) == expected

#============================================

def test_keep_progress_maps_to_clean_seconds() -> None:
	keep = [[0.0, 2.0], [5.0, 9.0]]
	tracker = ffmpeg_render.KeepProgress(keep, enabled=False)
	tracker.handle_line("out_time_us=3000000")
	assert tracker.clean_seconds == 2.0
	tracker.handle_line("out_time_us=6000000")
	assert tracker.clean_seconds == 3.0
	# never moves backwards
	tracker.handle_line("out_time_us=1000000")
	assert tracker.clean_seconds == 3.0
	tracker.handle_line("progress=end")
	assert tracker.finished is True
	assert tracker.clean_seconds == 6.0
	tracker.close()

#============================================

def test_keep_progress_quiet_has_no_bar() -> None:
	utils.set_quiet_mode(True)
	tracker = ffmpeg_render.KeepProgress([[0.0, 1.0]])
	assert tracker.bar is None
	tracker.handle_line("progress=end")
	tracker.close()

#============================================

def test_encode_filtered_streams_progress(tmp_path) -> None:
	out_file = str(tmp_path / "clean.mp4")
	progress_text = "frame=1\nout_time_us=4000000\nprogress=continue\nprogress=end\n"
	runner = fake_tools.FakeRunner(lambda args: (0, progress_text, ""))
	encoder = ffmpeg.MediaEncoder(runner)
	args = ffmpeg.codec_args("libx264", "p7", "18", "aac", "192k")
	utils.set_quiet_mode(True)
	encoder.encode_filtered("in.mp4", out_file, [[0.6, 10.0]], args, progress=True)
	cmd = runner.calls[0]
	assert cmd[cmd.index("-filter_complex") + 1].startswith("[0:v]select=")
	assert cmd[cmd.index("-progress") + 1] == "pipe:1"
	assert "-nostats" in cmd
	assert cmd[-1] == out_file
	assert os.path.isfile(out_file)

#============================================

def test_encode_filtered_failure_raises(tmp_path) -> None:
	runner = fake_tools.FakeRunner(lambda args: (1, "", "Unknown encoder 'h264_nvenc'"))
	encoder = ffmpeg.MediaEncoder(runner)
	utils.set_quiet_mode(True)
	with pytest.raises(ToolError) as excinfo:
		encoder.encode_filtered("in.mp4", str(tmp_path / "clean.mp4"), [[0.0, 5.0]],
			ffmpeg.codec_args("h264_nvenc", "p7", "18", "aac", "192k"))
	assert excinfo.value.returncode == 1
	assert excinfo.value.exit_code == 3
	assert str(excinfo.value) == "ffmpeg failed with exit code 1"
	assert "Unknown encoder" in excinfo.value.detail

#============================================

def test_encode_without_progress_or_output_raises(tmp_path) -> None:
	runner = fake_tools.FakeRunner(create_outputs=False)
	encoder = ffmpeg.MediaEncoder(runner)
	out_file = str(tmp_path / "clean.mp4")
	with pytest.raises(ToolError):
		encoder.encode_filtered("in.mp4", out_file, [[0.0, 5.0]], [], progress=False)
	assert "-progress" not in runner.calls[0]

#============================================

def test_transcriber_command(capsys) -> None:
	runner = fake_tools.FakeRunner(lambda args: (2, "", "boom"))
	transcriber = Transcriber(runner, "stt/transcribe.py", python_bin="python3")
	(returncode, stdout, stderr) = transcriber.transcribe("chunks/chunk_000.wav")
	assert runner.calls[0] == ["python3", "stt/transcribe.py", "--f", "chunks/chunk_000.wav"]
	assert returncode == 2
	assert "transcribe failed for chunks/chunk_000.wav" in capsys.readouterr().err
