#!/usr/bin/env python3

# local repo modules
from fillercutlib.core import utils

#============================================

class Transcriber():
	"""
	Runs the external speech-to-text script on one chunk at a time.

	The script is called as `PYTHON SCRIPT --f CHUNK` and prints one
	"[start -> end] word" line per word on stdout.
	"""
	def __init__(self, runner, script: str, python_bin: str = "python"):
		self.runner = runner
		self.script = script
		self.python_bin = python_bin

	#============================
	def build_command(self, chunk_path: str) -> list:
		return [self.python_bin, self.script, "--f", chunk_path]

	#============================
	def transcribe(self, chunk_path: str) -> tuple:
		"""
		Transcribe one chunk.

		Args:
			chunk_path: Audio chunk path.

		Returns:
			tuple: (returncode, stdout, stderr)
		"""
		result = self.runner.invoke(self.build_command(chunk_path))
		if result[0] != 0:
			utils.warn(f"transcribe failed for {chunk_path} (exit={result[0]})")
		return result
