#!/usr/bin/env python3

"""
Blocking subprocess runner shared by the media tool wrappers.

Every external tool goes through ToolRunner.invoke(args), which returns
(returncode, stdout, stderr). Tests swap in a fake runner with the same
methods.
"""

# Standard Library
import shlex
import subprocess
import tempfile

# local repo modules
from fillercutlib.core import utils
from fillercutlib.core.errors import ToolError

#============================================

class ToolRunner():
	def __init__(self, timeout: float = None, echo: bool = True):
		self.timeout = timeout
		self.echo = echo

	#============================
	def _show(self, args: list) -> str:
		showcmd = shlex.join([str(arg) for arg in args])
		if self.echo:
			utils.info(f"CMD: '{showcmd}'")
		return showcmd

	#============================
	def invoke(self, args: list) -> tuple:
		"""
		Run a command to completion.

		Args:
			args: Command argument list, no shell.

		Returns:
			tuple: (returncode, stdout, stderr)
		"""
		showcmd = self._show(args)
		try:
			proc = subprocess.run([str(arg) for arg in args], capture_output=True,
				text=True, encoding='utf-8', errors='replace', timeout=self.timeout)
		except FileNotFoundError:
			raise ToolError(f"command not found: {args[0]}")
		except subprocess.TimeoutExpired:
			raise ToolError(f"command timed out after {self.timeout}s: {showcmd}")
		return (proc.returncode, proc.stdout or "", proc.stderr or "")

	#============================
	def invoke_streaming(self, args: list, line_callback) -> tuple:
		"""
		Run a command, handing each stdout line to line_callback.

		stderr is spooled to a temporary file so a chatty tool cannot block
		on a full pipe while stdout is being read.

		Args:
			args: Command argument list, no shell.
			line_callback: Called with each stripped stdout line.

		Returns:
			tuple: (returncode, stderr)
		"""
		showcmd = self._show(args)
		with tempfile.TemporaryFile(mode='w+', encoding='utf-8',
			errors='replace') as stderr_file:
			try:
				proc = subprocess.Popen([str(arg) for arg in args],
					stdin=subprocess.DEVNULL, stdout=subprocess.PIPE,
					stderr=stderr_file, text=True, encoding='utf-8',
					errors='replace')
			except FileNotFoundError:
				raise ToolError(f"command not found: {args[0]}")
			with proc.stdout:
				for line in proc.stdout:
					line_callback(line.strip())
			try:
				returncode = proc.wait(timeout=self.timeout)
			except subprocess.TimeoutExpired:
				proc.kill()
				proc.wait()
				raise ToolError(f"command timed out after {self.timeout}s: {showcmd}")
			stderr_file.seek(0)
			stderr_text = stderr_file.read()
		return (returncode, stderr_text)
