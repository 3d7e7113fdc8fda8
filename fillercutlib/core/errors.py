#!/usr/bin/env python3

# Standard Library
import sys

#============================================

EXIT_INPUT_ERROR = 2
EXIT_TOOL_ERROR = 3

#============================================

class InputError(RuntimeError):
	"""Missing or invalid input: paths, durations, config values."""
	exit_code = EXIT_INPUT_ERROR

	def __init__(self, message: str, detail: str = None):
		super().__init__(message)
		self.detail = detail

#============================================

class ToolError(RuntimeError):
	"""An external media tool exited non-zero or timed out."""
	exit_code = EXIT_TOOL_ERROR

	def __init__(self, message: str, returncode: int = None, detail: str = None):
		super().__init__(message)
		self.returncode = returncode
		# raw tool stderr, kept out of the one-line message
		self.detail = detail

#============================================

def exit_code_for(error: Exception) -> int:
	return getattr(error, 'exit_code', 1)

#============================================

def error_line(error: Exception) -> str:
	"""
	First non-empty line of an error message, or the error type name.
	"""
	for line in str(error).splitlines():
		if line.strip() != "":
			return line.strip()
	return type(error).__name__

#============================================

def run_main(main_func) -> None:
	"""
	Call a command-line main(), turning fatal errors into one stderr line
	and a non-zero exit status.

	Tool output attached to the error is shown first as warnings.
	"""
	try:
		main_func()
	except RuntimeError as error:
		detail = getattr(error, 'detail', None)
		if detail:
			for line in detail.strip().splitlines():
				sys.stderr.write(f"WARN: {line}\n")
		sys.stderr.write(f"ERROR: {error_line(error)}\n")
		sys.exit(exit_code_for(error))
	return
