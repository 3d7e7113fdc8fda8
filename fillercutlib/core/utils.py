#!/usr/bin/env python3

# Standard Library
import decimal
import os
import shutil
import sys
import time

# local repo modules
from fillercutlib.core.errors import InputError

#============================================

_QUIET_MODE = False

#============================================

def set_quiet_mode(value: bool) -> None:
	global _QUIET_MODE
	_QUIET_MODE = bool(value)
	return

#============================================

def is_quiet_mode() -> bool:
	return _QUIET_MODE

#============================================

def info(msg: str) -> None:
	if not _QUIET_MODE:
		print(msg)
	return

#============================================

def warn(msg: str) -> None:
	sys.stderr.write(f"WARN: {msg}\n")
	return

#============================================

def ensure_file_exists(filepath: str) -> None:
	if not os.path.isfile(filepath):
		raise InputError(f"file not found: {filepath}")
	return

#============================================

def ensure_dir(dirpath: str) -> None:
	if not os.path.isdir(dirpath):
		os.makedirs(dirpath, exist_ok=True)
	return

#============================================

def check_dependency(cmd_name: str) -> None:
	"""
	Ensure a required external command exists.

	Args:
		cmd_name: Command to locate.
	"""
	if shutil.which(cmd_name) is None:
		raise InputError(f"missing dependency: {cmd_name}")
	return

#============================================

def parse_seconds(raw_value, label: str = "duration") -> float:
	"""
	Parse a positive number of seconds.

	Args:
		raw_value: Number or numeric string.
		label: Name used in the error message.

	Returns:
		float: Parsed seconds.
	"""
	if isinstance(raw_value, bool) or raw_value is None:
		raise InputError(f"invalid {label}: {raw_value!r}")
	if isinstance(raw_value, str):
		raw_value = raw_value.strip()
	try:
		value = float(raw_value)
	except (TypeError, ValueError):
		raise InputError(f"invalid {label}: {raw_value!r}")
	# rejects nan as well
	if not value > 0:
		raise InputError(f"invalid {label}: {raw_value!r}")
	return value

#============================================

def seconds_to_millis(seconds: float) -> int:
	"""
	Convert seconds to integer milliseconds using half-up rounding.

	Args:
		seconds: Time in seconds.

	Returns:
		int: Time in milliseconds.
	"""
	value = decimal.Decimal(str(seconds))
	millis = value * decimal.Decimal(1000)
	millis = millis.quantize(decimal.Decimal("1"), rounding=decimal.ROUND_HALF_UP)
	result = int(millis)
	if result < 0:
		result = 0
	return result

#============================================

def _split_millis(seconds: float) -> tuple:
	total_millis = seconds_to_millis(seconds)
	hours = total_millis // 3600000
	remainder = total_millis % 3600000
	minutes = remainder // 60000
	remainder = remainder % 60000
	seconds_part = remainder // 1000
	millis_part = remainder % 1000
	return (hours, minutes, seconds_part, millis_part)

#============================================

def format_timestamp(seconds: float) -> str:
	"""
	Format seconds as HH:MM:SS.mmm.

	Args:
		seconds: Time in seconds.

	Returns:
		str: Formatted timestamp.
	"""
	(hours, minutes, seconds_part, millis_part) = _split_millis(seconds)
	return f"{hours:02d}:{minutes:02d}:{seconds_part:02d}.{millis_part:03d}"

#============================================

def format_srt_timestamp(seconds: float) -> str:
	"""
	Format seconds as HH:MM:SS,mmm for subtitle files.
	"""
	(hours, minutes, seconds_part, millis_part) = _split_millis(seconds)
	return f"{hours:02d}:{minutes:02d}:{seconds_part:02d},{millis_part:03d}"

#============================================

def format_seconds(seconds: float, precision: int = 3) -> str:
	return f"{seconds:.{precision}f}"

#============================================

def elapsed_since(start_time: float) -> float:
	return time.time() - start_time
