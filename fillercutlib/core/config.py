#!/usr/bin/env python3

# Standard Library
import os

# PIP3 modules
import yaml

# local repo modules
from fillercutlib.core.errors import InputError
from fillercutlib.core import intervals

#============================================

CONFIG_VERSION = 1
DEFAULT_FILLER_WORDS = "heu,heu.,euh,[UH],[UM]"

#============================================

class PipelineConfig():
	def __init__(self):
		# paths
		self.audio_wav = "audio.wav"
		self.chunks_dir = "chunks"
		self.output = "output_clean.mp4"
		# split
		self.max_len = 180.0
		self.silence_db = -45.0
		self.silence_dur = 0.5
		self.chunk_format = "wav"
		self.prefer_window = 12.0
		self.min_chunk = 20.0
		# transcribe
		self.transcribe_script = "transcribe.py"
		self.python_bin = "python"
		# fillers
		self.words = intervals.normalize_targets(DEFAULT_FILLER_WORDS)
		self.pad_before = 0.15
		self.pad_after = 0.07
		self.merge_gap = 0.10
		self.min_word_dur = 0.09
		# encode
		self.vcodec = "h264_nvenc"
		self.preset = "p7"
		self.cq = "18"
		self.acodec = "aac"
		self.ab = "192k"
		self.progress = True
		# tools
		self.timeout = None

	#============================
	def validate(self) -> None:
		if self.max_len <= 0:
			raise InputError("split.max_len must be positive")
		if self.min_chunk < 0:
			raise InputError("split.min_chunk must be zero or positive")
		if self.prefer_window < 0:
			raise InputError("split.prefer_window must be zero or positive")
		if self.silence_db > 0:
			raise InputError("split.silence_db must be 0 or negative dB")
		if self.silence_dur <= 0:
			raise InputError("split.silence_dur must be positive")
		if self.chunk_format.strip() == "":
			raise InputError("split.format must not be empty")
		for name in ('pad_before', 'pad_after', 'merge_gap', 'min_word_dur'):
			if getattr(self, name) < 0:
				raise InputError(f"fillers.{name} must be zero or positive")
		if len(self.words) == 0:
			raise InputError("fillers.words must contain at least one word")
		if self.timeout is not None and self.timeout <= 0:
			raise InputError("tools.timeout must be positive")
		return

	#============================
	def as_dict(self) -> dict:
		return {
			'fillercut': CONFIG_VERSION,
			'paths': {
				'audio_wav': self.audio_wav,
				'chunks_dir': self.chunks_dir,
				'output': self.output,
			},
			'split': {
				'max_len': self.max_len,
				'silence_db': self.silence_db,
				'silence_dur': self.silence_dur,
				'format': self.chunk_format,
				'prefer_window': self.prefer_window,
				'min_chunk': self.min_chunk,
			},
			'transcribe': {
				'script': self.transcribe_script,
				'python': self.python_bin,
			},
			'fillers': {
				'words': list(self.words),
				'pad_before': self.pad_before,
				'pad_after': self.pad_after,
				'merge_gap': self.merge_gap,
				'min_word_dur': self.min_word_dur,
			},
			'encode': {
				'vcodec': self.vcodec,
				'preset': self.preset,
				'cq': self.cq,
				'acodec': self.acodec,
				'ab': self.ab,
				'progress': self.progress,
			},
			'tools': {
				'timeout': self.timeout,
			},
		}

#============================================

def coerce_bool(value, key_path: str) -> bool:
	if isinstance(value, bool):
		return value
	if isinstance(value, int):
		return bool(value)
	if isinstance(value, str):
		normalized = value.strip().lower()
		if normalized in ("true", "yes", "y", "1", "on"):
			return True
		if normalized in ("false", "no", "n", "0", "off"):
			return False
	raise InputError(f"config: {key_path} must be a boolean")

#============================================

def coerce_float(value, key_path: str) -> float:
	if isinstance(value, bool):
		raise InputError(f"config: {key_path} must be a number")
	if isinstance(value, (int, float)):
		return float(value)
	if isinstance(value, str):
		try:
			return float(value.strip())
		except ValueError:
			raise InputError(f"config: {key_path} must be a number")
	raise InputError(f"config: {key_path} must be a number")

#============================================

def coerce_str(value, key_path: str) -> str:
	if isinstance(value, bool) or value is None:
		raise InputError(f"config: {key_path} must be a string")
	if isinstance(value, (str, int, float)):
		return str(value).strip()
	raise InputError(f"config: {key_path} must be a string")

#============================================

def load_config(config_path: str) -> dict:
	"""
	Load a YAML config file.

	Args:
		config_path: Config file path.

	Returns:
		dict: Raw config mapping.
	"""
	if not os.path.isfile(config_path):
		raise InputError(f"config file not found: {config_path}")
	with open(config_path, 'r', encoding='utf-8') as handle:
		try:
			data = yaml.safe_load(handle)
		except yaml.YAMLError as error:
			raise InputError(f"config file is not valid YAML: {config_path}",
				detail=str(error))
	if not isinstance(data, dict):
		raise InputError("config file must be a mapping")
	if data.get('fillercut') != CONFIG_VERSION:
		raise InputError(f"config file must set fillercut: {CONFIG_VERSION}")
	return data

#============================================

def _section(data: dict, name: str) -> dict:
	section = data.get(name, {})
	if section is None:
		return {}
	if not isinstance(section, dict):
		raise InputError(f"config: {name} must be a mapping")
	return section

#============================================

def build_config(data: dict = None) -> PipelineConfig:
	"""
	Build a validated PipelineConfig from a raw mapping over the defaults.

	Args:
		data: Parsed YAML mapping, or None for defaults only.

	Returns:
		PipelineConfig: Config record.
	"""
	config = PipelineConfig()
	if data is None:
		data = {}
	paths = _section(data, 'paths')
	split = _section(data, 'split')
	transcribe = _section(data, 'transcribe')
	fillers = _section(data, 'fillers')
	encode = _section(data, 'encode')
	tools = _section(data, 'tools')
	if 'audio_wav' in paths:
		config.audio_wav = coerce_str(paths['audio_wav'], "paths.audio_wav")
	if 'chunks_dir' in paths:
		config.chunks_dir = coerce_str(paths['chunks_dir'], "paths.chunks_dir")
	if 'output' in paths:
		config.output = coerce_str(paths['output'], "paths.output")
	for (key, attr) in (('max_len', 'max_len'), ('silence_db', 'silence_db'),
		('silence_dur', 'silence_dur'), ('prefer_window', 'prefer_window'),
		('min_chunk', 'min_chunk')):
		if key in split:
			setattr(config, attr, coerce_float(split[key], f"split.{key}"))
	if 'format' in split:
		config.chunk_format = coerce_str(split['format'], "split.format")
	if 'script' in transcribe:
		config.transcribe_script = coerce_str(transcribe['script'], "transcribe.script")
	if 'python' in transcribe:
		config.python_bin = coerce_str(transcribe['python'], "transcribe.python")
	if 'words' in fillers:
		raw_words = fillers['words']
		if not isinstance(raw_words, (str, list)):
			raise InputError("config: fillers.words must be a string or list")
		config.words = intervals.normalize_targets(raw_words)
	apply_padding(config,
		pad=fillers.get('pad'),
		pad_before=fillers.get('pad_before'),
		pad_after=fillers.get('pad_after'))
	for key in ('merge_gap', 'min_word_dur'):
		if fillers.get(key) is not None:
			setattr(config, key, coerce_float(fillers[key], f"fillers.{key}"))
	for key in ('vcodec', 'preset', 'cq', 'acodec', 'ab'):
		if key in encode:
			setattr(config, key, coerce_str(encode[key], f"encode.{key}"))
	if 'progress' in encode:
		config.progress = coerce_bool(encode['progress'], "encode.progress")
	if tools.get('timeout') is not None:
		config.timeout = coerce_float(tools['timeout'], "tools.timeout")
	config.validate()
	return config

#============================================

def apply_padding(config: PipelineConfig, pad=None, pad_before=None,
	pad_after=None) -> None:
	"""
	Apply symmetric and one-sided padding.

	A symmetric pad sets both sides; explicit pad_before/pad_after win.
	"""
	if pad is not None:
		pad_value = coerce_float(pad, "fillers.pad")
		config.pad_before = pad_value
		config.pad_after = pad_value
	if pad_before is not None:
		config.pad_before = coerce_float(pad_before, "fillers.pad_before")
	if pad_after is not None:
		config.pad_after = coerce_float(pad_after, "fillers.pad_after")
	return

#============================================

def apply_overrides(config: PipelineConfig, overrides: dict) -> PipelineConfig:
	"""
	Apply command-line overrides keyed by PipelineConfig attribute.

	None values are ignored. The symmetric 'pad' key is handled before
	the one-sided pads.

	Args:
		config: Config record, updated in place.
		overrides: Attribute name to raw value.

	Returns:
		PipelineConfig: The same record, validated.
	"""
	overrides = {key: value for key, value in overrides.items() if value is not None}
	apply_padding(config,
		pad=overrides.pop('pad', None),
		pad_before=overrides.pop('pad_before', None),
		pad_after=overrides.pop('pad_after', None))
	if 'words' in overrides:
		config.words = intervals.normalize_targets(overrides.pop('words'))
	if 'progress' in overrides:
		config.progress = coerce_bool(overrides.pop('progress'), "progress")
	reference = PipelineConfig()
	for (key, value) in overrides.items():
		if not hasattr(reference, key):
			raise InputError(f"unknown config option: {key}")
		default_value = getattr(reference, key)
		if isinstance(default_value, float) or key == 'timeout':
			value = coerce_float(value, key)
		else:
			value = coerce_str(value, key)
		setattr(config, key, value)
	config.validate()
	return config

#============================================

def write_config_file(config_path: str, config: PipelineConfig) -> None:
	text = yaml.safe_dump(config.as_dict(), sort_keys=False)
	os.makedirs(os.path.dirname(config_path) or '.', exist_ok=True)
	with open(config_path, 'w', encoding='utf-8') as handle:
		handle.write(text)
	return

#============================================

def resolve_config(config_path: str = None, overrides: dict = None) -> PipelineConfig:
	"""
	Defaults, then the optional YAML file, then command-line overrides.
	"""
	data = None
	if config_path is not None:
		data = load_config(config_path)
	config = build_config(data)
	if overrides:
		apply_overrides(config, overrides)
	return config
