#!/usr/bin/env python3

"""
Tests for pipeline config loading and overrides.
"""

# Standard Library
import os
import sys

# PIP3 modules
import pytest
import yaml

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

# local repo modules
from fillercutlib.core import config as pipeline_config
from fillercutlib.core.errors import InputError

#============================================

def _write_yaml(tmp_path, data) -> str:
	path = tmp_path / "fillercut.yaml"
	path.write_text(yaml.safe_dump(data), encoding='utf-8')
	return str(path)

#============================================

def test_defaults() -> None:
	config = pipeline_config.resolve_config()
	assert config.max_len == 180.0
	assert config.silence_db == -45.0
	assert config.silence_dur == 0.5
	assert config.prefer_window == 12.0
	assert config.min_chunk == 20.0
	assert config.chunk_format == "wav"
	assert config.words == ["heu", "euh", "uh", "um"]
	assert config.pad_before == 0.15
	assert config.pad_after == 0.07
	assert config.merge_gap == 0.10
	assert config.min_word_dur == 0.09
	assert config.vcodec == "h264_nvenc"
	assert config.cq == "18"
	assert config.progress is True
	assert config.timeout is None

#============================================

def test_load_yaml_file(tmp_path) -> None:
	path = _write_yaml(tmp_path, {
		'fillercut': 1,
		'split': {'max_len': 60, 'format': 'flac'},
		'fillers': {'words': ['bah', 'Ben.'], 'merge_gap': '0.2'},
		'encode': {'vcodec': 'libx264', 'progress': 'no'},
		'tools': {'timeout': 30},
	})
	config = pipeline_config.resolve_config(path)
	assert config.max_len == 60.0
	assert config.chunk_format == "flac"
	assert config.words == ["bah", "ben"]
	assert config.merge_gap == 0.2
	assert config.vcodec == "libx264"
	assert config.progress is False
	assert config.timeout == 30.0
	# untouched sections keep defaults
	assert config.silence_db == -45.0
	assert config.pad_before == 0.15

#============================================

def test_missing_version_rejected(tmp_path) -> None:
	path = _write_yaml(tmp_path, {'split': {'max_len': 60}})
	with pytest.raises(InputError):
		pipeline_config.resolve_config(path)

#============================================

def test_missing_file_rejected(tmp_path) -> None:
	with pytest.raises(InputError):
		pipeline_config.resolve_config(str(tmp_path / "nope.yaml"))

#============================================

def test_invalid_yaml_rejected(tmp_path) -> None:
	path = tmp_path / "broken.yaml"
	path.write_text("fillercut: 1\nsplit: [unclosed\n", encoding='utf-8')
	with pytest.raises(InputError):
		pipeline_config.resolve_config(str(path))

#============================================

@pytest.mark.parametrize("section,value", [
	('split', {'max_len': 0}),
	('split', {'max_len': 'long'}),
	('split', {'silence_dur': -1}),
	('fillers', {'words': ''}),
	('fillers', {'pad_before': -0.1}),
	('encode', {'progress': 'sometimes'}),
	('paths', ['not', 'a', 'mapping']),
])
def test_invalid_values_rejected(tmp_path, section, value) -> None:
	path = _write_yaml(tmp_path, {'fillercut': 1, section: value})
	with pytest.raises(InputError):
		pipeline_config.resolve_config(path)

#============================================

def test_symmetric_pad_with_explicit_side() -> None:
	"""
	Ensure pad sets both sides and an explicit side still wins.
	"""
	config = pipeline_config.resolve_config(overrides={'pad': 0.2})
	assert config.pad_before == 0.2
	assert config.pad_after == 0.2
	config = pipeline_config.resolve_config(overrides={'pad': 0.2, 'pad_after': 0.05})
	assert config.pad_before == 0.2
	assert config.pad_after == 0.05

#============================================

def test_yaml_pad_then_overrides(tmp_path) -> None:
	path = _write_yaml(tmp_path, {'fillercut': 1, 'fillers': {'pad': 0.3}})
	config = pipeline_config.resolve_config(path, {'pad_before': 0.1, 'max_len': None})
	assert config.pad_before == 0.1
	assert config.pad_after == 0.3
	assert config.max_len == 180.0

#============================================

def test_overrides_coerce_types() -> None:
	overrides = {
		'max_len': "90",
		'words': "bah, [UH]",
		'progress': False,
		'cq': 23,
		'timeout': "12.5",
	}
	config = pipeline_config.resolve_config(overrides=overrides)
	assert config.max_len == 90.0
	assert config.words == ["bah", "uh"]
	assert config.progress is False
	assert config.cq == "23"
	assert config.timeout == 12.5

#============================================

def test_unknown_override_rejected() -> None:
	with pytest.raises(InputError):
		pipeline_config.resolve_config(overrides={'bogus': 1})

#============================================

def test_written_config_reloads(tmp_path) -> None:
	config = pipeline_config.resolve_config(overrides={'max_len': 75, 'vcodec': 'libx264'})
	path = str(tmp_path / "out" / "fillercut.yaml")
	pipeline_config.write_config_file(path, config)
	reloaded = pipeline_config.resolve_config(path)
	assert reloaded.as_dict() == config.as_dict()
