#!/usr/bin/env python3

from fillercutlib.media.ffmpeg_extract import SilenceDetector
from fillercutlib.media.ffmpeg_extract import MediaProbe
from fillercutlib.media.ffmpeg_render import MediaEncoder
from fillercutlib.media.ffmpeg_render import codec_args

__all__ = [
	'SilenceDetector',
	'MediaProbe',
	'MediaEncoder',
	'codec_args',
]
