#!/usr/bin/env python3

"""
Word-timestamp transcripts.

Parses the "[start -> end] word" lines written by the transcription tool,
merges per-chunk words onto the absolute timeline, and renders the merged
plain text, timestamp and SRT outputs.
"""

# Standard Library
import re

# local repo modules
from fillercutlib.core import utils

#============================================

# "[  0.50 →   0.78] Bonjour" or "[0.50 -> 0.78] Bonjour"
TIMESTAMP_LINE_RE = re.compile(
	r'^\[\s*([0-9]+(?:\.[0-9]+)?)\s*'
	r'(?:[-–—]\s*)?(?:>|→)'
	r'\s*([0-9]+(?:\.[0-9]+)?)\s*\]\s*(.+?)\s*$'
)

APOSTROPHES = ("'", "’")
NO_SPACE_BEFORE = (".", ",", ";", ":", "!", "?", ")")

CUE_MAX_GAP = 0.8
CUE_MAX_DURATION = 3.5
CUE_MAX_WORDS = 12

EMPTY_SRT_TEXT = "; No timestamps parsed -> SRT not generated.\n"

#============================================

def parse_timestamp_line(line: str):
	"""
	Parse one word line.

	Args:
		line: Raw line text.

	Returns:
		dict or None: {start, end, text} when the line matches.
	"""
	match = TIMESTAMP_LINE_RE.match(line.strip())
	if match is None:
		return None
	text = match.group(3).strip()
	if text == "":
		return None
	return {
		'start': float(match.group(1)),
		'end': float(match.group(2)),
		'text': text,
	}

#============================================

def parse_timestamped_lines(text: str) -> tuple:
	"""
	Leniently parse transcription output.

	Blank lines are ignored. Lines that do not match the word format are
	skipped and counted instead of raising.

	Args:
		text: Tool output.

	Returns:
		tuple: (items, skipped_count)
	"""
	items = []
	skipped = 0
	for line in text.splitlines():
		if line.strip() == "":
			continue
		item = parse_timestamp_line(line)
		if item is None:
			skipped += 1
			continue
		items.append(item)
	return (items, skipped)

#============================================

def read_timestamp_file(path: str) -> tuple:
	with open(path, 'r', encoding='utf-8') as handle:
		text = handle.read()
	return parse_timestamped_lines(text)

#============================================

def translate_items(items: list, offset: float, source_chunk: str) -> list:
	"""
	Move chunk-relative words onto the absolute timeline.
	"""
	translated = []
	for item in items:
		translated.append({
			'abs_start': item['start'] + offset,
			'abs_end': item['end'] + offset,
			'text': item['text'],
			'source_chunk': source_chunk,
			'rel_start': item['start'],
			'rel_end': item['end'],
		})
	return translated

#============================================

def merge_chunk(merged: list, items: list, offset: float, source_chunk: str) -> list:
	"""
	Append one chunk's words to the merged timeline.

	Args:
		merged: Words merged so far; not modified.
		items: Chunk-relative words.
		offset: Chunk start on the absolute timeline.
		source_chunk: Chunk file name.

	Returns:
		list: New merged word list.
	"""
	return merged + translate_items(items, offset, source_chunk)

#============================================

def merge_transcripts(chunks) -> list:
	"""
	Merge chunks given as (items, offset, source_chunk) in offset order.

	Offsets are trusted to be ascending and non-overlapping.
	"""
	merged = []
	for (items, offset, source_chunk) in chunks:
		merged = merge_chunk(merged, items, offset, source_chunk)
	return merged

#============================================

def _is_bare_apostrophe(token: str) -> bool:
	return token in APOSTROPHES

#============================================

def join_words(tokens: list) -> str:
	"""
	Join word tokens with French-aware punctuation spacing.

	Args:
		tokens: Word strings in order.

	Returns:
		str: Joined text.
	"""
	text = ""
	previous = None
	for token in tokens:
		if previous is None:
			text = token
		elif token in NO_SPACE_BEFORE:
			text += token
		elif token.startswith(APOSTROPHES):
			text += token
		elif _is_bare_apostrophe(previous):
			text += token
		else:
			text += " " + token
		previous = token
	return text

#============================================

def join_item_words(items: list) -> str:
	return join_words([item['text'] for item in items])

#============================================

def group_cues(words: list, max_gap: float = CUE_MAX_GAP,
	max_duration: float = CUE_MAX_DURATION, max_words: int = CUE_MAX_WORDS) -> list:
	"""
	Group merged words into subtitle cues.

	A new cue starts when the gap to the running cue exceeds max_gap, when
	the cue would last longer than max_duration, or when it already holds
	max_words words.

	Args:
		words: Merged words with abs_start/abs_end/text.

	Returns:
		list: Cue dicts with start/end/words.
	"""
	cues = []
	current = None
	for word in words:
		start = word['abs_start']
		end = word['abs_end']
		if current is None:
			current = {'start': start, 'end': end, 'words': [word['text']]}
			continue
		gap = start - current['end']
		duration = end - current['start']
		if gap > max_gap or duration > max_duration or len(current['words']) >= max_words:
			cues.append(current)
			current = {'start': start, 'end': end, 'words': [word['text']]}
		else:
			current['end'] = max(current['end'], end)
			current['words'].append(word['text'])
	if current is not None:
		cues.append(current)
	return cues

#============================================

def build_srt(cues: list) -> str:
	"""
	Render cues as SRT text.
	"""
	if len(cues) == 0:
		return EMPTY_SRT_TEXT
	lines = []
	for index, cue in enumerate(cues, start=1):
		lines.append(str(index))
		start_tc = utils.format_srt_timestamp(cue['start'])
		end_tc = utils.format_srt_timestamp(cue['end'])
		lines.append(f"{start_tc} --> {end_tc}")
		lines.append(join_words(cue['words']))
		lines.append("")
	return "\n".join(lines)

#============================================

def format_timestamp_line(start: float, end: float, text: str) -> str:
	return f"[{start:.3f} -> {end:.3f}] {text}"

#============================================

def build_timestamp_text(words: list) -> str:
	lines = []
	for word in words:
		lines.append(format_timestamp_line(word['abs_start'], word['abs_end'],
			word['text']))
	return "\n".join(lines)
