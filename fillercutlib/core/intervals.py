#!/usr/bin/env python3

"""
Filler-word removal intervals.

Matched filler words become padded remove intervals, which are merged and
inverted into the keep intervals that drive the select/aselect filters.
"""

# Standard Library
import unicodedata

#============================================

# keep ranges at or below this length are dropped
MIN_KEEP = 0.02

#============================================

def _is_edge_char(char: str) -> bool:
	if char.isspace():
		return True
	category = unicodedata.category(char)
	return category[0] in ('P', 'S')

#============================================

def normalize_token(token: str) -> str:
	"""
	Normalize a word for matching.

	Lowercases and strips leading/trailing punctuation, symbols and
	whitespace, so "[UH]" and "uh." both become "uh".

	Args:
		token: Raw word text.

	Returns:
		str: Normalized word, possibly empty.
	"""
	text = token.strip().lower()
	start = 0
	end = len(text)
	while start < end and _is_edge_char(text[start]):
		start += 1
	while end > start and _is_edge_char(text[end - 1]):
		end -= 1
	return text[start:end]

#============================================

def normalize_targets(raw_targets) -> list:
	"""
	Normalize a comma-separated string or list of target words.

	Args:
		raw_targets: "heu,euh,[UH]" or ["heu", "euh"].

	Returns:
		list: Unique normalized targets in first-seen order.
	"""
	if isinstance(raw_targets, str):
		raw_targets = raw_targets.split(',')
	targets = []
	for raw_target in raw_targets:
		normalized = normalize_token(str(raw_target))
		if normalized == "" or normalized in targets:
			continue
		targets.append(normalized)
	return targets

#============================================

def _word_times(word: dict) -> tuple:
	# merged transcript items carry absolute times
	if 'abs_start' in word:
		return (float(word['abs_start']), float(word['abs_end']))
	return (float(word['start']), float(word['end']))

#============================================

def match_fillers(words: list, targets, min_word_dur: float = 0.0) -> list:
	"""
	Find the time ranges of words that match the target set.

	Args:
		words: Word dicts with start/end (or abs_start/abs_end) and text.
		targets: Normalized target words.
		min_word_dur: Words shorter than this are ignored.

	Returns:
		list: [start, end] ranges in transcript order.
	"""
	target_set = set(targets)
	matches = []
	for word in words:
		(start, end) = _word_times(word)
		if end <= start:
			continue
		if min_word_dur > 0 and (end - start) < min_word_dur:
			continue
		normalized = normalize_token(word['text'])
		if normalized == "":
			continue
		if normalized in target_set:
			matches.append([start, end])
	return matches

#============================================

def expand_and_merge(intervals: list, pad_before: float, pad_after: float,
	merge_gap: float, duration: float) -> list:
	"""
	Pad intervals, clamp them to the timeline, and merge close neighbors.

	Args:
		intervals: [start, end] ranges.
		pad_before: Seconds added before each range.
		pad_after: Seconds added after each range.
		merge_gap: Ranges separated by at most this much are merged.
		duration: Timeline length in seconds.

	Returns:
		list: Disjoint ascending [start, end] ranges.
	"""
	expanded = []
	for (start, end) in intervals:
		new_start = max(0.0, float(start) - pad_before)
		new_end = min(duration, float(end) + pad_after)
		if new_end > new_start:
			expanded.append([new_start, new_end])
	if len(expanded) == 0:
		return []
	expanded.sort(key=lambda item: item[0])
	merged = []
	(current_start, current_end) = expanded[0]
	for (next_start, next_end) in expanded[1:]:
		if next_start <= current_end + merge_gap:
			current_end = max(current_end, next_end)
		else:
			merged.append([current_start, current_end])
			(current_start, current_end) = (next_start, next_end)
	merged.append([current_start, current_end])
	return merged

#============================================

def invert_to_keep(remove: list, duration: float, min_keep: float = MIN_KEEP) -> list:
	"""
	Compute keep ranges as the complement of merged remove ranges.

	Args:
		remove: Disjoint ascending remove ranges.
		duration: Timeline length in seconds.
		min_keep: Keep ranges not longer than this are dropped.

	Returns:
		list: Ascending keep ranges.
	"""
	if len(remove) == 0:
		return [[0.0, duration]]
	keep = []
	cursor = 0.0
	for (remove_start, remove_end) in remove:
		if remove_start > cursor + min_keep:
			keep.append([cursor, remove_start])
		cursor = max(cursor, remove_end)
	if duration > cursor + min_keep:
		keep.append([cursor, duration])
	return keep

#============================================

def compute_keep(words: list, targets, pad_before: float, pad_after: float,
	merge_gap: float, min_word_dur: float, total_duration: float) -> tuple:
	"""
	Compute remove and keep ranges for a transcript.

	Args:
		words: Word dicts with absolute times.
		targets: Normalized target words.
		pad_before: Seconds removed before each filler.
		pad_after: Seconds removed after each filler.
		merge_gap: Gap tolerance for merging remove ranges.
		min_word_dur: Ignore matched words shorter than this.
		total_duration: Timeline length in seconds.

	Returns:
		tuple: (remove_intervals, keep_intervals)
	"""
	matches = match_fillers(words, targets, min_word_dur)
	return keep_from_matches(matches, pad_before, pad_after, merge_gap,
		total_duration)

#============================================

def keep_from_matches(matches: list, pad_before: float, pad_after: float,
	merge_gap: float, total_duration: float) -> tuple:
	"""
	Turn matched filler ranges into merged remove and keep ranges.

	Returns:
		tuple: (remove_intervals, keep_intervals)
	"""
	if len(matches) == 0:
		return ([], [[0.0, total_duration]])
	remove = expand_and_merge(matches, pad_before, pad_after, merge_gap,
		total_duration)
	keep = invert_to_keep(remove, total_duration)
	return (remove, keep)

#============================================

def sum_intervals(intervals: list) -> float:
	total = 0.0
	for (start, end) in intervals:
		total += max(0.0, float(end) - float(start))
	return total

#============================================

def build_between_expr(keep: list, precision: int = 3,
	escape_commas: bool = False) -> str:
	"""
	Build a time predicate for the select/aselect filters.

	Args:
		keep: Ascending keep ranges.
		precision: Decimal places for the time literals.
		escape_commas: Escape commas for use inside a filtergraph.

	Returns:
		str: between(t,a,b)+between(t,c,d)+...
	"""
	separator = "\\," if escape_commas else ","
	parts = []
	for (start, end) in keep:
		start_text = f"{float(start):.{precision}f}"
		end_text = f"{float(end):.{precision}f}"
		parts.append(f"between(t{separator}{start_text}{separator}{end_text})")
	return "+".join(parts)

#============================================

def kept_before(t: float, keep: list) -> float:
	"""
	Seconds of kept material inside [0, t] of the original timeline.

	Args:
		t: Original timeline position in seconds.
		keep: Ascending keep ranges.

	Returns:
		float: Kept seconds so far.
	"""
	total = 0.0
	for (start, end) in keep:
		if t <= start:
			break
		total += max(0.0, min(t, end) - start)
		if t < end:
			break
	return total
