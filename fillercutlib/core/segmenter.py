#!/usr/bin/env python3

"""
Silence-aligned chunk planning.

Splits a timeline of known duration into contiguous chunks no longer than
max_len seconds, cutting at the end of a detected silence whenever one is
close enough to the target boundary.
"""

# local repo modules
from fillercutlib.core import utils
from fillercutlib.core.errors import InputError

#============================================

# loop guard against floating-point residue at the tail
END_EPSILON = 0.01
# boundaries closer than this to the cursor make no progress
PROGRESS_EPSILON = 0.001

#============================================

def cut_points_from_silences(silences: list) -> list:
	"""
	Build sorted candidate cut points from silence ends.

	Args:
		silences: Silence dicts with start/end/duration.

	Returns:
		list: Ascending cut times in seconds.
	"""
	cut_points = [float(silence['end']) for silence in silences]
	cut_points.sort()
	return cut_points

#============================================

def choose_cut(t0: float, total_duration: float, max_len: float,
	cut_points: list, prefer_window: float, min_chunk: float) -> float:
	"""
	Choose the end of the chunk that starts at t0.

	Args:
		t0: Chunk start in seconds.
		total_duration: Timeline length in seconds.
		max_len: Maximum chunk length.
		cut_points: Ascending candidate cut times.
		prefer_window: Distance around the target that counts as near.
		min_chunk: Cut points closer than this to t0 are ignored.

	Returns:
		float: Chunk end in seconds.
	"""
	target = min(t0 + max_len, total_duration)
	min_time = t0 + min_chunk
	eligible = []
	for cut_point in cut_points:
		if cut_point > target:
			break
		if cut_point > min_time:
			eligible.append(cut_point)
	if len(eligible) == 0:
		return target
	best = None
	best_dist = None
	for cut_point in eligible:
		dist = abs(cut_point - target)
		if dist > prefer_window:
			continue
		# strict comparison keeps the first of equal distances
		if best_dist is None or dist < best_dist:
			best = cut_point
			best_dist = dist
	if best is not None:
		return best
	# nothing near the target, fall back to the latest eligible cut
	return eligible[-1]

#============================================

def make_segment(index: int, start: float, end: float,
	chunk_format: str = 'wav') -> dict:
	return {
		'index': index,
		'file': f"chunk_{index:03d}.{chunk_format}",
		'start_s': start,
		'end_s': end,
		'duration_s': end - start,
		'start_hms': utils.format_timestamp(start),
		'end_hms': utils.format_timestamp(end),
	}

#============================================

def plan_segments(total_duration: float, cut_points: list, max_len: float,
	min_chunk: float = 0.0, prefer_window: float = 0.0,
	chunk_format: str = 'wav') -> list:
	"""
	Partition [0, total_duration] into chunks of at most max_len seconds.

	Args:
		total_duration: Timeline length in seconds.
		cut_points: Candidate cut times; sorted here if needed.
		max_len: Maximum chunk length.
		min_chunk: Minimum distance from chunk start to an eligible cut.
		prefer_window: Search window around the target boundary.
		chunk_format: Extension used for chunk file names.

	Returns:
		list: Segment dicts in timeline order.
	"""
	total_duration = utils.parse_seconds(total_duration, "total duration")
	max_len = utils.parse_seconds(max_len, "max chunk length")
	if max_len <= PROGRESS_EPSILON:
		raise InputError(f"max chunk length must exceed {PROGRESS_EPSILON}s: {max_len!r}")
	if min_chunk < 0:
		raise InputError("min_chunk must be zero or positive")
	if prefer_window < 0:
		raise InputError("prefer_window must be zero or positive")
	cut_points = sorted(float(value) for value in cut_points)
	segments = []
	t0 = 0.0
	index = 0
	while t0 < total_duration - END_EPSILON:
		t1 = choose_cut(t0, total_duration, max_len, cut_points,
			prefer_window, min_chunk)
		if t1 <= t0 + PROGRESS_EPSILON:
			t1 = min(t0 + max_len, total_duration)
			if t1 <= t0 + PROGRESS_EPSILON:
				break
		segments.append(make_segment(index, t0, t1, chunk_format))
		t0 = t1
		index += 1
	if len(segments) == 0:
		# timeline shorter than the loop guard
		segments.append(make_segment(0, 0.0, total_duration, chunk_format))
	elif segments[-1]['end_s'] < total_duration:
		# absorb the sub-epsilon tail so the chunks cover the whole timeline
		last = segments[-1]
		segments[-1] = make_segment(last['index'], last['start_s'],
			total_duration, chunk_format)
	return segments

#============================================

def segments_for_json(segments: list) -> list:
	"""
	Round segment times for the offsets file.
	"""
	records = []
	for segment in segments:
		records.append({
			'index': segment['index'],
			'file': segment['file'],
			'start_s': round(segment['start_s'], 3),
			'end_s': round(segment['end_s'], 3),
			'duration_s': round(segment['end_s'] - segment['start_s'], 3),
			'start_hms': segment['start_hms'],
			'end_hms': segment['end_hms'],
		})
	return records
