"""Response aggregation for the stats and comparison views.

Everything here is a pure function over already-fetched rows. The service
layer is responsible for reading rows from the store and resolving question
titles; this module only groups, counts and scores.

Rows are bucketed by ``(question_id, survey_type)``. Malformed rows (no
question id, or a payload without a usable answer token) are data, not
errors: they are skipped and never counted.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from app.models.enums import SurveyType
from app.reporting.scoring import weighted_average

BucketKey = tuple[str, str]

_TOKEN_FIELDS = ("value", "label")


@dataclass(frozen=True)
class ResponseRow:
    question_id: str | None
    survey_type: str | None
    response_data: Any


@dataclass
class Bucket:
    question_id: str
    survey_type: str
    total: int = 0
    counts: dict[str, int] = field(default_factory=dict)

    def add(self, token: str) -> None:
        self.total += 1
        self.counts[token] = self.counts.get(token, 0) + 1

    @property
    def weighted_average(self) -> float | None:
        return weighted_average(self.counts)


@dataclass(frozen=True)
class AggregateRecord:
    question_id: str
    question_title: str
    survey_type: str
    total: int
    counts: dict[str, int]
    weighted_average: float | None


@dataclass(frozen=True)
class ComparisonPoint:
    question_id: str
    question_title: str
    global_average: float | None
    location_average: float | None
    global_total: int
    location_total: int


def extract_token(payload: Any) -> str | None:
    """Answer token of one response payload: ``value`` first, then ``label``.

    Numbers are rendered as strings so they can key the frequency map. Zero,
    empty strings and missing fields count as absent, so
    ``{"value": 0, "label": "groen"}`` yields ``"groen"``. Nested objects and
    non-mapping payloads yield no token.
    """
    if not isinstance(payload, Mapping):
        return None
    for key in _TOKEN_FIELDS:
        raw = payload.get(key)
        if isinstance(raw, bool):
            continue
        if isinstance(raw, (int, float)) and raw:
            return str(raw)
        if isinstance(raw, str) and raw:
            return raw
    return None


def aggregate(rows: Iterable[ResponseRow]) -> dict[BucketKey, Bucket]:
    """Group rows into buckets, preserving first-seen order."""
    buckets: dict[BucketKey, Bucket] = {}
    for row in rows:
        if not row.question_id:
            continue
        token = extract_token(row.response_data)
        if token is None:
            continue
        survey_type = row.survey_type or SurveyType.REGULAR.value
        key = (str(row.question_id), survey_type)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = Bucket(question_id=key[0], survey_type=survey_type)
        bucket.add(token)
    return buckets


def question_ids(*bucket_sets: Mapping[BucketKey, Bucket]) -> list[str]:
    """Distinct question ids across bucket sets, for one batch title lookup."""
    seen: dict[str, None] = {}
    for buckets in bucket_sets:
        for question_id, _ in buckets:
            seen.setdefault(question_id, None)
    return list(seen)


def to_records(
    buckets: Mapping[BucketKey, Bucket],
    titles: Mapping[str, str],
) -> list[AggregateRecord]:
    """One record per bucket. An unresolved title falls back to the id."""
    return [
        AggregateRecord(
            question_id=bucket.question_id,
            question_title=titles.get(bucket.question_id) or bucket.question_id,
            survey_type=bucket.survey_type,
            total=bucket.total,
            counts=dict(bucket.counts),
            weighted_average=bucket.weighted_average,
        )
        for bucket in buckets.values()
    ]


def compare(
    global_buckets: Mapping[BucketKey, Bucket],
    subgroup_buckets: Mapping[BucketKey, Bucket],
    survey_type: str,
    titles: Mapping[str, str] | None = None,
) -> list[ComparisonPoint]:
    """Align global and subgroup averages per question within one survey type.

    Points follow the global ordering; questions that only the subgroup
    answered are appended. A side without data keeps ``None`` as its
    average and ``0`` as its total.
    """
    titles = titles or {}
    global_side = {b.question_id: b for b in global_buckets.values() if b.survey_type == survey_type}
    subgroup_side = {b.question_id: b for b in subgroup_buckets.values() if b.survey_type == survey_type}

    ordered = list(global_side)
    ordered.extend(qid for qid in subgroup_side if qid not in global_side)

    points: list[ComparisonPoint] = []
    for question_id in ordered:
        g = global_side.get(question_id)
        s = subgroup_side.get(question_id)
        points.append(
            ComparisonPoint(
                question_id=question_id,
                question_title=titles.get(question_id) or question_id,
                global_average=g.weighted_average if g else None,
                location_average=s.weighted_average if s else None,
                global_total=g.total if g else 0,
                location_total=s.total if s else 0,
            )
        )
    return points
