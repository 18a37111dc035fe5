# mic_core/incidents/aggregation.py
"""
Pure roll-ups over enriched incident-log rows.

Nothing here touches the database: callers load rows (IncidentLogRow.from_model)
and feed them in. Empty input never raises; missing optional fields fall back
to documented defaults ("overig", "Onbekend", gray).
"""
from __future__ import annotations

import unicodedata
from collections import OrderedDict
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from mic_core.incidents.types import (
    CategoryGroup,
    CategoryTotal,
    DailyPoint,
    HourBucket,
    IncidentLogRow,
    IncidentTypeInfo,
    NamedCount,
    Summary,
    TypeTotal,
)

OTHER = "overig"
UNKNOWN_LABEL = "Onbekend"
NO_LOCATION_KEY = "none"

CATEGORY_ORDER: Tuple[str, ...] = ("fysiek", "verbaal", "emotioneel", "sociaal", OTHER)

CATEGORY_LABELS: Mapping[str, str] = {
    "fysiek": "Fysiek",
    "verbaal": "Verbaal",
    "emotioneel": "Emotioneel",
    "sociaal": "Sociaal",
    OTHER: "Overig",
}

CATEGORY_COLORS: Mapping[str, str] = {
    "fysiek": "#ef4444",
    "verbaal": "#3b82f6",
    "emotioneel": "#eab308",
    "sociaal": "#22c55e",
}

SEVERITY_COLORS: Mapping[int, str] = {
    5: "#ef4444",
    4: "#f97316",
    3: "#eab308",
    2: "#3b82f6",
    1: "#22c55e",
}

GRAY = "#a3a3a3"


# -----------------------------
# Small helpers
# -----------------------------

def category_key(category: str | None) -> str:
    """Bucket for a raw category value; unknown and empty go to overig."""
    value = (category or "").strip().lower()
    return value if value in CATEGORY_COLORS else OTHER


def category_label(key: str | None) -> str:
    return CATEGORY_LABELS.get(category_key(key), CATEGORY_LABELS[OTHER])


def category_color(key: str | None) -> str:
    return CATEGORY_COLORS.get(category_key(key), GRAY)


def collation_key(text: str | None) -> Tuple[str, str]:
    """
    Accent- and case-insensitive ordering ("Éénmalig" next to "eenmalig"),
    original text as tie-breaker so the order stays total.
    """
    raw = text or ""
    folded = unicodedata.normalize("NFKD", raw)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch)).casefold()
    return folded, raw


def color_for_incident_type(itype: IncidentTypeInfo | None) -> str:
    """
    explicit color_code -> category palette -> severity palette -> gray
    """
    if itype is None:
        return GRAY

    code = (itype.color_code or "").strip()
    if code:
        return code

    category = (itype.category or "").strip().lower()
    if category in CATEGORY_COLORS:
        return CATEGORY_COLORS[category]

    if itype.severity_level in SEVERITY_COLORS:
        return SEVERITY_COLORS[itype.severity_level]

    return GRAY


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


# -----------------------------
# Grouping
# -----------------------------

def registration_key(row: IncidentLogRow) -> str:
    location = row.location if row.location else NO_LOCATION_KEY
    return f"{row.client_id}|{row.incident_type_id}|{location}|{row.log_date.isoformat()}"


def group_by_registration_key(logs: Iterable[IncidentLogRow]) -> List[IncidentLogRow]:
    """
    Merge rows sharing (client, type, location, date).

    A group of one passes through untouched. A larger group becomes a copy
    of its first member with the summed count and combined_log_ids listing
    every member id in input order. Output keeps first-seen key order.
    Rows that are already grouped contribute all of their member ids, so
    re-grouping a grouped list returns it unchanged.
    """
    buckets: "OrderedDict[str, List[IncidentLogRow]]" = OrderedDict()
    for row in logs:
        buckets.setdefault(registration_key(row), []).append(row)

    out: List[IncidentLogRow] = []
    for members in buckets.values():
        if len(members) == 1:
            out.append(members[0])
            continue

        ids: List[int] = []
        for m in members:
            ids.extend(m.member_ids)

        out.append(
            replace(
                members[0],
                count=sum(m.count for m in members),
                combined_log_ids=tuple(ids),
            )
        )
    return out


# -----------------------------
# Totals
# -----------------------------

def totals_by_incident_type(
    logs: Iterable[IncidentLogRow],
    active_types: Iterable[IncidentTypeInfo],
) -> List[TypeTotal]:
    """
    Every active type appears, zero when untouched. Logs of types missing
    from active_types (deactivated since) are still counted under their
    own name. Sorted by raw category (null first) then name.
    """
    acc: Dict[str, dict] = {}

    def _slot(itype: IncidentTypeInfo) -> dict:
        return {
            "count": 0,
            "logs": [],
            "category": itype.category,
            "severity_level": itype.severity_level,
            "color_code": itype.color_code,
            "color": color_for_incident_type(itype),
        }

    for itype in active_types:
        acc[itype.name] = _slot(itype)

    for row in logs:
        name = row.incident_type.name
        slot = acc.get(name)
        if slot is None:
            slot = acc[name] = _slot(row.incident_type)
        slot["count"] += row.count
        slot["logs"].append(row)

    totals = [
        TypeTotal(
            name=name,
            count=data["count"],
            category=data["category"],
            severity_level=data["severity_level"],
            color_code=data["color_code"],
            color=data["color"],
            logs=tuple(data["logs"]),
        )
        for name, data in acc.items()
    ]
    return sorted(totals, key=lambda t: (t.category or "", collation_key(t.name)))


def totals_by_incident_type_ranked(logs: Iterable[IncidentLogRow]) -> List[TypeTotal]:
    """Types that occur in logs only, highest count first."""
    acc: "OrderedDict[str, TypeTotal]" = OrderedDict()
    for row in logs:
        itype = row.incident_type
        current = acc.get(itype.name)
        if current is None:
            acc[itype.name] = TypeTotal(
                name=itype.name,
                count=row.count,
                category=itype.category,
                severity_level=itype.severity_level,
                color_code=itype.color_code,
                color=color_for_incident_type(itype),
            )
        else:
            acc[itype.name] = replace(current, count=current.count + row.count)

    return sorted(acc.values(), key=lambda t: -t.count)


def totals_by_category(logs: Iterable[IncidentLogRow], *, only_nonzero: bool = True) -> List[CategoryTotal]:
    """
    Fixed five buckets in CATEGORY_ORDER.
    only_nonzero=True for charts (empty buckets dropped), False for tables.
    """
    counts = {key: 0 for key in CATEGORY_ORDER}
    for row in logs:
        counts[category_key(row.incident_type.category)] += row.count

    out = [
        CategoryTotal(name=key, label=CATEGORY_LABELS[key], count=counts[key], color=category_color(key))
        for key in CATEGORY_ORDER
    ]
    if only_nonzero:
        out = [c for c in out if c.count > 0]
    return out


def group_types_by_category(type_totals: Sequence[TypeTotal]) -> List[CategoryGroup]:
    """Split a type-total list under the five category headers, input order kept."""
    groups: Dict[str, List[TypeTotal]] = {key: [] for key in CATEGORY_ORDER}
    for total in type_totals:
        groups[category_key(total.category)].append(total)

    return [
        CategoryGroup(
            name=key,
            label=CATEGORY_LABELS[key],
            color=category_color(key),
            types=tuple(groups[key]),
        )
        for key in CATEGORY_ORDER
    ]


def _ranked(counts: Mapping[str, int]) -> List[NamedCount]:
    return sorted((NamedCount(name=k, count=v) for k, v in counts.items()), key=lambda c: -c.count)


def totals_by_location(logs: Iterable[IncidentLogRow]) -> List[NamedCount]:
    counts: "OrderedDict[str, int]" = OrderedDict()
    for row in logs:
        location = (row.location or "").strip() or UNKNOWN_LABEL
        counts[location] = counts.get(location, 0) + row.count
    return _ranked(counts)


def totals_by_client(logs: Iterable[IncidentLogRow]) -> List[NamedCount]:
    counts: "OrderedDict[str, int]" = OrderedDict()
    for row in logs:
        name = row.client_name or UNKNOWN_LABEL
        counts[name] = counts.get(name, 0) + row.count
    return _ranked(counts)


def totals_by_hour_of_day(logs: Iterable[IncidentLogRow]) -> List[HourBucket]:
    """Always 24 buckets "00:00".."23:00"; rows without time_of_day are skipped."""
    counts = [0] * 24
    for row in logs:
        if row.time_of_day is None:
            continue
        counts[row.time_of_day.hour] += row.count

    return [HourBucket(hour=f"{h:02d}:00", count=counts[h]) for h in range(24)]


def summarize(logs: Sequence[IncidentLogRow]) -> Summary:
    """
    Success rate is a share of rows (not of counts), rounded to a whole percent.
    """
    rows = list(logs)
    if not rows:
        return Summary(total_incidents=0, unique_clients=0, unique_days=0, intervention_success_rate=0)

    successful = sum(1 for r in rows if r.intervention_successful)
    return Summary(
        total_incidents=sum(r.count for r in rows),
        unique_clients=len({r.client_id if r.client_id is not None else r.client_name for r in rows}),
        unique_days=len({r.log_date for r in rows}),
        intervention_success_rate=_round_half_up(successful * 100 / len(rows)),
    )


def daily_series(daily_totals: Iterable[Mapping]) -> List[DailyPoint]:
    """
    Collapse daily-total rows ({"log_date", "total_count", ...}) into one
    point per date, ascending.
    """
    per_day: Dict = {}
    for row in daily_totals:
        day = row["log_date"]
        per_day[day] = per_day.get(day, 0) + int(row.get("total_count") or 0)

    return [DailyPoint(date=day, count=per_day[day]) for day in sorted(per_day)]
