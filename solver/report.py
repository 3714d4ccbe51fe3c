"""
Human readable listing and JSON export of a solver result
"""
from typing import Any, Dict, List

from models.data_models import CSPResult, EntitySnapshot


def _indexes(snapshot: EntitySnapshot):
    return (
        {c.code: c for c in snapshot.courses},
        {i.external_id: i for i in snapshot.instructors},
        {r.name: r for r in snapshot.rooms},
        {t.id: t for t in snapshot.time_slots},
    )


def session_records(snapshot: EntitySnapshot, result: CSPResult) -> List[Dict[str, Any]]:
    """One display record per assignment, in assignment order"""
    courses, instructors, rooms, slots = _indexes(snapshot)
    records = []
    for a in result.assignments:
        course = courses.get(a.course_code)
        ins = instructors.get(a.instructor_id)
        rm = rooms.get(a.room_name)
        ts = slots.get(a.timeslot_id)
        start = ts.start_time if ts else ""
        end = ts.end_time if ts else ""
        room_label = a.room_name
        if rm and rm.building:
            room_label = f"{a.room_name} ({rm.building})"
        records.append({
            "sectionId": a.section_id,
            "sessionNumber": a.session_number,
            "courseCode": a.course_code,
            "courseName": course.name if course else a.course_code,
            "courseType": course.type if course else "",
            "instructorId": a.instructor_id,
            "instructor": ins.name if ins and ins.name else a.instructor_id,
            "roomName": a.room_name,
            "room": room_label,
            "timeslotId": a.timeslot_id,
            "day": ts.day if ts else "",
            "startTime": start,
            "endTime": end,
            "time": f"{start} - {end}",
            "score": a.score,
        })
    return records


def timetable_to_json(snapshot: EntitySnapshot, result: CSPResult) -> Dict[str, Any]:
    """Export record consumed by the timetable viewer"""
    metrics = result.metrics
    return {
        "success": result.success,
        "stats": {
            "totalSections": len(snapshot.sections),
            "totalSessions": metrics.variable_count,
            "assignments": metrics.assignment_count,
            "ignoredSections": list(result.ignored_sections),
            "solveTime": result.solve_seconds,
        },
        "metrics": metrics.to_dict(),
        "sessions": session_records(snapshot, result) if result.success else [],
    }


def format_result(snapshot: EntitySnapshot, result: CSPResult) -> List[str]:
    """Lines describing the result, for the console and the GUI log"""
    metrics = result.metrics
    if not result.success:
        return [
            f"No solution found. Backtracks: {metrics.backtrack_count}, "
            f"time: {result.solve_seconds:.2f}s"
        ]

    lines = []
    for rec in session_records(snapshot, result):
        lines.append(f"{rec['courseCode']} | {rec['courseName']} | "
                     f"Section {rec['sectionId']} #{rec['sessionNumber']}")
        lines.append(f"  {rec['day']} {rec['time']} | {rec['room']} | "
                     f"{rec['instructor']} | score {rec['score']}")

    stats = metrics.domain_stats
    b = metrics.constraint_breakdown
    lines.extend([
        "",
        f"Solution found in {result.solve_seconds:.2f}s",
        f"Assignments: {metrics.assignment_count}  Soft score: {metrics.total_soft_score}",
        f"Backtracks: {metrics.backtrack_count}  Fallback relaxations: {metrics.fallback_count}",
        f"Domain size: min {stats.min}, max {stats.max}, avg {stats.average:.1f}",
        f"Qualified: {b.qualified_instructor_bonus}  Preferred: {b.preferred_instructor_bonus}  "
        f"Early/late: {b.early_late_penalty}  Distance: {b.distance_penalty}  "
        f"Clustering: {b.same_day_clustering}  Gaps: {b.gap_penalty}",
    ])
    if result.ignored_sections:
        lines.append(f"Ignored sections: {', '.join(result.ignored_sections)}")
    lines.append("=========================================")
    return lines
