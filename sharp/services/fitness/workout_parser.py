"""
Natural-language workout parser.

Turns short free text such as "ran 5k easy" or "bench press 3x8 @ 135lbs"
into structured exercises using regexes and fixed vocabulary/unit tables.
No AI involved; confidence is a fixed score per parse path.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

logger = logging.getLogger(__name__)


EXERCISE_ALIASES = {
    # Cardio
    "run": "running",
    "ran": "running",
    "jog": "running",
    "jogged": "running",
    "bike": "cycling",
    "biked": "cycling",
    "cycle": "cycling",
    "cycled": "cycling",
    "swim": "swimming",
    "swam": "swimming",
    "row": "rowing",
    "rowed": "rowing",
    "walk": "walking",
    "walked": "walking",
    "hike": "hiking",
    "hiked": "hiking",
    # Strength
    "bench": "bench press",
    "bp": "bench press",
    "squat": "squat",
    "squats": "squat",
    "deadlift": "deadlift",
    "dl": "deadlift",
    "ohp": "overhead press",
    "press": "overhead press",
    "pullup": "pull-up",
    "pullups": "pull-up",
    "chinup": "chin-up",
    "chinups": "chin-up",
    "pushup": "push-up",
    "pushups": "push-up",
    "situp": "sit-up",
    "situps": "sit-up",
    "plank": "plank",
    "burpee": "burpee",
    "burpees": "burpee",
}

# Multipliers to kilometres
DISTANCE_UNITS = {
    "km": 1.0,
    "kilometer": 1.0,
    "kilometers": 1.0,
    "k": 1.0,
    "mile": 1.60934,
    "miles": 1.60934,
    "m": 0.001,
    "meter": 0.001,
    "meters": 0.001,
    "yard": 0.0009144,
    "yards": 0.0009144,
    "yd": 0.0009144,
}

# Multipliers to kilograms
WEIGHT_UNITS = {
    "kg": 1.0,
    "kilogram": 1.0,
    "kilograms": 1.0,
    "lb": 0.453592,
    "lbs": 0.453592,
    "pound": 0.453592,
    "pounds": 0.453592,
}

DEFAULT_WEIGHT_UNIT = "lb"

# Checked in order; the first one found in the text wins
INTENSITY_MARKERS = [
    "easy", "light", "recovery",
    "moderate", "tempo", "steady",
    "hard", "intense", "vigorous",
    "max", "maximum", "all out",
]

MULTI_CONFIDENCE = 0.7
SINGLE_CONFIDENCE = 0.8

_INTENSITY = r"easy|moderate|hard|tempo|recovery|light|intense|vigorous"

CARDIO_PATTERN = re.compile(
    r"(?:^|\s)(ran|run|biked|bike|swam|swim|walked|walk|hiked|hike|rowed|row)\s+"
    r"(?:"
    # distance, optional finishing time, optional intensity
    r"(?:for\s+)?(\d+(?:\.\d+)?)\s*(kilometers?|km|k|miles?|meters?|m|yards?|yd)\b"
    r"(?:\s+in\s+(\d+):(\d+)(?::(\d+))?)?"
    rf"(?:\s+({_INTENSITY}))?"
    r"|"
    # duration, optional intensity
    r"(?:for\s+)?(\d+)\s*(hours?|h|minutes?|min|seconds?|sec|s)\b"
    rf"(?:\s+({_INTENSITY}))?"
    r")",
    re.IGNORECASE,
)

STRENGTH_PATTERN = re.compile(
    r"(?:^|\s)(bench(?:\s+press)?|bp|squat|squats|deadlift|dl|ohp|overhead\s+press|"
    r"pullup|pullups|chinup|chinups|pushup|pushups|plank|burpee|burpees)\s+"
    r"(?:"
    # SETSxREPS [@] [WEIGHT [unit]]
    r"(\d+)\s*x\s*(\d+)(?:\s*@?\s*(\d+(?:\.\d+)?)\s*(kg|lbs|lb|pounds|pound)?)?"
    r"|"
    # WEIGHT unit
    r"(\d+(?:\.\d+)?)\s*(kg|lbs|lb|pounds|pound)"
    r")",
    re.IGNORECASE,
)

SEPARATOR_PATTERN = re.compile(r"\s+(?:and|[+&]|then|followed\s+by)\s+", re.IGNORECASE)

RPE_PATTERN = re.compile(r"rpe\s*(\d+(?:\.\d+)?)")
AT_SCALE_PATTERN = re.compile(r"@\s*(\d+(?:\.\d+)?)(?:\s*/\s*10)?")


@dataclass
class ParsedSet:
    """One set of a strength exercise."""
    reps: Optional[int] = None
    weight_kg: Optional[float] = None
    duration_seconds: Optional[int] = None
    completed: bool = False


@dataclass
class ParsedExercise:
    """Exercise extracted from text."""
    name: str
    type: str  # 'reps', 'time' or 'distance'
    sets: List[ParsedSet] = field(default_factory=list)
    distance_km: Optional[float] = None
    duration_seconds: Optional[int] = None
    intensity: Optional[str] = None


@dataclass
class ParsedWorkout:
    """Result of parsing one workout description."""
    exercises: List[ParsedExercise]
    workout_type: str  # 'strength', 'cardio' or 'mixed'
    confidence: float


def parse_workout_text(text: Optional[str]) -> Optional[ParsedWorkout]:
    """
    Parse free-text workout input.

    Multi-exercise input (split on and/+/&/then/followed by) is tried first;
    otherwise the whole text is tried as one cardio, then one strength exercise.

    Args:
        text: Raw user input

    Returns:
        ParsedWorkout, or None when nothing recognisable was found
    """
    if not text or not text.strip():
        return None

    normalized = text.lower().strip()

    parts = _parse_parts(normalized)
    if len(parts) > 1:
        has_distance = any(e.type == "distance" for e in parts)
        return ParsedWorkout(
            exercises=parts,
            workout_type="cardio" if has_distance else "strength",
            confidence=MULTI_CONFIDENCE,
        )

    cardio = parse_cardio(normalized)
    if cardio:
        return ParsedWorkout(exercises=[cardio], workout_type="cardio", confidence=SINGLE_CONFIDENCE)

    strength = parse_strength(normalized)
    if strength:
        return ParsedWorkout(exercises=[strength], workout_type="strength", confidence=SINGLE_CONFIDENCE)

    logger.debug(f"No exercise recognised in workout text ({len(normalized)} chars)")
    return None


def parse_cardio(text: str) -> Optional[ParsedExercise]:
    """Parse "ran 5k easy", "swam 1000m", "biked for 30 minutes" style text."""
    match = CARDIO_PATTERN.search(text)
    if not match:
        return None

    (activity, distance, distance_unit, clock_a, clock_b, clock_c,
     intensity_a, duration, duration_unit, intensity_b) = match.groups()

    activity = activity.lower()
    exercise = ParsedExercise(
        name=EXERCISE_ALIASES.get(activity, activity),
        type="distance",
    )

    if distance and distance_unit:
        exercise.distance_km = float(distance) * DISTANCE_UNITS.get(distance_unit.lower(), 1.0)

    if clock_a and clock_b:
        if clock_c:
            # H:MM:SS
            exercise.duration_seconds = int(clock_a) * 3600 + int(clock_b) * 60 + int(clock_c)
        else:
            # MM:SS
            exercise.duration_seconds = int(clock_a) * 60 + int(clock_b)
    elif duration and duration_unit:
        exercise.duration_seconds = _duration_to_seconds(int(duration), duration_unit.lower())

    intensity = intensity_a or intensity_b
    if intensity:
        exercise.intensity = intensity.lower()

    return exercise


def parse_strength(text: str) -> Optional[ParsedExercise]:
    """Parse "bench press 3x8 @ 135lbs", "squats 5x5 185", "dl 225lbs" style text."""
    match = STRENGTH_PATTERN.search(text)
    if not match:
        return None

    name, sets, reps, weight, weight_unit, single_weight, single_unit = match.groups()

    name = re.sub(r"\s+", " ", name.lower()).strip()
    exercise = ParsedExercise(name=EXERCISE_ALIASES.get(name, name), type="reps")

    if sets and reps:
        weight_kg = _weight_to_kg(weight, weight_unit) if weight else None
        exercise.sets = [
            ParsedSet(reps=int(reps), weight_kg=weight_kg)
            for _ in range(int(sets))
        ]
    elif single_weight:
        exercise.sets = [ParsedSet(weight_kg=_weight_to_kg(single_weight, single_unit))]

    return exercise


def extract_intensity(text: str) -> Optional[str]:
    """
    Find an intensity marker in text.

    Returns the first word marker present, else "RPE n", else "@n/10".
    """
    lower = text.lower()

    for marker in INTENSITY_MARKERS:
        if marker in lower:
            return marker

    rpe = RPE_PATTERN.search(lower)
    if rpe:
        return f"RPE {rpe.group(1)}"

    at_scale = AT_SCALE_PATTERN.search(lower)
    if at_scale:
        return f"@{at_scale.group(1)}/10"

    return None


def to_exercise_records(exercises: List[ParsedExercise]) -> List[Dict[str, Any]]:
    """Convert parsed exercises to the stored workout exercise shape."""
    records = []
    for exercise in exercises:
        records.append({
            "name": exercise.name,
            "type": exercise.type,
            "sets": [
                {
                    "reps": s.reps,
                    "weightKg": round(s.weight_kg, 2) if s.weight_kg is not None else None,
                    "durationSeconds": s.duration_seconds,
                    "completed": s.completed,
                }
                for s in exercise.sets
            ],
            "durationSeconds": exercise.duration_seconds,
            "distanceKm": round(exercise.distance_km, 3) if exercise.distance_km is not None else None,
            "notes": f"Intensity: {exercise.intensity}" if exercise.intensity else None,
        })
    return records


def _parse_parts(text: str) -> List[ParsedExercise]:
    exercises = []
    for part in SEPARATOR_PATTERN.split(text):
        part = part.strip()
        if not part:
            continue
        exercise = parse_cardio(part) or parse_strength(part)
        if exercise:
            exercises.append(exercise)
    return exercises


def _duration_to_seconds(value: int, unit: str) -> int:
    if unit.startswith("h"):
        return value * 3600
    if unit.startswith("m"):
        return value * 60
    return value


def _weight_to_kg(value: str, unit: Optional[str]) -> float:
    factor = WEIGHT_UNITS.get((unit or DEFAULT_WEIGHT_UNIT).lower(), WEIGHT_UNITS[DEFAULT_WEIGHT_UNIT])
    return float(value) * factor
