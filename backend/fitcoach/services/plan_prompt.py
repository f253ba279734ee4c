"""Prompt construction for weekly plan generation."""

from dataclasses import dataclass, field
from typing import List, Optional

from fitcoach.config import FrequencyRange


@dataclass
class GenerationRequest:
    """Everything the generation service is told about the user and last week."""

    goals: str
    experience: str
    activity_level: str
    training_location: str
    frequency: FrequencyRange
    exercise_catalog: List[str]
    preferred_training_days: List[str] = field(default_factory=list)
    weight: Optional[float] = None
    height: Optional[float] = None
    wants_pre_workout_info: bool = False
    performance_text: str = ""
    condition_text: str = ""
    has_history: bool = False


OUTPUT_STRUCTURE = """{
  "planName": "string", // A suggested name for the training plan
  "description": "string", // A brief description of the plan and of the adjustments made based on last week
  "sessions": [
    {
      "day": "string", // "Monday", "Tuesday", ... "Sunday"
      "name": "string", // e.g. "Upper Body Workout", "Cardio Session", "Rest Day"
      "exercises": [ // Empty for a Rest Day
        {
          "exerciseName": "string", // EXACT name from the available list
          "sets": "number | string | null", // e.g. 3, "3-4", null for cardio
          "reps": "number | string | null", // e.g. 10, "8-12", null for timed
          "weight": "number | string | null", // e.g. 20, "Bodyweight", "Adjust as needed"
          "duration": "number | null", // seconds, for timed exercises
          "rest": "number | null", // rest in seconds after each set
          "notes": "string | null"
        }
      ],
      "notes": "string | null" // warm-up, cool-down, pre-workout info, session focus
    }
    // exactly 7 entries, one per day of the week
  ]
}"""

ADAPTATION_RULES = """- Adaptation: critically analyze the "Previous Week Analysis" and adjust the plan accordingly.
  - If performance was strong on an exercise, consider slightly increasing weight, reps or sets.
  - If performance was weak or an exercise was skipped often, reduce the load or suggest an easier variation or an alternative from the list.
  - If daily conditions (energy, stress, sleep, soreness) were poor, schedule more rest days and lower intensity sessions.
  - If daily conditions were good, the user can handle higher volume or intensity."""


def _or_na(value) -> str:
    return "N/A" if value in (None, "") else str(value)


def render_prompt(request: GenerationRequest) -> str:
    """Render the full generation prompt as plain text."""
    preferred = ", ".join(request.preferred_training_days) if request.preferred_training_days else "Any"

    sections = [
        "Generate a 1-week personalized training plan in JSON format for the upcoming week.",
        "",
        "User Profile:",
        f"- Goal: {request.goals}",
        f"- Experience Level: {request.experience}",
        f"- Activity Level: {request.activity_level}",
        f"- Training Location: {request.training_location}",
        f"- Preferred Training Days: {preferred}",
        f"- Weight: {_or_na(request.weight)} kg",
        f"- Height: {_or_na(request.height)} cm",
        f"- Wants Pre-Workout Info: {'Yes' if request.wants_pre_workout_info else 'No'}",
        "",
        "Previous Week Analysis:",
        "--- Performance Summary ---",
        request.performance_text if request.has_history else "No previous plan. This is the user's first week.",
        "--- Daily Condition Summary ---",
        request.condition_text if request.has_history else "No condition data yet.",
        "",
        "Plan Requirements for the Upcoming Week:",
        "- Duration: 1 week, starting from the plan start date, with exactly one entry per day of the week.",
        (
            f"- Frequency: schedule between {request.frequency.min} and {request.frequency.max} training "
            f"sessions, appropriate for the activity level ({request.activity_level}). "
            "Prioritize preferred days if specified. The remaining days are Rest Days with no exercises."
        ),
        "- Session Duration: suggest an appropriate duration for each session (e.g. 30-60 minutes).",
        (
            f"- Focus: align structure, exercise selection, sets, reps and rest periods with the primary goal "
            f"({request.goals}) and experience level ({request.experience})."
        ),
        ADAPTATION_RULES,
        "- Exercises: ONLY use exercises from the list below, with their EXACT name.",
        "- Pre-Workout Notes: if the user wants pre-workout info, start each session's notes with a brief suggestion.",
        "",
        "Available Exercises (Name, Target Muscle, Body Part, Equipment, Secondary Muscles):",
        "\n".join(request.exercise_catalog),
        "",
        "JSON Output Structure:",
        OUTPUT_STRUCTURE,
        "",
        "Ensure the output is valid JSON and contains ONLY the JSON object, with no text before or after it.",
    ]
    return "\n".join(sections)
