"""Load a starter exercise catalog (skips exercises that already exist)."""
import argparse
import json

from fitcoach.database import Base, SessionLocal, engine
from fitcoach.models import Exercise

# name, target muscle, body part, equipment, secondary muscles
STARTER_CATALOG = [
    ("Push-up", "pectorals", "chest", "body weight", ["triceps", "shoulders"]),
    ("Squat", "glutes", "upper legs", "body weight", ["quadriceps", "hamstrings"]),
    ("Lunge", "quads", "upper legs", "body weight", ["glutes", "hamstrings"]),
    ("Plank", "abs", "waist", "body weight", ["obliques", "lower back"]),
    ("Burpee", "cardiovascular system", "cardio", "body weight", ["quadriceps", "chest"]),
    ("Mountain Climber", "cardiovascular system", "cardio", "body weight", ["abs", "shoulders"]),
    ("Glute Bridge", "glutes", "upper legs", "body weight", ["hamstrings"]),
    ("Jumping Jack", "cardiovascular system", "cardio", "body weight", ["calves"]),
    ("Dumbbell Bench Press", "pectorals", "chest", "dumbbell", ["triceps", "shoulders"]),
    ("Dumbbell Bent Over Row", "upper back", "back", "dumbbell", ["biceps", "rear deltoids"]),
    ("Dumbbell Shoulder Press", "delts", "shoulders", "dumbbell", ["triceps"]),
    ("Dumbbell Goblet Squat", "quads", "upper legs", "dumbbell", ["glutes", "core"]),
    ("Dumbbell Romanian Deadlift", "hamstrings", "upper legs", "dumbbell", ["glutes", "lower back"]),
    ("Dumbbell Biceps Curl", "biceps", "upper arms", "dumbbell", ["forearms"]),
    ("Kettlebell Swing", "glutes", "upper legs", "kettlebell", ["hamstrings", "lower back"]),
    ("Band Pull Apart", "upper back", "back", "band", ["rear deltoids"]),
    ("Resistance Band Row", "lats", "back", "resistance band", ["biceps"]),
    ("Stability Ball Crunch", "abs", "waist", "stability ball", ["obliques"]),
    ("Assisted Pull-up", "lats", "back", "assisted", ["biceps", "forearms"]),
    ("Barbell Back Squat", "glutes", "upper legs", "barbell", ["quadriceps", "hamstrings", "lower back"]),
    ("Barbell Bench Press", "pectorals", "chest", "barbell", ["triceps", "shoulders"]),
    ("Barbell Deadlift", "glutes", "upper legs", "barbell", ["hamstrings", "lower back"]),
    ("Barbell Overhead Press", "delts", "shoulders", "barbell", ["triceps", "upper back"]),
    ("Cable Lat Pulldown", "lats", "back", "cable", ["biceps"]),
    ("Cable Seated Row", "upper back", "back", "cable", ["biceps", "lats"]),
    ("Cable Triceps Pushdown", "triceps", "upper arms", "cable", []),
    ("Leverage Leg Press", "quads", "upper legs", "leverage machine", ["glutes", "hamstrings"]),
    ("Smith Machine Squat", "quads", "upper legs", "smith machine", ["glutes"]),
    ("Trap Bar Deadlift", "glutes", "upper legs", "trap bar", ["quadriceps", "hamstrings"]),
    ("Stationary Bike Ride", "cardiovascular system", "cardio", "stationary bike", ["quadriceps"]),
    ("Elliptical Machine Walk", "cardiovascular system", "cardio", "elliptical machine", ["glutes"]),
    ("Walking High Knees", "cardiovascular system", "cardio", "none", ["hip flexors"]),
]


def load_catalog(path):
    """Read a JSON list of exercises shaped like the ExerciseDB export."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    return [
        (
            item["name"],
            item.get("target"),
            item.get("bodyPart"),
            item.get("equipment"),
            item.get("secondaryMuscles") or [],
        )
        for item in data
    ]


def seed_exercises(catalog):
    """Insert every catalog entry whose (name, equipment) pair is not stored yet."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing = {
            (name.lower(), (equipment or "").lower())
            for name, equipment in db.query(Exercise.name, Exercise.equipment).all()
        }
        added = 0
        for name, target, body_part, equipment, secondary in catalog:
            key = (name.lower(), (equipment or "").lower())
            if key in existing:
                continue
            db.add(
                Exercise(
                    name=name,
                    target_muscle=target,
                    body_part=body_part,
                    equipment=equipment,
                    secondary_muscles=list(secondary),
                )
            )
            existing.add(key)
            added += 1
        db.commit()
        print(f"Seeding complete: {added} exercises added, {len(catalog) - added} already present.")
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--file", help="JSON file with exercises (defaults to the built-in starter list)")
    args = parser.parse_args()
    seed_exercises(load_catalog(args.file) if args.file else STARTER_CATALOG)
