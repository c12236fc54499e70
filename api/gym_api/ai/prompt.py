from ..models.plan import WellnessFormData

PLAN_TEMPLATE = """{
  "push_day": {
    "exercises": [
      { "name": "Barbell Bench Press", "sets": "4x8-10", "rest": "2-3 min" },
      { "name": "Incline Dumbbell Press", "sets": "4x10-12", "rest": "90 sec" },
      { "name": "Overhead Press", "sets": "4x8", "rest": "2 min" },
      { "name": "Triceps Pushdown", "sets": "3x12", "rest": "60 sec" }
    ]
  },
  "pull_day": {
    "exercises": [
      { "name": "Deadlift", "sets": "4x5", "rest": "3-4 min" },
      { "name": "Lat Pulldown", "sets": "4x10", "rest": "90 sec" },
      { "name": "Barbell Row", "sets": "4x8", "rest": "2 min" },
      { "name": "Bicep Curls", "sets": "3x12", "rest": "60 sec" }
    ]
  },
  "legs_day": {
    "exercises": [
      { "name": "Back Squat", "sets": "4x8", "rest": "3 min" },
      { "name": "Leg Press", "sets": "4x12", "rest": "2 min" },
      { "name": "Romanian Deadlift", "sets": "3x10", "rest": "2 min" },
      { "name": "Calf Raises", "sets": "3x20", "rest": "45 sec" }
    ]
  },
  "cardio_HIIT": {
    "routine": [
      "HIIT treadmill run - 20 mins (1 min sprint + 1 min walk)",
      "Jump rope - 5 rounds of 1 minute",
      "Burpees - 3 sets of 15"
    ],
    "weekly_frequency": "3x/week post workout"
  },
  "fst7_day": {
    "target_muscle": "Chest or Biceps (depending on goal)",
    "routine": [
      "Cable Fly (FST7) - 7 sets x 12 reps, 30 sec rest"
    ]
  },
  "diet_plan": {
    "type": "Indian __DIET__",
    "breakfast": [
      "Oats with almond milk, banana, and chia seeds",
      "Tofu or Paneer bhurji (Veg) / 3 boiled eggs + toast (Non-Veg)"
    ],
    "lunch": [
      "Brown rice, dal, sabzi, cucumber salad",
      "Grilled paneer or chicken breast"
    ],
    "snacks": [
      "Peanuts or sprouts chaat",
      "Black coffee or green tea"
    ],
    "dinner": [
      "Roti + sabzi + dal + salad",
      "Optional: Quinoa or daliya + curd"
    ]
  },
  "supplements": [
    "Creatine Monohydrate (5g post workout)",
    "Plant-based protein or Whey (depending on preference)"
  ],
  "additional_recommendations": [
    "Hydration: At least 3L of water daily",
    "Sleep: 7-8 hours minimum",
    "Track progress weekly"
  ]
}"""

GUIDELINES = [
    "Include popular Indian gym exercises and equipment commonly available",
    "Consider Indian dietary preferences and food availability",
    "Include traditional Indian foods like dal, roti, paneer, curd, etc.",
    "Adjust protein sources based on diet preference (veg/non-veg)",
    "Consider Indian lifestyle factors and workout timing",
    "Include cost-effective supplement recommendations",
    "Provide realistic rest periods and progression plans",
    "Consider Indian weather conditions for cardio recommendations",
    "Include Indian fitness culture elements like morning walks, yoga integration",
]


def _or(value, default: str) -> str:
    return default if value in (None, "") else str(value)


def build_plan_prompt(form: WellnessFormData) -> str:
    """Prompt asking for a gym workout and diet plan in a fixed JSON shape"""
    diet = _or(form.diet_preference, "flexible")

    details = "\n".join([
        f"- Name: {form.name}",
        f"- Age: {form.age}",
        f"- Gender: {_or(form.gender, 'not specified')}",
        f"- Height: {_or(form.height, 'not specified')} cm",
        f"- Weight: {_or(form.weight, 'not specified')} kg",
        f"- Fitness Goal: {form.fitness_goal}",
        f"- Lifestyle: {_or(form.lifestyle, 'not specified')}",
        f"- Medical Conditions: {_or(form.medical_conditions, 'none')}",
        f"- Diet Preference: {diet}",
    ])
    guidelines = "\n".join(f"- {line}" for line in GUIDELINES)

    return (
        "You are a professional fitness and nutrition coach. Based on the user's profile, "
        "generate a full **Indian gym-based workout and diet plan**, personalized to the given details.\n\n"
        f"User details:\n{details}\n\n"
        "Your response should be **structured in this exact JSON format**:\n\n"
        f"{PLAN_TEMPLATE.replace('__DIET__', diet)}\n\n"
        f"Guidelines for Indian fitness context:\n{guidelines}\n\n"
        "Please respond with only the JSON structure, no additional text."
    )
