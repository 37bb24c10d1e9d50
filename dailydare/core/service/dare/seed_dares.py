"""Master list of catalog dares written by the seeding routine."""

from typing import Any, Dict, List

# Max daily score potential is 300 points (50 + 100 + 150)
INITIAL_DARES: List[Dict[str, Any]] = [
    # --- EASY (50 points) ---
    {
        "title": "Compliment a Stranger",
        "description": "Give a genuine, specific compliment to a complete stranger today.",
        "points": 50,
        "difficulty": "Easy",
        "tags": ["Social", "Positive"],
        "proof_required": False,
    },
    {
        "title": "Eat a Veggie",
        "description": "Eat a vegetable you haven't had in the last week. No excuses!",
        "points": 50,
        "difficulty": "Easy",
        "tags": ["Health", "Food"],
        "proof_required": False,
    },
    {
        "title": "5-Minute Plank Challenge",
        "description": "Hold a plank for a total of 5 minutes (can be broken up into multiple sets).",
        "points": 50,
        "difficulty": "Easy",
        "tags": ["Fitness", "Endurance"],
        "proof_required": True,
    },
    {
        "title": "Doodle Your Lunch",
        "description": "Sketch whatever you ate for lunch today, however badly.",
        "points": 50,
        "difficulty": "Easy",
        "tags": ["Creative", "Food"],
        "proof_required": True,
    },
    {
        "title": "Screen-Free Walk",
        "description": "Take a 15 minute walk without looking at your phone once.",
        "points": 50,
        "difficulty": "Easy",
        "tags": ["Fitness", "Mindfulness"],
        "proof_required": False,
    },

    # --- MEDIUM (100 points) ---
    {
        "title": "Learn a Fun Fact",
        "description": "Spend 10 minutes researching a topic you know nothing about and teach a friend one fact.",
        "points": 100,
        "difficulty": "Medium",
        "tags": ["Knowledge", "Social"],
        "proof_required": False,
    },
    {
        "title": "Zero Waste Coffee Run",
        "description": "Buy a coffee using only your own reusable mug. No disposable cups!",
        "points": 100,
        "difficulty": "Medium",
        "tags": ["Environment", "Habit"],
        "proof_required": True,
    },
    {
        "title": "Cook Something New",
        "description": "Cook a recipe you have never made before, start to finish.",
        "points": 100,
        "difficulty": "Medium",
        "tags": ["Creative", "Food"],
        "proof_required": True,
    },
    {
        "title": "Call, Don't Text",
        "description": "Phone a friend or relative you usually only message and talk for 10 minutes.",
        "points": 100,
        "difficulty": "Medium",
        "tags": ["Social", "Positive"],
        "proof_required": False,
    },
    {
        "title": "100 Squats",
        "description": "Do 100 bodyweight squats before the end of the day.",
        "points": 100,
        "difficulty": "Medium",
        "tags": ["Fitness", "Endurance"],
        "proof_required": True,
    },

    # --- HARD (150 points) ---
    {
        "title": "Cold Shower Shock",
        "description": "Take a full 3-minute cold shower. Completely cold water, no turning it warm!",
        "points": 150,
        "difficulty": "Hard",
        "tags": ["Discomfort", "Mental"],
        "proof_required": True,
    },
    {
        "title": "Sing in Public",
        "description": "Sing one full chorus of a song somewhere other people can hear you.",
        "points": 150,
        "difficulty": "Hard",
        "tags": ["Social", "Discomfort"],
        "proof_required": True,
    },
    {
        "title": "Sunrise Run",
        "description": "Be outside and running before sunrise. At least 3 km.",
        "points": 150,
        "difficulty": "Hard",
        "tags": ["Fitness", "Habit"],
        "proof_required": True,
    },
    {
        "title": "Digital Detox Evening",
        "description": "No phone, laptop or TV from 6pm until bedtime.",
        "points": 150,
        "difficulty": "Hard",
        "tags": ["Mindfulness", "Mental"],
        "proof_required": False,
    },
    {
        "title": "Make Something for a Stranger",
        "description": "Draw, write or bake something and give it to someone you don't know.",
        "points": 150,
        "difficulty": "Hard",
        "tags": ["Creative", "Social"],
        "proof_required": True,
    },
]

EXPECTED_DARE_COUNT = len(INITIAL_DARES)
