"""Garden progression and mood escalation constants."""

from __future__ import annotations

# XP per event kind
XP_MEDICATION = 20
XP_ACTIVITY = 30
XP_TASK_EMOTION_CHECK = 15
XP_DAILY_MOOD_SUBMIT = 5

# Cumulative XP needed to reach each plant stage
STAGE_THRESHOLDS = {
    "SEED": 0,
    "SPROUT": 100,
    "PLANT": 300,
    "FLOWER": 600,
}

# Daily check-in: consecutive BAD days before each prompt
MOTIVATIONAL_AFTER_BAD_DAYS = 2
EMERGENCY_AFTER_BAD_DAYS = 3

# EMOTION_CHECK tasks: previous completed tasks inspected for "mal"
TASK_MOOD_LOOKBACK = 2
TASK_MOTIVATIONAL_COUNT = 2
TASK_EMERGENCY_COUNT = 3

# Consecutive GOOD check-ins after an emergency request that clear the alert
RECOVERY_GOOD_RUN = 2
