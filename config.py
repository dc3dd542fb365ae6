# config.py
# Environment driven settings for the solver, CLI and step viewer

import os

# ======= Logging =======
LOG_LEVEL = os.getenv("DLX_LOG_LEVEL", "WARNING")
LOG_FILE  = os.getenv("DLX_LOG_FILE", "")

# ======= Search =======
# Extra frames on top of the column count when raising the recursion limit.
RECURSION_HEADROOM = int(os.getenv("DLX_RECURSION_HEADROOM", "100"))
# Log a progress line every N solutions (0 disables).
PROGRESS_EVERY     = int(os.getenv("DLX_PROGRESS_EVERY", "0"))

# ======= Step viewer =======
VIEW_MAX_STEPS  = int(os.getenv("DLX_VIEW_MAX_STEPS", "20000"))
VIEW_STEP_DELAY = float(os.getenv("DLX_VIEW_STEP_DELAY", "0.1"))
VIEW_WIDTH      = int(os.getenv("DLX_VIEW_WIDTH", "1100"))
VIEW_HEIGHT     = int(os.getenv("DLX_VIEW_HEIGHT", "760"))


class CFG:
    LOG_LEVEL = LOG_LEVEL
    LOG_FILE  = LOG_FILE

    RECURSION_HEADROOM = RECURSION_HEADROOM
    PROGRESS_EVERY     = PROGRESS_EVERY

    VIEW_MAX_STEPS  = VIEW_MAX_STEPS
    VIEW_STEP_DELAY = VIEW_STEP_DELAY
    VIEW_WIDTH      = VIEW_WIDTH
    VIEW_HEIGHT     = VIEW_HEIGHT


__all__ = ["CFG"]
