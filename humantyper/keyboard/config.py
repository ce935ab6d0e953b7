from __future__ import annotations


class kcfg:
    # Speed (5 chars = 1 word)
    CHARS_PER_WORD = 5.0
    WPM_MIN = 5.0
    WPM_MAX = 300.0
    JITTER_MAX = 0.8

    # Characters that earn extra pauses
    SENTENCE_PUNCT = ".!?"
    CLAUSE_PUNCT = ",;:"

    # Fixed pauses (not user-tunable)
    CLAUSE_PUNCT_PAUSE = (0.12, 0.26)
    NEWLINE_FALLBACK_PAUSE = (0.18, 0.35)

    # Every sleep is at least this long so the loop always makes progress
    MIN_CHAR_DELAY_S = 0.001

    # Request defaults
    DEFAULT_WPM = 55.0
    DEFAULT_JITTER = 0.40
    DEFAULT_SPACE_PAUSE = (0.05, 0.15)
    DEFAULT_PUNCT_PAUSE = (0.28, 0.55)
    DEFAULT_PARAGRAPH_PAUSE = (0.35, 0.70)
    DEFAULT_COUNTDOWN_S = 5

    # Countdown cadence
    COUNTDOWN_TICK_S = 1.0

    # Timeout for CDP operations (keep input sends from blocking the loop)
    CDP_SEND_TIMEOUT_S = 0.35
