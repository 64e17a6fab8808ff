import re

# ---------- REGEXES ----------
# building blocks

LETTERS = "ABCDEF"
LETTER_STR = r"[A-Fa-f]"                 # option label letter A-F
LABEL_SEP_STR = r"\s*[:.)\-]\s*"         # "A:", "B.", "C)", "D -"

# Leading option label: "B) Paris" -> group(1) == "Paris"
OPTION_LABEL_RE = re.compile(
    rf"""^\s*
        {LETTER_STR}            # label letter
        {LABEL_SEP_STR}         # separator with optional spaces
        (.*)$                   # option text -> group(1)
    """,
    re.VERBOSE | re.DOTALL,
)

# A bare answer letter: "c" or " B "
ANSWER_LETTER_RE = re.compile(rf"^\s*({LETTER_STR})\s*$")

# Question set files served from the public directory
QUESTION_SET_FILE_RE = re.compile(r"Questions\.json$", re.IGNORECASE)

JSON_SUFFIX_RE = re.compile(r"\.json$", re.IGNORECASE)

# Numeric ?session= value; anything else is a filename
SESSION_INDEX_RE = re.compile(r"^\d+$")
