import os

DEFAULT_OUTPUT_SUFFIX = ".trax"
DEFAULT_LOG_LEVEL = "WARNING"


def get_output_suffix() -> str:
    suffix = os.getenv("TRAX_OUTPUT_SUFFIX", DEFAULT_OUTPUT_SUFFIX)
    # an empty suffix would make the output path the source path
    if not suffix.strip():
        raise ValueError("TRAX_OUTPUT_SUFFIX must not be empty")
    return suffix


def get_log_level() -> str:
    return os.getenv("TRAX_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
