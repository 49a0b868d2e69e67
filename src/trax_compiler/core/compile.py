import logging
from pathlib import Path

from trax_compiler.core.config import get_output_suffix
from trax_compiler.core.generator import generate
from trax_compiler.core.languages import is_source_path, resolve_language
from trax_compiler.models import CompileResult

logger = logging.getLogger(__name__)


def default_output_path(source_path: Path, suffix: str | None = None) -> Path:
    """``address.ts`` -> ``address.trax.ts`` (suffix from ``TRAX_OUTPUT_SUFFIX``)."""
    suffix = get_output_suffix() if suffix is None else suffix
    if not suffix.strip():
        raise ValueError("Output suffix must not be empty")
    return source_path.with_name(f"{source_path.stem}{suffix}{source_path.suffix}")


def is_generated_path(path: Path, suffix: str | None = None) -> bool:
    suffix = get_output_suffix() if suffix is None else suffix
    return bool(suffix) and path.stem.endswith(suffix)


def compile_source(code: str, file_path: str = "<memory>.ts", language: str | None = None) -> str:
    source_path = Path(file_path)
    resolved_language = resolve_language(language, source_path if is_source_path(source_path) else None)
    return generate(code, file_path, resolved_language)


def compile_file(
    path: str,
    output: str | None = None,
    language: str | None = None,
    write: bool = True,
) -> tuple[CompileResult, str]:
    """Compile one unit from disk.

    Returns the result summary and the generated text. The text is written to
    ``output`` (or the default output path) unless ``write`` is false.
    """
    source_path = Path(path)
    resolved_language = resolve_language(language, source_path)

    try:
        src = source_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    output_path: Path | None = None
    if write:
        output_path = Path(output) if output else default_output_path(source_path)
        if output_path.resolve() == source_path.resolve():
            raise ValueError(f"Output path must differ from the source file: {path}")

    generated = generate(src, str(source_path), resolved_language)

    if output_path is not None:
        output_path.write_text(generated, encoding="utf-8")
        logger.info("Wrote %s", output_path)

    result = CompileResult(
        source_path=str(source_path),
        output_path=str(output_path) if output_path else None,
        language=resolved_language,
        changed=generated != src,
    )
    return result, generated
