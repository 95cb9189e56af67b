from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence, Tuple

from preproc.build import linearize
from preproc.constants import JOIN_SEPARATOR
from preproc.core.errors import BuildError
from preproc.core.report import BuildReport, StageTimer
from preproc.deps import create_depfile, generate_deptree
from preproc.io.filesystem import FilesystemFetcher
from preproc.logging.factory import DefaultLoggerFactory
from preproc.logging.helpers import get_logger, log_build_error
from preproc.parsing.comment_parser import CommentParser
from preproc.parsing.parser import _build_parser
from preproc.runtime.config import BuildConfig, ConfigError


logger = get_logger('preproc')


def _configure_logging(cfg: BuildConfig) -> None:
    """Configure process-wide logging once, either JSON or plain text."""
    global logger
    logger = DefaultLoggerFactory.from_config(cfg).get_logger('preproc')


def _stage(path: Path, text: str) -> str:
    """Write *text* to a temp file next to *path* and return the temp file's name."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=f'.{path.name}.', dir=str(path.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as fp:
            fp.write(text)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    return tmp


def _write_all(files: Sequence[Tuple[Path, str]]) -> None:
    """Stage every file, then move them into place in order.

    If any staging or move fails, the remaining temp files are removed and
    the error propagates. Files are committed in the order given.
    """
    staged: List[Tuple[str, Path]] = []
    try:
        for path, text in files:
            staged.append((_stage(path, text), path))
        for tmp, path in staged:
            os.replace(tmp, path)
    except BaseException:
        for tmp, _ in staged:
            Path(tmp).unlink(missing_ok=True)
        raise


def _write_atomic(path: Path, text: str) -> None:
    _write_all([(path, text)])


class Preproc:
    """Top-level façade for command-style execution."""

    @staticmethod
    def run(argv: Sequence[str], *, env: Optional[dict] = None) -> str:
        """Run the tool with an argv-like sequence and return the generated text.

        Nothing is written unless the whole build succeeds.
        """
        ns = _build_parser().parse_args(list(argv))
        cfg = BuildConfig.from_namespace(ns, env)
        _configure_logging(cfg)

        fetcher = FilesystemFetcher(cfg.search_paths, logger=get_logger('io.filesystem'))
        parser = CommentParser(cfg.comment)
        report = BuildReport(root=cfg.file, output=str(cfg.output))

        try:
            with StageTimer(report, 'deptree'):
                _, tree = generate_deptree(
                    cfg.file, fetcher, parser, max_depth=cfg.max_depth, report=report
                )
            with StageTimer(report, 'build'):
                lines = linearize(tree, inline=cfg.inline)
                text = JOIN_SEPARATOR.join(lines)
            report.lines_emitted = len(lines)

            # Depfile is committed before the output.
            outputs: List[Tuple[Path, str]] = []
            if cfg.depfile is not None:
                outputs.append((cfg.depfile, create_depfile(str(cfg.output), tree, root=Path.cwd())))
            outputs.append((cfg.output, text))
            with StageTimer(report, 'write'):
                _write_all(outputs)
        except BuildError as exc:
            report.add_error(str(exc))
            raise
        finally:
            report.finish()
            if cfg.report is not None:
                _write_atomic(cfg.report, report.to_json())

        for name in tree:
            logger.info('processed %s', name)
        if cfg.depfile is not None:
            logger.info('wrote dependencies to %s', cfg.depfile)
        logger.info('wrote to %s', cfg.output)
        return text


def main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """Entry point for `preproc` and `python -m preproc`."""
    try:
        Preproc.run(sys.argv[1:] if argv is None else argv)
        raise SystemExit(0)
    except KeyboardInterrupt:
        logger.error('Interrupted by user.')
        raise SystemExit(130)
    except BrokenPipeError:
        raise SystemExit(0)
    except BuildError as exc:
        log_build_error(logger, exc)
        raise SystemExit(1)
    except ConfigError as exc:
        logger.error('invalid configuration: %s', exc)
        raise SystemExit(2)
    except OSError as exc:
        logger.error('failed to write file: %s', exc)
        raise SystemExit(1)
    except Exception as exc:
        if os.getenv('DEBUG') == '1':
            raise
        logger.error('Unexpected error: %s', exc)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
