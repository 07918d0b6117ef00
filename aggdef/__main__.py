import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .compiler.compiler import AggregateCompiler
from .compiler.config import config
from .compiler.inventory import AggregateInventory, skips_inventory
from .emit import dump_yaml
from .errors import AggregateError

logger = logging.getLogger("aggdef.cli")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(handler)
log_level_str = os.environ.get("AGGDEF_DEBUG", "INFO").upper()
try:
    logger.setLevel(getattr(logging, log_level_str))
except AttributeError:
    logger.setLevel(logging.INFO)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aggdef",
        description="Compile aggregate declarations into generated functions and descriptors.",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    compile_cmd = sub.add_parser("compile", help="compile declaration files to YAML")
    compile_cmd.add_argument("files", nargs="+", help="declaration files")
    compile_cmd.add_argument("-o", "--output", help="write YAML here instead of stdout")
    compile_cmd.add_argument("--config", help="YAML configuration file")
    compile_cmd.add_argument("--progress", action="store_true", help="show a progress bar")
    compile_cmd.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def compile_files(files: List[str], progress: bool = False) -> tuple[AggregateInventory, int]:
    """Compile every declaration in `files`; returns the inventory and the failure count."""
    compiler = AggregateCompiler(cfg=config)
    inventory = AggregateInventory()
    failures = 0
    for path in tqdm(files, desc="compiling", unit="file", disable=not progress):
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot read {path}: {e}")
            failures += 1
            continue
        try:
            blocks = compiler.parser.parse(text, source=path)
        except AggregateError as e:
            logger.error(str(e))
            failures += 1
            continue
        result = compiler.compile_all(blocks)
        failures += len(result.failures)
        for compiled in result.compiled:
            if skips_inventory(compiled):
                logger.debug(f"Skipping {compiled.descriptor.name}, marked skip_inventory")
                continue
            try:
                inventory.submit(compiled)
            except AggregateError as e:
                logger.error(str(e))
                failures += 1
    return inventory, failures


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.verbose:
        for name in ("aggdef", "aggdef.cli", "aggdef.compiler", "aggdef.parser"):
            logging.getLogger(name).setLevel(logging.DEBUG)
    if args.config:
        config.load_from_file(args.config)

    inventory, failures = compile_files(args.files, progress=args.progress)
    text = dump_yaml(inventory.compiled(), config)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        logger.info(f"Wrote {len(inventory)} aggregate(s) to {args.output}")
    else:
        sys.stdout.write(text)

    if failures:
        logger.error(f"{failures} declaration(s) failed to compile")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
