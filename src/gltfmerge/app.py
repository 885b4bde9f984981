from __future__ import annotations
import argparse

from .config import MergeConfig
from .document import load_document, save_document
from .errors import MergeError
from .logging import get_logger, setup_logging
from .merge import MERGERS

DESCRIPTIONS = {
    "mesh": "Attach the mesh in SECONDARY to the document PRIMARY.",
    "anim": "Retarget the animations in SECONDARY onto the bones of PRIMARY.",
}


def _add_common_args(p: argparse.ArgumentParser):
    p.add_argument("primary", help="Base glTF document (.gltf or .glb).")
    p.add_argument("secondary", help="Document merged into the base.")
    p.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Where to write the merged .gltf. Default: from config (merged.gltf).",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        help="Fail instead of dropping unnamed nodes or unmatched channels.",
    )
    p.add_argument(
        "--scene",
        type=int,
        default=None,
        help="Scene receiving the attachment node (mesh merge). Default: 0.",
    )
    p.add_argument(
        "--attachment-name",
        type=str,
        default=None,
        help="Name given to the attachment node (mesh merge).",
    )
    p.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Minimum log level. Default: from config.",
    )
    p.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Log to a file instead of the console.",
    )
    p.set_defaults(strict=False)


def build_parser(mode: str | None = None) -> argparse.ArgumentParser:
    if mode is not None:
        p = argparse.ArgumentParser(description=DESCRIPTIONS[mode])
        _add_common_args(p)
        p.set_defaults(mode=mode)
        return p

    p = argparse.ArgumentParser(description="Merge two glTF documents")
    sub = p.add_subparsers(dest="mode", required=True)
    for name, description in DESCRIPTIONS.items():
        _add_common_args(sub.add_parser(name, help=description))
    return p


def config_from_args(args) -> MergeConfig:
    cfg = MergeConfig()
    if args.output is not None:
        cfg.output = args.output
    if args.strict:
        cfg.strict = True
    if args.scene is not None:
        cfg.scene_index = args.scene
    if args.attachment_name is not None:
        cfg.attachment_name = args.attachment_name
    if args.log_level is not None:
        cfg.log_level = args.log_level
    if args.log_file is not None:
        cfg.log_file = args.log_file
    return cfg


def main(argv=None, mode: str | None = None) -> int:
    # --- CLI ---
    args = build_parser(mode).parse_args(argv)

    # --- config ---
    cfg = config_from_args(args)

    # --- logging ---
    setup_logging(cfg.log_level, cfg.log_file)
    logger = get_logger(__name__)

    # --- merge ---
    try:
        primary = load_document(args.primary)
        secondary = load_document(args.secondary)
        result = MERGERS[args.mode](primary, secondary, cfg)
        save_document(result.document, cfg.output)
    except (MergeError, OSError) as e:
        logger.error(f"Merge failed, nothing written: {e}")
        return 1

    if not result.report.clean:
        logger.warning(f"Merged with omissions: {result.report.summary()}")
    return 0


def mesh_main(argv=None) -> int:
    return main(argv, mode="mesh")


def anim_main(argv=None) -> int:
    return main(argv, mode="anim")
