"""
Command-line front end for the SipScribe tasting journal.

Usage
─────
  python main.py add --type wine --name "Château Margaux 2015" \\
      --aroma 9 --palate 8 --finish 9 --vintage 2015 --region Bordeaux
  python main.py list --type whisky
  python main.py show <ID>
  python main.py edit <ID> --palate 7
  python main.py delete <ID>
  python main.py export --output ~/backups
  python main.py import sipscribe-export-2025-01-31.json

Subcommands are plain functions taking the parsed namespace so they can be
tested without a subprocess.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from sipscribe.config import Settings, get_settings
from sipscribe.db import setup_db
from sipscribe.exceptions import SipScribeError
from sipscribe.image_utils import data_url_to_bytes, image_to_data_url
from sipscribe.interchange import export_tastings, import_tastings
from sipscribe.models import MASH_BILL_GRAINS, BeverageType, Tasting
from sipscribe.records import (
    add_tasting,
    delete_tasting,
    get_tasting,
    list_all,
    list_by_type,
    overall_score,
    update_tasting,
)

logger = logging.getLogger(__name__)

BEVERAGE_CHOICES = [b.value for b in BeverageType]

# CLI option dest -> Tasting attribute
TEXT_OPTIONS: Dict[str, str] = {
    "name": "name",
    "nose": "nose_notes",
    "palate_notes": "palate_notes",
    "finish_notes": "finish_notes",
    "color": "color_notes",
    "pairing": "pairing_suggestions",
    "varietal": "varietal",
    "region": "region",
    "distillery": "distillery",
}
INT_OPTIONS: Dict[str, str] = {
    "vintage": "vintage",
    "age": "age_statement",
}
SCORE_OPTIONS: Dict[str, str] = {
    "aroma": "aroma_score",
    "palate": "palate_score",
    "finish": "finish_score",
}


# ── Rendering ─────────────────────────────────────────────────────────────────

def short_row(t: Tasting) -> str:
    return f"{t.id}  {t.title}  ⭐ {t.overall_score:.1f}"


def build_card_text(t: Tasting) -> str:
    lines = [t.title]
    lines.append(f"⭐ Overall: {t.overall_score:.1f}/10")
    lines.append(
        f"  ▫️ aroma {t.aroma_score}/10, palate {t.palate_score}/10, "
        f"finish {t.finish_score}/10"
    )
    if t.varietal:
        lines.append(f"🍇 Varietal: {t.varietal}")
    if t.mash_bill:
        grains = [
            f"{grain} {t.mash_bill[grain]}%"
            for grain in MASH_BILL_GRAINS
            if t.mash_bill.get(grain)
        ]
        if grains:
            lines.append(f"🌾 Mash bill: {', '.join(grains)}")

    if t.color_notes:
        lines.append(f"🎨 Color: {t.color_notes}")
    if t.nose_notes:
        lines.append(f"👃 Nose: {t.nose_notes}")
    if t.palate_notes:
        lines.append(f"👅 Palate: {t.palate_notes}")
    if t.finish_notes:
        lines.append(f"🏁 Finish: {t.finish_notes}")
    if t.pairing_suggestions:
        lines.append(f"🍽️ Pairing: {t.pairing_suggestions}")
    if t.image_base64:
        lines.append("📷 Image attached")

    lines.append(f"🕒 Added {t.created_at}, updated {t.updated_at}")
    return "\n".join(lines)


# ── Argument parser ───────────────────────────────────────────────────────────

def _add_field_options(p: argparse.ArgumentParser, editing: bool) -> None:
    p.add_argument("--type", choices=BEVERAGE_CHOICES, default=None if editing else "wine")
    p.add_argument("--name", required=not editing, default=None)
    text_default = None if editing else ""
    p.add_argument("--nose", default=text_default, help="Nose notes")
    p.add_argument("--palate-notes", dest="palate_notes", default=text_default)
    p.add_argument("--finish-notes", dest="finish_notes", default=text_default)
    p.add_argument("--color", default=text_default, help="Color notes")
    p.add_argument("--pairing", default=text_default, help="Pairing suggestions")

    score_default = None if editing else 5
    for opt in SCORE_OPTIONS:
        p.add_argument(f"--{opt}", type=int, default=score_default, metavar="1-10")

    wine = p.add_argument_group("wine")
    wine.add_argument("--vintage", type=int, default=None)
    wine.add_argument("--varietal", default=None)
    wine.add_argument("--region", default=None)

    whisky = p.add_argument_group("whisky")
    whisky.add_argument("--distillery", default=None)
    whisky.add_argument("--age", type=int, default=None, help="Age statement in years")
    for grain in MASH_BILL_GRAINS:
        whisky.add_argument(f"--{grain}", type=float, default=None, metavar="PCT")

    p.add_argument("--image", default=None, metavar="PATH", help="Attach a picture")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sipscribe",
        description="Personal wine and whisky tasting journal",
    )
    parser.add_argument("--db", default=None, metavar="URL", help="SQLAlchemy database URL")
    parser.add_argument("--debug", action="store_true", default=False, help="Verbose logging")

    sub = parser.add_subparsers(dest="subcommand")

    lst = sub.add_parser("list", help="List tastings, newest first")
    lst.add_argument("--type", choices=BEVERAGE_CHOICES, default=None)

    show = sub.add_parser("show", help="Show one tasting")
    show.add_argument("id")
    show.add_argument("--save-image", dest="save_image", default=None, metavar="PATH")

    add = sub.add_parser("add", help="Add a tasting")
    _add_field_options(add, editing=False)

    edit = sub.add_parser("edit", help="Edit a tasting")
    edit.add_argument("id")
    _add_field_options(edit, editing=True)

    rm = sub.add_parser("delete", help="Delete a tasting")
    rm.add_argument("id")

    exp = sub.add_parser("export", help="Export all tastings to a JSON file")
    exp.add_argument("--output", default=None, metavar="DIR")

    imp = sub.add_parser("import", help="Merge tastings from an export file")
    imp.add_argument("file")

    return parser


def _collect_fields(args: argparse.Namespace, cfg: Settings) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if args.type is not None:
        fields["type"] = args.type
    for opt, attr in {**TEXT_OPTIONS, **INT_OPTIONS, **SCORE_OPTIONS}.items():
        value = getattr(args, opt)
        if value is not None:
            fields[attr] = value
    mash_bill = {g: getattr(args, g) for g in MASH_BILL_GRAINS if getattr(args, g) is not None}
    if mash_bill:
        fields["mash_bill"] = mash_bill
    if args.image:
        fields["image_base64"] = image_to_data_url(args.image, max_width=cfg.image_max_width)
    return fields


# ── Subcommands ───────────────────────────────────────────────────────────────

def cmd_list(args: argparse.Namespace, cfg: Settings) -> int:
    tastings = list_by_type(args.type) if args.type else list_all()
    if not tastings:
        print("No tastings yet.")
        return 0
    for t in tastings:
        print(short_row(t))
    return 0


def cmd_show(args: argparse.Namespace, cfg: Settings) -> int:
    t = get_tasting(args.id)
    if t is None:
        print(f"Tasting {args.id} not found.", file=sys.stderr)
        return 1
    print(build_card_text(t))
    if args.save_image:
        if not t.image_base64:
            print("This tasting has no image.", file=sys.stderr)
            return 1
        Path(args.save_image).expanduser().write_bytes(data_url_to_bytes(t.image_base64))
        print(f"Image saved to {args.save_image}")
    return 0


def cmd_add(args: argparse.Namespace, cfg: Settings) -> int:
    fields = _collect_fields(args, cfg)
    fields["overall_score"] = overall_score(
        fields["aroma_score"], fields["palate_score"], fields["finish_score"]
    )
    t = add_tasting(**fields)
    print(build_card_text(t))
    print(f"Saved as {t.id}")
    return 0


def cmd_edit(args: argparse.Namespace, cfg: Settings) -> int:
    t = get_tasting(args.id)
    if t is None:
        print(f"Tasting {args.id} not found.", file=sys.stderr)
        return 1
    fields = _collect_fields(args, cfg)
    if not fields:
        print("Nothing to change.")
        return 0
    if any(attr in fields for attr in SCORE_OPTIONS.values()):
        fields["overall_score"] = overall_score(
            fields.get("aroma_score", t.aroma_score),
            fields.get("palate_score", t.palate_score),
            fields.get("finish_score", t.finish_score),
        )
    update_tasting(args.id, **fields)
    print(build_card_text(get_tasting(args.id)))
    return 0


def cmd_delete(args: argparse.Namespace, cfg: Settings) -> int:
    delete_tasting(args.id)
    print("Deleted.")
    return 0


def cmd_export(args: argparse.Namespace, cfg: Settings) -> int:
    path = export_tastings(args.output or cfg.export_dir)
    print(f"Exported to {path}")
    return 0


def cmd_import(args: argparse.Namespace, cfg: Settings) -> int:
    result = import_tastings(args.file)
    print(result.summary())
    return 0


COMMANDS: Dict[str, Callable[[argparse.Namespace, Settings], int]] = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "edit": cmd_edit,
    "delete": cmd_delete,
    "export": cmd_export,
    "import": cmd_import,
}


# ---------------- MAIN ----------------

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = get_settings()
    if args.db:
        cfg.db_url = args.db
    if args.debug:
        cfg.log_level = "DEBUG"
    logging.basicConfig(level=getattr(logging, cfg.log_level, logging.INFO))

    if not args.subcommand:
        parser.print_help()
        return 1

    setup_db(cfg.db_url)
    logger.debug("Running %s", args.subcommand)
    try:
        return COMMANDS[args.subcommand](args, cfg)
    except SipScribeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
