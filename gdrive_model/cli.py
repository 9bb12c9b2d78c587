#!/usr/bin/env python3
"""
Gdrive Model command line.

Usage:
    gdrive-model status                      # Show token status
    gdrive-model authorize                   # Authorize (tries browser)
    gdrive-model authorize --manual          # Authorize (headless/manual)
    gdrive-model ls --query "name contains 'report'"
    gdrive-model get FILE_ID --fields id,name
    gdrive-model mkdir "Reports" --parent FOLDER_ID
    gdrive-model upload notes.txt --file ./notes.txt --mime-type text/plain
    gdrive-model trash FILE_ID [FILE_ID ...] [--permanent]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .auth import GoogleAuthorizer
from .config import load_config
from .errors import GdriveModelError
from .interface import FileMetadata, FileResource
from .model import GdriveModel

logger = logging.getLogger(__name__)


def _split_fields(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    return [f.strip() for f in value.split(",") if f.strip()]


def _format_file(item: FileResource) -> str:
    icon = "📁" if item.is_folder else "📄"
    line = f"{icon} {item.name or '(no name)'}  {item.id or ''}"
    if item.trashed:
        line += "  🗑️"
    return line


def status(authorizer: GoogleAuthorizer) -> int:
    """Show status of the cached token."""
    result = authorizer.status()

    print("🔐 Google Drive Token Status\n")
    print(f"   Credentials file: {authorizer.client_secret_file}")
    print(f"   Exists: {'✅' if result['client_secret_exists'] else '❌'}\n")
    print(f"   Token: {result['token_file']}")

    if not result["exists"]:
        print("   Status: Not configured")
        return 1
    if result.get("error"):
        print(f"   Status: Error - {result['error']}")
        return 1
    if not result["has_required_scopes"]:
        print("   Status: Missing scopes (re-auth needed)")
        return 1
    if result["expired"]:
        print("   Status: Expired (will auto-refresh)")
    else:
        print("   Status: Ready")
    return 0


async def run_command(args, model: GdriveModel) -> int:
    fields = _split_fields(getattr(args, "fields", None))

    if args.command == "authorize":
        await model.authorizer.authorize(force=args.force)
        print(f"✅ Token ready: {model.authorizer.token_path}")
        return 0

    if args.command == "ls":
        files = await model.list_files(q=args.query, spaces=args.spaces, ret_fields=fields)
        if not files:
            print("📂 No files found")
        for item in files:
            print(_format_file(item))
        return 0

    if args.command == "get":
        item = await model.get_file(args.file_id, ret_fields=fields)
        print(_format_file(item))
        for key, value in item.raw.items():
            print(f"   {key}: {value}")
        return 0

    if args.command == "mkdir":
        folder = await model.create_file(
            FileMetadata(name=args.name, description=args.description, parents=args.parent or []),
            is_folder=True
        )
        print(f"✅ Created folder: {args.name} ({folder.id})")
        return 0

    if args.command == "upload":
        created = await model.create_file(
            FileMetadata(
                name=args.name,
                description=args.description,
                mime_type=args.mime_type,
                parents=args.parent or []
            ),
            local_file=args.file,
            media_body=args.body
        )
        print(f"✅ Uploaded: {args.name} ({created.id})")
        return 0

    if args.command == "trash":
        await model.trash_files(args.file_ids, delete_permanently=args.permanent)
        verb = "Deleted" if args.permanent else "Trashed"
        for file_id in args.file_ids:
            print(f"✅ {verb}: {file_id}")
        return 0

    print(f"❌ Unknown command: {args.command}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gdrive-model",
        description="Google Drive client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s status                 Show token status
  %(prog)s authorize --manual     Authorize on a headless machine
  %(prog)s trash ID1 ID2          Move two files to the trash
"""
    )
    parser.add_argument("--config", type=Path, help="Path to JSON config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("status", help="Show token status")

    p = sub.add_parser("authorize", help="Run the OAuth consent flow")
    p.add_argument("--force", action="store_true", help="Force re-authorization even if token exists")
    p.add_argument("--manual", action="store_true", help="Use manual flow (for headless environments)")

    p = sub.add_parser("ls", help="List files")
    p.add_argument("--query", "-q", help="Drive search expression")
    p.add_argument("--spaces", help="Spaces to search (drive, appDataFolder)")
    p.add_argument("--fields", help="Comma-separated response fields")

    p = sub.add_parser("get", help="Show one file")
    p.add_argument("file_id")
    p.add_argument("--fields", help="Comma-separated response fields")

    p = sub.add_parser("mkdir", help="Create a folder")
    p.add_argument("name")
    p.add_argument("--description")
    p.add_argument("--parent", action="append", help="Parent folder id (repeatable)")

    p = sub.add_parser("upload", help="Create a file")
    p.add_argument("name")
    p.add_argument("--file", help="Local file to upload")
    p.add_argument("--body", help="Inline content to upload")
    p.add_argument("--mime-type", dest="mime_type")
    p.add_argument("--description")
    p.add_argument("--parent", action="append", help="Parent folder id (repeatable)")

    p = sub.add_parser("trash", help="Trash or delete files")
    p.add_argument("file_ids", nargs="+")
    p.add_argument("--permanent", action="store_true", help="Delete instead of moving to trash")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "status"

    try:
        config = load_config(args.config)
    except GdriveModelError as e:
        print(f"❌ {e}")
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    authorizer = GoogleAuthorizer(
        config.scopes,
        config.token_file,
        config.token_dir,
        config.client_secret_file,
        interactive=(command == "authorize"),
        manual=getattr(args, "manual", False)
    )

    if command == "status":
        return status(authorizer)

    try:
        model = GdriveModel.from_config(config, authorizer=authorizer)
        return asyncio.run(run_command(args, model))
    except GdriveModelError as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
