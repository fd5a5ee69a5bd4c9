import argparse
import logging
import mimetypes
import os
import sys

import config_paths
from _version import __version__
from ai_context import AiContext
from ask_ai import ChatSession
from config_paths import ConfigError, load_config, require_backend_url
from directory_client import DirectoryClient
from file_view import FileView
from folder_browser import FolderBrowser
from history_manager import HistoryManager
from http_client import HttpError, TransportError
from locator import FileRef
from storage_client import StorageClient

logger = logging.getLogger(__name__)


def _status(msg, _seconds=None):
    print(msg, file=sys.stderr)


def _file_ref(name, locator, parent_id=""):
    return FileRef(id="", name=name, parent_id=parent_id, bucket_url=locator)


def _print_table(content):
    if len(content) == 0 or not content.headers:
        print("No content to display.")
        return
    print(content.df.to_string(index=True))


def cmd_show(args, cfg):
    view = FileView(StorageClient.from_config(cfg), _status, bucket=cfg["BUCKET"])
    if not view.select(_file_ref(args.name, args.locator)):
        return 1
    _print_table(view.state.committed)
    return 0


def cmd_set(args, cfg):
    view = FileView(StorageClient.from_config(cfg), _status, bucket=cfg["BUCKET"])
    if not view.select(_file_ref(args.name, args.locator)):
        return 1
    view.edit()
    if view.activate(args.row, args.column) is None:
        view.cancel()
        return 1
    view.set_value(args.value)
    view.submit()
    result = view.save()
    return 0 if result.ok else 1


def cmd_upload(args, cfg):
    name = args.name or os.path.basename(args.path)
    try:
        with open(args.path, "rb") as f:
            data = f.read()
    except OSError as e:
        _status(f"Could not read {args.path}: {e}")
        return 1
    content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    payload = StorageClient.from_config(cfg).upload(name, data, content_type)
    print(payload.get("path", ""))
    if payload.get("url"):
        print(payload["url"])
    return 0


def cmd_ls(args, cfg):
    directory = DirectoryClient(
        require_backend_url(cfg), timeout_s=cfg["TIMEOUT_SECONDS"]
    )
    browser = FolderBrowser(directory, args.user_id)
    if not browser.open_root():
        _status("Could not load root folder")
        return 1
    if args.folder_id and args.folder_id != browser.root_id:
        folder = FileRef(args.folder_id, args.folder_id, browser.root_id or "", "")
        if not browser.enter(folder):
            _status(f"Could not load folder {args.folder_id}")
            return 1
    print(browser.path_label())
    for folder in browser.folders:
        print(f"  {folder.name}/\t{folder.id}")
    for f in browser.files:
        print(f"  {f.name}\t{f.bucket_url}")
    return 0


def cmd_ask(args, cfg):
    backend = require_backend_url(cfg)
    directory = DirectoryClient(backend, timeout_s=cfg["TIMEOUT_SECONDS"])
    storage = StorageClient.from_config(cfg)

    parent_id = directory.fetch_root_id(args.user_id)
    if not parent_id:
        _status("Could not resolve root folder")
        return 1

    context = AiContext()
    for item in args.file or []:
        name, sep, locator = item.partition("=")
        if not sep or not name or not locator:
            _status(f"Expected NAME=LOCATOR, got '{item}'")
            return 1
        if not context.add_file(_file_ref(name, locator, parent_id), storage, directory):
            _status(f"Skipping {name}: columns unavailable")

    history = HistoryManager(config_paths.CHAT_HISTORY_PATH)
    session = ChatSession(
        backend, parent_id, context, chat_history=history.load()
    )
    turn = session.send(args.query)
    if turn is None:
        _status("Empty query")
        return 1
    print(turn.response)
    history.replace(session.chat_history)
    history.persist()
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="xbase", description="xbase - database file browser with AI chat"
    )
    parser.add_argument("-v", "--version", action="version", version=__version__)
    parser.add_argument("-d", "--debug", action="store_true", help="verbose logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("show", help="load a file and print it as a table")
    p.add_argument("name")
    p.add_argument("locator")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("set", help="edit one cell and save the file")
    p.add_argument("name")
    p.add_argument("locator")
    p.add_argument("row", type=int)
    p.add_argument("column")
    p.add_argument("value")
    p.set_defaults(func=cmd_set)

    p = sub.add_parser("upload", help="upload a local file as a new object")
    p.add_argument("path")
    p.add_argument("--name", help="object name (default: the file's base name)")
    p.set_defaults(func=cmd_upload)

    p = sub.add_parser("ls", help="list folders and files")
    p.add_argument("user_id")
    p.add_argument("folder_id", nargs="?")
    p.set_defaults(func=cmd_ls)

    p = sub.add_parser("ask", help="ask the AI about selected files")
    p.add_argument("user_id")
    p.add_argument("query")
    p.add_argument("--file", action="append", metavar="NAME=LOCATOR")
    p.set_defaults(func=cmd_ask)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    cfg = load_config()
    try:
        return args.func(args, cfg)
    except (ConfigError, HttpError, TransportError) as e:
        _status(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
