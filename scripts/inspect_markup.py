"""Show how a page classifies: component kinds and classes the resolver keeps opaque."""

from __future__ import annotations

import argparse
from collections import Counter
from pathlib import Path

import httpx

from pagecraft.classifier import ClassifyOptions, html_to_tree
from pagecraft.schemas import ComponentTree


def main() -> None:
    parser = argparse.ArgumentParser(description="Classify a page and summarize the component tree.")
    parser.add_argument("--url", help="URL to fetch")
    parser.add_argument("--file", help="Local HTML file path")
    parser.add_argument("--no-layout", action="store_true", help="Disable Row/Column/Grid detection")
    parser.add_argument("--no-blocks", action="store_true", help="Disable Navbar/Footer/Hero/Card detection")
    parser.add_argument("--top", type=int, default=25, help="How many unrecognized classes to list")
    args = parser.parse_args()

    if not args.url and not args.file:
        parser.error("Provide --url or --file")

    html = load_html(url=args.url, file_path=args.file)
    options = ClassifyOptions(detect_layout=not args.no_layout, detect_blocks=not args.no_blocks)
    tree = html_to_tree(html, options=options)
    kinds, unrecognized, raw_tags = collect_stats(tree)

    print(f"Nodes: {len(tree)}")
    print("\nKinds:")
    for name, count in kinds.most_common():
        print(f"{name}: {count}")

    print("\nUnrecognized classes:")
    for name, count in unrecognized.most_common(args.top):
        print(f"{name}: {count}")

    if raw_tags:
        print("\nRaw markup:")
        for name, count in raw_tags.most_common():
            print(f"<{name}>: {count}")


def load_html(*, url: str | None, file_path: str | None) -> str:
    if url:
        response = httpx.get(url, follow_redirects=True, timeout=15.0)
        response.raise_for_status()
        return response.text

    path = Path(file_path or "")
    if not path.is_file():
        raise FileNotFoundError(f"HTML file not found: {path}")
    return path.read_text(encoding="utf-8")


def collect_stats(tree: ComponentTree) -> tuple[Counter, Counter, Counter]:
    kinds = Counter()
    unrecognized = Counter()
    raw_tags = Counter()

    for node in tree.walk():
        kinds[node.kind.value] += 1
        for token in node.class_name.split():
            unrecognized[token] += 1
        if node.properties.kind == "RawMarkup":
            markup = node.properties.markup.lstrip("<")
            raw_tags[markup.split(maxsplit=1)[0].rstrip(">/") if markup else "?"] += 1
    return kinds, unrecognized, raw_tags


if __name__ == "__main__":
    main()
