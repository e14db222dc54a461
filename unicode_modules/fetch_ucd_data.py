#!/usr/bin/env python3
"""
This script downloads the plain-text Unicode Character Database files the
module generator reads (Blocks.txt and UnicodeData.txt) into a UCD directory.

With --describe it also performs web scraping on the Wikipedia article of
every block to fetch a two-paragraph summary, and writes the structured data
to unicode_blocks.json next to the UCD files, where the generator picks it
up for the block docstrings.
"""
import argparse
import json
import pathlib
import re
import sys
import time
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup, Tag

from .blocks import BLOCKS_FILE, charts_url, load_blocks, wikipedia_url
from .errors import FetchError, UnicodeModulesError
from .generate_unicode_modules import BLOCKS_DATA_FILE
from .unicode_data import UNICODE_DATA_FILE

# --- Configuration ---
UCD_BASE_URL = "https://www.unicode.org/Public/{version}/ucd/"
DEFAULT_UCD_VERSION = "latest"
UCD_FILES = (BLOCKS_FILE, UNICODE_DATA_FILE)

REQUEST_TIMEOUT = 30
WIKIPEDIA_TIMEOUT = 10

# Define a delay between web requests to be a polite scraper (e.g., 0.5 seconds)
SLEEP_DELAY = 0.5

# Define a common User-Agent string to help Wikipedia identify the request
HEADERS = {
    'User-Agent': 'unicode-modules/0.1 (UCD block documentation scraper)'
}

CITATION_RE = re.compile(r'\[.*?\]')


# --- Download ---

def ucd_url(name: str, version: str = DEFAULT_UCD_VERSION) -> str:
    # "latest" lives under Public/UCD/, released versions directly under Public/
    path = "UCD/latest" if version == DEFAULT_UCD_VERSION else version
    return UCD_BASE_URL.format(version=path) + name


def fetch(url: str, timeout: float = REQUEST_TIMEOUT) -> bytes:
    """GETs url and returns the body. Raises FetchError unless the server answers 200."""
    try:
        response = requests.get(url, headers=HEADERS, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise FetchError(f"Could not download {url}: {e}") from e

    if response.status_code != 200:
        raise FetchError(f"Could not download {url}: HTTP {response.status_code}")
    return response.content


def download_ucd_file(name: str, ucd_dir: pathlib.Path, version: str = DEFAULT_UCD_VERSION,
                      force: bool = False) -> pathlib.Path:
    """
    Downloads one UCD file into ucd_dir and returns its path. An existing
    file is kept unless force is set.
    """
    target = ucd_dir / name
    if target.exists() and not force:
        print(f"-> {name} already present, skipping download")
        return target

    url = ucd_url(name, version)
    print(f"-> Downloading {url} ...")
    content = fetch(url)

    ucd_dir.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return target


# --- Web Scraper Functions ---

def extract_summary(html: bytes, num_paragraphs: int = 2) -> str:
    """
    Extracts the first N non-empty top-level paragraphs of a Wikipedia
    article, with citation brackets removed. Returns "" when the page has no
    article content.
    """
    soup = BeautifulSoup(html, 'html.parser')

    # Wikipedia article content is within a div with class 'mw-parser-output'
    parser_output: Optional[Tag] = soup.find('div', class_='mw-parser-output')
    if not parser_output:
        return ""

    paragraphs: List[str] = []
    for tag in parser_output.find_all('p', recursive=False):
        # separator ' ' keeps words in adjacent inline tags apart
        text = tag.get_text(separator=' ', strip=True)

        # [1], [2], [a]
        clean_text = CITATION_RE.sub('', text).strip()
        if clean_text:
            paragraphs.append(clean_text)

        if len(paragraphs) >= num_paragraphs:
            break

    return "\n\n".join(paragraphs)


def scrape_wikipedia_summary(url: str, num_paragraphs: int = 2) -> str:
    """
    Fetches a Wikipedia article and returns its summary paragraphs, or ""
    if the article cannot be fetched. A missing description never stops
    the run.
    """
    try:
        html = fetch(url, timeout=WIKIPEDIA_TIMEOUT)
    except FetchError:
        return ""
    return extract_summary(html, num_paragraphs)


# --- Main Logic ---

def generate_block_metadata(ucd_dir: pathlib.Path, delay: float = SLEEP_DELAY) -> pathlib.Path:
    """
    Parses Blocks.txt, scrapes Wikipedia for a description of every block and
    writes the structured data (an object with unicode_version and a blocks
    array) to unicode_blocks.json in ucd_dir.
    """
    blocks = load_blocks(ucd_dir / BLOCKS_FILE)
    print(f"Starting description scraping for Unicode v{blocks.version or 'unknown'}...")

    blocks_data: List[Dict[str, str]] = []
    for block in blocks:
        wiki_url = wikipedia_url(block)
        print(f"-> Scraping summary for: {block.name}...")
        description = scrape_wikipedia_summary(wiki_url)
        if delay:
            time.sleep(delay)

        blocks_data.append({
            "name": block.name,
            "start": f"{block.begin:04X}",
            "end": f"{block.end:04X}",
            "wikipedia_url": wiki_url,
            "unicode_charts_url": charts_url(block),
            "description": description,  # "" if scraping failed
        })

    output_file = ucd_dir / BLOCKS_DATA_FILE
    final_data = {
        "unicode_version": blocks.version,
        "blocks": blocks_data,
    }
    output_file.write_text(json.dumps(final_data, indent=4, ensure_ascii=False) + "\n", encoding='utf-8')
    described = sum(1 for entry in blocks_data if entry["description"])
    print(f"\nWrote block data for {len(blocks_data)} blocks ({described} with descriptions) into '{output_file}'.")
    return output_file


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Download the UCD files needed by generate-unicode-modules."
    )
    parser.add_argument('-d', '--ucd-dir', required=True, help='Directory to store the UCD files in')
    parser.add_argument(
        '--version',
        default=DEFAULT_UCD_VERSION,
        help=f'Unicode version to download, e.g. 15.1.0 (default: {DEFAULT_UCD_VERSION})'
    )
    parser.add_argument('--force', action='store_true', help='Download again even if the files exist')
    parser.add_argument(
        '--describe',
        action='store_true',
        help=f'Scrape Wikipedia block summaries into {BLOCKS_DATA_FILE}'
    )
    args = parser.parse_args(argv)

    ucd_dir = pathlib.Path(args.ucd_dir)
    try:
        for name in UCD_FILES:
            download_ucd_file(name, ucd_dir, args.version, args.force)
        if args.describe:
            generate_block_metadata(ucd_dir)
    except UnicodeModulesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
